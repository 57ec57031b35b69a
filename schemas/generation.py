from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class WebhookRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    headline: str | None = None
    summary: str | None = None
    category: str | list[str] | None = None
    funnel_type: str | None = Field(default=None, alias="funnelType")
    author: str | None = None
    subheading1: str | None = None
    subheading2: str | None = None
    subheading3: str | None = None
    subheading4: str | None = None
    subheading5: str | None = None
    subheading6: str | None = None

    @property
    def subheadings(self) -> list[str | None]:
        return [
            self.subheading1,
            self.subheading2,
            self.subheading3,
            self.subheading4,
            self.subheading5,
            self.subheading6,
        ]


class GenerationData(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    strapi_id: str = Field(alias="strapiId")
    linkedin_snippet: str = Field(alias="linkedinSnippet")
    generated_date: str = Field(alias="generatedDate")
    body_word_count: int = Field(alias="bodyWordCount")
    body_image_text_word_count: int = Field(alias="bodyImageTextWordCount")
    categories_connected: int | None = Field(default=None, alias="categoriesConnected")
    subheadings_used: int | None = Field(default=None, alias="subheadingsUsed")
    status: str | None = None
    notes: str | None = None


class GenerationResponse(BaseModel):
    success: bool = True
    data: GenerationData


class ErrorResponse(BaseModel):
    success: bool = False
    error: str
    status: str | None = None
    notes: str | None = None


class WebhookTestResponse(BaseModel):
    success: bool = True
    message: str
    result: GenerationResponse


class HealthResponse(BaseModel):
    status: str
    timestamp: datetime
    version: str
    endpoints: dict[str, str]
