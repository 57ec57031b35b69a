from __future__ import annotations

from pydantic import BaseModel


class DebugLlmResponse(BaseModel):
    success: bool = True
    claude_response: str


class DebugStrapiResponse(BaseModel):
    success: bool = True
    strapi_response: dict[str, int | str]


class DebugErrorResponse(BaseModel):
    success: bool = False
    error: str
    details: str | None = None
    status: int | None = None
