from __future__ import annotations

import os
from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

Environment = Literal["development", "production", "staging", "test"]


def _resolve_env_files() -> tuple[str, ...]:
    env = os.getenv("CONTENTBRIDGE_ENVIRONMENT", "development").lower()
    if env in {"prod", "production"}:
        return (".env", ".env.prod")
    if env in {"dev", "development"}:
        return (".env", ".env.dev")
    if env in {"test", "testing"}:
        return (".env", ".env.test")
    return (".env",)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="CONTENTBRIDGE_",
        env_file=_resolve_env_files(),
        env_nested_delimiter="__",
        extra="ignore",
    )

    environment: Environment = "development"
    project_name: str = "LinkedIn Content Automation Bridge"
    version: str = "1.0.0"
    log_level: str = "INFO"
    log_json: bool = False
    log_file: str | None = None
    rate_limit: str = "100/15 minutes"
    allowed_hosts: list[str] = ["*"]
    cors_origins: list[str] = []
    enable_docs: bool = True

    llm_api_key: str | None = None
    llm_base_url: str | None = None
    llm_model: str = "gpt-4o"
    llm_max_output_tokens: int = 4000
    llm_temperature: float = 0.7

    strapi_url: str | None = None
    strapi_token: str | None = None
    strapi_timeout: float = 30.0
    category_page_size: int = 100

    split_target_words: int = 250
    default_author: str = "EgoIQ Team"

    @property
    def strapi_api_base(self) -> str | None:
        if not self.strapi_url:
            return None
        return f"{self.strapi_url.rstrip('/')}/api"


@lru_cache
def get_settings() -> Settings:
    return Settings()
