"""Runtime configuration based on environment variables."""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import BaseModel, Field, HttpUrl, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_BASE_URL = "https://alketab-api.web.app/api/search"


class ApiSettings(BaseModel):
    base_url: HttpUrl = Field(
        default=DEFAULT_BASE_URL,
        description="Search endpoint of the AlKetab API.",
    )
    api_key: SecretStr | None = Field(
        default=None,
        description="Pre-shared key issued by https://alketab-api.web.app.",
    )
    api_key_header: str = Field(default="X-API-Key", min_length=1)
    request_timeout_seconds: int = Field(default=60, ge=1, le=600)

    @field_validator("api_key", mode="before")
    @classmethod
    def _empty_str_to_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value


class SearchSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="ALKETAB_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
    )

    environment: Literal["dev", "staging", "prod"] = "dev"
    log_level: str = "WARNING"
    api: ApiSettings = Field(default_factory=ApiSettings)


@lru_cache
def get_settings() -> SearchSettings:
    """Return cached settings instance."""

    return SearchSettings()


__all__ = [
    "ApiSettings",
    "DEFAULT_BASE_URL",
    "SearchSettings",
    "get_settings",
]
