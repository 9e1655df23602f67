"""Runtime configuration based on environment variables."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, HttpUrl, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ListingSettings(BaseModel):
    backend: Literal["supabase", "fixture"] = "supabase"
    base_url: HttpUrl | None = Field(
        default=None,
        description="Supabase project URL, e.g. https://xyz.supabase.co.",
    )
    api_key: SecretStr | None = None
    table: str = Field(default="developers", min_length=1)
    skills_match_column: str | None = Field(
        default=None,
        description="Lowercased text[] copy of skills used for case-insensitive skill matching.",
    )
    request_timeout_seconds: float = Field(default=10.0, gt=0, le=120)
    max_attempts: int = Field(
        default=1,
        ge=1,
        le=5,
        description="Transport attempts per query; 1 disables automatic retry.",
    )
    fixture_path: Path | None = None


class DirectorySettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="DEVFINDER_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )

    environment: Literal["dev", "staging", "prod"] = "dev"
    log_level: str = "INFO"
    telegram_token: SecretStr | None = None
    telegram_proxy: str | None = None
    default_language: str = "en"

    listing: ListingSettings = Field(default_factory=ListingSettings)

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalize_level(cls, value):
        if isinstance(value, str):
            return value.strip().upper() or "INFO"
        return value


@lru_cache
def get_settings() -> DirectorySettings:
    """Return cached settings instance."""

    return DirectorySettings()


__all__ = ["DirectorySettings", "ListingSettings", "get_settings"]
