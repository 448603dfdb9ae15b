"""Application configuration models."""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, HttpUrl, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .languages import DEFAULT_LANGUAGE, FALLBACK_LANGUAGE, find_language


class Settings(BaseSettings):
    """Settings loaded from environment variables or a .env file."""

    app_name: str = Field(default="Streailer", alias="APP_NAME")
    server_host: str = Field(default="0.0.0.0", alias="HOST")
    server_port: int = Field(default=7020, alias="PORT")

    tmdb_api_key: str | None = Field(default=None, alias="TMDB_API_KEY")
    tmdb_api_url: HttpUrl = Field(
        default="https://api.themoviedb.org/3", alias="TMDB_API_URL"
    )
    youtube_url: HttpUrl = Field(
        default="https://www.youtube.com", alias="YOUTUBE_URL"
    )

    default_language: str = Field(default=DEFAULT_LANGUAGE, alias="DEFAULT_LANGUAGE")
    fallback_language: str = Field(
        default=FALLBACK_LANGUAGE, alias="FALLBACK_LANGUAGE"
    )
    provider_timeout_seconds: float = Field(
        default=8.0, alias="PROVIDER_TIMEOUT", ge=1, le=60
    )

    addon_id: str = Field(default="org.streailer.trailer", alias="ADDON_ID")
    addon_version: str = Field(default="1.0.0", alias="ADDON_VERSION")
    addon_logo: HttpUrl | None = Field(
        default="https://github.com/qwertyuiop8899/streamvix/blob/main/public/icon.png?raw=true",
        alias="ADDON_LOGO",
    )
    addon_background: HttpUrl | None = Field(
        default="https://i.imgur.com/0bF00cA.png", alias="ADDON_BACKGROUND"
    )

    environment: Literal["development", "production"] = Field(
        default="development", alias="ENVIRONMENT"
    )

    @field_validator("tmdb_api_key", mode="before")
    @classmethod
    def _blank_key_is_missing(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("default_language", "fallback_language", mode="before")
    @classmethod
    def _validate_language(cls, value: object) -> str:
        """Only locales offered on the configuration page are accepted."""

        code = find_language(value)
        if code is None:
            raise ValueError(f"Unsupported language configured: {value!r}")
        return code

    @property
    def tmdb_configured(self) -> bool:
        return bool(self.tmdb_api_key)

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")


@lru_cache
def get_settings() -> Settings:
    """Return a cached settings instance."""

    return Settings()  # type: ignore[call-arg]


settings = get_settings()
