from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

PREVIEW_TIMEOUT_CEILING = 8.0


class Settings(BaseSettings):
    """Application settings loaded from environment variables or .env file."""

    app_name: str = Field(
        default="Link Sanitizer",
        description="Application name",
    )
    database_url: str = Field(
        default="sqlite+aiosqlite:///./link_sanitizer.db",
        description="Database holding the key-value store",
    )
    blocklist_key: str = Field(
        default="linkSanitizer_customTrackingParams",
        description="Key under which the blocked parameter list is stored",
    )
    preview_timeout_seconds: float = Field(
        default=PREVIEW_TIMEOUT_CEILING,
        gt=0,
        description="Timeout for the preview fetch, capped at 8 seconds",
    )
    preview_user_agent: str = Field(
        default="LinkSanitizerPreviewBot/1.0 (+https://linksanitizer.example.com/bot)",
        description="User-Agent sent with preview fetches",
    )
    log_level: str = Field(default="INFO", description="Root log level")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("preview_timeout_seconds")
    @classmethod
    def cap_preview_timeout(cls, value: float) -> float:
        return min(value, PREVIEW_TIMEOUT_CEILING)


@lru_cache()
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
