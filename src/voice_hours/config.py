"""Configuration management for Voice Hours."""

from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

from voice_hours.hours import BusinessType


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Server
    server_name: str = Field(
        default="voice-hours",
        description="Name advertised to MCP clients",
    )
    host: str = Field(default="0.0.0.0", description="Interface to bind the HTTP server to")
    port: int = Field(default=3000, description="Port for the HTTP server")
    cors_origins: list[str] = Field(
        default_factory=lambda: ["*"],
        description="Origins allowed to call the HTTP endpoints",
    )
    log_level: str = Field(default="INFO", description="Logging level")

    # Holidays
    holiday_country: str | None = Field(
        default=None,
        description="Force a holiday jurisdiction (e.g. 'US'). Unset follows the postal code",
    )
    holiday_subdivision: str | None = Field(
        default=None,
        description="Optional state/province code for regional holidays",
    )
    upcoming_holiday_days: int = Field(
        default=30,
        description="How far ahead upcoming holidays are listed",
    )
    holiday_callout_days: int = Field(
        default=7,
        description="Mention the next holiday when it is at most this many days away",
    )
    timezone_info_holiday_days: int = Field(
        default=14,
        description="Holiday horizon used by the timezone info tool",
    )

    # Business
    default_business_type: BusinessType = Field(
        default=BusinessType.DENTAL,
        description="Business type used when a tool call omits it: dental, medical or general",
    )

    @field_validator("default_business_type", mode="before")
    @classmethod
    def _normalize_business_type(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().lower()
        return value

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings."""
    # Load .env file from project root
    env_path = Path(__file__).parent.parent.parent / ".env"
    if env_path.exists():
        load_dotenv(env_path)
    return Settings()
