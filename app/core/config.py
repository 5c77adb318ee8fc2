"""
app/core/config.py

Purpose: Settings for the bot service

- Read from the environment and .env
- Centralizes config values (DB URI, bot token, session TTL, etc.)
- validate_settings() runs in the app lifespan
- Production requires the bot token and webhook secret
"""

from datetime import datetime

from pydantic import Field, validator
from pydantic_settings import BaseSettings
from typing import Optional, Literal


class Settings(BaseSettings):
    """
    All tunables of the bot. Names match the environment variables.
    Field validators run at import; cross-field checks live in validate_settings().
    """

    # Environment
    ENVIRONMENT: Literal["development", "staging", "production"] = "development"

    # MongoDB
    MONGODB_URL: str = Field(
        default="mongodb://localhost:27017",
        description="Mongo connection string"
    )
    MONGODB_DB_NAME: str = Field(
        default="cargolink",
        description="Database holding users, orders and sessions"
    )

    # Telegram Bot API
    TELEGRAM_BOT_TOKEN: Optional[str] = Field(
        default=None,
        description="Bot token issued by @BotFather"
    )
    TELEGRAM_API_BASE_URL: str = Field(
        default="https://api.telegram.org",
        description="Telegram Bot API base URL"
    )
    TELEGRAM_WEBHOOK_SECRET: Optional[str] = Field(
        default=None,
        description="Expected X-Telegram-Bot-Api-Secret-Token header value"
    )
    TELEGRAM_REQUEST_TIMEOUT: float = Field(
        default=10.0,
        description="Bot API request timeout in seconds"
    )

    # Dialogue
    SESSION_TTL_SECONDS: int = Field(
        default=86400,
        description="Lifetime of an idle dialogue session"
    )
    DEFAULT_LANGUAGE: Literal["ru", "uz", "en"] = Field(
        default="ru",
        description="Language used when Telegram does not report a supported one"
    )
    MIN_BIRTH_YEAR: int = Field(
        default=1900,
        description="Earliest accepted birth year"
    )
    MIN_USER_AGE: int = Field(
        default=16,
        description="Minimum user age in years"
    )

    # Application
    DEBUG: bool = Field(
        default=False,
        description="FastAPI debug mode"
    )
    LOG_LEVEL: str = Field(
        default="INFO",
        description="Root log level name"
    )
    API_PREFIX: str = Field(
        default="/api/v1",
        description="Prefix of the webhook route"
    )
    CORS_ORIGINS: list = Field(
        default=["*"],
        description="Origins allowed by the CORS middleware"
    )

    @validator("SESSION_TTL_SECONDS")
    def validate_session_ttl(cls, v):
        """Sessions must live long enough to answer a prompt."""
        if v < 60:
            raise ValueError("SESSION_TTL_SECONDS must be at least 60")
        return v

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.ENVIRONMENT == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.ENVIRONMENT == "production"

    class Config:
        env_file = ".env"
        case_sensitive = True
        env_file_encoding = "utf-8"


# Global settings instance
settings = Settings()


def validate_settings():
    """
    Cross-field checks run once at startup.

    Raises:
        ValueError: listing every problem found
    """
    errors = []

    if not settings.MONGODB_URL:
        errors.append("MONGODB_URL is required")

    if not settings.TELEGRAM_API_BASE_URL:
        errors.append("TELEGRAM_API_BASE_URL is required")

    if settings.MIN_BIRTH_YEAR > datetime.utcnow().year - settings.MIN_USER_AGE:
        errors.append("MIN_BIRTH_YEAR and MIN_USER_AGE leave no acceptable birth year")

    # Production-specific validations
    if settings.is_production:
        if not settings.TELEGRAM_BOT_TOKEN:
            errors.append("TELEGRAM_BOT_TOKEN is required in production")
        if not settings.TELEGRAM_WEBHOOK_SECRET:
            errors.append("TELEGRAM_WEBHOOK_SECRET is required in production")

    if errors:
        raise ValueError(f"Configuration validation failed: {', '.join(errors)}")

    return True
