"""Application configuration using pydantic-settings."""

from functools import lru_cache

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from chatbridge.exceptions import ConfigurationError


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Chat Bridge"
    log_level: str = "info"

    # Telegram
    telegram_bot_token: str = Field(min_length=1)

    # OpenRouter
    openrouter_api_key: str = Field(min_length=1)
    openrouter_model: str = "moonshotai/kimi-k2:free"
    openrouter_base_url: str = "https://openrouter.ai/api/v1"

    # MongoDB
    mongodb_uri: str = Field(min_length=1)
    mongodb_database: str = "chat_bridge"
    users_collection: str = "users"
    chats_collection: str = "chats"

    # Conversation policy
    usage_limit: int = Field(default=5, ge=0)
    history_limit: int = Field(default=10, ge=1)

    # User-facing notices
    limit_reached_message: str = "You have reached the usage limit of {limit} messages."
    error_message: str = "An error occurred. Please try again later."

    @property
    def limit_notice(self) -> str:
        return self.limit_reached_message.format(limit=self.usage_limit)


@lru_cache
def get_settings() -> Settings:
    """FastAPI dependency for injecting settings.

    Settings are loaded on first use so that a misconfigured environment
    surfaces as a per-request configuration error instead of an import crash.
    """
    try:
        return Settings()
    except ValidationError as exc:
        missing = sorted(
            ".".join(str(part) for part in err["loc"]) for err in exc.errors()
        )
        raise ConfigurationError(
            f"Invalid or missing settings: {', '.join(missing)}"
        ) from exc
