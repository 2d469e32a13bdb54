"""Configuration settings for chat messaging."""

from __future__ import annotations

from typing import Annotated

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class MessagingConfig(BaseSettings):
    """Configuration for the chat gateway webhooks.

    Settings can be overridden via environment variables prefixed with MESSAGING_.

    Example: MESSAGING_TEXT_WEBHOOK_URL=https://hooks.example.com/text
    """

    model_config = SettingsConfigDict(
        env_prefix="MESSAGING_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    text_webhook_url: str | None = Field(
        default=None,
        description="Webhook that delivers a text message",
    )
    document_webhook_url: str | None = Field(
        default=None,
        description="Webhook that delivers a document by URL",
    )
    notify_webhook_url: str | None = Field(
        default=None,
        description="Webhook notified when an unregistered user asks for a resume",
    )
    api_key: str | None = Field(
        default=None,
        description="Bearer token sent to the webhooks",
    )
    timeout: Annotated[float, Field(gt=0)] = Field(
        default=10.0,
        description="Timeout in seconds for a webhook call",
    )

    @field_validator(
        "text_webhook_url", "document_webhook_url", "notify_webhook_url", mode="before"
    )
    @classmethod
    def blank_to_none(cls, v: str | None) -> str | None:
        if v is None:
            return None
        value = str(v).strip()
        return value or None


# Singleton instance
_messaging_config: MessagingConfig | None = None


def get_messaging_config() -> MessagingConfig:
    """Get the messaging configuration singleton."""
    global _messaging_config
    if _messaging_config is None:
        _messaging_config = MessagingConfig()
    return _messaging_config


def reset_messaging_config() -> None:
    """Reset the configuration singleton (useful for testing)."""
    global _messaging_config
    _messaging_config = None
