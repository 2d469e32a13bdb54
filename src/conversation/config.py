"""Configuration settings for chat conversations."""

from __future__ import annotations

from typing import Annotated

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ConversationConfig(BaseSettings):
    """Configuration for the conversation state machine.

    Settings can be overridden via environment variables prefixed with CONVERSATION_.
    Keyword lists are given as JSON arrays.

    Example: CONVERSATION_IDLE_TIMEOUT_SECONDS=1800 CONVERSATION_CANCEL_KEYWORDS='["cancel","exit"]'
    """

    model_config = SettingsConfigDict(
        env_prefix="CONVERSATION_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    max_attempts: Annotated[int, Field(gt=0)] = Field(
        default=3,
        description="Invalid inputs allowed per step before the conversation is reset",
    )
    min_job_description_length: Annotated[int, Field(gt=0)] = Field(
        default=50,
        description="Minimum characters for a job description",
    )
    completion_grace_seconds: Annotated[float, Field(ge=0)] = Field(
        default=300.0,
        description="Seconds a completed conversation is kept before deletion",
    )
    idle_timeout_seconds: Annotated[float, Field(gt=0)] = Field(
        default=3600.0,
        description="Conversations idle longer than this are swept",
    )
    sweep_interval_seconds: Annotated[float, Field(gt=0)] = Field(
        default=3600.0,
        description="Seconds between idle sweeps",
    )

    cancel_keywords: list[str] = Field(default_factory=lambda: ["cancel", "stop", "quit"])
    restart_keywords: list[str] = Field(
        default_factory=lambda: ["restart", "start", "resume", "cv"]
    )
    help_keywords: list[str] = Field(default_factory=lambda: ["help"])

    @field_validator("cancel_keywords", "restart_keywords", "help_keywords")
    @classmethod
    def lowercase_keywords(cls, v: list[str]) -> list[str]:
        return [keyword.strip().lower() for keyword in v if keyword.strip()]


# Singleton instance
_conversation_config: ConversationConfig | None = None


def get_conversation_config() -> ConversationConfig:
    """Get the conversation configuration singleton."""
    global _conversation_config
    if _conversation_config is None:
        _conversation_config = ConversationConfig()
    return _conversation_config


def reset_conversation_config() -> None:
    """Reset the configuration singleton (useful for testing)."""
    global _conversation_config
    _conversation_config = None
