"""Configuration settings for artifact history."""

from __future__ import annotations

from typing import Annotated

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ArtifactConfig(BaseSettings):
    """Configuration for artifact retention.

    Settings can be overridden via environment variables prefixed with ARTIFACTS_.

    Example: ARTIFACTS_RETENTION_COUNT=10 ARTIFACTS_TTL_DAYS=60
    """

    model_config = SettingsConfigDict(
        env_prefix="ARTIFACTS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    retention_count: Annotated[int, Field(gt=0)] = Field(
        default=5,
        description="Artifacts kept per owner; older ones are deleted",
    )
    ttl_days: Annotated[int, Field(gt=0)] = Field(
        default=30,
        description="Days before an artifact record expires",
    )
    history_limit: Annotated[int, Field(gt=0)] = Field(
        default=10,
        description="Default number of entries returned by history queries",
    )
    duplicate_window_days: Annotated[int, Field(gt=0)] = Field(
        default=7,
        description="Window for detecting a repeated request for the same job",
    )
    inline_cache_limit_bytes: Annotated[int, Field(ge=0)] = Field(
        default=1024 * 1024,
        description="Artifacts smaller than this keep an inline copy in the database",
    )


# Singleton instance
_artifact_config: ArtifactConfig | None = None


def get_artifact_config() -> ArtifactConfig:
    """Get the artifact configuration singleton."""
    global _artifact_config
    if _artifact_config is None:
        _artifact_config = ArtifactConfig()
    return _artifact_config


def reset_artifact_config() -> None:
    """Reset the configuration singleton (useful for testing)."""
    global _artifact_config
    _artifact_config = None
