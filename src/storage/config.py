"""Configuration settings for artifact storage."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageConfig(BaseSettings):
    """Configuration for the cloud storage uploader.

    Settings can be overridden via environment variables prefixed with STORAGE_.

    Example: STORAGE_ZONE=resumes STORAGE_ACCESS_KEY=... STORAGE_CDN_URL=https://cdn.example.com
    """

    model_config = SettingsConfigDict(
        env_prefix="STORAGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Cloud provider
    zone: str | None = Field(default=None, description="Storage zone name")
    access_key: str | None = Field(default=None, description="Storage zone access key")
    hostname: str = Field(
        default="storage.bunnycdn.com",
        description="Storage API hostname",
    )
    cdn_url: str | None = Field(default=None, description="Public CDN base URL")

    # Retry behavior
    max_attempts: Annotated[int, Field(gt=0)] = Field(
        default=3,
        description="Upload attempts before falling back to local storage",
    )
    backoff_base: Annotated[float, Field(ge=0)] = Field(
        default=1.0,
        description="Seconds to wait after the first failed attempt; doubles each retry",
    )
    request_timeout: Annotated[float, Field(gt=0)] = Field(
        default=30.0,
        description="Timeout in seconds for a single storage request",
    )

    # Layout
    key_prefix: str = Field(default="resumes", description="Prefix for object keys")
    local_dir: Path = Field(
        default=Path("./data/uploads"),
        description="Directory for locally served fallback copies",
    )

    @field_validator("cdn_url", mode="before")
    @classmethod
    def strip_trailing_slash(cls, v: str | None) -> str | None:
        if v is None:
            return None
        value = str(v).strip().rstrip("/")
        return value or None

    @field_validator("key_prefix", mode="before")
    @classmethod
    def strip_slashes(cls, v: str) -> str:
        return str(v).strip().strip("/")

    @field_validator("local_dir", mode="before")
    @classmethod
    def convert_to_path(cls, v: str | Path) -> Path:
        """Convert string paths to Path objects."""
        if isinstance(v, str):
            return Path(v)
        return v

    @property
    def cloud_configured(self) -> bool:
        """Whether every cloud credential is present."""
        return bool(self.zone and self.access_key and self.hostname and self.cdn_url)

    def missing_settings(self) -> list[str]:
        """Names of the cloud settings that are unset."""
        values = {
            "STORAGE_ZONE": self.zone,
            "STORAGE_ACCESS_KEY": self.access_key,
            "STORAGE_HOSTNAME": self.hostname,
            "STORAGE_CDN_URL": self.cdn_url,
        }
        return [name for name, value in values.items() if not value]


# Singleton instance
_storage_config: StorageConfig | None = None


def get_storage_config() -> StorageConfig:
    """Get the storage configuration singleton."""
    global _storage_config
    if _storage_config is None:
        _storage_config = StorageConfig()
    return _storage_config


def reset_storage_config() -> None:
    """Reset the configuration singleton (useful for testing)."""
    global _storage_config
    _storage_config = None
