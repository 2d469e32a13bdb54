"""Configuration settings for Resume Relay."""

from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    All settings have sensible defaults and can be overridden via
    environment variables or a .env file. Component-specific settings
    (rendering, storage, messaging, ...) live in each package's config.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Paths
    data_dir: Path = Field(
        default=Path("./data"),
        description="Directory for local application data",
    )
    artifact_db_path: Path = Field(
        default=Path("./data/artifacts.db"),
        description="Path to the SQLite artifact history database",
    )
    profiles_dir: Path = Field(
        default=Path("./data/profiles"),
        description="Directory of candidate profile files (YAML or JSON)",
    )
    output_dir: Path = Field(
        default=Path("./artifacts"),
        description="Directory for PDFs written by the CLI",
    )

    # Public URL of the API that serves locally stored uploads
    api_base_url: str = Field(
        default="http://localhost:3001",
        description="Base URL used to build local fallback download links",
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level: DEBUG, INFO, WARNING, ERROR",
    )
    log_file: Path | None = Field(
        default=None,
        description="Optional file that receives a copy of the log output",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a known level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return v.upper()

    @field_validator("api_base_url", mode="before")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalise the base URL so paths can be appended with '/'."""
        if not isinstance(v, str):
            raise ValueError("api_base_url must be a string")
        value = v.strip().rstrip("/")
        if not value.startswith(("http://", "https://")):
            raise ValueError("api_base_url must start with http:// or https://")
        return value


# Singleton instance for easy import
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get the application settings singleton."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Reset the settings singleton (useful for testing)."""
    global _settings
    _settings = None
