"""Configuration settings for the rendering pipeline."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class RenderingConfig(BaseSettings):
    """Configuration for resume rendering.

    Settings can be overridden via environment variables prefixed with RENDERING_.
    The remote renderer URL is also read from PDF_SERVICE_URL.

    Example: RENDERING_REMOTE_URL=https://pdf.example.com RENDERING_HEALTH_TTL=120
    """

    model_config = SettingsConfigDict(
        env_prefix="RENDERING_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Remote rendering service
    remote_url: str | None = Field(
        default=None,
        validation_alias=AliasChoices("RENDERING_REMOTE_URL", "PDF_SERVICE_URL"),
        description="Base URL of the headless rendering service",
    )
    remote_timeout: Annotated[float, Field(gt=0)] = Field(
        default=60.0,
        description="Timeout in seconds for a remote render request",
    )
    health_timeout: Annotated[float, Field(gt=0)] = Field(
        default=5.0,
        description="Timeout in seconds for the remote health probe",
    )
    health_ttl: Annotated[float, Field(ge=0)] = Field(
        default=60.0,
        description="Seconds a health probe result stays fresh",
    )

    # Local strategies
    strategy_timeout: Annotated[float, Field(gt=0)] = Field(
        default=30.0,
        description="Timeout in seconds for each in-process strategy",
    )
    page_size: str = Field(
        default="A4",
        description="Page size: A4 or Letter",
    )
    template_dir: Path = Field(
        default=Path("src/rendering/templates"),
        description="Directory containing HTML/CSS templates",
    )
    resume_template: str = Field(
        default="resume.html",
        description="Resume template filename",
    )

    @field_validator("remote_url", mode="before")
    @classmethod
    def normalize_remote_url(cls, v: str | None) -> str | None:
        """Blank or non-http values disable the remote strategy."""
        if v is None:
            return None
        value = str(v).strip().rstrip("/")
        if not value.startswith("http"):
            return None
        return value

    @field_validator("page_size", mode="before")
    @classmethod
    def validate_page_size(cls, v: str) -> str:
        value = str(v).strip().upper()
        if value not in {"A4", "LETTER"}:
            raise ValueError("page_size must be A4 or Letter")
        return value

    @field_validator("template_dir", mode="before")
    @classmethod
    def convert_to_path(cls, v: str | Path) -> Path:
        """Convert string paths to Path objects."""
        if isinstance(v, str):
            return Path(v)
        return v

    def get_resume_template_path(self) -> Path:
        """Get full path to resume template."""
        return self.template_dir / self.resume_template


# Singleton instance
_rendering_config: RenderingConfig | None = None


def get_rendering_config() -> RenderingConfig:
    """Get the rendering configuration singleton."""
    global _rendering_config
    if _rendering_config is None:
        _rendering_config = RenderingConfig()
    return _rendering_config


def reset_rendering_config() -> None:
    """Reset the configuration singleton (useful for testing)."""
    global _rendering_config
    _rendering_config = None
