"""Configuration settings for job description analysis.

The keyword analyzer always runs; the LLM analyzer is opt-in and only
used when ``ANALYSIS_LLM_ENABLED`` is true.
"""

from __future__ import annotations

from typing import Annotated

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AnalysisConfig(BaseSettings):
    """Configuration for the job description analyzer.

    Settings can be overridden via environment variables prefixed with ANALYSIS_.

    Example: ANALYSIS_LLM_ENABLED=true ANALYSIS_LLM_MODEL=gpt-4o-mini
    """

    model_config = SettingsConfigDict(
        env_prefix="ANALYSIS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Keyword analyzer
    required_limit: Annotated[int, Field(gt=0)] = Field(
        default=6,
        description="Number of matched skills treated as required",
    )
    preferred_limit: Annotated[int, Field(ge=0)] = Field(
        default=4,
        description="Number of further matched skills treated as preferred",
    )
    default_industry: str = Field(
        default="technology",
        description="Industry reported when none can be detected",
    )

    # Optional LLM analyzer
    llm_enabled: bool = Field(
        default=False,
        description="Try the LLM analyzer before the keyword analyzer",
    )
    llm_provider: str = Field(
        default="openai",
        description="LLM provider (openai, anthropic, azure, etc.)",
    )
    llm_model: str = Field(
        default="gpt-4o-mini",
        description="LLM model name",
    )
    llm_api_key: str | None = Field(
        default=None,
        description="API key for LLM provider",
    )
    llm_base_url: str | None = Field(
        default=None,
        description="Base URL for OpenAI-compatible endpoints",
    )
    llm_max_retries: Annotated[int, Field(ge=0)] = Field(
        default=1,
        description="Maximum retry attempts for LLM calls",
    )
    llm_timeout: Annotated[float, Field(gt=0)] = Field(
        default=30.0,
        description="Timeout in seconds for LLM calls",
    )


# Singleton instance
_analysis_config: AnalysisConfig | None = None


def get_analysis_config() -> AnalysisConfig:
    """Get the analysis configuration singleton."""
    global _analysis_config
    if _analysis_config is None:
        _analysis_config = AnalysisConfig()
    return _analysis_config


def reset_analysis_config() -> None:
    """Reset the configuration singleton (useful for testing)."""
    global _analysis_config
    _analysis_config = None
