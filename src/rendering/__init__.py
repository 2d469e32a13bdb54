"""Rendering module for turning tailored resumes into PDF documents."""

from src.rendering.base import RenderStrategy, StrategyError, ThreadedRenderStrategy
from src.rendering.config import (
    RenderingConfig,
    get_rendering_config,
    reset_rendering_config,
)
from src.rendering.markup import MarkupBuilder
from src.rendering.minimal import MinimalPdfWriter, MinimalStrategy
from src.rendering.models import PDF_MIME_TYPE, RenderArtifact, StrategyFailure
from src.rendering.pipeline import RenderingPipeline
from src.rendering.remote import (
    HealthCache,
    RemoteStrategy,
    get_health_cache,
    reset_health_cache,
)
from src.rendering.vector import VectorStrategy
from src.rendering.weasy import MarkupStrategy

__all__ = [
    "PDF_MIME_TYPE",
    "HealthCache",
    "MarkupBuilder",
    "MarkupStrategy",
    "MinimalPdfWriter",
    "MinimalStrategy",
    "RemoteStrategy",
    "RenderArtifact",
    "RenderStrategy",
    "RenderingConfig",
    "RenderingPipeline",
    "StrategyError",
    "StrategyFailure",
    "ThreadedRenderStrategy",
    "VectorStrategy",
    "get_health_cache",
    "get_rendering_config",
    "reset_health_cache",
    "reset_rendering_config",
]
