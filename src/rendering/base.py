"""Rendering strategy interface."""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod

from src.rendering.models import PDF_MIME_TYPE, RenderArtifact
from src.tailoring.models import ResumeDocument


class StrategyError(Exception):
    """Raised by a strategy that cannot render the document."""


class RenderStrategy(ABC):
    """One way of turning a ResumeDocument into a binary artifact.

    Strategies are independent: none may rely on another strategy's
    intermediate output. The pipeline enforces ``timeout``.
    """

    name: str = "strategy"

    def __init__(self, timeout: float):
        self.timeout = timeout

    @abstractmethod
    async def render(self, document: ResumeDocument) -> RenderArtifact:
        """Render the document or raise."""


class ThreadedRenderStrategy(RenderStrategy):
    """Base for CPU-bound strategies; rendering runs in a worker thread."""

    async def render(self, document: ResumeDocument) -> RenderArtifact:
        data = await asyncio.to_thread(self.render_bytes, document)
        return RenderArtifact(data=data, mime_type=PDF_MIME_TYPE, strategy=self.name)

    @abstractmethod
    def render_bytes(self, document: ResumeDocument) -> bytes:
        """Render synchronously and return the PDF bytes."""
