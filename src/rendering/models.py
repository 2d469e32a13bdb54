"""Data models for rendering results."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from src.tailoring.models import SkillPriority

PDF_MIME_TYPE = "application/pdf"

# Section labels for skill groups, shared by every renderer
SKILL_GROUP_LABELS = {
    SkillPriority.HIGH: "Core",
    SkillPriority.MEDIUM: "Additional",
    SkillPriority.LOW: "Other",
}


@dataclass(frozen=True)
class RenderArtifact:
    """A rendered resume.

    Attributes:
        data: The binary document.
        mime_type: MIME type of ``data``.
        strategy: Name of the strategy that produced it.
        rendered_at: When rendering finished.
    """

    data: bytes
    mime_type: str = PDF_MIME_TYPE
    strategy: str = ""
    rendered_at: datetime = field(default_factory=datetime.now)

    def __post_init__(self) -> None:
        if not isinstance(self.data, bytes | bytearray):
            raise TypeError("RenderArtifact data must be bytes")
        if len(self.data) == 0:
            raise ValueError("RenderArtifact data must not be empty")

    @property
    def size_bytes(self) -> int:
        return len(self.data)

    def looks_like_pdf(self) -> bool:
        return bytes(self.data[:5]) == b"%PDF-"


@dataclass
class StrategyFailure:
    """Why one strategy in the chain did not produce an artifact."""

    strategy: str
    error: str
    elapsed_seconds: float = 0.0
