"""Data models for chat messaging."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator


class SendResult(BaseModel):
    """Outcome of sending one message."""

    model_config = ConfigDict(frozen=True)

    success: bool
    error: str | None = None

    @classmethod
    def ok(cls) -> SendResult:
        return cls(success=True)

    @classmethod
    def failed(cls, error: str) -> SendResult:
        return cls(success=False, error=error)


class InboundMessage(BaseModel):
    """A message received from the chat channel."""

    model_config = ConfigDict(frozen=True)

    identity: str = Field(..., description="Sender phone number")
    raw_text: str = Field(default="", description="Message text as received")
    display_name: str | None = Field(default=None, description="Sender's profile name")

    @field_validator("raw_text", mode="before")
    @classmethod
    def none_to_empty(cls, v: str | None) -> str:
        return v or ""

    @property
    def text(self) -> str:
        return self.raw_text.strip()
