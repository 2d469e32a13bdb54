"""Data models for storage operations."""

from __future__ import annotations

from pydantic import BaseModel, Field, model_validator


class UploadResult(BaseModel):
    """Outcome of an upload.

    A successful result always carries the URL the artifact can be fetched
    from. A failed result still carries the key so the caller can derive a
    fallback location.
    """

    success: bool = Field(..., description="Whether the artifact reached durable storage")
    url: str | None = Field(default=None, description="Public URL of the stored artifact")
    error: str | None = Field(default=None, description="Why the upload failed")
    key: str = Field(default="", description="Storage key the upload targeted")
    attempts: int = Field(default=0, ge=0, description="Attempts made")
    provider: str = Field(default="", description="Provider that stored the artifact")

    @model_validator(mode="after")
    def require_url_on_success(self) -> UploadResult:
        if self.success and not self.url:
            raise ValueError("a successful upload must include a url")
        return self

    @classmethod
    def failed(cls, key: str, error: str, attempts: int = 0) -> UploadResult:
        return cls(success=False, key=key, error=error, attempts=attempts)
