"""Error taxonomy shared across Resume Relay components."""

from __future__ import annotations


class ResumeRelayError(Exception):
    """Base class for all application errors."""


class ValidationError(ResumeRelayError):
    """Raised when user-supplied input is malformed (recoverable)."""

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message)
        self.field = field


class NotFoundError(ResumeRelayError):
    """Raised when no candidate profile exists for an identity."""

    def __init__(
        self,
        message: str = "Candidate profile not found",
        email: str | None = None,
        phone: str | None = None,
    ):
        super().__init__(message)
        self.email = email
        self.phone = phone


class RenderError(ResumeRelayError):
    """Raised when every rendering strategy has failed."""

    def __init__(self, message: str, failures: list[tuple[str, str]] | None = None):
        super().__init__(message)
        self.failures = failures or []


class UploadError(ResumeRelayError):
    """Raised by storage providers when a single upload attempt fails."""

    def __init__(self, message: str, attempts: int = 0):
        super().__init__(message)
        self.attempts = attempts


class StepTimeoutError(ResumeRelayError, TimeoutError):
    """Raised when a network-bound step exceeds its timeout."""

    def __init__(self, step: str, timeout: float):
        super().__init__(f"{step} timed out after {timeout}s")
        self.step = step
        self.timeout = timeout
