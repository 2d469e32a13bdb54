"""Data models for chat conversations."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class ConversationStep(str, Enum):
    """Where a conversation is in the resume flow."""

    INITIATED = "initiated"
    COLLECTING_EMAIL = "collecting_email"
    COLLECTING_JOB_DESCRIPTION = "collecting_job_description"
    PROCESSING = "processing"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


TERMINAL_STEPS = frozenset({ConversationStep.COMPLETED, ConversationStep.CANCELLED})


@dataclass
class ConversationState:
    """State of one user's conversation, keyed by normalized phone.

    Attributes:
        phone: Digits-only phone number.
        step: Current step.
        email: Email collected in the first step.
        job_description: Job description collected in the second step.
        attempt_count: Invalid inputs in the current step.
        last_activity_at: Time of the last inbound message.
        created_at: When the conversation started.
        display_name: Chat display name, if the channel provides one.
        conversation_id: Distinguishes this conversation from later ones
            for the same phone.
    """

    phone: str
    last_activity_at: datetime
    step: ConversationStep = ConversationStep.INITIATED
    email: str | None = None
    job_description: str | None = None
    attempt_count: int = 0
    created_at: datetime | None = None
    display_name: str | None = None
    conversation_id: str = field(default_factory=lambda: uuid.uuid4().hex)

    def __post_init__(self) -> None:
        if self.created_at is None:
            self.created_at = self.last_activity_at

    def advance(self, step: ConversationStep) -> None:
        """Move to ``step``; the attempt counter restarts for the new step."""
        self.step = step
        self.attempt_count = 0

    def touch(self, now: datetime) -> None:
        self.last_activity_at = now

    def is_idle(self, now: datetime, timeout_seconds: float) -> bool:
        return (now - self.last_activity_at).total_seconds() > timeout_seconds

    def to_dict(self) -> dict:
        """Serialize the state to a dictionary."""
        return {
            "phone": self.phone,
            "step": self.step.value,
            "email": self.email,
            "job_description": self.job_description,
            "attempt_count": self.attempt_count,
            "last_activity_at": self.last_activity_at.isoformat(),
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "display_name": self.display_name,
            "conversation_id": self.conversation_id,
        }
