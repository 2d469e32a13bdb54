"""Conversation state storage.

The state machine only talks to the ConversationStore protocol, so the
in-memory map can be replaced by a shared cache without touching it.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Protocol, runtime_checkable

from src.conversation.models import ConversationState


@runtime_checkable
class ConversationStore(Protocol):
    """Key-value store of conversation states with an idle TTL."""

    @property
    def ttl(self) -> timedelta: ...

    def get(self, phone: str) -> ConversationState | None: ...

    def put(self, state: ConversationState) -> None: ...

    def delete(self, phone: str) -> bool: ...

    def states(self) -> list[ConversationState]: ...

    def sweep(self, now: datetime) -> list[str]:
        """Delete states idle longer than ``ttl``; return their phones."""
        ...


class InMemoryConversationStore:
    """Process-local conversation store."""

    def __init__(self, ttl: timedelta | float):
        self._ttl = ttl if isinstance(ttl, timedelta) else timedelta(seconds=ttl)
        self._states: dict[str, ConversationState] = {}

    @property
    def ttl(self) -> timedelta:
        return self._ttl

    def get(self, phone: str) -> ConversationState | None:
        return self._states.get(phone)

    def put(self, state: ConversationState) -> None:
        self._states[state.phone] = state

    def delete(self, phone: str) -> bool:
        return self._states.pop(phone, None) is not None

    def states(self) -> list[ConversationState]:
        return list(self._states.values())

    def sweep(self, now: datetime) -> list[str]:
        timeout = self._ttl.total_seconds()
        stale = [s.phone for s in self._states.values() if s.is_idle(now, timeout)]
        for phone in stale:
            del self._states[phone]
        return stale

    def __len__(self) -> int:
        return len(self._states)
