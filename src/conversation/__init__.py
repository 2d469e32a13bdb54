"""Chat conversation handling for resume requests."""

from src.conversation.config import (
    ConversationConfig,
    get_conversation_config,
    reset_conversation_config,
)
from src.conversation.machine import ConversationStateMachine, extract_email, is_valid_email
from src.conversation.models import ConversationState, ConversationStep
from src.conversation.store import ConversationStore, InMemoryConversationStore

__all__ = [
    "ConversationConfig",
    "ConversationState",
    "ConversationStateMachine",
    "ConversationStep",
    "ConversationStore",
    "InMemoryConversationStore",
    "extract_email",
    "get_conversation_config",
    "is_valid_email",
    "reset_conversation_config",
]
