"""Messaging module for talking to users over a chat channel."""

from src.messaging.config import (
    MessagingConfig,
    get_messaging_config,
    reset_messaging_config,
)
from src.messaging.gateway import (
    ConsoleMessagingGateway,
    FallbackMessagingGateway,
    MessagingGateway,
    WebhookMessagingGateway,
)
from src.messaging.models import InboundMessage, SendResult
from src.messaging.notifier import RegistrationNotifier

__all__ = [
    "ConsoleMessagingGateway",
    "FallbackMessagingGateway",
    "InboundMessage",
    "MessagingConfig",
    "MessagingGateway",
    "RegistrationNotifier",
    "SendResult",
    "WebhookMessagingGateway",
    "get_messaging_config",
    "reset_messaging_config",
]
