"""Notification about users who asked for a resume without a profile."""

from __future__ import annotations

import logging

import httpx

from src.messaging import messages
from src.messaging.config import MessagingConfig, get_messaging_config
from src.profiles.models import normalize_phone

logger = logging.getLogger(__name__)


class RegistrationNotifier:
    """Posts unregistered-user alerts to a webhook, if one is configured."""

    def __init__(
        self,
        config: MessagingConfig | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        self.config = config or get_messaging_config()
        self._client = client

    async def notify_unregistered(
        self,
        phone: str,
        email: str | None = None,
        display_name: str | None = None,
    ) -> bool:
        """Send the alert. Returns whether it was delivered."""
        url = self.config.notify_webhook_url
        if not url:
            logger.debug("No notification webhook configured; skipping alert")
            return False

        payload = {
            "number": normalize_phone(phone),
            "message": messages.unregistered_user_alert(phone, email, display_name),
        }
        try:
            if self._client is not None:
                response = await self._client.post(url, json=payload, timeout=self.config.timeout)
            else:
                async with httpx.AsyncClient(timeout=self.config.timeout) as client:
                    response = await client.post(url, json=payload)
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.warning(f"Unregistered-user notification failed: {e}")
            return False

        logger.info(f"Notified about unregistered user {normalize_phone(phone)}")
        return True
