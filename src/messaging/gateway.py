"""Outbound chat gateways.

Every gateway reports delivery problems as a failed SendResult and never
raises, so a chat outage cannot break the conversation flow.
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass
from typing import Protocol, TextIO, runtime_checkable

import httpx

from src.messaging.config import MessagingConfig, get_messaging_config
from src.messaging.models import SendResult
from src.profiles.models import normalize_phone

logger = logging.getLogger(__name__)


@runtime_checkable
class MessagingGateway(Protocol):
    """Interface for delivering messages to a chat identity."""

    async def send_text(self, identity: str, message: str) -> SendResult:
        """Send a text message."""
        ...

    async def send_document(
        self, identity: str, url: str, caption: str | None = None
    ) -> SendResult:
        """Send a document by URL with an optional caption."""
        ...


class WebhookMessagingGateway:
    """Delivers messages by posting to chat-provider webhooks."""

    def __init__(
        self,
        config: MessagingConfig | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        self.config = config or get_messaging_config()
        self._client = client

    @property
    def is_configured(self) -> bool:
        return bool(self.config.text_webhook_url)

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.config.api_key:
            headers["Authorization"] = f"Bearer {self.config.api_key}"
        return headers

    async def _post(self, url: str | None, payload: dict, kind: str) -> SendResult:
        if not url:
            return SendResult.failed(f"{kind} webhook not configured")

        try:
            if self._client is not None:
                response = await self._client.post(
                    url, json=payload, headers=self._headers(), timeout=self.config.timeout
                )
            else:
                async with httpx.AsyncClient(timeout=self.config.timeout) as client:
                    response = await client.post(url, json=payload, headers=self._headers())
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.warning(f"{kind} delivery rejected with HTTP {e.response.status_code}")
            return SendResult.failed(f"HTTP {e.response.status_code}")
        except httpx.TimeoutException:
            logger.warning(f"{kind} delivery timed out after {self.config.timeout}s")
            return SendResult.failed("timeout")
        except httpx.HTTPError as e:
            logger.warning(f"{kind} delivery failed: {e}")
            return SendResult.failed(str(e) or type(e).__name__)

        return SendResult.ok()

    async def send_text(self, identity: str, message: str) -> SendResult:
        payload = {"number": normalize_phone(identity), "message": message}
        return await self._post(self.config.text_webhook_url, payload, "Text")

    async def send_document(
        self, identity: str, url: str, caption: str | None = None
    ) -> SendResult:
        payload = {"number": normalize_phone(identity), "document": url, "caption": caption or ""}
        return await self._post(self.config.document_webhook_url, payload, "Document")


@dataclass
class SentMessage:
    identity: str
    kind: str
    body: str
    caption: str | None = None


class ConsoleMessagingGateway:
    """Writes messages to a stream and keeps a transcript."""

    def __init__(self, stream: TextIO | None = None, echo: bool = True):
        self.stream = stream or sys.stdout
        self.echo = echo
        self.sent: list[SentMessage] = []

    def texts_for(self, identity: str) -> list[str]:
        return [m.body for m in self.sent if m.identity == identity and m.kind == "text"]

    async def send_text(self, identity: str, message: str) -> SendResult:
        self.sent.append(SentMessage(identity, "text", message))
        if self.echo:
            print(f"\n[to {identity}]\n{message}\n", file=self.stream)
        return SendResult.ok()

    async def send_document(
        self, identity: str, url: str, caption: str | None = None
    ) -> SendResult:
        self.sent.append(SentMessage(identity, "document", url, caption))
        if self.echo:
            print(f"\n[document to {identity}] {caption or ''}\n{url}\n", file=self.stream)
        return SendResult.ok()


class FallbackMessagingGateway:
    """Uses a secondary gateway when the primary fails."""

    def __init__(self, primary: MessagingGateway, secondary: MessagingGateway):
        self.primary = primary
        self.secondary = secondary

    async def send_text(self, identity: str, message: str) -> SendResult:
        result = await self.primary.send_text(identity, message)
        if result.success:
            return result
        logger.info(f"Primary gateway failed ({result.error}); using secondary")
        return await self.secondary.send_text(identity, message)

    async def send_document(
        self, identity: str, url: str, caption: str | None = None
    ) -> SendResult:
        result = await self.primary.send_document(identity, url, caption)
        if result.success:
            return result
        logger.info(f"Primary gateway failed ({result.error}); using secondary")
        return await self.secondary.send_document(identity, url, caption)
