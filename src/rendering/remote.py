"""Remote headless-rendering service strategy.

The service exposes ``GET /health`` and ``POST /generate-pdf``. A health
probe precedes use; its result is cached process-wide per service URL so
that a down service is not probed on every render.
"""

from __future__ import annotations

import asyncio
import base64
import binascii
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from typing import Any

import httpx

from src.rendering.base import RenderStrategy, StrategyError
from src.rendering.markup import MarkupBuilder
from src.rendering.models import PDF_MIME_TYPE, RenderArtifact
from src.tailoring.models import ResumeDocument

logger = logging.getLogger(__name__)

# Share of the strategy timeout available to the render POST
RENDER_BUDGET = 0.9


@dataclass(frozen=True)
class HealthStatus:
    """Outcome of one health probe."""

    healthy: bool
    checked_at: float
    checked_at_wall: datetime
    detail: str = ""


class HealthCache:
    """Per-URL health results with a freshness window."""

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._entries: dict[str, HealthStatus] = {}

    def get(self, url: str, ttl: float) -> HealthStatus | None:
        """Return the cached status for ``url`` if younger than ``ttl`` seconds."""
        status = self._entries.get(url)
        if status is None:
            return None
        if self._clock() - status.checked_at > ttl:
            return None
        return status

    def peek(self, url: str) -> HealthStatus | None:
        """Return the last status regardless of age."""
        return self._entries.get(url)

    def record(self, url: str, healthy: bool, detail: str = "") -> HealthStatus:
        status = HealthStatus(
            healthy=healthy,
            checked_at=self._clock(),
            checked_at_wall=datetime.now(),
            detail=detail,
        )
        self._entries[url] = status
        return status

    def clear(self) -> None:
        self._entries.clear()


_health_cache = HealthCache()


def get_health_cache() -> HealthCache:
    """Get the process-wide health cache."""
    return _health_cache


def reset_health_cache() -> None:
    """Forget all cached health results (useful for testing)."""
    _health_cache.clear()


class RemoteStrategy(RenderStrategy):
    """Delegates rendering to a remote headless-browser service."""

    name = "remote"

    def __init__(
        self,
        base_url: str | None,
        markup: MarkupBuilder,
        timeout: float = 60.0,
        health_timeout: float = 5.0,
        health_ttl: float = 60.0,
        page_size: str = "A4",
        cache: HealthCache | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        super().__init__(timeout)
        self.base_url = base_url.rstrip("/") if base_url else None
        self.markup = markup
        self.health_timeout = health_timeout
        self.health_ttl = health_ttl
        self.page_size = "A4" if page_size.upper() == "A4" else "Letter"
        self.cache = cache or get_health_cache()
        self._client = client

    @property
    def configured(self) -> bool:
        return bool(self.base_url and self.base_url.startswith("http"))

    async def _request(self, method: str, path: str, timeout: float, **kwargs) -> httpx.Response:
        url = f"{self.base_url}{path}"
        if self._client is not None:
            return await self._client.request(method, url, timeout=timeout, **kwargs)
        async with httpx.AsyncClient(timeout=timeout) as client:
            return await client.request(method, url, **kwargs)

    async def health_check(self, force: bool = False) -> bool:
        """Return whether the service is reachable, using the cache when fresh."""
        if not self.configured:
            return False

        if not force:
            cached = self.cache.get(self.base_url, self.health_ttl)
            if cached is not None:
                return cached.healthy

        try:
            response = await self._request("GET", "/health", self.health_timeout)
            healthy = response.status_code == 200
            detail = f"HTTP {response.status_code}"
            if healthy:
                payload = _json_or_none(response)
                if isinstance(payload, dict) and "status" in payload:
                    healthy = str(payload["status"]).upper() == "OK"
                    detail = f"status={payload['status']}"
        except httpx.HTTPError as e:
            healthy = False
            detail = f"{type(e).__name__}: {e}"

        self.cache.record(self.base_url, healthy, detail)
        if not healthy:
            logger.info(f"Remote renderer unavailable at {self.base_url}: {detail}")
        return healthy

    async def render(self, document: ResumeDocument) -> RenderArtifact:
        deadline = asyncio.get_running_loop().time() + self.timeout * RENDER_BUDGET
        if not self.configured:
            raise StrategyError("remote renderer URL not configured")
        if not await self.health_check():
            raise StrategyError("remote renderer failed health check")

        payload = {
            "html": self.markup.render(document),
            "options": {
                "format": self.page_size,
                "printBackground": True,
                "margin": {"top": "20px", "right": "20px", "bottom": "20px", "left": "20px"},
            },
        }

        try:
            async with asyncio.timeout_at(deadline):
                response = await self._request(
                    "POST", "/generate-pdf", self.timeout, json=payload
                )
            response.raise_for_status()
            data = self._decode_response(response)
        except TimeoutError as e:
            self.cache.record(self.base_url, False, "render timed out")
            raise StrategyError(f"remote render timed out after {self.timeout}s") from e
        except asyncio.CancelledError:
            self.cache.record(self.base_url, False, "render cancelled")
            raise
        except (httpx.HTTPError, StrategyError) as e:
            # A failed render also invalidates the cached health status
            self.cache.record(self.base_url, False, str(e))
            if isinstance(e, StrategyError):
                raise
            raise StrategyError(f"remote render request failed: {e}") from e

        return RenderArtifact(data=data, mime_type=PDF_MIME_TYPE, strategy=self.name)

    def _decode_response(self, response: httpx.Response) -> bytes:
        content_type = response.headers.get("content-type", "")
        if content_type.startswith(PDF_MIME_TYPE):
            data = response.content
        else:
            payload = _json_or_none(response)
            if not isinstance(payload, dict) or not payload.get("success"):
                message = payload.get("message") if isinstance(payload, dict) else None
                raise StrategyError(f"remote renderer reported failure: {message or 'unknown'}")
            try:
                data = base64.b64decode(payload.get("pdf") or "", validate=True)
            except (binascii.Error, ValueError) as e:
                raise StrategyError("remote renderer returned invalid base64") from e

        if not data:
            raise StrategyError("remote renderer returned an empty document")
        return data

    def service_info(self) -> dict[str, Any]:
        """Describe the service and its last known health."""
        status = self.cache.peek(self.base_url) if self.base_url else None
        return {
            "url": self.base_url,
            "configured": self.configured,
            "available": status.healthy if status else None,
            "last_health_check": status.checked_at_wall.isoformat() if status else None,
            "detail": status.detail if status else None,
        }


def _json_or_none(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return None
