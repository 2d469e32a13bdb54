"""Storage providers.

A provider stores bytes under a key and returns the public URL. Failures
raise UploadError; retrying is the uploader's job.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

import httpx

from src.errors import UploadError
from src.storage.config import StorageConfig

logger = logging.getLogger(__name__)


@runtime_checkable
class CloudStorageProvider(Protocol):
    """Interface for durable artifact storage."""

    name: str

    @property
    def is_configured(self) -> bool: ...

    async def put(self, key: str, data: bytes, content_type: str) -> str:
        """Store ``data`` under ``key`` and return its public URL."""
        ...

    async def delete(self, key: str) -> bool:
        """Remove ``key``; an already absent key counts as deleted."""
        ...


class BunnyStorageProvider:
    """Bunny.net edge storage over its HTTP API."""

    name = "bunny"

    def __init__(self, config: StorageConfig, client: httpx.AsyncClient | None = None):
        self.config = config
        self._client = client

    @property
    def is_configured(self) -> bool:
        return self.config.cloud_configured

    def object_url(self, key: str) -> str:
        return f"https://{self.config.hostname}/{self.config.zone}/{key}"

    def public_url(self, key: str) -> str:
        return f"{self.config.cdn_url}/{key}"

    async def _request(self, method: str, url: str, **kwargs) -> httpx.Response:
        headers = {"AccessKey": self.config.access_key or ""}
        headers.update(kwargs.pop("headers", {}))
        timeout = self.config.request_timeout
        if self._client is not None:
            return await self._client.request(
                method, url, headers=headers, timeout=timeout, **kwargs
            )
        async with httpx.AsyncClient(timeout=timeout) as client:
            return await client.request(method, url, headers=headers, **kwargs)

    async def put(self, key: str, data: bytes, content_type: str) -> str:
        if not self.is_configured:
            missing = ", ".join(self.config.missing_settings())
            raise UploadError(f"Cloud storage not configured (missing: {missing})")

        logger.debug(f"Uploading {len(data)} bytes to {self.object_url(key)}")
        try:
            response = await self._request(
                "PUT",
                self.object_url(key),
                content=data,
                headers={"Content-Type": content_type},
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise UploadError(f"Upload rejected with HTTP {e.response.status_code}") from e
        except httpx.TimeoutException as e:
            raise UploadError(f"Upload timed out after {self.config.request_timeout}s") from e
        except httpx.HTTPError as e:
            raise UploadError(f"Upload failed: {e}") from e

        return self.public_url(key)

    async def delete(self, key: str) -> bool:
        if not self.is_configured:
            return False
        try:
            response = await self._request("DELETE", self.object_url(key))
        except httpx.HTTPError as e:
            logger.warning(f"Delete of {key} failed: {e}")
            return False
        return response.status_code in (200, 404)

    async def test_connection(self) -> dict[str, Any]:
        """List the storage zone to verify the credentials."""
        if not self.is_configured:
            return {"success": False, "message": "Cloud storage not configured"}
        try:
            response = await self._request("GET", self.object_url(""))
        except httpx.HTTPError as e:
            return {"success": False, "message": f"Connection failed: {e}"}
        if response.status_code == 200:
            return {"success": True, "message": "Connection successful"}
        return {"success": False, "message": f"Unexpected status: {response.status_code}"}


class LocalStorageProvider:
    """Writes artifacts to a local directory served by the API under /uploads."""

    name = "local"

    def __init__(self, root: Path, base_url: str):
        self.root = Path(root)
        self.base_url = base_url.rstrip("/")

    @property
    def is_configured(self) -> bool:
        return True

    def path_for(self, key: str) -> Path:
        root = self.root.resolve()
        path = (root / key).resolve()
        if root != path and root not in path.parents:
            raise UploadError(f"Storage key escapes the upload directory: {key}")
        return path

    def public_url(self, key: str) -> str:
        return f"{self.base_url}/uploads/{key}"

    async def put(self, key: str, data: bytes, content_type: str) -> str:
        path = self.path_for(key)
        try:
            await asyncio.to_thread(_write_file, path, data)
        except OSError as e:
            raise UploadError(f"Could not write {path}: {e}") from e
        return self.public_url(key)

    async def delete(self, key: str) -> bool:
        path = self.path_for(key)
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning(f"Could not delete {path}: {e}")
            return False
        return True


def _write_file(path: Path, data: bytes) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)
