"""Upload rendered artifacts with retry and a local fallback."""

from __future__ import annotations

import asyncio
import logging
import re
from collections.abc import Awaitable, Callable

from src.config.settings import get_settings
from src.errors import UploadError
from src.rendering.models import RenderArtifact
from src.storage.config import StorageConfig, get_storage_config
from src.storage.models import UploadResult
from src.storage.provider import (
    BunnyStorageProvider,
    CloudStorageProvider,
    LocalStorageProvider,
)
from src.utils.retry import RetryExhaustedError, retry_async

logger = logging.getLogger(__name__)

_UNSAFE_KEY_CHARS = re.compile(r"[^A-Za-z0-9.-]")


def sanitize_key_part(value: str) -> str:
    """Replace characters that are unsafe in object keys with underscores."""
    return _UNSAFE_KEY_CHARS.sub("_", value)


class StorageUploader:
    """Persists artifacts to cloud storage.

    Uploads are retried with exponential backoff. ``upload`` never raises:
    persistent failure is reported as ``success=False`` and the caller can
    use ``fallback`` to serve the artifact locally instead.
    """

    def __init__(
        self,
        config: StorageConfig | None = None,
        provider: CloudStorageProvider | None = None,
        local: LocalStorageProvider | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.config = config or get_storage_config()
        self.provider = provider or BunnyStorageProvider(self.config)
        self.local = local or LocalStorageProvider(
            self.config.local_dir, get_settings().api_base_url
        )
        self._sleep = sleep

    def build_key(self, artifact_id: str, file_name: str) -> str:
        """Build ``{prefix}/{artifact_id}/{file_name}`` with unsafe characters replaced."""
        parts = [sanitize_key_part(artifact_id), sanitize_key_part(file_name)]
        if self.config.key_prefix:
            parts.insert(0, self.config.key_prefix)
        return "/".join(parts)

    async def upload(
        self,
        artifact: RenderArtifact,
        key: str,
        max_attempts: int | None = None,
    ) -> UploadResult:
        """Upload to the cloud provider, retrying with backoff."""
        if not self.provider.is_configured:
            logger.warning(f"Cloud storage not configured; skipping upload of {key}")
            return UploadResult.failed(key, "Cloud storage not configured")

        attempts = max_attempts or self.config.max_attempts
        made = 0

        async def attempt() -> str:
            nonlocal made
            made += 1
            return await self.provider.put(key, artifact.data, artifact.mime_type)

        try:
            url = await retry_async(
                attempt,
                attempts=attempts,
                base_delay=self.config.backoff_base,
                retry_on=(UploadError,),
                timeout=self.config.request_timeout,
                description=f"Upload of {key}",
                sleep=self._sleep,
            )
        except RetryExhaustedError as e:
            return UploadResult.failed(key, str(e.last_error), attempts=e.attempts)
        except Exception as e:
            logger.error(f"Upload of {key} failed unexpectedly: {e}")
            return UploadResult.failed(key, str(e), attempts=made)

        logger.info(f"Uploaded {artifact.size_bytes} bytes to {url} (attempt {made})")
        return UploadResult(
            success=True,
            url=url,
            key=key,
            attempts=made,
            provider=self.provider.name,
        )

    def fallback_url(self, key: str) -> str:
        return self.local.public_url(key)

    async def fallback(self, artifact: RenderArtifact, key: str) -> UploadResult:
        """Keep a local copy and return the locally served URL."""
        try:
            url = await self.local.put(key, artifact.data, artifact.mime_type)
        except UploadError as e:
            logger.warning(f"Local fallback copy of {key} failed: {e}")
            return UploadResult(
                success=False, url=self.fallback_url(key), key=key, error=str(e)
            )
        return UploadResult(success=True, url=url, key=key, provider=self.local.name)

    async def store(
        self,
        artifact: RenderArtifact,
        key: str,
        max_attempts: int | None = None,
    ) -> tuple[UploadResult, bool]:
        """Upload, falling back to local storage.

        Returns:
            The result that produced the URL and whether it is the fallback.
        """
        result = await self.upload(artifact, key, max_attempts)
        if result.success:
            return result, False
        logger.warning(f"Using local fallback URL for {key}: {result.error}")
        return await self.fallback(artifact, key), True

    async def delete(self, key: str) -> bool:
        """Delete the artifact everywhere; a missing object counts as deleted."""
        try:
            local_deleted = await self.local.delete(key)
        except UploadError as e:
            logger.warning(f"Refusing to delete {key}: {e}")
            return False
        if not self.provider.is_configured:
            return local_deleted
        return await self.provider.delete(key)
