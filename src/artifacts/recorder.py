"""Business logic for artifact history.

This module provides the ArtifactRecorder class which handles:
- Recording rendered artifacts with their tailored document
- Retention (newest N per owner) and TTL expiry
- Download/share counters and repeated-request detection
"""

from __future__ import annotations

import base64
import json
import logging
import secrets
from collections.abc import Callable
from datetime import datetime, timedelta

from src.artifacts.config import ArtifactConfig, get_artifact_config
from src.artifacts.models import ArtifactMetadata, ArtifactRecord, OwnerStats
from src.artifacts.repository import ArtifactRepository
from src.storage.uploader import StorageUploader
from src.tailoring.models import ResumeDocument

logger = logging.getLogger(__name__)


def generate_artifact_id(now: datetime) -> str:
    """Create an id like ``resume_1700000000000_k3j9x2a1b``."""
    return f"resume_{int(now.timestamp() * 1000)}_{secrets.token_hex(5)[:9]}"


class ArtifactRecorder:
    """Records artifact metadata and enforces retention.

    When a storage uploader is supplied, stored objects of evicted records
    are deleted as well.
    """

    def __init__(
        self,
        repository: ArtifactRepository,
        config: ArtifactConfig | None = None,
        storage: StorageUploader | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.repository = repository
        self.config = config or get_artifact_config()
        self.storage = storage
        self._clock = clock

    async def record(
        self,
        metadata: ArtifactMetadata,
        document: ResumeDocument | None,
        owner_id: str,
    ) -> str:
        """Store a history entry and return its id."""
        now = self._clock()
        artifact_id = metadata.artifact_id or generate_artifact_id(now)

        inline_data = None
        if metadata.data is not None and len(metadata.data) < self.config.inline_cache_limit_bytes:
            inline_data = base64.b64encode(metadata.data).decode("ascii")

        record = ArtifactRecord(
            artifact_id=artifact_id,
            owner_id=owner_id,
            file_name=metadata.file_name,
            url=metadata.url,
            storage_key=metadata.storage_key,
            mime_type=metadata.mime_type,
            size_bytes=metadata.size_bytes,
            created_at=now,
            expires_at=now + timedelta(days=self.config.ttl_days),
            job_title=metadata.job_title,
            job_description_hash=metadata.job_description_hash,
            document_json=json.dumps(document.to_dict()) if document else None,
            inline_data=inline_data,
        )
        await self.repository.insert(record)
        logger.info(f"Recorded artifact {artifact_id} for owner {owner_id}")

        evicted = await self.repository.delete_beyond_newest(
            owner_id, self.config.retention_count
        )
        if evicted:
            logger.info(f"Evicted {len(evicted)} old artifact(s) for owner {owner_id}")
            await self._delete_stored(evicted)

        return artifact_id

    async def list_by_owner(self, owner_id: str, limit: int | None = None) -> list[ArtifactRecord]:
        """Unexpired records of an owner, newest first."""
        return await self.repository.list_by_owner(
            owner_id,
            limit or self.config.history_limit,
            not_expired_at=self._clock(),
        )

    async def get(self, artifact_id: str) -> ArtifactRecord | None:
        record = await self.repository.get(artifact_id)
        if record is None or record.is_expired(self._clock()):
            return None
        return record

    async def get_document(self, artifact_id: str) -> ResumeDocument | None:
        """Load the tailored document stored with an artifact."""
        record = await self.get(artifact_id)
        if record is None or not record.document_json:
            return None
        return ResumeDocument.from_dict(json.loads(record.document_json))

    async def get_inline_data(self, artifact_id: str) -> bytes | None:
        record = await self.get(artifact_id)
        if record is None or not record.inline_data:
            return None
        return base64.b64decode(record.inline_data)

    async def record_download(self, artifact_id: str) -> bool:
        """Count a download. Returns False for an unknown artifact."""
        found = await self.repository.increment_download(artifact_id, self._clock())
        if not found:
            logger.warning(f"Download recorded for unknown artifact {artifact_id}")
        return found

    async def record_share(self, artifact_id: str) -> bool:
        """Count a delivery of the artifact over chat."""
        return await self.repository.increment_share(artifact_id)

    async def find_recent_duplicate(
        self,
        owner_id: str,
        job_description_hash: str,
        within: timedelta | None = None,
    ) -> ArtifactRecord | None:
        """Find an artifact generated recently for the same job description."""
        window = within or timedelta(days=self.config.duplicate_window_days)
        record = await self.repository.find_by_hash(
            owner_id, job_description_hash, self._clock() - window
        )
        if record is None or record.is_expired(self._clock()):
            return None
        return record

    async def purge_expired(self, now: datetime | None = None) -> int:
        """Delete expired records. Returns how many were removed."""
        expired = await self.repository.delete_expired(now or self._clock())
        if expired:
            logger.info(f"Purged {len(expired)} expired artifact(s)")
            await self._delete_stored(expired)
        return len(expired)

    async def owner_stats(self, owner_id: str) -> OwnerStats:
        return await self.repository.owner_stats(owner_id)

    async def _delete_stored(self, records: list[ArtifactRecord]) -> None:
        if self.storage is None:
            return
        for record in records:
            if not await self.storage.delete(record.storage_key):
                logger.warning(f"Could not delete stored object {record.storage_key}")
