"""Data models for artifact history."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class ArtifactMetadata:
    """What the pipeline knows about a freshly stored artifact.

    Attributes:
        file_name: Download file name.
        url: Where the artifact can be fetched.
        storage_key: Key in cloud or local storage.
        mime_type: MIME type of the artifact.
        size_bytes: Size of the artifact.
        job_title: Title of the targeted job.
        job_description_hash: Hash of the job description text.
        artifact_id: Preassigned id; generated when omitted.
        data: The artifact bytes, kept inline when small enough.
    """

    file_name: str
    url: str
    storage_key: str
    mime_type: str
    size_bytes: int
    job_title: str = ""
    job_description_hash: str = ""
    artifact_id: str | None = None
    data: bytes | None = None


@dataclass
class ArtifactRecord:
    """A stored artifact history entry."""

    artifact_id: str
    owner_id: str
    file_name: str
    url: str
    storage_key: str
    mime_type: str
    size_bytes: int
    created_at: datetime
    expires_at: datetime
    job_title: str = ""
    job_description_hash: str = ""
    document_json: str | None = None
    inline_data: str | None = None
    download_count: int = 0
    shared_count: int = 0
    last_downloaded_at: datetime | None = None

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at <= now

    def to_dict(self) -> dict:
        """Serialize the record to a dictionary, without the inline payload."""
        return {
            "artifact_id": self.artifact_id,
            "owner_id": self.owner_id,
            "file_name": self.file_name,
            "url": self.url,
            "storage_key": self.storage_key,
            "mime_type": self.mime_type,
            "size_bytes": self.size_bytes,
            "job_title": self.job_title,
            "job_description_hash": self.job_description_hash,
            "download_count": self.download_count,
            "shared_count": self.shared_count,
            "created_at": self.created_at.isoformat(),
            "expires_at": self.expires_at.isoformat(),
            "last_downloaded_at": self.last_downloaded_at.isoformat()
            if self.last_downloaded_at
            else None,
        }


@dataclass
class OwnerStats:
    """Aggregate history figures for one owner."""

    total_artifacts: int = 0
    total_downloads: int = 0
    total_shares: int = 0
    last_generated_at: datetime | None = None
