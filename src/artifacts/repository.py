"""Database repository for artifact history.

This module provides async SQLite database operations for storing
and retrieving rendered resume records.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import datetime
from pathlib import Path

import aiosqlite

from src.artifacts.models import ArtifactRecord, OwnerStats

# SQL schema for the artifacts table
CREATE_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS artifacts (
    artifact_id TEXT PRIMARY KEY,
    owner_id TEXT NOT NULL,
    file_name TEXT NOT NULL,
    url TEXT NOT NULL,
    storage_key TEXT NOT NULL,
    mime_type TEXT NOT NULL,
    size_bytes INTEGER NOT NULL,
    job_title TEXT,
    job_description_hash TEXT,
    document_json TEXT,
    inline_data TEXT,
    download_count INTEGER DEFAULT 0,
    shared_count INTEGER DEFAULT 0,
    created_at TEXT NOT NULL,
    expires_at TEXT NOT NULL,
    last_downloaded_at TEXT
)
"""

CREATE_INDEX_SQL = """
CREATE INDEX IF NOT EXISTS idx_artifacts_owner_created ON artifacts(owner_id, created_at);
CREATE INDEX IF NOT EXISTS idx_artifacts_expires ON artifacts(expires_at);
CREATE INDEX IF NOT EXISTS idx_artifacts_owner_hash ON artifacts(owner_id, job_description_hash);
"""


def _ts(value: datetime) -> str:
    # Fixed-width timestamps so string comparison orders correctly
    return value.isoformat(timespec="microseconds")


class ArtifactRepository:
    """Async SQLite repository for artifact records."""

    def __init__(self, db_path: Path | str):
        """Initialize the repository.

        Args:
            db_path: Path to the SQLite database file.
        """
        self.db_path = Path(db_path)
        self._connection: aiosqlite.Connection | None = None

    @asynccontextmanager
    async def _get_connection(self) -> AsyncGenerator[aiosqlite.Connection, None]:
        """Get a database connection.

        Yields:
            An aiosqlite connection.
        """
        if self._connection is None:
            self._connection = await aiosqlite.connect(self.db_path)
            self._connection.row_factory = aiosqlite.Row
        yield self._connection

    async def initialize(self) -> None:
        """Initialize the database, creating tables if needed."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        async with self._get_connection() as conn:
            await conn.execute(CREATE_TABLE_SQL)
            await conn.executescript(CREATE_INDEX_SQL)
            await conn.commit()

    async def close(self) -> None:
        """Close the database connection."""
        if self._connection is not None:
            await self._connection.close()
            self._connection = None

    async def insert(self, record: ArtifactRecord) -> None:
        """Insert a new artifact record.

        Raises:
            sqlite3.IntegrityError: If the artifact id already exists.
        """
        async with self._get_connection() as conn:
            await conn.execute(
                """
                INSERT INTO artifacts (
                    artifact_id, owner_id, file_name, url, storage_key, mime_type,
                    size_bytes, job_title, job_description_hash, document_json,
                    inline_data, download_count, shared_count, created_at,
                    expires_at, last_downloaded_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    record.artifact_id,
                    record.owner_id,
                    record.file_name,
                    record.url,
                    record.storage_key,
                    record.mime_type,
                    record.size_bytes,
                    record.job_title,
                    record.job_description_hash,
                    record.document_json,
                    record.inline_data,
                    record.download_count,
                    record.shared_count,
                    _ts(record.created_at),
                    _ts(record.expires_at),
                    _ts(record.last_downloaded_at) if record.last_downloaded_at else None,
                ),
            )
            await conn.commit()

    async def get(self, artifact_id: str) -> ArtifactRecord | None:
        """Get a record by id."""
        async with self._get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM artifacts WHERE artifact_id = ?",
                (artifact_id,),
            )
            row = await cursor.fetchone()

        if row is None:
            return None

        return self._row_to_record(row)

    async def list_by_owner(
        self,
        owner_id: str,
        limit: int,
        not_expired_at: datetime | None = None,
    ) -> list[ArtifactRecord]:
        """List an owner's records, newest first.

        Args:
            owner_id: Owner to list.
            limit: Maximum number of records to return.
            not_expired_at: When given, skip records expired at this time.
        """
        async with self._get_connection() as conn:
            if not_expired_at is not None:
                cursor = await conn.execute(
                    """
                    SELECT * FROM artifacts
                    WHERE owner_id = ? AND expires_at > ?
                    ORDER BY created_at DESC, rowid DESC
                    LIMIT ?
                    """,
                    (owner_id, _ts(not_expired_at), limit),
                )
            else:
                cursor = await conn.execute(
                    """
                    SELECT * FROM artifacts
                    WHERE owner_id = ?
                    ORDER BY created_at DESC, rowid DESC
                    LIMIT ?
                    """,
                    (owner_id, limit),
                )
            rows = await cursor.fetchall()

        return [self._row_to_record(row) for row in rows]

    async def delete_beyond_newest(self, owner_id: str, keep: int) -> list[ArtifactRecord]:
        """Delete all but the ``keep`` newest records of an owner.

        Returns:
            The deleted records.
        """
        async with self._get_connection() as conn:
            cursor = await conn.execute(
                """
                SELECT * FROM artifacts
                WHERE owner_id = ?
                ORDER BY created_at DESC, rowid DESC
                LIMIT -1 OFFSET ?
                """,
                (owner_id, keep),
            )
            rows = await cursor.fetchall()
            stale = [self._row_to_record(row) for row in rows]
            if stale:
                await conn.executemany(
                    "DELETE FROM artifacts WHERE artifact_id = ?",
                    [(record.artifact_id,) for record in stale],
                )
                await conn.commit()

        return stale

    async def delete_expired(self, now: datetime) -> list[ArtifactRecord]:
        """Delete every record past its expiry.

        Returns:
            The deleted records.
        """
        async with self._get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM artifacts WHERE expires_at <= ?",
                (_ts(now),),
            )
            rows = await cursor.fetchall()
            expired = [self._row_to_record(row) for row in rows]
            if expired:
                await conn.execute(
                    "DELETE FROM artifacts WHERE expires_at <= ?",
                    (_ts(now),),
                )
                await conn.commit()

        return expired

    async def increment_download(self, artifact_id: str, when: datetime) -> bool:
        """Count a download. Returns False if the record does not exist."""
        async with self._get_connection() as conn:
            cursor = await conn.execute(
                """
                UPDATE artifacts
                SET download_count = download_count + 1, last_downloaded_at = ?
                WHERE artifact_id = ?
                """,
                (_ts(when), artifact_id),
            )
            await conn.commit()
            return cursor.rowcount > 0

    async def increment_share(self, artifact_id: str) -> bool:
        """Count a share. Returns False if the record does not exist."""
        async with self._get_connection() as conn:
            cursor = await conn.execute(
                "UPDATE artifacts SET shared_count = shared_count + 1 WHERE artifact_id = ?",
                (artifact_id,),
            )
            await conn.commit()
            return cursor.rowcount > 0

    async def find_by_hash(
        self, owner_id: str, job_description_hash: str, since: datetime
    ) -> ArtifactRecord | None:
        """Newest record of an owner for the same job description since ``since``."""
        async with self._get_connection() as conn:
            cursor = await conn.execute(
                """
                SELECT * FROM artifacts
                WHERE owner_id = ? AND job_description_hash = ? AND created_at >= ?
                ORDER BY created_at DESC, rowid DESC
                LIMIT 1
                """,
                (owner_id, job_description_hash, _ts(since)),
            )
            row = await cursor.fetchone()

        if row is None:
            return None

        return self._row_to_record(row)

    async def owner_stats(self, owner_id: str) -> OwnerStats:
        """Return aggregate counts for an owner."""
        async with self._get_connection() as conn:
            cursor = await conn.execute(
                """
                SELECT COUNT(*) AS total,
                       SUM(download_count) AS downloads,
                       SUM(shared_count) AS shares,
                       MAX(created_at) AS last_created
                FROM artifacts
                WHERE owner_id = ?
                """,
                (owner_id,),
            )
            row = await cursor.fetchone()

        return OwnerStats(
            total_artifacts=int(row["total"] or 0),
            total_downloads=int(row["downloads"] or 0),
            total_shares=int(row["shares"] or 0),
            last_generated_at=datetime.fromisoformat(row["last_created"])
            if row["last_created"]
            else None,
        )

    def _row_to_record(self, row: aiosqlite.Row) -> ArtifactRecord:
        """Convert a database row to an ArtifactRecord."""
        return ArtifactRecord(
            artifact_id=row["artifact_id"],
            owner_id=row["owner_id"],
            file_name=row["file_name"],
            url=row["url"],
            storage_key=row["storage_key"],
            mime_type=row["mime_type"],
            size_bytes=int(row["size_bytes"]),
            created_at=datetime.fromisoformat(row["created_at"]),
            expires_at=datetime.fromisoformat(row["expires_at"]),
            job_title=row["job_title"] or "",
            job_description_hash=row["job_description_hash"] or "",
            document_json=row["document_json"],
            inline_data=row["inline_data"],
            download_count=int(row["download_count"] or 0),
            shared_count=int(row["shared_count"] or 0),
            last_downloaded_at=datetime.fromisoformat(row["last_downloaded_at"])
            if row["last_downloaded_at"]
            else None,
        )
