"""Tests for ArtifactRecorder retention and history."""

from datetime import datetime, timedelta
from unittest.mock import AsyncMock

import pytest

from src.artifacts.config import ArtifactConfig
from src.artifacts.models import ArtifactMetadata
from src.artifacts.recorder import ArtifactRecorder, generate_artifact_id
from src.artifacts.repository import ArtifactRepository


class Clock:
    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


def _metadata(name: str = "cv.pdf", **kw) -> ArtifactMetadata:
    values = {
        "file_name": name,
        "url": f"https://cdn.test/{name}",
        "storage_key": f"resumes/{name}",
        "mime_type": "application/pdf",
        "size_bytes": 10,
        "job_title": "Backend Engineer",
        "job_description_hash": "hash-1",
    }
    values.update(kw)
    return ArtifactMetadata(**values)


@pytest.fixture
def clock():
    return Clock(datetime(2024, 6, 1, 12, 0, 0))


@pytest.fixture
async def repository(tmp_path):
    repo = ArtifactRepository(tmp_path / "artifacts.db")
    await repo.initialize()
    yield repo
    await repo.close()


@pytest.fixture
def recorder(repository, clock):
    config = ArtifactConfig(_env_file=None, retention_count=3, ttl_days=30)
    return ArtifactRecorder(repository, config=config, clock=clock)


class TestArtifactId:
    """Tests for artifact id generation."""

    def test_format(self):
        artifact_id = generate_artifact_id(datetime(2024, 1, 1))
        prefix, millis, suffix = artifact_id.split("_")
        assert prefix == "resume"
        assert millis.isdigit()
        assert len(suffix) == 9

    def test_unique(self):
        now = datetime(2024, 1, 1)
        assert generate_artifact_id(now) != generate_artifact_id(now)


class TestRecord:
    """Tests for ArtifactRecorder.record."""

    @pytest.mark.asyncio
    async def test_record_returns_id_and_stores_document(self, recorder, resume_document):
        """Recorded artifacts keep the tailored document."""
        artifact_id = await recorder.record(_metadata(), resume_document, "ada@example.com")

        assert artifact_id.startswith("resume_")
        document = await recorder.get_document(artifact_id)
        assert document == resume_document

    @pytest.mark.asyncio
    async def test_preassigned_id_is_kept(self, recorder):
        artifact_id = await recorder.record(
            _metadata(artifact_id="resume_fixed"), None, "ada@example.com"
        )
        assert artifact_id == "resume_fixed"

    @pytest.mark.asyncio
    async def test_small_artifacts_are_inlined(self, recorder):
        """Artifacts under the inline limit keep a base64 copy."""
        artifact_id = await recorder.record(
            _metadata(data=b"%PDF-small"), None, "ada@example.com"
        )

        assert await recorder.get_inline_data(artifact_id) == b"%PDF-small"

    @pytest.mark.asyncio
    async def test_large_artifacts_are_not_inlined(self, repository, clock):
        config = ArtifactConfig(_env_file=None, inline_cache_limit_bytes=4)
        recorder = ArtifactRecorder(repository, config=config, clock=clock)

        artifact_id = await recorder.record(_metadata(data=b"%PDF-large"), None, "ada")

        record = await repository.get(artifact_id)
        assert record.inline_data is None

    @pytest.mark.asyncio
    async def test_retention_keeps_newest(self, recorder, clock):
        """Only the newest N artifacts per owner are kept."""
        ids = []
        for i in range(5):
            ids.append(await recorder.record(_metadata(f"cv{i}.pdf"), None, "ada@example.com"))
            clock.advance(minutes=1)

        history = await recorder.list_by_owner("ada@example.com")

        assert [r.artifact_id for r in history] == list(reversed(ids[-3:]))

    @pytest.mark.asyncio
    async def test_retention_deletes_stored_objects(self, repository, clock):
        """Evicted artifacts are removed from storage too."""
        storage = AsyncMock()
        storage.delete.return_value = True
        config = ArtifactConfig(_env_file=None, retention_count=1)
        recorder = ArtifactRecorder(repository, config=config, storage=storage, clock=clock)

        await recorder.record(_metadata("a.pdf"), None, "ada")
        clock.advance(seconds=1)
        await recorder.record(_metadata("b.pdf"), None, "ada")

        storage.delete.assert_awaited_once_with("resumes/a.pdf")


class TestExpiry:
    """Tests for TTL handling."""

    @pytest.mark.asyncio
    async def test_expired_hidden_from_history(self, recorder, clock):
        artifact_id = await recorder.record(_metadata(), None, "ada@example.com")
        clock.advance(days=31)

        assert await recorder.list_by_owner("ada@example.com") == []
        assert await recorder.get(artifact_id) is None

    @pytest.mark.asyncio
    async def test_purge_expired(self, recorder, clock):
        """purge_expired removes records past their TTL."""
        await recorder.record(_metadata("old.pdf"), None, "ada@example.com")
        clock.advance(days=20)
        await recorder.record(_metadata("new.pdf"), None, "ada@example.com")
        clock.advance(days=15)

        assert await recorder.purge_expired() == 1
        history = await recorder.list_by_owner("ada@example.com")
        assert [r.file_name for r in history] == ["new.pdf"]


class TestCounters:
    """Tests for download/share tracking and duplicates."""

    @pytest.mark.asyncio
    async def test_record_download(self, recorder):
        artifact_id = await recorder.record(_metadata(), None, "ada@example.com")

        assert await recorder.record_download(artifact_id) is True
        assert await recorder.record_download("resume_unknown") is False
        assert (await recorder.get(artifact_id)).download_count == 1

    @pytest.mark.asyncio
    async def test_record_share_and_stats(self, recorder):
        artifact_id = await recorder.record(_metadata(), None, "ada@example.com")
        await recorder.record_share(artifact_id)
        await recorder.record_download(artifact_id)

        stats = await recorder.owner_stats("ada@example.com")
        assert stats.total_artifacts == 1
        assert stats.total_shares == 1
        assert stats.total_downloads == 1

    @pytest.mark.asyncio
    async def test_find_recent_duplicate(self, recorder, clock):
        """A repeated job description within the window is detected."""
        artifact_id = await recorder.record(_metadata(), None, "ada@example.com")
        clock.advance(days=2)

        found = await recorder.find_recent_duplicate("ada@example.com", "hash-1")
        assert found.artifact_id == artifact_id

        clock.advance(days=6)
        assert await recorder.find_recent_duplicate("ada@example.com", "hash-1") is None
