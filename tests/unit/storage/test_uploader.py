"""Tests for StorageUploader retry and fallback behavior."""

from unittest.mock import AsyncMock

import pytest

from src.errors import UploadError
from src.rendering.models import RenderArtifact
from src.storage.config import StorageConfig
from src.storage.provider import LocalStorageProvider
from src.storage.uploader import StorageUploader, sanitize_key_part


class FakeProvider:
    """Cloud provider that fails a scripted number of times."""

    name = "fake"

    def __init__(self, failures=0, configured=True, error=None):
        self.failures = failures
        self.configured = configured
        self.error = error or UploadError("HTTP 503")
        self.calls = 0
        self.deleted = []

    @property
    def is_configured(self):
        return self.configured

    async def put(self, key, data, content_type):
        self.calls += 1
        if self.calls <= self.failures:
            raise self.error
        return f"https://cdn.test/{key}"

    async def delete(self, key):
        self.deleted.append(key)
        return True


@pytest.fixture
def artifact():
    return RenderArtifact(data=b"%PDF-1.4 test", strategy="minimal")


@pytest.fixture
def sleep():
    return AsyncMock()


def _uploader(tmp_path, provider, sleep, **config) -> StorageUploader:
    values = {"max_attempts": 3, "backoff_base": 1.0, "key_prefix": "resumes"}
    values.update(config)
    return StorageUploader(
        config=StorageConfig(_env_file=None, **values),
        provider=provider,
        local=LocalStorageProvider(tmp_path, "http://localhost:3001"),
        sleep=sleep,
    )


class TestBuildKey:
    """Tests for storage key construction."""

    def test_sanitize(self):
        assert sanitize_key_part("Ada Lovelace (CV).pdf") == "Ada_Lovelace__CV_.pdf"

    def test_build_key(self, tmp_path, sleep):
        uploader = _uploader(tmp_path, FakeProvider(), sleep)
        assert uploader.build_key("resume_1_ab", "Ada Resume.pdf") == (
            "resumes/resume_1_ab/Ada_Resume.pdf"
        )

    def test_build_key_without_prefix(self, tmp_path, sleep):
        uploader = _uploader(tmp_path, FakeProvider(), sleep, key_prefix="")
        assert uploader.build_key("r", "a.pdf") == "r/a.pdf"


class TestUpload:
    """Tests for StorageUploader.upload."""

    @pytest.mark.asyncio
    async def test_first_attempt_succeeds(self, tmp_path, sleep, artifact):
        provider = FakeProvider()
        result = await _uploader(tmp_path, provider, sleep).upload(artifact, "resumes/a.pdf")

        assert result.success is True
        assert result.url == "https://cdn.test/resumes/a.pdf"
        assert result.attempts == 1
        sleep.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_retries_with_exponential_backoff(self, tmp_path, sleep, artifact):
        provider = FakeProvider(failures=2)
        result = await _uploader(tmp_path, provider, sleep, max_attempts=4).upload(
            artifact, "k.pdf"
        )

        assert result.success is True
        assert result.attempts == 3
        assert [call.args[0] for call in sleep.await_args_list] == [1.0, 2.0]

    @pytest.mark.asyncio
    async def test_persistent_failure_returns_failed_result(self, tmp_path, sleep, artifact):
        provider = FakeProvider(failures=10)
        result = await _uploader(tmp_path, provider, sleep).upload(artifact, "resumes/a.pdf")

        assert result.success is False
        assert result.key == "resumes/a.pdf"
        assert result.attempts == 3
        assert "503" in result.error
        assert provider.calls == 3
        assert [call.args[0] for call in sleep.await_args_list] == [1.0, 2.0]

    @pytest.mark.asyncio
    async def test_max_attempts_override(self, tmp_path, sleep, artifact):
        provider = FakeProvider(failures=10)
        result = await _uploader(tmp_path, provider, sleep).upload(artifact, "k", max_attempts=1)

        assert result.success is False
        assert provider.calls == 1
        sleep.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unconfigured_fails_fast(self, tmp_path, sleep, artifact):
        provider = FakeProvider(configured=False)
        result = await _uploader(tmp_path, provider, sleep).upload(artifact, "k")

        assert result.success is False
        assert result.attempts == 0
        assert provider.calls == 0

    @pytest.mark.asyncio
    async def test_unexpected_error_never_raises(self, tmp_path, sleep, artifact):
        provider = FakeProvider(failures=1, error=RuntimeError("bug"))
        result = await _uploader(tmp_path, provider, sleep).upload(artifact, "k")

        assert result.success is False
        assert result.error == "bug"
        assert provider.calls == 1


class TestFallback:
    """Tests for local fallback and deletion."""

    @pytest.mark.asyncio
    async def test_store_uses_fallback_after_failure(self, tmp_path, sleep, artifact):
        uploader = _uploader(tmp_path, FakeProvider(failures=10), sleep)

        result, is_fallback = await uploader.store(artifact, "resumes/r/a.pdf")

        assert is_fallback is True
        assert result.url == "http://localhost:3001/uploads/resumes/r/a.pdf"
        assert (tmp_path / "resumes" / "r" / "a.pdf").read_bytes() == artifact.data

    @pytest.mark.asyncio
    async def test_store_prefers_cloud(self, tmp_path, sleep, artifact):
        uploader = _uploader(tmp_path, FakeProvider(), sleep)

        result, is_fallback = await uploader.store(artifact, "resumes/r/a.pdf")

        assert is_fallback is False
        assert result.provider == "fake"
        assert not (tmp_path / "resumes").exists()

    @pytest.mark.asyncio
    async def test_delete_is_idempotent(self, tmp_path, sleep, artifact):
        provider = FakeProvider()
        uploader = _uploader(tmp_path, provider, sleep)

        assert await uploader.delete("resumes/r/a.pdf") is True
        assert await uploader.delete("resumes/r/a.pdf") is True
        assert provider.deleted == ["resumes/r/a.pdf", "resumes/r/a.pdf"]

    @pytest.mark.asyncio
    async def test_delete_local_only_when_unconfigured(self, tmp_path, sleep, artifact):
        provider = FakeProvider(configured=False)
        uploader = _uploader(tmp_path, provider, sleep)
        await uploader.fallback(artifact, "resumes/r/a.pdf")

        assert await uploader.delete("resumes/r/a.pdf") is True
        assert provider.deleted == []
        assert not (tmp_path / "resumes" / "r" / "a.pdf").exists()

    @pytest.mark.asyncio
    async def test_delete_of_escaping_key_returns_false(self, tmp_path, sleep):
        provider = FakeProvider()
        uploader = _uploader(tmp_path, provider, sleep)

        assert await uploader.delete("../../etc/passwd") is False
        assert provider.deleted == []
