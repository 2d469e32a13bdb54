"""Tests for storage providers."""

import httpx
import pytest

from src.errors import UploadError
from src.storage.config import StorageConfig
from src.storage.provider import BunnyStorageProvider, LocalStorageProvider


def _config(**overrides) -> StorageConfig:
    values = {
        "zone": "resume-zone",
        "access_key": "secret",
        "hostname": "storage.example.net",
        "cdn_url": "https://cdn.example.net/",
    }
    values.update(overrides)
    return StorageConfig(_env_file=None, **values)


def _provider(handler, **overrides) -> BunnyStorageProvider:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return BunnyStorageProvider(_config(**overrides), client=client)


class TestStorageConfig:
    """Tests for StorageConfig."""

    def test_cloud_configured(self):
        assert _config().cloud_configured is True
        assert _config(access_key=None).cloud_configured is False

    def test_missing_settings(self):
        assert _config(zone=None, cdn_url="").missing_settings() == [
            "STORAGE_ZONE",
            "STORAGE_CDN_URL",
        ]

    def test_cdn_url_trailing_slash_removed(self):
        assert _config().cdn_url == "https://cdn.example.net"


class TestBunnyStorageProvider:
    """Tests for BunnyStorageProvider."""

    @pytest.mark.asyncio
    async def test_put_sends_access_key_and_returns_cdn_url(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(201)

        url = await _provider(handler).put("resumes/r1/cv.pdf", b"%PDF", "application/pdf")

        assert url == "https://cdn.example.net/resumes/r1/cv.pdf"
        request = seen[0]
        assert request.method == "PUT"
        assert str(request.url) == "https://storage.example.net/resume-zone/resumes/r1/cv.pdf"
        assert request.headers["AccessKey"] == "secret"
        assert request.headers["Content-Type"] == "application/pdf"
        assert request.content == b"%PDF"

    @pytest.mark.asyncio
    async def test_put_rejected_raises_upload_error(self):
        provider = _provider(lambda request: httpx.Response(401))

        with pytest.raises(UploadError, match="401"):
            await provider.put("k", b"data", "application/pdf")

    @pytest.mark.asyncio
    async def test_put_timeout_raises_upload_error(self):
        def handler(request):
            raise httpx.ReadTimeout("slow", request=request)

        with pytest.raises(UploadError, match="timed out"):
            await _provider(handler).put("k", b"data", "application/pdf")

    @pytest.mark.asyncio
    async def test_put_unconfigured(self):
        provider = _provider(lambda request: httpx.Response(201), zone=None)

        with pytest.raises(UploadError, match="STORAGE_ZONE"):
            await provider.put("k", b"data", "application/pdf")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status, expected", [(200, True), (404, True), (500, False)])
    async def test_delete_status_handling(self, status, expected):
        provider = _provider(lambda request: httpx.Response(status))
        assert await provider.delete("resumes/r1/cv.pdf") is expected

    @pytest.mark.asyncio
    async def test_delete_connection_error(self):
        def handler(request):
            raise httpx.ConnectError("down", request=request)

        assert await _provider(handler).delete("k") is False

    @pytest.mark.asyncio
    async def test_connection_check(self):
        provider = _provider(lambda request: httpx.Response(200, json=[]))
        result = await provider.test_connection()
        assert result["success"] is True

    @pytest.mark.asyncio
    async def test_connection_check_unexpected_status(self):
        provider = _provider(lambda request: httpx.Response(403))
        result = await provider.test_connection()
        assert result == {"success": False, "message": "Unexpected status: 403"}


class TestLocalStorageProvider:
    """Tests for LocalStorageProvider."""

    @pytest.mark.asyncio
    async def test_put_writes_file(self, tmp_path):
        provider = LocalStorageProvider(tmp_path, "http://localhost:3001/")

        url = await provider.put("resumes/r1/cv.pdf", b"%PDF", "application/pdf")

        assert url == "http://localhost:3001/uploads/resumes/r1/cv.pdf"
        assert (tmp_path / "resumes" / "r1" / "cv.pdf").read_bytes() == b"%PDF"

    @pytest.mark.asyncio
    async def test_delete_is_idempotent(self, tmp_path):
        provider = LocalStorageProvider(tmp_path, "http://localhost:3001")
        await provider.put("a/b.pdf", b"x", "application/pdf")

        assert await provider.delete("a/b.pdf") is True
        assert await provider.delete("a/b.pdf") is True
        assert not (tmp_path / "a" / "b.pdf").exists()

    def test_rejects_escaping_keys(self, tmp_path):
        provider = LocalStorageProvider(tmp_path / "uploads", "http://localhost:3001")
        with pytest.raises(UploadError):
            provider.path_for("../outside.pdf")
