"""Tests for the resume generation pipeline."""

from datetime import datetime
from unittest.mock import AsyncMock

import pytest

from src.errors import NotFoundError, RenderError
from src.rendering.base import RenderStrategy
from src.rendering.pipeline import RenderingPipeline


class FailingStrategy(RenderStrategy):
    name = "broken"

    async def render(self, document):
        raise RuntimeError("renderer offline")


class TestResumePipeline:
    """Tests for ResumePipeline.run."""

    @pytest.mark.asyncio
    async def test_generates_uploads_and_records(
        self, make_pipeline, sample_profile, sample_job_description
    ):
        pipeline = await make_pipeline([sample_profile])

        result = await pipeline.run(
            email="ada@example.com", phone=None, job_description=sample_job_description
        )

        assert result.artifact.looks_like_pdf()
        assert result.url.startswith("https://cdn.test/resumes/")
        assert result.url.endswith(result.file_name)
        assert result.used_fallback_url is False
        assert result.recorded is True
        assert result.requirements.title == "Senior Backend Engineer"

        records = await pipeline.recorder.list_by_owner(sample_profile.id or "ada@example.com")
        assert [r.artifact_id for r in records] == [result.artifact_id]
        assert records[0].url == result.url

    @pytest.mark.asyncio
    async def test_tailors_skills_to_job(
        self, make_pipeline, sample_profile, sample_job_description
    ):
        pipeline = await make_pipeline([sample_profile], record=False)

        result = await pipeline.run(
            email=None, phone="5550102030", job_description=sample_job_description
        )

        assert result.document.skills[0].name == "Python"
        assert result.document.target_title == "Senior Backend Engineer"
        assert result.recorded is False

    @pytest.mark.asyncio
    async def test_unknown_identity_raises_not_found(self, make_pipeline, sample_job_description):
        pipeline = await make_pipeline([])

        with pytest.raises(NotFoundError) as exc_info:
            await pipeline.run(
                email="nobody@example.com",
                phone="+1 555 000 0000",
                job_description=sample_job_description,
            )

        assert exc_info.value.email == "nobody@example.com"
        assert exc_info.value.phone == "15550000000"

    @pytest.mark.asyncio
    async def test_upload_failure_uses_fallback_url(
        self, make_pipeline, sample_profile, sample_job_description
    ):
        pipeline = await make_pipeline([sample_profile], upload_fails=True)

        result = await pipeline.run(
            email="ada@example.com", phone=None, job_description=sample_job_description
        )

        assert result.used_fallback_url is True
        assert result.url.startswith("http://localhost:3001/uploads/resumes/")
        assert result.upload.provider == "local"

    @pytest.mark.asyncio
    async def test_render_failure_propagates(
        self, make_pipeline, sample_profile, sample_job_description
    ):
        pipeline = await make_pipeline(
            [sample_profile], renderer=RenderingPipeline([FailingStrategy(timeout=1.0)])
        )

        with pytest.raises(RenderError) as exc_info:
            await pipeline.run(
                email="ada@example.com", phone=None, job_description=sample_job_description
            )

        assert exc_info.value.failures[0][0] == "broken"

    @pytest.mark.asyncio
    async def test_recording_failure_is_not_fatal(
        self, make_pipeline, sample_profile, sample_job_description
    ):
        pipeline = await make_pipeline([sample_profile])
        pipeline.recorder.record = AsyncMock(side_effect=RuntimeError("database locked"))

        result = await pipeline.run(
            email="ada@example.com", phone=None, job_description=sample_job_description
        )

        assert result.recorded is False
        assert result.url

    @pytest.mark.asyncio
    async def test_file_name_uses_clock(
        self, make_pipeline, sample_profile, sample_job_description
    ):
        pipeline = await make_pipeline([sample_profile], record=False)
        pipeline._clock = lambda: datetime(2024, 3, 1, 9, 30, 0)

        result = await pipeline.run(
            email="ada@example.com", phone=None, job_description=sample_job_description
        )

        assert "20240301_093000" in result.file_name
        assert result.artifact_id.startswith("resume_")
