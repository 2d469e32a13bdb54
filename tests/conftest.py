"""Pytest configuration and shared fixtures."""

from datetime import date
from unittest.mock import AsyncMock

import pytest

from src.analysis.config import AnalysisConfig
from src.analysis.models import JobLevel, RequirementProfile
from src.analysis.service import JobAnalysisService
from src.artifacts.config import ArtifactConfig
from src.artifacts.recorder import ArtifactRecorder
from src.artifacts.repository import ArtifactRepository
from src.errors import UploadError
from src.pipeline.service import ResumePipeline
from src.profiles.models import CandidateProfile
from src.profiles.provider import InMemoryProfileProvider
from src.rendering.minimal import MinimalStrategy
from src.rendering.pipeline import RenderingPipeline
from src.storage.config import StorageConfig
from src.storage.provider import LocalStorageProvider
from src.storage.uploader import StorageUploader
from src.tailoring.models import (
    EducationEntry,
    ExperienceEntry,
    PersonalInfo,
    PrioritizedSkill,
    ProjectEntry,
    ResumeDocument,
    SkillPriority,
)

SAMPLE_JOB_DESCRIPTION = """Senior Backend Engineer

We are a fintech company building payment infrastructure.

Responsibilities:
- Design and build Python services on AWS
- Own CI/CD pipelines and Docker images
- Mentor engineers on the team

Requirements:
- 5+ years of Python and SQL
- Experience with Docker and Kubernetes
- Familiarity with React is a plus
"""


@pytest.fixture
def sample_job_description() -> str:
    """A realistic job description that clears the minimum length."""
    return SAMPLE_JOB_DESCRIPTION


@pytest.fixture
def sample_requirements() -> RequirementProfile:
    """Requirements as produced by analysis of a backend role."""
    return RequirementProfile(
        required_skills=["Python", "SQL", "Docker"],
        preferred_skills=["Kubernetes", "React"],
        job_level=JobLevel.SENIOR,
        industry="finance",
        title="Senior Backend Engineer",
    )


@pytest.fixture
def sample_profile() -> CandidateProfile:
    """A candidate with experience, education and projects."""
    return CandidateProfile.from_dict(
        {
            "first_name": "Ada",
            "last_name": "Lovelace",
            "email": "ada@example.com",
            "phone": "+1 (555) 010-2030",
            "location": "London",
            "skills": ["Python", "Docker", "Excel", "SQL", "Rust"],
            "experience": [
                {
                    "title": "Backend Engineer",
                    "company": "Analytical Engines",
                    "start_date": "2019-01",
                    "end_date": "2023-01",
                    "description": "Built data services.",
                }
            ],
            "education": [
                {
                    "degree": "BSc",
                    "field": "Mathematics",
                    "institution": "University of London",
                    "end_date": "2018-06",
                }
            ],
            "projects": [
                {
                    "name": "Difference Engine",
                    "description": "Mechanical calculator",
                    "technologies": "Python, SQL",
                }
            ],
        }
    )


@pytest.fixture
def resume_document() -> ResumeDocument:
    """A fully populated tailored resume."""
    return ResumeDocument(
        personal_info=PersonalInfo(
            first_name="Ada",
            last_name="Lovelace",
            email="ada@example.com",
            phone="+15550102030",
            location="London",
        ),
        summary="Senior professional with 4 years of experience in finance.",
        skills=(
            PrioritizedSkill(name="Python", priority=SkillPriority.HIGH),
            PrioritizedSkill(name="Docker", priority=SkillPriority.HIGH),
            PrioritizedSkill(name="Excel", priority=SkillPriority.LOW),
        ),
        experience=(
            ExperienceEntry(
                title="Backend Engineer",
                company="Analytical Engines",
                start_date=date(2019, 1, 1),
                end_date=date(2023, 1, 1),
                description="Built data services (batch & streaming).",
            ),
        ),
        education=(
            EducationEntry(
                degree="BSc",
                field="Mathematics",
                institution="University of London",
                end_date=date(2018, 6, 1),
            ),
        ),
        projects=(
            ProjectEntry(
                name="Difference Engine",
                description="Mechanical calculator",
                technologies=("Python", "SQL"),
            ),
        ),
        target_title="Senior Backend Engineer",
    )


class StubCloudProvider:
    """Cloud provider that stores objects in memory, or fails when told to."""

    name = "stub"

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.objects: dict[str, bytes] = {}

    @property
    def is_configured(self) -> bool:
        return True

    async def put(self, key, data, content_type):
        if self.fail:
            raise UploadError("HTTP 503")
        self.objects[key] = data
        return f"https://cdn.test/{key}"

    async def delete(self, key):
        return self.objects.pop(key, None) is not None


@pytest.fixture
async def make_pipeline(tmp_path):
    """Factory for a fully wired ResumePipeline that never leaves the process.

    Analysis is keyword-only, rendering uses the built-in minimal writer and
    uploads go to an in-memory provider (or fail, with ``upload_fails``).
    Repositories opened by the factory are closed on teardown.
    """
    repositories: list[ArtifactRepository] = []

    async def factory(profiles, upload_fails=False, renderer=None, record=True):
        recorder = None
        uploader = StorageUploader(
            config=StorageConfig(_env_file=None, max_attempts=2, key_prefix="resumes"),
            provider=StubCloudProvider(fail=upload_fails),
            local=LocalStorageProvider(tmp_path / "uploads", "http://localhost:3001"),
            sleep=AsyncMock(),
        )
        if record:
            repository = ArtifactRepository(tmp_path / "artifacts.db")
            await repository.initialize()
            repositories.append(repository)
            recorder = ArtifactRecorder(
                repository, config=ArtifactConfig(_env_file=None), storage=uploader
            )
        return ResumePipeline(
            analysis=JobAnalysisService(config=AnalysisConfig(_env_file=None, llm_enabled=False)),
            profiles=InMemoryProfileProvider(profiles),
            renderer=renderer or RenderingPipeline([MinimalStrategy(timeout=5.0)]),
            uploader=uploader,
            recorder=recorder,
        )

    yield factory

    for repository in repositories:
        await repository.close()
