"""Resume generation pipeline.

Orchestrates analysis, profile lookup, tailoring, rendering, upload and
history recording for one request.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime

from src.analysis.analyzer import job_description_hash
from src.analysis.models import RequirementProfile
from src.analysis.service import JobAnalysisService
from src.artifacts.models import ArtifactMetadata
from src.artifacts.recorder import ArtifactRecorder, generate_artifact_id
from src.artifacts.repository import ArtifactRepository
from src.config.settings import Settings, get_settings
from src.errors import NotFoundError
from src.profiles.models import normalize_phone
from src.profiles.provider import DirectoryProfileProvider, ProfileDataProvider
from src.rendering.models import RenderArtifact
from src.rendering.pipeline import RenderingPipeline
from src.storage.models import UploadResult
from src.storage.uploader import StorageUploader
from src.tailoring.engine import ResumeTailoringEngine
from src.tailoring.models import ResumeDocument

logger = logging.getLogger(__name__)


@dataclass
class PipelineResult:
    """Result of a completed pipeline run."""

    document: ResumeDocument
    requirements: RequirementProfile
    artifact: RenderArtifact
    url: str
    file_name: str
    artifact_id: str
    upload: UploadResult
    used_fallback_url: bool = False
    recorded: bool = False
    duration_seconds: float = 0.0
    completed_at: datetime = field(default_factory=datetime.now)


class ResumePipeline:
    """Runs a job description and an identity through to a delivered artifact.

    Raises NotFoundError when no profile matches and RenderError when every
    rendering strategy fails. Upload and recording problems are logged and
    absorbed.
    """

    def __init__(
        self,
        analysis: JobAnalysisService,
        profiles: ProfileDataProvider,
        renderer: RenderingPipeline,
        uploader: StorageUploader,
        recorder: ArtifactRecorder | None = None,
        engine: ResumeTailoringEngine | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.analysis = analysis
        self.profiles = profiles
        self.renderer = renderer
        self.uploader = uploader
        self.recorder = recorder
        self.engine = engine or ResumeTailoringEngine()
        self._clock = clock

    async def run(
        self,
        email: str | None,
        phone: str | None,
        job_description: str,
        display_name: str | None = None,
    ) -> PipelineResult:
        """Generate, store and record a tailored resume.

        Args:
            email: Candidate email used for the profile lookup.
            phone: Candidate phone, used when no email matches.
            job_description: Raw job posting text.
            display_name: Chat display name, for logging only.

        Returns:
            PipelineResult describing the delivered artifact.
        """
        started = time.monotonic()
        who = email or normalize_phone(phone) or "unknown"
        logger.info(f"Generating resume for {who} ({display_name or 'no display name'})")

        requirements = await self.analysis.analyze(job_description)
        logger.info(
            f"Job analysis: {len(requirements.required_skills)} required, "
            f"{len(requirements.preferred_skills)} preferred skills, "
            f"level={requirements.job_level.value}"
        )

        profile = await self.profiles.find_by_identity(email=email, phone=phone)
        if profile is None:
            raise NotFoundError(
                f"No candidate profile for {who}",
                email=email,
                phone=normalize_phone(phone) or None,
            )

        now = self._clock()
        document = self.engine.tailor(profile, requirements, now=now)
        artifact = await self.renderer.render(document)

        file_name = document.file_name(now)
        artifact_id = generate_artifact_id(now)
        key = self.uploader.build_key(artifact_id, file_name)
        upload, used_fallback = await self.uploader.store(artifact, key)
        url = upload.url or self.uploader.fallback_url(key)

        recorded = False
        if self.recorder is not None:
            metadata = ArtifactMetadata(
                file_name=file_name,
                url=url,
                storage_key=key,
                mime_type=artifact.mime_type,
                size_bytes=artifact.size_bytes,
                job_title=requirements.title,
                job_description_hash=job_description_hash(job_description),
                artifact_id=artifact_id,
                data=artifact.data,
            )
            try:
                await self.recorder.record(metadata, document, profile.id or who)
                recorded = True
            except Exception as e:
                logger.error(f"Failed to record artifact {artifact_id}: {e}")

        duration = time.monotonic() - started
        logger.info(
            f"Resume {file_name} ready via '{artifact.strategy}' in {duration:.1f}s"
            + (" (fallback URL)" if used_fallback else "")
        )
        return PipelineResult(
            document=document,
            requirements=requirements,
            artifact=artifact,
            url=url,
            file_name=file_name,
            artifact_id=artifact_id,
            upload=upload,
            used_fallback_url=used_fallback,
            recorded=recorded,
            duration_seconds=duration,
        )


async def build_pipeline(
    settings: Settings | None = None,
    profiles: ProfileDataProvider | None = None,
) -> tuple[ResumePipeline, ArtifactRepository]:
    """Wire the pipeline from configuration.

    Returns the pipeline and the artifact repository, which the caller
    must close.
    """
    settings = settings or get_settings()
    repository = ArtifactRepository(settings.artifact_db_path)
    await repository.initialize()

    uploader = StorageUploader()
    pipeline = ResumePipeline(
        analysis=JobAnalysisService(),
        profiles=profiles or DirectoryProfileProvider(settings.profiles_dir),
        renderer=RenderingPipeline.default(),
        uploader=uploader,
        recorder=ArtifactRecorder(repository, storage=uploader),
    )
    return pipeline, repository
