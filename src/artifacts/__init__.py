"""Artifact history module for rendered resumes."""

from src.artifacts.config import ArtifactConfig, get_artifact_config, reset_artifact_config
from src.artifacts.models import ArtifactMetadata, ArtifactRecord, OwnerStats
from src.artifacts.recorder import ArtifactRecorder, generate_artifact_id
from src.artifacts.repository import ArtifactRepository

__all__ = [
    "ArtifactConfig",
    "ArtifactMetadata",
    "ArtifactRecord",
    "ArtifactRecorder",
    "ArtifactRepository",
    "OwnerStats",
    "generate_artifact_id",
    "get_artifact_config",
    "reset_artifact_config",
]
