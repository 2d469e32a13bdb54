"""Candidate profile providers.

A provider resolves an identity (email and/or phone) to a CandidateProfile.
Account registration and persistence belong to another system; these
providers only read.
"""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Protocol, runtime_checkable

import yaml
from pydantic import ValidationError

from src.profiles.models import CandidateProfile, normalize_phone

logger = logging.getLogger(__name__)

# Phone numbers are compared on their trailing digits so "+1 (555) 010-1234"
# and "5550101234" resolve to the same candidate.
PHONE_MATCH_DIGITS = 10


def phones_match(left: str | None, right: str | None) -> bool:
    """Compare two phone identities on their trailing digits."""
    a = normalize_phone(left)
    b = normalize_phone(right)
    if not a or not b:
        return False
    return a[-PHONE_MATCH_DIGITS:] == b[-PHONE_MATCH_DIGITS:]


@runtime_checkable
class ProfileDataProvider(Protocol):
    """Looks up candidate profiles by identity."""

    async def find_by_identity(
        self, email: str | None = None, phone: str | None = None
    ) -> CandidateProfile | None:
        """Return the matching profile, or None when the identity is unknown."""
        ...


def _matches(profile: CandidateProfile, email: str | None, phone: str | None) -> bool:
    if email and profile.email and profile.email.lower() == email.strip().lower():
        return True
    return bool(phone) and phones_match(profile.phone, phone)


class InMemoryProfileProvider:
    """Profile provider over an in-process list of profiles."""

    def __init__(self, profiles: list[CandidateProfile] | None = None):
        self._profiles: list[CandidateProfile] = list(profiles or [])

    def add(self, profile: CandidateProfile) -> None:
        self._profiles.append(profile)

    async def find_by_identity(
        self, email: str | None = None, phone: str | None = None
    ) -> CandidateProfile | None:
        # Email matches take precedence over phone matches
        if email:
            for profile in self._profiles:
                if _matches(profile, email, None):
                    return profile
        if phone:
            for profile in self._profiles:
                if _matches(profile, None, phone):
                    return profile
        return None


class DirectoryProfileProvider:
    """Profile provider reading YAML/JSON profile files from a directory.

    Files are re-read when their modification time changes, so profiles can
    be edited while the service is running.
    """

    SUFFIXES = {".yaml", ".yml", ".json"}

    def __init__(self, directory: Path | str):
        self.directory = Path(directory)
        self._cache: dict[Path, tuple[float, CandidateProfile | None]] = {}

    def load_profile(self, path: Path | str) -> CandidateProfile:
        """Load and validate a single profile file.

        Raises:
            FileNotFoundError: If the file does not exist.
            ValueError: If the file is not a valid profile mapping.
        """
        profile_path = Path(path)
        if not profile_path.exists():
            raise FileNotFoundError(f"Profile not found: {profile_path}")

        if profile_path.suffix.lower() == ".json":
            data = self._load_json(profile_path)
        else:
            data = self._load_yaml(profile_path)

        try:
            return CandidateProfile.model_validate(data)
        except ValidationError as e:
            raise ValueError(f"Invalid profile {profile_path}: {e}") from e

    def iter_profiles(self) -> list[CandidateProfile]:
        """Load every valid profile in the directory (invalid files are skipped)."""
        if not self.directory.is_dir():
            logger.warning(f"Profiles directory does not exist: {self.directory}")
            return []

        profiles: list[CandidateProfile] = []
        for path in sorted(self.directory.iterdir()):
            if path.suffix.lower() not in self.SUFFIXES or not path.is_file():
                continue
            profile = self._cached_load(path)
            if profile is not None:
                profiles.append(profile)
        return profiles

    async def find_by_identity(
        self, email: str | None = None, phone: str | None = None
    ) -> CandidateProfile | None:
        profiles = await asyncio.to_thread(self.iter_profiles)
        return await InMemoryProfileProvider(profiles).find_by_identity(email, phone)

    def _cached_load(self, path: Path) -> CandidateProfile | None:
        mtime = path.stat().st_mtime
        cached = self._cache.get(path)
        if cached is not None and cached[0] == mtime:
            return cached[1]

        try:
            profile: CandidateProfile | None = self.load_profile(path)
        except ValueError as e:
            logger.warning(f"Skipping profile file: {e}")
            profile = None

        self._cache[path] = (mtime, profile)
        return profile

    def _load_yaml(self, path: Path) -> dict:
        try:
            with path.open("r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML profile: {path}") from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ValueError(f"Profile must be a mapping/dict: {path}")
        return data

    def _load_json(self, path: Path) -> dict:
        try:
            with path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON profile: {path}") from e

        if not isinstance(data, dict):
            raise ValueError(f"Profile must be a mapping/dict: {path}")
        return data
