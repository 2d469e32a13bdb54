"""Candidate profiles and profile providers.

Public API:
- CandidateProfile (and its entry models): tailoring input
- ProfileDataProvider: lookup protocol
- DirectoryProfileProvider / InMemoryProfileProvider: implementations
"""

from src.profiles.models import (
    CandidateEducation,
    CandidateExperience,
    CandidateProfile,
    CandidateProject,
    CandidateSkill,
    normalize_phone,
)
from src.profiles.provider import (
    DirectoryProfileProvider,
    InMemoryProfileProvider,
    ProfileDataProvider,
    phones_match,
)

__all__ = [
    "CandidateProfile",
    "CandidateSkill",
    "CandidateExperience",
    "CandidateEducation",
    "CandidateProject",
    "ProfileDataProvider",
    "DirectoryProfileProvider",
    "InMemoryProfileProvider",
    "normalize_phone",
    "phones_match",
]
