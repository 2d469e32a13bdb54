"""Resume tailoring.

Turns a candidate profile plus extracted job requirements into an
immutable ResumeDocument with prioritized skills and a generated summary.

Example:
    from src.tailoring import ResumeTailoringEngine

    document = ResumeTailoringEngine().tailor(profile, requirements)
"""

from src.tailoring.engine import ResumeTailoringEngine, prioritize_skills
from src.tailoring.models import (
    EducationEntry,
    ExperienceEntry,
    PersonalInfo,
    PrioritizedSkill,
    ProjectEntry,
    ResumeDocument,
    SkillPriority,
)

__all__ = [
    "ResumeTailoringEngine",
    "prioritize_skills",
    "ResumeDocument",
    "PersonalInfo",
    "PrioritizedSkill",
    "SkillPriority",
    "ExperienceEntry",
    "EducationEntry",
    "ProjectEntry",
]
