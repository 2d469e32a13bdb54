"""Data models for tailored resumes.

A ResumeDocument is produced once per tailoring call and never mutated;
re-tailoring creates a new instance. Collections are tuples so that the
frozen models are immutable all the way down.
"""

from __future__ import annotations

import re
from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class SkillPriority(str, Enum):
    """How strongly a skill matches the target job."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class PersonalInfo(BaseModel):
    """Contact block at the top of the resume."""

    model_config = ConfigDict(frozen=True)

    first_name: str = Field(..., description="First name")
    last_name: str = Field(default="", description="Last name")
    email: str = Field(default="", description="Contact email")
    phone: str = Field(default="", description="Contact phone")
    linkedin: str | None = Field(default=None, description="LinkedIn URL")
    github: str | None = Field(default=None, description="GitHub URL")
    location: str | None = Field(default=None, description="Location")

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def contact_items(self) -> list[str]:
        """Non-empty contact fields in display order."""
        values = [self.email, self.phone, self.location, self.linkedin, self.github]
        return [value for value in values if value]


class PrioritizedSkill(BaseModel):
    """A candidate skill ranked against the job requirements."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Skill name as the candidate lists it")
    priority: SkillPriority = Field(..., description="Match priority")


class ExperienceEntry(BaseModel):
    """Work experience as shown on the resume."""

    model_config = ConfigDict(frozen=True)

    title: str = Field(..., description="Job title")
    company: str = Field(..., description="Company name")
    location: str | None = Field(default=None, description="Location")
    start_date: date | None = Field(default=None, description="Start date")
    end_date: date | None = Field(default=None, description="End date")
    description: str = Field(default="", description="Role description")
    is_current_job: bool = Field(default=False, description="Still in this role")

    def date_range(self) -> str:
        return format_date_range(self.start_date, self.end_date, self.is_current_job)


class EducationEntry(BaseModel):
    """Education as shown on the resume."""

    model_config = ConfigDict(frozen=True)

    degree: str = Field(..., description="Degree")
    field: str = Field(default="", description="Field of study")
    institution: str = Field(..., description="Institution name")
    start_date: date | None = Field(default=None, description="Start date")
    end_date: date | None = Field(default=None, description="End date")
    gpa: str | None = Field(default=None, description="Grade point average")
    is_completed: bool = Field(default=True, description="Program finished")

    @property
    def heading(self) -> str:
        return f"{self.degree} in {self.field}" if self.field else self.degree

    def date_range(self) -> str:
        return format_date_range(self.start_date, self.end_date, not self.is_completed)


class ProjectEntry(BaseModel):
    """Project as shown on the resume."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Project name")
    description: str = Field(default="", description="Project description")
    technologies: tuple[str, ...] = Field(default=(), description="Technologies used")


class ResumeDocument(BaseModel):
    """A resume tailored to one job description."""

    model_config = ConfigDict(frozen=True)

    personal_info: PersonalInfo
    summary: str = Field(default="", description="Professional summary")
    skills: tuple[PrioritizedSkill, ...] = Field(
        default=(), description="Skills, high priority first (max 12)"
    )
    experience: tuple[ExperienceEntry, ...] = Field(default=(), description="Experience")
    education: tuple[EducationEntry, ...] = Field(default=(), description="Education")
    projects: tuple[ProjectEntry, ...] = Field(default=(), description="Projects")
    target_title: str = Field(
        default="Job Application", description="Job title the resume targets"
    )

    def skills_by_priority(self) -> dict[SkillPriority, list[str]]:
        """Group skill names by priority, keeping document order."""
        groups: dict[SkillPriority, list[str]] = {p: [] for p in SkillPriority}
        for skill in self.skills:
            groups[skill.priority].append(skill.name)
        return groups

    def file_name(self, when: datetime | None = None) -> str:
        """Build the download file name, e.g. ``Ada_Lovelace_Resume_20240101_120000.pdf``."""
        stamp = (when or datetime.now()).strftime("%Y%m%d_%H%M%S")

        def sanitize(s: str) -> str:
            s = re.sub(r"[^\w\s-]", "", s, flags=re.ASCII)
            return re.sub(r"\s+", "_", s.strip())[:30]

        parts = [
            sanitize(self.personal_info.first_name),
            sanitize(self.personal_info.last_name),
        ]
        name = "_".join(part for part in parts if part) or "Candidate"
        return f"{name}_Resume_{stamp}.pdf"

    def to_dict(self) -> dict:
        """Serialize to a dictionary."""
        return self.model_dump(mode="json")

    @classmethod
    def from_dict(cls, data: dict) -> ResumeDocument:
        """Deserialize from a dictionary."""
        return cls.model_validate(data)


def format_month(value: date | None) -> str:
    return value.strftime("%b %Y") if value else ""


def format_date_range(start: date | None, end: date | None, ongoing: bool) -> str:
    """Format ``Jan 2020 - Present`` style ranges; empty when no start date."""
    if start is None:
        return format_month(end)
    finish = "Present" if ongoing or end is None else format_month(end)
    return f"{format_month(start)} - {finish}"
