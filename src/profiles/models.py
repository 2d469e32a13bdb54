"""Candidate profile models.

Profiles arrive from loosely structured sources (YAML files, JSON exports,
other services). The validators here fill defaults and coerce shapes at
the boundary so tailoring code never has to branch on input format.
"""

from __future__ import annotations

import re
from datetime import date, datetime
from typing import Any

from pydantic import AliasChoices, BaseModel, Field, field_validator, model_validator

_PRESENT_WORDS = {"present", "current", "now", "ongoing", "today"}


def normalize_phone(value: str | None) -> str:
    """Strip everything but digits from a phone identity."""
    if not value:
        return ""
    return re.sub(r"\D", "", str(value))


def parse_loose_date(value: Any) -> date | None:
    """Parse ``YYYY-MM-DD``, ``YYYY-MM`` or ``YYYY`` strings (and dates).

    Words like "present" and unparseable values become ``None``.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, int):
        return date(value, 1, 1) if 1900 <= value <= 2100 else None

    text = str(value).strip()
    if text.lower() in _PRESENT_WORDS:
        return None

    for fmt in ("%Y-%m-%d", "%Y-%m", "%Y/%m/%d", "%Y/%m", "%m/%Y", "%Y"):
        try:
            return datetime.strptime(text[:10], fmt).date()
        except ValueError:
            continue
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        return None


def _is_present(value: Any) -> bool:
    return isinstance(value, str) and value.strip().lower() in _PRESENT_WORDS


class CandidateSkill(BaseModel):
    """A skill listed on the candidate's profile."""

    name: str = Field(..., description="Skill name")
    level: str | None = Field(default=None, description="Self-assessed level")
    category: str | None = Field(default=None, description="Skill category")

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v: Any) -> str:
        return str(v).strip()


class CandidateExperience(BaseModel):
    """Work experience entry."""

    title: str = Field(default="", description="Job title")
    company: str = Field(default="", description="Company name")
    location: str | None = Field(default=None, description="Location")
    start_date: date | None = Field(
        default=None,
        validation_alias=AliasChoices("start_date", "startDate", "start"),
        description="Start date",
    )
    end_date: date | None = Field(
        default=None,
        validation_alias=AliasChoices("end_date", "endDate", "end"),
        description="End date (None while current)",
    )
    description: str = Field(default="", description="Role description")
    is_current: bool = Field(
        default=False,
        validation_alias=AliasChoices("is_current", "isCurrentJob", "current"),
        description="Whether this is the candidate's current job",
    )

    @model_validator(mode="before")
    @classmethod
    def mark_present_end_dates(cls, data: Any) -> Any:
        if isinstance(data, dict):
            end = data.get("end_date", data.get("endDate", data.get("end")))
            if _is_present(end):
                data = {**data, "is_current": True}
                for key in ("end_date", "endDate", "end"):
                    data.pop(key, None)
        return data

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def parse_dates(cls, v: Any) -> date | None:
        return parse_loose_date(v)

    @field_validator("title", "company", "description", mode="before")
    @classmethod
    def none_to_empty(cls, v: Any) -> str:
        return "" if v is None else str(v).strip()


class CandidateEducation(BaseModel):
    """Education entry."""

    degree: str = Field(default="", description="Degree")
    field: str = Field(
        default="",
        validation_alias=AliasChoices("field", "field_of_study", "fieldOfStudy"),
        description="Field of study",
    )
    institution: str = Field(default="", description="Institution name")
    start_date: date | None = Field(
        default=None,
        validation_alias=AliasChoices("start_date", "startDate"),
        description="Start date",
    )
    end_date: date | None = Field(
        default=None,
        validation_alias=AliasChoices("end_date", "endDate", "graduation_year"),
        description="End or graduation date",
    )
    gpa: str | None = Field(default=None, description="Grade point average")
    is_completed: bool = Field(
        default=True,
        validation_alias=AliasChoices("is_completed", "isCompleted", "completed"),
        description="Whether the program is finished",
    )

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def parse_dates(cls, v: Any) -> date | None:
        return parse_loose_date(v)

    @field_validator("gpa", mode="before")
    @classmethod
    def gpa_to_text(cls, v: Any) -> str | None:
        if v is None or v == "":
            return None
        return str(v)

    @field_validator("degree", "field", "institution", mode="before")
    @classmethod
    def none_to_empty(cls, v: Any) -> str:
        return "" if v is None else str(v).strip()


class CandidateProject(BaseModel):
    """Project entry."""

    name: str = Field(default="", description="Project name")
    description: str = Field(default="", description="What the project does")
    technologies: list[str] = Field(
        default_factory=list, description="Technologies used"
    )

    @field_validator("technologies", mode="before")
    @classmethod
    def split_technologies(cls, v: Any) -> list[str]:
        if v is None:
            return []
        if isinstance(v, str):
            v = v.split(",")
        return [str(item).strip() for item in v if str(item).strip()]

    @field_validator("name", "description", mode="before")
    @classmethod
    def none_to_empty(cls, v: Any) -> str:
        return "" if v is None else str(v).strip()


class CandidateProfile(BaseModel):
    """Candidate data used as input to tailoring."""

    id: str = Field(default="", description="Owner identifier for artifacts")
    first_name: str = Field(
        default="",
        validation_alias=AliasChoices("first_name", "firstName"),
        description="First name",
    )
    last_name: str = Field(
        default="",
        validation_alias=AliasChoices("last_name", "lastName"),
        description="Last name",
    )
    email: str = Field(default="", description="Contact email")
    phone: str = Field(
        default="",
        validation_alias=AliasChoices("phone", "phone_number", "phoneNumber"),
        description="Contact phone",
    )
    linkedin: str | None = Field(
        default=None,
        validation_alias=AliasChoices("linkedin", "linkedin_url", "linkedinUrl"),
        description="LinkedIn profile URL",
    )
    github: str | None = Field(
        default=None,
        validation_alias=AliasChoices("github", "github_url", "githubUrl"),
        description="GitHub profile URL",
    )
    location: str | None = Field(default=None, description="Current location")

    skills: list[CandidateSkill] = Field(default_factory=list, description="Skills")
    experience: list[CandidateExperience] = Field(
        default_factory=list,
        validation_alias=AliasChoices("experience", "work_history", "experiences"),
        description="Work history",
    )
    education: list[CandidateEducation] = Field(
        default_factory=list, description="Education history"
    )
    projects: list[CandidateProject] = Field(
        default_factory=list, description="Projects"
    )

    @model_validator(mode="before")
    @classmethod
    def split_full_name(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("name"):
            has_first = data.get("first_name") or data.get("firstName")
            if not has_first:
                first, _, last = str(data["name"]).strip().partition(" ")
                data = {**data, "first_name": first, "last_name": last.strip()}
        return data

    @field_validator("skills", mode="before")
    @classmethod
    def coerce_skills(cls, v: Any) -> list[Any]:
        if v is None:
            return []
        if isinstance(v, str):
            v = v.split(",")
        items = []
        for item in v:
            if isinstance(item, str):
                if item.strip():
                    items.append({"name": item})
            elif isinstance(item, dict) and str(item.get("name") or "").strip():
                items.append(item)
            elif isinstance(item, CandidateSkill):
                items.append(item)
        return items

    @field_validator("experience", "education", "projects", mode="before")
    @classmethod
    def none_to_list(cls, v: Any) -> Any:
        return [] if v is None else v

    @field_validator("first_name", "last_name", "email", "phone", mode="before")
    @classmethod
    def none_to_empty(cls, v: Any) -> str:
        return "" if v is None else str(v).strip()

    @model_validator(mode="after")
    def default_id(self) -> CandidateProfile:
        if not self.id:
            self.id = self.email.lower() or normalize_phone(self.phone)
        return self

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def to_dict(self) -> dict:
        """Serialize to a dictionary."""
        return self.model_dump(mode="json")

    @classmethod
    def from_dict(cls, data: dict) -> CandidateProfile:
        """Deserialize from a dictionary."""
        return cls.model_validate(data)
