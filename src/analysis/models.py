"""Data models for job description analysis."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class JobLevel(str, Enum):
    """Seniority level inferred from a job posting."""

    ENTRY = "entry"
    MID = "mid"
    SENIOR = "senior"


def _dedupe(values: list[str]) -> tuple[str, ...]:
    seen: set[str] = set()
    result: list[str] = []
    for value in values:
        cleaned = str(value).strip()
        key = cleaned.lower()
        if cleaned and key not in seen:
            seen.add(key)
            result.append(cleaned)
    return tuple(result)


class RequirementProfile(BaseModel):
    """Structured requirements extracted from a job description.

    Instances are frozen and every list field is a tuple. Skill lists
    behave as ordered sets (first occurrence wins, compared
    case-insensitively).
    """

    model_config = ConfigDict(frozen=True)

    required_skills: tuple[str, ...] = Field(
        default=(), description="Skills the role requires"
    )
    preferred_skills: tuple[str, ...] = Field(
        default=(), description="Nice-to-have skills"
    )
    job_level: JobLevel = Field(default=JobLevel.MID, description="Seniority level")
    industry: str = Field(default="technology", description="Industry of the role")
    responsibilities: tuple[str, ...] = Field(
        default=(), description="Key responsibilities"
    )
    qualifications: tuple[str, ...] = Field(
        default=(), description="Required qualifications"
    )
    title: str = Field(default="Job Application", description="Job title")

    @field_validator("required_skills", "preferred_skills", mode="before")
    @classmethod
    def dedupe_skills(cls, v: object) -> tuple[str, ...]:
        if v is None:
            return ()
        if isinstance(v, str):
            v = [part for part in v.split(",")]
        return _dedupe(list(v))

    @field_validator("responsibilities", "qualifications", mode="before")
    @classmethod
    def coerce_string_list(cls, v: object) -> tuple[str, ...]:
        if v is None:
            return ()
        if isinstance(v, str):
            return (v.strip(),) if v.strip() else ()
        return tuple(str(item).strip() for item in v if str(item).strip())

    @field_validator("job_level", mode="before")
    @classmethod
    def normalize_level(cls, v: object) -> object:
        if isinstance(v, str):
            value = v.strip().lower()
            if value in {"junior", "entry-level", "entry level", "graduate", "intern"}:
                return JobLevel.ENTRY
            if value in {"lead", "principal", "staff", "senior-level"}:
                return JobLevel.SENIOR
            if value in {"middle", "intermediate", "mid-level"}:
                return JobLevel.MID
            return value
        return v

    @field_validator("industry", "title", mode="before")
    @classmethod
    def strip_text(cls, v: object) -> object:
        if isinstance(v, str):
            return v.strip()
        return v

    def to_dict(self) -> dict:
        """Serialize to a dictionary."""
        return self.model_dump(mode="json")

    @classmethod
    def from_dict(cls, data: dict) -> RequirementProfile:
        """Deserialize from a dictionary."""
        return cls.model_validate(data)
