"""Resume tailoring engine.

Merges a CandidateProfile with a RequirementProfile into a ResumeDocument.
The engine is deterministic: the same inputs (and the same ``now``) always
produce the same document.
"""

from __future__ import annotations

import logging
from datetime import UTC, date, datetime

from src.analysis.models import JobLevel, RequirementProfile
from src.profiles.models import CandidateExperience, CandidateProfile
from src.tailoring.models import (
    EducationEntry,
    ExperienceEntry,
    PersonalInfo,
    PrioritizedSkill,
    ProjectEntry,
    ResumeDocument,
    SkillPriority,
)

logger = logging.getLogger(__name__)

MAX_SKILLS = 12
SUMMARY_MAX_SKILLS = 5
SUMMARY_MIN_SKILLS = 3

SUMMARY_CLOSING = (
    "Passionate about delivering high-quality solutions and contributing to team success."
)


def prioritize_skills(
    skill_names: list[str],
    requirements: RequirementProfile,
    limit: int = MAX_SKILLS,
) -> list[PrioritizedSkill]:
    """Rank candidate skills against the job requirements.

    Skills matching a required skill (case-insensitive) are high priority,
    those matching a preferred skill are medium, the rest low. Relative
    order within each group follows the candidate's own order.
    """
    required = {s.lower() for s in requirements.required_skills}
    preferred = {s.lower() for s in requirements.preferred_skills}

    groups: dict[SkillPriority, list[PrioritizedSkill]] = {p: [] for p in SkillPriority}
    seen: set[str] = set()
    for name in skill_names:
        key = name.strip().lower()
        if not key or key in seen:
            continue
        seen.add(key)

        if key in required:
            priority = SkillPriority.HIGH
        elif key in preferred:
            priority = SkillPriority.MEDIUM
        else:
            priority = SkillPriority.LOW
        groups[priority].append(PrioritizedSkill(name=name.strip(), priority=priority))

    ordered = (
        groups[SkillPriority.HIGH] + groups[SkillPriority.MEDIUM] + groups[SkillPriority.LOW]
    )
    return ordered[:limit]


def years_of_experience(experience: list[CandidateExperience], today: date) -> int:
    """Sum experience ranges in whole months and floor to years.

    Entries without a start date are ignored; open-ended entries run until
    ``today``.
    """
    total_months = 0
    for entry in experience:
        if entry.start_date is None:
            continue
        end = today if entry.is_current or entry.end_date is None else entry.end_date
        months = (end.year - entry.start_date.year) * 12 + (
            end.month - entry.start_date.month
        )
        total_months += max(months, 0)
    return total_months // 12


def summary_skills(skills: list[PrioritizedSkill]) -> list[str]:
    """Pick the skill names quoted in the summary.

    Up to five high-priority skills; topped up from the next-ranked skills
    when fewer than three high-priority skills exist.
    """
    names = [s.name for s in skills if s.priority == SkillPriority.HIGH][
        :SUMMARY_MAX_SKILLS
    ]
    if len(names) < SUMMARY_MIN_SKILLS:
        for skill in skills:
            if len(names) >= SUMMARY_MIN_SKILLS:
                break
            if skill.name not in names:
                names.append(skill.name)
    return names


def build_summary(
    level: JobLevel, years: int, industry: str, skill_names: list[str]
) -> str:
    """Compose the professional summary sentence."""
    summary = f"{level.value.capitalize()}-level professional"
    if years > 0:
        summary += f" with {years} year{'s' if years != 1 else ''} of experience"
    if industry:
        summary += f" in {industry}"
    if skill_names:
        summary += f". Skilled in {', '.join(skill_names)}"
    return f"{summary}. {SUMMARY_CLOSING}"


class ResumeTailoringEngine:
    """Builds ResumeDocuments from candidate data and job requirements."""

    def __init__(self, max_skills: int = MAX_SKILLS):
        self.max_skills = max_skills

    def tailor(
        self,
        profile: CandidateProfile,
        requirements: RequirementProfile,
        now: datetime | None = None,
    ) -> ResumeDocument:
        """Tailor a resume for one job.

        Args:
            profile: Candidate data. Must not be None; callers resolve
                missing profiles before tailoring.
            requirements: Requirements extracted from the job description.
            now: Reference time for "current job" ranges and placeholders.

        Returns:
            A new, immutable ResumeDocument.
        """
        today = (now or datetime.now(UTC)).date()

        skills = prioritize_skills(
            [s.name for s in profile.skills], requirements, self.max_skills
        )
        years = years_of_experience(profile.experience, today)
        summary = build_summary(
            requirements.job_level, years, requirements.industry, summary_skills(skills)
        )

        document = ResumeDocument(
            personal_info=self._personal_info(profile),
            summary=summary,
            skills=tuple(skills),
            experience=self._experience(profile, today),
            education=self._education(profile),
            projects=self._projects(profile, requirements, skills),
            target_title=requirements.title,
        )

        high = sum(1 for s in skills if s.priority == SkillPriority.HIGH)
        logger.info(
            f"Tailored resume for {profile.id or 'unknown'}: {len(skills)} skills "
            f"({high} high priority), {years} year(s) of experience"
        )
        return document

    def _personal_info(self, profile: CandidateProfile) -> PersonalInfo:
        return PersonalInfo(
            first_name=profile.first_name or "Candidate",
            last_name=profile.last_name,
            email=profile.email,
            phone=profile.phone,
            linkedin=profile.linkedin or None,
            github=profile.github or None,
            location=profile.location or None,
        )

    def _experience(
        self, profile: CandidateProfile, today: date
    ) -> tuple[ExperienceEntry, ...]:
        entries = tuple(
            ExperienceEntry(
                title=exp.title or "Professional",
                company=exp.company or "Independent",
                location=exp.location,
                start_date=exp.start_date,
                end_date=None if exp.is_current else exp.end_date,
                description=exp.description,
                is_current_job=exp.is_current,
            )
            for exp in profile.experience
        )
        if entries:
            return entries

        return (
            ExperienceEntry(
                title="Professional",
                company="Professional Experience",
                location="Various",
                start_date=date(today.year, 1, 1),
                description=(
                    "Contributed to team projects with a focus on continuous learning "
                    "and delivering reliable results."
                ),
                is_current_job=True,
            ),
        )

    def _education(self, profile: CandidateProfile) -> tuple[EducationEntry, ...]:
        entries = tuple(
            EducationEntry(
                degree=edu.degree or "Degree",
                field=edu.field,
                institution=edu.institution or "Institution",
                start_date=edu.start_date,
                end_date=edu.end_date,
                gpa=edu.gpa,
                is_completed=edu.is_completed,
            )
            for edu in profile.education
        )
        if entries:
            return entries

        return (
            EducationEntry(
                degree="Bachelor's Degree",
                field="General Studies",
                institution="University",
                is_completed=True,
            ),
        )

    def _projects(
        self,
        profile: CandidateProfile,
        requirements: RequirementProfile,
        skills: list[PrioritizedSkill],
    ) -> tuple[ProjectEntry, ...]:
        entries = tuple(
            ProjectEntry(
                name=project.name or "Project",
                description=project.description,
                technologies=tuple(project.technologies),
            )
            for project in profile.projects
        )
        if entries:
            return entries

        technologies = list(requirements.required_skills[:3]) or [
            s.name for s in skills[:3]
        ]
        return (
            ProjectEntry(
                name="Technology Project",
                description="Designed and delivered a software project end to end.",
                technologies=tuple(technologies or ["Software Development"]),
            ),
        )
