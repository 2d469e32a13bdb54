"""Deterministic keyword-based job description analyzer.

Always available and never raises: text without any recognisable signal
produces an empty-but-valid RequirementProfile.
"""

from __future__ import annotations

import hashlib
import logging
import re

from src.analysis.config import AnalysisConfig, get_analysis_config
from src.analysis.keywords import (
    DEFAULT_QUALIFICATIONS,
    DEFAULT_RESPONSIBILITIES,
    ENTRY_MARKERS,
    INDUSTRY_KEYWORDS,
    QUALIFICATION_HEADINGS,
    RESPONSIBILITY_HEADINGS,
    SENIOR_MARKERS,
    SKILL_KEYWORDS,
    contains_keyword,
)
from src.analysis.models import JobLevel, RequirementProfile

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "Job Application"
MAX_SECTION_ITEMS = 8

_TITLE_PATTERN = re.compile(
    r"(?:position|role|job(?:\s+title)?)\s*:\s*([^.\n]+)", re.IGNORECASE
)
_BULLET_PREFIX = re.compile(r"^\s*(?:[-*•·▪●]+|\d+[.)])\s*")


def job_description_hash(text: str) -> str:
    """Return a stable hash of a job description.

    Whitespace and case are normalised first, so trivially reformatted
    copies of the same posting hash identically.
    """
    normalized = " ".join(text.lower().split())
    return hashlib.md5(normalized.encode("utf-8")).hexdigest()


def extract_title(text: str) -> str:
    """Pull a job title out of free text.

    Looks for an explicit ``Position:``/``Role:``/``Job title:`` label first,
    then falls back to a short first line.
    """
    match = _TITLE_PATTERN.search(text)
    if match:
        title = match.group(1).strip()
        if title:
            return title[:100]

    for line in text.splitlines():
        candidate = line.strip().strip("#*").strip()
        if not candidate:
            continue
        if len(candidate) <= 60 and len(candidate.split()) <= 8 and not re.search(
            r"[,;:!?]", candidate
        ):
            return candidate
        break

    return DEFAULT_TITLE


def match_skills(text: str) -> list[str]:
    """Return canonical skill names mentioned in ``text``, in table order."""
    found: list[str] = []
    for skill, aliases in SKILL_KEYWORDS.items():
        if any(contains_keyword(text, alias) for alias in aliases):
            found.append(skill)
    return found


def detect_level(text: str) -> JobLevel:
    """Infer seniority; senior markers win over entry markers."""
    if any(contains_keyword(text, marker) for marker in SENIOR_MARKERS):
        return JobLevel.SENIOR
    if any(contains_keyword(text, marker) for marker in ENTRY_MARKERS):
        return JobLevel.ENTRY
    return JobLevel.MID


def detect_industry(text: str, default: str) -> str:
    """Pick the industry with the most keyword hits, or ``default``."""
    best_name = default
    best_hits = 0
    for name, keywords in INDUSTRY_KEYWORDS.items():
        hits = sum(1 for keyword in keywords if contains_keyword(text, keyword))
        if hits > best_hits:
            best_name, best_hits = name, hits
    return best_name


def _clean_item(line: str) -> str:
    return _BULLET_PREFIX.sub("", line).strip().rstrip(";").strip()


def extract_sections(text: str) -> tuple[list[str], list[str]]:
    """Collect bullet items listed under responsibility/qualification headings."""
    responsibilities: list[str] = []
    qualifications: list[str] = []
    current: list[str] | None = None

    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line:
            continue

        heading_text = _clean_item(line).strip("#*").strip()
        heading, _, remainder = heading_text.partition(":")

        if RESPONSIBILITY_HEADINGS.match(heading) and len(heading) <= 60:
            current = responsibilities
        elif QUALIFICATION_HEADINGS.match(heading) and len(heading) <= 60:
            current = qualifications
        elif line.endswith(":") and len(line) <= 60:
            # Some other heading ends the active section
            current = None
            continue
        else:
            if current is not None and len(current) < MAX_SECTION_ITEMS:
                item = _clean_item(line)
                if len(item) >= 3:
                    current.append(item)
            continue

        # Inline items after the heading, e.g. "Requirements: SQL; AWS"
        for part in remainder.split(";"):
            item = _clean_item(part)
            if len(item) >= 3 and len(current) < MAX_SECTION_ITEMS:
                current.append(item)

    return responsibilities, qualifications


class KeywordJobAnalyzer:
    """Extracts a RequirementProfile from raw text using static keyword tables."""

    def __init__(self, config: AnalysisConfig | None = None):
        self.config = config or get_analysis_config()

    def analyze(self, text: str | None) -> RequirementProfile:
        """Analyze job description text.

        Args:
            text: Raw job posting text. ``None`` or empty text is allowed.

        Returns:
            The extracted RequirementProfile.
        """
        text = text or ""

        skills = match_skills(text)
        required_limit = self.config.required_limit
        preferred_limit = self.config.preferred_limit

        responsibilities, qualifications = extract_sections(text)

        profile = RequirementProfile(
            required_skills=skills[:required_limit],
            preferred_skills=skills[required_limit : required_limit + preferred_limit],
            job_level=detect_level(text),
            industry=detect_industry(text, self.config.default_industry),
            responsibilities=responsibilities or list(DEFAULT_RESPONSIBILITIES),
            qualifications=qualifications or list(DEFAULT_QUALIFICATIONS),
            title=extract_title(text),
        )

        logger.debug(
            f"Keyword analysis: {len(profile.required_skills)} required, "
            f"{len(profile.preferred_skills)} preferred, level={profile.job_level.value}"
        )
        return profile
