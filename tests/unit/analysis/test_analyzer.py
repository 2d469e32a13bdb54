"""Tests for the deterministic keyword job analyzer."""

import pytest

from src.analysis.analyzer import (
    KeywordJobAnalyzer,
    detect_industry,
    detect_level,
    extract_sections,
    extract_title,
    job_description_hash,
    match_skills,
)
from src.analysis.config import AnalysisConfig
from src.analysis.models import JobLevel, RequirementProfile


@pytest.fixture
def analyzer() -> KeywordJobAnalyzer:
    return KeywordJobAnalyzer(AnalysisConfig(_env_file=None))


class TestSkillMatching:
    """Tests for keyword to canonical skill matching."""

    def test_matches_aliases_to_canonical_names(self):
        """Framework names should map to their language."""
        assert match_skills("We use Django and PostgreSQL") == ["Python", "SQL"]

    def test_results_follow_table_order(self):
        """Skills are reported in dictionary order, not text order."""
        assert match_skills("AWS, SQL and Python") == ["Python", "SQL", "AWS"]

    def test_matching_is_case_insensitive(self):
        """Keyword matching should ignore case."""
        assert match_skills("PYTHON developer") == ["Python"]

    def test_short_alias_does_not_match_inside_words(self):
        """'js' must not match inside 'json'."""
        assert "JavaScript" not in match_skills("Parse JSON payloads")

    def test_java_does_not_match_javascript(self):
        """'java' must not match the JavaScript keyword."""
        assert match_skills("Strong JavaScript skills") == ["JavaScript"]

    def test_punctuated_keywords_match(self):
        """Keywords containing symbols should still match."""
        skills = match_skills("Experience with C++ and C# required")
        assert "C++" in skills
        assert "C#" in skills


class TestLevelDetection:
    """Tests for job level heuristics."""

    def test_senior_marker(self):
        assert detect_level("Senior Backend Engineer") == JobLevel.SENIOR

    def test_lead_marker(self):
        assert detect_level("Tech Lead, Payments") == JobLevel.SENIOR

    def test_junior_marker(self):
        assert detect_level("Junior developer wanted") == JobLevel.ENTRY

    def test_fresher_marker(self):
        assert detect_level("Freshers welcome, fresher role") == JobLevel.ENTRY

    def test_default_is_mid(self):
        assert detect_level("Software Engineer") == JobLevel.MID

    def test_senior_wins_over_entry(self):
        """Senior markers are checked before entry markers."""
        assert detect_level("Senior engineer to mentor junior staff") == JobLevel.SENIOR


class TestIndustryDetection:
    """Tests for industry detection."""

    def test_detects_finance(self):
        assert detect_industry("Fintech startup in banking", "technology") == "finance"

    def test_falls_back_to_default(self):
        assert detect_industry("Build things", "technology") == "technology"


class TestTitleExtraction:
    """Tests for job title extraction."""

    def test_explicit_label(self):
        assert extract_title("Position: Data Engineer. Remote.") == "Data Engineer"

    def test_short_first_line(self):
        assert extract_title("Platform Engineer\nWe are hiring.") == "Platform Engineer"

    def test_default_when_first_line_is_a_sentence(self):
        text = "Senior Backend Engineer needing Python, SQL, AWS"
        assert extract_title(text) == "Job Application"


class TestSectionExtraction:
    """Tests for responsibility/qualification extraction."""

    def test_collects_bullets_under_headings(self):
        text = (
            "Responsibilities:\n"
            "- Build REST APIs\n"
            "- Mentor engineers\n"
            "Requirements:\n"
            "* 5+ years of Python\n"
            "Benefits:\n"
            "- Free lunch\n"
        )
        responsibilities, qualifications = extract_sections(text)

        assert responsibilities == ["Build REST APIs", "Mentor engineers"]
        assert qualifications == ["5+ years of Python"]

    def test_inline_items_after_heading(self):
        _, qualifications = extract_sections("Qualifications: BSc CS; 3 years SQL")
        assert qualifications == ["BSc CS", "3 years SQL"]


class TestKeywordJobAnalyzer:
    """Tests for the full analyze() contract."""

    def test_required_and_preferred_split(self, analyzer):
        """The first six matches are required, the next four preferred."""
        text = (
            "JavaScript React Python Java SQL AWS Docker Git TypeScript Angular Vue "
            "Kubernetes"
        )
        profile = analyzer.analyze(text)

        assert profile.required_skills == (
            "JavaScript",
            "React",
            "Python",
            "Java",
            "SQL",
            "AWS",
        )
        assert profile.preferred_skills == ("Docker", "Git", "TypeScript", "Angular")

    def test_senior_backend_example(self, analyzer):
        profile = analyzer.analyze("Senior Backend Engineer needing Python, SQL, AWS")

        assert profile.required_skills == ("Python", "SQL", "AWS")
        assert profile.preferred_skills == ()
        assert profile.job_level == JobLevel.SENIOR
        assert profile.industry == "technology"

    def test_empty_text_yields_valid_profile(self, analyzer):
        """Absence of any signal should still produce a valid profile."""
        profile = analyzer.analyze("")

        assert isinstance(profile, RequirementProfile)
        assert profile.required_skills == ()
        assert profile.job_level == JobLevel.MID
        assert profile.responsibilities == (
            "Develop software solutions",
            "Collaborate with team",
        )
        assert profile.qualifications == ("Bachelor's degree", "Relevant experience")

    def test_none_text_is_accepted(self, analyzer):
        assert analyzer.analyze(None).required_skills == ()

    def test_is_deterministic(self, analyzer):
        text = "Lead engineer: Python, Docker, Kubernetes, healthcare platform"
        assert analyzer.analyze(text) == analyzer.analyze(text)

    def test_limits_come_from_config(self):
        config = AnalysisConfig(_env_file=None, required_limit=1, preferred_limit=1)
        profile = KeywordJobAnalyzer(config).analyze("Python SQL AWS")

        assert profile.required_skills == ("Python",)
        assert profile.preferred_skills == ("SQL",)


class TestJobDescriptionHash:
    """Tests for job description hashing."""

    def test_whitespace_and_case_insensitive(self):
        assert job_description_hash("Python  Developer\n") == job_description_hash(
            "python developer"
        )

    def test_different_text_differs(self):
        assert job_description_hash("a") != job_description_hash("b")
