"""Tests for tailored resume models."""

from datetime import date, datetime

from src.tailoring.models import (
    EducationEntry,
    ExperienceEntry,
    PersonalInfo,
    PrioritizedSkill,
    ResumeDocument,
    SkillPriority,
    format_date_range,
)


def _document(**overrides) -> ResumeDocument:
    data = {
        "personal_info": PersonalInfo(first_name="Ada", last_name="Lovelace"),
        "skills": (
            PrioritizedSkill(name="Python", priority=SkillPriority.HIGH),
            PrioritizedSkill(name="Docker", priority=SkillPriority.MEDIUM),
            PrioritizedSkill(name="Go", priority=SkillPriority.HIGH),
        ),
    }
    data.update(overrides)
    return ResumeDocument(**data)


class TestDateRanges:
    """Tests for date range formatting."""

    def test_closed_range(self):
        assert format_date_range(date(2020, 1, 1), date(2021, 3, 1), False) == (
            "Jan 2020 - Mar 2021"
        )

    def test_ongoing_range(self):
        assert format_date_range(date(2020, 1, 1), None, True) == "Jan 2020 - Present"

    def test_no_start_date(self):
        assert format_date_range(None, date(2019, 5, 1), False) == "May 2019"
        assert format_date_range(None, None, False) == ""

    def test_experience_uses_current_flag(self):
        entry = ExperienceEntry(
            title="Dev", company="Acme", start_date=date(2022, 2, 1), is_current_job=True
        )
        assert entry.date_range() == "Feb 2022 - Present"

    def test_education_in_progress(self):
        entry = EducationEntry(
            degree="MSc",
            institution="MIT",
            start_date=date(2023, 9, 1),
            is_completed=False,
        )
        assert entry.date_range() == "Sep 2023 - Present"


class TestResumeDocument:
    """Tests for ResumeDocument helpers."""

    def test_skills_by_priority_keeps_order(self):
        groups = _document().skills_by_priority()
        assert groups[SkillPriority.HIGH] == ["Python", "Go"]
        assert groups[SkillPriority.MEDIUM] == ["Docker"]
        assert groups[SkillPriority.LOW] == []

    def test_file_name(self):
        name = _document().file_name(datetime(2024, 1, 2, 3, 4, 5))
        assert name == "Ada_Lovelace_Resume_20240102_030405.pdf"

    def test_file_name_sanitizes(self):
        document = _document(
            personal_info=PersonalInfo(first_name="Jean-Luc", last_name="O'Brien / PhD")
        )
        name = document.file_name(datetime(2024, 1, 2, 3, 4, 5))
        assert name == "Jean-Luc_OBrien_PhD_Resume_20240102_030405.pdf"

    def test_contact_items_skip_empty(self):
        info = PersonalInfo(first_name="A", email="a@b.com", location="Berlin")
        assert info.contact_items() == ["a@b.com", "Berlin"]

    def test_round_trip_dict(self):
        document = _document()
        assert ResumeDocument.from_dict(document.to_dict()) == document
