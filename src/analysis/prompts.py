"""Prompt builders for LLM-based job description analysis."""

from __future__ import annotations

ANALYSIS_SYSTEM_PROMPT = """You are a recruiting assistant that extracts structured requirements from job postings.

You must follow these rules:
- Only report skills, responsibilities and qualifications that the posting actually mentions.
- Use short canonical skill names (e.g. "Python", "AWS", "React"), most important first.
- job_level must be one of: entry, mid, senior.
- industry is a single lowercase word or short phrase (e.g. "technology", "finance").
- The resume built from your output should weigh roughly 70% toward this job's needs and
  30% toward the candidate's broader background, so put the skills that define the job first.
- Output MUST be valid JSON only (no markdown), matching the required schema.
"""


def build_analysis_prompt(text: str, *, required_limit: int, preferred_limit: int) -> str:
    """Build the user prompt for requirement extraction."""
    return "\n".join(
        [
            "Extract the requirements from the job posting below.",
            "",
            "Return a JSON object with these keys:",
            f"- required_skills: up to {required_limit} must-have skills",
            f"- preferred_skills: up to {preferred_limit} nice-to-have skills",
            "- job_level: entry | mid | senior",
            "- industry: the employer's industry",
            "- responsibilities: up to 8 short phrases",
            "- qualifications: up to 8 short phrases",
            "- title: the job title",
            "",
            "Job posting:",
            "<<<",
            text.strip(),
            ">>>",
        ]
    )
