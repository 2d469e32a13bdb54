"""Job description analysis service.

Runs the optional LLM analyzer first and silently falls back to the
keyword analyzer on any failure, so ``analyze`` never raises.
"""

from __future__ import annotations

import asyncio
import logging

from src.analysis.analyzer import KeywordJobAnalyzer, extract_title
from src.analysis.config import AnalysisConfig, get_analysis_config
from src.analysis.llm import AnalysisLLM
from src.analysis.models import RequirementProfile
from src.analysis.prompts import ANALYSIS_SYSTEM_PROMPT, build_analysis_prompt

logger = logging.getLogger(__name__)


class JobAnalysisService:
    """Produces a RequirementProfile from raw job description text."""

    def __init__(
        self,
        config: AnalysisConfig | None = None,
        keyword_analyzer: KeywordJobAnalyzer | None = None,
        llm: AnalysisLLM | None = None,
    ):
        self.config = config or get_analysis_config()
        self.keyword_analyzer = keyword_analyzer or KeywordJobAnalyzer(self.config)
        self._llm = llm

    @property
    def llm_enabled(self) -> bool:
        return self._llm is not None or self.config.llm_enabled

    def _get_llm(self) -> AnalysisLLM:
        if self._llm is None:
            self._llm = AnalysisLLM(self.config)
        return self._llm

    async def analyze(self, text: str) -> RequirementProfile:
        """Analyze a job description.

        Args:
            text: Raw job posting text.

        Returns:
            The LLM-derived profile when available and usable, otherwise
            the deterministic keyword profile.
        """
        if self.llm_enabled:
            profile = await self._analyze_with_llm(text)
            if profile is not None:
                return profile

        return self.keyword_analyzer.analyze(text)

    async def _analyze_with_llm(self, text: str) -> RequirementProfile | None:
        prompt = build_analysis_prompt(
            text,
            required_limit=self.config.required_limit,
            preferred_limit=self.config.preferred_limit,
        )
        try:
            raw = await asyncio.wait_for(
                self._get_llm().generate_structured(
                    prompt=prompt,
                    output_model=RequirementProfile,
                    system_prompt=ANALYSIS_SYSTEM_PROMPT,
                ),
                # Retries happen inside the client; bound the whole exchange
                timeout=self.config.llm_timeout * (self.config.llm_max_retries + 1) + 5,
            )
        except Exception as e:
            logger.warning(f"LLM analysis unavailable, using keyword analyzer: {e}")
            return None

        if not raw.required_skills and not raw.preferred_skills:
            logger.warning("LLM analysis returned no skills, using keyword analyzer")
            return None

        fallback = self.keyword_analyzer.analyze(text)
        return raw.model_copy(
            update={
                "required_skills": raw.required_skills[: self.config.required_limit],
                "preferred_skills": raw.preferred_skills[: self.config.preferred_limit],
                "industry": raw.industry or fallback.industry,
                "responsibilities": raw.responsibilities or fallback.responsibilities,
                "qualifications": raw.qualifications or fallback.qualifications,
                "title": raw.title
                if raw.title and raw.title != "Job Application"
                else extract_title(text),
            }
        )
