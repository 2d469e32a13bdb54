"""Job description analysis.

Public API:
- JobAnalysisService: analyzer with optional LLM front-end and keyword fallback
- KeywordJobAnalyzer: deterministic keyword analyzer
- RequirementProfile / JobLevel: analysis results
- job_description_hash: normalised hash used to spot repeated requests
"""

from src.analysis.analyzer import KeywordJobAnalyzer, job_description_hash
from src.analysis.config import AnalysisConfig, get_analysis_config
from src.analysis.models import JobLevel, RequirementProfile
from src.analysis.service import JobAnalysisService

__all__ = [
    "JobAnalysisService",
    "KeywordJobAnalyzer",
    "RequirementProfile",
    "JobLevel",
    "AnalysisConfig",
    "get_analysis_config",
    "job_description_hash",
]
