"""End-to-end resume generation pipeline."""

from src.pipeline.service import PipelineResult, ResumePipeline, build_pipeline

__all__ = ["PipelineResult", "ResumePipeline", "build_pipeline"]
