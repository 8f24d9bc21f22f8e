"""Pipeline orchestration."""

from .orchestrator import PipelineOrchestrator, PipelineStage, build_reporters

__all__ = ["PipelineOrchestrator", "PipelineStage", "build_reporters"]
