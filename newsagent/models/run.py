"""Run models for tracking pipeline executions."""

from enum import Enum
from pathlib import Path
from typing import List

from pydantic import BaseModel, Field

from .analysis import AnalyzedItem


class RunState(str, Enum):
    """Pipeline states, in execution order."""

    FETCHING = "fetching"
    DEDUPLICATING = "deduplicating"
    CLASSIFYING = "classifying"
    ANALYZING = "analyzing"
    PERSISTING = "persisting"
    REPORTING = "reporting"
    DONE = "done"


class RunStats(BaseModel):
    """Aggregate statistics of one run."""

    source_count: int = 0
    total_fetched: int = 0
    new_count: int = 0
    matched_count: int = 0
    failed_sources: int = 0
    failed_batches: int = 0
    records_written: int = 0
    duration: float = 0.0


class RunResult(BaseModel):
    """Outcome of a pipeline run."""

    state: RunState = RunState.FETCHING
    stats: RunStats = Field(default_factory=RunStats)
    results: List[AnalyzedItem] = Field(default_factory=list)
    report_paths: List[Path] = Field(default_factory=list)
