"""Data models for the AI News Agent."""

from .analysis import AnalysisRecord, AnalyzedItem, MatchCandidate
from .record import ProcessedRecord
from .run import RunResult, RunState, RunStats

__all__ = [
    "AnalysisRecord",
    "AnalyzedItem",
    "MatchCandidate",
    "ProcessedRecord",
    "RunResult",
    "RunState",
    "RunStats",
]
