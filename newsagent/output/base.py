"""Report materializer interface."""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, List, Optional

from ..models import AnalyzedItem, RunStats

PRIORITY_ORDER = ["high", "medium", "low"]
PRIORITY_LABELS = {"high": "HIGH", "medium": "MED", "low": "LOW"}


def group_by_priority(results: List[AnalyzedItem]) -> Dict[str, List[AnalyzedItem]]:
    """Group results by topic priority, high first, keeping result order."""
    grouped: Dict[str, List[AnalyzedItem]] = {p: [] for p in PRIORITY_ORDER}
    for result in results:
        grouped[result.topic.priority].append(result)
    return {p: items for p, items in grouped.items() if items}


class ReportMaterializer(ABC):
    """Consumes the final result set of a run."""

    @abstractmethod
    def emit(self, results: List[AnalyzedItem], stats: RunStats, run_date: str) -> Optional[Path]:
        """
        Render results.

        Returns:
            Path of the written file, or None if nothing was written
        """
        pass
