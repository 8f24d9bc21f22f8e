"""Stage 2 deep analysis of matched items."""

import logging
from abc import ABC, abstractmethod

from pydantic import ValidationError

from ..models import AnalysisRecord, MatchCandidate
from .json_extract import extract_json
from .llm_provider import LLMProvider
from .prompts import build_analysis_prompt

logger = logging.getLogger(__name__)

FAILURE_PREFIX = "Analysis failed"


def failed_analysis(candidate: MatchCandidate, detail: str) -> AnalysisRecord:
    """A visibly degraded record, used when analysis cannot be produced."""
    return AnalysisRecord(
        title_localized=candidate.item.title,
        summary=f"{FAILURE_PREFIX}: {detail}",
        key_points=[],
        actionable=False,
        recommendation="",
    )


class Analyzer(ABC):
    """Produces exactly one AnalysisRecord per candidate."""

    @abstractmethod
    def analyze(self, candidate: MatchCandidate, content: str) -> AnalysisRecord:
        """Analyze a matched item. Must not raise."""
        pass


class DeepAnalyzer(Analyzer):
    """LLM-backed analysis."""

    def __init__(
        self,
        provider: LLMProvider,
        language: str = "English",
        summary_max_chars: int = 300,
        max_tokens: int = 1024,
    ) -> None:
        """
        Initialize deep analyzer.

        Args:
            provider: Completion backend
            language: Language the analysis is written in
            summary_max_chars: Summaries are truncated to this length
            max_tokens: Response token budget per request
        """
        self.provider = provider
        self.language = language
        self.summary_max_chars = summary_max_chars
        self.max_tokens = max_tokens

    def analyze(self, candidate: MatchCandidate, content: str) -> AnalysisRecord:
        """Analyze a matched item, degrading to a failure record on any error."""
        item = candidate.item
        prompt = build_analysis_prompt(
            item,
            candidate.topic,
            content or item.summary,
            self.language,
            self.summary_max_chars,
        )

        try:
            text = self.provider.complete(prompt, max_tokens=self.max_tokens)
            parsed = extract_json(text, "object")
            if not parsed.ok:
                return failed_analysis(candidate, parsed.error)
            return self._to_record(candidate, parsed.value)
        except (ValidationError, TypeError, ValueError) as e:
            logger.warning("Analysis response for '%s' is invalid: %s", item.title, e)
            return failed_analysis(candidate, f"invalid response: {e}")
        except Exception as e:
            logger.warning("Analysis failed [%s]: %s", item.title, e)
            return failed_analysis(candidate, str(e))

    def _to_record(self, candidate: MatchCandidate, data: dict) -> AnalysisRecord:
        key_points = data.get("keyPoints") or []
        if isinstance(key_points, str):
            key_points = [key_points]

        actionable = data.get("actionable") is True
        return AnalysisRecord(
            title_localized=str(data.get("titleLocalized") or candidate.item.title),
            summary=str(data.get("summary") or "")[:self.summary_max_chars],
            key_points=[str(point) for point in key_points if str(point).strip()],
            actionable=actionable,
            recommendation=str(data.get("recommendation") or "") if actionable else "",
        )


class TemplateAnalyzer(Analyzer):
    """Offline analysis built from the feed summary and topic metadata."""

    def __init__(self, summary_max_chars: int = 150) -> None:
        self.summary_max_chars = summary_max_chars

    def analyze(self, candidate: MatchCandidate, content: str) -> AnalysisRecord:
        item = candidate.item
        topic = candidate.topic
        actionable = topic.priority == "high"
        summary = item.summary[:self.summary_max_chars] or (
            "(Feed summary is empty; run without --dry-run for a generated analysis)"
        )
        return AnalysisRecord(
            title_localized=item.title,
            summary=summary,
            key_points=[f"Source: {item.source_name}", f"Keyword match: {topic.name}"],
            actionable=actionable,
            recommendation="Worth reading in full" if actionable else "",
        )
