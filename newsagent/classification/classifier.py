"""Stage 1 relevance classification."""

import logging
from abc import ABC, abstractmethod
from typing import Dict, List, Optional

from ..config import TopicConfig
from ..ingestion.models import FeedItem
from ..models import MatchCandidate
from .json_extract import extract_json
from .llm_provider import LLMProvider
from .prompts import build_quick_filter_prompt

logger = logging.getLogger(__name__)

KEYWORD_MATCH_RELEVANCE = 0.8


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


class RelevanceClassifier(ABC):
    """Pairs items with the topic they are relevant to."""

    def __init__(self) -> None:
        self.failed_batches = 0

    @abstractmethod
    def classify(self, items: List[FeedItem], topics: List[TopicConfig]) -> List[MatchCandidate]:
        """Return the matching items, each with its topic and relevance."""
        pass


class LLMClassifier(RelevanceClassifier):
    """Batched relevance filtering through an LLM."""

    def __init__(
        self,
        provider: LLMProvider,
        batch_size: int = 10,
        min_relevance: float = 0.6,
        admission_threshold: float = 0.6,
        invalid_topic_policy: str = "first_topic",
        max_tokens: int = 1024,
    ) -> None:
        """
        Initialize LLM classifier.

        Args:
            provider: Completion backend
            batch_size: Items per request
            min_relevance: Relevance the model is asked to report at or above
            admission_threshold: Relevance a match needs to be kept
            invalid_topic_policy: "first_topic" to reattribute a match with an
                out-of-range topic index to the first topic, "drop" to discard it
            max_tokens: Response token budget per request
        """
        super().__init__()
        if admission_threshold < min_relevance:
            raise ValueError("admission_threshold must be >= min_relevance")
        self.provider = provider
        self.batch_size = batch_size
        self.min_relevance = min_relevance
        self.admission_threshold = admission_threshold
        self.invalid_topic_policy = invalid_topic_policy
        self.max_tokens = max_tokens

    def classify(self, items: List[FeedItem], topics: List[TopicConfig]) -> List[MatchCandidate]:
        """Classify items batch by batch. A failed batch yields no matches."""
        self.failed_batches = 0
        if not items or not topics:
            return []

        matched: List[MatchCandidate] = []
        for start in range(0, len(items), self.batch_size):
            batch = items[start:start + self.batch_size]
            batch_number = start // self.batch_size + 1
            try:
                matched.extend(self._classify_batch(batch, topics))
            except Exception as e:
                self.failed_batches += 1
                logger.warning("Classification batch %d failed: %s", batch_number, e)

        return matched

    def _classify_batch(
        self, batch: List[FeedItem], topics: List[TopicConfig]
    ) -> List[MatchCandidate]:
        prompt = build_quick_filter_prompt(batch, topics, self.min_relevance)
        text = self.provider.complete(prompt, max_tokens=self.max_tokens)

        parsed = extract_json(text, "array")
        if not parsed.ok:
            raise ValueError(parsed.error)

        # Keyed by index within the batch; a repeated index keeps its best score.
        best: Dict[int, MatchCandidate] = {}
        for entry in parsed.value:
            if not isinstance(entry, dict):
                continue
            candidate = self._to_candidate(entry, batch, topics)
            if candidate is None:
                continue
            index = int(entry["index"])
            if index not in best or candidate.relevance > best[index].relevance:
                best[index] = candidate

        return [best[index] for index in sorted(best)]

    def _to_candidate(
        self, entry: Dict, batch: List[FeedItem], topics: List[TopicConfig]
    ) -> Optional[MatchCandidate]:

        index = entry.get("index")
        relevance = entry.get("relevance")
        topic_index = entry.get("topicIndex")

        if not _is_number(index) or int(index) != index or not 0 <= index < len(batch):
            logger.debug("Ignoring match with invalid index: %r", entry)
            return None
        if not _is_number(relevance) or not 0.0 <= relevance <= 1.0:
            logger.debug("Ignoring match with invalid relevance: %r", entry)
            return None
        if relevance < self.admission_threshold:
            return None

        item = batch[int(index)]
        if _is_number(topic_index) and int(topic_index) == topic_index and 0 <= topic_index < len(topics):
            topic = topics[int(topic_index)]
        elif self.invalid_topic_policy == "drop":
            logger.warning("Dropping match for '%s': topic index %r out of range", item.title, topic_index)
            return None
        else:
            topic = topics[0]
            logger.warning(
                "Topic index %r out of range for '%s', attributing to '%s'",
                topic_index,
                item.title,
                topic.name,
            )

        return MatchCandidate(item=item, topic=topic, relevance=float(relevance))


class KeywordClassifier(RelevanceClassifier):
    """Offline classifier: case-insensitive keyword matching, first topic wins."""

    def __init__(self, relevance: float = KEYWORD_MATCH_RELEVANCE) -> None:
        super().__init__()
        self.relevance = relevance

    def classify(self, items: List[FeedItem], topics: List[TopicConfig]) -> List[MatchCandidate]:
        matched = []
        for item in items:
            text = f"{item.title} {item.summary}".lower()
            for topic in topics:
                if any(kw.lower() in text for kw in topic.keywords if kw.strip()):
                    matched.append(MatchCandidate(item=item, topic=topic, relevance=self.relevance))
                    break
        return matched
