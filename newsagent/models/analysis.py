"""Classification and analysis models."""

from typing import List

from pydantic import BaseModel, ConfigDict, Field

from ..config import TopicConfig
from ..ingestion.models import FeedItem


class MatchCandidate(BaseModel):
    """An item paired with the topic it matched."""

    model_config = ConfigDict(frozen=True)

    item: FeedItem
    topic: TopicConfig
    relevance: float = Field(..., ge=0.0, le=1.0)


class AnalysisRecord(BaseModel):
    """Deep analysis attached to a matched item."""

    title_localized: str = Field("", description="Title in the analysis language")
    summary: str = Field("", description="Short summary")
    key_points: List[str] = Field(default_factory=list)
    actionable: bool = False
    recommendation: str = Field("", description="Suggested action, empty when not actionable")


class AnalyzedItem(BaseModel):
    """A matched item with the content it was analyzed from."""

    candidate: MatchCandidate
    content: str = Field("", description="Extracted article text, or the feed summary")
    analysis: AnalysisRecord

    @property
    def item(self) -> FeedItem:
        return self.candidate.item

    @property
    def topic(self) -> TopicConfig:
        return self.candidate.topic
