"""Data models for ingestion."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class FeedItem(BaseModel):
    """Parsed feed item."""

    model_config = ConfigDict(frozen=True)

    title: str = Field(..., description="Item title")
    url: str = Field(..., description="Item URL, the identity key")
    summary: str = Field("", description="Item summary, may be empty")
    published: Optional[datetime] = Field(None, description="Publication date (UTC)")
    source_name: str = Field(..., description="Source name")


class FeedResult(BaseModel):
    """Result of fetching one feed."""

    source_name: str = Field(..., description="Source name")
    source_url: str = Field(..., description="Feed URL")
    success: bool = Field(..., description="Whether fetch was successful")
    items: List[FeedItem] = Field(default_factory=list, description="Parsed feed items")
    error: Optional[str] = Field(None, description="Error message if failed")
    item_count: int = Field(0, description="Number of items fetched")
