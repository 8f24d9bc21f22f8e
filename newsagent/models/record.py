"""Persistent record of a processed item."""

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class ProcessedRecord(BaseModel):
    """One row of the seen-item ledger."""

    model_config = ConfigDict(from_attributes=True)

    url_hash: str = Field(..., description="MD5 hex digest of the URL, primary key")
    url: str = Field(..., description="Item URL")
    title: Optional[str] = Field(None, description="Item title")
    source_name: Optional[str] = Field(None, description="Feed the item came from")
    matched_topic: str = Field("", description="Name of the matched topic, empty if unmatched")
    analysis: Optional[Dict[str, Any]] = Field(None, description="Serialized analysis record")
    created_at: Optional[datetime] = Field(None, description="Insert timestamp")
