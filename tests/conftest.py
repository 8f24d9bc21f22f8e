"""Shared fixtures and test doubles."""

from datetime import datetime, timedelta, timezone
from email.utils import format_datetime
from typing import Dict, List, Optional

import pytest

from newsagent.config import Config, ConfigModel, TopicConfig
from newsagent.db import hash_url
from newsagent.ingestion import FeedItem
from newsagent.models import ProcessedRecord

BASE_TIME = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


class MemorySeenStore:
    """In-memory stand-in for SeenItemStore."""

    def __init__(self) -> None:
        self.records: Dict[str, ProcessedRecord] = {}
        self.mark_calls: List[str] = []
        self.open_count = 0
        self.close_count = 0
        self._open = False

    @property
    def is_open(self) -> bool:
        return self._open

    def open(self) -> None:
        self.open_count += 1
        self._open = True

    def close(self) -> None:
        self.close_count += 1
        self._open = False

    def has_been_processed(self, url: str) -> bool:
        return hash_url(url) in self.records

    def mark_processed(self, item: FeedItem, topic_name: str = "", analysis=None) -> bool:
        self.mark_calls.append(item.url)
        key = hash_url(item.url)
        if key in self.records:
            return False
        self.records[key] = ProcessedRecord(
            url_hash=key,
            url=item.url,
            title=item.title,
            source_name=item.source_name,
            matched_topic=topic_name or "",
            analysis=analysis.model_dump() if analysis is not None else None,
            created_at=datetime.now(timezone.utc),
        )
        return True

    def recent_history(self, days: int = 7, limit: int = 50) -> List[ProcessedRecord]:
        return list(self.records.values())[:limit]

    def count(self) -> int:
        return len(self.records)


def make_item(
    title: str,
    url: Optional[str] = None,
    summary: str = "",
    published: Optional[datetime] = BASE_TIME,
    source_name: str = "Test Feed",
) -> FeedItem:
    return FeedItem(
        title=title,
        url=url or f"https://example.com/{title.lower().replace(' ', '-')}",
        summary=summary,
        published=published,
        source_name=source_name,
    )


def rss_xml(title: str, items: List[Dict]) -> str:
    """Render a small RSS 2.0 document. Each item: title, link, and optional minutes/description."""
    entries = []
    for item in items:
        link = f"<link>{item['link']}</link>" if item.get("link") else ""
        pub = ""
        if item.get("minutes") is not None:
            pub = f"<pubDate>{format_datetime(BASE_TIME + timedelta(minutes=item['minutes']))}</pubDate>"
        entries.append(
            "<item>"
            f"<title>{item['title']}</title>"
            f"{link}"
            f"<description>{item.get('description', '')}</description>"
            f"{pub}"
            "</item>"
        )
    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        '<rss version="2.0"><channel>'
        f"<title>{title}</title><link>https://example.com</link><description>test</description>"
        f"{''.join(entries)}"
        "</channel></rss>"
    )


@pytest.fixture
def store() -> MemorySeenStore:
    return MemorySeenStore()


@pytest.fixture
def topics() -> List[TopicConfig]:
    return [
        TopicConfig(
            name="Claude Code releases",
            description="New Claude Code versions and features",
            keywords=["claude code", "claude cli"],
            priority="high",
        ),
        TopicConfig(
            name="Open models",
            description="Open-weight model releases",
            keywords=["llama", "open weights"],
            priority="medium",
        ),
    ]


@pytest.fixture
def config(tmp_path, topics) -> Config:
    model = ConfigModel(
        workspace_root=str(tmp_path / "workspace"),
        topics=topics,
        llm={"api_key": "test-key", "api_key_env": None},
        output={"terminal": False, "markdown": {"enabled": True, "dir": str(tmp_path / "reports")}},
    )
    return Config.from_model(model, config_path=tmp_path / "config.yaml")
