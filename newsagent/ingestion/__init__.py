"""Feed ingestion, deduplication and article text extraction."""

from .content_extractor import ContentExtractor, extract_from_html
from .dedup import Deduplicator
from .models import FeedItem, FeedResult
from .rss_fetcher import RSSFetcher, merge_feed_items, parse_feed

__all__ = [
    "ContentExtractor",
    "Deduplicator",
    "FeedItem",
    "FeedResult",
    "RSSFetcher",
    "extract_from_html",
    "merge_feed_items",
    "parse_feed",
]
