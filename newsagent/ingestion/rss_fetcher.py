"""RSS feed fetcher with concurrent processing."""

import asyncio
import calendar
import logging
from datetime import datetime, timezone
from typing import List, Optional

import feedparser
import httpx
from bs4 import BeautifulSoup
from rich.console import Console

from ..config import FeedConfig
from .models import FeedItem, FeedResult

console = Console()
logger = logging.getLogger(__name__)

USER_AGENT = "NewsAgent/1.0 (AI News Agent)"

_OLDEST = datetime.min.replace(tzinfo=timezone.utc)


def _entry_published(entry) -> Optional[datetime]:
    """Publication time of a feed entry, in UTC."""
    for key in ("published_parsed", "updated_parsed"):
        parsed = entry.get(key)
        if parsed:
            try:
                return datetime.fromtimestamp(calendar.timegm(parsed), tz=timezone.utc)
            except (OverflowError, ValueError, TypeError):
                continue
    return None


def _entry_summary(entry) -> str:
    """Plain-text summary of a feed entry."""
    raw = entry.get("summary") or entry.get("description") or ""
    if "<" in raw:
        raw = BeautifulSoup(raw, "html.parser").get_text(" ")
    return " ".join(raw.split())


def parse_feed(content: str, source_name: str) -> List[FeedItem]:
    """
    Parse feed XML into items.

    Raises:
        ValueError: If the payload is malformed and yields no entries.
    """
    feed = feedparser.parse(content)

    if feed.bozo and not feed.entries:
        raise ValueError(f"Invalid RSS feed: {feed.bozo_exception}")

    items = []
    for entry in feed.entries:
        link = (entry.get("link") or "").strip()
        if not link:
            logger.debug("Skipping entry without link in %s", source_name)
            continue

        items.append(
            FeedItem(
                title=(entry.get("title") or "").strip(),
                url=link,
                summary=_entry_summary(entry),
                published=_entry_published(entry),
                source_name=source_name,
            )
        )

    return items


def merge_feed_items(results: List[FeedResult], max_items: int) -> List[FeedItem]:
    """
    Merge feed results into one list, newest first, capped at ``max_items``.

    Items without a publication time sort as oldest.
    """
    items = [item for result in results if result.success for item in result.items]
    items.sort(key=lambda item: item.published or _OLDEST, reverse=True)
    return items[:max_items]


class RSSFetcher:
    """Fetch and parse RSS feeds."""

    def __init__(
        self,
        timeout: float = 15.0,
        max_concurrent: int = 5,
        user_agent: str = USER_AGENT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """
        Initialize RSS fetcher.

        Args:
            timeout: Upper bound in seconds for one source, request and body included
            max_concurrent: Maximum feeds fetched at the same time
            user_agent: User-Agent header sent with each request
            transport: Optional httpx transport (used by tests)
        """
        self.timeout = timeout
        self.max_concurrent = max_concurrent
        self.user_agent = user_agent
        self.transport = transport

    async def _download(self, url: str) -> str:
        async with httpx.AsyncClient(
            timeout=self.timeout,
            follow_redirects=True,
            headers={"User-Agent": self.user_agent},
            transport=self.transport,
        ) as client:
            response = await client.get(url)
            response.raise_for_status()
            return response.text

    async def fetch_feed(self, source: FeedConfig) -> FeedResult:
        """Fetch and parse a single feed. Never raises."""
        try:
            content = await asyncio.wait_for(self._download(source.url), timeout=self.timeout)
            items = parse_feed(content, source.name)
        except (asyncio.TimeoutError, httpx.TimeoutException):
            error = f"Timed out after {self.timeout:.0f}s"
        except httpx.HTTPStatusError as e:
            error = f"HTTP {e.response.status_code}"
        except httpx.HTTPError as e:
            error = f"HTTP error: {e}"
        except Exception as e:
            error = f"Unexpected error: {e}"
        else:
            return FeedResult(
                source_name=source.name,
                source_url=source.url,
                success=True,
                items=items,
                item_count=len(items),
            )

        logger.warning("Fetch failed [%s]: %s", source.name, error)
        return FeedResult(
            source_name=source.name,
            source_url=source.url,
            success=False,
            error=error,
        )

    async def fetch_all_feeds(self, sources: List[FeedConfig]) -> List[FeedResult]:
        """Fetch all enabled feeds concurrently."""
        enabled_sources = [s for s in sources if s.enabled]

        if not enabled_sources:
            return []

        semaphore = asyncio.Semaphore(self.max_concurrent)

        async def fetch_with_semaphore(source: FeedConfig) -> FeedResult:
            async with semaphore:
                return await self.fetch_feed(source)

        tasks = [fetch_with_semaphore(source) for source in enabled_sources]
        return list(await asyncio.gather(*tasks))

    def fetch_feeds_sync(self, sources: List[FeedConfig]) -> List[FeedResult]:
        """Synchronous wrapper for fetch_all_feeds."""
        return asyncio.run(self.fetch_all_feeds(sources))


def print_feed_summary(results: List[FeedResult]) -> None:
    """Print summary of feed fetch results."""
    total_items = sum(r.item_count for r in results)
    successful = sum(1 for r in results if r.success)
    failed = len(results) - successful

    console.print("\n[bold]Feed Summary:[/bold]")
    console.print(f"  Sources fetched: {len(results)}")
    console.print(f"  Successful: [green]{successful}[/green]")
    console.print(f"  Failed: [red]{failed}[/red]")
    console.print(f"  Total items: {total_items}")

    if failed > 0:
        console.print("\n[bold red]Failed feeds:[/bold red]")
        for result in results:
            if not result.success:
                console.print(f"  - {result.source_name}: {result.error}")
