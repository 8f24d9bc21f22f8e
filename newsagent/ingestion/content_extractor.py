"""Article fetcher and text extractor."""

import asyncio
import logging
from typing import Callable, Dict, List, Optional, Tuple

import httpx
from bs4 import BeautifulSoup, Tag

logger = logging.getLogger(__name__)

USER_AGENT = "Mozilla/5.0 (compatible; NewsAgent/1.0)"

NON_CONTENT_TAGS = ["script", "style", "noscript", "nav", "header", "footer", "aside", "iframe"]

MAX_CONTENT_CHARS = 3000
MIN_CONTENT_CHARS = 200


def _find_article(soup: BeautifulSoup) -> Optional[Tag]:
    return soup.find("article")


def _find_main(soup: BeautifulSoup) -> Optional[Tag]:
    return soup.find("main") or soup.find(attrs={"role": "main"})


def _find_body(soup: BeautifulSoup) -> Optional[Tag]:
    return soup.body or soup


# Tried in order; the first region with enough text wins.
EXTRACTION_STRATEGIES: List[Tuple[str, Callable[[BeautifulSoup], Optional[Tag]]]] = [
    ("article", _find_article),
    ("main", _find_main),
    ("body", _find_body),
]


def _collapse_whitespace(text: str) -> str:
    return " ".join(text.split())


def extract_from_html(
    html: str,
    max_chars: int = MAX_CONTENT_CHARS,
    min_chars: int = MIN_CONTENT_CHARS,
) -> str:
    """Extract the main text of an HTML page.

    Non-content elements are removed, then each strategy in
    ``EXTRACTION_STRATEGIES`` is tried until one yields at least ``min_chars``
    characters. The whole body is used when none does.

    Args:
        html: Page HTML
        max_chars: Length the result is truncated to
        min_chars: Minimum text length for a region to be accepted

    Returns:
        Whitespace-collapsed text, possibly empty
    """
    soup = BeautifulSoup(html, "html.parser")
    for tag in soup(NON_CONTENT_TAGS):
        tag.decompose()

    text = ""
    for name, find_region in EXTRACTION_STRATEGIES:
        region = find_region(soup)
        if region is None:
            continue
        text = _collapse_whitespace(region.get_text(" "))
        if len(text) >= min_chars:
            logger.debug("Extracted %d chars using '%s' strategy", len(text), name)
            break

    return text[:max_chars]


class ContentExtractor:
    """Fetch HTML and extract article text."""

    def __init__(
        self,
        timeout: float = 15.0,
        max_concurrent: int = 3,
        max_chars: int = MAX_CONTENT_CHARS,
        user_agent: str = USER_AGENT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """Initialize content extractor."""
        self.timeout = timeout
        self.max_concurrent = max_concurrent
        self.max_chars = max_chars
        self.user_agent = user_agent
        self.transport = transport

    async def _download(self, url: str) -> Optional[str]:
        headers = {
            "User-Agent": self.user_agent,
            "Accept": "text/html,application/xhtml+xml",
        }
        async with httpx.AsyncClient(
            timeout=self.timeout,
            follow_redirects=True,
            headers=headers,
            transport=self.transport,
        ) as client:
            response = await client.get(url)
            if not response.is_success:
                logger.debug("Extraction skipped for %s: HTTP %s", url, response.status_code)
                return None
            return response.text

    async def extract(self, url: str) -> str:
        """Fetch a page and return its main text, or "" on any failure."""
        try:
            html = await asyncio.wait_for(self._download(url), timeout=self.timeout)
            if not html:
                return ""
            return extract_from_html(html, max_chars=self.max_chars)
        except Exception as e:
            logger.debug("Extraction failed for %s: %s", url, e)
            return ""

    async def extract_all(self, urls: List[str]) -> Dict[str, str]:
        """Extract several pages concurrently, keyed by URL."""
        if not urls:
            return {}

        semaphore = asyncio.Semaphore(self.max_concurrent)

        async def extract_with_semaphore(url: str) -> str:
            async with semaphore:
                return await self.extract(url)

        unique_urls = list(dict.fromkeys(urls))
        texts = await asyncio.gather(*(extract_with_semaphore(url) for url in unique_urls))
        return dict(zip(unique_urls, texts))

    def extract_all_sync(self, urls: List[str]) -> Dict[str, str]:
        """Synchronous wrapper for extract_all."""
        return asyncio.run(self.extract_all(urls))
