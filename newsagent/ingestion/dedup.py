"""Filter fetched items against the seen-item store."""

import logging
from typing import List

from .models import FeedItem

logger = logging.getLogger(__name__)


class Deduplicator:
    """Drop items whose URL has already been processed."""

    def __init__(self, store) -> None:
        """
        Initialize deduplicator.

        Args:
            store: Anything with ``has_been_processed(url) -> bool``
        """
        self.store = store

    def filter_unseen(self, items: List[FeedItem]) -> List[FeedItem]:
        """
        Return items not yet processed, in input order.

        A URL repeated within the batch is kept once (first occurrence).
        The store is only read.
        """
        unseen = []
        batch_urls = set()

        for item in items:
            if item.url in batch_urls:
                continue
            batch_urls.add(item.url)
            if not self.store.has_been_processed(item.url):
                unseen.append(item)

        logger.info("New items: %d (skipped %d)", len(unseen), len(items) - len(unseen))
        return unseen
