"""Seen-item store: the ledger that makes pipeline runs idempotent."""

import hashlib
import logging
import threading
from typing import Any, Dict, List, Optional

import psycopg
from psycopg.rows import dict_row
from psycopg.types.json import Jsonb
from psycopg_pool import ConnectionPool

from ..errors import StoreError
from ..ingestion.models import FeedItem
from ..models import AnalysisRecord, ProcessedRecord
from .connection import DatabaseConfig
from .schema import SCHEMA_SQL

logger = logging.getLogger(__name__)


def hash_url(url: str) -> str:
    """Stable primary key for a URL."""
    return hashlib.md5(url.encode("utf-8")).hexdigest()


class SeenItemStore:
    """Persistent record of processed item URLs.

    The connection pool is created on ``open()`` or lazily on first use and
    released by ``close()``. Inserts are serialized through one lock and each
    runs in its own transaction, so a row is either fully written or absent.
    """

    def __init__(self, db_config: Dict[str, Any], max_connections: int = 4) -> None:
        """Initialize the store without connecting."""
        self.db_config = DatabaseConfig(db_config)
        self.max_connections = max_connections
        self._pool: Optional[ConnectionPool] = None
        self._open_lock = threading.Lock()
        self._write_lock = threading.Lock()

    def __enter__(self) -> "SeenItemStore":
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @property
    def is_open(self) -> bool:
        return self._pool is not None

    def open(self) -> None:
        """Connect and ensure the schema exists.

        Raises:
            StoreError: If the database cannot be reached or initialized.
        """
        with self._open_lock:
            if self._pool is not None:
                return

            pool = ConnectionPool(
                self.db_config.connection_string,
                min_size=1,
                max_size=self.max_connections,
                kwargs={"row_factory": dict_row},
                open=False,
            )
            try:
                pool.open(wait=True, timeout=self.db_config.connect_timeout)
                with pool.connection() as conn:
                    with conn.cursor() as cur:
                        cur.execute(SCHEMA_SQL)
                    conn.commit()
            except psycopg.Error as e:
                pool.close()
                raise StoreError(f"Cannot open seen-item store: {e}") from e

            self._pool = pool
            logger.debug("Seen-item store opened (%s)", self.db_config.database)

    def close(self) -> None:
        """Release all connections."""
        with self._open_lock:
            if self._pool is not None:
                self._pool.close()
                self._pool = None
                logger.debug("Seen-item store closed")

    def _get_pool(self) -> ConnectionPool:
        if self._pool is None:
            self.open()
        return self._pool

    def has_been_processed(self, url: str) -> bool:
        """Check whether a URL already has a record.

        A failed read is logged and reported as "not seen".
        """
        pool = self._get_pool()
        try:
            with pool.connection() as conn:
                with conn.cursor() as cur:
                    cur.execute(
                        "SELECT 1 FROM processed_items WHERE url_hash = %s",
                        (hash_url(url),),
                    )
                    return cur.fetchone() is not None
        except psycopg.Error as e:
            logger.error("Seen-item lookup failed for %s: %s", url, e)
            return False

    def mark_processed(
        self,
        item: FeedItem,
        topic_name: str = "",
        analysis: Optional[AnalysisRecord] = None,
    ) -> bool:
        """
        Record an item as processed.

        Returns:
            True if a new row was written, False if the URL was already recorded.
        """
        analysis_json = Jsonb(analysis.model_dump()) if analysis is not None else None
        pool = self._get_pool()

        with self._write_lock:
            with pool.connection() as conn:
                with conn.cursor() as cur:
                    cur.execute(
                        """
                        INSERT INTO processed_items (
                            url_hash, url, title, source_name, matched_topic, analysis_json
                        ) VALUES (%s, %s, %s, %s, %s, %s)
                        ON CONFLICT (url_hash) DO NOTHING
                        """,
                        (
                            hash_url(item.url),
                            item.url,
                            item.title,
                            item.source_name,
                            topic_name or "",
                            analysis_json,
                        ),
                    )
                    inserted = cur.rowcount == 1
                conn.commit()

        return inserted

    def recent_history(self, days: int = 7, limit: int = 50) -> List[ProcessedRecord]:
        """Get records created within the last ``days`` days, newest first.

        Raises:
            StoreError: If the query fails.
        """
        try:
            with self._get_pool().connection() as conn:
                with conn.cursor() as cur:
                    cur.execute(
                        """
                        SELECT url_hash, url, title, source_name, matched_topic,
                               analysis_json, created_at
                        FROM processed_items
                        WHERE created_at >= CURRENT_TIMESTAMP - make_interval(days => %s)
                        ORDER BY created_at DESC
                        LIMIT %s
                        """,
                        (int(days), int(limit)),
                    )
                    rows = cur.fetchall()
        except psycopg.Error as e:
            raise StoreError(f"Cannot read history: {e}") from e

        return [
            ProcessedRecord(
                url_hash=row["url_hash"],
                url=row["url"],
                title=row["title"],
                source_name=row["source_name"],
                matched_topic=row["matched_topic"] or "",
                analysis=row["analysis_json"],
                created_at=row["created_at"],
            )
            for row in rows
        ]

    def count(self) -> int:
        """Total number of records."""
        with self._get_pool().connection() as conn:
            with conn.cursor() as cur:
                cur.execute("SELECT COUNT(*) AS n FROM processed_items")
                return cur.fetchone()["n"]
