"""AI News Agent - feed ingestion, topic classification and incremental reports."""

__version__ = "0.1.0"
