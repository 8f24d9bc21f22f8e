"""Database management for the AI News Agent."""

from .connection import DatabaseConfig
from .store import SeenItemStore, hash_url

__all__ = ["DatabaseConfig", "SeenItemStore", "hash_url"]
