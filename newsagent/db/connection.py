"""Database connection settings."""

from typing import Any, Dict

from psycopg.conninfo import make_conninfo


class DatabaseConfig:
    """Database configuration."""

    def __init__(self, config: Dict[str, Any]) -> None:
        """Initialize database config from dict."""
        self.host = config.get("host", "localhost")
        self.port = config.get("port", 5432)
        self.database = config.get("database", "newsagent")
        self.user = config.get("user", "newsagent")
        self.password = config.get("password") or ""
        self.connect_timeout = float(config.get("connect_timeout", 10.0))
        self.dsn = config.get("dsn")

    @property
    def connection_string(self) -> str:
        """Get psycopg connection string."""
        if self.dsn:
            return self.dsn
        return make_conninfo(
            host=self.host,
            port=self.port,
            dbname=self.database,
            user=self.user,
            password=self.password,
        )
