"""Configuration loader."""

import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import BaseModel, ValidationError

from .models import ConfigModel, FeedConfig

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_DIR = Path.home() / ".config" / "newsagent"


def _with_secret(section: BaseModel, field: str, env_field: str) -> Dict[str, Any]:
    """Dump a config section, filling ``field`` from the variable named by ``env_field``."""
    data = section.model_dump()
    env_name = data.get(env_field)
    if env_name and os.environ.get(env_name):
        data[field] = os.environ[env_name]
    return data


class Config:
    """Configuration manager.

    ``config.yaml`` holds settings and topics, ``sources.yaml`` next to it
    holds the feed list. The path defaults to ``$NEWSAGENT_CONFIG`` or
    ``~/.config/newsagent/config.yaml``.
    """

    def __init__(self, config_path: Optional[Path] = None) -> None:
        if config_path is None:
            config_path = Path(
                os.environ.get("NEWSAGENT_CONFIG", DEFAULT_CONFIG_DIR / "config.yaml")
            ).expanduser()
        self.config_path = config_path
        self._config: Optional[ConfigModel] = None

    @classmethod
    def from_model(cls, model: ConfigModel, config_path: Optional[Path] = None) -> "Config":
        """Wrap an already-built configuration model."""
        config = cls(config_path)
        config._config = model
        return config

    @property
    def config(self) -> ConfigModel:
        """Loaded settings, read on first access."""
        if self._config is None:
            self._config = load_config(self.config_path)
        return self._config

    @property
    def sources_path(self) -> Path:
        return self.config_path.parent / "sources.yaml"

    @property
    def workspace_root(self) -> Path:
        """Workspace directory, created if missing."""
        root = Path(self.config.workspace_root).expanduser()
        root.mkdir(parents=True, exist_ok=True)
        return root

    @property
    def reports_dir(self) -> Path:
        """Directory markdown reports are written to."""
        configured = self.config.output.markdown.dir
        if configured:
            return Path(configured).expanduser()
        return self.workspace_root / "reports"

    def load_feeds(self) -> List[FeedConfig]:
        """Load feed sources, or an empty list when sources.yaml is missing."""
        try:
            return load_sources(self.sources_path)
        except FileNotFoundError:
            logger.warning("Sources file not found: %s", self.sources_path)
            return []

    def get_db_config(self) -> Dict[str, Any]:
        """Postgres settings with the password resolved from ``password_env``."""
        return _with_secret(self.config.postgres, "password", "password_env")

    def get_llm_config(self) -> Dict[str, Any]:
        """LLM settings with the API key resolved from ``api_key_env``."""
        return _with_secret(self.config.llm, "api_key", "api_key_env")


def _read_yaml(path: Path, label: str) -> Dict[str, Any]:
    if not path.exists():
        raise FileNotFoundError(f"{label.capitalize()} file not found: {path}")
    try:
        with open(path, encoding="utf-8") as f:
            return yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {label} file: {e}")


def _write_yaml(data: Dict[str, Any], path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False, allow_unicode=True)


def load_config(config_path: Path) -> ConfigModel:
    """
    Load settings from YAML.

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the YAML is malformed or fails validation
    """
    data = _read_yaml(config_path, "config")
    try:
        return ConfigModel(**data)
    except ValidationError as e:
        raise ValueError(f"Invalid configuration: {e}")


def load_sources(sources_path: Path) -> List[FeedConfig]:
    """Load feed sources from YAML. Invalid entries are skipped with a warning."""
    data = _read_yaml(sources_path, "sources")

    feeds = []
    for entry in data.get("sources") or []:
        try:
            feeds.append(FeedConfig(**entry))
        except (TypeError, ValidationError) as e:
            name = entry.get("name", "unknown") if isinstance(entry, dict) else "unknown"
            logger.warning("Skipping invalid source %s: %s", name, e)
    return feeds


def save_config(config: ConfigModel, config_path: Path) -> None:
    _write_yaml(config.model_dump(), config_path)


def save_sources(sources: List[FeedConfig], sources_path: Path) -> None:
    _write_yaml({"sources": [s.model_dump() for s in sources]}, sources_path)
