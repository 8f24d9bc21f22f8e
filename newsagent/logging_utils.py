"""Logging setup."""

import logging
from pathlib import Path
from typing import Optional

from rich.logging import RichHandler

from .config.models import LoggingConfig


def _level_from_string(level: str) -> int:
    return getattr(logging, level.upper(), logging.INFO)


def setup_logging(cfg: Optional[LoggingConfig] = None, verbose: bool = False) -> logging.Logger:
    """Configure the ``newsagent`` logger with a rich console handler and an optional file."""
    cfg = cfg or LoggingConfig()
    level = logging.DEBUG if verbose else _level_from_string(cfg.level)

    logger = logging.getLogger("newsagent")
    logger.setLevel(level)
    logger.handlers = []
    logger.propagate = False

    console_handler = RichHandler(rich_tracebacks=True, show_time=False, show_path=False)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(console_handler)

    if cfg.file:
        file_path = Path(cfg.file).expanduser()
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(file_path, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
        logger.addHandler(file_handler)

    return logger
