"""Configuration management for the AI News Agent."""

from .loader import Config, load_config, load_sources, save_config, save_sources
from .models import (
    AnalysisConfig,
    ClassifierConfig,
    ConfigModel,
    FeedConfig,
    LLMConfig,
    PostgresConfig,
    RunDefaults,
    TopicConfig,
)

__all__ = [
    "Config",
    "ConfigModel",
    "AnalysisConfig",
    "ClassifierConfig",
    "FeedConfig",
    "LLMConfig",
    "PostgresConfig",
    "RunDefaults",
    "TopicConfig",
    "load_config",
    "load_sources",
    "save_config",
    "save_sources",
]
