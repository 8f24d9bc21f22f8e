"""Exceptions that terminate a pipeline run."""


class NewsAgentError(Exception):
    """Base class for fatal news agent errors."""


class ConfigurationError(NewsAgentError):
    """Configuration is invalid or a required credential is missing."""


class StoreError(NewsAgentError):
    """The seen-item store could not be opened."""
