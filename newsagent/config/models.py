"""Configuration models."""

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class PostgresConfig(BaseModel):
    """Postgres configuration."""

    host: str = Field("localhost", description="Database host")
    port: int = Field(5432, description="Database port")
    database: str = Field("newsagent", description="Database name")
    user: str = Field("newsagent", description="Database user")
    password: Optional[str] = Field(None, description="Database password")
    password_env: Optional[str] = Field(None, description="Environment variable for password")
    connect_timeout: float = Field(10.0, description="Seconds to wait for the first connection", gt=0)


class TopicConfig(BaseModel):
    """A user interest used as classification context."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Topic name, unique within the configuration", min_length=1)
    description: str = Field("", description="Free text describing what the topic covers")
    keywords: List[str] = Field(default_factory=list, description="Keywords, in priority order")
    priority: Literal["high", "medium", "low"] = Field("medium", description="Topic priority")


class FeedConfig(BaseModel):
    """Feed source configuration from sources.yaml."""

    name: str = Field(..., description="Source name")
    url: str = Field(..., description="RSS/Atom feed URL")
    enabled: bool = Field(True, description="Whether source is enabled")


class RunDefaults(BaseModel):
    """Default run parameters."""

    max_articles_per_run: int = Field(50, description="Soft cap on items per run", ge=1, le=1000)
    fetch_timeout: float = Field(15.0, description="Per-source fetch timeout in seconds", gt=0)
    extract_timeout: float = Field(15.0, description="Per-article extraction timeout in seconds", gt=0)
    max_concurrent_feeds: int = Field(5, ge=1, le=50)
    max_concurrent_extractions: int = Field(3, ge=1, le=20)


class ClassifierConfig(BaseModel):
    """Stage 1 relevance classifier configuration."""

    batch_size: int = Field(10, description="Items per classification request", ge=1, le=50)
    min_relevance: float = Field(
        0.6, description="Relevance the model is asked to emit at or above", ge=0.0, le=1.0
    )
    admission_threshold: float = Field(
        0.6, description="Relevance required to reach deep analysis", ge=0.0, le=1.0
    )
    invalid_topic_policy: Literal["first_topic", "drop"] = Field(
        "first_topic", description="What to do with a match whose topic index is out of range"
    )

    @model_validator(mode="after")
    def validate_thresholds(self) -> "ClassifierConfig":
        """Admission must not be looser than what the model is asked to emit."""
        if self.admission_threshold < self.min_relevance:
            raise ValueError(
                f"admission_threshold ({self.admission_threshold}) must be >= "
                f"min_relevance ({self.min_relevance})"
            )
        return self


class AnalysisConfig(BaseModel):
    """Stage 2 deep analysis configuration."""

    language: str = Field("English", description="Language of the generated analysis")
    summary_max_chars: int = Field(300, ge=50, le=2000)
    content_max_chars: int = Field(3000, ge=200, le=20000)


class LLMConfig(BaseModel):
    """LLM provider configuration."""

    provider: str = Field("openai", description="LLM provider (openai)")
    model: str = Field("gpt-4o-mini", description="Model name")
    api_key_env: Optional[str] = Field("OPENAI_API_KEY", description="Environment variable for API key")
    api_key: Optional[str] = Field(None, description="API key (prefer api_key_env)")
    base_url: Optional[str] = Field(None, description="Base URL for OpenAI-compatible endpoints")
    timeout: float = Field(60.0, description="Per-request timeout in seconds", gt=0)
    max_tokens: int = Field(1024, ge=64, le=8192)


class MarkdownOutputConfig(BaseModel):
    """Markdown report output."""

    enabled: bool = True
    dir: Optional[str] = Field(None, description="Report directory (default: <workspace>/reports)")


class OutputConfig(BaseModel):
    """Report outputs."""

    terminal: bool = True
    markdown: MarkdownOutputConfig = Field(default_factory=MarkdownOutputConfig)


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field("INFO", description="Log level")
    file: Optional[str] = Field(None, description="Optional log file path")


class ConfigModel(BaseModel):
    """Main configuration model."""

    workspace_root: str = Field("~/.newsagent", description="Root directory for outputs")
    postgres: PostgresConfig = Field(default_factory=PostgresConfig)
    topics: List[TopicConfig] = Field(default_factory=list)
    llm: LLMConfig = Field(default_factory=LLMConfig)
    run_defaults: RunDefaults = Field(default_factory=RunDefaults)
    classifier: ClassifierConfig = Field(default_factory=ClassifierConfig)
    analysis: AnalysisConfig = Field(default_factory=AnalysisConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @field_validator("topics")
    @classmethod
    def validate_unique_topics(cls, v: List[TopicConfig]) -> List[TopicConfig]:
        """Topic names are used as keys in stored records."""
        seen = set()
        for topic in v:
            if topic.name in seen:
                raise ValueError(f"Duplicate topic name: {topic.name}")
            seen.add(topic.name)
        return v
