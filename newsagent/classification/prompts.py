"""Prompt templates for relevance filtering and deep analysis."""

from typing import List

from ..config import TopicConfig
from ..ingestion.models import FeedItem

QUICK_FILTER_PROMPT = """You are a news filtering assistant. Decide which of the articles below are relevant to the user's topics.

## User topics
{topics}

## Articles
{articles}

## Output
Return a JSON array containing only the matching articles. Each element:
{{"index": <article number>, "topicIndex": <number of the best matching topic>, "relevance": <0.0-1.0>}}

Only include results with relevance >= {min_relevance}. If nothing matches, return [].
Output JSON only, nothing else."""

DEEP_ANALYSIS_PROMPT = """You are a technology news analyst. Analyze the article below with a focus on how it relates to the user's topic.

## User topic
Name: {topic_name}
Description: {topic_description}

## Article
Title: {title}
Source: {source}
Content:
{content}

## Output
Write in {language}. Return a JSON object only, nothing else:
{{
  "titleLocalized": "the article title in {language} (keep it unchanged if it already is)",
  "summary": "a summary of at most {summary_max_chars} characters, focused on what matters for the topic",
  "keyPoints": ["key point 1", "key point 2", "key point 3"],
  "actionable": true or false (whether the user should act now, e.g. upgrade or try a feature),
  "recommendation": "one-sentence suggested action, empty string when actionable is false"
}}"""


def format_topics(topics: List[TopicConfig]) -> str:
    """Numbered topic catalog."""
    return "\n".join(
        f"[{i}] {t.name} ({t.priority}): {t.description}\n    Keywords: {', '.join(t.keywords)}"
        for i, t in enumerate(topics)
    )


def format_articles(items: List[FeedItem], summary_chars: int = 200) -> str:
    """Numbered article list, indexed within the batch."""
    return "\n\n".join(
        f'[{j}] "{item.title}" ({item.source_name})\n    {item.summary[:summary_chars]}'
        for j, item in enumerate(items)
    )


def build_quick_filter_prompt(
    items: List[FeedItem], topics: List[TopicConfig], min_relevance: float
) -> str:
    return QUICK_FILTER_PROMPT.format(
        topics=format_topics(topics),
        articles=format_articles(items),
        min_relevance=min_relevance,
    )


def build_analysis_prompt(
    item: FeedItem,
    topic: TopicConfig,
    content: str,
    language: str,
    summary_max_chars: int,
) -> str:
    return DEEP_ANALYSIS_PROMPT.format(
        topic_name=topic.name,
        topic_description=topic.description,
        title=item.title,
        source=item.source_name,
        content=content,
        language=language,
        summary_max_chars=summary_max_chars,
    )
