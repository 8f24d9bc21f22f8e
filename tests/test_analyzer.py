import json

from conftest import make_item

from newsagent.classification import DeepAnalyzer, MockLLMProvider, TemplateAnalyzer
from newsagent.classification.analyzer import FAILURE_PREFIX
from newsagent.models import MatchCandidate


def _candidate(topics, title="Claude Code v2 released", summary="Big release", topic=0):
    return MatchCandidate(item=make_item(title, summary=summary), topic=topics[topic], relevance=0.9)


def test_valid_response_becomes_record(topics):
    response = "```json\n" + json.dumps(
        {
            "titleLocalized": "Claude Code v2 released",
            "summary": "Version 2 adds background tasks.",
            "keyPoints": ["Background tasks", "Faster startup"],
            "actionable": True,
            "recommendation": "Upgrade today",
        }
    ) + "\n```"
    analyzer = DeepAnalyzer(MockLLMProvider(responses=[response]))

    record = analyzer.analyze(_candidate(topics), "full article text")

    assert record.summary == "Version 2 adds background tasks."
    assert record.key_points == ["Background tasks", "Faster startup"]
    assert record.actionable is True
    assert record.recommendation == "Upgrade today"


def test_prompt_uses_content_and_language(topics):
    provider = MockLLMProvider(responses=['{"summary": "ok"}'])
    analyzer = DeepAnalyzer(provider, language="German")

    analyzer.analyze(_candidate(topics), "EXTRACTED BODY TEXT")

    assert "EXTRACTED BODY TEXT" in provider.calls[0]
    assert "Write in German" in provider.calls[0]


def test_empty_content_falls_back_to_summary(topics):
    provider = MockLLMProvider(responses=['{"summary": "ok"}'])

    DeepAnalyzer(provider).analyze(_candidate(topics, summary="feed summary text"), "")

    assert "feed summary text" in provider.calls[0]


def test_provider_error_degrades_to_failure_record(topics):
    analyzer = DeepAnalyzer(MockLLMProvider(responses=[TimeoutError("request timed out")]))

    record = analyzer.analyze(_candidate(topics), "text")

    assert record.summary.startswith(FAILURE_PREFIX)
    assert "request timed out" in record.summary
    assert record.title_localized == "Claude Code v2 released"
    assert record.key_points == []
    assert record.actionable is False


def test_unparseable_response_degrades_to_failure_record(topics):
    analyzer = DeepAnalyzer(MockLLMProvider(responses=["Sorry, I cannot help with that."]))

    record = analyzer.analyze(_candidate(topics), "text")

    assert record.summary == f"{FAILURE_PREFIX}: no JSON object in response"


def test_normalizes_partial_response(topics):
    response = json.dumps(
        {
            "summary": "x" * 500,
            "keyPoints": "single point",
            "actionable": "yes",
            "recommendation": "ignored when not actionable",
        }
    )
    analyzer = DeepAnalyzer(MockLLMProvider(responses=[response]), summary_max_chars=100)

    record = analyzer.analyze(_candidate(topics), "text")

    assert record.title_localized == "Claude Code v2 released"
    assert len(record.summary) == 100
    assert record.key_points == ["single point"]
    assert record.actionable is False
    assert record.recommendation == ""


def test_template_analyzer_uses_feed_metadata(topics):
    record = TemplateAnalyzer().analyze(_candidate(topics, summary="s" * 400), "")

    assert len(record.summary) == 150
    assert record.key_points == ["Source: Test Feed", "Keyword match: Claude Code releases"]
    assert record.actionable is True
    assert record.recommendation


def test_template_analyzer_medium_priority_not_actionable(topics):
    record = TemplateAnalyzer().analyze(_candidate(topics, summary="", topic=1), "")

    assert record.actionable is False
    assert record.recommendation == ""
    assert record.summary
