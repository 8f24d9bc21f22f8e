from pathlib import Path

from conftest import make_item

from newsagent.models import AnalysisRecord, AnalyzedItem, MatchCandidate, RunStats
from newsagent.output import MarkdownReport, TerminalReport, group_by_priority


def _result(title, topic, summary="A summary", actionable=False):
    candidate = MatchCandidate(item=make_item(title), topic=topic, relevance=0.9)
    analysis = AnalysisRecord(
        title_localized=title,
        summary=summary,
        key_points=["First point"],
        actionable=actionable,
        recommendation="Try it" if actionable else "",
    )
    return AnalyzedItem(candidate=candidate, content="", analysis=analysis)


def _stats():
    return RunStats(source_count=3, total_fetched=8, new_count=5, matched_count=2)


def test_first_run_creates_dated_report(tmp_path: Path, topics) -> None:
    report = MarkdownReport(tmp_path)
    results = [_result("Low item", topics[1]), _result("High item", topics[0], actionable=True)]

    path = report.emit(results, _stats(), "2026-03-01")

    assert path == tmp_path / "2026-03-01.md"
    text = path.read_text(encoding="utf-8")
    assert text.startswith("# AI News Digest - 2026-03-01")
    assert "Scanned 3 sources | 8 items | 5 new | 2 matched" in text
    assert text.index("High item") < text.index("Low item")
    assert "[HIGH] Claude Code releases" in text
    assert "**Recommendation**: Try it" in text
    assert "- First point" in text


def test_second_run_same_day_appends_update(tmp_path: Path, topics) -> None:
    report = MarkdownReport(tmp_path)
    report.emit([_result("Morning item", topics[0])], _stats(), "2026-03-01")

    report.emit([_result("Evening item", topics[0])], _stats(), "2026-03-01")

    text = (tmp_path / "2026-03-01.md").read_text(encoding="utf-8")
    assert text.count("# AI News Digest") == 1
    assert "# Update (" in text
    assert text.index("Morning item") < text.index("# Update (") < text.index("Evening item")


def test_empty_results_write_nothing(tmp_path: Path) -> None:
    report = MarkdownReport(tmp_path)

    assert report.emit([], _stats(), "2026-03-01") is None
    assert not (tmp_path / "2026-03-01.md").exists()


def test_empty_run_leaves_existing_report_unchanged(tmp_path: Path, topics) -> None:
    report = MarkdownReport(tmp_path)
    path = report.emit([_result("Only item", topics[0])], _stats(), "2026-03-01")
    before = path.read_text(encoding="utf-8")

    report.emit([], _stats(), "2026-03-01")

    assert path.read_text(encoding="utf-8") == before


def test_group_by_priority_orders_high_first(topics) -> None:
    results = [_result("m1", topics[1]), _result("h1", topics[0]), _result("m2", topics[1])]

    grouped = group_by_priority(results)

    assert list(grouped) == ["high", "medium"]
    assert [r.item.title for r in grouped["medium"]] == ["m1", "m2"]


def test_terminal_report_escapes_markup(topics, capsys) -> None:
    TerminalReport().emit([_result("Release [beta] notes", topics[0])], _stats(), "2026-03-01")

    out = capsys.readouterr().out
    assert "Release [beta] notes" in out
    assert "[HIGH]" in out
