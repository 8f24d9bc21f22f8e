"""Daily markdown report, appended to on repeated runs."""

from pathlib import Path
from typing import List, Optional

import pendulum

from ..models import AnalyzedItem, RunStats
from .base import PRIORITY_LABELS, ReportMaterializer, group_by_priority

PRIORITY_MARKERS = {"high": "🔴", "medium": "🟡", "low": "🔵"}


def format_published(item: AnalyzedItem) -> str:
    if item.item.published is None:
        return "Unknown date"
    return pendulum.instance(item.item.published).in_timezone(pendulum.local_timezone()).format("YYYY-MM-DD HH:mm")


def format_entries(results: List[AnalyzedItem]) -> str:
    """Markdown for the result entries, grouped by priority."""
    lines = []
    for priority, items in group_by_priority(results).items():
        marker = PRIORITY_MARKERS[priority]
        label = PRIORITY_LABELS[priority]
        for result in items:
            analysis = result.analysis
            lines.append(f"## {marker} [{label}] {result.topic.name}")
            lines.append("")
            lines.append(f"### {result.item.title}")
            lines.append("")
            if analysis.title_localized and analysis.title_localized != result.item.title:
                lines.append(f"*{analysis.title_localized}*")
                lines.append("")
            lines.append(f"**Source**: {result.item.source_name} | **Published**: {format_published(result)}")
            lines.append("")
            lines.append(f"**Summary**: {analysis.summary}")
            lines.append("")
            if analysis.key_points:
                lines.append("**Key points**:")
                for point in analysis.key_points:
                    lines.append(f"- {point}")
                lines.append("")
            if analysis.actionable and analysis.recommendation:
                lines.append(f"> 💡 **Recommendation**: {analysis.recommendation}")
                lines.append("")
            lines.append(f"🔗 [Read original]({result.item.url})")
            lines.append("")
            lines.append("---")
            lines.append("")
    return "\n".join(lines)


def format_stats(stats: RunStats, matched: int) -> str:
    return (
        f"Scanned {stats.source_count} sources | {stats.total_fetched} items | "
        f"{stats.new_count} new | {matched} matched"
    )


class MarkdownReport(ReportMaterializer):
    """Writes ``<output_dir>/<run_date>.md``.

    The first run of a day creates the file; later runs append an update
    section containing only their own results. A run without results writes
    nothing.
    """

    def __init__(self, output_dir: Path) -> None:
        self.output_dir = output_dir

    def report_path(self, run_date: str) -> Path:
        return self.output_dir / f"{run_date}.md"

    def emit(self, results: List[AnalyzedItem], stats: RunStats, run_date: str) -> Optional[Path]:
        if not results:
            return None

        now = pendulum.now()
        path = self.report_path(run_date)
        path.parent.mkdir(parents=True, exist_ok=True)

        summary_line = f"> {format_stats(stats, len(results))} | Generated {now.format('HH:mm:ss')}"
        entries = format_entries(results)

        if path.exists():
            content = f"\n\n---\n\n# Update ({now.format('HH:mm')})\n\n{summary_line}\n\n{entries}"
            with open(path, "a", encoding="utf-8") as f:
                f.write(content)
        else:
            content = f"# AI News Digest - {run_date}\n\n{summary_line}\n\n---\n\n{entries}"
            path.write_text(content, encoding="utf-8")

        return path
