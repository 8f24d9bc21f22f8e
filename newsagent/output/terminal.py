"""Terminal report."""

from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.markup import escape
from rich.rule import Rule

from ..models import AnalyzedItem, RunStats
from .base import PRIORITY_LABELS, ReportMaterializer, group_by_priority
from .markdown import format_published, format_stats

PRIORITY_STYLES = {"high": "red", "medium": "yellow", "low": "blue"}


class TerminalReport(ReportMaterializer):
    """Prints results to the console."""

    def __init__(self, console: Optional[Console] = None) -> None:
        self.console = console or Console()

    def emit(self, results: List[AnalyzedItem], stats: RunStats, run_date: str) -> Optional[Path]:
        console = self.console
        console.print()
        console.print(Rule(f"[bold cyan]AI News Digest - {run_date}[/bold cyan]"))
        console.print(f"[dim]  {format_stats(stats, len(results))}[/dim]")

        if not results:
            console.print("\n[dim]  No new matching items[/dim]\n")
            return None

        for priority, items in group_by_priority(results).items():
            style = PRIORITY_STYLES[priority]
            label = PRIORITY_LABELS[priority]
            for result in items:
                analysis = result.analysis
                console.print()
                console.print(f"[{style}]  \\[{label}] {escape(result.topic.name)}[/{style}]")
                console.print(f"[bold]  {escape(result.item.title)}[/bold]")
                console.print(
                    f"[dim]  {escape(result.item.source_name)} | {format_published(result)}[/dim]"
                )
                console.print()
                console.print(f"  {escape(analysis.summary)}")
                if analysis.key_points:
                    console.print()
                    for point in analysis.key_points:
                        console.print(f"[cyan]   • {escape(point)}[/cyan]")
                if analysis.actionable and analysis.recommendation:
                    console.print()
                    console.print(f"[green]  → {escape(analysis.recommendation)}[/green]")
                console.print(f"[dim]  {escape(result.item.url)}[/dim]")

        console.print()
        return None
