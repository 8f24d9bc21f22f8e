"""History command implementation."""

import typer
from rich.console import Console
from rich.markup import escape

from ..config import Config
from ..db import SeenItemStore
from ..errors import NewsAgentError

console = Console()


def history_command(
    days: int = typer.Option(7, "--days", "-d", help="Look back this many days", min=1),
    limit: int = typer.Option(50, "--limit", "-n", help="Maximum records to show", min=1),
    matched_only: bool = typer.Option(
        True, "--matched-only/--all", help="Only show items that matched a topic"
    ),
) -> None:
    """Show recently processed items."""
    try:
        config = Config()
        with SeenItemStore(config.get_db_config()) as store:
            records = store.recent_history(days=days, limit=limit)
    except FileNotFoundError as e:
        console.print(f"[red]{e}[/red]\nRun 'newsagent init' first.")
        raise typer.Exit(1)
    except NewsAgentError as e:
        console.print(f"[red]❌ {e}[/red]")
        raise typer.Exit(1)

    if matched_only:
        records = [r for r in records if r.matched_topic]

    if not records:
        console.print("[dim]No history yet[/dim]")
        return

    console.print(f"\n[bold]📋 Last {days} days ({len(records)} records)[/bold]\n")
    for record in records:
        topic = record.matched_topic or "unmatched"
        console.print(f"[yellow]  \\[{escape(topic)}][/yellow] [bold]{escape(record.title or '')}[/bold]")
        summary = (record.analysis or {}).get("summary")
        if summary:
            console.print(f"[dim]  {escape(summary[:80])}...[/dim]")
        created = record.created_at.strftime("%Y-%m-%d %H:%M") if record.created_at else ""
        console.print(f"[dim]  {escape(record.url)} | {created}[/dim]")
        console.print()
