"""Feed source management commands."""

from typing import List, Optional

import typer
from rich.console import Console
from rich.table import Table

from ..config import Config, FeedConfig, load_sources, save_sources
from ..ingestion.rss_fetcher import RSSFetcher, print_feed_summary

console = Console()
sources_app = typer.Typer(help="Manage feed sources")


def _load_or_exit(config: Config) -> List[FeedConfig]:
    try:
        return load_sources(config.sources_path)
    except FileNotFoundError:
        console.print("[red]Sources file not found. Run 'newsagent init' first.[/red]")
        raise typer.Exit(1)


@sources_app.command("list")
def sources_list() -> None:
    """List all configured feeds."""
    config = Config()
    sources = _load_or_exit(config)

    if not sources:
        console.print("[yellow]No sources configured.[/yellow]")
        return

    table = Table(title="Configured Sources")
    table.add_column("Name", style="cyan")
    table.add_column("Enabled", style="yellow")
    table.add_column("URL", style="blue")

    for source in sources:
        table.add_row(source.name, "✓" if source.enabled else "✗", source.url)

    console.print(table)


@sources_app.command("add")
def sources_add(
    name: str = typer.Option(..., "--name", "-n", help="Source name"),
    url: str = typer.Option(..., "--url", "-u", help="RSS/Atom feed URL"),
    disabled: bool = typer.Option(False, "--disabled", help="Add the feed disabled"),
) -> None:
    """Add a new feed."""
    config = Config()
    try:
        sources = load_sources(config.sources_path)
    except FileNotFoundError:
        sources = []

    if any(s.name == name or s.url == url for s in sources):
        console.print(f"[red]Source '{name}' or URL already exists.[/red]")
        raise typer.Exit(1)

    sources.append(FeedConfig(name=name, url=url, enabled=not disabled))
    save_sources(sources, config.sources_path)

    console.print(f"[green]✅ Added source: {name}[/green]")


@sources_app.command("remove")
def sources_remove(
    name: str = typer.Argument(..., help="Source name to remove"),
) -> None:
    """Remove a feed."""
    config = Config()
    sources = _load_or_exit(config)

    remaining = [s for s in sources if s.name != name]
    if len(remaining) == len(sources):
        console.print(f"[red]Source '{name}' not found.[/red]")
        raise typer.Exit(1)

    save_sources(remaining, config.sources_path)
    console.print(f"[green]✅ Removed source: {name}[/green]")


@sources_app.command("test")
def sources_test(
    name: Optional[str] = typer.Argument(None, help="Source name to test (or test all)"),
    timeout: float = typer.Option(10.0, "--timeout", "-t", help="Per-feed timeout in seconds"),
) -> None:
    """Fetch feeds and report item counts and failures."""
    config = Config()
    sources = _load_or_exit(config)

    if name:
        sources = [s for s in sources if s.name == name]
        if not sources:
            console.print(f"[red]Source '{name}' not found.[/red]")
            raise typer.Exit(1)

    for source in sources:
        if not source.enabled:
            console.print(f"[yellow]⚠️  {source.name}: Disabled[/yellow]")

    fetcher = RSSFetcher(timeout=timeout)
    results = fetcher.fetch_feeds_sync(sources)
    if results:
        print_feed_summary(results)
