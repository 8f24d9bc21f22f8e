"""Config command implementation."""

import typer
from rich.console import Console
from rich.markup import escape

from ..config import Config

console = Console()


def config_command() -> None:
    """Show the current configuration."""
    config = Config()
    try:
        settings = config.config
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    console.print(f"\n[bold]📂 Config file:[/bold] {config.config_path}")
    console.print(f"[bold]🧠 Model:[/bold] {settings.llm.model} ({settings.llm.provider})")

    console.print("\n[bold]📡 Feed sources:[/bold]")
    for feed in config.load_feeds():
        state = "" if feed.enabled else " [dim](disabled)[/dim]"
        console.print(f"  • {escape(feed.name)}: {escape(feed.url)}{state}")

    console.print("\n[bold]🎯 Topics:[/bold]")
    for topic in settings.topics:
        console.print(f"  • \\[{topic.priority}] {escape(topic.name)}: {escape(topic.description)}")
        console.print(f"[dim]    Keywords: {escape(', '.join(topic.keywords))}[/dim]")
    console.print()
