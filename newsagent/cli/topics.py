"""Topic management commands."""

from typing import List

import typer
from rich.console import Console
from rich.table import Table

from ..config import Config, TopicConfig, save_config

console = Console()
topics_app = typer.Typer(help="Manage interest topics")


def _load_or_exit() -> Config:
    config = Config()
    try:
        config.config
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)
    return config


@topics_app.command("list")
def topics_list() -> None:
    """List configured topics."""
    config = _load_or_exit()
    topics = config.config.topics

    if not topics:
        console.print("[yellow]No topics configured.[/yellow]")
        return

    table = Table(title="Topics")
    table.add_column("Name", style="cyan")
    table.add_column("Priority", style="magenta")
    table.add_column("Keywords", style="green")
    table.add_column("Description")

    for topic in topics:
        table.add_row(topic.name, topic.priority, ", ".join(topic.keywords), topic.description)

    console.print(table)


@topics_app.command("add")
def topics_add(
    name: str = typer.Option(..., "--name", "-n", help="Topic name"),
    description: str = typer.Option("", "--description", "-d", help="What the topic covers"),
    keywords: List[str] = typer.Option([], "--keyword", "-k", help="Keyword (repeatable)"),
    priority: str = typer.Option("medium", "--priority", "-p", help="high, medium or low"),
) -> None:
    """Add a topic."""
    config = _load_or_exit()
    model = config.config

    if any(t.name == name for t in model.topics):
        console.print(f"[red]Topic '{name}' already exists.[/red]")
        raise typer.Exit(1)
    if priority not in ("high", "medium", "low"):
        console.print(f"[red]Invalid priority '{priority}'. Use high, medium or low.[/red]")
        raise typer.Exit(1)

    topic = TopicConfig(name=name, description=description, keywords=keywords, priority=priority)
    updated = model.model_copy(update={"topics": [*model.topics, topic]})
    save_config(updated, config.config_path)

    console.print(f"[green]✅ Added topic: {name}[/green]")


@topics_app.command("remove")
def topics_remove(
    name: str = typer.Argument(..., help="Topic name to remove"),
) -> None:
    """Remove a topic."""
    config = _load_or_exit()
    model = config.config

    remaining = [t for t in model.topics if t.name != name]
    if len(remaining) == len(model.topics):
        console.print(f"[red]Topic '{name}' not found.[/red]")
        raise typer.Exit(1)

    save_config(model.model_copy(update={"topics": remaining}), config.config_path)
    console.print(f"[green]✅ Removed topic: {name}[/green]")
