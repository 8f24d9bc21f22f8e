"""Init command implementation."""

from pathlib import Path
from typing import List

import typer
from rich.console import Console
from rich.panel import Panel

from ..config import Config, ConfigModel, FeedConfig, TopicConfig, save_config, save_sources
from ..config.loader import DEFAULT_CONFIG_DIR
from ..db import SeenItemStore
from ..errors import StoreError

console = Console()


def create_default_feeds() -> List[FeedConfig]:
    """Create default AI news feeds."""
    return [
        FeedConfig(
            name="Anthropic Engineering (GitHub)",
            url="https://raw.githubusercontent.com/conoro/anthropic-engineering-rss-feed/main/anthropic_engineering_rss.xml",
        ),
        FeedConfig(name="Hacker News - AI/LLM", url="https://hnrss.org/newest?q=AI+LLM+agent"),
        FeedConfig(name="Hacker News - Claude", url="https://hnrss.org/newest?q=claude+anthropic"),
        FeedConfig(
            name="The Verge - AI",
            url="https://www.theverge.com/rss/ai-artificial-intelligence/index.xml",
            enabled=False,
        ),
    ]


def create_default_topics() -> List[TopicConfig]:
    """Create the starter topic list."""
    return [
        TopicConfig(
            name="Claude Code releases",
            description="New Claude Code CLI versions, features and productivity improvements",
            keywords=["claude code", "claude cli", "anthropic cli"],
            priority="high",
        ),
    ]


def init_command(
    config_dir: Path = typer.Option(
        DEFAULT_CONFIG_DIR,
        "--config-dir",
        "-c",
        help="Configuration directory",
    ),
    workspace: Path = typer.Option(
        Path.home() / ".newsagent",
        "--workspace",
        "-w",
        help="Workspace root directory",
    ),
    db_host: str = typer.Option("localhost", "--db-host", help="Postgres host"),
    db_port: int = typer.Option(5432, "--db-port", help="Postgres port"),
    db_name: str = typer.Option("newsagent", "--db-name", help="Database name"),
    db_user: str = typer.Option("newsagent", "--db-user", help="Database user"),
    seed_feeds: bool = typer.Option(
        True,
        "--seed-feeds/--no-seed-feeds",
        help="Seed default AI news feeds",
    ),
) -> None:
    """Initialize AI News Agent configuration and database."""
    console.print(Panel.fit("📰 AI News Agent - Initialization", style="bold blue"))

    config_dir.mkdir(parents=True, exist_ok=True)
    config_path = config_dir / "config.yaml"
    sources_path = config_dir / "sources.yaml"

    config = ConfigModel(
        workspace_root=str(workspace),
        postgres={
            "host": db_host,
            "port": db_port,
            "database": db_name,
            "user": db_user,
            "password_env": "NEWSAGENT_DB_PASSWORD",
        },
        topics=create_default_topics(),
    )

    save_config(config, config_path)
    console.print(f"✅ Created config: {config_path}")

    if seed_feeds:
        feeds = create_default_feeds()
        save_sources(feeds, sources_path)
        console.print(f"✅ Created sources: {sources_path} (seeded with {len(feeds)} feeds)")
    else:
        save_sources([], sources_path)
        console.print(f"✅ Created sources: {sources_path} (empty)")

    workspace.mkdir(parents=True, exist_ok=True)
    (workspace / "reports").mkdir(exist_ok=True)
    console.print(f"✅ Created workspace: {workspace}")

    # Opening the store validates the connection and applies the schema
    console.print("\n[bold]Initializing database...[/bold]")
    db_config = Config(config_path).get_db_config()
    try:
        with SeenItemStore(db_config):
            pass
    except StoreError as e:
        console.print(
            f"[red]❌ {e}[/red]\n"
            "Please ensure Postgres is running and credentials are correct.\n"
            "Set the password via environment variable: "
            "[bold]export NEWSAGENT_DB_PASSWORD=your_password[/bold]"
        )
        raise typer.Exit(1)

    console.print("✅ Database schema initialized")

    console.print(
        Panel(
            f"[green]✅ AI News Agent initialized successfully![/green]\n\n"
            f"Configuration: {config_path}\n"
            f"Sources: {sources_path}\n"
            f"Workspace: {workspace}\n\n"
            f"Next steps:\n"
            f"1. Set database password: [bold]export NEWSAGENT_DB_PASSWORD=your_password[/bold]\n"
            f"2. Set LLM API key: [bold]export OPENAI_API_KEY=your_key[/bold]\n"
            f"3. Try it offline: [bold]newsagent run --dry-run[/bold]",
            style="green",
        )
    )
