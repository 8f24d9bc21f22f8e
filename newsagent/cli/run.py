"""Run command implementation."""

from typing import Optional

import typer
from rich.console import Console

from ..config import Config
from ..db import SeenItemStore
from ..errors import NewsAgentError
from ..logging_utils import setup_logging
from ..pipeline import PipelineOrchestrator

console = Console()


def run_command(
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        help="Use local keyword matching and skip all LLM calls",
    ),
    run_date: Optional[str] = typer.Option(
        None,
        "--date",
        help="Report date (YYYY-MM-DD). Default: today",
    ),
    max_items: Optional[int] = typer.Option(
        None,
        "--max-items",
        help="Maximum feed items to process",
        min=1,
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Fetch feeds, match new items against topics and write the digest."""
    try:
        config = Config()
        setup_logging(config.config.logging, verbose=verbose)

        store = SeenItemStore(config.get_db_config())
        orchestrator = PipelineOrchestrator(config, store)
        orchestrator.run(run_date=run_date, dry_run=dry_run, max_items=max_items)

    except KeyboardInterrupt:
        console.print("\n[yellow]Pipeline interrupted by user[/yellow]")
        raise typer.Exit(1)
    except FileNotFoundError as e:
        console.print(f"[red]{e}[/red]\nRun 'newsagent init' first.")
        raise typer.Exit(1)
    except NewsAgentError as e:
        console.print(f"[red]❌ {e}[/red]")
        raise typer.Exit(1)
    except Exception as e:
        console.print(f"[red]Pipeline failed: {e}[/red]")
        raise typer.Exit(1)
