"""Main CLI application."""

import typer
from dotenv import load_dotenv

# Load .env file if it exists
load_dotenv()

from .history import history_command
from .init import init_command
from .run import run_command
from .show import config_command
from .sources import sources_app
from .topics import topics_app

app = typer.Typer(
    name="newsagent",
    help="AI News Agent - feed monitoring with topic matching and daily digests",
    no_args_is_help=True,
)

# Register commands
app.command("init")(init_command)
app.command("run")(run_command)
app.command("history")(history_command)
app.command("config")(config_command)
app.add_typer(sources_app, name="sources", help="Manage feed sources")
app.add_typer(topics_app, name="topics", help="Manage interest topics")


if __name__ == "__main__":
    app()
