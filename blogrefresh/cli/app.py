"""Main CLI application."""

import typer
from dotenv import load_dotenv

# Load .env file if it exists
load_dotenv()

from .articles import articles_app
from .discover import discover_command
from .init import init_command
from .refresh import refresh_command

app = typer.Typer(
    name="blogrefresh",
    help="Blog article scraper and LLM refresher",
    no_args_is_help=True,
)

# Register commands
app.command("init")(init_command)
app.command("discover")(discover_command)
app.command("refresh")(refresh_command)
app.add_typer(articles_app, name="articles", help="Browse stored articles")


if __name__ == "__main__":
    app()
