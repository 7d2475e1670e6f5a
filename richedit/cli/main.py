"""Richedit command line."""

from pathlib import Path
from typing import Annotated

import typer
from dotenv import load_dotenv
from pydantic import ValidationError
from rich.console import Console

from richedit import __version__
from richedit.cli.commands.config import config_app
from richedit.cli.commands.resize import resize
from richedit.cli.commands.unwrap import unwrap
from richedit.config import get_settings
from richedit.config.constants import DEFAULT_LOG_DIR
from richedit.utils.logging import setup_logging

# RICHEDIT_* variables may live in a .env file
load_dotenv()

app = typer.Typer(
    name="richedit",
    help="Normalize uploaded images and clean up editor markup.",
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)

console = Console()

app.command(name="resize", help="Scale an image down to the editor's bounds.")(resize)
app.command(name="unwrap", help="Unwrap elements by tag name inside an HTML document.")(unwrap)
app.add_typer(config_app, name="config")


def version_callback(value: bool) -> None:
    if value:
        console.print(f"[bold blue]Richedit[/bold blue] {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Log at DEBUG level."),
    ] = False,
    log_file: Annotated[
        Path | None,
        typer.Option(
            "--log-file",
            help="Also write logs to this file (rotated daily). Relative paths go under log_dir.",
        ),
    ] = None,
) -> None:
    """Editing surface tools: image normalization and markup cleanup.

    Logging follows the configured level unless --verbose is given.
    """
    try:
        settings = get_settings()
    except ValidationError:
        # Reported by the command that reads the settings
        settings = None

    level = settings.log_level if settings else "INFO"
    if log_file is not None and not log_file.is_absolute():
        log_file = Path(settings.log_dir if settings else DEFAULT_LOG_DIR) / log_file

    setup_logging(
        level="DEBUG" if verbose else level,
        log_file=str(log_file) if log_file else None,
    )
