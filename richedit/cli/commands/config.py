"""``richedit config`` sub-commands."""

from pathlib import Path
from typing import Annotated

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from richedit.config import get_settings
from richedit.config.constants import CONFIG_LOCATIONS, DEFAULT_CONFIG_FILE

config_app = typer.Typer(help="Show, create and check richedit.yaml.")
console = Console()


def _found_config_files() -> list[str]:
    return [str(p) for p in CONFIG_LOCATIONS if p.exists()]


@config_app.command("show")
def show() -> None:
    """Print the effective settings after env and YAML overrides."""
    settings = get_settings()

    console.print("\n[bold blue]Current Configuration[/bold blue]\n")

    table = Table(show_header=True, header_style="bold")
    table.add_column("Setting", style="cyan")
    table.add_column("Value")

    table.add_row("Log Level", settings.log_level)
    table.add_row("Log Directory", settings.log_dir)

    table.add_row("Max Image Width", str(settings.image.max_width))
    table.add_row("Max Image Height", str(settings.image.max_height))
    table.add_row("JPEG Quality", str(settings.image.jpeg_quality))

    table.add_row("Paragraph Separator", settings.editor.default_paragraph_separator)
    table.add_row("Block Tags", ", ".join(settings.editor.block_tags))
    if settings.editor.custom_classes:
        classes = ", ".join(f"{c.name} ({c.class_name})" for c in settings.editor.custom_classes)
        table.add_row("Custom Classes", classes)

    found = _found_config_files()
    table.add_row("Config Files", ", ".join(found) if found else "none, using defaults")

    console.print(table)
    console.print()


DEFAULT_CONFIG_TEMPLATE = """# Richedit Configuration

log_level: "INFO"  # DEBUG, INFO, WARNING, ERROR, CRITICAL
log_dir: ".logs"

image:
  max_width: 640  # Images wider than this (landscape) are scaled down
  max_height: 480  # Images taller than this are scaled down
  jpeg_quality: 92  # 0-100, used when re-encoding JPEG

editor:
  default_paragraph_separator: "p"  # p or div
  # custom_classes:
  #   - name: "Quote"
  #     class_name: "quote"
  #     tag: "blockquote"
"""


@config_app.command("init")
def init(
    path: Annotated[
        Path | None,
        typer.Option("--path", "-p", help="Path to create config file."),
    ] = None,
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Overwrite existing config file."),
    ] = False,
) -> None:
    """Write a starter richedit.yaml."""
    config_path = path or Path.cwd() / DEFAULT_CONFIG_FILE

    if config_path.exists() and not force:
        console.print(f"[red]Error:[/red] Config file already exists at {config_path}")
        console.print("Use --force to overwrite.")
        raise typer.Exit(1)

    config_path.write_text(DEFAULT_CONFIG_TEMPLATE, encoding="utf-8")
    console.print(f"[green]Created config file at:[/green] {config_path}")


@config_app.command("validate")
def validate() -> None:
    """Load the settings and report validation errors."""
    get_settings.cache_clear()
    try:
        settings = get_settings()
    except ValidationError as e:
        console.print(f"[red]Invalid configuration:[/red]\n{e}")
        raise typer.Exit(1) from e

    found = _found_config_files()
    console.print(f"[green]Configuration OK[/green] (log level {settings.log_level})")
    console.print(f"Config files: {', '.join(found) if found else 'none, using defaults'}")
