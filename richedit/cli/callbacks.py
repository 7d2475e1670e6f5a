"""CLI callback functions."""

from pathlib import Path

import typer


def validate_output_file(value: Path | None) -> Path | None:
    """Reject output paths that point at a directory."""
    if value is None:
        return None

    if value.exists() and value.is_dir():
        raise typer.BadParameter(f"Output path is a directory: {value}")

    return value


def validate_tag_list(value: str) -> str:
    """Require at least one tag name in a comma-separated list."""
    if not [name for name in value.split(",") if name.strip()]:
        raise typer.BadParameter("At least one tag name is required")

    return value


def validate_dimension(value: int | None) -> int | None:
    """Bounds must be positive pixel counts."""
    if value is not None and value < 1:
        raise typer.BadParameter(f"Dimension must be at least 1 pixel, got {value}")

    return value
