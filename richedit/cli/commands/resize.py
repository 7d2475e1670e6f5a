"""Resize command for a single image."""

import asyncio
import mimetypes
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console

from richedit.cli.callbacks import validate_dimension, validate_output_file
from richedit.config import get_settings
from richedit.image import Dimensions, ImageFile, ImageResizer
from richedit.utils.logging import get_logger

console = Console()
log = get_logger(__name__)


def _default_output(input_file: Path, mime_type: str) -> Path:
    suffix = mimetypes.guess_extension(mime_type) or input_file.suffix
    if suffix == ".jpe":
        suffix = ".jpg"
    return input_file.with_name(f"{input_file.stem}.resized{suffix}")


def resize(
    input_file: Annotated[
        Path,
        typer.Argument(
            help="Image to normalize.",
            exists=True,
            file_okay=True,
            dir_okay=False,
            readable=True,
            resolve_path=True,
        ),
    ],
    output: Annotated[
        Path | None,
        typer.Option(
            "--output",
            "-o",
            help="Where to write the resized image. Defaults to <name>.resized.<ext>.",
            callback=validate_output_file,
        ),
    ] = None,
    max_width: Annotated[
        int | None,
        typer.Option("--max-width", help="Width bound in pixels.", callback=validate_dimension),
    ] = None,
    max_height: Annotated[
        int | None,
        typer.Option("--max-height", help="Height bound in pixels.", callback=validate_dimension),
    ] = None,
) -> None:
    """Scale an image down when it exceeds the bounds.

    Examples:
        richedit resize photo.jpg
        richedit resize photo.png --max-width 800 --max-height 600 -o small.png
    """
    settings = get_settings()

    bounds = Dimensions(
        max_width or settings.image.max_width,
        max_height or settings.image.max_height,
    )
    file = ImageFile.from_path(input_file)
    resizer = ImageResizer(jpeg_quality=settings.image.jpeg_quality)

    result = asyncio.run(resizer.resize_async(file, bounds))

    if not result.resized:
        console.print(
            f"[yellow]Unchanged:[/yellow] {input_file.name} needs no resizing, nothing written"
        )
        return

    output_path = output or _default_output(input_file, result.mime_type)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_bytes(result.data)
    log.debug("Resized image written", path=str(output_path), size=len(result.data))

    artifact = result.artifact
    console.print(
        f"[green]Resized:[/green] {input_file.name} -> {output_path} "
        f"({artifact.width}x{artifact.height}, {artifact.size} bytes)"
    )
