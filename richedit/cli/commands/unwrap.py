"""Unwrap command: strip tags from a region of an HTML document."""

from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console

from richedit.cli.callbacks import validate_output_file, validate_tag_list
from richedit.dom import EditableDocument, Range
from richedit.dom.tree import Node, has_child_nodes, iter_tree, node_length
from richedit.selection import SelectionManager

console = Console(stderr=True)


def _select_contents(document: EditableDocument, target: Node) -> None:
    """Select from the first to the last leaf under ``target``."""
    leaves = [node for node in iter_tree(target) if not has_child_nodes(node)]
    first, last = leaves[0], leaves[-1]
    selection = document.get_selection()
    selection.remove_all_ranges()
    selection.add_range(Range(first, 0, last, node_length(last)))


def unwrap(
    html_file: Annotated[
        Path,
        typer.Argument(
            help="HTML document to edit.",
            exists=True,
            file_okay=True,
            dir_okay=False,
            readable=True,
            resolve_path=True,
        ),
    ],
    tags: Annotated[
        str,
        typer.Option(
            "--tags",
            "-t",
            help="Comma-separated tag names to unwrap, e.g. 'b,i,span'.",
            callback=validate_tag_list,
        ),
    ],
    select: Annotated[
        str | None,
        typer.Option(
            "--select",
            "-s",
            help="CSS selector of the region to select. Defaults to the whole document.",
        ),
    ] = None,
    output: Annotated[
        Path | None,
        typer.Option(
            "--output",
            "-o",
            help="Write the result here instead of stdout.",
            callback=validate_output_file,
        ),
    ] = None,
) -> None:
    """Select a region and replace matching elements with their children.

    Examples:
        richedit unwrap page.html --tags b,i
        richedit unwrap page.html --tags span --select "#editor" -o clean.html
    """
    document = EditableDocument.from_html(html_file.read_text(encoding="utf-8"))

    target = document.select_one(select) if select else document.root
    if target is None:
        console.print(f"[red]Error:[/red] Nothing matches selector {select!r}")
        raise typer.Exit(1)

    _select_contents(document, target)
    count = SelectionManager(document).remove_nodes_by_tag(tags)

    if output is None:
        typer.echo(document.to_html())
    else:
        output.write_text(document.to_html(), encoding="utf-8")
    console.print(f"[green]Unwrapped {count} element(s)[/green]")
