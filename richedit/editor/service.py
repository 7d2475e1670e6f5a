"""Editing commands routed through the last known cursor position."""

import asyncio
import html
from collections.abc import Callable, Iterable
from typing import Any

from bs4.element import PageElement

from richedit.config.settings import CustomClass, EditorConfig
from richedit.dom.tree import Node
from richedit.exceptions import EditorOperationError, NoSelectionError
from richedit.protocols import CommandHost
from richedit.selection.manager import SelectionManager
from richedit.utils.logging import get_logger

log = get_logger(__name__)

# One retry: the platform sometimes rejects the first insert after a focus change
INSERT_ATTEMPTS = 2


def run_with_retry(
    operation: Callable[[], bool], command: str, attempts: int = INSERT_ATTEMPTS
) -> bool:
    """Run ``operation`` until it reports success, at most ``attempts`` times.

    Raises:
        EditorOperationError: If every attempt reported failure
    """
    for attempt in range(1, attempts + 1):
        if operation():
            return True
        log.debug("Command reported failure", command=command, attempt=attempt)
    log.error("Command failed after retry", command=command, attempts=attempts)
    raise EditorOperationError(command)


class EditorService:
    """Toolbar-facing operations of the editing surface."""

    def __init__(
        self,
        host: CommandHost,
        selection: SelectionManager | None = None,
        config: EditorConfig | None = None,
    ) -> None:
        """Initialize the service.

        Args:
            host: Document applying the commands
            selection: Selection manager; one is created for ``host`` if omitted
            config: Editor configuration
        """
        self.host = host
        self.selection = selection or SelectionManager(host)
        self.config = config or EditorConfig()

    @property
    def selected_text(self) -> str:
        return self.selection.selected_text

    def save_selection(self, editable_root: Node) -> None:
        """Store the selection when the editor loses focus."""
        self.selection.capture(editable_root)

    def restore_selection(self) -> bool:
        """Put the stored selection back when the editor regains focus."""
        return self.selection.restore()

    def execute_command(self, command: str, param: str | None = None) -> bool:
        """Run a toolbar command; block tags go through formatBlock."""
        if command in self.config.block_tags:
            return self.edit_cmd("formatBlock", command)
        return self.edit_cmd(command, param)

    def edit_cmd(self, cmd: str, param: str | None = None) -> bool:
        # Focus changes drop the selection, so put it back first
        self.selection.restore()
        return bool(self.host.exec_command(cmd, False, param))

    def create_link(self, url: str) -> bool:
        """Link the selected text to ``url``; absolute URLs open in a new tab."""
        if "http" not in url:
            return self.edit_cmd("createLink", url)
        anchor = (
            f'<a href="{html.escape(url)}" target="_blank">{html.escape(self.selected_text)}</a>'
        )
        self.insert_html(anchor)
        return True

    def insert_color(self, color: str, where: str) -> bool:
        """Apply ``color`` to the text (``where="textColor"``) or its background."""
        if not self.selection.restore():
            return False
        if where == "textColor":
            return self.edit_cmd("foreColor", color)
        return self.edit_cmd("hiliteColor", color)

    def set_font_name(self, font_name: str) -> bool:
        return self.edit_cmd("fontName", font_name)

    def set_font_size(self, font_size: str) -> bool:
        return self.edit_cmd("fontSize", font_size)

    def set_default_paragraph_separator(self, separator: str | None = None) -> bool:
        return self.edit_cmd(
            "defaultParagraphSeparator", separator or self.config.default_paragraph_separator
        )

    def insert_html(self, content: Any) -> None:
        """Insert markup or an element at the cursor.

        Markup goes through the host's insertHTML command, which may rewrite
        it; pass an element to keep its structure exactly.

        Raises:
            EditorOperationError: If insertHTML fails twice
            TypeError: If ``content`` is neither a string nor a node
        """
        if isinstance(content, PageElement):
            self._insert_element(content)
        elif isinstance(content, str):
            run_with_retry(lambda: self.edit_cmd("insertHTML", content), "insertHTML")
        else:
            raise TypeError(f"Cannot insert {type(content).__name__}")

    def _insert_element(self, element: PageElement) -> None:
        # Replace a non-collapsed selection
        self.edit_cmd("delete", "")
        selection = self.host.get_selection()
        if selection is None or not selection.range_count:
            return
        range_ = selection.get_range_at(0)
        range_.collapse(to_start=True)
        range_.insert_node(element)
        # Caret goes right after the inserted element
        range_.set_start_after(element)
        range_.collapse(to_start=True)
        selection.remove_all_ranges()
        selection.add_range(range_)

    def insert_arbitrary_html(self, markup: str) -> None:
        self.insert_html(markup)

    def create_custom_class(self, custom_class: CustomClass | None) -> None:
        """Wrap the selected text in an element carrying ``custom_class``."""
        text = html.escape(self.selected_text)
        if custom_class is not None:
            tag = custom_class.tag or "span"
            text = f'<{tag} class="{html.escape(custom_class.class_name)}">{text}</{tag}>'
        self.insert_html(text)

    def check_selection(self) -> bool:
        """Raise unless the stored selection covers some text.

        Raises:
            NoSelectionError: If nothing or only a caret is stored
        """
        saved = self.selection.saved_range
        if saved is None or len(saved.to_string()) == 0:
            raise NoSelectionError()
        return True

    def remove_selected_elements(
        self, tag_names: str | Iterable[str], case_insensitive: bool = True
    ) -> int:
        """Unwrap selected elements with the given tag names."""
        return self.selection.remove_nodes_by_tag(tag_names, case_insensitive=case_insensitive)

    def execute_in_next_queue_iteration(
        self, callback: Callable[..., Any], timeout: float = 0.1
    ) -> asyncio.TimerHandle:
        """Schedule ``callback`` on the running loop, after the current event settles."""
        return asyncio.get_running_loop().call_later(timeout, callback)
