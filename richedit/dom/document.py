"""In-memory editable HTML document standing in for the host platform."""

from __future__ import annotations

from collections.abc import Callable
from functools import partial

from bs4 import BeautifulSoup, NavigableString, Tag

from richedit.config.constants import INLINE_COMMAND_TAGS
from richedit.dom.range import Range, Selection
from richedit.dom.tree import ancestors, is_element
from richedit.utils.logging import get_logger

log = get_logger(__name__)

# Elements formatBlock is allowed to retag
BLOCK_ELEMENTS = frozenset(
    {"p", "div", "pre", "blockquote", "address", "h1", "h2", "h3", "h4", "h5", "h6"}
)

PARAGRAPH_SEPARATORS = frozenset({"p", "div"})


class EditableDocument:
    """A parsed HTML document with a selection and an ``exec_command`` primitive.

    The document owns the node tree. Selection code keeps references into it
    and never builds nodes of its own; new nodes come from parsing markup
    passed to ``exec_command``.
    """

    def __init__(self, soup: BeautifulSoup, selection_support: bool = True) -> None:
        """Initialize the document.

        Args:
            soup: Parsed document tree
            selection_support: False emulates a host without a selection API
        """
        self.soup = soup
        self.default_paragraph_separator = "div"
        self._selection: Selection | None = Selection() if selection_support else None
        # Command names are case-insensitive, as in browsers
        self._commands: dict[str, Callable[[Range, str | None], bool]] = {
            "inserthtml": self._insert_html,
            "inserttext": self._insert_text,
            "delete": self._delete,
            "createlink": self._create_link,
            "forecolor": self._fore_color,
            "hilitecolor": self._hilite_color,
            "fontname": self._font_name,
            "fontsize": self._font_size,
            "formatblock": self._format_block,
        }
        for command, tag in INLINE_COMMAND_TAGS.items():
            self._commands[command.lower()] = partial(self._wrap_in, tag)

    @classmethod
    def from_html(
        cls, html: str, parser: str = "html.parser", selection_support: bool = True
    ) -> EditableDocument:
        """Parse ``html`` into a new document."""
        return cls(BeautifulSoup(html, parser), selection_support=selection_support)

    @property
    def root(self) -> BeautifulSoup:
        return self.soup

    def select_one(self, selector: str) -> Tag | None:
        return self.soup.select_one(selector)

    def find(self, *args, **kwargs):
        return self.soup.find(*args, **kwargs)

    def get_selection(self) -> Selection | None:
        """Return the active selection, or None when the host has no selection API."""
        return self._selection

    def create_range(self) -> Range:
        return Range(self.soup, 0)

    def to_html(self) -> str:
        return str(self.soup)

    def __str__(self) -> str:
        return self.to_html()

    def exec_command(self, command: str, show_ui: bool = False, value: str | None = None) -> bool:
        """Apply an editing command at the current selection.

        Args:
            command: Command name, e.g. ``insertHTML`` or ``bold``
            show_ui: Accepted for signature compatibility; never shows anything
            value: Command argument

        Returns:
            True if the command was applied, False if unsupported or not applicable
        """
        if command.lower() == "defaultparagraphseparator":
            return self._set_paragraph_separator(value)

        handler = self._commands.get(command.lower())
        if handler is None:
            log.debug("Unsupported editing command", command=command)
            return False

        selection = self._selection
        if selection is None or selection.range_count == 0:
            log.debug("No selection to apply command to", command=command)
            return False

        applied = handler(selection.get_range_at(0), value)
        log.debug("Command executed", command=command, applied=applied)
        return applied

    def _insert_nodes(self, range_: Range, nodes: list) -> bool:
        range_.delete_contents()
        for node in nodes:
            range_.insert_node(node)
            range_.set_start_after(node)
            range_.collapse(to_start=True)
        return True

    def _insert_html(self, range_: Range, value: str | None) -> bool:
        if value is None:
            return False
        fragment = BeautifulSoup(value, "html.parser")
        return self._insert_nodes(range_, [node.extract() for node in list(fragment.contents)])

    def _insert_text(self, range_: Range, value: str | None) -> bool:
        if value is None:
            return False
        return self._insert_nodes(range_, [NavigableString(value)])

    def _delete(self, range_: Range, _value: str | None) -> bool:
        range_.delete_contents()
        return True

    def _wrap(self, range_: Range, wrapper: Tag) -> bool:
        if range_.collapsed:
            return False
        try:
            range_.surround_contents(wrapper)
        except ValueError as e:
            log.debug("Cannot wrap selection", tag=wrapper.name, error=str(e))
            return False
        return True

    def _wrap_in(self, tag: str, range_: Range, _value: str | None) -> bool:
        return self._wrap(range_, self.soup.new_tag(tag))

    def _create_link(self, range_: Range, value: str | None) -> bool:
        if not value:
            return False
        return self._wrap(range_, self.soup.new_tag("a", attrs={"href": value}))

    def _fore_color(self, range_: Range, value: str | None) -> bool:
        if not value:
            return False
        return self._wrap(range_, self.soup.new_tag("font", attrs={"color": value}))

    def _hilite_color(self, range_: Range, value: str | None) -> bool:
        if not value:
            return False
        return self._wrap(
            range_, self.soup.new_tag("span", attrs={"style": f"background-color: {value};"})
        )

    def _font_name(self, range_: Range, value: str | None) -> bool:
        if not value:
            return False
        return self._wrap(range_, self.soup.new_tag("font", attrs={"face": value}))

    def _font_size(self, range_: Range, value: str | None) -> bool:
        if not value:
            return False
        return self._wrap(range_, self.soup.new_tag("font", attrs={"size": value}))

    def _format_block(self, range_: Range, value: str | None) -> bool:
        if not value:
            return False
        tag = value.strip("<>").lower()
        if tag not in BLOCK_ELEMENTS:
            return False
        node = range_.start_container
        candidates = [node, *ancestors(node)] if is_element(node) else list(ancestors(node))
        for candidate in candidates:
            if is_element(candidate) and candidate.name in BLOCK_ELEMENTS:
                candidate.name = tag
                return True
        return False

    def _set_paragraph_separator(self, value: str | None) -> bool:
        if value is None or value.lower() not in PARAGRAPH_SEPARATORS:
            return False
        self.default_paragraph_separator = value.lower()
        return True
