"""Selection persistence across focus changes."""

from collections.abc import Iterable
from dataclasses import dataclass

from richedit.dom.range import Range
from richedit.dom.tree import Node, is_element, is_or_contains, next_node, replace_with_own_children
from richedit.protocols import SelectionHost
from richedit.utils.logging import get_logger

log = get_logger(__name__)


@dataclass
class SelectionState:
    """A captured selection.

    ``range`` points into the host's live tree and is shared with the host
    selection once restored, so later edits move it along. ``text`` is the
    selected text at capture time and may go stale.
    """

    range: Range | None = None
    text: str = ""

    @property
    def is_empty(self) -> bool:
        return self.range is None


def get_range_selected_nodes(range_: Range, include_partially_selected_containers: bool) -> list:
    """Enumerate the nodes a range touches.

    The result starts with the start container's ancestors below the common
    ancestor (topmost first, start container last), continues with every node
    visited walking forward to the end container, and optionally ends with
    the common ancestor and all of its ancestors. This is not strict document
    order; unwrapping relies on the order as produced.
    """
    node = range_.start_container
    end_node = range_.end_container
    range_nodes: list[Node] = []

    if node is end_node:
        range_nodes = [node]
    else:
        while node is not None and node is not end_node:
            node = next_node(node)
            if node is None:
                break
            range_nodes.append(node)

        # Partially selected nodes at the start of the range
        common = range_.common_ancestor_container
        node = range_.start_container
        while node is not None and node is not common:
            range_nodes.insert(0, node)
            node = node.parent

    if include_partially_selected_containers:
        node = range_.common_ancestor_container
        while node is not None:
            range_nodes.append(node)
            node = node.parent

    return range_nodes


def _normalize_tag_names(tag_names: str | Iterable[str], case_insensitive: bool) -> set[str]:
    if isinstance(tag_names, str):
        tag_names = tag_names.split(",")
    names = {name.strip() for name in tag_names if name.strip()}
    if case_insensitive:
        names = {name.lower() for name in names}
    return names


class SelectionManager:
    """Captures the host selection on blur and puts it back on focus."""

    def __init__(self, host: SelectionHost) -> None:
        """Initialize the manager.

        Args:
            host: Platform exposing ``get_selection()``
        """
        self.host = host
        self._state = SelectionState()
        self._editable_root: Node | None = None

    @property
    def state(self) -> SelectionState:
        return self._state

    @property
    def saved_range(self) -> Range | None:
        return self._state.range

    @property
    def selected_text(self) -> str:
        return self._state.text

    def clear(self) -> None:
        self._state = SelectionState()
        self._editable_root = None

    def element_contains_selection(self, el: Node | None) -> bool:
        """Return True if the first selected range lies inside ``el``."""
        if el is None:
            return False
        selection = self.host.get_selection()
        if selection is not None and selection.range_count > 0:
            common = selection.get_range_at(0).common_ancestor_container
            return common is not None and is_or_contains(common, el)
        return False

    def capture(self, editable_root: Node) -> None:
        """Store the active selection if it lies inside ``editable_root``.

        Selections outside the editor never overwrite what is stored. A host
        without a selection API leaves an empty state behind.
        """
        selection = self.host.get_selection()
        if selection is None:
            self.clear()
            return

        if not self.element_contains_selection(editable_root):
            log.debug("Ignoring selection outside the editable root")
            return

        self._state = SelectionState(range=selection.get_range_at(0), text=selection.to_string())
        self._editable_root = editable_root
        log.debug("Selection captured", text_length=len(self._state.text))

    def restore(self) -> bool:
        """Re-apply the stored range to the host selection.

        Returns:
            True if a range was re-applied, False if nothing usable was stored
        """
        saved = self._state.range
        if saved is None:
            return False

        selection = self.host.get_selection()
        if selection is None:
            return False

        if self._editable_root is not None and not saved.is_attached(self._editable_root):
            log.warning("Stored selection no longer attached to the editor; not restoring")
            return False

        selection.remove_all_ranges()
        selection.add_range(saved)
        return True

    def enumerate_selected_nodes(self, include_ancestors: bool = True) -> list:
        """Collect the nodes touched by every range of the active selection."""
        nodes: list[Node] = []
        selection = self.host.get_selection()
        if selection is not None:
            for index in range(selection.range_count):
                nodes.extend(
                    get_range_selected_nodes(selection.get_range_at(index), include_ancestors)
                )
        return nodes

    def remove_nodes_by_tag(
        self, tag_names: str | Iterable[str], case_insensitive: bool = True
    ) -> int:
        """Unwrap every selected element whose tag is in ``tag_names``.

        Args:
            tag_names: Names as an iterable or a comma-separated string
            case_insensitive: Compare tag names ignoring case

        Returns:
            Number of elements unwrapped
        """
        names = _normalize_tag_names(tag_names, case_insensitive)
        removed = 0
        for node in self.enumerate_selected_nodes(include_ancestors=True):
            if not is_element(node) or node.parent is None:
                continue
            name = node.name.lower() if case_insensitive else node.name
            if name in names:
                replace_with_own_children(node)
                removed += 1
        if removed:
            log.debug("Unwrapped selected elements", tags=sorted(names), count=removed)
        return removed
