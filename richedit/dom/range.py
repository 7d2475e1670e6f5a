"""Boundary-point ranges and the platform selection.

A ``Range`` holds non-owning references into a bs4 tree. Operations that
rewrite text replace the ``NavigableString`` (bs4 strings are immutable), so
other ranges pointing at the old string become detached; callers check
``is_attached`` before trusting a stored range.
"""

from __future__ import annotations

from bs4 import NavigableString, Tag

from richedit.dom.tree import (
    Node,
    compare_points,
    index_of,
    is_character_data,
    is_or_contains,
    is_text,
    iter_tree,
    node_length,
    root_of,
)


def _replace_data(node: NavigableString, data: str) -> NavigableString:
    """Swap a string node for a new one holding ``data``; returns the new node."""
    replacement = type(node)(data)
    node.replace_with(replacement)
    return replacement


def _split_text(node: NavigableString, offset: int) -> tuple[NavigableString, NavigableString]:
    text = str(node)
    head = _replace_data(node, text[:offset])
    tail = type(node)(text[offset:])
    head.insert_after(tail)
    return head, tail


class Range:
    """A pair of (node, offset) boundaries inside one document tree."""

    def __init__(
        self,
        start_container: Node,
        start_offset: int = 0,
        end_container: Node | None = None,
        end_offset: int | None = None,
    ) -> None:
        self.start_container = start_container
        self.start_offset = start_offset
        self.end_container = end_container if end_container is not None else start_container
        self.end_offset = end_offset if end_offset is not None else start_offset

    def __repr__(self) -> str:
        return (
            f"Range({self.start_container!r}, {self.start_offset}, "
            f"{self.end_container!r}, {self.end_offset})"
        )

    @property
    def collapsed(self) -> bool:
        return self.start_container is self.end_container and self.start_offset == self.end_offset

    @property
    def common_ancestor_container(self) -> Node | None:
        """Deepest node containing both boundaries.

        None when an edit has left the boundaries in different trees.
        """
        node = self.start_container
        while node is not None and not is_or_contains(self.end_container, node):
            node = node.parent
        return node

    def set_start(self, node: Node, offset: int) -> None:
        self._check_offset(node, offset)
        self.start_container, self.start_offset = node, offset
        if self._end_before_start():
            self.collapse(to_start=True)

    def set_end(self, node: Node, offset: int) -> None:
        self._check_offset(node, offset)
        self.end_container, self.end_offset = node, offset
        if self._end_before_start():
            self.collapse(to_start=False)

    def set_start_after(self, node: Node) -> None:
        self.set_start(node.parent, index_of(node) + 1)

    def collapse(self, to_start: bool = True) -> None:
        if to_start:
            self.end_container, self.end_offset = self.start_container, self.start_offset
        else:
            self.start_container, self.start_offset = self.end_container, self.end_offset

    def select_node(self, node: Node) -> None:
        index = index_of(node)
        self.start_container, self.start_offset = node.parent, index
        self.end_container, self.end_offset = node.parent, index + 1

    def select_node_contents(self, node: Node) -> None:
        self.start_container, self.start_offset = node, 0
        self.end_container, self.end_offset = node, node_length(node)

    def clone(self) -> Range:
        return Range(self.start_container, self.start_offset, self.end_container, self.end_offset)

    def is_attached(self, root: Node) -> bool:
        """True while both boundary containers are still reachable from ``root``."""
        return is_or_contains(self.start_container, root) and is_or_contains(
            self.end_container, root
        )

    def contains_node(self, node: Node) -> bool:
        """True if ``node`` lies entirely between the boundaries."""
        if root_of(node) is not root_of(self.start_container):
            return False
        return (
            compare_points(node, 0, self.start_container, self.start_offset) > 0
            and compare_points(node, node_length(node), self.end_container, self.end_offset) < 0
        )

    def to_string(self) -> str:
        """Concatenated text of the text nodes covered by the range."""
        start, end = self.start_container, self.end_container
        if start is end and is_text(start):
            return str(start)[self.start_offset : self.end_offset]

        common = self.common_ancestor_container
        if common is None:
            return ""

        parts = []
        if is_text(start):
            parts.append(str(start)[self.start_offset :])
        for node in iter_tree(common):
            if is_text(node) and node is not start and node is not end and self.contains_node(node):
                parts.append(str(node))
        if is_text(end):
            parts.append(str(end)[: self.end_offset])
        return "".join(parts)

    def __str__(self) -> str:
        return self.to_string()

    def delete_contents(self) -> None:
        """Remove the covered content and collapse onto the start boundary."""
        if self.collapsed:
            return

        start, start_offset = self.start_container, self.start_offset
        end, end_offset = self.end_container, self.end_offset

        if start is end and is_character_data(start):
            text = str(start)
            node = _replace_data(start, text[:start_offset] + text[end_offset:])
            self._move_to(node, start_offset)
            return

        common = self.common_ancestor_container
        if common is None:
            return

        to_remove = [
            node
            for node in iter_tree(common)
            if self.contains_node(node) and not self.contains_node(node.parent)
        ]

        if is_or_contains(end, start):
            new_node, new_offset = start, start_offset
        else:
            reference = start
            while reference.parent is not None and not is_or_contains(end, reference.parent):
                reference = reference.parent
            new_node, new_offset = reference.parent, index_of(reference) + 1

        if is_character_data(start):
            replaced = _replace_data(start, str(start)[:start_offset])
            if new_node is start:
                new_node = replaced

        for node in to_remove:
            node.extract()

        if is_character_data(end):
            _replace_data(end, str(end)[end_offset:])

        self._move_to(new_node, new_offset)

    def insert_node(self, node: Node) -> None:
        """Insert ``node`` at the start boundary, splitting a text container."""
        was_collapsed = self.collapsed
        start, offset = self.start_container, self.start_offset

        if is_text(start):
            end_in_start = self.end_container is start
            head, tail = _split_text(start, offset)
            parent = head.parent
            tail.insert_before(node)
            self.start_container = head
            if end_in_start:
                if self.end_offset > offset:
                    self.end_container, self.end_offset = tail, self.end_offset - offset
                else:
                    self.end_container = head
        else:
            parent = start
            if offset < len(start.contents):
                start.contents[offset].insert_before(node)
            else:
                start.append(node)
            if self.end_container is start and self.end_offset > offset:
                self.end_offset += 1

        if was_collapsed:
            self.end_container, self.end_offset = parent, index_of(node) + 1

    def surround_contents(self, new_parent: Tag) -> None:
        """Wrap the covered content in ``new_parent`` and select it.

        Supports ranges inside one container and ranges between two text
        nodes that share a parent.

        Raises:
            ValueError: If the range partially selects another element.
        """
        start, start_offset = self.start_container, self.start_offset
        end, end_offset = self.end_container, self.end_offset

        if start is end and isinstance(start, Tag):
            children = list(start.contents[start_offset:end_offset])
            start.insert(start_offset, new_parent)
            for child in children:
                new_parent.append(child)
        elif start is end and is_text(start):
            _, tail = _split_text(start, start_offset)
            middle, _ = _split_text(tail, end_offset - start_offset)
            middle.insert_before(new_parent)
            new_parent.append(middle)
        elif is_text(start) and is_text(end) and start.parent is end.parent:
            _, first = _split_text(start, start_offset)
            last, _ = _split_text(end, end_offset)
            first.insert_before(new_parent)
            moving = [first]
            while moving[-1] is not last:
                moving.append(moving[-1].next_sibling)
            for node in moving:
                new_parent.append(node)
        else:
            raise ValueError("Range partially selects a non-text node")

        self.select_node(new_parent)

    def _move_to(self, node: Node, offset: int) -> None:
        self.start_container, self.start_offset = node, offset
        self.collapse(to_start=True)

    def _end_before_start(self) -> bool:
        if root_of(self.start_container) is not root_of(self.end_container):
            return True
        return (
            compare_points(
                self.end_container, self.end_offset, self.start_container, self.start_offset
            )
            < 0
        )

    @staticmethod
    def _check_offset(node: Node, offset: int) -> None:
        if not 0 <= offset <= node_length(node):
            raise IndexError(f"Offset {offset} outside node of length {node_length(node)}")


class Selection:
    """The platform's active selection: zero or more ranges."""

    def __init__(self) -> None:
        self._ranges: list[Range] = []

    @property
    def range_count(self) -> int:
        return len(self._ranges)

    def get_range_at(self, index: int) -> Range:
        return self._ranges[index]

    def add_range(self, range_: Range) -> None:
        if any(existing is range_ for existing in self._ranges):
            return
        self._ranges.append(range_)

    def remove_all_ranges(self) -> None:
        self._ranges.clear()

    def collapse(self, node: Node, offset: int = 0) -> None:
        self._ranges = [Range(node, offset)]

    def select_all_children(self, node: Node) -> None:
        range_ = Range(node)
        range_.select_node_contents(node)
        self._ranges = [range_]

    def to_string(self) -> str:
        return "".join(r.to_string() for r in self._ranges)

    def __str__(self) -> str:
        return self.to_string()
