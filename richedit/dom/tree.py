"""Node-ancestry primitives over a BeautifulSoup tree.

Nodes are bs4 ``PageElement`` objects owned by the parsed document. These
helpers only read links and move existing nodes around. Compare nodes with
``is``: ``Tag.__eq__`` compares markup and ``NavigableString`` compares text,
so two distinct nodes can be equal.
"""

from collections.abc import Iterator

from bs4 import BeautifulSoup, NavigableString, Tag
from bs4.element import PageElement, PreformattedString

Node = PageElement


def is_element(node: Node | None) -> bool:
    """Return True for element nodes (the document itself is not one)."""
    return isinstance(node, Tag) and not isinstance(node, BeautifulSoup)


def is_text(node: Node | None) -> bool:
    """Return True for text nodes; comments and doctypes are excluded."""
    return isinstance(node, NavigableString) and not isinstance(node, PreformattedString)


def is_character_data(node: Node | None) -> bool:
    return isinstance(node, NavigableString)


def tag_name(node: Node) -> str:
    return node.name if isinstance(node, Tag) else ""


def node_length(node: Node) -> int:
    """Length used for boundary offsets: children for tags, characters otherwise."""
    if isinstance(node, Tag):
        return len(node.contents)
    return len(node)


def has_child_nodes(node: Node) -> bool:
    return isinstance(node, Tag) and len(node.contents) > 0


def index_of(node: Node) -> int:
    """Position of ``node`` among its parent's children (by identity)."""
    if node.parent is None:
        return 0
    return node.parent.index(node)


def ancestors(node: Node) -> Iterator[Node]:
    """Yield the parents of ``node`` up to the document root."""
    parent = node.parent
    while parent is not None:
        yield parent
        parent = parent.parent


def is_or_contains(node: Node | None, container: Node) -> bool:
    """Walk parent links from ``node`` and report whether ``container`` is hit."""
    while node is not None:
        if node is container:
            return True
        node = node.parent
    return False


def root_of(node: Node) -> Node:
    while node.parent is not None:
        node = node.parent
    return node


def next_node(node: Node) -> Node | None:
    """Depth-first successor: first child, else the next sibling of the closest ancestor."""
    if has_child_nodes(node):
        return node.contents[0]
    current: Node | None = node
    while current is not None and current.next_sibling is None:
        current = current.parent
    if current is None:
        return None
    return current.next_sibling


def iter_tree(node: Node) -> Iterator[Node]:
    """Yield ``node`` and its descendants in tree order."""
    yield node
    if isinstance(node, Tag):
        for child in list(node.contents):
            yield from iter_tree(child)


def replace_with_own_children(el: Tag) -> None:
    """Unwrap ``el``: move its children, in order, to its position, then detach it."""
    while el.contents:
        el.insert_before(el.contents[0])
    el.extract()


def _path_from_root(node: Node) -> list[Node]:
    path = [node, *ancestors(node)]
    path.reverse()
    return path


def precedes(a: Node, b: Node) -> bool:
    """Return True if ``a`` comes before ``b`` in tree order.

    Raises:
        ValueError: If the nodes do not share a root.
    """
    if a is b:
        return False
    path_a = _path_from_root(a)
    path_b = _path_from_root(b)
    if path_a[0] is not path_b[0]:
        raise ValueError("Nodes belong to different trees")

    depth = 0
    for x, y in zip(path_a, path_b):
        if x is not y:
            break
        depth += 1

    if depth == len(path_a):
        return True  # a is an ancestor of b
    if depth == len(path_b):
        return False
    parent = path_a[depth - 1]
    return parent.index(path_a[depth]) < parent.index(path_b[depth])


def compare_points(node_a: Node, offset_a: int, node_b: Node, offset_b: int) -> int:
    """Position of boundary point A relative to B: -1 before, 0 equal, 1 after."""
    if node_a is node_b:
        return (offset_a > offset_b) - (offset_a < offset_b)

    if precedes(node_b, node_a):
        return -compare_points(node_b, offset_b, node_a, offset_a)

    if is_or_contains(node_b, node_a):
        child = node_b
        while child.parent is not node_a:
            child = child.parent
        if index_of(child) < offset_a:
            return 1
    return -1
