"""Host document model: node tree primitives, ranges and the editable document."""

from richedit.dom.document import EditableDocument
from richedit.dom.range import Range, Selection
from richedit.dom.tree import (
    ancestors,
    is_element,
    is_or_contains,
    is_text,
    next_node,
    replace_with_own_children,
)

__all__ = [
    "EditableDocument",
    "Range",
    "Selection",
    "ancestors",
    "is_element",
    "is_or_contains",
    "is_text",
    "next_node",
    "replace_with_own_children",
]
