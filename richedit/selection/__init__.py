"""Selection capture, restoration and node enumeration."""

from richedit.selection.manager import SelectionManager, SelectionState, get_range_selected_nodes

__all__ = [
    "SelectionManager",
    "SelectionState",
    "get_range_selected_nodes",
]
