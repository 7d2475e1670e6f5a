"""Protocol definitions for the host platform.

The selection manager and editor service only talk to the host through these
interfaces, so any document model exposing them can be plugged in.
``EditableDocument`` is the bundled implementation.
"""

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from richedit.dom.range import Selection


class SelectionHost(Protocol):
    """A host that may expose an active selection."""

    def get_selection(self) -> "Selection | None":
        """Return the active selection, or None if the host has no selection API."""
        ...


class CommandHost(SelectionHost, Protocol):
    """A host that can also apply editing commands at the selection."""

    def exec_command(self, command: str, show_ui: bool = False, value: str | None = None) -> bool:
        """Apply ``command``; False signals the command failed or is unsupported."""
        ...
