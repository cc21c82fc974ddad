"""Interface of the tiling engine driven by the daemon."""

from datetime import timedelta
from typing import Protocol


class Tiler(Protocol):
    """Tiling operations the IPC server delegates to.

    Every method may raise; the server reports the exception message to the client.
    """

    def get_active_layout_name(self) -> str: ...

    def set_active_layout(self, name: str) -> None: ...

    def tile_current_monitor(self) -> None: ...

    def tile_with_order(self, window_ids: list[int]) -> None:
        """Tile the current monitor placing windows in exactly this order."""
        ...

    def preview_layout(self, name: str, duration: timedelta) -> None:
        """Apply a layout temporarily; the tiler reverts it after ``duration``."""
        ...

    def undo_current_monitor(self) -> None: ...

    def get_terminal_count(self, display_id: int) -> int: ...
