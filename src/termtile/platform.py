"""Display backend: the monitors known to the window system."""

from dataclasses import dataclass
from typing import Protocol

from termtile.x11.connection import Connection
from termtile.x11.monitors import Monitor, get_active_monitor, get_monitors


@dataclass(frozen=True)
class Rect:
    """Rectangle in root-window coordinates."""

    x: int
    y: int
    width: int
    height: int


@dataclass(frozen=True)
class Display:
    """A physical display."""

    id: int
    name: str
    bounds: Rect


class DisplayBackend(Protocol):
    """Enumerates displays. Methods raise on failure."""

    def displays(self) -> list[Display]: ...

    def active_display(self) -> Display: ...


def _to_display(monitor: Monitor) -> Display:
    return Display(
        id=monitor.id,
        name=monitor.name,
        bounds=Rect(x=monitor.x, y=monitor.y, width=monitor.width, height=monitor.height),
    )


class X11Backend:
    """DisplayBackend over an existing X11 connection (RandR monitors)."""

    def __init__(self, conn: Connection) -> None:
        """Initialize the backend.

        Args:
            conn: Long-lived X11 connection, owned by the caller.

        """
        self._conn = conn

    def displays(self) -> list[Display]:
        """Return all active displays.

        Raises:
            X11Error: RandR query failed.

        """
        return [_to_display(m) for m in get_monitors(self._conn)]

    def active_display(self) -> Display:
        """Return the display holding the active window (or the pointer).

        Raises:
            X11Error: RandR query failed or no monitor is active.

        """
        return _to_display(get_active_monitor(self._conn))
