"""X11 display connection and property access."""

from types import TracebackType
from typing import Any

import Xlib.display
import Xlib.error
import Xlib.X
from Xlib.xobject.drawable import Window

# Errors python-xlib raises for a request on an open connection
XLIB_ERRORS = (Xlib.error.XError, Xlib.error.ConnectionClosedError)


class X11Error(Exception):
    """An X11 request failed or returned no usable data."""


class WindowNotFoundError(X11Error):
    """No window matched a lookup."""


class Connection:
    """Connection to the X server plus its default root window.

    The daemon keeps one long-lived connection driven by a single owner; helpers
    that need a connection for one call open a fresh one with ``with Connection.open()``.
    """

    def __init__(self, display: Xlib.display.Display) -> None:
        """Wrap an open display.

        Args:
            display: Open python-xlib display; closed by ``close()``.

        """
        self.display = display
        self.root: Window = display.screen().root

    @classmethod
    def open(cls, display_name: str | None = None) -> "Connection":
        """Connect to the X server (``$DISPLAY`` when no name is given).

        Raises:
            X11Error: Connection failed.

        """
        try:
            display = Xlib.display.Display(display_name)
        except (Xlib.error.DisplayError, Xlib.error.ConnectionClosedError, OSError) as e:
            raise X11Error(f"failed to connect to X11: {e}") from e
        return cls(display)

    def close(self) -> None:
        """Disconnect from the X server."""
        self.display.close()

    def __enter__(self) -> "Connection":
        return self

    def __exit__(
        self, exc_type: type[BaseException] | None, exc: BaseException | None, tb: TracebackType | None
    ) -> None:
        self.close()

    def window(self, window_id: int | None = None) -> Window:
        """Return a window resource; None means the root window."""
        if window_id is None or window_id == self.root.id:
            return self.root
        return self.display.create_resource_object("window", window_id)

    def intern_atom(self, name: str) -> int:
        """Intern an atom by name, creating it if needed.

        Raises:
            X11Error: InternAtom failed.

        """
        try:
            atom: int = self.display.intern_atom(name)
        except XLIB_ERRORS as e:
            raise X11Error(f"failed to intern {name}: {e}") from e
        if atom == Xlib.X.NONE:
            raise X11Error(f"failed to intern {name}")
        return atom

    def _get_property(self, window_id: int | None, name: str, prop_type: int) -> Any:
        try:
            prop = self.window(window_id).get_full_property(self.intern_atom(name), prop_type)
        except XLIB_ERRORS as e:
            raise X11Error(f"failed to read {name}: {e}") from e
        if prop is None:
            raise X11Error(f"{name} is not set")
        return prop

    def get_cardinals(self, name: str, window_id: int | None = None) -> list[int]:
        """Read a format-32 property (CARDINAL, WINDOW, ...) as unsigned ints.

        Raises:
            X11Error: Property missing, unreadable, or not 32-bit.

        """
        prop = self._get_property(window_id, name, Xlib.X.AnyPropertyType)
        if prop.format != 32:
            raise X11Error(f"{name} has format {prop.format}, expected 32")
        return [int(v) for v in prop.value]

    def get_text(self, name: str, window_id: int | None = None) -> str:
        """Read a UTF8_STRING property.

        Raises:
            X11Error: Property missing or unreadable.

        """
        prop = self._get_property(window_id, name, self.intern_atom("UTF8_STRING"))
        value = prop.value
        if isinstance(value, bytes):
            return value.decode("utf-8", errors="replace")
        return str(value)
