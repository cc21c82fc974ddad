"""EWMH virtual desktop and window activation operations.

Requests to the window manager are client messages sent to the root window
(https://specifications.freedesktop.org/wm-spec/latest/). They are built by
hand in ``send_client_message`` rather than through a higher-level EWMH
helper, so the 32-bit word encoding is under our control.
"""

import logging
from collections.abc import Sequence

import Xlib.error
import Xlib.protocol.event
import Xlib.X

from termtile.x11.connection import XLIB_ERRORS, Connection, WindowNotFoundError, X11Error

logger = logging.getLogger(__name__)

# Desktop value meaning "on all desktops"
STICKY = -1
_ALL_DESKTOPS = 0xFFFFFFFF

# EWMH source indication: pager or other direct user action
SOURCE_PAGER = 2

EWMH_EVENT_MASK = Xlib.X.SubstructureRedirectMask | Xlib.X.SubstructureNotifyMask


def _read_cardinal(conn: Connection, name: str, window_id: int | None, what: str) -> int:
    try:
        values = conn.get_cardinals(name, window_id)
    except X11Error as e:
        raise X11Error(f"failed to get {what}: {e}") from e
    if not values:
        raise X11Error(f"failed to get {what}: {name} is empty")
    return values[0]


def get_current_desktop(conn: Connection) -> int:
    """Return the current virtual desktop number (0-indexed) from _NET_CURRENT_DESKTOP.

    Raises:
        X11Error: The property cannot be read.

    """
    return _read_cardinal(conn, "_NET_CURRENT_DESKTOP", None, "current desktop")


def get_window_desktop(conn: Connection, window_id: int) -> int:
    """Return the desktop a window is on, or STICKY (-1) for windows on all desktops.

    Raises:
        X11Error: The window's _NET_WM_DESKTOP cannot be read.

    """
    desktop = _read_cardinal(conn, "_NET_WM_DESKTOP", window_id, "window desktop")
    if desktop == _ALL_DESKTOPS:
        return STICKY
    return desktop


def get_desktop_count(conn: Connection) -> int:
    """Return the number of virtual desktops from _NET_NUMBER_OF_DESKTOPS.

    Raises:
        X11Error: The property cannot be read.

    """
    return _read_cardinal(conn, "_NET_NUMBER_OF_DESKTOPS", None, "desktop count")


def send_client_message(conn: Connection, window_id: int, message_type: str, data: Sequence[int]) -> None:
    """Send a format-32 EWMH client message about ``window_id`` to the root window.

    ``data`` holds up to five words; they are zero-padded and truncated to
    unsigned 32 bits (so -1 goes out as 0xFFFFFFFF).

    Raises:
        ValueError: More than five data words.
        X11Error: Atom interning or the SendEvent request failed.

    """
    if len(data) > 5:
        raise ValueError(f"client message carries at most 5 words, got {len(data)}")
    atom = conn.intern_atom(message_type)
    words = [v & 0xFFFFFFFF for v in data] + [0] * (5 - len(data))
    event = Xlib.protocol.event.ClientMessage(window=window_id, client_type=atom, data=(32, words))

    catcher = Xlib.error.CatchError()
    try:
        conn.root.send_event(event, event_mask=EWMH_EVENT_MASK, propagate=False, onerror=catcher)
        # Round trip so an error reply for SendEvent has arrived before we check
        conn.display.sync()
    except XLIB_ERRORS as e:
        raise X11Error(f"failed to send {message_type}: {e}") from e
    if error := catcher.get_error():
        raise X11Error(f"failed to send {message_type}: {error}")
    logger.debug("Sent %s for window 0x%x: %s", message_type, window_id, words)


def set_window_desktop(conn: Connection, window_id: int, desktop: int) -> None:
    """Ask the window manager to move a window to a desktop (STICKY pins it to all).

    Raises:
        X11Error: The request could not be sent.

    """
    send_client_message(conn, window_id, "_NET_WM_DESKTOP", [desktop, SOURCE_PAGER])


def focus_window(conn: Connection, window_id: int) -> None:
    """Ask the window manager to activate and raise a window.

    Raises:
        X11Error: The request could not be sent.

    """
    send_client_message(conn, window_id, "_NET_ACTIVE_WINDOW", [SOURCE_PAGER])


def find_window_by_title(conn: Connection, substring: str) -> int:
    """Return the first client window whose _NET_WM_NAME contains ``substring``.

    Windows are scanned in _NET_CLIENT_LIST order; the match is case-sensitive.
    An empty substring matches nothing.

    Raises:
        WindowNotFoundError: No window matched.
        X11Error: The client list cannot be read.

    """
    if not substring:
        raise WindowNotFoundError("no window found with title containing ''")
    try:
        clients = conn.get_cardinals("_NET_CLIENT_LIST")
    except X11Error as e:
        raise X11Error(f"failed to get client list: {e}") from e

    for window_id in clients:
        try:
            name = conn.get_text("_NET_WM_NAME", window_id)
        except X11Error:
            continue
        if substring in name:
            return window_id
    raise WindowNotFoundError(f"no window found with title containing {substring!r}")


# --- Standalone variants: one fresh connection per call ---


def get_current_desktop_standalone(display_name: str | None = None) -> int:
    """get_current_desktop over a temporary connection."""
    with Connection.open(display_name) as conn:
        return get_current_desktop(conn)


def get_window_desktop_standalone(window_id: int, display_name: str | None = None) -> int:
    """get_window_desktop over a temporary connection."""
    with Connection.open(display_name) as conn:
        return get_window_desktop(conn, window_id)


def get_desktop_count_standalone(display_name: str | None = None) -> int:
    """get_desktop_count over a temporary connection."""
    with Connection.open(display_name) as conn:
        return get_desktop_count(conn)


def set_window_desktop_standalone(window_id: int, desktop: int, display_name: str | None = None) -> None:
    """set_window_desktop over a temporary connection."""
    with Connection.open(display_name) as conn:
        set_window_desktop(conn, window_id, desktop)


def focus_window_standalone(window_id: int, display_name: str | None = None) -> None:
    """focus_window over a temporary connection."""
    with Connection.open(display_name) as conn:
        focus_window(conn, window_id)


def find_window_by_title_standalone(substring: str, display_name: str | None = None) -> int:
    """find_window_by_title over a temporary connection."""
    with Connection.open(display_name) as conn:
        return find_window_by_title(conn, substring)
