"""Monitor enumeration through the RandR extension."""

from dataclasses import dataclass

from termtile.x11.connection import XLIB_ERRORS, Connection, X11Error


@dataclass(frozen=True)
class Monitor:
    """An active CRTC and its geometry in root coordinates."""

    id: int
    name: str
    x: int
    y: int
    width: int
    height: int

    def contains(self, x: int, y: int) -> bool:
        """Check whether a root-coordinate point lies on this monitor."""
        return self.x <= x < self.x + self.width and self.y <= y < self.y + self.height


def get_monitors(conn: Connection) -> list[Monitor]:
    """Return active monitors. Disabled CRTCs (no size or no outputs) are skipped.

    Bounds are the raw CRTC geometry; panels and docks reserved through
    _NET_WORKAREA or struts are not subtracted.

    Raises:
        X11Error: RandR is unavailable or the screen resources cannot be read.

    """
    if not conn.display.has_extension("RANDR"):
        raise X11Error("RandR extension not available")
    try:
        resources = conn.root.xrandr_get_screen_resources()
    except XLIB_ERRORS as e:
        raise X11Error(f"failed to get screen resources: {e}") from e

    monitors: list[Monitor] = []
    for i, crtc in enumerate(resources.crtcs):
        try:
            info = conn.display.xrandr_get_crtc_info(crtc, resources.config_timestamp)
        except XLIB_ERRORS:
            continue
        if info.width == 0 or info.height == 0 or not info.outputs:
            continue
        monitors.append(
            Monitor(
                id=i,
                name=_output_name(conn, info.outputs[0], resources.config_timestamp) or f"Monitor{i}",
                x=info.x,
                y=info.y,
                width=info.width,
                height=info.height,
            )
        )
    return monitors


def _output_name(conn: Connection, output: int, timestamp: int) -> str:
    try:
        name = conn.display.xrandr_get_output_info(output, timestamp).name
    except XLIB_ERRORS:
        return ""
    return name.decode(errors="replace") if isinstance(name, bytes) else str(name)


def get_active_monitor(conn: Connection) -> Monitor:
    """Return the monitor holding the active window's centre, else the pointer, else the first one.

    The monitor carries raw CRTC bounds, see get_monitors().

    Raises:
        X11Error: Monitors cannot be enumerated or none is active.

    """
    monitors = get_monitors(conn)
    if not monitors:
        raise X11Error("no monitors found")

    point = _active_window_center(conn) or _pointer_position(conn)
    if point is not None:
        for monitor in monitors:
            if monitor.contains(*point):
                return monitor
    return monitors[0]


def _active_window_center(conn: Connection) -> tuple[int, int] | None:
    try:
        active = conn.get_cardinals("_NET_ACTIVE_WINDOW")
    except X11Error:
        return None
    if not active or active[0] == 0:
        return None
    try:
        window = conn.window(active[0])
        geom = window.get_geometry()
        origin = conn.root.translate_coords(window, 0, 0)
    except XLIB_ERRORS:
        return None
    return origin.x + geom.width // 2, origin.y + geom.height // 2


def _pointer_position(conn: Connection) -> tuple[int, int] | None:
    try:
        pointer = conn.root.query_pointer()
    except XLIB_ERRORS:
        return None
    return pointer.root_x, pointer.root_y
