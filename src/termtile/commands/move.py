"""Move a window to another virtual desktop."""

import typer

from termtile.app_context import use_context
from termtile.x11 import X11Error
from termtile.x11.desktop import set_window_desktop_standalone

# X resource ids are 32-bit; 0 is None
MAX_WINDOW_ID = 0xFFFFFFFF


def move(
    ctx: typer.Context,
    window_id: str = typer.Argument(help="Window id, decimal or 0x-prefixed hex"),
    desktop: int = typer.Argument(help="Target desktop (0-indexed), -1 for all desktops"),
) -> None:
    """Move a window to a virtual desktop."""
    app = use_context(ctx)
    try:
        wid = int(window_id, 0)
    except ValueError:
        app.out.print_error_and_exit("invalid_argument", f"Invalid window id: {window_id}")
    if not 0 < wid <= MAX_WINDOW_ID:
        app.out.print_error_and_exit("invalid_argument", f"Window id out of range: {window_id}")
    if desktop < -1:
        app.out.print_error_and_exit("invalid_argument", f"Invalid desktop: {desktop}")
    try:
        set_window_desktop_standalone(wid, desktop)
    except X11Error as e:
        app.out.print_error_and_exit("x11", str(e))
    app.out.print_moved(wid, desktop)
