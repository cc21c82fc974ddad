"""Show the current virtual desktop."""

import typer

from termtile.app_context import use_context
from termtile.x11 import Connection, X11Error, get_current_desktop, get_desktop_count


def desktop(ctx: typer.Context) -> None:
    """Show the current virtual desktop and the number of desktops."""
    app = use_context(ctx)
    try:
        with Connection.open() as conn:
            current = get_current_desktop(conn)
            count = get_desktop_count(conn)
    except X11Error as e:
        app.out.print_error_and_exit("x11", str(e))
    app.out.print_desktop(current=current, count=count)
