"""Focus a window by title."""

import typer

from termtile.app_context import use_context
from termtile.x11 import Connection, WindowNotFoundError, X11Error, find_window_by_title, focus_window


def focus(ctx: typer.Context, title: str = typer.Argument(help="Case-sensitive substring of the window title")) -> None:
    """Activate and raise the first window whose title contains TITLE."""
    app = use_context(ctx)
    try:
        with Connection.open() as conn:
            window_id = find_window_by_title(conn, title)
            focus_window(conn, window_id)
    except WindowNotFoundError as e:
        app.out.print_error_and_exit("not_found", str(e))
    except X11Error as e:
        app.out.print_error_and_exit("x11", str(e))
    app.out.print_focused(window_id)
