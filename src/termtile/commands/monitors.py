"""List monitors known to the daemon."""

import typer

from termtile.app_context import use_context
from termtile.ipc.client import ClientError


def monitors(ctx: typer.Context) -> None:
    """List monitors known to the daemon."""
    app = use_context(ctx)
    try:
        data = app.client().get_monitors()
    except ClientError as e:
        app.out.print_client_error_and_exit(e)
    app.out.print_monitors(data)
