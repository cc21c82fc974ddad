"""Show daemon status."""

import typer

from termtile.app_context import use_context
from termtile.ipc.client import ClientError


def status(ctx: typer.Context) -> None:
    """Show daemon status (active layout, terminal count, uptime)."""
    app = use_context(ctx)
    try:
        data = app.client().get_status()
    except ClientError as e:
        app.out.print_client_error_and_exit(e)
    app.out.print_status(data)
