"""Reload the daemon configuration."""

import typer

from termtile.app_context import use_context
from termtile.ipc.client import ClientError


def reload(ctx: typer.Context) -> None:
    """Reload the daemon configuration."""
    app = use_context(ctx)
    try:
        app.client().reload()
    except ClientError as e:
        app.out.print_client_error_and_exit(e)
    app.out.print_reloaded()
