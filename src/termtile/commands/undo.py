"""Undo the last tiling operation."""

import typer

from termtile.app_context import use_context
from termtile.ipc.client import ClientError


def undo(ctx: typer.Context) -> None:
    """Undo the last tiling operation on the active monitor."""
    app = use_context(ctx)
    try:
        app.client().undo()
    except ClientError as e:
        app.out.print_client_error_and_exit(e)
    app.out.print_undone()
