"""List configured layouts."""

import typer

from termtile.app_context import use_context
from termtile.ipc.client import ClientError


def layouts(ctx: typer.Context) -> None:
    """List configured layouts, marking the default and active ones."""
    app = use_context(ctx)
    try:
        data = app.client().list_layouts()
    except ClientError as e:
        app.out.print_client_error_and_exit(e)
    app.out.print_layouts(data)
