"""Change the default layout."""

import typer

from termtile.app_context import use_context
from termtile.ipc.client import ClientError


def set_default(
    ctx: typer.Context,
    name: str,
    *,
    tile: bool = typer.Option(default=False, help="Tile the active monitor right away"),
) -> None:
    """Save a new default layout and activate it."""
    app = use_context(ctx)
    try:
        app.client().set_default_layout(name, tile_now=tile)
    except ClientError as e:
        app.out.print_client_error_and_exit(e)
    app.out.print_default_set(name)
