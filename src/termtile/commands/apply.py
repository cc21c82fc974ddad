"""Activate a layout."""

import typer

from termtile.app_context import use_context
from termtile.ipc.client import ClientError


def apply(
    ctx: typer.Context,
    name: str,
    *,
    tile: bool = typer.Option(default=False, help="Tile the active monitor right away"),
    order: list[int] | None = typer.Option(default=None, help="Window id in slot order (repeatable); implies --tile"),
) -> None:
    """Activate a layout, optionally tiling now."""
    app = use_context(ctx)
    try:
        app.client().apply_layout(name, tile_now=tile, window_order=order)
    except ClientError as e:
        app.out.print_client_error_and_exit(e)
    app.out.print_layout_applied(name, tiled=tile or bool(order))
