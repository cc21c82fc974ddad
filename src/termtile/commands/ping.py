"""Check whether the daemon responds."""

import typer

from termtile.app_context import use_context


def ping(ctx: typer.Context) -> None:
    """Check whether the daemon responds. Exits 1 if it does not."""
    app = use_context(ctx)
    alive = app.client().ping()
    app.out.print_ping(alive=alive)
    if not alive:
        raise typer.Exit(code=1)
