"""Preview a layout for a few seconds."""

import typer

from termtile.app_context import use_context
from termtile.ipc.client import ClientError


def preview(
    ctx: typer.Context,
    name: str = typer.Argument(default="", help="Layout to preview (default layout if omitted)"),
    *,
    duration: int = typer.Option(default=3, help="Preview duration in seconds (capped at 60)"),
) -> None:
    """Apply a layout temporarily; the previous arrangement comes back afterwards."""
    app = use_context(ctx)
    try:
        app.client().preview_layout(name, duration)
    except ClientError as e:
        app.out.print_client_error_and_exit(e)
    app.out.print_preview_started(name, duration)
