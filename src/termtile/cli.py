"""CLI entry point for termtile."""

from pathlib import Path
from typing import Annotated

import typer
from mm_clikit import TyperPlus

from termtile.app_context import AppContext
from termtile.commands.apply import apply
from termtile.commands.desktop import desktop
from termtile.commands.focus import focus
from termtile.commands.layouts import layouts
from termtile.commands.monitors import monitors
from termtile.commands.move import move
from termtile.commands.ping import ping
from termtile.commands.preview import preview
from termtile.commands.reload import reload
from termtile.commands.set_default import set_default
from termtile.commands.status import status
from termtile.commands.undo import undo
from termtile.config import Config, RuntimeDirError
from termtile.log import setup_logging
from termtile.output import Output

app = TyperPlus(package_name="termtile")


@app.callback()
def callback(
    ctx: typer.Context,
    *,
    json_output: Annotated[bool, typer.Option("--json", help="Output results as JSON.")] = False,
    runtime_dir: Annotated[Path | None, typer.Option("--runtime-dir", help="Directory holding the daemon socket.")] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log at DEBUG level to stderr as well.")] = False,
) -> None:
    """Control the termtile tiling daemon."""
    out = Output(json_mode=json_output)
    try:
        cfg = Config.build(runtime_dir)
    except RuntimeDirError as e:
        out.print_error_and_exit("runtime_dir", str(e))
    setup_logging(cfg.log_path, "DEBUG" if verbose else cfg.log_level, console=verbose)
    ctx.obj = AppContext(out=out, cfg=cfg)


# Daemon
app.command(aliases=["s"])(status)
app.command()(ping)
app.command()(reload)
app.command()(undo)
app.command()(monitors)

# Layouts
app.command(aliases=["l"])(layouts)
app.command()(apply)
app.command("set-default")(set_default)
app.command()(preview)

# Windows
app.command()(desktop)
app.command()(focus)
app.command()(move)
