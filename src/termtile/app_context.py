"""Application context shared across CLI commands."""

from dataclasses import dataclass

import typer

from termtile.config import Config
from termtile.ipc.client import DaemonClient
from termtile.output import Output


@dataclass(frozen=True, slots=True)
class AppContext:
    """Shared application state passed through Typer context."""

    out: Output
    cfg: Config

    def client(self) -> DaemonClient:
        """Create a daemon client for this configuration."""
        return DaemonClient(self.cfg)


def use_context(ctx: typer.Context) -> AppContext:
    """Extract application context from Typer context."""
    result: AppContext = ctx.obj
    return result
