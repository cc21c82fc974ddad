"""Structured output for CLI and JSON modes."""

# ruff: noqa: T201 — this module is the output layer; print() is its sole mechanism for producing CLI output.

import json
import sys
from typing import NoReturn

import typer

from termtile.ipc.client import ClientError, DaemonUnreachableError
from termtile.ipc.protocol import LayoutsData, MonitorsData, StatusData


class Output:
    """Handles all CLI output in JSON or human-readable format."""

    def __init__(self, *, json_mode: bool) -> None:
        """Initialize output handler.

        Args:
            json_mode: If True, output JSON envelopes; otherwise human-readable text.

        """
        self._json_mode = json_mode

    def _success(self, data: dict[str, object], message: str) -> None:
        """Print a success result in JSON or human-readable format."""
        if self._json_mode:
            print(json.dumps({"ok": True, "data": data}))
        else:
            print(message)

    def print_error_and_exit(self, code: str, message: str) -> NoReturn:
        """Print an error in JSON or human-readable format and exit with code 1.

        Raises:
            typer.Exit: Always, with code 1.

        """
        if self._json_mode:
            print(json.dumps({"ok": False, "error": code, "message": message}))
        else:
            print(f"Error: {message}", file=sys.stderr)
        raise typer.Exit(code=1)

    def print_client_error_and_exit(self, err: ClientError) -> NoReturn:
        """Report a failed daemon call, hinting at starting the daemon when it is unreachable."""
        message = str(err)
        if isinstance(err, DaemonUnreachableError) and not self._json_mode:
            message += "\nStart the termtile daemon and try again."
        self.print_error_and_exit(err.phase, message)

    # --- Daemon ---

    def print_status(self, status: StatusData) -> None:
        """Print daemon status."""
        self._success(
            status.model_dump(),
            "\n".join(
                [
                    f"daemon_running: {status.daemon_running}",
                    f"active_layout:  {status.active_layout}",
                    f"terminal_count: {status.terminal_count}",
                    f"uptime_seconds: {status.uptime_seconds}",
                ]
            ),
        )

    def print_ping(self, *, alive: bool) -> None:
        """Print daemon liveness."""
        self._success({"alive": alive}, "Daemon is running." if alive else "Daemon is not responding.")

    def print_reloaded(self) -> None:
        """Print config reload confirmation."""
        self._success({}, "Config reloaded.")

    def print_undone(self) -> None:
        """Print undo confirmation."""
        self._success({}, "Undo applied.")

    def print_monitors(self, data: MonitorsData) -> None:
        """Print monitor list."""
        lines = [f"{m.id}: {m.name} {m.width}x{m.height}+{m.x}+{m.y}" for m in data.monitors]
        self._success(data.model_dump(), "\n".join(lines) if lines else "No monitors.")

    # --- Layouts ---

    def print_layouts(self, data: LayoutsData) -> None:
        """Print layouts, marking the default and active ones."""
        if self._json_mode:
            print(json.dumps({"ok": True, "data": data.model_dump()}))
            return
        for name in data.layouts:
            marks = [mark for mark, layout in (("default", data.default_layout), ("active", data.active_layout)) if layout == name]
            print(f"{name} ({', '.join(marks)})" if marks else name)

    def print_layout_applied(self, name: str, *, tiled: bool) -> None:
        """Print layout activation confirmation."""
        self._success({"layout": name, "tiled": tiled}, f"Layout '{name}' applied{' and tiled' if tiled else ''}.")

    def print_default_set(self, name: str) -> None:
        """Print default layout confirmation."""
        self._success({"layout": name}, f"Default layout set to '{name}'.")

    def print_preview_started(self, name: str, duration: int) -> None:
        """Print preview confirmation."""
        label = name or "default layout"
        self._success({"layout": name, "duration_seconds": duration}, f"Previewing {label}.")

    # --- X11 ---

    def print_desktop(self, *, current: int, count: int) -> None:
        """Print current desktop and desktop count."""
        self._success({"current": current, "count": count}, f"Desktop {current + 1} of {count}.")

    def print_focused(self, window_id: int) -> None:
        """Print window focus confirmation."""
        self._success({"window_id": window_id}, f"Focused window 0x{window_id:x}.")

    def print_moved(self, window_id: int, desktop: int) -> None:
        """Print window move confirmation."""
        target = "all desktops" if desktop < 0 else f"desktop {desktop}"
        self._success({"window_id": window_id, "desktop": desktop}, f"Moved window 0x{window_id:x} to {target}.")
