"""Asyncio Unix socket server — the daemon's IPC endpoint.

Owns the layout configuration and dispatches JSON-line requests from clients
to the tiling and display collaborators.
"""

import asyncio
import contextlib
import logging
import os
import signal
import threading
import time
from datetime import timedelta
from typing import Any

from pydantic import ValidationError

from termtile.config import Config
from termtile.ipc.protocol import (
    ApplyLayoutPayload,
    CommandType,
    LayoutsData,
    MonitorInfo,
    MonitorsData,
    PreviewLayoutPayload,
    ProtocolError,
    Request,
    Response,
    SetDefaultLayoutPayload,
    StatusData,
    decode_request,
    encode_response,
)
from termtile.ipc.sync import ReloadSignal, RWLock
from termtile.layouts import ConfigStore, LayoutConfig
from termtile.platform import Display, DisplayBackend
from termtile.tiling import Tiler

logger = logging.getLogger(__name__)

# Longest accepted request line
_READ_LIMIT = 1024 * 1024

DEFAULT_PREVIEW_DURATION = timedelta(seconds=3)
MAX_PREVIEW_DURATION = timedelta(seconds=60)


def clamp_preview_duration(seconds: int) -> timedelta:
    """Clamp a requested preview duration into (0s, 60s]; non-positive values mean 3s."""
    if seconds <= 0:
        return DEFAULT_PREVIEW_DURATION
    # Clamp the int first; timedelta overflows on huge values
    return timedelta(seconds=min(seconds, int(MAX_PREVIEW_DURATION.total_seconds())))


class IpcServer:
    """Daemon IPC endpoint holding the shared layout configuration."""

    def __init__(
        self,
        cfg: Config,
        layout_config: LayoutConfig,
        store: ConfigStore,
        tiler: Tiler,
        backend: DisplayBackend,
        reload_signal: ReloadSignal,
    ) -> None:
        """Initialize the server.

        Args:
            cfg: Application configuration (provides socket path).
            layout_config: Initial layout configuration.
            store: Loads and persists the layout configuration.
            tiler: Tiling engine.
            backend: Display enumeration.
            reload_signal: Poked after every successful reload. Lossy, see ReloadSignal.

        """
        self._cfg = cfg
        self._layout_config = layout_config
        self._config_lock = RWLock()
        self._store = store
        self._tiler = tiler
        self._backend = backend
        self._reload_signal = reload_signal
        self._start_time = time.monotonic()
        self._server: asyncio.AbstractServer | None = None
        self._shutting_down = False
        self._shutdown_lock = threading.Lock()
        # Strong references to background tasks to prevent GC
        self._background_tasks: set[asyncio.Task[None]] = set()

    # --- Lifecycle ---

    async def start(self) -> None:
        """Bind the socket and start accepting connections.

        Raises:
            OSError: Socket cannot be bound or its permissions set.

        """
        sock_path = self._cfg.socket_path
        # Remove stale socket
        with contextlib.suppress(OSError):
            sock_path.unlink()

        # Restrict umask before socket creation to prevent TOCTOU permission window
        old_umask = os.umask(0o077)
        try:
            self._server = await asyncio.start_unix_server(self._handle_client, path=str(sock_path), limit=_READ_LIMIT)
        finally:
            os.umask(old_umask)
        sock_path.chmod(0o600)
        logger.info("IPC server listening on %s", sock_path)

    async def serve_forever(self) -> None:
        """Accept connections until stop() is called."""
        if self._server is None:
            raise RuntimeError("IPC server is not started")
        try:
            await self._server.serve_forever()
        except asyncio.CancelledError:
            if not self.is_shutting_down:
                raise
            logger.debug("Accept loop exited on shutdown")

    async def run(self) -> None:
        """Start the server and run until shutdown signal."""
        await self.start()
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGTERM, signal.SIGINT):
            loop.add_signal_handler(sig, self._schedule_shutdown)
        await self.serve_forever()

    async def stop(self) -> None:
        """Stop accepting connections and remove the socket file."""
        # The flag must be up before the listener closes so the accept loop sees an intentional shutdown
        with self._shutdown_lock:
            already = self._shutting_down
            self._shutting_down = True
        if already:
            return
        logger.info("Stopping IPC server.")
        if self._server is not None:
            self._server.close()
            await self._server.wait_closed()
        with contextlib.suppress(OSError):
            self._cfg.socket_path.unlink()

    @property
    def is_shutting_down(self) -> bool:
        """Check whether stop() has been called."""
        with self._shutdown_lock:
            return self._shutting_down

    def _schedule_shutdown(self) -> None:
        """Schedule a shutdown task with a strong reference to prevent GC."""
        task = asyncio.ensure_future(self.stop())
        self._background_tasks.add(task)
        task.add_done_callback(self._background_tasks.discard)

    # --- Shared config ---

    def get_config(self) -> LayoutConfig:
        """Return the current layout configuration snapshot."""
        with self._config_lock.read():
            return self._layout_config

    def update_config(self, layout_config: LayoutConfig) -> None:
        """Replace the layout configuration."""
        with self._config_lock.write():
            self._layout_config = layout_config

    # --- Connections ---

    async def _handle_client(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
        """Handle a single client connection: read request, dispatch, send response."""
        try:
            try:
                line = await reader.readline()
            except ValueError:
                await self._write(writer, Response.fail("Invalid request: request line too long"))
                return
            if not line:
                return
            try:
                req = decode_request(line)
            except ProtocolError as e:
                await self._write(writer, Response.fail(f"Invalid request: {e}"))
                return
            logger.debug("Request: %s", req.command)
            resp = await asyncio.to_thread(self.dispatch, req)
            await self._write(writer, resp)
        except Exception as e:
            logger.exception("Error handling client")
            with contextlib.suppress(Exception):
                await self._write(writer, Response.fail(f"Internal server error: {e}"))
        finally:
            writer.close()
            with contextlib.suppress(OSError):
                await writer.wait_closed()

    @staticmethod
    async def _write(writer: asyncio.StreamWriter, resp: Response) -> None:
        writer.write(encode_response(resp))
        await writer.drain()

    # --- Dispatch ---

    def dispatch(self, req: Request) -> Response:
        """Route a request to its command handler. Runs in a worker thread."""
        match req.command:
            case CommandType.RELOAD:
                return self._handle_reload()
            case CommandType.GET_STATUS:
                return self._handle_get_status()
            case CommandType.GET_MONITORS:
                return self._handle_get_monitors()
            case CommandType.PREVIEW_LAYOUT:
                return self._handle_preview_layout(req.payload)
            case CommandType.LIST_LAYOUTS:
                return self._handle_list_layouts()
            case CommandType.APPLY_LAYOUT:
                return self._handle_apply_layout(req.payload)
            case CommandType.SET_DEFAULT_LAYOUT:
                return self._handle_set_default_layout(req.payload)
            case CommandType.UNDO:
                return self._handle_undo()
            case _:
                return Response.fail(f"Unknown command: {req.command}")

    def _handle_reload(self) -> Response:
        logger.info("IPC: Received RELOAD command")
        try:
            new_cfg = self._store.load()
        except Exception as e:
            logger.warning("Config reload failed: %s", e)
            return Response.fail(f"Failed to reload config: {e}")

        self.update_config(new_cfg)
        if not self._reload_signal.notify():
            logger.debug("Reload signal already pending")
        logger.info("IPC: Config reloaded successfully")
        return Response.success()

    def _handle_get_status(self) -> Response:
        terminal_count = 0
        display: Display | None = None
        try:
            display = self._backend.active_display()
        except Exception as e:
            logger.debug("Active display unavailable: %s", e)
        try:
            if display is not None:
                terminal_count = self._tiler.get_terminal_count(display.id)
            active_layout = self._tiler.get_active_layout_name()
        except Exception as e:
            return Response.fail(f"Failed to get status: {e}")

        status = StatusData(
            active_layout=active_layout,
            terminal_count=terminal_count,
            uptime_seconds=int(time.monotonic() - self._start_time),
            daemon_running=True,
        )
        return Response.success(status.model_dump())

    def _handle_get_monitors(self) -> Response:
        try:
            displays = self._backend.displays()
        except Exception as e:
            return Response.fail(f"Failed to get monitors: {e}")

        monitors = [
            MonitorInfo(id=d.id, name=d.name, x=d.bounds.x, y=d.bounds.y, width=d.bounds.width, height=d.bounds.height)
            for d in displays
        ]
        return Response.success(MonitorsData(monitors=monitors).model_dump())

    def _handle_preview_layout(self, payload: dict[str, Any]) -> Response:
        try:
            req = PreviewLayoutPayload.model_validate(payload)
        except ValidationError as e:
            return Response.fail(f"Invalid preview payload: {e}")

        layout_name = req.layout_name or self.get_config().default_layout
        duration = clamp_preview_duration(req.duration_seconds)
        logger.info("IPC: Preview layout '%s' for %s", layout_name, duration)

        try:
            self._tiler.preview_layout(layout_name, duration)
        except Exception as e:
            return Response.fail(f"Failed to preview layout: {e}")
        return Response.success()

    def _handle_list_layouts(self) -> Response:
        # Names and default come from one snapshot, taken under one read lock
        with self._config_lock.read():
            layout_names = self._layout_config.layout_names()
            default_layout = self._layout_config.default_layout

        try:
            active_layout = self._tiler.get_active_layout_name()
        except Exception as e:
            return Response.fail(f"Failed to get active layout: {e}")

        data = LayoutsData(layouts=layout_names, default_layout=default_layout, active_layout=active_layout)
        return Response.success(data.model_dump())

    def _handle_apply_layout(self, payload: dict[str, Any]) -> Response:
        try:
            req = ApplyLayoutPayload.model_validate(payload)
        except ValidationError as e:
            return Response.fail(f"Invalid apply payload: {e}")
        if not req.layout_name:
            return Response.fail("layout_name is required")

        try:
            self._tiler.set_active_layout(req.layout_name)
        except Exception as e:
            return Response.fail(f"Failed to set active layout: {e}")

        if req.tile_now:
            try:
                if req.window_order:
                    self._tiler.tile_with_order(req.window_order)
                else:
                    self._tiler.tile_current_monitor()
            except Exception as e:
                return Response.fail(f"Failed to tile with active layout: {e}")
        return Response.success()

    def _handle_set_default_layout(self, payload: dict[str, Any]) -> Response:
        try:
            req = SetDefaultLayoutPayload.model_validate(payload)
        except ValidationError as e:
            return Response.fail(f"Invalid set default payload: {e}")
        if not req.layout_name:
            return Response.fail("layout_name is required")

        with self._config_lock.write():
            if not self._layout_config.has_layout(req.layout_name):
                return Response.fail(f"Unknown layout: {req.layout_name}")
            new_cfg = self._layout_config.with_default(req.layout_name)
            try:
                self._store.save(new_cfg)
            except Exception as e:
                return Response.fail(f"Failed to save config: {e}")
            self._layout_config = new_cfg
        logger.info("IPC: Default layout set to '%s'", req.layout_name)

        try:
            self._tiler.set_active_layout(req.layout_name)
        except Exception as e:
            logger.warning("Failed to activate default layout '%s': %s", req.layout_name, e)

        if req.tile_now:
            try:
                self._tiler.tile_current_monitor()
            except Exception as e:
                return Response.fail(f"Failed to tile with default layout: {e}")
        return Response.success()

    def _handle_undo(self) -> Response:
        try:
            self._tiler.undo_current_monitor()
        except Exception as e:
            return Response.fail(f"Failed to undo: {e}")
        return Response.success()


def run_server(
    cfg: Config,
    layout_config: LayoutConfig,
    store: ConfigStore,
    tiler: Tiler,
    backend: DisplayBackend,
    reload_signal: ReloadSignal,
) -> None:
    """Entry point: create server and run the asyncio event loop."""
    server = IpcServer(cfg, layout_config, store, tiler, backend, reload_signal)
    asyncio.run(server.run())
