"""Synchronous client for CLI → daemon communication.

One call is one connection carrying one request and one response. The whole
exchange after connecting shares a single deadline.
"""

import socket
import time
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from termtile.config import Config
from termtile.ipc.protocol import (
    ApplyLayoutPayload,
    CommandType,
    LayoutsData,
    MonitorsData,
    PreviewLayoutPayload,
    ProtocolError,
    Request,
    SetDefaultLayoutPayload,
    StatusData,
    decode_response,
    encode_request,
)

T = TypeVar("T", bound=BaseModel)

# Read buffer size
_BUFSIZE = 65536


class ClientError(Exception):
    """A daemon call failed. ``phase`` tells where: connect, marshal, send, read, parse, or daemon."""

    def __init__(self, message: str, phase: str) -> None:
        """Initialize with a human-readable message and the failing phase.

        Args:
            message: Human-readable error description.
            phase: Round-trip phase that failed.

        """
        super().__init__(message)
        self.phase = phase


class TransportError(ClientError):
    """The socket could not be connected, written, or read."""


class DaemonUnreachableError(TransportError):
    """Nothing is listening on the daemon socket."""


class DaemonError(ClientError):
    """The daemon answered with an ERROR response."""

    def __init__(self, message: str) -> None:
        """Initialize with the message reported by the daemon."""
        super().__init__(message, "daemon")


class _Deadline:
    """Absolute deadline applied to every socket operation of one call."""

    def __init__(self, timeout: float) -> None:
        self._expires = time.monotonic() + timeout

    def apply(self, s: socket.socket) -> None:
        """Set the socket timeout to the remaining time, failing if none is left."""
        remaining = self._expires - time.monotonic()
        if remaining <= 0:
            raise TimeoutError("deadline exceeded")
        s.settimeout(remaining)


def _recv_line(s: socket.socket, deadline: _Deadline) -> bytes:
    """Read from socket until newline (protocol framing delimiter)."""
    chunks: list[bytes] = []
    while True:
        deadline.apply(s)
        chunk = s.recv(_BUFSIZE)
        if not chunk:
            raise ConnectionError("connection closed before a complete response")
        chunks.append(chunk)
        if b"\n" in chunk:
            break
    data = b"".join(chunks)
    return data[: data.index(b"\n") + 1]


def _build_payload(model: type[T], **fields: Any) -> T:
    """Validate command arguments into a payload model.

    Raises:
        ClientError: An argument is out of range (phase "marshal").

    """
    try:
        return model(**fields)
    except ValidationError as e:
        raise ClientError(f"failed to marshal request: {e}", "marshal") from e


class DaemonClient:
    """Synchronous client that talks to the daemon over a Unix socket."""

    def __init__(self, cfg: Config) -> None:
        """Initialize client with configuration.

        Args:
            cfg: Application configuration (provides socket path and timeout).

        """
        self._cfg = cfg

    def send(self, command: str, payload: dict[str, Any] | None = None) -> dict[str, Any] | None:
        """Send one request and return the response data (None if the command returns nothing).

        Raises:
            DaemonUnreachableError: Cannot connect to the socket.
            TransportError: Send or read failed, including timeouts.
            DaemonError: Daemon reported an error.
            ClientError: Request could not be encoded or the response parsed.

        """
        try:
            line = encode_request(Request(command=command, payload=payload or {}))
        except ProtocolError as e:
            raise ClientError(f"failed to marshal request: {e}", "marshal") from e

        timeout = self._cfg.client_timeout
        with socket.socket(socket.AF_UNIX, socket.SOCK_STREAM) as s:
            s.settimeout(timeout)
            try:
                s.connect(str(self._cfg.socket_path))
            except OSError as e:
                raise DaemonUnreachableError(f"failed to connect to daemon: {e} (is the daemon running?)", "connect") from e
            deadline = _Deadline(timeout)
            try:
                deadline.apply(s)
                s.sendall(line)
            except OSError as e:
                raise TransportError(f"failed to send request: {e}", "send") from e
            try:
                data = _recv_line(s, deadline)
            except OSError as e:
                raise TransportError(f"failed to read response: {e}", "read") from e

        try:
            resp = decode_response(data)
        except ProtocolError as e:
            raise ClientError(f"failed to parse response: {e}", "parse") from e
        if not resp.ok:
            raise DaemonError(f"daemon error: {resp.error}")
        return resp.data

    def _fetch(self, command: CommandType, model: type[T]) -> T:
        """Send a data-returning command and validate its data."""
        data = self.send(command)
        try:
            return model.model_validate(data or {})
        except ValidationError as e:
            raise ClientError(f"failed to parse {command} data: {e}", "parse") from e

    # --- Commands ---

    def reload(self) -> None:
        """Ask the daemon to reload its configuration."""
        self.send(CommandType.RELOAD)

    def undo(self) -> None:
        """Undo the last tiling operation on the active monitor."""
        self.send(CommandType.UNDO)

    def get_status(self) -> StatusData:
        """Fetch daemon status."""
        return self._fetch(CommandType.GET_STATUS, StatusData)

    def get_monitors(self) -> MonitorsData:
        """Fetch the monitors known to the daemon."""
        return self._fetch(CommandType.GET_MONITORS, MonitorsData)

    def preview_layout(self, layout_name: str, duration_seconds: int) -> None:
        """Temporarily apply a layout. An empty name previews the default layout."""
        payload = _build_payload(PreviewLayoutPayload, layout_name=layout_name, duration_seconds=duration_seconds)
        self.send(CommandType.PREVIEW_LAYOUT, payload.model_dump())

    def list_layouts(self) -> LayoutsData:
        """Fetch configured layouts, the default, and the active one."""
        return self._fetch(CommandType.LIST_LAYOUTS, LayoutsData)

    def apply_layout(self, layout_name: str, *, tile_now: bool = False, window_order: list[int] | None = None) -> None:
        """Set the active layout, optionally tiling now.

        A non-empty ``window_order`` tiles immediately with windows in that order.
        """
        payload = _build_payload(
            ApplyLayoutPayload,
            layout_name=layout_name,
            tile_now=tile_now or bool(window_order),
            window_order=window_order or [],
        )
        self.send(CommandType.APPLY_LAYOUT, payload.model_dump(exclude_defaults=True))

    def set_default_layout(self, layout_name: str, *, tile_now: bool = False) -> None:
        """Persist a new default layout, optionally tiling now."""
        payload = _build_payload(SetDefaultLayoutPayload, layout_name=layout_name, tile_now=tile_now)
        self.send(CommandType.SET_DEFAULT_LAYOUT, payload.model_dump(exclude_defaults=True))

    def ping(self) -> bool:
        """Check whether the daemon answers a status request."""
        try:
            self.get_status()
        except ClientError:
            return False
        return True
