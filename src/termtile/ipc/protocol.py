"""Request/Response protocol for CLI-daemon communication.

JSON-over-Unix-socket with newline framing. Each message is one JSON line.

Request:  {"command": "APPLY_LAYOUT", "payload": {"layout_name": "grid", "tile_now": true}}
Response: {"status": "OK", "data": {"layouts": ["grid"], "default_layout": "grid", "active_layout": "grid"}}
Error:    {"status": "ERROR", "error": "layout_name is required"}
"""

import json
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Annotated, Any

from pydantic import BaseModel, Field


class ProtocolError(Exception):
    """A message could not be encoded or decoded."""


class CommandType(StrEnum):
    """Commands understood by the daemon."""

    RELOAD = "RELOAD"
    GET_STATUS = "GET_STATUS"
    GET_MONITORS = "GET_MONITORS"
    PREVIEW_LAYOUT = "PREVIEW_LAYOUT"
    LIST_LAYOUTS = "LIST_LAYOUTS"
    APPLY_LAYOUT = "APPLY_LAYOUT"
    SET_DEFAULT_LAYOUT = "SET_DEFAULT_LAYOUT"
    UNDO = "UNDO"


class Status(StrEnum):
    """Response status."""

    OK = "OK"
    ERROR = "ERROR"


@dataclass(frozen=True)
class Request:
    """Daemon request: a command name with an optional command-specific payload.

    ``command`` is kept as a plain string so that unknown commands survive
    decoding and are rejected by the dispatcher.
    """

    command: str
    payload: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class Response:
    """Daemon response: OK with optional data, or ERROR with a message."""

    status: Status
    data: dict[str, Any] | None = None
    error: str = ""

    @property
    def ok(self) -> bool:
        """True for an OK response."""
        return self.status == Status.OK

    @staticmethod
    def success(data: dict[str, Any] | None = None) -> "Response":
        """Build a success response."""
        return Response(status=Status.OK, data=data)

    @staticmethod
    def fail(message: str) -> "Response":
        """Build an error response."""
        return Response(status=Status.ERROR, error=message)


# --- Payloads ---

Uint32 = Annotated[int, Field(ge=0, le=0xFFFFFFFF)]


class PreviewLayoutPayload(BaseModel):
    """PREVIEW_LAYOUT payload. An empty name means the default layout."""

    layout_name: str = ""
    duration_seconds: int = 0


class ApplyLayoutPayload(BaseModel):
    """APPLY_LAYOUT payload. ``window_order`` overrides the tiler's ordering."""

    layout_name: str = ""
    tile_now: bool = False
    window_order: list[Uint32] = Field(default_factory=list)


class SetDefaultLayoutPayload(BaseModel):
    """SET_DEFAULT_LAYOUT payload."""

    layout_name: str = ""
    tile_now: bool = False


# --- Response data ---


class StatusData(BaseModel):
    """GET_STATUS data."""

    active_layout: str
    terminal_count: int
    uptime_seconds: int
    daemon_running: bool


class MonitorInfo(BaseModel):
    """One monitor in GET_MONITORS data."""

    id: int
    name: str
    x: int
    y: int
    width: int
    height: int


class MonitorsData(BaseModel):
    """GET_MONITORS data."""

    monitors: list[MonitorInfo]


class LayoutsData(BaseModel):
    """LIST_LAYOUTS data. ``layouts`` is sorted."""

    layouts: list[str]
    default_layout: str
    active_layout: str


# --- Codec ---


def _encode_line(obj: dict[str, Any]) -> bytes:
    """Serialize one record as a newline-terminated JSON line."""
    try:
        line = json.dumps(obj)
    except (TypeError, ValueError) as e:
        raise ProtocolError(f"failed to encode message: {e}") from e
    # json.dumps escapes control characters, so this only guards the framing invariant
    if "\n" in line:
        raise ProtocolError("encoded message contains a newline")
    return line.encode() + b"\n"


def _decode_object(data: bytes) -> dict[str, Any]:
    """Parse one JSON line that must hold an object."""
    try:
        obj = json.loads(data)
    except (ValueError, RecursionError) as e:
        raise ProtocolError(f"failed to parse message: {e}") from e
    if not isinstance(obj, dict):
        raise ProtocolError(f"message must be a JSON object, got {type(obj).__name__}")
    return obj


def encode_request(req: Request) -> bytes:
    """Serialize a Request to a newline-terminated JSON bytes line."""
    obj: dict[str, Any] = {"command": str(req.command)}
    if req.payload:
        obj["payload"] = req.payload
    return _encode_line(obj)


def decode_request(data: bytes) -> Request:
    """Deserialize a JSON bytes line into a Request.

    Raises:
        ProtocolError: Malformed JSON or envelope.

    """
    obj = _decode_object(data)
    command = obj.get("command")
    if not isinstance(command, str):
        raise ProtocolError("'command' must be a string")
    payload = obj.get("payload")
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise ProtocolError("'payload' must be a JSON object")
    return Request(command=command, payload=payload)


def encode_response(resp: Response) -> bytes:
    """Serialize a Response to a newline-terminated JSON bytes line."""
    obj: dict[str, Any] = {"status": str(resp.status)}
    if resp.ok:
        if resp.data is not None:
            obj["data"] = resp.data
    else:
        obj["error"] = resp.error
    return _encode_line(obj)


def decode_response(data: bytes) -> Response:
    """Deserialize a JSON bytes line into a Response.

    Raises:
        ProtocolError: Malformed JSON or envelope.

    """
    obj = _decode_object(data)
    try:
        status = Status(obj.get("status"))
    except ValueError:
        raise ProtocolError(f"invalid response status: {obj.get('status')!r}") from None
    resp_data = obj.get("data")
    if resp_data is not None and not isinstance(resp_data, dict):
        raise ProtocolError("'data' must be a JSON object")
    error = obj.get("error", "")
    if not isinstance(error, str):
        raise ProtocolError("'error' must be a string")
    if status == Status.ERROR:
        return Response(status=status, error=error)
    return Response(status=status, data=resp_data)
