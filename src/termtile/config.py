"""Centralized application configuration."""

import contextlib
import math
import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, computed_field

DEFAULT_DATA_DIR = Path.home() / ".local" / "share" / "termtile"
SOCKET_NAME = "termtile.sock"


class RuntimeDirError(Exception):
    """No usable runtime directory for the IPC socket."""


def resolve_runtime_dir() -> Path:
    """Return the runtime directory holding the IPC socket.

    Priority: ``$XDG_RUNTIME_DIR``, then ``/run/user/<uid>`` if present,
    then ``/tmp/termtile-runtime-<uid>`` (created owner-only).

    Raises:
        RuntimeDirError: The fallback directory cannot be created.

    """
    if runtime_dir := os.environ.get("XDG_RUNTIME_DIR"):
        return Path(runtime_dir)

    uid = os.getuid()
    run_user_dir = Path(f"/run/user/{uid}")
    if run_user_dir.is_dir():
        return run_user_dir

    tmp_dir = Path(f"/tmp/termtile-runtime-{uid}")  # noqa: S108  # nosec B108
    try:
        tmp_dir.mkdir(mode=0o700, parents=True, exist_ok=True)
    except OSError as e:
        raise RuntimeDirError(f"Failed to create runtime dir {tmp_dir}: {e}") from e
    return tmp_dir


class Config(BaseModel):
    """Application-wide configuration."""

    model_config = ConfigDict(frozen=True)

    runtime_dir: Path = Field(description="Directory holding the IPC socket")
    data_dir: Path = Field(default=DEFAULT_DATA_DIR, description="Directory for logs and other persistent data")
    client_timeout: float = Field(default=5.0, gt=0, allow_inf_nan=False, description="Client round-trip timeout in seconds")
    log_level: str = Field(default="INFO", description="Daemon log level")

    @computed_field(description="Unix domain socket for the daemon")
    @property
    def socket_path(self) -> Path:
        """Unix domain socket for the daemon."""
        return self.runtime_dir / SOCKET_NAME

    @computed_field(description="Log file")
    @property
    def log_path(self) -> Path:
        """Log file."""
        return self.data_dir / "termtile.log"

    @staticmethod
    def build(runtime_dir: Path | None = None, data_dir: Path | None = None) -> "Config":
        """Build a Config from defaults and environment overrides.

        Raises:
            RuntimeDirError: No runtime directory could be resolved.

        """
        kwargs: dict[str, Any] = {
            "runtime_dir": runtime_dir if runtime_dir is not None else resolve_runtime_dir(),
            "data_dir": data_dir if data_dir is not None else DEFAULT_DATA_DIR,
        }
        with contextlib.suppress(ValueError):
            timeout = float(os.environ.get("TERMTILE_CLIENT_TIMEOUT", ""))
            if math.isfinite(timeout) and timeout > 0:
                kwargs["client_timeout"] = timeout
        if level := os.environ.get("TERMTILE_LOG_LEVEL", "").upper():
            kwargs["log_level"] = level

        return Config(**kwargs)
