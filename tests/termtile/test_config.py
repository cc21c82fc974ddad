"""Tests for Config model validation, computed paths, and runtime dir resolution."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from termtile import config as config_module
from termtile.config import Config, RuntimeDirError, resolve_runtime_dir

RUNTIME_DIR = Path("/fake/runtime")
DATA_DIR = Path("/fake/data-dir")


class TestConfigPaths:
    """Computed path properties."""

    def test_socket_path(self):
        """Socket file is runtime_dir / termtile.sock."""
        cfg = Config(runtime_dir=RUNTIME_DIR, data_dir=DATA_DIR)
        assert cfg.socket_path == RUNTIME_DIR / "termtile.sock"

    def test_log_path(self):
        """Log file is data_dir / termtile.log."""
        cfg = Config(runtime_dir=RUNTIME_DIR, data_dir=DATA_DIR)
        assert cfg.log_path == DATA_DIR / "termtile.log"


class TestConfigValidation:
    """Pydantic field constraints."""

    def test_defaults(self):
        """Default values for optional fields."""
        cfg = Config(runtime_dir=RUNTIME_DIR)
        assert cfg.client_timeout == 5.0
        assert cfg.log_level == "INFO"

    def test_timeout_must_be_positive(self):
        """client_timeout <= 0 is rejected."""
        with pytest.raises(ValidationError):
            Config(runtime_dir=RUNTIME_DIR, client_timeout=0)

    def test_timeout_must_be_finite(self):
        """An infinite client_timeout is rejected."""
        with pytest.raises(ValidationError):
            Config(runtime_dir=RUNTIME_DIR, client_timeout=float("inf"))

    def test_frozen(self):
        """Config cannot be mutated after construction."""
        cfg = Config(runtime_dir=RUNTIME_DIR)
        with pytest.raises(ValidationError):
            cfg.client_timeout = 1.0  # type: ignore[misc]


class TestBuild:
    """Config.build() with environment overrides."""

    def test_env_overrides(self, monkeypatch):
        """Timeout and log level come from the environment."""
        monkeypatch.setenv("TERMTILE_CLIENT_TIMEOUT", "1.5")
        monkeypatch.setenv("TERMTILE_LOG_LEVEL", "debug")
        cfg = Config.build(runtime_dir=RUNTIME_DIR, data_dir=DATA_DIR)
        assert cfg.client_timeout == 1.5
        assert cfg.log_level == "DEBUG"

    @pytest.mark.parametrize("value", ["", "soon", "-3", "0", "inf", "nan"])
    def test_bad_timeout_ignored(self, monkeypatch, value):
        """Unparseable, non-positive, or non-finite timeouts keep the default."""
        monkeypatch.setenv("TERMTILE_CLIENT_TIMEOUT", value)
        assert Config.build(runtime_dir=RUNTIME_DIR).client_timeout == 5.0

    def test_resolves_runtime_dir(self, monkeypatch):
        """Without an explicit runtime dir, XDG_RUNTIME_DIR is used."""
        monkeypatch.setenv("XDG_RUNTIME_DIR", "/run/user/4242")
        assert Config.build().socket_path == Path("/run/user/4242/termtile.sock")


class TestResolveRuntimeDir:
    """Runtime directory fallback chain."""

    def test_xdg_runtime_dir(self, monkeypatch):
        """XDG_RUNTIME_DIR wins when set."""
        monkeypatch.setenv("XDG_RUNTIME_DIR", "/xdg")
        assert resolve_runtime_dir() == Path("/xdg")

    def test_run_user_dir(self, monkeypatch):
        """/run/user/<uid> is used when it exists."""
        monkeypatch.delenv("XDG_RUNTIME_DIR", raising=False)
        monkeypatch.setattr(config_module.os, "getuid", lambda: 4242)
        monkeypatch.setattr(Path, "is_dir", lambda self: str(self) == "/run/user/4242")
        assert resolve_runtime_dir() == Path("/run/user/4242")

    def test_tmp_fallback(self, monkeypatch):
        """Without either, an owner-only directory under /tmp is created."""
        monkeypatch.delenv("XDG_RUNTIME_DIR", raising=False)
        monkeypatch.setattr(Path, "is_dir", lambda self: False)
        created: list[tuple[Path, int]] = []

        def record(self, mode=0o777, parents=False, exist_ok=False):
            created.append((self, mode))

        monkeypatch.setattr(Path, "mkdir", record)
        uid = config_module.os.getuid()
        assert resolve_runtime_dir() == Path(f"/tmp/termtile-runtime-{uid}")  # noqa: S108
        assert created == [(Path(f"/tmp/termtile-runtime-{uid}"), 0o700)]  # noqa: S108

    def test_tmp_fallback_failure(self, monkeypatch):
        """An uncreatable fallback raises RuntimeDirError."""
        monkeypatch.delenv("XDG_RUNTIME_DIR", raising=False)
        monkeypatch.setattr(Path, "is_dir", lambda self: False)

        def refuse(self, **kwargs):
            raise PermissionError("denied")

        monkeypatch.setattr(Path, "mkdir", refuse)
        with pytest.raises(RuntimeDirError, match="denied"):
            resolve_runtime_dir()
