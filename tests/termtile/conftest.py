"""Shared fixtures: fake collaborators, a fake X display, and IPC servers on short socket paths."""

import asyncio
import tempfile
import threading
from collections.abc import Iterator
from dataclasses import dataclass, field
from datetime import timedelta
from pathlib import Path
from typing import Any

import pytest

from termtile.config import Config
from termtile.ipc.server import IpcServer
from termtile.ipc.sync import ReloadSignal
from termtile.layouts import Layout, LayoutConfig
from termtile.platform import Display, Rect
from termtile.x11.connection import Connection


class FakeTiler:
    """Tiler that records calls. Set ``fail[method] = exc`` to make a method raise."""

    def __init__(self) -> None:
        self.active = ""
        self.terminal_count = 0
        self.calls: list[tuple[str, tuple[Any, ...]]] = []
        self.fail: dict[str, Exception] = {}

    def _record(self, method: str, *args: Any) -> None:
        self.calls.append((method, args))
        self._check(method)

    def _check(self, method: str) -> None:
        if method in self.fail:
            raise self.fail[method]

    def get_active_layout_name(self) -> str:
        self._check("get_active_layout_name")
        return self.active

    def set_active_layout(self, name: str) -> None:
        self._record("set_active_layout", name)
        self.active = name

    def tile_current_monitor(self) -> None:
        self._record("tile_current_monitor")

    def tile_with_order(self, window_ids: list[int]) -> None:
        self._record("tile_with_order", list(window_ids))

    def preview_layout(self, name: str, duration: timedelta) -> None:
        self._record("preview_layout", name, duration)

    def undo_current_monitor(self) -> None:
        self._record("undo_current_monitor")

    def get_terminal_count(self, display_id: int) -> int:
        self._check("get_terminal_count")
        return self.terminal_count


class FakeStore:
    """ConfigStore serving ``loaded`` and recording saves."""

    def __init__(self, loaded: LayoutConfig) -> None:
        self.loaded = loaded
        self.saved: list[LayoutConfig] = []
        self.load_error: Exception | None = None
        self.save_error: Exception | None = None

    def load(self) -> LayoutConfig:
        if self.load_error is not None:
            raise self.load_error
        return self.loaded

    def save(self, cfg: LayoutConfig) -> None:
        if self.save_error is not None:
            raise self.save_error
        self.saved.append(cfg)


class FakeBackend:
    """DisplayBackend with fixed displays; ``error`` makes every query fail."""

    def __init__(self, displays: list[Display]) -> None:
        self._displays = displays
        self.error: Exception | None = None

    def displays(self) -> list[Display]:
        if self.error is not None:
            raise self.error
        return list(self._displays)

    def active_display(self) -> Display:
        if self.error is not None:
            raise self.error
        return self._displays[0]


def make_layout_config(*names: str, default: str = "") -> LayoutConfig:
    """Build a LayoutConfig with one auto layout per name."""
    return LayoutConfig(layouts={name: Layout() for name in names}, default_layout=default)


@pytest.fixture
def tiler() -> FakeTiler:
    return FakeTiler()


@pytest.fixture
def store() -> FakeStore:
    return FakeStore(make_layout_config("columns", "grid", default="grid"))


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend(
        [
            Display(id=0, name="DP-1", bounds=Rect(x=0, y=0, width=2560, height=1440)),
            Display(id=1, name="HDMI-1", bounds=Rect(x=2560, y=0, width=1920, height=1080)),
        ]
    )


@pytest.fixture
def runtime_dir() -> Iterator[Path]:
    """Short runtime directory; AF_UNIX paths are limited to ~108 bytes."""
    with tempfile.TemporaryDirectory(prefix="tt-", dir="/tmp") as d:  # noqa: S108  # nosec B108
        yield Path(d)


@pytest.fixture
def cfg(runtime_dir: Path) -> Config:
    return Config(runtime_dir=runtime_dir, data_dir=runtime_dir, client_timeout=2.0)


@pytest.fixture
def reload_signal() -> ReloadSignal:
    return ReloadSignal()


@pytest.fixture
def server(
    cfg: Config, store: FakeStore, tiler: FakeTiler, backend: FakeBackend, reload_signal: ReloadSignal
) -> IpcServer:
    return IpcServer(cfg, store.load(), store, tiler, backend, reload_signal)


@pytest.fixture
def running_server(server: IpcServer) -> Iterator[IpcServer]:
    """Server accepting connections on its own event loop thread."""
    loop = asyncio.new_event_loop()
    started = threading.Event()

    def run() -> None:
        asyncio.set_event_loop(loop)
        loop.run_until_complete(server.start())
        started.set()
        loop.run_forever()

    thread = threading.Thread(target=run, daemon=True)
    thread.start()
    assert started.wait(5), "server did not start"
    accept_loop = asyncio.run_coroutine_threadsafe(server.serve_forever(), loop)
    yield server
    asyncio.run_coroutine_threadsafe(server.stop(), loop).result(5)
    accept_loop.result(5)
    loop.call_soon_threadsafe(loop.stop)
    thread.join(5)
    loop.close()


# --- Fake X display ---


@dataclass
class FakeProperty:
    """What get_full_property returns."""

    value: Any
    format: int = 32


@dataclass
class FakeWindow:
    """Window resource with properties keyed by atom name."""

    id: int
    atoms: dict[str, int]
    properties: dict[str, FakeProperty] = field(default_factory=dict)
    sent: list[tuple[Any, int, bool]] = field(default_factory=list)

    def get_full_property(self, atom: int, prop_type: int) -> FakeProperty | None:
        name = next(n for n, a in self.atoms.items() if a == atom)
        return self.properties.get(name)

    def send_event(self, event: Any, event_mask: int = 0, propagate: bool = False, onerror: Any = None) -> None:
        self.sent.append((event, event_mask, propagate))


class FakeXDisplay:
    """Minimal stand-in for Xlib.display.Display."""

    ROOT_ID = 0x100

    def __init__(self) -> None:
        self.atoms: dict[str, int] = {}
        self.root = FakeWindow(self.ROOT_ID, self.atoms)
        self.windows: dict[int, FakeWindow] = {}
        self.closed = False
        self.synced = 0

    def screen(self) -> Any:
        return type("Screen", (), {"root": self.root})()

    def intern_atom(self, name: str, only_if_exists: bool = False) -> int:
        return self.atoms.setdefault(name, 300 + len(self.atoms))

    def create_resource_object(self, kind: str, window_id: int) -> FakeWindow:
        return self.windows.setdefault(window_id, FakeWindow(window_id, self.atoms))

    def add_window(self, window_id: int, **properties: FakeProperty) -> FakeWindow:
        window = self.create_resource_object("window", window_id)
        for name, prop in properties.items():
            self.intern_atom(name)
            window.properties[name] = prop
        return window

    def set_root_property(self, name: str, prop: FakeProperty) -> None:
        self.intern_atom(name)
        self.root.properties[name] = prop

    def sync(self) -> None:
        self.synced += 1

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def xdisplay() -> FakeXDisplay:
    return FakeXDisplay()


@pytest.fixture
def xconn(xdisplay: FakeXDisplay) -> Connection:
    return Connection(xdisplay)  # type: ignore[arg-type]
