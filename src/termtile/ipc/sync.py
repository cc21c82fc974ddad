"""Synchronization primitives shared by the IPC server and its collaborators."""

import queue
import threading
from collections.abc import Iterator
from contextlib import contextmanager


class RWLock:
    """Reader/writer lock. Writers are preferred once waiting, so a stream of readers cannot starve them."""

    def __init__(self) -> None:
        """Initialize an unlocked lock."""
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    @contextmanager
    def read(self) -> Iterator[None]:
        """Hold a shared lock for the duration of the block."""
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if self._readers == 0:
                    self._cond.notify_all()

    @contextmanager
    def write(self) -> Iterator[None]:
        """Hold the exclusive lock for the duration of the block."""
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writer = True
        try:
            yield
        finally:
            with self._cond:
                self._writer = False
                self._cond.notify_all()


class ReloadSignal:
    """Single-slot "configuration changed" mailbox.

    Lossy: ``notify()`` never blocks and is dropped when a signal is already
    pending. A consumer must treat a wakeup as "re-check the config", not as a
    count of reloads.
    """

    def __init__(self) -> None:
        """Initialize with an empty slot."""
        self._slot: queue.Queue[None] = queue.Queue(maxsize=1)

    def notify(self) -> bool:
        """Post a signal. Return False if one was already pending and this one was dropped."""
        try:
            self._slot.put_nowait(None)
        except queue.Full:
            return False
        return True

    def wait(self, timeout: float | None = None) -> bool:
        """Consume a pending signal, blocking up to ``timeout`` seconds. Return True if one was received."""
        try:
            self._slot.get(timeout=timeout)
        except queue.Empty:
            return False
        return True

    def pending(self) -> bool:
        """Check whether a signal is waiting to be consumed."""
        return self._slot.full()
