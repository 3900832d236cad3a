from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Iterator


class SinkLocks:
    """One lock per sink name; held across read-last-row + write."""

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[str, threading.Lock] = {}

    def lock_for(self, sink_name: str) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(sink_name)
            if lock is None:
                lock = self._locks[sink_name] = threading.Lock()
            return lock

    @contextmanager
    def hold(self, sink_name: str, timeout: float = -1) -> Iterator[None]:
        lock = self.lock_for(sink_name)
        if not lock.acquire(timeout=timeout):
            raise TimeoutError(f"Timed out waiting for sink lock {sink_name!r}")
        try:
            yield
        finally:
            lock.release()


# Process-wide registry shared by every RelayProcessor
sink_locks = SinkLocks()
