from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Iterable, Iterator, Optional

from .model import CachedDevice, DeviceRecord


class DeviceCache:
    """Process-wide liveness state shared by heartbeat handlers and the sweep.

    Each serial number has its own lock guarding the read-modify-write of its
    entry; a separate guard lock protects the maps themselves.
    """

    def __init__(self):
        self._entries: dict[str, CachedDevice] = {}
        self._locks: dict[str, threading.Lock] = {}
        self._guard = threading.Lock()

    def __len__(self) -> int:
        with self._guard:
            return len(self._entries)

    def __contains__(self, serial_number: str) -> bool:
        with self._guard:
            return serial_number in self._entries

    def _lock_for(self, serial_number: str) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(serial_number)
            if lock is None:
                lock = threading.Lock()
                self._locks[serial_number] = lock
            return lock

    @contextmanager
    def locked(self, serial_number: str) -> Iterator[Optional[CachedDevice]]:
        """Hold the entry lock; yields the entry or None if not cached yet."""
        with self._lock_for(serial_number):
            yield self.get(serial_number)

    def get(self, serial_number: str) -> Optional[CachedDevice]:
        with self._guard:
            return self._entries.get(serial_number)

    def put(self, serial_number: str, entry: CachedDevice) -> None:
        with self._guard:
            self._entries[serial_number] = entry

    def serial_numbers(self) -> list[str]:
        with self._guard:
            return list(self._entries)

    def load(self, records: Iterable[DeviceRecord]) -> int:
        count = 0
        for r in records:
            with self.locked(r.serial_number):
                self.put(
                    r.serial_number,
                    CachedDevice(status=r.status, last_seen=r.last_seen, last_heartbeat=r.last_seen),
                )
            count += 1
        return count
