from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import DeviceStatus
from .model import DeviceRecord


class DeviceRepository(Protocol):
    def find_by_serial(self, serial_number: str) -> Optional[DeviceRecord]:
        raise NotImplementedError

    def insert(self, record: DeviceRecord) -> None:
        raise NotImplementedError

    def update_status_and_last_seen(self, serial_number: str, status: DeviceStatus, last_seen: datetime) -> None:
        raise NotImplementedError

    def update_last_seen(self, serial_number: str, last_seen: datetime) -> None:
        raise NotImplementedError

    def update_status(self, serial_number: str, status: DeviceStatus) -> None:
        """Status change only; used by the offline sweep."""

        raise NotImplementedError

    def list_all(self) -> Sequence[DeviceRecord]:
        raise NotImplementedError
