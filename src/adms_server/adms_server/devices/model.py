from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import to_iso_z
from ..core.enums import DeviceStatus


@dataclass(frozen=True)
class DeviceRecord:
    """Persisted view of a terminal (lags behind the in-memory cache)."""

    serial_number: str
    status: DeviceStatus
    last_seen: Optional[datetime] = None
    first_registered: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "serial_number": self.serial_number,
            "status": self.status.value,
            "last_seen": to_iso_z(self.last_seen),
            "first_registered": to_iso_z(self.first_registered),
            "updated_at": to_iso_z(self.updated_at),
        }


@dataclass
class CachedDevice:
    """Live state of a terminal; mutate only while holding its cache lock."""

    status: DeviceStatus
    last_seen: Optional[datetime] = None
    last_heartbeat: Optional[datetime] = None
