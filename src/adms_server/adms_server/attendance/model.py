from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import to_iso_z
from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one person's attendance for one UTC day."""

    identity: str
    day: date
    first_timestamp: datetime
    last_timestamp: datetime
    duration_minutes: int
    status: AttendanceStatus = AttendanceStatus.ABSENT
    updated_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "identity": self.identity,
            "day": self.day.strftime("%Y-%m-%d"),
            "first_timestamp": to_iso_z(self.first_timestamp),
            "last_timestamp": to_iso_z(self.last_timestamp),
            "duration_minutes": self.duration_minutes,
            "status": self.status.value,
            "updated_at": to_iso_z(self.updated_at),
        }
