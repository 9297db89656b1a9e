from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta

from ..core.constants import DEFAULT_PRESENT_MINUTES
from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendancePolicy:
    """Turns the span between first and last punch into a status."""

    present_minutes: int = DEFAULT_PRESENT_MINUTES

    @staticmethod
    def duration_minutes(first: datetime, last: datetime) -> int:
        millis = (last - first) // timedelta(milliseconds=1)
        return millis // 60_000

    def classify(self, duration_minutes: int) -> AttendanceStatus:
        if duration_minutes >= self.present_minutes:
            return AttendanceStatus.PRESENT
        if duration_minutes > 0:
            return AttendanceStatus.SHORT
        return AttendanceStatus.ABSENT
