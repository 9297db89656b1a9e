from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    """One row per (identity, day)."""

    def find_by_identity_and_day(self, identity: str, day: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def upsert(self, record: AttendanceRecord) -> None:
        """Insert, or overwrite the derived fields of the existing row in place."""

        raise NotImplementedError

    def list_by_day(self, day: date) -> Sequence[AttendanceRecord]:
        raise NotImplementedError
