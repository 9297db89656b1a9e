from __future__ import annotations

import dataclasses
from datetime import date, datetime, timezone
from typing import Optional

import pytest

from src.adms_server.adms_server.attendance.model import AttendanceRecord
from src.adms_server.adms_server.common.background import BackgroundWriter
from src.adms_server.adms_server.core.enums import DeviceStatus
from src.adms_server.adms_server.core.exceptions import PersistenceError
from src.adms_server.adms_server.devices.model import DeviceRecord
from src.adms_server.adms_server.notifications.sink import NotifyResult
from src.adms_server.adms_server.punches.model import PunchRecord


class InMemoryPunches:
    def __init__(self):
        self.rows: list[PunchRecord] = []

    def append(self, record: PunchRecord) -> int:
        self.rows.append(record)
        return len(self.rows)

    def distinct_identities_in_range(self, start: datetime, end: datetime):
        return list({r.identity for r in self.rows if start <= r.timestamp <= end})

    def query_by_time_range(self, start: datetime, end: datetime):
        return sorted((r for r in self.rows if start <= r.timestamp <= end), key=lambda r: r.timestamp)

    def query_by_identity_and_time_range(self, identity: str, start: datetime, end: datetime):
        return [r for r in self.query_by_time_range(start, end) if r.identity == identity]

    def list_recent(self, limit: int):
        return sorted(self.rows, key=lambda r: r.timestamp, reverse=True)[:limit]


class InMemoryAttendance:
    def __init__(self):
        self.by_key: dict[tuple[str, date], AttendanceRecord] = {}
        self.upserts = 0

    def find_by_identity_and_day(self, identity: str, day: date) -> Optional[AttendanceRecord]:
        return self.by_key.get((identity, day))

    def upsert(self, record: AttendanceRecord) -> None:
        self.upserts += 1
        self.by_key[(record.identity, record.day)] = record

    def list_by_day(self, day: date):
        return sorted((r for r in self.by_key.values() if r.day == day), key=lambda r: r.identity)


class InMemoryDevices:
    """Device store that records every write and can be told to fail."""

    def __init__(self, records: Optional[list[DeviceRecord]] = None):
        self.by_serial: dict[str, DeviceRecord] = {r.serial_number: r for r in records or []}
        self.calls: list[tuple] = []
        self.failing: set[str] = set()

    def _call(self, name: str, *args) -> None:
        self.calls.append((name, *args))
        if name in self.failing:
            raise PersistenceError(f"{name} failed")

    def calls_to(self, name: str) -> list[tuple]:
        return [c for c in self.calls if c[0] == name]

    def find_by_serial(self, serial_number: str) -> Optional[DeviceRecord]:
        self._call("find_by_serial", serial_number)
        return self.by_serial.get(serial_number)

    def insert(self, record: DeviceRecord) -> None:
        self._call("insert", record.serial_number)
        self.by_serial[record.serial_number] = record

    def update_status_and_last_seen(self, serial_number: str, status: DeviceStatus, last_seen: datetime) -> None:
        self._call("update_status_and_last_seen", serial_number, status, last_seen)
        self.by_serial[serial_number] = dataclasses.replace(self.by_serial[serial_number], status=status, last_seen=last_seen)

    def update_last_seen(self, serial_number: str, last_seen: datetime) -> None:
        self._call("update_last_seen", serial_number, last_seen)
        self.by_serial[serial_number] = dataclasses.replace(self.by_serial[serial_number], last_seen=last_seen)

    def update_status(self, serial_number: str, status: DeviceStatus) -> None:
        self._call("update_status", serial_number, status)
        self.by_serial[serial_number] = dataclasses.replace(self.by_serial[serial_number], status=status)

    def list_all(self):
        self._call("list_all")
        return list(self.by_serial.values())


class RecordingNotifier:
    def __init__(self):
        self.sent: list[AttendanceRecord] = []

    def notify(self, record: AttendanceRecord) -> NotifyResult:
        self.sent.append(record)
        return NotifyResult(delivered=True)


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2024, 3, 5, 18, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def punches_repo() -> InMemoryPunches:
    return InMemoryPunches()


@pytest.fixture
def attendance_repo() -> InMemoryAttendance:
    return InMemoryAttendance()


@pytest.fixture
def devices_repo() -> InMemoryDevices:
    return InMemoryDevices()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def writer():
    w = BackgroundWriter(max_workers=1)
    yield w
    w.shutdown(wait_for_pending=True)
