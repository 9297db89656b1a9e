from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..common.datetime_utils import from_db, to_db, utc_now
from ..core.enums import DeviceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import DeviceRecord
from .repository import DeviceRepository

_COLUMNS = "serial_number, status, last_seen, first_registered, updated_at"


def _to_record(r: dict) -> DeviceRecord:
    return DeviceRecord(
        serial_number=r["serial_number"],
        status=DeviceStatus(r["status"]),
        last_seen=from_db(r.get("last_seen")),
        first_registered=from_db(r.get("first_registered")),
        updated_at=from_db(r.get("updated_at")),
    )


class MySQLDeviceRepository(DeviceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def find_by_serial(self, serial_number: str) -> Optional[DeviceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM devices WHERE serial_number=%s", (serial_number,))
            r = fetchone(cur)
            if not r:
                return None
            return _to_record(r)

    def insert(self, record: DeviceRecord) -> None:
        now = to_db(utc_now())
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO devices(serial_number, status, last_seen, first_registered, updated_at)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (
                    record.serial_number,
                    record.status.value,
                    to_db(record.last_seen),
                    to_db(record.first_registered) or now,
                    now,
                ),
            )

    def update_status_and_last_seen(self, serial_number: str, status: DeviceStatus, last_seen: datetime) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE devices
                SET status=%s, last_seen=%s, updated_at=%s
                WHERE serial_number=%s
                """,
                (status.value, to_db(last_seen), to_db(utc_now()), serial_number),
            )

    def update_last_seen(self, serial_number: str, last_seen: datetime) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE devices SET last_seen=%s, updated_at=%s WHERE serial_number=%s",
                (to_db(last_seen), to_db(utc_now()), serial_number),
            )

    def update_status(self, serial_number: str, status: DeviceStatus) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE devices SET status=%s, updated_at=%s WHERE serial_number=%s",
                (status.value, to_db(utc_now()), serial_number),
            )

    def list_all(self) -> Sequence[DeviceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM devices ORDER BY updated_at DESC")
            return [_to_record(r) for r in fetchall(cur)]
