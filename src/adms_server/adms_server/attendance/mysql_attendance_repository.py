from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..common.datetime_utils import from_db, to_db
from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import AttendanceRecord
from .repository import AttendanceRepository

_COLUMNS = "pin, day, first_ts, last_ts, duration_minutes, status, updated_at"


def _to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        identity=r["pin"],
        day=r["day"],
        first_timestamp=from_db(r.get("first_ts")),
        last_timestamp=from_db(r.get("last_ts")),
        duration_minutes=int(r.get("duration_minutes") or 0),
        status=AttendanceStatus(r["status"]),
        updated_at=from_db(r.get("updated_at")),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def find_by_identity_and_day(self, identity: str, day: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance
                WHERE pin_hash=SHA2(%s, 256) AND day=%s
                """,
                (identity, day),
            )
            r = fetchone(cur)
            if not r:
                return None
            return _to_record(r)

    def upsert(self, record: AttendanceRecord) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance(pin, day, first_ts, last_ts, duration_minutes, status, updated_at)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    first_ts=VALUES(first_ts),
                    last_ts=VALUES(last_ts),
                    duration_minutes=VALUES(duration_minutes),
                    status=VALUES(status),
                    updated_at=VALUES(updated_at)
                """,
                (
                    record.identity,
                    record.day,
                    to_db(record.first_timestamp),
                    to_db(record.last_timestamp),
                    int(record.duration_minutes),
                    record.status.value,
                    to_db(record.updated_at),
                ),
            )

    def list_by_day(self, day: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance
                WHERE day=%s
                ORDER BY pin ASC
                """,
                (day,),
            )
            return [_to_record(r) for r in fetchall(cur)]
