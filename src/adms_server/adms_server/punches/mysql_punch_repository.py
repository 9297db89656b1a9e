from __future__ import annotations

from datetime import datetime
from typing import Sequence

from ..common.datetime_utils import from_db, to_db
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import PunchRecord
from .repository import PunchRepository

_COLUMNS = "pin, ts, status, verify, workcode, reserved, raw"


def _to_record(r: dict) -> PunchRecord:
    return PunchRecord(
        identity=r["pin"],
        timestamp=from_db(r["ts"]),
        status=r.get("status"),
        verify_method=r.get("verify"),
        work_code=r.get("workcode"),
        reserved=r.get("reserved"),
        raw_line=r.get("raw") or "",
    )


class MySQLPunchRepository(PunchRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def append(self, record: PunchRecord) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                INSERT INTO punch({_COLUMNS})
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    record.identity,
                    to_db(record.timestamp),
                    record.status,
                    record.verify_method,
                    record.work_code,
                    record.reserved,
                    record.raw_line,
                ),
            )
            return int(cur.lastrowid)

    def distinct_identities_in_range(self, start: datetime, end: datetime) -> Sequence[str]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT DISTINCT pin FROM punch WHERE ts >= %s AND ts <= %s",
                (to_db(start), to_db(end)),
            )
            return [r["pin"] for r in fetchall(cur)]

    def query_by_time_range(self, start: datetime, end: datetime) -> Sequence[PunchRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM punch
                WHERE ts >= %s AND ts <= %s
                ORDER BY ts ASC, id ASC
                """,
                (to_db(start), to_db(end)),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def query_by_identity_and_time_range(self, identity: str, start: datetime, end: datetime) -> Sequence[PunchRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM punch
                WHERE pin=%s AND ts >= %s AND ts <= %s
                ORDER BY ts ASC, id ASC
                """,
                (identity, to_db(start), to_db(end)),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def list_recent(self, limit: int) -> Sequence[PunchRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM punch
                ORDER BY ts DESC, id DESC
                LIMIT %s
                """,
                (int(limit),),
            )
            return [_to_record(r) for r in fetchall(cur)]
