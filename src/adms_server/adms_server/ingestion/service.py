from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ..attendance.model import AttendanceRecord
from ..attendance.service import AttendanceAggregator
from ..common.datetime_utils import utc_now
from ..common.validators import require_non_empty
from ..core.constants import ATTLOG_TABLE
from ..punches.model import PunchRecord
from ..punches.parser import parse_attendance_log, parse_fallback_log
from ..punches.repository import PunchRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IngestResult:
    inserted: int
    attendance: list[AttendanceRecord] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "inserted": self.inserted,
            "attendance": [r.to_dict() for r in self.attendance],
        }


def is_attendance_table(declared_table: Optional[str]) -> bool:
    return bool(declared_table) and ATTLOG_TABLE in declared_table.upper()


class IngestionService:
    """Use case: accept one pushed payload from a terminal."""

    def __init__(self, punches: PunchRepository, aggregator: AttendanceAggregator):
        self._punches = punches
        self._aggregator = aggregator

    def ingest(self, declared_table: Optional[str], raw_payload: Optional[str], *, now: Optional[datetime] = None) -> IngestResult:
        raw_payload = require_non_empty(raw_payload, "body")
        now = now or utc_now()

        if is_attendance_table(declared_table):
            records = parse_attendance_log(raw_payload)
            inserted = self._store(records)

            # Every punch of the batch is stored before any day is recomputed.
            affected_days = sorted({r.timestamp.date() for r in records})
            attendance: list[AttendanceRecord] = []
            for day in affected_days:
                attendance.extend(self._aggregator.compute_attendance_for_day(day, now=now))

            logger.info("ATTLOG batch: %d punches, %d days recomputed", inserted, len(affected_days))
            return IngestResult(inserted=inserted, attendance=attendance)

        records = parse_fallback_log(raw_payload, now=now)
        inserted = self._store(records)
        logger.info("%s batch: %d lines stored", declared_table or "untyped", inserted)
        return IngestResult(inserted=inserted)

    def _store(self, records: list[PunchRecord]) -> int:
        inserted = 0
        for record in records:
            self._punches.append(record)
            inserted += 1
        return inserted
