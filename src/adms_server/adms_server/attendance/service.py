from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import day_bounds, utc_now
from ..notifications.sink import NotificationSink, NullNotificationSink
from ..punches.repository import PunchRepository
from .model import AttendanceRecord
from .policy import AttendancePolicy
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class AttendanceAggregator:
    """Use case: derive the day's attendance of everyone who punched.

    Re-running for the same day recomputes every row from the stored punches,
    so repeated batches (devices resend on transport failure) converge on the
    same result.
    """

    def __init__(
        self,
        punches: PunchRepository,
        attendance: AttendanceRepository,
        *,
        policy: Optional[AttendancePolicy] = None,
        notifier: Optional[NotificationSink] = None,
    ):
        self._punches = punches
        self._attendance = attendance
        self._policy = policy or AttendancePolicy()
        self._notifier = notifier or NullNotificationSink()

    @property
    def policy(self) -> AttendancePolicy:
        return self._policy

    def compute_attendance_for_day(self, day: date, *, now: Optional[datetime] = None) -> list[AttendanceRecord]:
        now = now or utc_now()
        start, end = day_bounds(day)
        identities = set(self._punches.distinct_identities_in_range(start, end))

        results: list[AttendanceRecord] = []
        for identity in sorted(identities):
            record = self._compute_one(identity, day, start, end, now=now)
            if record is None:
                continue
            results.append(record)

            # Delivery outcome is discarded.
            try:
                self._notifier.notify(record)
            except Exception as exc:
                logger.warning("Notification for %s on %s failed: %s", identity, day, exc)

        return results

    def _compute_one(
        self,
        identity: str,
        day: date,
        start: datetime,
        end: datetime,
        *,
        now: datetime,
    ) -> Optional[AttendanceRecord]:
        punches = self._punches.query_by_identity_and_time_range(identity, start, end)
        if not punches:
            return None

        first_ts = punches[0].timestamp
        last_ts = punches[-1].timestamp
        duration = self._policy.duration_minutes(first_ts, last_ts)

        record = AttendanceRecord(
            identity=identity,
            day=day,
            first_timestamp=first_ts,
            last_timestamp=last_ts,
            duration_minutes=duration,
            status=self._policy.classify(duration),
            updated_at=now,
        )

        self._attendance.upsert(record)
        logger.debug(
            "Attendance %s/%s: %s (%d min)",
            identity,
            day,
            record.status.value,
            duration,
        )
        return record
