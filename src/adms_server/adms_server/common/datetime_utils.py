from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone
from typing import Optional


def utc_now() -> datetime:
    """Current UTC time.

    Note: Wrapped so tests can patch/mock easier.
    """
    return datetime.now(timezone.utc)


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def as_utc(value: datetime) -> datetime:
    """Attach UTC to naive values, convert aware ones."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def to_iso_z(value: Optional[datetime]) -> Optional[str]:
    """Canonical instant text: 2024-03-05T09:15:30.000Z."""
    if value is None:
        return None
    value = as_utc(value)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


def day_bounds(day: date) -> tuple[datetime, datetime]:
    """Inclusive UTC range covering a calendar day, millisecond precision."""
    start = datetime.combine(day, time.min, tzinfo=timezone.utc)
    end = datetime.combine(day, time(23, 59, 59, 999_000), tzinfo=timezone.utc)
    return start, end


def millis(value: int) -> timedelta:
    return timedelta(milliseconds=value)


def to_db(value: Optional[datetime]) -> Optional[datetime]:
    # DATETIME(3) columns hold naive UTC values.
    if value is None:
        return None
    return as_utc(value).replace(tzinfo=None)


def from_db(value) -> Optional[datetime]:
    if value is None:
        return None
    if isinstance(value, str):
        value = datetime.fromisoformat(value)
    return as_utc(value)
