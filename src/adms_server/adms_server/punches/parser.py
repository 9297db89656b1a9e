"""Parsers for ADMS text payloads.

Terminals push one record per line. ATTLOG lines are tab separated::

    <PIN>\\t<YYYY-MM-DD HH:MM:SS>\\t<status>\\t<verify>\\t<workcode>\\t<reserved>

Other tables (OPLOG, USERINFO, ...) are stored as-is through the permissive
fallback parser.
"""
from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Optional

from ..common.datetime_utils import as_utc, utc_now
from ..core.constants import UNKNOWN_IDENTITY
from .model import PunchRecord

_TIMESTAMP_PATTERNS = (
    re.compile(r"^(\d{4})-(\d{2})-(\d{2}) (\d{2}):(\d{2}):(\d{2})$"),
    re.compile(r"^(\d{4})/(\d{2})/(\d{2}) (\d{2}):(\d{2}):(\d{2})$"),
)


# Only CR, LF and CRLF end a record; other control characters stay inside fields.
_LINE_BREAK_RE = re.compile(r"\r\n|\r|\n")


def _lines(text: str) -> list[str]:
    return [line.strip() for line in _LINE_BREAK_RE.split(text) if line.strip()]


def _token(parts: list[str], index: int) -> Optional[str]:
    if index < len(parts) and parts[index]:
        return parts[index]
    return None


def parse_device_timestamp(value: str) -> Optional[datetime]:
    """Match one of the two accepted layouts and read it as UTC wall-clock."""
    for pattern in _TIMESTAMP_PATTERNS:
        match = pattern.match(value)
        if not match:
            continue
        try:
            return datetime(*(int(g) for g in match.groups()), tzinfo=timezone.utc)
        except ValueError:
            # e.g. 2024-02-30 matches the shape but is not a real instant
            return None
    return None


def parse_attendance_log(text: str) -> list[PunchRecord]:
    rows: list[PunchRecord] = []

    for line in _lines(text):
        parts = line.split("\t")
        if len(parts) < 2:
            parts = line.split()
            if len(parts) < 2:
                continue

        ts = parse_device_timestamp(parts[1])
        if ts is None or not parts[0]:
            continue

        rows.append(
            PunchRecord(
                identity=parts[0],
                timestamp=ts,
                status=_token(parts, 2),
                verify_method=_token(parts, 3),
                work_code=_token(parts, 4),
                reserved=_token(parts, 5),
                raw_line=line,
            )
        )

    return rows


def _best_effort_timestamp(value: str) -> Optional[datetime]:
    try:
        return as_utc(datetime.fromisoformat(value.strip().replace("/", "-")))
    except (ValueError, OverflowError):
        # OverflowError: offset values at the edge of the datetime range
        return None


def parse_fallback_log(text: str, *, now: Optional[datetime] = None) -> list[PunchRecord]:
    """Tab-only split that never discards a line with content."""
    now = now or utc_now()
    rows: list[PunchRecord] = []

    for line in _lines(text):
        parts = line.split("\t")
        ts = None
        if len(parts) > 1:
            ts = _best_effort_timestamp(parts[1])

        rows.append(
            PunchRecord(
                identity=parts[0] or UNKNOWN_IDENTITY,
                timestamp=ts or now,
                raw_line=line,
            )
        )

    return rows
