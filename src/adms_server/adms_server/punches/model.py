from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import to_iso_z


@dataclass(frozen=True)
class PunchRecord:
    """Domain entity: one clock event reported by a terminal."""

    identity: str
    timestamp: datetime
    status: Optional[str] = None
    verify_method: Optional[str] = None
    work_code: Optional[str] = None
    reserved: Optional[str] = None
    raw_line: str = ""

    def to_dict(self) -> dict:
        return {
            "identity": self.identity,
            "timestamp": to_iso_z(self.timestamp),
            "status": self.status,
            "verify_method": self.verify_method,
            "work_code": self.work_code,
            "reserved": self.reserved,
            "raw_line": self.raw_line,
        }
