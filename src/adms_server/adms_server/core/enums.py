from __future__ import annotations

from enum import Enum


class AttendanceStatus(str, Enum):
    """Daily attendance classification stored in the attendance table."""

    ABSENT = "ABSENT"
    SHORT = "SHORT"
    PRESENT = "PRESENT"


class DeviceStatus(str, Enum):
    """Liveness state of a terminal."""

    ONLINE = "ONLINE"
    OFFLINE = "OFFLINE"
