from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Protocol

import requests

from ..attendance.model import AttendanceRecord
from ..core.constants import NOTIFY_TIMEOUT_SECONDS

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NotifyResult:
    delivered: bool
    error: Optional[str] = None


class NotificationSink(Protocol):
    def notify(self, record: AttendanceRecord) -> NotifyResult:
        raise NotImplementedError


class NullNotificationSink:
    """Used when no callback endpoint is configured."""

    def notify(self, record: AttendanceRecord) -> NotifyResult:
        return NotifyResult(delivered=False)


class HttpNotificationSink:
    """POST each computed attendance record to a callback URL.

    Delivery is best-effort: errors are logged and reported in the result,
    never raised.
    """

    def __init__(self, url: str, *, timeout: float = NOTIFY_TIMEOUT_SECONDS, session: Optional[requests.Session] = None):
        self.url = url
        self.timeout = timeout
        self._http = session or requests

    def notify(self, record: AttendanceRecord) -> NotifyResult:
        try:
            response = self._http.post(self.url, json=record.to_dict(), timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as exc:
            logger.warning("Failed to call callback for %s on %s: %s", record.identity, record.day, exc)
            return NotifyResult(delivered=False, error=str(exc))
        return NotifyResult(delivered=True)


def build_notification_sink(callback_url: Optional[str]) -> NotificationSink:
    if callback_url:
        return HttpNotificationSink(callback_url)
    return NullNotificationSink()
