from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Optional

from ..common.background import BackgroundWriter
from ..common.datetime_utils import millis, to_iso_z, utc_now
from ..core.constants import DEVICE_OFFLINE_THRESHOLD_MS, LAST_SEEN_DEBOUNCE_MS
from ..core.enums import DeviceStatus
from .cache import DeviceCache
from .model import CachedDevice, DeviceRecord
from .repository import DeviceRepository

logger = logging.getLogger(__name__)


class DeviceLivenessTracker:
    """Online/offline state of terminals.

    The cache answers every heartbeat; the store only sees registrations,
    OFFLINE -> ONLINE flips, debounced ``last_seen`` refreshes and the sweep's
    demotions.
    """

    def __init__(
        self,
        devices: DeviceRepository,
        cache: DeviceCache,
        writer: BackgroundWriter,
        *,
        offline_threshold: timedelta = millis(DEVICE_OFFLINE_THRESHOLD_MS),
        last_seen_debounce: timedelta = millis(LAST_SEEN_DEBOUNCE_MS),
    ):
        self._devices = devices
        self._cache = cache
        self._writer = writer
        self._offline_threshold = offline_threshold
        self._last_seen_debounce = last_seen_debounce

    @property
    def cache(self) -> DeviceCache:
        return self._cache

    @property
    def offline_threshold(self) -> timedelta:
        return self._offline_threshold

    def load_cache(self) -> int:
        count = self._cache.load(self._devices.list_all())
        logger.info("Loaded %d devices into cache", count)
        return count

    def on_heartbeat(self, serial_number: str, now: Optional[datetime] = None) -> None:
        """Record a check-in. Never raises: the terminal cannot act on errors."""
        now = now or utc_now()
        try:
            with self._cache.locked(serial_number) as entry:
                if entry is None:
                    self._register(serial_number, now)
                else:
                    self._touch(serial_number, entry, now)
        except Exception:
            logger.exception("Error handling heartbeat from %s", serial_number)

    def _register(self, serial_number: str, now: datetime) -> None:
        if self._devices.find_by_serial(serial_number) is None:
            self._devices.insert(
                DeviceRecord(serial_number=serial_number, status=DeviceStatus.ONLINE, last_seen=now, first_registered=now)
            )
            logger.info("New device registered: %s", serial_number)
        else:
            self._devices.update_status_and_last_seen(serial_number, DeviceStatus.ONLINE, now)

        self._cache.put(
            serial_number,
            CachedDevice(status=DeviceStatus.ONLINE, last_seen=now, last_heartbeat=now),
        )

    def _touch(self, serial_number: str, entry: CachedDevice, now: datetime) -> None:
        entry.last_heartbeat = now

        if entry.status == DeviceStatus.OFFLINE:
            entry.status = DeviceStatus.ONLINE
            logger.info("Device %s back ONLINE", serial_number)
            self._writer.submit(
                self._devices.update_status_and_last_seen,
                serial_number,
                DeviceStatus.ONLINE,
                now,
                description=f"mark {serial_number} ONLINE",
            )

        if entry.last_seen is None or now - entry.last_seen > self._last_seen_debounce:
            entry.last_seen = now
            self._writer.submit(
                self._devices.update_last_seen,
                serial_number,
                now,
                description=f"last_seen of {serial_number}",
            )

    def sweep_once(self, now: Optional[datetime] = None) -> list[str]:
        """Demote stale ONLINE devices; returns the serial numbers flipped."""
        now = now or utc_now()
        stale: list[str] = []

        for serial_number in self._cache.serial_numbers():
            with self._cache.locked(serial_number) as entry:
                if entry is None or entry.status != DeviceStatus.ONLINE or entry.last_heartbeat is None:
                    continue
                if now - entry.last_heartbeat > self._offline_threshold:
                    entry.status = DeviceStatus.OFFLINE
                    stale.append(serial_number)

        for serial_number in stale:
            try:
                self._devices.update_status(serial_number, DeviceStatus.OFFLINE)
                logger.info("Device %s marked as OFFLINE", serial_number)
            except Exception:
                logger.exception("Error updating device %s", serial_number)

        return stale

    def list_devices_view(self) -> list[dict]:
        """Persisted rows enriched with the live cache state."""
        out: list[dict] = []
        for record in self._devices.list_all():
            entry = self._cache.get(record.serial_number)
            row = record.to_dict()
            row["cached_status"] = entry.status.value if entry else "UNKNOWN"
            row["last_heartbeat"] = to_iso_z(entry.last_heartbeat) if entry else None
            out.append(row)
        return out
