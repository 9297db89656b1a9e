from __future__ import annotations

import logging
import threading
import time
from typing import Callable, Optional

from ..common.datetime_utils import utc_now
from ..core.constants import DEVICE_SWEEP_INTERVAL_MS
from .service import DeviceLivenessTracker

logger = logging.getLogger(__name__)


class DeviceMonitor:
    """Background thread running the offline sweep at a fixed rate.

    The cache is loaded from the store before the first sweep, so devices
    known from a previous run keep their persisted state.
    """

    def __init__(
        self,
        tracker: DeviceLivenessTracker,
        *,
        interval_seconds: float = DEVICE_SWEEP_INTERVAL_MS / 1000,
        clock: Callable = utc_now,
    ):
        self._tracker = tracker
        self._interval = float(interval_seconds)
        self._clock = clock
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.running:
            return
        self._tracker.load_cache()
        self._stop.clear()
        self._thread = threading.Thread(target=self._loop, name="adms-device-monitor", daemon=True)
        self._thread.start()

    def stop(self, timeout: Optional[float] = None) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None

    def _loop(self) -> None:
        next_run = time.monotonic() + self._interval
        while not self._stop.wait(max(0.0, next_run - time.monotonic())):
            next_run += self._interval
            try:
                self._tracker.sweep_once(self._clock())
            except Exception:
                logger.exception("Device sweep failed")
