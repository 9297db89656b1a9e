from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor, wait
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)


class BackgroundWriter:
    """Fire-and-forget executor for secondary persistence writes.

    Failures are logged and discarded; nothing is retried and the caller never
    sees the outcome.
    """

    def __init__(self, *, max_workers: int = 4, name: str = "adms-writer"):
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix=name)
        self._pending: set[Future] = set()
        self._lock = threading.Lock()
        self._closed = False

    def submit(self, fn: Callable[..., Any], *args: Any, description: str = "") -> Optional[Future]:
        with self._lock:
            if self._closed:
                logger.warning("Background writer closed, dropping %s", description or fn)
                return None
            future = self._executor.submit(self._run, fn, args, description)
            self._pending.add(future)
        future.add_done_callback(self._forget)
        return future

    def flush(self, timeout: Optional[float] = None) -> None:
        """Wait for writes submitted so far."""
        with self._lock:
            pending = list(self._pending)
        if pending:
            wait(pending, timeout=timeout)

    def shutdown(self, *, wait_for_pending: bool = True) -> None:
        with self._lock:
            self._closed = True
        self._executor.shutdown(wait=wait_for_pending)

    def _forget(self, future: Future) -> None:
        with self._lock:
            self._pending.discard(future)

    @staticmethod
    def _run(fn: Callable[..., Any], args: tuple, description: str) -> None:
        try:
            fn(*args)
        except Exception:
            logger.exception("Background write failed: %s", description or getattr(fn, "__name__", fn))
