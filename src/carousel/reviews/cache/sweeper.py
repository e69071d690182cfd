from __future__ import annotations

import logging
import threading
import weakref
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from carousel.reviews.cache.memory import MemoryCache

logger = logging.getLogger(__name__)

DEFAULT_SWEEP_INTERVAL_SECONDS = 120.0


class ExpirySweeper:
    """Background thread calling `cache.sweep()` every `interval_seconds`.

    The thread holds a weak reference to the cache, so a cache that is dropped
    without `close()` still lets the thread exit on its next wake-up.
    """

    def __init__(self, cache: "MemoryCache", interval_seconds: float):
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be > 0")
        self._cache_ref = weakref.ref(cache)
        self._interval = float(interval_seconds)
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def interval_seconds(self) -> float:
        return self._interval

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.is_running:
            return
        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._run, name="cache-expiry-sweeper", daemon=True
        )
        self._thread.start()
        logger.debug("Cache sweeper started (interval %.1fs)", self._interval)

    def stop(self, timeout: float | None = 5.0) -> None:
        self._stop_event.set()
        thread = self._thread
        if thread is None:
            return
        if thread.is_alive() and thread is not threading.current_thread():
            thread.join(timeout)
        self._thread = None
        logger.debug("Cache sweeper stopped")

    def _run(self) -> None:
        while not self._stop_event.wait(self._interval):
            cache = self._cache_ref()
            if cache is None:
                break
            try:
                cache.sweep()
            except Exception:
                logger.exception("Cache sweep failed")
            del cache
