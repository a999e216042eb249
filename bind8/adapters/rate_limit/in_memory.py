"""In-memory fixed-window rate limit store with a background reaper.

Notes:
- Per-process only: running multiple workers multiplies the effective limit,
  and each worker holds its own, unrelated view of the counts.
- Thread-safe: every read-modify-write happens under a lock.
- The first request for a key opens its window; the window is not aligned to
  wall-clock boundaries.
"""

from __future__ import annotations

import asyncio
import logging
import math
import threading
import time
from dataclasses import replace
from typing import Callable

from bind8.adapters.rate_limit.base import (
    AbstractWindowStore,
    RateLimitDecision,
    RateWindowEntry,
)

logger = logging.getLogger(__name__)


DEFAULT_REAPER_INTERVAL_SECONDS = 60.0


def epoch_ms() -> int:
    """Current UNIX time in whole milliseconds."""
    return int(time.time() * 1000)


class InMemoryWindowStore(AbstractWindowStore):
    """Fixed-window counters kept in a process-local dict.

    Lifecycle:
        ``start()`` launches the reaper task on the running event loop and
        ``shutdown()`` cancels it. Both are driven by the application lifespan;
        tests can skip them and call ``purge_expired()`` directly.
    """

    def __init__(
        self,
        *,
        clock: Callable[[], int] = epoch_ms,
        reaper_interval_seconds: float = DEFAULT_REAPER_INTERVAL_SECONDS,
    ) -> None:
        """Initialize an empty store.

        Args:
            clock: Time source returning UNIX time in milliseconds.
            reaper_interval_seconds: Delay between expired-entry sweeps.

        Raises:
            ValueError: If the reaper interval is not positive.
        """
        if reaper_interval_seconds <= 0:
            raise ValueError("reaper_interval_seconds must be > 0")

        self._clock = clock
        self._reaper_interval = reaper_interval_seconds
        self._lock = threading.RLock()
        self._entries: dict[str, RateWindowEntry] = {}
        self._reaper_task: asyncio.Task[None] | None = None

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries

    @property
    def reaper_running(self) -> bool:
        return self._reaper_task is not None and not self._reaper_task.done()

    def get(self, key: str) -> RateWindowEntry | None:
        with self._lock:
            entry = self._entries.get(key)
            return replace(entry) if entry is not None else None

    def consume(self, key: str, *, max_requests: int, window_ms: int) -> RateLimitDecision:
        """Apply the fixed-window rule for one request.

        A missing entry, or one whose window ended strictly before now, is
        replaced by a fresh window that already counts this request. A full
        window rejects without touching the count; otherwise the count is
        incremented in place.

        Raises:
            ValueError: If key is empty or the policy values are not positive.
        """
        if not key:
            raise ValueError("key must be a non-empty string")
        if max_requests < 1:
            raise ValueError("max_requests must be >= 1")
        if window_ms < 1:
            raise ValueError("window_ms must be >= 1")

        now = self._clock()

        with self._lock:
            entry = self._entries.get(key)

            if entry is None or entry.reset_time < now:
                entry = RateWindowEntry(count=1, reset_time=now + window_ms)
                self._entries[key] = entry
                return RateLimitDecision(
                    allowed=True,
                    limit=max_requests,
                    remaining=max(0, max_requests - 1),
                    reset_time=entry.reset_time,
                )

            if entry.count >= max_requests:
                return RateLimitDecision(
                    allowed=False,
                    limit=max_requests,
                    remaining=0,
                    reset_time=entry.reset_time,
                    retry_after_seconds=math.ceil((entry.reset_time - now) / 1000),
                )

            entry.count += 1
            return RateLimitDecision(
                allowed=True,
                limit=max_requests,
                remaining=max(0, max_requests - entry.count),
                reset_time=entry.reset_time,
            )

    def purge_expired(self) -> int:
        now = self._clock()
        with self._lock:
            expired = [key for key, entry in self._entries.items() if entry.reset_time < now]
            for key in expired:
                del self._entries[key]
        return len(expired)

    def start(self) -> None:
        """Launch the reaper on the running event loop (idempotent).

        Raises:
            RuntimeError: If called outside a running event loop.
        """
        if self.reaper_running:
            return
        loop = asyncio.get_running_loop()
        self._reaper_task = loop.create_task(self._reap_forever(), name="rate-limit-reaper")
        logger.info(
            "rate_limit.reaper_started",
            extra={"interval_s": self._reaper_interval},
        )

    async def shutdown(self) -> None:
        """Cancel the reaper and wait for it to finish."""
        task, self._reaper_task = self._reaper_task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.info("rate_limit.reaper_stopped", extra={"entries": len(self)})

    async def _reap_forever(self) -> None:
        while True:
            await asyncio.sleep(self._reaper_interval)
            removed = self.purge_expired()
            if removed:
                logger.debug(
                    "rate_limit.reaped",
                    extra={"removed": removed, "entries": len(self)},
                )
