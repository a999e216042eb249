"""Rate limiter interfaces.

The API depends on this abstraction (not the concrete implementation) so the
in-process store can later be replaced by a shared one (e.g. Redis) without
touching the HTTP layer.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass
class RateWindowEntry:
    """Admission count for one key inside its current fixed window.

    Attributes:
        count: Requests admitted in the current window (always >= 1).
        reset_time: Epoch milliseconds at which the window ends.
    """

    count: int
    reset_time: int


@dataclass(frozen=True)
class RateLimitDecision:
    """Outcome of a single admission check.

    Attributes:
        allowed: True to admit the request, False to reject it.
        limit: Max requests per window for the policy that decided.
        remaining: Requests still admissible in the current window.
        reset_time: Epoch milliseconds when the current window ends.
        retry_after_seconds: Whole seconds until the window resets; only set
            when the request was rejected.
    """

    allowed: bool
    limit: int
    remaining: int
    reset_time: int
    retry_after_seconds: int | None = None


class AbstractWindowStore(ABC):
    """Keyed fixed-window counters."""

    @abstractmethod
    def consume(self, key: str, *, max_requests: int, window_ms: int) -> RateLimitDecision:
        """Count one request for ``key`` and decide whether it is admitted.

        Args:
            key: Caller identifier, usually ``"<policy>:<ip>"``.
            max_requests: Admission ceiling per window.
            window_ms: Window length in milliseconds.

        Returns:
            RateLimitDecision for this request.
        """
        raise NotImplementedError

    @abstractmethod
    def get(self, key: str) -> RateWindowEntry | None:
        """Return a copy of the entry stored for ``key``, if any."""
        raise NotImplementedError

    @abstractmethod
    def purge_expired(self) -> int:
        """Drop entries whose window has ended; return how many were removed."""
        raise NotImplementedError
