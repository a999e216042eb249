"""Rate limiting for FastAPI routes.

This module wires the window store adapter into the HTTP layer.

- ``get_client_ip`` derives the caller key from proxy headers.
- ``RateLimitConfig`` describes one named policy; ``AUTH``, ``API`` and
  ``UPLOAD`` are the fixed policies the application uses.
- ``RateLimiter`` applies a policy to a request against an injected store.
- ``rate_limit_dependency`` turns a policy into a FastAPI dependency that
  raises ``RateLimitAppError`` when the caller is over budget.

The limiter lives on ``app.state`` (see ``bind8.core.app_factory``) rather
than in a module global, so every app instance gets isolated counters.
"""

from __future__ import annotations

import hashlib
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable

from fastapi import Request

from bind8.adapters.rate_limit.base import AbstractWindowStore, RateLimitDecision
from bind8.core.config import settings
from bind8.core.errors import RateLimitAppError

logger = logging.getLogger(__name__)

UNKNOWN_CLIENT = "unknown"


def get_client_ip(request: Request) -> str:
    """Best-effort origin address of a request.

    Precedence matters: ``X-Forwarded-For`` wins over ``X-Real-IP``, which
    wins over ``CF-Connecting-IP``. Requests carrying none of them share the
    ``"unknown"`` key.
    """

    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()

    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return real_ip

    cf_connecting_ip = request.headers.get("cf-connecting-ip")
    if cf_connecting_ip:
        return cf_connecting_ip

    return UNKNOWN_CLIENT


def namespaced_ip_key(namespace: str) -> Callable[[Request], str]:
    """Build a key generator producing ``"<namespace>:<client ip>"``."""

    def _key(request: Request) -> str:
        return f"{namespace}:{get_client_ip(request)}"

    return _key


@dataclass(frozen=True)
class RateLimitConfig:
    """Immutable admission policy.

    Attributes:
        name: Policy name, used in logs.
        max_requests: Admission ceiling per window.
        window_ms: Window length in milliseconds.
        key_generator: Maps a request to its counter key.
    """

    name: str
    max_requests: int
    window_ms: int
    key_generator: Callable[[Request], str] = field(default=get_client_ip, compare=False)

    def __post_init__(self) -> None:
        if self.max_requests < 1:
            raise ValueError("max_requests must be >= 1")
        if self.window_ms < 1:
            raise ValueError("window_ms must be >= 1")


AUTH = RateLimitConfig(
    name="auth",
    max_requests=5,
    window_ms=15 * 60 * 1000,
    key_generator=namespaced_ip_key("auth"),
)
API = RateLimitConfig(
    name="api",
    max_requests=100,
    window_ms=60 * 1000,
    key_generator=namespaced_ip_key("api"),
)
UPLOAD = RateLimitConfig(
    name="upload",
    max_requests=10,
    window_ms=60 * 1000,
    key_generator=namespaced_ip_key("upload"),
)

RATE_LIMITS: dict[str, RateLimitConfig] = {c.name: c for c in (AUTH, API, UPLOAD)}


def _hash_limiter_key(key: str) -> str:
    """Hash the limiter key for logging without exposing client addresses."""
    return hashlib.sha256(key.encode()).hexdigest()[:16]


def format_reset_time(reset_time_ms: int) -> str:
    """ISO-8601 UTC timestamp with millisecond precision, e.g. ``2025-01-01T00:00:00.000Z``."""
    moment = datetime.fromtimestamp(reset_time_ms / 1000, tz=timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class RateLimiter:
    """Applies named policies to requests against a window store."""

    def __init__(self, store: AbstractWindowStore) -> None:
        self.store = store

    def check(self, request: Request, config: RateLimitConfig) -> RateLimitDecision:
        key = config.key_generator(request)
        decision = self.store.consume(
            key,
            max_requests=config.max_requests,
            window_ms=config.window_ms,
        )

        if decision.allowed:
            logger.debug(
                "rate_limit.allowed",
                extra={
                    "policy": config.name,
                    "key_hash": _hash_limiter_key(key),
                    "limit": decision.limit,
                    "remaining": decision.remaining,
                },
            )
        else:
            logger.warning(
                "rate_limit.exceeded",
                extra={
                    "policy": config.name,
                    "key_hash": _hash_limiter_key(key),
                    "limit": decision.limit,
                    "window_ms": config.window_ms,
                    "retry_after_s": decision.retry_after_seconds,
                },
            )
        return decision


def get_rate_limiter(request: Request) -> RateLimiter:
    """Return the limiter owned by the application serving ``request``."""
    return request.app.state.rate_limiter


def rate_limit_dependency(config: RateLimitConfig) -> Callable:
    """Create a FastAPI dependency enforcing ``config``.

    Usage:
        router = APIRouter(dependencies=[Depends(api_rate_limit)])

    Register it ahead of authentication dependencies: a throttled request must
    be answered with 429 before any other check can fail.
    """

    async def enforce_rate_limit(request: Request) -> None:
        if not settings.app.rate_limit_enabled:
            return

        decision = get_rate_limiter(request).check(request, config)
        if decision.allowed:
            return

        raise RateLimitAppError(
            code="too_many_requests",
            message="Too many requests",
            details={
                "retry_after": decision.retry_after_seconds or 0,
                "limit": decision.limit,
                "reset_at": format_reset_time(decision.reset_time),
            },
        )

    enforce_rate_limit.__name__ = f"enforce_{config.name}_rate_limit"
    return enforce_rate_limit


auth_rate_limit = rate_limit_dependency(AUTH)
api_rate_limit = rate_limit_dependency(API)
upload_rate_limit = rate_limit_dependency(UPLOAD)
