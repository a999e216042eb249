"""Rate limiting adapters.

A small abstraction layer so the service can run on an in-memory store today
and move to Redis or another shared store without changing the API layer.
"""

from bind8.adapters.rate_limit.base import (
    AbstractWindowStore,
    RateLimitDecision,
    RateWindowEntry,
)
from bind8.adapters.rate_limit.in_memory import InMemoryWindowStore

__all__ = [
    "AbstractWindowStore",
    "InMemoryWindowStore",
    "RateLimitDecision",
    "RateWindowEntry",
]
