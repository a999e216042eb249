"""Process-local wedding store.

Used for local development and tests; contents vanish with the process.
"""

from __future__ import annotations

import asyncio
import uuid
from datetime import datetime, timezone
from typing import Callable

from bind8.adapters.storage.base import AbstractWeddingStore
from bind8.core.errors import NotFoundAppError
from bind8.schemas.rsvp import RSVP, RSVPSubmission
from bind8.schemas.wedding import Wedding, WeddingCreate


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class InMemoryWeddingStore(AbstractWeddingStore):
    """Dict-backed implementation of AbstractWeddingStore."""

    def __init__(self, *, clock: Callable[[], datetime] = _utcnow) -> None:
        self._clock = clock
        self._lock = asyncio.Lock()
        self._weddings: dict[str, Wedding] = {}
        self._rsvps: dict[str, RSVP] = {}

    async def create_wedding(self, data: WeddingCreate) -> Wedding:
        wedding = Wedding(id=str(uuid.uuid4()), created_at=self._clock(), **data.model_dump())
        async with self._lock:
            self._weddings[wedding.id] = wedding
        return wedding

    async def add_wedding(self, wedding: Wedding) -> Wedding:
        """Store a fully-formed wedding as-is (imports and fixtures)."""
        async with self._lock:
            self._weddings[wedding.id] = wedding
        return wedding

    async def get_wedding(self, wedding_id: str) -> Wedding | None:
        return self._weddings.get(wedding_id)

    async def find_rsvp(self, wedding_id: str, guest_email: str) -> RSVP | None:
        for rsvp in self._rsvps.values():
            if guest_email and rsvp.wedding_id == wedding_id and rsvp.guest_email == guest_email:
                return rsvp
        return None

    async def save_rsvp(self, submission: RSVPSubmission, *, rsvp_id: str | None = None) -> RSVP:
        async with self._lock:
            if rsvp_id is None:
                rsvp = RSVP(id=str(uuid.uuid4()), created_at=self._clock(), **submission.model_dump())
            else:
                existing = self._rsvps.get(rsvp_id)
                if existing is None:
                    raise NotFoundAppError(
                        code="rsvp_not_found",
                        message="RSVP not found",
                        details={"resource": "rsvp"},
                    )
                rsvp = RSVP(id=existing.id, created_at=existing.created_at, **submission.model_dump())
            self._rsvps[rsvp.id] = rsvp
        return rsvp

    async def list_rsvps(self, wedding_id: str) -> list[RSVP]:
        matches = [r for r in self._rsvps.values() if r.wedding_id == wedding_id]
        return sorted(matches, key=lambda r: r.created_at)
