"""RSVP workflow: submission (create or update) and per-wedding summaries."""

from __future__ import annotations

import logging
from collections import Counter

from bind8.adapters.storage.base import AbstractWeddingStore
from bind8.core.errors import ValidationAppError
from bind8.schemas.rsvp import RSVP, RSVPCounts, RSVPListResponse, RSVPSubmission

logger = logging.getLogger(__name__)


class RSVPService:
    """Coordinates RSVP writes and reads against a wedding store."""

    def __init__(self, store: AbstractWeddingStore) -> None:
        self._store = store

    async def submit(self, submission: RSVPSubmission) -> RSVP:
        """Record a guest's answer.

        A guest answering twice (same wedding, same email) updates their
        previous RSVP instead of creating a second one. RSVPs without an
        email are always new.

        Raises:
            ValidationAppError: If the wedding does not exist.
        """
        wedding = await self._store.get_wedding(submission.wedding_id)
        if wedding is None:
            raise ValidationAppError(
                code="invalid_wedding_id",
                message="Invalid wedding ID",
                details={"field": "wedding_id"},
            )

        existing = None
        if submission.guest_email:
            existing = await self._store.find_rsvp(submission.wedding_id, submission.guest_email)
        rsvp = await self._store.save_rsvp(
            submission,
            rsvp_id=existing.id if existing else None,
        )

        logger.info(
            "rsvp.submitted",
            extra={
                "wedding_id": submission.wedding_id,
                "rsvp_id": rsvp.id,
                "rsvp_status": submission.status,
                "updated": existing is not None,
            },
        )
        return rsvp

    async def list_for_wedding(self, wedding_id: str) -> RSVPListResponse:
        if not wedding_id:
            raise ValidationAppError(
                code="missing_wedding_id",
                message="Missing wedding_id parameter",
                details={"field": "wedding_id"},
            )

        rsvps = await self._store.list_rsvps(wedding_id)
        by_status = Counter(r.status for r in rsvps)
        counts = RSVPCounts(
            total=len(rsvps),
            attending=by_status["attending"],
            not_attending=by_status["not_attending"],
            maybe=by_status["maybe"],
            pending=by_status["pending"],
        )
        return RSVPListResponse(rsvps=rsvps, counts=counts)
