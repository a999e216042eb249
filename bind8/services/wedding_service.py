"""Wedding site creation and expiration lookup."""

from __future__ import annotations

import logging
from datetime import datetime

from bind8.adapters.storage.base import AbstractWeddingStore
from bind8.core.errors import NotFoundAppError
from bind8.schemas.wedding import Wedding, WeddingCreate, WeddingExpirationResponse
from bind8.services.expiration import (
    WeddingExpirationInput,
    get_days_until_expiration,
    get_expiration_date,
    get_expiration_status,
    is_wedding_expired,
)

logger = logging.getLogger(__name__)


def expiration_input(wedding: Wedding) -> WeddingExpirationInput:
    return WeddingExpirationInput(
        is_premium=wedding.is_premium,
        email=wedding.email,
        wedding_date=wedding.wedding_date,
        created_at=wedding.created_at,
    )


class WeddingService:
    def __init__(self, store: AbstractWeddingStore) -> None:
        self._store = store

    async def create(self, data: WeddingCreate) -> Wedding:
        wedding = await self._store.create_wedding(data)
        logger.info(
            "wedding.created",
            extra={
                "wedding_id": wedding.id,
                "is_premium": wedding.is_premium,
                "registered": bool(wedding.email),
            },
        )
        return wedding

    async def get(self, wedding_id: str) -> Wedding:
        wedding = await self._store.get_wedding(wedding_id)
        if wedding is None:
            raise NotFoundAppError(
                code="wedding_not_found",
                message="Wedding not found",
                details={"resource": "wedding"},
            )
        return wedding

    async def expiration(self, wedding_id: str, *, now: datetime | None = None) -> WeddingExpirationResponse:
        """Expiration state of a wedding site.

        Raises:
            NotFoundAppError: If the wedding does not exist.
        """
        wedding = await self.get(wedding_id)
        data = expiration_input(wedding)
        return WeddingExpirationResponse(
            wedding_id=wedding.id,
            is_premium=wedding.is_premium,
            is_expired=is_wedding_expired(data, now=now),
            expires_at=get_expiration_date(data),
            days_remaining=get_days_until_expiration(data, now=now),
            status=get_expiration_status(data, now=now),
        )
