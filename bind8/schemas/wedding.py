"""Pydantic schemas for wedding sites."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class WeddingCreate(BaseModel):
    """Payload for creating a wedding site."""

    title: str = Field(..., min_length=1, description="Site title shown to guests.")
    wedding_date: datetime = Field(..., description="Date (and optionally time) of the ceremony.")
    email: str | None = Field(
        default=None,
        description="Contact email of the registered couple; unregistered sites expire after 24h.",
    )
    is_premium: bool = Field(default=False, description="Premium sites never expire.")
    venue_name: str | None = None
    description: str | None = None


class Wedding(WeddingCreate):
    """Stored wedding site."""

    id: str
    created_at: datetime


class WeddingExpirationResponse(BaseModel):
    """Expiration state of a wedding site at request time."""

    wedding_id: str
    is_premium: bool
    is_expired: bool
    expires_at: datetime | None = Field(
        default=None, description="When the site expires; null for premium sites."
    )
    days_remaining: int | None = Field(
        default=None, description="Whole days left (rounded up); null for premium sites."
    )
    status: str = Field(..., description="Human-readable status, e.g. 'Expires in 2 weeks'.")
