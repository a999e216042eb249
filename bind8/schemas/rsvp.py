"""Pydantic schemas for guest RSVPs."""

from __future__ import annotations

from datetime import datetime
from typing import List, Literal

from pydantic import BaseModel, Field

RSVPStatus = Literal["attending", "not_attending", "maybe"]


class RSVPSubmission(BaseModel):
    """A guest's RSVP as submitted from the public wedding page."""

    wedding_id: str = Field(..., min_length=1)
    guest_name: str = Field(..., min_length=1)
    status: RSVPStatus = Field(..., description="One of: attending, not_attending, maybe.")
    guest_email: str | None = None
    guest_phone: str | None = None
    plus_one_name: str | None = None
    plus_one_email: str | None = None
    dietary_restrictions: str | None = None
    song_requests: str | None = None
    notes: str | None = None


class RSVP(RSVPSubmission):
    """Stored RSVP."""

    id: str
    created_at: datetime


class RSVPSubmitResponse(BaseModel):
    rsvp: RSVP
    message: str = "RSVP submitted successfully"


class RSVPCounts(BaseModel):
    """Head count per status; ``pending`` covers invitations without an answer."""

    total: int = 0
    attending: int = 0
    not_attending: int = 0
    maybe: int = 0
    pending: int = 0


class RSVPListResponse(BaseModel):
    rsvps: List[RSVP] = Field(default_factory=list)
    counts: RSVPCounts
