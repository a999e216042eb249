from __future__ import annotations

from bind8.schemas.rsvp import (
    RSVP,
    RSVPCounts,
    RSVPListResponse,
    RSVPSubmission,
    RSVPSubmitResponse,
)
from bind8.schemas.wedding import Wedding, WeddingCreate, WeddingExpirationResponse

__all__ = [
    "RSVP",
    "RSVPCounts",
    "RSVPListResponse",
    "RSVPSubmission",
    "RSVPSubmitResponse",
    "Wedding",
    "WeddingCreate",
    "WeddingExpirationResponse",
]
