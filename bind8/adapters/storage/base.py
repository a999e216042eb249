"""Storage interface for wedding sites and RSVPs.

Production data lives in the hosted backend (tables behind its client SDK);
services only depend on this interface so they can be exercised against the
in-memory implementation.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from bind8.schemas.rsvp import RSVP, RSVPSubmission
from bind8.schemas.wedding import Wedding, WeddingCreate


class AbstractWeddingStore(ABC):
    """Interface for wedding and RSVP persistence."""

    @abstractmethod
    async def create_wedding(self, data: WeddingCreate) -> Wedding:
        raise NotImplementedError

    @abstractmethod
    async def get_wedding(self, wedding_id: str) -> Wedding | None:
        raise NotImplementedError

    @abstractmethod
    async def find_rsvp(self, wedding_id: str, guest_email: str) -> RSVP | None:
        """Return the RSVP a guest already sent for this wedding, if any.

        Guests are matched on ``guest_email``; an empty email never matches.
        """
        raise NotImplementedError

    @abstractmethod
    async def save_rsvp(self, submission: RSVPSubmission, *, rsvp_id: str | None = None) -> RSVP:
        """Insert a new RSVP, or overwrite ``rsvp_id`` when given.

        Raises:
            NotFoundAppError: If ``rsvp_id`` does not exist.
        """
        raise NotImplementedError

    @abstractmethod
    async def list_rsvps(self, wedding_id: str) -> list[RSVP]:
        """RSVPs of a wedding, oldest first."""
        raise NotImplementedError
