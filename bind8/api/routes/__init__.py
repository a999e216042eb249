from __future__ import annotations

from bind8.api.routes.health import router as health_router
from bind8.api.routes.rsvp import router as rsvp_router
from bind8.api.routes.weddings import router as weddings_router

__all__ = ["health_router", "rsvp_router", "weddings_router"]
