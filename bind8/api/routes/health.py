from __future__ import annotations

from fastapi import APIRouter

from bind8.core.config import settings

router = APIRouter(tags=["Health"])


@router.get("/health")
def health_check() -> dict:
    """Liveness probe for load balancers; not rate limited."""

    return {"status": "ok", "app": settings.app.name, "version": settings.app.version}
