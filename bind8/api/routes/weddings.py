from __future__ import annotations

from fastapi import APIRouter, Depends, Request, status

from bind8.core.auth import verify_api_key
from bind8.core.rate_limit import api_rate_limit
from bind8.schemas.wedding import Wedding, WeddingCreate, WeddingExpirationResponse
from bind8.services.wedding_service import WeddingService

router = APIRouter(tags=["Weddings"], dependencies=[Depends(api_rate_limit)])


def get_wedding_service(request: Request) -> WeddingService:
    return WeddingService(request.app.state.wedding_store)


@router.post(
    "/weddings",
    response_model=Wedding,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(verify_api_key)],
)
async def create_wedding(
    payload: WeddingCreate,
    service: WeddingService = Depends(get_wedding_service),
) -> Wedding:
    """Create a wedding site."""
    return await service.create(payload)


@router.get("/weddings/{wedding_id}/expiration", response_model=WeddingExpirationResponse)
async def get_wedding_expiration(
    wedding_id: str,
    service: WeddingService = Depends(get_wedding_service),
) -> WeddingExpirationResponse:
    """Tell whether a wedding site is still served, and for how long.

    Premium sites never expire; free sites expire 24 hours after creation when
    nobody registered them, otherwise 30 days after the wedding (60 days after
    creation when no date was set).
    """
    return await service.expiration(wedding_id)
