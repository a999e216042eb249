from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Request

from bind8.core.auth import verify_api_key
from bind8.core.rate_limit import api_rate_limit
from bind8.schemas.rsvp import RSVPListResponse, RSVPSubmission, RSVPSubmitResponse
from bind8.services.rsvp_service import RSVPService

router = APIRouter(tags=["RSVP"], dependencies=[Depends(api_rate_limit)])


def get_rsvp_service(request: Request) -> RSVPService:
    return RSVPService(request.app.state.wedding_store)


@router.post("/rsvp", response_model=RSVPSubmitResponse)
async def submit_rsvp(
    submission: RSVPSubmission,
    service: RSVPService = Depends(get_rsvp_service),
) -> RSVPSubmitResponse:
    """Submit or update a guest's RSVP.

    Public endpoint used by the wedding page form. A second submission from
    the same guest email replaces the first.
    """
    rsvp = await service.submit(submission)
    return RSVPSubmitResponse(rsvp=rsvp)


@router.get(
    "/rsvp",
    response_model=RSVPListResponse,
    dependencies=[Depends(verify_api_key)],
)
async def list_rsvps(
    wedding_id: str | None = Query(default=None, description="Wedding to list RSVPs for."),
    service: RSVPService = Depends(get_rsvp_service),
) -> RSVPListResponse:
    """List a wedding's RSVPs with head counts per status."""
    return await service.list_for_wedding(wedding_id or "")
