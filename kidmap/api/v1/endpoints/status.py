"""
Per-venue status for the current user
"""

from typing import Any

from fastapi import APIRouter, Depends

from kidmap.api.deps import get_status_service
from kidmap.core.security import get_current_user_id
from kidmap.schemas.relation import VenueStatusResponse
from kidmap.services.relations import VenueStatusService

router = APIRouter()


@router.get("/{venue_id}/status", response_model=VenueStatusResponse)
async def venue_status(
    venue_id: str,
    user_id: str = Depends(get_current_user_id),
    status_service: VenueStatusService = Depends(get_status_service)
) -> Any:
    return await status_service.status(user_id, venue_id)
