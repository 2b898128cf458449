"""
Visited venue endpoints
"""

from typing import Any, List

from fastapi import APIRouter, Depends

from kidmap.api.deps import get_current_user, get_visited_store
from kidmap.core.security import get_current_user_id
from kidmap.models.user import User
from kidmap.schemas.relation import VisitedResponse, VenueSnapshot
from kidmap.schemas.response import SuccessResponse
from kidmap.services.relations import VisitedStore

router = APIRouter()


@router.get("", response_model=List[VisitedResponse])
async def list_visited(
    user_id: str = Depends(get_current_user_id),
    visited: VisitedStore = Depends(get_visited_store)
) -> Any:
    """
    Venues the current user has visited, most recent first
    """
    return await visited.list(user_id)


@router.post("", response_model=VisitedResponse)
async def add_visited(
    snapshot: VenueSnapshot,
    current_user: User = Depends(get_current_user),
    visited: VisitedStore = Depends(get_visited_store)
) -> Any:
    """
    Mark a venue as visited. Repeating the call returns the existing record.
    """
    return await visited.add(current_user.id, snapshot)


@router.delete("/{venue_id}", response_model=SuccessResponse)
async def remove_visited(
    venue_id: str,
    user_id: str = Depends(get_current_user_id),
    visited: VisitedStore = Depends(get_visited_store)
) -> Any:
    """
    Unmark a visited venue; unknown venues are ignored
    """
    await visited.remove(user_id, venue_id)
    return SuccessResponse()
