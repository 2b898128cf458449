"""
Favorite venue endpoints
"""

from typing import Any, List

from fastapi import APIRouter, Depends

from kidmap.api.deps import get_current_user, get_favorite_store
from kidmap.core.security import get_current_user_id
from kidmap.models.user import User
from kidmap.schemas.relation import FavoriteResponse, VenueSnapshot
from kidmap.schemas.response import SuccessResponse
from kidmap.services.relations import FavoriteStore

router = APIRouter()


@router.get("", response_model=List[FavoriteResponse])
async def list_favorites(
    user_id: str = Depends(get_current_user_id),
    favorites: FavoriteStore = Depends(get_favorite_store)
) -> Any:
    """
    Current user's favorite venues, newest first
    """
    return await favorites.list(user_id)


@router.post("", response_model=FavoriteResponse)
async def add_favorite(
    snapshot: VenueSnapshot,
    current_user: User = Depends(get_current_user),
    favorites: FavoriteStore = Depends(get_favorite_store)
) -> Any:
    """
    Mark a venue as favorite. Repeating the call returns the existing record.
    """
    return await favorites.add(current_user.id, snapshot)


@router.delete("/{venue_id}", response_model=SuccessResponse)
async def remove_favorite(
    venue_id: str,
    user_id: str = Depends(get_current_user_id),
    favorites: FavoriteStore = Depends(get_favorite_store)
) -> Any:
    """
    Unmark a favorite venue; unknown venues are ignored
    """
    await favorites.remove(user_id, venue_id)
    return SuccessResponse()
