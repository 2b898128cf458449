"""
Request-scoped access to the service objects built at startup
"""

from typing import Any, Dict

from fastapi import Depends, Request

from kidmap.core.security import get_token_claims
from kidmap.models.user import User
from kidmap.services.geocoding import NominatimGeocoder
from kidmap.services.overpass import VenueSearchService
from kidmap.services.relations import FavoriteStore, VenueStatusService, VisitedStore
from kidmap.services.users import UserService


def get_venue_search(request: Request) -> VenueSearchService:
    return request.app.state.venue_search


def get_geocoder(request: Request) -> NominatimGeocoder:
    return request.app.state.geocoder


def get_favorite_store(request: Request) -> FavoriteStore:
    return request.app.state.favorites


def get_visited_store(request: Request) -> VisitedStore:
    return request.app.state.visited


def get_user_service(request: Request) -> UserService:
    return request.app.state.users


def get_status_service(
    favorites: FavoriteStore = Depends(get_favorite_store),
    visited: VisitedStore = Depends(get_visited_store)
) -> VenueStatusService:
    return VenueStatusService(favorites, visited)


async def get_current_user(
    claims: Dict[str, Any] = Depends(get_token_claims),
    users: UserService = Depends(get_user_service)
) -> User:
    """
    Authenticated user, created or refreshed from the token claims
    """
    return await users.upsert(str(claims["sub"]), claims)
