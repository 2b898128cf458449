"""
Main API Router
Aggregates all API endpoints for v1
"""

from fastapi import APIRouter
from kidmap.api.v1.endpoints import (
    auth,
    venues,
    locations,
    favorites,
    visited,
    status,
    health
)

api_router = APIRouter()

# Include all routers
api_router.include_router(auth.router, prefix="/auth", tags=["authentication"])
api_router.include_router(venues.router, prefix="/venues", tags=["venues"])
api_router.include_router(locations.router, prefix="/locations", tags=["locations"])
api_router.include_router(favorites.router, prefix="/favorites", tags=["favorites"])
api_router.include_router(visited.router, prefix="/visited", tags=["visited"])
api_router.include_router(status.router, prefix="/venue", tags=["venue status"])
api_router.include_router(health.router, prefix="/health", tags=["health"])
