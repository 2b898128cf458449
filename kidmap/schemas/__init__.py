"""
Pydantic schemas for request and response validation
"""

from kidmap.schemas.venue import (
    BoundsSchema,
    VenueSearchRequest,
    VenueSchema,
    CategorySchema,
    LocationSearchRequest,
    LocationSchema
)
from kidmap.schemas.relation import (
    VenueSnapshot,
    FavoriteResponse,
    VisitedResponse,
    VenueStatusResponse
)
from kidmap.schemas.user import UserResponse
from kidmap.schemas.response import (
    SuccessResponse,
    ErrorResponse,
    MessageResponse
)

__all__ = [
    "BoundsSchema",
    "VenueSearchRequest",
    "VenueSchema",
    "CategorySchema",
    "LocationSearchRequest",
    "LocationSchema",
    "VenueSnapshot",
    "FavoriteResponse",
    "VisitedResponse",
    "VenueStatusResponse",
    "UserResponse",
    "SuccessResponse",
    "ErrorResponse",
    "MessageResponse"
]
