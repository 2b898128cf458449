"""
Favorite / visited relation schemas
"""

from datetime import datetime
from typing import Optional

from pydantic import Field

from kidmap.domain.categories import VenueCategory
from kidmap.schemas.base import BaseSchema


class VenueSnapshot(BaseSchema):
    """Denormalized copy of the venue a relation refers to"""
    venue_id: str = Field(..., min_length=1, max_length=64)
    venue_name: str = Field(..., min_length=1, max_length=255)
    venue_type: VenueCategory
    venue_lat: float = Field(..., ge=-90, le=90)
    venue_lng: float = Field(..., ge=-180, le=180)

    model_config = {
        "json_schema_extra": {
            "example": {
                "venueId": "123456789",
                "venueName": "Villa Borghese",
                "venueType": "park",
                "venueLat": 41.91,
                "venueLng": 12.49
            }
        }
    }


class RelationResponse(VenueSnapshot):
    id: str
    user_id: str


class FavoriteResponse(RelationResponse):
    created_at: Optional[datetime] = None


class VisitedResponse(RelationResponse):
    visited_at: Optional[datetime] = None


class VenueStatusResponse(BaseSchema):
    is_favorite: bool
    is_visited: bool
