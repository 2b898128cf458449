"""
Venue and location schemas for request/response models
"""

from typing import Dict, List, Optional

from pydantic import Field, field_validator, model_validator

from kidmap.domain.categories import VenueCategory
from kidmap.domain.geo import BoundingBox
from kidmap.schemas.base import BaseSchema


class BoundsSchema(BaseSchema):
    north: float = Field(..., ge=-90, le=90)
    south: float = Field(..., ge=-90, le=90)
    east: float = Field(..., ge=-180, le=180)
    west: float = Field(..., ge=-180, le=180)

    @model_validator(mode="after")
    def check_orientation(self):
        if self.north <= self.south:
            raise ValueError("north must be greater than south")
        if self.east <= self.west:
            raise ValueError("east must be greater than west")
        return self

    def to_domain(self) -> BoundingBox:
        return BoundingBox(north=self.north, south=self.south, east=self.east, west=self.west)


class VenueSearchRequest(BaseSchema):
    bounds: BoundsSchema
    venue_types: List[VenueCategory]

    model_config = {
        "json_schema_extra": {
            "example": {
                "bounds": {"north": 42.0, "south": 41.8, "east": 12.6, "west": 12.3},
                "venueTypes": ["park", "museum"]
            }
        }
    }


class VenueSchema(BaseSchema):
    """A venue normalized from a geodata element"""
    id: str
    name: str
    type: VenueCategory
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)
    address: Optional[str] = None
    description: Optional[str] = None
    tags: Optional[Dict[str, str]] = None


class CategorySchema(BaseSchema):
    type: VenueCategory
    name: str
    icon: str
    color: str
    tag: str


class LocationSearchRequest(BaseSchema):
    query: str = Field(..., min_length=1, max_length=255)

    @field_validator("query")
    @classmethod
    def reject_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("query must not be blank")
        return v


class LocationSchema(BaseSchema):
    """A named point returned by the geocoder"""
    query: str
    lat: float
    lng: float
    display_name: str
