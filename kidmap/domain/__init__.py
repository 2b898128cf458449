"""
Domain types shared by services, schemas and endpoints
"""

from kidmap.domain.categories import VenueCategory, CategoryInfo, TagPredicate
from kidmap.domain.geo import BoundingBox, Coordinates

__all__ = [
    "VenueCategory",
    "CategoryInfo",
    "TagPredicate",
    "BoundingBox",
    "Coordinates",
]
