"""
Venue search endpoints
"""

from typing import Any, List, Optional

from fastapi import APIRouter, Depends, Query

from kidmap.api.deps import get_venue_search
from kidmap.config import settings
from kidmap.core.exceptions import ValidationError
from kidmap.domain.categories import INFERENCE_ORDER, VenueCategory, category_info
from kidmap.domain.geo import BoundingBox
from kidmap.schemas.venue import CategorySchema, VenueSchema, VenueSearchRequest
from kidmap.services.overpass import VenueSearchService

router = APIRouter()


@router.post("/search", response_model=List[VenueSchema], response_model_exclude_none=True)
async def search_venues(
    search: VenueSearchRequest,
    venue_search: VenueSearchService = Depends(get_venue_search)
) -> Any:
    """
    Venues of the requested categories inside a bounding box
    """
    return await venue_search.search(search.bounds.to_domain(), search.venue_types)


@router.get("/nearby", response_model=List[VenueSchema], response_model_exclude_none=True)
async def nearby_venues(
    lat: float = Query(..., ge=-90, le=90),
    lng: float = Query(..., ge=-180, le=180),
    radius_km: Optional[float] = Query(None, gt=0),
    types: List[VenueCategory] = Query(default=[]),
    venue_search: VenueSearchService = Depends(get_venue_search)
) -> Any:
    """
    Venues within roughly ``radius_km`` of a point
    """
    radius = radius_km or settings.DEFAULT_SEARCH_RADIUS_KM
    if radius > settings.MAX_SEARCH_RADIUS_KM:
        raise ValidationError(
            f"radius_km must not exceed {settings.MAX_SEARCH_RADIUS_KM}", field="radius_km"
        )

    bounds = BoundingBox.around(lat, lng, radius)
    return await venue_search.search(bounds, types)


@router.get("/categories", response_model=List[CategorySchema])
async def list_categories() -> Any:
    """
    Display metadata for every venue category
    """
    categories = []
    for category in INFERENCE_ORDER:
        info = category_info(category)
        categories.append(CategorySchema(
            type=category,
            name=info.name,
            icon=info.icon,
            color=info.color,
            tag=f"{info.predicate.key}={info.predicate.value}"
        ))
    return categories
