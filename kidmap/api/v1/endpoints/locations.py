"""
Place search endpoints
"""

from typing import Any, List

from fastapi import APIRouter, Depends

from kidmap.api.deps import get_geocoder
from kidmap.schemas.venue import LocationSchema, LocationSearchRequest
from kidmap.services.geocoding import NominatimGeocoder

router = APIRouter()


@router.post("/search", response_model=List[LocationSchema])
async def search_locations(
    search: LocationSearchRequest,
    geocoder: NominatimGeocoder = Depends(get_geocoder)
) -> Any:
    """
    Geocode free text. An empty list means no match.
    """
    return await geocoder.search(search.query)
