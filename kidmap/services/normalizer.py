"""
Normalization of Overpass elements into venues.

An element is a node (``lat``/``lon``), or a way/relation which carries
either a precomputed ``center`` or a ``geometry`` vertex list when the
query asks for ``out geom``.
"""

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional

from kidmap.core.metrics import UNMATCHED_CATEGORY
from kidmap.domain.categories import CATEGORY_INFO, FALLBACK_CATEGORY, INFERENCE_ORDER, VenueCategory
from kidmap.domain.geo import Coordinates
from kidmap.schemas.venue import VenueSchema

logger = logging.getLogger(__name__)

UNNAMED_VENUE = "Unnamed Location"

ADDRESS_TAGS = ("addr:full", "addr:street")
DESCRIPTION_TAGS = ("description", "amenity", "leisure", "tourism")


def _point(container: Any) -> Optional[Coordinates]:
    if not isinstance(container, Mapping):
        return None
    lat, lon = container.get("lat"), container.get("lon")
    if lat is None or lon is None:
        return None
    try:
        return Coordinates(lat=float(lat), lng=float(lon))
    except (TypeError, ValueError):
        return None


def resolve_coordinates(element: Mapping[str, Any]) -> Optional[Coordinates]:
    """
    Point coordinates first, then the centroid, then the first geometry vertex.
    """
    point = _point(element)
    if point is not None:
        return point

    center = _point(element.get("center"))
    if center is not None:
        return center

    geometry = element.get("geometry")
    if isinstance(geometry, list) and geometry:
        return _point(geometry[0])

    return None


def infer_category(tags: Optional[Mapping[str, str]]) -> Optional[VenueCategory]:
    """First category in priority order whose predicate matches, if any"""
    for category in INFERENCE_ORDER:
        if CATEGORY_INFO[category].predicate.matches(tags):
            return category
    return None


def _first_tag(tags: Mapping[str, str], keys: Iterable[str]) -> Optional[str]:
    for key in keys:
        value = tags.get(key)
        if value:
            return value
    return None


def normalize_element(element: Mapping[str, Any]) -> Optional[VenueSchema]:
    """
    Build a venue from one element, or ``None`` when it cannot be placed.
    """
    element_id = element.get("id")
    coords = resolve_coordinates(element)
    if element_id is None or coords is None:
        logger.debug("Dropping element without id or coordinates: %s", element_id)
        return None
    if not coords.is_valid:
        logger.debug("Dropping element %s with out-of-range coordinates", element_id)
        return None

    raw_tags = element.get("tags")
    tags: Dict[str, str] = (
        {str(k): str(v) for k, v in raw_tags.items()} if isinstance(raw_tags, Mapping) else {}
    )

    category = infer_category(tags)
    if category is None:
        UNMATCHED_CATEGORY.inc()
        logger.warning(
            "No category predicate matched element %s; using %s",
            element_id,
            FALLBACK_CATEGORY.value,
            extra={"element_id": str(element_id), "tags": tags}
        )
        category = FALLBACK_CATEGORY

    return VenueSchema(
        id=str(element_id),
        name=tags.get("name") or UNNAMED_VENUE,
        type=category,
        lat=coords.lat,
        lng=coords.lng,
        address=_first_tag(tags, ADDRESS_TAGS),
        description=_first_tag(tags, DESCRIPTION_TAGS),
        tags=tags or None,
    )


def normalize(elements: Iterable[Mapping[str, Any]]) -> List[VenueSchema]:
    """Normalize elements, silently skipping the ones that cannot be placed"""
    venues = []
    for element in elements:
        if not isinstance(element, Mapping):
            continue
        venue = normalize_element(element)
        if venue is not None:
            venues.append(venue)
    return venues
