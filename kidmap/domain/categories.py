"""
Venue categories and their OpenStreetMap tag predicates
"""

import enum
import logging
from dataclasses import dataclass
from typing import Dict, Mapping, Optional, Tuple

logger = logging.getLogger(__name__)


class VenueCategory(str, enum.Enum):
    PLAYGROUND = "playground"
    PARK = "park"
    MUSEUM = "museum"
    GALLERY = "gallery"
    SCIENCE_CENTER = "science_center"
    PLANETARIUM = "planetarium"
    SWIMMING_POOL = "swimming_pool"


@dataclass(frozen=True)
class TagPredicate:
    """A single ``key=value`` tag match"""
    key: str
    value: str

    def matches(self, tags: Optional[Mapping[str, str]]) -> bool:
        return bool(tags) and tags.get(self.key) == self.value

    def to_overpass(self) -> str:
        return f'"{self.key}"="{self.value}"'


@dataclass(frozen=True)
class CategoryInfo:
    predicate: TagPredicate
    icon: str
    color: str
    name: str


CATEGORY_INFO: Dict[VenueCategory, CategoryInfo] = {
    VenueCategory.PLAYGROUND: CategoryInfo(
        TagPredicate("leisure", "playground"), "baby", "#34C759", "Playgrounds"
    ),
    VenueCategory.PARK: CategoryInfo(
        TagPredicate("leisure", "park"), "trees", "#34C759", "Parks"
    ),
    VenueCategory.MUSEUM: CategoryInfo(
        TagPredicate("tourism", "museum"), "building", "#AF52DE", "Museums"
    ),
    VenueCategory.GALLERY: CategoryInfo(
        TagPredicate("tourism", "gallery"), "palette", "#FF9500", "Art Galleries"
    ),
    VenueCategory.SCIENCE_CENTER: CategoryInfo(
        TagPredicate("amenity", "science_centre"), "atom", "#007AFF", "Science Centers"
    ),
    VenueCategory.PLANETARIUM: CategoryInfo(
        TagPredicate("amenity", "planetarium"), "globe", "#1C1C1E", "Planetariums"
    ),
    VenueCategory.SWIMMING_POOL: CategoryInfo(
        TagPredicate("leisure", "swimming_pool"), "waves", "#007AFF", "Swimming Pools"
    ),
}

# Priority for tag-based inference: the first matching predicate wins.
INFERENCE_ORDER: Tuple[VenueCategory, ...] = (
    VenueCategory.PLAYGROUND,
    VenueCategory.PARK,
    VenueCategory.MUSEUM,
    VenueCategory.GALLERY,
    VenueCategory.SCIENCE_CENTER,
    VenueCategory.PLANETARIUM,
    VenueCategory.SWIMMING_POOL,
)

# Used when no predicate matches an element's tags
FALLBACK_CATEGORY = INFERENCE_ORDER[0]

if set(CATEGORY_INFO) != set(VenueCategory) or set(INFERENCE_ORDER) != set(VenueCategory):
    raise RuntimeError("Category tables must cover every VenueCategory exactly")


def category_info(category) -> CategoryInfo:
    """
    Display metadata for a category.

    Anything outside the enumeration is a programming error: it is logged
    and raised instead of being rendered with a default icon.
    """
    try:
        return CATEGORY_INFO[VenueCategory(category)]
    except (KeyError, ValueError):
        logger.error("No metadata for venue category %r", category)
        raise KeyError(category) from None


def ordered(categories) -> Tuple[VenueCategory, ...]:
    """Deduplicate categories and put them in inference order"""
    wanted = {VenueCategory(c) for c in categories}
    return tuple(c for c in INFERENCE_ORDER if c in wanted)
