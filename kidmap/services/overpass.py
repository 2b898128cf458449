"""
Overpass API query building and venue search
"""

import logging
import time
from typing import Any, Collection, Dict, List

import httpx

from kidmap.config import settings
from kidmap.core.exceptions import UpstreamError
from kidmap.core.metrics import UPSTREAM_DURATION, UPSTREAM_REQUESTS
from kidmap.domain.categories import CATEGORY_INFO, VenueCategory, ordered
from kidmap.domain.geo import BoundingBox
from kidmap.schemas.venue import VenueSchema
from kidmap.services.normalizer import normalize

logger = logging.getLogger(__name__)

PROVIDER = "overpass"

# One clause per geometry kind: points, closed ways (areas), multipolygon relations
ELEMENT_KINDS = ("node", "way", "relation")


def build_clause_family(category: VenueCategory, bounds: BoundingBox) -> str:
    """The union of one tag filter across every element kind"""
    tag_filter = CATEGORY_INFO[category].predicate.to_overpass()
    bbox = bounds.to_overpass()
    lines = [f"  {kind}[{tag_filter}]({bbox});" for kind in ELEMENT_KINDS]
    return "(\n" + "\n".join(lines) + "\n);"


def build_query(
    bounds: BoundingBox,
    categories: Collection[VenueCategory],
    timeout: int = 25
) -> str:
    """
    Compose one Overpass QL request for every requested category.

    Raises ValueError for an empty category set; searches with no
    categories never reach the provider.
    """
    selected = ordered(categories)
    if not selected:
        raise ValueError("at least one venue category is required")
    if timeout <= 0:
        raise ValueError("timeout must be positive")

    families = "\n".join(build_clause_family(category, bounds) for category in selected)
    return f"[out:json][timeout:{timeout}];\n(\n{families}\n);\nout geom;\n"


class OverpassClient:
    """
    Thin client for the Overpass interpreter endpoint
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        url: str = None,
        query_timeout: int = None
    ):
        self.http_client = http_client
        self.url = url or settings.OVERPASS_URL
        self.query_timeout = query_timeout or settings.OVERPASS_TIMEOUT_SECONDS

    async def fetch_elements(
        self,
        bounds: BoundingBox,
        categories: Collection[VenueCategory]
    ) -> List[Dict[str, Any]]:
        query = build_query(bounds, categories, timeout=self.query_timeout)
        context = {
            "bbox": bounds.to_overpass(),
            "categories": [c.value for c in ordered(categories)],
        }

        start = time.perf_counter()
        try:
            response = await self.http_client.post(self.url, data={"data": query})
        except httpx.TimeoutException as e:
            self._failed("timeout", context, e)
            raise UpstreamError(PROVIDER, "Venue search timed out", context=context) from e
        except httpx.HTTPError as e:
            self._failed("transport", context, e)
            raise UpstreamError(PROVIDER, "Venue search failed", context=context) from e
        finally:
            UPSTREAM_DURATION.labels(provider=PROVIDER).observe(time.perf_counter() - start)

        if response.status_code != 200:
            self._failed("status", context, f"HTTP {response.status_code}")
            raise UpstreamError(
                PROVIDER, "Venue search failed", status=response.status_code, context=context
            )

        try:
            payload = response.json()
        except ValueError as e:
            self._failed("payload", context, e)
            raise UpstreamError(PROVIDER, "Venue search failed", context=context) from e

        elements = payload.get("elements") if isinstance(payload, dict) else None
        if not isinstance(elements, list):
            self._failed("payload", context, "missing 'elements' list")
            raise UpstreamError(PROVIDER, "Venue search failed", context=context)

        UPSTREAM_REQUESTS.labels(provider=PROVIDER, outcome="success").inc()
        logger.debug(f"Overpass returned {len(elements)} elements", extra=context)
        return elements

    def _failed(self, outcome: str, context: Dict[str, Any], error: Any) -> None:
        UPSTREAM_REQUESTS.labels(provider=PROVIDER, outcome=outcome).inc()
        logger.error(f"Overpass request failed ({outcome}): {error}", extra=context)


class VenueSearchService:
    """
    Venue search: query building, provider call and normalization
    """

    def __init__(self, client: OverpassClient):
        self.client = client

    async def search(
        self,
        bounds: BoundingBox,
        categories: Collection[VenueCategory]
    ) -> List[VenueSchema]:
        if not categories:
            return []

        elements = await self.client.fetch_elements(bounds, categories)
        return normalize(elements)
