"""
Free-text place search backed by Nominatim
"""

import logging
import time
from typing import Any, Dict, List, Optional

import httpx

from kidmap.config import settings
from kidmap.core.exceptions import UpstreamError
from kidmap.core.metrics import UPSTREAM_DURATION, UPSTREAM_REQUESTS
from kidmap.schemas.venue import LocationSchema

logger = logging.getLogger(__name__)

PROVIDER = "nominatim"


def _to_location(query: str, result: Any) -> Optional[LocationSchema]:
    if not isinstance(result, dict):
        return None
    try:
        lat = float(result["lat"])
        lng = float(result["lon"])
    except (KeyError, TypeError, ValueError):
        return None
    if not (-90 <= lat <= 90 and -180 <= lng <= 180):
        return None
    return LocationSchema(
        query=query,
        lat=lat,
        lng=lng,
        display_name=result.get("display_name") or query,
    )


class NominatimGeocoder:
    """
    Geocoder adapter. Results keep the provider's relevance order and echo
    the caller's text unchanged in ``query``; the provider is sent it stripped.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        url: str = None,
        limit: int = None
    ):
        self.http_client = http_client
        self.url = url or settings.NOMINATIM_URL
        self.limit = limit or settings.GEOCODER_RESULT_LIMIT

    async def search(self, text: str) -> List[LocationSchema]:
        query = text.strip()
        if not query:
            raise ValueError("search text must not be empty")

        params = {
            "format": "json",
            "q": query,
            "limit": self.limit,
            "addressdetails": 1,
        }
        headers = {
            "User-Agent": settings.NOMINATIM_USER_AGENT,
            "Accept": "application/json",
            "Accept-Language": settings.NOMINATIM_ACCEPT_LANGUAGE,
        }
        context: Dict[str, Any] = {"query": query}

        start = time.perf_counter()
        try:
            response = await self.http_client.get(self.url, params=params, headers=headers)
        except httpx.TimeoutException as e:
            self._failed("timeout", context, e)
            raise UpstreamError(PROVIDER, "Location search timed out", context=context) from e
        except httpx.HTTPError as e:
            self._failed("transport", context, e)
            raise UpstreamError(PROVIDER, "Location search failed", context=context) from e
        finally:
            UPSTREAM_DURATION.labels(provider=PROVIDER).observe(time.perf_counter() - start)

        if response.status_code != 200:
            self._failed("status", context, f"HTTP {response.status_code}")
            raise UpstreamError(
                PROVIDER, "Location search failed", status=response.status_code, context=context
            )

        try:
            results = response.json()
        except ValueError as e:
            self._failed("payload", context, e)
            raise UpstreamError(PROVIDER, "Location search failed", context=context) from e

        if not isinstance(results, list):
            self._failed("payload", context, "expected a JSON array")
            raise UpstreamError(PROVIDER, "Location search failed", context=context)

        UPSTREAM_REQUESTS.labels(provider=PROVIDER, outcome="success").inc()

        locations = []
        for result in results:
            location = _to_location(text, result)
            if location is None:
                logger.debug("Skipping geocoder result without usable coordinates", extra=context)
                continue
            locations.append(location)
            if len(locations) >= self.limit:
                break
        return locations

    def _failed(self, outcome: str, context: Dict[str, Any], error: Any) -> None:
        UPSTREAM_REQUESTS.labels(provider=PROVIDER, outcome=outcome).inc()
        logger.error(f"Nominatim request failed ({outcome}): {error}", extra=context)
