"""Place search using the Google Places web service.

Two query shapes:
- Nearby search ranked by distance around a known point, keyword-matched.
- Plain text search when no point is known.

Both return ``PlaceCandidate`` objects in provider order.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any

import httpx

from waypoint_planner.config import get_settings
from waypoint_planner.exceptions import PlaceSearchError
from waypoint_planner.models import Coordinates, PlaceCandidate

logger = logging.getLogger(__name__)


class PlaceSearchService(ABC):
    """Abstract base class for place-search providers."""

    @abstractmethod
    async def text_search(self, query: str) -> list[PlaceCandidate]:
        pass

    @abstractmethod
    async def nearby_search(self, keyword: str, location: Coordinates) -> list[PlaceCandidate]:
        """Nearest-first search for ``keyword`` around ``location``."""
        pass


class GooglePlacesSearchService(PlaceSearchService):
    """Google Places (legacy web service) implementation."""

    PLACES_API_BASE = "https://maps.googleapis.com/maps/api/place"

    def __init__(
        self,
        api_key: str | None = None,
        timeout: float = 15.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_key = api_key or get_settings().google_maps_api_key
        if not self._api_key:
            raise ValueError("GOOGLE_MAPS_API_KEY not provided")
        self._timeout = timeout
        self._transport = transport

    async def text_search(self, query: str) -> list[PlaceCandidate]:
        return await self._search("textsearch", {"query": query})

    async def nearby_search(self, keyword: str, location: Coordinates) -> list[PlaceCandidate]:
        return await self._search(
            "nearbysearch",
            {
                "location": f"{location.lat},{location.lng}",
                "rankby": "distance",
                "keyword": keyword,
            },
        )

    async def _search(self, endpoint: str, params: dict[str, str]) -> list[PlaceCandidate]:
        url = f"{self.PLACES_API_BASE}/{endpoint}/json"
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout, transport=self._transport
            ) as client:
                response = await client.get(url, params={**params, "key": self._api_key})
                response.raise_for_status()
                data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise PlaceSearchError(f"{endpoint} request failed: {e}") from e

        status = data.get("status")
        if status == "ZERO_RESULTS":
            return []
        if status != "OK":
            message = data.get("error_message") or status
            raise PlaceSearchError(f"{endpoint} returned {message}")

        places = [self._to_candidate(item) for item in data.get("results", [])]
        places = [p for p in places if p is not None]
        logger.info(f"[PLACES] {endpoint} {params.get('query') or params.get('keyword')!r}: {len(places)} results")
        return places

    @staticmethod
    def _to_candidate(item: dict[str, Any]) -> PlaceCandidate | None:
        name = (item.get("name") or "").strip()
        if not name:
            return None
        location = None
        loc = (item.get("geometry") or {}).get("location")
        if loc and loc.get("lat") is not None and loc.get("lng") is not None:
            location = Coordinates(lat=loc["lat"], lng=loc["lng"])
        return PlaceCandidate(
            name=name,
            category_tags=list(item.get("types") or []),
            location=location,
            vicinity=item.get("vicinity") or item.get("formatted_address"),
            place_id=item.get("place_id"),
        )
