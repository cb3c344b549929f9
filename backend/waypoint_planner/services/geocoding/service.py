"""Geocoding using OpenStreetMap Nominatim.

Resolves free-text locations ("Milwaukee, WI", "123 Main St") to
coordinates. Results are memoized in a process-level LRU cache since a
planning run resolves the same origin and destination once per routed
combination. Those combinations are routed concurrently, so lookups that
are still in flight are shared too: one request per distinct text.
"""

import asyncio
import logging
from abc import ABC, abstractmethod

import httpx

from waypoint_planner.config import get_settings
from waypoint_planner.exceptions import GeocodingError
from waypoint_planner.models import Coordinates
from waypoint_planner.utils.cache import LRUCache

logger = logging.getLogger(__name__)


class GeocodingService(ABC):
    """Abstract base class for geocoders."""

    @abstractmethod
    async def geocode(self, text: str) -> Coordinates | None:
        """Return coordinates for ``text``, or None when nothing matches.

        Raises:
            GeocodingError: If the provider request itself fails.
        """
        pass


class NominatimGeocodingService(GeocodingService):
    """OpenStreetMap Nominatim implementation."""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float = 15.0,
        cache: LRUCache[Coordinates] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._url = base_url or get_settings().nominatim_url
        self._timeout = timeout
        self._cache: LRUCache[Coordinates] = (
            cache if cache is not None else LRUCache(max_size=500, ttl_seconds=86400)
        )
        self._transport = transport
        self._pending: dict[str, asyncio.Task[Coordinates | None]] = {}

    def _get_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self._timeout,
            headers={"User-Agent": "WaypointPlanner/1.0"},
            transport=self._transport,
        )

    async def geocode(self, text: str) -> Coordinates | None:
        key = " ".join(text.lower().split())
        if not key:
            return None
        cached = self._cache.get(key)
        if cached is not None:
            return cached

        # Concurrent callers for the same key share one request
        pending = self._pending.get(key)
        if pending is None:
            pending = asyncio.ensure_future(self._lookup(key, text))
            self._pending[key] = pending
        return await asyncio.shield(pending)

    async def _lookup(self, key: str, text: str) -> Coordinates | None:
        try:
            return await self._fetch(key, text)
        finally:
            self._pending.pop(key, None)

    async def _fetch(self, key: str, text: str) -> Coordinates | None:
        try:
            async with self._get_client() as client:
                response = await client.get(
                    self._url, params={"q": text, "format": "json", "limit": 1}
                )
                response.raise_for_status()
                results = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise GeocodingError(f"Geocoding '{text}' failed: {e}") from e

        if not results:
            logger.info(f"[GEOCODE] No match for {text!r}")
            return None

        coords = Coordinates(lat=float(results[0]["lat"]), lng=float(results[0]["lon"]))
        self._cache.set(key, coords)
        return coords
