"""Driving routes using OSRM (free, open-source routing).

The OSRM ``trip`` service solves the stop ordering for us: the origin is
pinned as the first coordinate and the destination as the last (or the
trip loops back to the origin when both are the same place), and OSRM
reorders everything in between for minimum travel time.

Origins and destinations arrive as free text and are geocoded first.
Stops without coordinates are geocoded by ``"<name>, <vicinity>"``.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Sequence

import httpx

from waypoint_planner.config import get_settings
from waypoint_planner.exceptions import GeocodingError, RouteProviderError
from waypoint_planner.models import Coordinates, PlaceCandidate, RoutedTrip
from waypoint_planner.services.geocoding import GeocodingService

logger = logging.getLogger(__name__)


class RoutingService(ABC):
    """Abstract base class for routing providers."""

    @abstractmethod
    async def route(
        self,
        origin: str,
        destination: str,
        stops: Sequence[PlaceCandidate],
        optimize: bool = True,
    ) -> RoutedTrip:
        """Route origin → stops → destination.

        With ``optimize`` the provider may reorder ``stops``; the returned
        ``RoutedTrip.ordered_stops`` carries the order it chose.

        Raises:
            RouteProviderError: If no route could be computed.
        """
        pass


class OSRMRoutingService(RoutingService):
    """OSRM-based driving router."""

    PROFILE = "driving"

    def __init__(
        self,
        geocoder: GeocodingService,
        base_url: str | None = None,
        timeout: float = 15.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._geocoder = geocoder
        self._base_url = (base_url or get_settings().osrm_url).rstrip("/")
        self._timeout = timeout
        self._transport = transport

    async def _resolve(self, text: str) -> Coordinates:
        try:
            coords = await self._geocoder.geocode(text)
        except GeocodingError as e:
            raise RouteProviderError(str(e)) from e
        if coords is None:
            raise RouteProviderError(f"Could not locate '{text}'")
        return coords

    async def _stop_coordinates(self, stop: PlaceCandidate) -> Coordinates:
        if stop.location is not None:
            return stop.location
        return await self._resolve(stop.share_label)

    async def route(
        self,
        origin: str,
        destination: str,
        stops: Sequence[PlaceCandidate],
        optimize: bool = True,
    ) -> RoutedTrip:
        stops = list(stops)
        round_trip = origin.strip().lower() == destination.strip().lower()

        points = [await self._resolve(origin)]
        for stop in stops:
            points.append(await self._stop_coordinates(stop))
        if not round_trip:
            points.append(await self._resolve(destination))
        elif not stops:
            points.append(points[0])

        coords = ";".join(f"{p.lng},{p.lat}" for p in points)

        if optimize and stops:
            url = f"{self._base_url}/trip/v1/{self.PROFILE}/{coords}"
            params = {"source": "first", "overview": "false", "steps": "false"}
            if round_trip:
                params["roundtrip"] = "true"
            else:
                params.update(roundtrip="false", destination="last")
            result_key = "trips"
        else:
            if round_trip and stops:
                coords += f";{points[0].lng},{points[0].lat}"
            url = f"{self._base_url}/route/v1/{self.PROFILE}/{coords}"
            params = {"overview": "false", "steps": "false"}
            result_key = "routes"

        logger.info(f"[ROUTE] OSRM {result_key[:-1]} request: {len(stops)} stops, round_trip={round_trip}")
        data = await self._request(url, params)

        if data.get("code") != "Ok" or not data.get(result_key):
            raise RouteProviderError(f"OSRM returned no route: {data.get('code')}")

        route_data = data[result_key][0]
        legs = route_data.get("legs", [])
        ordered_stops = stops
        if result_key == "trips":
            ordered_stops = self._ordered_stops(stops, data.get("waypoints", []))

        trip = RoutedTrip(
            ordered_stops=ordered_stops,
            leg_durations=[float(leg.get("duration", 0.0)) for leg in legs],
            leg_distances=[float(leg.get("distance", 0.0)) for leg in legs],
            raw=data,
        )
        logger.info(f"[ROUTE] OSRM success: {len(legs)} legs, duration={trip.total_duration:.0f}s")
        return trip

    async def _request(self, url: str, params: dict[str, str]) -> dict[str, Any]:
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout, transport=self._transport
            ) as client:
                response = await client.get(url, params=params)
                # OSRM reports NoRoute/NoTrips as 400 with a JSON body
                if response.status_code >= 500:
                    response.raise_for_status()
                return response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise RouteProviderError(f"OSRM request failed: {e}") from e

    @staticmethod
    def _ordered_stops(
        stops: list[PlaceCandidate], waypoints: list[dict[str, Any]]
    ) -> list[PlaceCandidate]:
        """Sort stops by the trip position OSRM assigned them.

        ``waypoints`` follows input order (origin, stops..., destination);
        each entry's ``waypoint_index`` is its position in the trip.
        """
        if len(waypoints) < len(stops) + 1:
            return stops
        positions = [waypoints[i + 1].get("waypoint_index", i + 1) for i in range(len(stops))]
        return [stops[i] for i in sorted(range(len(stops)), key=lambda i: positions[i])]
