"""Route planner: input validation → candidates → best route → summary."""

import logging
from typing import Sequence

from waypoint_planner.config import Settings, get_settings
from waypoint_planner.exceptions import GeocodingError, UserInputError
from waypoint_planner.models import Coordinates, PlannedRoute, WaypointQuery
from waypoint_planner.services.candidate_collector import CandidateCollector
from waypoint_planner.services.geocoding import GeocodingService, NominatimGeocodingService
from waypoint_planner.services.llm import create_llm_service
from waypoint_planner.services.place_search import GooglePlacesSearchService
from waypoint_planner.services.presenter import present
from waypoint_planner.services.relevance_filter import LLMRelevanceFilter
from waypoint_planner.services.route_search import RouteCombinationSearch, resolve_endpoints
from waypoint_planner.services.routing import OSRMRoutingService

logger = logging.getLogger(__name__)


def to_waypoint_queries(categories: Sequence[str | WaypointQuery]) -> list[WaypointQuery]:
    """Wrap raw strings as ``field1``, ``field2``, ... queries."""
    return [
        c if isinstance(c, WaypointQuery) else WaypointQuery(field_id=f"field{i}", raw_text=c)
        for i, c in enumerate(categories, 1)
    ]


class RoutePlanner:
    """Owns one planning run from form input to presented route."""

    def __init__(
        self,
        geocoder: GeocodingService,
        collector: CandidateCollector,
        route_search: RouteCombinationSearch,
    ) -> None:
        self._geocoder = geocoder
        self._collector = collector
        self._route_search = route_search

    async def _bias_location(self, start: str) -> Coordinates | None:
        try:
            return await self._geocoder.geocode(start)
        except GeocodingError as e:
            logger.info(f"[PLAN] Could not geocode start, using text search: {e}")
            return None

    async def plan(
        self,
        start: str,
        end: str,
        categories: Sequence[str | WaypointQuery],
        same_start_end: bool = False,
    ) -> PlannedRoute:
        """Plan the fastest route through one place per category.

        Raises:
            UserInputError: Invalid form input; no provider was called.
            NoCandidatesError: A category yielded no usable places.
            NoRouteFoundError: No combination could be routed.
        """
        start, end = resolve_endpoints(start, end, same_start_end)
        queries = [q for q in to_waypoint_queries(categories) if q.text]
        if not queries:
            raise UserInputError("Please enter at least one stop.")

        logger.info(f"[PLAN] {start!r} → {end!r} via {[q.text for q in queries]}")
        bias = await self._bias_location(start)
        option_sets = await self._collector.collect(queries, bias)
        best = await self._route_search.find_best(start, end, option_sets, same_start_end)
        summary = present(best, start, end, same_start_end)
        logger.info(f"[PLAN] Done: {summary.summary_minutes} min")
        return PlannedRoute(best=best, summary=summary, option_sets=option_sets)


def create_route_planner(settings: Settings | None = None) -> RoutePlanner:
    """Wire the planner to the configured providers."""
    settings = settings or get_settings()
    geocoder = NominatimGeocodingService(base_url=settings.nominatim_url)
    relevance_filter = LLMRelevanceFilter(
        create_llm_service(settings),
        prompt_style=settings.prompt_style,
        max_candidates=settings.max_filter_candidates,
    )
    collector = CandidateCollector(
        GooglePlacesSearchService(api_key=settings.google_maps_api_key),
        relevance_filter,
        max_raw_results=settings.max_filter_candidates,
        max_options=settings.max_options_per_category,
    )
    route_search = RouteCombinationSearch(
        OSRMRoutingService(geocoder, base_url=settings.osrm_url),
        max_combinations=settings.max_combinations,
        max_concurrency=settings.max_concurrent_routes,
    )
    return RoutePlanner(geocoder, collector, route_search)
