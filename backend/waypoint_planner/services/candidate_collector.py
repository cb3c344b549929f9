"""Candidate collection: one filtered short-list per waypoint category.

Every category is searched concurrently. A category ends up with:
- the first N filtered places, when the filter keeps anything;
- the first N raw places, when the filter fails or keeps nothing;
- nothing, when the search itself finds nothing or fails.

An empty short-list is not an error here; the route search rejects it.
"""

import asyncio
import logging
from typing import Sequence

from waypoint_planner.exceptions import FilterError, PlaceSearchError
from waypoint_planner.models import (
    Coordinates,
    PlaceCandidate,
    WaypointOptionSet,
    WaypointQuery,
)
from waypoint_planner.services.place_search import PlaceSearchService
from waypoint_planner.services.relevance_filter import RelevanceFilter

logger = logging.getLogger(__name__)


class CandidateCollector:
    """Builds a ``WaypointOptionSet`` for each non-empty category."""

    def __init__(
        self,
        place_search: PlaceSearchService,
        relevance_filter: RelevanceFilter,
        max_raw_results: int = 15,
        max_options: int = 5,
    ) -> None:
        self._place_search = place_search
        self._filter = relevance_filter
        self._max_raw = max_raw_results
        self._max_options = max_options

    async def collect(
        self,
        categories: Sequence[WaypointQuery],
        bias_location: Coordinates | None = None,
    ) -> list[WaypointOptionSet]:
        active = [q for q in categories if q.text]
        if len(active) < len(categories):
            logger.info(f"[COLLECT] Skipping {len(categories) - len(active)} empty field(s)")
        return list(
            await asyncio.gather(*(self._collect_one(q, bias_location) for q in active))
        )

    async def _search(
        self, query: WaypointQuery, bias_location: Coordinates | None
    ) -> list[PlaceCandidate]:
        if bias_location is not None:
            return await self._place_search.nearby_search(query.text, bias_location)
        return await self._place_search.text_search(query.text)

    async def _collect_one(
        self, query: WaypointQuery, bias_location: Coordinates | None
    ) -> WaypointOptionSet:
        try:
            raw = (await self._search(query, bias_location))[: self._max_raw]
        except PlaceSearchError as e:
            logger.warning(f"[COLLECT] Search failed for '{query.text}': {e}")
            return WaypointOptionSet(query=query, options=[])

        if not raw:
            logger.info(f"[COLLECT] No places found for '{query.text}'")
            return WaypointOptionSet(query=query, options=[])

        try:
            filtered = await self._filter.filter(query.text, raw)
        except FilterError as e:
            logger.warning(f"[COLLECT] Filter unavailable for '{query.text}', using raw results: {e}")
            filtered = []

        if not filtered:
            filtered = raw
        options = filtered[: self._max_options]
        logger.info(f"[COLLECT] '{query.text}': {len(options)} option(s) from {len(raw)} result(s)")
        return WaypointOptionSet(query=query, options=options)
