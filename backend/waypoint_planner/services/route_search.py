"""Route combination search.

Picks one place per waypoint category, routes every such combination and
keeps the fastest. The product of the option lists grows as 5^k, so it
is generated lazily and cut at ``max_combinations`` before any routing
call is made; combinations past the cap are never built.

Routing calls run concurrently behind a semaphore. Their outcomes are
joined once, in enumeration order, and reduced by a single owner: the
strictly fastest route wins and ties go to the earlier combination, no
matter in which order the calls completed. A failed call is dropped from
the comparison and never retried.
"""

import asyncio
import itertools
import logging
from typing import Iterator, Sequence

from waypoint_planner.exceptions import (
    NoCandidatesError,
    NoRouteFoundError,
    RouteProviderError,
    UserInputError,
)
from waypoint_planner.models import RouteCombination, RouteResult, WaypointOptionSet
from waypoint_planner.services.routing import RoutingService

logger = logging.getLogger(__name__)


def iter_combinations(option_sets: Sequence[WaypointOptionSet]) -> Iterator[RouteCombination]:
    """Lazily yield one-place-per-category combinations.

    Deterministic: category order is preserved and the last category
    varies fastest. Each call starts a fresh iterator.
    """
    return itertools.product(*(s.options for s in option_sets))


def capped_combinations(
    option_sets: Sequence[WaypointOptionSet], limit: int
) -> list[RouteCombination]:
    """The first ``limit`` combinations in enumeration order."""
    return list(itertools.islice(iter_combinations(option_sets), limit))


def resolve_endpoints(start: str, end: str, same_start_end: bool) -> tuple[str, str]:
    """Validate and normalize the trip endpoints.

    Raises:
        UserInputError: Empty start, or empty end without ``same_start_end``.
    """
    start = (start or "").strip()
    end = (end or "").strip()
    if not start:
        raise UserInputError("Please enter a starting location.")
    if same_start_end:
        return start, start
    if not end:
        raise UserInputError(
            "Please enter an ending location or check 'Return to starting location'."
        )
    return start, end


class RouteCombinationSearch:
    """Finds the fastest combination of one place per category."""

    def __init__(
        self,
        routing: RoutingService,
        max_combinations: int = 10,
        max_concurrency: int = 10,
    ) -> None:
        self._routing = routing
        self._max_combinations = max_combinations
        self._max_concurrency = max_concurrency

    async def find_best(
        self,
        start: str,
        end: str,
        option_sets: Sequence[WaypointOptionSet],
        same_start_end: bool = False,
    ) -> RouteResult:
        """Route the capped combinations and return the fastest.

        Raises:
            UserInputError: Missing start/end.
            NoCandidatesError: A category has no options (no routing calls made).
            NoRouteFoundError: Every routing call failed.
        """
        start, end = resolve_endpoints(start, end, same_start_end)
        for option_set in option_sets:
            if not option_set.options:
                raise NoCandidatesError(option_set.query.text)

        combinations = capped_combinations(option_sets, self._max_combinations)
        logger.info(
            f"[ROUTE] Evaluating {len(combinations)} combination(s) "
            f"(cap {self._max_combinations})"
        )

        semaphore = asyncio.Semaphore(self._max_concurrency)
        results = await asyncio.gather(
            *(self._evaluate(start, end, combo, semaphore) for combo in combinations)
        )

        best: RouteResult | None = None
        for result in results:
            if result is None:
                continue
            if best is None or result.total_duration_seconds < best.total_duration_seconds:
                best = result

        if best is None:
            raise NoRouteFoundError(
                f"All {len(combinations)} routing request(s) failed"
            )
        logger.info(
            f"[ROUTE] Best: {best.total_duration_seconds:.0f}s via "
            f"{', '.join(p.name for p in best.ordered_stops)}"
        )
        return best

    async def _evaluate(
        self,
        start: str,
        end: str,
        combination: RouteCombination,
        semaphore: asyncio.Semaphore,
    ) -> RouteResult | None:
        async with semaphore:
            try:
                trip = await self._routing.route(start, end, combination, optimize=True)
            except RouteProviderError as e:
                logger.info(f"[ROUTE] Combination excluded: {e}")
                return None
        return RouteResult(
            combination=combination,
            ordered_stops=trip.ordered_stops,
            total_duration_seconds=trip.total_duration,
            raw_route_response=trip.raw,
        )
