"""Unit tests for the route planner orchestration."""

from typing import Sequence

import pytest

from waypoint_planner.exceptions import (
    GeocodingError,
    NoCandidatesError,
    RouteProviderError,
    UserInputError,
)
from waypoint_planner.models import Coordinates, PlaceCandidate, RoutedTrip, WaypointQuery
from waypoint_planner.services.candidate_collector import CandidateCollector
from waypoint_planner.services.geocoding import GeocodingService
from waypoint_planner.services.place_search import PlaceSearchService
from waypoint_planner.services.planner import RoutePlanner, to_waypoint_queries
from waypoint_planner.services.relevance_filter import RelevanceFilter
from waypoint_planner.services.route_search import RouteCombinationSearch
from waypoint_planner.services.routing import RoutingService

START = Coordinates(lat=43.04, lng=-87.91)


class FakeGeocoder(GeocodingService):
    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.calls: list[str] = []

    async def geocode(self, text: str) -> Coordinates | None:
        self.calls.append(text)
        if self.fail:
            raise GeocodingError("timeout")
        return START


class FakePlaceSearch(PlaceSearchService):
    def __init__(self, results: dict[str, list[PlaceCandidate]]) -> None:
        self.results = results
        self.calls: list[tuple[str, str]] = []

    async def text_search(self, query: str) -> list[PlaceCandidate]:
        self.calls.append(("text", query))
        return list(self.results.get(query, []))

    async def nearby_search(self, keyword: str, location: Coordinates) -> list[PlaceCandidate]:
        self.calls.append(("nearby", keyword))
        return list(self.results.get(keyword, []))


class KeepAllFilter(RelevanceFilter):
    async def filter_indices(self, query: str, places: Sequence[PlaceCandidate]) -> list[int]:
        return list(range(len(places)))


class FakeRouting(RoutingService):
    def __init__(self, durations: dict[str, float]) -> None:
        self.durations = durations
        self.calls: list[tuple[str, str, tuple[str, ...]]] = []

    async def route(self, origin: str, destination: str, stops: Sequence[PlaceCandidate], optimize: bool = True) -> RoutedTrip:
        self.calls.append((origin, destination, tuple(s.name for s in stops)))
        total = sum(self.durations.get(s.name, 0) for s in stops)
        if total <= 0:
            raise RouteProviderError("NoRoute")
        return RoutedTrip(ordered_stops=list(stops), leg_durations=[total])


def make_planner(
    results: dict[str, list[PlaceCandidate]],
    durations: dict[str, float],
    geocoder: FakeGeocoder | None = None,
) -> tuple[RoutePlanner, FakePlaceSearch, FakeRouting, FakeGeocoder]:
    geocoder = geocoder or FakeGeocoder()
    search = FakePlaceSearch(results)
    routing = FakeRouting(durations)
    planner = RoutePlanner(
        geocoder,
        CandidateCollector(search, KeepAllFilter()),
        RouteCombinationSearch(routing),
    )
    return planner, search, routing, geocoder


class TestToWaypointQueries:
    def test_strings_get_field_ids(self) -> None:
        queries = to_waypoint_queries(["coffee", "bank"])
        assert [(q.field_id, q.raw_text) for q in queries] == [("field1", "coffee"), ("field2", "bank")]

    def test_queries_pass_through(self) -> None:
        q = WaypointQuery(field_id="custom", raw_text="gas")
        assert to_waypoint_queries([q]) == [q]


class TestRoutePlanner:
    """Tests for RoutePlanner.plan."""

    @pytest.mark.asyncio
    async def test_plans_fastest_route(self) -> None:
        planner, search, routing, _ = make_planner(
            {
                "coffee": [PlaceCandidate(name="Slow Cafe"), PlaceCandidate(name="Fast Cafe", vicinity="1 Elm")],
                "bank": [PlaceCandidate(name="Bank")],
            },
            {"Slow Cafe": 1200, "Fast Cafe": 300, "Bank": 600},
        )

        planned = await planner.plan("Milwaukee", "Chicago", ["coffee", "bank"])

        assert search.calls == [("nearby", "coffee"), ("nearby", "bank")]
        assert len(routing.calls) == 2
        assert planned.best.total_duration_seconds == 900
        assert planned.summary.summary_minutes == 15
        assert planned.summary.ordered_stop_lines == ["1. Fast Cafe (1 Elm)", "2. Bank"]
        assert [len(s.options) for s in planned.option_sets] == [2, 1]

    @pytest.mark.asyncio
    async def test_blank_categories_ignored(self) -> None:
        planner, search, _, _ = make_planner({"coffee": [PlaceCandidate(name="Cafe")]}, {"Cafe": 60})

        planned = await planner.plan("A", "B", ["", "coffee", "   "])

        assert [s.query.text for s in planned.option_sets] == ["coffee"]
        assert search.calls == [("nearby", "coffee")]

    @pytest.mark.asyncio
    async def test_no_categories_rejected_before_any_call(self) -> None:
        planner, search, routing, geocoder = make_planner({}, {})

        with pytest.raises(UserInputError):
            await planner.plan("A", "B", ["", " "])

        assert geocoder.calls == []
        assert search.calls == []
        assert routing.calls == []

    @pytest.mark.asyncio
    async def test_missing_end_rejected_before_any_call(self) -> None:
        planner, search, _, geocoder = make_planner({}, {})

        with pytest.raises(UserInputError, match="ending location"):
            await planner.plan("A", "", ["coffee"])

        assert geocoder.calls == []
        assert search.calls == []

    @pytest.mark.asyncio
    async def test_empty_category_names_it(self) -> None:
        planner, _, routing, _ = make_planner({"coffee": [PlaceCandidate(name="Cafe")]}, {"Cafe": 60})

        with pytest.raises(NoCandidatesError, match="unicorn stable"):
            await planner.plan("A", "B", ["coffee", "unicorn stable"])

        assert routing.calls == []

    @pytest.mark.asyncio
    async def test_geocode_failure_falls_back_to_text_search(self) -> None:
        planner, search, _, _ = make_planner(
            {"coffee": [PlaceCandidate(name="Cafe")]}, {"Cafe": 60}, FakeGeocoder(fail=True)
        )

        await planner.plan("A", "B", ["coffee"])

        assert search.calls == [("text", "coffee")]

    @pytest.mark.asyncio
    async def test_round_trip(self) -> None:
        planner, _, routing, _ = make_planner({"coffee": [PlaceCandidate(name="Cafe")]}, {"Cafe": 60})

        planned = await planner.plan("Home", "", ["coffee"], same_start_end=True)

        assert routing.calls[0][:2] == ("Home", "Home")
        assert "&origin=Home&destination=Home" in planned.summary.share_url
