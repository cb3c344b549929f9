"""Unit tests for the Google Places search service."""

import httpx
import pytest

from waypoint_planner.exceptions import PlaceSearchError
from waypoint_planner.models import Coordinates
from waypoint_planner.services.place_search import GooglePlacesSearchService


def make_service(handler) -> GooglePlacesSearchService:
    return GooglePlacesSearchService(api_key="test-key", transport=httpx.MockTransport(handler))


class TestGooglePlacesSearchService:
    """Tests for GooglePlacesSearchService."""

    def test_missing_key_rejected(self, monkeypatch) -> None:
        monkeypatch.setenv("GOOGLE_MAPS_API_KEY", "")
        with pytest.raises(ValueError):
            GooglePlacesSearchService(api_key="")

    @pytest.mark.asyncio
    async def test_nearby_search_params(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"status": "OK", "results": []})

        await make_service(handler).nearby_search("coffee", Coordinates(lat=43.04, lng=-87.91))

        request = seen[0]
        assert request.url.path == "/maps/api/place/nearbysearch/json"
        params = dict(request.url.params)
        assert params == {
            "location": "43.04,-87.91",
            "rankby": "distance",
            "keyword": "coffee",
            "key": "test-key",
        }

    @pytest.mark.asyncio
    async def test_text_search_maps_results(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/maps/api/place/textsearch/json"
            assert request.url.params["query"] == "craft store"
            return httpx.Response(
                200,
                json={
                    "status": "OK",
                    "results": [
                        {
                            "name": "Michaels",
                            "types": ["store", "point_of_interest"],
                            "geometry": {"location": {"lat": 43.05, "lng": -87.95}},
                            "formatted_address": "100 Main St, Milwaukee",
                            "place_id": "abc",
                        },
                        {"name": "  ", "types": ["store"]},
                        {"name": "Hobby Lobby", "vicinity": "200 Oak Ave"},
                    ],
                },
            )

        places = await make_service(handler).text_search("craft store")

        assert [p.name for p in places] == ["Michaels", "Hobby Lobby"]
        michaels = places[0]
        assert michaels.category_tags == ["store", "point_of_interest"]
        assert michaels.location == Coordinates(lat=43.05, lng=-87.95)
        assert michaels.vicinity == "100 Main St, Milwaukee"
        assert michaels.place_id == "abc"
        assert places[1].location is None
        assert places[1].category_tags == []
        assert places[1].vicinity == "200 Oak Ave"

    @pytest.mark.asyncio
    async def test_zero_results_is_empty(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"status": "ZERO_RESULTS", "results": []})

        assert await make_service(handler).text_search("unicorn stable") == []

    @pytest.mark.asyncio
    async def test_error_status_raises(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                200, json={"status": "REQUEST_DENIED", "error_message": "The provided API key is invalid."}
            )

        with pytest.raises(PlaceSearchError, match="API key is invalid"):
            await make_service(handler).text_search("coffee")

    @pytest.mark.asyncio
    async def test_http_error_raises(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500)

        with pytest.raises(PlaceSearchError):
            await make_service(handler).nearby_search("coffee", Coordinates(lat=0, lng=0))
