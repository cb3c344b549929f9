"""Unit tests for route presentation."""

from waypoint_planner.models import PlaceCandidate, RouteResult
from waypoint_planner.services.presenter import (
    build_share_url,
    encode_component,
    format_stop_line,
    present,
)


def result(stops: list[PlaceCandidate], seconds: float) -> RouteResult:
    return RouteResult(
        combination=tuple(stops), ordered_stops=stops, total_duration_seconds=seconds
    )


class TestEncodeComponent:
    """Tests for URI component encoding."""

    def test_reserved_characters_escaped(self) -> None:
        assert encode_component("Milwaukee, WI") == "Milwaukee%2C%20WI"
        assert encode_component("A&B/C?D=E|F") == "A%26B%2FC%3FD%3DE%7CF"

    def test_unreserved_marks_kept(self) -> None:
        assert encode_component("Denny's (24h) *new* ~x!") == "Denny's%20(24h)%20*new*%20~x!"

    def test_non_ascii_utf8(self) -> None:
        assert encode_component("Café") == "Caf%C3%A9"


class TestBuildShareUrl:
    """Tests for the Google Maps directions link."""

    def test_with_waypoints(self) -> None:
        url = build_share_url(
            "Milwaukee, WI", "Chicago, IL", ["Starbucks, 123 Main St", "Michaels"]
        )
        assert url == (
            "https://www.google.com/maps/dir/?api=1"
            "&origin=Milwaukee%2C%20WI"
            "&destination=Chicago%2C%20IL"
            "&waypoints=Starbucks%2C%20123%20Main%20St|Michaels"
        )

    def test_without_waypoints(self) -> None:
        url = build_share_url("Home", "Work", [])
        assert url == "https://www.google.com/maps/dir/?api=1&origin=Home&destination=Work"
        assert "waypoints" not in url


class TestPresent:
    """Tests for present()."""

    def test_summary_lines_and_url(self) -> None:
        stops = [
            PlaceCandidate(name="Dunkin", vicinity="5 Elm St"),
            PlaceCandidate(name="Bank"),
        ]

        summary = present(result(stops, 1000), " Milwaukee ", "Chicago", False)

        assert summary.summary_minutes == 17
        assert summary.ordered_stop_lines == ["1. Dunkin (5 Elm St)", "2. Bank"]
        assert "&origin=Milwaukee&destination=Chicago" in summary.share_url
        assert summary.share_url.endswith("&waypoints=Dunkin%2C%205%20Elm%20St|Bank")

    def test_round_trip_destination_is_start(self) -> None:
        summary = present(result([PlaceCandidate(name="Cafe")], 900), "Home", "", True)

        assert summary.summary_minutes == 15
        assert "&origin=Home&destination=Home" in summary.share_url

    def test_minutes_round_to_nearest(self) -> None:
        stops = [PlaceCandidate(name="Cafe")]
        assert present(result(stops, 89), "A", "B", False).summary_minutes == 1
        assert present(result(stops, 29), "A", "B", False).summary_minutes == 0

    def test_half_minutes_round_up(self) -> None:
        stops = [PlaceCandidate(name="Cafe")]
        assert present(result(stops, 150), "A", "B", False).summary_minutes == 3
        assert present(result(stops, 90), "A", "B", False).summary_minutes == 2
        assert present(result(stops, 30), "A", "B", False).summary_minutes == 1

    def test_format_stop_line(self) -> None:
        assert format_stop_line(3, "Target", None) == "3. Target"
        assert format_stop_line(1, "Target", "Main St") == "1. Target (Main St)"
