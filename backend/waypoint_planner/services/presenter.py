"""Formatting of the winning route for display and sharing."""

from urllib.parse import quote

from waypoint_planner.models import RouteResult, RouteSummary

GOOGLE_MAPS_DIR_URL = "https://www.google.com/maps/dir/?api=1"

# Characters encodeURIComponent leaves alone besides alphanumerics
_URI_COMPONENT_SAFE = "-_.!~*'()"


def encode_component(value: str) -> str:
    return quote(value, safe=_URI_COMPONENT_SAFE)


def build_share_url(origin: str, destination: str, stop_labels: list[str]) -> str:
    """Build a Google Maps directions URL with pipe-separated waypoints.

    Google Maps URL format:
    https://www.google.com/maps/dir/?api=1&origin=...&destination=...&waypoints=a|b|c
    """
    url = (
        f"{GOOGLE_MAPS_DIR_URL}&origin={encode_component(origin)}"
        f"&destination={encode_component(destination)}"
    )
    if stop_labels:
        url += "&waypoints=" + "|".join(encode_component(label) for label in stop_labels)
    return url


def format_stop_line(position: int, name: str, vicinity: str | None) -> str:
    if vicinity:
        return f"{position}. {name} ({vicinity})"
    return f"{position}. {name}"


def display_minutes(seconds: float) -> int:
    """Nearest whole minute, halves rounded up."""
    return int(seconds / 60 + 0.5)


def present(best: RouteResult, start: str, end: str, same_start_end: bool) -> RouteSummary:
    start = start.strip()
    destination = start if same_start_end else end.strip()
    stops = best.ordered_stops
    return RouteSummary(
        summary_minutes=display_minutes(best.total_duration_seconds),
        ordered_stop_lines=[
            format_stop_line(i, stop.name, stop.vicinity) for i, stop in enumerate(stops, 1)
        ],
        share_url=build_share_url(start, destination, [stop.share_label for stop in stops]),
    )
