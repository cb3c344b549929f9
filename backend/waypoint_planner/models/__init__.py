"""Data models for the waypoint route planner."""

from .core import (
    BestRoute,
    Coordinates,
    PlaceCandidate,
    PlannedRoute,
    RouteCombination,
    RoutedTrip,
    RouteResult,
    RouteSummary,
    WaypointOptionSet,
    WaypointQuery,
)
from .errors import AppError, ErrorCode

__all__ = [
    "AppError",
    "BestRoute",
    "Coordinates",
    "ErrorCode",
    "PlaceCandidate",
    "PlannedRoute",
    "RouteCombination",
    "RoutedTrip",
    "RouteResult",
    "RouteSummary",
    "WaypointOptionSet",
    "WaypointQuery",
]
