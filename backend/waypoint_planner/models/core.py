"""Core data models for the waypoint route planner.

Pydantic models for coordinates, waypoint categories, candidate places,
and the routes computed from them. Every instance lives for a single
planning run; nothing here is persisted.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class Coordinates(BaseModel):
    """Geographic coordinates with validation.

    Latitude must be between -90 and 90 degrees.
    Longitude must be between -180 and 180 degrees.
    """

    lat: float = Field(..., ge=-90, le=90, description="Latitude in degrees")
    lng: float = Field(..., ge=-180, le=180, description="Longitude in degrees")


class WaypointQuery(BaseModel):
    """A user-entered waypoint category such as "coffee" or "grocery"."""

    model_config = ConfigDict(frozen=True)

    field_id: str = Field(..., description="Form field the text came from")
    raw_text: str = Field(..., description="Free-text category as typed")

    @property
    def text(self) -> str:
        return self.raw_text.strip()


class PlaceCandidate(BaseModel):
    """A named venue returned by the place-search provider.

    ``location`` may be missing for text-only results; the routing
    service geocodes those by name and vicinity.
    """

    name: str = Field(..., min_length=1, description="Display name of the place")
    category_tags: list[str] = Field(
        default_factory=list, description="Provider category tags, e.g. ['cafe', 'food']"
    )
    location: Optional[Coordinates] = Field(None, description="Geographic location")
    vicinity: Optional[str] = Field(None, description="Short address or vicinity")
    place_id: Optional[str] = Field(None, description="Provider place identifier")

    @property
    def share_label(self) -> str:
        """``"<name>, <vicinity>"`` as used in share links."""
        if self.vicinity:
            return f"{self.name}, {self.vicinity}"
        return self.name


class WaypointOptionSet(BaseModel):
    """Filtered short-list of places for one waypoint category.

    An empty ``options`` list means the category cannot be satisfied and
    the route search must abort naming ``query``.
    """

    query: WaypointQuery
    options: list[PlaceCandidate] = Field(
        default_factory=list, description="Options, best first"
    )


# One place drawn from each option set, in category order.
RouteCombination = tuple[PlaceCandidate, ...]


class RoutedTrip(BaseModel):
    """What the routing provider returns for a single request."""

    ordered_stops: list[PlaceCandidate] = Field(
        ..., description="Intermediate stops in provider-optimized order"
    )
    leg_durations: list[float] = Field(
        default_factory=list, description="Duration of each leg in seconds"
    )
    leg_distances: list[float] = Field(
        default_factory=list, description="Distance of each leg in meters"
    )
    raw: dict[str, Any] = Field(default_factory=dict, description="Raw provider payload")

    @property
    def total_duration(self) -> float:
        return sum(self.leg_durations)


class RouteResult(BaseModel):
    """A successfully routed combination."""

    combination: RouteCombination
    ordered_stops: list[PlaceCandidate]
    total_duration_seconds: float = Field(..., ge=0)
    raw_route_response: dict[str, Any] = Field(default_factory=dict)


# The fastest RouteResult of a run, or None when nothing routed.
BestRoute = Optional[RouteResult]


class RouteSummary(BaseModel):
    """Display-ready rendition of the winning route."""

    summary_minutes: int = Field(..., ge=0)
    ordered_stop_lines: list[str] = Field(default_factory=list)
    share_url: str


class PlannedRoute(BaseModel):
    """Everything a planning run produces."""

    best: RouteResult
    summary: RouteSummary
    option_sets: list[WaypointOptionSet] = Field(default_factory=list)
