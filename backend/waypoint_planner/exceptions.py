"""Planner error taxonomy.

Recoverable errors (filter, single-route and place-search failures) are
absorbed by the component that can work around them. Only run-ending
errors reach the planner and the API layer.
"""


class PlannerError(Exception):
    """Base class for every planner error."""

    user_message = "Something went wrong. Please try again."


class UserInputError(PlannerError):
    """Missing or inconsistent form input. Raised before any provider call."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.user_message = message


class NoCandidatesError(PlannerError):
    """A waypoint category produced no usable places."""

    def __init__(self, query: str) -> None:
        super().__init__(f"No places found for '{query}'")
        self.query = query
        self.user_message = f"No places found for '{query}'. Try a different search term."


class NoRouteFoundError(PlannerError):
    """None of the evaluated combinations could be routed."""

    user_message = "Could not find a driving route through these stops."


class FilterError(PlannerError):
    """The relevance filter could not produce an answer."""


class FilterTransportError(FilterError):
    """The LLM (or remote filter endpoint) call itself failed."""


class RouteProviderError(PlannerError):
    """A single routing request failed."""


class PlaceSearchError(PlannerError):
    """The place-search provider failed for one query."""


class GeocodingError(PlannerError):
    """A location string could not be resolved to coordinates."""
