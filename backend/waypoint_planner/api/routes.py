"""API routes for the waypoint route planner.

- GET  /health         liveness probe
- POST /filter-places  LLM relevance filter over a list of places (fails open)
- POST /route          full planning run: search, filter, route, present

The filter endpoint never blocks a caller on an LLM outage: when the
provider fails it answers with every index and an ``error`` message, so
the caller proceeds with unfiltered places.
"""

import logging
from typing import Optional

from fastapi import APIRouter
from pydantic import BaseModel, ConfigDict, Field

from waypoint_planner.config import get_settings
from waypoint_planner.exceptions import (
    NoCandidatesError,
    NoRouteFoundError,
    UserInputError,
)
from waypoint_planner.models import AppError, ErrorCode, PlaceCandidate
from waypoint_planner.services import (
    LLMRelevanceFilter,
    RelevanceFilter,
    RoutePlanner,
    create_llm_service,
    create_route_planner,
)

logger = logging.getLogger(__name__)

router = APIRouter()


# Request/Response models
class FilterPlace(BaseModel):
    """A place as sent by the client."""
    name: str = Field(..., min_length=1)
    types: Optional[list[str]] = None
    vicinity: Optional[str] = None


class FilterPlacesRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_query: str = Field("", alias="userQuery")
    places: Optional[list[FilterPlace]] = None


class FilterPlacesResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    filtered_indices: list[int] = Field(default_factory=list, alias="filteredIndices")
    error: Optional[str] = None


class RouteRequest(BaseModel):
    """Request model for planning a route."""
    model_config = ConfigDict(populate_by_name=True)

    starting_location: str = Field("", alias="startingLocation")
    ending_location: str = Field("", alias="endingLocation")
    same_start_end: bool = Field(False, alias="sameStartEnd")
    waypoints: list[str] = Field(default_factory=list)


class RouteView(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    summary_minutes: int = Field(..., alias="summaryMinutes")
    ordered_stops: list[str] = Field(default_factory=list, alias="orderedStops")
    share_url: str = Field(..., alias="shareUrl")
    total_duration_seconds: float = Field(..., alias="totalDurationSeconds")


class RouteResponse(BaseModel):
    """Response model for route planning."""
    success: bool
    route: Optional[RouteView] = None
    error: Optional[AppError] = None


# Service instances
_relevance_filter: RelevanceFilter | None = None
_route_planner: RoutePlanner | None = None


def get_relevance_filter() -> RelevanceFilter:
    global _relevance_filter
    if _relevance_filter is None:
        settings = get_settings()
        _relevance_filter = LLMRelevanceFilter(
            create_llm_service(settings),
            prompt_style=settings.prompt_style,
            max_candidates=settings.max_filter_candidates,
        )
    return _relevance_filter


def get_route_planner() -> RoutePlanner:
    global _route_planner
    if _route_planner is None:
        _route_planner = create_route_planner()
    return _route_planner


@router.get("/health")
async def health_check() -> dict:
    """Health check endpoint."""
    return {"status": "ok"}


@router.post(
    "/filter-places",
    response_model=FilterPlacesResponse,
    response_model_exclude_none=True,
)
async def filter_places(request: FilterPlacesRequest) -> FilterPlacesResponse:
    """Return the indices of places whose primary purpose matches the query."""
    places = request.places or []
    if not places:
        return FilterPlacesResponse(filtered_indices=[])

    candidates = [
        PlaceCandidate(name=p.name, category_tags=p.types or [], vicinity=p.vicinity)
        for p in places
    ]
    try:
        indices = await get_relevance_filter().filter_indices(request.user_query, candidates)
    except Exception as e:
        logger.error(f"[FILTER] Error: {e}")
        return FilterPlacesResponse(filtered_indices=list(range(len(places))), error=str(e))

    logger.info(f"[FILTER] Filtered to indices: {indices}")
    return FilterPlacesResponse(filtered_indices=indices)


@router.post("/route", response_model=RouteResponse, response_model_exclude_none=True)
async def plan_route(request: RouteRequest) -> RouteResponse:
    """Plan the fastest route through one place per waypoint category."""
    try:
        planned = await get_route_planner().plan(
            request.starting_location,
            request.ending_location,
            request.waypoints,
            same_start_end=request.same_start_end,
        )
    except UserInputError as e:
        return RouteResponse(
            success=False,
            error=AppError(
                code=ErrorCode.INVALID_INPUT, message=str(e), user_message=e.user_message
            ),
        )
    except NoCandidatesError as e:
        return RouteResponse(
            success=False,
            error=AppError(
                code=ErrorCode.NO_CANDIDATES, message=str(e), user_message=e.user_message
            ),
        )
    except NoRouteFoundError as e:
        return RouteResponse(
            success=False,
            error=AppError(code=ErrorCode.NO_ROUTE, message=str(e), user_message=e.user_message),
        )
    except Exception as e:
        logger.exception("Unhandled error")
        return RouteResponse(
            success=False,
            error=AppError(
                code=ErrorCode.API_ERROR,
                message=str(e),
                user_message="Something went wrong. Please try again later.",
            ),
        )

    return RouteResponse(
        success=True,
        route=RouteView(
            summary_minutes=planned.summary.summary_minutes,
            ordered_stops=planned.summary.ordered_stop_lines,
            share_url=planned.summary.share_url,
            total_duration_seconds=planned.best.total_duration_seconds,
        ),
    )
