"""Waypoint planner services.

Service layer components:
- LLM: Groq (primary) + Gemini (fallback) text completion
- Relevance Filter: LLM-judged primary-purpose filtering of place results
- Place Search: Google Places nearby/text search
- Geocoding: OpenStreetMap Nominatim with in-process LRU cache
- Routing: OSRM trip service with stop-order optimization
- Candidate Collector, Route Search, Presenter, Planner: the planning pipeline
"""

from .llm import (
    GeminiLLMService,
    GroqLLMService,
    LLMService,
    create_llm_service,
)
from .relevance_filter import (
    LLMRelevanceFilter,
    RelevanceFilter,
    RemoteRelevanceFilter,
    parse_index_list,
)
from .place_search import GooglePlacesSearchService, PlaceSearchService
from .geocoding import GeocodingService, NominatimGeocodingService
from .routing import OSRMRoutingService, RoutingService
from .candidate_collector import CandidateCollector
from .route_search import RouteCombinationSearch, iter_combinations
from .presenter import build_share_url, present
from .planner import RoutePlanner, create_route_planner

__all__ = [
    # LLM
    "GeminiLLMService",
    "GroqLLMService",
    "LLMService",
    "create_llm_service",
    # Relevance filter
    "LLMRelevanceFilter",
    "RelevanceFilter",
    "RemoteRelevanceFilter",
    "parse_index_list",
    # Providers
    "GooglePlacesSearchService",
    "PlaceSearchService",
    "GeocodingService",
    "NominatimGeocodingService",
    "OSRMRoutingService",
    "RoutingService",
    # Pipeline
    "CandidateCollector",
    "RouteCombinationSearch",
    "iter_combinations",
    "build_share_url",
    "present",
    "RoutePlanner",
    "create_route_planner",
]
