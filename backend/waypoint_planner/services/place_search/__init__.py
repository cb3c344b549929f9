"""Place search providers."""

from .service import GooglePlacesSearchService, PlaceSearchService

__all__ = ["GooglePlacesSearchService", "PlaceSearchService"]
