"""Geocoding providers."""

from .service import GeocodingService, NominatimGeocodingService

__all__ = ["GeocodingService", "NominatimGeocodingService"]
