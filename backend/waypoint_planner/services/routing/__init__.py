"""Routing providers."""

from .service import OSRMRoutingService, RoutingService

__all__ = ["OSRMRoutingService", "RoutingService"]
