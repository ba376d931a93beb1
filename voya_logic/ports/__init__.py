"""Ports layer - Abstract interfaces (Protocols) for the application.

Ports define the contracts between the application core and external
collaborators. They enable dependency injection and make the system testable.

This module follows the Hexagonal Architecture pattern:
- Input ports: How the application is driven (services)
- Output ports: How the application drives external systems (adapters)
"""

from .audit import RunLogPort
from .cache import RouteCacheStorePort
from .catalog import PlaceCatalogPort, SettingsPort
from .itinerary import ItineraryRepositoryPort
from .routing import RouteProviderPort

__all__ = [
    # Routing
    "RouteProviderPort",
    # Cache
    "RouteCacheStorePort",
    # Catalog
    "PlaceCatalogPort",
    "SettingsPort",
    # Audit
    "RunLogPort",
    # Itineraries
    "ItineraryRepositoryPort",
]
