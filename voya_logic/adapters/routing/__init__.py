"""Routing adapters - Implementations of the RouteProviderPort.

Available implementations:
- OsrmRouteProvider: HTTP calls to an OSRM routing engine
- HaversineRouteProvider: Great-circle estimate, never fails
"""

from .haversine_adapter import HaversineRouteProvider
from .osrm_adapter import OsrmRouteProvider

__all__ = ["OsrmRouteProvider", "HaversineRouteProvider"]
