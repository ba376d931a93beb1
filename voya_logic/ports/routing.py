"""Routing port - Abstraction for point-to-point route providers.

Implementations:
- adapters/routing/osrm_adapter.py (OsrmRouteProvider) - HTTP routing engine
- adapters/routing/haversine_adapter.py (HaversineRouteProvider) - Analytic fallback

Providers are tried in order by the LogisticsResolver; a provider signals
failure by raising RouteProviderUnavailableError.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from ..domain.models import Coordinates, Route


class RouteProviderPort(Protocol):
    """Port for computing a single route leg."""

    name: str

    def route(self, origin: Coordinates, destination: Coordinates) -> Route:
        """Compute distance and travel time between two points.

        Args:
            origin: Validated departure coordinates.
            destination: Validated arrival coordinates.

        Returns:
            Route with distance (km), travel time (min) and provider.

        Raises:
            RouteProviderUnavailableError: If the provider cannot answer.
        """
        ...
