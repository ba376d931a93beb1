"""Great-circle route provider.

Terminal fallback of the logistics resolver: straight-line distance from
geopy's great-circle formula combined with a constant travel speed.
It performs no I/O and never fails for validated coordinates.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from geopy.distance import great_circle

from ...config import RoutingConfig, get_config
from ...domain.models import Coordinates, Route, RouteProvider
from ...rounding import round2, round_half_up


@dataclass
class HaversineRouteProvider:
    """Constant-speed great-circle estimate.

    Implements RouteProviderPort.

    Attributes:
        config: Routing configuration (fallback speed in km/h)
    """

    config: RoutingConfig = field(default_factory=lambda: get_config().routing)
    name: str = "HAVERSINE"

    def route(self, origin: Coordinates, destination: Coordinates) -> Route:
        """Estimate a route without any network call.

        Travel time is 0 for a zero distance, otherwise at least 1 minute.
        """
        # geopy expects (latitude, longitude)
        distance_km = round2(
            great_circle(
                (origin.latitude, origin.longitude),
                (destination.latitude, destination.longitude),
            ).km
        )
        speed = self.config.fallback_speed_kmh or 30.0

        if distance_km == 0:
            travel_time_min = 0
        else:
            travel_time_min = max(1, round_half_up(distance_km / speed * 60))

        return Route(
            distance_km=distance_km,
            travel_time_min=travel_time_min,
            provider=RouteProvider.HAVERSINE,
        )
