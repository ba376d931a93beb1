"""Logistics resolver - distance and travel time between two points.

Providers form an ordered chain of strategies. Each one is tried in turn
and any failure moves on to the next; a great-circle estimate closes the
chain and cannot fail. Only malformed coordinates are reported to the
caller.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Sequence

from ..domain.errors import InvalidCoordinatesError, RouteProviderUnavailableError
from ..domain.models import STATIC_ROUTE, Coordinates, Route
from ..ports.routing import RouteProviderPort
from ..adapters.routing.haversine_adapter import HaversineRouteProvider


def coerce_coordinates(value: Any) -> Coordinates:
    """Validate a (longitude, latitude) pair and return Coordinates.

    Raises:
        InvalidCoordinatesError: Unless ``value`` holds exactly two finite numbers.
    """
    if isinstance(value, Coordinates):
        pair: Any = value.as_pair()
    else:
        pair = value

    if isinstance(pair, (str, bytes)) or not isinstance(pair, Sequence) or len(pair) != 2:
        raise InvalidCoordinatesError(
            f"Coordinates must be a [longitude, latitude] pair, got {value!r}",
            value=value,
        )
    try:
        lon, lat = float(pair[0]), float(pair[1])
    except (TypeError, ValueError) as e:
        raise InvalidCoordinatesError(
            f"Coordinates must be numeric, got {value!r}", cause=e, value=value
        )
    if not (math.isfinite(lon) and math.isfinite(lat)):
        raise InvalidCoordinatesError(
            f"Coordinates must be finite, got {value!r}", value=value
        )
    return Coordinates(longitude=lon, latitude=lat)


@dataclass
class LogisticsResolver:
    """Resolves a route leg through a chain of providers.

    Attributes:
        providers: Providers tried in order (e.g. OSRM)
        fallback: Terminal provider used when every other one failed
    """

    providers: Sequence[RouteProviderPort] = field(default_factory=tuple)
    fallback: HaversineRouteProvider = field(default_factory=HaversineRouteProvider)

    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    def resolve(self, origin: Any, destination: Any) -> Route:
        """Compute distance and travel time between two points.

        Args:
            origin: (longitude, latitude) pair or Coordinates.
            destination: (longitude, latitude) pair or Coordinates.

        Returns:
            Route from the first provider that answered. Identical
            points give a zero STATIC route without calling any provider.

        Raises:
            InvalidCoordinatesError: If either point is malformed.
        """
        start = coerce_coordinates(origin)
        end = coerce_coordinates(destination)

        if start == end:
            return STATIC_ROUTE

        for provider in self.providers:
            name = getattr(provider, "name", type(provider).__name__)
            try:
                return provider.route(start, end)
            except RouteProviderUnavailableError as e:
                self._logger.warning(
                    "Route provider unavailable, trying next",
                    extra={"provider": name, "error": str(e)},
                )
            except Exception as e:
                self._logger.warning(
                    "Route provider failed unexpectedly, trying next",
                    extra={"provider": name, "error": str(e)},
                )

        route = self.fallback.route(start, end)
        self._logger.debug(
            "Route resolved by fallback",
            extra={"distance_km": route.distance_km, "minutes": route.travel_time_min},
        )
        return route
