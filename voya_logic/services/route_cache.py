"""Read-through route cache.

Routes are memoised per directional coordinate pair with a time-to-live.
Expired entries stay in storage but are never returned; the next write
for the same pair replaces them.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Optional

from ..domain.models import Coordinates, Route, RouteCacheEntry
from ..ports.cache import RouteCacheStorePort
from ..ports.catalog import SettingsPort
from ..adapters.settings.memory_settings import ROUTE_CACHE_TTL_HOURS
from .logistics import LogisticsResolver, coerce_coordinates

DEFAULT_TTL_HOURS = 168.0
MIN_TTL_HOURS = 1.0


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def coordinates_to_hash(coordinates: Any) -> str:
    """Fixed-point key of a point: ``"{lon:.6f},{lat:.6f}"``."""
    point = coordinates if isinstance(coordinates, Coordinates) else coerce_coordinates(coordinates)
    return f"{point.longitude:.6f},{point.latitude:.6f}"


@dataclass
class RouteCache:
    """Route memoisation on top of a LogisticsResolver.

    Attributes:
        store: Entry storage
        resolver: Used on cache misses
        settings: Source of the ``route_cache_ttl_hours`` setting
        default_ttl_hours: TTL when neither caller nor settings give one
        now: Clock, injectable for tests
    """

    store: RouteCacheStorePort
    resolver: LogisticsResolver = field(default_factory=LogisticsResolver)
    settings: Optional[SettingsPort] = None
    default_ttl_hours: float = DEFAULT_TTL_HOURS
    now: Callable[[], datetime] = _utcnow

    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    def get(self, origin: Any, destination: Any) -> Optional[RouteCacheEntry]:
        """Return the unexpired entry for origin -> destination, if any."""
        entry = self.store.find(coordinates_to_hash(origin), coordinates_to_hash(destination))
        if entry is None or not entry.is_fresh(self.now()):
            return None
        return entry

    def put(
        self,
        origin: Any,
        destination: Any,
        route: Route,
        ttl_hours: Optional[float] = None,
    ) -> RouteCacheEntry:
        """Upsert the route for origin -> destination.

        Args:
            origin: Departure coordinates.
            destination: Arrival coordinates.
            route: The resolved route.
            ttl_hours: Lifetime; defaults to the configured TTL, at least 1 hour.

        Returns:
            The stored entry.
        """
        effective_ttl = max(MIN_TTL_HOURS, self._ttl_hours(ttl_hours))
        computed_at = self.now()
        entry = RouteCacheEntry(
            origin_hash=coordinates_to_hash(origin),
            destination_hash=coordinates_to_hash(destination),
            distance_km=route.distance_km,
            travel_time_min=route.travel_time_min,
            provider=route.provider,
            computed_at=computed_at,
            expires_at=computed_at + timedelta(hours=effective_ttl),
        )
        self.store.upsert(entry)
        return entry

    def resolve_with_cache(self, origin: Any, destination: Any) -> Route:
        """Return a cached route, or resolve and cache a fresh one.

        The cache write is best-effort: a failing store is logged and the
        freshly resolved route is still returned.

        Raises:
            InvalidCoordinatesError: If either point is malformed.
        """
        start = coerce_coordinates(origin)
        end = coerce_coordinates(destination)

        cached = self.get(start, end)
        if cached is not None:
            self._logger.debug("Route cache hit", extra={"key": cached.key})
            return Route(
                distance_km=cached.distance_km,
                travel_time_min=cached.travel_time_min,
                provider=cached.provider,
                cached=True,
            )

        route = self.resolver.resolve(start, end)
        try:
            self.put(start, end, route)
        except Exception as e:
            self._logger.warning(
                "Route cache write failed",
                extra={"origin": start.as_pair(), "destination": end.as_pair(), "error": str(e)},
            )
        return replace(route, cached=False)

    def _ttl_hours(self, ttl_hours: Optional[float]) -> float:
        if ttl_hours is not None:
            return float(ttl_hours)
        if self.settings is not None:
            try:
                value = self.settings.get(ROUTE_CACHE_TTL_HOURS)
                if value is not None:
                    return float(value)
            except (TypeError, ValueError) as e:
                self._logger.warning(
                    "Invalid route cache TTL setting, using default",
                    extra={"error": str(e)},
                )
        return self.default_ttl_hours
