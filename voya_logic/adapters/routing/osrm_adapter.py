"""OSRM route provider adapter.

Calls the OSRM HTTP routing engine for driving distance and duration
between two points. Every failure (network error, timeout, non-success
HTTP status, unexpected payload) is reported as
RouteProviderUnavailableError so the resolver can move on to the next
provider.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Optional

import requests

from ...config import RoutingConfig, get_config
from ...domain.errors import RouteProviderUnavailableError
from ...domain.models import Coordinates, Route, RouteProvider
from ...rounding import round2, round_half_up


@dataclass
class OsrmRouteProvider:
    """Route provider backed by an OSRM server.

    Implements RouteProviderPort.

    Attributes:
        config: Routing configuration (base URL, timeout)
        session: HTTP session, injectable for tests
    """

    config: RoutingConfig = field(default_factory=lambda: get_config().routing)
    session: Optional[requests.Session] = None
    name: str = "OSRM"

    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)
        if self.session is None:
            self.session = requests.Session()

    def build_url(self, origin: Coordinates, destination: Coordinates) -> str:
        base_url = self.config.osrm_base_url.rstrip("/")
        return (
            f"{base_url}/route/v1/driving/"
            f"{origin.longitude},{origin.latitude};"
            f"{destination.longitude},{destination.latitude}"
        )

    def route(self, origin: Coordinates, destination: Coordinates) -> Route:
        """Fetch a driving route from OSRM.

        Args:
            origin: Departure coordinates.
            destination: Arrival coordinates.

        Returns:
            Route with distance rounded to 2 decimals and travel time in
            whole minutes (at least 1).

        Raises:
            RouteProviderUnavailableError: On any transport or payload error.
        """
        url = self.build_url(origin, destination)

        try:
            response = self.session.get(  # type: ignore[union-attr]
                url,
                params={"overview": "false"},
                timeout=self.config.timeout_seconds,
            )
            response.raise_for_status()
            payload = response.json()
        except (requests.RequestException, ValueError) as e:
            self._logger.warning(
                "OSRM request failed",
                extra={"url": url, "error": str(e)},
            )
            raise RouteProviderUnavailableError(
                "OSRM request failed", cause=e, provider=self.name
            ) from e

        return self._parse(payload, url)

    def _parse(self, payload: Any, url: str) -> Route:
        try:
            if payload.get("code") != "Ok":
                raise ValueError(f"OSRM code {payload.get('code')!r}")
            best = payload["routes"][0]
            distance_m = float(best["distance"])
            duration_s = float(best["duration"])
        except (AttributeError, KeyError, IndexError, TypeError, ValueError) as e:
            self._logger.warning(
                "OSRM returned no usable route",
                extra={"url": url, "error": str(e)},
            )
            raise RouteProviderUnavailableError(
                "OSRM route unavailable", cause=e, provider=self.name
            ) from e

        route = Route(
            distance_km=round2(distance_m / 1000),
            travel_time_min=max(1, round_half_up(duration_s / 60)),
            provider=RouteProvider.OSRM,
        )
        self._logger.debug(
            "OSRM route resolved",
            extra={"distance_km": route.distance_km, "minutes": route.travel_time_min},
        )
        return route
