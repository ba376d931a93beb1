"""Tests for the routing providers and the logistics resolver."""

from unittest.mock import MagicMock

import pytest
import requests

from voya_logic.adapters.routing import HaversineRouteProvider, OsrmRouteProvider
from voya_logic.config import RoutingConfig
from voya_logic.domain.errors import InvalidCoordinatesError, RouteProviderUnavailableError
from voya_logic.domain.models import STATIC_ROUTE, Coordinates, Route, RouteProvider
from voya_logic.services.logistics import LogisticsResolver, coerce_coordinates

MUMBAI = Coordinates(72.8777, 19.076)
PUNE = Coordinates(73.8567, 18.5204)


def osrm_response(payload=None, status_error=None):
    response = MagicMock()
    response.json.return_value = payload
    if status_error is not None:
        response.raise_for_status.side_effect = status_error
    return response


class TestCoerceCoordinates:
    def test_accepts_pairs(self):
        assert coerce_coordinates((72.8777, 19.076)) == MUMBAI
        assert coerce_coordinates([72.8777, 19.076]) == MUMBAI
        assert coerce_coordinates(MUMBAI) == MUMBAI

    def test_accepts_numeric_strings(self):
        assert coerce_coordinates(["72.8777", "19.076"]) == MUMBAI

    @pytest.mark.parametrize(
        "value",
        [
            None,
            "72.8,19.0",
            [72.8],
            [72.8, 19.0, 5.0],
            ["east", "north"],
            [float("nan"), 19.0],
            [72.8, float("inf")],
            {"lon": 72.8, "lat": 19.0},
        ],
    )
    def test_rejects_malformed_input(self, value):
        with pytest.raises(InvalidCoordinatesError):
            coerce_coordinates(value)


class TestOsrmRouteProvider:
    @pytest.fixture
    def session(self):
        return MagicMock()

    @pytest.fixture
    def provider(self, session):
        config = RoutingConfig(osrm_base_url="http://osrm.local/", timeout_seconds=2.0)
        return OsrmRouteProvider(config=config, session=session)

    def test_builds_lon_lat_url(self, provider):
        url = provider.build_url(MUMBAI, PUNE)
        assert url == "http://osrm.local/route/v1/driving/72.8777,19.076;73.8567,18.5204"

    def test_parses_first_route(self, provider, session):
        session.get.return_value = osrm_response(
            {"code": "Ok", "routes": [{"distance": 12345.0, "duration": 1230.0}]}
        )

        route = provider.route(MUMBAI, PUNE)

        assert route == Route(distance_km=12.35, travel_time_min=21, provider=RouteProvider.OSRM)
        session.get.assert_called_once_with(
            "http://osrm.local/route/v1/driving/72.8777,19.076;73.8567,18.5204",
            params={"overview": "false"},
            timeout=2.0,
        )

    def test_short_trip_takes_at_least_one_minute(self, provider, session):
        session.get.return_value = osrm_response(
            {"code": "Ok", "routes": [{"distance": 80.0, "duration": 10.0}]}
        )
        assert provider.route(MUMBAI, PUNE).travel_time_min == 1

    @pytest.mark.parametrize(
        "payload",
        [
            {"code": "NoRoute", "routes": []},
            {"code": "Ok", "routes": []},
            {"code": "Ok", "routes": [{"distance": 100.0}]},
            None,
        ],
    )
    def test_unusable_payload_is_unavailable(self, provider, session, payload):
        session.get.return_value = osrm_response(payload)
        with pytest.raises(RouteProviderUnavailableError) as exc_info:
            provider.route(MUMBAI, PUNE)
        assert exc_info.value.provider == "OSRM"

    def test_transport_error_is_unavailable(self, provider, session):
        session.get.side_effect = requests.ConnectionError("refused")
        with pytest.raises(RouteProviderUnavailableError):
            provider.route(MUMBAI, PUNE)

    def test_http_error_is_unavailable(self, provider, session):
        session.get.return_value = osrm_response(
            status_error=requests.HTTPError("503 Service Unavailable")
        )
        with pytest.raises(RouteProviderUnavailableError):
            provider.route(MUMBAI, PUNE)


class TestHaversineRouteProvider:
    @pytest.fixture
    def provider(self):
        return HaversineRouteProvider(config=RoutingConfig(fallback_speed_kmh=30))

    def test_same_point_takes_no_time(self, provider):
        route = provider.route(MUMBAI, MUMBAI)
        assert route.distance_km == 0
        assert route.travel_time_min == 0
        assert route.provider is RouteProvider.HAVERSINE

    def test_short_hop_takes_at_least_one_minute(self, provider):
        route = provider.route(Coordinates(0.0, 0.0), Coordinates(0.0, 0.001))
        assert route.distance_km == 0.11
        assert route.travel_time_min == 1

    def test_long_distance_at_constant_speed(self, provider):
        route = provider.route(MUMBAI, PUNE)
        assert 110 < route.distance_km < 130
        # 30 km/h is two minutes per kilometre
        assert abs(route.travel_time_min - route.distance_km * 2) <= 1


class TestLogisticsResolver:
    @pytest.fixture
    def primary(self):
        provider = MagicMock()
        provider.name = "PRIMARY"
        return provider

    def test_identical_points_short_circuit(self, primary):
        resolver = LogisticsResolver(providers=(primary,))

        assert resolver.resolve(MUMBAI, (72.8777, 19.076)) == STATIC_ROUTE
        primary.route.assert_not_called()

    def test_first_provider_answer_wins(self, primary):
        primary.route.return_value = Route(150.0, 180, RouteProvider.OSRM)
        resolver = LogisticsResolver(providers=(primary,))

        assert resolver.resolve(MUMBAI, PUNE).provider is RouteProvider.OSRM
        primary.route.assert_called_once_with(MUMBAI, PUNE)

    @pytest.mark.parametrize(
        "error",
        [RouteProviderUnavailableError("down", provider="PRIMARY"), RuntimeError("boom")],
    )
    def test_failures_fall_back_to_great_circle(self, primary, error):
        primary.route.side_effect = error
        resolver = LogisticsResolver(providers=(primary,))

        route = resolver.resolve(MUMBAI, PUNE)

        assert route.provider is RouteProvider.HAVERSINE
        assert route.distance_km > 0

    def test_chain_tries_providers_in_order(self, primary):
        secondary = MagicMock()
        primary.route.side_effect = RouteProviderUnavailableError("down")
        secondary.route.return_value = Route(150.0, 180, RouteProvider.OSRM)
        resolver = LogisticsResolver(providers=(primary, secondary))

        assert resolver.resolve(MUMBAI, PUNE).travel_time_min == 180

    def test_malformed_coordinates_raise_before_any_provider(self, primary):
        resolver = LogisticsResolver(providers=(primary,))

        with pytest.raises(InvalidCoordinatesError):
            resolver.resolve([72.8], PUNE)
        primary.route.assert_not_called()
