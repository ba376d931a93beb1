"""Shared fixtures for the logic engine tests."""

import pytest

from voya_logic.config import AppConfig, reset_config
from voya_logic.container import reset_container
from voya_logic.domain.models import Coordinates, Place


@pytest.fixture(autouse=True)
def _fresh_globals():
    """Reset cached configuration and container between tests."""
    reset_config()
    reset_container()
    yield
    reset_config()
    reset_container()


@pytest.fixture
def app_config():
    return AppConfig()


@pytest.fixture
def gateway():
    return Place(
        place_id="gateway",
        name="Gateway of India",
        location=Coordinates(72.8347, 18.9220),
        avg_duration_min=60,
        opens_at="08:00",
        closes_at="20:00",
    )


@pytest.fixture
def museum():
    return Place(
        place_id="museum",
        name="Prince of Wales Museum",
        location=Coordinates(72.8326, 18.9269),
        avg_duration_min=90,
        opens_at="10:00",
        closes_at="18:00",
        closed_days=frozenset({"MONDAY"}),
    )


@pytest.fixture
def market():
    return Place(
        place_id="market",
        name="Colaba Causeway",
        location=Coordinates(72.8311, 18.9161),
        avg_duration_min=45,
    )
