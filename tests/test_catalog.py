"""Tests for the in-memory place catalog and settings store."""

from datetime import date, datetime, timezone

import pytest

from voya_logic.adapters.catalog import InMemoryPlaceCatalog
from voya_logic.adapters.settings import InMemorySettingsStore
from voya_logic.adapters.settings.memory_settings import (
    DAY_START_TIME,
    ROUTE_CACHE_TTL_HOURS,
)
from voya_logic.config import AppConfig
from voya_logic.domain.errors import ConfigurationError
from voya_logic.domain.models import Closure, Coordinates, TimeRange

MONDAY = date(2026, 10, 19)

PLACES_CSV = """place_id,name,category,longitude,latitude,avg_duration_min,opens_at,closes_at,closed_days
gateway,Gateway of India,SIGHTSEEING,72.8347,18.9220,60,08:00,20:00,
museum,Prince of Wales Museum,MUSEUM,72.8326,18.9269,90,10:00,18:00,monday;Tuesday
,Nameless,,,,,,,
kiosk,,FOOD,,,,,,
"""

CLOSURES_CSV = """place_id,date,is_closed_full_day,closed_ranges,reason,created_at
gateway,2026-10-19,false,12:00-13:00;15:00-,VIP visit,2026-10-01T10:00:00+00:00
gateway,2026-10-19,yes,,Festival,2026-10-05T10:00:00+00:00
"""


@pytest.fixture
def csv_files(tmp_path):
    places = tmp_path / "places.csv"
    closures = tmp_path / "closures.csv"
    places.write_text(PLACES_CSV, encoding="utf-8")
    closures.write_text(CLOSURES_CSV, encoding="utf-8")
    return places, closures


class TestInMemoryPlaceCatalog:
    def test_from_records(self, gateway, museum):
        catalog = InMemoryPlaceCatalog.from_records([gateway, museum])

        assert catalog.get_place("gateway") == gateway
        assert catalog.get_place("nowhere") is None

    def test_latest_closure_wins(self, gateway):
        older = Closure(
            place_id="gateway",
            date=MONDAY,
            is_closed_full_day=False,
            created_at=datetime(2026, 10, 1, tzinfo=timezone.utc),
        )
        newer = Closure(
            place_id="gateway",
            date=MONDAY,
            created_at=datetime(2026, 10, 2, tzinfo=timezone.utc),
        )
        undated = Closure(place_id="gateway", date=MONDAY, reason="legacy")
        catalog = InMemoryPlaceCatalog.from_records([gateway], [older, undated, newer])

        assert catalog.get_closure("gateway", MONDAY) == newer

    def test_closure_for_other_date_is_ignored(self, gateway):
        closure = Closure(place_id="gateway", date=date(2026, 10, 20))
        catalog = InMemoryPlaceCatalog.from_records([gateway], [closure])

        assert catalog.get_closure("gateway", MONDAY) is None

    def test_from_csv(self, csv_files):
        catalog = InMemoryPlaceCatalog.from_csv(*csv_files)

        gateway = catalog.get_place("gateway")
        museum = catalog.get_place("museum")
        kiosk = catalog.get_place("kiosk")

        assert gateway.location == Coordinates(72.8347, 18.922)
        assert gateway.avg_duration_min == 60
        assert gateway.closed_days == frozenset()
        assert museum.closed_days == frozenset({"MONDAY", "TUESDAY"})
        assert museum.category == "MUSEUM"
        assert kiosk.name == "kiosk"
        assert kiosk.location is None
        assert (kiosk.opens_at, kiosk.closes_at) == ("00:00", "23:59")
        assert len(catalog.places) == 3

    def test_csv_closures(self, csv_files):
        catalog = InMemoryPlaceCatalog.from_csv(*csv_files)

        closures = catalog.closures["gateway"]
        assert closures[0].closed_ranges == (
            TimeRange("12:00", "13:00"),
            TimeRange("15:00", None),
        )
        assert closures[0].is_closed_full_day is False
        assert catalog.get_closure("gateway", MONDAY).reason == "Festival"

    def test_missing_file_raises_configuration_error(self, tmp_path):
        with pytest.raises(ConfigurationError):
            InMemoryPlaceCatalog.from_csv(tmp_path / "absent.csv")

    def test_malformed_row_raises_configuration_error(self, tmp_path):
        places = tmp_path / "places.csv"
        places.write_text("place_id,longitude,latitude\nbad,east,north\n", encoding="utf-8")

        with pytest.raises(ConfigurationError):
            InMemoryPlaceCatalog.from_csv(places)


class TestInMemorySettingsStore:
    def test_defaults_come_from_config(self, app_config):
        settings = InMemorySettingsStore(app_config)

        assert settings.get(DAY_START_TIME) == "09:00"
        assert settings.get(ROUTE_CACHE_TTL_HOURS) == 168
        assert settings.get("unknown_key") is None

    def test_stored_value_wins(self, app_config):
        settings = InMemorySettingsStore(app_config)
        settings.set(DAY_START_TIME, "07:30")

        assert settings.get(DAY_START_TIME) == "07:30"
        assert settings.unset(DAY_START_TIME) is True
        assert settings.get(DAY_START_TIME) == "09:00"
        assert settings.unset(DAY_START_TIME) is False

    def test_environment_overrides_defaults(self, monkeypatch):
        monkeypatch.setenv("VOYA_SCHEDULE_DAY_START_TIME", "08:15")
        settings = InMemorySettingsStore(AppConfig())

        assert settings.get(DAY_START_TIME) == "08:15"
