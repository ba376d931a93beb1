"""Tests for the read-through route cache."""

import threading
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest

from voya_logic.adapters.cache import InMemoryRouteCacheStore, NullRouteCacheStore
from voya_logic.adapters.settings import InMemorySettingsStore
from voya_logic.adapters.settings.memory_settings import ROUTE_CACHE_TTL_HOURS
from voya_logic.domain.errors import InvalidCoordinatesError
from voya_logic.domain.models import Route, RouteCacheEntry, RouteProvider
from voya_logic.services.route_cache import RouteCache, coordinates_to_hash

ORIGIN = (72.8347, 18.922)
DESTINATION = (72.8311, 18.9161)
START = datetime(2026, 10, 19, 6, 0, tzinfo=timezone.utc)


class FakeClock:
    def __init__(self, now):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock():
    return FakeClock(START)


@pytest.fixture
def resolver():
    mock = MagicMock()
    mock.resolve.return_value = Route(distance_km=1.2, travel_time_min=6, provider=RouteProvider.OSRM)
    return mock


@pytest.fixture
def store():
    return InMemoryRouteCacheStore(name="test")


@pytest.fixture
def cache(store, resolver, clock):
    return RouteCache(store=store, resolver=resolver, now=clock)


def test_hash_uses_six_decimals_lon_first():
    assert coordinates_to_hash((72.8777, 19.076)) == "72.877700,19.076000"


def test_hash_rejects_malformed_coordinates():
    with pytest.raises(InvalidCoordinatesError):
        coordinates_to_hash("72.8777,19.076")


class TestResolveWithCache:
    def test_second_call_is_served_from_cache(self, cache, resolver):
        first = cache.resolve_with_cache(ORIGIN, DESTINATION)
        second = cache.resolve_with_cache(ORIGIN, DESTINATION)

        assert first.cached is False
        assert second.cached is True
        assert (second.distance_km, second.travel_time_min, second.provider) == (
            first.distance_km,
            first.travel_time_min,
            first.provider,
        )
        resolver.resolve.assert_called_once()

    def test_keys_are_directional(self, cache, resolver, store):
        cache.resolve_with_cache(ORIGIN, DESTINATION)
        reverse = cache.resolve_with_cache(DESTINATION, ORIGIN)

        assert reverse.cached is False
        assert resolver.resolve.call_count == 2
        assert store.size() == 2

    def test_expired_entry_is_recomputed(self, cache, resolver, clock, store):
        cache.resolve_with_cache(ORIGIN, DESTINATION)
        clock.advance(hours=168, seconds=1)

        route = cache.resolve_with_cache(ORIGIN, DESTINATION)

        assert route.cached is False
        assert resolver.resolve.call_count == 2
        assert store.size() == 1

    def test_entry_is_fresh_until_expiry(self, cache, resolver, clock):
        cache.resolve_with_cache(ORIGIN, DESTINATION)
        clock.advance(hours=167)

        assert cache.resolve_with_cache(ORIGIN, DESTINATION).cached is True

    def test_failed_write_still_returns_route(self, resolver, clock):
        store = MagicMock()
        store.find.return_value = None
        store.upsert.side_effect = RuntimeError("disk full")
        cache = RouteCache(store=store, resolver=resolver, now=clock)

        route = cache.resolve_with_cache(ORIGIN, DESTINATION)

        assert route.travel_time_min == 6
        assert route.cached is False

    def test_null_store_never_hits(self, resolver, clock):
        cache = RouteCache(store=NullRouteCacheStore(), resolver=resolver, now=clock)

        cache.resolve_with_cache(ORIGIN, DESTINATION)
        cache.resolve_with_cache(ORIGIN, DESTINATION)

        assert resolver.resolve.call_count == 2

    def test_malformed_coordinates_raise(self, cache, resolver):
        with pytest.raises(InvalidCoordinatesError):
            cache.resolve_with_cache([72.8], DESTINATION)
        resolver.resolve.assert_not_called()


class TestPut:
    def test_default_ttl_is_one_week(self, cache):
        entry = cache.put(ORIGIN, DESTINATION, Route(1.0, 5, RouteProvider.OSRM))
        assert entry.expires_at - entry.computed_at == timedelta(hours=168)

    def test_ttl_is_at_least_one_hour(self, cache):
        entry = cache.put(ORIGIN, DESTINATION, Route(1.0, 5, RouteProvider.OSRM), ttl_hours=0.1)
        assert entry.expires_at - entry.computed_at == timedelta(hours=1)

    def test_ttl_setting_is_used(self, store, resolver, clock, app_config):
        settings = InMemorySettingsStore(app_config)
        settings.set(ROUTE_CACHE_TTL_HOURS, 24)
        cache = RouteCache(store=store, resolver=resolver, settings=settings, now=clock)

        entry = cache.put(ORIGIN, DESTINATION, Route(1.0, 5, RouteProvider.OSRM))

        assert entry.expires_at == START + timedelta(hours=24)

    def test_put_replaces_existing_entry(self, cache, store):
        cache.put(ORIGIN, DESTINATION, Route(1.0, 5, RouteProvider.OSRM))
        cache.put(ORIGIN, DESTINATION, Route(2.0, 9, RouteProvider.HAVERSINE))

        entry = cache.get(ORIGIN, DESTINATION)

        assert store.size() == 1
        assert entry.travel_time_min == 9
        assert entry.provider is RouteProvider.HAVERSINE


def test_store_stats_track_hits_and_misses(cache, store):
    cache.resolve_with_cache(ORIGIN, DESTINATION)
    cache.resolve_with_cache(ORIGIN, DESTINATION)

    stats = store.stats()

    assert stats["hits"] == 1
    assert stats["misses"] == 1
    assert store.clear() == 1
    assert store.size() == 0


def test_concurrent_upserts_keep_one_whole_entry(store):
    origin_hash = coordinates_to_hash(ORIGIN)
    destination_hash = coordinates_to_hash(DESTINATION)
    entries = [
        RouteCacheEntry(
            origin_hash=origin_hash,
            destination_hash=destination_hash,
            distance_km=float(n),
            travel_time_min=n,
            provider=RouteProvider.OSRM,
            computed_at=START + timedelta(seconds=n),
            expires_at=START + timedelta(hours=1, seconds=n),
        )
        for n in range(1, 33)
    ]
    barrier = threading.Barrier(len(entries))

    def write(entry):
        barrier.wait()
        store.upsert(entry)

    threads = [threading.Thread(target=write, args=(entry,)) for entry in entries]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=10)

    stored = store.find(origin_hash, destination_hash)
    assert store.size() == 1
    assert stored in entries
    assert stored.distance_km == stored.travel_time_min
    assert stored.computed_at == START + timedelta(seconds=stored.travel_time_min)
