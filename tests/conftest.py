"""
Shared fixtures: trip factory, fake Redis client, file-backed stores.
"""

from datetime import date

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from travel_days.models import Country, Traveler, Trip
from travel_days.storage.backends import LocalFileBackend, RedisBackend
from travel_days.storage.chain import StorageChain
from travel_days.storage.trip_store import TripStore


class FakeRedis:
    """Minimal stand-in for the redis-py get/set/delete calls used here."""

    def __init__(self):
        self.store = {}
        self.closed = False

    def get(self, key):
        return self.store.get(key)

    def set(self, key, value):
        self.store[key] = value

    def delete(self, *keys):
        for key in keys:
            self.store.pop(key, None)

    def close(self):
        self.closed = True


class DownRedis(FakeRedis):
    """A client whose server is unreachable."""

    def get(self, key):
        raise RedisConnectionError("Connection refused")

    def set(self, key, value):
        raise RedisConnectionError("Connection refused")

    def delete(self, *keys):
        raise RedisConnectionError("Connection refused")


def make_trip(
    departure,
    arrival,
    country=Country.GREECE,
    traveler=Traveler.PERSON_1,
    trip_id="1",
    notes="",
):
    return Trip(
        id=trip_id,
        traveler=traveler,
        country=country,
        departure_date=date.fromisoformat(departure),
        arrival_date=date.fromisoformat(arrival),
        notes=notes,
    )


@pytest.fixture
def fake_redis():
    return FakeRedis()


@pytest.fixture
def local_backend(tmp_path):
    return LocalFileBackend(tmp_path / "store.json")


@pytest.fixture
def store(fake_redis, local_backend):
    """Store with a healthy Redis primary and a local fallback."""
    return TripStore(
        StorageChain([RedisBackend(fake_redis), local_backend]),
        clock=lambda: "2024-06-01T12:00:00Z",
    )


@pytest.fixture
def fallback_store(local_backend):
    """Store whose Redis primary is down."""
    return TripStore(
        StorageChain([RedisBackend(DownRedis()), local_backend]),
        clock=lambda: "2024-06-01T12:00:00Z",
    )
