import threading
from typing import Dict, Iterable, List, Optional

import pytest

from taxometr.models.address import Address
from taxometr.models.location import Coordinate
from taxometr.repositories.base import GeocodingError


class FakeGeocodingProvider:
    """In-memory geocoding provider recording every call it receives."""

    def __init__(
        self,
        addresses: Optional[List[Address]] = None,
        coordinates: Optional[List[Coordinate]] = None,
        error: Optional[Exception] = None,
        release: Optional[threading.Event] = None,
    ):
        self.addresses = addresses or []
        self.coordinates = coordinates or []
        self.error = error
        self.release = release
        self.calls: List[tuple] = []
        self._lock = threading.Lock()

    def _record(self, call: tuple) -> None:
        with self._lock:
            self.calls.append(call)
        if self.release is not None:
            self.release.wait(timeout=5)
        if self.error is not None:
            raise self.error

    def lookup_by_coordinate(self, latitude, longitude, max_results):
        self._record(("coordinate", latitude, longitude, max_results))
        return list(self.addresses)

    def lookup_by_text(self, text, max_results):
        self._record(("text", text, max_results))
        return list(self.coordinates)


class FakePositioningService:
    def __init__(
        self,
        providers: Iterable[str] = ("gps", "network"),
        enabled: Optional[Iterable[str]] = None,
        best: Optional[str] = "gps",
        last_known: Optional[Dict[str, Coordinate]] = None,
    ):
        self.providers = list(providers)
        self.enabled = set(self.providers if enabled is None else enabled)
        self.best = best
        self.last_known = last_known or {}
        self.subscriptions: List[tuple] = []
        self.removed: List[object] = []

    def get_providers(self):
        return list(self.providers)

    def get_best_provider(self, criteria, enabled_only=True):
        if self.best is None:
            return None
        if enabled_only and self.best not in self.enabled:
            return None
        return self.best

    def is_provider_enabled(self, name):
        return name in self.enabled

    def request_location_updates(self, name, min_time_ms, min_distance_m, consumer):
        self.subscriptions.append((name, min_time_ms, min_distance_m, consumer))

    def remove_updates(self, consumer):
        self.removed.append(consumer)

    def get_last_known_location(self, name):
        return self.last_known.get(name)

    def push(self, name: str, coordinate: Coordinate) -> None:
        for provider, _, _, consumer in self.subscriptions:
            if provider == name:
                consumer(coordinate)


@pytest.fixture
def springfield_address() -> Address:
    return Address(lines=["123 Main St", "Springfield", "USA"])


@pytest.fixture
def failing_provider() -> FakeGeocodingProvider:
    return FakeGeocodingProvider(error=GeocodingError("quota exceeded"))
