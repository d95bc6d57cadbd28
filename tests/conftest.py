"""
Pytest configuration and shared fixtures for georesolve tests.

This file provides:
- Sample locations in and outside the default plausibility region
- Fake geocoding/routing providers that record their calls
- Caches backed by memory with a controllable clock
- Canned provider responses for adapter tests
"""

import json
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

import httpx
import pytest

from georesolve.cache import GeoCache, MemoryStore, ONE_DAY
from georesolve.credentials import CredentialLookup
from georesolve.errors import ProviderError
from georesolve.geocoding import GeocodingProvider
from georesolve.models import GeoLocation, GeoRoute
from georesolve.routing import RoutingProvider


# ==============================================================================
# Sample Locations
# ==============================================================================

@pytest.fixture
def muenster() -> GeoLocation:
    """Named location inside the north-western Europe box."""
    return GeoLocation(name="Münster", latitude=51.9607, longitude=7.6261)


@pytest.fixture
def osnabrueck() -> GeoLocation:
    return GeoLocation(name="Osnabrück", latitude=52.2799, longitude=8.0472)


@pytest.fixture
def springfield() -> GeoLocation:
    """Unnamed location rendered from its postal address."""
    return GeoLocation(
        latitude=51.5,
        longitude=7.5,
        street_and_number="Main St 1",
        zip_code="12345",
        city="Springfield",
    )


@pytest.fixture
def tokyo() -> GeoLocation:
    """Far outside the default plausibility region."""
    return GeoLocation(name="Tokyo Station", latitude=35.6812, longitude=139.7671)


# ==============================================================================
# Clock and Caches
# ==============================================================================

class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: float = 1_700_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def memory_store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def cache(memory_store, clock) -> GeoCache:
    """One-day cache in memory."""
    return GeoCache(memory_store, ONE_DAY, clock=clock)


# ==============================================================================
# Credentials
# ==============================================================================

@pytest.fixture
def credentials() -> CredentialLookup:
    return CredentialLookup.from_mapping({
        "mapquest": "mq-test-key",
        "locationiq": "liq-test-key",
        "openrouteservice": "ors-test-key",
    })


# ==============================================================================
# Fake Providers
# ==============================================================================

class FakeGeocoder(GeocodingProvider):
    """Returns a fixed location (or raises) and records every address asked."""

    def __init__(
        self,
        name: str,
        result: Optional[GeoLocation] = None,
        error: Optional[Exception] = None,
        service_id: Optional[str] = None,
        credentials: Optional[CredentialLookup] = None,
    ):
        super().__init__(credentials=credentials)
        self.name = name
        self.service_id = service_id
        self.result = result
        self.error = error
        self.calls: List[str] = []

    def geocode(self, address: str) -> GeoLocation:
        self.calls.append(address)
        if self.error is not None:
            raise self.error
        return self.result


class FakeRouter(RoutingProvider):
    """Returns a fixed route (or raises) and records every request."""

    def __init__(
        self,
        name: str,
        duration: float = 900.0,
        distance: float = 12.5,
        error: Optional[Exception] = None,
        service_id: Optional[str] = None,
        credentials: Optional[CredentialLookup] = None,
    ):
        super().__init__(credentials=credentials)
        self.name = name
        self.service_id = service_id
        self.duration = duration
        self.distance = distance
        self.error = error
        self.calls: List[tuple] = []

    def route(self, start: GeoLocation, destination: GeoLocation) -> GeoRoute:
        self.calls.append((start, destination))
        if self.error is not None:
            raise self.error
        return GeoRoute(duration=self.duration, distance=self.distance)


@pytest.fixture
def fake_geocoder_factory() -> Callable[..., FakeGeocoder]:
    return FakeGeocoder


@pytest.fixture
def fake_router_factory() -> Callable[..., FakeRouter]:
    return FakeRouter


def provider_error(name: str = "fake") -> ProviderError:
    return ProviderError(name, "connection refused")


# ==============================================================================
# Canned Provider Responses
# ==============================================================================

@pytest.fixture
def mapquest_response() -> Dict[str, Any]:
    return {
        "info": {"statuscode": 0},
        "results": [{
            "providedLocation": {"location": "Prinzipalmarkt 1, Münster"},
            "locations": [{
                "street": "Prinzipalmarkt 1 ",
                "adminArea6": "Altstadt",
                "adminArea5": "Münster",
                "adminArea4": "Münster",
                "adminArea3": "Nordrhein-Westfalen",
                "adminArea1": "DE",
                "postalCode": "48143",
                "latLng": {"lat": 51.9625, "lng": 7.6285},
            }],
        }],
    }


@pytest.fixture
def locationiq_response() -> List[Dict[str, Any]]:
    return [{
        "place_id": "1234",
        "lat": "51.9625",
        "lon": "7.6285",
        "display_name": "1, Prinzipalmarkt, Altstadt, Münster, 48143, Deutschland",
        "address": {
            "house_number": "1",
            "road": "Prinzipalmarkt",
            "suburb": "Altstadt",
            "city": "Münster",
            "county": "Münster",
            "state": "Nordrhein-Westfalen",
            "postcode": "48143",
            "country": "Deutschland",
        },
    }]


@pytest.fixture
def osrm_route_response() -> Dict[str, Any]:
    return {
        "code": "Ok",
        "routes": [{
            "distance": 58234.5,
            "duration": 2710.3,
            "legs": [{
                "distance": 58234.5,
                "duration": 2710.3,
                "steps": [
                    {"geometry": {"type": "LineString", "coordinates": [[7.6261, 51.9607], [7.70, 52.00]]}},
                    {"geometry": {"type": "LineString", "coordinates": [[7.70, 52.00], [8.0472, 52.2799]]}},
                ],
            }],
        }],
        "waypoints": [],
    }


@pytest.fixture
def osrm_table_response() -> Dict[str, Any]:
    return {
        "code": "Ok",
        "durations": [[1800.5], [None], [640.0]],
        "sources": [{"location": [0, 0]}, {"location": [0, 0]}, {"location": [0, 0]}],
        "destinations": [{"location": [0, 0]}],
    }


@pytest.fixture
def ors_response() -> Dict[str, Any]:
    return {
        "type": "FeatureCollection",
        "features": [{
            "type": "Feature",
            "properties": {"summary": {"distance": 60120.0, "duration": 2950.0}},
            "geometry": {"type": "LineString", "coordinates": [[7.6261, 51.9607], [8.0472, 52.2799]]},
        }],
    }


def json_transport(payload: Any, status_code: int = 200, seen: Optional[List[httpx.Request]] = None) -> httpx.MockTransport:
    """MockTransport answering every request with ``payload`` as JSON."""

    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        return httpx.Response(status_code, content=json.dumps(payload).encode("utf-8"),
                              headers={"Content-Type": "application/json"})

    return httpx.MockTransport(handler)


@pytest.fixture
def key_file(tmp_path) -> Path:
    path = tmp_path / "API-Keys.txt"
    path.write_text(
        "# serviceID key\n"
        "mapquest mq-123\n"
        "locationiq PASTE_YOUR_LOCATIONIQ_KEY_HERE\n"
        "\n"
        "openrouteservice ors-456\n"
        "brokenline\n",
        encoding="utf-8",
    )
    return path
