"""
Routing adapters for OSRM servers and OpenRouteService.

OSRM is used twice in the default chain: first a local ``osrm-routed``
instance, then the public demo server.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

from ..credentials import CredentialLookup
from ..errors import ProviderError
from ..models import GeoLocation, GeoRoute
from ..provider import DEFAULT_TIMEOUT_SEC
from .base import RoutingProvider

LOCAL_OSRM_URL = "http://127.0.0.1:7880"
DEMO_OSRM_URL = "https://router.project-osrm.org"
OPENROUTESERVICE_URL = "https://api.openrouteservice.org/v2/directions/driving-car"


def format_coordinates(locations: Sequence[GeoLocation]) -> str:
    """Encode locations in OSRM order: 'lng,lat;lng,lat;...'"""
    return ";".join(f"{loc.longitude},{loc.latitude}" for loc in locations)


def _waypoints(coordinates: Sequence[Sequence[float]]) -> List[GeoLocation]:
    # GeoJSON positions are [lng, lat]
    return [GeoLocation(latitude=c[1], longitude=c[0]) for c in coordinates]


class OSRMProvider(RoutingProvider):
    """
    OSRM HTTP API (``/route`` and ``/table`` services).

    Args:
        base_url: Server root, e.g. ``http://127.0.0.1:7880``
        name: Name used in logs and fallback outcomes
        profile: Routing profile (driving, walking, cycling)
    """

    def __init__(self, base_url: str, *, name: str = "OSRM", profile: str = "driving", **kwargs):
        super().__init__(**kwargs)
        self.base_url = base_url.rstrip("/")
        self.name = name
        self.profile = profile

    def _request(self, service: str, locations: Sequence[GeoLocation], params: Dict[str, Any]) -> Dict[str, Any]:
        url = f"{self.base_url}/{service}/v1/{self.profile}/{format_coordinates(locations)}"
        data = self.get_json(url, params=params)

        # OSRM reports failures in the body as well as via status codes
        if not isinstance(data, dict):
            raise ProviderError(self.name, "unexpected response: not a JSON object")
        if data.get("code") != "Ok":
            raise ProviderError(self.name, f"OSRM error: {data.get('message') or data.get('code', 'Unknown error')}")
        return data

    def route(self, start: GeoLocation, destination: GeoLocation) -> GeoRoute:
        data = self._request(
            "route",
            [start, destination],
            {"geometries": "geojson", "steps": "true", "generate_hints": "false"},
        )
        try:
            leg = data["routes"][0]["legs"][0]
            waypoints: List[GeoLocation] = []
            for step in leg.get("steps", []):
                waypoints.extend(_waypoints(step["geometry"]["coordinates"]))
            return GeoRoute(
                start=start,
                destination=destination,
                waypoints=waypoints,
                duration=float(leg["duration"]),
                distance=float(leg["distance"]) / 1000,
            )
        except (KeyError, IndexError, TypeError, ValueError) as exc:
            raise ProviderError(self.name, f"unexpected response: {exc!r}") from exc

    def table(self, locations: Sequence[GeoLocation], params: Dict[str, Any]) -> Dict[str, Any]:
        """Raw ``/table`` response for ``locations`` with the given source/destination indices."""
        return self._request("table", locations, params)


class OpenRouteServiceProvider(RoutingProvider):
    """OpenRouteService directions API (driving-car profile)."""

    name = "OpenRouteService"
    service_id = "openrouteservice"

    def route(self, start: GeoLocation, destination: GeoLocation) -> GeoRoute:
        params = {
            "api_key": self.api_key(),
            "start": f"{start.longitude},{start.latitude}",
            "end": f"{destination.longitude},{destination.latitude}",
        }
        data = self.get_json(OPENROUTESERVICE_URL, params=params)
        try:
            feature = data["features"][0]
            # zero-length routes come back with an empty summary
            summary = feature["properties"].get("summary") or {}
            coordinates = (feature.get("geometry") or {}).get("coordinates", [])
            return GeoRoute(
                start=start,
                destination=destination,
                waypoints=_waypoints(coordinates),
                duration=float(summary.get("duration", 0.0)),
                distance=float(summary.get("distance", 0.0)) / 1000,
            )
        except (KeyError, IndexError, TypeError, ValueError, AttributeError) as exc:
            raise ProviderError(self.name, f"unexpected response: {exc!r}") from exc


def default_routing_providers(
    credentials: Optional[CredentialLookup] = None,
    local_url: str = LOCAL_OSRM_URL,
    demo_url: str = DEMO_OSRM_URL,
    profile: str = "driving",
    timeout: float = DEFAULT_TIMEOUT_SEC,
) -> List[RoutingProvider]:
    """Local OSRM, public OSRM demo, OpenRouteService, in that order."""
    return [
        OSRMProvider(local_url, name="OSRM local", profile=profile, timeout=timeout),
        OSRMProvider(demo_url, name="OSRM demo", profile=profile, timeout=timeout),
        OpenRouteServiceProvider(credentials=credentials, timeout=timeout),
    ]
