"""
Geocoding adapters for MapQuest and LocationIQ.

Both request a single best match and map the provider's postal address
fields onto GeoLocation when they are present.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from ..credentials import CredentialLookup
from ..errors import ProviderError
from ..models import GeoLocation
from ..provider import DEFAULT_TIMEOUT_SEC
from .base import GeocodingProvider

MAPQUEST_URL = "https://open.mapquestapi.com/geocoding/v1/address"
LOCATIONIQ_URL = "https://eu1.locationiq.org/v1/search.php"

# Results biased towards central Europe; lower left / upper right
MAPQUEST_DEFAULT_BBOX = "40.880295,-6.372070,56.897004,18.698730"


class MapQuestProvider(GeocodingProvider):
    """MapQuest Open Geocoding API."""

    name = "MapQuest"
    service_id = "mapquest"

    def __init__(self, *, bounding_box: Optional[str] = MAPQUEST_DEFAULT_BBOX, **kwargs):
        super().__init__(**kwargs)
        self.bounding_box = bounding_box

    def geocode(self, address: str) -> GeoLocation:
        params = {
            "key": self.api_key(),
            "location": address,
            "maxResults": 1,
            "outFormat": "json",
        }
        if self.bounding_box:
            params["boundingBox"] = self.bounding_box

        data = self.get_json(MAPQUEST_URL, params=params)
        try:
            locations = data["results"][0]["locations"]
        except (KeyError, IndexError, TypeError) as exc:
            raise ProviderError(self.name, f"unexpected response: {exc!r}") from exc
        if not locations:
            raise ProviderError(self.name, f"no result for '{address}'")

        try:
            return self._parse_location(locations[0])
        except (KeyError, TypeError, ValueError) as exc:
            raise ProviderError(self.name, f"unexpected response: {exc!r}") from exc

    @staticmethod
    def _parse_location(payload: Dict[str, Any]) -> GeoLocation:
        lat_lng = payload["latLng"]
        return GeoLocation(
            latitude=lat_lng["lat"],
            longitude=lat_lng["lng"],
            street_and_number=payload.get("street"),
            zip_code=payload.get("postalCode"),
            neighborhood=payload.get("adminArea6"),
            city=payload.get("adminArea5"),
            county=payload.get("adminArea4"),
            state=payload.get("adminArea3"),
        )


class LocationIQProvider(GeocodingProvider):
    """LocationIQ search API (EU endpoint)."""

    name = "LocationIQ"
    service_id = "locationiq"

    def geocode(self, address: str) -> GeoLocation:
        params = {
            "key": self.api_key(),
            "q": address,
            "format": "json",
            "addressdetails": 1,
            "limit": 1,
        }

        data = self.get_json(LOCATIONIQ_URL, params=params)
        if not isinstance(data, list) or not data:
            raise ProviderError(self.name, f"no result for '{address}'")
        try:
            return self._parse_place(data[0])
        except (KeyError, TypeError, ValueError) as exc:
            raise ProviderError(self.name, f"unexpected response: {exc!r}") from exc

    @staticmethod
    def _parse_place(place: Dict[str, Any]) -> GeoLocation:
        details = place.get("address") or {}

        street_parts = [details.get("road"), details.get("house_number")]
        street = " ".join(part for part in street_parts if part) or None

        return GeoLocation(
            latitude=float(place["lat"]),
            longitude=float(place["lon"]),
            street_and_number=street,
            zip_code=details.get("postcode"),
            neighborhood=details.get("suburb"),
            city=details.get("town") or details.get("city"),
            county=details.get("county"),
            state=details.get("state"),
            country=details.get("country"),
        )


def default_geocoding_providers(
    credentials: Optional[CredentialLookup] = None,
    timeout: float = DEFAULT_TIMEOUT_SEC,
) -> List[GeocodingProvider]:
    """MapQuest first, LocationIQ second."""
    return [
        MapQuestProvider(credentials=credentials, timeout=timeout),
        LocationIQProvider(credentials=credentials, timeout=timeout),
    ]
