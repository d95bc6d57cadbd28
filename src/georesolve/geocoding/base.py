"""Geocoding provider interface and the plausibility region."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from ..models import GeoLocation
from ..provider import HttpProvider


@dataclass(frozen=True)
class BoundingBox:
    """Rectangular latitude/longitude region, edges inclusive."""

    min_lat: float
    min_lng: float
    max_lat: float
    max_lng: float

    def __post_init__(self):
        if self.min_lat > self.max_lat or self.min_lng > self.max_lng:
            raise ValueError(
                f"Bounding box corners are swapped: ({self.min_lat}, {self.min_lng}) / "
                f"({self.max_lat}, {self.max_lng})"
            )

    def contains(self, location: Optional[GeoLocation]) -> bool:
        if location is None:
            return False
        return (
            self.min_lat <= location.latitude <= self.max_lat
            and self.min_lng <= location.longitude <= self.max_lng
        )


# North-western Europe, lower left / upper right
DEFAULT_BBOX = BoundingBox(
    min_lat=35.960223,
    min_lng=-8.085938,
    max_lat=59.130863,
    max_lng=28.652344,
)

WORLD_BBOX = BoundingBox(min_lat=-90.0, min_lng=-180.0, max_lat=90.0, max_lng=180.0)


class GeocodingProvider(HttpProvider, ABC):
    """An external service that turns an address into a GeoLocation."""

    @abstractmethod
    def geocode(self, address: str) -> GeoLocation:
        """
        Look up ``address``.

        Raises:
            ProviderError: On transport failures or unusable responses
            ProviderUnavailable: If the provider's credential is missing
        """
