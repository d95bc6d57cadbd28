"""
Geographic value types.

Provides the two records every resolver works with:
- GeoLocation: a point on earth with an optional name and postal address
- GeoRoute: a driving route between two locations

The string form of a GeoLocation doubles as its display name and as a
component of route cache keys, so its rendering rules are fixed here.
"""

from __future__ import annotations

import math
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# -----------------------------
# Constants
# -----------------------------

# Equatorial radius used for great-circle distances
EARTH_RADIUS_KM = 6378.137

# Route sentinels
DURATION_UNKNOWN = -1.0
DISTANCE_UNKNOWN = -1.0
DISTANCE_NOT_COMPUTED = -2.0  # matrix results carry durations only


def haversine_m(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """
    Great-circle distance between two coordinates.

    Args:
        lat1, lng1: First point in decimal degrees
        lat2, lng2: Second point in decimal degrees

    Returns:
        Distance in meters
    """
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = phi2 - phi1
    d_lambda = math.radians(lng2) - math.radians(lng1)

    a = (
        math.sin(d_phi / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c * 1000.0


# -----------------------------
# Data Models
# -----------------------------

class GeoLocation(BaseModel):
    """
    A physical location marked by its coordinates, name and postal address.

    Text fields are stripped on construction and on assignment; blank values
    are stored as ``None``. Attribute assignment is the supported way to
    enrich a location after it was created from bare coordinates.
    """

    latitude: float = Field(..., ge=-90.0, le=90.0, description="Latitude in decimal degrees")
    longitude: float = Field(..., ge=-180.0, le=180.0, description="Longitude in decimal degrees")
    name: Optional[str] = None
    street_and_number: Optional[str] = None
    zip_code: Optional[str] = None
    neighborhood: Optional[str] = None
    city: Optional[str] = None
    county: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None

    model_config = ConfigDict(validate_assignment=True)

    @field_validator(
        "name",
        "street_and_number",
        "zip_code",
        "neighborhood",
        "city",
        "county",
        "state",
        "country",
        mode="before",
    )
    @classmethod
    def _strip_text(cls, value):
        if value is None:
            return None
        value = str(value).strip()
        return value or None

    def distance_to(self, other: "GeoLocation") -> float:
        """Bee-line distance to ``other`` in meters."""
        return haversine_m(self.latitude, self.longitude, other.latitude, other.longitude)

    def address(self) -> str:
        """Assemble the postal address from whatever parts are present."""
        parts: List[str] = []
        if self.street_and_number:
            parts.append(self.street_and_number)
        if self.zip_code:
            parts.append(", " + self.zip_code)
        if self.city:
            parts.append((" " if self.zip_code else ", ") + self.city)
        if self.neighborhood:
            if self.city:
                parts.append(" (" + self.neighborhood + ")")
            else:
                parts.append(" " + self.neighborhood)
        for value in (self.county, self.state, self.country):
            if value:
                parts.append(", " + value)

        text = "".join(parts)
        if text.startswith(", "):
            text = text[2:]
        return text

    def __str__(self) -> str:
        if self.name:
            return self.name
        return self.address()


class GeoRoute(BaseModel):
    """
    A route between two locations.

    ``duration`` is in seconds and ``distance`` in kilometers. Both start out
    as sentinels until a provider fills them in; matrix results use
    ``DISTANCE_NOT_COMPUTED`` for the distance.
    """

    start: Optional[GeoLocation] = None
    destination: Optional[GeoLocation] = None
    waypoints: List[GeoLocation] = Field(default_factory=list)
    duration: float = DURATION_UNKNOWN
    distance: float = DISTANCE_UNKNOWN

    model_config = ConfigDict(validate_assignment=True)

    @property
    def has_duration(self) -> bool:
        return self.duration >= 0

    @property
    def has_distance(self) -> bool:
        return self.distance >= 0

    def _format_distance(self) -> str:
        text = f"{self.distance:.2f}".rstrip("0").rstrip(".")
        return text.replace(".", ",")

    def _format_duration(self) -> str:
        if not self.has_duration:
            return "--:--:--"
        # hours are not wrapped at 24
        hours, remainder = divmod(int(self.duration), 3600)
        minutes, seconds = divmod(remainder, 60)
        return f"{hours:02d}:{minutes:02d}:{seconds:02d}"

    def __str__(self) -> str:
        return (
            f"[{self.start} -> {self.destination}; "
            f"{self._format_distance()} km, {self._format_duration()} h]"
        )
