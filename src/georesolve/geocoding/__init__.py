"""Geocoding: address lookup with provider fallback."""

from .base import (
    BoundingBox,
    GeocodingProvider,
    DEFAULT_BBOX,
    WORLD_BBOX,
)
from .providers import (
    MapQuestProvider,
    LocationIQProvider,
    default_geocoding_providers,
)
from .resolver import GeoCoder

__all__ = [
    # Resolver
    "GeoCoder",

    # Plausibility region
    "BoundingBox",
    "DEFAULT_BBOX",
    "WORLD_BBOX",

    # Providers
    "GeocodingProvider",
    "MapQuestProvider",
    "LocationIQProvider",
    "default_geocoding_providers",
]
