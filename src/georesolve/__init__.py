"""Geocoding and routing with provider fallback, plausibility checks and caching."""

from .errors import (
    GeoResolveError,
    ProviderError,
    ProviderUnavailable,
    CacheIOError,
)
from .models import (
    GeoLocation,
    GeoRoute,
    haversine_m,
    DURATION_UNKNOWN,
    DISTANCE_UNKNOWN,
    DISTANCE_NOT_COMPUTED,
)
from .cache import (
    GeoCache,
    CacheElement,
    KeyValueStore,
    SqliteStore,
    MemoryStore,
    position_key,
    route_key,
    ONE_DAY,
    TWO_DAYS,
    ONE_WEEK,
    TWO_WEEKS,
    ONE_MONTH,
    THREE_MONTHS,
    SIX_MONTHS,
    ONE_YEAR,
)
from .credentials import CredentialLookup
from .fallback import first_success, Attempt, FallbackOutcome
from .geocoding import GeoCoder, BoundingBox, DEFAULT_BBOX
from .routing import GeoRouter
from .factory import build_geocoder, build_router, open_cache, load_credentials

__version__ = "1.0.0"

__all__ = [
    # Resolvers
    "GeoCoder",
    "GeoRouter",
    "BoundingBox",
    "DEFAULT_BBOX",

    # Data models
    "GeoLocation",
    "GeoRoute",
    "haversine_m",
    "DURATION_UNKNOWN",
    "DISTANCE_UNKNOWN",
    "DISTANCE_NOT_COMPUTED",

    # Cache
    "GeoCache",
    "CacheElement",
    "KeyValueStore",
    "SqliteStore",
    "MemoryStore",
    "position_key",
    "route_key",
    "ONE_DAY",
    "TWO_DAYS",
    "ONE_WEEK",
    "TWO_WEEKS",
    "ONE_MONTH",
    "THREE_MONTHS",
    "SIX_MONTHS",
    "ONE_YEAR",

    # Credentials and fallback
    "CredentialLookup",
    "first_success",
    "Attempt",
    "FallbackOutcome",

    # Wiring
    "build_geocoder",
    "build_router",
    "open_cache",
    "load_credentials",

    # Errors
    "GeoResolveError",
    "ProviderError",
    "ProviderUnavailable",
    "CacheIOError",
]
