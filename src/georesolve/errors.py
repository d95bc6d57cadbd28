"""
Exception types raised by georesolve.

Invalid caller input is reported with plain ``ValueError``. A lookup that no
provider could answer is not an error at all: resolvers return ``None``.
"""

from __future__ import annotations

from typing import Optional


class GeoResolveError(Exception):
    """Base class for georesolve failures."""


class ProviderError(GeoResolveError):
    """A provider could not be reached or returned an unusable response."""

    def __init__(self, provider: str, message: str):
        super().__init__(message)
        self.provider = provider


class ProviderUnavailable(GeoResolveError):
    """A provider cannot be used because its credential is missing."""

    def __init__(self, provider: str, service_id: Optional[str] = None):
        message = f"missing credential for '{service_id}'" if service_id else "provider unavailable"
        super().__init__(message)
        self.provider = provider
        self.service_id = service_id


class CacheIOError(GeoResolveError):
    """Reading from or writing to the cache backend failed."""
