"""
Address to coordinate resolution with provider fallback.

The resolver consults the cache first, then asks each geocoding provider in
turn and keeps the first answer that lies inside the plausibility region.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from ..cache import GeoCache
from ..credentials import CredentialLookup
from ..errors import CacheIOError
from ..fallback import first_success
from ..models import GeoLocation
from ..provider import DEFAULT_TIMEOUT_SEC
from .base import DEFAULT_BBOX, BoundingBox, GeocodingProvider
from .providers import default_geocoding_providers

logger = logging.getLogger(__name__)


class GeoCoder:
    """
    Finds real world locations by name or postal address.

    Args:
        providers: Providers in fallback order (defaults to MapQuest, LocationIQ)
        credentials: Key lookup handed to the default providers
        bbox: Region results must fall into to be accepted
        verbose: Log progress messages at INFO instead of DEBUG
        timeout: Per-request timeout for the default providers (seconds)
    """

    def __init__(
        self,
        providers: Optional[Sequence[GeocodingProvider]] = None,
        credentials: Optional[CredentialLookup] = None,
        bbox: BoundingBox = DEFAULT_BBOX,
        verbose: bool = False,
        timeout: float = DEFAULT_TIMEOUT_SEC,
    ):
        self.credentials = credentials if credentials is not None else CredentialLookup()
        if providers is None:
            providers = default_geocoding_providers(self.credentials, timeout=timeout)
        self.providers: List[GeocodingProvider] = list(providers)
        self.bbox = bbox
        self.verbose = verbose

    def _progress(self, message: str) -> None:
        logger.log(logging.INFO if self.verbose else logging.DEBUG, message)

    def is_plausible(self, location: Optional[GeoLocation]) -> bool:
        """True if ``location`` lies inside the configured bounding box."""
        return self.bbox.contains(location)

    def find(self, address: str, cache: Optional[GeoCache] = None) -> Optional[GeoLocation]:
        """
        Resolve ``address`` to a location.

        Args:
            address: Postal address or name of the place
            cache: Optional cache consulted before and filled after the lookup

        Returns:
            The location, or None if no provider produced a plausible result

        Raises:
            ValueError: If ``address`` is empty
        """
        if not address:
            raise ValueError("Cannot find '' on earth, address must not be empty")

        if cache is not None:
            try:
                cached = cache.read_position(address)
            except CacheIOError as exc:
                logger.warning(f"Could not read cache for '{address}': {exc}")
                cached = None
            if cached is not None:
                self._progress(f"Using cache to find {address}")
                return cached
        else:
            logger.warning("GeoCoder is not using any cache")

        outcome = first_success(
            self.providers,
            lambda provider: provider.geocode(address),
            accept=self.is_plausible,
            subject=f"'{address}'",
            verbose=self.verbose,
            log=logger,
        )
        if not outcome.found:
            logger.warning(f"Could not find '{address}' using any provider")
            return None

        if cache is not None:
            try:
                cache.store_position(address, outcome.value)
            except CacheIOError as exc:
                logger.warning(f"Could not cache location for '{address}': {exc}")

        return outcome.value
