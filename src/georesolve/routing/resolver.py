"""
Route calculation with provider fallback.

GeoRouter calculates single routes (cached, with fallback across providers),
one-to-many duration matrices (local server only) and picks the fastest of a
set of routes.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from ..cache import GeoCache
from ..credentials import CredentialLookup
from ..errors import CacheIOError
from ..fallback import first_success
from ..models import GeoLocation, GeoRoute
from ..provider import DEFAULT_TIMEOUT_SEC
from .base import RoutingProvider
from .matrix import MAX_TABLE_SIZE, build_matrix_request, compute_duration_matrix, validate_matrix_request
from .providers import LOCAL_OSRM_URL, OSRMProvider, default_routing_providers
from .supervisor import NullSupervisor, ServerSupervisor

logger = logging.getLogger(__name__)


class GeoRouter:
    """
    Calculates routes between GeoLocations.

    Args:
        providers: Providers in fallback order (defaults to local OSRM,
            OSRM demo, OpenRouteService)
        matrix_provider: OSRM server used for duration matrices (defaults to
            the local server, reusing its provider from the chain if present)
        supervisor: Keeps the local route server alive (defaults to none)
        credentials: Key lookup handed to the default providers
        verbose: Log progress messages at INFO instead of DEBUG
        timeout: Per-request timeout for the default providers (seconds)
        max_table_size: Coordinate limit for matrix requests (None = unlimited)
    """

    def __init__(
        self,
        providers: Optional[Sequence[RoutingProvider]] = None,
        matrix_provider: Optional[OSRMProvider] = None,
        supervisor: Optional[ServerSupervisor] = None,
        credentials: Optional[CredentialLookup] = None,
        verbose: bool = False,
        timeout: float = DEFAULT_TIMEOUT_SEC,
        max_table_size: Optional[int] = MAX_TABLE_SIZE,
    ):
        self.credentials = credentials if credentials is not None else CredentialLookup()
        if providers is None:
            providers = default_routing_providers(self.credentials, timeout=timeout)
        self.providers: List[RoutingProvider] = list(providers)

        if matrix_provider is None:
            matrix_provider = next(
                (p for p in self.providers if isinstance(p, OSRMProvider) and p.base_url == LOCAL_OSRM_URL),
                None,
            ) or OSRMProvider(LOCAL_OSRM_URL, name="OSRM local", timeout=timeout)
        self.matrix_provider = matrix_provider

        self.supervisor = supervisor if supervisor is not None else NullSupervisor()
        self.verbose = verbose
        self.max_table_size = max_table_size

    def _progress(self, message: str) -> None:
        logger.log(logging.INFO if self.verbose else logging.DEBUG, message)

    def _ensure_local_server(self) -> None:
        try:
            if not self.supervisor.is_running():
                self.supervisor.ensure_running()
        except Exception as exc:
            # the remaining providers do not need the local server
            logger.warning(f"Could not start local route server: {exc}")

    def calculate_route(
        self,
        start: GeoLocation,
        destination: GeoLocation,
        cache: Optional[GeoCache] = None,
    ) -> Optional[GeoRoute]:
        """
        Calculate the recommended route from ``start`` to ``destination``.

        Args:
            start: The start
            destination: The destination
            cache: Optional cache consulted before and filled after the lookup

        Returns:
            The route, or None if every provider failed

        Raises:
            ValueError: If start or destination is None
        """
        if start is None or destination is None:
            raise ValueError("start and destination may not be None")

        self._ensure_local_server()

        if cache is not None:
            try:
                cached = cache.read_route(start, destination)
            except CacheIOError as exc:
                logger.warning(f"Could not read cache for route {start} -> {destination}: {exc}")
                cached = None
            if cached is not None:
                self._progress(f"Using cache to route from {start} to {destination}")
                return cached
        else:
            logger.warning("GeoRouter is not using any cache")

        outcome = first_success(
            self.providers,
            lambda provider: provider.route(start, destination),
            subject=f"route {start} -> {destination}",
            verbose=self.verbose,
            log=logger,
        )
        if not outcome.found:
            logger.warning(f"Could not find route from {start} to {destination} using any provider")
            return None

        route = outcome.value
        if route.start is None:
            route.start = start
        if route.destination is None:
            route.destination = destination

        if cache is not None:
            try:
                cache.store_route(start, destination, route)
            except CacheIOError as exc:
                logger.warning(f"Could not cache route {start} -> {destination}: {exc}")

        return route

    def calculate_matrix(
        self,
        destination: GeoLocation,
        starts: Sequence[GeoLocation],
    ) -> List[GeoRoute]:
        """
        Calculate the travel duration from every start to ``destination``.

        Uses the matrix provider only; there is no fallback.

        Returns:
            One GeoRoute per (non-None) start, in input order; distances are
            DISTANCE_NOT_COMPUTED

        Raises:
            ValueError: If there is no destination, no start, or too many starts
            ProviderError: If the matrix request fails
        """
        request = build_matrix_request(destination, starts)
        validate_matrix_request(request, self.max_table_size)

        self._ensure_local_server()
        self._progress(
            f"Calculating duration matrix for {len(request.starts)} starts to {destination} "
            f"using {self.matrix_provider.name}"
        )
        return compute_duration_matrix(request, self.matrix_provider)

    def get_shortest_route(self, routes: Sequence[GeoRoute]) -> GeoRoute:
        """
        Return the route with the smallest duration.

        Routes with an unknown duration rank behind every known one; on equal
        durations the earliest route wins.

        Raises:
            ValueError: If ``routes`` is None, empty or holds only None
        """
        if not routes:
            raise ValueError("routes may not be None or empty")
        if len(routes) == 1:
            return routes[0]

        candidates = [route for route in routes if route is not None]
        if not candidates:
            raise ValueError("routes may not contain only None")
        return min(candidates, key=lambda route: (not route.has_duration, route.duration))
