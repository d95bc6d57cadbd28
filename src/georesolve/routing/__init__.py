"""Routing: routes, duration matrices and the local route server."""

from .base import RoutingProvider
from .providers import (
    OSRMProvider,
    OpenRouteServiceProvider,
    default_routing_providers,
    format_coordinates,
    LOCAL_OSRM_URL,
    DEMO_OSRM_URL,
)
from .matrix import (
    MatrixRequest,
    build_matrix_request,
    validate_matrix_request,
    compute_duration_matrix,
    MAX_TABLE_SIZE,
)
from .supervisor import (
    ServerSupervisor,
    NullSupervisor,
    OSRMServerSupervisor,
)
from .resolver import GeoRouter

__all__ = [
    # Resolver
    "GeoRouter",

    # Providers
    "RoutingProvider",
    "OSRMProvider",
    "OpenRouteServiceProvider",
    "default_routing_providers",
    "format_coordinates",
    "LOCAL_OSRM_URL",
    "DEMO_OSRM_URL",

    # Duration matrix
    "MatrixRequest",
    "build_matrix_request",
    "validate_matrix_request",
    "compute_duration_matrix",
    "MAX_TABLE_SIZE",

    # Local server lifecycle
    "ServerSupervisor",
    "NullSupervisor",
    "OSRMServerSupervisor",
]
