"""
Duration matrix computation with size guardrails.

This module encapsulates the OSRM table request used for one-to-many
duration matrices, providing:
- Table size validation with helpful error messages
- Source/destination index encoding for the /table service
- Mapping of the returned duration column onto GeoRoute results

Matrices are answered by a single provider; there is no fallback chain and
no retry, so provider failures reach the caller.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

from ..errors import ProviderError
from ..models import DISTANCE_NOT_COMPUTED, DURATION_UNKNOWN, GeoLocation, GeoRoute
from .providers import OSRMProvider


# -----------------------------
# Constants
# -----------------------------

# osrm-routed rejects larger tables unless started with --max-table-size
MAX_TABLE_SIZE = 100


# -----------------------------
# Data Models
# -----------------------------

@dataclass
class MatrixRequest:
    """One destination, many starts."""
    destination: GeoLocation
    starts: List[GeoLocation]

    @property
    def locations(self) -> List[GeoLocation]:
        """Destination first, then every start (OSRM coordinate order)."""
        return [self.destination] + self.starts


def build_matrix_request(destination: GeoLocation, starts: Sequence[Optional[GeoLocation]]) -> MatrixRequest:
    """
    Create a matrix request, dropping ``None`` starts.

    Raises:
        ValueError: If there is no destination or no start left
    """
    if destination is None:
        raise ValueError("destination may not be None")
    if starts is None:
        raise ValueError("there must be at least one start to calculate a matrix")

    request = MatrixRequest(
        destination=destination,
        starts=[start for start in starts if start is not None],
    )
    if not request.starts:
        raise ValueError("there must be at least one start to calculate a matrix")
    return request


# -----------------------------
# Limit Validation
# -----------------------------

def validate_matrix_request(request: MatrixRequest, max_table_size: Optional[int] = MAX_TABLE_SIZE) -> None:
    """
    Validate a matrix request against the table size limit.

    Args:
        request: Matrix request to validate
        max_table_size: Largest coordinate count the server accepts (None = unlimited)

    Raises:
        ValueError: If the request exceeds the limit, with suggestions
    """
    n_locations = len(request.locations)
    if max_table_size is None or n_locations <= max_table_size:
        return

    batch_size = max_table_size - 1
    msg_parts = [
        "Duration matrix request exceeds the table size limit:",
        f"  Requested: 1 destination + {len(request.starts)} starts = {n_locations} coordinates",
        f"  Maximum:   {max_table_size} coordinates",
        "",
        "Suggestions to fix this:",
        f"  1. Batch your starts (process in chunks of {batch_size})",
        "  2. Pre-filter starts by bee-line distance to the destination",
        "  3. Raise --max-table-size on the local osrm-routed server and max_table_size here",
    ]
    raise ValueError("\n".join(msg_parts))


# -----------------------------
# API Client
# -----------------------------

def table_params(request: MatrixRequest) -> Dict[str, str]:
    """Index parameters: every start is a source, the destination (index 0) the only target."""
    return {
        "destinations": "0",
        "sources": ";".join(str(i) for i in range(1, len(request.starts) + 1)),
    }


def _duration(row: Any) -> float:
    value = row[0]
    # OSRM reports unreachable pairs as null
    return DURATION_UNKNOWN if value is None else float(value)


def compute_duration_matrix(request: MatrixRequest, provider: OSRMProvider) -> List[GeoRoute]:
    """
    Compute travel durations from every start to the destination.

    Args:
        request: Matrix request parameters
        provider: OSRM server answering the /table request

    Returns:
        One GeoRoute per start, in request order, with ``duration`` filled in
        and ``distance`` set to DISTANCE_NOT_COMPUTED

    Raises:
        ProviderError: If the request fails or the response is malformed
    """
    data = provider.table(request.locations, table_params(request))

    try:
        durations = data["durations"]
        if len(durations) != len(request.starts):
            raise ProviderError(
                provider.name,
                f"expected {len(request.starts)} durations, got {len(durations)}",
            )
        return [
            GeoRoute(
                start=start,
                destination=request.destination,
                duration=_duration(row),
                distance=DISTANCE_NOT_COMPUTED,
            )
            for start, row in zip(request.starts, durations)
        ]
    except (KeyError, IndexError, TypeError, ValueError) as exc:
        raise ProviderError(provider.name, f"unexpected response: {exc!r}") from exc
