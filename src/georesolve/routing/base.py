"""Routing provider interface."""

from __future__ import annotations

from abc import ABC, abstractmethod

from ..models import GeoLocation, GeoRoute
from ..provider import HttpProvider


class RoutingProvider(HttpProvider, ABC):
    """An external service that computes a driving route between two locations."""

    @abstractmethod
    def route(self, start: GeoLocation, destination: GeoLocation) -> GeoRoute:
        """
        Compute the recommended route from ``start`` to ``destination``.

        Returns:
            GeoRoute with duration (seconds), distance (km) and, where the
            service provides geometry, the waypoints along the way

        Raises:
            ProviderError: On transport failures or unusable responses
            ProviderUnavailable: If the provider's credential is missing
        """
