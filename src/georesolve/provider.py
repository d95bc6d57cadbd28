"""Shared plumbing for providers reached over HTTP."""

from __future__ import annotations

from typing import Any, Dict, Optional

import httpx

from .credentials import CredentialLookup
from .errors import ProviderError, ProviderUnavailable

DEFAULT_TIMEOUT_SEC = 10.0


class HttpProvider:
    """
    Base class for provider adapters.

    Subclasses set ``name`` and, when the service needs an API key,
    ``service_id``. The HTTP client is created on first use unless one is
    injected.
    """

    name: str = "provider"
    service_id: Optional[str] = None

    def __init__(
        self,
        *,
        credentials: Optional[CredentialLookup] = None,
        timeout: float = DEFAULT_TIMEOUT_SEC,
        client: Optional[httpx.Client] = None,
    ):
        self.credentials = credentials
        self.timeout = timeout
        self._client = client
        self._owns_client = client is None

    @property
    def client(self) -> httpx.Client:
        if self._client is None:
            self._client = httpx.Client(timeout=self.timeout)
        return self._client

    def is_available(self) -> bool:
        """False if the provider needs a credential that is not configured."""
        if self.service_id is None:
            return True
        return self.credentials is not None and self.credentials.has(self.service_id)

    def api_key(self) -> str:
        if not self.is_available():
            raise ProviderUnavailable(self.name, self.service_id)
        return self.credentials.get(self.service_id)

    def get_json(self, url: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """GET ``url`` and decode the JSON body, mapping failures to ProviderError."""
        try:
            response = self.client.get(url, params=params, timeout=self.timeout)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPError as exc:
            raise ProviderError(self.name, f"request failed: {exc}") from exc
        except ValueError as exc:
            raise ProviderError(self.name, f"response is not valid JSON: {exc}") from exc

    def close(self) -> None:
        if self._client is not None and self._owns_client:
            self._client.close()
            self._client = None

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"
