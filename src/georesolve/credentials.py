"""
API key lookup for the external providers.

Keys are read from a plain text file with one ``<serviceID> <key>`` pair per
line, e.g.::

    mapquest PASTE_YOUR_MAPQUEST_KEY_HERE
    locationiq pk.0123456789abcdef

Environment variables named ``GEORESOLVE_KEY_<SERVICEID>`` take precedence
over the file. Reading a ``.env`` file is left to the application (see
``georesolve.factory.load_credentials``).
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Dict, Mapping, Optional, Union

logger = logging.getLogger(__name__)

DEFAULT_KEY_FILE = "API-Keys.txt"
ENV_PREFIX = "GEORESOLVE_KEY_"
PLACEHOLDER_PREFIX = "PASTE_"


class CredentialLookup:
    """Maps service IDs to API keys."""

    def __init__(
        self,
        path: Optional[Union[str, Path]] = DEFAULT_KEY_FILE,
        env_prefix: Optional[str] = ENV_PREFIX,
    ):
        self.path = Path(path) if path else None
        self.env_prefix = env_prefix
        self._keys: Optional[Dict[str, str]] = None

    @classmethod
    def from_mapping(cls, keys: Mapping[str, str]) -> "CredentialLookup":
        """Build a lookup from an in-memory mapping, ignoring file and environment."""
        lookup = cls(path=None, env_prefix=None)
        lookup._keys = dict(keys)
        return lookup

    def load(self) -> None:
        """Read the key file and environment overrides."""
        keys: Dict[str, str] = {}

        if self.path is not None:
            try:
                text = self.path.read_text(encoding="utf-8")
            except OSError as exc:
                logger.warning(f"Could not load API keys from {self.path}, keyed services unavailable: {exc}")
            else:
                keys.update(self._parse(text))

        if self.env_prefix:
            for name, value in os.environ.items():
                if name.startswith(self.env_prefix) and value.strip():
                    keys[name[len(self.env_prefix):].lower()] = value.strip()

        self._keys = keys

    def _parse(self, text: str) -> Dict[str, str]:
        keys: Dict[str, str] = {}
        for lineno, line in enumerate(text.splitlines(), start=1):
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            parts = line.split(None, 1)
            if len(parts) != 2:
                logger.warning(f"{self.path}:{lineno}: expected '<serviceID> <key>', skipping")
                continue
            keys[parts[0]] = parts[1].strip()
        return keys

    def get(self, service_id: str) -> Optional[str]:
        """Return the key for ``service_id`` or None if there is none."""
        if self._keys is None:
            self.load()
        return self._keys.get(service_id)

    def has(self, service_id: str) -> bool:
        """True if a real (non-placeholder) key is configured for ``service_id``."""
        key = self.get(service_id)
        return key is not None and not key.startswith(PLACEHOLDER_PREFIX)

    def set(self, service_id: str, key: str) -> None:
        if self._keys is None:
            self.load()
        self._keys[service_id] = key
