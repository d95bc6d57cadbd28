"""
Expiring cache for geocoding and routing results.

Entries are stored together with the time they were written and are only
returned while younger than the cache's durability. Stale entries are never
evicted actively; they simply read as misses until overwritten.

Persistence is delegated to a key/value store holding raw bytes:
- SqliteStore: durable single-file store that survives restarts
- MemoryStore: bounded in-process store (LRU)
"""

from __future__ import annotations

import logging
import sqlite3
import time
from datetime import timedelta
from pathlib import Path
from typing import Any, Callable, Dict, Literal, Optional, Protocol, Union

from cachetools import LRUCache
from pydantic import BaseModel, ValidationError

from .errors import CacheIOError
from .models import GeoLocation, GeoRoute

logger = logging.getLogger(__name__)


# -----------------------------
# Durability presets (seconds)
# -----------------------------

ONE_DAY = 24 * 60 * 60
TWO_DAYS = ONE_DAY * 2
ONE_WEEK = ONE_DAY * 7
TWO_WEEKS = ONE_WEEK * 2
ONE_MONTH = ONE_DAY * 30
THREE_MONTHS = ONE_MONTH * 3
SIX_MONTHS = ONE_MONTH * 6
ONE_YEAR = ONE_DAY * 365

DURABILITY_PRESETS: Dict[str, int] = {
    "one_day": ONE_DAY,
    "two_days": TWO_DAYS,
    "one_week": ONE_WEEK,
    "two_weeks": TWO_WEEKS,
    "one_month": ONE_MONTH,
    "three_months": THREE_MONTHS,
    "six_months": SIX_MONTHS,
    "one_year": ONE_YEAR,
}

ROUTE_KEY_SEPARATOR = "->"

Payload = Union[GeoLocation, GeoRoute]


# -----------------------------
# Key derivation
# -----------------------------

def position_key(address: str) -> str:
    """Cache key for an address lookup."""
    return address.lower()


def route_key(start: GeoLocation, destination: GeoLocation) -> str:
    """
    Cache key for a route lookup.

    Built from the string form of both endpoints, so a named location and the
    same coordinates rendered as a postal address produce different keys.
    """
    return f"{start}{ROUTE_KEY_SEPARATOR}{destination}"


# -----------------------------
# Backing stores
# -----------------------------

class KeyValueStore(Protocol):
    """Durable mapping of string keys to raw bytes."""

    def get(self, key: str) -> Optional[bytes]:
        ...

    def put(self, key: str, value: bytes) -> None:
        ...

    def close(self) -> None:
        ...


class SqliteStore:
    """Single-file SQLite key/value store."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self._conn = sqlite3.connect(str(self.path), check_same_thread=False)
            self._conn.execute(
                "CREATE TABLE IF NOT EXISTS cache (key TEXT PRIMARY KEY, value BLOB NOT NULL)"
            )
            self._conn.commit()
        except (OSError, sqlite3.Error) as exc:
            raise CacheIOError(f"Could not open cache file {self.path}: {exc}") from exc

    def get(self, key: str) -> Optional[bytes]:
        try:
            row = self._conn.execute("SELECT value FROM cache WHERE key = ?", (key,)).fetchone()
        except sqlite3.Error as exc:
            raise CacheIOError(f"Could not read '{key}' from {self.path}: {exc}") from exc
        return bytes(row[0]) if row else None

    def put(self, key: str, value: bytes) -> None:
        try:
            self._conn.execute(
                "INSERT OR REPLACE INTO cache (key, value) VALUES (?, ?)", (key, value)
            )
            self._conn.commit()
        except sqlite3.Error as exc:
            raise CacheIOError(f"Could not write '{key}' to {self.path}: {exc}") from exc

    def close(self) -> None:
        self._conn.close()


class MemoryStore:
    """In-process store; keeps the ``maxsize`` most recently used entries."""

    def __init__(self, maxsize: int = 4096):
        self._data: LRUCache[str, bytes] = LRUCache(maxsize=maxsize)

    def get(self, key: str) -> Optional[bytes]:
        return self._data.get(key)

    def put(self, key: str, value: bytes) -> None:
        self._data[key] = value

    def close(self) -> None:
        self._data.clear()

    def __len__(self) -> int:
        return len(self._data)


# -----------------------------
# Cache
# -----------------------------

_PAYLOAD_TYPES = {
    "location": GeoLocation,
    "route": GeoRoute,
}


class CacheElement(BaseModel):
    """A cached payload together with the time it was stored."""

    kind: Literal["location", "route"]
    stored_at: float
    payload: Dict[str, Any]

    @classmethod
    def wrap(cls, content: Payload, stored_at: float) -> "CacheElement":
        kind = "route" if isinstance(content, GeoRoute) else "location"
        return cls(kind=kind, stored_at=stored_at, payload=content.model_dump(mode="json"))

    def unwrap(self) -> Payload:
        return _PAYLOAD_TYPES[self.kind].model_validate(self.payload)

    def is_fresh(self, now: float, durability: float) -> bool:
        return now - self.stored_at < durability


class GeoCache:
    """
    Key/value cache with a fixed durability window.

    Args:
        store: Backing key/value store
        durability: Maximum entry age in seconds (or a ``timedelta``)
        clock: Returns the current time as epoch seconds
    """

    def __init__(
        self,
        store: KeyValueStore,
        durability: Union[float, timedelta] = ONE_MONTH,
        clock: Callable[[], float] = time.time,
    ):
        if isinstance(durability, timedelta):
            durability = durability.total_seconds()
        if durability <= 0:
            raise ValueError(f"Cache durability must be positive, got {durability}")
        self._store = store
        self.durability = float(durability)
        self._clock = clock

    @classmethod
    def open(cls, path: Union[str, Path], durability: Union[float, timedelta] = ONE_MONTH) -> "GeoCache":
        """Open (or create) a durable cache file."""
        return cls(SqliteStore(path), durability)

    def store(self, key: str, payload: Payload) -> None:
        """
        Store ``payload`` under ``key``, replacing any previous entry.

        Raises:
            CacheIOError: If the backing store cannot be written
        """
        element = CacheElement.wrap(payload, self._clock())
        self._store.put(key, element.model_dump_json().encode("utf-8"))

    def read(self, key: str) -> Optional[Payload]:
        """
        Return the payload stored under ``key`` if it has not expired.

        Raises:
            CacheIOError: If the backing store cannot be read
        """
        raw = self._store.get(key)
        if raw is None:
            return None

        try:
            element = CacheElement.model_validate_json(raw)
            content = element.unwrap()
        except ValidationError as exc:
            logger.warning(f"Ignoring unreadable cache entry '{key}': {exc}")
            return None

        if not element.is_fresh(self._clock(), self.durability):
            logger.debug(f"Cache entry '{key}' expired")
            return None
        return content

    # Typed helpers

    def store_position(self, address: str, location: GeoLocation) -> None:
        self.store(position_key(address), location)

    def read_position(self, address: str) -> Optional[GeoLocation]:
        content = self.read(position_key(address))
        return content if isinstance(content, GeoLocation) else None

    def store_route(self, start: GeoLocation, destination: GeoLocation, route: GeoRoute) -> None:
        self.store(route_key(start, destination), route)

    def read_route(self, start: GeoLocation, destination: GeoLocation) -> Optional[GeoRoute]:
        content = self.read(route_key(start, destination))
        return content if isinstance(content, GeoRoute) else None

    def close(self) -> None:
        self._store.close()
