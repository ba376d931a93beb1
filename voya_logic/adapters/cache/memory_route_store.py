"""Thread-safe in-memory route cache store.

Entries are keyed by (origin_hash, destination_hash). Expired entries
are never evicted here; the RouteCache service ignores them at read time
and the next write for the same key replaces them.

Key properties:
- Thread-safe with RLock
- Idempotent upsert by composite key
- Statistics tracking
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from ...domain.models import RouteCacheEntry


@dataclass
class InMemoryRouteCacheStore:
    """Thread-safe in-memory storage for route cache entries.

    Implements RouteCacheStorePort.

    Attributes:
        name: Store name for logging

    Example:
        store = InMemoryRouteCacheStore(name="routes")
        store.upsert(entry)
        store.find(entry.origin_hash, entry.destination_hash)
    """

    name: str = "routes"

    _store: Dict[Tuple[str, str], RouteCacheEntry] = field(
        default_factory=dict, repr=False
    )
    _lock: threading.RLock = field(default_factory=threading.RLock, repr=False)
    _logger: logging.Logger = field(init=False, repr=False)

    # Statistics
    _hits: int = field(default=0, repr=False)
    _misses: int = field(default=0, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(f"cache.{self.name}")

    def find(self, origin_hash: str, destination_hash: str) -> Optional[RouteCacheEntry]:
        """Get the stored entry for a directional key.

        Args:
            origin_hash: Hash of the origin coordinates.
            destination_hash: Hash of the destination coordinates.

        Returns:
            The stored entry (possibly expired), or None.
        """
        with self._lock:
            entry = self._store.get((origin_hash, destination_hash))
            if entry is None:
                self._misses += 1
            else:
                self._hits += 1
            return entry

    def upsert(self, entry: RouteCacheEntry) -> None:
        """Insert or replace the entry for its key.

        Args:
            entry: The entry to store.
        """
        with self._lock:
            self._store[entry.key] = entry
            self._logger.debug(
                "Route cache entry set",
                extra={"key": entry.key, "expires_at": entry.expires_at.isoformat()},
            )

    def clear(self) -> int:
        """Clear all entries from the store.

        Returns:
            Number of entries that were cleared.
        """
        with self._lock:
            count = len(self._store)
            self._store.clear()
            self._hits = 0
            self._misses = 0
            self._logger.info("Route cache cleared", extra={"entries_cleared": count})
            return count

    def size(self) -> int:
        """Return the number of stored entries, stale ones included."""
        with self._lock:
            return len(self._store)

    def stats(self) -> Dict[str, Any]:
        """Return store statistics.

        Returns:
            Dictionary with hit/miss counts and size.
        """
        with self._lock:
            total = self._hits + self._misses
            hit_rate = (self._hits / total * 100) if total > 0 else 0.0
            return {
                "size": len(self._store),
                "hits": self._hits,
                "misses": self._misses,
                "hit_rate_percent": round(hit_rate, 1),
            }
