"""Route cache storage port.

Implementations:
- adapters/cache/memory_route_store.py (InMemoryRouteCacheStore) - Production
- adapters/cache/null_route_store.py (NullRouteCacheStore) - Caching disabled

The store persists raw entries keyed by (origin_hash, destination_hash).
It does not interpret expiry: stale rows may be returned by find() and
are filtered by the RouteCache service at read time.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional, Protocol

if TYPE_CHECKING:
    from ..domain.models import RouteCacheEntry


class RouteCacheStorePort(Protocol):
    """Port for route cache persistence."""

    def find(self, origin_hash: str, destination_hash: str) -> Optional[RouteCacheEntry]:
        """Get the stored entry for a directional key, fresh or not.

        Args:
            origin_hash: Hash of the origin coordinates.
            destination_hash: Hash of the destination coordinates.

        Returns:
            The stored entry, or None if the key was never written.
        """
        ...

    def upsert(self, entry: RouteCacheEntry) -> None:
        """Insert or replace the entry stored under ``entry.key``.

        Args:
            entry: The entry to store.
        """
        ...

    def clear(self) -> int:
        """Remove all entries.

        Returns:
            Number of entries that were cleared.
        """
        ...

    def size(self) -> int:
        """Return the number of stored entries, stale ones included."""
        ...
