"""Null route cache store.

Never keeps anything, so every lookup misses and every route is resolved
fresh. Wired by the container when caching is disabled.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ...domain.models import RouteCacheEntry


@dataclass
class NullRouteCacheStore:
    """No-op store - always misses.

    Implements RouteCacheStorePort.
    """

    name: str = "null"

    def find(self, origin_hash: str, destination_hash: str) -> Optional[RouteCacheEntry]:
        return None

    def upsert(self, entry: RouteCacheEntry) -> None:
        pass

    def clear(self) -> int:
        return 0

    def size(self) -> int:
        return 0
