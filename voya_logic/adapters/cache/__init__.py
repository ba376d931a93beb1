"""Cache adapters - Implementations of the RouteCacheStorePort.

Available implementations:
- InMemoryRouteCacheStore: Thread-safe in-memory store
- NullRouteCacheStore: No-op store (always misses)
"""

from .memory_route_store import InMemoryRouteCacheStore
from .null_route_store import NullRouteCacheStore

__all__ = ["InMemoryRouteCacheStore", "NullRouteCacheStore"]
