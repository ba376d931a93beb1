"""Catalog adapters - Implementations of the PlaceCatalogPort."""

from .memory_catalog import InMemoryPlaceCatalog

__all__ = ["InMemoryPlaceCatalog"]
