"""Itinerary adapters - Implementations of the ItineraryRepositoryPort."""

from .memory_repository import InMemoryItineraryRepository

__all__ = ["InMemoryItineraryRepository"]
