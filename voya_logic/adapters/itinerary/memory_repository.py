"""In-memory itinerary repository.

Implements ItineraryRepositoryPort. update() holds the store lock while
reading, transforming and writing, so a lock check performed inside the
transform sees the same state the write replaces.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Callable, Dict

from ...domain.errors import ItineraryNotFoundError
from ...domain.models import Itinerary


@dataclass
class InMemoryItineraryRepository:
    """Thread-safe itinerary storage keyed by itinerary_id."""

    _store: Dict[str, Itinerary] = field(default_factory=dict, repr=False)
    _lock: threading.RLock = field(default_factory=threading.RLock, repr=False)
    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    def get(self, itinerary_id: str) -> Itinerary:
        with self._lock:
            itinerary = self._store.get(itinerary_id)
        if itinerary is None:
            raise ItineraryNotFoundError(
                f"Itinerary not found: {itinerary_id}",
                itinerary_id=itinerary_id,
            )
        return itinerary

    def save(self, itinerary: Itinerary) -> None:
        with self._lock:
            self._store[itinerary.itinerary_id] = itinerary

    def update(
        self, itinerary_id: str, fn: Callable[[Itinerary], Itinerary]
    ) -> Itinerary:
        """Replace the stored itinerary with ``fn(current)`` atomically.

        Raises:
            ItineraryNotFoundError: If no itinerary has this identifier.
        """
        with self._lock:
            current = self.get(itinerary_id)
            updated = fn(current)
            self._store[itinerary_id] = updated
        self._logger.debug("Itinerary updated", extra={"itinerary_id": itinerary_id})
        return updated
