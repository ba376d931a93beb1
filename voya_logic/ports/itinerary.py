"""Itinerary repository port."""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Protocol

if TYPE_CHECKING:
    from ..domain.models import Itinerary


class ItineraryRepositoryPort(Protocol):
    """Port for itinerary persistence.

    update() must run ``fn`` and store its result as one atomic step, so
    a lock check inside ``fn`` cannot race with a concurrent lock().
    """

    def get(self, itinerary_id: str) -> Itinerary:
        """Raises ItineraryNotFoundError if absent."""
        ...

    def save(self, itinerary: Itinerary) -> None:
        ...

    def update(
        self, itinerary_id: str, fn: Callable[[Itinerary], Itinerary]
    ) -> Itinerary:
        """Atomically replace the stored itinerary with ``fn(current)``.

        Exceptions raised by ``fn`` propagate and leave the store untouched.
        """
        ...
