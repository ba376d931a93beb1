"""Catalog ports - Read-only place, closure and settings lookups."""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING, Any, Optional, Protocol

if TYPE_CHECKING:
    from ..domain.models import Closure, Place


class PlaceCatalogPort(Protocol):
    """Port for the external place catalog."""

    def get_place(self, place_id: str) -> Optional[Place]:
        """Look up a place by identifier.

        Returns:
            The place, or None if unknown.
        """
        ...

    def get_closure(self, place_id: str, on: date) -> Optional[Closure]:
        """Look up the closure that applies to a place on a calendar date.

        When several closures exist for the same date, the most recently
        created one wins.
        """
        ...


class SettingsPort(Protocol):
    """Port for key/value builder settings."""

    def get(self, key: str) -> Optional[Any]:
        """Return the stored value for ``key``, or a default if unset."""
        ...
