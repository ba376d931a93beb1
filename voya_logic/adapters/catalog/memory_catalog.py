"""In-memory place catalog, optionally loaded from CSV files.

Implements PlaceCatalogPort over dictionaries. The CSV loader reads:
- places.csv: place_id, name, category, longitude, latitude,
  avg_duration_min, opens_at, closes_at, closed_days (``;``-separated)
- closures.csv: place_id, date (ISO), is_closed_full_day, closed_ranges
  (``HH:MM-HH:MM`` items, ``;``-separated), reason, created_at (ISO)
"""

from __future__ import annotations

import csv
import logging
import threading
from dataclasses import dataclass, field
from datetime import date, datetime
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Union

from ...domain.errors import ConfigurationError
from ...domain.models import Closure, Coordinates, Place, TimeRange

_TRUE_VALUES = {"1", "true", "yes", "y"}


@dataclass
class InMemoryPlaceCatalog:
    """Place and closure lookups held in memory.

    Attributes:
        places: Places keyed by place_id
        closures: Closures keyed by place_id
    """

    places: Dict[str, Place] = field(default_factory=dict)
    closures: Dict[str, List[Closure]] = field(default_factory=dict)

    _lock: threading.RLock = field(default_factory=threading.RLock, repr=False)
    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    def add_place(self, place: Place) -> None:
        with self._lock:
            self.places[place.place_id] = place

    def add_closure(self, closure: Closure) -> None:
        with self._lock:
            self.closures.setdefault(closure.place_id, []).append(closure)

    def get_place(self, place_id: str) -> Optional[Place]:
        """Look up a place by identifier.

        Args:
            place_id: The catalog identifier.

        Returns:
            The place, or None if not found.
        """
        with self._lock:
            return self.places.get(str(place_id))

    def get_closure(self, place_id: str, on: date) -> Optional[Closure]:
        """Return the most recently created closure for a place on a date.

        Args:
            place_id: The catalog identifier.
            on: Calendar date of the schedule.

        Returns:
            The matching closure, or None.
        """
        with self._lock:
            candidates = [
                c for c in self.closures.get(str(place_id), []) if c.date == on
            ]
        if not candidates:
            return None
        # Closures without a creation time rank oldest
        return max(
            candidates,
            key=lambda c: c.created_at.timestamp() if c.created_at else float("-inf"),
        )

    @classmethod
    def from_records(
        cls, places: Iterable[Place], closures: Iterable[Closure] = ()
    ) -> InMemoryPlaceCatalog:
        catalog = cls()
        for place in places:
            catalog.add_place(place)
        for closure in closures:
            catalog.add_closure(closure)
        return catalog

    @classmethod
    def from_csv(
        cls,
        places_path: Union[str, Path],
        closures_path: Optional[Union[str, Path]] = None,
    ) -> InMemoryPlaceCatalog:
        """Load a catalog from CSV files.

        Rows without a place_id are skipped.

        Raises:
            ConfigurationError: If a file cannot be read or a row is malformed.
        """
        catalog = cls()
        try:
            with Path(places_path).open(encoding="utf-8") as f:
                for row in csv.DictReader(f):
                    place = _place_from_row(row)
                    if place is not None:
                        catalog.add_place(place)

            if closures_path is not None:
                with Path(closures_path).open(encoding="utf-8") as f:
                    for row in csv.DictReader(f):
                        closure = _closure_from_row(row)
                        if closure is not None:
                            catalog.add_closure(closure)
        except (OSError, ValueError) as e:
            raise ConfigurationError(
                f"Failed to load place catalog: {e}",
                setting_name=str(places_path),
                cause=e,
            )

        catalog._logger.info(
            "Place catalog loaded",
            extra={
                "places": len(catalog.places),
                "closures": sum(len(v) for v in catalog.closures.values()),
            },
        )
        return catalog


def _cell(row: Dict[str, str], key: str) -> str:
    return (row.get(key) or "").strip()


def _place_from_row(row: Dict[str, str]) -> Optional[Place]:
    place_id = _cell(row, "place_id")
    if not place_id:
        return None

    lon, lat = _cell(row, "longitude"), _cell(row, "latitude")
    location = Coordinates(float(lon), float(lat)) if lon and lat else None
    duration = _cell(row, "avg_duration_min")

    return Place(
        place_id=place_id,
        name=_cell(row, "name") or place_id,
        category=_cell(row, "category") or "SIGHTSEEING",
        location=location,
        avg_duration_min=float(duration) if duration else None,
        opens_at=_cell(row, "opens_at") or "00:00",
        closes_at=_cell(row, "closes_at") or "23:59",
        closed_days=frozenset(
            d.strip().upper() for d in _cell(row, "closed_days").split(";") if d.strip()
        ),
    )


def _closure_from_row(row: Dict[str, str]) -> Optional[Closure]:
    place_id = _cell(row, "place_id")
    if not place_id:
        return None

    ranges = []
    for item in _cell(row, "closed_ranges").split(";"):
        if not item.strip():
            continue
        start, _, end = item.strip().partition("-")
        ranges.append(TimeRange(start_time=start or None, end_time=end or None))

    created_at = _cell(row, "created_at")
    return Closure(
        place_id=place_id,
        date=date.fromisoformat(_cell(row, "date")),
        is_closed_full_day=_cell(row, "is_closed_full_day").lower() in _TRUE_VALUES,
        closed_ranges=tuple(ranges),
        reason=_cell(row, "reason"),
        created_at=datetime.fromisoformat(created_at) if created_at else None,
    )
