"""Logic service - Main orchestrator for scheduling requests.

Resolves places and closures from the catalog, reads builder settings,
runs the day scheduler, collects warnings and hands run metadata to the
audit collaborator.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field, replace
from datetime import date, datetime
from typing import Any, Dict, Optional, Sequence, Union

from ..clock import calendar_date, parse_clock, parse_date
from ..domain.models import (
    Closure,
    Event,
    LogicRunLog,
    Place,
    Route,
    ScheduledEvent,
    TriggerType,
    ValidationResult,
)
from ..ports.audit import RunLogPort
from ..ports.catalog import PlaceCatalogPort, SettingsPort
from ..adapters.settings.memory_settings import (
    DAY_START_TIME,
    LOGIC_TIMEZONE,
    TRANSITION_BUFFER_MIN,
)
from .route_cache import RouteCache
from .scheduler import DayAutoScheduler, ScheduleOptions
from .time_window import TimeWindowValidator


@dataclass(frozen=True)
class ScheduleRequest:
    """A request to schedule one day.

    Attributes:
        date: Scheduling date
        events: Stops by place_id and relative order
        day_start_time: Overrides the ``day_start_time`` setting
        transition_buffer_min: Overrides ``default_transition_buffer_min``
        trip_id: Trip the day belongs to, for the run log
        day_index: Day position within the trip, for the run log
        trigger_type: What caused the run
    """

    date: Union[date, datetime, str]
    events: Sequence[Event]
    day_start_time: Optional[str] = None
    transition_buffer_min: Optional[int] = None
    trip_id: Optional[str] = None
    day_index: Optional[int] = None
    trigger_type: TriggerType = TriggerType.API_MANUAL


@dataclass(frozen=True)
class ScheduleResponse:
    events: tuple[ScheduledEvent, ...]
    warnings: tuple[str, ...] = ()


@dataclass
class LogicService:
    """Application service for day scheduling, validation and routing.

    Attributes:
        catalog: Place and closure lookups
        settings: Builder settings
        route_cache: Cached route resolution
        run_log: Audit collaborator, optional
    """

    catalog: PlaceCatalogPort
    settings: SettingsPort
    route_cache: RouteCache
    run_log: Optional[RunLogPort] = None

    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    def auto_schedule(
        self, request: ScheduleRequest, user_id: Optional[str] = None
    ) -> ScheduleResponse:
        """Schedule one day of stops.

        Args:
            request: Date, events and optional overrides.
            user_id: User who triggered the run, for the run log.

        Returns:
            ScheduleResponse with scheduled events and warnings.

        Raises:
            InvalidDateError: If the request date cannot be parsed.
            InvalidTimeFormatError: If the day start time is malformed.
            InvalidCoordinatesError: If a catalog place has malformed coordinates.
        """
        started = time.perf_counter()
        # Fails fast on an unparseable date before any lookup
        parse_date(request.date)
        timezone = self._string_setting(LOGIC_TIMEZONE, "Asia/Kolkata")
        day = calendar_date(request.date, timezone)

        day_start = request.day_start_time or self._string_setting(DAY_START_TIME, "09:00")
        parse_clock(day_start)
        if request.transition_buffer_min is not None:
            buffer = request.transition_buffer_min
        else:
            buffer = self._numeric_setting(TRANSITION_BUFFER_MIN, 10)

        warnings: list[str] = []
        events, closures = self._resolve_places(request.events, day, warnings)

        scheduler = DayAutoScheduler(
            route_fn=self.route_cache.resolve_with_cache,
            validator=TimeWindowValidator(timezone=timezone),
        )
        schedule = scheduler.run(
            events,
            ScheduleOptions(
                date=request.date,
                day_start_time=day_start,
                transition_buffer_min=buffer,
                timezone=timezone,
                closures_by_place_id=closures,
            ),
        )
        warnings.extend(schedule.warnings)

        invalid_count = sum(1 for e in schedule.events if not e.is_valid)
        if invalid_count > 0:
            warnings.append(f"INVALID_EVENTS:{invalid_count}")

        total_ms = int(round((time.perf_counter() - started) * 1000))
        self._write_run_log(
            LogicRunLog(
                trigger_type=request.trigger_type,
                trip_id=request.trip_id,
                day_index=request.day_index,
                triggered_by=user_id,
                input_event_count=len(request.events),
                output_event_count=len(schedule.events),
                warnings=tuple(warnings),
                timings_ms=replace(schedule.timings, total=max(total_ms, schedule.timings.total)),
                created_at=datetime.now().astimezone(),
            )
        )
        return ScheduleResponse(events=schedule.events, warnings=tuple(warnings))

    def reorder_and_recalculate(
        self, request: ScheduleRequest, user_id: Optional[str] = None
    ) -> ScheduleResponse:
        """Re-run scheduling after the user reordered the day's stops."""
        return self.auto_schedule(replace(request, trigger_type=TriggerType.DRAG_DROP), user_id)

    def validate_event(
        self,
        day: Union[date, datetime, str],
        start_time: str,
        place: Optional[Place] = None,
        place_id: Optional[str] = None,
    ) -> ValidationResult:
        """Validate a single visit.

        An inline ``place`` is validated as given; otherwise the place and
        its closure for that date come from the catalog.

        Raises:
            InvalidDateError: If ``day`` cannot be parsed.
        """
        timezone = self._string_setting(LOGIC_TIMEZONE, "Asia/Kolkata")
        closure: Optional[Closure] = None

        if place is None and place_id is not None:
            place = self.catalog.get_place(place_id)
            if place is not None:
                closure = self.catalog.get_closure(place.place_id, calendar_date(day, timezone))

        return TimeWindowValidator(timezone=timezone).validate(
            place, day, start_time, closure=closure
        )

    def calculate_route(self, origin: Any, destination: Any) -> Route:
        """Cached route between two points.

        Raises:
            InvalidCoordinatesError: If either point is malformed.
        """
        return self.route_cache.resolve_with_cache(origin, destination)

    def _resolve_places(
        self, events: Sequence[Event], day: date, warnings: list[str]
    ) -> tuple[list[Event], Dict[str, Closure]]:
        resolved: list[Event] = []
        closures: Dict[str, Closure] = {}

        for event in events:
            place_id = str(event.place_id)
            place = event.place or self.catalog.get_place(place_id)
            if place is None:
                warnings.append(f"PLACE_NOT_FOUND:{place_id}")
            elif place_id not in closures:
                closure = self.catalog.get_closure(place_id, day)
                if closure is not None:
                    closures[place_id] = closure
            resolved.append(replace(event, place_id=place_id, place=place))

        return resolved, closures

    def _write_run_log(self, entry: LogicRunLog) -> None:
        if self.run_log is None:
            return
        try:
            self.run_log.write(entry)
        except Exception as e:
            self._logger.warning(
                "Run log write failed",
                extra={"trip_id": entry.trip_id, "error": str(e)},
            )

    def _string_setting(self, key: str, fallback: str) -> str:
        value = self.settings.get(key)
        return fallback if value is None else str(value)

    def _numeric_setting(self, key: str, fallback: float) -> float:
        value = self.settings.get(key)
        try:
            return float(value) if value is not None else fallback
        except (TypeError, ValueError):
            self._logger.warning(
                "Non-numeric setting, using fallback",
                extra={"key": key, "value": repr(value)},
            )
            return fallback
