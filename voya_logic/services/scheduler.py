"""Day auto-scheduler.

Assigns contiguous time slots to an ordered list of stops for one day,
validates every stop against its time window and fills the transit
between consecutive stops. The loop is strictly sequential: each start
time depends on every previous duration and transit.
"""

from __future__ import annotations

import logging
import math
import time
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Callable, Mapping, Optional, Sequence, Union

from ..clock import format_clock, parse_clock
from ..rounding import round_half_up
from ..domain.errors import InvalidCoordinatesError
from ..domain.models import (
    STATIC_ROUTE,
    Closure,
    DaySchedule,
    Event,
    PhaseTimings,
    Route,
    RouteProvider,
    ScheduledEvent,
)
from .time_window import TimeWindowValidator

RouteFn = Callable[[Any, Any], Route]


@dataclass(frozen=True)
class ScheduleOptions:
    """Inputs of one scheduling run besides the events themselves.

    Attributes:
        date: Scheduling date; defaults to today
        day_start_time: Start of the first stop (HH:MM)
        transition_buffer_min: Slack added after every transit, floored at 0
        timezone: Timezone used to resolve the weekday
        closures_by_place_id: Closure for each place on this date
    """

    date: Union[date, datetime, str, None] = None
    day_start_time: str = "09:00"
    transition_buffer_min: float = 10
    timezone: str = "Asia/Kolkata"
    closures_by_place_id: Mapping[str, Closure] = field(default_factory=dict)

    @property
    def buffer_minutes(self) -> float:
        try:
            buffer = float(self.transition_buffer_min)
        except (TypeError, ValueError):
            return 0.0
        return max(0.0, buffer) if math.isfinite(buffer) else 0.0


def _duration(event: Event) -> float:
    """Place duration, else the event override, else 0; never negative."""
    raw = event.place.avg_duration_min if event.place is not None else None
    if raw is None:
        raw = event.avg_duration_min
    return _non_negative(raw)


def _non_negative(value: Any) -> float:
    """Finite non-negative float, 0 for anything else."""
    try:
        number = float(value) if value is not None else 0.0
    except (TypeError, ValueError):
        return 0.0
    return max(0.0, number) if math.isfinite(number) else 0.0


def _order_key(event: Event) -> float:
    """Sort key; a missing or non-numeric order counts as 0."""
    try:
        order = float(event.order) if event.order is not None else 0.0
    except (TypeError, ValueError):
        return 0.0
    return order if not math.isnan(order) else 0.0


def _elapsed_ms(started: float) -> int:
    return int(round((time.perf_counter() - started) * 1000))


@dataclass
class DayAutoScheduler:
    """Schedules one day of events.

    Attributes:
        route_fn: Resolves transit between two coordinate pairs, usually
            RouteCache.resolve_with_cache; injectable for tests
        validator: Time-window validator
    """

    route_fn: RouteFn
    validator: TimeWindowValidator = field(default_factory=TimeWindowValidator)

    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    def schedule_day(
        self, events: Sequence[Event], options: Optional[ScheduleOptions] = None
    ) -> tuple[ScheduledEvent, ...]:
        """Schedule a day and return only the scheduled events."""
        return self.run(events, options).events

    def run(
        self, events: Sequence[Event], options: Optional[ScheduleOptions] = None
    ) -> DaySchedule:
        """Schedule a day.

        Args:
            events: Candidate stops, in any order.
            options: Day start, buffer, date, timezone and closures.

        Returns:
            DaySchedule with one ScheduledEvent per input event, in
            ascending dense order, plus warnings and phase timings.

        Raises:
            InvalidTimeFormatError: If the day start time is malformed.
            InvalidCoordinatesError: If a place carries malformed coordinates.
        """
        options = options or ScheduleOptions()
        if not events:
            return DaySchedule(events=())

        started = time.perf_counter()
        day = options.date if options.date is not None else date.today()
        buffer = options.buffer_minutes
        ordered = sorted(events, key=_order_key)
        warnings: list[str] = []
        validation_ms = 0.0
        route_ms = 0.0

        next_start = float(parse_clock(options.day_start_time))
        scheduled: list[ScheduledEvent] = []

        for index, event in enumerate(ordered):
            start_time = format_clock(next_start)
            end_min = next_start + _duration(event)
            end_time = format_clock(end_min)

            phase = time.perf_counter()
            closure = options.closures_by_place_id.get(str(event.place_id))
            validation = self.validator.validate(
                event.place, day, start_time, closure=closure, timezone=options.timezone
            )
            validation_ms += time.perf_counter() - phase

            route = STATIC_ROUTE
            if index < len(ordered) - 1:
                phase = time.perf_counter()
                route = self._transit(event, ordered[index + 1], index, warnings)
                route_ms += time.perf_counter() - phase

            scheduled.append(
                ScheduledEvent(
                    event=event,
                    order=index,
                    start_time=start_time,
                    end_time=end_time,
                    travel_time_min=route.travel_time_min,
                    distance_km=route.distance_km,
                    route_provider=route.provider,
                    validation_status=validation.status,
                    validation_reason=validation.reason,
                )
            )
            next_start = end_min + route.travel_time_min + buffer

        total_ms = _elapsed_ms(started)
        validation_total = int(round(validation_ms * 1000))
        route_total = int(round(route_ms * 1000))
        timings = PhaseTimings(
            validation=validation_total,
            route=route_total,
            schedule=max(0, total_ms - validation_total - route_total),
            total=total_ms,
        )
        self._logger.info(
            "Day scheduled",
            extra={
                "events": len(scheduled),
                "invalid": sum(1 for e in scheduled if not e.is_valid),
                "warnings": len(warnings),
                "total_ms": total_ms,
            },
        )
        return DaySchedule(events=tuple(scheduled), warnings=tuple(warnings), timings=timings)

    def _transit(
        self, current: Event, following: Event, index: int, warnings: list[str]
    ) -> Route:
        """Route from ``current`` to ``following``, degraded to STATIC on failure."""
        origin = current.place.location if current.place is not None else None
        destination = following.place.location if following.place is not None else None
        if origin is None or destination is None:
            return STATIC_ROUTE

        try:
            route = _sanitize(self.route_fn(origin, destination))
        except InvalidCoordinatesError:
            raise
        except Exception as e:
            self._logger.warning(
                "Transit resolution failed, using static route",
                extra={"order": index, "error": str(e)},
            )
            warnings.append(f"TRANSIT_UNAVAILABLE:{index}")
            return STATIC_ROUTE

        if route.provider is RouteProvider.HAVERSINE:
            warnings.append(f"ROUTE_FALLBACK:{index}")
        return route


def _sanitize(route: Route) -> Route:
    """Normalise a route from a custom route function.

    Negative or non-numeric figures become 0, fractional minutes round half
    up and an unknown provider name becomes STATIC.

    Raises:
        AttributeError: If ``route`` is not route-shaped.
    """
    try:
        provider = RouteProvider(route.provider)
    except ValueError:
        provider = RouteProvider.STATIC
    return Route(
        distance_km=_non_negative(route.distance_km),
        travel_time_min=round_half_up(_non_negative(route.travel_time_min)),
        provider=provider,
        cached=bool(getattr(route, "cached", False)),
    )
