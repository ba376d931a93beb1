"""Time-window validation for a single scheduled event.

Decides whether a visit starting at a given clock time is allowed by the
place's weekly closed days, a date-specific closure and its daily opening
hours. Validation failures are returned as data, never raised.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Optional

from ..clock import parse_clock, resolve_weekday_name
from ..domain.errors import (
    InvalidClosureRangeError,
    InvalidDateError,
    InvalidPlaceHoursError,
    InvalidTimeFormatError,
)
from ..domain.models import (
    Closure,
    Place,
    TimeRange,
    ValidationReason,
    ValidationResult,
)

VALID = ValidationResult(valid=True)


def _invalid(reason: ValidationReason) -> ValidationResult:
    return ValidationResult(valid=False, reason=reason)


def overlaps(start_a: float, end_a: float, start_b: float, end_b: float) -> bool:
    """Half-open interval overlap test."""
    return start_a < end_b and end_a > start_b


def visit_duration(place: Place) -> float:
    """Average visit duration in minutes, 0 when unknown or negative."""
    try:
        minutes = float(place.avg_duration_min)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(minutes):
        return 0.0
    return max(0.0, minutes)


def closed_range_minutes(time_range: TimeRange) -> Optional[tuple[int, int]]:
    """Parse a closure range, or None if a bound is missing.

    Raises:
        InvalidClosureRangeError: If a bound is present but malformed.
    """
    if not time_range.start_time or not time_range.end_time:
        return None
    try:
        return parse_clock(time_range.start_time), parse_clock(time_range.end_time)
    except InvalidTimeFormatError as e:
        raise InvalidClosureRangeError(
            "Malformed closure range",
            cause=e,
            start_time=time_range.start_time,
            end_time=time_range.end_time,
        )


def opening_window(place: Place) -> tuple[int, int]:
    """Opening and closing minutes of a place.

    Raises:
        InvalidPlaceHoursError: If either bound is malformed.
    """
    try:
        return parse_clock(place.opens_at), parse_clock(place.closes_at)
    except InvalidTimeFormatError as e:
        raise InvalidPlaceHoursError(
            "Malformed place hours", cause=e, place_id=place.place_id
        )


@dataclass(frozen=True)
class TimeWindowValidator:
    """Validates events against opening hours and closures.

    Attributes:
        timezone: IANA timezone used to resolve the weekday of the date
    """

    timezone: str = "Asia/Kolkata"

    def validate(
        self,
        place: Optional[Place],
        day: Any,
        start_clock: Any,
        closure: Optional[Closure] = None,
        timezone: Optional[str] = None,
    ) -> ValidationResult:
        """Validate one event. The first failing rule decides the reason.

        Args:
            place: The place visited, or None if unknown.
            day: Scheduling date (date, datetime or date string).
            start_clock: Start time as HH:MM.
            closure: Closure for this place on this date, if any.
            timezone: Overrides the validator's timezone.

        Returns:
            ValidationResult with a reason when invalid.
        """
        if place is None:
            return _invalid(ValidationReason.PLACE_NOT_FOUND)

        try:
            start = parse_clock(start_clock)
        except InvalidTimeFormatError:
            return _invalid(ValidationReason.INVALID_TIME_FORMAT)

        end = start + visit_duration(place)

        try:
            weekday = resolve_weekday_name(day, timezone or self.timezone)
        except InvalidDateError:
            return _invalid(ValidationReason.INVALID_DATE)

        if weekday in place.closed_days:
            return _invalid(ValidationReason.CLOSED_ON_DAY)

        if closure is not None:
            if closure.is_closed_full_day:
                return _invalid(ValidationReason.CLOSED_SPECIAL_DATE)
            for time_range in closure.closed_ranges:
                try:
                    bounds = closed_range_minutes(time_range)
                except InvalidClosureRangeError:
                    return _invalid(ValidationReason.INVALID_CLOSURE_RANGE)
                if bounds is not None and overlaps(start, end, *bounds):
                    return _invalid(ValidationReason.CLOSED_SPECIAL_DATE)

        try:
            opens, closes = opening_window(place)
        except InvalidPlaceHoursError:
            return _invalid(ValidationReason.INVALID_PLACE_HOURS)

        if start < opens or start >= closes or end > closes:
            return _invalid(ValidationReason.CLOSED_AT_TIME)

        return VALID
