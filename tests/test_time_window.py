"""Tests for single-event time-window validation."""

from dataclasses import replace
from datetime import date, datetime, timezone

import pytest

from voya_logic.domain.models import (
    Closure,
    Place,
    TimeRange,
    ValidationReason,
    ValidationStatus,
)
from voya_logic.services.time_window import TimeWindowValidator, overlaps

MONDAY = date(2026, 10, 19)
SUNDAY = date(2026, 10, 18)


@pytest.fixture
def validator():
    return TimeWindowValidator(timezone="Asia/Kolkata")


@pytest.fixture
def fort():
    return Place(
        place_id="fort",
        name="Red Fort",
        avg_duration_min=60,
        opens_at="09:00",
        closes_at="17:00",
        closed_days=frozenset({"SUNDAY"}),
    )


def closure(**kwargs):
    defaults = dict(place_id="fort", date=MONDAY, is_closed_full_day=False)
    defaults.update(kwargs)
    return Closure(**defaults)


class TestRuleOrder:
    def test_valid_visit(self, validator, fort):
        result = validator.validate(fort, MONDAY, "10:00")
        assert result.valid
        assert result.reason is None
        assert result.status is ValidationStatus.VALID

    def test_missing_place(self, validator):
        result = validator.validate(None, MONDAY, "10:00")
        assert result.reason is ValidationReason.PLACE_NOT_FOUND
        assert result.status is ValidationStatus.INVALID

    def test_malformed_start_time(self, validator, fort):
        result = validator.validate(fort, MONDAY, "9:00")
        assert result.reason is ValidationReason.INVALID_TIME_FORMAT

    def test_unparseable_date(self, validator, fort):
        result = validator.validate(fort, None, "10:00")
        assert result.reason is ValidationReason.INVALID_DATE

    def test_relative_date_string_is_invalid(self, validator, fort):
        result = validator.validate(fort, "tomorrow", "10:00")
        assert result.reason is ValidationReason.INVALID_DATE

    def test_time_format_checked_before_date(self, validator, fort):
        result = validator.validate(fort, None, "bad")
        assert result.reason is ValidationReason.INVALID_TIME_FORMAT

    def test_closed_weekday(self, validator, fort):
        result = validator.validate(fort, SUNDAY, "10:00")
        assert result.reason is ValidationReason.CLOSED_ON_DAY

    def test_closed_weekday_wins_over_closure(self, validator, fort):
        result = validator.validate(
            fort, SUNDAY, "10:00", closure=closure(date=SUNDAY, is_closed_full_day=True)
        )
        assert result.reason is ValidationReason.CLOSED_ON_DAY

    def test_weekday_uses_validator_timezone(self, fort):
        # Sunday 20:00 UTC is already Monday in India
        instant = datetime(2026, 10, 18, 20, 0, tzinfo=timezone.utc)
        assert TimeWindowValidator("Asia/Kolkata").validate(fort, instant, "10:00").valid
        utc = TimeWindowValidator("UTC").validate(fort, instant, "10:00")
        assert utc.reason is ValidationReason.CLOSED_ON_DAY

    def test_timezone_argument_overrides_validator(self, validator, fort):
        instant = datetime(2026, 10, 18, 20, 0, tzinfo=timezone.utc)
        result = validator.validate(fort, instant, "10:00", timezone="UTC")
        assert result.reason is ValidationReason.CLOSED_ON_DAY


class TestClosures:
    def test_full_day_closure(self, validator, fort):
        result = validator.validate(fort, MONDAY, "10:00", closure=closure(is_closed_full_day=True))
        assert result.reason is ValidationReason.CLOSED_SPECIAL_DATE

    def test_overlapping_range(self, validator, fort):
        result = validator.validate(
            fort,
            MONDAY,
            "11:30",
            closure=closure(closed_ranges=(TimeRange("12:00", "13:00"),)),
        )
        assert result.reason is ValidationReason.CLOSED_SPECIAL_DATE

    def test_touching_range_does_not_overlap(self, validator, fort):
        result = validator.validate(
            fort,
            MONDAY,
            "11:00",
            closure=closure(closed_ranges=(TimeRange("12:00", "13:00"),)),
        )
        assert result.valid

    def test_range_with_missing_bound_is_ignored(self, validator, fort):
        result = validator.validate(
            fort,
            MONDAY,
            "12:00",
            closure=closure(closed_ranges=(TimeRange("12:00", None), TimeRange(None, "13:00"))),
        )
        assert result.valid

    def test_malformed_range(self, validator, fort):
        result = validator.validate(
            fort,
            MONDAY,
            "10:00",
            closure=closure(closed_ranges=(TimeRange("25:00", "26:00"),)),
        )
        assert result.reason is ValidationReason.INVALID_CLOSURE_RANGE

    def test_closure_checked_before_opening_hours(self, validator, fort):
        result = validator.validate(fort, MONDAY, "07:00", closure=closure(is_closed_full_day=True))
        assert result.reason is ValidationReason.CLOSED_SPECIAL_DATE


class TestOpeningHours:
    def test_before_opening(self, validator, fort):
        result = validator.validate(fort, MONDAY, "08:30")
        assert result.reason is ValidationReason.CLOSED_AT_TIME

    def test_starting_at_closing_time(self, validator, fort):
        result = validator.validate(replace(fort, avg_duration_min=0), MONDAY, "17:00")
        assert result.reason is ValidationReason.CLOSED_AT_TIME

    def test_ending_after_closing(self, validator, fort):
        result = validator.validate(fort, MONDAY, "16:30")
        assert result.reason is ValidationReason.CLOSED_AT_TIME

    def test_ending_exactly_at_closing(self, validator, fort):
        assert validator.validate(fort, MONDAY, "16:00").valid

    def test_malformed_hours(self, validator, fort):
        result = validator.validate(replace(fort, opens_at="9am"), MONDAY, "10:00")
        assert result.reason is ValidationReason.INVALID_PLACE_HOURS

    def test_missing_duration_counts_as_zero(self, validator, fort):
        assert validator.validate(replace(fort, avg_duration_min=None), MONDAY, "16:59").valid

    def test_negative_duration_counts_as_zero(self, validator, fort):
        assert validator.validate(replace(fort, avg_duration_min=-30), MONDAY, "16:59").valid


def test_overlaps_is_half_open():
    assert overlaps(0, 10, 5, 15)
    assert not overlaps(0, 10, 10, 20)
    assert not overlaps(10, 20, 0, 10)
