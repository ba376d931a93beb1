"""Clock arithmetic: HH:MM values as minutes since midnight, and weekday
resolution in a target timezone."""

from __future__ import annotations

import logging
import math
import re
from datetime import date, datetime, timezone
from typing import Any, Union
from zoneinfo import ZoneInfo

import dateparser

from .domain.errors import InvalidDateError, InvalidTimeFormatError
from .domain.models import WEEKDAY_NAMES

logger = logging.getLogger(__name__)

TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")
MINUTES_PER_DAY = 1440
LAST_MINUTE = MINUTES_PER_DAY - 1

DateLike = Union[date, datetime, str]


def parse_clock(value: Any) -> int:
    """Parse a strict ``HH:MM`` string into minutes since midnight."""
    if not isinstance(value, str):
        raise InvalidTimeFormatError(f"Clock value must be HH:MM, got {value!r}", value=value)
    match = TIME_PATTERN.match(value)
    if match is None:
        raise InvalidTimeFormatError(f"Clock value must be HH:MM, got {value!r}", value=value)
    return int(match.group(1)) * 60 + int(match.group(2))


def format_clock(minutes: Any) -> str:
    """Format minutes since midnight as ``HH:MM``, clamped to the day."""
    try:
        number = float(minutes)
    except (TypeError, ValueError):
        number = 0.0
    if not math.isfinite(number):
        number = 0.0
    safe = min(LAST_MINUTE, max(0, math.floor(number)))
    return f"{safe // 60:02d}:{safe % 60:02d}"


def parse_date(value: Any) -> datetime:
    """Turn a date, datetime or date string into an aware datetime.

    Naive values are taken as UTC instants; a plain date is UTC midnight.
    Relative ("tomorrow") and partial ("5") strings are rejected.

    Raises:
        InvalidDateError: If no absolute calendar date can be obtained.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    elif isinstance(value, str) and value.strip():
        parsed = dateparser.parse(
            value.strip(),
            languages=["en"],
            settings={
                "TIMEZONE": "UTC",
                "RETURN_AS_TIMEZONE_AWARE": True,
                # Absolute dates with day, month and year only
                "STRICT_PARSING": True,
                "PARSERS": ["timestamp", "absolute-time"],
            },
        )
        if parsed is None:
            raise InvalidDateError(f"Cannot parse date {value!r}", value=value)
    else:
        raise InvalidDateError(f"Cannot parse date {value!r}", value=value)

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def resolve_weekday_name(value: Any, tz_name: str = "Asia/Kolkata") -> str:
    """Return the uppercase weekday name of ``value`` in ``tz_name``.

    A plain ``date`` has no instant attached and keeps its own weekday.
    An unknown timezone falls back to the UTC weekday of the same instant.
    """
    if isinstance(value, date) and not isinstance(value, datetime):
        return WEEKDAY_NAMES[value.weekday()]

    instant = parse_date(value)
    try:
        local = instant.astimezone(ZoneInfo(tz_name))
    except (ValueError, KeyError, TypeError) as e:
        # ZoneInfoNotFoundError is a KeyError subclass
        logger.debug(
            "Timezone lookup failed, using UTC",
            extra={"timezone": tz_name, "error": str(e)},
        )
        local = instant.astimezone(timezone.utc)
    return WEEKDAY_NAMES[local.weekday()]


def calendar_date(value: Any, tz_name: str = "Asia/Kolkata") -> date:
    """Calendar date of ``value`` as seen in ``tz_name``."""
    if isinstance(value, date) and not isinstance(value, datetime):
        return value
    instant = parse_date(value)
    try:
        return instant.astimezone(ZoneInfo(tz_name)).date()
    except (ValueError, KeyError, TypeError):
        return instant.astimezone(timezone.utc).date()
