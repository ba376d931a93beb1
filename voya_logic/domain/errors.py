"""Typed domain errors for the itinerary logic engine.

Input errors (bad coordinates, malformed clock values, unparseable dates)
surface to the caller. Environmental failures such as an unreachable routing
provider are represented by RouteProviderUnavailableError, which never leaves
the logistics layer.

All errors inherit from VoyaLogicError and can optionally wrap a root
cause exception for debugging.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass
class VoyaLogicError(Exception):
    """Base error for the itinerary logic domain.

    Attributes:
        message: Human-readable error description
        cause: Optional underlying exception that caused this error
    """

    message: str
    cause: Optional[Exception] = field(default=None, repr=False)

    def __str__(self) -> str:
        if self.cause:
            return f"{self.message}: {self.cause}"
        return self.message

    def __post_init__(self) -> None:
        super().__init__(self.message)


@dataclass
class InvalidCoordinatesError(VoyaLogicError):
    """A coordinate pair is not two finite numbers.

    Attributes:
        value: The rejected input
    """

    value: Any = None


@dataclass
class InvalidTimeFormatError(VoyaLogicError):
    """A clock value is not a strict HH:MM string.

    Attributes:
        value: The rejected input
    """

    value: Any = None


@dataclass
class InvalidDateError(VoyaLogicError):
    """A value cannot be turned into a calendar date."""

    value: Any = None


@dataclass
class InvalidClosureRangeError(VoyaLogicError):
    """A closure time range has a malformed bound.

    Attributes:
        start_time: Raw start bound
        end_time: Raw end bound
    """

    start_time: Any = None
    end_time: Any = None


@dataclass
class InvalidPlaceHoursError(VoyaLogicError):
    """A place's opening or closing time is malformed."""

    place_id: str = ""


@dataclass
class ItineraryLockedError(VoyaLogicError):
    """Pricing recalculation was attempted on a locked itinerary.

    Attributes:
        itinerary_id: Identifier of the locked itinerary
        status: Itinerary status at the time of the attempt
    """

    itinerary_id: str = ""
    status: str = ""


@dataclass
class ItineraryNotFoundError(VoyaLogicError):
    """No itinerary is stored under the requested identifier."""

    itinerary_id: str = ""


@dataclass
class RouteProviderUnavailableError(VoyaLogicError):
    """A routing provider could not produce a route.

    Always caught by the logistics resolver and converted to the next
    provider in the chain.

    Attributes:
        provider: Name of the provider that failed
    """

    provider: str = ""


@dataclass
class ConfigurationError(VoyaLogicError):
    """Invalid or missing configuration.

    Attributes:
        setting_name: Name of the problematic setting
        expected_type: Expected type or format
    """

    setting_name: str = ""
    expected_type: Optional[str] = None
