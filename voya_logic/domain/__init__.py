"""Domain layer - Core business models and errors.

This module contains immutable domain models and typed errors
used throughout the application. No external dependencies.
"""

from .errors import (
    ConfigurationError,
    InvalidClosureRangeError,
    InvalidCoordinatesError,
    InvalidDateError,
    InvalidPlaceHoursError,
    InvalidTimeFormatError,
    ItineraryLockedError,
    ItineraryNotFoundError,
    RouteProviderUnavailableError,
    VoyaLogicError,
)
from .models import (
    STATIC_ROUTE,
    WEEKDAY_NAMES,
    CategoryBreakdown,
    Closure,
    Coordinates,
    CostType,
    Day,
    DayPricing,
    DaySchedule,
    Event,
    Itinerary,
    ItineraryStatus,
    LineItem,
    LogicRunLog,
    Markup,
    Pax,
    PhaseTimings,
    Place,
    PricingSnapshot,
    Route,
    RouteCacheEntry,
    RouteProvider,
    ScheduledEvent,
    TimeRange,
    TriggerType,
    ValidationReason,
    ValidationResult,
    ValidationStatus,
)

__all__ = [
    # Models
    "WEEKDAY_NAMES",
    "STATIC_ROUTE",
    "Coordinates",
    "Place",
    "TimeRange",
    "Closure",
    "Event",
    "Route",
    "RouteProvider",
    "RouteCacheEntry",
    "ScheduledEvent",
    "DaySchedule",
    "ValidationResult",
    "ValidationStatus",
    "ValidationReason",
    "CostType",
    "LineItem",
    "Day",
    "Pax",
    "Markup",
    "CategoryBreakdown",
    "DayPricing",
    "PricingSnapshot",
    "Itinerary",
    "ItineraryStatus",
    "TriggerType",
    "PhaseTimings",
    "LogicRunLog",
    # Errors
    "VoyaLogicError",
    "InvalidCoordinatesError",
    "InvalidTimeFormatError",
    "InvalidDateError",
    "InvalidClosureRangeError",
    "InvalidPlaceHoursError",
    "ItineraryLockedError",
    "ItineraryNotFoundError",
    "RouteProviderUnavailableError",
    "ConfigurationError",
]
