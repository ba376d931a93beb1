"""Immutable domain models for the itinerary logic engine.

All models are frozen dataclasses with slots. They carry no behaviour
beyond small derived properties and represent the business concepts
shared by the scheduler, the route cache and the pricing engine.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Mapping, Optional, Union

WEEKDAY_NAMES = (
    "MONDAY",
    "TUESDAY",
    "WEDNESDAY",
    "THURSDAY",
    "FRIDAY",
    "SATURDAY",
    "SUNDAY",
)


class RouteProvider(str, Enum):
    """Backend that produced a route figure."""

    OSRM = "OSRM"
    HAVERSINE = "HAVERSINE"
    STATIC = "STATIC"


class ValidationStatus(str, Enum):
    VALID = "VALID"
    INVALID = "INVALID"


class ValidationReason(str, Enum):
    """Why an event failed time-window validation."""

    PLACE_NOT_FOUND = "PLACE_NOT_FOUND"
    INVALID_TIME_FORMAT = "INVALID_TIME_FORMAT"
    INVALID_DATE = "INVALID_DATE"
    CLOSED_ON_DAY = "CLOSED_ON_DAY"
    CLOSED_SPECIAL_DATE = "CLOSED_SPECIAL_DATE"
    INVALID_CLOSURE_RANGE = "INVALID_CLOSURE_RANGE"
    INVALID_PLACE_HOURS = "INVALID_PLACE_HOURS"
    CLOSED_AT_TIME = "CLOSED_AT_TIME"


class CostType(str, Enum):
    PER_PERSON = "per_person"
    PER_NIGHT = "per_night"
    PER_VEHICLE = "per_vehicle"
    FLAT = "flat"


class ItineraryStatus(str, Enum):
    DRAFT = "draft"
    SENT = "sent"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


class TriggerType(str, Enum):
    """What caused a scheduling run."""

    DRAG_DROP = "DRAG_DROP"
    SAVE_DAY = "SAVE_DAY"
    RECALC_ALL = "RECALC_ALL"
    API_MANUAL = "API_MANUAL"


@dataclass(frozen=True, slots=True)
class Coordinates:
    """A geographic point in (longitude, latitude) order."""

    longitude: float
    latitude: float

    def as_pair(self) -> tuple[float, float]:
        return (self.longitude, self.latitude)


CoordinatesLike = Union[Coordinates, tuple, list]


@dataclass(frozen=True, slots=True)
class Place:
    """A point of interest owned by the external catalog.

    Attributes:
        place_id: Catalog identifier
        name: Display name
        location: Coordinates, if known
        avg_duration_min: Average visit duration in minutes
        opens_at: Daily opening clock time (HH:MM)
        closes_at: Daily closing clock time (HH:MM)
        closed_days: Uppercase weekday names on which the place is closed
        category: Catalog category (SIGHTSEEING, FOOD, ...)
    """

    place_id: str
    name: str = ""
    location: Optional[Coordinates] = None
    avg_duration_min: Optional[float] = None
    opens_at: str = "00:00"
    closes_at: str = "23:59"
    closed_days: frozenset[str] = field(default_factory=frozenset)
    category: str = "SIGHTSEEING"


@dataclass(frozen=True, slots=True)
class TimeRange:
    """A closed period within a day. Bounds are raw HH:MM strings."""

    start_time: Optional[str] = None
    end_time: Optional[str] = None


@dataclass(frozen=True, slots=True)
class Closure:
    """A date-specific unavailability override for a place."""

    place_id: str
    date: date
    is_closed_full_day: bool = True
    closed_ranges: tuple[TimeRange, ...] = field(default_factory=tuple)
    reason: str = ""
    created_at: Optional[datetime] = None


@dataclass(frozen=True, slots=True)
class Event:
    """A candidate stop for a day, before scheduling.

    Attributes:
        place_id: Catalog identifier of the place
        order: Caller-supplied relative order
        place: Resolved place, or None if the catalog has no such place
        avg_duration_min: Duration used when the place has none
        metadata: Caller-supplied fields carried through untouched
    """

    place_id: str
    order: float = 0
    place: Optional[Place] = None
    avg_duration_min: Optional[float] = None
    metadata: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class Route:
    """Distance and travel time between two points."""

    distance_km: float
    travel_time_min: int
    provider: RouteProvider
    cached: bool = False


STATIC_ROUTE = Route(distance_km=0.0, travel_time_min=0, provider=RouteProvider.STATIC)


@dataclass(frozen=True, slots=True)
class ValidationResult:
    valid: bool
    reason: Optional[ValidationReason] = None

    @property
    def status(self) -> ValidationStatus:
        return ValidationStatus.VALID if self.valid else ValidationStatus.INVALID


@dataclass(frozen=True, slots=True)
class ScheduledEvent:
    """An event with its assigned time slot, inbound transit and validity.

    travel_time_min, distance_km and route_provider describe the leg from
    this event to the next one in the sequence.
    """

    event: Event
    order: int
    start_time: str
    end_time: str
    travel_time_min: int = 0
    distance_km: float = 0.0
    route_provider: RouteProvider = RouteProvider.STATIC
    validation_status: ValidationStatus = ValidationStatus.VALID
    validation_reason: Optional[ValidationReason] = None

    @property
    def place_id(self) -> str:
        return self.event.place_id

    @property
    def is_valid(self) -> bool:
        return self.validation_status is ValidationStatus.VALID


@dataclass(frozen=True, slots=True)
class RouteCacheEntry:
    origin_hash: str
    destination_hash: str
    distance_km: float
    travel_time_min: int
    provider: RouteProvider
    computed_at: datetime
    expires_at: datetime

    @property
    def key(self) -> tuple[str, str]:
        return (self.origin_hash, self.destination_hash)

    def is_fresh(self, now: datetime) -> bool:
        return self.expires_at > now


@dataclass(frozen=True, slots=True)
class LineItem:
    """A priced service attached to a day.

    cost_type is kept as the raw string so unrecognised types price to 0
    instead of failing.
    """

    name: str
    cost_type: str
    base_cost: float
    trip_count: int = 1


@dataclass(frozen=True, slots=True)
class Day:
    day_number: int
    date: Optional[date] = None
    hotel: Optional[LineItem] = None
    activities: tuple[LineItem, ...] = field(default_factory=tuple)
    transfers: tuple[LineItem, ...] = field(default_factory=tuple)
    sightseeings: tuple[LineItem, ...] = field(default_factory=tuple)
    other_services: tuple[LineItem, ...] = field(default_factory=tuple)
    events: tuple[ScheduledEvent, ...] = field(default_factory=tuple)


@dataclass(frozen=True, slots=True)
class Pax:
    adults: int = 0
    children: int = 0
    total: Optional[int] = None

    @property
    def count(self) -> int:
        """Total travellers, falling back to adults + children."""
        if self.total:
            return self.total
        return self.adults + self.children


@dataclass(frozen=True, slots=True)
class Markup:
    percentage: float
    amount: float = 0.0
    is_custom: bool = False


@dataclass(frozen=True, slots=True)
class CategoryBreakdown:
    hotels: float = 0.0
    activities: float = 0.0
    transfers: float = 0.0
    sightseeings: float = 0.0
    other_services: float = 0.0


@dataclass(frozen=True, slots=True)
class DayPricing:
    day_total: float
    breakdown: CategoryBreakdown


@dataclass(frozen=True, slots=True)
class PricingSnapshot:
    """Versioned pricing result for an itinerary.

    Invariants: total == round2(subtotal + markup.amount) and
    subtotal == round2(sum of day totals).
    """

    subtotal: float
    markup: Markup
    total: float
    currency: str = "INR"
    calculation_version: int = 1
    last_calculated_at: Optional[datetime] = None
    by_day: tuple[DayPricing, ...] = field(default_factory=tuple)
    by_category: CategoryBreakdown = field(default_factory=CategoryBreakdown)


@dataclass(frozen=True, slots=True)
class Itinerary:
    itinerary_id: str
    pax: Pax = field(default_factory=Pax)
    nights: int = 0
    rooms: int = 0
    days: tuple[Day, ...] = field(default_factory=tuple)
    pricing: Optional[PricingSnapshot] = None
    status: ItineraryStatus = ItineraryStatus.DRAFT
    locked_at: Optional[datetime] = None

    @property
    def is_locked(self) -> bool:
        """Locked by timestamp, or by having been sent or confirmed."""
        return self.locked_at is not None or self.status in (
            ItineraryStatus.SENT,
            ItineraryStatus.CONFIRMED,
        )


@dataclass(frozen=True, slots=True)
class PhaseTimings:
    """Per-phase wall time of a scheduling run, in milliseconds."""

    validation: int = 0
    route: int = 0
    schedule: int = 0
    total: int = 0


@dataclass(frozen=True, slots=True)
class DaySchedule:
    """Full output of one scheduling run."""

    events: tuple[ScheduledEvent, ...]
    warnings: tuple[str, ...] = field(default_factory=tuple)
    timings: PhaseTimings = field(default_factory=PhaseTimings)


@dataclass(frozen=True, slots=True)
class LogicRunLog:
    """Run metadata handed to the audit collaborator."""

    trigger_type: TriggerType = TriggerType.API_MANUAL
    trip_id: Optional[str] = None
    day_index: Optional[int] = None
    triggered_by: Optional[str] = None
    input_event_count: int = 0
    output_event_count: int = 0
    warnings: tuple[str, ...] = field(default_factory=tuple)
    errors: tuple[str, ...] = field(default_factory=tuple)
    timings_ms: PhaseTimings = field(default_factory=PhaseTimings)
    created_at: Optional[datetime] = None
