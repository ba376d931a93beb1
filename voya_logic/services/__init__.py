"""Services layer - Application logic orchestrating ports.

Services compose the scheduling, validation, routing and pricing steps
on top of the port interfaces. They are framework-agnostic and testable
with mock adapters.
"""

from .logic_service import LogicService, ScheduleRequest, ScheduleResponse
from .logistics import LogisticsResolver, coerce_coordinates
from .pricing import PricingEngine, price_day, price_item
from .route_cache import RouteCache, coordinates_to_hash
from .scheduler import DayAutoScheduler, ScheduleOptions
from .time_window import TimeWindowValidator

__all__ = [
    "LogicService",
    "ScheduleRequest",
    "ScheduleResponse",
    "LogisticsResolver",
    "coerce_coordinates",
    "PricingEngine",
    "price_day",
    "price_item",
    "RouteCache",
    "coordinates_to_hash",
    "DayAutoScheduler",
    "ScheduleOptions",
    "TimeWindowValidator",
]
