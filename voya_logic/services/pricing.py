"""Pricing engine - day and itinerary cost breakdowns with markup.

Line items are priced by cost type, summed per category and per day, and
aggregated into a versioned PricingSnapshot. Amounts are rounded to two
decimals only where they are aggregated: day totals, the subtotal, the
markup amount and the grand total.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Callable, Iterable, Optional

from ..config import PricingConfig, get_config
from ..domain.errors import ConfigurationError, ItineraryLockedError
from ..domain.models import (
    CategoryBreakdown,
    CostType,
    Day,
    DayPricing,
    Itinerary,
    ItineraryStatus,
    LineItem,
    Markup,
    Pax,
    PricingSnapshot,
)
from ..ports.catalog import SettingsPort
from ..ports.itinerary import ItineraryRepositoryPort
from ..adapters.settings.memory_settings import DEFAULT_MARKUP_PERCENTAGE
from ..rounding import round2

FALLBACK_MARKUP_PERCENTAGE = 20.0


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def price_item(item: LineItem, pax: int = 0, nights: int = 0, rooms: int = 0) -> float:
    """Cost of one line item; unknown cost types cost nothing."""
    base = float(item.base_cost)
    cost_type = item.cost_type.value if isinstance(item.cost_type, CostType) else item.cost_type

    if cost_type == CostType.PER_PERSON.value:
        return base * pax
    if cost_type == CostType.PER_NIGHT.value:
        return base * nights * rooms
    if cost_type == CostType.PER_VEHICLE.value:
        return base * (item.trip_count or 1)
    if cost_type == CostType.FLAT.value:
        return base
    return 0.0


def price_day(day: Day, pax: Pax, nights: int = 0, rooms: int = 0) -> DayPricing:
    """Price every category of a day.

    Args:
        day: The day's line items.
        pax: Travellers; per_person items use its total.
        nights: Nights, for per_night items.
        rooms: Rooms, for per_night items.

    Returns:
        DayPricing with the rounded day total and raw category sums.
    """
    travellers = pax.count

    def category(items: Iterable[LineItem]) -> float:
        return sum(price_item(item, travellers, nights, rooms) for item in items)

    breakdown = CategoryBreakdown(
        hotels=category([day.hotel] if day.hotel is not None else []),
        activities=category(day.activities),
        transfers=category(day.transfers),
        sightseeings=category(day.sightseeings),
        other_services=category(day.other_services),
    )
    day_total = (
        breakdown.hotels
        + breakdown.activities
        + breakdown.transfers
        + breakdown.sightseeings
        + breakdown.other_services
    )
    return DayPricing(day_total=round2(day_total), breakdown=breakdown)


def _sum_breakdowns(breakdowns: Iterable[CategoryBreakdown]) -> CategoryBreakdown:
    totals = dict(hotels=0.0, activities=0.0, transfers=0.0, sightseeings=0.0, other_services=0.0)
    for b in breakdowns:
        totals["hotels"] += b.hotels
        totals["activities"] += b.activities
        totals["transfers"] += b.transfers
        totals["sightseeings"] += b.sightseeings
        totals["other_services"] += b.other_services
    return CategoryBreakdown(**{k: round2(v) for k, v in totals.items()})


@dataclass
class PricingEngine:
    """Computes and applies itinerary pricing.

    Attributes:
        config: Default currency and markup
        settings: Source of the ``default_markup_percentage`` setting
        repository: Itinerary storage used by recalculate() and lock()
        now: Clock, injectable for tests
    """

    config: PricingConfig = field(default_factory=lambda: get_config().pricing)
    settings: Optional[SettingsPort] = None
    repository: Optional[ItineraryRepositoryPort] = None
    now: Callable[[], datetime] = _utcnow

    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    def price_day(self, day: Day, pax: Pax, nights: int = 0, rooms: int = 0) -> DayPricing:
        return price_day(day, pax, nights, rooms)

    def resolve_markup(self, itinerary: Itinerary, markup: Optional[float] = None) -> float:
        """Markup percentage: explicit value, custom itinerary markup, setting, 20."""
        if markup is not None:
            try:
                percentage = float(markup)
            except (TypeError, ValueError) as e:
                raise ConfigurationError(
                    f"Markup must be a finite number, got {markup!r}",
                    cause=e,
                    setting_name="markup",
                    expected_type="finite number",
                )
            if not math.isfinite(percentage):
                raise ConfigurationError(
                    f"Markup must be a finite number, got {markup!r}",
                    setting_name="markup",
                    expected_type="finite number",
                )
            return percentage

        previous = itinerary.pricing.markup if itinerary.pricing is not None else None
        if previous is not None and previous.is_custom:
            return float(previous.percentage)

        if self.settings is not None:
            value = self.settings.get(DEFAULT_MARKUP_PERCENTAGE)
            try:
                if value is not None and math.isfinite(float(value)):
                    return float(value)
            except (TypeError, ValueError):
                self._logger.warning(
                    "Invalid default markup setting, using fallback",
                    extra={"value": repr(value)},
                )
            return FALLBACK_MARKUP_PERCENTAGE

        return float(self.config.default_markup_percentage)

    def price_itinerary(
        self, itinerary: Itinerary, markup: Optional[float] = None
    ) -> PricingSnapshot:
        """Compute a new pricing snapshot for an itinerary.

        Args:
            itinerary: The itinerary to price.
            markup: Explicit markup percentage overriding every default.

        Returns:
            PricingSnapshot with calculation_version one above the previous.

        Raises:
            ItineraryLockedError: If the itinerary is locked, sent or confirmed.
            ConfigurationError: If ``markup`` is not a finite number.
        """
        if itinerary.is_locked:
            raise ItineraryLockedError(
                "Cannot recalculate pricing for locked itinerary",
                itinerary_id=itinerary.itinerary_id,
                status=ItineraryStatus(itinerary.status).value,
            )

        percentage = self.resolve_markup(itinerary, markup)
        by_day = tuple(
            price_day(day, itinerary.pax, itinerary.nights, itinerary.rooms)
            for day in itinerary.days
        )

        subtotal = round2(sum(d.day_total for d in by_day))
        markup_amount = round2(subtotal * percentage / 100)
        total = round2(subtotal + markup_amount)

        previous = itinerary.pricing
        snapshot = PricingSnapshot(
            subtotal=subtotal,
            markup=Markup(
                percentage=percentage,
                amount=markup_amount,
                is_custom=previous.markup.is_custom if previous is not None else False,
            ),
            total=total,
            currency=previous.currency if previous is not None else self.config.currency,
            calculation_version=(previous.calculation_version if previous is not None else 0) + 1,
            last_calculated_at=self.now(),
            by_day=by_day,
            by_category=_sum_breakdowns(d.breakdown for d in by_day),
        )
        self._logger.info(
            "Itinerary priced",
            extra={
                "itinerary_id": itinerary.itinerary_id,
                "subtotal": subtotal,
                "total": total,
                "version": snapshot.calculation_version,
            },
        )
        return snapshot

    def recalculate(self, itinerary_id: str, markup: Optional[float] = None) -> Itinerary:
        """Reprice a stored itinerary and persist the snapshot.

        The lock check, the pricing and the write run as one atomic
        repository update, so a concurrent lock() cannot slip in between.

        Raises:
            ItineraryLockedError: If the stored itinerary is locked.
            ItineraryNotFoundError: If no such itinerary exists.
        """

        def apply(current: Itinerary) -> Itinerary:
            return replace(current, pricing=self.price_itinerary(current, markup))

        return self._require_repository().update(itinerary_id, apply)

    def set_custom_markup(self, itinerary_id: str, percentage: float) -> Itinerary:
        """Pin a custom markup on an itinerary and reprice it."""

        def apply(current: Itinerary) -> Itinerary:
            snapshot = self.price_itinerary(current, percentage)
            return replace(
                current,
                pricing=replace(snapshot, markup=replace(snapshot.markup, is_custom=True)),
            )

        return self._require_repository().update(itinerary_id, apply)

    def lock(self, itinerary_id: str) -> Itinerary:
        """Freeze an itinerary's pricing; drafts move to ``sent``."""

        def apply(current: Itinerary) -> Itinerary:
            status = current.status
            if status not in (ItineraryStatus.SENT, ItineraryStatus.CONFIRMED):
                status = ItineraryStatus.SENT
            return replace(current, locked_at=self.now(), status=status)

        return self._require_repository().update(itinerary_id, apply)

    def _require_repository(self) -> ItineraryRepositoryPort:
        if self.repository is None:
            raise ConfigurationError(
                "PricingEngine has no itinerary repository",
                setting_name="repository",
            )
        return self.repository
