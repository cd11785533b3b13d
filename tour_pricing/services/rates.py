"""Read-only access to the rate tables.

The pricing engine only ever talks to a :class:`RateRepository`. Two
implementations ship with the service: :class:`SqlRateRepository` reads the
SQLAlchemy rate tables, :class:`InMemoryRateRepository` keeps records in plain
lists and is what the test-suite and local demos run against.

Rule records that are missing from the tables never fail a quote. Each
category has a built-in default in ``RULE_DEFAULTS`` which is used instead.
"""
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal
from typing import FrozenSet, Iterable, List, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from tour_pricing.core.enums import RuleCategory, TourType
from tour_pricing.core.exceptions import RateLookupError
from tour_pricing.core.metrics import rule_defaults_applied, track_rate_lookup
from tour_pricing.models.guide_rate import GuideRate as GuideRateRow
from tour_pricing.models.pricing_rule import PricingRule
from tour_pricing.models.transportation_rate import TransportationRate
from tour_pricing.schemas.rates import GuideRate, RuleRecord, VehicleRate

logger = logging.getLogger(__name__)

RULE_DEFAULTS = {
    RuleCategory.DAILY_TIPS: Decimal("5"),
    RuleCategory.WATER_BOTTLE: Decimal("2"),
    RuleCategory.LUNCH: Decimal("10"),
    RuleCategory.DINNER: Decimal("10"),
    RuleCategory.CHILD_DISCOUNT: Decimal("50"),
    RuleCategory.OUTSIDE_DESTINATION_FEE: Decimal("10"),
    RuleCategory.AIRPORT_ASSISTANT: Decimal("18"),
    RuleCategory.HOTEL_ASSISTANT: Decimal("12"),
    RuleCategory.PROFIT_MARGIN: Decimal("25"),
    RuleCategory.MINIMUM_BOOKING: Decimal("100"),
}

_missing_defaults = set(RuleCategory) - set(RULE_DEFAULTS)
if _missing_defaults:
    raise RuntimeError(f"No default for rule categories: {sorted(_missing_defaults)}")


class RateRepository(ABC):

    @abstractmethod
    async def find_vehicles(self, city: str, service_type: str, travelers: int) -> List[VehicleRate]:
        """Active vehicles for city and service type whose capacity holds ``travelers``, cheapest first."""

    @abstractmethod
    async def get_vehicle(self, service_code: str) -> Optional[VehicleRate]:
        """Active vehicle with exactly this service code, or None."""

    @abstractmethod
    async def find_guides(self, language: str) -> List[GuideRate]:
        """Active guide rates for a language in storage order."""

    @abstractmethod
    async def find_rules(
        self, category: RuleCategory, tour_type: Optional[TourType] = None
    ) -> List[RuleRecord]:
        """Active rule records of a category; ``tour_type`` narrows profit margins."""


class InMemoryRateRepository(RateRepository):

    def __init__(
        self,
        vehicles: Iterable[VehicleRate] = (),
        guides: Iterable[GuideRate] = (),
        rules: Iterable[RuleRecord] = (),
    ):
        self.vehicles = list(vehicles)
        self.guides = list(guides)
        self.rules = list(rules)

    async def find_vehicles(self, city: str, service_type: str, travelers: int) -> List[VehicleRate]:
        matches = [
            v for v in self.vehicles
            if v.is_active and v.city == city and v.service_type == service_type and v.fits(travelers)
        ]
        return sorted(matches, key=lambda v: v.base_rate_eur)

    async def get_vehicle(self, service_code: str) -> Optional[VehicleRate]:
        for vehicle in self.vehicles:
            if vehicle.is_active and vehicle.service_code == service_code:
                return vehicle
        return None

    async def find_guides(self, language: str) -> List[GuideRate]:
        return [g for g in self.guides if g.is_active and g.guide_language == language]

    async def find_rules(
        self, category: RuleCategory, tour_type: Optional[TourType] = None
    ) -> List[RuleRecord]:
        return [
            r for r in self.rules
            if r.is_active and r.category == category
            and (tour_type is None or r.tour_type == tour_type)
        ]


class SqlRateRepository(RateRepository):

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _scalars(self, table: str, query) -> list:
        try:
            res = await self.db.execute(query)
        except SQLAlchemyError as e:
            logger.error(f"Rate lookup on {table} failed: {e}")
            raise RateLookupError(table, str(e)) from e
        return res.scalars().all()

    @track_rate_lookup("transportation_rates")
    async def find_vehicles(self, city: str, service_type: str, travelers: int) -> List[VehicleRate]:
        q = (
            select(TransportationRate)
            .where(
                TransportationRate.city == city,
                TransportationRate.service_type == service_type,
                TransportationRate.capacity_min <= travelers,
                TransportationRate.capacity_max >= travelers,
                TransportationRate.is_active.is_(True),
            )
            .order_by(TransportationRate.base_rate_eur.asc(), TransportationRate.id.asc())
        )
        rows = await self._scalars("transportation_rates", q)
        return [VehicleRate.model_validate(row) for row in rows]

    @track_rate_lookup("transportation_rates")
    async def get_vehicle(self, service_code: str) -> Optional[VehicleRate]:
        q = select(TransportationRate).where(
            TransportationRate.service_code == service_code,
            TransportationRate.is_active.is_(True),
        )
        rows = await self._scalars("transportation_rates", q)
        return VehicleRate.model_validate(rows[0]) if rows else None

    @track_rate_lookup("guide_rates")
    async def find_guides(self, language: str) -> List[GuideRate]:
        q = (
            select(GuideRateRow)
            .where(GuideRateRow.guide_language == language, GuideRateRow.is_active.is_(True))
            .order_by(GuideRateRow.id.asc())
        )
        rows = await self._scalars("guide_rates", q)
        return [GuideRate.model_validate(row) for row in rows]

    @track_rate_lookup("pricing_rules")
    async def find_rules(
        self, category: RuleCategory, tour_type: Optional[TourType] = None
    ) -> List[RuleRecord]:
        q = select(PricingRule).where(
            PricingRule.category == category,
            PricingRule.is_active.is_(True),
        )
        if tour_type is not None:
            q = q.where(PricingRule.tour_type == tour_type)
        rows = await self._scalars("pricing_rules", q.order_by(PricingRule.id.asc()))
        return [RuleRecord.model_validate(row) for row in rows]


@dataclass(frozen=True)
class RuleSet:
    tips_per_day: Decimal
    water_per_day: Decimal
    lunch_cost: Decimal
    dinner_cost: Decimal
    child_discount_percent: Decimal
    outside_fee_per_person: Decimal
    airport_assistant_rate: Decimal
    hotel_assistant_rate: Decimal
    profit_margin_percent: Decimal
    minimum_booking_amount: Decimal
    defaulted: FrozenSet[RuleCategory] = frozenset()


async def resolve_rule(
    repo: RateRepository,
    category: RuleCategory,
    tour_type: Optional[TourType] = None,
) -> Tuple[Decimal, bool]:
    """Value of the first active record, or the category default.

    Returns ``(value, used_default)``. When several active records exist the
    first one wins.
    """
    records = await repo.find_rules(category, tour_type)
    if records:
        return Decimal(records[0].value), False
    rule_defaults_applied.labels(category=str(category)).inc()
    logger.debug(f"No active {category} rule, using default {RULE_DEFAULTS[category]}")
    return RULE_DEFAULTS[category], True


async def load_rule_set(repo: RateRepository, tour_type: TourType) -> RuleSet:
    values = {}
    defaulted = set()
    for category in RuleCategory:
        scope = tour_type if category == RuleCategory.PROFIT_MARGIN else None
        value, used_default = await resolve_rule(repo, category, scope)
        values[category] = value
        if used_default:
            defaulted.add(category)

    return RuleSet(
        tips_per_day=values[RuleCategory.DAILY_TIPS],
        water_per_day=values[RuleCategory.WATER_BOTTLE],
        lunch_cost=values[RuleCategory.LUNCH],
        dinner_cost=values[RuleCategory.DINNER],
        child_discount_percent=values[RuleCategory.CHILD_DISCOUNT],
        outside_fee_per_person=values[RuleCategory.OUTSIDE_DESTINATION_FEE],
        airport_assistant_rate=values[RuleCategory.AIRPORT_ASSISTANT],
        hotel_assistant_rate=values[RuleCategory.HOTEL_ASSISTANT],
        profit_margin_percent=values[RuleCategory.PROFIT_MARGIN],
        minimum_booking_amount=values[RuleCategory.MINIMUM_BOOKING],
        defaulted=frozenset(defaulted),
    )
