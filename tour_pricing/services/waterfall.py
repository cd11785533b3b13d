"""Cost waterfall: rate inputs in, final price and itemised breakdown out.

Stages run strictly in order:

1. group costs (vehicle + guide + tips, once per day for the whole party)
2. per-person daily rate (water, entrance fees, optional meals)
3. per-person totals, children discounted
4. outside-destination surcharge
5. assistant services
6. base cost
7. profit margin
8. minimum booking floor

All arithmetic is done on ``Decimal`` without rounding. Presentation code
rounds with :func:`round_money` once the response is assembled.
"""
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP

from tour_pricing.schemas.quote import PricingRequest
from tour_pricing.schemas.rates import GuideRate, VehicleRate
from tour_pricing.services.rates import RuleSet

HUNDRED = Decimal("100")
CENT = Decimal("0.01")
ZERO = Decimal("0")


def round_money(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class GroupCostLines:
    vehicle: Decimal
    guide: Decimal
    tips: Decimal
    total: Decimal


@dataclass(frozen=True)
class PerPersonCostLines:
    entrance_fees: Decimal
    water: Decimal
    lunch: Decimal
    dinner: Decimal
    adults_total: Decimal
    children_total: Decimal
    total: Decimal


@dataclass(frozen=True)
class AdditionalCostLines:
    outside_destination: Decimal
    assistants: Decimal


@dataclass(frozen=True)
class PricingBreakdown:
    group_costs: GroupCostLines
    per_person_costs: PerPersonCostLines
    additional_costs: AdditionalCostLines
    base_cost: Decimal
    profit_margin_percent: Decimal
    profit_amount: Decimal
    minimum_booking_applied: bool
    # margin-adjusted, before the minimum booking floor
    final_total_price: Decimal
    total_price: Decimal
    price_per_person: Decimal


def compute_cost(
    vehicle: VehicleRate,
    guide: GuideRate,
    rules: RuleSet,
    req: PricingRequest,
) -> PricingBreakdown:
    travelers = req.total_travelers
    days = Decimal(req.duration_days)

    # tips are a per-person rate but enter the group cost once per day
    vehicle_rate = Decimal(vehicle.base_rate_eur)
    guide_rate = Decimal(guide.base_rate_eur)
    group_per_day = vehicle_rate + guide_rate + rules.tips_per_day
    group_costs = GroupCostLines(
        vehicle=vehicle_rate * days,
        guide=guide_rate * days,
        tips=rules.tips_per_day * days,
        total=group_per_day * days,
    )

    lunch = rules.lunch_cost if req.includes_lunch else ZERO
    dinner = rules.dinner_cost if req.includes_dinner else ZERO
    per_person_per_day = rules.water_per_day + req.entrance_fees_per_person + lunch + dinner

    child_multiplier = 1 - rules.child_discount_percent / HUNDRED
    adults_total = req.num_adults * per_person_per_day * days
    children_total = req.num_children * per_person_per_day * days * child_multiplier
    per_person_costs = PerPersonCostLines(
        entrance_fees=req.entrance_fees_per_person * days,
        water=rules.water_per_day * days,
        lunch=lunch * days,
        dinner=dinner * days,
        adults_total=adults_total,
        children_total=children_total,
        total=adults_total + children_total,
    )

    outside_fee = rules.outside_fee_per_person * travelers if req.outside_destination else ZERO
    assistants = (
        req.airport_transfers * rules.airport_assistant_rate
        + req.hotel_checkins * rules.hotel_assistant_rate
    )
    additional_costs = AdditionalCostLines(outside_destination=outside_fee, assistants=assistants)

    base_cost = group_costs.total + per_person_costs.total + outside_fee + assistants

    profit_multiplier = 1 + rules.profit_margin_percent / HUNDRED
    final_price_per_person = (base_cost / travelers) * profit_multiplier
    final_total_price = final_price_per_person * travelers

    total_price = max(final_total_price, rules.minimum_booking_amount)

    return PricingBreakdown(
        group_costs=group_costs,
        per_person_costs=per_person_costs,
        additional_costs=additional_costs,
        base_cost=base_cost,
        profit_margin_percent=rules.profit_margin_percent,
        profit_amount=final_total_price - base_cost,
        minimum_booking_applied=final_total_price < rules.minimum_booking_amount,
        final_total_price=final_total_price,
        total_price=total_price,
        price_per_person=total_price / travelers,
    )
