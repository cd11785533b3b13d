from decimal import Decimal
from typing import List

from tour_pricing.core.config import settings
from tour_pricing.schemas.quote import (
    AdditionalCosts,
    Breakdown,
    GroupCosts,
    PerPersonCosts,
    Pricing,
    PricingRequest,
    QuoteResponse,
    SelectedVehicle,
    Travelers,
    VehicleAlternative,
    VehicleInfo,
)
from tour_pricing.services.vehicle_selector import VehicleOption, VehicleSelection
from tour_pricing.services.waterfall import PricingBreakdown, round_money


def format_percent(value: Decimal) -> str:
    return f"{value.normalize():f}%"


def build_alternative(option: VehicleOption) -> VehicleAlternative:
    vehicle = option.vehicle
    return VehicleAlternative(
        service_code=vehicle.service_code,
        type=vehicle.vehicle_type,
        capacity=vehicle.capacity_label,
        cost_per_day=float(vehicle.base_rate_eur),
        is_selected=option.is_selected,
    )


def build_alternative_list(options: List[VehicleOption]) -> List[VehicleAlternative]:
    return [build_alternative(option) for option in options]


def build_vehicle_info(selection: VehicleSelection) -> VehicleInfo:
    vehicle = selection.vehicle
    return VehicleInfo(
        selected=SelectedVehicle(
            service_code=vehicle.service_code,
            type=vehicle.vehicle_type,
            capacity=vehicle.capacity_label,
            cost_per_day=float(vehicle.base_rate_eur),
            was_overridden=selection.was_overridden,
        ),
        alternatives=build_alternative_list(selection.alternatives),
    )


def build_breakdown(costs: PricingBreakdown) -> Breakdown:
    group = costs.group_costs
    per_person = costs.per_person_costs
    additional = costs.additional_costs
    return Breakdown(
        group_costs=GroupCosts(
            vehicle=float(group.vehicle),
            guide=float(group.guide),
            tips=float(group.tips),
            total=float(group.total),
        ),
        per_person_costs=PerPersonCosts(
            entrance_fees=float(per_person.entrance_fees),
            water=float(per_person.water),
            lunch=float(per_person.lunch),
            dinner=float(per_person.dinner),
            adults_total=float(per_person.adults_total),
            children_total=float(per_person.children_total),
            total=float(per_person.total),
        ),
        additional_costs=AdditionalCosts(
            outside_destination=float(additional.outside_destination),
            assistants=float(additional.assistants),
        ),
        base_cost=float(costs.base_cost),
        profit_margin=format_percent(costs.profit_margin_percent),
        profit_amount=float(costs.profit_amount),
        minimum_booking_applied=costs.minimum_booking_applied,
    )


def build_quote_response(
    req: PricingRequest,
    selection: VehicleSelection,
    costs: PricingBreakdown,
) -> QuoteResponse:
    return QuoteResponse(
        pricing=Pricing(
            price_per_person=float(round_money(costs.price_per_person)),
            total_price=float(round_money(costs.total_price)),
            currency=settings.CURRENCY,
            breakdown=build_breakdown(costs),
            travelers=Travelers(
                adults=req.num_adults,
                children=req.num_children,
                total=req.total_travelers,
            ),
            vehicle=build_vehicle_info(selection),
        )
    )
