import pytest
from pydantic import ValidationError

from tour_pricing.core.exceptions import (
    CapacityViolationError,
    NoGuideAvailableError,
    NoVehicleAvailableError,
    NotFoundError,
)
from tour_pricing.schemas.quote import PricingRequest
from tour_pricing.services.pricing import get_guide_rate, list_vehicle_options, price_quote


class TestPriceQuote:
    """Full engine runs against the in-memory rate card"""

    @pytest.mark.asyncio
    async def test_cairo_day_tour_scenario(self, rate_repository, cairo_day_tour_request):
        result = await price_quote(cairo_day_tour_request, rate_repository)
        pricing = result.pricing

        assert result.success is True
        assert pricing.total_price == 401.25
        assert pricing.price_per_person == 66.88
        assert pricing.currency == "EUR"

        breakdown = pricing.breakdown
        assert breakdown.group_costs.model_dump() == {
            "vehicle": 110.0, "guide": 50.0, "tips": 5.0, "total": 165.0,
        }
        assert breakdown.per_person_costs.model_dump() == {
            "entrance_fees": 14.0, "water": 2.0, "lunch": 10.0, "dinner": 0.0,
            "adults_total": 156.0, "children_total": 0.0, "total": 156.0,
        }
        assert breakdown.additional_costs.model_dump() == {"outside_destination": 0.0, "assistants": 0.0}
        assert breakdown.base_cost == 321.0
        assert breakdown.profit_margin == "25%"
        assert breakdown.profit_amount == 80.25
        assert breakdown.minimum_booking_applied is False

        assert pricing.travelers.model_dump() == {"adults": 6, "children": 0, "total": 6}

    @pytest.mark.asyncio
    async def test_vehicle_details(self, rate_repository, cairo_day_tour_request):
        result = await price_quote(cairo_day_tour_request, rate_repository)
        vehicle = result.pricing.vehicle

        assert vehicle.selected.model_dump() == {
            "service_code": "CAI-DT-MINIVAN",
            "type": "Minivan",
            "capacity": "3-7 pax",
            "cost_per_day": 110.0,
            "was_overridden": False,
        }
        assert [a.model_dump() for a in vehicle.alternatives] == [
            {"service_code": "CAI-DT-MINIVAN", "type": "Minivan", "capacity": "3-7 pax",
             "cost_per_day": 110.0, "is_selected": True},
            {"service_code": "CAI-DT-HIACE", "type": "Toyota HiAce", "capacity": "5-12 pax",
             "cost_per_day": 130.0, "is_selected": False},
        ]

    @pytest.mark.asyncio
    async def test_accepts_request_model(self, rate_repository, cairo_day_tour_request):
        req = PricingRequest(**cairo_day_tour_request)
        result = await price_quote(req, rate_repository)
        assert result.pricing.total_price == 401.25

    @pytest.mark.asyncio
    async def test_configured_package_quote(self, configured_repository):
        result = await price_quote({
            "num_adults": 2,
            "num_children": 1,
            "duration_days": 2,
            "tour_type": "package",
            "language": "French",
            "entrance_fees_per_person": 10,
            "includes_lunch": True,
            "includes_dinner": True,
            "outside_destination": True,
            "airport_transfers": 2,
            "hotel_checkins": 1,
        }, configured_repository)
        pricing = result.pricing
        breakdown = pricing.breakdown

        assert pricing.vehicle.selected.service_code == "CAI-DT-SEDAN"
        assert breakdown.group_costs.model_dump() == {
            "vehicle": 120.0, "guide": 110.0, "tips": 16.0, "total": 246.0,
        }
        assert breakdown.per_person_costs.model_dump() == {
            "entrance_fees": 20.0, "water": 3.0, "lunch": 24.0, "dinner": 30.0,
            "adults_total": 154.0, "children_total": 53.9, "total": 207.9,
        }
        assert breakdown.additional_costs.model_dump() == {"outside_destination": 60.0, "assistants": 60.0}
        assert breakdown.base_cost == 573.9
        assert breakdown.profit_margin == "30%"
        assert breakdown.profit_amount == 172.17
        assert pricing.total_price == 746.07
        assert pricing.price_per_person == 248.69

    @pytest.mark.asyncio
    async def test_minimum_booking_floor(self, configured_repository):
        result = await price_quote({
            "num_adults": 1,
            "duration_days": 1,
            "tour_type": "day_tour",
        }, configured_repository)
        pricing = result.pricing

        # (60 + 50 + 8 + 1.5) * 1.20 = 143.40, below the 150 minimum
        assert pricing.breakdown.base_cost == 119.5
        assert pricing.breakdown.minimum_booking_applied is True
        assert pricing.total_price == 150.0
        assert pricing.price_per_person == 150.0
        assert pricing.breakdown.profit_amount == pytest.approx(23.9)

    @pytest.mark.asyncio
    async def test_child_contribution_is_half_of_adult(self, rate_repository, cairo_day_tour_request):
        cairo_day_tour_request.update(num_adults=2, num_children=2)
        result = await price_quote(cairo_day_tour_request, rate_repository)
        per_person = result.pricing.breakdown.per_person_costs

        assert per_person.adults_total == 52.0
        assert per_person.children_total == 26.0
        assert result.pricing.total_price == 241.25
        assert result.pricing.price_per_person == 60.31

    @pytest.mark.asyncio
    async def test_override_marks_selection(self, rate_repository, cairo_day_tour_request):
        cairo_day_tour_request["override_transportation"] = "CAI-DT-HIACE"
        result = await price_quote(cairo_day_tour_request, rate_repository)

        assert result.pricing.vehicle.selected.was_overridden is True
        assert result.pricing.vehicle.selected.cost_per_day == 130.0
        # 20 EUR more vehicle cost, times the 25% margin
        assert result.pricing.total_price == 426.25

    @pytest.mark.asyncio
    async def test_total_never_decreases_with_duration(self, rate_repository, cairo_day_tour_request):
        totals = []
        for days in range(1, 10):
            cairo_day_tour_request["duration_days"] = days
            result = await price_quote(cairo_day_tour_request, rate_repository)
            totals.append(result.pricing.total_price)
        assert totals == sorted(totals)

    @pytest.mark.asyncio
    async def test_repeated_quotes_are_identical(self, rate_repository, cairo_day_tour_request):
        first = await price_quote(cairo_day_tour_request, rate_repository)
        second = await price_quote(cairo_day_tour_request, rate_repository)
        assert first.model_dump_json() == second.model_dump_json()


class TestPriceQuoteFailures:

    @pytest.mark.asyncio
    async def test_zero_travelers_rejected_before_lookup(self, cairo_day_tour_request):
        class ExplodingRepository:
            async def find_vehicles(self, *args):
                raise AssertionError("rate lookup must not happen")

        cairo_day_tour_request.update(num_adults=0, num_children=0)
        with pytest.raises(ValidationError):
            await price_quote(cairo_day_tour_request, ExplodingRepository())

    @pytest.mark.asyncio
    async def test_capacity_violation(self, rate_repository, cairo_day_tour_request):
        cairo_day_tour_request["override_transportation"] = "CAI-DT-SEDAN"
        with pytest.raises(CapacityViolationError) as exc_info:
            await price_quote(cairo_day_tour_request, rate_repository)
        assert "Sedan" in exc_info.value.message
        assert "1-4" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_unknown_override(self, rate_repository, cairo_day_tour_request):
        cairo_day_tour_request["override_transportation"] = "CAI-DT-LIMO"
        with pytest.raises(NotFoundError):
            await price_quote(cairo_day_tour_request, rate_repository)

    @pytest.mark.asyncio
    async def test_no_vehicle(self, rate_repository, cairo_day_tour_request):
        cairo_day_tour_request["city"] = "Hurghada"
        with pytest.raises(NoVehicleAvailableError):
            await price_quote(cairo_day_tour_request, rate_repository)

    @pytest.mark.asyncio
    async def test_no_guide(self, rate_repository, cairo_day_tour_request):
        cairo_day_tour_request["language"] = "German"
        with pytest.raises(NoGuideAvailableError) as exc_info:
            await price_quote(cairo_day_tour_request, rate_repository)
        assert exc_info.value.message == "No guide available for language: German"


class TestGuideAndVehicleLookups:

    @pytest.mark.asyncio
    async def test_first_guide_rate_wins(self, rate_repository):
        guide = await get_guide_rate(rate_repository, "English")
        assert guide.service_code == "GUIDE-EN-1"

    @pytest.mark.asyncio
    async def test_list_vehicle_options(self, rate_repository):
        options = await list_vehicle_options(rate_repository, "Cairo", "day_tour", 4)
        assert [(o.service_code, o.is_selected) for o in options] == [
            ("CAI-DT-SEDAN", True),
            ("CAI-DT-MINIVAN", False),
        ]

    @pytest.mark.asyncio
    async def test_list_vehicle_options_empty(self, rate_repository):
        assert await list_vehicle_options(rate_repository, "Luxor", "day_tour", 4) == []
