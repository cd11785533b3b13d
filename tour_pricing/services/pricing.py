import logging
import time
from typing import List, Union

from tour_pricing.core.enums import QuoteOutcome
from tour_pricing.core.exceptions import NoGuideAvailableError, PricingError
from tour_pricing.core.metrics import quote_duration, quotes_total
from tour_pricing.core.response_builders import build_alternative_list, build_quote_response
from tour_pricing.schemas.quote import PricingRequest, QuoteResponse, VehicleAlternative
from tour_pricing.schemas.rates import GuideRate
from tour_pricing.services.rates import RateRepository, load_rule_set
from tour_pricing.services.vehicle_selector import VehicleOption, cheapest_first, select_vehicle
from tour_pricing.services.waterfall import compute_cost

logger = logging.getLogger(__name__)


async def get_guide_rate(repo: RateRepository, language: str) -> GuideRate:
    guides = await repo.find_guides(language)
    if not guides:
        raise NoGuideAvailableError(language)
    # first active rate for the language wins
    return guides[0]


async def price_quote(req: Union[PricingRequest, dict], repo: RateRepository) -> QuoteResponse:
    if not isinstance(req, PricingRequest):
        req = PricingRequest.model_validate(req)

    start_time = time.time()
    try:
        selection = await select_vehicle(
            repo,
            city=req.city,
            service_type=req.transportation_service,
            total_travelers=req.total_travelers,
            override_code=req.override_transportation,
        )
        guide = await get_guide_rate(repo, req.language)
        rules = await load_rule_set(repo, req.tour_type)
        if rules.defaulted:
            logger.debug(f"Rule defaults applied: {sorted(str(c) for c in rules.defaulted)}")

        costs = compute_cost(selection.vehicle, guide, rules, req)
    except PricingError as e:
        quotes_total.labels(outcome=e.outcome).inc()
        logger.warning(f"Quote failed: {e.message}")
        raise
    finally:
        quote_duration.observe(time.time() - start_time)

    quotes_total.labels(outcome=str(QuoteOutcome.SUCCESS)).inc()
    logger.info(
        f"Quoted {req.tour_type} in {req.city} for {req.total_travelers} travelers: "
        f"total {costs.total_price:.2f}, base {costs.base_cost:.2f}"
    )
    return build_quote_response(req, selection, costs)


async def list_vehicle_options(
    repo: RateRepository,
    city: str,
    service_type: str,
    travelers: int,
) -> List[VehicleAlternative]:
    """Eligible vehicles for a party, cheapest first; the auto-selection pick is flagged."""
    vehicles = cheapest_first(await repo.find_vehicles(city, service_type, travelers))
    options = [VehicleOption(vehicle=v, is_selected=i == 0) for i, v in enumerate(vehicles)]
    return build_alternative_list(options)
