import logging
from dataclasses import dataclass, field
from typing import List, Optional

from tour_pricing.core.exceptions import CapacityViolationError, NoVehicleAvailableError, NotFoundError
from tour_pricing.schemas.rates import VehicleRate
from tour_pricing.services.rates import RateRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VehicleOption:
    vehicle: VehicleRate
    is_selected: bool


@dataclass(frozen=True)
class VehicleSelection:
    vehicle: VehicleRate
    was_overridden: bool
    alternatives: List[VehicleOption] = field(default_factory=list)


def cheapest_first(vehicles: List[VehicleRate]) -> List[VehicleRate]:
    # stable, so equal rates keep repository order
    return sorted(vehicles, key=lambda v: v.base_rate_eur)


async def select_vehicle(
    repo: RateRepository,
    city: str,
    service_type: str,
    total_travelers: int,
    override_code: Optional[str] = None,
) -> VehicleSelection:
    """Pick the vehicle for a party.

    With ``override_code`` the named vehicle is used, but it still has to
    carry the whole party. Otherwise the cheapest active vehicle for the
    city and service type whose capacity range holds the party is chosen.
    """
    logger.debug(
        f"Vehicle selection: city={city} service={service_type} "
        f"travelers={total_travelers} override={override_code}"
    )

    if override_code:
        vehicle = await repo.get_vehicle(override_code)
        if vehicle is None:
            raise NotFoundError(f"Override vehicle not found: {override_code}")
        if not vehicle.fits(total_travelers):
            raise CapacityViolationError(
                vehicle_type=vehicle.vehicle_type,
                total_travelers=total_travelers,
                capacity_min=vehicle.capacity_min,
                capacity_max=vehicle.capacity_max,
                service_code=vehicle.service_code,
            )
        logger.debug(f"Using override vehicle {vehicle.service_code}")
        eligible = cheapest_first(await repo.find_vehicles(city, service_type, total_travelers))
    else:
        eligible = cheapest_first(await repo.find_vehicles(city, service_type, total_travelers))
        if not eligible:
            raise NoVehicleAvailableError(city, service_type, total_travelers)
        vehicle = eligible[0]

    logger.debug(
        f"Selected vehicle {vehicle.service_code} ({vehicle.vehicle_type}) "
        f"at {vehicle.base_rate_eur}/day"
    )

    alternatives = [
        VehicleOption(vehicle=v, is_selected=v.service_code == vehicle.service_code)
        for v in eligible
    ]
    return VehicleSelection(
        vehicle=vehicle,
        was_overridden=bool(override_code),
        alternatives=alternatives,
    )
