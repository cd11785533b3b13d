"""Quote failures raised by the pricing engine"""
from typing import Optional

from tour_pricing.core.enums import QuoteOutcome


class PricingError(Exception):
    status_code: int = 400
    outcome: str = QuoteOutcome.ERROR.value

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(PricingError):
    status_code = 404
    outcome = QuoteOutcome.NOT_FOUND.value


class NoVehicleAvailableError(NotFoundError):

    def __init__(self, city: str, service_type: str, total_travelers: int):
        super().__init__(
            f"No vehicle available for {total_travelers} passengers in {city} ({service_type})"
        )
        self.city = city
        self.service_type = service_type
        self.total_travelers = total_travelers


class NoGuideAvailableError(NotFoundError):

    def __init__(self, language: str):
        super().__init__(f"No guide available for language: {language}")
        self.language = language


class CapacityViolationError(PricingError):
    status_code = 422
    outcome = QuoteOutcome.CAPACITY_VIOLATION.value

    def __init__(
        self,
        vehicle_type: str,
        total_travelers: int,
        capacity_min: int,
        capacity_max: int,
        service_code: Optional[str] = None,
    ):
        super().__init__(
            f"Vehicle {vehicle_type} cannot accommodate {total_travelers} passengers "
            f"(capacity: {capacity_min}-{capacity_max})"
        )
        self.vehicle_type = vehicle_type
        self.total_travelers = total_travelers
        self.capacity_min = capacity_min
        self.capacity_max = capacity_max
        self.service_code = service_code


class RateLookupError(PricingError):
    status_code = 503
    outcome = QuoteOutcome.LOOKUP_ERROR.value

    def __init__(self, table: str, reason: str):
        super().__init__(f"Rate lookup failed for {table}: {reason}")
        self.table = table
