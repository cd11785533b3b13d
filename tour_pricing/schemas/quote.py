from decimal import Decimal
from typing import List, Optional

from pydantic import AliasChoices, BaseModel, Field, field_validator, model_validator

from tour_pricing.core.config import settings
from tour_pricing.core.enums import TourType


class PricingRequest(BaseModel):
    num_adults: int = Field(ge=0)
    num_children: int = Field(0, ge=0)
    duration_days: int = Field(ge=1)
    tour_type: TourType
    city: str = Field(default_factory=lambda: settings.DEFAULT_CITY, min_length=1)
    transportation_service: str = Field(
        default_factory=lambda: settings.DEFAULT_TRANSPORTATION_SERVICE, min_length=1
    )
    override_transportation: Optional[str] = None
    language: str = Field(default_factory=lambda: settings.DEFAULT_LANGUAGE, min_length=1)
    entrance_fees_per_person: Decimal = Field(Decimal("0"), ge=0)
    includes_lunch: bool = False
    includes_dinner: bool = False
    outside_destination: bool = Field(
        False, validation_alias=AliasChoices("outside_destination", "outside_cairo")
    )
    airport_transfers: int = Field(0, ge=0)
    hotel_checkins: int = Field(0, ge=0)

    @field_validator("override_transportation", mode="before")
    @classmethod
    def blank_override_is_none(cls, value):
        if isinstance(value, str):
            value = value.strip()
            return value or None
        return value

    @model_validator(mode="after")
    def check_travelers(self):
        if self.num_adults + self.num_children < 1:
            raise ValueError("At least one traveler is required")
        return self

    @property
    def total_travelers(self) -> int:
        return self.num_adults + self.num_children


class GroupCosts(BaseModel):
    vehicle: float
    guide: float
    tips: float
    total: float


class PerPersonCosts(BaseModel):
    entrance_fees: float
    water: float
    lunch: float
    dinner: float
    adults_total: float
    children_total: float
    total: float


class AdditionalCosts(BaseModel):
    outside_destination: float
    assistants: float


class Breakdown(BaseModel):
    group_costs: GroupCosts
    per_person_costs: PerPersonCosts
    additional_costs: AdditionalCosts
    base_cost: float
    profit_margin: str
    profit_amount: float
    minimum_booking_applied: bool


class Travelers(BaseModel):
    adults: int
    children: int
    total: int


class SelectedVehicle(BaseModel):
    service_code: str
    type: str
    capacity: str
    cost_per_day: float
    was_overridden: bool


class VehicleAlternative(BaseModel):
    service_code: str
    type: str
    capacity: str
    cost_per_day: float
    is_selected: bool


class VehicleInfo(BaseModel):
    selected: SelectedVehicle
    alternatives: List[VehicleAlternative]


class Pricing(BaseModel):
    price_per_person: float
    total_price: float
    currency: str
    breakdown: Breakdown
    travelers: Travelers
    vehicle: VehicleInfo


class QuoteResponse(BaseModel):
    success: bool = True
    pricing: Pricing


class ErrorResponse(BaseModel):
    success: bool = False
    error: str
