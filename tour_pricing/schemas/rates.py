from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from tour_pricing.core.enums import RuleCategory, TourType


class VehicleRate(BaseModel):
    model_config = ConfigDict(from_attributes=True, frozen=True)

    service_code: str
    city: str
    service_type: str
    vehicle_type: str
    capacity_min: int = Field(ge=0)
    capacity_max: int = Field(ge=0)
    base_rate_eur: Decimal = Field(ge=0)
    is_active: bool = True

    @model_validator(mode="after")
    def check_capacity_range(self):
        if self.capacity_min > self.capacity_max:
            raise ValueError(
                f"capacity_min ({self.capacity_min}) exceeds capacity_max ({self.capacity_max})"
            )
        return self

    def fits(self, travelers: int) -> bool:
        return self.capacity_min <= travelers <= self.capacity_max

    @property
    def capacity_label(self) -> str:
        return f"{self.capacity_min}-{self.capacity_max} pax"


class GuideRate(BaseModel):
    model_config = ConfigDict(from_attributes=True, frozen=True)

    service_code: str
    guide_language: str
    base_rate_eur: Decimal = Field(ge=0)
    is_active: bool = True


class RuleRecord(BaseModel):
    model_config = ConfigDict(from_attributes=True, frozen=True)

    category: RuleCategory
    value: Decimal = Field(ge=0)
    is_active: bool = True
    tour_type: Optional[TourType] = None
    label: Optional[str] = None
