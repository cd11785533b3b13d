from sqlalchemy import Column, String, Numeric, Boolean, Enum
from tour_pricing.models.base import BaseModel
from tour_pricing.core.enums import RuleCategory, TourType


class PricingRule(BaseModel):
    __tablename__ = "pricing_rules"

    category = Column(Enum(RuleCategory), nullable=False, index=True)
    # only profit margins are scoped to a tour type
    tour_type = Column(Enum(TourType), nullable=True)
    label = Column(String(120), nullable=True)
    value = Column(Numeric(10, 2), nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
