from sqlalchemy import Column, String, Numeric, Boolean
from tour_pricing.models.base import BaseModel


class GuideRate(BaseModel):
    __tablename__ = "guide_rates"

    service_code = Column(String(64), nullable=False, index=True)
    guide_language = Column(String(64), nullable=False, index=True)
    base_rate_eur = Column(Numeric(10, 2), nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
