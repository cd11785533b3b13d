from sqlalchemy import Column, String, Integer, Numeric, Boolean, CheckConstraint
from tour_pricing.models.base import BaseModel


class TransportationRate(BaseModel):
    __tablename__ = "transportation_rates"
    __table_args__ = (
        CheckConstraint("capacity_min <= capacity_max", name="ck_transportation_capacity_range"),
    )

    service_code = Column(String(64), unique=True, nullable=False, index=True)
    city = Column(String(120), nullable=False, index=True)
    service_type = Column(String(64), nullable=False, index=True)
    vehicle_type = Column(String(120), nullable=False)
    capacity_min = Column(Integer, nullable=False)
    capacity_max = Column(Integer, nullable=False)
    base_rate_eur = Column(Numeric(10, 2), nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
