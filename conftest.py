import pytest
import asyncio
from decimal import Decimal
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from tour_pricing.main import app
from tour_pricing.api.quotes import get_rate_repository
from tour_pricing.core.config import settings
from tour_pricing.core.enums import RuleCategory, TourType
from tour_pricing.models.base import Base
from tour_pricing.schemas.rates import GuideRate, RuleRecord, VehicleRate
from tour_pricing.services.rates import InMemoryRateRepository


def make_vehicle(service_code, capacity_min, capacity_max, rate, city="Cairo",
                 service_type="day_tour", vehicle_type=None, is_active=True) -> VehicleRate:
    return VehicleRate(
        service_code=service_code,
        city=city,
        service_type=service_type,
        vehicle_type=vehicle_type or service_code.split("-")[-1].title(),
        capacity_min=capacity_min,
        capacity_max=capacity_max,
        base_rate_eur=Decimal(str(rate)),
        is_active=is_active,
    )


def make_guide(language, rate, service_code=None, is_active=True) -> GuideRate:
    return GuideRate(
        service_code=service_code or f"GUIDE-{language[:2].upper()}",
        guide_language=language,
        base_rate_eur=Decimal(str(rate)),
        is_active=is_active,
    )


def make_rule(category, value, tour_type=None, is_active=True) -> RuleRecord:
    return RuleRecord(
        category=category,
        value=Decimal(str(value)),
        tour_type=tour_type,
        is_active=is_active,
    )


@pytest.fixture
def cairo_vehicles():
    return [
        make_vehicle("CAI-DT-SEDAN", 1, 4, 60, vehicle_type="Sedan"),
        make_vehicle("CAI-DT-MINIVAN", 3, 7, 110, vehicle_type="Minivan"),
        make_vehicle("CAI-DT-HIACE", 5, 12, 130, vehicle_type="Toyota HiAce"),
        make_vehicle("CAI-DT-COASTER", 13, 30, 200, vehicle_type="Coaster"),
        make_vehicle("CAI-DT-OLDVAN", 1, 10, 90, vehicle_type="Old Van", is_active=False),
        make_vehicle("CAI-HD-MINIVAN", 1, 7, 50, service_type="half_day_tour", vehicle_type="Minivan"),
        make_vehicle("ALX-DT-MINIVAN", 1, 7, 70, city="Alexandria", vehicle_type="Minivan"),
    ]


@pytest.fixture
def guides():
    return [
        make_guide("English", 50, service_code="GUIDE-EN-1"),
        make_guide("French", 55),
        make_guide("English", 70, service_code="GUIDE-EN-2"),
        make_guide("German", 60, is_active=False),
    ]


@pytest.fixture
def rate_repository(cairo_vehicles, guides):
    """Rate card with no rule records, so every rule uses its default"""
    return InMemoryRateRepository(vehicles=cairo_vehicles, guides=guides)


@pytest.fixture
def configured_rules():
    return [
        make_rule(RuleCategory.DAILY_TIPS, 8),
        make_rule(RuleCategory.WATER_BOTTLE, 1.5),
        make_rule(RuleCategory.LUNCH, 12),
        make_rule(RuleCategory.DINNER, 15),
        make_rule(RuleCategory.CHILD_DISCOUNT, 30),
        make_rule(RuleCategory.OUTSIDE_DESTINATION_FEE, 20),
        make_rule(RuleCategory.AIRPORT_ASSISTANT, 25),
        make_rule(RuleCategory.HOTEL_ASSISTANT, 10),
        make_rule(RuleCategory.PROFIT_MARGIN, 20, tour_type=TourType.DAY_TOUR),
        make_rule(RuleCategory.PROFIT_MARGIN, 30, tour_type=TourType.PACKAGE),
        make_rule(RuleCategory.MINIMUM_BOOKING, 150),
    ]


@pytest.fixture
def configured_repository(cairo_vehicles, guides, configured_rules):
    return InMemoryRateRepository(vehicles=cairo_vehicles, guides=guides, rules=configured_rules)


@pytest.fixture
def cairo_day_tour_request():
    """6 adults, 1 day, English guide, 14 EUR entrance, lunch included"""
    return {
        "num_adults": 6,
        "num_children": 0,
        "duration_days": 1,
        "tour_type": "day_tour",
        "city": "Cairo",
        "transportation_service": "day_tour",
        "language": "English",
        "entrance_fees_per_person": 14,
        "includes_lunch": True,
        "includes_dinner": False,
        "outside_destination": False,
        "airport_transfers": 0,
        "hotel_checkins": 0,
    }


@pytest.fixture
async def test_client(rate_repository):
    app.dependency_overrides[get_rate_repository] = lambda: rate_repository
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


class FakeRedis:
    def __init__(self):
        self.store = {}
        self.set_calls = []

    async def get(self, key):
        return self.store.get(key)

    async def set(self, key, value, ex=None):
        self.set_calls.append((key, ex))
        self.store[key] = value.encode() if isinstance(value, str) else value


@pytest.fixture
def fake_redis(monkeypatch):
    fake = FakeRedis()
    monkeypatch.setattr("tour_pricing.api.quotes.get_redis", lambda: fake)
    return fake


@pytest.fixture
def quote_cache_enabled(monkeypatch, fake_redis):
    monkeypatch.setattr(settings, "PRICE_CACHE_TTL", 60)
    return fake_redis


@pytest.fixture
async def sql_session():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


def pytest_configure(config):
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
    config.addinivalue_line(
        "markers", "pricing: marks tests related to pricing"
    )
    config.addinivalue_line(
        "markers", "vehicles: marks tests related to vehicle selection"
    )
    config.addinivalue_line(
        "markers", "rates: marks tests related to rate lookups"
    )


def pytest_collection_modifyitems(config, items):
    """
    Modify test collection to handle asyncio tests
    """
    for item in items:
        if asyncio.iscoroutinefunction(item.function):
            item.add_marker(pytest.mark.asyncio)
