import sys
import asyncio
from decimal import Decimal
from sqlalchemy import select, func, delete
from tour_pricing.core.enums import RuleCategory, TourType
from tour_pricing.db.session import AsyncSessionLocal, init_models
from tour_pricing.models.guide_rate import GuideRate
from tour_pricing.models.pricing_rule import PricingRule
from tour_pricing.models.transportation_rate import TransportationRate
from tour_pricing.services.rates import RULE_DEFAULTS

VEHICLES = [
    # service_code, city, service_type, vehicle_type, min, max, rate
    ("CAI-DT-SEDAN", "Cairo", "day_tour", "Sedan", 1, 2, "45"),
    ("CAI-DT-MINIVAN", "Cairo", "day_tour", "Minivan", 3, 7, "110"),
    ("CAI-DT-HIACE", "Cairo", "day_tour", "Toyota HiAce", 3, 12, "130"),
    ("CAI-DT-COASTER", "Cairo", "day_tour", "Coaster", 13, 25, "190"),
    ("CAI-HD-SEDAN", "Cairo", "half_day_tour", "Sedan", 1, 2, "30"),
    ("CAI-HD-MINIVAN", "Cairo", "half_day_tour", "Minivan", 3, 7, "70"),
    ("CAI-AT-SEDAN", "Cairo", "airport_transfer", "Sedan", 1, 2, "25"),
    ("CAI-AT-MINIVAN", "Cairo", "airport_transfer", "Minivan", 3, 7, "40"),
    ("LXR-DT-MINIVAN", "Luxor", "day_tour", "Minivan", 1, 7, "80"),
    ("ASW-DT-MINIVAN", "Aswan", "day_tour", "Minivan", 1, 7, "75"),
]

GUIDES = [
    ("GUIDE-EN", "English", "50"),
    ("GUIDE-FR", "French", "55"),
    ("GUIDE-DE", "German", "60"),
    ("GUIDE-ES", "Spanish", "55"),
    ("GUIDE-IT", "Italian", "55"),
]

RULE_LABELS = {
    RuleCategory.DAILY_TIPS: "Daily Tips",
    RuleCategory.WATER_BOTTLE: "Water Bottle",
    RuleCategory.LUNCH: "Lunch",
    RuleCategory.DINNER: "Dinner",
    RuleCategory.CHILD_DISCOUNT: "Child Discount",
    RuleCategory.OUTSIDE_DESTINATION_FEE: "Outside Destination Fee",
    RuleCategory.AIRPORT_ASSISTANT: "Airport Assistant",
    RuleCategory.HOTEL_ASSISTANT: "Hotel Assistant",
    RuleCategory.PROFIT_MARGIN: "Profit Margin",
    RuleCategory.MINIMUM_BOOKING: "Minimum Booking",
}


def build_rules() -> list:
    rules = []
    for category, value in RULE_DEFAULTS.items():
        if category == RuleCategory.PROFIT_MARGIN:
            for tour_type in TourType:
                rules.append(PricingRule(
                    category=category,
                    tour_type=tour_type,
                    label=f"{RULE_LABELS[category]} ({tour_type})",
                    value=value,
                ))
            continue
        rules.append(PricingRule(category=category, label=RULE_LABELS[category], value=value))
    return rules


async def seed_rates(force: bool = False) -> bool:
    await init_models()

    async with AsyncSessionLocal() as db:
        res = await db.execute(select(func.count()).select_from(TransportationRate))
        existing = res.scalar_one()

        if existing and not force:
            print(f"Error: transportation_rates already holds {existing} rows (use --force to replace them)")
            return False

        if existing:
            for model in (TransportationRate, GuideRate, PricingRule):
                await db.execute(delete(model))
            print("Cleared existing rate tables")

        db.add_all([
            TransportationRate(
                service_code=code,
                city=city,
                service_type=service_type,
                vehicle_type=vehicle_type,
                capacity_min=cap_min,
                capacity_max=cap_max,
                base_rate_eur=Decimal(rate),
            )
            for code, city, service_type, vehicle_type, cap_min, cap_max, rate in VEHICLES
        ])
        db.add_all([
            GuideRate(service_code=code, guide_language=language, base_rate_eur=Decimal(rate))
            for code, language, rate in GUIDES
        ])
        db.add_all(build_rules())
        await db.commit()

    print(f"Seeded {len(VEHICLES)} vehicles, {len(GUIDES)} guides and {len(RULE_DEFAULTS)} rule categories")
    return True


def main():
    force = "--force" in sys.argv[1:]
    unknown = [arg for arg in sys.argv[1:] if arg != "--force"]

    if unknown:
        print("Usage: python seed_rates.py [--force]")
        sys.exit(1)

    try:
        success = asyncio.run(seed_rates(force=force))
    except Exception as e:
        print(f"Error seeding rates: {str(e)}")
        success = False
    sys.exit(0 if success else 1)


if __name__ == "__main__":
    main()
