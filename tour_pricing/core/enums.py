from enum import Enum


class TourType(str, Enum):
    DAY_TOUR = "day_tour"
    PACKAGE = "package"

    def __str__(self):
        return self.value


class TransportationService(str, Enum):
    DAY_TOUR = "day_tour"
    HALF_DAY_TOUR = "half_day_tour"
    AIRPORT_TRANSFER = "airport_transfer"
    INTERCITY_TRANSFER = "intercity_transfer"
    DINNER_TRANSFER = "dinner_transfer"
    SOUND_LIGHT_TRANSFER = "sound_light_transfer"

    def __str__(self):
        return self.value


class RuleCategory(str, Enum):
    DAILY_TIPS = "daily_tips"
    WATER_BOTTLE = "water_bottle"
    LUNCH = "lunch"
    DINNER = "dinner"
    CHILD_DISCOUNT = "child_discount"
    OUTSIDE_DESTINATION_FEE = "outside_destination_fee"
    AIRPORT_ASSISTANT = "airport_assistant"
    HOTEL_ASSISTANT = "hotel_assistant"
    PROFIT_MARGIN = "profit_margin"
    MINIMUM_BOOKING = "minimum_booking"

    def __str__(self):
        return self.value


class QuoteOutcome(str, Enum):
    SUCCESS = "success"
    NOT_FOUND = "not_found"
    CAPACITY_VIOLATION = "capacity_violation"
    LOOKUP_ERROR = "lookup_error"
    CACHED = "cached"
    ERROR = "error"

    def __str__(self):
        return self.value
