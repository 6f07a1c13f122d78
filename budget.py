"""
Trip budget estimate from per-city daily costs and a travel-style multiplier.
"""
from dataclasses import dataclass
from enum import Enum

from dataclasses_json import LetterCase, dataclass_json

MIN_DAYS = 1
MAX_DAYS = 30


class TravelStyle(str, Enum):
    BUDGET = "Budget"
    CULTURAL = "Cultural"
    LUXURY = "Luxury"
    ADVENTURE = "Adventure"
    FAMILY = "Family"

    @classmethod
    def parse(cls, value):
        """Case-insensitive lookup; unknown styles count as Cultural."""
        for style in cls:
            if style.value.lower() == (value or "").strip().lower():
                return style
        return cls.CULTURAL


@dataclass(frozen=True)
class DailyCosts:
    accommodation: int
    food: int
    activities: int
    transport: int


DEFAULT_COSTS = DailyCosts(accommodation=100, food=40, activities=30, transport=15)

CITY_COSTS = {
    "london": DailyCosts(accommodation=150, food=50, activities=40, transport=20),
    "paris": DailyCosts(accommodation=130, food=45, activities=35, transport=15),
    "new york": DailyCosts(accommodation=200, food=60, activities=50, transport=25),
}

STYLE_MULTIPLIERS = {
    TravelStyle.BUDGET: 0.7,
    TravelStyle.CULTURAL: 1.0,
    TravelStyle.LUXURY: 1.8,
    TravelStyle.ADVENTURE: 1.2,
    TravelStyle.FAMILY: 1.3,
}


@dataclass_json(letter_case=LetterCase.CAMEL)
@dataclass
class BudgetEstimate:
    city: str
    travel_style: str
    days: int
    accommodation: int
    food: int
    activities: int
    transport: int
    total: int


def estimate_budget(city, travel_style="Cultural", days=7):
    days = min(max(int(days), MIN_DAYS), MAX_DAYS)
    style = TravelStyle.parse(travel_style)
    base = CITY_COSTS.get(city.strip().lower(), DEFAULT_COSTS)
    multiplier = STYLE_MULTIPLIERS[style]

    def cost(per_day):
        return round(per_day * multiplier * days)

    accommodation = cost(base.accommodation)
    food = cost(base.food)
    activities = cost(base.activities)
    transport = cost(base.transport)
    return BudgetEstimate(
        city=city.strip(),
        travel_style=style.value,
        days=days,
        accommodation=accommodation,
        food=food,
        activities=activities,
        transport=transport,
        total=accommodation + food + activities + transport,
    )
