"""
Core data model shared by the planner, the API and the stores.

Everything serializes to camelCase JSON through dataclasses-json, which is
the shape the web client sends and expects back.
"""
from dataclasses import dataclass, field
import datetime
from enum import Enum
from typing import Optional

from dataclasses_json import LetterCase, config, dataclass_json


class Intensity(str, Enum):
    LIGHT = "light"
    MODERATE = "moderate"
    FULL = "full"


class ItemKind(str, Enum):
    CUSTOM = "custom"
    EVENT = "event"
    ATTRACTION = "attraction"


def _iso_date_field():
    return field(metadata=config(encoder=datetime.date.isoformat, decoder=datetime.date.fromisoformat))


@dataclass_json(letter_case=LetterCase.CAMEL)
@dataclass(frozen=True)
class OpeningPeriod:
    day_of_week: int  # 0=Sunday .. 6=Saturday
    open_time: str = "0000"
    close_time: Optional[str] = None


@dataclass_json(letter_case=LetterCase.CAMEL)
@dataclass(frozen=True)
class Attraction:
    id: str
    name: str
    location: str = ""
    rating: float = 0.0
    types: list[str] = field(default_factory=list)
    opening_periods: list[OpeningPeriod] = field(default_factory=list)
    photo: Optional[str] = None
    open_now: Optional[bool] = None
    geometry: Optional[dict] = None
    price_level: Optional[int] = None
    description: Optional[str] = None


@dataclass(frozen=True)
class TimeSlot:
    start_hour: int
    end_hour: int

    @property
    def duration_minutes(self) -> int:
        return (self.end_hour - self.start_hour) * 60


@dataclass_json(letter_case=LetterCase.CAMEL)
@dataclass
class ItineraryItem:
    id: str
    time: str  # HH:MM
    activity_name: str
    kind: ItemKind = ItemKind.ATTRACTION
    duration_minutes: int = 60
    tags: list[str] = field(default_factory=list)
    location: Optional[str] = None
    rating: Optional[float] = None
    price: Optional[str] = None
    description: Optional[str] = None


@dataclass_json(letter_case=LetterCase.CAMEL)
@dataclass
class DayPlan:
    date: datetime.date = _iso_date_field()
    items: list[ItineraryItem] = field(default_factory=list)


@dataclass_json(letter_case=LetterCase.CAMEL)
@dataclass
class FlightPricing:
    price: str
    currency: str
    departure_date: str
    return_date: str
    origin: str
    destination: str
    origin_city: str
    destination_city: str
    airline: Optional[str] = None
    duration: Optional[str] = None
    stops: Optional[int] = None


@dataclass_json(letter_case=LetterCase.CAMEL)
@dataclass
class HotelPricing:
    hotel_name: str
    price: str
    currency: str
    check_in_date: str
    check_out_date: str
    rating_category: str
    address: Optional[str] = None
    amenities: list[str] = field(default_factory=list)
    thumbnail_url: Optional[str] = None


@dataclass_json(letter_case=LetterCase.CAMEL)
@dataclass
class AveragePrice:
    price: float
    currency: str
    per_night: Optional[float] = None


@dataclass_json(letter_case=LetterCase.CAMEL)
@dataclass(frozen=True)
class Event:
    id: str
    name: str
    date: str  # ISO date or date-time, as the provider gives it
    venue: str = "Venue TBA"
    location: Optional[str] = None
    category: str = "Other"
    price: str = "Price TBA"
    url: Optional[str] = None
    image: Optional[str] = None
