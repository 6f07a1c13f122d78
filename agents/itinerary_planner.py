"""
Rule-based itinerary generator.

Turns a flat list of rated attractions into one DayPlan per trip day:

  1. Filter      → attractions open on the day (day-of-week granularity)
  2. Partition   → sort by rating, give each day its contiguous slice
  3. Assemble    → drop the day's slice into the intensity's time slots

ItineraryPlanner holds the generated days for one editing session and
rebuilds them from scratch whenever the trip parameters or the attraction
data change.  Edits (reorder / add / delete) only touch the in-memory days;
save() hands a snapshot to whatever sink the caller provides.
"""

from __future__ import annotations

import logging
import math
import uuid
from dataclasses import fields, replace
from datetime import date
from typing import Any, Callable, Dict, List, Optional

try:
    from .AttractionAgent import AttractionSourceError
except ImportError:
    from AttractionAgent import AttractionSourceError  # type: ignore

from models import Attraction, DayPlan, Event, Intensity, ItemKind, ItineraryItem, TimeSlot
from TripInfo import TripInfo

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Time-slot table
# ---------------------------------------------------------------------------

TIME_SLOTS: dict[Intensity, list[TimeSlot]] = {
    Intensity.LIGHT: [TimeSlot(9, 11), TimeSlot(13, 15)],
    Intensity.MODERATE: [TimeSlot(9, 11), TimeSlot(12, 14), TimeSlot(15, 17)],
    Intensity.FULL: [TimeSlot(8, 10), TimeSlot(11, 13), TimeSlot(14, 16), TimeSlot(17, 19)],
}

CURRENCY_GLYPH = "$"

# Places tags that say nothing useful to a traveller
_GENERIC_TYPES = {"point_of_interest", "establishment"}


def slots_for(intensity: Intensity | str) -> list[TimeSlot]:
    return TIME_SLOTS[Intensity(intensity)]


# ---------------------------------------------------------------------------
# Filter
# ---------------------------------------------------------------------------

def _day_of_week(day: date) -> int:
    """0=Sunday .. 6=Saturday (Python's weekday() starts on Monday)."""
    return (day.weekday() + 1) % 7


def is_open(attraction: Attraction, day: date) -> bool:
    if not attraction.opening_periods:
        return True
    dow = _day_of_week(day)
    return any(p.day_of_week == dow for p in attraction.opening_periods)


# ---------------------------------------------------------------------------
# Partition
# ---------------------------------------------------------------------------

def partition_for_day(
    attractions: List[Attraction],
    day: date,
    total_days: int,
    trip_start: date,
) -> List[Attraction]:
    """Return the slice of top-rated open attractions that belongs to *day*.

    The open list is rebuilt for every day, so slice boundaries can shift
    between days when closures differ by weekday.
    """
    if total_days <= 0:
        return []
    open_today = [a for a in attractions if is_open(a, day)]
    if not open_today:
        return []
    # sorted() is stable with reverse=True, so equal ratings keep API order
    ranked = sorted(open_today, key=lambda a: a.rating, reverse=True)
    per_day = math.ceil(len(ranked) / total_days)
    day_index = (day - trip_start).days
    if day_index < 0:
        return []
    return ranked[day_index * per_day:(day_index + 1) * per_day]


# ---------------------------------------------------------------------------
# Assemble
# ---------------------------------------------------------------------------

def _humanize_types(types: List[str]) -> List[str]:
    return [t.replace("_", " ") for t in types if t not in _GENERIC_TYPES]


def _price_indicator(price_level: Optional[int]) -> Optional[str]:
    if not price_level:
        return None
    return CURRENCY_GLYPH * price_level


def _describe(attraction: Attraction, tags: List[str]) -> str:
    if attraction.description:
        return attraction.description
    text = f"Rated {attraction.rating:.1f}/5"
    if tags:
        text += f" · {', '.join(tags)}"
    return text


def build_day(
    day_attractions: List[Attraction],
    day_index: int,
    intensity: Intensity | str,
    repeat_attractions: bool = True,
) -> List[ItineraryItem]:
    """Fill the intensity's time slots with the day's attractions.

    With repeat_attractions the list wraps around so every slot is used,
    which repeats attractions on short days; without it the day stops when
    the attractions run out.
    """
    if not day_attractions:
        return []

    slots = slots_for(intensity)
    if not repeat_attractions:
        slots = slots[:len(day_attractions)]

    items: List[ItineraryItem] = []
    for i, slot in enumerate(slots):
        attraction = day_attractions[i % len(day_attractions)]
        tags = _humanize_types(attraction.types)
        items.append(ItineraryItem(
            id=f"{attraction.id}-{day_index}-{i}",
            time=f"{slot.start_hour:02d}:00",
            activity_name=attraction.name,
            kind=ItemKind.ATTRACTION,
            duration_minutes=slot.duration_minutes,
            tags=tags,
            location=attraction.location or None,
            rating=attraction.rating,
            price=_price_indicator(attraction.price_level),
            description=_describe(attraction, tags),
        ))
    return items


def generate_days(
    trip: TripInfo,
    attractions: List[Attraction],
    repeat_attractions: bool = True,
) -> List[DayPlan]:
    total_days = trip.total_days()
    start = trip.dates[0]
    days: List[DayPlan] = []
    for i in range(total_days):
        day = trip.day(i)
        day_attractions = partition_for_day(attractions, day, total_days, start)
        items = build_day(day_attractions, i, trip.intensity, repeat_attractions)
        days.append(DayPlan(date=day, items=items))
    return days


def itinerary_payload(trip: TripInfo, days: List[DayPlan]) -> Dict[str, Any]:
    """Wire shape accepted by POST /api/itineraries."""
    start, end = trip.dates
    return {
        "city": trip.city,
        "dateRange": {"from": start.isoformat(), "to": end.isoformat()},
        "itinerary": [d.to_dict(encode_json=True) for d in days],
    }


# ---------------------------------------------------------------------------
# Session controller
# ---------------------------------------------------------------------------

NO_ATTRACTIONS = "No attractions found for {city}."


class ItineraryPlanner:
    """Holds one editable itinerary and keeps it in sync with its inputs."""

    def __init__(self, trip: TripInfo, repeat_attractions: bool = True):
        self.trip = trip
        self.repeat_attractions = repeat_attractions
        self.attractions: Optional[List[Attraction]] = None
        self.days: List[DayPlan] = []
        self.error: Optional[str] = None
        self.notification: Optional[str] = None

    # -- inputs ------------------------------------------------------------

    def load_attractions(self, fetch: Callable[[str], List[Attraction]]) -> List[DayPlan]:
        """Fetch attractions for the current city and regenerate.

        Failures and empty results leave the planner in an empty state with
        self.error set; no partial itinerary is produced.
        """
        city = self.trip.city
        try:
            attractions = fetch(city)
        except (AttractionSourceError, ValueError) as exc:
            logger.warning("Attraction fetch failed for %s: %s", city, exc)
            self.attractions = None
            self.days = []
            self.error = str(exc)
            return self.days
        return self.receive_attractions(city, attractions)

    def receive_attractions(self, city: str, attractions: List[Attraction]) -> List[DayPlan]:
        if city.strip().lower() != self.trip.cache_key():
            logger.info("Ignoring stale attractions for %s (now planning %s)", city, self.trip.city)
            return self.days
        self.attractions = list(attractions)
        return self.regenerate()

    def update(self, **changes: Any) -> List[DayPlan]:
        """Apply trip parameter changes; any real change rebuilds every day."""
        unknown = set(changes) - {f.name for f in fields(TripInfo)}
        if unknown:
            raise ValueError(f"Unknown trip fields: {', '.join(sorted(unknown))}")
        if "intensity" in changes:
            changes["intensity"] = Intensity(changes["intensity"])
        if "dates" in changes:
            changes["dates"] = tuple(changes["dates"])
        if all(getattr(self.trip, k) == v for k, v in changes.items()):
            return self.days
        old_key = self.trip.cache_key()
        self.trip = replace(self.trip, **changes)
        if self.trip.cache_key() != old_key:
            # attractions are cached per city; the old city's list no longer applies
            self.attractions = None
            self.days = []
            self.error = None
            return self.days
        return self.regenerate()

    def regenerate(self) -> List[DayPlan]:
        if self.attractions is None:
            self.days = []
            return self.days
        if not self.attractions:
            self.error = NO_ATTRACTIONS.format(city=self.trip.city)
            self.days = []
            return self.days
        self.error = None
        self.days = generate_days(self.trip, self.attractions, self.repeat_attractions)
        return self.days

    # -- edits -------------------------------------------------------------

    def _day(self, day_index: int) -> DayPlan:
        if not 0 <= day_index < len(self.days):
            raise IndexError(f"Day {day_index} is outside the trip")
        return self.days[day_index]

    def reorder_items(self, day_index: int, from_index: int, to_index: int) -> List[ItineraryItem]:
        items = self._day(day_index).items
        moved = items.pop(from_index)
        items.insert(to_index, moved)
        return items

    def add_custom_item(
        self,
        day_index: int,
        activity_name: str,
        time: str = "12:00",
        duration_minutes: int = 60,
        location: Optional[str] = None,
        kind: ItemKind = ItemKind.CUSTOM,
    ) -> ItineraryItem:
        item = ItineraryItem(
            id=f"custom-{uuid.uuid4().hex[:8]}",
            time=time,
            activity_name=activity_name,
            kind=ItemKind(kind),
            duration_minutes=duration_minutes,
            location=location,
        )
        self._day(day_index).items.append(item)
        return item

    def add_event_item(self, day_index: int, event: Event, duration_minutes: int = 120) -> ItineraryItem:
        """Add a ticketed event to a day, at the event's start time when it has one."""
        _, _, clock = event.date.partition("T")
        item = ItineraryItem(
            id=f"event-{event.id}",
            time=clock[:5] if len(clock) >= 5 else "12:00",
            activity_name=event.name,
            kind=ItemKind.EVENT,
            duration_minutes=duration_minutes,
            tags=[event.category],
            location=event.location or event.venue,
            price=event.price,
            description=f"{event.category} at {event.venue}",
        )
        self._day(day_index).items.append(item)
        return item

    def delete_item(self, item_id: str) -> bool:
        for day in self.days:
            for i, item in enumerate(day.items):
                if item.id == item_id:
                    del day.items[i]
                    return True
        return False

    # -- persistence -------------------------------------------------------

    def to_payload(self) -> Dict[str, Any]:
        return itinerary_payload(self.trip, self.days)

    def save(self, sink: Callable[[Dict[str, Any]], Any]) -> bool:
        """Send a snapshot to *sink*; on failure keep the plan and flag it."""
        try:
            sink(self.to_payload())
        except Exception as exc:
            logger.warning("Itinerary save failed: %s", exc)
            self.notification = f"Could not save itinerary: {exc}"
            return False
        self.notification = "Itinerary saved"
        return True
