import sys
import os
import pytest
from datetime import date

# Project root: models, TripInfo, mock_data and the other top-level modules
_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
# agents/ subdir, so AttractionAgent, PricingAgent and
# itinerary_planner can be imported by name in tests without the package.
_agents_dir = os.path.join(_root, "agents")
for _p in (_root, _agents_dir):
    if _p not in sys.path:
        sys.path.insert(0, _p)

from models import Attraction, Intensity, OpeningPeriod
from TripInfo import TripInfo


def make_attraction(id, rating=4.0, name=None, types=None, open_days=None, **kwargs):
    """Attraction factory; open_days restricts opening to those weekdays (0=Sunday)."""
    periods = [OpeningPeriod(day_of_week=d, open_time="0900", close_time="1700")
               for d in (open_days or [])]
    return Attraction(
        id=id,
        name=name or f"Attraction {id}",
        location=f"{id} Street, Paris",
        rating=rating,
        types=types if types is not None else ["museum", "point_of_interest"],
        opening_periods=periods,
        **kwargs,
    )


@pytest.fixture
def trip():
    """Three days in Paris, Monday 1 June to Wednesday 3 June 2026."""
    return TripInfo(
        city="Paris",
        dates=(date(2026, 6, 1), date(2026, 6, 3)),
        intensity=Intensity.MODERATE,
        travel_style="Cultural",
        interests=["art", "food"],
    )


@pytest.fixture
def attractions():
    return [
        make_attraction("a", rating=4.2),
        make_attraction("b", rating=4.8),
        make_attraction("c", rating=3.9),
        make_attraction("d", rating=4.5),
        make_attraction("e", rating=4.8),
        make_attraction("f", rating=4.0),
        make_attraction("g", rating=2.5),
    ]
