from dataclasses import dataclass, field
from datetime import date, timedelta

from dataclasses_json import dataclass_json

from models import Intensity


@dataclass_json
@dataclass
class TripInfo:
    city: str
    dates: tuple[date, date]
    intensity: Intensity = Intensity.MODERATE
    travel_style: str = "Cultural"
    interests: list[str] = field(default_factory=list)

    def total_days(self) -> int:
        """Inclusive number of calendar days; 0 when the range is inverted."""
        start, end = self.dates
        return max((end - start).days + 1, 0)

    def trip_nights(self) -> int:
        """Number of nights between the start and end dates."""
        start, end = self.dates
        return max((end - start).days, 0)

    def day(self, offset: int) -> date:
        return self.dates[0] + timedelta(days=offset)

    def cache_key(self) -> str:
        return self.city.strip().lower()
