"""
Google Places Text Search integration for city attractions.

Looks up "tourist attractions in <city>" and normalises each result into an
Attraction.  Results are cached per city for the lifetime of the finder.
Falls back to mock attractions when GOOGLE_PLACES_API_KEY is not set.

Usage:
    finder = AttractionFinder()
    attractions = finder.search("Lisbon")
"""

from __future__ import annotations

import logging
import os
import threading
from typing import Any, Dict, List, Optional

import requests

from mock_data import generate_mock_attractions
from models import Attraction, OpeningPeriod

log = logging.getLogger(__name__)

_TEXT_SEARCH_URL = "https://maps.googleapis.com/maps/api/place/textsearch/json"
_PHOTO_URL = "https://maps.googleapis.com/maps/api/place/photo"


class AttractionSourceError(Exception):
    """The attraction provider could not be reached or refused the query."""


def _get_places_key() -> str:
    """Read the API key lazily so that dotenv has loaded by the time we need it."""
    return os.getenv("GOOGLE_PLACES_API_KEY", "")


def _parse_periods(opening_hours: Dict[str, Any]) -> List[OpeningPeriod]:
    periods = []
    for p in opening_hours.get("periods", []):
        opens = p.get("open") or {}
        if "day" not in opens:
            continue
        closes = p.get("close") or {}
        periods.append(OpeningPeriod(
            day_of_week=opens["day"],
            open_time=opens.get("time", "0000"),
            close_time=closes.get("time"),
        ))
    return periods


class AttractionFinder:
    def __init__(self, api_key: Optional[str] = None, session: Optional[requests.Session] = None,
                 timeout: float = 10):
        self.api_key = _get_places_key() if api_key is None else api_key
        self.session = session or requests.Session()
        self.timeout = timeout
        self._cache: dict[str, list[Attraction]] = {}
        self._cache_lock = threading.Lock()

    def __call__(self, city: str) -> List[Attraction]:
        return self.search(city)

    def search(self, city: str) -> List[Attraction]:
        """Return attractions for *city*, most relevant first.

        Raises:
            ValueError: city is blank.
            AttractionSourceError: the Places API failed or returned an error status.
        """
        if not city or not city.strip():
            raise ValueError("City parameter is required")
        key = city.strip().lower()
        with self._cache_lock:
            if key in self._cache:
                return self._cache[key]

        if not self.api_key:
            log.info("GOOGLE_PLACES_API_KEY not set, using mock attractions for %s", city)
            attractions = generate_mock_attractions(city.strip())
        else:
            attractions = self._text_search(city.strip())

        with self._cache_lock:
            self._cache[key] = attractions
        return attractions

    def clear_cache(self) -> None:
        with self._cache_lock:
            self._cache.clear()

    def _text_search(self, city: str) -> List[Attraction]:
        params = {
            "query": f"tourist attractions in {city}",
            "key": self.api_key,
            "language": "en",
            "type": "tourist_attraction",
        }
        try:
            resp = self.session.get(_TEXT_SEARCH_URL, params=params, timeout=self.timeout)
            resp.raise_for_status()
            data = resp.json()
        except (requests.RequestException, ValueError) as exc:
            raise AttractionSourceError(f"Failed to fetch attractions: {exc}") from exc

        status = data.get("status")
        if status == "ZERO_RESULTS":
            return []
        if status != "OK":
            raise AttractionSourceError(
                data.get("error_message") or f"API returned status: {status}"
            )
        return [self._normalize(place) for place in data.get("results", [])]

    def _normalize(self, place: Dict[str, Any]) -> Attraction:
        photo = None
        if place.get("photos"):
            ref = place["photos"][0]["photo_reference"]
            photo = f"{_PHOTO_URL}?maxwidth=400&photoreference={ref}&key={self.api_key}"

        opening_hours = place.get("opening_hours") or {}
        geometry = (place.get("geometry") or {}).get("location")

        return Attraction(
            id=place["place_id"],
            name=place["name"],
            location=place.get("formatted_address", ""),
            rating=place.get("rating") or 0,
            types=place.get("types") or [],
            opening_periods=_parse_periods(opening_hours),
            photo=photo,
            open_now=opening_hours.get("open_now"),
            geometry=geometry,
            price_level=place.get("price_level"),
            description=(place.get("editorial_summary") or {}).get("overview"),
        )
