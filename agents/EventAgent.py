"""
Ticketmaster Discovery API integration for events in a city.

Searches events by city keyword, soonest first, and normalises each result
into an Event.  Falls back to mock events when TICKETMASTER_API_KEY is not
set.

Usage:
    finder = EventFinder()
    events = finder.search("Lisbon")
"""

from __future__ import annotations

import logging
import os
from typing import Any, Dict, List, Optional

import requests

from mock_data import generate_mock_events
from models import Event

log = logging.getLogger(__name__)

_EVENTS_URL = "https://app.ticketmaster.com/discovery/v2/events.json"
_PAGE_SIZE = 20


class EventSourceError(Exception):
    """The event provider could not be reached or rejected the query."""


def _get_ticketmaster_key() -> str:
    return os.getenv("TICKETMASTER_API_KEY", "")


def _price_range(event: Dict[str, Any]) -> str:
    ranges = event.get("priceRanges")
    if not ranges:
        return "Price TBA"
    first = ranges[0]
    return f"{first.get('min')} - {first.get('max')} {first.get('currency', '')}".strip()


class EventFinder:
    def __init__(self, api_key: Optional[str] = None, session: Optional[requests.Session] = None,
                 timeout: float = 10):
        self.api_key = _get_ticketmaster_key() if api_key is None else api_key
        self.session = session or requests.Session()
        self.timeout = timeout

    def search(self, city: str) -> List[Event]:
        """Return upcoming events for *city*, soonest first.

        Raises:
            ValueError: city is blank.
            EventSourceError: the Discovery API failed.
        """
        if not city or not city.strip():
            raise ValueError("City parameter is required")
        city = city.strip()

        if not self.api_key:
            log.info("TICKETMASTER_API_KEY not set, using mock events for %s", city)
            return generate_mock_events(city)

        params = {
            "apikey": self.api_key,
            "keyword": city,
            "sort": "date,asc",
            "size": str(_PAGE_SIZE),
            "locale": "*",
        }
        try:
            resp = self.session.get(_EVENTS_URL, params=params, timeout=self.timeout)
            resp.raise_for_status()
            data = resp.json()
        except (requests.RequestException, ValueError) as exc:
            raise EventSourceError(f"Failed to fetch events: {exc}") from exc

        raw_events = (data.get("_embedded") or {}).get("events") or []
        return [self._normalize(e) for e in raw_events]

    def _normalize(self, event: Dict[str, Any]) -> Event:
        start = (event.get("dates") or {}).get("start") or {}
        venues = (event.get("_embedded") or {}).get("venues") or [{}]
        venue = venues[0]
        classifications = event.get("classifications") or [{}]
        images = event.get("images") or []
        return Event(
            id=event["id"],
            name=event["name"],
            date=start.get("dateTime") or start.get("localDate") or "",
            venue=venue.get("name") or "Venue TBA",
            location=(venue.get("address") or {}).get("line1"),
            category=(classifications[0].get("segment") or {}).get("name") or "Other",
            price=_price_range(event),
            url=event.get("url"),
            image=images[0].get("url") if images else None,
        )
