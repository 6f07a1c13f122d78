"""
Amadeus flight and hotel pricing, plus seasonal price averages.

The Amadeus client is passed in (or built from AMADEUS_CLIENT_ID /
AMADEUS_CLIENT_SECRET); without credentials flights come from mock offers
and hotels from the fixed fallback list, so the pricing pages still render.
"""

from __future__ import annotations

import logging
import os
from datetime import date, timedelta
from enum import Enum
from typing import Any, Dict, List, Optional

from amadeus import Client, ResponseError

from mock_data import generate_mock_flights
from models import AveragePrice, FlightPricing, HotelPricing

logger = logging.getLogger(__name__)


class PricingError(Exception):
    """Amadeus rejected or failed a pricing request."""


# ---------------------------------------------------------------------------
# Lookup tables
# ---------------------------------------------------------------------------

class Season(str, Enum):
    WINTER = "winter"
    SPRING = "spring"
    SUMMER = "summer"
    FALL = "fall"

    @classmethod
    def parse(cls, value: str | None, default: "Season | None" = None) -> "Season | None":
        """Lenient parse: 'autumn' is fall, anything unknown gives *default*."""
        key = (value or "").strip().lower()
        if key == "autumn":
            return cls.FALL
        try:
            return cls(key)
        except ValueError:
            return default


# (month, day) sampled to represent each season
SEASON_SAMPLE_DAY: dict[Season, tuple[int, int]] = {
    Season.WINTER: (1, 15),
    Season.SPRING: (4, 15),
    Season.SUMMER: (7, 15),
    Season.FALL: (10, 15),
}

SEASONAL_FACTORS: dict[Season, float] = {
    Season.WINTER: 0.8,
    Season.SPRING: 0.9,
    Season.SUMMER: 1.2,
    Season.FALL: 0.9,
}

MIN_LEAD_DAYS = 14

CITY_TO_AIRPORT: dict[str, str] = {
    "New York": "JFK", "London": "LHR", "Paris": "CDG", "Tokyo": "HND",
    "Sydney": "SYD", "Dubai": "DXB", "Barcelona": "BCN", "Rome": "FCO",
    "Amsterdam": "AMS", "Singapore": "SIN", "Berlin": "BER", "Bangkok": "BKK",
    "Madrid": "MAD", "Toronto": "YYZ", "San Francisco": "SFO", "Chicago": "ORD",
    "Los Angeles": "LAX", "Miami": "MIA", "Hong Kong": "HKG", "Istanbul": "IST",
    "Seoul": "ICN", "Mumbai": "BOM", "Rio de Janeiro": "GIG", "Mexico City": "MEX",
    "Cairo": "CAI", "Vienna": "VIE", "Munich": "MUC", "Athens": "ATH",
    "Prague": "PRG", "Budapest": "BUD", "Dublin": "DUB", "Oslo": "OSL",
    "Stockholm": "ARN", "Brussels": "BRU", "Lisbon": "LIS", "Helsinki": "HEL",
    "Copenhagen": "CPH", "Warsaw": "WAW", "Zurich": "ZRH", "Geneva": "GVA",
    "Vancouver": "YVR", "Montreal": "YUL", "Melbourne": "MEL", "Auckland": "AKL",
    "Wellington": "WLG", "Johannesburg": "JNB", "Cape Town": "CPT",
    "Buenos Aires": "EZE", "Santiago": "SCL", "Lima": "LIM", "Bogota": "BOG",
    "Doha": "DOH",
}

CITY_TO_CITY_CODE: dict[str, str] = {
    "New York": "NYC", "London": "LON", "Paris": "PAR", "Tokyo": "TYO",
    "Rome": "ROM", "Barcelona": "BCN", "Prague": "PRG", "Amsterdam": "AMS",
    "Berlin": "BER", "Madrid": "MAD", "Vienna": "VIE", "Brussels": "BRU",
    "Lisbon": "LIS", "Dublin": "DUB", "Doha": "DOH",
}

# Average nightly hotel price per IATA city code, used when live offers fail
DEFAULT_HOTEL_BASE = (150.0, "EUR")
CITY_HOTEL_BASE: dict[str, tuple[float, str]] = {
    "NYC": (250.0, "USD"),
    "LON": (210.0, "GBP"),
    "PAR": (230.0, "EUR"),
    "PRG": (130.0, "EUR"),
    "BRU": (150.0, "EUR"),
    "AMS": (170.0, "EUR"),
    "BER": (140.0, "EUR"),
    "ROM": (160.0, "EUR"),
    "BCN": (155.0, "EUR"),
    "MAD": (145.0, "EUR"),
    "VIE": (160.0, "EUR"),
    "DUB": (180.0, "EUR"),
    "LIS": (130.0, "EUR"),
    "DOH": (200.0, "USD"),
}

# name pattern, nightly price, star rating, address pattern, amenities
_FALLBACK_HOTELS = [
    ("Top Hotel in {city}", 180, "4-star", "Main Street, {city}", ["WiFi", "Breakfast", "Pool"]),
    ("Central {city} Hotel", 220, "5-star", "Central Square, {city}", ["WiFi", "Spa", "Restaurant", "Gym"]),
    ("Budget Stay {city}", 120, "3-star", "Side Street, {city}", ["WiFi", "Breakfast"]),
]


def airport_code(city: str) -> str:
    """IATA airport code for a city name; anything unknown is passed through."""
    return CITY_TO_AIRPORT.get(city.strip(), city.strip())


def city_code(city: str) -> str:
    return CITY_TO_CITY_CODE.get(city.strip(), city.strip())


def _hotel_price_code(city: str) -> str:
    """City code for the price table; unknown names that are not a code count as Paris."""
    code = CITY_TO_CITY_CODE.get(city.strip())
    if code:
        return code
    city = city.strip().upper()
    return city if len(city) == 3 else "PAR"


def sample_date(season: Optional[Season], today: Optional[date] = None) -> date:
    """Representative travel date for *season*, at least two weeks ahead."""
    today = today or date.today()
    month, day = SEASON_SAMPLE_DAY[season or Season.SUMMER]
    sample = date(today.year, month, day)
    if sample < today + timedelta(days=MIN_LEAD_DAYS):
        sample = sample.replace(year=today.year + 1)
    return sample


def _nights(check_in: str, check_out: str) -> int:
    return (date.fromisoformat(check_out) - date.fromisoformat(check_in)).days


def _build_client() -> Optional[Client]:
    client_id = os.getenv("AMADEUS_CLIENT_ID", "")
    client_secret = os.getenv("AMADEUS_CLIENT_SECRET", "")
    if not (client_id and client_secret):
        return None
    return Client(
        client_id=client_id,
        client_secret=client_secret,
        hostname=os.getenv("AMADEUS_HOSTNAME", "test"),
    )


# ---------------------------------------------------------------------------
# Normalisation
# ---------------------------------------------------------------------------

def _normalize_flight_offer(offer: Dict[str, Any], origin_city: str, destination_city: str,
                            return_date: Optional[str]) -> FlightPricing:
    itinerary = offer["itineraries"][0]
    segments = itinerary["segments"]
    first, last = segments[0], segments[-1]
    return FlightPricing(
        price=offer["price"]["total"],
        currency=offer["price"]["currency"],
        departure_date=first["departure"]["at"],
        return_date=return_date or "",
        origin=first["departure"]["iataCode"],
        destination=last["arrival"]["iataCode"],
        origin_city=origin_city,
        destination_city=destination_city,
        airline=first.get("carrierCode"),
        duration=itinerary.get("duration"),
        stops=len(segments) - 1,
    )


def _normalize_hotel_offer(offer: Dict[str, Any], city: str, check_in: str,
                           check_out: str) -> HotelPricing:
    hotel = offer["hotel"]
    price = offer["offers"][0]["price"]
    address = hotel.get("address") or {}
    lines = ", ".join(address.get("lines") or []) or city
    city_name = address.get("cityName") or city
    media = hotel.get("media") or []
    return HotelPricing(
        hotel_name=hotel["name"],
        price=price["total"],
        currency=price["currency"],
        check_in_date=check_in,
        check_out_date=check_out,
        rating_category=f"{hotel['rating']}-star" if hotel.get("rating") else "3-star",
        address=f"{lines}, {city_name}",
        amenities=(hotel.get("amenities") or [])[:5],
        thumbnail_url=media[0].get("uri") if media else None,
    )


def fallback_hotels(city: str, check_in: str, check_out: str) -> List[HotelPricing]:
    nights = max(_nights(check_in, check_out), 1)
    return [
        HotelPricing(
            hotel_name=name.format(city=city),
            price=str(nightly * nights),
            currency="EUR",
            check_in_date=check_in,
            check_out_date=check_out,
            rating_category=stars,
            address=address.format(city=city),
            amenities=list(amenities),
        )
        for name, nightly, stars, address, amenities in _FALLBACK_HOTELS
    ]


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------

class PricingService:
    def __init__(self, client: Optional[Client] = None):
        self.client = client if client is not None else _build_client()

    def flight_offers(
        self,
        origin_city: str,
        destination_city: str,
        departure_date: str,
        return_date: Optional[str] = None,
        adults: int = 1,
    ) -> List[FlightPricing]:
        origin = airport_code(origin_city)
        destination = airport_code(destination_city)
        logger.info("Flight offers %s -> %s on %s", origin, destination, departure_date)

        if self.client is None:
            raw = generate_mock_flights(origin, destination, departure_date, adults=adults)
        else:
            params = {
                "originLocationCode": origin,
                "destinationLocationCode": destination,
                "departureDate": departure_date,
                "adults": adults,
            }
            if return_date:
                params["returnDate"] = return_date
            try:
                raw = self.client.shopping.flight_offers_search.get(**params).data
            except ResponseError as e:
                raise PricingError(str(e)) from e

        return [_normalize_flight_offer(o, origin_city, destination_city, return_date) for o in raw]

    def hotel_offers(
        self,
        city: str,
        check_in: str,
        check_out: str,
        adults: int = 1,
        radius: int = 5,
    ) -> List[HotelPricing]:
        if self.client is None:
            return fallback_hotels(city, check_in, check_out)

        code = city_code(city)
        try:
            # Step 1: hotels in the city, best rated first
            hotels = self.client.reference_data.locations.hotels.by_city.get(
                cityCode=code, radius=radius, radiusUnit="KM",
            ).data
            top = sorted(hotels, key=lambda h: h.get("rating") or 0, reverse=True)[:10]
            if not top:
                raise PricingError(f"No hotels found in {city}")

            # Step 2: live offers for those hotels
            offers = self.client.shopping.hotel_offers_search.get(
                hotelIds=",".join(h["hotelId"] for h in top),
                adults=adults,
                checkInDate=check_in,
                checkOutDate=check_out,
                currency="EUR",
                bestRateOnly=True,
            ).data
            return [_normalize_hotel_offer(o, city, check_in, check_out) for o in offers]
        except (ResponseError, PricingError, KeyError, IndexError) as e:
            logger.warning("Using fallback hotel data for %s: %s", city, e)
            return fallback_hotels(city, check_in, check_out)

    def average_flight_price(self, origin_city: str, destination_city: str, season: str,
                             today: Optional[date] = None) -> AveragePrice:
        departure = sample_date(Season.parse(season), today).isoformat()
        try:
            offers = self.flight_offers(origin_city, destination_city, departure)
            if not offers:
                raise PricingError("No flight offers found")
        except (PricingError, KeyError, ValueError) as e:
            logger.warning("Average flight price failed: %s", e)
            return AveragePrice(price=0, currency="USD")

        total = sum(float(o.price) for o in offers)
        return AveragePrice(price=round(total / len(offers), 2), currency=offers[0].currency)

    def average_hotel_price(self, city: str, season: str, nights: int = 3,
                            today: Optional[date] = None) -> AveragePrice:
        nights = max(nights, 1)
        parsed = Season.parse(season)
        check_in = sample_date(parsed, today)
        check_out = check_in + timedelta(days=nights)

        if self.client is not None:
            try:
                offers = self.hotel_offers(city, check_in.isoformat(), check_out.isoformat(),
                                           adults=1, radius=10)
                if offers:
                    avg_total = sum(float(o.price) for o in offers) / len(offers)
                    return AveragePrice(
                        price=round(avg_total, 2),
                        per_night=round(avg_total / nights, 2),
                        currency=offers[0].currency,
                    )
            except ValueError as e:
                logger.warning("Could not average live hotel prices: %s", e)

        return estimate_hotel_price(city, parsed, nights)


def estimate_hotel_price(city: str, season: Optional[Season], nights: int) -> AveragePrice:
    """Base nightly price for the city, scaled by the seasonal factor.

    An unrecognised season leaves the base price unscaled.
    """
    base, currency = CITY_HOTEL_BASE.get(_hotel_price_code(city), DEFAULT_HOTEL_BASE)
    per_night = base * SEASONAL_FACTORS.get(season, 1.0)
    return AveragePrice(
        price=round(per_night * nights, 2),
        per_night=round(per_night, 2),
        currency=currency,
    )
