"""FastAPI Backend - Voyager Trip Planner"""
import logging
import os

# Load .env before anything else
from dotenv import load_dotenv
load_dotenv()

from fastapi import Depends, FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response
from pydantic import BaseModel, Field
from sqlalchemy.exc import SQLAlchemyError
from typing import Any, Dict, List, Optional
from datetime import date

from agents.AttractionAgent import AttractionFinder, AttractionSourceError
from agents.EventAgent import EventFinder, EventSourceError
from agents.PricingAgent import PricingError, PricingService, Season
from agents.itinerary_planner import ItineraryPlanner
from budget import estimate_budget
from calendar_export import itinerary_to_ical
from chatbot import ChatRequest, default_client, generate_chat_response
from database import ItineraryStore
from models import DayPlan, Intensity
from TripInfo import TripInfo

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

VERSION = "1.0.0"


# Pydantic models
class DateRange(BaseModel):
    from_: date = Field(alias="from")
    to: date

    model_config = {"populate_by_name": True}


class GenerateRequest(BaseModel):
    city: str
    dateRange: DateRange
    intensity: Intensity = Intensity.MODERATE
    travelStyle: str = "Cultural"
    repeatAttractions: bool = True


class SaveItineraryRequest(BaseModel):
    city: str
    dateRange: DateRange
    itinerary: List[Dict[str, Any]]


# Dependencies (built lazily, replaceable through app.dependency_overrides)
def get_attraction_finder(request: Request) -> AttractionFinder:
    if getattr(request.app.state, "attraction_finder", None) is None:
        request.app.state.attraction_finder = AttractionFinder()
    return request.app.state.attraction_finder


def get_event_finder(request: Request) -> EventFinder:
    if getattr(request.app.state, "event_finder", None) is None:
        request.app.state.event_finder = EventFinder()
    return request.app.state.event_finder


def get_store(request: Request) -> ItineraryStore:
    if getattr(request.app.state, "store", None) is None:
        request.app.state.store = ItineraryStore()
    return request.app.state.store


def get_pricing(request: Request) -> PricingService:
    if getattr(request.app.state, "pricing", None) is None:
        request.app.state.pricing = PricingService()
    return request.app.state.pricing


def get_chat_client():
    return default_client()


def create_app() -> FastAPI:
    app = FastAPI(
        title="Voyager Trip Planner API",
        description="Attractions, itineraries, pricing and travel chat",
        version=VERSION,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[os.getenv("FRONTEND_URL", "http://localhost:5173")],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    return app


app = create_app()


# Helper functions
def _require_city(city: Optional[str]) -> str:
    if not city or not city.strip():
        raise HTTPException(status_code=400, detail="City parameter is required")
    return city.strip()


def _parse_days(raw_days: List[Dict[str, Any]]) -> List[DayPlan]:
    try:
        return [DayPlan.from_dict(d) for d in raw_days]
    except (AttributeError, KeyError, ValueError, TypeError) as e:
        raise HTTPException(status_code=400, detail=f"Malformed itinerary: {e}")


def _wire_payload(body: SaveItineraryRequest) -> Dict[str, Any]:
    days = _parse_days(body.itinerary)
    return {
        "city": body.city.strip(),
        "dateRange": {"from": body.dateRange.from_.isoformat(), "to": body.dateRange.to.isoformat()},
        "itinerary": [d.to_dict(encode_json=True) for d in days],
    }


def _fetch_attractions(finder: AttractionFinder, city: str):
    try:
        return finder.search(city)
    except AttractionSourceError as e:
        logger.warning("Attraction lookup failed for %s: %s", city, e)
        raise HTTPException(status_code=502, detail=f"Failed to fetch attractions: {e}")


# Attraction endpoints
@app.get("/api/attractions")
def list_attractions(city: str = "", finder: AttractionFinder = Depends(get_attraction_finder)):
    city = _require_city(city)
    return [a.to_dict(encode_json=True) for a in _fetch_attractions(finder, city)]


@app.get("/api/attractions/{city}")
def get_attractions(city: str, finder: AttractionFinder = Depends(get_attraction_finder)):
    return list_attractions(city, finder)


# Event endpoint
@app.get("/api/events")
def list_events(city: str = "", finder: EventFinder = Depends(get_event_finder)):
    city = _require_city(city)
    try:
        events = finder.search(city)
    except EventSourceError as e:
        logger.warning("Event lookup failed for %s: %s", city, e)
        raise HTTPException(status_code=502, detail=str(e))
    return [ev.to_dict() for ev in events]


# Itinerary endpoints
@app.post("/api/itineraries/generate")
def generate_itinerary(body: GenerateRequest, finder: AttractionFinder = Depends(get_attraction_finder)):
    city = _require_city(body.city)
    trip = TripInfo(
        city=city,
        dates=(body.dateRange.from_, body.dateRange.to),
        intensity=body.intensity,
        travel_style=body.travelStyle,
    )
    planner = ItineraryPlanner(trip, repeat_attractions=body.repeatAttractions)

    days = planner.load_attractions(finder)
    if planner.attractions is None:
        raise HTTPException(status_code=502, detail=f"Failed to fetch attractions: {planner.error}")
    if planner.error:
        raise HTTPException(status_code=404, detail=planner.error)

    return {
        "city": city,
        "dateRange": {"from": trip.dates[0].isoformat(), "to": trip.dates[1].isoformat()},
        "intensity": trip.intensity.value,
        "nights": trip.trip_nights(),
        "days": [d.to_dict(encode_json=True) for d in days],
    }


@app.post("/api/itineraries")
def save_itinerary(body: SaveItineraryRequest, store: ItineraryStore = Depends(get_store)):
    payload = _wire_payload(body)
    try:
        itinerary_id = store.save(payload)
    except SQLAlchemyError as e:
        logger.warning("Saving itinerary for %s failed: %s", payload["city"], e)
        raise HTTPException(status_code=500, detail="Could not save itinerary")
    logger.info("Saved itinerary %s for %s", itinerary_id, payload["city"])
    return {"id": itinerary_id, "status": "saved"}


@app.get("/api/itineraries")
def list_itineraries(city: Optional[str] = None, store: ItineraryStore = Depends(get_store)):
    return store.list(city)


@app.get("/api/itineraries/{itinerary_id}")
def get_itinerary(itinerary_id: str, store: ItineraryStore = Depends(get_store)):
    saved = store.get(itinerary_id)
    if not saved:
        raise HTTPException(status_code=404, detail="Itinerary not found")
    return saved


@app.put("/api/itineraries/{itinerary_id}")
def replace_itinerary(itinerary_id: str, body: SaveItineraryRequest,
                      store: ItineraryStore = Depends(get_store)):
    try:
        saved = store.replace(itinerary_id, _wire_payload(body))
    except SQLAlchemyError as e:
        logger.warning("Replacing itinerary %s failed: %s", itinerary_id, e)
        raise HTTPException(status_code=500, detail="Could not save itinerary")
    if not saved:
        raise HTTPException(status_code=404, detail="Itinerary not found")
    return saved


@app.get("/api/itineraries/{itinerary_id}/ical")
def get_itinerary_ical(itinerary_id: str, store: ItineraryStore = Depends(get_store)):
    """Download an iCal (.ics) file for a saved itinerary."""
    saved = store.get(itinerary_id)
    if not saved:
        raise HTTPException(status_code=404, detail="Itinerary not found")

    days = _parse_days(saved["itinerary"])
    ics_bytes = itinerary_to_ical(saved["city"], days)
    safe_name = saved["city"].replace(" ", "_")
    return Response(
        content=ics_bytes,
        media_type="text/calendar",
        headers={"Content-Disposition": f'attachment; filename="{safe_name}_itinerary.ics"'},
    )


# Pricing endpoints
@app.get("/api/flights/price")
def get_flight_prices(
    origin: str,
    destination: str,
    departureDate: date,
    returnDate: Optional[date] = None,
    adults: int = Query(1, ge=1),
    pricing: PricingService = Depends(get_pricing),
):
    try:
        offers = pricing.flight_offers(
            origin, destination, departureDate.isoformat(),
            returnDate.isoformat() if returnDate else None, adults,
        )
    except PricingError as e:
        raise HTTPException(status_code=502, detail=f"Failed to fetch flight prices: {e}")
    return [o.to_dict() for o in offers]


@app.get("/api/hotels/price")
def get_hotel_prices(
    cityCode: str,
    checkInDate: date,
    checkOutDate: date,
    adults: int = Query(1, ge=1),
    radius: int = Query(5, ge=1),
    pricing: PricingService = Depends(get_pricing),
):
    offers = pricing.hotel_offers(cityCode, checkInDate.isoformat(), checkOutDate.isoformat(), adults, radius)
    return [o.to_dict() for o in offers]


@app.get("/api/flights/average")
def get_average_flight_price(origin: str, destination: str, season: str = Season.SUMMER.value,
                             pricing: PricingService = Depends(get_pricing)):
    return pricing.average_flight_price(origin, destination, season).to_dict()


@app.get("/api/hotels/average")
def get_average_hotel_price(cityCode: str, season: str = Season.SUMMER.value,
                            nights: int = Query(3, ge=1),
                            pricing: PricingService = Depends(get_pricing)):
    return pricing.average_hotel_price(cityCode, season, nights).to_dict()


# Budget endpoint
@app.get("/api/budget")
def get_budget(city: str, travelStyle: str = "Cultural", days: int = 7):
    return estimate_budget(_require_city(city), travelStyle, days).to_dict()


# Chat endpoint
@app.post("/api/chat")
def chat(request: ChatRequest, client=Depends(get_chat_client)):
    return generate_chat_response(request, client)


# Health check
@app.get("/health")
def health_check():
    return {
        "status": "ok",
        "version": VERSION,
        "places": "live" if os.getenv("GOOGLE_PLACES_API_KEY") else "mock",
        "amadeus": "live" if os.getenv("AMADEUS_CLIENT_ID") else "mock",
        "events": "live" if os.getenv("TICKETMASTER_API_KEY") else "mock",
        "chat": "live" if os.getenv("OPENAI_API_KEY") else "unavailable",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=int(os.getenv("PORT", "8000")))
