"""
Saved itinerary snapshots - SQLite (or any SQLAlchemy URL) via SQLAlchemy
"""
import os
import uuid
from datetime import datetime

from sqlalchemy import JSON, Column, DateTime, String, create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

Base = declarative_base()

DEFAULT_DATABASE_URL = "sqlite:///./voyager.db"


def generate_id():
    return str(uuid.uuid4())[:8]


class SavedItinerary(Base):
    __tablename__ = "itineraries"

    id = Column(String, primary_key=True, default=generate_id)
    city = Column(String, index=True)
    date_from = Column(String)  # YYYY-MM-DD
    date_to = Column(String)  # YYYY-MM-DD
    itinerary = Column(JSON, default=list)  # DayPlan[] in wire format
    created_at = Column(DateTime, default=datetime.utcnow)

    def to_payload(self):
        return {
            "id": self.id,
            "city": self.city,
            "dateRange": {"from": self.date_from, "to": self.date_to},
            "itinerary": self.itinerary,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }


def make_engine(url=None):
    url = url or os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL)
    if url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if ":memory:" in url or url == "sqlite://":
            # one shared connection, otherwise every session sees an empty database
            kwargs["poolclass"] = StaticPool
        return create_engine(url, **kwargs)
    return create_engine(url)


class ItineraryStore:
    """Save sink for itinerary snapshots. Last write for an id wins."""

    def __init__(self, url=None, engine=None):
        self.engine = engine or make_engine(url)
        Base.metadata.create_all(bind=self.engine)
        self.Session = sessionmaker(bind=self.engine)

    def save(self, payload):
        """Store a {city, dateRange, itinerary} payload and return its id."""
        db = self.Session()
        try:
            row = SavedItinerary(
                city=payload["city"],
                date_from=payload["dateRange"]["from"],
                date_to=payload["dateRange"]["to"],
                itinerary=payload["itinerary"],
            )
            db.add(row)
            db.commit()
            return row.id
        finally:
            db.close()

    def replace(self, itinerary_id, payload):
        db = self.Session()
        try:
            row = db.get(SavedItinerary, itinerary_id)
            if row is None:
                return None
            row.city = payload["city"]
            row.date_from = payload["dateRange"]["from"]
            row.date_to = payload["dateRange"]["to"]
            row.itinerary = payload["itinerary"]
            db.commit()
            return row.to_payload()
        finally:
            db.close()

    def get(self, itinerary_id):
        db = self.Session()
        try:
            row = db.get(SavedItinerary, itinerary_id)
            return row.to_payload() if row else None
        finally:
            db.close()

    def list(self, city=None):
        db = self.Session()
        try:
            query = db.query(SavedItinerary)
            if city:
                query = query.filter(SavedItinerary.city.ilike(city.strip()))
            rows = query.order_by(SavedItinerary.created_at.desc()).all()
            return [r.to_payload() for r in rows]
        finally:
            db.close()
