"""
Mock data for attractions and flights - simulates external API responses
"""
import hashlib
import random
from datetime import date, datetime, timedelta

from models import Attraction, Event, OpeningPeriod

# Mock airline data
AIRLINES = {
    "AA": "American Airlines",
    "DL": "Delta Air Lines",
    "UA": "United Airlines",
    "LH": "Lufthansa",
    "BA": "British Airways",
    "AF": "Air France",
    "KL": "KLM",
    "EK": "Emirates",
    "QR": "Qatar Airways",
    "IB": "Iberia",
}

# name, rating, types, price level, neighbourhood
CITY_ATTRACTIONS = {
    "Paris": [
        ("Louvre Museum", 4.7, ["museum", "tourist_attraction"], 2, "Rue de Rivoli"),
        ("Eiffel Tower", 4.6, ["tourist_attraction", "point_of_interest"], 3, "Champ de Mars"),
        ("Musée d'Orsay", 4.8, ["museum", "art_gallery"], 2, "Rue de la Légion d'Honneur"),
        ("Sainte-Chapelle", 4.7, ["church", "tourist_attraction"], 1, "Île de la Cité"),
        ("Jardin du Luxembourg", 4.7, ["park", "tourist_attraction"], 0, "Saint-Germain"),
        ("Montmartre", 4.6, ["neighborhood", "tourist_attraction"], 0, "18th arrondissement"),
        ("Arc de Triomphe", 4.7, ["tourist_attraction"], 2, "Place Charles de Gaulle"),
        ("Centre Pompidou", 4.4, ["museum", "art_gallery"], 2, "Beaubourg"),
    ],
    "London": [
        ("British Museum", 4.7, ["museum", "tourist_attraction"], 0, "Bloomsbury"),
        ("Tower of London", 4.6, ["tourist_attraction", "castle"], 3, "Tower Hill"),
        ("National Gallery", 4.7, ["art_gallery", "museum"], 0, "Trafalgar Square"),
        ("Borough Market", 4.6, ["food", "market"], 1, "Southwark"),
        ("Hyde Park", 4.7, ["park"], 0, "Westminster"),
        ("Westminster Abbey", 4.6, ["church", "tourist_attraction"], 3, "Westminster"),
        ("Tate Modern", 4.5, ["art_gallery", "museum"], 0, "Bankside"),
    ],
    "Rome": [
        ("Colosseum", 4.7, ["tourist_attraction", "point_of_interest"], 2, "Piazza del Colosseo"),
        ("Pantheon", 4.8, ["church", "tourist_attraction"], 0, "Piazza della Rotonda"),
        ("Vatican Museums", 4.6, ["museum", "art_gallery"], 3, "Vatican City"),
        ("Trevi Fountain", 4.7, ["tourist_attraction"], 0, "Trevi"),
        ("Roman Forum", 4.7, ["tourist_attraction", "museum"], 2, "Via della Salara Vecchia"),
        ("Villa Borghese", 4.6, ["park", "museum"], 1, "Pinciano"),
    ],
    "Tokyo": [
        ("Senso-ji Temple", 4.5, ["place_of_worship", "tourist_attraction"], 0, "Asakusa"),
        ("Meiji Shrine", 4.6, ["place_of_worship", "park"], 0, "Harajuku"),
        ("Tokyo Skytree", 4.4, ["tourist_attraction"], 2, "Sumida"),
        ("Tsukiji Outer Market", 4.3, ["food", "market"], 1, "Tsukiji"),
        ("Shinjuku Gyoen", 4.6, ["park"], 1, "Shinjuku"),
        ("Tokyo National Museum", 4.5, ["museum"], 1, "Ueno"),
    ],
}

# Closing days by attraction name, as OpeningPeriod day numbers (0=Sunday)
CLOSED_DAYS = {
    "Louvre Museum": {2},
    "Musée d'Orsay": {1},
    "Centre Pompidou": {2},
    "Vatican Museums": {0},
    "Tokyo National Museum": {1},
}

_DEFAULT_ATTRACTIONS = [
    ("Old Town", 4.5, ["neighborhood", "tourist_attraction"], 0, "Old Town"),
    ("City Museum", 4.3, ["museum"], 1, "City Center"),
    ("Central Park", 4.4, ["park"], 0, "City Center"),
    ("Cathedral", 4.6, ["church", "tourist_attraction"], 0, "Cathedral Square"),
    ("Central Market", 4.2, ["food", "market"], 1, "Market District"),
]

# name pattern, segment, venue pattern, price range
MOCK_EVENTS = [
    ("{city} Jazz Night", "Music", "{city} Concert Hall", (25, 60)),
    ("{city} Food Festival", "Miscellaneous", "{city} Central Square", None),
    ("{city} FC Home Match", "Sports", "{city} Stadium", (40, 120)),
    ("Modern Art Late: {city}", "Arts & Theatre", "{city} Museum of Modern Art", (15, 15)),
    ("{city} Symphony Orchestra", "Music", "{city} Opera House", (35, 95)),
]


def _deterministic_seed(*parts: str) -> int:
    """Produce a stable seed so mock data is consistent across calls."""
    h = hashlib.md5("|".join(parts).encode()).hexdigest()
    return int(h[:8], 16)


def _opening_periods(name):
    closed = CLOSED_DAYS.get(name)
    if not closed:
        return []
    return [OpeningPeriod(day_of_week=d, open_time="0900", close_time="1800")
            for d in range(7) if d not in closed]


def generate_mock_attractions(city_name):
    """Generate mock attractions for a city, in 'relevance' order"""
    rows = CITY_ATTRACTIONS.get(city_name.title())
    if rows is None:
        rows = [(f"{city_name} {name}", rating, types, level, hood)
                for name, rating, types, level, hood in _DEFAULT_ATTRACTIONS]

    rng = random.Random(_deterministic_seed(city_name.lower()))
    attractions = []
    for i, (name, rating, types, price_level, hood) in enumerate(rows):
        lat = round(rng.uniform(-0.05, 0.05), 5)
        lng = round(rng.uniform(-0.05, 0.05), 5)
        attractions.append(Attraction(
            id=f"mock_{city_name.lower().replace(' ', '_')}_{i}",
            name=name,
            location=f"{hood}, {city_name}",
            rating=rating,
            types=list(types),
            opening_periods=_opening_periods(name),
            open_now=None,
            geometry={"lat": lat, "lng": lng},
            price_level=price_level or None,
        ))
    return attractions


def generate_mock_flights(origin, destination, departure_date, adults=1):
    """Generate mock flight offers shaped like Amadeus Flight Offers Search data"""
    rng = random.Random(_deterministic_seed(origin, destination, departure_date))
    base_price = rng.randint(200, 800)

    offers = []
    for i in range(rng.randint(3, 5)):
        carrier = rng.choice(list(AIRLINES.keys()))
        dep_hour = rng.randint(6, 22)
        dep_minute = rng.choice([0, 15, 30, 45])
        duration_hours = rng.randint(1, 14)
        duration_mins = rng.randint(0, 59)
        stops = rng.choice([0, 0, 1])

        dep = datetime.strptime(f"{departure_date} {dep_hour:02d}:{dep_minute:02d}", "%Y-%m-%d %H:%M")
        arr = dep + timedelta(hours=duration_hours, minutes=duration_mins)

        if stops:
            mid = dep + (arr - dep) / 2
            segments = [
                {"departure": {"iataCode": origin, "at": dep.isoformat()},
                 "arrival": {"iataCode": "FRA", "at": mid.isoformat()},
                 "carrierCode": carrier},
                {"departure": {"iataCode": "FRA", "at": mid.isoformat()},
                 "arrival": {"iataCode": destination, "at": arr.isoformat()},
                 "carrierCode": carrier},
            ]
        else:
            segments = [
                {"departure": {"iataCode": origin, "at": dep.isoformat()},
                 "arrival": {"iataCode": destination, "at": arr.isoformat()},
                 "carrierCode": carrier},
            ]

        price = round(base_price * rng.uniform(0.7, 1.4) * adults, 2)
        offers.append({
            "id": str(i + 1),
            "price": {"total": f"{price:.2f}", "currency": "USD"},
            "itineraries": [{
                "duration": f"PT{duration_hours}H{duration_mins}M",
                "segments": segments,
            }],
        })

    return offers


def generate_mock_events(city_name, today=None):
    """Generate upcoming mock events for a city, soonest first"""
    today = today or date.today()
    rng = random.Random(_deterministic_seed("events", city_name.lower()))
    slug = city_name.lower().replace(" ", "_")

    events = []
    for i, (name, category, venue, price_range) in enumerate(MOCK_EVENTS):
        start = datetime(today.year, today.month, today.day, rng.choice([18, 19, 20]), 0)
        start += timedelta(days=rng.randint(1, 60))
        events.append(Event(
            id=f"mock_event_{slug}_{i}",
            name=name.format(city=city_name),
            date=start.isoformat(),
            venue=venue.format(city=city_name),
            location=f"City Center, {city_name}",
            category=category,
            price=f"{price_range[0]} - {price_range[1]} EUR" if price_range else "Price TBA",
        ))
    return sorted(events, key=lambda e: e.date)
