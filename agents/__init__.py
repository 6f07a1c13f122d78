"""External data integrations (Places, Amadeus) and the itinerary generator."""
