"""
Unit tests for agents/PricingAgent.py

The Amadeus SDK client is replaced by a MagicMock; the mock-data paths run
with the credentials removed from the environment.
"""
import pytest
from datetime import date
from unittest.mock import MagicMock, patch

from amadeus import ResponseError

import PricingAgent as pa

TODAY = date(2026, 10, 19)


@pytest.fixture(autouse=True)
def no_amadeus_credentials(monkeypatch):
    monkeypatch.delenv("AMADEUS_CLIENT_ID", raising=False)
    monkeypatch.delenv("AMADEUS_CLIENT_SECRET", raising=False)


def _flight_offer(total="420.50", currency="EUR", stops=0):
    segments = [{
        "departure": {"iataCode": "LHR", "at": "2026-06-01T08:15:00"},
        "arrival": {"iataCode": "FRA" if stops else "CDG", "at": "2026-06-01T10:00:00"},
        "carrierCode": "AF",
    }]
    if stops:
        segments.append({
            "departure": {"iataCode": "FRA", "at": "2026-06-01T11:00:00"},
            "arrival": {"iataCode": "CDG", "at": "2026-06-01T12:10:00"},
            "carrierCode": "LH",
        })
    return {
        "price": {"total": total, "currency": currency},
        "itineraries": [{"duration": "PT1H15M", "segments": segments}],
    }


def _hotel_offer(name="Hotel du Louvre", total="600.00", rating="5"):
    return {
        "hotel": {
            "name": name,
            "rating": rating,
            "address": {"lines": ["Place André Malraux"], "cityName": "PARIS"},
            "amenities": ["WIFI", "SPA", "GYM", "BAR", "PARKING", "POOL"],
        },
        "offers": [{"price": {"total": total, "currency": "EUR"}}],
    }


# ---------------------------------------------------------------------------
# Lookups
# ---------------------------------------------------------------------------

class TestLookups:
    def test_airport_code_for_known_city(self):
        assert pa.airport_code("Paris") == "CDG"

    def test_unknown_city_passed_through(self):
        assert pa.airport_code("LIS") == "LIS"
        assert pa.airport_code("Reykjavik") == "Reykjavik"

    def test_city_code(self):
        assert pa.city_code("London") == "LON"

    @pytest.mark.parametrize("raw, season", [
        ("winter", pa.Season.WINTER), ("Spring", pa.Season.SPRING),
        ("autumn", pa.Season.FALL), ("fall", pa.Season.FALL),
        ("monsoon", None), (None, None),
    ])
    def test_season_parse(self, raw, season):
        assert pa.Season.parse(raw) == season

    def test_season_parse_default(self):
        assert pa.Season.parse("monsoon", default=pa.Season.SUMMER) == pa.Season.SUMMER


class TestSampleDate:
    def test_past_season_moves_to_next_year(self):
        assert pa.sample_date(pa.Season.WINTER, TODAY) == date(2027, 1, 15)

    def test_this_years_fall_already_too_close(self):
        assert pa.sample_date(pa.Season.FALL, TODAY) == date(2027, 10, 15)

    def test_upcoming_season_stays_this_year(self):
        assert pa.sample_date(pa.Season.SPRING, date(2026, 3, 20)) == date(2026, 4, 15)

    def test_exactly_two_weeks_ahead_is_kept(self):
        assert pa.sample_date(pa.Season.SPRING, date(2026, 4, 1)) == date(2026, 4, 15)

    def test_under_two_weeks_ahead_rolls_over(self):
        assert pa.sample_date(pa.Season.SPRING, date(2026, 4, 2)) == date(2027, 4, 15)


# ---------------------------------------------------------------------------
# Flights
# ---------------------------------------------------------------------------

class TestFlightOffers:
    def test_calls_amadeus_with_airport_codes(self):
        client = MagicMock()
        client.shopping.flight_offers_search.get.return_value.data = [_flight_offer()]
        pa.PricingService(client).flight_offers("London", "Paris", "2026-06-01", "2026-06-08", 2)

        client.shopping.flight_offers_search.get.assert_called_once_with(
            originLocationCode="LHR",
            destinationLocationCode="CDG",
            departureDate="2026-06-01",
            adults=2,
            returnDate="2026-06-08",
        )

    def test_one_way_omits_return_date(self):
        client = MagicMock()
        client.shopping.flight_offers_search.get.return_value.data = []
        pa.PricingService(client).flight_offers("London", "Paris", "2026-06-01")

        params = client.shopping.flight_offers_search.get.call_args.kwargs
        assert "returnDate" not in params

    def test_offer_normalised(self):
        client = MagicMock()
        client.shopping.flight_offers_search.get.return_value.data = [_flight_offer(stops=1)]
        offer = pa.PricingService(client).flight_offers("London", "Paris", "2026-06-01")[0]

        assert offer.price == "420.50"
        assert offer.currency == "EUR"
        assert offer.origin == "LHR"
        assert offer.destination == "CDG"
        assert offer.origin_city == "London"
        assert offer.destination_city == "Paris"
        assert offer.airline == "AF"
        assert offer.stops == 1
        assert offer.return_date == ""

    def test_amadeus_error_raises_pricing_error(self):
        client = MagicMock()
        client.shopping.flight_offers_search.get.side_effect = ResponseError(MagicMock())
        with pytest.raises(pa.PricingError):
            pa.PricingService(client).flight_offers("London", "Paris", "2026-06-01")

    def test_without_credentials_uses_mock_offers(self):
        service = pa.PricingService()
        assert service.client is None
        with patch("PricingAgent.generate_mock_flights", return_value=[_flight_offer()]) as mock_gen:
            offers = service.flight_offers("London", "Paris", "2026-06-01", adults=3)
        mock_gen.assert_called_once_with("LHR", "CDG", "2026-06-01", adults=3)
        assert offers[0].price == "420.50"


# ---------------------------------------------------------------------------
# Hotels
# ---------------------------------------------------------------------------

class TestHotelOffers:
    def _client(self, hotels, offers):
        client = MagicMock()
        client.reference_data.locations.hotels.by_city.get.return_value.data = hotels
        client.shopping.hotel_offers_search.get.return_value.data = offers
        return client

    def test_two_step_lookup(self):
        hotels = [{"hotelId": "H1", "rating": "3"}, {"hotelId": "H2", "rating": "5"}]
        client = self._client(hotels, [_hotel_offer()])
        pa.PricingService(client).hotel_offers("Paris", "2026-06-01", "2026-06-04", adults=2)

        client.reference_data.locations.hotels.by_city.get.assert_called_once_with(
            cityCode="PAR", radius=5, radiusUnit="KM",
        )
        client.shopping.hotel_offers_search.get.assert_called_once_with(
            hotelIds="H2,H1",
            adults=2,
            checkInDate="2026-06-01",
            checkOutDate="2026-06-04",
            currency="EUR",
            bestRateOnly=True,
        )

    def test_only_ten_best_rated_hotels_priced(self):
        hotels = [{"hotelId": f"H{i}", "rating": str(i % 5 + 1)} for i in range(15)]
        client = self._client(hotels, [])
        pa.PricingService(client).hotel_offers("Paris", "2026-06-01", "2026-06-04")

        ids = client.shopping.hotel_offers_search.get.call_args.kwargs["hotelIds"].split(",")
        assert len(ids) == 10

    def test_offer_normalised(self):
        client = self._client([{"hotelId": "H1", "rating": "5"}], [_hotel_offer()])
        hotel = pa.PricingService(client).hotel_offers("Paris", "2026-06-01", "2026-06-04")[0]

        assert hotel.hotel_name == "Hotel du Louvre"
        assert hotel.price == "600.00"
        assert hotel.rating_category == "5-star"
        assert hotel.address == "Place André Malraux, PARIS"
        assert hotel.amenities == ["WIFI", "SPA", "GYM", "BAR", "PARKING"]

    def test_no_hotels_falls_back(self):
        client = self._client([], [])
        hotels = pa.PricingService(client).hotel_offers("Paris", "2026-06-01", "2026-06-04")
        assert [h.hotel_name for h in hotels] == [
            "Top Hotel in Paris", "Central Paris Hotel", "Budget Stay Paris",
        ]

    def test_amadeus_error_falls_back(self):
        client = MagicMock()
        client.reference_data.locations.hotels.by_city.get.side_effect = ResponseError(MagicMock())
        hotels = pa.PricingService(client).hotel_offers("Paris", "2026-06-01", "2026-06-04")
        assert len(hotels) == 3

    def test_fallback_prices_cover_the_stay(self):
        hotels = pa.fallback_hotels("Paris", "2026-06-01", "2026-06-04")
        assert [h.price for h in hotels] == ["540", "660", "360"]
        assert all(h.currency == "EUR" for h in hotels)

    def test_fallback_same_day_counts_one_night(self):
        hotels = pa.fallback_hotels("Paris", "2026-06-01", "2026-06-01")
        assert hotels[0].price == "180"


# ---------------------------------------------------------------------------
# Averages
# ---------------------------------------------------------------------------

class TestAverageFlightPrice:
    def test_mean_of_offers_on_sample_date(self):
        client = MagicMock()
        client.shopping.flight_offers_search.get.return_value.data = [
            _flight_offer("300.00"), _flight_offer("400.50"),
        ]
        avg = pa.PricingService(client).average_flight_price("London", "Paris", "winter", today=TODAY)

        assert avg.price == 350.25
        assert avg.currency == "EUR"
        params = client.shopping.flight_offers_search.get.call_args.kwargs
        assert params["departureDate"] == "2027-01-15"

    def test_failure_reports_zero(self):
        client = MagicMock()
        client.shopping.flight_offers_search.get.side_effect = ResponseError(MagicMock())
        avg = pa.PricingService(client).average_flight_price("London", "Paris", "summer", today=TODAY)
        assert (avg.price, avg.currency) == (0, "USD")

    def test_no_offers_reports_zero(self):
        client = MagicMock()
        client.shopping.flight_offers_search.get.return_value.data = []
        avg = pa.PricingService(client).average_flight_price("London", "Paris", "summer", today=TODAY)
        assert avg.price == 0


class TestAverageHotelPrice:
    def test_estimate_without_credentials(self):
        avg = pa.PricingService().average_hotel_price("Paris", "winter", nights=3, today=TODAY)
        assert avg.per_night == 184.0
        assert avg.price == 552.0
        assert avg.currency == "EUR"

    def test_estimate_accepts_city_code(self):
        avg = pa.PricingService().average_hotel_price("LON", "summer", nights=2, today=TODAY)
        assert avg.per_night == 252.0
        assert avg.currency == "GBP"

    def test_unknown_code_uses_default_base(self):
        avg = pa.estimate_hotel_price("KEF", pa.Season.SPRING, 1)
        assert (avg.price, avg.currency) == (135.0, "EUR")

    def test_unknown_city_name_priced_as_paris(self):
        avg = pa.estimate_hotel_price("Reykjavik", pa.Season.SPRING, 1)
        assert (avg.price, avg.currency) == (207.0, "EUR")

    def test_lower_case_code_matches_table(self):
        assert pa.estimate_hotel_price("lon", pa.Season.SUMMER, 1).currency == "GBP"

    def test_unknown_season_leaves_base_unscaled(self):
        avg = pa.PricingService().average_hotel_price("Paris", "monsoon", nights=2, today=TODAY)
        assert avg.per_night == 230.0
        assert avg.price == 460.0

    def test_unknown_season_samples_summer(self):
        assert pa.sample_date(pa.Season.parse("monsoon"), TODAY) == date(2027, 7, 15)

    def test_live_offers_averaged(self):
        client = MagicMock()
        client.reference_data.locations.hotels.by_city.get.return_value.data = [{"hotelId": "H1", "rating": "4"}]
        client.shopping.hotel_offers_search.get.return_value.data = [
            _hotel_offer(total="600.00"), _hotel_offer(total="300.00"),
        ]
        avg = pa.PricingService(client).average_hotel_price("Paris", "summer", nights=3, today=TODAY)

        assert avg.price == 450.0
        assert avg.per_night == 150.0
        kwargs = client.shopping.hotel_offers_search.get.call_args.kwargs
        assert kwargs["checkInDate"] == "2027-07-15"
        assert kwargs["checkOutDate"] == "2027-07-18"
