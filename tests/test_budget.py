import pytest

from budget import DEFAULT_COSTS, TravelStyle, estimate_budget


class TestTravelStyle:
    @pytest.mark.parametrize("raw, style", [
        ("Luxury", TravelStyle.LUXURY), ("luxury", TravelStyle.LUXURY),
        (" family ", TravelStyle.FAMILY), ("backpacking", TravelStyle.CULTURAL),
        (None, TravelStyle.CULTURAL),
    ])
    def test_parse(self, raw, style):
        assert TravelStyle.parse(raw) == style


class TestEstimateBudget:
    def test_london_luxury_week(self):
        estimate = estimate_budget("London", "Luxury", 7)
        assert (estimate.accommodation, estimate.food, estimate.activities, estimate.transport) == \
            (1890, 630, 504, 252)
        assert estimate.total == 3276

    def test_total_is_sum_of_categories(self):
        e = estimate_budget("Paris", "Family", 4)
        assert e.total == e.accommodation + e.food + e.activities + e.transport

    def test_city_lookup_ignores_case(self):
        assert estimate_budget("new york", "Cultural", 1).accommodation == 200

    def test_unknown_city_uses_default_costs(self):
        estimate = estimate_budget("Lisbon", "Cultural", 2)
        assert estimate.accommodation == DEFAULT_COSTS.accommodation * 2
        assert estimate.total == 370

    def test_unknown_style_counts_as_cultural(self):
        assert estimate_budget("Paris", "Backpacking", 3) == estimate_budget("Paris", "Cultural", 3)

    @pytest.mark.parametrize("days, clamped", [(0, 1), (-4, 1), (45, 30), (12, 12)])
    def test_days_clamped(self, days, clamped):
        assert estimate_budget("Paris", "Cultural", days).days == clamped

    def test_wire_format_is_camel_case(self):
        payload = estimate_budget("Paris", "budget", 2).to_dict()
        assert payload["travelStyle"] == "Budget"
        assert payload["city"] == "Paris"
