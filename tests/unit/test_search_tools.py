"""Tests for the mock search providers and the destination client."""

from decimal import Decimal
from unittest.mock import MagicMock, patch

import requests

from trip_assistant.models.offers import ActivitySearchCriteria, FlightSearchCriteria, HotelSearchCriteria
from trip_assistant.tools.activity_search import MockActivitySearchProvider
from trip_assistant.tools.destination_client import DestinationClient
from trip_assistant.tools.flight_search import MockFlightSearchProvider, airport_code
from trip_assistant.tools.hotel_search import MockHotelSearchProvider


def test_flight_offers_are_deterministic_and_sorted() -> None:
    criteria = FlightSearchCriteria(departure="London", destination="Rome", travelers=2)

    offers = MockFlightSearchProvider().search(criteria)

    assert [o.airline for o in offers] == ["SkyLow", "EuroConnect", "Premier Airways"]
    assert offers[0].price_per_person == Decimal("128")
    assert offers[0].total_price == Decimal("256")
    assert offers[0].departure_airport == "LHR"
    assert offers[0].arrival_airport == "FCO"
    assert MockFlightSearchProvider().search(criteria) == offers


def test_flight_budget_filter() -> None:
    criteria = FlightSearchCriteria(departure="London", destination="Rome", travelers=2, budget=Decimal("300"))

    offers = MockFlightSearchProvider().search(criteria)

    assert [o.airline for o in offers] == ["SkyLow", "EuroConnect"]


def test_airport_code_for_unknown_place() -> None:
    assert airport_code("Narnia") == "NAR"
    assert airport_code("") == "XXX"


def test_hotel_filters() -> None:
    provider = MockHotelSearchProvider()

    hotels = provider.search(HotelSearchCriteria(city="Rome", accommodation_type="hotel"))
    cheap = provider.search(HotelSearchCriteria(city="Rome", max_price_per_night=Decimal("60")))

    assert {h.accommodation_class for h in hotels} == {"hotel"}
    assert "Hotel Artemide" in [h.name for h in hotels]
    assert all(h.price_per_night <= 60 for h in cheap)
    assert [h.price_per_night for h in cheap] == sorted(h.price_per_night for h in cheap)


def test_activity_preferences_narrow_only_when_matched() -> None:
    provider = MockActivitySearchProvider()

    museums = provider.search(ActivitySearchCriteria(city="Paris", preferences=["museums"], time_slot="morning"))
    unknown = provider.search(ActivitySearchCriteria(city="Paris", preferences=["skydiving"], time_slot="morning"))

    assert museums and all("museums" in a.categories for a in museums)
    assert len(unknown) > len(museums)
    assert all("morning" in a.time_slots for a in unknown)


def test_activity_ids_are_city_scoped() -> None:
    rome = MockActivitySearchProvider().search(ActivitySearchCriteria(city="Rome"))
    florence = MockActivitySearchProvider().search(ActivitySearchCriteria(city="Florence"))

    assert not {a.id for a in rome} & {a.id for a in florence}


def test_destination_lookup_uses_known_table_first() -> None:
    result = DestinationClient(use_network=True).lookup("italy")

    assert result.ok is True
    assert result.data.name == "Italy"
    assert result.data.source == "known"
    assert result.data.best_time


def test_destination_lookup_geocodes_unknown_places() -> None:
    response = MagicMock()
    response.json.return_value = {"results": [{"name": "Ljubljana", "country": "Slovenia", "admin1": "Ljubljana"}]}

    with patch("trip_assistant.tools.destination_client.requests.get", return_value=response) as get:
        result = DestinationClient(use_network=True).lookup("Ljubljana")

    assert result.ok is True
    assert result.data.country == "Slovenia"
    assert result.data.source == "open-meteo"
    assert get.call_args.kwargs["params"]["name"] == "Ljubljana"


def test_destination_lookup_degrades_on_network_error() -> None:
    with patch(
        "trip_assistant.tools.destination_client.requests.get",
        side_effect=requests.ConnectionError("offline"),
    ):
        result = DestinationClient(use_network=True).lookup("Narnia")

    assert result.ok is False
    assert result.data.name == "Narnia"
    assert result.data.source == "fallback"
    assert "Open-Meteo request failed" in result.error


def test_destination_lookup_offline_skips_network() -> None:
    with patch("trip_assistant.tools.destination_client.requests.get") as get:
        result = DestinationClient(use_network=False).lookup("Narnia")

    get.assert_not_called()
    assert result.data.source == "fallback"
