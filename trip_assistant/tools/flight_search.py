# Role: Mock flight source. Prices are deterministic: a per-region base fare scaled per airline, so the
# same request always yields the same offers (easy to test, easy to reason about budgets).

from __future__ import annotations

from decimal import Decimal
from typing import Dict, List, Tuple

from trip_assistant.models.offers import FlightOffer, FlightSearchCriteria
from trip_assistant.tools.base import FlightSearchProvider
from trip_assistant.utils.vocabulary import lookup_place

# (base return fare per person, typical duration)
_REGION_FARES: Dict[str, Tuple[int, str]] = {
    "Europe": (150, "2h 30m"),
    "Middle East": (380, "6h 45m"),
    "Africa": (420, "5h 30m"),
    "North America": (520, "8h 15m"),
    "Caribbean": (700, "9h 30m"),
    "Asia": (650, "12h 40m"),
    "South America": (850, "12h 10m"),
    "Oceania": (1100, "22h 30m"),
}
_UNKNOWN_FARE = (450, "7h 00m")

# (airline, fare multiplier)
_AIRLINES: Tuple[Tuple[str, Decimal], ...] = (
    ("SkyLow", Decimal("0.85")),
    ("EuroConnect", Decimal("1.00")),
    ("Premier Airways", Decimal("1.35")),
)

_AIRPORTS = {
    "london": "LHR", "manchester": "MAN", "birmingham": "BHX", "edinburgh": "EDI", "glasgow": "GLA",
    "dublin": "DUB", "new york": "JFK", "boston": "BOS", "chicago": "ORD", "los angeles": "LAX",
    "paris": "CDG", "amsterdam": "AMS", "madrid": "MAD", "berlin": "BER", "frankfurt": "FRA",
    "rome": "FCO", "italy": "FCO", "florence": "FLR", "venice": "VCE", "milan": "MXP",
    "barcelona": "BCN", "spain": "MAD", "lisbon": "LIS", "portugal": "LIS", "athens": "ATH",
    "greece": "ATH", "tokyo": "HND", "japan": "HND", "kyoto": "KIX", "bangkok": "BKK",
    "thailand": "BKK", "dubai": "DXB", "sydney": "SYD", "france": "CDG", "iceland": "KEF",
}


def airport_code(place: str) -> str:
    key = (place or "").strip().lower()
    if key in _AIRPORTS:
        return _AIRPORTS[key]
    letters = "".join(ch for ch in key if ch.isalpha())
    return (letters[:3] or "XXX").upper()


class MockFlightSearchProvider(FlightSearchProvider):
    def search(self, criteria: FlightSearchCriteria) -> List[FlightOffer]:
        # 1) Base fare from the destination region (unknown places get a middle-of-the-road fare)
        # 2) One offer per airline, cheapest first
        # 3) Drop offers over the budget, if one was given
        place = lookup_place(criteria.destination)
        base, duration = _REGION_FARES.get(place.region, _UNKNOWN_FARE) if place else _UNKNOWN_FARE

        offers: List[FlightOffer] = []
        for airline, multiplier in _AIRLINES:
            per_person = (Decimal(base) * multiplier).quantize(Decimal("1"))
            offers.append(
                FlightOffer(
                    airline=airline,
                    departure=criteria.departure,
                    destination=criteria.destination,
                    departure_airport=airport_code(criteria.departure),
                    arrival_airport=airport_code(criteria.destination),
                    duration=duration,
                    price_per_person=per_person,
                    total_price=per_person * criteria.travelers,
                )
            )

        if criteria.budget is not None:
            offers = [o for o in offers if o.total_price <= criteria.budget]

        return sorted(offers, key=lambda o: o.total_price)
