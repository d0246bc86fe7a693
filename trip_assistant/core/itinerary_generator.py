# Role: Deterministic itinerary generator. Turns a complete TripSlots into an ItineraryPlan:
# budget split -> city route -> flight + one stay per city -> day-by-day entries with running totals.
# Every hotel/activity pick goes through the same relaxation cascade and records which step produced it.

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date as dt_date
from datetime import timedelta
from decimal import ROUND_DOWN, Decimal
from typing import Dict, List, Optional, Sequence, Tuple

import trip_assistant.config as config
from trip_assistant.core.budget import split_budget
from trip_assistant.core.validator import Validator
from trip_assistant.models.itinerary import Accommodation, Activity, DayPlan, ItineraryPlan
from trip_assistant.models.offers import (
    ActivityOffer,
    ActivitySearchCriteria,
    FlightOffer,
    FlightSearchCriteria,
    HotelOffer,
    HotelSearchCriteria,
)
from trip_assistant.models.slots import TripSlots
from trip_assistant.tools.activity_search import MockActivitySearchProvider
from trip_assistant.tools.base import ActivitySearchProvider, FlightSearchProvider, HotelSearchProvider
from trip_assistant.tools.catalog import ACCOMMODATION_LADDER
from trip_assistant.tools.flight_search import MockFlightSearchProvider
from trip_assistant.tools.hotel_search import MockHotelSearchProvider
from trip_assistant.utils.dates import trip_start_date

# Fallback levels, in cascade order.
STRICT = "strict"
PRICE_PLUS_15 = "price_plus_15"
EXPANDED_RADIUS = "expanded_radius"
CHEAPER_ACCOMMODATION = "cheaper_accommodation"
PLACEHOLDER = "placeholder"
FIXED = "fixed"

BASE_RADIUS_KM = 3.0
EXPANDED_RADIUS_KM = 8.0
PRICE_TOLERANCE = Decimal("1.15")

DAILY_FOOD_PER_PERSON = Decimal("25")
TRANSFER_FARE_PER_PERSON = Decimal("35")

_CENT = Decimal("0.01")

# destination -> (<=4 days, 5-8 days, >8 days)
CITY_ROUTES: Dict[str, Tuple[Tuple[str, ...], Tuple[str, ...], Tuple[str, ...]]] = {
    "italy": (("Rome",), ("Rome", "Florence"), ("Rome", "Florence", "Venice")),
    "france": (("Paris",), ("Paris", "Nice"), ("Paris", "Lyon", "Nice")),
    "spain": (("Barcelona",), ("Barcelona", "Madrid"), ("Barcelona", "Madrid", "Seville")),
    "portugal": (("Lisbon",), ("Lisbon", "Porto"), ("Lisbon", "Porto")),
    "greece": (("Athens",), ("Athens", "Santorini"), ("Athens", "Santorini", "Mykonos")),
    "japan": (("Tokyo",), ("Tokyo", "Kyoto"), ("Tokyo", "Kyoto", "Osaka")),
    "thailand": (("Bangkok",), ("Bangkok", "Chiang Mai"), ("Bangkok", "Chiang Mai", "Phuket")),
    "usa": (("New York",), ("New York", "Chicago"), ("New York", "Chicago", "San Francisco")),
    "united kingdom": (("London",), ("London", "Edinburgh"), ("London", "Edinburgh", "Manchester")),
}

# Every middle day has exactly one entry per slot; pace only moves the clock and changes the picks.
MIDDLE_DAY_SLOTS: Tuple[str, ...] = ("morning", "afternoon", "evening")
PACE_CLOCKS: Dict[str, Dict[str, str]] = {
    "relaxed": {"morning": "10:00", "afternoon": "14:30", "evening": "19:30"},
    "balanced": {"morning": "09:30", "afternoon": "14:00", "evening": "19:30"},
    "fast-paced": {"morning": "08:30", "afternoon": "13:30", "evening": "19:00"},
}


class PreconditionError(ValueError):
    pass


def route_for(destination: str, duration_days: int) -> List[str]:
    # Unknown destinations become a single-city trip named after the destination itself.
    name = (destination or "").strip()
    routes = CITY_ROUTES.get(name.lower())
    if routes is None:
        return [name]
    if duration_days <= 4:
        cities = routes[0]
    elif duration_days <= 8:
        cities = routes[1]
    else:
        cities = routes[2]
    return list(cities[: max(1, duration_days)])


def allocate_days(duration_days: int, city_count: int) -> List[int]:
    # Earlier cities get the extra days.
    base, extra = divmod(duration_days, city_count)
    return [base + (1 if i < extra else 0) for i in range(city_count)]


@dataclass
class _Stay:
    accommodation: Accommodation
    nights: int


@dataclass
class _Run:
    # Mutable scratchpad for one generate() call.
    slots: TripSlots
    travelers: int
    remaining: Dict[str, Decimal]
    activities: Dict[str, List[ActivityOffer]] = field(default_factory=dict)
    hotels: Dict[str, List[HotelOffer]] = field(default_factory=dict)
    stays: Dict[str, _Stay] = field(default_factory=dict)
    used: set = field(default_factory=set)


class ItineraryGenerator:
    def __init__(
        self,
        flight_provider: Optional[FlightSearchProvider] = None,
        hotel_provider: Optional[HotelSearchProvider] = None,
        activity_provider: Optional[ActivitySearchProvider] = None,
        validator: Optional[Validator] = None,
    ) -> None:
        # Key line: providers are injectable; defaults read the local mock tables.
        self.validator = validator or Validator()
        self.flight_provider = flight_provider or MockFlightSearchProvider()
        self.hotel_provider = hotel_provider or MockHotelSearchProvider()
        self.activity_provider = activity_provider or MockActivitySearchProvider()

    def generate(
        self,
        slots: TripSlots,
        *,
        start_date: Optional[dt_date] = None,
        currency: Optional[str] = None,
    ) -> ItineraryPlan:
        # 1) Preconditions: every slot answered
        # 2) Budget split + city route
        # 3) Flight, then one stay per city (cascade)
        # 4) Days 1..N (cascade per slot), running totals
        validation = self.validator.validate(slots)
        if not validation.ok:
            reasons = [f"missing {s.value}" for s in validation.missing_info] + validation.problems
            raise PreconditionError("Cannot generate an itinerary: " + "; ".join(reasons))

        duration = int(slots.duration_days)
        travelers = int(slots.travelers)
        breakdown = split_budget(slots.budget, slots.destination, duration)

        cities = route_for(slots.destination, duration)
        allocation = allocate_days(duration, len(cities))
        day_cities: List[str] = [city for city, days in zip(cities, allocation) for _ in range(days)]

        run = _Run(slots=slots, travelers=travelers, remaining=dict(breakdown.amounts))
        # Fixed per-person food estimate comes off the food budget up front; dinners use what's left.
        run.remaining["food"] -= DAILY_FOOD_PER_PERSON * travelers * duration

        flight = self._pick_flight(slots, travelers, run)

        total_nights = duration - 1
        nightly_cap = (breakdown.amounts["accommodation"] / total_nights) if total_nights > 0 else Decimal("0")
        for i, (city, days) in enumerate(zip(cities, allocation)):
            nights = days - 1 if i == len(cities) - 1 else days
            run.activities[city] = self.activity_provider.search(ActivitySearchCriteria(city=city))
            run.hotels[city] = self.hotel_provider.search(
                HotelSearchCriteria(city=city, nights=max(1, nights), travelers=travelers)
            )
            if nights > 0:
                run.stays[city] = _Stay(self._pick_hotel(run, city, nightly_cap, nights), nights)

        start = start_date or trip_start_date(slots.travel_month)
        days: List[DayPlan] = []
        running = Decimal("0")
        for index, city in enumerate(day_cities, start=1):
            previous_city = day_cities[index - 2] if index > 1 else None
            entries, title = self._day_entries(run, index, duration, city, previous_city, flight)
            daily_cost = (sum((a.cost for a in entries), Decimal("0")) + DAILY_FOOD_PER_PERSON) * travelers
            daily_cost = daily_cost.quantize(_CENT)
            running += daily_cost
            days.append(
                DayPlan(
                    day_index=index,
                    date=start + timedelta(days=index - 1),
                    city=city,
                    title=title,
                    activities=entries,
                    daily_cost=daily_cost,
                    running_total=running,
                )
            )

        # Stays may have been downgraded while filling days; label nights with the final pick.
        for day in days:
            stay = run.stays.get(day.city)
            if stay is not None and day.day_index < duration:
                day.accommodation = stay.accommodation.name

        plan = ItineraryPlan(
            destination=slots.destination,
            cities=cities,
            total_budget=Decimal(slots.budget),
            currency=currency,
            travelers=travelers,
            budget_breakdown=breakdown,
            flight=flight,
            stays=[run.stays[c].accommodation for c in cities if c in run.stays],
            days=days,
        )

        if config.DEBUG:
            print("\n--- GENERATOR DEBUG ---")
            print("cities:", cities, "allocation:", allocation)
            print("split:", breakdown.percentages())
            print("total_cost:", plan.total_cost, "of", plan.total_budget)
            print("-----------------------\n")

        return plan

    # ---------------- flight + hotels ----------------

    def _pick_flight(self, slots: TripSlots, travelers: int, run: _Run) -> Optional[FlightOffer]:
        offers = self.flight_provider.search(
            FlightSearchCriteria(
                departure=slots.departure_location,
                destination=slots.destination,
                month=slots.travel_month,
                travelers=travelers,
            )
        )
        if not offers:
            return None
        # Cheapest offer that fits the flights budget, else the cheapest overall.
        fitting = [o for o in offers if o.total_price <= run.remaining["flights"]]
        flight = min(fitting or offers, key=lambda o: o.total_price)
        run.remaining["flights"] -= flight.total_price
        return flight

    def _pick_hotel(self, run: _Run, city: str, nightly_cap: Decimal, nights: int) -> Accommodation:
        # strict -> +15% -> wider radius -> cheaper class -> placeholder
        wanted = (run.slots.accommodation_type or "").lower()
        wanted_rank = ACCOMMODATION_LADDER.index(wanted) if wanted in ACCOMMODATION_LADDER else None
        offers = run.hotels[city]

        def _matching(same_class: bool, factor: Decimal, radius: float) -> List[HotelOffer]:
            out = []
            for h in offers:
                if h.price_per_night > nightly_cap * factor or h.distance_km > radius:
                    continue
                if same_class and wanted_rank is not None and h.accommodation_class != wanted:
                    continue
                if not same_class:
                    rank = _rank(h.accommodation_class)
                    if wanted_rank is not None and (rank is None or rank >= wanted_rank):
                        continue
                out.append(h)
            return out

        steps = (
            (STRICT, True, Decimal("1"), BASE_RADIUS_KM),
            (PRICE_PLUS_15, True, PRICE_TOLERANCE, BASE_RADIUS_KM),
            (EXPANDED_RADIUS, True, PRICE_TOLERANCE, EXPANDED_RADIUS_KM),
            (CHEAPER_ACCOMMODATION, False, PRICE_TOLERANCE, EXPANDED_RADIUS_KM),
        )
        for level, same_class, factor, radius in steps:
            found = _matching(same_class, factor, radius)
            if found:
                best = max(found, key=lambda h: (h.rating, -h.price_per_night))
                if level == CHEAPER_ACCOMMODATION:
                    savings = (nightly_cap - best.price_per_night) * nights
                    if savings > 0:
                        run.remaining["activities"] += savings
                return _to_accommodation(best, level)

        return Accommodation(
            name=f"Guesthouse in {city} (book locally)",
            city=city,
            accommodation_class="guesthouse",
            price_per_night=nightly_cap.quantize(_CENT, rounding=ROUND_DOWN),
            rating=0.0,
            distance_km=0.0,
            fallback_level=PLACEHOLDER,
        )

    def _downgrade_stay(self, run: _Run, city: str, category: str) -> bool:
        # Swap the city's stay for the next cheaper class; the savings fund the category we're short on.
        stay = run.stays.get(city)
        if stay is None:
            return False
        current_rank = _rank(stay.accommodation.accommodation_class)
        if current_rank is None:
            return False

        cheaper = [
            h
            for h in run.hotels.get(city, [])
            if (_rank(h.accommodation_class) is not None and _rank(h.accommodation_class) < current_rank)
            and h.price_per_night < stay.accommodation.price_per_night
            and h.distance_km <= EXPANDED_RADIUS_KM
        ]
        if not cheaper:
            return False

        best = max(cheaper, key=lambda h: (h.price_per_night, h.rating))
        savings = (stay.accommodation.price_per_night - best.price_per_night) * stay.nights
        run.stays[city] = _Stay(_to_accommodation(best, CHEAPER_ACCOMMODATION), stay.nights)
        run.remaining[category] += savings

        if config.DEBUG:
            print("GENERATOR downgraded stay in", city, "->", best.name, "savings:", savings)
        return True

    # ---------------- days ----------------

    def _day_entries(
        self,
        run: _Run,
        index: int,
        duration: int,
        city: str,
        previous_city: Optional[str],
        flight: Optional[FlightOffer],
    ) -> Tuple[List[Activity], str]:
        slots = run.slots
        entries: List[Activity] = []
        stay = run.stays.get(city)
        hotel_name = stay.accommodation.name if stay else None

        if duration == 1:
            # Day trip: in, one light activity, out.
            entries.append(self._flight_in(flight, slots, city, "08:00"))
            entries.append(self._choose(run, city, "afternoon", "12:00", light=True))
            entries.append(self._fixed(f"Flight home to {slots.departure_location}", "flight", "afternoon", "17:00", city))
            return entries, f"Day trip to {city}"

        if index == 1:
            entries.append(self._flight_in(flight, slots, city, "09:00"))
            if hotel_name:
                entries.append(self._fixed(f"Check in at {hotel_name}", "accommodation", "afternoon", "15:00", city))
            entries.append(self._choose(run, city, "evening", "19:30", cheap=True))
            return entries, f"Arrival in {city}"

        if index == duration:
            entries.append(self._choose(run, city, "morning", "09:00", light=True))
            checkout = run.stays.get(city) or (run.stays.get(previous_city) if previous_city else None)
            if checkout is not None:
                entries.append(
                    self._fixed(f"Check out of {checkout.accommodation.name}", "accommodation", "morning", "11:00", city)
                )
            entries.append(self._fixed(f"Flight home to {slots.departure_location}", "flight", "afternoon", "15:00", city))
            return entries, f"Departure from {city}"

        if previous_city is not None and previous_city != city:
            entries.append(self._transfer(run, previous_city, city))
            if hotel_name:
                entries.append(self._fixed(f"Check in at {hotel_name}", "accommodation", "afternoon", "14:00", city))
            entries.append(self._choose(run, city, "evening", "19:30"))
            return entries, f"Travel to {city}"

        # relaxed: short morning pick + free afternoon; fast-paced: longest pick per slot
        pace = slots.pace if slots.pace in PACE_CLOCKS else "balanced"
        clocks = PACE_CLOCKS[pace]
        for time_slot in MIDDLE_DAY_SLOTS:
            clock = clocks[time_slot]
            if pace == "relaxed" and time_slot == "afternoon":
                entries.append(self._fixed("Free afternoon to relax", "free_time", time_slot, clock, city))
                continue
            entries.append(
                self._choose(run, city, time_slot, clock, light=pace == "relaxed", full=pace == "fast-paced")
            )
        return entries, f"Exploring {city}"

    def _choose(
        self,
        run: _Run,
        city: str,
        time_slot: str,
        clock: str,
        *,
        light: bool = False,
        cheap: bool = False,
        full: bool = False,
    ) -> Activity:
        # 1) Pool: offers for this slot not used earlier; narrow to preference matches if there are any
        # 2) Cascade: strict -> price +15% -> wider radius -> cheaper stay -> placeholder
        slots = run.slots
        prefs = list(slots.activity_preferences)
        if time_slot == "evening":
            prefs = list(slots.food_preferences) + prefs
        wanted = set(prefs)

        pool = [o for o in run.activities.get(city, []) if time_slot in o.time_slots and o.id not in run.used]
        preferred = [o for o in pool if wanted.intersection(o.categories)]
        if preferred:
            pool = preferred

        def _fits(factor: Decimal, radius: float) -> List[ActivityOffer]:
            return [o for o in pool if o.distance_km <= radius and self._affordable(run, o, factor)]

        picked: Optional[ActivityOffer] = None
        level = PLACEHOLDER
        for step, factor, radius in (
            (STRICT, Decimal("1"), BASE_RADIUS_KM),
            (PRICE_PLUS_15, PRICE_TOLERANCE, BASE_RADIUS_KM),
            (EXPANDED_RADIUS, PRICE_TOLERANCE, EXPANDED_RADIUS_KM),
        ):
            found = _fits(factor, radius)
            if found:
                picked, level = _best(found, light=light, cheap=cheap, full=full), step
                break

        if picked is None and pool:
            category = _category(pool[0])
            if self._downgrade_stay(run, city, category):
                found = _fits(PRICE_TOLERANCE, EXPANDED_RADIUS_KM)
                if found:
                    picked, level = _best(found, light=light, cheap=cheap, full=full), CHEAPER_ACCOMMODATION

        if picked is None:
            name = f"Dinner of your choice in {city}" if time_slot == "evening" else f"Free time to explore {city}"
            return Activity(
                name=name, kind="free_time", time_slot=time_slot, time=clock, city=city, fallback_level=PLACEHOLDER
            )

        run.used.add(picked.id)
        run.remaining[_category(picked)] -= picked.cost * run.travelers
        matched = [c for c in picked.categories if c in wanted]
        return Activity(
            name=picked.name,
            kind=picked.kind,
            time_slot=time_slot,
            time=clock,
            city=city,
            cost=picked.cost,
            distance_km=picked.distance_km,
            category=(matched or picked.categories or [None])[0],
            fallback_level=level,
        )

    def _affordable(self, run: _Run, offer: ActivityOffer, factor: Decimal) -> bool:
        if offer.cost == 0:
            return True
        return offer.cost * run.travelers <= run.remaining[_category(offer)] * factor

    def _flight_in(self, flight: Optional[FlightOffer], slots: TripSlots, city: str, clock: str) -> Activity:
        if flight is None:
            return self._fixed(f"Travel from {slots.departure_location} to {city}", "flight", "morning", clock, city)
        return Activity(
            name=f"Flight {flight.departure_airport} -> {flight.arrival_airport} with {flight.airline} ({flight.duration})",
            kind="flight",
            time_slot="morning",
            time=clock,
            city=city,
            # Key line: the return fare is charged once, on day 1.
            cost=flight.price_per_person,
            fallback_level=FIXED,
        )

    def _transfer(self, run: _Run, from_city: str, to_city: str) -> Activity:
        per_person = max(Decimal("0"), min(TRANSFER_FARE_PER_PERSON, run.remaining["transport"] / run.travelers))
        per_person = per_person.quantize(_CENT, rounding=ROUND_DOWN)
        run.remaining["transport"] -= per_person * run.travelers
        return Activity(
            name=f"Train from {from_city} to {to_city}",
            kind="transport",
            time_slot="morning",
            time="09:00",
            city=to_city,
            cost=per_person,
            category="transport",
            fallback_level=FIXED,
        )

    def _fixed(self, name: str, kind: str, time_slot: str, clock: str, city: str) -> Activity:
        return Activity(name=name, kind=kind, time_slot=time_slot, time=clock, city=city, fallback_level=FIXED)


def _rank(accommodation_class: str) -> Optional[int]:
    return ACCOMMODATION_LADDER.index(accommodation_class) if accommodation_class in ACCOMMODATION_LADDER else None


def _category(offer: ActivityOffer) -> str:
    return "food" if offer.kind == "restaurant" else "activities"


def _best(found: Sequence[ActivityOffer], *, light: bool, cheap: bool, full: bool = False) -> ActivityOffer:
    if light:
        return min(found, key=lambda o: (o.duration_minutes, o.cost, o.distance_km))
    if cheap:
        return min(found, key=lambda o: (o.cost, o.distance_km))
    if full:
        return max(found, key=lambda o: (o.duration_minutes, -o.cost))
    return found[0]


def _to_accommodation(offer: HotelOffer, level: str) -> Accommodation:
    return Accommodation(
        name=offer.name,
        city=offer.city,
        accommodation_class=offer.accommodation_class,
        price_per_night=offer.price_per_night,
        rating=offer.rating,
        distance_km=offer.distance_km,
        fallback_level=level,
    )
