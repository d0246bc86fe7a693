# Role: Output of the itinerary generator. Created once when the confirmation gate opens and owned by
# the session that generated it.

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field

from trip_assistant.models.offers import FlightOffer

TimeSlot = Literal["morning", "afternoon", "evening"]

BUDGET_CATEGORIES = ("flights", "accommodation", "food", "activities", "transport", "emergency")


class BudgetBreakdown(BaseModel):
    # Integer percentages of the total budget; always sum to 100.
    flights: int
    accommodation: int
    food: int
    activities: int
    transport: int
    emergency: int

    # Derived amounts in the budget's currency; always sum to the total budget.
    amounts: Dict[str, Decimal] = Field(default_factory=dict)

    def percentages(self) -> Dict[str, int]:
        return {name: getattr(self, name) for name in BUDGET_CATEGORIES}

    def total_percent(self) -> int:
        return sum(self.percentages().values())


class Activity(BaseModel):
    name: str
    kind: str
    time_slot: TimeSlot
    time: str
    city: str
    cost: Decimal = Decimal("0")
    distance_km: float = 0.0
    category: Optional[str] = None
    # Which relaxation step produced this entry ("strict" when no relaxation was needed).
    fallback_level: str = "fixed"


class Accommodation(BaseModel):
    name: str
    city: str
    accommodation_class: str
    price_per_night: Decimal
    rating: float
    distance_km: float
    fallback_level: str = "strict"


class DayPlan(BaseModel):
    day_index: int
    date: date
    city: str
    title: str
    accommodation: Optional[str] = None
    activities: List[Activity] = Field(default_factory=list)
    daily_cost: Decimal = Decimal("0")
    running_total: Decimal = Decimal("0")


class ItineraryPlan(BaseModel):
    destination: str
    cities: List[str]
    total_budget: Decimal
    currency: Optional[str] = None
    travelers: int
    budget_breakdown: BudgetBreakdown
    flight: Optional[FlightOffer] = None
    stays: List[Accommodation] = Field(default_factory=list)
    days: List[DayPlan] = Field(default_factory=list)

    @property
    def total_cost(self) -> Decimal:
        return self.days[-1].running_total if self.days else Decimal("0")
