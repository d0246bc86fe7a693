# Role: Search criteria and offer shapes shared by the mock search providers, the /api/*/search routes
# and the itinerary generator.

from __future__ import annotations

from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field


class FlightSearchCriteria(BaseModel):
    departure: str
    destination: str
    month: Optional[str] = None
    travelers: int = Field(default=1, ge=1)
    budget: Optional[Decimal] = None


class FlightOffer(BaseModel):
    airline: str
    departure: str
    destination: str
    departure_airport: str
    arrival_airport: str
    duration: str
    price_per_person: Decimal
    total_price: Decimal


class HotelSearchCriteria(BaseModel):
    city: str
    nights: int = Field(default=1, ge=1)
    travelers: int = Field(default=1, ge=1)
    max_price_per_night: Optional[Decimal] = None
    accommodation_type: Optional[str] = None


class HotelOffer(BaseModel):
    name: str
    city: str
    accommodation_class: str
    price_per_night: Decimal
    rating: float
    distance_km: float
    amenities: List[str] = Field(default_factory=list)


class ActivitySearchCriteria(BaseModel):
    city: str
    preferences: List[str] = Field(default_factory=list)
    max_cost: Optional[Decimal] = None
    time_slot: Optional[str] = None


class ActivityOffer(BaseModel):
    id: str
    name: str
    city: str
    kind: str
    time_slots: List[str]
    categories: List[str]
    cost: Decimal
    distance_km: float
    duration_minutes: int


class DestinationInfo(BaseModel):
    name: str
    country: Optional[str] = None
    region: Optional[str] = None
    description: Optional[str] = None
    best_time: Optional[str] = Field(default=None, serialization_alias="bestTime")
    source: str = "fallback"
