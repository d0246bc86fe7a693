# Role: Provider interfaces for the search sources. The itinerary generator and the /api/*/search routes
# only talk to these; the default implementations read local mock tables.

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List

from trip_assistant.models.offers import (
    ActivityOffer,
    ActivitySearchCriteria,
    FlightOffer,
    FlightSearchCriteria,
    HotelOffer,
    HotelSearchCriteria,
)


class FlightSearchProvider(ABC):
    @abstractmethod
    def search(self, criteria: FlightSearchCriteria) -> List[FlightOffer]:
        ...


class HotelSearchProvider(ABC):
    @abstractmethod
    def search(self, criteria: HotelSearchCriteria) -> List[HotelOffer]:
        ...


class ActivitySearchProvider(ABC):
    @abstractmethod
    def search(self, criteria: ActivitySearchCriteria) -> List[ActivityOffer]:
        ...
