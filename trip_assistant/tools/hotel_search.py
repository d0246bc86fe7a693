# Role: Mock hotel source over the local catalog. Filters by class and nightly price, cheapest first.

from __future__ import annotations

from typing import List

from trip_assistant.models.offers import HotelOffer, HotelSearchCriteria
from trip_assistant.tools.base import HotelSearchProvider
from trip_assistant.tools.catalog import hotels_for


class MockHotelSearchProvider(HotelSearchProvider):
    def search(self, criteria: HotelSearchCriteria) -> List[HotelOffer]:
        offers = hotels_for(criteria.city)

        if criteria.accommodation_type:
            kind = criteria.accommodation_type.strip().lower()
            offers = [o for o in offers if o.accommodation_class == kind]

        if criteria.max_price_per_night is not None:
            offers = [o for o in offers if o.price_per_night <= criteria.max_price_per_night]

        return sorted(offers, key=lambda o: (o.price_per_night, -o.rating))
