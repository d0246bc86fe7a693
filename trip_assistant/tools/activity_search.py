# Role: Mock activity/restaurant source over the local catalog.

from __future__ import annotations

from typing import List

from trip_assistant.models.offers import ActivityOffer, ActivitySearchCriteria
from trip_assistant.tools.base import ActivitySearchProvider
from trip_assistant.tools.catalog import activities_for


class MockActivitySearchProvider(ActivitySearchProvider):
    def search(self, criteria: ActivitySearchCriteria) -> List[ActivityOffer]:
        # Preferences narrow the list only when something matches them.
        offers = activities_for(criteria.city)

        if criteria.time_slot:
            offers = [o for o in offers if criteria.time_slot in o.time_slots]

        if criteria.max_cost is not None:
            offers = [o for o in offers if o.cost <= criteria.max_cost]

        if criteria.preferences:
            wanted = {p.lower() for p in criteria.preferences}
            matching = [o for o in offers if wanted.intersection(o.categories)]
            if matching:
                offers = matching

        return sorted(offers, key=lambda o: (o.distance_km, o.cost))
