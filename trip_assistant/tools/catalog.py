# Role: Local mock tables behind the search providers: a few hand-picked hotels/activities for popular
# cities, plus generic templates so every city (including unknown ones) gets a full set of options.
# Prices are per person (activities) or per room per night (hotels), in the trip's budget currency.

from __future__ import annotations

import re
from decimal import Decimal
from typing import Dict, List, Tuple

from trip_assistant.models.offers import ActivityOffer, HotelOffer

# Cheapest first. A "cheaper class" substitution walks left along this ladder.
ACCOMMODATION_LADDER: Tuple[str, ...] = (
    "hostel", "budget", "apartment", "hotel", "boutique", "resort", "villa", "luxury",
)

# (class, name template, price per night, rating, distance_km, amenities)
_HOTEL_TEMPLATES: Tuple[Tuple[str, str, int, float, float, Tuple[str, ...]], ...] = (
    ("hostel", "{city} Backpackers Hostel", 35, 4.0, 1.4, ("WiFi", "Shared Kitchen", "Lockers")),
    ("hostel", "Old Town Hostel {city}", 28, 3.8, 4.6, ("WiFi", "Bar")),
    ("budget", "{city} Budget Inn", 70, 3.9, 2.2, ("WiFi", "24h Reception")),
    ("budget", "Easy Stay {city}", 55, 3.6, 5.8, ("WiFi",)),
    ("apartment", "{city} Central Apartments", 110, 4.3, 1.1, ("WiFi", "Kitchen", "Washer")),
    ("apartment", "Riverside Flats {city}", 85, 4.1, 5.2, ("WiFi", "Kitchen")),
    ("hotel", "Grand Hotel {city}", 150, 4.4, 0.9, ("WiFi", "Restaurant", "Bar", "Concierge")),
    ("hotel", "Hotel {city} Station", 120, 4.0, 3.7, ("WiFi", "Restaurant")),
    ("boutique", "The {city} Boutique", 190, 4.6, 1.3, ("WiFi", "Rooftop Bar", "Breakfast")),
    ("resort", "{city} Bay Resort", 240, 4.5, 6.5, ("Pool", "Spa", "Restaurant", "Beach Access")),
    ("villa", "Villa {city} Hills", 280, 4.7, 7.2, ("Private Pool", "Garden", "Kitchen")),
    ("luxury", "{city} Palace Hotel", 450, 4.8, 0.7, ("Spa", "Fine Dining", "Concierge", "Room Service")),
)

_HOTELS: Dict[str, Tuple[Tuple[str, str, int, float, float, Tuple[str, ...]], ...]] = {
    "rome": (
        ("luxury", "Hotel de Russie", 850, 4.9, 0.6, ("Spa", "Garden", "Restaurant", "Concierge")),
        ("hotel", "Hotel Artemide", 180, 4.6, 1.5, ("WiFi", "Gym", "Spa", "Restaurant")),
        ("hotel", "Hotel Sonya", 160, 4.5, 1.8, ("WiFi", "Restaurant", "Bar")),
    ),
    "florence": (
        ("luxury", "Hotel Savoy", 680, 4.8, 0.2, ("Spa", "Restaurant", "Bar", "Concierge")),
        ("boutique", "Hotel Spadai", 210, 4.6, 0.4, ("WiFi", "Breakfast", "Terrace")),
    ),
    "venice": (
        ("hotel", "Hotel Antiche Figure", 190, 4.5, 1.9, ("WiFi", "Breakfast", "Canal View")),
    ),
    "paris": (
        ("luxury", "Le Meurice", 1100, 4.9, 0.8, ("Spa", "Fine Dining", "Concierge")),
        ("boutique", "Hotel des Grands Boulevards", 240, 4.5, 1.6, ("WiFi", "Rooftop Bar")),
    ),
    "tokyo": (
        ("hotel", "Hotel Gracery Shinjuku", 160, 4.4, 2.1, ("WiFi", "Restaurant")),
        ("hostel", "Nui. Hostel & Bar Lounge", 40, 4.5, 2.8, ("WiFi", "Bar", "Lounge")),
    ),
    "lisbon": (
        ("boutique", "Memmo Alfama", 230, 4.7, 1.0, ("Pool", "Terrace", "Breakfast")),
    ),
}

# (id, name template, kind, time slots, categories, cost, distance_km, minutes)
_ActivityRow = Tuple[str, str, str, Tuple[str, ...], Tuple[str, ...], int, float, int]

_ACTIVITY_TEMPLATES: Tuple[_ActivityRow, ...] = (
    ("old-town-walk", "{city} Old Town Walking Tour", "sightseeing", ("morning", "afternoon"),
     ("history", "sightseeing", "culture"), 20, 1.2, 150),
    ("history-museum", "{city} History Museum", "sightseeing", ("morning", "afternoon"),
     ("history", "museums"), 15, 1.8, 120),
    ("art-gallery", "{city} Art Gallery", "sightseeing", ("morning", "afternoon"),
     ("art", "museums"), 18, 2.4, 120),
    ("landmarks", "Cathedral & Landmarks Tour", "sightseeing", ("morning", "afternoon"),
     ("sightseeing", "history", "culture"), 12, 0.9, 120),
    ("market", "Local Market Visit", "shopping", ("morning",),
     ("shopping", "culture", "local cuisine"), 0, 1.0, 90),
    ("gardens", "{city} Botanical Gardens", "activity", ("morning", "afternoon"),
     ("nature", "wellness", "photography"), 8, 2.9, 90),
    ("viewpoint-hike", "Panoramic Viewpoint Hike", "activity", ("morning", "afternoon"),
     ("nature", "adventure", "photography"), 0, 6.5, 180),
    ("coast", "Beach & Coastal Walk", "activity", ("morning", "afternoon"),
     ("beaches", "nature"), 0, 7.5, 180),
    ("bike-tour", "Guided Bike Adventure", "activity", ("morning", "afternoon"),
     ("adventure", "sightseeing"), 45, 4.2, 180),
    ("cooking-class", "Cooking Class with a Local Chef", "activity", ("afternoon",),
     ("cooking classes", "local cuisine", "culture"), 70, 2.2, 180),
    ("spa", "Spa Afternoon", "wellness", ("afternoon",),
     ("wellness",), 60, 1.6, 150),
    ("shopping-district", "{city} Shopping District", "shopping", ("afternoon",),
     ("shopping",), 0, 1.5, 120),
    ("cafe-morning", "Coffee & Pastry Stroll", "sightseeing", ("morning",),
     ("cafes", "sightseeing"), 8, 0.5, 60),
    ("traditional-dinner", "Traditional Dinner in the Old Town", "restaurant", ("evening",),
     ("local cuisine",), 35, 1.1, 120),
    ("street-food", "Street Food Evening", "restaurant", ("evening",),
     ("street food", "local cuisine"), 18, 1.5, 120),
    ("seafood-dinner", "Seafood Dinner by the Harbour", "restaurant", ("evening",),
     ("seafood",), 45, 3.8, 120),
    ("veggie-bistro", "Vegetarian Bistro Dinner", "restaurant", ("evening",),
     ("vegetarian", "vegan", "gluten-free"), 28, 1.9, 90),
    ("tasting-menu", "Fine Dining Tasting Menu", "restaurant", ("evening",),
     ("fine dining", "wine"), 110, 2.0, 150),
    ("trattoria", "Family-Run Trattoria", "restaurant", ("evening",),
     ("local cuisine", "italian", "halal", "kosher"), 30, 2.6, 90),
    ("rooftop-bar", "Rooftop Bar & Live Music", "nightlife", ("evening",),
     ("nightlife",), 25, 1.4, 150),
    ("wine-bar", "Wine Bar Evening", "nightlife", ("evening",),
     ("wine", "nightlife"), 30, 1.3, 120),
)

_ACTIVITIES: Dict[str, Tuple[_ActivityRow, ...]] = {
    "rome": (
        ("colosseum-tour", "Colosseum & Roman Forum Tour", "sightseeing", ("morning",),
         ("history", "sightseeing"), 45, 1.0, 180),
        ("vatican-museums", "Vatican Museums & Sistine Chapel", "sightseeing", ("morning", "afternoon"),
         ("art", "history", "museums"), 65, 2.7, 240),
        ("roman-food-tour", "Roman Street Food Tour", "restaurant", ("evening",),
         ("street food", "local cuisine"), 55, 1.6, 180),
        ("trevi-stroll", "Evening Trevi Fountain Stroll", "sightseeing", ("evening",),
         ("sightseeing", "photography"), 0, 0.4, 60),
    ),
    "florence": (
        ("uffizi", "Uffizi Gallery", "sightseeing", ("morning", "afternoon"),
         ("art", "museums", "history"), 25, 0.3, 180),
        ("duomo-climb", "Duomo Dome Climb", "sightseeing", ("morning",),
         ("sightseeing", "history", "photography"), 30, 0.2, 90),
        ("chianti-tour", "Chianti Wine Country Tour", "activity", ("afternoon",),
         ("wine", "nature"), 95, 25.0, 300),
    ),
    "paris": (
        ("louvre", "Louvre Museum", "sightseeing", ("morning", "afternoon"),
         ("art", "museums", "history"), 22, 1.1, 180),
        ("eiffel-summit", "Eiffel Tower Summit", "sightseeing", ("afternoon", "evening"),
         ("sightseeing", "photography"), 35, 3.4, 120),
        ("seine-cruise", "Seine Dinner Cruise", "restaurant", ("evening",),
         ("fine dining", "sightseeing"), 120, 2.2, 150),
    ),
    "tokyo": (
        ("sensoji", "Senso-ji Temple & Asakusa", "sightseeing", ("morning",),
         ("culture", "history", "sightseeing"), 0, 4.5, 120),
        ("tsukiji", "Tsukiji Outer Market Breakfast", "restaurant", ("morning",),
         ("seafood", "street food", "local cuisine"), 25, 2.0, 90),
        ("izakaya", "Shinjuku Izakaya Crawl", "nightlife", ("evening",),
         ("nightlife", "local cuisine"), 40, 0.8, 180),
    ),
    "kyoto": (
        ("fushimi-inari", "Fushimi Inari Shrine Hike", "activity", ("morning",),
         ("culture", "nature", "photography"), 0, 4.0, 180),
        ("tea-ceremony", "Traditional Tea Ceremony", "activity", ("afternoon",),
         ("culture", "wellness"), 35, 1.5, 90),
    ),
    "athens": (
        ("acropolis", "Acropolis & Parthenon", "sightseeing", ("morning",),
         ("history", "sightseeing"), 20, 0.8, 180),
    ),
    "lisbon": (
        ("tram-28", "Tram 28 & Alfama Walk", "sightseeing", ("morning", "afternoon"),
         ("sightseeing", "history", "photography"), 3, 0.5, 120),
        ("fado-dinner", "Fado Dinner in Alfama", "restaurant", ("evening",),
         ("local cuisine", "culture"), 50, 0.6, 150),
    ),
}


def slug(text: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", (text or "").lower()).strip("-")


def hotels_for(city: str) -> List[HotelOffer]:
    # Specific rows first, then the generic templates.
    rows = _HOTELS.get(city.lower(), ()) + _HOTEL_TEMPLATES
    return [
        HotelOffer(
            name=name.format(city=city),
            city=city,
            accommodation_class=kind,
            price_per_night=Decimal(price),
            rating=rating,
            distance_km=distance,
            amenities=list(amenities),
        )
        for kind, name, price, rating, distance, amenities in rows
    ]


def activities_for(city: str) -> List[ActivityOffer]:
    rows = _ACTIVITIES.get(city.lower(), ()) + _ACTIVITY_TEMPLATES
    # Key line: ids carry the city so "used earlier" checks work across a multi-city trip.
    return [
        ActivityOffer(
            id=f"{slug(city)}-{row_id}",
            name=name.format(city=city),
            city=city,
            kind=kind,
            time_slots=list(slots),
            categories=list(categories),
            cost=Decimal(cost),
            distance_km=distance,
            duration_minutes=minutes,
        )
        for row_id, name, kind, slots, categories, cost, distance, minutes in rows
    ]
