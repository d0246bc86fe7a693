# Role: Keyword tables for the rule-based extractor (gazetteer, departure cities, preference groups,
# pace groups, accommodation vocabulary). Kept as data so a stronger extractor can replace the rules
# without touching the dialogue state machine.

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple


@dataclass(frozen=True)
class Place:
    name: str
    country: str
    region: str


def _country(name: str, region: str) -> Place:
    return Place(name=name, country=name, region=region)


_PLACES: Tuple[Place, ...] = (
    # Europe
    _country("Italy", "Europe"),
    Place("Rome", "Italy", "Europe"),
    Place("Florence", "Italy", "Europe"),
    Place("Venice", "Italy", "Europe"),
    Place("Milan", "Italy", "Europe"),
    Place("Naples", "Italy", "Europe"),
    Place("Amalfi Coast", "Italy", "Europe"),
    _country("France", "Europe"),
    Place("Paris", "France", "Europe"),
    Place("Nice", "France", "Europe"),
    Place("Lyon", "France", "Europe"),
    Place("Marseille", "France", "Europe"),
    _country("Spain", "Europe"),
    Place("Madrid", "Spain", "Europe"),
    Place("Barcelona", "Spain", "Europe"),
    Place("Seville", "Spain", "Europe"),
    Place("Valencia", "Spain", "Europe"),
    Place("Ibiza", "Spain", "Europe"),
    _country("Portugal", "Europe"),
    Place("Lisbon", "Portugal", "Europe"),
    Place("Porto", "Portugal", "Europe"),
    _country("Greece", "Europe"),
    Place("Athens", "Greece", "Europe"),
    Place("Santorini", "Greece", "Europe"),
    Place("Mykonos", "Greece", "Europe"),
    Place("Crete", "Greece", "Europe"),
    _country("Germany", "Europe"),
    Place("Berlin", "Germany", "Europe"),
    Place("Munich", "Germany", "Europe"),
    Place("Hamburg", "Germany", "Europe"),
    _country("Netherlands", "Europe"),
    Place("Amsterdam", "Netherlands", "Europe"),
    _country("Switzerland", "Europe"),
    Place("Zurich", "Switzerland", "Europe"),
    _country("Austria", "Europe"),
    Place("Vienna", "Austria", "Europe"),
    _country("Croatia", "Europe"),
    Place("Dubrovnik", "Croatia", "Europe"),
    Place("Prague", "Czech Republic", "Europe"),
    Place("Budapest", "Hungary", "Europe"),
    _country("Ireland", "Europe"),
    Place("Dublin", "Ireland", "Europe"),
    _country("Iceland", "Europe"),
    Place("Reykjavik", "Iceland", "Europe"),
    _country("United Kingdom", "Europe"),
    Place("London", "United Kingdom", "Europe"),
    Place("Edinburgh", "United Kingdom", "Europe"),
    Place("Manchester", "United Kingdom", "Europe"),
    Place("Scotland", "United Kingdom", "Europe"),
    # Asia
    _country("Japan", "Asia"),
    Place("Tokyo", "Japan", "Asia"),
    Place("Kyoto", "Japan", "Asia"),
    Place("Osaka", "Japan", "Asia"),
    Place("Hiroshima", "Japan", "Asia"),
    _country("Thailand", "Asia"),
    Place("Bangkok", "Thailand", "Asia"),
    Place("Phuket", "Thailand", "Asia"),
    Place("Chiang Mai", "Thailand", "Asia"),
    _country("Vietnam", "Asia"),
    Place("Hanoi", "Vietnam", "Asia"),
    Place("Bali", "Indonesia", "Asia"),
    Place("Singapore", "Singapore", "Asia"),
    _country("India", "Asia"),
    Place("Dubai", "United Arab Emirates", "Middle East"),
    _country("Turkey", "Europe"),
    Place("Istanbul", "Turkey", "Europe"),
    # Americas
    Place("USA", "United States", "North America"),
    Place("New York", "United States", "North America"),
    Place("Los Angeles", "United States", "North America"),
    Place("San Francisco", "United States", "North America"),
    Place("Chicago", "United States", "North America"),
    Place("Miami", "United States", "North America"),
    Place("Las Vegas", "United States", "North America"),
    _country("Canada", "North America"),
    Place("Toronto", "Canada", "North America"),
    _country("Mexico", "North America"),
    Place("Cancun", "Mexico", "North America"),
    Place("Punta Cana", "Dominican Republic", "Caribbean"),
    _country("Peru", "South America"),
    _country("Brazil", "South America"),
    Place("Rio de Janeiro", "Brazil", "South America"),
    # Africa and Oceania
    _country("Morocco", "Africa"),
    Place("Marrakech", "Morocco", "Africa"),
    _country("Egypt", "Africa"),
    Place("Cape Town", "South Africa", "Africa"),
    _country("Australia", "Oceania"),
    Place("Sydney", "Australia", "Oceania"),
    Place("New Zealand", "New Zealand", "Oceania"),
)

GAZETTEER: Dict[str, Place] = {p.name.lower(): p for p in _PLACES}

# Aliases resolve to gazetteer names.
_ALIASES = {
    "uk": "United Kingdom",
    "britain": "United Kingdom",
    "england": "United Kingdom",
    "us": "USA",
    "united states": "USA",
    "america": "USA",
    "nyc": "New York",
    "holland": "Netherlands",
}

_CASE_SENSITIVE = {"us": "US", "nice": "Nice", "turkey": "Turkey"}
_SENTENCE_OPENERS = {"nice"}

# Countries whose trips use the European budget split.
EUROPEAN_COUNTRIES = frozenset(p.country for p in _PLACES if p.region == "Europe")

# Whole-message departure cities (common UK/US/EU airports).
DEPARTURE_CITIES: Tuple[str, ...] = (
    "London", "Manchester", "Birmingham", "Bristol", "Glasgow", "Edinburgh", "Leeds", "Liverpool",
    "Newcastle", "Belfast", "Dublin", "Cardiff", "New York", "Boston", "Chicago", "Los Angeles",
    "San Francisco", "Toronto", "Paris", "Amsterdam", "Frankfurt", "Madrid", "Berlin", "Sydney",
)

# Ordered: first listed wins.
ACCOMMODATION_TYPES: Tuple[str, ...] = (
    "luxury", "budget", "boutique", "villa", "resort", "apartment", "hostel", "hotel",
)

# Used when the traveler has no accommodation preference.
DEFAULT_ACCOMMODATION = "hotel"

FOOD_KEYWORDS: Dict[str, Tuple[str, ...]] = {
    "vegetarian": ("vegetarian", "veggie"),
    "vegan": ("vegan", "plant-based", "plant based"),
    "seafood": ("seafood", "fish", "sushi"),
    "street food": ("street food", "food stalls", "food markets"),
    "fine dining": ("fine dining", "michelin", "gourmet"),
    "local cuisine": ("local cuisine", "local food", "traditional food", "authentic food", "local dishes"),
    "halal": ("halal",),
    "kosher": ("kosher",),
    "gluten-free": ("gluten-free", "gluten free", "coeliac", "celiac"),
    "italian": ("italian food", "pasta", "pizza"),
    "wine": ("wine", "wine tasting"),
    "cafes": ("cafe", "cafes", "coffee", "brunch"),
}

ACTIVITY_KEYWORDS: Dict[str, Tuple[str, ...]] = {
    "history": ("history", "historical", "historic", "ancient", "ruins", "heritage"),
    "museums": ("museum", "museums"),
    "art": ("art", "galleries", "gallery", "renaissance", "paintings"),
    "sightseeing": ("sightseeing", "sights", "landmarks", "monuments", "attractions"),
    "nature": ("nature", "hiking", "mountains", "parks", "gardens", "outdoors", "countryside"),
    "beaches": ("beach", "beaches", "swimming", "snorkelling", "snorkeling"),
    "adventure": ("adventure", "diving", "climbing", "kayaking", "surfing", "cycling"),
    "nightlife": ("nightlife", "bars", "clubs", "clubbing", "live music"),
    "shopping": ("shopping", "markets", "boutiques", "souvenirs"),
    "culture": ("culture", "cultural", "temples", "festivals", "traditions"),
    "wellness": ("wellness", "spa", "yoga", "massage"),
    "photography": ("photography", "photos", "scenic", "viewpoints"),
    "cooking classes": ("cooking class", "cooking classes"),
}

PACE_KEYWORDS: Dict[str, Tuple[str, ...]] = {
    "fast-paced": ("fast-paced", "fast paced", "fast", "packed", "busy", "action-packed", "see everything", "intense"),
    "relaxed": ("relaxed", "relaxing", "relax", "slow", "leisurely", "laid-back", "laid back", "chilled", "easy-going"),
    "balanced": ("balanced", "moderate", "mix of both", "bit of both", "in between", "medium", "mixed"),
}


def _word_pattern(phrase: str) -> re.Pattern[str]:
    return re.compile(rf"(?<![a-z]){re.escape(phrase)}(?![a-z])", re.IGNORECASE)


def contains_phrase(text: str, phrase: str) -> bool:
    return bool(_word_pattern(phrase).search(text or ""))


def _counts_as_place(key: str, text: str, start: int, end: int) -> bool:
    # Key line: names that are also everyday words ("us", "nice") only count when capitalised.
    if key not in _CASE_SENSITIVE:
        return True
    if text[start:end] != _CASE_SENSITIVE[key]:
        return False
    # "Nice, sounds good": a capital at the start of the message is not enough on its own.
    if key in _SENTENCE_OPENERS and start == len(text) - len(text.lstrip()):
        return text.strip(" .,!?").lower() == key
    return True


def find_place(text: str) -> Optional[Tuple[Place, Tuple[int, int]]]:
    """
    Earliest whole-word gazetteer (or alias) hit in text, longest name first on ties.
    Returns the place and the matched span.
    """
    text = text or ""
    low = text.lower()
    best: Optional[Tuple[Place, Tuple[int, int]]] = None
    for key, name in list(_ALIASES.items()) + [(k, GAZETTEER[k].name) for k in GAZETTEER]:
        m = next(
            (m for m in _word_pattern(key).finditer(low) if _counts_as_place(key, text, m.start(), m.end())),
            None,
        )
        if m is None:
            continue
        span = (m.start(), m.end())
        if best is None or span[0] < best[1][0] or (span[0] == best[1][0] and span[1] > best[1][1]):
            best = (GAZETTEER[name.lower()], span)
    return best


def lookup_place(name: str) -> Optional[Place]:
    key = (name or "").strip().lower()
    if key in _ALIASES:
        key = _ALIASES[key].lower()
    return GAZETTEER.get(key)


def match_departure_city(text: str) -> Optional[str]:
    t = (text or "").strip().strip(".!").lower()
    for city in DEPARTURE_CITIES:
        if t == city.lower():
            return city
    return None


def collect_keywords(text: str, groups: Dict[str, Iterable[str]]) -> List[str]:
    # Role: all matching groups, in table order (not first-match-wins).
    found: List[str] = []
    for canonical, phrases in groups.items():
        if any(contains_phrase(text, p) for p in phrases):
            found.append(canonical)
    return found


def title_place(text: str) -> str:
    words = re.sub(r"\s+", " ", (text or "").strip(" .,!?")).split(" ")
    small = {"de", "da", "del", "of", "the", "la", "le"}
    out = []
    for i, w in enumerate(words):
        if i > 0 and w.lower() in small:
            out.append(w.lower())
        else:
            out.append(w[:1].upper() + w[1:].lower())
    return " ".join(out)
