# Role: Destination lookup tool. Known-destination table first, then Open-Meteo geocoding for anything
# else; a failed lookup degrades to a generic record instead of an error.

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests

import trip_assistant.config as config
from trip_assistant.models.offers import DestinationInfo
from trip_assistant.utils.vocabulary import lookup_place

# (description, best time to visit)
_KNOWN: Dict[str, tuple[str, str]] = {
    "italy": ("Ancient history, Renaissance art and some of the best food in the world.", "April to June, September to October"),
    "rome": ("The Eternal City: the Colosseum, the Vatican and lively piazzas.", "April to June, September to October"),
    "florence": ("Cradle of the Renaissance, compact and walkable.", "April to June, September to October"),
    "venice": ("Canals, gondolas and car-free lanes.", "April to June, September to November"),
    "france": ("Paris, the Riviera and world-class cuisine.", "April to June, September to October"),
    "paris": ("Museums, cafes and boulevards.", "April to June, October"),
    "spain": ("Beaches, tapas and late nights.", "April to June, September to October"),
    "barcelona": ("Gaudi architecture and Mediterranean beaches.", "May to June, September to October"),
    "portugal": ("Atlantic coastline, historic cities and great value.", "March to May, September to October"),
    "lisbon": ("Hilly streets, trams and fado.", "March to May, September to October"),
    "greece": ("Ancient ruins and island-hopping.", "May to June, September to October"),
    "athens": ("The Acropolis and a buzzing food scene.", "April to June, September to October"),
    "japan": ("Temples, neon cities and precise hospitality.", "March to May, October to November"),
    "tokyo": ("Neighbourhoods that feel like different cities.", "March to May, October to November"),
    "kyoto": ("Thousands of temples and traditional tea houses.", "March to May, October to November"),
    "thailand": ("Street food, temples and tropical islands.", "November to March"),
    "iceland": ("Glaciers, waterfalls and the northern lights.", "June to August for hiking, winter for auroras"),
    "usa": ("Big cities, national parks and road trips.", "April to June, September to October"),
    "new york": ("Skyline, museums and Broadway.", "April to June, September to November"),
}


@dataclass(frozen=True)
class DestinationToolResult:
    ok: bool
    data: DestinationInfo
    error: Optional[str] = None


class DestinationClient:
    GEO_URL = "https://geocoding-api.open-meteo.com/v1/search"

    def __init__(self, use_network: Optional[bool] = None) -> None:
        # Key line: None means "follow config.DESTINATION_LOOKUP" at call time.
        self._use_network = use_network

    def lookup(self, destination: str) -> DestinationToolResult:
        # 1) Validate input
        # 2) Known table (gazetteer + descriptions)
        # 3) Open-Meteo geocoding (name/country/admin region)
        # 4) Generic record on any failure
        name = (destination or "").strip()
        if not name:
            return DestinationToolResult(ok=False, data=DestinationInfo(name=""), error="Missing destination")

        known = self._from_table(name)
        if known is not None:
            return DestinationToolResult(ok=True, data=known)

        use_network = config.DESTINATION_LOOKUP if self._use_network is None else self._use_network
        if use_network:
            try:
                geo = self._geocode(name)
                if geo:
                    return DestinationToolResult(ok=True, data=self._from_geocode(name, geo))
            except requests.RequestException as e:
                if config.DEBUG:
                    print("DESTINATION_CLIENT geocoding failed:", e)
                return DestinationToolResult(ok=False, data=self._generic(name), error=f"Open-Meteo request failed: {e}")
            except (ValueError, KeyError, TypeError) as e:
                if config.DEBUG:
                    print("DESTINATION_CLIENT bad geocoding payload:", e)
                return DestinationToolResult(ok=False, data=self._generic(name), error=f"Bad geocoding payload: {e}")

        return DestinationToolResult(ok=False, data=self._generic(name), error=f"Unknown destination '{name}'")

    def _from_table(self, name: str) -> Optional[DestinationInfo]:
        place = lookup_place(name)
        if place is None:
            return None
        description, best_time = _KNOWN.get(place.name.lower(), (None, None))
        return DestinationInfo(
            name=place.name,
            country=place.country,
            region=place.region,
            description=description,
            best_time=best_time,
            source="known",
        )

    def _from_geocode(self, name: str, geo: Dict[str, Any]) -> DestinationInfo:
        region = geo.get("admin1")
        country = geo.get("country")
        where = ", ".join(p for p in (region, country) if p)
        return DestinationInfo(
            name=geo.get("name") or name,
            country=country,
            region=region,
            description=f"{geo.get('name') or name} ({where})" if where else None,
            source="open-meteo",
        )

    def _generic(self, name: str) -> DestinationInfo:
        return DestinationInfo(name=name, description=None, source="fallback")

    def _geocode(self, name: str) -> Optional[Dict[str, Any]]:
        # Role: resolve place name -> best single match.
        params = {"name": name, "count": 1, "language": "en", "format": "json"}
        r = requests.get(self.GEO_URL, params=params, timeout=15)
        r.raise_for_status()
        payload = r.json()
        results = payload.get("results") or []
        return results[0] if results else None
