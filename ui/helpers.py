# Role: Backend calls + pure formatting helpers for the Streamlit UI.
# Kept free of streamlit imports so the formatting can be unit tested.

from __future__ import annotations

import os
from typing import Any, Dict, List, Optional, Tuple

import requests

BACKEND_URL = os.getenv("BACKEND_URL", "http://127.0.0.1:8000")

_CURRENCY_SYMBOLS = {"GBP": "£", "EUR": "€", "USD": "$"}

_PHASE_LABELS = {
    "collecting": "Collecting trip details",
    "confirming": "Waiting for your confirmation",
    "generating": "Building your itinerary",
    "done": "Itinerary ready",
}


# ----------------------------
# Backend calls
# ----------------------------
def send_to_backend(session_id: str, user_message: str, backend_url: str = BACKEND_URL) -> Dict[str, Any]:
    resp = requests.post(
        f"{backend_url}/chat",
        json={"session_id": session_id, "user_message": user_message},
        timeout=30,
    )
    resp.raise_for_status()
    return resp.json()


def fetch_snapshot(session_id: str, backend_url: str = BACKEND_URL) -> Optional[Dict[str, Any]]:
    try:
        r = requests.get(f"{backend_url}/state/{session_id}", timeout=10)
        if r.status_code != 200:
            return None
        return r.json()
    except requests.RequestException:
        return None


def reset_session(session_id: str, backend_url: str = BACKEND_URL) -> bool:
    try:
        r = requests.delete(f"{backend_url}/state/{session_id}", timeout=10)
        return r.status_code == 200
    except requests.RequestException:
        return False


# ----------------------------
# Formatting helpers
# ----------------------------
def title_case_city(s: Optional[str]) -> Optional[str]:
    if not s or not isinstance(s, str):
        return None
    s = s.strip()
    if not s:
        return None
    return " ".join(w.capitalize() for w in s.split())


def fmt_value(v: Any) -> str:
    if v is None:
        return "-"
    if isinstance(v, (list, tuple)):
        items = [str(x).strip() for x in v if str(x).strip()]
        return ", ".join(items) if items else "-"
    if isinstance(v, str):
        s = v.strip()
        return s if s else "-"
    return str(v)


def fmt_budget(budget: Any, currency: Optional[str]) -> str:
    # Decimals arrive as JSON strings ("3000" / "3000.00").
    if budget in (None, ""):
        return "-"
    try:
        amount = float(budget)
    except (TypeError, ValueError):
        return str(budget)
    code = (currency or "USD").upper()
    symbol = _CURRENCY_SYMBOLS.get(code)
    text = f"{amount:,.0f}" if amount == int(amount) else f"{amount:,.2f}"
    return f"{symbol}{text}" if symbol else f"{text} {code}"


def fmt_duration(days: Any) -> str:
    if days in (None, ""):
        return "-"
    try:
        d = int(days)
    except (TypeError, ValueError):
        return str(days)
    return f"{d} day{'s' if d != 1 else ''}"


def phase_label(phase: Optional[str]) -> str:
    return _PHASE_LABELS.get(phase or "", "Starting up")


def answered_progress(snapshot: Dict[str, Any]) -> Tuple[int, int]:
    answered = (snapshot or {}).get("answered") or {}
    return sum(1 for flag in answered.values() if flag), len(answered)


def build_trip_summary(snapshot: Dict[str, Any]) -> List[Tuple[str, str, str]]:
    """(icon, label, value) rows for the sidebar card, in question order."""
    slots = (snapshot or {}).get("slots") or {}
    currency = (snapshot or {}).get("budget_currency")

    return [
        ("📍", "Destination", title_case_city(slots.get("destination")) or "Not set"),
        ("🗓️", "Duration", fmt_duration(slots.get("duration_days"))),
        ("💸", "Budget", fmt_budget(slots.get("budget"), currency)),
        ("👥", "Travelers", fmt_value(slots.get("travelers"))),
        ("🛫", "Departing from", title_case_city(slots.get("departure_location")) or "-"),
        ("📆", "Month", fmt_value(slots.get("travel_month"))),
        ("🏨", "Accommodation", fmt_value(slots.get("accommodation_type"))),
        ("🍝", "Food", fmt_value(slots.get("food_preferences"))),
        ("🎟️", "Activities", fmt_value(slots.get("activity_preferences"))),
        ("⚡", "Pace", fmt_value(slots.get("pace"))),
    ]
