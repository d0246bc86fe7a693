# Role: Deterministic month/date helpers. Detects month names and concrete date ranges in free text
# (travel_month slot) and turns a travel_month value into the first day of the trip.

from __future__ import annotations

import re
from datetime import date as dt_date
from typing import Optional

MONTHS = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)

_MONTH_NAMES = "|".join(m.lower() for m in MONTHS)

_MONTH_PATTERN = re.compile(rf"\b({_MONTH_NAMES})\b", re.IGNORECASE)

# "may" is also a verb; only accept it after a date-ish lead word.
_MAY_LEAD = re.compile(r"\b(?:in|during|early|mid|late|of|next|this|for|around|by)\s+may\b", re.IGNORECASE)

_DAY = r"(\d{1,2})(?:st|nd|rd|th)?"

_DAY_MONTH_RANGE = re.compile(
    rf"\b{_DAY}\s+({_MONTH_NAMES})\s*(?:-|–|to|until|till)\s*{_DAY}(?:\s+({_MONTH_NAMES}))?\b",
    re.IGNORECASE,
)
_MONTH_DAY_RANGE = re.compile(
    rf"\b({_MONTH_NAMES})\s+{_DAY}\s*(?:-|–|to|until|till)\s*(?:({_MONTH_NAMES})\s+)?{_DAY}\b",
    re.IGNORECASE,
)
_ISO_RANGE = re.compile(r"\b(\d{4}-\d{2}-\d{2})\s*(?:-|–|to|until|till)\s*(\d{4}-\d{2}-\d{2})\b")


def mentions_month(text: str) -> bool:
    # Role: fast check for month names.
    return find_month(text) is not None


def find_month(text: str) -> Optional[str]:
    # Returns the canonical month name of the first mention, or None.
    t = text or ""
    for m in _MONTH_PATTERN.finditer(t):
        name = m.group(1).lower()
        if name == "may" and not (_MAY_LEAD.search(t) or t.strip(" .!").lower() == "may"):
            continue
        return name.capitalize()
    return None


def find_date_range(text: str) -> Optional[str]:
    # Role: normalize a concrete range to "12 March - 19 March" or "2026-03-12 - 2026-03-19".
    t = text or ""

    m = _ISO_RANGE.search(t)
    if m:
        try:
            start = dt_date.fromisoformat(m.group(1))
            end = dt_date.fromisoformat(m.group(2))
        except ValueError:
            return None
        if end < start:
            return None
        return f"{start.isoformat()} - {end.isoformat()}"

    m = _DAY_MONTH_RANGE.search(t)
    if m:
        start_month = m.group(2).capitalize()
        end_month = (m.group(4) or m.group(2)).capitalize()
        return f"{int(m.group(1))} {start_month} - {int(m.group(3))} {end_month}"

    m = _MONTH_DAY_RANGE.search(t)
    if m:
        start_month = m.group(1).capitalize()
        end_month = (m.group(3) or m.group(1)).capitalize()
        return f"{int(m.group(2))} {start_month} - {int(m.group(4))} {end_month}"

    return None


def _month_index(name: str) -> Optional[int]:
    low = (name or "").strip().lower()
    for i, month in enumerate(MONTHS, start=1):
        if month.lower() == low:
            return i
    return None


def _next_occurrence(month: int, day: int, today: dt_date) -> dt_date:
    # Key line: a month without a year means its next occurrence (this year if not yet passed).
    year = today.year
    try:
        candidate = dt_date(year, month, day)
    except ValueError:
        candidate = dt_date(year, month, 1)
    if candidate < today:
        try:
            candidate = candidate.replace(year=year + 1)
        except ValueError:
            candidate = dt_date(year + 1, month, 1)
    return candidate


def trip_start_date(travel_month: Optional[str], today: Optional[dt_date] = None) -> dt_date:
    """
    First day of the trip for a travel_month value:
      - "2026-03-12 - 2026-03-19" -> 2026-03-12
      - "12 March - 19 March"     -> next 12 March
      - "March"                   -> next 1 March (today if we're in March)
      - anything else             -> today
    """
    today = today or dt_date.today()
    value = (travel_month or "").strip()
    if not value:
        return today

    iso = re.match(r"(\d{4}-\d{2}-\d{2})", value)
    if iso:
        try:
            return dt_date.fromisoformat(iso.group(1))
        except ValueError:
            return today

    dm = re.match(rf"(\d{{1,2}})\s+({_MONTH_NAMES})", value, re.IGNORECASE)
    if dm:
        month = _month_index(dm.group(2))
        if month:
            return _next_occurrence(month, int(dm.group(1)), today)

    month = _month_index(value)
    if month:
        if month == today.month:
            return today
        return _next_occurrence(month, 1, today)

    return today

