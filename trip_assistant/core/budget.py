# Role: Arithmetic budget split. Picks the percentage table for the destination class and trip length,
# forces the six percentages to sum to 100 and turns them into amounts that sum to the total budget.

from __future__ import annotations

from decimal import ROUND_DOWN, Decimal
from typing import Dict, Optional

from trip_assistant.models.itinerary import BUDGET_CATEGORIES, BudgetBreakdown
from trip_assistant.utils.vocabulary import EUROPEAN_COUNTRIES, lookup_place

DEFAULT_SPLIT: Dict[str, int] = {
    "flights": 20,
    "accommodation": 40,
    "food": 25,
    "activities": 10,
    "transport": 3,
    "emergency": 2,
}

EUROPEAN_OVERRIDES: Dict[str, int] = {"flights": 25, "accommodation": 45, "food": 20}

# Longer trips: fewer accommodation points, more local transport.
LONG_TRIP_DAYS = 7
LONG_TRIP_DELTAS: Dict[str, int] = {"accommodation": -2, "transport": 2}

_CENT = Decimal("0.01")


class BudgetSplitError(ValueError):
    pass


def is_european(destination: Optional[str]) -> bool:
    place = lookup_place(destination or "")
    return place is not None and place.country in EUROPEAN_COUNTRIES


def split_percentages(destination: Optional[str], duration_days: int) -> Dict[str, int]:
    # 1) Start from the default table
    # 2) Apply the European override, then the long-trip deltas
    # 3) Absorb any surplus/deficit in activities so the total is exactly 100
    split = dict(DEFAULT_SPLIT)
    if is_european(destination):
        split.update(EUROPEAN_OVERRIDES)
    if duration_days > LONG_TRIP_DAYS:
        for name, delta in LONG_TRIP_DELTAS.items():
            split[name] += delta

    split["activities"] += 100 - sum(split.values())

    if sum(split.values()) != 100 or any(v < 0 for v in split.values()):
        raise BudgetSplitError(f"Budget percentages must be non-negative and sum to 100, got {split}")
    return split


def split_budget(total: Decimal, destination: Optional[str], duration_days: int) -> BudgetBreakdown:
    if total is None or Decimal(total) <= 0:
        raise BudgetSplitError("Total budget must be positive")

    total = Decimal(total)
    split = split_percentages(destination, duration_days)

    amounts: Dict[str, Decimal] = {}
    for name in BUDGET_CATEGORIES:
        amounts[name] = (total * split[name] / 100).quantize(_CENT, rounding=ROUND_DOWN)

    # Key line: rounding remainder goes to emergency, so amounts always sum to the total.
    amounts["emergency"] += total - sum(amounts.values())

    return BudgetBreakdown(**split, amounts=amounts)
