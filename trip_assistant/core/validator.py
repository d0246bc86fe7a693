# Role: Input gatekeeper for generation. Checks the TripSlots are complete and sane before the itinerary
# generator runs, and returns the missing slots (in question order) plus any invalid-value problems.

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import List

from trip_assistant.models.slots import SlotName, TripSlots


@dataclass(frozen=True)
class ValidationResult:
    ok: bool
    missing_info: List[SlotName]
    problems: List[str]


class Validator:
    MIN_BUDGET = Decimal("100")
    MAX_TRAVELERS = 20

    def validate(self, slots: TripSlots) -> ValidationResult:
        # 1) Collect unanswered slots (SLOT_ORDER)
        # 2) Collect invalid-value problems (e.g., zero days, tiny budget)
        # 3) ok=True only if both lists are empty
        missing = slots.missing()
        problems: List[str] = []

        if slots.duration_days is not None and slots.duration_days <= 0:
            problems.append("duration_days must be > 0")
        if slots.budget is not None and slots.budget < self.MIN_BUDGET:
            problems.append(f"budget must be at least {self.MIN_BUDGET}")
        if slots.travelers is not None and not 1 <= slots.travelers <= self.MAX_TRAVELERS:
            problems.append(f"travelers must be between 1 and {self.MAX_TRAVELERS}")

        ok = (len(missing) == 0) and (len(problems) == 0)
        return ValidationResult(ok=ok, missing_info=missing, problems=problems)
