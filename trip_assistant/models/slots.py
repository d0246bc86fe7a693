# Role: The slot dictionary. TripSlots is the canonical trip record the whole conversation fills in;
# SLOT_ORDER is the fixed order the assistant asks about unanswered slots.

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

Pace = Literal["fast-paced", "relaxed", "balanced"]

PACE_VALUES = ("fast-paced", "relaxed", "balanced")


class SlotName(str, Enum):
    DESTINATION = "destination"
    DURATION = "duration_days"
    BUDGET = "budget"
    TRAVELERS = "travelers"
    DEPARTURE_LOCATION = "departure_location"
    TRAVEL_MONTH = "travel_month"
    ACCOMMODATION_TYPE = "accommodation_type"
    FOOD_PREFERENCES = "food_preferences"
    ACTIVITY_PREFERENCES = "activity_preferences"
    PACE = "pace"


# Key line: priority order for questions. Never reordered by context.
SLOT_ORDER: tuple[SlotName, ...] = (
    SlotName.DESTINATION,
    SlotName.DURATION,
    SlotName.BUDGET,
    SlotName.TRAVELERS,
    SlotName.DEPARTURE_LOCATION,
    SlotName.TRAVEL_MONTH,
    SlotName.ACCOMMODATION_TYPE,
    SlotName.FOOD_PREFERENCES,
    SlotName.ACTIVITY_PREFERENCES,
    SlotName.PACE,
)

_LIST_SLOTS = {SlotName.FOOD_PREFERENCES, SlotName.ACTIVITY_PREFERENCES}


class TripSlots(BaseModel):
    destination: Optional[str] = None
    duration_days: Optional[int] = Field(default=None, gt=0)
    budget: Optional[Decimal] = Field(default=None, gt=0)
    travelers: Optional[int] = Field(default=None, ge=1)
    departure_location: Optional[str] = None
    travel_month: Optional[str] = None
    accommodation_type: Optional[str] = None
    food_preferences: List[str] = Field(default_factory=list)
    activity_preferences: List[str] = Field(default_factory=list)
    pace: Optional[Pace] = None

    @field_validator("destination", "departure_location", "travel_month", "accommodation_type", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        if isinstance(value, str):
            value = value.strip()
            return value or None
        return value

    def value_of(self, slot: SlotName) -> Any:
        return getattr(self, slot.value)

    def is_answered(self, slot: SlotName) -> bool:
        # Key line: answered <=> non-null and non-empty.
        value = self.value_of(slot)
        if value is None:
            return False
        if isinstance(value, (list, str)):
            return len(value) > 0
        return True

    def missing(self) -> List[SlotName]:
        return [slot for slot in SLOT_ORDER if not self.is_answered(slot)]

    def apply_updates(self, updates: Dict[SlotName, Any]) -> List[SlotName]:
        # 1) Skip empty values (an update never "unanswers" a slot)
        # 2) Coerce numbers; drop values that violate the field constraints
        # 3) Merge list slots without duplicates
        # Returns the slots that actually changed.
        changed: List[SlotName] = []
        if not updates:
            return changed

        for slot, raw in updates.items():
            slot = SlotName(slot)
            value = _coerce(slot, raw)
            if value is None:
                continue

            if slot in _LIST_SLOTS:
                current = list(self.value_of(slot))
                for item in value:
                    if item not in current:
                        current.append(item)
                if current != self.value_of(slot):
                    setattr(self, slot.value, current)
                    changed.append(slot)
                continue

            if self.value_of(slot) != value:
                setattr(self, slot.value, value)
                changed.append(slot)

        return changed


def _coerce(slot: SlotName, raw: Any) -> Any:
    if raw is None:
        return None

    if slot in _LIST_SLOTS:
        if isinstance(raw, str):
            raw = [raw]
        if not isinstance(raw, (list, tuple, set)):
            return None
        items = []
        for item in raw:
            if isinstance(item, str) and item.strip():
                cleaned = item.strip().lower()
                if cleaned not in items:
                    items.append(cleaned)
        return items or None

    if slot in (SlotName.DURATION, SlotName.TRAVELERS):
        if isinstance(raw, bool):
            return None
        try:
            number = int(raw)
        except (TypeError, ValueError):
            return None
        return number if number >= 1 else None

    if slot == SlotName.BUDGET:
        try:
            amount = Decimal(str(raw).replace(",", ""))
        except (InvalidOperation, ValueError):
            return None
        return amount if amount > 0 else None

    if slot == SlotName.PACE:
        return raw if raw in PACE_VALUES else None

    if isinstance(raw, str):
        return raw.strip() or None

    return None
