# Role: Per-session state container. One explicit value holding the slots, their answered flags,
# the dialogue phase, the confirmation latch, the transcript and (once generated) the itinerary.
# The dialogue controller returns a new SessionState each turn instead of mutating its input.

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from trip_assistant.models.itinerary import ItineraryPlan
from trip_assistant.models.message import ConversationTurn
from trip_assistant.models.slots import SLOT_ORDER, SlotName, TripSlots


class Phase(str, Enum):
    COLLECTING = "collecting"
    CONFIRMING = "confirming"
    GENERATING = "generating"
    DONE = "done"


def _all_unanswered() -> Dict[SlotName, bool]:
    return {slot: False for slot in SLOT_ORDER}


class SessionState(BaseModel):
    session_id: str
    slots: TripSlots = Field(default_factory=TripSlots)
    answered: Dict[SlotName, bool] = Field(default_factory=_all_unanswered)
    phase: Phase = Phase.COLLECTING

    # Key line: latch so COLLECTING -> CONFIRMING fires once until the user sends us back to collecting.
    has_asked_for_confirmation: bool = False

    turns: List[ConversationTurn] = Field(default_factory=list)
    itinerary: Optional[ItineraryPlan] = None

    # Currency symbol/code seen next to the budget ("GBP", "EUR", "USD"); display only.
    budget_currency: Optional[str] = None

    turn_count: int = 0
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    def all_answered(self) -> bool:
        return all(self.answered.get(slot, False) for slot in SLOT_ORDER)

    def next_unanswered(self) -> Optional[SlotName]:
        for slot in SLOT_ORDER:
            if not self.answered.get(slot, False):
                return slot
        return None
