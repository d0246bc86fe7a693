# Role: Deterministic dialogue state machine + confirmation gate.
# Takes the current SessionState and one ExtractionResult, returns a TurnOutcome carrying a NEW state:
#   COLLECTING -> COLLECTING  (merge, ask next unanswered slot)
#   COLLECTING -> CONFIRMING  (once, when the tenth slot gets answered)
#   CONFIRMING -> GENERATING | COLLECTING | CONFIRMING  (yes / no / anything else)
#   GENERATING -> DONE        (complete(), after the generator returns)

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

import trip_assistant.config as config
from trip_assistant.core.extractor import ExtractionResult
from trip_assistant.models.itinerary import ItineraryPlan
from trip_assistant.models.slots import SlotName
from trip_assistant.models.state import Phase, SessionState
from trip_assistant.utils.clarification import (
    build_acknowledgment,
    build_confirmation_reask,
    build_confirmation_summary,
    build_slot_question,
)


class TurnKind(str, Enum):
    ASK = "ask"
    CONFIRM = "confirm"
    GENERATE = "generate"
    CLARIFY = "clarify"
    DONE = "done"


@dataclass(frozen=True)
class TurnOutcome:
    kind: TurnKind
    message: str
    state: SessionState
    asked_slot: Optional[SlotName] = None


# Key line: negatives are checked first, so "no, more info" never reads as "yes".
_NEGATIVE = re.compile(r"\b(?:no|nope|wait|more info|additional|change|not yet)\b", re.IGNORECASE)
_AFFIRMATIVE = re.compile(
    r"\b(?:yes|yeah|yep|sure|correct|create|proceed|go ahead|looks good)\b",
    re.IGNORECASE,
)
_RESET = re.compile(r"\b(?:start over|start again|reset|new trip)\b", re.IGNORECASE)


def is_negative(text: str) -> bool:
    return bool(_NEGATIVE.search(text or ""))


def is_affirmative(text: str) -> bool:
    return bool(_AFFIRMATIVE.search(text or ""))


def wants_reset(text: str) -> bool:
    return bool(_RESET.search(text or ""))


class DialogueController:
    def advance(
        self,
        state: SessionState,
        extraction: ExtractionResult,
        user_text: str = "",
        *,
        note: Optional[str] = None,
    ) -> TurnOutcome:
        # Key line: never mutate the caller's state; everything below works on a deep copy.
        new_state = state.model_copy(deep=True)
        text = user_text if isinstance(user_text, str) else ""

        if wants_reset(text):
            return self._reset(new_state)

        if new_state.phase == Phase.DONE:
            return self._done_reminder(new_state)

        if new_state.phase == Phase.GENERATING:
            return TurnOutcome(kind=TurnKind.GENERATE, message="Still working on your itinerary...", state=new_state)

        if new_state.phase == Phase.CONFIRMING:
            return self._confirming(new_state, text)

        return self._collecting(new_state, extraction, text, note)

    def complete(self, state: SessionState, plan: ItineraryPlan) -> SessionState:
        # GENERATING -> DONE, with the plan attached.
        new_state = state.model_copy(deep=True)
        new_state.itinerary = plan
        new_state.phase = Phase.DONE
        new_state.updated_at = datetime.now(timezone.utc)
        return new_state

    # ---------------- phases ----------------

    def _collecting(
        self,
        state: SessionState,
        extraction: ExtractionResult,
        text: str,
        note: Optional[str],
    ) -> TurnOutcome:
        # 1) Merge values + answered flags (a flag only sticks if the value is non-empty)
        # 2) All ten answered and latch clear -> summary + yes/no question, set latch
        # 3) Otherwise acknowledge and ask the first unanswered slot
        changed = state.slots.apply_updates(extraction.slot_updates)

        for slot, flag in extraction.answered.items():
            slot = SlotName(slot)
            if flag and state.slots.is_answered(slot):
                state.answered[slot] = True

        if extraction.currency and SlotName.BUDGET in changed:
            state.budget_currency = extraction.currency

        ack = build_acknowledgment(changed, state.slots, state.budget_currency)

        if config.DEBUG:
            print("\n--- DIALOGUE DEBUG ---")
            print("changed:", [slot.value for slot in changed])
            print("answered:", sum(1 for v in state.answered.values() if v), "/", len(state.answered))
            print("latch:", state.has_asked_for_confirmation)
            print("----------------------\n")

        if state.all_answered() and not state.has_asked_for_confirmation:
            state.phase = Phase.CONFIRMING
            state.has_asked_for_confirmation = True
            summary = build_confirmation_summary(state.slots, state.budget_currency)
            return TurnOutcome(kind=TurnKind.CONFIRM, message=_join(ack, note, summary), state=state)

        next_slot = state.next_unanswered()
        question = build_slot_question(next_slot)

        if changed or extraction.slot_updates:
            return TurnOutcome(
                kind=TurnKind.ASK,
                message=_join(ack, note, question),
                state=state,
                asked_slot=next_slot,
            )

        if not text.strip() or state.turn_count > 0:
            # Malformed or unrecognised input: repeat the pending question.
            return TurnOutcome(
                kind=TurnKind.CLARIFY,
                message=_join("Sorry, I didn't quite catch that.", question),
                state=state,
                asked_slot=next_slot,
            )

        return TurnOutcome(
            kind=TurnKind.ASK,
            message=_join("Hi! I'll help you plan your trip, one question at a time.", question),
            state=state,
            asked_slot=next_slot,
        )

    def _confirming(self, state: SessionState, text: str) -> TurnOutcome:
        # Extraction is ignored here: slots only change once we're back in COLLECTING.
        if is_negative(text):
            state.phase = Phase.COLLECTING
            state.has_asked_for_confirmation = False
            return TurnOutcome(
                kind=TurnKind.ASK,
                message=(
                    "No problem. What would you like to change or add? "
                    "You can tell me a new value for anything (e.g., \"make it 10 days\" or \"add museums\")."
                ),
                state=state,
            )

        if is_affirmative(text):
            state.phase = Phase.GENERATING
            return TurnOutcome(kind=TurnKind.GENERATE, message="Great! Creating your itinerary now...", state=state)

        return TurnOutcome(kind=TurnKind.CLARIFY, message=build_confirmation_reask(), state=state)

    def _done_reminder(self, state: SessionState) -> TurnOutcome:
        where = state.slots.destination or "your trip"
        return TurnOutcome(
            kind=TurnKind.DONE,
            message=(
                f"Your itinerary for {where} is ready (see above). "
                "Say \"start over\" if you'd like to plan a new trip."
            ),
            state=state,
        )

    def _reset(self, state: SessionState) -> TurnOutcome:
        fresh = SessionState(session_id=state.session_id)
        question = build_slot_question(fresh.next_unanswered())
        return TurnOutcome(
            kind=TurnKind.ASK,
            message=_join("Okay, let's start a new trip.", question),
            state=fresh,
            asked_slot=fresh.next_unanswered(),
        )


def _join(*parts: Optional[str]) -> str:
    return "\n\n".join(p for p in parts if p)
