# Role: Recovery path for malformed input (empty / non-string messages). Deterministic only: repeat
# whatever the session is currently waiting for instead of raising.

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from trip_assistant.models.slots import SlotName
from trip_assistant.models.state import Phase, SessionState
from trip_assistant.utils.clarification import build_confirmation_reask, build_slot_question


@dataclass(frozen=True)
class FallbackResult:
    message: str
    pending_slot: Optional[SlotName] = None


class FallbackHandler:
    def recover(self, *, state: SessionState, error: Optional[str] = None) -> FallbackResult:
        # 1) Waiting for yes/no -> ask it again
        # 2) Already done -> point at the plan
        # 3) Otherwise -> repeat the pending slot question
        if state.phase == Phase.CONFIRMING:
            return FallbackResult(message=build_confirmation_reask())

        if state.phase in (Phase.DONE, Phase.GENERATING):
            return FallbackResult(
                message="Your itinerary is ready above. Say \"start over\" if you'd like to plan a new trip."
            )

        pending = state.next_unanswered()
        prefix = "I didn't catch that." if not error else f"I didn't catch that ({error})."
        return FallbackResult(message=f"{prefix} {build_slot_question(pending)}", pending_slot=pending)
