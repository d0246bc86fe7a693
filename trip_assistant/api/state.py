# Role: Transparency endpoints for the UI. GET exposes the current session snapshot by session_id;
# DELETE throws the session away and starts a fresh one (the UI's "new trip" button).

from typing import Optional

from fastapi import APIRouter
from pydantic import BaseModel
from trip_assistant.api.deps import flow_controller

router = APIRouter(tags=["state"])

class StateSnapshot(BaseModel):
    session_id: str
    slots: dict
    answered: dict[str, bool]
    phase: str
    has_asked_for_confirmation: bool
    budget_currency: Optional[str]
    turn_count: int
    itinerary: Optional[dict]

def _snapshot(session_id: str) -> StateSnapshot:
    state = flow_controller.state_manager.get_or_create(session_id)
    return StateSnapshot(
        session_id=session_id,
        slots=state.slots.model_dump(mode="json"),
        answered={slot.value: flag for slot, flag in state.answered.items()},
        phase=state.phase.value,
        has_asked_for_confirmation=state.has_asked_for_confirmation,
        budget_currency=state.budget_currency,
        turn_count=state.turn_count,
        itinerary=state.itinerary.model_dump(mode="json") if state.itinerary else None,
    )

@router.get("/state/{session_id}", response_model=StateSnapshot)
def get_state(session_id: str) -> StateSnapshot:
    return _snapshot(session_id)

@router.delete("/state/{session_id}", response_model=StateSnapshot)
def reset_state(session_id: str) -> StateSnapshot:
    flow_controller.state_manager.reset(session_id)
    return _snapshot(session_id)
