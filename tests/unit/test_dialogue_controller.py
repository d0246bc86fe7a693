"""Tests for the dialogue state machine and confirmation gate."""

import random
from decimal import Decimal

import pytest

from trip_assistant.core.dialogue_controller import (
    DialogueController,
    TurnKind,
    is_affirmative,
    is_negative,
    wants_reset,
)
from trip_assistant.core.extractor import ExtractionResult
from trip_assistant.models.slots import SLOT_ORDER, SlotName
from trip_assistant.models.state import Phase, SessionState
from trip_assistant.utils.clarification import CONFIRMATION_MARKER, QUESTIONS

ALL_VALUES = {
    SlotName.DESTINATION: "Greece",
    SlotName.DURATION: 3,
    SlotName.BUDGET: Decimal("1500"),
    SlotName.TRAVELERS: 2,
    SlotName.DEPARTURE_LOCATION: "London",
    SlotName.TRAVEL_MONTH: "September",
    SlotName.ACCOMMODATION_TYPE: "hotel",
    SlotName.FOOD_PREFERENCES: ["seafood"],
    SlotName.ACTIVITY_PREFERENCES: ["history"],
    SlotName.PACE: "relaxed",
}


def _fill(updates: dict) -> ExtractionResult:
    return ExtractionResult(slot_updates=dict(updates), answered={slot: True for slot in updates})


def _confirming_state(controller: DialogueController) -> SessionState:
    outcome = controller.advance(SessionState(session_id="s1"), _fill(ALL_VALUES), "everything at once")
    assert outcome.state.phase == Phase.CONFIRMING
    return outcome.state


@pytest.fixture
def controller() -> DialogueController:
    return DialogueController()


def test_first_question_targets_destination(controller: DialogueController) -> None:
    outcome = controller.advance(SessionState(session_id="s1"), ExtractionResult(), "hello")

    assert outcome.kind == TurnKind.ASK
    assert outcome.asked_slot == SlotName.DESTINATION
    assert QUESTIONS[SlotName.DESTINATION] in outcome.message


def test_duration_follows_destination(controller: DialogueController) -> None:
    outcome = controller.advance(SessionState(session_id="s1"), _fill({SlotName.DESTINATION: "Italy"}), "Italy")

    assert outcome.asked_slot == SlotName.DURATION
    assert outcome.message.startswith("Got it: Italy.")


def test_one_shot_answers_skip_to_departure(controller: DialogueController) -> None:
    updates = {
        SlotName.DESTINATION: "Italy",
        SlotName.DURATION: 7,
        SlotName.BUDGET: Decimal("3000"),
        SlotName.TRAVELERS: 2,
    }

    outcome = controller.advance(SessionState(session_id="s1"), _fill(updates), "one shot")

    assert outcome.asked_slot == SlotName.DEPARTURE_LOCATION


def test_advance_does_not_mutate_input_state(controller: DialogueController) -> None:
    state = SessionState(session_id="s1")

    outcome = controller.advance(state, _fill({SlotName.DESTINATION: "Italy"}), "Italy")

    assert state.slots.destination is None
    assert state.answered[SlotName.DESTINATION] is False
    assert outcome.state is not state
    assert outcome.state.slots.destination == "Italy"


@pytest.mark.parametrize("seed", range(5))
def test_confirming_is_entered_exactly_once(controller: DialogueController, seed: int) -> None:
    """Whatever order the slots arrive in, the gate opens on the turn the tenth slot is answered."""
    order = list(SLOT_ORDER)
    random.Random(seed).shuffle(order)

    state = SessionState(session_id="s1")
    confirm_turns = []
    for turn, slot in enumerate(order):
        outcome = controller.advance(state, _fill({slot: ALL_VALUES[slot]}), "answer")
        state = outcome.state
        if outcome.kind == TurnKind.CONFIRM:
            confirm_turns.append(turn)

    assert confirm_turns == [len(order) - 1]
    assert state.phase == Phase.CONFIRMING
    assert state.has_asked_for_confirmation is True


def test_summary_lists_slots_and_asks_to_confirm(controller: DialogueController) -> None:
    outcome = controller.advance(SessionState(session_id="s1"), _fill(ALL_VALUES), "all")

    assert outcome.kind == TurnKind.CONFIRM
    assert CONFIRMATION_MARKER in outcome.message
    assert "- Destination: Greece" in outcome.message
    assert "- Duration: 3 days" in outcome.message


def test_no_more_info_returns_to_collecting(controller: DialogueController) -> None:
    state = _confirming_state(controller)

    outcome = controller.advance(state, ExtractionResult(), "no, more info")

    assert outcome.state.phase == Phase.COLLECTING
    assert outcome.state.has_asked_for_confirmation is False
    assert outcome.state.slots == state.slots
    assert outcome.state.slots.destination == "Greece"
    assert outcome.state.slots.duration_days == 3


def test_correction_after_declining_reopens_the_gate(controller: DialogueController) -> None:
    state = controller.advance(_confirming_state(controller), ExtractionResult(), "no").state

    outcome = controller.advance(state, _fill({SlotName.DURATION: 5}), "make it 5 days")

    assert outcome.kind == TurnKind.CONFIRM
    assert outcome.state.slots.duration_days == 5
    assert outcome.state.phase == Phase.CONFIRMING


def test_ambiguous_replies_never_advance(controller: DialogueController) -> None:
    """Replies that are neither yes nor no keep the gate closed and the slots untouched."""
    state = _confirming_state(controller)
    before = state.slots.model_copy(deep=True)

    for reply in ("maybe", "hmm", "what about Rome for 10 days?", ""):
        outcome = controller.advance(state, _fill({SlotName.DURATION: 10}), reply)
        state = outcome.state
        assert outcome.kind == TurnKind.CLARIFY
        assert state.phase == Phase.CONFIRMING

    assert state.slots == before


def test_yes_moves_to_generating(controller: DialogueController) -> None:
    outcome = controller.advance(_confirming_state(controller), ExtractionResult(), "yes please")

    assert outcome.kind == TurnKind.GENERATE
    assert outcome.state.phase == Phase.GENERATING


def test_negative_wins_over_affirmative() -> None:
    assert is_negative("yes but no, wait")
    assert is_affirmative("yes, create it")
    assert not is_affirmative("maybe later")
    assert wants_reset("let's start over")


def test_unrecognised_input_repeats_the_pending_question(controller: DialogueController) -> None:
    state = SessionState(session_id="s1", turn_count=2)

    outcome = controller.advance(state, ExtractionResult(), "blah")

    assert outcome.kind == TurnKind.CLARIFY
    assert QUESTIONS[SlotName.DESTINATION] in outcome.message


def test_reset_starts_a_fresh_session(controller: DialogueController) -> None:
    state = _confirming_state(controller)

    outcome = controller.advance(state, ExtractionResult(), "start over")

    assert outcome.state.session_id == "s1"
    assert outcome.state.phase == Phase.COLLECTING
    assert outcome.state.slots.destination is None
    assert outcome.asked_slot == SlotName.DESTINATION


def test_done_phase_only_reminds(controller: DialogueController) -> None:
    state = _confirming_state(controller)
    state = state.model_copy(update={"phase": Phase.DONE})

    outcome = controller.advance(state, _fill({SlotName.DURATION: 9}), "thanks")

    assert outcome.kind == TurnKind.DONE
    assert outcome.state.slots.duration_days == 3
