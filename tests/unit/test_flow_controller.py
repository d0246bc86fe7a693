"""Tests for the per-turn orchestrator (extraction -> state machine -> generation -> persistence)."""

from unittest.mock import MagicMock

import pytest

from trip_assistant.core.flow_controller import FlowController, build_extractor
from trip_assistant.core.extractor import SlotExtractor
from trip_assistant.core.itinerary_generator import PreconditionError
from trip_assistant.core.state_manager import StateManager
from trip_assistant.llm.slot_extractor import LlmSlotExtractor
from trip_assistant.models.slots import SlotName
from trip_assistant.models.state import Phase
from trip_assistant.tools.destination_client import DestinationClient
from trip_assistant.utils.clarification import CONFIRMATION_MARKER, QUESTIONS

import trip_assistant.config as config

CONVERSATION = [
    "Hi",
    "I want to go to Italy for 7 days with £3000 budget for 2 people",
    "London",
    "June",
    "hotel",
    "vegetarian",
    "history and museums",
    "relaxed",
]


def test_full_conversation_reaches_confirmation_then_itinerary(flow: FlowController) -> None:
    replies = [flow.handle_turn("trip-1", message) for message in CONVERSATION]

    assert QUESTIONS[SlotName.DESTINATION] in replies[0].assistant_message
    assert QUESTIONS[SlotName.DEPARTURE_LOCATION] in replies[1].assistant_message
    assert QUESTIONS[SlotName.TRAVEL_MONTH] in replies[2].assistant_message
    assert CONFIRMATION_MARKER in replies[-1].assistant_message
    assert replies[-1].phase == Phase.CONFIRMING.value

    state = flow.state_manager.get("trip-1")
    assert state.slots.destination == "Italy"
    assert state.slots.departure_location == "London"
    assert state.slots.budget == 3000
    assert state.budget_currency == "GBP"
    assert state.slots.activity_preferences == ["history", "museums"]

    final = flow.handle_turn("trip-1", "yes")

    assert final.phase == Phase.DONE.value
    assert "Day 7" in final.assistant_message
    assert "Running total" in final.assistant_message
    state = flow.state_manager.get("trip-1")
    assert state.itinerary is not None
    assert len(state.itinerary.days) == 7
    assert state.turn_count == len(CONVERSATION) + 1


@pytest.mark.parametrize("answer", ["no preference", "anything", "whatever"])
def test_accommodation_question_accepts_no_preference(flow: FlowController, answer: str) -> None:
    """A traveler without an accommodation preference is not asked the same question again."""
    for message in CONVERSATION[:4]:
        flow.handle_turn("trip-acc", message)

    reply = flow.handle_turn("trip-acc", answer)

    assert QUESTIONS[SlotName.ACCOMMODATION_TYPE] not in reply.assistant_message
    assert QUESTIONS[SlotName.FOOD_PREFERENCES] in reply.assistant_message
    state = flow.state_manager.get("trip-acc")
    assert state.slots.accommodation_type == "hotel"
    assert state.answered[SlotName.ACCOMMODATION_TYPE] is True


def test_destination_note_is_added_when_destination_is_captured(flow: FlowController) -> None:
    reply = flow.handle_turn("trip-2", "Italy")

    assert "Ancient history" in reply.assistant_message
    assert "Best time to visit" in reply.assistant_message


def test_empty_message_repeats_the_pending_question(flow: FlowController) -> None:
    reply = flow.handle_turn("trip-3", "   ")

    assert reply.phase == Phase.COLLECTING.value
    assert QUESTIONS[SlotName.DESTINATION] in reply.assistant_message
    state = flow.state_manager.get("trip-3")
    assert [t.speaker for t in state.turns] == ["assistant"]


def test_confirmation_reply_never_changes_slots(flow: FlowController) -> None:
    for message in CONVERSATION:
        flow.handle_turn("trip-4", message)

    reply = flow.handle_turn("trip-4", "hmm, 12 days maybe?")

    assert reply.phase == Phase.CONFIRMING.value
    assert flow.state_manager.get("trip-4").slots.duration_days == 7


def test_precondition_error_is_not_swallowed(flow: FlowController) -> None:
    """A generator failure propagates and the stored state stays at the gate."""
    for message in CONVERSATION:
        flow.handle_turn("trip-5", message)

    flow.generator = MagicMock()
    flow.generator.generate.side_effect = PreconditionError("Cannot generate an itinerary: missing pace")

    with pytest.raises(PreconditionError):
        flow.handle_turn("trip-5", "yes")

    assert flow.state_manager.get("trip-5").phase == Phase.CONFIRMING


def test_sessions_are_isolated(flow: FlowController) -> None:
    flow.handle_turn("a", "Italy")
    flow.handle_turn("b", "Japan")

    assert flow.state_manager.get("a").slots.destination == "Italy"
    assert flow.state_manager.get("b").slots.destination == "Japan"


def test_llm_extractor_receives_recent_messages() -> None:
    extractor = MagicMock(spec=LlmSlotExtractor)
    extractor.extract.return_value = SlotExtractor().extract("Italy")
    flow = FlowController(
        state_manager=StateManager(),
        extractor=extractor,
        destination_client=DestinationClient(use_network=False),
    )

    flow.handle_turn("llm", "Hi")
    flow.handle_turn("llm", "Italy please")

    _, kwargs = extractor.extract.call_args
    assert [m["role"] for m in kwargs["recent_messages"]] == ["user", "assistant"]


def test_build_extractor_follows_config(monkeypatch: pytest.MonkeyPatch) -> None:
    assert isinstance(build_extractor(), SlotExtractor)

    monkeypatch.setattr(config, "SLOT_EXTRACTOR", "gemini")
    assert isinstance(build_extractor(), LlmSlotExtractor)
