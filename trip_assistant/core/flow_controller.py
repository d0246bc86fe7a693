# Role: Orchestrator for one conversation turn. It glues together:
# state management, context analysis, slot extraction, the dialogue state machine, destination
# enrichment, itinerary generation, plan rendering, and persistence.

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

import trip_assistant.config as config
from trip_assistant.core.context_analyzer import ContextAnalyzer
from trip_assistant.core.dialogue_controller import DialogueController, TurnKind
from trip_assistant.core.extractor import ExtractionResult, SlotExtractor
from trip_assistant.core.fallback_handler import FallbackHandler
from trip_assistant.core.itinerary_generator import ItineraryGenerator
from trip_assistant.core.plan_formatter import render_plan
from trip_assistant.core.state_manager import StateManager
from trip_assistant.llm.slot_extractor import LlmSlotExtractor
from trip_assistant.models.context import ConversationContext
from trip_assistant.models.slots import SlotName
from trip_assistant.models.state import Phase, SessionState
from trip_assistant.tools.destination_client import DestinationClient

Extractor = Union[SlotExtractor, LlmSlotExtractor]


@dataclass(frozen=True)
class TurnResponse:
    session_id: str
    assistant_message: str
    phase: str


def build_extractor() -> Extractor:
    # Key line: SLOT_EXTRACTOR=gemini swaps the extractor; the state machine doesn't change.
    if config.SLOT_EXTRACTOR == "gemini":
        return LlmSlotExtractor()
    return SlotExtractor()


class FlowController:
    def __init__(
        self,
        state_manager: Optional[StateManager] = None,
        context_analyzer: Optional[ContextAnalyzer] = None,
        extractor: Optional[Extractor] = None,
        dialogue_controller: Optional[DialogueController] = None,
        generator: Optional[ItineraryGenerator] = None,
        destination_client: Optional[DestinationClient] = None,
        fallback_handler: Optional[FallbackHandler] = None,
    ) -> None:
        # Key line: dependencies are injectable for testing/mocking.
        self.state_manager = state_manager or StateManager()
        self.context_analyzer = context_analyzer or ContextAnalyzer()
        self.extractor = extractor or build_extractor()
        self.dialogue_controller = dialogue_controller or DialogueController()
        self.generator = generator or ItineraryGenerator()
        self.destination_client = destination_client or DestinationClient()
        self.fallback_handler = fallback_handler or FallbackHandler()

    def _recent_messages(self, state: SessionState, limit: int = 6) -> list[dict]:
        # Role: compact history format for the LLM extractor prompt.
        turns = state.turns[-limit:]
        return [{"role": t.speaker, "content": t.text} for t in turns]

    def _extract(self, state: SessionState, user_message: str, context: ConversationContext) -> ExtractionResult:
        if state.phase != Phase.COLLECTING:
            # Confirmation replies never touch the slots.
            return ExtractionResult()
        if isinstance(self.extractor, LlmSlotExtractor):
            return self.extractor.extract(
                user_message, context, state.slots, recent_messages=self._recent_messages(state)
            )
        return self.extractor.extract(user_message, context, state.slots)

    def _destination_note(self, state: SessionState, extraction: ExtractionResult) -> Optional[str]:
        # Role: one line of colour the first time a destination is captured (or when it changes).
        new_destination = extraction.slot_updates.get(SlotName.DESTINATION)
        if not new_destination or new_destination == state.slots.destination:
            return None

        result = self.destination_client.lookup(new_destination)
        info = result.data
        if config.DEBUG:
            print("DESTINATION lookup:", result.ok, info.source, result.error)
        if not info.description:
            return None

        note = f"{info.name}: {info.description}"
        if info.best_time:
            note += f" Best time to visit: {info.best_time}."
        return note

    def handle_turn(self, session_id: str, user_message: str) -> TurnResponse:
        # 1) Load state; malformed input -> deterministic clarifying prompt
        # 2) Analyze context (what did we just ask?) and extract slot updates
        # 3) Advance the state machine (new state value)
        # 4) On GENERATE: build the itinerary and close the session (DONE)
        # 5) Persist turns + state and return

        state = self.state_manager.get_or_create(session_id)

        if not isinstance(user_message, str) or not user_message.strip():
            fallback = self.fallback_handler.recover(state=state)
            self.state_manager.add_turn(state, "assistant", fallback.message)
            self.state_manager.save(state)
            return TurnResponse(session_id=session_id, assistant_message=fallback.message, phase=state.phase.value)

        context = self.context_analyzer.analyze(user_message, state.turns)
        extraction = self._extract(state, user_message, context)
        note = self._destination_note(state, extraction)

        outcome = self.dialogue_controller.advance(state, extraction, user_message, note=note)
        new_state = outcome.state
        assistant_text = outcome.message

        if outcome.kind == TurnKind.GENERATE and new_state.phase == Phase.GENERATING:
            # Key line: PreconditionError is not swallowed; the stored state stays as it was.
            plan = self.generator.generate(new_state.slots, currency=new_state.budget_currency)
            new_state = self.dialogue_controller.complete(new_state, plan)
            assistant_text = f"{assistant_text}\n\n{render_plan(plan)}"

        self.state_manager.increment_turn(new_state)
        self.state_manager.add_turn(new_state, "user", user_message)
        self.state_manager.add_turn(new_state, "assistant", assistant_text)
        self.state_manager.save(new_state)

        if config.DEBUG:
            print("\n--- FLOW DEBUG ---")
            print("SESSION:", session_id)
            print("USER MESSAGE:", user_message)
            print("CONTEXT last_question_key:", context.last_question_key)
            print("CONTEXT expected_shape:", context.expected_shape)
            print("EXTRACTED:", {slot.value: value for slot, value in extraction.slot_updates.items()})
            print("OUTCOME kind:", outcome.kind)
            print("OUTCOME asked_slot:", outcome.asked_slot)
            print("PHASE:", new_state.phase)
            print("LATCH has_asked_for_confirmation:", new_state.has_asked_for_confirmation)
            print("TURN COUNT:", new_state.turn_count)
            print("SLOTS:", new_state.slots.model_dump())
            print("------------------\n")

        return TurnResponse(session_id=session_id, assistant_message=assistant_text, phase=new_state.phase.value)
