# Role: Local developer CLI to drive FlowController without the web UI.
# Useful for walking the slot-filling flow turn by turn and seeing debug logs in the terminal.

from __future__ import annotations
import json
import uuid

import trip_assistant.config
trip_assistant.config.load_env()

from trip_assistant.core.flow_controller import FlowController


def _new_session_id() -> str:
    return str(uuid.uuid4())


def _print_state(flow: FlowController, session_id: str) -> None:
    state = flow.state_manager.get(session_id)
    if state is None:
        print("(no state yet for this session)")
        return
    answered = [slot.value for slot, flag in state.answered.items() if flag]
    print(f"phase: {state.phase.value} | turns: {state.turn_count} | asked to confirm: {state.has_asked_for_confirmation}")
    print(f"answered ({len(answered)}/{len(state.answered)}): {', '.join(answered) or '-'}")
    print(json.dumps(state.slots.model_dump(mode="json"), indent=2))


def main() -> None:
    # 1) Create FlowController
    # 2) Maintain a session_id across turns
    # 3) Route user input -> FlowController -> print assistant output
    print("Trip Planner CLI")
    print("Commands: /new (new session), /session (show session_id), /state (show slots), /exit")
    print("-" * 50)

    flow = FlowController()
    session_id = _new_session_id()
    print(f"session_id: {session_id}")

    while True:
        try:
            user_message = input("\nYou: ").strip()
        except (EOFError, KeyboardInterrupt):
            print("\nBye!")
            return

        if not user_message:
            continue

        cmd = user_message.lower()

        if cmd in {"/exit", "exit", "quit", "/quit"}:
            print("Bye!")
            return

        if cmd in {"/new", "new"}:
            session_id = _new_session_id()
            print(f"New session_id: {session_id}")
            continue

        if cmd in {"/session", "session"}:
            print(f"session_id: {session_id}")
            continue

        if cmd == "/state":
            _print_state(flow, session_id)
            continue

        result = flow.handle_turn(session_id, user_message)
        print(f"\nAssistant [{result.phase}]: {result.assistant_message}")


if __name__ == "__main__":
    main()
