"""Tests for the in-memory session store."""

from datetime import datetime, timedelta, timezone

from trip_assistant.core.state_manager import StateManager
from trip_assistant.models.state import Phase


def test_get_or_create_reuses_the_session() -> None:
    manager = StateManager()

    first = manager.get_or_create("s1")
    second = manager.get_or_create("s1")

    assert first is second
    assert first.phase == Phase.COLLECTING
    assert manager.get("missing") is None


def test_history_is_bounded() -> None:
    manager = StateManager(max_history_messages=4)
    state = manager.get_or_create("s1")

    for i in range(10):
        manager.add_turn(state, "user", f"message {i}")

    assert len(state.turns) == 4
    assert state.turns[0].text == "message 6"


def test_save_replaces_the_stored_value() -> None:
    manager = StateManager()
    state = manager.get_or_create("s1")

    new_state = state.model_copy(deep=True)
    new_state.slots.destination = "Italy"
    manager.save(new_state)

    assert manager.get("s1").slots.destination == "Italy"
    assert state.slots.destination is None


def test_reset_replaces_the_session() -> None:
    manager = StateManager()
    state = manager.get_or_create("s1")
    state.slots.destination = "Italy"

    fresh = manager.reset("s1")

    assert fresh.slots.destination is None
    assert manager.get("s1") is fresh


def test_cleanup_expired_drops_stale_sessions() -> None:
    manager = StateManager(session_ttl_minutes=30)
    stale = manager.get_or_create("old")
    manager.get_or_create("new")
    stale.updated_at = datetime.now(timezone.utc) - timedelta(hours=2)

    removed = manager.cleanup_expired()

    assert removed == 1
    assert manager.get("old") is None
    assert manager.get("new") is not None


def test_get_or_create_sweeps_expired_sessions() -> None:
    manager = StateManager(session_ttl_minutes=30)
    stale = manager.get_or_create("old")
    stale.slots.destination = "Italy"
    stale.updated_at = datetime.now(timezone.utc) - timedelta(hours=2)

    manager.get_or_create("other")

    assert manager.get("old") is None
    assert manager.get_or_create("old").slots.destination is None
