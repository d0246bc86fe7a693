# Role: In-memory session store. Owns lifecycle of SessionState values:
# get/create by session_id, save the value a turn produced, append turns with bounded history,
# reset, and cleanup of expired sessions.

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Dict, Literal, Optional

import trip_assistant.config as config
from trip_assistant.models.message import ConversationTurn
from trip_assistant.models.state import SessionState


class StateManager:
    def __init__(
        self,
        max_history_messages: Optional[int] = None,
        session_ttl_minutes: Optional[int] = None,
    ) -> None:
        self._states: Dict[str, SessionState] = {}
        self._max_history_messages = max_history_messages or config.MAX_HISTORY_MESSAGES
        self._ttl = timedelta(minutes=session_ttl_minutes or config.SESSION_TTL_MINUTES)

    def get(self, session_id: str) -> Optional[SessionState]:
        return self._states.get(session_id)

    def get_or_create(self, session_id: str) -> SessionState:
        # 1) Sweep sessions idle longer than the TTL (an expired session starts over)
        # 2) Reuse existing state or initialize a fresh one
        self.cleanup_expired()
        state = self._states.get(session_id)
        if state is None:
            state = SessionState(session_id=session_id)
            self._states[session_id] = state
        return state

    def save(self, state: SessionState) -> SessionState:
        # Key line: the store holds whatever value the controller returned; no merging.
        state.updated_at = datetime.now(timezone.utc)
        self._states[state.session_id] = state
        return state

    def add_turn(self, state: SessionState, speaker: Literal["user", "assistant"], text: str) -> SessionState:
        # 1) Append turn
        # 2) Update last-seen timestamp
        # 3) Trim to last N turns (keeps memory bounded)
        state.turns.append(ConversationTurn(speaker=speaker, text=text))
        state.updated_at = datetime.now(timezone.utc)

        if len(state.turns) > self._max_history_messages:
            state.turns = state.turns[-self._max_history_messages :]

        return state

    def increment_turn(self, state: SessionState) -> None:
        state.turn_count += 1
        state.updated_at = datetime.now(timezone.utc)

    def reset(self, session_id: str) -> SessionState:
        state = SessionState(session_id=session_id)
        self._states[session_id] = state
        return state

    def cleanup_expired(self) -> int:
        # Role: drop inactive sessions so a long-running server does not grow without bound.
        now = datetime.now(timezone.utc)
        to_delete = [sid for sid, st in self._states.items() if (now - st.updated_at) > self._ttl]
        for sid in to_delete:
            del self._states[sid]
        return len(to_delete)
