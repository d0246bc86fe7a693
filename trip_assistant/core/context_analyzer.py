# Role: Recovers what the assistant just asked. Matches the latest assistant turn against the fixed
# question markers, so short replies like "Paris" or "3000" can be read as answers to that question.

from __future__ import annotations

from typing import Optional, Sequence

import trip_assistant.config as config
from trip_assistant.models.context import SLOT_SHAPES, AnswerShape, ConversationContext
from trip_assistant.models.message import ConversationTurn
from trip_assistant.utils.clarification import CONFIRMATION_MARKER, QUESTION_MARKERS

SHORT_ANSWER_WORDS = 4


class ContextAnalyzer:
    def analyze(self, text: str, turns: Sequence[ConversationTurn]) -> ConversationContext:
        # 1) Latest assistant turn (none -> empty context)
        # 2) Confirmation prompt -> yes/no, no slot
        # 3) First matching question marker -> that slot and its answer shape
        short = isinstance(text, str) and 0 < len(text.split()) <= SHORT_ANSWER_WORDS

        last_assistant = self._last_assistant_text(turns)
        if not last_assistant:
            return ConversationContext(short_answer=short)

        low = last_assistant.lower()
        if CONFIRMATION_MARKER.lower() in low:
            return ConversationContext(expected_shape=AnswerShape.YES_NO, short_answer=short)

        # Key line: the question is always the last line; acknowledgments above it may mention "budget" etc.
        lines = [line for line in low.splitlines() if line.strip()]
        for candidate in (lines[-1] if lines else "", low):
            for marker, slot in QUESTION_MARKERS:
                if marker in candidate:
                    if config.DEBUG:
                        print("CONTEXT_ANALYZER matched:", marker, "->", slot.value)
                    return ConversationContext(
                        last_question_key=slot,
                        expected_shape=SLOT_SHAPES[slot],
                        short_answer=short,
                    )

        return ConversationContext(short_answer=short)

    def _last_assistant_text(self, turns: Sequence[ConversationTurn]) -> Optional[str]:
        for turn in reversed(turns or []):
            if turn.speaker == "assistant":
                return turn.text
        return None
