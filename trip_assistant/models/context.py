# Role: Derived, per-turn hint for the extractor: which slot the assistant last asked about and what
# kind of answer that slot expects. Recomputed every turn from the transcript, never stored.

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel

from trip_assistant.models.slots import SlotName


class AnswerShape(str, Enum):
    PLACE = "place"
    NUMBER = "number"
    AMOUNT = "amount"
    MONTH = "month"
    CHOICE = "choice"
    KEYWORDS = "keywords"
    YES_NO = "yes_no"
    FREE_TEXT = "free_text"


SLOT_SHAPES = {
    SlotName.DESTINATION: AnswerShape.PLACE,
    SlotName.DURATION: AnswerShape.NUMBER,
    SlotName.BUDGET: AnswerShape.AMOUNT,
    SlotName.TRAVELERS: AnswerShape.NUMBER,
    SlotName.DEPARTURE_LOCATION: AnswerShape.PLACE,
    SlotName.TRAVEL_MONTH: AnswerShape.MONTH,
    SlotName.ACCOMMODATION_TYPE: AnswerShape.CHOICE,
    SlotName.FOOD_PREFERENCES: AnswerShape.KEYWORDS,
    SlotName.ACTIVITY_PREFERENCES: AnswerShape.KEYWORDS,
    SlotName.PACE: AnswerShape.CHOICE,
}


class ConversationContext(BaseModel):
    last_question_key: Optional[SlotName] = None
    expected_shape: AnswerShape = AnswerShape.FREE_TEXT
    short_answer: bool = False
