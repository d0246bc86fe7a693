# Role: Strict prompt template for LLM slot extraction. Teaches the model a rigid JSON schema (one key per
# slot, null when not mentioned) and tells it which slot the assistant just asked about.

from __future__ import annotations

import json
from typing import List, Optional

from trip_assistant.models.slots import PACE_VALUES, SLOT_ORDER, SlotName
from trip_assistant.utils.vocabulary import ACCOMMODATION_TYPES


def build_extraction_prompt(
    user_message: str,
    recent_messages: Optional[List[dict]] = None,
    last_question_key: Optional[SlotName] = None,
) -> str:
    # Step 1: empty schema (every slot present, all null/empty).
    empty = {slot.value: ([] if slot in (SlotName.FOOD_PREFERENCES, SlotName.ACTIVITY_PREFERENCES) else None) for slot in SLOT_ORDER}

    history_block = ""
    if recent_messages:
        formatted = "\n".join([f'{m["role"]}: {m["content"]}' for m in recent_messages])
        history_block = f"\n\nRecent conversation:\n{formatted}"

    # Step 2: if the assistant just asked for a slot, short answers belong to it.
    pending_block = ""
    if last_question_key is not None:
        pending_block = (
            "\n\nPENDING_QUESTION (SYSTEM STATE):\n"
            f"- The assistant just asked the user for: {last_question_key.value}\n"
            "- Treat a short reply as the answer to that slot if it fits.\n"
            "- Still extract any other slots the message clearly mentions.\n"
        )

    # Key lines: examples anchor the JSON format.
    good_example = dict(empty)
    good_example.update(
        {"destination": "Italy", "duration_days": 7, "budget": 3000, "budget_currency": "GBP", "travelers": 2}
    )

    followup_example = dict(empty)
    followup_example.update({"departure_location": "Manchester"})

    return f"""
ROLE:
You are a STRICT slot-extraction component for a trip-planning assistant.
Your job is ONLY to extract trip details the user stated. You must NOT answer the user.

HARD OUTPUT CONTRACT (NON-NEGOTIABLE):
- Output MUST be EXACTLY ONE raw JSON object.
- Output MUST start with '{{' and end with '}}'.
- Output MUST contain NO markdown and NO code fences.

VALID OUTPUT EXAMPLE (for "I want to go to Italy for 7 days with £3000 budget for 2 people"):
{json.dumps(good_example, ensure_ascii=False)}

FOLLOW-UP EXAMPLE (assistant asked where they depart from, user said "Manchester"):
{json.dumps(followup_example, ensure_ascii=False)}

Keys (use null / [] when the user did not say it):
- destination: country or city they want to visit
- duration_days: integer number of days (weeks x 7, "a fortnight" = 14)
- budget: TOTAL trip budget as a number (multiply "per person" amounts by travelers); ignore amounts under 100
- budget_currency: "GBP", "EUR", "USD" or null
- travelers: integer 1-20 ("just me" = 1)
- departure_location: city they leave from
- travel_month: a month name (e.g., "June") or a date range like "12 March - 19 March"
- accommodation_type: one of {json.dumps(list(ACCOMMODATION_TYPES))} (or the user's own words)
- food_preferences: list of short lowercase phrases
- activity_preferences: list of short lowercase phrases
- pace: one of {json.dumps(list(PACE_VALUES))} or null

Rules:
1) Never guess. Only fill what the user actually said.
2) Do not copy values from the conversation history unless the user repeats them.
3) A departure city is never the destination.{pending_block}{history_block}

User message:
{user_message}
""".strip()
