# Role: Deterministic "one question" builder. Maps the next unanswered slot to a single canned question,
# builds the acknowledgment prefix, the confirmation summary and its rephrased re-ask.
# The context analyzer matches assistant turns against QUESTION_MARKERS to recover which slot was asked.

from __future__ import annotations

from decimal import Decimal
from typing import Dict, List, Optional, Sequence, Tuple

import trip_assistant.config as config
from trip_assistant.models.slots import SlotName, TripSlots
from trip_assistant.utils.money import format_money

QUESTIONS: Dict[SlotName, str] = {
    SlotName.DESTINATION: "Where would you like to go? (e.g., Italy, Japan, Lisbon)",
    SlotName.DURATION: "How many days would you like your trip to be? (e.g., 7 days, 2 weeks)",
    SlotName.BUDGET: "What's your total budget for this trip? (please include currency, e.g., £3000, $4000, €3500)",
    SlotName.TRAVELERS: "How many people will be traveling? (e.g., 2 people, just me)",
    SlotName.DEPARTURE_LOCATION: "Where will you be departing from? (e.g., London, Manchester, New York)",
    SlotName.TRAVEL_MONTH: "When are you planning to travel? (a month like June, or dates like 12 June - 19 June)",
    SlotName.ACCOMMODATION_TYPE: "What type of accommodation do you prefer? (hotel, boutique, apartment, hostel, villa, resort, luxury, budget)",
    SlotName.FOOD_PREFERENCES: "Any food preferences or dietary needs? (e.g., vegetarian, seafood, street food, local cuisine)",
    SlotName.ACTIVITY_PREFERENCES: "What kinds of activities do you enjoy? (e.g., history, museums, nature, beaches, nightlife)",
    SlotName.PACE: "What pace do you prefer: fast-paced, relaxed, or balanced?",
}

CONFIRMATION_MARKER = "Shall I create your itinerary"

# Ordered, most specific first. The confirmation marker is checked before any of these.
QUESTION_MARKERS: Tuple[Tuple[str, SlotName], ...] = (
    ("departing from", SlotName.DEPARTURE_LOCATION),
    ("flying from", SlotName.DEPARTURE_LOCATION),
    ("where would you like to go", SlotName.DESTINATION),
    ("how many days", SlotName.DURATION),
    ("how long", SlotName.DURATION),
    ("type of accommodation", SlotName.ACCOMMODATION_TYPE),
    ("budget", SlotName.BUDGET),
    ("how many people", SlotName.TRAVELERS),
    ("when are you planning to travel", SlotName.TRAVEL_MONTH),
    ("which month", SlotName.TRAVEL_MONTH),
    ("food preferences", SlotName.FOOD_PREFERENCES),
    ("kinds of activities", SlotName.ACTIVITY_PREFERENCES),
    ("what pace", SlotName.PACE),
)

_LABELS: Dict[SlotName, str] = {
    SlotName.DESTINATION: "Destination",
    SlotName.DURATION: "Duration",
    SlotName.BUDGET: "Budget",
    SlotName.TRAVELERS: "Travelers",
    SlotName.DEPARTURE_LOCATION: "Departing from",
    SlotName.TRAVEL_MONTH: "When",
    SlotName.ACCOMMODATION_TYPE: "Accommodation",
    SlotName.FOOD_PREFERENCES: "Food",
    SlotName.ACTIVITY_PREFERENCES: "Activities",
    SlotName.PACE: "Pace",
}


def build_slot_question(slot: Optional[SlotName]) -> str:
    if config.DEBUG:
        print("CLARIFICATION_BUILDER slot:", slot)

    if slot is None:
        return "What else would you like to tell me about your trip?"
    return QUESTIONS[slot]


def describe_value(slot: SlotName, slots: TripSlots, currency: Optional[str] = None) -> str:
    value = slots.value_of(slot)
    if value is None or value == []:
        return "Not set"
    if slot == SlotName.DURATION:
        return f"{value} day{'s' if value != 1 else ''}"
    if slot == SlotName.TRAVELERS:
        return "1 person" if value == 1 else f"{value} people"
    if slot == SlotName.BUDGET:
        return format_money(Decimal(value), currency)
    if isinstance(value, list):
        return ", ".join(value)
    return str(value)


def build_acknowledgment(changed: Sequence[SlotName], slots: TripSlots, currency: Optional[str] = None) -> str:
    # Role: "Got it: Italy, 7 days, £3,000." for whatever this turn filled in.
    if not changed:
        return ""
    parts: List[str] = [describe_value(slot, slots, currency) for slot in changed]
    return "Got it: " + ", ".join(parts) + "."


def build_confirmation_summary(slots: TripSlots, currency: Optional[str] = None) -> str:
    lines = ["Here's what I have for your trip:", ""]
    for slot, label in _LABELS.items():
        lines.append(f"- {label}: {describe_value(slot, slots, currency)}")
    lines.append("")
    lines.append(
        f"{CONFIRMATION_MARKER}? Say \"yes\" (or \"create my itinerary\") to go ahead, "
        "or \"no\" if you'd like to change or add anything."
    )
    return "\n".join(lines)


def build_confirmation_reask() -> str:
    return (
        f"Sorry, I didn't catch that. {CONFIRMATION_MARKER} with these details? "
        "Please answer yes to proceed, or no to make changes."
    )
