"""Tests for question/summary text and plan rendering."""

from datetime import date
from decimal import Decimal
from typing import Callable

from trip_assistant.core.itinerary_generator import ItineraryGenerator
from trip_assistant.core.plan_formatter import render_plan
from trip_assistant.models.slots import SLOT_ORDER, SlotName, TripSlots
from trip_assistant.utils.clarification import (
    QUESTIONS,
    build_acknowledgment,
    build_confirmation_summary,
    build_slot_question,
    describe_value,
)


def test_every_slot_has_one_question() -> None:
    assert set(QUESTIONS) == set(SLOT_ORDER)
    for slot in SLOT_ORDER:
        assert build_slot_question(slot).count("?") >= 1


def test_describe_value() -> None:
    slots = TripSlots(duration_days=1, travelers=3, budget=Decimal("3000"), food_preferences=["vegan", "halal"])

    assert describe_value(SlotName.DURATION, slots) == "1 day"
    assert describe_value(SlotName.TRAVELERS, slots) == "3 people"
    assert describe_value(SlotName.BUDGET, slots, "EUR") == "€3,000"
    assert describe_value(SlotName.FOOD_PREFERENCES, slots) == "vegan, halal"
    assert describe_value(SlotName.PACE, slots) == "Not set"


def test_acknowledgment() -> None:
    slots = TripSlots(destination="Italy", duration_days=7)

    assert build_acknowledgment([SlotName.DESTINATION, SlotName.DURATION], slots) == "Got it: Italy, 7 days."
    assert build_acknowledgment([], slots) == ""


def test_summary_has_one_line_per_slot(make_slots: Callable[..., TripSlots]) -> None:
    summary = build_confirmation_summary(make_slots(), "GBP")

    assert summary.count("\n- ") == len(SLOT_ORDER)
    assert "- Budget: £3,000" in summary


def test_render_plan(make_slots: Callable[..., TripSlots]) -> None:
    plan = ItineraryGenerator().generate(make_slots(), start_date=date(2027, 6, 1), currency="GBP")

    text = render_plan(plan)

    assert text.startswith("Your 7-day trip to Italy (Rome -> Florence)")
    assert "Budget breakdown:" in text
    assert "- Flights: 25% (£750)" in text
    assert "Day 1 (Tue 01 Jun): Arrival in Rome" in text
    assert "Day 7" in text
    assert "Estimated total:" in text
