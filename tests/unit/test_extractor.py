"""Tests for the rule-based slot extractor."""

from decimal import Decimal

import pytest

from trip_assistant.core.extractor import SlotExtractor
from trip_assistant.models.context import SLOT_SHAPES, ConversationContext
from trip_assistant.models.slots import SlotName, TripSlots
from trip_assistant.utils.vocabulary import find_place


def _asked(slot: SlotName) -> ConversationContext:
    return ConversationContext(last_question_key=slot, expected_shape=SLOT_SHAPES[slot], short_answer=True)


@pytest.fixture
def extractor() -> SlotExtractor:
    return SlotExtractor()


def test_one_shot_message_fills_four_slots(extractor: SlotExtractor) -> None:
    """Destination, duration, budget and travelers come out of a single sentence."""
    result = extractor.extract("I want to go to Italy for 7 days with £3000 budget for 2 people")

    assert result.slot_updates == {
        SlotName.DESTINATION: "Italy",
        SlotName.DURATION: 7,
        SlotName.BUDGET: Decimal("3000"),
        SlotName.TRAVELERS: 2,
    }
    assert result.currency == "GBP"
    assert all(result.answered.values())


@pytest.mark.parametrize(
    ("text", "slot", "value"),
    [
        ("Paris", SlotName.DESTINATION, "Paris"),
        ("7 days", SlotName.DURATION, 7),
        ("£3000", SlotName.BUDGET, Decimal("3000")),
        ("2 people", SlotName.TRAVELERS, 2),
        ("from London", SlotName.DEPARTURE_LOCATION, "London"),
        ("June", SlotName.TRAVEL_MONTH, "June"),
        ("hotel", SlotName.ACCOMMODATION_TYPE, "hotel"),
        ("vegetarian", SlotName.FOOD_PREFERENCES, ["vegetarian"]),
        ("museums", SlotName.ACTIVITY_PREFERENCES, ["museums"]),
        ("relaxed", SlotName.PACE, "relaxed"),
    ],
)
def test_single_topic_input_touches_only_its_slot(
    extractor: SlotExtractor, text: str, slot: SlotName, value: object
) -> None:
    """A message carrying exactly one slot value sets exactly that slot."""
    result = extractor.extract(text)

    assert result.slot_updates == {slot: value}


def test_budget_below_minimum_is_rejected(extractor: SlotExtractor) -> None:
    """A total under 100 never fills the budget slot, even when budget was just asked."""
    current = TripSlots(travelers=1)

    assert SlotName.BUDGET not in extractor.extract("50", _asked(SlotName.BUDGET), current).slot_updates
    assert SlotName.BUDGET not in extractor.extract("my budget is £50", None, current).slot_updates


def test_bare_number_needs_budget_context(extractor: SlotExtractor) -> None:
    """A bare number is only money when the budget was asked or a budget word is present."""
    assert extractor.extract("3000").slot_updates == {}
    assert extractor.extract("3000", _asked(SlotName.BUDGET)).slot_updates == {SlotName.BUDGET: Decimal("3000")}
    assert extractor.extract("we can spend 2500").slot_updates == {SlotName.BUDGET: Decimal("2500")}


def test_per_person_budget_is_multiplied_by_travelers(extractor: SlotExtractor) -> None:
    current = TripSlots(travelers=2)

    result = extractor.extract("£800 each", None, current)

    assert result.slot_updates[SlotName.BUDGET] == Decimal("1600")
    assert result.currency == "GBP"


def test_departure_and_destination_in_one_message(extractor: SlotExtractor) -> None:
    """The "from X" phrase is never read as the destination."""
    result = extractor.extract("We're flying from Manchester to Tokyo for a fortnight")

    assert result.slot_updates == {
        SlotName.DEPARTURE_LOCATION: "Manchester",
        SlotName.DESTINATION: "Tokyo",
        SlotName.DURATION: 14,
    }


def test_contextual_place_answer_for_unknown_destination(extractor: SlotExtractor) -> None:
    result = extractor.extract("narnia", _asked(SlotName.DESTINATION))

    assert result.slot_updates == {SlotName.DESTINATION: "Narnia"}


def test_contextual_place_answer_fills_only_the_asked_slot(extractor: SlotExtractor) -> None:
    """Answering "London" to the departure question does not also set the destination."""
    current = TripSlots(destination="Italy")

    result = extractor.extract("London", _asked(SlotName.DEPARTURE_LOCATION), current)

    assert result.slot_updates == {SlotName.DEPARTURE_LOCATION: "London"}


@pytest.mark.parametrize(
    ("text", "slot", "value"),
    [
        ("two", SlotName.TRAVELERS, 2),
        ("just me", SlotName.TRAVELERS, 1),
        ("10", SlotName.DURATION, 10),
        ("a week", SlotName.DURATION, 7),
    ],
)
def test_contextual_number_answers(extractor: SlotExtractor, text: str, slot: SlotName, value: int) -> None:
    result = extractor.extract(text, _asked(slot), TripSlots(destination="Italy"))

    assert result.slot_updates[slot] == value


def test_no_preference_answers(extractor: SlotExtractor) -> None:
    """"no" still answers the preference questions, so the flow can move on."""
    food = extractor.extract("no", _asked(SlotName.FOOD_PREFERENCES))
    pace = extractor.extract("no preference", _asked(SlotName.PACE))

    assert food.slot_updates == {SlotName.FOOD_PREFERENCES: ["no preference"]}
    assert pace.slot_updates == {SlotName.PACE: "balanced"}


@pytest.mark.parametrize("text", ["no preference", "anything", "whatever", "Not really."])
def test_no_preference_accommodation_answer_uses_default(extractor: SlotExtractor, text: str) -> None:
    result = extractor.extract(text, _asked(SlotName.ACCOMMODATION_TYPE))

    assert result.slot_updates == {SlotName.ACCOMMODATION_TYPE: "hotel"}
    assert result.answered == {SlotName.ACCOMMODATION_TYPE: True}


def test_direct_accommodation_answer(extractor: SlotExtractor) -> None:
    result = extractor.extract("luxury please", _asked(SlotName.ACCOMMODATION_TYPE))

    assert result.slot_updates == {SlotName.ACCOMMODATION_TYPE: "luxury"}


def test_month_answer_and_date_range(extractor: SlotExtractor) -> None:
    assert extractor.extract("may", _asked(SlotName.TRAVEL_MONTH)).slot_updates == {SlotName.TRAVEL_MONTH: "May"}
    assert extractor.extract("12 June - 19 June").slot_updates == {SlotName.TRAVEL_MONTH: "12 June - 19 June"}


def test_sentence_opening_nice_is_not_a_destination(extractor: SlotExtractor) -> None:
    result = extractor.extract("Nice, sounds good")

    assert SlotName.DESTINATION not in result.slot_updates
    assert find_place("Nice, sounds good") is None


@pytest.mark.parametrize(
    ("text", "expected"),
    [("Nice", "Nice"), ("Nice!", "Nice"), ("I'd love to see Nice", "Nice"), ("Nice, I want Nice in May", "Nice")],
)
def test_capitalised_nice_still_counts_as_a_place(text: str, expected: str) -> None:
    found = find_place(text)

    assert found is not None
    assert found[0].name == expected


def test_us_at_start_of_message_is_still_the_country() -> None:
    found = find_place("US for 10 days")

    assert found is not None
    assert found[0].name == "USA"


@pytest.mark.parametrize("text", ["", "   ", None, 42])
def test_malformed_input_extracts_nothing(extractor: SlotExtractor, text: object) -> None:
    """Empty or non-string input never raises."""
    result = extractor.extract(text)

    assert result.is_empty()
    assert result.currency is None
