"""Tests for recovering the last asked question from the transcript."""

from trip_assistant.core.context_analyzer import ContextAnalyzer
from trip_assistant.models.context import AnswerShape
from trip_assistant.models.message import ConversationTurn
from trip_assistant.models.slots import SlotName, TripSlots
from trip_assistant.utils.clarification import QUESTIONS, build_confirmation_summary


def _assistant(text: str) -> ConversationTurn:
    return ConversationTurn(speaker="assistant", text=text)


def test_no_transcript_means_no_question() -> None:
    context = ContextAnalyzer().analyze("Italy", [])

    assert context.last_question_key is None
    assert context.expected_shape == AnswerShape.FREE_TEXT
    assert context.short_answer is True


def test_every_canned_question_maps_back_to_its_slot() -> None:
    analyzer = ContextAnalyzer()

    for slot, question in QUESTIONS.items():
        context = analyzer.analyze("ok", [_assistant(question)])
        assert context.last_question_key == slot, question


def test_budget_question_expects_an_amount() -> None:
    context = ContextAnalyzer().analyze("3000", [_assistant(QUESTIONS[SlotName.BUDGET])])

    assert context.last_question_key == SlotName.BUDGET
    assert context.expected_shape == AnswerShape.AMOUNT


def test_acknowledgment_text_does_not_hide_the_question() -> None:
    """The question on the last line wins over words in the acknowledgment above it."""
    text = f"Got it: £3,000 budget.\n\n{QUESTIONS[SlotName.TRAVELERS]}"

    context = ContextAnalyzer().analyze("two", [_assistant(text)])

    assert context.last_question_key == SlotName.TRAVELERS


def test_confirmation_prompt_expects_yes_or_no() -> None:
    summary = build_confirmation_summary(TripSlots(destination="Italy", budget=3000), "GBP")

    context = ContextAnalyzer().analyze("yes", [_assistant(summary)])

    assert context.last_question_key is None
    assert context.expected_shape == AnswerShape.YES_NO


def test_uses_latest_assistant_turn() -> None:
    turns = [
        _assistant(QUESTIONS[SlotName.DESTINATION]),
        ConversationTurn(speaker="user", text="Italy"),
        _assistant(QUESTIONS[SlotName.DURATION]),
        ConversationTurn(speaker="user", text="a long sentence that is not short at all"),
    ]

    context = ContextAnalyzer().analyze("a long sentence that is not short at all", turns)

    assert context.last_question_key == SlotName.DURATION
    assert context.short_answer is False
