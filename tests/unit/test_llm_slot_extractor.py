"""Tests for the LLM slot extractor (fake client, no network)."""

import json
from decimal import Decimal
from unittest.mock import MagicMock

from trip_assistant.llm.slot_extractor import LlmSlotExtractor
from trip_assistant.models.context import ConversationContext
from trip_assistant.models.slots import SlotName
from trip_assistant.prompts.extraction_prompt import build_extraction_prompt


def _client(output: str) -> MagicMock:
    client = MagicMock()
    client.generate_text.return_value = output
    return client


def test_strict_json_is_validated_into_updates() -> None:
    payload = {
        "destination": "Italy",
        "duration_days": 7,
        "budget": 3000,
        "budget_currency": "gbp",
        "travelers": 2,
        "pace": "not-a-pace",
        "food_preferences": [],
    }
    extractor = LlmSlotExtractor(client=_client(json.dumps(payload)))

    result = extractor.extract("Italy, a week, £3000, two of us")

    assert result.slot_updates == {
        SlotName.DESTINATION: "Italy",
        SlotName.DURATION: 7,
        SlotName.BUDGET: Decimal("3000"),
        SlotName.TRAVELERS: 2,
    }
    assert result.currency == "GBP"
    _, kwargs = extractor._client.generate_text.call_args
    assert kwargs == {"json_mode": True}


def test_code_fenced_json_is_repaired() -> None:
    extractor = LlmSlotExtractor(client=_client('```json\n{"destination": "Japan"}\n```'))

    assert extractor.extract("Japan").slot_updates == {SlotName.DESTINATION: "Japan"}


def test_out_of_range_values_are_dropped() -> None:
    extractor = LlmSlotExtractor(client=_client('{"budget": 50, "travelers": 40, "destination": "Peru"}'))

    assert extractor.extract("Peru, 50 quid, 40 people").slot_updates == {SlotName.DESTINATION: "Peru"}


def test_unparseable_output_falls_back_to_rules() -> None:
    extractor = LlmSlotExtractor(client=_client("I think they want Lisbon"))

    result = extractor.extract("Lisbon for 5 days")

    assert result.slot_updates == {SlotName.DESTINATION: "Lisbon", SlotName.DURATION: 5}


def test_client_failure_falls_back_to_rules() -> None:
    client = MagicMock()
    client.generate_text.side_effect = RuntimeError("Gemini API call failed: quota")
    extractor = LlmSlotExtractor(client=client)

    assert extractor.extract("Paris").slot_updates == {SlotName.DESTINATION: "Paris"}


def test_empty_input_skips_the_model() -> None:
    client = _client("{}")
    extractor = LlmSlotExtractor(client=client)

    assert extractor.extract("   ").is_empty()
    client.generate_text.assert_not_called()


def test_prompt_mentions_pending_question_and_history() -> None:
    prompt = build_extraction_prompt(
        "3000",
        recent_messages=[{"role": "assistant", "content": "What's your total budget?"}],
        last_question_key=SlotName.BUDGET,
    )

    assert "PENDING_QUESTION" in prompt
    assert "budget" in prompt
    assert "assistant: What's your total budget?" in prompt
    assert "User message:\n3000" in prompt


def test_context_is_forwarded_to_the_prompt() -> None:
    client = _client('{"budget": 3000}')
    extractor = LlmSlotExtractor(client=client)
    context = ConversationContext(last_question_key=SlotName.BUDGET)

    extractor.extract("3000", context)

    prompt = client.generate_text.call_args.args[0]
    assert "PENDING_QUESTION" in prompt
