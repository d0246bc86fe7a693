# Role: LLM-backed slot extractor with the same contract as the rule-based SlotExtractor.
# It enforces a strict "single JSON object" contract, repairs common violations, validates every value
# through TripSlots, and falls back to the rule extractor whenever anything goes wrong.

from __future__ import annotations

import json
import re
from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple

import trip_assistant.config as config
from trip_assistant.core.extractor import MAX_TRAVELERS, MIN_BUDGET, ExtractionResult, SlotExtractor
from trip_assistant.llm.gemini_client import GeminiClient
from trip_assistant.models.context import ConversationContext
from trip_assistant.models.slots import SLOT_ORDER, SlotName, TripSlots
from trip_assistant.prompts.extraction_prompt import build_extraction_prompt

_CURRENCIES = {"GBP", "EUR", "USD"}


class LlmSlotExtractor:
    """
    LLM slot extraction.

    Contract:
    - We ask the model for a single JSON object with one key per slot.
    - Models sometimes wrap JSON in code fences or add extra text; the first {...} block is parsed.
    - Values go through the same TripSlots coercion as the rule extractor, so bad values are dropped.
    """

    def __init__(self, client: Optional[GeminiClient] = None, fallback: Optional[SlotExtractor] = None) -> None:
        # Key line: lazy-init avoids crashing if GEMINI_API_KEY is missing (rules still work).
        self._client = client
        self.fallback = fallback or SlotExtractor()

    def _get_client(self) -> GeminiClient:
        if self._client is None:
            self._client = GeminiClient()
        return self._client

    def extract(
        self,
        text: Any,
        context: Optional[ConversationContext] = None,
        current: Optional[TripSlots] = None,
        recent_messages: Optional[List[dict]] = None,
    ) -> ExtractionResult:
        # 1) Reject empty / non-string input
        # 2) Build prompt + call LLM (any failure -> rules)
        # 3) Parse JSON (with repairs), validate values
        # 4) Nothing usable -> rules
        if not isinstance(text, str) or not text.strip():
            return ExtractionResult()

        prompt = build_extraction_prompt(
            text,
            recent_messages=recent_messages,
            last_question_key=context.last_question_key if context else None,
        )

        try:
            raw = self._get_client().generate_text(prompt, json_mode=True)
        except (RuntimeError, ValueError) as e:
            if config.DEBUG:
                print("LLM_EXTRACTOR failed, using rules:", e)
            return self.fallback.extract(text, context, current)

        if config.DEBUG:
            print("\n--- LLM EXTRACTOR ---")
            print("USER MESSAGE:", text)
            print("RAW LLM OUTPUT:\n", raw)

        parsed, parse_meta = self._try_parse_json(raw)
        if not isinstance(parsed, dict):
            return self._fallback(text, context, current, raw)

        if parse_meta.get("repaired") and config.DEBUG:
            print(f"WARNING: LlmSlotExtractor received non-strict JSON output (repaired={parse_meta}).")

        updates = self._validated_updates(parsed)
        if not updates:
            return self._fallback(text, context, current, raw)

        currency = self._parse_currency(parsed.get("budget_currency"))

        if config.DEBUG:
            print("VALIDATED UPDATES:", {slot.value: value for slot, value in updates.items()})
            print("---------------------\n")

        return ExtractionResult(
            slot_updates=updates,
            answered={slot: True for slot in updates},
            currency=currency if SlotName.BUDGET in updates else None,
        )

    def _validated_updates(self, parsed: Dict[str, Any]) -> Dict[SlotName, Any]:
        # Key line: apply to a scratch TripSlots so the same coercion rules decide what survives.
        raw_updates = {slot: parsed.get(slot.value) for slot in SLOT_ORDER if parsed.get(slot.value) not in (None, "", [])}
        scratch = TripSlots()
        changed = scratch.apply_updates(raw_updates)

        updates: Dict[SlotName, Any] = {}
        for slot in changed:
            value = scratch.value_of(slot)
            if slot == SlotName.BUDGET and Decimal(value) < MIN_BUDGET:
                continue
            if slot == SlotName.TRAVELERS and value > MAX_TRAVELERS:
                continue
            updates[slot] = value
        return updates

    def _parse_currency(self, value: Any) -> Optional[str]:
        if not isinstance(value, str):
            return None
        code = value.strip().upper()
        return code if code in _CURRENCIES else None

    def _strip_code_fences(self, text: str) -> str:
        # Role: remove markdown fences if model incorrectly wrapped JSON.
        if not text:
            return ""
        t = text.strip()

        if t.startswith("```"):
            t = re.sub(r"^\s*```(?:json)?\s*", "", t, flags=re.IGNORECASE)
            t = re.sub(r"\s*```\s*$", "", t)
        return t.strip()

    def _try_parse_json(self, text: str) -> Tuple[Optional[Any], Dict[str, Any]]:
        # 1) strict json.loads
        # 2) strip code fences
        # 3) extract {...} substring as last attempt
        raw = (text or "").strip()

        try:
            return json.loads(raw), {"repaired": False, "method": "strict"}
        except json.JSONDecodeError:
            pass

        cleaned = self._strip_code_fences(raw)
        if cleaned != raw:
            try:
                return json.loads(cleaned), {"repaired": True, "method": "stripped_fences"}
            except json.JSONDecodeError:
                pass

        start = cleaned.find("{")
        end = cleaned.rfind("}")
        if start != -1 and end != -1 and end > start:
            try:
                return json.loads(cleaned[start : end + 1]), {"repaired": True, "method": "extracted_braces"}
            except json.JSONDecodeError:
                return None, {"repaired": True, "method": "failed"}

        return None, {"repaired": False, "method": "failed"}

    def _fallback(
        self,
        text: str,
        context: Optional[ConversationContext],
        current: Optional[TripSlots],
        raw_text: str,
    ) -> ExtractionResult:
        if config.DEBUG:
            print("\n--- LLM EXTRACTOR FALLBACK TRIGGERED ---")
            print("RAW TEXT:", raw_text)
            print("----------------------------------------\n")
        return self.fallback.extract(text, context, current)
