# Role: Rule-based slot extractor. Pure function of (text, context, current slots) -> slot updates.
# Two stages: a contextual stage that trusts short answers to the question just asked, then a
# keyword/regex stage over the whole message. Contextual updates win on conflicts.

from __future__ import annotations

import re
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, Optional, Tuple

import trip_assistant.config as config
from trip_assistant.models.context import SLOT_SHAPES, AnswerShape, ConversationContext
from trip_assistant.models.slots import SlotName, TripSlots
from trip_assistant.utils.dates import find_date_range, find_month
from trip_assistant.utils.money import MoneyMatch, find_money
from trip_assistant.utils.vocabulary import (
    ACCOMMODATION_TYPES,
    ACTIVITY_KEYWORDS,
    DEFAULT_ACCOMMODATION,
    FOOD_KEYWORDS,
    PACE_KEYWORDS,
    collect_keywords,
    contains_phrase,
    find_place,
    lookup_place,
    match_departure_city,
    title_place,
)

MIN_BUDGET = Decimal("100")
MAX_TRAVELERS = 20
MAX_DURATION_DAYS = 90

_NUMBER_WORDS = {
    "a": 1, "an": 1, "one": 1, "two": 2, "three": 3, "four": 4, "five": 5, "six": 6,
    "seven": 7, "eight": 8, "nine": 9, "ten": 10, "eleven": 11, "twelve": 12,
    "fourteen": 14, "fifteen": 15, "twenty": 20,
}
_NUMBER = r"(\d{1,3}|" + "|".join(sorted(_NUMBER_WORDS, key=len, reverse=True)) + r")"

_DURATION = re.compile(rf"\b{_NUMBER}[\s-]*(days?|nights?|weeks?)\b", re.IGNORECASE)
_FORTNIGHT = re.compile(r"\b(?:a\s+)?fortnight\b", re.IGNORECASE)

_TRAVELERS = re.compile(
    rf"\b{_NUMBER}\s+(?:people|persons?|travell?ers?|adults|guests|of\s+us)\b",
    re.IGNORECASE,
)
_SOLO = re.compile(r"\b(?:just\s+me|myself|solo|alone|on\s+my\s+own)\b", re.IGNORECASE)
_COUPLE = re.compile(
    r"\b(?:as\s+a\s+couple|(?:my|with\s+my)\s+(?:partner|wife|husband|girlfriend|boyfriend)\s+and\s+i|"
    r"me\s+and\s+my\s+(?:partner|wife|husband|girlfriend|boyfriend))\b",
    re.IGNORECASE,
)

_BUDGET_WORDS = re.compile(r"\b(?:budget|spend|spending|afford|total)\b", re.IGNORECASE)

_PHRASE_END = r"(?=$|[,.!?;]|\s+(?:to|in|on|for|with|and|but|around|during|next|this|from|at)\b)"
_DEPARTURE = re.compile(
    rf"\b(?:departing|leaving|flying|travell?ing|coming)?\s*from\s+([a-z][a-z .'-]*?){_PHRASE_END}",
    re.IGNORECASE,
)
_DESTINATION_LEAD = re.compile(
    r"\b(?:want\s+to\s+go\s+to|wanna\s+go\s+to|visiting|trip\s+to|travel\s+to|travell?ing\s+to|going\s+to|"
    rf"holiday\s+in|holiday\s+to|vacation\s+in|fly\s+to)\s+(?:the\s+)?([a-z][a-z .'-]*?){_PHRASE_END}",
    re.IGNORECASE,
)

# First words that turn "going to ..." into a verb phrase rather than a place.
_NOT_A_PLACE_START = {
    "be", "spend", "stay", "have", "take", "need", "bring", "see", "do", "visit", "go", "travel", "fly",
    "book", "plan", "make", "get", "relax", "explore", "eat", "try", "want", "like", "a", "an", "my", "some",
}

# Place answers must not read like a sentence.
_PLACE_STOPWORDS = re.compile(r"\b(?:want|like|love|go|visit|need|think|sure|know|idea)\b", re.IGNORECASE)

_NO_PREFERENCE = re.compile(
    r"^\s*(?:no|none|nope|nothing|anything|no preferences?|not really|no particular preferences?|whatever)\W*$",
    re.IGNORECASE,
)

_LUXURY_OR_BUDGET = r"\s+(?:hotels?|accommodation|stays?|options?)\b"


@dataclass
class ExtractionResult:
    slot_updates: Dict[SlotName, Any] = field(default_factory=dict)
    answered: Dict[SlotName, bool] = field(default_factory=dict)
    currency: Optional[str] = None

    def is_empty(self) -> bool:
        return not self.slot_updates


def _to_int(raw: str) -> Optional[int]:
    low = raw.lower()
    if low in _NUMBER_WORDS:
        return _NUMBER_WORDS[low]
    try:
        return int(low)
    except ValueError:
        return None


class SlotExtractor:
    def extract(
        self,
        text: Any,
        context: Optional[ConversationContext] = None,
        current: Optional[TripSlots] = None,
    ) -> ExtractionResult:
        # 1) Reject empty / non-string input (never raises)
        # 2) Keyword stage over the whole message
        # 3) Contextual stage for the slot that was just asked
        # 4) Merge: contextual wins for its slot
        if not isinstance(text, str) or not text.strip():
            return ExtractionResult()

        message = text.strip()
        current = current or TripSlots()

        keyword_updates, currency = self._keyword_stage(message, context, current)
        contextual_updates, ctx_currency = self._contextual_stage(message, context, current)

        updates: Dict[SlotName, Any] = dict(keyword_updates)
        for slot, value in contextual_updates.items():
            updates[slot] = value

        # Key line: a one-word place answer fills the slot that was asked, not both place slots.
        if SlotName.DEPARTURE_LOCATION in contextual_updates:
            if updates.get(SlotName.DESTINATION) == contextual_updates[SlotName.DEPARTURE_LOCATION]:
                updates.pop(SlotName.DESTINATION)
        if SlotName.DESTINATION in contextual_updates:
            if updates.get(SlotName.DEPARTURE_LOCATION) == contextual_updates[SlotName.DESTINATION]:
                updates.pop(SlotName.DEPARTURE_LOCATION)

        if SlotName.BUDGET in contextual_updates:
            currency = ctx_currency or currency

        result = ExtractionResult(
            slot_updates=updates,
            answered={slot: True for slot in updates},
            currency=currency if SlotName.BUDGET in updates else None,
        )

        if config.DEBUG:
            print("\n--- EXTRACTOR DEBUG ---")
            print("text:", message)
            print("context:", context.last_question_key if context else None)
            print("updates:", {slot.value: value for slot, value in updates.items()})
            print("-----------------------\n")

        return result

    # ---------------- contextual stage ----------------

    def _contextual_stage(
        self, text: str, context: Optional[ConversationContext], current: TripSlots
    ) -> Tuple[Dict[SlotName, Any], Optional[str]]:
        if context is None or context.last_question_key is None:
            return {}, None

        slot = context.last_question_key
        shape = SLOT_SHAPES.get(slot, AnswerShape.FREE_TEXT)

        if shape == AnswerShape.PLACE:
            place = self._place_answer(text)
            return ({slot: place}, None) if place else ({}, None)

        if shape == AnswerShape.NUMBER:
            value = self._number_answer(text, slot)
            return ({slot: value}, None) if value else ({}, None)

        if shape == AnswerShape.AMOUNT:
            budget = self._budget(text, expects_budget=True, current=current)
            if budget is None:
                return {}, None
            amount, currency = budget
            return {slot: amount}, currency

        if shape == AnswerShape.MONTH:
            month = find_date_range(text) or find_month(text)
            if month is None and text.strip(" .!").lower() == "may":
                month = "May"
            return ({slot: month}, None) if month else ({}, None)

        if slot == SlotName.ACCOMMODATION_TYPE:
            value = self._accommodation(text, direct_answer=True)
            if value is None and _NO_PREFERENCE.match(text):
                value = DEFAULT_ACCOMMODATION
            return ({slot: value}, None) if value else ({}, None)

        if slot == SlotName.PACE:
            value = self._pace(text)
            if value is None and _NO_PREFERENCE.match(text):
                value = "balanced"
            return ({slot: value}, None) if value else ({}, None)

        if shape == AnswerShape.KEYWORDS:
            groups = FOOD_KEYWORDS if slot == SlotName.FOOD_PREFERENCES else ACTIVITY_KEYWORDS
            found = collect_keywords(text, groups)
            if found:
                return {slot: found}, None
            if _NO_PREFERENCE.match(text):
                return {slot: ["no preference"]}, None
            if self._short_free_text(text):
                return {slot: [text.strip(" .!").lower()]}, None
            return {}, None

        return {}, None

    def _place_answer(self, text: str) -> Optional[str]:
        # Weak shape check: short, no digits, does not read like a sentence.
        cleaned = text.strip(" .!?")
        if not cleaned or len(cleaned) >= 30 or re.search(r"\d", cleaned) or _PLACE_STOPWORDS.search(cleaned):
            return None
        if _NO_PREFERENCE.match(cleaned):
            return None

        hit = find_place(cleaned)
        if hit is not None:
            return hit[0].name

        cleaned = re.sub(r"^(?:to|from|in|the)\s+", "", cleaned, flags=re.IGNORECASE)
        known = lookup_place(cleaned)
        if known is not None:
            return known.name
        return title_place(cleaned) or None

    def _number_answer(self, text: str, slot: SlotName) -> Optional[int]:
        if slot == SlotName.DURATION:
            value = self._duration(text)
        else:
            value = self._travelers(text)
        if value is not None:
            return value

        # Bare "7" / "two" right after the question.
        m = re.fullmatch(rf"\s*(?:about|around|maybe|roughly)?\s*{_NUMBER}\W*", text, re.IGNORECASE)
        if not m:
            return None
        number = _to_int(m.group(1))
        upper = MAX_DURATION_DAYS if slot == SlotName.DURATION else MAX_TRAVELERS
        if number is None or not 1 <= number <= upper:
            return None
        return number

    def _short_free_text(self, text: str) -> bool:
        cleaned = text.strip(" .!?")
        return 0 < len(cleaned) <= 40 and not re.search(r"\d", cleaned)

    # ---------------- keyword stage ----------------

    def _keyword_stage(
        self, text: str, context: Optional[ConversationContext], current: TripSlots
    ) -> Tuple[Dict[SlotName, Any], Optional[str]]:
        updates: Dict[SlotName, Any] = {}
        currency: Optional[str] = None

        departure, departure_span = self._departure_phrase(text)

        destination = self._destination(text, departure_span)
        if destination:
            updates[SlotName.DESTINATION] = destination

        duration = self._duration(text)
        if duration:
            updates[SlotName.DURATION] = duration

        travelers = self._travelers(text)
        if travelers:
            updates[SlotName.TRAVELERS] = travelers

        expects_budget = bool(context and context.last_question_key == SlotName.BUDGET)
        budget = self._budget(text, expects_budget=expects_budget, current=current, same_message_travelers=travelers)
        if budget is not None:
            updates[SlotName.BUDGET], currency = budget

        month = find_date_range(text) or find_month(text)
        if month:
            updates[SlotName.TRAVEL_MONTH] = month

        accommodation = self._accommodation(text, direct_answer=False)
        if accommodation:
            updates[SlotName.ACCOMMODATION_TYPE] = accommodation

        food = collect_keywords(text, FOOD_KEYWORDS)
        if food:
            updates[SlotName.FOOD_PREFERENCES] = food

        activities = collect_keywords(text, ACTIVITY_KEYWORDS)
        if activities:
            updates[SlotName.ACTIVITY_PREFERENCES] = activities

        pace = self._pace(text)
        if pace:
            updates[SlotName.PACE] = pace

        if departure is None:
            departure = self._departure_fallback(text, context, current, updates)
        if departure:
            updates[SlotName.DEPARTURE_LOCATION] = departure

        return updates, currency

    def _departure_phrase(self, text: str) -> Tuple[Optional[str], Optional[Tuple[int, int]]]:
        for m in _DEPARTURE.finditer(text):
            raw = re.sub(r"^the\s+", "", m.group(1).strip(" .'-"), flags=re.IGNORECASE)
            if not raw or len(raw) > 30 or len(raw.split()) > 3:
                continue
            if find_month(raw) or raw.lower() in _NUMBER_WORDS:
                continue
            place = lookup_place(raw)
            name = place.name if place else title_place(raw)
            return name, (m.start(), m.end())
        return None, None

    def _departure_fallback(
        self,
        text: str,
        context: Optional[ConversationContext],
        current: TripSlots,
        updates: Dict[SlotName, Any],
    ) -> Optional[str]:
        # Whole-message fallbacks only when we already know where they're going and it's somewhere else.
        destination = updates.get(SlotName.DESTINATION) or current.destination
        if not destination:
            return None

        city = match_departure_city(text)
        if city is None:
            token = text.strip(" .!?")
            if " " in token or not token.isalpha() or len(token) > 20:
                return None
            # A single word that filled another slot is not a city.
            if any(slot != SlotName.DESTINATION for slot in updates):
                return None
            asked = context.last_question_key if context else None
            if asked not in (None, SlotName.DEPARTURE_LOCATION):
                return None
            place = lookup_place(token)
            city = place.name if place else title_place(token)

        if city.lower() == str(destination).lower():
            return None
        return city

    def _destination(self, text: str, departure_span: Optional[Tuple[int, int]]) -> Optional[str]:
        # Key line: blank out the "from X" phrase so the departure city isn't read as the destination.
        searchable = text
        if departure_span is not None:
            start, end = departure_span
            searchable = text[:start] + " " * (end - start) + text[end:]

        hit = find_place(searchable)
        if hit is not None:
            return hit[0].name

        for m in _DESTINATION_LEAD.finditer(searchable):
            phrase = m.group(1).strip(" .'-")
            words = phrase.split()
            if not words or len(words) > 4 or len(phrase) >= 30:
                continue
            if words[0].lower() in _NOT_A_PLACE_START:
                continue
            if find_month(phrase) or collect_keywords(phrase, ACTIVITY_KEYWORDS) or collect_keywords(phrase, FOOD_KEYWORDS):
                continue
            return title_place(phrase)
        return None

    def _duration(self, text: str) -> Optional[int]:
        if _FORTNIGHT.search(text):
            return 14
        m = _DURATION.search(text)
        if not m:
            return None
        number = _to_int(m.group(1))
        if number is None:
            return None
        if m.group(2).lower().startswith("week"):
            number *= 7
        return number if 1 <= number <= MAX_DURATION_DAYS else None

    def _travelers(self, text: str) -> Optional[int]:
        m = _TRAVELERS.search(text)
        if m:
            number = _to_int(m.group(1))
            if number is not None and 1 <= number <= MAX_TRAVELERS:
                return number
            return None
        if _COUPLE.search(text):
            return 2
        if _SOLO.search(text):
            return 1
        return None

    def _budget(
        self,
        text: str,
        *,
        expects_budget: bool,
        current: TripSlots,
        same_message_travelers: Optional[int] = None,
    ) -> Optional[Tuple[Decimal, Optional[str]]]:
        # 1) Symbol/code amounts always count; bare numbers only with a budget word or when asked
        # 2) "each" / "per person" multiplies by the known (or same-message) travelers count
        # 3) Totals under MIN_BUDGET are rejected
        allow_bare = expects_budget or bool(_BUDGET_WORDS.search(text))
        matches = find_money(text, allow_bare=allow_bare)
        if not matches:
            return None

        travelers = same_message_travelers or current.travelers or 1
        for match in matches:
            total = self._budget_total(match, travelers)
            if total >= MIN_BUDGET:
                return total, match.currency
        return None

    def _budget_total(self, match: MoneyMatch, travelers: int) -> Decimal:
        if match.per_person:
            return match.amount * travelers
        return match.amount

    def _accommodation(self, text: str, *, direct_answer: bool) -> Optional[str]:
        whole = text.strip(" .!?").lower()
        for kind in ACCOMMODATION_TYPES:
            if kind in ("luxury", "budget"):
                if whole == kind or re.search(rf"\b{kind}{_LUXURY_OR_BUDGET}", text, re.IGNORECASE):
                    return kind
                # Answering the accommodation question, "luxury please" is enough.
                if direct_answer and contains_phrase(text, kind) and not find_money(text):
                    return kind
                continue
            if contains_phrase(text, kind) or contains_phrase(text, kind + "s"):
                return kind

        if direct_answer and self._short_free_text(text) and not _NO_PREFERENCE.match(text):
            return whole
        return None

    def _pace(self, text: str) -> Optional[str]:
        found = collect_keywords(text, PACE_KEYWORDS)
        return found[0] if found else None
