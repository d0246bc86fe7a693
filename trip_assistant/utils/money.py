# Role: Deterministic money parsing for the budget slot. Extracts amounts like "£3,000", "$2.5k" or
# "3000 EUR" from free text and normalizes the currency marker to a code, without relying on an LLM.

from __future__ import annotations

import re
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import List, Optional

_AMOUNT = r"(\d{1,3}(?:,\d{3})+(?:\.\d+)?|\d+(?:\.\d+)?)"

_SYMBOLS = {"£": "GBP", "€": "EUR", "$": "USD"}

_ALIASES = {
    "gbp": "GBP", "pound": "GBP", "pounds": "GBP", "quid": "GBP",
    "eur": "EUR", "euro": "EUR", "euros": "EUR",
    "usd": "USD", "dollar": "USD", "dollars": "USD", "bucks": "USD",
}

DISPLAY_SYMBOLS = {"GBP": "£", "EUR": "€", "USD": "$"}

_SYMBOL_AMOUNT = re.compile(rf"([£€$])\s*{_AMOUNT}\s*(k\b)?", re.IGNORECASE)
_AMOUNT_CODE = re.compile(
    rf"(?<![\w.]){_AMOUNT}\s*(k\b)?\s*({'|'.join(sorted(_ALIASES, key=len, reverse=True))})\b",
    re.IGNORECASE,
)
_BARE_AMOUNT = re.compile(rf"(?<![\w.£€$]){_AMOUNT}\s*(k\b)?", re.IGNORECASE)

# Units that mark a bare number as something other than money ("7 days", "2 people").
_NON_MONEY_UNITS = re.compile(
    r"^\s*(?:days?|nights?|weeks?|months?|people|persons?|pax|travell?ers?|adults?|kids?|children|guests?|"
    r"stars?|km|miles?|hours?|am|pm|st|nd|rd|th)\b",
    re.IGNORECASE,
)

_PER_PERSON = re.compile(r"^\s*(?:each|per\s+person|per\s+head|pp|a\s+head|per\s+travell?er)\b", re.IGNORECASE)


@dataclass(frozen=True)
class MoneyMatch:
    amount: Decimal
    currency: Optional[str]
    per_person: bool
    start: int
    end: int


def _parse_amount_str(raw: str, thousands: bool) -> Optional[Decimal]:
    # Role: parse "1,200" / "2.5" safely and reject non-positive values.
    if not raw:
        return None
    try:
        val = Decimal(raw.replace(",", ""))
    except InvalidOperation:
        return None
    if thousands:
        val = val * 1000
    return val if val > 0 else None


def _per_person_after(text: str, end: int) -> bool:
    return bool(_PER_PERSON.match(text[end:]))


def find_money(text: str, *, allow_bare: bool = False) -> List[MoneyMatch]:
    """
    All money-looking amounts in text, in order of appearance.
      - "£3000", "€ 2,500", "$4k"       (symbol first)
      - "3000 GBP", "2k euros"          (code/name after)
      - "3000"                          (bare, only when allow_bare=True and not followed by a unit)
    """
    if not text:
        return []

    found: List[MoneyMatch] = []
    taken: List[tuple[int, int]] = []

    def _overlaps(start: int, end: int) -> bool:
        return any(start < e and end > s for s, e in taken)

    for m in _SYMBOL_AMOUNT.finditer(text):
        amount = _parse_amount_str(m.group(2), bool(m.group(3)))
        if amount is None:
            continue
        found.append(MoneyMatch(amount, _SYMBOLS[m.group(1)], _per_person_after(text, m.end()), m.start(), m.end()))
        taken.append((m.start(), m.end()))

    for m in _AMOUNT_CODE.finditer(text):
        if _overlaps(m.start(), m.end()):
            continue
        amount = _parse_amount_str(m.group(1), bool(m.group(2)))
        if amount is None:
            continue
        code = _ALIASES[m.group(3).lower()]
        found.append(MoneyMatch(amount, code, _per_person_after(text, m.end()), m.start(), m.end()))
        taken.append((m.start(), m.end()))

    if allow_bare:
        for m in _BARE_AMOUNT.finditer(text):
            if _overlaps(m.start(), m.end()):
                continue
            if _NON_MONEY_UNITS.match(text[m.end():]):
                continue
            amount = _parse_amount_str(m.group(1), bool(m.group(2)))
            if amount is None:
                continue
            found.append(MoneyMatch(amount, None, _per_person_after(text, m.end()), m.start(), m.end()))
            taken.append((m.start(), m.end()))

    found.sort(key=lambda mm: mm.start)
    return found


def format_money(amount: Decimal, currency: Optional[str] = None) -> str:
    # Role: "£3,000" / "€2,450.50" / "3,000" for prompts and summaries.
    quantized = amount.quantize(Decimal("0.01"))
    text = f"{quantized:,.2f}"
    if text.endswith(".00"):
        text = text[:-3]
    symbol = DISPLAY_SYMBOLS.get(currency or "", "")
    if symbol:
        return f"{symbol}{text}"
    if currency:
        return f"{text} {currency}"
    return text
