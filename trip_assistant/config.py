# Role: Central configuration module. Loads .env into environment variables and computes runtime settings.
# Importers read trip_assistant.config.<NAME> at call time, so load_env() can run after import.

from __future__ import annotations

import os
from dotenv import load_dotenv

DEBUG: bool = False

# "rules" (deterministic regex/keyword extractor) or "gemini" (LLM extractor with rule fallback).
SLOT_EXTRACTOR: str = "rules"

# Enrich the acknowledgment with destination info (known table, then Open-Meteo geocoding).
DESTINATION_LOOKUP: bool = True

SESSION_TTL_MINUTES: int = 60
MAX_HISTORY_MESSAGES: int = 40

STRIPE_WEBHOOK_SECRET: str = ""

_TRUTHY = {"1", "true", "yes", "on"}


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def load_env() -> None:
    """
    Load .env into os.environ, then recompute every setting.
    This makes the settings correct even if load_env() is called after import.
    """
    global DEBUG, SLOT_EXTRACTOR, DESTINATION_LOOKUP, SESSION_TTL_MINUTES, MAX_HISTORY_MESSAGES
    global STRIPE_WEBHOOK_SECRET
    load_dotenv()
    # Key line: accept common truthy values.
    DEBUG = os.getenv("DEBUG", "0").lower() in _TRUTHY
    SLOT_EXTRACTOR = os.getenv("SLOT_EXTRACTOR", "rules").strip().lower() or "rules"
    DESTINATION_LOOKUP = os.getenv("DESTINATION_LOOKUP", "1").lower() in _TRUTHY
    SESSION_TTL_MINUTES = _int_env("SESSION_TTL_MINUTES", 60)
    MAX_HISTORY_MESSAGES = _int_env("MAX_HISTORY_MESSAGES", 40)
    STRIPE_WEBHOOK_SECRET = os.getenv("STRIPE_WEBHOOK_SECRET", "")
