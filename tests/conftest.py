"""Shared pytest fixtures for all test suites."""

import time
from decimal import Decimal
from typing import Any, Callable, Optional

import pytest
import stripe

import trip_assistant.config as config
from trip_assistant.core.flow_controller import FlowController
from trip_assistant.core.state_manager import StateManager
from trip_assistant.core.extractor import SlotExtractor
from trip_assistant.models.slots import TripSlots
from trip_assistant.tools.destination_client import DestinationClient


@pytest.fixture(autouse=True)
def offline_config(monkeypatch: pytest.MonkeyPatch) -> None:
    """Deterministic settings for every test: rules extractor, no network lookups, quiet output."""
    monkeypatch.setattr(config, "DEBUG", False)
    monkeypatch.setattr(config, "SLOT_EXTRACTOR", "rules")
    monkeypatch.setattr(config, "DESTINATION_LOOKUP", False)
    monkeypatch.setattr(config, "STRIPE_WEBHOOK_SECRET", "whsec_test")


@pytest.fixture
def make_slots() -> Callable[..., TripSlots]:
    """Factory for a fully answered slot set; override any field by keyword."""

    def _make(**overrides: Any) -> TripSlots:
        values: dict[str, Any] = {
            "destination": "Italy",
            "duration_days": 7,
            "budget": Decimal("3000"),
            "travelers": 2,
            "departure_location": "London",
            "travel_month": "June",
            "accommodation_type": "hotel",
            "food_preferences": ["local cuisine"],
            "activity_preferences": ["history", "museums"],
            "pace": "balanced",
        }
        values.update(overrides)
        return TripSlots(**values)

    return _make


@pytest.fixture
def flow() -> FlowController:
    """FlowController with its own store and an offline destination client."""
    return FlowController(
        state_manager=StateManager(),
        extractor=SlotExtractor(),
        destination_client=DestinationClient(use_network=False),
    )


@pytest.fixture
def stripe_signature() -> Callable[..., str]:
    """Builds a Stripe-Signature header for a raw body, using the SDK's own HMAC routine."""

    def _sign(body: bytes, secret: str = "whsec_test", timestamp: Optional[int] = None) -> str:
        ts = int(time.time()) if timestamp is None else timestamp
        digest = stripe.WebhookSignature._compute_signature(f"{ts}.{body.decode('utf-8')}", secret)
        return f"t={ts},v1={digest}"

    return _sign
