# Role: Payment webhook boundary. Verifies the Stripe-Signature header over the raw body with the
# stripe SDK and dispatches the verified event to a small outcome table.

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import stripe

import trip_assistant.config as config

SIGNATURE_HEADER = "Stripe-Signature"
DEFAULT_TOLERANCE_SECONDS = 300


class PaymentEventError(RuntimeError):
    pass


class PaymentVerifier(ABC):
    @abstractmethod
    def verify(self, signature: str, body: bytes) -> bool:
        ...


class StripePaymentVerifier(PaymentVerifier):
    def __init__(self, secret: Optional[str] = None, tolerance_seconds: int = DEFAULT_TOLERANCE_SECONDS) -> None:
        self._secret = secret
        self.tolerance_seconds = tolerance_seconds

    @property
    def secret(self) -> str:
        # Key line: fall back to config at call time so load_env() can run after construction.
        return self._secret if self._secret is not None else config.STRIPE_WEBHOOK_SECRET

    def verify(self, signature: str, body: bytes) -> bool:
        # 1) No secret or no header -> reject without calling the SDK
        # 2) Body must be UTF-8 (the SDK signs "<t>.<payload>" as text)
        # 3) Header parsing, HMAC compare and timestamp tolerance are the SDK's job
        if not self.secret or not signature:
            return False

        try:
            payload = body.decode("utf-8")
        except UnicodeDecodeError:
            return False

        try:
            stripe.WebhookSignature.verify_header(payload, signature, self.secret, tolerance=self.tolerance_seconds)
        except stripe.SignatureVerificationError as e:
            if config.DEBUG:
                print("PAYMENTS signature rejected:", e)
            return False
        return True


def _as_dict(value: Any, what: str) -> Dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise PaymentEventError(f"Webhook event field '{what}' must be an object")
    return value


@dataclass
class PaymentEventHandler:
    # Processed events, newest last (in-memory only).
    processed: List[Dict[str, Any]] = field(default_factory=list)

    HANDLED = {
        "checkout.session.completed": "checkout_completed",
        "invoice.payment_succeeded": "payment_succeeded",
        "invoice.payment_failed": "payment_failed",
        "customer.subscription.deleted": "subscription_cancelled",
    }

    def handle(self, event: Dict[str, Any]) -> str:
        # Returns the outcome label; unknown event types are acknowledged but ignored.
        if not isinstance(event, dict) or not isinstance(event.get("type"), str):
            raise PaymentEventError("Webhook event must be an object with a 'type'")

        event_type = event["type"]
        outcome = self.HANDLED.get(event_type, "ignored")

        if outcome == "checkout_completed":
            data = _as_dict(event.get("data"), "data")
            obj = _as_dict(data.get("object"), "data.object")
            metadata = _as_dict(obj.get("metadata"), "data.object.metadata")
            if not metadata.get("session_id"):
                raise PaymentEventError("Missing session_id metadata in checkout session")

        self.processed.append({"id": event.get("id"), "type": event_type, "outcome": outcome})

        if config.DEBUG:
            print("PAYMENTS handled event:", event_type, "->", outcome)
        return outcome
