"""Stripe webhook authentication.

Signatures are computed by Stripe over the exact request bytes, so the
body must reach ``verify`` untouched: never parse and re-serialize it
before verification.
"""

from __future__ import annotations

import json
import logging
from typing import Any

import stripe

from booking.errors import SignatureVerificationError
from booking.models.booking import PaymentNotification

log = logging.getLogger("booking.webhooks")

CHECKOUT_COMPLETED = "checkout.session.completed"


class WebhookVerifier:
    """Turns a raw signed payload into a trusted ``PaymentNotification``."""

    def __init__(self, signing_secret: str, tolerance: int = stripe.Webhook.DEFAULT_TOLERANCE) -> None:
        if not signing_secret:
            raise ValueError("Stripe webhook signing secret is required.")
        self._secret = signing_secret
        self._tolerance = tolerance

    def verify(self, payload: bytes, signature: str | None) -> PaymentNotification:
        """Verify ``payload`` against the ``Stripe-Signature`` header.

        Raises ``SignatureVerificationError`` when the header is missing,
        the signature or timestamp does not check out, or the body is not
        a Stripe event.
        """
        if not signature:
            raise SignatureVerificationError("No Stripe-Signature header")
        if not isinstance(payload, (bytes, bytearray)):
            raise SignatureVerificationError("Payload must be the raw request bytes")

        try:
            stripe.Webhook.construct_event(
                bytes(payload), signature, self._secret, tolerance=self._tolerance
            )
        except stripe.SignatureVerificationError as exc:
            raise SignatureVerificationError(str(exc)) from exc
        except ValueError as exc:
            raise SignatureVerificationError(f"Invalid payload: {exc}") from exc

        # Signature matched, so the bytes are Stripe's; decode them once.
        event = json.loads(payload)
        if not isinstance(event, dict):
            raise SignatureVerificationError("Payload is not a Stripe event object")
        return self._to_notification(event)

    @staticmethod
    def _to_notification(event: dict[str, Any]) -> PaymentNotification:
        obj = (event.get("data") or {}).get("object") or {}
        metadata = obj.get("metadata") or {}
        return PaymentNotification(
            event_id=str(event.get("id", "")),
            type=str(event.get("type", "")),
            session_id=str(obj.get("id", "")),
            metadata={str(k): str(v) for k, v in metadata.items()},
        )
