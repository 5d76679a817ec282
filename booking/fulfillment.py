"""Post-payment fulfillment: calendar event, then confirmation email.

Once a notification is verified the payment has already been captured,
so fulfillment failures are recorded and logged but never turned into an
error response. Stripe's redelivery would repeat the calendar and email
actions without retrying the payment itself.

Lifecycle of one notification::

    RECEIVED -> VERIFIED -> CALENDAR_ATTEMPTED -> EMAIL_ATTEMPTED -> ACKNOWLEDGED
"""

from __future__ import annotations

import asyncio
import logging
from collections import OrderedDict

from booking.calendar_providers.base import CalendarProvider
from booking.errors import BookingError, MetadataError
from booking.models.booking import BookingRequest, PaymentNotification
from booking.models.fulfillment import FulfillmentResult, FulfillmentState, StageResult
from booking.webhooks import CHECKOUT_COMPLETED

log = logging.getLogger("booking.fulfillment")


def redact_pii(value: str) -> str:
    """Mask PII for logging: show first 3 and last 2 chars only."""
    if not value or len(value) <= 5:
        return "***"
    return value[:3] + "***" + value[-2:]


class FulfillmentLedger:
    """Process-local record of checkout sessions already fulfilled.

    Stripe delivers webhooks at least once; claiming the session id
    before running side effects keeps a redelivery from booking a second
    meeting. Only session ids are kept, oldest evicted first once
    ``max_entries`` is reached; the record lives in memory and is lost on
    restart.
    """

    def __init__(self, max_entries: int = 10_000) -> None:
        if max_entries < 1:
            raise ValueError("max_entries must be positive")
        self._claimed: OrderedDict[str, None] = OrderedDict()
        self._max_entries = max_entries
        self._lock = asyncio.Lock()

    async def claim(self, session_id: str) -> bool:
        """Return True if the caller now owns fulfillment for ``session_id``."""
        async with self._lock:
            if session_id in self._claimed:
                return False
            self._claimed[session_id] = None
            while len(self._claimed) > self._max_entries:
                self._claimed.popitem(last=False)
            return True

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._claimed

    def __len__(self) -> int:
        return len(self._claimed)


class FulfillmentOrchestrator:
    """Sequences calendar and email stages for verified notifications."""

    def __init__(
        self,
        provider: CalendarProvider,
        ledger: FulfillmentLedger | None = None,
    ) -> None:
        self._provider = provider
        self._ledger = ledger

    async def handle(self, notification: PaymentNotification) -> FulfillmentResult:
        """Run fulfillment for one verified notification.

        Never raises: every outcome, including failures, is returned in
        the result and logged.
        """
        result = FulfillmentResult(
            session_id=notification.session_id,
            event_type=notification.type,
            state=FulfillmentState.VERIFIED,
        )

        if notification.type != CHECKOUT_COMPLETED:
            log.info("Ignoring %s event %s", notification.type, notification.event_id)
            return self._acknowledge(result, skipped="ignored_event_type")

        try:
            booking = BookingRequest.from_metadata(notification.metadata)
        except MetadataError as exc:
            log.error(
                "Session %s has unusable metadata, skipping fulfillment: %s",
                notification.session_id,
                exc.message,
            )
            return self._acknowledge(result, skipped="invalid_metadata")

        if self._ledger is not None and not await self._ledger.claim(notification.session_id):
            log.warning(
                "Duplicate delivery for session %s (event %s), already fulfilled",
                notification.session_id,
                notification.event_id,
            )
            return self._acknowledge(result, skipped="duplicate")

        log.info(
            "Payment successful for session %s (%s, %s %s)",
            notification.session_id,
            redact_pii(booking.email),
            booking.date,
            booking.time,
        )

        result.calendar = await self._create_event(booking)
        result.state = FulfillmentState.CALENDAR_ATTEMPTED

        result.email = await self._send_confirmation(booking)
        result.state = FulfillmentState.EMAIL_ATTEMPTED

        return self._acknowledge(result)

    # ------------------------------------------------------------------
    # Stages
    # ------------------------------------------------------------------

    async def _create_event(self, booking: BookingRequest) -> StageResult:
        try:
            event_id = await self._provider.create_event(booking)
        except BookingError as exc:
            log.error("Calendar event creation failed: %s", exc.message)
            return StageResult(stage="calendar", ok=False, detail=exc.message)
        except Exception as exc:
            log.exception("Unexpected error creating calendar event")
            return StageResult(stage="calendar", ok=False, detail=f"{type(exc).__name__}: {exc}")
        return StageResult(stage="calendar", ok=True, event_id=event_id)

    async def _send_confirmation(self, booking: BookingRequest) -> StageResult:
        try:
            await self._provider.send_confirmation(booking)
        except BookingError as exc:
            log.error("Confirmation email failed: %s", exc.message)
            return StageResult(stage="email", ok=False, detail=exc.message)
        except Exception as exc:
            log.exception("Unexpected error sending confirmation email")
            return StageResult(stage="email", ok=False, detail=f"{type(exc).__name__}: {exc}")
        return StageResult(stage="email", ok=True, detail=f"sent to {redact_pii(booking.email)}")

    @staticmethod
    def _acknowledge(result: FulfillmentResult, skipped: str | None = None) -> FulfillmentResult:
        result.skipped_reason = skipped
        result.state = FulfillmentState.ACKNOWLEDGED
        log.info(
            "Fulfillment session=%s type=%s calendar=%s email=%s skipped=%s",
            result.session_id or "-",
            result.event_type,
            "n/a" if result.calendar is None else ("ok" if result.calendar.ok else "failed"),
            "n/a" if result.email is None else ("ok" if result.email.ok else "failed"),
            skipped or "-",
        )
        return result
