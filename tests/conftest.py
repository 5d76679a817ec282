"""Shared fixtures: settings, signed Stripe payloads, a fake calendar provider."""

import hashlib
import hmac
import json
import time

import pytest

from booking.calendar_providers.base import CalendarProvider
from booking.config import Settings
from booking.errors import CalendarApiError, MailApiError

WEBHOOK_SECRET = "whsec_test_secret"


def sign_payload(payload: bytes, secret: str = WEBHOOK_SECRET, timestamp: int | None = None) -> str:
    """Build a ``Stripe-Signature`` header the way Stripe does."""
    ts = int(time.time()) if timestamp is None else timestamp
    signed = f"{ts}.".encode() + payload
    digest = hmac.new(secret.encode(), signed, hashlib.sha256).hexdigest()
    return f"t={ts},v1={digest}"


def completed_event(metadata: dict, session_id: str = "cs_test_123", event_id: str = "evt_1") -> bytes:
    event = {
        "id": event_id,
        "object": "event",
        "type": "checkout.session.completed",
        "data": {
            "object": {
                "id": session_id,
                "object": "checkout.session",
                "metadata": metadata,
            }
        },
    }
    return json.dumps(event, indent=2).encode()


class FakeProvider(CalendarProvider):
    """Records calls; optionally fails a stage."""

    def __init__(self, fail_calendar=False, fail_email=False, crash_calendar=False):
        self.events = []
        self.emails = []
        self.calls = []
        self._fail_calendar = fail_calendar
        self._fail_email = fail_email
        self._crash_calendar = crash_calendar

    async def create_event(self, booking):
        self.calls.append("calendar")
        if self._crash_calendar:
            raise RuntimeError("boom")
        if self._fail_calendar:
            raise CalendarApiError("Graph returned 503 creating event", upstream_status=503)
        self.events.append(booking)
        return f"evt-{len(self.events)}"

    async def send_confirmation(self, booking):
        self.calls.append("email")
        if self._fail_email:
            raise MailApiError("Graph returned 403 sending mail", upstream_status=403)
        self.emails.append(booking)


@pytest.fixture
def booking_form():
    return {
        "name": "Jane Doe",
        "email": "jane@x.com",
        "phone": "555-0100",
        "service": "professional",
        "date": "2025-03-10",
        "time": "14:00",
    }


@pytest.fixture
def test_settings():
    return Settings(
        _env_file=None,
        stripe_secret_key="sk_live_abc",
        stripe_webhook_secret=WEBHOOK_SECRET,
        domain="https://book.example.com",
        azure_tenant_id="tenant-1",
        azure_client_id="client-1",
        azure_client_secret="secret-1",
        admin_email="admin@brightbyte.test",
        cors_origins="https://book.example.com",
    )


@pytest.fixture
def fake_provider():
    return FakeProvider()
