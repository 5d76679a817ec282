"""Tests for CheckoutService and the pricing table (Stripe mocked)."""

from types import SimpleNamespace
from unittest.mock import patch

import pytest
import stripe

from booking.checkout import CheckoutService
from booking.errors import PaymentProviderError, UnsupportedServiceError
from booking.models.booking import NO_DETAILS, BookingRequest, ServiceTier
from booking.pricing import CUSTOM_QUOTE_MESSAGE, SERVICE_PRICES, price_for


@pytest.fixture
def service():
    return CheckoutService(secret_key="sk_live_abc", domain="https://book.example.com/")


@pytest.fixture
def stripe_create():
    with patch("booking.checkout.stripe.checkout.Session.create") as create:
        create.return_value = SimpleNamespace(id="cs_test_1", url="https://checkout.stripe.com/c/pay/cs_test_1")
        yield create


class TestPricing:
    def test_fixed_prices(self):
        assert price_for(ServiceTier.CONSULTATION) == 15000
        assert price_for(ServiceTier.STARTER) == 150000
        assert price_for(ServiceTier.PROFESSIONAL) == 350000

    def test_enterprise_has_no_price(self):
        assert SERVICE_PRICES[ServiceTier.ENTERPRISE] is None
        with pytest.raises(UnsupportedServiceError) as exc_info:
            price_for(ServiceTier.ENTERPRISE)
        assert exc_info.value.message == CUSTOM_QUOTE_MESSAGE


class TestCheckoutService:
    def test_requires_secret_key(self):
        with pytest.raises(ValueError):
            CheckoutService(secret_key="", domain="https://x")

    def test_redirect_urls(self, service):
        assert service.success_url == "https://book.example.com/success.html?session_id={CHECKOUT_SESSION_ID}"
        assert service.cancel_url == "https://book.example.com/cancel.html"

    async def test_starter_session(self, service, stripe_create, booking_form):
        booking_form["service"] = "starter"
        booking = BookingRequest.from_form(booking_form)

        session = await service.create_session(booking)

        assert session.id == "cs_test_1"
        assert session.url.endswith("cs_test_1")
        stripe_create.assert_called_once()
        kwargs = stripe_create.call_args.kwargs
        assert kwargs["api_key"] == "sk_live_abc"
        assert kwargs["mode"] == "payment"
        assert kwargs["customer_email"] == "jane@x.com"
        item = kwargs["line_items"][0]
        assert item["quantity"] == 1
        assert item["price_data"]["unit_amount"] == 150000
        assert item["price_data"]["currency"] == "usd"
        assert item["price_data"]["product_data"] == {
            "name": "Starter Package",
            "description": "Appointment on 2025-03-10 at 14:00",
        }
        assert kwargs["metadata"] == {
            "customerName": "Jane Doe",
            "customerEmail": "jane@x.com",
            "customerPhone": "555-0100",
            "service": "starter",
            "appointmentDate": "2025-03-10",
            "appointmentTime": "14:00",
            "projectDetails": NO_DETAILS,
        }

    async def test_professional_amount(self, service, stripe_create, booking_form):
        await service.create_session(BookingRequest.from_form(booking_form))
        item = stripe_create.call_args.kwargs["line_items"][0]
        assert item["price_data"]["unit_amount"] == 350000

    async def test_enterprise_never_reaches_stripe(self, service, stripe_create, booking_form):
        booking_form["service"] = "enterprise"
        with pytest.raises(UnsupportedServiceError, match="custom quote"):
            await service.create_session(BookingRequest.from_form(booking_form))
        stripe_create.assert_not_called()

    async def test_stripe_error_is_wrapped(self, service, stripe_create, booking_form):
        stripe_create.side_effect = stripe.AuthenticationError("Invalid API Key provided")
        with pytest.raises(PaymentProviderError) as exc_info:
            await service.create_session(BookingRequest.from_form(booking_form))
        assert "Invalid API Key" in exc_info.value.message
        assert exc_info.value.status_code == 500
        assert stripe_create.call_count == 1  # no retry
