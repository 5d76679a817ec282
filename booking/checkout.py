"""Stripe Checkout session creation for validated bookings."""

from __future__ import annotations

import asyncio
import logging
from functools import partial

import stripe

from booking.errors import PaymentProviderError
from booking.models.booking import BookingRequest, CheckoutSession
from booking.pricing import display_name, price_for

log = logging.getLogger("booking.checkout")


class CheckoutService:
    """Creates one-time-payment Checkout sessions.

    The secret key is passed to Stripe on each call instead of being set
    on the ``stripe`` module, so several services (or tests) can coexist
    in one process.
    """

    def __init__(self, secret_key: str, domain: str, currency: str = "usd") -> None:
        if not secret_key:
            raise ValueError("Stripe secret key is required.")
        self._secret_key = secret_key
        self._domain = domain.rstrip("/")
        self._currency = currency

    @property
    def success_url(self) -> str:
        return f"{self._domain}/success.html?session_id={{CHECKOUT_SESSION_ID}}"

    @property
    def cancel_url(self) -> str:
        return f"{self._domain}/cancel.html"

    def session_params(self, booking: BookingRequest) -> dict:
        """Build the ``Session.create`` parameters for a booking.

        Raises ``UnsupportedServiceError`` for quote-only tiers.
        """
        return {
            "payment_method_types": ["card"],
            "line_items": [
                {
                    "price_data": {
                        "currency": self._currency,
                        "product_data": {
                            "name": display_name(booking.service),
                            "description": f"Appointment on {booking.date} at {booking.time}",
                        },
                        "unit_amount": price_for(booking.service),
                    },
                    "quantity": 1,
                }
            ],
            "mode": "payment",
            "customer_email": booking.email,
            "success_url": self.success_url,
            "cancel_url": self.cancel_url,
            "metadata": booking.to_metadata(),
        }

    async def create_session(self, booking: BookingRequest) -> CheckoutSession:
        """Ask Stripe for a hosted checkout session and return its handle."""
        params = self.session_params(booking)

        try:
            loop = asyncio.get_running_loop()
            session = await loop.run_in_executor(
                None,
                partial(stripe.checkout.Session.create, api_key=self._secret_key, **params),
            )
        except stripe.StripeError as exc:
            log.error(
                "Stripe checkout failed (%s): %s",
                type(exc).__name__,
                exc.user_message or str(exc),
            )
            raise PaymentProviderError(exc.user_message or str(exc)) from exc

        log.info(
            "Checkout session %s created (service=%s, amount=%d)",
            session.id,
            booking.service.value,
            params["line_items"][0]["price_data"]["unit_amount"],
        )
        return CheckoutSession(id=session.id, url=session.url)
