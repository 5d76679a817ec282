"""FastAPI application: HTTP endpoints for booking checkout and Stripe webhooks.

Endpoints:

  POST /api/create-checkout-session   Validate a booking, create a Stripe Checkout session
  POST /api/webhook                   Stripe webhook: verify, then fulfill paid bookings
  GET  /api/health                    Health check

The payment flow:
  1. Browser posts the booking form to /api/create-checkout-session
  2. We return the Stripe session id and hosted checkout URL
  3. Customer pays on Stripe's page
  4. Stripe posts checkout.session.completed to /api/webhook
  5. We verify the signature over the raw body, create the Outlook event
     and email the customer, then acknowledge with 200
"""

from __future__ import annotations

from dotenv import load_dotenv
load_dotenv()

import logging
from datetime import datetime, timezone

# Configure root logger early so all app loggers have a handler and are
# visible when run via uvicorn.
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(name)-20s %(levelname)-7s %(message)s",
)

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse, Response

from booking.calendar_providers.graph_auth import GraphCredential
from booking.calendar_providers.outlook import OutlookCalendarProvider
from booking.checkout import CheckoutService
from booking.config import Settings, settings as default_settings
from booking.errors import BookingError, PaymentProviderError, SignatureVerificationError, ValidationError
from booking.fulfillment import FulfillmentLedger, FulfillmentOrchestrator
from booking.models.booking import BookingRequest
from booking.templates import BusinessInfo
from booking.webhooks import WebhookVerifier

log = logging.getLogger("booking.app")


def build_orchestrator(settings: Settings) -> FulfillmentOrchestrator:
    """Wire the Graph-backed provider from configuration."""
    credential = GraphCredential(
        tenant_id=settings.azure_tenant_id,
        client_id=settings.azure_client_id,
        client_secret=settings.azure_client_secret,
        timeout=settings.http_timeout_seconds,
    )
    provider = OutlookCalendarProvider(
        credential=credential,
        mailbox=settings.admin_email,
        business=BusinessInfo(
            name=settings.business_name,
            tagline=settings.business_tagline,
            contact_email=settings.contact_email,
            contact_phone=settings.contact_phone,
            address=settings.business_address,
        ),
        time_zone=settings.calendar_timezone,
        duration_minutes=settings.meeting_duration_minutes,
        timeout=settings.http_timeout_seconds,
    )
    return FulfillmentOrchestrator(provider, ledger=FulfillmentLedger())


def create_app(
    settings: Settings | None = None,
    checkout: CheckoutService | None = None,
    verifier: WebhookVerifier | None = None,
    orchestrator: FulfillmentOrchestrator | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Collaborators not passed in are built from ``settings``, which are
    validated first so missing configuration stops startup instead of
    failing individual requests.
    """
    settings = settings or default_settings

    if checkout is None or verifier is None or orchestrator is None:
        for warning in settings.validate_startup():
            log.warning(warning)

    checkout = checkout or CheckoutService(
        secret_key=settings.stripe_secret_key,
        domain=settings.domain,
        currency=settings.currency,
    )
    verifier = verifier or WebhookVerifier(settings.stripe_webhook_secret)
    orchestrator = orchestrator or build_orchestrator(settings)

    app = FastAPI(
        title="Booking System",
        description="Appointment booking with Stripe Checkout and Outlook calendar fulfillment",
        version="0.1.0",
    )
    app.state.settings = settings
    app.state.checkout = checkout
    app.state.verifier = verifier
    app.state.orchestrator = orchestrator

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    @app.exception_handler(BookingError)
    async def booking_error_handler(request: Request, exc: BookingError) -> JSONResponse:
        if isinstance(exc, PaymentProviderError):
            return JSONResponse({"error": exc.public_message}, status_code=exc.status_code)
        return JSONResponse({"error": exc.message}, status_code=exc.status_code)

    # ── Health check ───────────────────────────────────────────

    @app.get("/api/health")
    async def health() -> JSONResponse:
        """Liveness only, does not call Stripe or Graph."""
        return JSONResponse({
            "status": "OK",
            "message": f"{settings.business_name} Booking System is running",
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
        })

    # ── Checkout ───────────────────────────────────────────────

    @app.post("/api/create-checkout-session")
    async def create_checkout_session(request: Request) -> JSONResponse:
        try:
            data = await request.json()
        except ValueError:
            raise ValidationError("Request body must be JSON") from None
        if not isinstance(data, dict):
            raise ValidationError("Request body must be a JSON object")

        booking = BookingRequest.from_form(data)
        session = await request.app.state.checkout.create_session(booking)
        return JSONResponse({"sessionId": session.id, "url": session.url})

    # ── Stripe webhook ─────────────────────────────────────────

    @app.post("/api/webhook")
    async def stripe_webhook(request: Request) -> Response:
        """Verify and fulfill. Fulfillment errors never change the 200."""
        # Raw bytes: the signature covers the body exactly as sent.
        payload = await request.body()
        signature = request.headers.get("stripe-signature")

        try:
            notification = request.app.state.verifier.verify(payload, signature)
        except SignatureVerificationError as exc:
            log.warning("Webhook signature verification failed: %s", exc.message)
            return PlainTextResponse(f"Webhook Error: {exc.message}", status_code=400)

        await request.app.state.orchestrator.handle(notification)
        return JSONResponse({"received": True})

    return app
