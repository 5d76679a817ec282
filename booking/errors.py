"""Error taxonomy for the booking service.

Every error carries the HTTP status the API layer should answer with.
Checkout-path errors are reported to the calling client; fulfillment
errors (``CalendarApiError``, ``MailApiError``, ``GraphAuthError``,
``MetadataError``) are only ever logged.
"""

from __future__ import annotations


class BookingError(Exception):
    """Base class for all service errors."""

    status_code: int = 500

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(BookingError):
    """Booking form is missing required fields or has malformed values."""

    status_code = 400

    def __init__(self, message: str = "Missing required fields", fields: list[str] | None = None) -> None:
        super().__init__(message)
        self.fields = fields or []


class InvalidServiceError(BookingError):
    status_code = 400

    def __init__(self, message: str = "Invalid service selected") -> None:
        super().__init__(message)


class UnsupportedServiceError(BookingError):
    """Tier exists but cannot be bought online (custom quote)."""

    status_code = 400


class PaymentProviderError(BookingError):
    """Stripe rejected or failed the request. ``message`` holds the upstream text."""

    status_code = 500
    public_message = "Failed to create checkout session"


class SignatureVerificationError(BookingError):
    status_code = 400


class MetadataError(BookingError):
    """Notification metadata does not round-trip to a BookingRequest."""

    status_code = 400


class GraphAuthError(BookingError):
    """Client-credentials token could not be acquired from Azure AD."""


class CalendarApiError(BookingError):
    def __init__(self, message: str, upstream_status: int | None = None) -> None:
        super().__init__(message)
        self.upstream_status = upstream_status


class MailApiError(BookingError):
    def __init__(self, message: str, upstream_status: int | None = None) -> None:
        super().__init__(message)
        self.upstream_status = upstream_status
