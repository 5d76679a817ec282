"""Pydantic models for booking requests and payment notifications."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Mapping, Optional

from pydantic import BaseModel, ValidationError as PydanticValidationError, field_validator

from booking.errors import InvalidServiceError, MetadataError, ValidationError

REQUIRED_FIELDS = ("name", "email", "phone", "service", "date", "time")

NO_DETAILS = "No details provided"

# Stripe rejects metadata values longer than this.
MAX_METADATA_VALUE = 500

# BookingRequest field -> Stripe metadata key
METADATA_KEYS = {
    "name": "customerName",
    "email": "customerEmail",
    "phone": "customerPhone",
    "service": "service",
    "date": "appointmentDate",
    "time": "appointmentTime",
    "message": "projectDetails",
}


class ServiceTier(str, Enum):
    CONSULTATION = "consultation"
    STARTER = "starter"
    PROFESSIONAL = "professional"
    ENTERPRISE = "enterprise"


class BookingRequest(BaseModel):
    """Data collected from the booking form."""

    name: str
    email: str
    phone: str
    service: ServiceTier
    date: str  # YYYY-MM-DD
    time: str  # HH:MM
    message: Optional[str] = None

    @field_validator("name", "email", "phone", "date", "time")
    @classmethod
    def _strip(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value

    @field_validator("date")
    @classmethod
    def _check_date(cls, value: str) -> str:
        datetime.strptime(value, "%Y-%m-%d")
        return value

    @field_validator("time")
    @classmethod
    def _check_time(cls, value: str) -> str:
        datetime.strptime(value, "%H:%M")
        return value

    @field_validator("message")
    @classmethod
    def _blank_message(cls, value: Optional[str]) -> Optional[str]:
        if value is None or not value.strip():
            return None
        return value

    @field_validator("name", "email", "phone", "date", "time", "message")
    @classmethod
    def _fits_metadata(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and len(value) > MAX_METADATA_VALUE:
            raise ValueError(f"must be at most {MAX_METADATA_VALUE} characters")
        return value

    # ------------------------------------------------------------------
    # Boundary conversions
    # ------------------------------------------------------------------

    @classmethod
    def from_form(cls, data: Mapping[str, Any]) -> "BookingRequest":
        """Build a request from submitted form data.

        Raises ``ValidationError`` for absent/blank required fields or
        malformed date/time, ``InvalidServiceError`` for unknown tiers.
        """
        missing = [f for f in REQUIRED_FIELDS if not str(data.get(f) or "").strip()]
        if missing:
            raise ValidationError("Missing required fields", fields=missing)

        try:
            ServiceTier(str(data["service"]).strip())
        except ValueError:
            raise InvalidServiceError() from None

        fields = {f: str(data[f]).strip() for f in REQUIRED_FIELDS}
        message = data.get("message")
        fields["message"] = str(message) if message is not None else None
        try:
            return cls(**fields)
        except PydanticValidationError as exc:
            bad = [str(err["loc"][0]) for err in exc.errors() if err.get("loc")]
            raise ValidationError(
                f"Invalid booking fields: {', '.join(bad)}", fields=bad
            ) from None

    def to_metadata(self) -> dict[str, str]:
        """Serialize to Stripe's string-only metadata mapping."""
        return {
            METADATA_KEYS["name"]: self.name,
            METADATA_KEYS["email"]: self.email,
            METADATA_KEYS["phone"]: self.phone,
            METADATA_KEYS["service"]: self.service.value,
            METADATA_KEYS["date"]: self.date,
            METADATA_KEYS["time"]: self.time,
            METADATA_KEYS["message"]: self.message or NO_DETAILS,
        }

    @classmethod
    def from_metadata(cls, metadata: Mapping[str, str]) -> "BookingRequest":
        """Rebuild a request from echoed metadata, rejecting missing or extra keys."""
        expected = set(METADATA_KEYS.values())
        present = set(metadata)
        missing = sorted(expected - present)
        unexpected = sorted(present - expected)
        if missing or unexpected:
            raise MetadataError(
                f"Metadata keys mismatch (missing={missing}, unexpected={unexpected})"
            )

        details = metadata[METADATA_KEYS["message"]]
        try:
            return cls(
                name=metadata[METADATA_KEYS["name"]],
                email=metadata[METADATA_KEYS["email"]],
                phone=metadata[METADATA_KEYS["phone"]],
                service=metadata[METADATA_KEYS["service"]],
                date=metadata[METADATA_KEYS["date"]],
                time=metadata[METADATA_KEYS["time"]],
                message=None if details == NO_DETAILS else details,
            )
        except PydanticValidationError as exc:
            raise MetadataError(f"Metadata values invalid: {exc.error_count()} error(s)") from None

    def start_datetime(self) -> datetime:
        """Naive local wall-clock start of the appointment."""
        return datetime.strptime(f"{self.date} {self.time}", "%Y-%m-%d %H:%M")


class CheckoutSession(BaseModel):
    """Identifiers of a Stripe-hosted checkout session."""

    id: str
    url: Optional[str] = None


class PaymentNotification(BaseModel):
    """A verified Stripe event, reduced to what fulfillment needs."""

    event_id: str
    type: str
    session_id: str = ""
    metadata: dict[str, str] = {}
