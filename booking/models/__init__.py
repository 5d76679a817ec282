"""Data models for the booking layer."""

from .booking import BookingRequest, CheckoutSession, PaymentNotification, ServiceTier
from .fulfillment import FulfillmentResult, FulfillmentState, StageResult

__all__ = [
    "BookingRequest",
    "CheckoutSession",
    "PaymentNotification",
    "ServiceTier",
    "FulfillmentResult",
    "FulfillmentState",
    "StageResult",
]
