"""Fixed price list for the bookable service tiers (USD cents)."""

from __future__ import annotations

from typing import Optional

from booking.errors import UnsupportedServiceError
from booking.models.booking import ServiceTier

SERVICE_PRICES: dict[ServiceTier, Optional[int]] = {
    ServiceTier.CONSULTATION: 15000,    # $150.00
    ServiceTier.STARTER: 150000,        # $1,500.00
    ServiceTier.PROFESSIONAL: 350000,   # $3,500.00
    ServiceTier.ENTERPRISE: None,       # custom quote
}

SERVICE_NAMES: dict[ServiceTier, str] = {
    ServiceTier.CONSULTATION: "Initial Consultation",
    ServiceTier.STARTER: "Starter Package",
    ServiceTier.PROFESSIONAL: "Professional Package",
    ServiceTier.ENTERPRISE: "Enterprise Package",
}

CUSTOM_QUOTE_MESSAGE = (
    "Enterprise packages require custom quote. Please contact us directly."
)


def price_for(tier: ServiceTier) -> int:
    """Return the unit price in minor units, or raise for quote-only tiers."""
    price = SERVICE_PRICES[tier]
    if price is None:
        raise UnsupportedServiceError(CUSTOM_QUOTE_MESSAGE)
    return price


def display_name(tier: ServiceTier) -> str:
    return SERVICE_NAMES[tier]
