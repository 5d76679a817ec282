"""Application configuration via environment variables."""

from __future__ import annotations

import logging

from pydantic_settings import BaseSettings

log = logging.getLogger("booking.config")


class Settings(BaseSettings):
    # Stripe
    stripe_secret_key: str = ""
    stripe_webhook_secret: str = ""
    currency: str = "usd"

    # Public site that hosts success.html / cancel.html
    domain: str = ""

    # Microsoft Graph (Azure AD app registration)
    azure_tenant_id: str = ""
    azure_client_id: str = ""
    azure_client_secret: str = ""
    admin_email: str = ""

    # Calendar
    calendar_timezone: str = "America/New_York"
    meeting_duration_minutes: int = 60

    # Outbound HTTP
    http_timeout_seconds: float = 10.0

    # Business identity shown in the confirmation email
    business_name: str = "Bright Byte Solution"
    business_tagline: str = "Data Analytics • Software • Mobile Apps"
    contact_email: str = "admin@brightbytesolution.com"
    contact_phone: str = "(616) 240-7246"
    business_address: str = "145 Gold Ave NW, Grand Rapids, MI 49504"

    # Server
    host: str = "0.0.0.0"
    port: int = 3000
    debug: bool = False
    cors_origins: str = "*"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    @property
    def cors_origin_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    def validate_startup(self) -> list[str]:
        """Validate configuration at startup. Returns warnings, raises on errors."""
        warnings: list[str] = []
        _placeholders = {"sk_test_...", "whsec_...", "your-tenant-id", "your-client-id",
                         "your-client-secret", "admin@example.com"}

        required = {
            "STRIPE_SECRET_KEY": self.stripe_secret_key,
            "STRIPE_WEBHOOK_SECRET": self.stripe_webhook_secret,
            "DOMAIN": self.domain,
            "AZURE_TENANT_ID": self.azure_tenant_id,
            "AZURE_CLIENT_ID": self.azure_client_id,
            "AZURE_CLIENT_SECRET": self.azure_client_secret,
            "ADMIN_EMAIL": self.admin_email,
        }
        missing = [name for name, value in required.items()
                   if not value or value in _placeholders]
        if missing:
            raise ValueError(
                f"Missing or placeholder configuration: {', '.join(missing)}. "
                "Set them in .env or the environment."
            )

        if self.stripe_secret_key.startswith("sk_test_") and not self.debug:
            warnings.append("STRIPE_SECRET_KEY is a test-mode key; no real charges will be made.")

        if self.cors_origins.strip() == "*" and not self.debug:
            warnings.append("CORS_ORIGINS is '*', so any origin may call the booking API.")

        return warnings


settings = Settings()
