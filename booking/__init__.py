"""Booking and payment backend: Stripe Checkout in, Outlook calendar and mail out."""
