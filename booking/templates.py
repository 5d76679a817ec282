"""HTML bodies for the calendar entry and the customer confirmation email.

All customer-supplied values are escaped before interpolation.
"""

from __future__ import annotations

from dataclasses import dataclass
from html import escape

from booking.models.booking import NO_DETAILS, BookingRequest


@dataclass(frozen=True)
class BusinessInfo:
    """Identity block rendered in the email header and footer."""

    name: str
    tagline: str = ""
    contact_email: str = ""
    contact_phone: str = ""
    address: str = ""


def event_body_html(booking: BookingRequest) -> str:
    details = escape(booking.message or NO_DETAILS)
    return (
        "<h2>Client Appointment Details</h2>"
        f"<p><strong>Client Name:</strong> {escape(booking.name)}</p>"
        f"<p><strong>Email:</strong> {escape(booking.email)}</p>"
        f"<p><strong>Phone:</strong> {escape(booking.phone)}</p>"
        f"<p><strong>Service:</strong> {escape(booking.service.value)}</p>"
        f"<p><strong>Date:</strong> {escape(booking.date)}</p>"
        f"<p><strong>Time:</strong> {escape(booking.time)}</p>"
        "<p><strong>Project Details:</strong></p>"
        f"<p>{details}</p>"
        "<hr>"
        "<p><em>Payment confirmed via Stripe</em></p>"
    )


def confirmation_email_html(
    booking: BookingRequest,
    business: BusinessInfo,
    service_label: str,
    tz_label: str,
    duration_minutes: int = 60,
) -> str:
    """Render the customer-facing confirmation email."""
    hours, minutes = divmod(duration_minutes, 60)
    if minutes:
        duration = f"{duration_minutes} minutes"
    else:
        duration = "1 hour" if hours == 1 else f"{hours} hours"

    return f"""
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
  <div style="background: linear-gradient(135deg, #0ea5e9 0%, #d946ef 100%); padding: 30px; text-align: center;">
    <h1 style="color: white; margin: 0;">{escape(business.name)}</h1>
    <p style="color: white; margin: 10px 0 0 0;">{escape(business.tagline)}</p>
  </div>
  <div style="padding: 30px; background: #f9fafb;">
    <h2 style="color: #1f2937;">Your Appointment is Confirmed!</h2>
    <p style="color: #4b5563;">Hi {escape(booking.name)},</p>
    <p style="color: #4b5563;">Thank you for booking with {escape(business.name)}. Your appointment has been confirmed.</p>
    <div style="background: white; padding: 20px; border-radius: 8px; margin: 20px 0; border-left: 4px solid #0ea5e9;">
      <h3 style="margin-top: 0; color: #1f2937;">Appointment Details:</h3>
      <p style="margin: 5px 0;"><strong>Service:</strong> {escape(service_label)}</p>
      <p style="margin: 5px 0;"><strong>Date:</strong> {escape(booking.date)}</p>
      <p style="margin: 5px 0;"><strong>Time:</strong> {escape(booking.time)} {escape(tz_label)}</p>
      <p style="margin: 5px 0;"><strong>Duration:</strong> {duration}</p>
    </div>
    <div style="background: #eff6ff; padding: 15px; border-radius: 8px; margin: 20px 0;">
      <p style="margin: 0; color: #1e40af;"><strong>Calendar Invite:</strong> A calendar invitation has been sent to your email with the meeting link.</p>
    </div>
    <h3 style="color: #1f2937;">Next Steps:</h3>
    <ol style="color: #4b5563;">
      <li>Check your email for the calendar invitation</li>
      <li>Accept the calendar invite to add it to your calendar</li>
      <li>Join the meeting using the Microsoft Teams link at the scheduled time</li>
    </ol>
    <div style="margin-top: 30px; padding-top: 20px; border-top: 1px solid #e5e7eb;">
      <p style="color: #6b7280; font-size: 14px;">
        <strong>Questions?</strong><br>
        Email: {escape(business.contact_email)}<br>
        Phone: {escape(business.contact_phone)}
      </p>
    </div>
  </div>
  <div style="background: #1f2937; padding: 20px; text-align: center;">
    <p style="color: #9ca3af; margin: 0; font-size: 12px;">
      {escape(business.name)}. All rights reserved.<br>
      {escape(business.address)}
    </p>
  </div>
</div>
"""
