"""Abstract base class for calendar/mail providers.

Defines the interface the fulfillment orchestrator depends on. Any
groupware backend (Microsoft Graph, Google Workspace, ...) implements
this ABC.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timedelta

from booking.models.booking import BookingRequest
from booking.templates import event_body_html


@dataclass
class CalendarEvent:
    """Represents a calendar event to be created.

    ``start`` and ``end`` are naive wall-clock times in ``time_zone``.
    """

    subject: str
    html_body: str
    start: datetime
    end: datetime
    time_zone: str
    attendees: list[tuple[str, str]] = field(default_factory=list)  # (email, name)
    is_online_meeting: bool = True
    location: str = ""


def build_calendar_event(
    booking: BookingRequest,
    time_zone: str = "America/New_York",
    duration_minutes: int = 60,
) -> CalendarEvent:
    """Derive the calendar entry for a paid booking."""
    start = booking.start_datetime()
    return CalendarEvent(
        subject=f"Client Appointment: {booking.name} - {booking.service.value}",
        html_body=event_body_html(booking),
        start=start,
        end=start + timedelta(minutes=duration_minutes),
        time_zone=time_zone,
        attendees=[(booking.email, booking.name)],
        is_online_meeting=True,
        location="Microsoft Teams Meeting",
    )


class CalendarProvider(ABC):
    """Abstract groupware backend.

    Subclasses must implement event creation and confirmation mail.
    """

    @abstractmethod
    async def create_event(self, booking: BookingRequest) -> str:
        """Create the appointment on the business calendar.

        Args:
            booking: The paid booking.

        Returns:
            The provider-specific event identifier.

        Raises:
            CalendarApiError: The provider rejected or failed the call.
        """

    @abstractmethod
    async def send_confirmation(self, booking: BookingRequest) -> None:
        """Email the customer a booking confirmation.

        Raises:
            MailApiError: The provider rejected or failed the call.
        """
