"""Outlook (Microsoft Graph) calendar and mail provider.

Creates events on, and sends mail from, a fixed administrative mailbox
using an Azure AD app registration with ``Calendars.ReadWrite`` and
``Mail.Send`` application permissions.
"""

from __future__ import annotations

import logging
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import httpx

from booking.errors import CalendarApiError, GraphAuthError, MailApiError
from booking.models.booking import BookingRequest
from booking.pricing import display_name
from booking.templates import BusinessInfo, confirmation_email_html

from .base import CalendarEvent, CalendarProvider, build_calendar_event
from .graph_auth import GraphCredential, graph_error_text

logger = logging.getLogger(__name__)

GRAPH_BASE_URL = "https://graph.microsoft.com/v1.0"

class OutlookCalendarProvider(CalendarProvider):
    """CalendarProvider backed by Microsoft Graph v1.0."""

    def __init__(
        self,
        credential: GraphCredential,
        mailbox: str,
        business: BusinessInfo,
        time_zone: str = "America/New_York",
        duration_minutes: int = 60,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not mailbox:
            raise ValueError("Administrative mailbox address is required.")
        self._credential = credential
        self._mailbox = mailbox
        self._business = business
        self._time_zone = time_zone
        self._duration_minutes = duration_minutes
        self._timeout = timeout
        self._transport = transport

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _post(self, path: str, body: dict[str, Any]) -> httpx.Response:
        """POST to Graph with a freshly acquired bearer token."""
        token = await self._credential.get_token()
        async with httpx.AsyncClient(
            base_url=GRAPH_BASE_URL, timeout=self._timeout, transport=self._transport
        ) as client:
            return await client.post(
                path, json=body, headers={"Authorization": f"Bearer {token}"}
            )

    def tz_label(self, booking: BookingRequest) -> str:
        """Zone abbreviation in effect on the booking date, e.g. EST or EDT."""
        try:
            zone = ZoneInfo(self._time_zone)
        except (ZoneInfoNotFoundError, ValueError):
            return self._time_zone
        return booking.start_datetime().replace(tzinfo=zone).tzname() or self._time_zone

    @staticmethod
    def _graph_datetime(event: CalendarEvent, which: str) -> dict[str, str]:
        value = event.start if which == "start" else event.end
        return {
            "dateTime": value.strftime("%Y-%m-%dT%H:%M:%S"),
            "timeZone": event.time_zone,
        }

    @classmethod
    def event_payload(cls, event: CalendarEvent) -> dict[str, Any]:
        """Translate a CalendarEvent into a Graph ``event`` resource."""
        body: dict[str, Any] = {
            "subject": event.subject,
            "body": {"contentType": "HTML", "content": event.html_body},
            "start": cls._graph_datetime(event, "start"),
            "end": cls._graph_datetime(event, "end"),
            "attendees": [
                {"emailAddress": {"address": addr, "name": name}, "type": "required"}
                for addr, name in event.attendees
            ],
            "isOnlineMeeting": event.is_online_meeting,
        }
        if event.is_online_meeting:
            body["onlineMeetingProvider"] = "teamsForBusiness"
        if event.location:
            body["location"] = {"displayName": event.location}
        return body

    def mail_payload(self, booking: BookingRequest) -> dict[str, Any]:
        html = confirmation_email_html(
            booking,
            self._business,
            service_label=display_name(booking.service),
            duration_minutes=self._duration_minutes,
            tz_label=self.tz_label(booking),
        )
        return {
            "message": {
                "subject": f"Appointment Confirmed - {self._business.name}",
                "body": {"contentType": "HTML", "content": html},
                "toRecipients": [
                    {"emailAddress": {"address": booking.email, "name": booking.name}}
                ],
            },
            "saveToSentItems": True,
        }

    # ------------------------------------------------------------------
    # CalendarProvider interface
    # ------------------------------------------------------------------

    async def create_event(self, booking: BookingRequest) -> str:
        """Create the appointment on the admin mailbox's default calendar."""
        event = build_calendar_event(booking, self._time_zone, self._duration_minutes)
        try:
            resp = await self._post(
                f"/users/{self._mailbox}/calendar/events", self.event_payload(event)
            )
        except GraphAuthError as exc:
            raise CalendarApiError(f"Graph authentication failed: {exc.message}") from exc
        except httpx.HTTPError as exc:
            raise CalendarApiError(f"Graph request failed: {exc}") from exc

        if not resp.is_success:
            raise CalendarApiError(
                f"Graph returned {resp.status_code} creating event: {graph_error_text(resp)}",
                upstream_status=resp.status_code,
            )

        try:
            body = resp.json()
        except ValueError:
            body = None
        event_id = body.get("id", "") if isinstance(body, dict) else ""
        logger.info("Created event %s on calendar of %s", event_id, self._mailbox)
        return event_id

    async def send_confirmation(self, booking: BookingRequest) -> None:
        """Send the confirmation email from the admin mailbox."""
        try:
            resp = await self._post(f"/users/{self._mailbox}/sendMail", self.mail_payload(booking))
        except GraphAuthError as exc:
            raise MailApiError(f"Graph authentication failed: {exc.message}") from exc
        except httpx.HTTPError as exc:
            raise MailApiError(f"Graph request failed: {exc}") from exc

        if not resp.is_success:
            raise MailApiError(
                f"Graph returned {resp.status_code} sending mail: {graph_error_text(resp)}",
                upstream_status=resp.status_code,
            )
        logger.info("Confirmation email sent from %s", self._mailbox)
