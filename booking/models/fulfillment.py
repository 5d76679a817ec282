"""Per-stage results of post-payment fulfillment."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel


class FulfillmentState(str, Enum):
    RECEIVED = "received"
    VERIFIED = "verified"
    CALENDAR_ATTEMPTED = "calendar_attempted"
    EMAIL_ATTEMPTED = "email_attempted"
    ACKNOWLEDGED = "acknowledged"


class StageResult(BaseModel):
    """Outcome of a single fulfillment stage (calendar or email)."""

    stage: str
    ok: bool
    detail: str = ""
    event_id: Optional[str] = None


class FulfillmentResult(BaseModel):
    """What happened for one payment notification.

    ``calendar`` / ``email`` stay ``None`` when the stage was never
    attempted (ignored event type, bad metadata, duplicate delivery).
    """

    session_id: str
    event_type: str
    state: FulfillmentState = FulfillmentState.RECEIVED
    calendar: Optional[StageResult] = None
    email: Optional[StageResult] = None
    skipped_reason: Optional[str] = None

    @property
    def fulfilled(self) -> bool:
        return bool(self.calendar and self.calendar.ok and self.email and self.email.ok)
