"""Calendar provider abstractions and implementations."""

from .base import CalendarEvent, CalendarProvider, build_calendar_event

__all__ = ["CalendarProvider", "CalendarEvent", "build_calendar_event"]
