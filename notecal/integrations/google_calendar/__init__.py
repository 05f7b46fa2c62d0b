"""Google Calendar integration helpers."""

from notecal.integrations.google_calendar.schemas import (
    CalendarEventRequest,
    CreatedCalendarEvent,
    EventDateTime,
)
from notecal.integrations.google_calendar.service import GoogleCalendarService

__all__ = [
    "CalendarEventRequest",
    "CreatedCalendarEvent",
    "EventDateTime",
    "GoogleCalendarService",
]
