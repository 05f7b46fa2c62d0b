"""Typed data objects for Google Calendar integration service."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class EventDateTime(BaseModel):
    """Local wall-clock time plus an IANA timezone id."""

    model_config = ConfigDict(populate_by_name=True)

    date_time: str = Field(alias="dateTime")
    time_zone: str = Field(alias="timeZone")


class CalendarEventRequest(BaseModel):
    """Body of an events.insert call."""

    model_config = ConfigDict(populate_by_name=True)

    summary: str
    start: EventDateTime
    end: EventDateTime

    @classmethod
    def from_local_times(
        cls, summary: str, start: str, end: str, *, time_zone: str
    ) -> CalendarEventRequest:
        return cls(
            summary=summary,
            start=EventDateTime(date_time=start, time_zone=time_zone),
            end=EventDateTime(date_time=end, time_zone=time_zone),
        )

    def to_payload(self) -> dict:
        return self.model_dump(by_alias=True)


class CreatedCalendarEvent(BaseModel):
    """Subset of the insert response kept for logging."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    event_id: str | None = Field(default=None, alias="id")
    html_link: str | None = Field(default=None, alias="htmlLink")
    status: str | None = None
