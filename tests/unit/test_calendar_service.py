"""Tests for the Google Calendar service wrapper"""

from unittest.mock import AsyncMock

import aiohttp
import pytest

from notecal.errors import EventCreationFailedError
from notecal.integrations.google_calendar import (
    CalendarEventRequest,
    GoogleCalendarService,
)

REQUEST = CalendarEventRequest.from_local_times(
    "Team Sync",
    "2026-02-01T10:00:00",
    "2026-02-01T10:30:00",
    time_zone="Europe/Dublin",
)


@pytest.mark.parametrize("status", [200, 201])
async def test_create_event_success(status: int) -> None:
    service = GoogleCalendarService()
    service._request_json = AsyncMock(  # type: ignore[method-assign]
        return_value=(status, "{}", {"id": "abc", "htmlLink": "https://x", "kind": "e"})
    )

    created = await service.create_event(
        access_token="ya29.t", calendar_id="primary", request=REQUEST
    )

    assert created.event_id == "abc"
    assert created.html_link == "https://x"
    method, url = service._request_json.await_args.args
    kwargs = service._request_json.await_args.kwargs
    assert method == "POST"
    assert url == "https://www.googleapis.com/calendar/v3/calendars/primary/events"
    assert kwargs["headers"] == {"Authorization": "Bearer ya29.t"}
    assert kwargs["json_body"]["start"] == {
        "dateTime": "2026-02-01T10:00:00",
        "timeZone": "Europe/Dublin",
    }


async def test_calendar_id_is_path_encoded() -> None:
    service = GoogleCalendarService()
    service._request_json = AsyncMock(return_value=(200, "", {}))  # type: ignore[method-assign]

    await service.create_event(
        access_token="t", calendar_id="team#work@group.calendar.google.com", request=REQUEST
    )

    _, url = service._request_json.await_args.args
    assert url.endswith("/calendars/team%23work@group.calendar.google.com/events")


async def test_rejected_event_raises_with_details() -> None:
    service = GoogleCalendarService()
    service._request_json = AsyncMock(  # type: ignore[method-assign]
        return_value=(400, '{"error": "Bad Request"}', {"error": "Bad Request"})
    )

    with pytest.raises(EventCreationFailedError) as excinfo:
        await service.create_event(
            access_token="t", calendar_id="primary", request=REQUEST
        )

    assert excinfo.value.status == 400
    assert "Bad Request" in excinfo.value.body


async def test_transport_error_becomes_creation_failure() -> None:
    service = GoogleCalendarService()
    service._request_json = AsyncMock(  # type: ignore[method-assign]
        side_effect=aiohttp.ClientConnectionError("reset")
    )

    with pytest.raises(EventCreationFailedError) as excinfo:
        await service.create_event(
            access_token="t", calendar_id="primary", request=REQUEST
        )

    assert excinfo.value.status is None


async def test_close_without_session_is_safe() -> None:
    async with GoogleCalendarService() as service:
        assert service._session is None
