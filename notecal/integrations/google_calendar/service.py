"""HTTP helpers for Google Calendar integration."""

from __future__ import annotations

from typing import Any
from urllib.parse import quote

import aiohttp

from notecal.errors import EventCreationFailedError
from notecal.integrations.google_calendar.schemas import (
    CalendarEventRequest,
    CreatedCalendarEvent,
)
from notecal.utils.logger import LoggerMixin, sanitize_log_content

SUCCESS_STATUSES = frozenset({200, 201})


class GoogleCalendarService(LoggerMixin):
    """Wrapper around Google Calendar REST API."""

    def __init__(
        self,
        base_url: str = "https://www.googleapis.com/calendar/v3",
        *,
        timeout_seconds: float = 30,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self._session: aiohttp.ClientSession | None = None

    async def get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.timeout_seconds),
                headers={"User-Agent": "notecal/1.0"},
            )
        return self._session

    async def close(self) -> None:
        if self._session and not self._session.closed:
            await self._session.close()
            self._session = None

    async def __aenter__(self) -> GoogleCalendarService:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def create_event(
        self,
        *,
        access_token: str,
        calendar_id: str,
        request: CalendarEventRequest,
    ) -> CreatedCalendarEvent:
        """Insert one event; raises ``EventCreationFailedError`` unless 200/201."""
        url = f"{self.base_url}/calendars/{quote(calendar_id, safe='@')}/events"
        try:
            status, body, payload = await self._request_json(
                "POST",
                url,
                headers={"Authorization": f"Bearer {access_token}"},
                json_body=request.to_payload(),
            )
        except (aiohttp.ClientError, TimeoutError) as e:
            raise EventCreationFailedError(
                f"Error creating event: {e!r}", status=None
            ) from e

        if status not in SUCCESS_STATUSES:
            self.logger.warning(
                "Google Calendar API rejected event",
                url=url,
                status=status,
                summary=request.summary,
                body=sanitize_log_content(body),
            )
            raise EventCreationFailedError(
                f"Error creating event: HTTP {status}", status=status, body=body
            )

        created = CreatedCalendarEvent.model_validate(
            payload if isinstance(payload, dict) else {}
        )
        self.logger.info(
            "Calendar event created",
            calendar_id=calendar_id,
            event_id=created.event_id,
            summary=request.summary,
        )
        return created

    async def _request_json(
        self,
        method: str,
        url: str,
        *,
        headers: dict[str, str],
        json_body: dict[str, Any] | None = None,
    ) -> tuple[int, str, Any]:
        session = await self.get_session()
        async with session.request(
            method, url, headers=headers, json=json_body
        ) as resp:
            body = await resp.text()
            try:
                payload = await resp.json(content_type=None)
            except ValueError:
                self.logger.debug(
                    "Google Calendar API returned non-JSON response", url=url
                )
                payload = None
            return resp.status, body, payload
