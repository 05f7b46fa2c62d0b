"""
Event line processor

Scans a note, creates one calendar event per pending event line and marks
each line whose event was created. Marked lines are skipped on every later
scan, so running the processor on its own output changes nothing.
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

from notecal.auth.token_manager import TokenManager
from notecal.config import OAuthCredentials
from notecal.errors import EventCreationFailedError, TokenAcquisitionError
from notecal.integrations.google_calendar import (
    CalendarEventRequest,
    GoogleCalendarService,
)
from notecal.notifications import Notifier
from notecal.obsidian.event_lines import EventLine, mark_line, parse_event_line
from notecal.obsidian.file_operations import FileOperations, is_markdown
from notecal.utils.logger import LoggerMixin


@dataclass
class NoteProcessResult:
    text: str
    changed: bool
    created: list[EventLine] = field(default_factory=list)
    failed: list[EventLine] = field(default_factory=list)
    # Set when token acquisition aborted the scan
    error: TokenAcquisitionError | None = None


class EventLineProcessor(LoggerMixin):
    """Turns ``#event`` lines into Google Calendar events"""

    def __init__(
        self,
        token_manager: TokenManager,
        calendar: GoogleCalendarService,
        credentials_provider: Callable[[], OAuthCredentials],
        notifier: Notifier,
        *,
        calendar_id: str = "primary",
        time_zone: str = "Europe/Dublin",
        file_operations: FileOperations | None = None,
    ) -> None:
        self.token_manager = token_manager
        self.calendar = calendar
        self.credentials_provider = credentials_provider
        self.notifier = notifier
        self.calendar_id = calendar_id
        self.time_zone = time_zone
        self.file_operations = file_operations or FileOperations()

    async def process_note(self, text: str) -> NoteProcessResult:
        """Create events for pending lines and return the rewritten text."""
        credentials = self.credentials_provider()
        result = NoteProcessResult(text=text, changed=False)
        output: list[str] = []

        # "\r" stays on the line so untouched lines rejoin byte-identical
        for line in text.split("\n"):
            event = None if result.error else parse_event_line(line)
            if event is None or event.processed:
                output.append(line)
                continue

            try:
                await self._create_event(event, credentials)
            except TokenAcquisitionError as e:
                # 以降の行も同じ理由で失敗するため、このスキャンは打ち切る
                result.error = e
                self.logger.error(
                    "Could not obtain access token",
                    error=str(e),
                    error_type=type(e).__name__,
                )
                self.notifier.notify(str(e))
                output.append(line)
                continue
            except EventCreationFailedError as e:
                result.failed.append(event)
                self.logger.error(
                    "Failed to create event",
                    title=event.title,
                    status=e.status,
                    error=str(e),
                )
                self.notifier.notify(f"Failed to create event: {event.title}")
                output.append(line)
                continue

            result.created.append(event)
            output.append(mark_line(line))

        result.changed = bool(result.created)
        if result.changed:
            result.text = "\n".join(output)
        return result

    async def process_file(self, file_path: Path) -> NoteProcessResult | None:
        """Scan a Markdown note on disk; write back only when a line changed."""
        if not is_markdown(file_path):
            self.logger.debug("Skipping non-Markdown file", file_path=str(file_path))
            return None

        content = await self.file_operations.read_note(file_path)
        result = await self.process_note(content)

        if result.changed:
            await self.file_operations.write_note(file_path, result.text)
            self.notifier.notify("Events created.")

        self.logger.info(
            "Note scanned",
            file_path=str(file_path),
            created=len(result.created),
            failed=len(result.failed),
            aborted=result.error is not None,
        )
        return result

    async def _create_event(
        self, event: EventLine, credentials: OAuthCredentials
    ) -> None:
        access_token = await self.token_manager.get_valid_access_token(credentials)
        request = CalendarEventRequest.from_local_times(
            event.title,
            event.start_iso,
            event.end_iso,
            time_zone=self.time_zone,
        )
        await self.calendar.create_event(
            access_token=access_token,
            calendar_id=self.calendar_id,
            request=request,
        )
