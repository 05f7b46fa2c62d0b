"""
Event line syntax

    <title> <YYYYMMDDHHmm>:<YYYYMMDDHHmm> #event

A line that ends with the completion marker has already been sent to the
calendar and is never matched again.
"""

import re
from dataclasses import dataclass

COMPLETION_MARKER = "✔"
DEFAULT_TITLE = "Event"

# Title is optional so that a bare "<start>:<end> #event" still matches
EVENT_LINE_PATTERN = re.compile(r"^(?:(.*?)\s+)?(\d{12}):(\d{12})\s*#event$")


@dataclass(frozen=True)
class EventLine:
    raw_line: str
    title: str
    start_raw: str
    end_raw: str
    processed: bool = False

    @property
    def start_iso(self) -> str:
        return to_iso(self.start_raw)

    @property
    def end_iso(self) -> str:
        return to_iso(self.end_raw)


def is_processed(line: str) -> bool:
    return line.strip().endswith(COMPLETION_MARKER)


def parse_event_line(line: str) -> EventLine | None:
    """Return the event carried by ``line``, or None if it is not an event line.

    Lines already carrying the completion marker come back with
    ``processed=True``.
    """
    processed = is_processed(line)
    stripped = line.strip()
    if processed:
        stripped = stripped.removesuffix(COMPLETION_MARKER).rstrip()

    match = EVENT_LINE_PATTERN.match(stripped)
    if not match:
        return None

    title = (match.group(1) or "").strip() or DEFAULT_TITLE
    return EventLine(
        raw_line=line,
        title=title,
        start_raw=match.group(2),
        end_raw=match.group(3),
        processed=processed,
    )


def to_iso(raw: str) -> str:
    """``YYYYMMDDHHmm`` -> ``YYYY-MM-DDTHH:mm:00`` by position only.

    Out-of-range values such as month 13 are passed through untouched;
    the calendar API is the one that rejects them.
    """
    return f"{raw[0:4]}-{raw[4:6]}-{raw[6:8]}T{raw[8:10]}:{raw[10:12]}:00"


def mark_line(line: str) -> str:
    """Append the completion marker, keeping any line terminator at the end."""
    body = line.rstrip("\r\n")
    ending = line[len(body) :]
    return f"{body} {COMPLETION_MARKER}{ending}"
