"""Obsidian vault handling: event lines, note I/O and change watching."""

from notecal.obsidian.event_lines import (
    COMPLETION_MARKER,
    DEFAULT_TITLE,
    EventLine,
    parse_event_line,
    to_iso,
)
from notecal.obsidian.file_operations import FileOperations
from notecal.obsidian.processor import EventLineProcessor, NoteProcessResult
from notecal.obsidian.watcher import VaultWatcher

__all__ = [
    "COMPLETION_MARKER",
    "DEFAULT_TITLE",
    "EventLine",
    "EventLineProcessor",
    "FileOperations",
    "NoteProcessResult",
    "VaultWatcher",
    "parse_event_line",
    "to_iso",
]
