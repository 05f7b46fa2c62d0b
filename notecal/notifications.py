"""
Transient user-visible notices

Stand-in for the editor's toast notifications.
"""

from typing import Protocol

from rich.console import Console

from notecal.utils.logger import LoggerMixin


class Notifier(Protocol):
    def notify(self, message: str) -> None: ...


class ConsoleNotifier(LoggerMixin):
    """Render notices on the terminal"""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console(stderr=True)

    def notify(self, message: str) -> None:
        self.console.print(f"[bold cyan]notecal[/bold cyan] {message}", highlight=False)
        self.logger.debug("Notice shown", notice=message)


class NullNotifier:
    """Discard notices (used for one-shot scripted runs)"""

    def notify(self, message: str) -> None:
        return None
