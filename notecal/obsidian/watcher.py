"""
Vault change watcher

Polls the vault for Markdown files whose modification time changed and
hands each one to a callback, one after another.
"""

import asyncio
from collections.abc import Awaitable, Callable
from pathlib import Path

import structlog

from notecal.obsidian.file_operations import MARKDOWN_SUFFIX
from notecal.utils.error_handler import safe_operation

ChangeCallback = Callable[[Path], Awaitable[object]]


class VaultWatcher:
    """Serial, polling replacement for an editor's "file modified" event"""

    def __init__(
        self,
        vault_path: Path,
        on_change: ChangeCallback,
        *,
        interval_seconds: float = 2.0,
        scan_on_start: bool = False,
    ) -> None:
        self.logger = structlog.get_logger("VaultWatcher")
        self.vault_path = Path(vault_path)
        self.on_change = on_change
        self.interval_seconds = interval_seconds
        self.scan_on_start = scan_on_start

        self._snapshot: dict[Path, int] | None = None
        self._running = False

    def snapshot(self) -> dict[Path, int]:
        """mtime (ns) of every visible Markdown file in the vault"""
        mtimes: dict[Path, int] = {}
        for path in self.vault_path.rglob(f"*{MARKDOWN_SUFFIX}"):
            relative = path.relative_to(self.vault_path)
            # .obsidian / .trash などの隠しフォルダは対象外
            if any(part.startswith(".") for part in relative.parts):
                continue
            try:
                if path.is_file():
                    mtimes[path] = path.stat().st_mtime_ns
            except OSError:
                # 走査中に削除されたファイル
                continue
        return mtimes

    async def poll_once(self) -> list[Path]:
        """Dispatch every file changed since the previous poll; return them."""
        current = self.snapshot()

        if self._snapshot is None and not self.scan_on_start:
            self._snapshot = current
            self.logger.info(
                "Vault baseline recorded",
                vault_path=str(self.vault_path),
                notes=len(current),
            )
            return []

        previous = self._snapshot or {}
        changed = sorted(
            path for path, mtime in current.items() if previous.get(path) != mtime
        )
        self._snapshot = current

        # 書き戻しによる mtime 変化は次回検出されるが、処理済み行はスキップされる
        for path in changed:
            await self._dispatch(path)

        return changed

    async def run(self) -> None:
        """Poll until ``stop()`` is called."""
        self._running = True
        self.logger.info(
            "Watching vault",
            vault_path=str(self.vault_path),
            interval_seconds=self.interval_seconds,
        )
        while self._running:
            await self.poll_once()
            await asyncio.sleep(self.interval_seconds)
        self.logger.info("Vault watcher stopped")

    def stop(self) -> None:
        self._running = False

    @safe_operation("process changed note")
    async def _dispatch(self, path: Path) -> None:
        self.logger.debug("Note changed", file_path=str(path))
        await self.on_change(path)
