"""Core file operations for Obsidian notes."""

from pathlib import Path

import aiofiles
import structlog

logger = structlog.get_logger(__name__)

MARKDOWN_SUFFIX = ".md"


def is_markdown(path: Path) -> bool:
    return path.suffix.lower() == MARKDOWN_SUFFIX


class FileOperations:
    """Handles note I/O. Newlines are read and written untranslated."""

    async def read_note(self, file_path: Path) -> str:
        async with aiofiles.open(file_path, encoding="utf-8", newline="") as f:
            return await f.read()

    async def write_note(self, file_path: Path, content: str) -> None:
        try:
            async with aiofiles.open(
                file_path, "w", encoding="utf-8", newline=""
            ) as f:
                await f.write(content)
        except OSError as e:
            logger.error(
                "Failed to write note",
                error=str(e),
                file_path=str(file_path),
                parent_exists=file_path.parent.exists(),
            )
            raise

        logger.info("Note updated", file_path=str(file_path), size=len(content))
