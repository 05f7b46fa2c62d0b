"""Test utils module functionality."""

import logging
from unittest.mock import Mock

import pytest
from rich.console import Console

from notecal.notifications import ConsoleNotifier, NullNotifier
from notecal.utils import (
    LoggerMixin,
    get_logger,
    sanitize_log_content,
    setup_logging,
)
from notecal.utils.error_handler import handle_errors, safe_operation


class TestLogger:
    """Test logging functionality."""

    def test_setup_logging_writes_plain_message_to_file(self, tmp_path):
        """Test log file output uses raw message format."""
        setup_logging()

        test_message = "logging format check"
        logging.getLogger("format-check").info(test_message)

        root_logger = logging.getLogger()
        file_handlers = [
            handler
            for handler in root_logger.handlers
            if isinstance(handler, logging.FileHandler)
        ]
        assert file_handlers, "FileHandler が設定されていません"
        for handler in file_handlers:
            handler.flush()

        log_file = tmp_path / "logs" / "notecal.log"
        lines = log_file.read_text(encoding="utf-8").splitlines()
        assert lines, "ログファイルが空です"
        assert lines[-1].endswith(test_message)

    def test_get_logger_returns_logger(self):
        logger = get_logger("test")
        assert hasattr(logger, "info")
        assert hasattr(logger, "error")

    def test_logger_mixin_uses_class_name(self):
        class Sample(LoggerMixin):
            pass

        assert hasattr(Sample().logger, "warning")


class TestSanitizeLogContent:
    @pytest.mark.parametrize(
        "content",
        [
            "Authorization: Bearer ya29.a0AfB_secret",
            "refresh_token=1//0gAbCdEfGhIjKl",
            "client_secret=GOCSPX-abcdefgh",
        ],
    )
    def test_tokens_are_redacted(self, content: str) -> None:
        sanitized = sanitize_log_content(content)

        assert "[REDACTED]" in sanitized
        for secret in ("ya29.a0AfB_secret", "1//0gAbCdEfGhIjKl", "GOCSPX-abcdefgh"):
            assert secret not in sanitized

    def test_long_content_is_truncated(self) -> None:
        assert sanitize_log_content("x" * 300, max_length=10) == "x" * 10 + "..."


class TestErrorHandler:
    def test_sync_failure_returns_default(self):
        @handle_errors("divide", default_return=-1)
        def divide(a: int, b: int) -> float:
            return a / b

        assert divide(4, 2) == 2
        assert divide(1, 0) == -1

    async def test_async_failure_returns_none(self):
        failing = Mock(side_effect=RuntimeError("boom"))

        @safe_operation("call mock")
        async def call() -> str:
            return failing()

        assert await call() is None
        failing.assert_called_once()


class TestNotifiers:
    def test_console_notifier_prints_message(self):
        console = Console(record=True, width=120)
        ConsoleNotifier(console).notify("Events created.")

        assert "Events created." in console.export_text()

    def test_null_notifier_is_silent(self):
        assert NullNotifier().notify("ignored") is None
