"""
Logging configuration for notecal
"""

import logging
import re
from typing import cast

import structlog
from rich.console import Console
from rich.logging import RichHandler

from notecal.config import get_settings

# OAuth 関連の機密情報パターン
_SENSITIVE_PATTERNS = [
    r'(access_token|refresh_token|code)[=:\s]*["\']?[\w\-\./]{10,}["\']?',
    r"ya29\.[\w\-]+",  # Google アクセストークン
    r"1//[\w\-]+",  # Google リフレッシュトークン
    r"Bearer\s+[\w\-\.]+",
    r'client_secret[=:\s]*["\']?[\w\-]{8,}["\']?',
]


def setup_logging() -> None:
    """Set up structured logging with rich formatting"""

    settings = get_settings()

    log_level = getattr(logging, settings.log_level.upper(), logging.INFO)

    logs_dir = settings.log_dir
    logs_dir.mkdir(parents=True, exist_ok=True)

    logging.basicConfig(
        level=log_level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[
            RichHandler(
                console=Console(stderr=True),
                show_time=True,
                show_path=False,
                markup=False,
                rich_tracebacks=True,
            ),
            logging.FileHandler(logs_dir / "notecal.log", encoding="utf-8"),
        ],
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            (
                structlog.processors.JSONRenderer()
                if settings.log_format == "json"
                else structlog.dev.ConsoleRenderer(colors=False)
            ),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance"""
    return cast("structlog.stdlib.BoundLogger", structlog.get_logger(name))


def sanitize_log_content(content: str, max_length: int = 200) -> str:
    """トークンや認可コードを含む可能性のある文字列をマスク"""
    sanitized = content
    for pattern in _SENSITIVE_PATTERNS:
        sanitized = re.sub(pattern, "[REDACTED]", sanitized, flags=re.IGNORECASE)

    if len(sanitized) > max_length:
        sanitized = sanitized[:max_length] + "..."

    return sanitized


class LoggerMixin:
    """クラス名をロガー名とする structlog ロガーを提供する Mixin"""

    @property
    def logger(self) -> structlog.stdlib.BoundLogger:
        return get_logger(type(self).__name__)
