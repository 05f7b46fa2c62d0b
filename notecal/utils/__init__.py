"""Utility modules for notecal"""

from .logger import (
    LoggerMixin,
    get_logger,
    sanitize_log_content,
    setup_logging,
)

__all__ = [
    "LoggerMixin",
    "get_logger",
    "setup_logging",
    "sanitize_log_content",
]
