"""ループ内で 1 件の失敗が全体を止めないようにするデコレータ"""

import functools
import inspect
from collections.abc import Callable
from pathlib import Path
from typing import Any

import structlog

logger = structlog.get_logger()


def _failure_context(args: tuple[Any, ...]) -> dict[str, str]:
    # 対象ノートのパスが引数にあればログに含める
    for arg in args:
        if isinstance(arg, Path):
            return {"file_path": str(arg)}
    return {}


def _log_failure(operation_name: str, exception: Exception, args: tuple[Any, ...]) -> None:
    logger.error(
        f"Failed to {operation_name}",
        error=str(exception),
        error_type=type(exception).__name__,
        exc_info=exception,
        **_failure_context(args),
    )


def handle_errors(operation_name: str, default_return: Any = None):
    """Log any ``Exception`` from the wrapped callable and return ``default_return``.

    Works for both plain and coroutine functions.
    """

    def decorator(func: Callable) -> Callable:
        if inspect.iscoroutinefunction(func):

            @functools.wraps(func)
            async def async_wrapper(*args, **kwargs):
                try:
                    return await func(*args, **kwargs)
                except Exception as e:
                    _log_failure(operation_name, e, args)
                    return default_return

            return async_wrapper

        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except Exception as e:
                _log_failure(operation_name, e, args)
                return default_return

        return wrapper

    return decorator


def safe_operation(operation_name: str):
    return handle_errors(operation_name, default_return=None)
