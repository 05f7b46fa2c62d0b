"""
共通フィクスチャ。

- テスト向けの環境変数を毎テスト自動設定（autouse）
- 設定キャッシュを毎テストでクリア
"""

from __future__ import annotations

import logging
from collections.abc import Iterator

import pytest

from notecal.config import clear_settings_cache


class RecordingNotifier:
    """Collects notices instead of printing them."""

    def __init__(self) -> None:
        self.messages: list[str] = []

    def notify(self, message: str) -> None:
        self.messages.append(message)


@pytest.fixture(autouse=True)
def _test_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> Iterator[None]:
    """テスト用の環境変数を設定。実際の秘密情報は使用しない。"""

    env: dict[str, str] = {
        "GOOGLE_CLIENT_ID": "",
        "GOOGLE_CLIENT_SECRET": "",
        "OBSIDIAN_VAULT_PATH": str(tmp_path / "vault"),
        "NOTECAL_DATA_DIR": str(tmp_path / "data"),
        "LOG_DIR": str(tmp_path / "logs"),
    }
    for k, v in env.items():
        monkeypatch.setenv(k, v)
    monkeypatch.delenv("TOKEN_ENCRYPTION_KEY", raising=False)

    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture(autouse=True)
def _reset_logging_state() -> Iterator[None]:
    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()
    try:
        yield
    finally:
        for handler in list(root_logger.handlers):
            root_logger.removeHandler(handler)
            handler.close()
