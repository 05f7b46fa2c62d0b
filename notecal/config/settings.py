"""Configuration settings for notecal with caching utilities."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from threading import RLock
from typing import Any, Literal

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_REDIRECT_URI = "http://localhost"


class Settings(BaseSettings):
    """notecal application settings"""

    model_config = SettingsConfigDict(
        env_file=[".env.test", ".env"],
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Google OAuth client (fallback when the plugin settings slot is empty)
    google_client_id: str | None = None
    google_client_secret: SecretStr | None = None
    google_redirect_uri: str = DEFAULT_REDIRECT_URI

    # Calendar target
    calendar_id: str = "primary"
    calendar_timezone: str = "Europe/Dublin"

    # Obsidian vault
    obsidian_vault_path: Path = Path("./vault")
    poll_interval_seconds: float = 2.0
    scan_on_start: bool = False

    # Local storage for plugin settings and the token cache
    notecal_data_dir: Path = Path.home() / ".notecal"
    token_encryption_key: SecretStr | None = None

    # Authorization code intake
    auth_mode: Literal["prompt", "loopback"] = "prompt"

    # Logging
    log_level: str = "INFO"
    log_format: str = "console"
    log_dir: Path = Path("logs")

    @property
    def settings_file(self) -> Path:
        return self.notecal_data_dir / "settings.json"

    @property
    def token_file(self) -> Path:
        suffix = ".json.enc" if self.token_encryption_key else ".json"
        return self.notecal_data_dir / f"tokens{suffix}"


_SETTINGS_LOCK = RLock()
_SETTINGS_CACHE: Settings | None = None


def get_settings(*, refresh: bool = False) -> Settings:
    """Return a cached ``Settings`` instance.

    Parameters
    ----------
    refresh:
        When ``True`` the cached instance is discarded and a new one is created.
    """

    global _SETTINGS_CACHE

    with _SETTINGS_LOCK:
        if refresh or _SETTINGS_CACHE is None:
            _SETTINGS_CACHE = Settings()
        return _SETTINGS_CACHE


def clear_settings_cache() -> None:
    """Clear the cached settings instance."""

    global _SETTINGS_CACHE

    with _SETTINGS_LOCK:
        _SETTINGS_CACHE = None


@contextmanager
def override_settings(**overrides: Any) -> Iterator[Settings]:
    """Temporarily override the cached settings within a context."""

    global _SETTINGS_CACHE

    with _SETTINGS_LOCK:
        previous_settings = _SETTINGS_CACHE

    base_settings = previous_settings or Settings()
    patched_settings = base_settings.model_copy(update=overrides)

    with _SETTINGS_LOCK:
        _SETTINGS_CACHE = patched_settings

    try:
        yield patched_settings
    finally:
        with _SETTINGS_LOCK:
            _SETTINGS_CACHE = previous_settings
