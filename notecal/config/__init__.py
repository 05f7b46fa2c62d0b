"""Configuration module for notecal"""

from notecal.config.plugin_settings import (
    OAuthCredentials,
    PluginSettingsStore,
    resolve_credentials,
)
from notecal.config.settings import (
    Settings,
    clear_settings_cache,
    get_settings,
    override_settings,
)

__all__ = [
    "Settings",
    "get_settings",
    "clear_settings_cache",
    "override_settings",
    "OAuthCredentials",
    "PluginSettingsStore",
    "resolve_credentials",
]
