"""
Plugin settings slot

OAuth client credentials edited by the user. Every change is persisted
immediately, the way an editor settings tab writes on each keystroke.
"""

import json
import os
from pathlib import Path
from typing import Any

import structlog
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    SecretStr,
    ValidationError,
    field_serializer,
)

from notecal.config.settings import DEFAULT_REDIRECT_URI, Settings

logger = structlog.get_logger(__name__)

EDITABLE_FIELDS = ("client_id", "client_secret", "redirect_uri")


class OAuthCredentials(BaseModel):
    """Google OAuth installed-application client"""

    model_config = ConfigDict(frozen=True)

    client_id: str = Field(default="", description="クライアント ID")
    client_secret: SecretStr = Field(
        default=SecretStr(""), description="クライアントシークレット"
    )
    redirect_uri: str = Field(default=DEFAULT_REDIRECT_URI, description="リダイレクト URI")

    @property
    def is_complete(self) -> bool:
        return bool(self.client_id and self.client_secret.get_secret_value())

    @field_serializer("client_secret")
    def serialize_secret(self, value: SecretStr) -> str:
        """SecretStr を保存用にシリアライズ"""
        return value.get_secret_value()


class PluginSettingsStore:
    """JSON-backed settings slot for the OAuth client credentials"""

    def __init__(self, path: Path):
        self.path = Path(path)

    def load(self) -> OAuthCredentials:
        """Read the stored credentials, falling back to defaults."""
        if not self.path.exists():
            return OAuthCredentials()

        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
            if not isinstance(data, dict):
                raise ValueError("settings file must hold a JSON object")
            known = {
                k: v for k, v in data.items() if k in EDITABLE_FIELDS and v is not None
            }
            return OAuthCredentials(**known)
        except (OSError, ValueError, ValidationError) as e:
            logger.warning(
                "Plugin settings unreadable, using defaults",
                path=str(self.path),
                error=str(e),
            )
            return OAuthCredentials()

    def save(self, credentials: OAuthCredentials) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(credentials.model_dump(), f, ensure_ascii=False, indent=2)

        # 所有者のみ読み書き可能
        if hasattr(os, "chmod"):
            self.path.chmod(0o600)

    def update(self, **fields: Any) -> OAuthCredentials:
        """Trim and persist the given fields immediately."""
        unknown = set(fields) - set(EDITABLE_FIELDS)
        if unknown:
            raise KeyError(f"Unknown setting(s): {', '.join(sorted(unknown))}")

        current = self.load().model_dump()
        for key, value in fields.items():
            current[key] = str(value).strip()

        updated = OAuthCredentials(**current)
        self.save(updated)
        logger.info("Plugin settings updated", fields=sorted(fields))
        return updated


def resolve_credentials(
    settings: Settings, store: PluginSettingsStore
) -> OAuthCredentials:
    """Merge the plugin settings slot with environment fallbacks."""
    stored = store.load()

    client_id = stored.client_id or (settings.google_client_id or "").strip()
    client_secret = stored.client_secret.get_secret_value()
    if not client_secret and settings.google_client_secret is not None:
        client_secret = settings.google_client_secret.get_secret_value().strip()

    redirect_uri = stored.redirect_uri
    if redirect_uri == DEFAULT_REDIRECT_URI and settings.google_redirect_uri:
        redirect_uri = settings.google_redirect_uri.strip()

    return OAuthCredentials(
        client_id=client_id,
        client_secret=SecretStr(client_secret),
        redirect_uri=redirect_uri or DEFAULT_REDIRECT_URI,
    )
