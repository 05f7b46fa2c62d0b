"""
Token cache persistence

The token manager only sees the ``TokenStore`` protocol, so tests can
swap in ``MemoryTokenStore``.
"""

import base64
import binascii
import json
import os
from pathlib import Path
from typing import Protocol

from cryptography.fernet import Fernet, InvalidToken
from pydantic import ValidationError

from notecal.auth.models import TokenState
from notecal.utils.logger import LoggerMixin


class TokenStore(Protocol):
    def load(self) -> TokenState: ...

    def save(self, state: TokenState) -> None: ...


class MemoryTokenStore:
    """In-process token store"""

    def __init__(self, state: TokenState | None = None) -> None:
        self.state = state or TokenState()
        self.save_count = 0

    def load(self) -> TokenState:
        return self.state.model_copy()

    def save(self, state: TokenState) -> None:
        self.state = state.model_copy()
        self.save_count += 1


class JsonTokenStore(LoggerMixin):
    """Plain JSON token file readable only by the owner"""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def load(self) -> TokenState:
        if not self.path.exists():
            return TokenState()

        try:
            raw = self._read()
            return TokenState.model_validate(json.loads(raw))
        except (OSError, ValueError, ValidationError, InvalidToken) as e:
            self.logger.warning(
                "Token cache unreadable, starting empty",
                path=str(self.path),
                error_type=type(e).__name__,
            )
            return TokenState()

    def save(self, state: TokenState) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._write(state.model_dump_json(exclude_none=True))

        # ファイル権限を所有者のみ読み書き可能に設定（ Unix 系）
        if hasattr(os, "chmod"):
            self.path.chmod(0o600)

        self.logger.debug("Token cache saved", path=str(self.path))

    def _read(self) -> str:
        return self.path.read_text(encoding="utf-8")

    def _write(self, payload: str) -> None:
        self.path.write_text(payload, encoding="utf-8")


class EncryptedTokenStore(JsonTokenStore):
    """Fernet-encrypted variant of ``JsonTokenStore``"""

    def __init__(self, path: Path, key: str) -> None:
        super().__init__(path)
        self._fernet = Fernet(self._normalize_key(key))

    def _read(self) -> str:
        return self._fernet.decrypt(self.path.read_bytes()).decode("utf-8")

    def _write(self, payload: str) -> None:
        self.path.write_bytes(self._fernet.encrypt(payload.encode("utf-8")))

    def _normalize_key(self, key: str) -> bytes:
        """Accept a Fernet key or any raw 32-byte secret."""
        try:
            decoded = base64.urlsafe_b64decode(key)
            if len(decoded) == 32:
                return base64.urlsafe_b64encode(decoded)
        except (binascii.Error, ValueError) as exc:
            self.logger.debug("Failed to base64 decode encryption key", error=str(exc))

        raw = key.encode("utf-8")
        if len(raw) == 32:
            return base64.urlsafe_b64encode(raw)
        raise ValueError("token_encryption_key must be a Fernet key or 32 bytes")
