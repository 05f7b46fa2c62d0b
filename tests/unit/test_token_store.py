"""Tests for token cache persistence"""

import json
import stat

from cryptography.fernet import Fernet

from notecal.auth import EncryptedTokenStore, JsonTokenStore, TokenState

STATE = TokenState(access_token="ya29.a", refresh_token="1//r", expires_at=1_770_000_000_000)


def test_json_store_uses_original_keys(tmp_path) -> None:
    path = tmp_path / "tokens.json"
    JsonTokenStore(path).save(STATE)

    assert json.loads(path.read_text(encoding="utf-8")) == {
        "access_token": "ya29.a",
        "refresh_token": "1//r",
        "expires_at": 1_770_000_000_000,
    }
    assert stat.S_IMODE(path.stat().st_mode) == 0o600
    assert JsonTokenStore(path).load() == STATE


def test_missing_or_corrupt_file_loads_empty(tmp_path) -> None:
    path = tmp_path / "tokens.json"
    assert JsonTokenStore(path).load() == TokenState()

    path.write_text("[1, 2", encoding="utf-8")
    assert JsonTokenStore(path).load() == TokenState()

    path.write_text('{"expires_at": "soon"}', encoding="utf-8")
    assert JsonTokenStore(path).load() == TokenState()


def test_encrypted_store_hides_tokens(tmp_path) -> None:
    path = tmp_path / "tokens.json.enc"
    key = Fernet.generate_key().decode()
    EncryptedTokenStore(path, key).save(STATE)

    assert b"ya29" not in path.read_bytes()
    assert EncryptedTokenStore(path, key).load() == STATE


def test_encrypted_store_with_wrong_key_loads_empty(tmp_path) -> None:
    path = tmp_path / "tokens.json.enc"
    EncryptedTokenStore(path, Fernet.generate_key().decode()).save(STATE)

    assert EncryptedTokenStore(path, "k" * 32).load() == TokenState()
