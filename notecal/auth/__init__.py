"""Google OAuth2 token handling."""

from notecal.auth.models import TokenState
from notecal.auth.prompts import (
    AuthorizationCodeProvider,
    ConsoleCodePrompt,
    LoopbackCodeListener,
)
from notecal.auth.token_manager import TokenManager
from notecal.auth.token_store import (
    EncryptedTokenStore,
    JsonTokenStore,
    MemoryTokenStore,
    TokenStore,
)

__all__ = [
    "AuthorizationCodeProvider",
    "ConsoleCodePrompt",
    "EncryptedTokenStore",
    "JsonTokenStore",
    "LoopbackCodeListener",
    "MemoryTokenStore",
    "TokenManager",
    "TokenState",
    "TokenStore",
]
