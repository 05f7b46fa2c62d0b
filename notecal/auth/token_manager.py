"""
Google OAuth2 token lifecycle

Precedence when a token is requested:

1. cached access token that has not expired -> returned as-is, no network
2. cached refresh token -> one refresh exchange; a rejection is terminal
3. otherwise the interactive authorization-code flow
"""

import time
from collections.abc import Callable
from typing import Any
from urllib.parse import urlencode

import aiohttp

from notecal.auth.models import TokenState
from notecal.auth.prompts import AuthorizationCodeProvider
from notecal.auth.token_store import TokenStore
from notecal.config import OAuthCredentials
from notecal.errors import (
    AuthorizationFailedError,
    MissingCredentialsError,
    TokenRefreshFailedError,
)
from notecal.utils.logger import LoggerMixin

TOKEN_URL = "https://oauth2.googleapis.com/token"  # nosec: B105
AUTHORIZATION_URL = "https://accounts.google.com/o/oauth2/v2/auth"
CALENDAR_EVENTS_SCOPE = "https://www.googleapis.com/auth/calendar.events"


def _epoch_ms() -> int:
    return int(time.time() * 1000)


class TokenManager(LoggerMixin):
    """Owns acquisition, caching and refresh of the calendar access token"""

    def __init__(
        self,
        store: TokenStore,
        code_provider: AuthorizationCodeProvider,
        *,
        clock: Callable[[], int] = _epoch_ms,
        timeout_seconds: float = 30,
        token_url: str = TOKEN_URL,
    ) -> None:
        self.store = store
        self.code_provider = code_provider
        self.clock = clock
        self.timeout_seconds = timeout_seconds
        self.token_url = token_url

    async def get_valid_access_token(self, credentials: OAuthCredentials) -> str:
        """Return a bearer token, refreshing or authorizing when needed."""
        self._require_credentials(credentials)

        state = self.store.load()
        if state.has_usable_access_token(self.clock()):
            return state.access_token  # type: ignore[return-value]

        if state.refresh_token:
            return await self._refresh(credentials, state)

        return await self.authorize(credentials)

    async def authorize(self, credentials: OAuthCredentials) -> str:
        """Run the interactive authorization-code flow and cache the result."""
        self._require_credentials(credentials)

        url = self.build_authorization_url(credentials)
        code = await self.code_provider.request_authorization_code(url)
        if code is None:
            raise AuthorizationFailedError("Authorization was cancelled")
        code = code.strip()
        if not code:
            raise AuthorizationFailedError("No authorization code was supplied")

        called_at = self.clock()
        try:
            status, payload = await self._post_form(
                {
                    "code": code,
                    "client_id": credentials.client_id,
                    "client_secret": credentials.client_secret.get_secret_value(),
                    "redirect_uri": credentials.redirect_uri,
                    "grant_type": "authorization_code",
                }
            )
        except (aiohttp.ClientError, TimeoutError) as e:
            raise AuthorizationFailedError(f"Token exchange failed: {e!r}") from e

        access_token = payload.get("access_token")
        if status != 200 or not access_token:
            detail = payload.get("error_description") or payload.get("error")
            self.logger.error(
                "Authorization code exchange rejected", status=status, error=detail
            )
            raise AuthorizationFailedError(
                f"Authorization code was rejected: {detail or f'HTTP {status}'}"
            )

        state = TokenState(
            access_token=access_token,
            refresh_token=payload.get("refresh_token"),
            expires_at=self._expiry(called_at, payload),
        )
        self.store.save(state)
        self.logger.info(
            "Google authorization completed",
            has_refresh_token=bool(state.refresh_token),
            expires_at=state.expires_at,
        )
        return access_token

    def build_authorization_url(self, credentials: OAuthCredentials) -> str:
        query = urlencode(
            {
                "client_id": credentials.client_id,
                "redirect_uri": credentials.redirect_uri,
                "response_type": "code",
                "scope": CALENDAR_EVENTS_SCOPE,
                "access_type": "offline",
                "prompt": "consent",
            }
        )
        return f"{AUTHORIZATION_URL}?{query}"

    def clear(self) -> None:
        """Forget every cached token; the next request re-authorizes."""
        self.store.save(TokenState())
        self.logger.info("Token cache cleared")

    async def _refresh(self, credentials: OAuthCredentials, state: TokenState) -> str:
        called_at = self.clock()
        try:
            status, payload = await self._post_form(
                {
                    "client_id": credentials.client_id,
                    "client_secret": credentials.client_secret.get_secret_value(),
                    "refresh_token": state.refresh_token,
                    "grant_type": "refresh_token",
                }
            )
        except (aiohttp.ClientError, TimeoutError) as e:
            raise TokenRefreshFailedError(f"Token refresh failed: {e!r}") from e

        access_token = payload.get("access_token")
        if status != 200 or not access_token:
            detail = payload.get("error_description") or payload.get("error")
            self.logger.error("Token refresh rejected", status=status, error=detail)
            raise TokenRefreshFailedError(
                f"Token refresh was rejected: {detail or f'HTTP {status}'}"
            )

        updated = state.model_copy(
            update={
                "access_token": access_token,
                "expires_at": self._expiry(called_at, payload),
            }
        )
        if payload.get("refresh_token"):
            updated.refresh_token = payload["refresh_token"]
        self.store.save(updated)

        self.logger.info("Access token refreshed", expires_at=updated.expires_at)
        return access_token

    async def _post_form(self, data: dict[str, Any]) -> tuple[int, dict[str, Any]]:
        """POST form-encoded data to the token endpoint."""
        timeout = aiohttp.ClientTimeout(total=self.timeout_seconds)
        async with aiohttp.ClientSession(timeout=timeout) as session:
            async with session.post(self.token_url, data=data) as response:
                try:
                    payload = await response.json(content_type=None)
                except ValueError:
                    payload = None
                return response.status, payload if isinstance(payload, dict) else {}

    @staticmethod
    def _expiry(called_at: int, payload: dict[str, Any]) -> int:
        return called_at + int(payload.get("expires_in") or 0) * 1000

    @staticmethod
    def _require_credentials(credentials: OAuthCredentials) -> None:
        if not credentials.is_complete:
            raise MissingCredentialsError(
                "Set your client ID and client secret in plugin settings."
            )
