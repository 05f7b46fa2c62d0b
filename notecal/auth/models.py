"""Typed token cache state."""

from __future__ import annotations

from pydantic import BaseModel, Field


class TokenState(BaseModel):
    """Cached OAuth token pair.

    ``expires_at`` is epoch milliseconds, matching how the cache has always
    been persisted.
    """

    access_token: str | None = None
    refresh_token: str | None = None
    expires_at: int | None = Field(default=None, description="epoch ms")

    def has_usable_access_token(self, now_ms: int) -> bool:
        return bool(
            self.access_token and self.expires_at is not None and now_ms < self.expires_at
        )
