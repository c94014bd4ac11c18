"""
In-memory OAuth token store shared by providers.

Token acquisition and refresh happen elsewhere; providers only ask
whether a usable token exists. Build one store at startup and pass it
to the providers that need it.
"""

import time
from typing import Optional

import structlog
from pydantic import BaseModel, Field

logger = structlog.get_logger()


class OAuthToken(BaseModel):
    """Access token for a third-party account."""

    access_token: str
    token_type: str = "Bearer"
    refresh_token: Optional[str] = None
    expires_at: Optional[float] = None  # unix seconds
    scope: list[str] = Field(default_factory=list)

    def is_expired(self, now: Optional[float] = None) -> bool:
        if self.expires_at is None:
            return False
        return (now if now is not None else time.time()) >= self.expires_at


class CredentialStore:
    """Tokens keyed by provider name (case-insensitive)."""

    def __init__(self):
        self._tokens: dict[str, OAuthToken] = {}

    def set_token(self, provider: str, token: OAuthToken) -> None:
        self._tokens[provider.lower()] = token
        logger.info("token_stored", provider=provider)

    def get_token(self, provider: str) -> Optional[OAuthToken]:
        """Usable token for `provider`, evicting it if expired."""
        key = provider.lower()
        token = self._tokens.get(key)
        if token is None:
            return None

        if token.is_expired():
            del self._tokens[key]
            logger.info("token_expired", provider=provider)
            return None

        return token

    def is_connected(self, provider: str) -> bool:
        return self.get_token(provider) is not None

    def remove_token(self, provider: str) -> bool:
        """Forget a token. Returns False if none was stored."""
        return self._tokens.pop(provider.lower(), None) is not None

    def connected_providers(self) -> list[str]:
        return [name for name in list(self._tokens) if self.is_connected(name)]
