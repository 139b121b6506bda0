"""OAuth2 token lifecycle for the freee API.

Handles expiry tracking and the refresh-token exchange. The token file in
the credential store is the single source of truth; nothing is cached in
memory between calls.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

import httpx
from pydantic import ValidationError

from freee_cli.config import Config
from freee_cli.models.auth import TokenRecord, TokenResponse, TokenStatus
from freee_cli.storage import CredentialStore
from freee_cli.utils.errors import NoRefreshToken, RefreshFailed, response_error_detail

logger = logging.getLogger(__name__)

# Tokens this close to expiry count as expired, so in-flight requests don't race it
EXPIRY_BUFFER = timedelta(seconds=60)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuthManager:
    """Manages the stored OAuth2 access token for the freee API."""

    def __init__(self, config: Config, store: CredentialStore) -> None:
        self._config = config
        self._store = store
        self._http = httpx.Client(timeout=30.0)

    @property
    def store(self) -> CredentialStore:
        return self._store

    def current_token(self) -> TokenRecord | None:
        return self._store.load_token()

    def is_expired(self, now: datetime | None = None) -> bool:
        """True if there is no token or it expires within EXPIRY_BUFFER."""
        token = self._store.load_token()
        if token is None:
            return True
        now = now or utcnow()
        return now >= token.expires_at - EXPIRY_BUFFER

    def access_token(self) -> str:
        """Get a valid access token, refreshing first if needed."""
        if self.is_expired():
            logger.info("Access token expired or missing, refreshing")
            return self.refresh().access_token
        token = self._store.load_token()
        return token.access_token  # type: ignore[union-attr]

    def refresh(self) -> TokenRecord:
        """Exchange the stored refresh token for a new token record.

        Raises:
            NoRefreshToken: No stored token or it has no refresh token.
            RefreshFailed: The token endpoint rejected the exchange.
        """
        current = self._store.load_token()
        if current is None or not current.refresh_token:
            raise NoRefreshToken("No refresh token stored. Please log in again.")

        issued_at = utcnow()
        try:
            response = self._http.post(
                self._config.settings.token_endpoint,
                data={
                    "grant_type": "refresh_token",
                    "client_id": self._config.settings.client_id,
                    "client_secret": self._config.settings.client_secret,
                    "refresh_token": current.refresh_token,
                },
            )
        except httpx.HTTPError as e:
            raise RefreshFailed(f"Token refresh failed: {e}") from e

        if response.status_code != 200:
            raise RefreshFailed(
                f"Token refresh failed (HTTP {response.status_code}): {response_error_detail(response)}"
            )

        try:
            payload = TokenResponse(**response.json())
        except (ValueError, ValidationError) as e:
            raise RefreshFailed(f"Token refresh returned an unexpected payload: {e}") from e

        token = TokenRecord.from_response(
            payload,
            issued_at,
            previous_refresh_token=current.refresh_token,
        )
        self._store.save_token(token)
        logger.info(f"Token refreshed, expires at {token.expires_at.isoformat()}")
        return token

    def get_status(self) -> TokenStatus:
        """Get the current token status.

        ``is_expired`` compares against the real expiry time, so a token in its
        last EXPIRY_BUFFER still reports as unexpired. ``refresh_due`` uses the
        buffered check the client applies before each request.
        """
        token = self._store.load_token()
        if token is None:
            return TokenStatus(has_token=False, is_expired=True, refresh_due=True)

        now = utcnow()
        is_expired = now >= token.expires_at
        seconds_remaining = None
        if not is_expired:
            seconds_remaining = int((token.expires_at - now).total_seconds())

        return TokenStatus(
            has_token=True,
            is_expired=is_expired,
            refresh_due=now >= token.expires_at - EXPIRY_BUFFER,
            expires_at=token.expires_at,
            seconds_remaining=seconds_remaining,
        )

    def close(self) -> None:
        """Close the underlying HTTP client."""
        self._http.close()
