"""Auth-related data models."""

from __future__ import annotations

from datetime import datetime, timedelta

from pydantic import BaseModel


class TokenResponse(BaseModel):
    """Response from the freee OAuth2 token endpoint."""
    access_token: str
    token_type: str = "bearer"
    expires_in: int = 21600
    refresh_token: str | None = None


class TokenRecord(BaseModel):
    """Persisted OAuth token. Replaced wholesale on every refresh."""
    access_token: str
    refresh_token: str = ""
    expires_at: datetime
    token_type: str = "Bearer"

    @classmethod
    def from_response(
        cls,
        response: TokenResponse,
        issued_at: datetime,
        previous_refresh_token: str = "",
    ) -> TokenRecord:
        """Build a record whose expiry is anchored to the moment of issuance."""
        return cls(
            access_token=response.access_token,
            refresh_token=response.refresh_token or previous_refresh_token,
            expires_at=issued_at + timedelta(seconds=response.expires_in),
            token_type=response.token_type or "Bearer",
        )


class TokenStatus(BaseModel):
    """Current state of the stored access token."""
    has_token: bool
    is_expired: bool
    refresh_due: bool = False
    expires_at: datetime | None = None
    seconds_remaining: int | None = None


class AppConfig(BaseModel):
    """Small app-level config persisted next to the token."""
    company_id: int | None = None
