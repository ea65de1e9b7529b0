"""Access token models."""

from __future__ import annotations

import enum
from datetime import UTC, datetime, timedelta

from pydantic import BaseModel, ConfigDict, Field

from pyminapp.models._base import MinappBaseModel


class TokenKind(enum.Enum):
    """Access token flavour.

    ``STANDARD`` tokens come from ``/cgi-bin/token``; issuing a new one
    invalidates the previous one server-side.  ``STABLE`` tokens come
    from ``/cgi-bin/stable_token`` and are only rotated when a force
    refresh is requested.
    """

    STANDARD = "standard"
    STABLE = "stable"


class AccessToken(BaseModel):
    """A cached platform access token.

    Parameters
    ----------
    value : str
        Opaque token string.
    expires_at : datetime
        UTC instant at which the platform stops accepting the token.
    kind : TokenKind
        Endpoint the token was issued by.
    """

    model_config = ConfigDict(frozen=True)

    value: str = Field(repr=False)
    expires_at: datetime
    kind: TokenKind = TokenKind.STABLE

    def is_expired(self, margin: float = 0.0, *, now: datetime | None = None) -> bool:
        """Whether the token is expired, or will be within *margin* seconds."""
        if now is None:
            now = datetime.now(tz=UTC)
        return self.expires_at - timedelta(seconds=margin) <= now

    @property
    def expires_in(self) -> float:
        """Seconds until actual expiry (negative once expired)."""
        return (self.expires_at - datetime.now(tz=UTC)).total_seconds()


class AccessTokenResponse(MinappBaseModel):
    """Body returned by both token issuance endpoints."""

    access_token: str = Field(min_length=1, repr=False)
    expires_in: int = Field(gt=0)

    def to_token(self, kind: TokenKind, *, now: datetime | None = None) -> AccessToken:
        """Build the cached token, computing ``expires_at`` from *now*."""
        if now is None:
            now = datetime.now(tz=UTC)
        return AccessToken(
            value=self.access_token,
            expires_at=now + timedelta(seconds=self.expires_in),
            kind=kind,
        )
