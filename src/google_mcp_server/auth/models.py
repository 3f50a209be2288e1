"""Data models for the OAuth credential cache."""

from datetime import datetime, timedelta, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict


class TokenStatus(str, Enum):
    """State of the cached credentials."""

    VALID = "valid"
    EXPIRED = "expired"
    MISSING = "missing"
    INVALID = "invalid"


class CredentialRecord(BaseModel):
    """Persisted OAuth token state.

    Unknown keys returned by Google (``scope``, ``id_token``...) are kept
    so that rewriting the cache never drops data.

    Attributes:
        access_token: Bearer token for API calls.
        refresh_token: Long-lived token used to mint new access tokens.
        token_type: Token type, normally "Bearer".
        expiry_date: Expiry in milliseconds since the Unix epoch.
    """

    model_config = ConfigDict(extra="allow")

    access_token: str | None = None
    refresh_token: str | None = None
    token_type: str = "Bearer"  # nosec B105 - OAuth token type, not a password
    expiry_date: int | None = None

    @property
    def expires_at(self) -> datetime | None:
        """Expiry as a timezone-aware UTC datetime."""
        if self.expiry_date is None:
            return None
        return datetime.fromtimestamp(self.expiry_date / 1000, tz=timezone.utc)

    def is_expired(self, buffer_seconds: int = 60) -> bool:
        """Check whether the access token is expired or about to expire.

        A record without an expiry is treated as expired so the first call
        goes through a refresh.
        """
        if self.expires_at is None:
            return True
        return datetime.now(timezone.utc) >= self.expires_at - timedelta(seconds=buffer_seconds)


def expiry_to_millis(expiry: datetime | None) -> int | None:
    """Convert a google-auth expiry (naive UTC) to epoch milliseconds."""
    if expiry is None:
        return None
    if expiry.tzinfo is None:
        expiry = expiry.replace(tzinfo=timezone.utc)
    return int(expiry.timestamp() * 1000)


def millis_to_expiry(expiry_date: int | None) -> datetime | None:
    """Convert epoch milliseconds to the naive UTC datetime google-auth expects."""
    if expiry_date is None:
        return None
    return datetime.fromtimestamp(expiry_date / 1000, tz=timezone.utc).replace(tzinfo=None)
