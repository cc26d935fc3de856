"""
Credential and token models.

`Credentials` are long-lived and read-only to the token lifecycle. Each
provider issues its own access token shape: the catalog reports a relative
lifetime, the web player an absolute expiry in epoch milliseconds. Both are
normalised into a `CacheEntry` with an absolute `expires_at` at issuance.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# Upper bounds keep issued expiries inside the datetime range
MAX_TOKEN_LIFETIME_S = 366 * 24 * 3600
MAX_EXPIRY_MS = 253402214400000  # 9999-12-31T00:00:00Z


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Credentials(BaseModel):
    client_id: Optional[str] = None
    client_secret: Optional[str] = None
    sp_dc: Optional[str] = None

    def missing(self) -> list[str]:
        return [name for name in ("client_id", "client_secret", "sp_dc") if not getattr(self, name)]


class CacheEntry(BaseModel):
    access_token: str
    expires_at: datetime

    model_config = ConfigDict(frozen=True)

    @field_validator("expires_at")
    @classmethod
    def _assume_utc(cls, v: datetime) -> datetime:
        return v if v.tzinfo else v.replace(tzinfo=timezone.utc)

    def is_expired(self, now: datetime | None = None) -> bool:
        return self.expires_at < (now or utcnow())


class CatalogToken(BaseModel):
    """Client-credentials grant response of the catalog provider."""

    access_token: str
    token_type: str
    expires_in: int = Field(ge=0, le=MAX_TOKEN_LIFETIME_S)

    def to_cache_entry(self, issued_at: datetime) -> CacheEntry:
        return CacheEntry(
            access_token=self.access_token,
            expires_at=issued_at + timedelta(seconds=self.expires_in),
        )


class LyricsToken(BaseModel):
    """Web player token response of the lyrics provider."""

    client_id: str = Field(alias="clientId")
    access_token: str = Field(alias="accessToken")
    expires_at_ms: int = Field(alias="accessTokenExpirationTimestampMs", ge=0, le=MAX_EXPIRY_MS)
    is_anonymous: bool = Field(alias="isAnonymous")

    model_config = ConfigDict(populate_by_name=True)

    def to_cache_entry(self, issued_at: datetime | None = None) -> CacheEntry:
        # The provider already reports an absolute instant
        return CacheEntry(
            access_token=self.access_token,
            expires_at=datetime.fromtimestamp(self.expires_at_ms / 1000, tz=timezone.utc),
        )
