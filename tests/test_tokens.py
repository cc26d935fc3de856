from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from spotics.core.tokens import CacheEntry, CatalogToken, LyricsToken


def test_cache_entry_expiry_is_a_strict_comparison():
    now = datetime(2025, 1, 1, tzinfo=timezone.utc)
    entry = CacheEntry(access_token="t", expires_at=now)
    assert entry.is_expired(now + timedelta(microseconds=1))
    assert not entry.is_expired(now)
    assert not entry.is_expired(now - timedelta(seconds=1))


def test_cache_entry_naive_timestamp_is_utc():
    entry = CacheEntry.model_validate_json('{"access_token": "t", "expires_at": "2030-01-01T00:00:00"}')
    assert entry.expires_at.tzinfo is not None
    assert not entry.is_expired()


def test_catalog_token_expiry_is_relative_to_issuance():
    issued = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)
    token = CatalogToken(access_token="abc", token_type="Bearer", expires_in=3600)
    entry = token.to_cache_entry(issued)
    assert entry.access_token == "abc"
    assert entry.expires_at == issued + timedelta(hours=1)


def test_lyrics_token_expiry_is_absolute():
    token = LyricsToken.model_validate(
        {
            "clientId": "c",
            "accessToken": "xyz",
            "accessTokenExpirationTimestampMs": 1750000000123,
            "isAnonymous": False,
        }
    )
    entry = token.to_cache_entry(datetime(2000, 1, 1, tzinfo=timezone.utc))
    assert entry.access_token == "xyz"
    assert entry.expires_at == datetime.fromtimestamp(1750000000.123, tz=timezone.utc)


@pytest.mark.parametrize("expires_in", [-1, 10**12])
def test_catalog_token_rejects_out_of_range_lifetime(expires_in):
    with pytest.raises(ValidationError):
        CatalogToken(access_token="abc", token_type="Bearer", expires_in=expires_in)


@pytest.mark.parametrize("expires_ms", [-1, 10**20])
def test_lyrics_token_rejects_out_of_range_expiry(expires_ms):
    with pytest.raises(ValidationError):
        LyricsToken.model_validate(
            {
                "clientId": "c",
                "accessToken": "xyz",
                "accessTokenExpirationTimestampMs": expires_ms,
                "isAnonymous": False,
            }
        )
