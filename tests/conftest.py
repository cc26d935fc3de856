"""Shared fixtures: a scripted stand-in for HttpClient and isolated settings."""

import json
from datetime import datetime, timedelta, timezone

import pytest

from spotics.core.config import reset_settings
from spotics.core.http import HttpResponse


class FakeHttp:
    """Replays queued responses (or raises queued exceptions) in order."""

    def __init__(self, provider, responses=()):
        self.provider = provider
        self.responses = list(responses)
        self.calls = []

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        return None

    async def request(self, method, url, *, params=None, data=None, headers=None):
        self.calls.append(
            {
                "method": method,
                "url": url,
                "params": dict(params or {}),
                "data": dict(data or {}),
                "headers": dict(headers or {}),
            }
        )
        if not self.responses:
            raise AssertionError(f"Unexpected {method} {url}")
        item = self.responses.pop(0)
        if isinstance(item, BaseException):
            raise item
        return item


def json_response(payload, status=200):
    return HttpResponse(status, json.dumps(payload))


def catalog_token_body(token="catalog-token", expires_in=3600):
    return {"access_token": token, "token_type": "Bearer", "expires_in": expires_in}


def lyrics_token_body(token="lyrics-token", lifetime=timedelta(hours=1), anonymous=False):
    expires = datetime.now(timezone.utc) + lifetime
    return {
        "clientId": "d8a5ed958d274c2e8ee717e6a4b0971d",
        "accessToken": token,
        "accessTokenExpirationTimestampMs": int(expires.timestamp() * 1000),
        "isAnonymous": anonymous,
    }


@pytest.fixture
def make_http():
    return FakeHttp


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Point credentials and caches into tmp_path and keep the keyring out of tests."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("SPOTICS_SETTINGS_PATH", str(tmp_path / "settings.json"))
    monkeypatch.setenv("SPOTICS_TOKEN_PATH", str(tmp_path / "config" / "token.json"))
    monkeypatch.setenv("SPOTICS_CACHE_DIR", str(tmp_path / "cache"))
    monkeypatch.setenv("SPOTICS_DISABLE_KEYRING", "1")
    for var in ("SPOTICS_CLIENT_ID", "SPOTICS_CLIENT_SECRET", "SPOTICS_SP_DC"):
        monkeypatch.delenv(var, raising=False)
    reset_settings()
    yield
    reset_settings()
