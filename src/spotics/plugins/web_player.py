"""
Lyrics provider (Spotify web player).

Authentication trades the ``sp_dc`` browser cookie for a short-lived web
player token. The endpoint requires a TOTP code and the timestamp it was
generated for. Anonymous tokens are rejected: they cannot fetch lyrics.
"""

from __future__ import annotations

import json
import logging
import time
from typing import Callable, List

from pydantic import ValidationError

from ..core.errors import ApiError, CredentialsMissing, InvalidToken, MalformedResponse
from ..core.http import HttpClient
from ..core.lrc import LyricLine, parse_lyrics
from ..core.tokens import Credentials, LyricsToken
from ..core.totp import TimeCodeGenerator
from .base import AuthPlugin

URL_AUTH = "https://open.spotify.com/get_access_token"
URL_LYRICS = "https://spclient.wg.spotify.com/color-lyrics/v2/track"
LYRICS_QUERY = {"format": "json", "vocalRemoval": "false", "market": "from_token"}
DEFAULT_USER_AGENT = "curl/8.5.0"

PROVIDER = "web_player"
logger = logging.getLogger(__name__)


class LyricsSession:
    """Authenticated handle for lyrics calls."""

    def __init__(self, access_token: str, http: HttpClient, user_agent: str = DEFAULT_USER_AGENT) -> None:
        self.access_token = access_token
        self.http = http
        self.user_agent = user_agent

    def __repr__(self) -> str:
        return "LyricsSession(access_token=***)"

    async def fetch_lyrics(self, track_id: str) -> List[LyricLine]:
        resp = await self.http.request(
            "GET",
            f"{URL_LYRICS}/{track_id}",
            params=LYRICS_QUERY,
            headers={
                "Authorization": f"Bearer {self.access_token}",
                "User-Agent": self.user_agent,
                "app-platform": "WebPlayer",
            },
        )
        if not resp.ok:
            raise ApiError(PROVIDER, resp.status, resp.text)
        try:
            payload = resp.json()
        except json.JSONDecodeError as e:
            raise MalformedResponse(PROVIDER, f"Failed to parse lyrics response: {e}") from e
        return parse_lyrics(payload, provider=PROVIDER)


class LyricsAuth(AuthPlugin):
    name = PROVIDER

    def __init__(
        self,
        http: HttpClient,
        totp: TimeCodeGenerator,
        *,
        user_agent: str = DEFAULT_USER_AGENT,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.http = http
        self.totp = totp
        self.user_agent = user_agent
        self.clock = clock

    async def authenticate(self, credentials: Credentials) -> LyricsToken:
        if not credentials.sp_dc:
            raise CredentialsMissing("sp_dc")

        ts = int(self.clock())
        params = {
            "reason": "transport",
            "productType": "web_player",
            "totpVer": str(self.totp.version),
            "totp": self.totp.generate(ts),
            "ts": str(ts),
        }
        resp = await self.http.request(
            "GET",
            URL_AUTH,
            params=params,
            headers={"Cookie": f"sp_dc={credentials.sp_dc}", "User-Agent": self.user_agent},
        )
        if not resp.ok:
            logger.debug("Token request rejected", extra={"provider": PROVIDER, "status": resp.status})
            raise InvalidToken(PROVIDER, "'sp_dc' may be invalid")
        try:
            token = LyricsToken.model_validate_json(resp.text)
        except ValidationError as e:
            raise MalformedResponse(PROVIDER, f"Failed to parse token response: {resp.text}") from e
        if token.is_anonymous:
            raise InvalidToken(PROVIDER, "'sp_dc' may be invalid (anonymous session issued)")
        return token

    def as_session(self, access_token: str) -> LyricsSession:
        return LyricsSession(access_token, self.http, self.user_agent)
