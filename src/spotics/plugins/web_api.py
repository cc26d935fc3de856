"""
Catalog provider (Spotify Web API).

Authenticates with the client-credentials grant and searches the track
catalog with the resulting bearer token.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import List

from pydantic import ValidationError

from ..core.errors import (
    ApiError,
    CredentialsMissing,
    InvalidToken,
    MalformedResponse,
)
from ..core.http import HttpClient
from ..core.tokens import CatalogToken, Credentials
from .base import AuthPlugin

URL_AUTH = "https://accounts.spotify.com/api/token"
URL_SEARCH = "https://api.spotify.com/v1/search"

PROVIDER = "web_api"
logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SearchQuery:
    title: str
    artist: str
    album: str

    def __str__(self) -> str:
        return f"{self.title} track:{self.title} artist:{self.artist} album:{self.album}"


@dataclass(frozen=True)
class TrackInfo:
    id: str
    title: str
    artist: str
    album: str

    def __str__(self) -> str:
        return f'Title: "{self.title}",  Artist: "{self.artist}",  Album: "{self.album}"'

    @classmethod
    def from_json(cls, item: dict) -> "TrackInfo":
        try:
            return cls(
                id=str(item["id"]),
                title=str(item["name"]),
                artist=str(item["artists"][0]["name"]),
                album=str(item["album"]["name"]),
            )
        except (KeyError, IndexError, TypeError) as e:
            raise MalformedResponse(PROVIDER, f"Unexpected track object: {e!r}") from e


class CatalogSession:
    """Authenticated handle for catalog calls."""

    def __init__(self, access_token: str, http: HttpClient) -> None:
        self.access_token = access_token
        self.http = http

    def __repr__(self) -> str:
        return "CatalogSession(access_token=***)"

    async def search(self, query: SearchQuery) -> List[TrackInfo]:
        resp = await self.http.request(
            "GET",
            URL_SEARCH,
            params={"q": str(query), "type": "track"},
            headers={"Authorization": f"Bearer {self.access_token}"},
        )
        if not resp.ok:
            raise ApiError(PROVIDER, resp.status, resp.text)
        try:
            items = resp.json()["tracks"]["items"]
        except (json.JSONDecodeError, KeyError, TypeError) as e:
            raise MalformedResponse(PROVIDER, "Search response has no tracks.items") from e
        if not isinstance(items, list):
            raise MalformedResponse(PROVIDER, "Search response tracks.items is not a list")
        tracks = [TrackInfo.from_json(item) for item in items]
        logger.debug("Search %r returned %d tracks", str(query), len(tracks))
        return tracks


class CatalogAuth(AuthPlugin):
    name = PROVIDER

    def __init__(self, http: HttpClient) -> None:
        self.http = http

    async def authenticate(self, credentials: Credentials) -> CatalogToken:
        missing = [f for f in ("client_id", "client_secret") if not getattr(credentials, f)]
        if missing:
            raise CredentialsMissing(*missing)

        resp = await self.http.request(
            "POST",
            URL_AUTH,
            data={
                "grant_type": "client_credentials",
                "client_id": credentials.client_id,
                "client_secret": credentials.client_secret,
            },
            headers={"Content-Type": "application/x-www-form-urlencoded"},
        )
        if not resp.ok:
            logger.debug("Token request rejected", extra={"provider": PROVIDER, "status": resp.status})
            raise InvalidToken(PROVIDER, "'client_id' or 'client_secret' may be invalid")
        try:
            return CatalogToken.model_validate_json(resp.text)
        except ValidationError as e:
            raise MalformedResponse(PROVIDER, f"Failed to parse token response: {resp.text}") from e

    def as_session(self, access_token: str) -> CatalogSession:
        return CatalogSession(access_token, self.http)
