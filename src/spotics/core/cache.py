"""
Per-provider token cache coordination.

For each provider: load the cached entry, reuse it while it has not expired,
otherwise authenticate and persist the new entry before handing out a
session. The two providers run as independent tasks. A failure in one branch
never cancels the other, so a successful refresh is persisted even when the
overall call reports an error.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Tuple

from ..plugins.base import AuthPlugin
from ..plugins.web_api import CatalogAuth, CatalogSession
from ..plugins.web_player import LyricsAuth, LyricsSession
from .config import SpoticsSettings
from .errors import SessionAcquisitionError, SpoticsError
from .http import HttpClient
from .token_store import TokenStore
from .tokens import CacheEntry, Credentials, utcnow
from .totp import TimeCodeGenerator

logger = logging.getLogger(__name__)


class CacheCoordinator:
    def __init__(
        self,
        catalog: AuthPlugin,
        catalog_store: TokenStore[CacheEntry],
        lyrics: AuthPlugin,
        lyrics_store: TokenStore[CacheEntry],
        *,
        clock: Callable[[], Any] = utcnow,
    ) -> None:
        self.catalog = catalog
        self.catalog_store = catalog_store
        self.lyrics = lyrics
        self.lyrics_store = lyrics_store
        self.clock = clock

    async def _acquire(
        self, plugin: AuthPlugin, store: TokenStore[CacheEntry], credentials: Credentials
    ):
        cache = await store.load()
        if cache is not None and not cache.is_expired(self.clock()):
            logger.debug("Reusing cached token", extra={"provider": plugin.name})
            return plugin.as_session(cache.access_token)

        logger.info(
            "Refreshing %s token (%s)",
            plugin.name,
            "no cache" if cache is None else "expired",
            extra={"provider": plugin.name},
        )
        token = await plugin.authenticate(credentials)
        entry = token.to_cache_entry(self.clock())
        await store.save(entry)
        logger.debug(
            "Cached token until %s", entry.expires_at.isoformat(), extra={"provider": plugin.name}
        )
        return plugin.as_session(entry.access_token)

    async def acquire_sessions(
        self, credentials: Credentials
    ) -> Tuple[CatalogSession, LyricsSession]:
        """Return a (catalog, lyrics) session pair.

        Raises `SessionAcquisitionError` after both branches have finished if
        either failed. Unexpected (non-spotics) exceptions propagate as-is.
        """
        branches = (
            (self.catalog.name, self._acquire(self.catalog, self.catalog_store, credentials)),
            (self.lyrics.name, self._acquire(self.lyrics, self.lyrics_store, credentials)),
        )
        results = await asyncio.gather(*(coro for _, coro in branches), return_exceptions=True)

        errors: dict[str, BaseException] = {}
        for (name, _), result in zip(branches, results):
            if isinstance(result, SpoticsError):
                logger.debug("Branch failed: %s", result, extra={"provider": name})
                errors[name] = result
            elif isinstance(result, BaseException):
                raise result
        if errors:
            raise SessionAcquisitionError(errors)

        catalog_session, lyrics_session = results
        return catalog_session, lyrics_session


def build_coordinator(
    settings: SpoticsSettings, catalog_http: HttpClient, lyrics_http: HttpClient
) -> CacheCoordinator:
    """Wire both providers and their cache files from settings."""
    totp = TimeCodeGenerator(settings.totp_secret, settings.totp_version)
    return CacheCoordinator(
        CatalogAuth(catalog_http),
        TokenStore(settings.catalog_cache_path, CacheEntry),
        LyricsAuth(lyrics_http, totp, user_agent=settings.user_agent),
        TokenStore(settings.lyrics_cache_path, CacheEntry),
    )
