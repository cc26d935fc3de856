"""
Defines the capability interface shared by both provider plugins.

Each provider knows how to exchange long-lived credentials for an access
token and how to wrap an access token into a session that calls the
provider. Whether a cached token is still usable is decided by the cache
coordinator, never by a plugin.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Protocol

from ..core.tokens import CacheEntry, Credentials


class IssuedToken(Protocol):
    """An access token as issued by a provider, convertible to a cache entry."""

    def to_cache_entry(self, issued_at: datetime) -> CacheEntry: ...


class AuthPlugin(ABC):
    """An abstract base class that both provider plugins implement."""

    name: str

    @abstractmethod
    async def authenticate(self, credentials: Credentials) -> IssuedToken:
        """Perform one network exchange and return the issued token.

        Raises `CredentialsMissing` before any network call when the needed
        credentials are absent.
        """

    @abstractmethod
    def as_session(self, access_token: str) -> Any:
        """Wrap a currently valid access token into a provider session."""
