"""
Thin async HTTP transport over aiohttp.

Providers only need "send a request, get status and body back". Keeping that
behind `HttpClient` lets each provider own a separate connection pool and
lets tests substitute a scripted client.
"""

from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional

import aiohttp

from .errors import TransportFailure

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HttpResponse:
    status: int
    text: str

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    def json(self) -> Any:
        return json.loads(self.text)


class HttpClient:
    """Async context manager owning one `aiohttp.ClientSession`."""

    def __init__(self, provider: str, *, timeout: float = 20.0) -> None:
        self.provider = provider
        self.timeout = timeout
        self.session: aiohttp.ClientSession | None = None

    async def __aenter__(self) -> "HttpClient":
        self.session = aiohttp.ClientSession(
            timeout=aiohttp.ClientTimeout(total=self.timeout)
        )
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self.session:
            await self.session.close()
            self.session = None

    async def request(
        self,
        method: str,
        url: str,
        *,
        params: Optional[Mapping[str, Any]] = None,
        data: Optional[Mapping[str, Any]] = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> HttpResponse:
        if not self.session:
            raise RuntimeError("HttpClient must be used within an active session.")
        try:
            async with self.session.request(
                method, url, params=params, data=data, headers=headers
            ) as response:
                text = await response.text()
                logger.debug(
                    "%s %s -> %s", method, url, response.status, extra={"provider": self.provider}
                )
                return HttpResponse(response.status, text)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise TransportFailure(self.provider, f"Request to {url} failed: {e!r}") from e
