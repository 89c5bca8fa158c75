"""Owned-or-borrowed aiohttp session wrapper."""

import ssl
import typing as t

import aiohttp

from ...domain.exceptions import ClientNotInitialisedError
from .factories import create_secure_connector


class AiohttpClient:
    """Async context manager around an ``aiohttp.ClientSession``.

    If a session is provided it is borrowed and never closed here; otherwise
    a session is created on ``open()`` with a connector built from
    ``ssl_context`` (certifi trust by default) and closed on ``close()``.

    Usage:
        async with AiohttpClient() as client:
            async with client.get(url, headers={"Range": "bytes=0-9"}) as resp:
                ...
    """

    def __init__(
        self,
        session: aiohttp.ClientSession | None = None,
        *,
        ssl_context: ssl.SSLContext | None = None,
        connector_limit: int = 100,
    ) -> None:
        self._session = session
        self._owns_session = session is None
        self._ssl_context = ssl_context
        self._connector_limit = connector_limit

    @property
    def session(self) -> aiohttp.ClientSession:
        if self._session is None:
            raise ClientNotInitialisedError(
                "HTTP client not initialised; use it as an async context manager"
            )
        return self._session

    @property
    def closed(self) -> bool:
        return self._session is None or self._session.closed

    async def open(self) -> None:
        """Create the session if needed. Idempotent."""
        if self._session is None:
            connector = create_secure_connector(
                ssl=self._ssl_context, limit=self._connector_limit
            )
            self._session = aiohttp.ClientSession(connector=connector)

    async def close(self) -> None:
        if self._owns_session and self._session is not None:
            await self._session.close()

    def get(self, url: str, **kwargs: t.Any) -> t.Any:
        """Issue a GET on the underlying session (returns aiohttp's request
        context manager)."""
        return self.session.get(url, **kwargs)

    async def __aenter__(self) -> "AiohttpClient":
        await self.open()
        return self

    async def __aexit__(self, *exc_info: t.Any) -> None:
        await self.close()
