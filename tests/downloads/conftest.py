"""Fixtures for chunked download tests."""

import ssl
import typing as t

import pytest
import pytest_asyncio
from aiohttp import web

from chunkget.downloads import (
    ChunkClient,
    ChunkWorker,
    IdentityVerifier,
    MemorySink,
    PositionalWriter,
    RangeFetcher,
)
from tests.fixtures.range_server import RangeServerConfig, StartServer, make_range_app


@pytest_asyncio.fixture
async def range_server() -> t.AsyncIterator[StartServer]:
    """Factory fixture starting range servers; yields ``start(config, ssl_context)``.

    ``start`` returns the server's base URL. All servers are stopped at
    teardown.
    """
    runners: list[web.AppRunner] = []

    async def _start(
        config: RangeServerConfig | None = None,
        ssl_context: ssl.SSLContext | None = None,
    ) -> str:
        runner = web.AppRunner(make_range_app(config or RangeServerConfig()))
        await runner.setup()
        runners.append(runner)
        site = web.TCPSite(runner, "127.0.0.1", 0, ssl_context=ssl_context)
        await site.start()
        port = runner.addresses[0][1]
        scheme = "https" if ssl_context is not None else "http"
        return f"{scheme}://127.0.0.1:{port}"

    yield _start

    for runner in runners:
        await runner.cleanup()


@pytest.fixture
def memory_sink() -> MemorySink:
    return MemorySink()


@pytest.fixture
def make_chunk_client(aio_client, mock_logger):
    """Factory fixture creating ChunkClients on the shared session."""

    def _make(**kwargs: t.Any) -> ChunkClient:
        kwargs.setdefault("workers", 8)
        kwargs.setdefault("chunk_size", 256)
        kwargs.setdefault("logger", mock_logger)
        return ChunkClient(aio_client, **kwargs)

    return _make


@pytest.fixture
def make_worker(aio_client, mock_logger, memory_sink):
    """Factory fixture creating a ChunkWorker writing to ``memory_sink``."""

    def _make(
        verify_etag: bool = False, emitter=None, sink=None, fetcher=None
    ) -> ChunkWorker:
        return ChunkWorker(
            fetcher=fetcher or RangeFetcher(aio_client, logger=mock_logger),
            verifier=IdentityVerifier(enabled=verify_etag),
            writer=PositionalWriter(sink or memory_sink, logger=mock_logger),
            logger=mock_logger,
            emitter=emitter,
        )

    return _make
