"""ChunkClient: the public entry point for chunked downloads.

This module provides the ChunkClient class which discovers a resource's size,
plans byte-range chunks and drives a worker pool that fetches them
concurrently into a positional sink.
"""

import time
import typing as t
from http import HTTPStatus

import aiohttp

from ..config.settings import DEFAULT_CHUNK_SIZE, DEFAULT_WORKERS
from ..domain.chunks import ChunkJob, FetchedChunk, parse_content_range, plan_chunks
from ..domain.exceptions import (
    ChunkError,
    DiscoveryError,
    InvalidContentRangeError,
    UnexpectedStatusError,
)
from ..events import (
    BaseEmitter,
    DownloadCompletedEvent,
    DownloadFailedEvent,
    DownloadStartedEvent,
    NullEmitter,
)
from ..infrastructure.logging import get_logger
from .fetcher import RangeFetcher
from .identity import IdentityVerifier
from .worker import ChunkWorker
from .worker_pool import ChunkWorkerPool
from .writer import BaseSink, PositionalWriter

if t.TYPE_CHECKING:
    import loguru


class ChunkClient:
    """Downloads one resource at a time as concurrent byte-range chunks.

    Configuration is fixed at construction; every ``get_file`` call builds a
    fresh queue, baseline identity and worker pool, so nothing carries over
    between calls.

    Usage:
        async with aiohttp.ClientSession() as session:
            client = ChunkClient(session, workers=8, chunk_size=1 << 20)
            async with await FileSink.open(Path("out.bin")) as sink:
                await client.get_file("https://example.com/big.iso", sink)
    """

    def __init__(
        self,
        client: aiohttp.ClientSession,
        *,
        workers: int = DEFAULT_WORKERS,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        verify_etag: bool = False,
        timeout: float | None = None,
        logger: "loguru.Logger" = get_logger(__name__),
        emitter: BaseEmitter | None = None,
    ) -> None:
        """Initialise the client.

        Args:
            client: HTTP session. TLS trust, pooling and redirects are its
                concern; the session is never closed here.
            workers: Concurrent chunk fetches. Values below 1 fall back to
                DEFAULT_WORKERS.
            chunk_size: Bytes per chunk (the last may be shorter). Values
                below 1 fall back to DEFAULT_CHUNK_SIZE.
            verify_etag: Fail if a chunk's ETag differs from the first one
                seen, i.e. the resource changed during the download.
            timeout: Optional per-request timeout in seconds.
            logger: Logger instance for recording download progress.
            emitter: Receives download.* and chunk.* events. Defaults to a
                NullEmitter.
        """
        self.client = client
        self.workers = workers if workers > 0 else DEFAULT_WORKERS
        self.chunk_size = chunk_size if chunk_size > 0 else DEFAULT_CHUNK_SIZE
        self.verify_etag = verify_etag
        self.timeout = timeout
        self.logger = logger
        self._emitter = emitter or NullEmitter()

    @property
    def emitter(self) -> BaseEmitter:
        return self._emitter

    def _create_fetcher(self) -> RangeFetcher:
        return RangeFetcher(self.client, logger=self.logger, timeout=self.timeout)

    async def get_chunk(
        self, url: str, offset: int, length: int | None = None
    ) -> FetchedChunk:
        """Fetch a single range of ``url`` starting at ``offset``.

        The span is ``length`` bytes (``chunk_size`` by default) and may come
        back shorter when it runs past the end of the resource.

        Raises:
            ValueError: If ``offset`` is negative or ``length`` is not positive.
            UnexpectedStatusError: If the server does not answer 206.
            IncompleteChunkError: If the body does not match the range.
            aiohttp.ClientError, asyncio.TimeoutError: Transport failures.
        """
        if offset < 0:
            raise ValueError(f"offset must be >= 0, got {offset}")
        if length is None:
            length = self.chunk_size
        elif length < 1:
            raise ValueError(f"length must be >= 1, got {length}")
        job = ChunkJob(offset=offset, length=length)
        return await self._create_fetcher().fetch(url, job, allow_short=True)

    async def get_file(self, url: str, sink: BaseSink) -> int:
        """Download ``url`` into ``sink``.

        Steps: discover size (and baseline ETag) with the first chunk, plan
        the rest, fetch everything on the worker pool and write each chunk at
        its offset.

        On failure the sink may hold a partial download; cleaning it up is
        the caller's job.

        Returns:
            Total bytes written.

        Raises:
            DiscoveryError: If the first request fails.
            ChunkError: For the first chunk that failed, naming its offset.
        """
        started = time.monotonic()
        verifier = IdentityVerifier(enabled=self.verify_etag)

        first = await self._discover(url)
        total_size = first.total_size if first is not None else 0
        jobs = plan_chunks(total_size, self.chunk_size)

        self.logger.debug(
            f"Downloading {url}: {total_size} bytes in {len(jobs)} chunks "
            f"of {self.chunk_size} with {self.workers} workers"
        )
        await self.emitter.emit(
            "download.started",
            DownloadStartedEvent(url=url, total_bytes=total_size, chunk_count=len(jobs)),
        )

        if first is not None:
            # Baseline comes from the discovery response
            verifier.verify(0, first.identity_tag)

        worker = ChunkWorker(
            fetcher=self._create_fetcher(),
            verifier=verifier,
            writer=PositionalWriter(sink, logger=self.logger),
            logger=self.logger,
            emitter=self.emitter,
        )
        pool = ChunkWorkerPool(worker, max_workers=self.workers, logger=self.logger)
        prefetched: dict[int, FetchedChunk] = {}
        if first is not None and len(first.payload) == jobs[0].length:
            prefetched[0] = first

        try:
            await pool.run(url, jobs, prefetched=prefetched)
        except ChunkError as exc:
            await self._emit_failed(url, exc)
            raise

        elapsed = time.monotonic() - started
        self.logger.debug(f"Downloaded {total_size} bytes from {url} in {elapsed:.2f}s")
        await self.emitter.emit(
            "download.completed",
            DownloadCompletedEvent(
                url=url, total_bytes=total_size, elapsed_seconds=elapsed
            ),
        )
        return total_size

    async def _discover(self, url: str) -> FetchedChunk | None:
        """Fetch the first chunk and learn the total size from it.

        Returns None for an empty resource, which servers report as 416 with
        ``Content-Range: bytes */0``.

        Raises:
            DiscoveryError: Wrapping any failure of the first request.
        """
        try:
            first = await self.get_chunk(url, 0)
        except UnexpectedStatusError as exc:
            if _is_empty_resource(exc):
                self.logger.debug(f"{url} is empty, nothing to download")
                return None
            error = DiscoveryError(exc)
        except Exception as exc:
            error = DiscoveryError(exc)
        else:
            if first.total_size is not None:
                return first
            header = str(first.content_range) if first.content_range else ""
            error = DiscoveryError(InvalidContentRangeError(header))

        self.logger.error(f"Failed to download {url}: {error}")
        await self._emit_failed(url, error)
        raise error from error.cause

    async def _emit_failed(self, url: str, error: ChunkError) -> None:
        cause = error.cause
        await self.emitter.emit(
            "download.failed",
            DownloadFailedEvent(
                url=url,
                offset=error.offset,
                error_message=str(error),
                error_type=type(cause).__name__,
            ),
        )


def _is_empty_resource(error: UnexpectedStatusError) -> bool:
    """True for a 416 whose Content-Range reports a total size of zero."""
    if error.status != HTTPStatus.REQUESTED_RANGE_NOT_SATISFIABLE:
        return False
    if not error.content_range:
        return False
    try:
        return parse_content_range(error.content_range).total == 0
    except InvalidContentRangeError:
        return False
