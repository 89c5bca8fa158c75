"""Chunk worker: fetch, verify and persist a single chunk job."""

import asyncio
import typing as t

import aiohttp

from ..domain.chunks import ChunkJob, ChunkResult, FetchedChunk
from ..domain.exceptions import (
    IncompleteChunkError,
    InvalidContentRangeError,
    ResourceChangedError,
    UnexpectedStatusError,
)
from ..events import BaseEmitter, ChunkCompletedEvent, ChunkFailedEvent, NullEmitter
from ..infrastructure.logging import get_logger
from .fetcher import RangeFetcher
from .identity import IdentityVerifier
from .writer import PositionalWriter

if t.TYPE_CHECKING:
    import loguru


class ChunkWorker:
    """Processes one chunk job at a time for a single download.

    One worker instance is shared by every task of a pool: it holds no
    per-job state, only the collaborators for this download (fetcher,
    verifier and writer).

    Implementation decisions:
    - ``process`` never raises for job failures; it returns a ChunkResult
      carrying the error so the pool sees exactly one result per job
    - errors are logged with a category prefix before being reported
    - CancelledError is re-raised untouched so pool cancellation works
    """

    def __init__(
        self,
        fetcher: RangeFetcher,
        verifier: IdentityVerifier,
        writer: PositionalWriter,
        logger: "loguru.Logger" = get_logger(__name__),
        emitter: BaseEmitter | None = None,
    ) -> None:
        self.fetcher = fetcher
        self.verifier = verifier
        self.writer = writer
        self.logger = logger
        self._emitter = emitter or NullEmitter()

    @property
    def emitter(self) -> BaseEmitter:
        """Event emitter for chunk.completed / chunk.failed events."""
        return self._emitter

    async def process(
        self, url: str, job: ChunkJob, prefetched: FetchedChunk | None = None
    ) -> ChunkResult:
        """Fetch (unless ``prefetched``), verify and write ``job``.

        Args:
            url: Resource URL.
            job: The span to process.
            prefetched: Response already obtained for this job (the discovery
                chunk); it is verified and written without another request.

        Returns:
            A successful ChunkResult, or one whose ``error`` is the cause.
        """
        try:
            chunk = prefetched or await self.fetcher.fetch(url, job)
            self.verifier.verify(job.offset, chunk.identity_tag)
            await self.writer.write(job.offset, chunk.payload)
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            self._log_and_categorize_error(exc, url, job)
            await self.emitter.emit(
                "chunk.failed",
                ChunkFailedEvent(
                    url=url,
                    offset=job.offset,
                    error_message=str(exc),
                    error_type=type(exc).__name__,
                ),
            )
            return ChunkResult(offset=job.offset, error=exc)

        await self.emitter.emit(
            "chunk.completed",
            ChunkCompletedEvent(url=url, offset=job.offset, length=len(chunk.payload)),
        )
        return ChunkResult(
            offset=job.offset,
            payload=chunk.payload,
            identity_tag=chunk.identity_tag,
        )

    def _log_and_categorize_error(
        self, exception: Exception, url: str, job: ChunkJob
    ) -> None:
        """Log a chunk failure with a category describing where it happened."""
        match exception:
            # Transport - no usable response
            case aiohttp.ClientSSLError():
                error_category = "SSL/TLS error fetching"
            case aiohttp.ClientConnectorError():
                error_category = "Failed to connect for"
            case aiohttp.ClientPayloadError():
                error_category = "Invalid response payload for"
            case aiohttp.ClientError():
                error_category = "Network error fetching"
            case asyncio.TimeoutError():
                error_category = "Timeout fetching"

            # Server answered, but not with the requested bytes
            case UnexpectedStatusError():
                error_category = f"HTTP {exception.status} for"
            case IncompleteChunkError() | InvalidContentRangeError():
                error_category = "Malformed partial response for"

            # Resource changed between chunks
            case ResourceChangedError():
                error_category = "Resource changed while fetching"

            # Sink rejected the write
            case OSError():
                error_category = "Write failed for"

            case _:
                error_category = "Unexpected error processing"
                self.logger.debug(
                    f"Uncaught exception of type {type(exception).__name__}: {exception}"
                )

        self.logger.error(
            f"{error_category} chunk at offset {job.offset} "
            f"({job.range_header}) of {url}: {exception}"
        )
