"""Range Fetcher: one GET with a Range header, validated as 206 Partial Content."""

import typing as t
from http import HTTPStatus

import aiohttp

from ..domain.chunks import ChunkJob, FetchedChunk, parse_content_range
from ..domain.exceptions import IncompleteChunkError, UnexpectedStatusError
from ..infrastructure.logging import get_logger

if t.TYPE_CHECKING:
    import loguru


class RangeFetcher:
    """Fetches single byte spans of a remote resource.

    The whole body is buffered, so memory use is bounded by
    ``workers * chunk_size``. There are no retries here; retry behaviour, if
    any, belongs to the injected session.
    """

    def __init__(
        self,
        client: aiohttp.ClientSession,
        logger: "loguru.Logger" = get_logger(__name__),
        timeout: float | None = None,
    ) -> None:
        """Initialise the fetcher.

        Args:
            client: Session used for all requests. TLS, pooling and redirect
                policy are configured by whoever created it.
            logger: Logger for request tracing.
            timeout: Optional total timeout per request, in seconds.
        """
        self.client = client
        self.logger = logger
        self._timeout = (
            aiohttp.ClientTimeout(total=timeout) if timeout is not None else None
        )

    async def fetch(
        self, url: str, job: ChunkJob, *, allow_short: bool = False
    ) -> FetchedChunk:
        """Fetch ``job``'s span of ``url``.

        With ``allow_short`` the server may return fewer bytes than requested
        (a span running past the end of the resource); the body must still
        match the Content-Range the server reports.

        Raises:
            UnexpectedStatusError: If the status is not 206 (a 200 means the
                server ignored the Range header).
            IncompleteChunkError: If the body does not match the range the
                server claims to have returned, or starts at another offset.
            InvalidContentRangeError: If Content-Range is malformed.
            aiohttp.ClientError, asyncio.TimeoutError: Transport failures.
        """
        headers = {aiohttp.hdrs.RANGE: job.range_header}
        kwargs: dict[str, t.Any] = {"headers": headers}
        if self._timeout is not None:
            kwargs["timeout"] = self._timeout

        self.logger.trace(f"GET {url} Range: {job.range_header}")
        async with self.client.get(url, **kwargs) as response:
            raw_range = response.headers.get(aiohttp.hdrs.CONTENT_RANGE)
            if response.status != HTTPStatus.PARTIAL_CONTENT:
                raise UnexpectedStatusError(
                    status=response.status,
                    offset=job.offset,
                    content_range=raw_range,
                )

            payload = await response.read()
            identity_tag = response.headers.get(aiohttp.hdrs.ETAG)

        content_range = parse_content_range(raw_range) if raw_range else None
        expected = job.length
        if allow_short and content_range is not None:
            expected = min(job.length, content_range.length)

        misaligned = content_range is not None and content_range.start != job.offset
        if misaligned or len(payload) != expected:
            raise IncompleteChunkError(
                offset=job.offset, expected=expected, actual=len(payload)
            )

        return FetchedChunk(
            offset=job.offset,
            status=response.status,
            payload=payload,
            identity_tag=identity_tag,
            content_range=content_range,
        )
