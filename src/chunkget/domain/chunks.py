"""Chunk planning and the value types that flow through a chunked download."""

import re
from dataclasses import dataclass
from typing import Final

from .exceptions import InvalidContentRangeError

_CONTENT_RANGE_PATTERN: Final = re.compile(
    r"^\s*bytes\s+(?:(?P<start>\d+)-(?P<end>\d+)|\*)/(?P<total>\d+|\*)\s*$",
    re.IGNORECASE,
)


@dataclass(frozen=True)
class ChunkJob:
    """A contiguous byte span ``[offset, offset + length)`` of the resource."""

    offset: int
    length: int

    @property
    def end(self) -> int:
        """Inclusive offset of the last byte in the span."""
        return self.offset + self.length - 1

    @property
    def range_header(self) -> str:
        return f"bytes={self.offset}-{self.end}"


@dataclass(frozen=True)
class ContentRange:
    """Parsed ``Content-Range`` response header.

    ``start``/``end`` are None for unsatisfied ranges (``bytes */total``);
    ``total`` is None when the server reports an unknown length (``*``).
    """

    start: int | None
    end: int | None
    total: int | None

    @property
    def length(self) -> int:
        if self.start is None or self.end is None:
            return 0
        return self.end - self.start + 1

    def __str__(self) -> str:
        total = "*" if self.total is None else self.total
        if self.start is None:
            return f"bytes */{total}"
        return f"bytes {self.start}-{self.end}/{total}"


@dataclass(frozen=True)
class FetchedChunk:
    """A validated 206 response for one range request, body fully read."""

    offset: int
    status: int
    payload: bytes
    identity_tag: str | None = None
    content_range: ContentRange | None = None

    @property
    def total_size(self) -> int | None:
        """Total resource size reported by the server, if any."""
        return self.content_range.total if self.content_range else None


@dataclass(frozen=True)
class ChunkResult:
    """Outcome of processing one job; exactly one is produced per job."""

    offset: int
    payload: bytes = b""
    identity_tag: str | None = None
    error: BaseException | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def parse_content_range(header: str) -> ContentRange:
    """Parse ``bytes start-end/total`` or ``bytes */total``.

    Raises:
        InvalidContentRangeError: If the header is malformed or ``end < start``.
    """
    match = _CONTENT_RANGE_PATTERN.match(header)
    if match is None:
        raise InvalidContentRangeError(header)

    total = None if match["total"] == "*" else int(match["total"])
    if match["start"] is None:
        return ContentRange(start=None, end=None, total=total)

    start, end = int(match["start"]), int(match["end"])
    if end < start or (total is not None and end >= total):
        raise InvalidContentRangeError(header)
    return ContentRange(start=start, end=end, total=total)


def plan_chunks(total_size: int, chunk_size: int) -> list[ChunkJob]:
    """Split ``[0, total_size)`` into consecutive spans of ``chunk_size`` bytes.

    The last span is truncated to the remainder. An empty resource yields no
    jobs.

    Raises:
        ValueError: If ``total_size`` is negative or ``chunk_size`` is not
            positive.
    """
    if total_size < 0:
        raise ValueError(f"total_size must be >= 0, got {total_size}")
    if chunk_size <= 0:
        raise ValueError(f"chunk_size must be > 0, got {chunk_size}")

    return [
        ChunkJob(offset=offset, length=min(chunk_size, total_size - offset))
        for offset in range(0, total_size, chunk_size)
    ]
