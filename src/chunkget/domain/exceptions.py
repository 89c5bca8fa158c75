"""Custom exceptions for chunkget."""

from pathlib import Path


class ChunkGetError(Exception):
    """Base exception for chunkget errors."""

    pass


class ClientNotInitialisedError(ChunkGetError):
    """Raised when the HTTP client is used outside its context manager."""

    pass


class InvalidContentRangeError(ChunkGetError):
    """Raised when a Content-Range header cannot be parsed."""

    def __init__(self, header: str) -> None:
        self.header = header
        super().__init__(f"Invalid Content-Range header: {header!r}")


class UnexpectedStatusError(ChunkGetError):
    """Raised when a range request is answered with anything but 206.

    A 200 means the server ignored the Range header; 4xx/5xx are server
    failures. Both are fatal for the chunk.
    """

    def __init__(
        self, *, status: int, offset: int, content_range: str | None = None
    ) -> None:
        self.status = status
        self.offset = offset
        self.content_range = content_range
        super().__init__(f"unexpected HTTP status {status} for range at {offset}")


class IncompleteChunkError(ChunkGetError):
    """Raised when a 206 body does not cover the requested span."""

    def __init__(self, *, offset: int, expected: int, actual: int) -> None:
        self.offset = offset
        self.expected = expected
        self.actual = actual
        super().__init__(f"expected {expected} bytes at {offset}, received {actual}")


class ResourceChangedError(ChunkGetError):
    """Raised when a chunk's ETag disagrees with the download's baseline.

    The resource was replaced on the server mid-download; stitching the
    chunks together would mix two versions of it.
    """

    def __init__(self, *, offset: int, expected_tag: str, actual_tag: str) -> None:
        self.offset = offset
        self.expected_tag = expected_tag
        self.actual_tag = actual_tag
        super().__init__(
            f"resource changed during download: ETag {actual_tag!r} "
            f"does not match {expected_tag!r}"
        )


class ChunkError(ChunkGetError):
    """A failure localised to the chunk starting at ``offset``.

    This is the single error ``ChunkClient.get_file`` reports. The underlying
    cause (network, status, consistency or write failure) is kept in
    ``cause`` and chained as ``__cause__``.
    """

    def __init__(self, offset: int, cause: BaseException) -> None:
        self.offset = offset
        self.cause = cause
        super().__init__(f"chunk at offset {offset}: {cause}")


class DiscoveryError(ChunkError):
    """Raised when the initial size/identity request fails."""

    def __init__(self, cause: BaseException) -> None:
        super().__init__(0, cause)
        self.args = (f"size discovery failed for chunk at offset 0: {cause}",)


class FileValidationError(ChunkGetError):
    """Base exception for file validation failures."""

    pass


class FileAccessError(FileValidationError):
    """Raised when files cannot be accessed for validation."""

    pass


class HashMismatchError(FileValidationError):
    """Raised when calculated hash does not match expected value."""

    def __init__(
        self,
        *,
        expected_hash: str,
        actual_hash: str | None,
        file_path: Path,
    ) -> None:
        self.expected_hash = expected_hash
        self.actual_hash = actual_hash
        self.file_path = file_path
        message = (
            f"Hash mismatch for {file_path}: expected {expected_hash[:16]}..., "
            f"got {actual_hash[:16] if actual_hash else 'unknown'}..."
        )
        super().__init__(message)
