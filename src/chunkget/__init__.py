"""chunkget - parallel, chunked HTTP downloads over byte-range requests."""

from .domain.exceptions import (
    ChunkError,
    ChunkGetError,
    DiscoveryError,
    IncompleteChunkError,
    ResourceChangedError,
    UnexpectedStatusError,
)
from .downloads import ChunkClient, FileSink, MemorySink

__all__ = [
    "ChunkClient",
    "FileSink",
    "MemorySink",
    "ChunkGetError",
    "ChunkError",
    "DiscoveryError",
    "IncompleteChunkError",
    "ResourceChangedError",
    "UnexpectedStatusError",
]
