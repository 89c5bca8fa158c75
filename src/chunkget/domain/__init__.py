"""Domain models - chunk planning, content ranges, checksums and errors."""

from .chunks import (
    ChunkJob,
    ChunkResult,
    ContentRange,
    FetchedChunk,
    parse_content_range,
    plan_chunks,
)
from .hash_validation import HashAlgorithm, HashConfig

__all__ = [
    "ChunkJob",
    "ChunkResult",
    "ContentRange",
    "FetchedChunk",
    "parse_content_range",
    "plan_chunks",
    "HashAlgorithm",
    "HashConfig",
]
