"""Chunked download engine - planner, fetcher, verifier, pool and writer."""

from ..domain.exceptions import FileAccessError, FileValidationError, HashMismatchError
from .client import ChunkClient
from .fetcher import RangeFetcher
from .identity import IdentityVerifier
from .queue import ChunkQueue
from .validation import BaseFileValidator, FileValidator
from .worker import ChunkWorker
from .worker_pool import ChunkWorkerPool
from .writer import BaseSink, FileSink, MemorySink, PositionalWriter

__all__ = [
    # Core
    "ChunkClient",
    "ChunkWorker",
    "ChunkWorkerPool",
    "ChunkQueue",
    "RangeFetcher",
    "IdentityVerifier",
    # Sinks
    "BaseSink",
    "FileSink",
    "MemorySink",
    "PositionalWriter",
    # Validation
    "BaseFileValidator",
    "FileValidator",
    "FileValidationError",
    "FileAccessError",
    "HashMismatchError",
]
