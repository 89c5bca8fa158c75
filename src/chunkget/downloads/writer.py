"""Positional Writer and destination sinks.

A sink accepts writes at explicit byte offsets. Chunks of one download never
overlap, so concurrent writes to a sink need no shared lock as long as each
individual write is positional (no shared file cursor).
"""

import asyncio
import os
import typing as t
from abc import ABC, abstractmethod
from pathlib import Path

from ..infrastructure.logging import get_logger

if t.TYPE_CHECKING:
    import loguru


class BaseSink(ABC):
    """Destination that supports concurrent positional writes."""

    @abstractmethod
    async def write_at(self, data: bytes, offset: int) -> None:
        """Write ``data`` starting at byte ``offset``.

        Bytes outside ``[offset, offset + len(data))`` are left untouched.

        Raises:
            OSError: If the underlying storage rejects the write.
        """


class FileSink(BaseSink):
    """Sink over an OS file descriptor using ``os.pwrite``.

    ``pwrite`` does not move the file position, so writes from several
    workers at disjoint offsets are safe without locking. Each write runs in
    a thread to keep disk I/O off the event loop.

    The caller owns the descriptor: ``FileSink(fd)`` never closes it. Use
    ``FileSink.open(path)`` when a sink should own its file, then ``close()``
    it (or use it as an async context manager).
    """

    def __init__(self, fd: int) -> None:
        self._fd = fd
        self._owns_fd = False

    @property
    def fd(self) -> int:
        return self._fd

    @classmethod
    async def open(cls, path: Path) -> "FileSink":
        """Create (or truncate) ``path`` and return a sink owning it."""
        fd = await asyncio.to_thread(
            os.open, path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o644
        )
        sink = cls(fd)
        sink._owns_fd = True
        return sink

    async def write_at(self, data: bytes, offset: int) -> None:
        await asyncio.to_thread(self._pwrite_all, data, offset)

    def _pwrite_all(self, data: bytes, offset: int) -> None:
        # pwrite may write fewer bytes than asked (e.g. signals, some NFS mounts)
        view = memoryview(data)
        while view:
            written = os.pwrite(self._fd, view, offset)
            if written == 0:
                raise OSError(f"pwrite wrote no bytes at offset {offset}")
            view = view[written:]
            offset += written

    async def close(self) -> None:
        if self._owns_fd:
            self._owns_fd = False
            await asyncio.to_thread(os.close, self._fd)

    async def __aenter__(self) -> "FileSink":
        return self

    async def __aexit__(self, *exc_info: t.Any) -> None:
        await self.close()


class MemorySink(BaseSink):
    """In-memory sink; grows to fit and zero-fills any gap."""

    def __init__(self) -> None:
        self._buffer = bytearray()

    def getvalue(self) -> bytes:
        return bytes(self._buffer)

    async def write_at(self, data: bytes, offset: int) -> None:
        end = offset + len(data)
        if end > len(self._buffer):
            self._buffer.extend(b"\x00" * (end - len(self._buffer)))
        self._buffer[offset:end] = data


class PositionalWriter:
    """Places each chunk's bytes at its offset in the destination sink."""

    def __init__(
        self,
        sink: BaseSink,
        logger: "loguru.Logger" = get_logger(__name__),
    ) -> None:
        self.sink = sink
        self.logger = logger

    async def write(self, offset: int, payload: bytes) -> None:
        """Write ``payload`` at ``offset``.

        Raises:
            OSError: Propagated from the sink; fatal for the chunk.
        """
        await self.sink.write_at(payload, offset)
        self.logger.trace(f"Wrote {len(payload)} bytes at offset {offset}")
