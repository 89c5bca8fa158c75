"""Job queue handing each planned chunk to exactly one worker."""

import asyncio
import typing as t

from ..domain.chunks import ChunkJob
from ..infrastructure.logging import get_logger

if t.TYPE_CHECKING:
    import loguru


class ChunkQueue:
    """FIFO of chunk jobs for one download.

    All jobs are known up front, so workers take them without blocking:
    ``get_next`` returns None once the queue is exhausted, which is a
    worker's signal to exit. The underlying ``asyncio.Queue`` guarantees a
    job is returned to exactly one caller.
    """

    def __init__(
        self,
        jobs: t.Iterable[ChunkJob] = (),
        queue: asyncio.Queue[ChunkJob] | None = None,
        logger: t.Optional["loguru.Logger"] = None,
    ) -> None:
        """Initialise the queue.

        Args:
            jobs: Jobs to enqueue, in dispatch order (ascending offset).
            queue: Optional asyncio.Queue instance for dependency injection.
            logger: Logger instance. If None, a default logger is created.
        """
        self._queue: asyncio.Queue[ChunkJob] = queue or asyncio.Queue()
        self._logger = logger or get_logger(__name__)
        for job in jobs:
            self._queue.put_nowait(job)

    def get_next(self) -> ChunkJob | None:
        """Claim the next job, or None if none remain."""
        try:
            job = self._queue.get_nowait()
        except asyncio.QueueEmpty:
            return None
        self._logger.trace(f"Dispatching chunk at offset {job.offset}")
        return job
