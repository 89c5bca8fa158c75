"""Fixed-size, fail-fast worker pool for the chunks of one download."""

import asyncio
import typing as t

from ..domain.chunks import ChunkJob, ChunkResult, FetchedChunk
from ..domain.exceptions import ChunkError
from ..infrastructure.logging import get_logger
from .queue import ChunkQueue
from .worker import ChunkWorker

if t.TYPE_CHECKING:
    from loguru import Logger


class ChunkWorkerPool:
    """Runs chunk jobs on ``max_workers`` concurrent tasks until done or failed.

    Each task pulls the next job from a shared ChunkQueue, runs the worker and
    puts exactly one ChunkResult on a results queue. ``run`` drains results
    until every job is accounted for or the first failure arrives.

    Implementation decisions:
    - Fail-fast is "stop dispatching": on the first failure the shutdown
      event is set, tasks finish the job they hold and exit before taking
      another. In-flight results are discarded.
    - The reported error is the first failure by arrival order, which is not
      necessarily the lowest offset.
    - Never more tasks than jobs; surplus workers would only idle.
    - If ``run`` itself is cancelled, worker tasks are cancelled too.
    - ``request_shutdown`` during ``run`` lets in-flight jobs finish; ``run``
      then returns with the remaining jobs unprocessed.

    Usage:
        pool = ChunkWorkerPool(worker=worker, max_workers=8)
        await pool.run(url, plan_chunks(total, chunk_size))
    """

    def __init__(
        self,
        worker: ChunkWorker,
        max_workers: int,
        logger: "Logger" = get_logger(__name__),
    ) -> None:
        """Initialise the pool.

        Args:
            worker: Worker shared by all tasks of this pool.
            max_workers: Number of concurrent tasks; must be positive.
            logger: Logger for pool lifecycle messages.
        """
        if max_workers < 1:
            raise ValueError(f"max_workers must be >= 1, got {max_workers}")
        self._worker = worker
        self._max_workers = max_workers
        self._logger = logger
        self._shutdown_event = asyncio.Event()
        self._worker_tasks: list[asyncio.Task[None]] = []

    @property
    def max_workers(self) -> int:
        return self._max_workers

    @property
    def active_tasks(self) -> tuple[asyncio.Task[None], ...]:
        """Snapshot of currently running worker tasks."""
        return tuple(self._worker_tasks)

    def request_shutdown(self) -> None:
        """Stop dispatching new jobs. Idempotent.

        A ``run`` in progress returns once the in-flight jobs finish.
        """
        self._shutdown_event.set()

    async def run(
        self,
        url: str,
        jobs: t.Sequence[ChunkJob],
        prefetched: t.Mapping[int, FetchedChunk] | None = None,
    ) -> None:
        """Process every job of ``url``.

        Args:
            url: Resource URL.
            jobs: Planned jobs in ascending offset order.
            prefetched: Already-fetched responses keyed by job offset.

        Raises:
            ChunkError: For the first job that failed, chained to its cause.
        """
        if not jobs:
            return

        self._shutdown_event.clear()
        queue = ChunkQueue(jobs, logger=self._logger)
        # None marks a task that has exited
        results: asyncio.Queue[ChunkResult | None] = asyncio.Queue()
        prefetched = prefetched or {}

        task_count = min(self._max_workers, len(jobs))
        self._logger.debug(
            f"Starting {task_count} workers for {len(jobs)} chunks of {url}"
        )
        self._worker_tasks = [
            asyncio.create_task(self._process_queue(url, queue, results, prefetched))
            for _ in range(task_count)
        ]

        failure: ChunkResult | None = None
        pending = len(jobs)
        running = task_count
        try:
            while pending and running:
                result = await results.get()
                if result is None:
                    running -= 1
                    continue
                pending -= 1
                if not result.ok:
                    failure = result
                    self.request_shutdown()
                    break
            # In-flight jobs finish; their results are dropped
            await self._wait_for_workers_and_clear()
        finally:
            if self._worker_tasks:
                await self.stop()

        if failure is None and pending:
            self._logger.debug(
                f"Shutdown requested, {pending} chunks of {url} left unprocessed"
            )
        if failure is not None:
            assert failure.error is not None
            raise ChunkError(failure.offset, failure.error) from failure.error

    async def stop(self) -> None:
        """Cancel all worker tasks and wait for them to finish cancelling."""
        for task in self._worker_tasks:
            task.cancel()
        await self._wait_for_workers_and_clear()

    async def _process_queue(
        self,
        url: str,
        queue: ChunkQueue,
        results: asyncio.Queue[ChunkResult | None],
        prefetched: t.Mapping[int, FetchedChunk],
    ) -> None:
        """Take jobs until the queue is exhausted or shutdown is requested."""
        while not self._shutdown_event.is_set():
            job = queue.get_next()
            if job is None:
                break
            try:
                result = await self._worker.process(
                    url, job, prefetched=prefetched.get(job.offset)
                )
            except asyncio.CancelledError:
                self._logger.debug("Worker cancelled, stopping immediately")
                raise
            except Exception as exc:
                # process() reports failures as results; this is a worker bug,
                # but the job must still produce a result or run() would hang
                self._logger.exception(f"Worker crashed on chunk at offset {job.offset}")
                result = ChunkResult(offset=job.offset, error=exc)
            if not result.ok:
                # Stop siblings from claiming more jobs before run() sees this
                self.request_shutdown()
            results.put_nowait(result)

        self._logger.trace("Worker exiting")
        results.put_nowait(None)

    async def _wait_for_workers_and_clear(self) -> None:
        if not self._worker_tasks:
            return
        await asyncio.gather(*self._worker_tasks, return_exceptions=True)
        self._worker_tasks.clear()
