"""In-process FIFO channel of pending job IDs."""
from __future__ import annotations

import asyncio
import logging

logger = logging.getLogger(__name__)


class QueueUnavailableError(Exception):
    """Raised when work is submitted to a queue that no longer accepts it."""


class JobQueueFullError(Exception):
    """Raised when the job queue is at capacity."""


class JobQueue:
    """FIFO queue of job IDs shared by submitters and workers.

    Only the job ID travels through the queue; workers re-read the record
    from the store.  Producers and consumers are tasks on the same event
    loop, and ``asyncio.Queue`` hands each item to exactly one ``get()``.
    """

    def __init__(self, max_size: int = 0) -> None:
        self._queue: asyncio.Queue[str] = asyncio.Queue(maxsize=max_size)
        self._max_size = max_size
        self._closed = False

    @property
    def depth(self) -> int:
        """Number of job IDs waiting to be picked up."""
        return self._queue.qsize()

    @property
    def closed(self) -> bool:
        return self._closed

    async def enqueue(self, job_id: str) -> None:
        """Append *job_id* to the tail without waiting.

        Raises
        ------
        QueueUnavailableError
            If the queue has been closed.
        JobQueueFullError
            If a bounded queue is at ``max_size``.
        """
        if self._closed:
            raise QueueUnavailableError("Job queue is not accepting work")
        try:
            self._queue.put_nowait(job_id)
        except asyncio.QueueFull:
            raise JobQueueFullError(
                f"Job queue full. {self._max_size} jobs pending. Try again later."
            ) from None
        logger.debug("Enqueued job %s (depth=%d)", job_id, self._queue.qsize())

    async def dequeue(self) -> str:
        """Wait until a job ID is available and return it."""
        return await self._queue.get()

    def task_done(self) -> None:
        self._queue.task_done()

    async def join(self) -> None:
        """Wait until every enqueued job ID has been processed."""
        await self._queue.join()

    def close(self) -> None:
        """Stop accepting new work.  Items already queued can still be drained."""
        self._closed = True
