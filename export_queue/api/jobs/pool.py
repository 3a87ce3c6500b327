"""Fixed-size pool of async workers draining the job queue."""
from __future__ import annotations

import asyncio
import inspect
import logging
import time
from typing import Any, List, Optional, Protocol

from .models import FailurePolicy
from .queue import JobQueue
from .store import JobNotFoundError, JobStore

logger = logging.getLogger(__name__)


class Computation(Protocol):
    """The unit of work a worker runs for a job.

    ``execute`` may be a plain function (run in a worker thread) or a
    coroutine function (awaited on the event loop).  Raising marks the
    execution as failed.
    """

    def execute(self, job_id: str) -> Any: ...


class ExecutionFailure(Exception):
    """A computation raised while executing a job."""

    def __init__(self, job_id: str, cause: BaseException) -> None:
        super().__init__(f"{type(cause).__name__}: {cause}")
        self.job_id = job_id
        self.cause = cause


class WorkerPool:
    """Runs ``worker_count`` independent loops: dequeue, execute, record outcome.

    Each job ID is delivered to exactly one worker by the queue.  A failure
    while executing one job is contained to that job; the worker moves on
    to the next item.
    """

    def __init__(
        self,
        store: JobStore,
        queue: JobQueue,
        computation: Computation,
        worker_count: int = 1,
        failure_policy: FailurePolicy = FailurePolicy.failed,
    ) -> None:
        if worker_count < 1:
            raise ValueError(f"worker_count must be >= 1, got {worker_count}")
        self._store = store
        self._queue = queue
        self._computation = computation
        self._worker_count = worker_count
        self._failure_policy = FailurePolicy(failure_policy)
        self._tasks: List[asyncio.Task] = []
        self._stopping = False

    @property
    def worker_count(self) -> int:
        return self._worker_count

    @property
    def failure_policy(self) -> FailurePolicy:
        return self._failure_policy

    @property
    def running(self) -> bool:
        return any(not t.done() for t in self._tasks)

    @property
    def live_workers(self) -> int:
        """Number of worker tasks still alive."""
        return sum(1 for t in self._tasks if not t.done())

    # ── Lifecycle ────────────────────────────────────────────────────

    async def start(self) -> None:
        """Spawn the worker tasks.  Calling twice is a no-op."""
        if self.running:
            return
        self._stopping = False
        self._tasks = [
            asyncio.create_task(self._worker_loop(f"worker-{i + 1}"), name=f"export-worker-{i + 1}")
            for i in range(self._worker_count)
        ]
        logger.info(
            "Started %d worker(s) (failure_policy=%s)",
            self._worker_count, self._failure_policy.value,
        )

    async def stop(self) -> None:
        """Cancel all workers and wait for them to exit.

        A job that is mid-execution when this is called is abandoned and
        its record stays pending.
        """
        self._stopping = True
        for task in self._tasks:
            task.cancel()
        await asyncio.gather(*self._tasks, return_exceptions=True)
        self._tasks = []
        logger.info("All workers stopped")

    # ── Worker loop ──────────────────────────────────────────────────

    async def _worker_loop(self, name: str) -> None:
        while True:
            job_id = await self._queue.dequeue()
            try:
                await self._process(name, job_id)
            except asyncio.CancelledError:
                if self._stopping:
                    raise
                logger.exception("[%s] Stray cancellation while handling job %s", name, job_id)
            except Exception:  # noqa: BLE001
                logger.exception("[%s] Unexpected error while handling job %s", name, job_id)
            finally:
                self._queue.task_done()

    async def _process(self, name: str, job_id: str) -> None:
        logger.info("[%s] Executing job %s", name, job_id)
        t0 = time.monotonic()
        try:
            await self._execute(job_id)
        except ExecutionFailure as exc:
            elapsed = (time.monotonic() - t0) * 1000
            logger.error(
                "[%s] Job %s failed: %s", name, job_id, exc,
                exc_info=exc.cause,
                extra={"metrics": {"job_id": job_id, "elapsed_ms": elapsed, "outcome": "failed"}},
            )
            await self._record_failure(name, job_id, str(exc))
            return

        elapsed = (time.monotonic() - t0) * 1000
        try:
            await self._store.mark_complete(job_id)
        except JobNotFoundError:
            logger.warning("[%s] Job %s was deleted before it completed", name, job_id)
            return
        logger.info(
            "[%s] Job %s completed in %.0f ms", name, job_id, elapsed,
            extra={"metrics": {"job_id": job_id, "elapsed_ms": elapsed, "outcome": "complete"}},
        )

    async def _execute(self, job_id: str) -> Optional[Any]:
        execute = self._computation.execute
        try:
            if inspect.iscoroutinefunction(execute):
                return await execute(job_id)
            return await asyncio.to_thread(execute, job_id)
        except ExecutionFailure:
            raise
        except asyncio.CancelledError as exc:
            if self._stopping:
                raise
            raise ExecutionFailure(job_id, exc) from exc
        except BaseException as exc:  # noqa: BLE001
            # SystemExit or KeyboardInterrupt from a computation fails only its own job
            raise ExecutionFailure(job_id, exc) from exc

    async def _record_failure(self, name: str, job_id: str, error: str) -> None:
        if self._failure_policy is FailurePolicy.stall:
            logger.warning("[%s] Job %s left pending (failure_policy=stall)", name, job_id)
            return
        try:
            await self._store.mark_failed(job_id, error)
        except JobNotFoundError:
            logger.warning("[%s] Job %s was deleted before it failed", name, job_id)
