"""Submission and status operations over the job store and queue."""
from __future__ import annotations

import logging
from typing import List, Optional

from ..jobs.models import JobRecord, JobState
from ..jobs.queue import JobQueue, JobQueueFullError, QueueUnavailableError
from ..jobs.store import JobStore

logger = logging.getLogger(__name__)


class JobService:
    """Front door for export jobs.

    ``submit`` returns as soon as the record exists and its ID is queued;
    execution happens later on the worker pool.  ``status`` only reads.
    """

    def __init__(self, store: JobStore, queue: JobQueue) -> None:
        self._store = store
        self._queue = queue

    async def submit(self) -> JobRecord:
        """Create a pending job and queue it for execution.

        The record is committed before the ID is queued, so a status read
        issued right after this returns always finds it.  If the queue
        refuses the ID, the record is removed again and the error is
        re-raised.
        """
        rec = await self._store.create_job()
        try:
            await self._queue.enqueue(rec.id)
        except (QueueUnavailableError, JobQueueFullError) as exc:
            logger.warning("Could not queue job %s: %s", rec.id, exc)
            await self._store.delete_job(rec.id)
            raise
        logger.info("Submitted job %s", rec.id)
        return rec

    async def status(self, job_id: str) -> JobRecord:
        """Return the current record for *job_id* (raises ``JobNotFoundError``)."""
        return await self._store.get_job(job_id)

    async def list_jobs(self, limit: int = 50, state: Optional[JobState] = None) -> List[JobRecord]:
        return await self._store.list_jobs(limit=limit, state=state)

    async def delete(self, job_id: str) -> None:
        """Remove a job record.  A worker that later finishes it logs and moves on."""
        await self._store.delete_job(job_id)
        logger.info("Deleted job %s", job_id)
