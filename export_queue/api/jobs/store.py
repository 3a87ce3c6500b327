"""SQLite-backed persistence for job records."""
from __future__ import annotations

import asyncio
import logging
import uuid
from typing import List, Optional

import aiosqlite

from .models import JobRecord, JobState, utc_now_iso

logger = logging.getLogger(__name__)


class JobNotFoundError(Exception):
    """Requested job ID does not exist."""

    def __init__(self, job_id: str) -> None:
        super().__init__(f"Job '{job_id}' not found")
        self.job_id = job_id


class JobStore:
    """Async SQLite store for job lifecycle tracking.

    The store is the only writer of job state.  Terminal transitions are a
    compare-and-set on ``state = 'pending'`` so a completion signal delivered
    twice, or racing a failure, can never overwrite a terminal state.
    """

    def __init__(self, db_path: str = "export_jobs.db") -> None:
        self.db_path = db_path
        self._db: Optional[aiosqlite.Connection] = None
        self._init_lock = asyncio.Lock()

    async def initialize(self) -> None:
        """Create the jobs table if it doesn't exist."""
        async with self._init_lock:
            if self._db is not None:
                return
            db = await aiosqlite.connect(self.db_path)
            await db.execute("""
                CREATE TABLE IF NOT EXISTS jobs (
                    id TEXT PRIMARY KEY,
                    state TEXT NOT NULL DEFAULT 'pending',
                    created_at TEXT NOT NULL,
                    completed_at TEXT,
                    error TEXT
                )
            """)
            await db.commit()
            self._db = db

    async def close(self) -> None:
        if self._db:
            await self._db.close()
            self._db = None

    async def _conn(self) -> aiosqlite.Connection:
        if self._db is None:
            await self.initialize()
        return self._db

    # ── CRUD ─────────────────────────────────────────────────────────

    async def create_job(self) -> JobRecord:
        """Insert a new pending job and return its record."""
        db = await self._conn()
        rec = JobRecord(id=uuid.uuid4().hex[:12])
        await db.execute(
            "INSERT INTO jobs (id, state, created_at) VALUES (?,?,?)",
            (rec.id, rec.state.value, rec.created_at),
        )
        await db.commit()
        return rec

    async def get_job(self, job_id: str) -> JobRecord:
        """Fetch a single job by ID.

        Raises
        ------
        JobNotFoundError
            If no record has this ID.
        """
        db = await self._conn()
        async with db.execute("SELECT * FROM jobs WHERE id = ?", (job_id,)) as cur:
            row = await cur.fetchone()
            desc = cur.description
        if row is None:
            raise JobNotFoundError(job_id)
        return self._row_to_record(row, desc)

    async def list_jobs(self, limit: int = 50, state: JobState | None = None) -> List[JobRecord]:
        """List jobs ordered by creation time (newest first)."""
        db = await self._conn()
        if state is None:
            sql, args = "SELECT * FROM jobs ORDER BY created_at DESC, rowid DESC LIMIT ?", (limit,)
        else:
            sql = "SELECT * FROM jobs WHERE state = ? ORDER BY created_at DESC, rowid DESC LIMIT ?"
            args = (state.value, limit)
        async with db.execute(sql, args) as cur:
            rows = await cur.fetchall()
            desc = cur.description
        return [self._row_to_record(r, desc) for r in rows]

    async def pending_job_ids(self) -> List[str]:
        """IDs of every job still pending, oldest first."""
        db = await self._conn()
        async with db.execute(
            "SELECT id FROM jobs WHERE state = ? ORDER BY created_at ASC, rowid ASC",
            (JobState.pending.value,),
        ) as cur:
            rows = await cur.fetchall()
        return [r[0] for r in rows]

    async def delete_job(self, job_id: str) -> None:
        """Remove a job record."""
        db = await self._conn()
        cur = await db.execute("DELETE FROM jobs WHERE id = ?", (job_id,))
        await db.commit()
        if cur.rowcount == 0:
            raise JobNotFoundError(job_id)

    # ── Transitions ──────────────────────────────────────────────────

    async def mark_complete(self, job_id: str) -> bool:
        """Move a pending job to ``complete``.

        Idempotent: returns ``True`` if this call made the transition and
        ``False`` if the job was already terminal.
        """
        return await self._finish(job_id, JobState.complete)

    async def mark_failed(self, job_id: str, error: str) -> bool:
        """Move a pending job to ``failed``, recording the error message."""
        return await self._finish(job_id, JobState.failed, error=error)

    async def _finish(self, job_id: str, state: JobState, error: str | None = None) -> bool:
        db = await self._conn()
        cur = await db.execute(
            "UPDATE jobs SET state = ?, completed_at = ?, error = ? "
            "WHERE id = ? AND state = ?",
            (state.value, utc_now_iso(), error, job_id, JobState.pending.value),
        )
        await db.commit()
        if cur.rowcount == 1:
            return True
        current = await self.get_job(job_id)
        if current.state is not state:
            logger.warning(
                "Job %s is already %s; ignoring transition to %s",
                job_id, current.state.value, state.value,
            )
        return False

    # ── Helpers ───────────────────────────────────────────────────────

    @staticmethod
    def _row_to_record(row, description) -> JobRecord:
        cols = [d[0] for d in description]
        return JobRecord(**dict(zip(cols, row)))
