"""Response payloads for the job endpoints."""
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel

from ..jobs.models import JobRecord


class JobView(BaseModel):
    """Public view of a job record as returned by ``/jobs``."""

    id: str
    state: str
    created_at: str
    completed_at: Optional[str] = None
    error: Optional[str] = None

    @classmethod
    def from_record(cls, rec: JobRecord) -> "JobView":
        return cls(
            id=rec.id,
            state=rec.state.value,
            created_at=rec.created_at,
            completed_at=rec.completed_at,
            error=rec.error,
        )


class HealthView(BaseModel):
    """Payload for ``GET /health``."""

    status: str
    queue_depth: int
    queue_accepting: bool
    workers: int
    workers_alive: int
    failure_policy: str
