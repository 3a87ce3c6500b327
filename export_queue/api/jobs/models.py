"""Job data models."""
from __future__ import annotations

import enum
from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class JobState(str, enum.Enum):
    pending = "pending"
    complete = "complete"
    failed = "failed"

    @property
    def terminal(self) -> bool:
        return self is not JobState.pending


class FailurePolicy(str, enum.Enum):
    """What a worker does with a record whose computation raised."""

    failed = "failed"
    stall = "stall"


class JobRecord(BaseModel):
    """Persistent representation of an export job."""

    id: str
    state: JobState = JobState.pending
    created_at: str = Field(default_factory=utc_now_iso)
    completed_at: Optional[str] = None
    error: Optional[str] = None
