"""SQLite-backed job records with an in-process queue and worker pool."""
from .export_job import ExportComputation
from .models import FailurePolicy, JobRecord, JobState
from .pool import Computation, ExecutionFailure, WorkerPool
from .queue import JobQueue, JobQueueFullError, QueueUnavailableError
from .store import JobNotFoundError, JobStore

__all__ = [
    "Computation",
    "ExecutionFailure",
    "ExportComputation",
    "FailurePolicy",
    "JobNotFoundError",
    "JobQueue",
    "JobQueueFullError",
    "JobRecord",
    "JobState",
    "JobStore",
    "QueueUnavailableError",
    "WorkerPool",
]
