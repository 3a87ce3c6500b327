"""Singleton dependency providers for FastAPI ``Depends()``."""
from __future__ import annotations

from ..config import ApiSettings

# Lazy singletons — initialised at first call rather than import time
# so the event loop is already running when async resources are needed.

_settings = None
_job_store = None
_job_queue = None
_worker_pool = None


def get_settings() -> ApiSettings:
    """Return the process settings, loading them from the environment on first use."""
    global _settings
    if _settings is None:
        _settings = ApiSettings()
    return _settings


def set_settings(settings: ApiSettings) -> None:
    """Install explicit settings (e.g. from CLI flags) before any singleton is built."""
    global _settings
    _settings = settings


def get_job_store():
    """Return the singleton ``JobStore``."""
    global _job_store
    if _job_store is None:
        from ..jobs.store import JobStore

        _job_store = JobStore(get_settings().job_db_path)
    return _job_store


def get_job_queue():
    """Return the singleton ``JobQueue``."""
    global _job_queue
    if _job_queue is None:
        from ..jobs.queue import JobQueue

        _job_queue = JobQueue(max_size=get_settings().queue_max_size)
    return _job_queue


def get_worker_pool():
    """Return the singleton ``WorkerPool`` running ``ExportComputation``."""
    global _worker_pool
    if _worker_pool is None:
        from ..jobs.export_job import ExportComputation
        from ..jobs.pool import WorkerPool

        settings = get_settings()
        _worker_pool = WorkerPool(
            get_job_store(),
            get_job_queue(),
            ExportComputation(settings.export_duration_seconds),
            worker_count=settings.worker_count,
            failure_policy=settings.failure_policy,
        )
    return _worker_pool


def get_job_service():
    """Build a ``JobService`` over the singleton store and queue."""
    from ..services.job_service import JobService

    return JobService(get_job_store(), get_job_queue())


def reset_providers() -> None:
    """Forget every singleton so the next call rebuilds it from settings."""
    global _settings, _job_store, _job_queue, _worker_pool
    _settings = None
    _job_store = None
    _job_queue = None
    _worker_pool = None
