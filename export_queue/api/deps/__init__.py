"""Dependency injection providers."""
from .providers import (
    get_job_queue,
    get_job_service,
    get_job_store,
    get_settings,
    get_worker_pool,
    reset_providers,
    set_settings,
)

__all__ = [
    "get_job_queue",
    "get_job_service",
    "get_job_store",
    "get_settings",
    "get_worker_pool",
    "reset_providers",
    "set_settings",
]
