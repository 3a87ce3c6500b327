"""Liveness endpoint reporting queue and worker state."""
from __future__ import annotations

from fastapi import APIRouter, Depends

from ..deps.providers import get_job_queue, get_worker_pool
from ..jobs.pool import WorkerPool
from ..jobs.queue import JobQueue
from ..schemas.envelope import ApiResponse
from ..schemas.jobs import HealthView

router = APIRouter(tags=["health"])


@router.get("/health")
async def health(
    queue: JobQueue = Depends(get_job_queue),
    pool: WorkerPool = Depends(get_worker_pool),
) -> ApiResponse:
    alive = pool.live_workers
    healthy = alive == pool.worker_count and not queue.closed
    view = HealthView(
        status="ok" if healthy else "degraded",
        queue_depth=queue.depth,
        queue_accepting=not queue.closed,
        workers=pool.worker_count,
        workers_alive=alive,
        failure_policy=pool.failure_policy.value,
    )
    warnings = []
    if queue.closed:
        warnings.append("Job queue is closed; submissions are refused")
    if alive < pool.worker_count:
        warnings.append(f"{alive} of {pool.worker_count} workers alive; queued jobs may stay pending")
    return ApiResponse.success(view.model_dump(), warnings=warnings)
