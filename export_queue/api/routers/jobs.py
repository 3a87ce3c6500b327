"""Job submission and status endpoints."""
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query

from ..deps.providers import get_job_service
from ..jobs.models import JobState
from ..schemas.envelope import ApiResponse
from ..schemas.jobs import JobView
from ..services.job_service import JobService

router = APIRouter(prefix="/jobs", tags=["jobs"])


@router.post("", status_code=201)
async def submit_job(service: JobService = Depends(get_job_service)) -> ApiResponse:
    rec = await service.submit()
    return ApiResponse.success(JobView.from_record(rec).model_dump())


@router.get("")
async def list_jobs(
    limit: int = Query(50, ge=1, le=500),
    state: Optional[JobState] = None,
    service: JobService = Depends(get_job_service),
) -> ApiResponse:
    jobs = await service.list_jobs(limit=limit, state=state)
    return ApiResponse.success([JobView.from_record(j).model_dump() for j in jobs])


@router.get("/{job_id}")
async def get_job(
    job_id: str,
    service: JobService = Depends(get_job_service),
) -> ApiResponse:
    rec = await service.status(job_id)
    return ApiResponse.success(JobView.from_record(rec).model_dump())


@router.delete("/{job_id}")
async def delete_job(
    job_id: str,
    service: JobService = Depends(get_job_service),
) -> ApiResponse:
    await service.delete(job_id)
    return ApiResponse.success({"id": job_id, "deleted": True})
