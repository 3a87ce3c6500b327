"""Service wrappers used by the routers."""
from .job_service import JobService

__all__ = ["JobService"]
