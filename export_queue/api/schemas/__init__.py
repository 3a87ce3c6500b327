"""Pydantic response schemas."""
from .envelope import ApiResponse, ResponseMeta
from .jobs import HealthView, JobView

__all__ = ["ApiResponse", "HealthView", "JobView", "ResponseMeta"]
