"""Process settings for the API layer."""
from __future__ import annotations

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings

from .. import config as _cfg


class ApiSettings(BaseSettings):
    """Immutable settings loaded from environment / .env file.

    Defaults come from ``export_queue.config``; every field can be
    overridden with an ``EXPORT_QUEUE_``-prefixed environment variable.
    """

    host: str = "0.0.0.0"
    port: int = 8000
    cors_origins: str = "http://localhost:3000,http://localhost:8000"
    job_db_path: str = _cfg.JOB_DB_PATH
    log_level: str = _cfg.LOG_LEVEL
    log_format: str = _cfg.LOG_FORMAT
    worker_count: int = Field(default=_cfg.WORKER_COUNT, ge=1)
    failure_policy: Literal["failed", "stall"] = _cfg.FAILURE_POLICY
    queue_max_size: int = Field(default=_cfg.QUEUE_MAX_SIZE, ge=0)
    export_duration_seconds: float = Field(default=_cfg.EXPORT_DURATION_SECONDS, ge=0)

    model_config = {"env_prefix": "EXPORT_QUEUE_"}
