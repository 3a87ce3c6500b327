"""Export job executor."""
from __future__ import annotations

import logging
import time

logger = logging.getLogger(__name__)


class ExportComputation:
    """Simulated lengthy export: blocks the worker thread for ``duration_seconds``."""

    def __init__(self, duration_seconds: float = 2.0) -> None:
        if duration_seconds < 0:
            raise ValueError(f"duration_seconds must be >= 0, got {duration_seconds}")
        self.duration_seconds = duration_seconds

    def execute(self, job_id: str) -> None:
        logger.debug("Export %s running for %.2fs", job_id, self.duration_seconds)
        time.sleep(self.duration_seconds)
