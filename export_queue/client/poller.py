"""HTTP client that submits export jobs and polls them to completion."""
from __future__ import annotations

import logging
import time
from typing import Any, Callable, Dict, Optional

import httpx

from .. import config as _cfg

logger = logging.getLogger(__name__)

TERMINAL_STATES = ("complete", "failed")


class JobClientError(Exception):
    """The server answered with an error, or could not be reached."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class PollTimeoutError(Exception):
    """Polling stopped after ``max_attempts`` without reaching a terminal state."""

    def __init__(self, job_id: str, attempts: int, last_state: Optional[str]) -> None:
        super().__init__(
            f"Job '{job_id}' still {last_state!r} after {attempts} status checks"
        )
        self.job_id = job_id
        self.attempts = attempts
        self.last_state = last_state


class JobClient:
    """Thin wrapper over the ``/jobs`` endpoints.

    Responses arrive in the ``{ok, data, error, meta}`` envelope; methods
    return the unwrapped ``data`` dict.
    """

    def __init__(
        self,
        base_url: str = _cfg.CLIENT_BASE_URL,
        timeout: float = _cfg.CLIENT_TIMEOUT_SECONDS,
        http_client: Optional[httpx.Client] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._owns_client = http_client is None
        self.client = http_client or httpx.Client(base_url=self.base_url, timeout=timeout)

    def __enter__(self) -> "JobClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_client:
            self.client.close()

    # ── Requests ─────────────────────────────────────────────────────

    def _request(self, method: str, path: str) -> Dict[str, Any]:
        try:
            response = self.client.request(method, f"{self.base_url}{path}")
        except httpx.RequestError as e:
            raise JobClientError(f"Connection failed: {e}") from e
        return self._handle_response(response)

    @staticmethod
    def _handle_response(response: httpx.Response) -> Dict[str, Any]:
        try:
            body = response.json()
        except ValueError:
            raise JobClientError(
                f"Invalid JSON response: {response.status_code}", response.status_code
            ) from None

        if response.status_code >= 400 or not body.get("ok", False):
            raise JobClientError(
                f"API error {response.status_code}: {body.get('error') or 'Unknown error'}",
                response.status_code,
            )
        return body.get("data") or {}

    def submit(self) -> Dict[str, Any]:
        """Create a job; returns ``{id, state, ...}`` with state ``pending``."""
        return self._request("POST", "/jobs")

    def status(self, job_id: str) -> Dict[str, Any]:
        return self._request("GET", f"/jobs/{job_id}")

    # ── Polling ──────────────────────────────────────────────────────

    def wait(
        self,
        job_id: str,
        *,
        interval: float = _cfg.POLL_INTERVAL_SECONDS,
        max_attempts: Optional[int] = None,
        on_poll: Optional[Callable[[int, Dict[str, Any]], None]] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> Dict[str, Any]:
        """Poll ``GET /jobs/{id}`` every *interval* seconds until the job is terminal.

        Returns the final job dict (``state`` is ``complete`` or ``failed``).
        ``max_attempts`` of ``None`` or ``0`` polls without limit.

        Raises
        ------
        PollTimeoutError
            If ``max_attempts`` checks pass without a terminal state.
        JobClientError
            If a status request fails (including 404 for an unknown ID).
        """
        if max_attempts is None:
            max_attempts = _cfg.POLL_MAX_ATTEMPTS or None
        elif max_attempts == 0:
            max_attempts = None

        attempt = 0
        last_state: Optional[str] = None
        while True:
            attempt += 1
            job = self.status(job_id)
            last_state = job.get("state")
            if on_poll is not None:
                on_poll(attempt, job)
            if last_state in TERMINAL_STATES:
                logger.debug("Job %s reached %s after %d check(s)", job_id, last_state, attempt)
                return job
            if max_attempts is not None and attempt >= max_attempts:
                raise PollTimeoutError(job_id, attempt, last_state)
            sleep(interval)

    def submit_and_wait(self, **wait_kwargs: Any) -> Dict[str, Any]:
        """Submit a new job and block until it finishes."""
        job = self.submit()
        return self.wait(job["id"], **wait_kwargs)
