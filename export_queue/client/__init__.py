"""Client side of the polling contract."""
from .poller import JobClient, JobClientError, PollTimeoutError, TERMINAL_STATES

__all__ = ["JobClient", "JobClientError", "PollTimeoutError", "TERMINAL_STATES"]
