"""Deferred export jobs: submit over HTTP, run on a worker pool, poll for completion."""

__version__ = "0.1.0"
