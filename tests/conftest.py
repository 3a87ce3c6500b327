"""Shared test fixtures for the export_queue test suite."""
from __future__ import annotations

import pytest


def pytest_sessionfinish(session, exitstatus):
    """Spawn a watchdog that force-exits if the process hangs at shutdown.

    aiosqlite connections and ``asyncio.to_thread`` executors that a failing
    test left open can keep the interpreter alive after the run. This
    watchdog ensures pytest exits within a few seconds of test completion.
    """
    import os
    import threading
    import time

    def _watchdog():
        time.sleep(5)
        os._exit(exitstatus)

    t = threading.Thread(target=_watchdog, daemon=True)
    t.start()


@pytest.fixture(autouse=True)
def _reset_providers():
    """Drop provider singletons (and installed settings) after every test."""
    yield
    from export_queue.api.deps.providers import reset_providers

    reset_providers()


@pytest.fixture
def restore_root_logger():
    """Put the root logger back after a test that reconfigures logging."""
    import logging

    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)


# ── Job system fixtures ──────────────────────────────────────────────


@pytest.fixture
async def job_store():
    """Fresh in-memory SQLite job store."""
    from export_queue.api.jobs.store import JobStore

    store = JobStore(":memory:")
    await store.initialize()
    yield store
    await store.close()


@pytest.fixture
def job_queue():
    from export_queue.api.jobs.queue import JobQueue

    return JobQueue()


@pytest.fixture
async def worker_pool(job_store, job_queue):
    """Two running workers executing a short simulated export."""
    from export_queue.api.jobs.export_job import ExportComputation
    from export_queue.api.jobs.pool import WorkerPool

    pool = WorkerPool(job_store, job_queue, ExportComputation(0.2), worker_count=2)
    await pool.start()
    yield pool
    await pool.stop()


# ── API fixtures ─────────────────────────────────────────────────────


@pytest.fixture
async def app(job_store, job_queue, worker_pool):
    """Create a test FastAPI app wired to the per-test store, queue and pool."""
    import export_queue.api.deps.providers as _prov
    from export_queue.api.config import ApiSettings
    from export_queue.api.main import create_app

    settings = ApiSettings(job_db_path=":memory:", worker_count=2, export_duration_seconds=0.2)

    # Inject into the provider module; the app lifespan does not run under ASGITransport
    _prov._job_store = job_store
    _prov._job_queue = job_queue
    _prov._worker_pool = worker_pool

    yield create_app(settings)


@pytest.fixture
async def client(app):
    """Async HTTP client bound to the test app."""
    from httpx import ASGITransport, AsyncClient

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://testserver",
    ) as ac:
        yield ac
