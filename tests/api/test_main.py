"""Tests for app factory and basic middleware."""
import pytest

from export_queue.api.config import ApiSettings
from export_queue.api.deps.providers import get_settings
from export_queue.api.main import create_app


def test_create_app():
    app = create_app(ApiSettings(job_db_path=":memory:"))
    assert app.title == "Export Queue API"


def test_create_app_installs_settings():
    settings = ApiSettings(job_db_path=":memory:", worker_count=4)
    create_app(settings)
    assert get_settings() is settings


def test_openapi_schema():
    app = create_app(ApiSettings(job_db_path=":memory:"))
    schema = app.openapi()
    assert "/jobs" in schema["paths"]
    assert "/jobs/{job_id}" in schema["paths"]
    assert "/health" in schema["paths"]


def test_routes_registered():
    app = create_app(ApiSettings(job_db_path=":memory:"))
    routes = {(r.path, m) for r in app.routes for m in getattr(r, "methods", ())}
    for expected in [
        ("/jobs", "POST"),
        ("/jobs", "GET"),
        ("/jobs/{job_id}", "GET"),
        ("/jobs/{job_id}", "DELETE"),
        ("/health", "GET"),
    ]:
        assert expected in routes, f"Missing route: {expected}"


def test_settings_from_environment(monkeypatch):
    monkeypatch.setenv("EXPORT_QUEUE_WORKER_COUNT", "3")
    monkeypatch.setenv("EXPORT_QUEUE_FAILURE_POLICY", "stall")
    settings = ApiSettings()
    assert settings.worker_count == 3
    assert settings.failure_policy == "stall"


def test_settings_reject_bad_policy():
    from pydantic import ValidationError

    with pytest.raises(ValidationError):
        ApiSettings(failure_policy="retry")


@pytest.mark.asyncio
async def test_404_wrapped(client):
    resp = await client.get("/nonexistent")
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_cors_headers(client):
    resp = await client.options(
        "/health",
        headers={"Origin": "http://localhost:3000", "Access-Control-Request-Method": "GET"},
    )
    assert resp.status_code == 200
    assert resp.headers["access-control-allow-origin"] == "http://localhost:3000"


@pytest.mark.asyncio
async def test_lifespan_starts_and_stops_pool(tmp_path, restore_root_logger):
    import export_queue.api.deps.providers as _prov

    app = create_app(ApiSettings(job_db_path=str(tmp_path / "jobs.db"), export_duration_seconds=0))
    async with app.router.lifespan_context(app):
        pool = _prov.get_worker_pool()
        queue = _prov.get_job_queue()
        assert pool.running
        assert not queue.closed
    assert not pool.running
    assert queue.closed


@pytest.mark.asyncio
async def test_lifespan_requeues_jobs_left_pending(tmp_path, restore_root_logger):
    import asyncio

    import export_queue.api.deps.providers as _prov
    from export_queue.api.jobs.models import JobState
    from export_queue.api.jobs.store import JobStore

    db_path = str(tmp_path / "jobs.db")
    previous = JobStore(db_path)
    await previous.initialize()
    first = await previous.create_job()
    second = await previous.create_job()
    await previous.close()

    app = create_app(ApiSettings(job_db_path=db_path, export_duration_seconds=0.01))
    async with app.router.lifespan_context(app):
        store = _prov.get_job_store()
        for _ in range(100):
            states = {(await store.get_job(j.id)).state for j in (first, second)}
            if states == {JobState.complete}:
                break
            await asyncio.sleep(0.02)
        assert states == {JobState.complete}


@pytest.mark.asyncio
async def test_lifespan_validates_effective_settings(tmp_path, restore_root_logger):
    from unittest.mock import patch

    settings = ApiSettings(job_db_path=str(tmp_path / "jobs.db"), failure_policy="stall")
    app = create_app(settings)
    with patch("export_queue.config.validate_config", return_value=[]) as validate:
        async with app.router.lifespan_context(app):
            pass
    validate.assert_called_once_with(settings)
