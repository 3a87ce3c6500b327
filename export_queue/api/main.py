"""FastAPI application factory and server entry point."""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import ApiSettings
from .deps.providers import (
    get_job_queue,
    get_job_store,
    get_settings,
    get_worker_pool,
    set_settings,
)
from .errors import register_error_handlers
from .jobs.queue import JobQueueFullError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def _lifespan(app: FastAPI):
    """Startup / shutdown lifecycle."""
    settings: ApiSettings = get_settings()

    from ..utils.logging import configure_logging

    configure_logging(settings.log_level, settings.log_format)
    logger.info("Starting export_queue API on %s:%s", settings.host, settings.port)

    # Run config validation on startup
    from ..config import validate_config

    issues = validate_config(settings)
    for issue in issues:
        msg = issue.get("message", "")
        if issue.get("level") == "ERROR":
            logger.error("Config validation: %s", msg)
        else:
            logger.warning("Config validation: %s", msg)
    if not issues:
        logger.info("Config validation: all checks passed")

    store = get_job_store()
    await store.initialize()
    queue = get_job_queue()

    # Records outlive the in-memory queue; requeue whatever a previous run left pending
    pending = await store.pending_job_ids()
    for job_id in pending:
        try:
            await queue.enqueue(job_id)
        except JobQueueFullError:
            logger.warning(
                "Queue full while recovering; %d pending job(s) not requeued",
                len(pending) - queue.depth,
            )
            break
    if pending:
        logger.info("Requeued %d pending job(s) from a previous run", queue.depth)

    pool = get_worker_pool()
    await pool.start()

    yield

    # Cleanup: refuse new work first, then stop workers before the store goes away
    queue.close()
    if queue.depth:
        logger.warning("Shutting down with %d queued job(s) left pending", queue.depth)
    await pool.stop()
    await store.close()
    logger.info("Shutting down export_queue API")


def create_app(settings: ApiSettings | None = None) -> FastAPI:
    """Build and return the FastAPI application."""
    if settings is None:
        settings = get_settings()
    else:
        set_settings(settings)

    app = FastAPI(
        title="Export Queue API",
        description="Submit slow export jobs, run them on a background worker pool, and poll for completion.",
        version="0.1.0",
        lifespan=_lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    # CORS
    origins = [o.strip() for o in settings.cors_origins.split(",") if o.strip()]
    allow_creds = "*" not in origins
    if not allow_creds:
        logger.warning(
            "CORS origins contain '*'. Credentials will NOT be allowed. "
            "Set explicit origins for credentialed cross-origin requests."
        )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=allow_creds,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Error handlers
    register_error_handlers(app)

    # Routers — imported lazily so a broken module doesn't block startup
    from .routers import all_routers

    for router in all_routers():
        app.include_router(router)

    return app


def run_server() -> None:
    """CLI entry point: ``python -m export_queue.api.main``."""
    import uvicorn

    settings = get_settings()
    app = create_app(settings)
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    run_server()
