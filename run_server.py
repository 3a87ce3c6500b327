"""API server + in-process worker pool entry point.

Usage:
    # Defaults from export_queue.config / EXPORT_QUEUE_* environment:
    python run_server.py

    # Three workers, failed exports stay pending:
    python run_server.py --workers 3 --failure-policy stall

    # Custom host/port:
    python run_server.py --host 0.0.0.0 --port 9000
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

# Ensure export_queue is importable regardless of CWD
sys.path.insert(0, str(Path(__file__).resolve().parent))

logger = logging.getLogger(__name__)


def main() -> None:
    from export_queue.api.config import ApiSettings

    defaults = ApiSettings()
    parser = argparse.ArgumentParser(description="Export Queue API Server")
    parser.add_argument("--host", default=defaults.host, help=f"Bind address (default: {defaults.host})")
    parser.add_argument("--port", type=int, default=defaults.port, help=f"Port (default: {defaults.port})")
    parser.add_argument("--workers", type=int, default=defaults.worker_count,
                        help=f"Worker pool size (default: {defaults.worker_count})")
    parser.add_argument("--failure-policy", default=defaults.failure_policy, choices=["failed", "stall"],
                        help="What happens to a job whose export raises")
    parser.add_argument("--export-seconds", type=float, default=defaults.export_duration_seconds,
                        help="Duration of the simulated export computation")
    parser.add_argument("--db", default=defaults.job_db_path, help="SQLite file for job records")
    parser.add_argument("--log-level", default=defaults.log_level.lower(),
                        choices=["debug", "info", "warning", "error"])
    args = parser.parse_args()

    from export_queue.utils.logging import configure_logging

    configure_logging(args.log_level, defaults.log_format)

    import uvicorn

    from export_queue.api.main import create_app

    settings = defaults.model_copy(update={
        "host": args.host,
        "port": args.port,
        "worker_count": args.workers,
        "failure_policy": args.failure_policy,
        "export_duration_seconds": args.export_seconds,
        "job_db_path": args.db,
        "log_level": args.log_level.upper(),
    })
    if settings.worker_count < 1:
        parser.error("--workers must be >= 1")
    app = create_app(settings)

    logger.info("Starting Export Queue API on %s:%s", args.host, args.port)
    uvicorn.run(app, host=args.host, port=args.port)


if __name__ == "__main__":
    main()
