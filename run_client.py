"""Submit an export (or pick an existing one) and poll until it finishes.

Usage:
    # Submit a new export and wait for it:
    python run_client.py

    # Watch an existing job, giving up after 30 checks:
    python run_client.py --job-id 3f2a9c01b7de --max-attempts 30

    # Against another server, polling every 0.5 s:
    python run_client.py --url http://localhost:9000 --interval 0.5
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

# Ensure export_queue is importable regardless of CWD
sys.path.insert(0, str(Path(__file__).resolve().parent))

from export_queue import config as cfg
from export_queue.client import JobClient, JobClientError, PollTimeoutError
from export_queue.utils.logging import configure_logging

logger = logging.getLogger(__name__)


def main() -> int:
    parser = argparse.ArgumentParser(description="Export Queue polling client")
    parser.add_argument("--url", default=cfg.CLIENT_BASE_URL, help=f"Server base URL (default: {cfg.CLIENT_BASE_URL})")
    parser.add_argument("--job-id", default=None, help="Poll this job instead of submitting a new one")
    parser.add_argument("--interval", type=float, default=cfg.POLL_INTERVAL_SECONDS,
                        help=f"Seconds between status checks (default: {cfg.POLL_INTERVAL_SECONDS})")
    parser.add_argument("--max-attempts", type=int, default=cfg.POLL_MAX_ATTEMPTS,
                        help="Give up after this many checks (0 = never)")
    parser.add_argument("--log-level", default="warning", choices=["debug", "info", "warning", "error"])
    args = parser.parse_args()

    configure_logging(args.log_level, cfg.LOG_FORMAT)

    def _print_poll(attempt: int, job: dict) -> None:
        print(f"[{attempt:>3}] {job['id']} -> {job['state']}")

    with JobClient(args.url) as client:
        try:
            job_id = args.job_id
            if job_id is None:
                job = client.submit()
                job_id = job["id"]
                print(f"Your export is being created, please wait. (job {job_id})")
            job = client.wait(
                job_id,
                interval=args.interval,
                max_attempts=args.max_attempts,
                on_poll=_print_poll,
            )
        except PollTimeoutError as e:
            print(f"Gave up: {e}", file=sys.stderr)
            return 2
        except JobClientError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1

    if job["state"] == "failed":
        print(f"Export {job_id} failed: {job.get('error')}", file=sys.stderr)
        return 1
    print(f"Export {job_id} is complete.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
