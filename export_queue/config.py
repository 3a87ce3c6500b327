"""
Central configuration for the export queue.

Flat module-level constants.  ``export_queue.api.config.ApiSettings`` takes
its defaults from here and lets the environment override them per process;
the client and the run scripts read these directly.

Config Status Legend
====================
Each constant is annotated with one of the following statuses:

  ACTIVE      — Imported and used by running code.  Changing the value
                affects live behaviour.

Search for ``# STATUS:`` to locate all annotations.
"""
# ── Paths ──────────────────────────────────────────────────────────────
JOB_DB_PATH = "export_jobs.db"                    # STATUS: ACTIVE — api/config.py; SQLite file backing the job store

# ── Export Computation ─────────────────────────────────────────────────
EXPORT_DURATION_SECONDS = 2.0                     # STATUS: ACTIVE — api/config.py; simulated lengthy computation

# ── Worker Pool ────────────────────────────────────────────────────────
WORKER_COUNT = 1                                  # STATUS: ACTIVE — api/config.py; concurrent workers draining the queue
FAILURE_POLICY = "failed"                         # STATUS: ACTIVE — api/config.py; "failed" = terminal Failed state, "stall" = stays pending
QUEUE_MAX_SIZE = 0                                # STATUS: ACTIVE — api/config.py; 0 = unbounded backlog

# ── Client Polling ─────────────────────────────────────────────────────
POLL_INTERVAL_SECONDS = 1.0                       # STATUS: ACTIVE — client/poller.py; delay between status checks
POLL_MAX_ATTEMPTS = 0                             # STATUS: ACTIVE — client/poller.py; 0 = poll until terminal state
CLIENT_BASE_URL = "http://localhost:8000"         # STATUS: ACTIVE — run_client.py; default server address
CLIENT_TIMEOUT_SECONDS = 10.0                     # STATUS: ACTIVE — client/poller.py; per-request HTTP timeout

# ── Log Configuration ──────────────────────────────────────────────────
LOG_LEVEL = "INFO"                                # STATUS: ACTIVE — api/config.py; "DEBUG", "INFO", "WARNING", "ERROR"
LOG_FORMAT = "structured"                         # STATUS: ACTIVE — api/config.py, run_client.py; "structured" or "json"

VALID_FAILURE_POLICIES = ("failed", "stall")
VALID_LOG_FORMATS = ("structured", "json")


# ── Config Validation ──────────────────────────────────────────────────

def validate_config(settings=None) -> list:
    """Check config for common misconfigurations.

    ``settings`` is the ``ApiSettings`` the server actually runs with; its
    values take precedence over the module constants above.

    Returns a list of dicts: [{"level": "WARNING"|"ERROR", "message": str}].
    Called on server startup.
    """
    worker_count = getattr(settings, "worker_count", WORKER_COUNT)
    failure_policy = getattr(settings, "failure_policy", FAILURE_POLICY)
    queue_max_size = getattr(settings, "queue_max_size", QUEUE_MAX_SIZE)
    export_duration = getattr(settings, "export_duration_seconds", EXPORT_DURATION_SECONDS)
    log_format = getattr(settings, "log_format", LOG_FORMAT)
    issues = []

    # 1. Worker pool must have at least one worker
    if not isinstance(worker_count, int) or worker_count < 1:
        issues.append({
            "level": "ERROR",
            "message": f"WORKER_COUNT={worker_count!r} is invalid. Must be an integer >= 1.",
        })

    # 2. Failure policy must be one of the known values
    if failure_policy not in VALID_FAILURE_POLICIES:
        issues.append({
            "level": "ERROR",
            "message": (
                f"FAILURE_POLICY='{failure_policy}' is invalid. "
                f"Must be one of: {VALID_FAILURE_POLICIES}"
            ),
        })
    elif failure_policy == "stall":
        issues.append({
            "level": "WARNING",
            "message": (
                "FAILURE_POLICY='stall': failed exports stay pending forever and "
                "polling clients will only stop at POLL_MAX_ATTEMPTS."
            ),
        })

    # 3. Negative queue bound makes no sense
    if queue_max_size < 0:
        issues.append({
            "level": "ERROR",
            "message": f"QUEUE_MAX_SIZE={queue_max_size} is negative. Use 0 for unbounded.",
        })

    # 4. Computation and polling timings
    if export_duration < 0:
        issues.append({
            "level": "ERROR",
            "message": f"EXPORT_DURATION_SECONDS={export_duration} is negative.",
        })
    if POLL_INTERVAL_SECONDS <= 0:
        issues.append({
            "level": "ERROR",
            "message": f"POLL_INTERVAL_SECONDS={POLL_INTERVAL_SECONDS} must be > 0.",
        })
    if POLL_MAX_ATTEMPTS < 0:
        issues.append({
            "level": "ERROR",
            "message": f"POLL_MAX_ATTEMPTS={POLL_MAX_ATTEMPTS} is negative. Use 0 for no limit.",
        })
    elif POLL_MAX_ATTEMPTS == 0 and failure_policy == "stall":
        issues.append({
            "level": "WARNING",
            "message": (
                "POLL_MAX_ATTEMPTS=0 with FAILURE_POLICY='stall' lets a client poll "
                "a stuck job indefinitely."
            ),
        })

    # 5. Log format
    if log_format not in VALID_LOG_FORMATS:
        issues.append({
            "level": "WARNING",
            "message": (
                f"LOG_FORMAT='{log_format}' is not recognised; falling back to 'structured'. "
                f"Valid values: {VALID_LOG_FORMATS}"
            ),
        })

    return issues
