"""Tests for validate_config(): worker, failure policy, queue and polling settings."""

from unittest.mock import patch

from export_queue.config import validate_config


def _matching(issues, key, level=None):
    return [
        i for i in issues
        if key in i["message"] and (level is None or i["level"] == level)
    ]


class TestDefaults:

    def test_defaults_have_no_errors(self):
        issues = validate_config()
        errors = [i for i in issues if i["level"] == "ERROR"]
        assert not errors, f"Unexpected errors with default config: {errors}"


class TestWorkerPoolValidation:

    def test_zero_workers_is_error(self):
        with patch("export_queue.config.WORKER_COUNT", 0):
            issues = validate_config()
        assert len(_matching(issues, "WORKER_COUNT", "ERROR")) == 1

    def test_unknown_failure_policy_is_error(self):
        with patch("export_queue.config.FAILURE_POLICY", "retry"):
            issues = validate_config()
        errors = _matching(issues, "FAILURE_POLICY", "ERROR")
        assert len(errors) == 1
        assert "retry" in errors[0]["message"]

    def test_stall_policy_warns(self):
        with patch("export_queue.config.FAILURE_POLICY", "stall"):
            issues = validate_config()
        assert _matching(issues, "FAILURE_POLICY='stall'", "WARNING")
        assert not _matching(issues, "FAILURE_POLICY", "ERROR")

    def test_negative_queue_bound_is_error(self):
        with patch("export_queue.config.QUEUE_MAX_SIZE", -1):
            issues = validate_config()
        assert _matching(issues, "QUEUE_MAX_SIZE", "ERROR")


class TestPollingValidation:

    def test_zero_interval_is_error(self):
        with patch("export_queue.config.POLL_INTERVAL_SECONDS", 0):
            issues = validate_config()
        assert _matching(issues, "POLL_INTERVAL_SECONDS", "ERROR")

    def test_unbounded_polling_on_stall_warns(self):
        with patch("export_queue.config.FAILURE_POLICY", "stall"), \
                patch("export_queue.config.POLL_MAX_ATTEMPTS", 0):
            issues = validate_config()
        assert _matching(issues, "POLL_MAX_ATTEMPTS=0", "WARNING")

    def test_negative_export_duration_is_error(self):
        with patch("export_queue.config.EXPORT_DURATION_SECONDS", -2.0):
            issues = validate_config()
        assert _matching(issues, "EXPORT_DURATION_SECONDS", "ERROR")


def test_unknown_log_format_warns():
    with patch("export_queue.config.LOG_FORMAT", "xml"):
        issues = validate_config()
    assert _matching(issues, "LOG_FORMAT", "WARNING")


class TestEffectiveSettings:

    def test_stall_from_settings_warns(self):
        from export_queue.api.config import ApiSettings

        issues = validate_config(ApiSettings(failure_policy="stall"))
        assert _matching(issues, "FAILURE_POLICY='stall'", "WARNING")

    def test_settings_override_module_constants(self):
        from export_queue.api.config import ApiSettings

        with patch("export_queue.config.WORKER_COUNT", 0):
            issues = validate_config(ApiSettings(worker_count=2))
        assert not _matching(issues, "WORKER_COUNT", "ERROR")
