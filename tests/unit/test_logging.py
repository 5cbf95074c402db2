"""Tests for logging helpers."""

import structlog
from structlog.testing import capture_logs

from formatrouter.logging_config import get_logger, job_context, log_error


class TestLogError:
    """Tests for log_error."""

    def test_standard_context(self):
        logger = get_logger("tests")

        with capture_logs() as logs:
            log_error(logger, ValueError("boom"), "reconcile_output", file_name="a.docx")

        assert logs[0]["event"] == "operation_failed"
        assert logs[0]["log_level"] == "error"
        assert logs[0]["operation"] == "reconcile_output"
        assert logs[0]["error_type"] == "ValueError"
        assert logs[0]["error_message"] == "boom"
        assert logs[0]["file_name"] == "a.docx"


class TestJobContext:
    """Tests for job_context."""

    def test_binds_job_id(self):
        with job_context("job-1"):
            assert structlog.contextvars.get_contextvars()["job_id"] == "job-1"

        assert "job_id" not in structlog.contextvars.get_contextvars()

    def test_empty_job_id_binds_nothing(self):
        with job_context(None):
            assert "job_id" not in structlog.contextvars.get_contextvars()
