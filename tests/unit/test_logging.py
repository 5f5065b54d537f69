"""
Unit tests for structured logging utilities.
"""

import json
import logging
from io import StringIO

import pytest

from app.utils.logging import (
    get_logger,
    JSONFormatter,
    log_webhook_event,
    log_stage_transition,
    log_error_with_context,
    log_api_call,
)


@pytest.fixture
def captured():
    """Attach a JSON handler to a dedicated logger and return (adapter, stream)."""
    logger = get_logger("test_logging_capture")
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(JSONFormatter())
    logger.logger.addHandler(handler)
    logger.logger.setLevel(logging.INFO)
    yield logger, stream
    logger.logger.removeHandler(handler)


def test_json_formatter():
    """Test JSON formatter produces valid JSON output."""
    logger = logging.getLogger("test")
    logger.setLevel(logging.INFO)

    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(JSONFormatter())
    logger.addHandler(handler)
    try:
        logger.info("Test message", extra={"version": "8.12.0", "sha": "abc123"})
    finally:
        logger.removeHandler(handler)

    log_data = json.loads(stream.getvalue())

    assert "timestamp" in log_data
    assert log_data["level"] == "INFO"
    assert log_data["logger"] == "test"
    assert log_data["message"] == "Test message"
    assert log_data["version"] == "8.12.0"
    assert log_data["context"]["sha"] == "abc123"
    assert "source" in log_data


def test_get_logger_with_context():
    """Test getting logger with context."""
    logger = get_logger("test_module", version="8.12.0", branch="support/update-libphonenumber-8-12-0")

    assert logger.extra["version"] == "8.12.0"
    assert logger.extra["branch"] == "support/update-libphonenumber-8-12-0"


def test_with_context_merges(captured):
    """Test derived adapters keep parent context and per-call extras win."""
    logger, stream = captured

    logger.with_context(version="8.12.0", stage="fetch").info("Fetching", extra={"stage": "stage"})

    log_data = json.loads(stream.getvalue())
    assert log_data["version"] == "8.12.0"
    assert log_data["stage"] == "stage"


def test_log_webhook_event(captured):
    logger, stream = captured

    log_webhook_event(logger, "push", "delivery-1", reference="refs/tags/v8.12.0")

    log_data = json.loads(stream.getvalue())
    assert log_data["delivery_id"] == "delivery-1"
    assert log_data["context"]["reference"] == "refs/tags/v8.12.0"
    assert log_data["context"]["event"] == "push"


def test_log_stage_transition(captured):
    """Test stage transition logging."""
    logger, stream = captured

    log_stage_transition(logger, "commit", "completed", sha="abc123")

    log_data = json.loads(stream.getvalue())
    assert log_data["stage"] == "commit"
    assert log_data["context"]["status"] == "completed"
    assert log_data["context"]["sha"] == "abc123"


def test_log_error_with_context(captured):
    """Test errors carry type, message and stack trace."""
    logger, stream = captured

    try:
        raise ValueError("broken archive")
    except ValueError as e:
        log_error_with_context(logger, "Fetch failed", e, stage="fetch")

    log_data = json.loads(stream.getvalue())
    assert log_data["level"] == "ERROR"
    assert log_data["stage"] == "fetch"
    assert log_data["error"]["type"] == "ValueError"
    assert log_data["error"]["message"] == "broken archive"
    assert "Traceback" in log_data["error"]["stack_trace"]


def test_log_api_call_with_error(captured):
    """Test API call logging with error."""
    logger, stream = captured

    log_api_call(
        logger,
        service="github_api",
        endpoint="/repos/ruimarinho/google-libphonenumber/pulls",
        method="POST",
        error="Connection timeout",
    )

    log_data = json.loads(stream.getvalue())
    assert log_data["level"] == "ERROR"
    assert log_data["context"]["service"] == "github_api"
    assert log_data["context"]["error"] == "Connection timeout"
