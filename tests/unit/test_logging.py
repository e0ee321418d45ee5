"""
Unit tests for structured logging utilities.
"""

import json
import logging
from io import StringIO

import pytest

from tsqlparser.models.diagnostic import Diagnostic, DiagnosticCode, Severity
from tsqlparser.models.token import Span
from tsqlparser.utils.logging import (
    JSONFormatter,
    LogContext,
    get_logger,
    log_diagnostic,
    log_error_with_context,
    log_parse_phase,
    setup_logging,
)


def capture(logger, level=logging.DEBUG):
    """Attach a JSON handler to the adapter's logger and return its stream."""
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(JSONFormatter())
    logger.logger.handlers.clear()
    logger.logger.addHandler(handler)
    logger.logger.setLevel(level)
    logger.logger.propagate = False
    return stream


def test_json_formatter():
    """Test JSON formatter produces valid JSON output."""
    formatter = JSONFormatter()

    logger = logging.getLogger("test_json_formatter")
    logger.setLevel(logging.INFO)

    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(formatter)
    logger.addHandler(handler)

    logger.info("Test message", extra={"script_id": "deploy.sql", "batch_index": 2, "tokens": 40})

    log_data = json.loads(stream.getvalue())

    assert "timestamp" in log_data
    assert log_data["level"] == "INFO"
    assert log_data["logger"] == "test_json_formatter"
    assert log_data["message"] == "Test message"
    assert log_data["script_id"] == "deploy.sql"
    assert log_data["batch_index"] == 2
    assert log_data["context"]["tokens"] == 40
    assert "source" in log_data


def test_get_logger_with_context():
    """Test getting logger with context."""
    logger = get_logger("test_module", script_id="deploy.sql", batch_index=1)

    assert logger.extra["script_id"] == "deploy.sql"
    assert logger.extra["batch_index"] == 1


def test_with_context_does_not_touch_parent():
    """Test with_context returns a new adapter."""
    parent = get_logger("test_module", script_id="a.sql")
    child = parent.with_context(batch_index=3)

    assert child.extra == {"script_id": "a.sql", "batch_index": 3}
    assert "batch_index" not in parent.extra


def test_log_context_restores_extra():
    """Test LogContext adds fields temporarily."""
    logger = get_logger("test_log_context", script_id="a.sql")
    stream = capture(logger)

    with LogContext(logger, phase="tokenize"):
        logger.info("inside")
    logger.info("outside")

    inside, outside = [json.loads(line) for line in stream.getvalue().splitlines()]
    assert inside["phase"] == "tokenize"
    assert "phase" not in outside
    assert outside["script_id"] == "a.sql"


def test_log_parse_phase():
    """Test parse phase logging."""
    logger = get_logger("test_parse_phase")
    stream = capture(logger)

    log_parse_phase(logger, "split_batches", "completed", batch_count=3)

    log_data = json.loads(stream.getvalue())
    assert log_data["phase"] == "split_batches"
    assert log_data["context"]["status"] == "completed"
    assert log_data["context"]["batch_count"] == 3


def test_log_diagnostic_levels():
    """Test errors log at WARNING and warnings at DEBUG."""
    logger = get_logger("test_log_diagnostic")
    stream = capture(logger)

    span = Span(start_offset=0, end_offset=4, start_line=3, start_column=5, end_line=3, end_column=9)
    log_diagnostic(logger, Diagnostic(
        severity=Severity.ERROR,
        code=DiagnosticCode.SYNTAX_ERROR,
        message="Expected ')'",
        span=span,
        batch_index=1,
    ))
    log_diagnostic(logger, Diagnostic(
        severity=Severity.WARNING,
        code=DiagnosticCode.GO_TRAILING_TEXT,
        message="Text after GO",
    ))

    error, warning = [json.loads(line) for line in stream.getvalue().splitlines()]
    assert error["level"] == "WARNING"
    assert error["batch_index"] == 1
    assert error["context"]["code"] == "SyntaxError"
    assert error["context"]["line"] == 3
    assert warning["level"] == "DEBUG"


def test_log_error_with_context():
    """Test unexpected errors carry the stack trace."""
    logger = get_logger("test_log_error")
    stream = capture(logger, level=logging.ERROR)

    try:
        raise RuntimeError("boom")
    except RuntimeError as e:
        log_error_with_context(logger, "Parse failed", e, script_id="x.sql")

    log_data = json.loads(stream.getvalue())
    assert log_data["level"] == "ERROR"
    assert log_data["script_id"] == "x.sql"
    assert log_data["error"]["type"] == "RuntimeError"
    assert "boom" in log_data["error"]["stack_trace"]


def test_setup_logging_configures_root():
    """Test setup_logging installs one JSON handler at the given level."""
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    try:
        setup_logging("DEBUG")

        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, JSONFormatter)
    finally:
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
