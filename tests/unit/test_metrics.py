"""
Unit tests for metrics collection utilities.
"""

from datetime import datetime

import pytest

from tsqlparser.models.diagnostic import Diagnostic, DiagnosticCode, Severity
from tsqlparser.utils.metrics import ParseMetrics


def diagnostic(severity, code):
    return Diagnostic(severity=severity, code=code, message="test")


def test_parse_metrics_initialization():
    """Test metrics collector initialization."""
    metrics = ParseMetrics(script_id="deploy.sql")

    assert metrics.script_id == "deploy.sql"
    assert metrics.status == "pending"
    assert metrics.token_count == 0
    assert metrics.batch_count == 0
    assert metrics.diagnostics_by_code == {}


def test_parse_metrics_start():
    """Test starting metrics collection."""
    metrics = ParseMetrics("deploy.sql")

    metrics.start(source_length=120)

    assert isinstance(metrics.start_time, datetime)
    assert metrics.source_length == 120
    assert metrics.status == "running"


def test_parse_metrics_complete():
    """Test completing metrics collection."""
    metrics = ParseMetrics("deploy.sql")

    metrics.start()
    metrics.complete()

    assert metrics.end_time is not None
    assert metrics.status == "completed"
    assert metrics.duration_ms is not None
    assert metrics.duration_ms >= 0


def test_parse_metrics_complete_with_errors():
    """Test an error diagnostic changes the final status."""
    metrics = ParseMetrics("deploy.sql")

    metrics.start()
    metrics.record_diagnostic(diagnostic(Severity.ERROR, DiagnosticCode.SYNTAX_ERROR))
    metrics.complete()

    assert metrics.status == "completed_with_errors"


def test_parse_metrics_record_batches():
    """Test recording batches and statements."""
    metrics = ParseMetrics()

    metrics.record_tokens(30)
    metrics.record_batch(3)
    metrics.record_batch(2, unrecognized_count=1)

    assert metrics.token_count == 30
    assert metrics.batch_count == 2
    assert metrics.statement_count == 5
    assert metrics.unrecognized_count == 1


def test_parse_metrics_record_diagnostics():
    """Test diagnostics are counted by severity and code."""
    metrics = ParseMetrics()

    metrics.record_diagnostic(diagnostic(Severity.WARNING, DiagnosticCode.GO_TRAILING_TEXT))
    metrics.record_diagnostic(diagnostic(Severity.WARNING, DiagnosticCode.UNRECOGNIZED_STATEMENT))
    metrics.record_diagnostic(diagnostic(Severity.ERROR, DiagnosticCode.SYNTAX_ERROR))

    assert metrics.diagnostics_by_severity == {"warning": 2, "error": 1}
    assert metrics.diagnostics_by_code["GoTrailingText"] == 1


def test_parse_metrics_to_dict():
    """Test converting metrics to dictionary."""
    metrics = ParseMetrics("deploy.sql")
    metrics.start(source_length=10)
    metrics.record_batch(1)
    metrics.complete()

    result = metrics.to_dict()

    assert result["script_id"] == "deploy.sql"
    assert result["status"] == "completed"
    assert result["source_length"] == 10
    assert result["batch_count"] == 1
    assert result["start_time"] is not None
    assert result["end_time"] is not None


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
