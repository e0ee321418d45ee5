"""
Unit tests for the script parser service.
"""

import json
from unittest.mock import patch

import pytest

from tsqlparser import parse
from tsqlparser.models.dml import Select
from tsqlparser.models.statements import Print, Unrecognized


class TestScriptParser:
    """Test whole-script parsing."""

    def test_batches_and_repeat_count(self):
        """Test two GO-separated batches, the second repeated."""
        script = parse("SELECT 1\nGO\nSELECT 2\nGO 3\n")

        assert len(script.batches) == 2
        assert [b.index for b in script.batches] == [0, 1]
        assert script.batches[0].repeat_count == 1
        assert script.batches[1].repeat_count == 3
        assert all(isinstance(s, Select) for s in script.statements)
        assert script.diagnostics == ()

    def test_batch_without_go(self):
        """Test the last batch may end without GO."""
        script = parse("PRINT 'a'\nGO\nPRINT 'b'")

        assert script.batches[0].go is not None
        assert script.batches[1].go is None
        assert isinstance(script.batches[1].statements[0], Print)

    def test_spans_point_into_source(self):
        """Test statement spans cover their source text."""
        source = "PRINT 'a';\n  SELECT name\n  FROM sys.tables"
        script = parse(source)

        select = script.statements[1]
        assert select.span.start_line == 2
        assert select.span.start_column == 3
        assert select.span.text(source) == "SELECT name\n  FROM sys.tables"
        assert script.span.start_offset == 0

    def test_batch_span_includes_go(self):
        script = parse("SELECT 1\nGO 2")

        assert script.batches[0].span.end_line == 2

    def test_quoted_identifier_off(self):
        """Test double quotes become strings when QUOTED_IDENTIFIER is off."""
        script = parse('PRINT "hello"', quoted_identifier=False)

        assert script.statements[0].value.value == "hello"

    def test_script_to_dict(self):
        """Test the dictionary form is JSON serializable."""
        script = parse("SELECT 1;\nFROBNICATE", script_id="deploy.sql")

        data = script.to_dict()

        assert data["node_type"] == "Script"
        assert data["batches"][0]["statements"][0]["node_type"] == "Select"
        assert data["diagnostics"][0]["code"] == "UnrecognizedStatement"
        json.dumps(data)


class TestParseMetrics:
    """Test metrics attached to every parse."""

    def test_metrics_counts(self):
        """Test batch, statement and diagnostic counts."""
        script = parse("SELECT 1\nGO\nSELECT 2;\nFROBNICATE things", script_id="deploy.sql")

        metrics = script.metrics
        assert metrics["script_id"] == "deploy.sql"
        assert metrics["status"] == "completed"
        assert metrics["batch_count"] == 2
        assert metrics["statement_count"] == 3
        assert metrics["unrecognized_count"] == 1
        assert metrics["diagnostics_by_code"] == {"UnrecognizedStatement": 1}
        assert metrics["token_count"] > 0

    def test_metrics_status_with_errors(self):
        script = parse("SELECT FROM")

        assert script.metrics["status"] == "completed_with_errors"

    def test_empty_input_metrics(self):
        """Test empty scripts still carry metrics."""
        script = parse("")

        assert script.metrics["status"] == "completed"
        assert script.metrics["batch_count"] == 0
        assert script.metrics["diagnostics_by_severity"] == {"info": 1}

    def test_unexpected_failure_propagates(self):
        """Test internal errors are logged and re-raised, not turned into diagnostics."""
        with patch(
            "tsqlparser.services.script_parser.split_batches",
            side_effect=RuntimeError("splitter bug"),
        ):
            with pytest.raises(RuntimeError, match="splitter bug"):
                parse("SELECT 1")


class TestUnrecognizedText:
    """Test Unrecognized nodes keep the exact source text."""

    def test_text_is_verbatim(self):
        source = "SELECT 1;\nFROBNICATE  the\n   widgets"
        script = parse(source)

        node = script.statements[1]
        assert isinstance(node, Unrecognized)
        assert node.text == "FROBNICATE  the\n   widgets"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
