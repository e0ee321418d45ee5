"""
Unit tests for diagnostics and statement-level error recovery.
"""

import pytest

from tsqlparser import parse
from tsqlparser.diagnostics import DiagnosticsCollector
from tsqlparser.errors import LexError
from tsqlparser.models.diagnostic import Diagnostic, DiagnosticCode, Severity
from tsqlparser.models.dml import Merge, Select
from tsqlparser.models.statements import Block, Print, Unrecognized
from tsqlparser.models.token import Span


class TestRecovery:
    """Test a bad statement never costs the rest of the batch."""

    def test_next_line_statement_survives(self):
        """Test recovery resumes at a line-leading statement word."""
        script = parse("SELECT FROM WHERE\nSELECT 1")

        first, second = script.statements
        assert isinstance(first, Unrecognized)
        assert first.text == "SELECT FROM WHERE"
        assert isinstance(second, Select)
        assert script.has_errors
        assert script.errors[0].batch_index == 0

    def test_recovery_stops_after_semicolon(self):
        """Test a ';' closes the skipped region."""
        script = parse("SELECT 1 +; SELECT 2")

        first, second = script.statements
        assert isinstance(first, Unrecognized)
        assert first.text == "SELECT 1 +;"
        assert isinstance(second, Select)

    def test_recovery_inside_block(self):
        """Test a failure inside BEGIN ... END keeps the block."""
        script = parse("BEGIN\n    SELECT 1 +\n    PRINT 'x'\nEND")

        assert len(script.statements) == 1
        block = script.statements[0]
        assert isinstance(block, Block)
        assert isinstance(block.statements[0], Unrecognized)
        assert isinstance(block.statements[1], Print)

    def test_error_location(self):
        """Test diagnostics carry the line and column of the problem."""
        script = parse("PRINT 1\nSELECT a FROM t WHERE (a = 1")

        error = script.errors[0]
        assert error.span.start_line == 2
        assert "2:" in str(error)


class TestWarnings:
    """Test non-fatal diagnostics."""

    def test_unrecognized_statement_is_warning(self):
        """Test an unknown statement is kept as text with a warning."""
        script = parse("SELECT 1;\nFROBNICATE the widgets")

        assert not script.has_errors
        assert isinstance(script.statements[1], Unrecognized)
        diagnostic = script.diagnostics[0]
        assert diagnostic.code == DiagnosticCode.UNRECOGNIZED_STATEMENT
        assert diagnostic.severity == Severity.WARNING

    def test_with_after_unterminated_statement(self):
        """Test WITH after a statement without ';' is read as a CTE with a warning."""
        script = parse("SELECT 1\nWITH c AS (SELECT 2 AS x) SELECT x FROM c")

        assert not script.has_errors
        assert len(script.statements) == 2
        assert script.statements[1].query.with_ is not None
        assert [d.code for d in script.diagnostics] == [DiagnosticCode.AMBIGUOUS_CONSTRUCT]

    def test_with_after_terminated_statement(self):
        """Test no warning once the previous statement ends with ';'."""
        script = parse("SELECT 1;\nWITH c AS (SELECT 2 AS x) SELECT x FROM c")

        assert script.diagnostics == ()

    def test_with_at_batch_start(self):
        """Test a CTE opening a batch is not ambiguous."""
        script = parse("WITH c AS (SELECT 1 AS x) SELECT x FROM c")

        assert script.diagnostics == ()

    def test_merge_requires_terminator(self):
        """Test MERGE without ';' is an error but the statement is kept."""
        script = parse("MERGE t USING s ON t.id = s.id WHEN MATCHED THEN DELETE")

        assert isinstance(script.statements[0], Merge)
        assert script.errors[0].code == DiagnosticCode.MISSING_TERMINATOR

    def test_go_trailing_text(self):
        """Test text after GO is reported on the batch it closes."""
        script = parse("SELECT 1\nGO 2 extra\nSELECT 2")

        assert script.batches[0].go.repeat_count == 2
        assert script.diagnostics[0].code == DiagnosticCode.GO_TRAILING_TEXT
        assert script.diagnostics[0].batch_index == 0

    def test_statement_after_go_is_parsed(self):
        """Test a statement on the GO line stays in the tree."""
        script = parse("SELECT 1\nGO SELECT 2")

        assert [[s.node_type for s in b.statements] for b in script.batches] == [["Select"], ["Select"]]
        assert not script.has_errors
        assert script.diagnostics[0].code == DiagnosticCode.GO_TRAILING_TEXT


class TestLexicalErrors:
    """Test lexical errors are fatal to their batch only."""

    def test_lex_error_confined_to_batch(self):
        """Test an unterminated string spoils one batch."""
        script = parse("SELECT 'abc\nGO\nSELECT 1")

        first, second = script.batches
        assert first.has_errors
        assert isinstance(first.statements[0], Unrecognized)
        assert first.statements[0].reason == "Lexical error"
        assert not second.has_errors
        assert isinstance(second.statements[0], Select)
        assert script.errors[0].code == DiagnosticCode.LEX_ERROR
        assert script.errors[0].batch_index == 0


class TestEmptyInput:
    """Test scripts without statements."""

    @pytest.mark.parametrize("source", ["", "   \n\t", "-- nothing here\n/* or here */"])
    def test_empty_input(self, source):
        """Test empty scripts give an informational diagnostic."""
        script = parse(source)

        assert script.batches == ()
        assert not script.has_errors
        assert script.diagnostics[0].code == DiagnosticCode.EMPTY_INPUT
        assert script.diagnostics[0].severity == Severity.INFO


class TestDiagnosticsCollector:
    """Test the collector used by the parser."""

    def test_add_stamps_batch_index(self):
        """Test new diagnostics take the collector's batch index."""
        collector = DiagnosticsCollector(batch_index=2)

        collector.warning(DiagnosticCode.UNRECOGNIZED_STATEMENT, "skipped")
        collector.info(DiagnosticCode.EMPTY_INPUT, "empty")

        assert len(collector) == 2
        assert all(d.batch_index == 2 for d in collector)
        assert not collector.has_errors

    def test_error_and_by_code(self):
        """Test errors are detected and diagnostics filter by code."""
        collector = DiagnosticsCollector()

        collector.error(DiagnosticCode.SYNTAX_ERROR, "Expected ')'")
        collector.warning(DiagnosticCode.GO_TRAILING_TEXT, "Text after GO")

        assert collector.has_errors
        assert len(collector.by_code(DiagnosticCode.SYNTAX_ERROR)) == 1
        assert collector.by_code(DiagnosticCode.LEX_ERROR) == []

    def test_from_exception_uses_exception_code(self):
        """Test recovered exceptions map to their diagnostic code."""
        collector = DiagnosticsCollector(batch_index=0)
        span = Span(start_offset=7, end_offset=11, start_line=1, start_column=8, end_line=1, end_column=12)

        diagnostic = collector.from_exception(LexError("Unterminated string", span))

        assert diagnostic.code == DiagnosticCode.LEX_ERROR
        assert diagnostic.severity == Severity.ERROR
        assert diagnostic.span.start_column == 8

    def test_extend_keeps_existing_batch_index(self):
        """Test extend fills in missing batch indexes only."""
        collector = DiagnosticsCollector(batch_index=1)
        stamped = Diagnostic(
            severity=Severity.WARNING,
            code=DiagnosticCode.GO_TRAILING_TEXT,
            message="Text after GO",
            batch_index=0,
        )
        unstamped = Diagnostic(severity=Severity.ERROR, code=DiagnosticCode.SYNTAX_ERROR, message="bad")

        collector.extend([stamped, unstamped])

        assert [d.batch_index for d in collector.diagnostics] == [0, 1]

    def test_diagnostics_returns_copy(self):
        """Test callers cannot modify the collector through the list."""
        collector = DiagnosticsCollector()
        collector.error(DiagnosticCode.SYNTAX_ERROR, "bad")

        collector.diagnostics.clear()

        assert len(collector) == 1
