"""
Unit tests for GO batch splitting.
"""

from tsqlparser.batches import split_batches
from tsqlparser.lexer import tokenize
from tsqlparser.models.diagnostic import DiagnosticCode, Severity


def split(source, **kwargs):
    return split_batches(tokenize(source, include_comments=True), **kwargs)


def test_two_batches():
    """Test GO separates batches and closes the first one."""
    batches = split("SELECT 1\nGO\nSELECT 2")

    assert len(batches) == 2
    assert batches[0].go is not None
    assert batches[0].go.repeat_count == 1
    assert batches[1].go is None
    assert [t.text for t in batches[1].significant_tokens] == ["SELECT", "2"]


def test_trailing_go_does_not_add_batch():
    """Test nothing after the last GO means no extra batch."""
    batches = split("SELECT 1\nGO\n")

    assert len(batches) == 1


def test_go_with_repeat_count():
    """Test GO n records the repeat count."""
    batches = split("INSERT INTO t DEFAULT VALUES\nGO 3")

    assert batches[0].go.repeat_count == 3
    assert batches[0].go.span.start_line == 2


def test_go_is_case_insensitive():
    """Test lower-case go is a separator."""
    batches = split("select 1\ngo\nselect 2")

    assert len(batches) == 2


def test_go_not_at_line_start_is_not_separator():
    """Test GO after other tokens on the same line stays in the batch."""
    batches = split("SELECT 1 GO")

    assert len(batches) == 1
    assert batches[0].go is None
    assert batches[0].significant_tokens[-1].upper == "GO"


def test_go_inside_string_or_comment_is_ignored():
    """Test GO in a string or block comment does not split."""
    batches = split("SELECT '\nGO\n'\n/*\nGO\n*/\nSELECT 2")

    assert len(batches) == 1


def test_consecutive_go_lines_make_empty_batches():
    """Test every GO closes a batch, even an empty one."""
    batches = split("SELECT 1\nGO\nGO\nSELECT 2")

    assert len(batches) == 3
    assert batches[1].is_empty
    assert [b.index for b in batches] == [0, 1, 2]


def test_comment_only_tail_is_not_a_batch():
    """Test comments after the last GO do not form a batch."""
    batches = split("SELECT 1\nGO\n-- done\n")

    assert len(batches) == 1


def test_comment_after_go_is_allowed():
    """Test a comment on the GO line is not trailing text."""
    batches = split("SELECT 1\nGO -- end of batch\nSELECT 2")

    assert len(batches) == 2
    assert batches[0].diagnostics == []


def test_trailing_text_warns_by_default():
    """Test text after GO gives a warning diagnostic."""
    batches = split("SELECT 1\nGO garbage\nSELECT 2")

    assert len(batches) == 2
    diagnostic = batches[0].diagnostics[0]
    assert diagnostic.code == DiagnosticCode.GO_TRAILING_TEXT
    assert diagnostic.severity == Severity.WARNING
    assert diagnostic.batch_index == 0


def test_trailing_text_error_policy():
    """Test the error policy raises the severity."""
    batches = split("SELECT 1\nGO 2 extra", trailing_text_policy="error")

    assert batches[0].go.repeat_count == 2
    assert batches[0].diagnostics[0].severity == Severity.ERROR


def test_trailing_statement_starts_next_batch():
    """Test a statement written after GO is kept in the following batch."""
    batches = split("SELECT 1\nGO SELECT 2\nSELECT 3")

    assert len(batches) == 2
    assert batches[0].diagnostics[0].code == DiagnosticCode.GO_TRAILING_TEXT
    assert [t.text for t in batches[1].significant_tokens] == ["SELECT", "2", "SELECT", "3"]


def test_trailing_text_after_last_go_makes_a_batch():
    batches = split("SELECT 1\nGO 2 PRINT 'done'")

    assert len(batches) == 2
    assert batches[0].go.repeat_count == 2
    assert batches[1].go is None
    assert batches[1].significant_tokens[0].upper == "PRINT"
