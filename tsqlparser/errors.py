"""
Exceptions raised by the lexer and parser.

Each exception knows the diagnostic code it maps to, so a caller that
recovers from it can record it without a lookup table.
"""

from typing import Optional

from tsqlparser.models.diagnostic import Diagnostic, DiagnosticCode, Severity
from tsqlparser.models.token import Span


class TSQLParserError(Exception):
    """Base class for all parse failures."""

    code = DiagnosticCode.SYNTAX_ERROR

    def __init__(self, message: str, span: Optional[Span] = None):
        self.message = message
        self.span = span or Span.unknown()
        if self.span.is_unknown:
            super().__init__(message)
        else:
            super().__init__(
                f"{message} at line {self.span.start_line}, column {self.span.start_column}"
            )

    def to_diagnostic(
        self,
        severity: Severity = Severity.ERROR,
        batch_index: Optional[int] = None,
    ) -> Diagnostic:
        return Diagnostic(
            severity=severity,
            code=self.code,
            message=self.message,
            span=self.span,
            batch_index=batch_index,
        )


class LexError(TSQLParserError):
    """Unterminated string, comment or bracketed identifier, or a stray character."""

    code = DiagnosticCode.LEX_ERROR


class ExpressionError(TSQLParserError):
    """Malformed expression or nesting beyond the configured depth."""

    code = DiagnosticCode.EXPRESSION_ERROR


class StatementError(TSQLParserError):
    """Statement-level grammar failure."""

    code = DiagnosticCode.SYNTAX_ERROR


class DynamicSqlError(TSQLParserError):
    """Dynamic SQL that cannot be re-parsed: non-constant text or nesting too deep."""
