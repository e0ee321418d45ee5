"""
Diagnostics collector.

Accumulates the diagnostics of one batch or one script, in source order of
discovery, and logs each one as it arrives.
"""

from typing import Iterator, List, Optional

from tsqlparser.errors import TSQLParserError
from tsqlparser.models.diagnostic import Diagnostic, DiagnosticCode, Severity
from tsqlparser.models.token import Span
from tsqlparser.utils.logging import ContextLoggerAdapter, get_logger, log_diagnostic

logger = get_logger(__name__)


class DiagnosticsCollector:
    """Ordered, append-only list of diagnostics."""

    def __init__(
        self,
        batch_index: Optional[int] = None,
        log: Optional[ContextLoggerAdapter] = None,
    ):
        self.batch_index = batch_index
        self.log = log or logger
        self._diagnostics: List[Diagnostic] = []

    def add(
        self,
        severity: Severity,
        code: DiagnosticCode,
        message: str,
        span: Optional[Span] = None,
    ) -> Diagnostic:
        diagnostic = Diagnostic(
            severity=severity,
            code=code,
            message=message,
            span=span or Span.unknown(),
            batch_index=self.batch_index,
        )
        self._diagnostics.append(diagnostic)
        log_diagnostic(self.log, diagnostic)
        return diagnostic

    def error(self, code: DiagnosticCode, message: str, span: Optional[Span] = None) -> Diagnostic:
        return self.add(Severity.ERROR, code, message, span)

    def warning(self, code: DiagnosticCode, message: str, span: Optional[Span] = None) -> Diagnostic:
        return self.add(Severity.WARNING, code, message, span)

    def info(self, code: DiagnosticCode, message: str, span: Optional[Span] = None) -> Diagnostic:
        return self.add(Severity.INFO, code, message, span)

    def from_exception(self, exc: TSQLParserError, severity: Severity = Severity.ERROR) -> Diagnostic:
        """Record a recovered parse exception."""
        return self.add(severity, exc.code, exc.message, exc.span)

    def extend(self, diagnostics) -> None:
        """Append already-built diagnostics without re-logging them."""
        for diagnostic in diagnostics:
            if self.batch_index is not None and diagnostic.batch_index is None:
                diagnostic = diagnostic.model_copy(update={"batch_index": self.batch_index})
            self._diagnostics.append(diagnostic)

    @property
    def diagnostics(self) -> List[Diagnostic]:
        return list(self._diagnostics)

    @property
    def has_errors(self) -> bool:
        return any(d.severity == Severity.ERROR for d in self._diagnostics)

    def by_code(self, code: DiagnosticCode) -> List[Diagnostic]:
        return [d for d in self._diagnostics if d.code == code]

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(self._diagnostics)

    def __len__(self) -> int:
        return len(self._diagnostics)
