"""
Script parser service.

Drives one parse end to end: tokenize, split at ``GO``, parse each batch with
recovery, analyze batch scope, and attach diagnostics and metrics. Parse
failures inside a batch become diagnostics; only programming errors escape.
"""

from typing import List, Optional, Sequence

from tsqlparser.analysis import analyze_scope
from tsqlparser.batches import RawBatch, split_batches
from tsqlparser.diagnostics import DiagnosticsCollector
from tsqlparser.errors import LexError
from tsqlparser.lexer import Lexer
from tsqlparser.models.diagnostic import Diagnostic, DiagnosticCode, Severity
from tsqlparser.models.script import Batch, Script
from tsqlparser.models.statements import Unrecognized
from tsqlparser.models.token import Span, TokenKind
from tsqlparser.parser import Parser
from tsqlparser.utils.logging import (
    ContextLoggerAdapter,
    get_logger,
    log_error_with_context,
    log_parse_phase,
)
from tsqlparser.utils.metrics import ParseMetrics

logger = get_logger(__name__)


def parse(
    source: str,
    quoted_identifier: Optional[bool] = None,
    script_id: Optional[str] = None,
) -> Script:
    """
    Parse a T-SQL script into batches of statements.

    Args:
        source: Script text
        quoted_identifier: Treat double quotes as identifiers; defaults to
            ``settings.quoted_identifier``
        script_id: Label used in logs and metrics

    Returns:
        Script with every batch, its statements and all diagnostics
    """
    log = logger.with_context(script_id=script_id) if script_id else logger
    metrics = ParseMetrics(script_id)
    metrics.start(len(source))

    try:
        log_parse_phase(log, "tokenize", "started", source_length=len(source))
        lexer = Lexer(source, quoted_identifier=quoted_identifier, recover=True)
        tokens = lexer.tokenize()
        metrics.record_tokens(len(tokens) - 1)
        log_parse_phase(log, "tokenize", "completed", token_count=len(tokens) - 1)

        if not any(t.kind not in (TokenKind.COMMENT, TokenKind.EOF) for t in tokens):
            empty = Diagnostic(
                severity=Severity.INFO,
                code=DiagnosticCode.EMPTY_INPUT,
                message="Script contains no statements",
            )
            metrics.record_diagnostic(empty)
            metrics.complete()
            return Script(diagnostics=(empty,), metrics=metrics.to_dict())

        batches = [
            _parse_raw_batch(raw, source, lexer.errors, log)
            for raw in split_batches(tokens)
        ]
    except Exception as e:
        metrics.status = "failed"
        log_error_with_context(log, "Unexpected failure while parsing script", e, script_id=script_id)
        raise

    diagnostics = []
    for batch in batches:
        metrics.record_batch(
            len(batch.statements),
            sum(1 for s in batch.statements if isinstance(s, Unrecognized)),
        )
        for diagnostic in batch.diagnostics:
            metrics.record_diagnostic(diagnostic)
            diagnostics.append(diagnostic)

    metrics.complete()
    return Script(
        batches=tuple(batches),
        diagnostics=tuple(diagnostics),
        span=tokens[0].span.to(tokens[-1].span),
        metrics=metrics.to_dict(),
    )


def _parse_raw_batch(
    raw: RawBatch,
    source: str,
    lex_errors: Sequence[LexError],
    log: ContextLoggerAdapter,
) -> Batch:
    batch_log = log.with_context(batch_index=raw.index)
    log_parse_phase(batch_log, "parse_batch", "started", token_count=len(raw.tokens))

    collector = DiagnosticsCollector(raw.index, log=batch_log)
    collector.extend(raw.diagnostics)
    significant = raw.significant_tokens

    if any(t.kind == TokenKind.ERROR for t in significant):
        # A lexical error leaves no trustworthy token stream for this batch
        span = significant[0].span.to(significant[-1].span)
        for error in lex_errors:
            if span.start_offset <= error.span.start_offset <= span.end_offset:
                collector.from_exception(error)
        statements: List = [Unrecognized(
            text=span.text(source),
            reason="Lexical error",
            span=span,
        )]
    else:
        parser = Parser(raw.tokens, source=source, diagnostics=collector)
        statements = parser.parse_batch_statements()

    span = _batch_span(raw)
    log_parse_phase(batch_log, "parse_batch", "completed", statement_count=len(statements))
    return Batch(
        index=raw.index,
        statements=tuple(statements),
        go=raw.go,
        diagnostics=tuple(collector.diagnostics),
        scope=analyze_scope(statements),
        span=span,
    )


def _batch_span(raw: RawBatch) -> Span:
    tokens = raw.tokens
    if tokens:
        span = tokens[0].span.to(tokens[-1].span)
        return span.to(raw.go.span) if raw.go is not None else span
    if raw.go is not None:
        return raw.go.span
    return Span.unknown()
