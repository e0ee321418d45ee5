"""
Batch splitter.

``GO`` is not T-SQL: it is a client-side convention that cuts a script into
batches sent to the server one at a time. A ``GO`` keyword counts as a
separator only when it is the first token on its line.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from tsqlparser.config import settings
from tsqlparser.models.diagnostic import Diagnostic, DiagnosticCode, Severity
from tsqlparser.models.script import GoSeparator
from tsqlparser.models.token import Token, TokenKind
from tsqlparser.utils.logging import get_logger, log_parse_phase

logger = get_logger(__name__)


class RawBatch(BaseModel):
    """Tokens of one batch, before parsing."""

    model_config = ConfigDict(frozen=True)

    index: int
    tokens: List[Token] = Field(default_factory=list)
    go: Optional[GoSeparator] = None
    diagnostics: List[Diagnostic] = Field(default_factory=list)

    @property
    def significant_tokens(self) -> List[Token]:
        return [t for t in self.tokens if t.kind != TokenKind.COMMENT]

    @property
    def is_empty(self) -> bool:
        return not self.significant_tokens


def is_go_separator(token: Token) -> bool:
    return token.is_word and token.upper == "GO" and token.line_start


def split_batches(tokens: List[Token], trailing_text_policy: Optional[str] = None) -> List[RawBatch]:
    """
    Split a token stream into batches at ``GO`` lines.

    Every ``GO`` closes a batch, even an empty one. The section after the
    last ``GO`` becomes a batch only if it holds a non-comment token.

    Args:
        tokens: Tokens from the lexer, comments included; EOF is ignored
        trailing_text_policy: 'warn' or 'error' for text after ``GO [n]`` on
            the same line; defaults to ``settings.go_trailing_text``. The
            text itself opens the next batch.

    Returns:
        Batches in source order
    """
    policy = trailing_text_policy or settings.go_trailing_text
    severity = Severity.ERROR if policy == "error" else Severity.WARNING

    log_parse_phase(logger, "split_batches", "started", token_count=len(tokens))

    batches: List[RawBatch] = []
    current: List[Token] = []
    i = 0
    count = len(tokens)

    while i < count:
        token = tokens[i]
        if token.kind == TokenKind.EOF:
            break
        if not is_go_separator(token):
            current.append(token)
            i += 1
            continue

        go_line = token.span.start_line
        span = token.span
        repeat_count = 1
        diagnostics: List[Diagnostic] = []
        i += 1

        if i < count and tokens[i].kind == TokenKind.NUMBER and tokens[i].span.start_line == go_line:
            if tokens[i].text.isdigit():
                repeat_count = max(int(tokens[i].text), 1)
                span = span.to(tokens[i].span)
                i += 1

        # text after GO [n] is reported, then parsed as the start of the next batch
        carried: List[Token] = []
        while i < count and tokens[i].kind != TokenKind.EOF and tokens[i].span.start_line == go_line:
            carried.append(tokens[i])
            i += 1
        trailing = [t for t in carried if t.kind != TokenKind.COMMENT]

        if trailing:
            text = " ".join(t.text for t in trailing)
            diagnostics.append(Diagnostic(
                severity=severity,
                code=DiagnosticCode.GO_TRAILING_TEXT,
                message=f"Unexpected text after GO: {text!r}",
                span=trailing[0].span.to(trailing[-1].span),
                batch_index=len(batches),
            ))

        batches.append(RawBatch(
            index=len(batches),
            tokens=current,
            go=GoSeparator(repeat_count=repeat_count, span=span),
            diagnostics=diagnostics,
        ))
        current = carried

    if any(t.kind != TokenKind.COMMENT for t in current):
        batches.append(RawBatch(index=len(batches), tokens=current))

    log_parse_phase(logger, "split_batches", "completed", batch_count=len(batches))
    return batches
