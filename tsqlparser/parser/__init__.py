"""Recursive-descent parser for T-SQL batches and expressions."""

from typing import List, Optional, Sequence, Tuple, Union

from tsqlparser.diagnostics import DiagnosticsCollector
from tsqlparser.errors import ExpressionError
from tsqlparser.lexer import tokenize
from tsqlparser.models.base import Expression, Statement
from tsqlparser.models.diagnostic import Diagnostic
from tsqlparser.models.token import Token
from tsqlparser.parser.base import describe
from tsqlparser.parser.statements import Parser


def parse_batch(
    tokens: Sequence[Token],
    source: str = "",
    batch_index: Optional[int] = None,
) -> Tuple[List[Statement], List[Diagnostic]]:
    """
    Parse the tokens of one batch.

    Args:
        tokens: Batch tokens; comments are ignored
        source: Full script text, used for the text of Unrecognized nodes
        batch_index: Stamped on every diagnostic

    Returns:
        Statements in source order and the diagnostics found on the way
    """
    collector = DiagnosticsCollector(batch_index)
    parser = Parser(tokens, source=source, diagnostics=collector)
    statements = parser.parse_batch_statements()
    return statements, collector.diagnostics


def parse_expression(
    source: Union[str, Sequence[Token]],
    min_precedence: int = 0,
    quoted_identifier: Optional[bool] = None,
) -> Expression:
    """
    Parse a single scalar or boolean expression.

    Raises:
        LexError: If the text cannot be tokenized
        ExpressionError: If the expression is malformed or followed by
            anything other than the end of input
    """
    if isinstance(source, str):
        text = source
        tokens = tokenize(source, quoted_identifier=quoted_identifier)
    else:
        text = ""
        tokens = list(source)
    parser = Parser(tokens, source=text)
    expression = parser.parse_expression(min_precedence)
    if not parser.at_end():
        raise ExpressionError(
            f"Unexpected {describe(parser.current)} after expression", parser.current.span
        )
    return expression


__all__ = ["Parser", "parse_batch", "parse_expression"]
