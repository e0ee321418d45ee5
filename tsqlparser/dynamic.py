"""
Explicit re-parsing of dynamic SQL.

``EXEC ('...')`` and ``sp_executesql N'...'`` carry SQL as string values.
The parser leaves them opaque; the helpers here turn constant text back into
a Script on request. Text built from variables cannot be known statically and
is skipped.
"""

from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict

from tsqlparser.analysis import walk
from tsqlparser.config import settings
from tsqlparser.errors import DynamicSqlError
from tsqlparser.models.base import Expression, Node, Statement
from tsqlparser.models.expressions import BinaryOp, Parenthesized, StringLiteral
from tsqlparser.models.script import Script
from tsqlparser.models.statements import ExecuteProcedure, ExecuteString
from tsqlparser.utils.logging import get_logger

logger = get_logger(__name__)

EXECUTESQL_PROCEDURE = "sp_executesql"


class DynamicSql(BaseModel):
    """A statement whose dynamic SQL text was re-parsed."""

    model_config = ConfigDict(frozen=True)

    statement: Statement
    text: str
    script: Script
    depth: int


def constant_text(expression: Expression) -> Optional[str]:
    """Fold string literals joined with ``+``; None when any part is not constant."""
    if isinstance(expression, StringLiteral):
        return expression.value
    if isinstance(expression, Parenthesized):
        return constant_text(expression.expression)
    if isinstance(expression, BinaryOp) and expression.operator == "+":
        left = constant_text(expression.left)
        right = constant_text(expression.right)
        if left is None or right is None:
            return None
        return left + right
    return None


def dynamic_sql_text(node: Node) -> Optional[str]:
    """
    Constant SQL text executed by ``node``.

    Handles ``EXEC (<string>)`` and ``EXEC sp_executesql <string>, ...``;
    returns None for any other node and for text that is not constant.
    """
    if isinstance(node, ExecuteString):
        return constant_text(node.command)
    if isinstance(node, ExecuteProcedure) and node.procedure is not None:
        if node.procedure.name.lower() != EXECUTESQL_PROCEDURE or not node.arguments:
            return None
        first = node.arguments[0]
        if first.name is not None and first.name.lower() != "@stmt":
            return None
        return constant_text(first.value)
    return None


def reparse_dynamic_sql(
    value: Union[str, Node],
    depth: int = 1,
    quoted_identifier: Optional[bool] = None,
) -> Script:
    """
    Parse dynamic SQL text as a script of its own.

    Args:
        value: The SQL text, a constant string expression, or an EXEC
            statement carrying one
        depth: Nesting level of this text; 1 for SQL run by the outer script
        quoted_identifier: Passed through to the parse

    Raises:
        DynamicSqlError: If the text is not constant or ``depth`` exceeds
            ``settings.dynamic_sql_max_depth``
    """
    from tsqlparser.services.script_parser import parse

    if depth > settings.dynamic_sql_max_depth:
        span = value.span if isinstance(value, Node) else None
        raise DynamicSqlError(
            f"Dynamic SQL nesting exceeds the maximum depth of {settings.dynamic_sql_max_depth}",
            span,
        )

    if isinstance(value, str):
        text = value
    elif isinstance(value, Expression):
        text = constant_text(value)
    else:
        text = dynamic_sql_text(value)
    if text is None:
        raise DynamicSqlError("Dynamic SQL text is not a constant string", value.span)

    logger.debug("Re-parsing dynamic SQL", extra={"depth": depth, "length": len(text)})
    return parse(text, quoted_identifier=quoted_identifier)


def expand_dynamic_sql(script: Node, max_depth: Optional[int] = None) -> List[DynamicSql]:
    """
    Re-parse every constant dynamic SQL string in ``script``.

    Strings found inside re-parsed text are expanded as well, down to
    ``max_depth`` levels (``settings.dynamic_sql_max_depth`` by default).
    Results are in discovery order, outer text before the text it runs.
    """
    limit = max_depth if max_depth is not None else settings.dynamic_sql_max_depth
    results: List[DynamicSql] = []
    _expand(script, 1, min(limit, settings.dynamic_sql_max_depth), results)
    return results


def _expand(node: Node, depth: int, limit: int, results: List[DynamicSql]) -> None:
    if depth > limit:
        return
    for child in walk(node):
        if not isinstance(child, (ExecuteString, ExecuteProcedure)):
            continue
        text = dynamic_sql_text(child)
        if text is None:
            continue
        nested = reparse_dynamic_sql(text, depth=depth)
        results.append(DynamicSql(statement=child, text=text, script=nested, depth=depth))
        _expand(nested, depth + 1, limit, results)


__all__ = [
    "DynamicSql",
    "constant_text",
    "dynamic_sql_text",
    "expand_dynamic_sql",
    "reparse_dynamic_sql",
]
