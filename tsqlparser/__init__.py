"""
T-SQL script parser.

Turns SQL Server scripts into immutable syntax trees without executing
anything. Scripts are split into batches at ``GO`` lines, every batch is
parsed with statement-level error recovery, and problems are reported as
diagnostics next to a best-effort tree.

Example:
    from tsqlparser import parse, to_sql

    script = parse("SELECT a FROM t WHERE b = 1\\nGO")
    for statement in script.statements:
        print(to_sql(statement))
"""

from tsqlparser.analysis import analyze_scope, find_all, structurally_equal, walk
from tsqlparser.batches import split_batches
from tsqlparser.config import settings
from tsqlparser.dynamic import expand_dynamic_sql, reparse_dynamic_sql
from tsqlparser.errors import (
    DynamicSqlError,
    ExpressionError,
    LexError,
    StatementError,
    TSQLParserError,
)
from tsqlparser.lexer import Lexer, tokenize
from tsqlparser.parser import Parser, parse_batch, parse_expression
from tsqlparser.printer import to_sql
from tsqlparser.services import parse, parse_many, parse_many_async

__version__ = "1.0.0"

__all__ = [
    "DynamicSqlError",
    "ExpressionError",
    "LexError",
    "Lexer",
    "Parser",
    "StatementError",
    "TSQLParserError",
    "analyze_scope",
    "expand_dynamic_sql",
    "find_all",
    "parse",
    "parse_batch",
    "parse_expression",
    "parse_many",
    "parse_many_async",
    "reparse_dynamic_sql",
    "settings",
    "split_batches",
    "structurally_equal",
    "to_sql",
    "tokenize",
    "walk",
]
