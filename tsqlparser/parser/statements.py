"""
Statement dispatch and error recovery.

Statements are selected by their leading one to three words. A statement
that fails to parse is replaced by an Unrecognized node covering the tokens
up to the next resynchronization point, so one bad statement never costs
the rest of the batch.
"""

from typing import Callable, List, Optional

from tsqlparser.errors import ExpressionError, TSQLParserError
from tsqlparser.models.base import Statement
from tsqlparser.models.diagnostic import DiagnosticCode
from tsqlparser.models.dml import Merge, Select
from tsqlparser.models.statements import Unrecognized
from tsqlparser.models.token import TokenKind
from tsqlparser.parser.admin import AdminParser
from tsqlparser.parser.base import ParserBase, describe
from tsqlparser.parser.broker import BrokerParser
from tsqlparser.parser.ddl import DdlParser
from tsqlparser.parser.dml import DmlParser
from tsqlparser.parser.expressions import ExpressionParser
from tsqlparser.parser.procedural import ProceduralParser
from tsqlparser.parser.queries import QueryParser
from tsqlparser.parser.relations import RelationParser
from tsqlparser.parser.security import SecurityParser
from tsqlparser.utils.logging import get_logger

logger = get_logger(__name__)

# Leading word -> handler method
_HANDLERS = {
    "SELECT": "parse_select_statement",
    "WITH": "parse_with_statement",
    "INSERT": "parse_insert",
    "UPDATE": "parse_update",
    "DELETE": "parse_delete",
    "MERGE": "parse_merge",
    "CREATE": "parse_create",
    "ALTER": "parse_alter",
    "DROP": "parse_drop",
    "TRUNCATE": "parse_truncate",
    "DECLARE": "parse_declare",
    "SET": "parse_set",
    "IF": "parse_if",
    "WHILE": "parse_while",
    "BEGIN": "parse_begin",
    "GOTO": "parse_goto",
    "RETURN": "parse_return",
    "BREAK": "parse_break",
    "CONTINUE": "parse_continue",
    "PRINT": "parse_print",
    "RAISERROR": "parse_raiserror",
    "THROW": "parse_throw",
    "WAITFOR": "parse_waitfor",
    "USE": "parse_use",
    "OPEN": "parse_open",
    "FETCH": "parse_fetch",
    "CLOSE": "parse_close",
    "DEALLOCATE": "parse_deallocate",
    "EXEC": "parse_execute",
    "EXECUTE": "parse_execute",
    "REVERT": "parse_revert",
    "COMMIT": "parse_commit",
    "ROLLBACK": "parse_rollback",
    "SAVE": "parse_save",
    "BACKUP": "parse_backup",
    "RESTORE": "parse_restore",
    "GRANT": "parse_grant",
    "REVOKE": "parse_grant",
    "DENY": "parse_grant",
    "DBCC": "parse_dbcc",
    "RECONFIGURE": "parse_reconfigure",
    "CHECKPOINT": "parse_checkpoint",
    "ENABLE": "parse_enable_trigger",
    "DISABLE": "parse_enable_trigger",
    "SEND": "parse_send",
    "RECEIVE": "parse_receive",
}

_CTE_TARGETS = {
    "INSERT": "parse_insert",
    "UPDATE": "parse_update",
    "DELETE": "parse_delete",
    "MERGE": "parse_merge",
}

# BEGIN followed by one of these does not open a BEGIN ... END block
_NON_BLOCK_BEGIN = ("TRAN", "TRANSACTION", "DISTRIBUTED", "DIALOG", "CONVERSATION")


class StatementParser:
    """Mixin: statement dispatch, statement lists and resynchronization."""

    def _dispatch_statement(self) -> Optional[Statement]:
        token = self.current
        at_batch_start = self._at_batch_start
        self._at_batch_start = False

        if self.is_punct("("):
            return self.parse_select_statement()
        if self.is_identifier() and self.is_punct(":", 1):
            return self.parse_label()
        if token.is_word:
            upper = token.upper
            if upper == "END" and self.is_word("CONVERSATION", 1):
                return self.parse_end_conversation()
            if upper in ("END", "ELSE"):
                raise self.error(f"Unexpected {upper} without a matching BEGIN or IF", token)
            if upper == "BULK" and self.is_word("INSERT", 1):
                return self.parse_bulk_insert()
            if upper == "GET" and self.is_word("CONVERSATION", 1):
                return self.parse_get_conversation_group()
            handler = _HANDLERS.get(upper)
            if handler is not None:
                return getattr(self, handler)()
        if at_batch_start and token.kind in (TokenKind.IDENTIFIER, TokenKind.QUOTED_IDENTIFIER):
            # A procedure name alone may open a batch: ``sp_who2 'active'``
            return self.parse_implicit_execute()
        return None

    def parse_statement(self) -> Optional[Statement]:
        """
        Parse one statement and its optional ``;``.

        Returns None, usually without consuming anything, when the leading
        words do not start a known statement.
        """
        start = self.current
        with self.nested(start):
            statement = self._dispatch_statement()
        if statement is None:
            return None

        terminated = self.match_punct(";")
        if isinstance(statement, Merge) and not terminated:
            self.diagnostics.error(
                DiagnosticCode.MISSING_TERMINATOR,
                "MERGE statement must be terminated by a semicolon",
                statement.span,
            )
        self._terminated = terminated or self._after_semicolon()
        return statement

    def parse_required_statement(self) -> Statement:
        """The single statement governed by IF, ELSE or WHILE."""
        start = self.current
        self._terminated = False
        statement = self.parse_statement()
        if statement is None:
            raise self.error(f"Expected a statement, found {describe(start)}", start)
        return statement

    def _after_semicolon(self) -> bool:
        previous = self.previous
        return previous.kind == TokenKind.PUNCTUATION and previous.text == ";"

    def parse_statement_safely(self) -> Statement:
        start_index = self.pos
        start = self.current
        try:
            statement = self.parse_statement()
        except TSQLParserError as exc:
            self.diagnostics.from_exception(exc)
            return self._recover(start_index, exc.message)
        except RecursionError:
            exc = ExpressionError("Statement is nested too deeply to parse", start.span)
            self.diagnostics.from_exception(exc)
            return self._recover(start_index, exc.message)

        if statement is None:
            node = self._recover(start_index, "Unrecognized statement")
            self.diagnostics.warning(
                DiagnosticCode.UNRECOGNIZED_STATEMENT,
                f"Unrecognized statement starting with {describe(start)}",
                node.span,
            )
            return node
        return statement

    def _recover(self, start_index: int, reason: str) -> Unrecognized:
        self.synchronize(start_index)
        self._terminated = self._after_semicolon()
        first = self.tokens[start_index]
        span = first.span.to(self.previous.span) if self.pos > start_index else first.span
        if self.source:
            text = span.text(self.source)
        else:
            text = " ".join(t.text for t in self.tokens[start_index:self.pos])
        logger.debug(
            "Skipped unparsable statement",
            extra={"line": first.span.start_line, "token_count": self.pos - start_index},
        )
        return Unrecognized(text=text, reason=reason, span=span)

    def synchronize(self, start_index: int) -> None:
        """
        Skip to the next statement boundary after a failure.

        Stops after a top-level ``;``, before a line-leading statement word
        at parenthesis depth 0, before the ``END`` closing the enclosing
        block, or at the end of the batch. BEGIN/END and CASE/END pairs
        opened while skipping are skipped whole.
        """
        self.pos = min(max(self.pos, start_index + 1), len(self.tokens) - 1)
        parens = 0
        cases = 0
        blocks = 0
        while not self.at_end():
            token = self.current
            if token.kind == TokenKind.PUNCTUATION:
                if token.text == "(":
                    parens += 1
                elif token.text == ")":
                    parens = max(parens - 1, 0)
                elif token.text == ";" and parens == 0 and blocks == 0:
                    self.advance()
                    return
            elif token.is_word and parens == 0:
                upper = token.upper
                if (
                    token.line_start
                    and blocks == 0
                    and cases == 0
                    and upper in self.dialect.statement_starters
                ):
                    return
                if upper == "CASE":
                    cases += 1
                elif upper == "END" and not self.is_word("CONVERSATION", 1):
                    if cases:
                        cases -= 1
                    elif blocks:
                        blocks -= 1
                    elif self._block_depth > 0:
                        return
                elif upper == "BEGIN" and not self.is_any_word(_NON_BLOCK_BEGIN, 1):
                    blocks += 1
            self.advance()

    def parse_statement_list(self, is_terminator: Callable[[], bool]) -> List[Statement]:
        """Statements up to the end of input or until ``is_terminator()`` holds."""
        statements: List[Statement] = []
        self._terminated = True
        while not self.at_end() and not is_terminator():
            if self.match_punct(";"):
                self._terminated = True
                continue
            statements.append(self.parse_statement_safely())
        return statements

    # WITH

    def parse_with_statement(self) -> Statement:
        start = self.current
        if not self._terminated:
            self.diagnostics.warning(
                DiagnosticCode.AMBIGUOUS_CONSTRUCT,
                "WITH follows a statement not terminated by ';'; reading it as a common table expression",
                start.span,
            )
        with_clause = self.parse_with_clause()
        if self.is_word("SELECT") or self.is_punct("("):
            query = self.parse_query(with_clause)
            return Select(query=query, span=self.span_from(start))
        handler = _CTE_TARGETS.get(self.current.upper) if self.current.is_word else None
        if handler is None:
            raise self.unexpected("SELECT, INSERT, UPDATE, DELETE or MERGE after WITH")
        return getattr(self, handler)(with_clause)

    def parse_batch_statements(self) -> List[Statement]:
        """Parse every statement of the batch."""
        self._at_batch_start = True
        self._block_depth = 0
        return self.parse_statement_list(lambda: False)


class Parser(
    StatementParser,
    SecurityParser,
    BrokerParser,
    AdminParser,
    ProceduralParser,
    DdlParser,
    DmlParser,
    QueryParser,
    RelationParser,
    ExpressionParser,
    ParserBase,
):
    """Recursive-descent parser over the tokens of one batch."""
