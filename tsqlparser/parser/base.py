"""
Token cursor and shared grammar helpers for the parser mixins.

The parser never backtracks: every decision is made from the current token
and at most a couple of tokens of lookahead.
"""

from contextlib import contextmanager
from typing import Iterator, List, Optional, Sequence, Tuple

from tsqlparser.config import settings
from tsqlparser.diagnostics import DiagnosticsCollector
from tsqlparser.dialect import Dialect, get_dialect
from tsqlparser.errors import ExpressionError, StatementError, TSQLParserError
from tsqlparser.models.base import (
    DataType,
    Expression,
    Identifier,
    IdentifierPart,
    OptionItem,
    QuoteStyle,
)
from tsqlparser.models.expressions import KeywordValue, QuantityValue, StringLiteral
from tsqlparser.models.token import Span, Token, TokenKind

ASSIGNMENT_OPERATORS = frozenset(["=", "+=", "-=", "*=", "/=", "%=", "&=", "|=", "^="])

_NAME_KINDS = (TokenKind.IDENTIFIER, TokenKind.QUOTED_IDENTIFIER)

# units written after a number in option values: HISTORY_RETENTION_PERIOD = 6 MONTHS
_OPTION_UNITS = frozenset([
    "DAY", "DAYS", "WEEK", "WEEKS", "MONTH", "MONTHS", "YEAR", "YEARS",
    "HOUR", "HOURS", "MINUTE", "MINUTES", "SECOND", "SECONDS",
    "KB", "MB", "GB", "TB",
])


def describe(token: Token) -> str:
    if token.kind == TokenKind.EOF:
        return "end of input"
    return repr(token.text)


class ParserBase:
    """Cursor over the significant tokens of one batch plus parse state."""

    def __init__(
        self,
        tokens: Sequence[Token],
        source: str = "",
        diagnostics: Optional[DiagnosticsCollector] = None,
        dialect: Optional[Dialect] = None,
        max_depth: Optional[int] = None,
    ):
        self.tokens: List[Token] = [t for t in tokens if t.kind != TokenKind.COMMENT]
        if not self.tokens or self.tokens[-1].kind != TokenKind.EOF:
            end = self.tokens[-1].span if self.tokens else Span.unknown()
            eof_span = Span(
                start_line=end.end_line,
                start_column=end.end_column,
                end_line=end.end_line,
                end_column=end.end_column,
                start_offset=end.end_offset,
                end_offset=end.end_offset,
            )
            self.tokens.append(Token(kind=TokenKind.EOF, text="", span=eof_span, line_start=True))
        self.source = source
        self.dialect = dialect or get_dialect()
        self.diagnostics = diagnostics if diagnostics is not None else DiagnosticsCollector()
        self.max_depth = max_depth if max_depth is not None else settings.max_nesting_depth
        self.pos = 0

        # Statement-boundary state
        self._depth = 0
        self._expression_depth = 0
        self._terminated = True
        self._block_depth = 0
        self._at_batch_start = True

    # Cursor

    @property
    def current(self) -> Token:
        return self.tokens[self.pos]

    @property
    def previous(self) -> Token:
        return self.tokens[self.pos - 1] if self.pos > 0 else self.tokens[0]

    def peek(self, offset: int = 1) -> Token:
        index = self.pos + offset
        if index >= len(self.tokens):
            return self.tokens[-1]
        return self.tokens[index]

    def advance(self) -> Token:
        token = self.tokens[self.pos]
        if token.kind != TokenKind.EOF:
            self.pos += 1
        return token

    def at_end(self) -> bool:
        return self.current.kind == TokenKind.EOF

    def span_from(self, start: Token) -> Span:
        return start.span.to(self.previous.span)

    # Token tests

    def is_word(self, word: str, offset: int = 0) -> bool:
        token = self.peek(offset)
        return token.is_word and token.upper == word

    def is_any_word(self, words, offset: int = 0) -> bool:
        token = self.peek(offset)
        return token.is_word and token.upper in words

    def at_words(self, *words: str) -> bool:
        return all(self.is_word(word, i) for i, word in enumerate(words))

    def match_word(self, *words: str) -> Optional[Token]:
        if self.current.is_word and self.current.upper in words:
            return self.advance()
        return None

    def match_words(self, *words: str) -> bool:
        if self.at_words(*words):
            for _ in words:
                self.advance()
            return True
        return False

    def expect_word(self, *words: str) -> Token:
        token = self.match_word(*words)
        if token is None:
            raise self.unexpected(" or ".join(words))
        return token

    def expect_words(self, *words: str) -> Token:
        first = self.current
        if not self.match_words(*words):
            raise self.unexpected(" ".join(words))
        return first

    def is_punct(self, char: str, offset: int = 0) -> bool:
        token = self.peek(offset)
        return token.kind == TokenKind.PUNCTUATION and token.text == char

    def match_punct(self, char: str) -> bool:
        if self.is_punct(char):
            self.advance()
            return True
        return False

    def expect_punct(self, char: str) -> Token:
        if not self.is_punct(char):
            raise self.unexpected(f"'{char}'")
        return self.advance()

    def is_op(self, op: str, offset: int = 0) -> bool:
        token = self.peek(offset)
        return token.kind == TokenKind.OPERATOR and token.text == op

    def match_op(self, op: str) -> bool:
        if self.is_op(op):
            self.advance()
            return True
        return False

    def expect_op(self, op: str) -> Token:
        if not self.is_op(op):
            raise self.unexpected(f"'{op}'")
        return self.advance()

    # Errors

    def error(self, message: str, token: Optional[Token] = None) -> TSQLParserError:
        """Build the exception for a grammar failure at ``token``."""
        span = (token or self.current).span
        if self._expression_depth:
            return ExpressionError(message, span)
        return StatementError(message, span)

    def unexpected(self, expected: str) -> TSQLParserError:
        return self.error(f"Expected {expected}, found {describe(self.current)}")

    @contextmanager
    def nested(self, token: Token) -> Iterator[None]:
        """Guard recursion depth for expressions, queries and statements."""
        self._depth += 1
        try:
            if self._depth > self.max_depth:
                raise ExpressionError(
                    f"Nesting exceeds the maximum depth of {self.max_depth}", token.span
                )
            yield
        finally:
            self._depth -= 1

    # Identifiers

    def is_identifier(self, offset: int = 0) -> bool:
        """True when the token can name something: not a reserved keyword."""
        token = self.peek(offset)
        if token.kind in _NAME_KINDS:
            return True
        return token.kind == TokenKind.KEYWORD and token.upper not in self.dialect.reserved

    def _part_from(self, token: Token) -> IdentifierPart:
        if token.kind == TokenKind.QUOTED_IDENTIFIER:
            quote = QuoteStyle.BRACKET if token.text.startswith("[") else QuoteStyle.DOUBLE
            return IdentifierPart(value=token.value, quote=quote, span=token.span)
        return IdentifierPart(value=token.text, span=token.span)

    def identifier_part(self) -> IdentifierPart:
        if not self.is_identifier():
            raise self.unexpected("identifier")
        return self._part_from(self.advance())

    def name_part(self) -> IdentifierPart:
        """Any word or quoted name, reserved keywords included."""
        token = self.current
        if token.kind not in _NAME_KINDS and token.kind != TokenKind.KEYWORD:
            raise self.unexpected("name")
        return self._part_from(self.advance())

    def multipart_identifier(self, first: Optional[IdentifierPart] = None) -> Identifier:
        """``a``, ``a.b``, ``server.db..obj``; parts after a dot may be reserved words."""
        start = self.current
        parts = [first if first is not None else self.identifier_part()]
        if first is not None:
            start_span = first.span
        else:
            start_span = start.span
        while self.is_punct(".") and not self.is_op("*", 1):
            self.advance()
            while self.is_punct("."):
                parts.append(IdentifierPart(value="", span=self.current.span))
                self.advance()
            parts.append(self.name_part())
        return Identifier(parts=tuple(parts), span=start_span.to(self.previous.span))

    def identifier_list(self) -> Tuple[IdentifierPart, ...]:
        """``(a, b, c)``"""
        self.expect_punct("(")
        parts = [self.identifier_part()]
        while self.match_punct(","):
            parts.append(self.identifier_part())
        self.expect_punct(")")
        return tuple(parts)

    def can_start_alias(self) -> bool:
        token = self.current
        if token.kind == TokenKind.QUOTED_IDENTIFIER:
            return True
        if token.kind == TokenKind.IDENTIFIER or (
            token.kind == TokenKind.KEYWORD and token.upper not in self.dialect.reserved
        ):
            if token.upper in self.dialect.alias_stop:
                return False
            # ``label:`` on the next line is not an alias
            return not self.is_punct(":", 1)
        return False

    def parse_alias(self, allow_string: bool = False) -> Tuple[Optional[IdentifierPart], bool]:
        """Parse ``[AS] alias``; returns the alias and whether AS was written."""
        if self.match_word("AS"):
            if allow_string and self.current.kind == TokenKind.STRING:
                return self._string_alias(), True
            # after AS any word names the alias: ``AS Current``, ``AS RowCount``
            return self.name_part(), True
        if self.can_start_alias():
            return self.identifier_part(), False
        if allow_string and self.current.kind == TokenKind.STRING:
            return self._string_alias(), False
        return None, False

    def _string_alias(self) -> IdentifierPart:
        token = self.advance()
        return IdentifierPart(value=token.value, quote=QuoteStyle.SINGLE, span=token.span)

    # Types

    def parse_data_type(self) -> DataType:
        start = self.current
        name = self.multipart_identifier(first=self.name_part())
        if name.name.upper() == "DOUBLE" and self.is_word("PRECISION"):
            self.advance()
            name = Identifier(
                parts=(IdentifierPart(value="DOUBLE PRECISION"),), span=self.span_from(start)
            )
        parameters: List[str] = []
        if self.is_punct("("):
            self.advance()
            while True:
                words: List[str] = []
                while not self.is_punct(",") and not self.is_punct(")"):
                    if self.at_end():
                        raise self.unexpected("')'")
                    words.append(self.advance().text)
                if not words:
                    raise self.unexpected("type parameter")
                parameters.append(" ".join(words))
                if not self.match_punct(","):
                    break
            self.expect_punct(")")
        return DataType(name=name, parameters=tuple(parameters), span=self.span_from(start))

    # Options

    def parse_option_value(self) -> Expression:
        token = self.current
        follows_call = self.is_punct("(", 1) or self.is_punct(".", 1)
        # ON (HISTORY_TABLE = ...) keeps ON as the value
        if token.is_word and (not follows_call or token.upper in ("ON", "OFF")):
            self.advance()
            word = token.upper if token.kind == TokenKind.KEYWORD else token.text
            return KeywordValue(word=word, span=token.span)
        # FILEGROWTH = 10%
        if token.kind == TokenKind.NUMBER and self.is_op("%", 1) and (self.is_punct(",", 2) or self.is_punct(")", 2)):
            amount = self._parse_prefix()
            self.advance()
            return QuantityValue(amount=amount, unit="%", span=self.span_from(token))
        value = self.parse_expression()
        if self.current.is_word and self.current.upper in _OPTION_UNITS:
            unit = self.advance()
            return QuantityValue(amount=value, unit=unit.upper, span=self.span_from(token))
        return value

    def _value_ahead(self) -> bool:
        token = self.current
        if token.kind in (
            TokenKind.STRING,
            TokenKind.NUMBER,
            TokenKind.VARIABLE,
            TokenKind.BINARY,
        ):
            return True
        return self.is_op("-") and self.peek(1).kind == TokenKind.NUMBER

    def parse_option_item(self, stop_words: Sequence[str] = ()) -> OptionItem:
        """
        Parse one generic option.

        Shapes: ``NAME``, ``NAME = value``, ``NAME value``, ``NAME (args)``,
        ``NAME = value (args)``, ``MOVE 'a' TO 'b'``. A name may span several
        words (``SERVER CERTIFICATE``, ``OPTIMIZE FOR UNKNOWN``).
        """
        start = self.current
        names: List[str] = []
        if self.current.kind == TokenKind.VARIABLE:
            names.append(self.advance().text)
        while self.current.is_word or self.current.kind == TokenKind.QUOTED_IDENTIFIER:
            token = self.current
            if token.upper in stop_words and not (token.upper == "AS" and names and names[-1] == "EXECUTE"):
                break
            if names and token.line_start and token.upper in self.dialect.statement_starters:
                break
            self.advance()
            names.append(token.upper if token.kind == TokenKind.KEYWORD else token.text)
        if not names:
            raise self.unexpected("option")

        has_equals = self.match_op("=")
        value = None
        to = None
        if has_equals:
            value = self.parse_option_value()
        elif self._value_ahead():
            value = self.parse_expression()
            if self.match_word("TO"):
                to = self.parse_expression()

        arguments: List = []
        parenthesized = False
        if self.is_punct("("):
            self.advance()
            parenthesized = True
            if not self.is_punct(")"):
                arguments.append(self._parse_option_argument())
                while self.match_punct(","):
                    arguments.append(self._parse_option_argument())
            self.expect_punct(")")

        return OptionItem(
            name=" ".join(names),
            value=value,
            has_equals=has_equals,
            arguments=tuple(arguments),
            parenthesized=parenthesized,
            to=to,
            span=self.span_from(start),
        )

    def _parse_option_argument(self):
        token = self.current
        if token.kind == TokenKind.VARIABLE or (
            token.is_word and not self.is_punct("(", 1) and not self.is_punct(".", 1)
        ) or token.kind == TokenKind.QUOTED_IDENTIFIER:
            return self.parse_option_item()
        return self.parse_expression()

    def parse_option_list(self, stop_words: Sequence[str] = ()) -> Tuple[OptionItem, ...]:
        """Comma-separated options, without surrounding parentheses."""
        items = [self.parse_option_item(stop_words)]
        while self.match_punct(","):
            items.append(self.parse_option_item(stop_words))
        return tuple(items)

    def parse_parenthesized_options(self) -> Tuple[OptionItem, ...]:
        self.expect_punct("(")
        items = self.parse_option_list()
        self.expect_punct(")")
        return items

    def parse_string(self) -> StringLiteral:
        token = self.current
        if token.kind != TokenKind.STRING:
            raise self.unexpected("string literal")
        self.advance()
        return StringLiteral(value=token.value, unicode=token.text[:1] in "nN", span=token.span)

    # Implemented by the expression mixin
    def parse_expression(self, min_precedence: int = 0) -> Expression:  # pragma: no cover
        raise NotImplementedError
