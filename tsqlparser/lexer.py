"""
T-SQL lexer.

Turns script text into a flat list of tokens. Keywords are emitted as
generic KEYWORD tokens; deciding whether a keyword is used as an identifier
is left to the parser.
"""

import re
from typing import List, Optional

from tsqlparser.config import settings
from tsqlparser.dialect import Dialect, get_dialect
from tsqlparser.errors import LexError
from tsqlparser.models.token import Span, Token, TokenKind

_WORD_RE = re.compile(r"(?:[^\W\d]|#)[\w@#$]*")
_VARIABLE_RE = re.compile(r"@@?[\w@#$]+")
_NUMBER_RE = re.compile(r"(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_HEX_RE = re.compile(r"0[xX][0-9a-fA-F]*")
_MONEY_RE = re.compile(r"\$(?:\d+\.?\d*|\.\d+)")
_PSEUDO_RE = re.compile(r"\$[^\W\d]\w*")
_GO_LINE_RE = re.compile(r"^[ \t]*GO\b", re.IGNORECASE | re.MULTILINE)

_TWO_CHAR_OPERATORS = frozenset([
    "::", "<>", "!=", "!<", "!>", "<=", ">=",
    "+=", "-=", "*=", "/=", "%=", "&=", "|=", "^=",
])
_ONE_CHAR_OPERATORS = frozenset("+-*/%&|^~=<>!")
_PUNCTUATION = frozenset("(),;.:{}")
BOM = "\ufeff"


class Lexer:
    """
    Single-use scanner over one source string.

    In strict mode an unterminated string, comment or bracketed identifier
    raises LexError. In recovering mode the error is recorded in ``errors``,
    the broken token becomes an ERROR token that stops before the next
    stand-alone ``GO`` line, and scanning continues from there.
    """

    def __init__(
        self,
        source: str,
        quoted_identifier: Optional[bool] = None,
        dialect: Optional[Dialect] = None,
        recover: bool = False,
    ):
        self.source = source
        self.length = len(source)
        self.quoted_identifier = (
            settings.quoted_identifier if quoted_identifier is None else quoted_identifier
        )
        self.dialect = dialect or get_dialect()
        self.recover = recover
        self.errors: List[LexError] = []

        self.pos = 0
        self.line = 1
        self.column = 1
        # SSMS saves scripts with a UTF-8 byte order mark; it is not part of the text
        if source.startswith(BOM):
            self.pos = 1
        self._tokens: List[Token] = []
        self._last_token_line = 0
        self._previous_word: Optional[str] = None

    # Position bookkeeping

    def _advance(self, count: int) -> None:
        chunk = self.source[self.pos:self.pos + count]
        newlines = chunk.count("\n")
        if newlines:
            self.line += newlines
            self.column = count - chunk.rfind("\n")
        else:
            self.column += count
        self.pos += count

    def _emit(self, kind: TokenKind, start: int, line: int, column: int, value: Optional[str] = None) -> Token:
        text = self.source[start:self.pos]
        token = Token(
            kind=kind,
            text=text,
            value=value if value is not None else text,
            span=Span(
                start_line=line,
                start_column=column,
                end_line=self.line,
                end_column=self.column,
                start_offset=start,
                end_offset=self.pos,
            ),
            line_start=line > self._last_token_line,
        )
        self._tokens.append(token)
        self._last_token_line = self.line
        if kind != TokenKind.COMMENT:
            self._track_quoted_identifier(token)
        return token

    def _track_quoted_identifier(self, token: Token) -> None:
        # SET QUOTED_IDENTIFIER ON|OFF changes how later double quotes lex
        upper = token.upper if token.is_word else None
        if self._previous_word == "QUOTED_IDENTIFIER" and upper in ("ON", "OFF"):
            self.quoted_identifier = upper == "ON"
        self._previous_word = upper

    def _fail(self, message: str, start: int, line: int, column: int, truncate: bool = True) -> None:
        if truncate:
            next_line = self.source.find("\n", start)
            match = _GO_LINE_RE.search(self.source, next_line + 1) if next_line != -1 else None
            end = match.start() if match else self.length
            # Leave the line break so the GO line still starts a line
            while match and end > start and self.source[end - 1] in "\r\n":
                end -= 1
        else:
            end = start + 1
        self._advance(end - self.pos)
        error = LexError(
            message,
            Span(
                start_line=line,
                start_column=column,
                end_line=self.line,
                end_column=self.column,
                start_offset=start,
                end_offset=self.pos,
            ),
        )
        if not self.recover:
            raise error
        self.errors.append(error)
        self._emit(TokenKind.ERROR, start, line, column)

    # Scanners

    def _scan_quoted(self, start: int, line: int, column: int, body_start: int, close: str, what: str) -> Optional[str]:
        """Scan up to an unescaped ``close`` character; doubled closers are escapes."""
        i = body_start
        parts = []
        while True:
            j = self.source.find(close, i)
            if j == -1:
                self._fail(f"Unterminated {what}", start, line, column)
                return None
            parts.append(self.source[i:j])
            if j + 1 < self.length and self.source[j + 1] == close:
                parts.append(close)
                i = j + 2
                continue
            self._advance(j + 1 - self.pos)
            return "".join(parts)

    def _scan_block_comment(self, start: int, line: int, column: int) -> None:
        depth = 0
        i = start
        while True:
            open_at = self.source.find("/*", i)
            close_at = self.source.find("*/", i)
            if close_at == -1:
                self._fail("Unterminated block comment", start, line, column)
                return
            if open_at != -1 and open_at < close_at:
                depth += 1
                i = open_at + 2
                continue
            depth -= 1
            i = close_at + 2
            if depth == 0:
                self._advance(i - self.pos)
                self._emit(TokenKind.COMMENT, start, line, column)
                return

    def tokenize(self) -> List[Token]:
        """Scan the whole source; the last token is always EOF."""
        source = self.source
        while self.pos < self.length:
            ch = source[self.pos]
            if ch.isspace():
                self._advance(1)
                continue

            start, line, column = self.pos, self.line, self.column
            nxt = source[self.pos + 1] if self.pos + 1 < self.length else ""

            if ch == "-" and nxt == "-":
                end = source.find("\n", self.pos)
                if end == -1:
                    end = self.length
                if end > self.pos and source[end - 1] == "\r":
                    end -= 1
                self._advance(end - self.pos)
                self._emit(TokenKind.COMMENT, start, line, column)
            elif ch == "/" and nxt == "*":
                self._scan_block_comment(start, line, column)
            elif ch == "'":
                value = self._scan_quoted(start, line, column, start + 1, "'", "string literal")
                if value is not None:
                    self._emit(TokenKind.STRING, start, line, column, value)
            elif ch in "nN" and nxt == "'":
                value = self._scan_quoted(start, line, column, start + 2, "'", "string literal")
                if value is not None:
                    self._emit(TokenKind.STRING, start, line, column, value)
            elif ch == '"':
                if self.quoted_identifier:
                    value = self._scan_quoted(start, line, column, start + 1, '"', "quoted identifier")
                    kind = TokenKind.QUOTED_IDENTIFIER
                else:
                    value = self._scan_quoted(start, line, column, start + 1, '"', "string literal")
                    kind = TokenKind.STRING
                if value is not None:
                    self._emit(kind, start, line, column, value)
            elif ch == "[":
                value = self._scan_quoted(start, line, column, start + 1, "]", "bracketed identifier")
                if value is not None:
                    self._emit(TokenKind.QUOTED_IDENTIFIER, start, line, column, value)
            elif ch == "0" and nxt in "xX" and nxt:
                match = _HEX_RE.match(source, self.pos)
                self._advance(match.end() - self.pos)
                self._emit(TokenKind.BINARY, start, line, column)
            elif "0" <= ch <= "9" or (ch == "." and "0" <= nxt <= "9" and nxt):
                match = _NUMBER_RE.match(source, self.pos)
                self._advance(match.end() - self.pos)
                self._emit(TokenKind.NUMBER, start, line, column)
            elif ch == "$":
                money = _MONEY_RE.match(source, self.pos)
                pseudo = _PSEUDO_RE.match(source, self.pos)
                if money:
                    self._advance(money.end() - self.pos)
                    self._emit(TokenKind.NUMBER, start, line, column)
                elif pseudo:
                    self._advance(pseudo.end() - self.pos)
                    self._emit(TokenKind.PSEUDO_COLUMN, start, line, column, pseudo.group().upper())
                else:
                    self._fail("Unexpected character '$'", start, line, column, truncate=False)
            elif ch == "@":
                match = _VARIABLE_RE.match(source, self.pos)
                if match is None:
                    self._fail("Unexpected character '@'", start, line, column, truncate=False)
                    continue
                self._advance(match.end() - self.pos)
                kind = TokenKind.SYSTEM_VARIABLE if match.group().startswith("@@") else TokenKind.VARIABLE
                self._emit(kind, start, line, column)
            elif ch == "#" or ch == "_" or ch.isalpha():
                match = _WORD_RE.match(source, self.pos)
                word = match.group()
                self._advance(len(word))
                if not word.startswith("#") and self.dialect.is_keyword(word):
                    self._emit(TokenKind.KEYWORD, start, line, column, word.upper())
                else:
                    self._emit(TokenKind.IDENTIFIER, start, line, column)
            elif ch == "?":
                self._advance(1)
                self._emit(TokenKind.PARAMETER, start, line, column)
            elif ch + nxt in _TWO_CHAR_OPERATORS:
                self._advance(2)
                self._emit(TokenKind.OPERATOR, start, line, column)
            elif ch in _ONE_CHAR_OPERATORS:
                self._advance(1)
                self._emit(TokenKind.OPERATOR, start, line, column)
            elif ch in _PUNCTUATION:
                self._advance(1)
                self._emit(TokenKind.PUNCTUATION, start, line, column)
            else:
                self._fail(f"Unexpected character {ch!r}", start, line, column, truncate=False)

        eof_span = Span(
            start_line=self.line,
            start_column=self.column,
            end_line=self.line,
            end_column=self.column,
            start_offset=self.pos,
            end_offset=self.pos,
        )
        self._tokens.append(Token(kind=TokenKind.EOF, text="", span=eof_span, line_start=True))
        return self._tokens


def tokenize(
    source: str,
    quoted_identifier: Optional[bool] = None,
    include_comments: bool = False,
) -> List[Token]:
    """
    Tokenize T-SQL text.

    Args:
        source: Script text
        quoted_identifier: Treat double quotes as identifiers; defaults to
            ``settings.quoted_identifier``
        include_comments: Keep COMMENT tokens in the output

    Returns:
        Tokens ending with an EOF token

    Raises:
        LexError: On an unterminated string, comment or bracketed identifier
    """
    tokens = Lexer(source, quoted_identifier=quoted_identifier).tokenize()
    if include_comments:
        return tokens
    return [t for t in tokens if t.kind != TokenKind.COMMENT]
