"""Token and source span models."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict


class TokenKind(str, Enum):
    """Lexical category of a token."""

    KEYWORD = "keyword"
    IDENTIFIER = "identifier"
    QUOTED_IDENTIFIER = "quoted_identifier"
    STRING = "string"
    NUMBER = "number"
    BINARY = "binary"
    OPERATOR = "operator"
    PUNCTUATION = "punctuation"
    VARIABLE = "variable"
    SYSTEM_VARIABLE = "system_variable"
    PARAMETER = "parameter"
    PSEUDO_COLUMN = "pseudo_column"
    COMMENT = "comment"
    ERROR = "error"
    EOF = "eof"


class Span(BaseModel):
    """Region of the source text, 1-based lines/columns and 0-based offsets."""

    model_config = ConfigDict(frozen=True)

    start_line: int = 0
    start_column: int = 0
    end_line: int = 0
    end_column: int = 0
    start_offset: int = 0
    end_offset: int = 0

    @classmethod
    def unknown(cls) -> "Span":
        return cls()

    @property
    def is_unknown(self) -> bool:
        return self.start_line == 0

    def to(self, other: "Span") -> "Span":
        """Return a span covering this span through ``other``."""
        if self.is_unknown:
            return other
        if other.is_unknown:
            return self
        return Span(
            start_line=self.start_line,
            start_column=self.start_column,
            end_line=other.end_line,
            end_column=other.end_column,
            start_offset=self.start_offset,
            end_offset=other.end_offset,
        )

    def text(self, source: str) -> str:
        return source[self.start_offset:self.end_offset]

    def __str__(self) -> str:
        return f"{self.start_line}:{self.start_column}"


class Token(BaseModel):
    """A lexical token.

    ``value`` holds the decoded form: unescaped string contents, the name
    inside brackets or double quotes, or the upper-cased keyword.
    ``line_start`` is true when no other token (comments included) precedes
    this one on its source line.
    """

    model_config = ConfigDict(frozen=True)

    kind: TokenKind
    text: str
    value: Optional[str] = None
    span: Span
    line_start: bool = False

    @property
    def upper(self) -> str:
        return self.text.upper()

    @property
    def is_word(self) -> bool:
        return self.kind in (TokenKind.KEYWORD, TokenKind.IDENTIFIER)

    @property
    def is_comment(self) -> bool:
        return self.kind == TokenKind.COMMENT

    def __str__(self) -> str:
        return f"{self.kind.value}({self.text!r})@{self.span}"
