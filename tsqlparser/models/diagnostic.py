"""Diagnostic data models."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from tsqlparser.models.token import Span


class Severity(str, Enum):
    """Severity level of a diagnostic."""

    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class DiagnosticCode(str, Enum):
    """Stable identifiers for every diagnostic the parser reports."""

    LEX_ERROR = "LexError"
    EXPRESSION_ERROR = "ExpressionError"
    SYNTAX_ERROR = "SyntaxError"
    MISSING_TERMINATOR = "MissingTerminator"
    AMBIGUOUS_CONSTRUCT = "AmbiguousConstruct"
    UNRECOGNIZED_STATEMENT = "UnrecognizedStatement"
    GO_TRAILING_TEXT = "GoTrailingText"
    EMPTY_INPUT = "EmptyInput"


class Diagnostic(BaseModel):
    """A problem found while tokenizing or parsing a script."""

    model_config = ConfigDict(frozen=True)

    severity: Severity
    code: DiagnosticCode
    message: str
    span: Span = Field(default_factory=Span.unknown)
    batch_index: Optional[int] = Field(
        None, description="Index of the batch the diagnostic belongs to"
    )

    @property
    def is_error(self) -> bool:
        return self.severity == Severity.ERROR

    def __str__(self) -> str:
        return f"{self.span} {self.severity.value} {self.code.value}: {self.message}"
