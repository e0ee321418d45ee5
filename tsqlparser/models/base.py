"""Base syntax tree models shared by every node family."""

from enum import Enum
from typing import Any, Dict, Iterator, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from tsqlparser.models.token import Span


def _iter_nodes(value: Any) -> Iterator["Node"]:
    if isinstance(value, Node):
        yield value
    elif isinstance(value, (tuple, list)):
        for item in value:
            yield from _iter_nodes(item)


def _shape(value: Any) -> Any:
    if isinstance(value, Node):
        return value.shape()
    if isinstance(value, (tuple, list)):
        return tuple(_shape(item) for item in value)
    if isinstance(value, Enum):
        return value.value
    return value


def _to_plain(value: Any) -> Any:
    if isinstance(value, Node):
        return value.to_dict()
    if isinstance(value, (tuple, list)):
        return [_to_plain(item) for item in value]
    if isinstance(value, Enum):
        return value.value
    return value


class Node(BaseModel):
    """
    Root of every syntax tree node.

    Nodes are immutable once built and always carry the span of the source
    text they were parsed from. Child nodes are discovered through the
    declared model fields, so subclasses only declare data.
    """

    model_config = ConfigDict(frozen=True)

    span: Span = Field(default_factory=Span.unknown, repr=False)

    @property
    def node_type(self) -> str:
        return type(self).__name__

    def children(self) -> Iterator["Node"]:
        """Yield direct child nodes in field declaration order."""
        for name in type(self).model_fields:
            if name == "span":
                continue
            yield from _iter_nodes(getattr(self, name))

    def shape(self) -> Any:
        """
        Return a hashable description of the tree ignoring source spans.

        Two trees with equal shapes are structurally equal; identifier parts
        compare case-insensitively and without regard to quoting.
        """
        fields = tuple(
            (name, _shape(getattr(self, name)))
            for name in type(self).model_fields
            if name != "span"
        )
        return (self.node_type, fields)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the tree into JSON-compatible primitives."""
        data: Dict[str, Any] = {"node_type": self.node_type}
        for name in type(self).model_fields:
            data[name] = _to_plain(getattr(self, name))
        data["span"] = self.span.model_dump()
        return data


class Expression(Node):
    """Scalar or boolean expression."""


class Relation(Node):
    """Table-valued source usable in FROM, JOIN, APPLY and MERGE ... USING."""


class QueryExpression(Node):
    """A query body: a specification, a set operation or a full query."""


class Statement(Node):
    """A single T-SQL statement."""


class QuoteStyle(str, Enum):
    NONE = "none"
    BRACKET = "bracket"
    DOUBLE = "double"
    SINGLE = "single"


class SortOrder(str, Enum):
    ASC = "ASC"
    DESC = "DESC"


class CreateMode(str, Enum):
    """How a CREATE/ALTER style statement was introduced."""

    CREATE = "CREATE"
    ALTER = "ALTER"
    CREATE_OR_ALTER = "CREATE OR ALTER"


class IdentifierPart(Node):
    """
    One part of a possibly qualified name.

    Equality and hashing are case-insensitive and ignore the quote style;
    the original spelling and quoting are kept for printing.
    """

    value: str
    quote: QuoteStyle = QuoteStyle.NONE

    @property
    def normalized(self) -> str:
        return self.value.casefold()

    def __eq__(self, other: object) -> bool:
        if isinstance(other, IdentifierPart):
            return self.normalized == other.normalized
        if isinstance(other, str):
            return self.normalized == other.casefold()
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.normalized)

    def shape(self) -> Any:
        return ("IdentifierPart", self.normalized)

    def __str__(self) -> str:
        return self.value


class Identifier(Node):
    """Multi-part name such as ``server.db.schema.object``; parts may be empty."""

    parts: Tuple[IdentifierPart, ...]

    @property
    def name(self) -> str:
        return self.parts[-1].value

    @property
    def schema_name(self) -> Optional[str]:
        return self.parts[-2].value or None if len(self.parts) >= 2 else None

    @property
    def database_name(self) -> Optional[str]:
        return self.parts[-3].value or None if len(self.parts) >= 3 else None

    @property
    def is_temporary(self) -> bool:
        return self.name.startswith("#")

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Identifier):
            return self.parts == other.parts
        if isinstance(other, str):
            return str(self).casefold() == other.casefold()
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.parts)

    def __str__(self) -> str:
        return ".".join(part.value for part in self.parts)


class DataType(Node):
    """A type reference such as ``decimal(10, 2)`` or ``nvarchar(max)``."""

    name: Identifier
    parameters: Tuple[str, ...] = ()

    @property
    def is_max(self) -> bool:
        return any(p.upper() == "MAX" for p in self.parameters)

    def __str__(self) -> str:
        if self.parameters:
            return f"{self.name}({', '.join(self.parameters)})"
        return str(self.name)


class OptionItem(Node):
    """
    Generic ``NAME [= value] [(arguments)]`` option.

    Used for WITH clauses of DDL, BACKUP/RESTORE, BULK INSERT and query
    OPTION hints. ``to`` holds the second operand of ``MOVE 'a' TO 'b'``.
    """

    name: str
    value: Optional[Expression] = None
    has_equals: bool = False
    arguments: Tuple[Node, ...] = ()
    parenthesized: bool = False
    to: Optional[Expression] = None
