"""Expression node models."""

from enum import Enum
from typing import Optional, Tuple

from tsqlparser.models.base import (
    DataType,
    Expression,
    Identifier,
    IdentifierPart,
    Node,
    QueryExpression,
    SortOrder,
)


class KeywordValue(Expression):
    """A bare word used as a value, e.g. ``ON`` in ``SET NOCOUNT ON``."""

    word: str


class QuantityValue(Expression):
    """An option value with a unit: ``6 MONTHS``, ``10 GB``, ``10%``."""

    amount: Expression
    unit: str


# Literals

class IntegerLiteral(Expression):
    value: int


class NumericKind(str, Enum):
    DECIMAL = "decimal"
    FLOAT = "float"
    MONEY = "money"


class NumericLiteral(Expression):
    """Decimal, scientific or money literal kept in its source spelling."""

    text: str
    kind: NumericKind = NumericKind.DECIMAL


class StringLiteral(Expression):
    value: str
    unicode: bool = False


class BinaryLiteral(Expression):
    text: str


class NullLiteral(Expression):
    pass


class DefaultValue(Expression):
    pass


class ParameterMarker(Expression):
    pass


# References

class ColumnRef(Expression):
    name: Identifier


class Star(Expression):
    qualifier: Optional[Identifier] = None


class VariableRef(Expression):
    name: str

    @property
    def normalized(self) -> str:
        return self.name.casefold()


class SystemVariableRef(Expression):
    name: str


class PseudoColumn(Expression):
    """``$IDENTITY``, ``$ROWGUID`` or ``$action``."""

    name: str


# Operators and predicates

class UnaryOp(Expression):
    operator: str
    operand: Expression


class BinaryOp(Expression):
    operator: str
    left: Expression
    right: Expression


class Between(Expression):
    expression: Expression
    low: Expression
    high: Expression
    negated: bool = False


class InList(Expression):
    expression: Expression
    values: Tuple[Expression, ...]
    negated: bool = False


class InSubquery(Expression):
    expression: Expression
    query: QueryExpression
    negated: bool = False


class Like(Expression):
    expression: Expression
    pattern: Expression
    escape: Optional[Expression] = None
    negated: bool = False


class IsNull(Expression):
    expression: Expression
    negated: bool = False


class IsDistinctFrom(Expression):
    left: Expression
    right: Expression
    negated: bool = False


class Exists(Expression):
    query: QueryExpression


class Quantifier(str, Enum):
    """Quantifier of a subquery comparison."""

    ALL = "ALL"
    ANY = "ANY"
    SOME = "SOME"

    @property
    def empty_set_result(self) -> bool:
        """Truth value of the comparison when the subquery yields no rows."""
        return self is Quantifier.ALL


class QuantifiedComparison(Expression):
    """``expr op ALL|ANY|SOME (subquery)``."""

    left: Expression
    operator: str
    quantifier: Quantifier
    query: QueryExpression

    @property
    def empty_set_result(self) -> bool:
        return self.quantifier.empty_set_result


# Windows and calls

class OrderItem(Node):
    expression: Expression
    order: Optional[SortOrder] = None


class FrameBoundKind(str, Enum):
    UNBOUNDED_PRECEDING = "UNBOUNDED PRECEDING"
    UNBOUNDED_FOLLOWING = "UNBOUNDED FOLLOWING"
    CURRENT_ROW = "CURRENT ROW"
    PRECEDING = "PRECEDING"
    FOLLOWING = "FOLLOWING"


class FrameBound(Node):
    kind: FrameBoundKind
    offset: Optional[Expression] = None


class WindowFrame(Node):
    unit: str
    start: FrameBound
    end: Optional[FrameBound] = None


class WindowSpec(Node):
    """Contents of ``OVER (...)`` or a ``WINDOW`` clause definition."""

    base_window: Optional[IdentifierPart] = None
    partition_by: Tuple[Expression, ...] = ()
    order_by: Tuple[OrderItem, ...] = ()
    frame: Optional[WindowFrame] = None


class FunctionCall(Expression):
    name: Identifier
    arguments: Tuple[Expression, ...] = ()
    distinct: bool = False
    within_group: Tuple[OrderItem, ...] = ()
    over: Optional[WindowSpec] = None
    over_window: Optional[IdentifierPart] = None
    niladic: bool = False


class WhenClause(Node):
    condition: Expression
    result: Expression


class Case(Expression):
    operand: Optional[Expression] = None
    whens: Tuple[WhenClause, ...]
    else_: Optional[Expression] = None


class Cast(Expression):
    expression: Expression
    data_type: DataType
    try_: bool = False


class Convert(Expression):
    data_type: DataType
    expression: Expression
    style: Optional[Expression] = None
    try_: bool = False


class ParseCall(Expression):
    expression: Expression
    data_type: DataType
    culture: Optional[Expression] = None
    try_: bool = False


class Subquery(Expression):
    query: QueryExpression


class MethodCall(Expression):
    """Instance method on an xml or CLR value, e.g. ``@x.value('.', 'int')``."""

    target: Expression
    method: IdentifierPart
    arguments: Tuple[Expression, ...] = ()


class StaticMethodCall(Expression):
    """Static CLR method such as ``geography::Point(1, 2, 4326)``."""

    type_name: Identifier
    method: IdentifierPart
    arguments: Tuple[Expression, ...] = ()


class Collate(Expression):
    expression: Expression
    collation: str


class AtTimeZone(Expression):
    expression: Expression
    zone: Expression


class NextValueFor(Expression):
    sequence: Identifier
    over: Optional[WindowSpec] = None


class PartitionFunctionCall(Expression):
    """``$PARTITION.function(expr)``."""

    database: Optional[IdentifierPart] = None
    function: IdentifierPart
    arguments: Tuple[Expression, ...] = ()


class Parenthesized(Expression):
    expression: Expression


class TupleExpr(Expression):
    items: Tuple[Expression, ...] = ()


class GroupingKind(str, Enum):
    ROLLUP = "ROLLUP"
    CUBE = "CUBE"
    GROUPING_SETS = "GROUPING SETS"


class GroupingSpec(Expression):
    kind: GroupingKind
    items: Tuple[Expression, ...] = ()
