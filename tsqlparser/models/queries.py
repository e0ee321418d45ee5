"""Query expression and table source models."""

from enum import Enum
from typing import Optional, Tuple

from tsqlparser.models.base import (
    DataType,
    Expression,
    Identifier,
    IdentifierPart,
    Node,
    OptionItem,
    QueryExpression,
    Relation,
    Statement,
)
from tsqlparser.models.expressions import (
    ColumnRef,
    FunctionCall,
    OrderItem,
    StringLiteral,
    VariableRef,
    WindowSpec,
)


# Table sources

class TableHint(Node):
    """``NOLOCK``, ``INDEX(ix)``, ``INDEX = ix``, ``FORCESEEK(...)``."""

    name: str
    arguments: Tuple[Expression, ...] = ()
    value: Optional[Expression] = None


class TemporalKind(str, Enum):
    AS_OF = "AS OF"
    FROM_TO = "FROM"
    BETWEEN = "BETWEEN"
    CONTAINED_IN = "CONTAINED IN"
    ALL = "ALL"


class TemporalClause(Node):
    """``FOR SYSTEM_TIME ...`` on a system-versioned table."""

    kind: TemporalKind
    start: Optional[Expression] = None
    end: Optional[Expression] = None


class TableSample(Node):
    size: Expression
    unit: Optional[str] = None
    system: bool = False
    repeatable: Optional[Expression] = None


class AliasedRelation(Relation):
    alias: Optional[IdentifierPart] = None
    column_aliases: Tuple[IdentifierPart, ...] = ()


class NamedTable(AliasedRelation):
    name: Identifier
    temporal: Optional[TemporalClause] = None
    tablesample: Optional[TableSample] = None
    hints: Tuple[TableHint, ...] = ()
    legacy_hints: bool = False


class VariableTable(AliasedRelation):
    variable: VariableRef


class DerivedTable(AliasedRelation):
    query: QueryExpression


class DmlTable(AliasedRelation):
    """A data-modification statement with OUTPUT used as a row source."""

    statement: Statement


class SchemaColumn(Node):
    """Column of an ``OPENJSON``/``OPENXML`` ``WITH`` schema."""

    name: IdentifierPart
    data_type: DataType
    path: Optional[StringLiteral] = None
    as_json: bool = False


class TableFunction(AliasedRelation):
    """Table-valued function, rowset function or ``.nodes()`` method call."""

    call: Expression
    schema_columns: Tuple[SchemaColumn, ...] = ()
    schema_table: Optional[Identifier] = None


class BulkOpenRowset(AliasedRelation):
    """``OPENROWSET(BULK 'file', options)``."""

    path: Expression
    options: Tuple[OptionItem, ...] = ()


class ValuesRow(Node):
    values: Tuple[Expression, ...]


class ValuesTable(AliasedRelation):
    rows: Tuple[ValuesRow, ...]


class JoinKind(str, Enum):
    INNER = "INNER"
    LEFT = "LEFT"
    RIGHT = "RIGHT"
    FULL = "FULL"
    CROSS = "CROSS"
    CROSS_APPLY = "CROSS APPLY"
    OUTER_APPLY = "OUTER APPLY"


class JoinedTable(Relation):
    kind: JoinKind
    left: Relation
    right: Relation
    condition: Optional[Expression] = None
    hint: Optional[str] = None
    explicit_kind: bool = True
    outer: bool = False


class ParenthesizedRelation(Relation):
    relation: Relation


class PivotTable(AliasedRelation):
    source: Relation
    aggregate: FunctionCall
    pivot_column: ColumnRef
    values: Tuple[IdentifierPart, ...]


class UnpivotTable(AliasedRelation):
    source: Relation
    value_column: IdentifierPart
    name_column: IdentifierPart
    columns: Tuple[IdentifierPart, ...]


# Query expressions

class AliasStyle(str, Enum):
    NONE = "none"
    AS = "as"
    BARE = "bare"
    EQUALS = "equals"


class SelectItem(Node):
    expression: Expression
    alias: Optional[IdentifierPart] = None
    alias_style: AliasStyle = AliasStyle.NONE


class SelectAssignment(Node):
    """``SELECT @v = expr`` variable assignment inside a select list."""

    variable: VariableRef
    operator: str = "="
    value: Expression


class TopClause(Node):
    value: Expression
    percent: bool = False
    with_ties: bool = False
    parenthesized: bool = True


class GroupByClause(Node):
    items: Tuple[Expression, ...]
    all_: bool = False


class NamedWindow(Node):
    name: IdentifierPart
    spec: WindowSpec


class QuerySpecification(QueryExpression):
    """A single ``SELECT ... FROM ... WHERE ...`` block."""

    distinct: bool = False
    all_: bool = False
    top: Optional[TopClause] = None
    items: Tuple[Node, ...]
    into: Optional[Identifier] = None
    from_: Tuple[Relation, ...] = ()
    where: Optional[Expression] = None
    group_by: Optional[GroupByClause] = None
    having: Optional[Expression] = None
    windows: Tuple[NamedWindow, ...] = ()


class SetOperator(str, Enum):
    UNION = "UNION"
    UNION_ALL = "UNION ALL"
    EXCEPT = "EXCEPT"
    INTERSECT = "INTERSECT"


class SetOperation(QueryExpression):
    operator: SetOperator
    left: QueryExpression
    right: QueryExpression


class ParenthesizedQuery(QueryExpression):
    query: QueryExpression


class CommonTableExpression(Node):
    name: IdentifierPart
    columns: Tuple[IdentifierPart, ...] = ()
    query: QueryExpression


class XmlNamespace(Node):
    uri: StringLiteral
    prefix: Optional[IdentifierPart] = None

    @property
    def is_default(self) -> bool:
        return self.prefix is None


class WithClause(Node):
    ctes: Tuple[CommonTableExpression, ...] = ()
    xml_namespaces: Tuple[XmlNamespace, ...] = ()


class ForClause(Node):
    """``FOR XML ...``, ``FOR JSON ...`` or ``FOR BROWSE``."""

    kind: str
    mode: Optional[str] = None
    mode_argument: Optional[StringLiteral] = None
    options: Tuple[OptionItem, ...] = ()


class Query(QueryExpression):
    """A complete query: optional CTEs, a body and the trailing clauses."""

    with_: Optional[WithClause] = None
    body: QueryExpression
    order_by: Tuple[OrderItem, ...] = ()
    offset: Optional[Expression] = None
    fetch: Optional[Expression] = None
    for_clause: Optional[ForClause] = None
    options: Tuple[OptionItem, ...] = ()

    @property
    def specification(self) -> Optional[QuerySpecification]:
        """Left-most ``SELECT`` block of the body."""
        body = self.body
        while True:
            if isinstance(body, QuerySpecification):
                return body
            if isinstance(body, SetOperation):
                body = body.left
            elif isinstance(body, (ParenthesizedQuery,)):
                body = body.query
            elif isinstance(body, Query):
                body = body.body
            else:
                return None
