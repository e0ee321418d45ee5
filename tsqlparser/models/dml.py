"""Data manipulation statement models."""

from enum import Enum
from typing import Optional, Tuple

from tsqlparser.models.base import (
    Expression,
    Identifier,
    IdentifierPart,
    Node,
    OptionItem,
    Relation,
    Statement,
)
from tsqlparser.models.expressions import VariableRef
from tsqlparser.models.queries import Query, TopClause, ValuesRow, WithClause


class Select(Statement):
    query: Query


class OutputClause(Node):
    items: Tuple[Node, ...]
    into_table: Optional[Identifier] = None
    into_variable: Optional[VariableRef] = None
    into_columns: Tuple[IdentifierPart, ...] = ()


class ValuesClause(Node):
    rows: Tuple[ValuesRow, ...]


class Assignment(Node):
    """``SET`` item of UPDATE/MERGE: ``col = expr``, ``@v = col = expr``, ``col += expr``."""

    target: Expression
    operator: str = "="
    value: Expression
    variable: Optional[VariableRef] = None


class CursorRef(Node):
    name: Optional[IdentifierPart] = None
    variable: Optional[VariableRef] = None
    global_: bool = False


class CurrentOf(Node):
    cursor: CursorRef


class Insert(Statement):
    with_: Optional[WithClause] = None
    top: Optional[TopClause] = None
    into_keyword: bool = True
    target: Relation
    columns: Tuple[IdentifierPart, ...] = ()
    outputs: Tuple[OutputClause, ...] = ()
    source: Optional[Node] = None
    default_values: bool = False
    options: Tuple[OptionItem, ...] = ()


class Update(Statement):
    with_: Optional[WithClause] = None
    top: Optional[TopClause] = None
    target: Relation
    set_clauses: Tuple[Node, ...]
    outputs: Tuple[OutputClause, ...] = ()
    from_: Tuple[Relation, ...] = ()
    where: Optional[Expression] = None
    current_of: Optional[CurrentOf] = None
    options: Tuple[OptionItem, ...] = ()


class Delete(Statement):
    with_: Optional[WithClause] = None
    top: Optional[TopClause] = None
    from_keyword: bool = True
    target: Relation
    outputs: Tuple[OutputClause, ...] = ()
    from_: Tuple[Relation, ...] = ()
    where: Optional[Expression] = None
    current_of: Optional[CurrentOf] = None
    options: Tuple[OptionItem, ...] = ()


class MergeMatch(str, Enum):
    MATCHED = "MATCHED"
    NOT_MATCHED = "NOT MATCHED"
    NOT_MATCHED_BY_TARGET = "NOT MATCHED BY TARGET"
    NOT_MATCHED_BY_SOURCE = "NOT MATCHED BY SOURCE"

    @property
    def targets_missing_rows(self) -> bool:
        return self in (MergeMatch.NOT_MATCHED, MergeMatch.NOT_MATCHED_BY_TARGET)


class MergeUpdate(Node):
    set_clauses: Tuple[Node, ...]


class MergeDelete(Node):
    pass


class MergeInsert(Node):
    columns: Tuple[IdentifierPart, ...] = ()
    values: Tuple[Expression, ...] = ()
    default_values: bool = False


class MergeWhen(Node):
    match: MergeMatch
    condition: Optional[Expression] = None
    action: Node


class Merge(Statement):
    with_: Optional[WithClause] = None
    top: Optional[TopClause] = None
    into_keyword: bool = True
    target: Relation
    source: Relation
    condition: Expression
    whens: Tuple[MergeWhen, ...]
    outputs: Tuple[OutputClause, ...] = ()
    options: Tuple[OptionItem, ...] = ()


class BulkInsert(Statement):
    table: Identifier
    source: Expression
    options: Tuple[OptionItem, ...] = ()
