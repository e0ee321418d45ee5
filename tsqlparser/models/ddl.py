"""Data definition statement models."""

from enum import Enum
from typing import Optional, Tuple

from tsqlparser.models.base import (
    CreateMode,
    DataType,
    Expression,
    Identifier,
    IdentifierPart,
    Node,
    OptionItem,
    QueryExpression,
    SortOrder,
    Statement,
)
from tsqlparser.models.expressions import FunctionCall


# Column and constraint building blocks

class IdentitySpec(Node):
    seed: Optional[Expression] = None
    increment: Optional[Expression] = None


class ReferentialAction(str, Enum):
    NO_ACTION = "NO ACTION"
    CASCADE = "CASCADE"
    SET_NULL = "SET NULL"
    SET_DEFAULT = "SET DEFAULT"


class ForeignKeyReference(Node):
    table: Identifier
    columns: Tuple[IdentifierPart, ...] = ()
    on_delete: Optional[ReferentialAction] = None
    on_update: Optional[ReferentialAction] = None
    not_for_replication: bool = False


class IndexColumn(Node):
    name: IdentifierPart
    order: Optional[SortOrder] = None


class StorageClause(Node):
    """``ON filegroup`` or ``ON partition_scheme(column)``."""

    name: IdentifierPart
    column: Optional[IdentifierPart] = None


class ConstraintKind(str, Enum):
    PRIMARY_KEY = "PRIMARY KEY"
    UNIQUE = "UNIQUE"
    FOREIGN_KEY = "FOREIGN KEY"
    CHECK = "CHECK"
    DEFAULT = "DEFAULT"


class ConstraintDefinition(Node):
    name: Optional[IdentifierPart] = None
    kind: ConstraintKind
    clustered: Optional[bool] = None
    columns: Tuple[IndexColumn, ...] = ()
    expression: Optional[Expression] = None
    references: Optional[ForeignKeyReference] = None
    options: Tuple[OptionItem, ...] = ()
    storage: Optional[StorageClause] = None
    for_column: Optional[IdentifierPart] = None
    with_values: bool = False
    not_for_replication: bool = False


class ColumnAttribute(Node):
    """Column flag such as ``SPARSE``, ``ROWGUIDCOL`` or ``MASKED WITH (...)``."""

    name: str
    value: Optional[Expression] = None


class ColumnDefinition(Node):
    name: IdentifierPart
    data_type: Optional[DataType] = None
    computed: Optional[Expression] = None
    persisted: bool = False
    collation: Optional[str] = None
    identity: Optional[IdentitySpec] = None
    nullable: Optional[bool] = None
    constraints: Tuple[ConstraintDefinition, ...] = ()
    attributes: Tuple[ColumnAttribute, ...] = ()


class InlineIndex(Node):
    name: IdentifierPart
    unique: bool = False
    clustered: Optional[bool] = None
    columns: Tuple[IndexColumn, ...] = ()


class PeriodForSystemTime(Node):
    start_column: IdentifierPart
    end_column: IdentifierPart


class TableDefinition(Node):
    """Parenthesized list of columns, constraints and inline indexes."""

    elements: Tuple[Node, ...]


class CreateTable(Statement):
    name: Identifier
    definition: TableDefinition
    storage: Optional[StorageClause] = None
    textimage_on: Optional[IdentifierPart] = None
    options: Tuple[OptionItem, ...] = ()


# ALTER TABLE actions

class AlterTableAdd(Node):
    elements: Tuple[Node, ...]
    check: Optional[bool] = None


class AlterTableAlterColumn(Node):
    column: ColumnDefinition


class DropItem(Node):
    kind: str
    name: IdentifierPart
    if_exists: bool = False


class AlterTableDrop(Node):
    items: Tuple[DropItem, ...]


class AlterTableConstraintCheck(Node):
    """``[WITH CHECK|NOCHECK] CHECK|NOCHECK CONSTRAINT ALL|names``."""

    enable: bool
    with_check: Optional[bool] = None
    names: Tuple[IdentifierPart, ...] = ()


class AlterTableTrigger(Node):
    enable: bool
    names: Tuple[IdentifierPart, ...] = ()


class AlterTableSwitch(Node):
    source_partition: Optional[Expression] = None
    target: Identifier
    target_partition: Optional[Expression] = None


class AlterTableSet(Node):
    options: Tuple[OptionItem, ...]


class AlterTableRebuild(Node):
    partition: Optional[Expression] = None
    options: Tuple[OptionItem, ...] = ()


class AlterTable(Statement):
    name: Identifier
    action: Node


# Programmable objects

class CreateView(Statement):
    mode: CreateMode = CreateMode.CREATE
    name: Identifier
    columns: Tuple[IdentifierPart, ...] = ()
    attributes: Tuple[str, ...] = ()
    query: QueryExpression
    check_option: bool = False


class ParameterDefinition(Node):
    name: str
    data_type: DataType
    varying: bool = False
    default: Optional[Expression] = None
    output: bool = False
    readonly: bool = False


class CreateProcedure(Statement):
    mode: CreateMode = CreateMode.CREATE
    name: Identifier
    parameters: Tuple[ParameterDefinition, ...] = ()
    parenthesized: bool = False
    options: Tuple[OptionItem, ...] = ()
    for_replication: bool = False
    body: Tuple[Statement, ...] = ()


class FunctionReturnKind(str, Enum):
    SCALAR = "scalar"
    TABLE = "table"
    TABLE_VARIABLE = "table_variable"


class FunctionReturns(Node):
    kind: FunctionReturnKind
    data_type: Optional[DataType] = None
    variable: Optional[str] = None
    table: Optional[TableDefinition] = None


class CreateFunction(Statement):
    mode: CreateMode = CreateMode.CREATE
    name: Identifier
    parameters: Tuple[ParameterDefinition, ...] = ()
    returns: FunctionReturns
    options: Tuple[OptionItem, ...] = ()
    body: Tuple[Statement, ...] = ()


class CreateTrigger(Statement):
    mode: CreateMode = CreateMode.CREATE
    name: Identifier
    target: Optional[Identifier] = None
    scope: Optional[str] = None
    options: Tuple[OptionItem, ...] = ()
    timing: str
    events: Tuple[str, ...]
    not_for_replication: bool = False
    body: Tuple[Statement, ...] = ()


class CreateIndex(Statement):
    name: IdentifierPart
    table: Identifier
    unique: bool = False
    clustered: Optional[bool] = None
    columnstore: bool = False
    columns: Tuple[IndexColumn, ...] = ()
    include: Tuple[IdentifierPart, ...] = ()
    where: Optional[Expression] = None
    options: Tuple[OptionItem, ...] = ()
    storage: Optional[StorageClause] = None


class AlterIndex(Statement):
    name: Optional[IdentifierPart] = None
    table: Identifier
    action: str
    partition: Optional[Expression] = None
    options: Tuple[OptionItem, ...] = ()

    @property
    def all_indexes(self) -> bool:
        return self.name is None


class CreateXmlIndex(Statement):
    """
    ``CREATE [PRIMARY] XML INDEX``.

    A secondary index names its primary in ``using_index`` and its kind
    (PATH, VALUE or PROPERTY) in ``secondary_kind``.
    """

    name: IdentifierPart
    table: Identifier
    column: IdentifierPart
    primary: bool = False
    using_index: Optional[IdentifierPart] = None
    secondary_kind: Optional[str] = None
    options: Tuple[OptionItem, ...] = ()


class CreateXmlSchemaCollection(Statement):
    name: Identifier
    schema_text: Expression


class AlterXmlSchemaCollection(Statement):
    """``ALTER XML SCHEMA COLLECTION x ADD '<xsd:schema ...>'``."""

    name: Identifier
    schema_text: Expression


# Other schema objects

class CreateSequence(Statement):
    name: Identifier
    data_type: Optional[DataType] = None
    options: Tuple[OptionItem, ...] = ()


class AlterSequence(Statement):
    name: Identifier
    options: Tuple[OptionItem, ...] = ()


class CreateSchema(Statement):
    name: Optional[IdentifierPart] = None
    authorization: Optional[IdentifierPart] = None
    elements: Tuple[Statement, ...] = ()


class AlterSchema(Statement):
    name: IdentifierPart
    transfer: Identifier
    transfer_class: Optional[str] = None


class CreateType(Statement):
    name: Identifier
    base_type: Optional[DataType] = None
    nullable: Optional[bool] = None
    table: Optional[TableDefinition] = None


class CreateSynonym(Statement):
    name: Identifier
    target: Identifier


class SecurityPredicate(Node):
    action: Optional[str] = None
    kind: str
    function: Optional[FunctionCall] = None
    table: Identifier
    block_operation: Optional[str] = None


class CreateSecurityPolicy(Statement):
    name: Identifier
    predicates: Tuple[SecurityPredicate, ...] = ()
    options: Tuple[OptionItem, ...] = ()
    not_for_replication: bool = False


class AlterSecurityPolicy(Statement):
    name: Identifier
    predicates: Tuple[SecurityPredicate, ...] = ()
    options: Tuple[OptionItem, ...] = ()
    not_for_replication: bool = False


class CreatePartitionFunction(Statement):
    name: IdentifierPart
    input_type: DataType
    range_direction: Optional[str] = None
    boundaries: Tuple[Expression, ...] = ()


class AlterPartitionFunction(Statement):
    name: IdentifierPart
    action: str
    boundary: Expression


class CreatePartitionScheme(Statement):
    name: IdentifierPart
    function: IdentifierPart
    all_: bool = False
    filegroups: Tuple[IdentifierPart, ...] = ()


class AlterPartitionScheme(Statement):
    name: IdentifierPart
    next_used: Optional[IdentifierPart] = None


class DropObject(Statement):
    """``DROP <object type> [IF EXISTS] name [, ...] [ON target]``."""

    object_type: str
    if_exists: bool = False
    names: Tuple[Identifier, ...]
    on_target: Optional[Identifier] = None
    on_scope: Optional[str] = None


class TruncateTable(Statement):
    name: Identifier
    partitions: Tuple[Expression, ...] = ()
