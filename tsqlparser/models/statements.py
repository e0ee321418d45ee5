"""Procedural, execution, transaction and administrative statement models."""

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
    Statement,
)
from tsqlparser.models.ddl import TableDefinition
from tsqlparser.models.dml import CursorRef
from tsqlparser.models.expressions import MethodCall, StringLiteral, VariableRef
from tsqlparser.models.queries import TopClause


# Variables and cursors

class VariableDeclaration(Node):
    name: str
    data_type: Optional[DataType] = None
    value: Optional[Expression] = None
    table: Optional[TableDefinition] = None


class Declare(Statement):
    variables: Tuple[VariableDeclaration, ...]


class CursorOptions(Node):
    """One flag per cursor option keyword."""

    insensitive: bool = False
    local: bool = False
    global_: bool = False
    forward_only: bool = False
    scroll: bool = False
    static: bool = False
    keyset: bool = False
    dynamic: bool = False
    fast_forward: bool = False
    read_only: bool = False
    scroll_locks: bool = False
    optimistic: bool = False
    type_warning: bool = False

    @property
    def enabled(self) -> Tuple[str, ...]:
        return tuple(
            name.rstrip("_").upper()
            for name in type(self).model_fields
            if name != "span" and getattr(self, name)
        )


class CursorDefinition(Node):
    options: CursorOptions = CursorOptions()
    iso_options: CursorOptions = CursorOptions()
    query: QueryExpression
    for_update: bool = False
    update_columns: Tuple[IdentifierPart, ...] = ()
    read_only: bool = False


class DeclareCursor(Statement):
    name: IdentifierPart
    definition: CursorDefinition


class SetVariable(Statement):
    variable: VariableRef
    operator: str = "="
    value: Optional[Expression] = None
    cursor: Optional[CursorDefinition] = None


class SetMethodCall(Statement):
    """``SET @doc.modify('...')``: a mutator method called on a variable."""

    call: MethodCall


class SetOption(Statement):
    """``SET NOCOUNT ON``, ``SET IDENTITY_INSERT t ON``, ``SET DATEFORMAT dmy``."""

    options: Tuple[str, ...]
    target: Optional[Identifier] = None
    value: Optional[Expression] = None


class SetTransactionIsolation(Statement):
    level: str


class OpenCursor(Statement):
    cursor: CursorRef


class FetchOrientation(str, Enum):
    NEXT = "NEXT"
    PRIOR = "PRIOR"
    FIRST = "FIRST"
    LAST = "LAST"
    ABSOLUTE = "ABSOLUTE"
    RELATIVE = "RELATIVE"


class FetchCursor(Statement):
    orientation: Optional[FetchOrientation] = None
    offset: Optional[Expression] = None
    cursor: CursorRef
    into: Tuple[VariableRef, ...] = ()


class CloseCursor(Statement):
    cursor: CursorRef


class DeallocateCursor(Statement):
    cursor: CursorRef


# Control flow

class Block(Statement):
    statements: Tuple[Statement, ...] = ()


class If(Statement):
    condition: Expression
    then: Statement
    else_: Optional[Statement] = None


class While(Statement):
    condition: Expression
    body: Statement


class TryCatch(Statement):
    try_statements: Tuple[Statement, ...] = ()
    catch_statements: Tuple[Statement, ...] = ()


class Goto(Statement):
    label: IdentifierPart


class Label(Statement):
    name: IdentifierPart


class Return(Statement):
    value: Optional[Expression] = None


class Break(Statement):
    pass


class Continue(Statement):
    pass


class Print(Statement):
    value: Expression


class Raiserror(Statement):
    arguments: Tuple[Expression, ...]
    options: Tuple[str, ...] = ()


class Throw(Statement):
    arguments: Tuple[Expression, ...] = ()


class Waitfor(Statement):
    """
    ``WAITFOR DELAY | TIME value`` or ``WAITFOR (RECEIVE ...) [, TIMEOUT n]``.

    The second form sets ``statement`` and leaves ``kind`` empty.
    """

    kind: Optional[str] = None
    value: Optional[Expression] = None
    statement: Optional[Statement] = None
    timeout: Optional[Expression] = None


class Use(Statement):
    database: IdentifierPart


# Execution

class ExecArgument(Node):
    name: Optional[str] = None
    value: Expression
    output: bool = False


class ResultColumn(Node):
    name: IdentifierPart
    data_type: DataType
    nullable: Optional[bool] = None


class ResultSetDefinition(Node):
    columns: Tuple[ResultColumn, ...]


class ResultSetsClause(Node):
    """``WITH RESULT SETS UNDEFINED | NONE | ((...), ...)``."""

    kind: str
    definitions: Tuple[ResultSetDefinition, ...] = ()


class ExecuteProcedure(Statement):
    procedure: Optional[Identifier] = None
    procedure_variable: Optional[VariableRef] = None
    return_variable: Optional[VariableRef] = None
    arguments: Tuple[ExecArgument, ...] = ()
    recompile: bool = False
    result_sets: Optional[ResultSetsClause] = None
    implicit: bool = False

    @property
    def procedure_name(self) -> Optional[str]:
        return self.procedure.name if self.procedure is not None else None


class ExecuteString(Statement):
    """``EXEC ('...' + @sql) [AS LOGIN|USER = '...'] [AT server]``."""

    command: Expression
    arguments: Tuple[Expression, ...] = ()
    context_kind: Optional[str] = None
    context_name: Optional[Expression] = None
    at_server: Optional[IdentifierPart] = None


class ExecuteAs(Statement):
    principal_kind: str
    principal: Optional[Expression] = None
    no_revert: bool = False
    cookie_variable: Optional[VariableRef] = None


class Revert(Statement):
    cookie: Optional[Expression] = None


# Transactions

class BeginTransaction(Statement):
    name: Optional[Node] = None
    distributed: bool = False
    mark: Optional[StringLiteral] = None
    with_mark: bool = False


class CommitTransaction(Statement):
    name: Optional[Node] = None
    work: bool = False
    options: Tuple[OptionItem, ...] = ()


class RollbackTransaction(Statement):
    name: Optional[Node] = None
    work: bool = False


class SaveTransaction(Statement):
    name: Node


# Administration

class BackupDevice(Node):
    """``DISK = 'path'``, ``URL = 'https://...'`` or a logical device name."""

    kind: Optional[str] = None
    value: Expression


class MirrorTo(Node):
    devices: Tuple[BackupDevice, ...]


class BackupDatabase(Statement):
    kind: str
    database: Node
    files: Tuple[OptionItem, ...] = ()
    devices: Tuple[BackupDevice, ...]
    mirrors: Tuple[MirrorTo, ...] = ()
    options: Tuple[OptionItem, ...] = ()


class RestoreDatabase(Statement):
    kind: str
    database: Optional[Node] = None
    files: Tuple[OptionItem, ...] = ()
    devices: Tuple[BackupDevice, ...] = ()
    options: Tuple[OptionItem, ...] = ()


class Permission(Node):
    name: str
    columns: Tuple[IdentifierPart, ...] = ()


class Grant(Statement):
    """``GRANT``, ``REVOKE`` or ``DENY`` on a securable."""

    action: str
    permissions: Tuple[Permission, ...]
    securable_class: Optional[str] = None
    securable: Optional[Identifier] = None
    principals: Tuple[IdentifierPart, ...]
    grant_option_for: bool = False
    with_grant_option: bool = False
    cascade: bool = False
    as_principal: Optional[IdentifierPart] = None


class Dbcc(Statement):
    command: str
    arguments: Tuple[Expression, ...] = ()
    parenthesized: bool = False
    options: Tuple[OptionItem, ...] = ()


# Security principals

class PrincipalKind(str, Enum):
    LOGIN = "LOGIN"
    USER = "USER"
    ROLE = "ROLE"
    APPLICATION_ROLE = "APPLICATION ROLE"
    SERVER_ROLE = "SERVER ROLE"


class PrincipalSource(Node):
    """``FOR LOGIN x``, ``FROM WINDOWS``, ``FROM EXTERNAL PROVIDER``, ``WITHOUT LOGIN``."""

    keyword: str
    kind: str
    name: Optional[IdentifierPart] = None


class PrincipalOption(Node):
    """
    One principal option with the words that qualify it.

    ``PASSWORD = 'x' MUST_CHANGE`` and ``PASSWORD = 0x01 HASHED`` keep
    MUST_CHANGE and HASHED as modifiers; ``OLD_PASSWORD = 'y'`` is a
    modifier with a value.
    """

    option: OptionItem
    modifiers: Tuple[OptionItem, ...] = ()


class CreatePrincipal(Statement):
    kind: PrincipalKind
    name: IdentifierPart
    source: Optional[PrincipalSource] = None
    authorization: Optional[IdentifierPart] = None
    options: Tuple[PrincipalOption, ...] = ()


class AlterPrincipal(Statement):
    """
    ``ALTER LOGIN | USER | ROLE | APPLICATION ROLE | SERVER ROLE``.

    ``action`` is ENABLE, DISABLE, ADD MEMBER, DROP MEMBER, ADD CREDENTIAL or
    DROP CREDENTIAL; it is None for the ``WITH`` option form.
    """

    kind: PrincipalKind
    name: IdentifierPart
    action: Optional[str] = None
    member: Optional[IdentifierPart] = None
    options: Tuple[PrincipalOption, ...] = ()


# Server administration

class DatabaseFile(Node):
    """``(NAME = ..., FILENAME = ..., SIZE = ...)`` in ALTER DATABASE."""

    options: Tuple[OptionItem, ...]


class AlterDatabase(Statement):
    """
    ``ALTER DATABASE name action``.

    ``action`` is one of SET, ADD FILE, ADD LOG FILE, MODIFY FILE,
    REMOVE FILE, ADD FILEGROUP, MODIFY FILEGROUP, REMOVE FILEGROUP,
    COLLATE or MODIFY NAME. ``target`` names the file, filegroup,
    collation or new database name the action applies to.
    """

    database: IdentifierPart
    action: str
    options: Tuple[OptionItem, ...] = ()
    files: Tuple[DatabaseFile, ...] = ()
    target: Optional[Node] = None
    filegroup: Optional[IdentifierPart] = None
    filegroup_property: Optional[OptionItem] = None
    termination: Optional[str] = None


class Reconfigure(Statement):
    override: bool = False


class Checkpoint(Statement):
    duration: Optional[Expression] = None


class EnableTrigger(Statement):
    """``ENABLE | DISABLE TRIGGER {names | ALL} ON {object | DATABASE | ALL SERVER}``."""

    enable: bool
    triggers: Tuple[Identifier, ...] = ()
    on_target: Optional[Identifier] = None
    on_scope: Optional[str] = None

    @property
    def all_triggers(self) -> bool:
        return not self.triggers


# Service Broker

class BeginDialog(Statement):
    handle: VariableRef
    from_service: Node
    to_service: Expression
    broker_instance: Optional[Expression] = None
    contract: Optional[Node] = None
    options: Tuple[OptionItem, ...] = ()


class SendOnConversation(Statement):
    conversations: Tuple[Expression, ...]
    message_type: Optional[Node] = None
    body: Optional[Expression] = None


class Receive(Statement):
    top: Optional[TopClause] = None
    items: Tuple[Node, ...]
    queue: Identifier
    into: Optional[VariableRef] = None
    where: Optional[Expression] = None


class GetConversationGroup(Statement):
    variable: VariableRef
    queue: Identifier


class EndConversation(Statement):
    conversation: Expression
    error: Optional[Expression] = None
    description: Optional[Expression] = None
    cleanup: bool = False


class Unrecognized(Statement):
    """Source text the parser could not turn into a statement."""

    text: str
    reason: str = ""
