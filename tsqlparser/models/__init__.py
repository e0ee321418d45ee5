"""Syntax tree, token and diagnostic models for T-SQL scripts."""

from .base import (
    CreateMode,
    DataType,
    Expression,
    Identifier,
    IdentifierPart,
    Node,
    OptionItem,
    QueryExpression,
    QuoteStyle,
    Relation,
    SortOrder,
    Statement,
)
from .ddl import (
    AlterIndex,
    AlterPartitionFunction,
    AlterPartitionScheme,
    AlterSchema,
    AlterSecurityPolicy,
    AlterSequence,
    AlterTable,
    AlterTableAdd,
    AlterTableAlterColumn,
    AlterTableConstraintCheck,
    AlterTableDrop,
    AlterTableRebuild,
    AlterTableSet,
    AlterTableSwitch,
    AlterTableTrigger,
    AlterXmlSchemaCollection,
    ColumnAttribute,
    ColumnDefinition,
    ConstraintDefinition,
    ConstraintKind,
    CreateFunction,
    CreateIndex,
    CreatePartitionFunction,
    CreatePartitionScheme,
    CreateProcedure,
    CreateSchema,
    CreateSecurityPolicy,
    CreateSequence,
    CreateSynonym,
    CreateTable,
    CreateTrigger,
    CreateType,
    CreateView,
    CreateXmlIndex,
    CreateXmlSchemaCollection,
    DropItem,
    DropObject,
    ForeignKeyReference,
    FunctionReturnKind,
    FunctionReturns,
    IdentitySpec,
    IndexColumn,
    InlineIndex,
    ParameterDefinition,
    PeriodForSystemTime,
    ReferentialAction,
    SecurityPredicate,
    StorageClause,
    TableDefinition,
    TruncateTable,
)
from .diagnostic import Diagnostic, DiagnosticCode, Severity
from .dml import (
    Assignment,
    BulkInsert,
    CurrentOf,
    CursorRef,
    Delete,
    Insert,
    Merge,
    MergeDelete,
    MergeInsert,
    MergeMatch,
    MergeUpdate,
    MergeWhen,
    OutputClause,
    Select,
    Update,
    ValuesClause,
)
from .expressions import (
    AtTimeZone,
    Between,
    BinaryLiteral,
    BinaryOp,
    Case,
    Cast,
    Collate,
    ColumnRef,
    Convert,
    DefaultValue,
    Exists,
    FrameBound,
    FrameBoundKind,
    FunctionCall,
    GroupingKind,
    GroupingSpec,
    InList,
    InSubquery,
    IntegerLiteral,
    IsDistinctFrom,
    IsNull,
    KeywordValue,
    Like,
    MethodCall,
    NextValueFor,
    NullLiteral,
    NumericKind,
    NumericLiteral,
    OrderItem,
    ParameterMarker,
    Parenthesized,
    ParseCall,
    PartitionFunctionCall,
    PseudoColumn,
    QuantifiedComparison,
    Quantifier,
    QuantityValue,
    Star,
    StaticMethodCall,
    StringLiteral,
    Subquery,
    SystemVariableRef,
    TupleExpr,
    UnaryOp,
    VariableRef,
    WhenClause,
    WindowFrame,
    WindowSpec,
)
from .queries import (
    AliasedRelation,
    AliasStyle,
    BulkOpenRowset,
    CommonTableExpression,
    DerivedTable,
    DmlTable,
    ForClause,
    GroupByClause,
    JoinedTable,
    JoinKind,
    NamedTable,
    NamedWindow,
    ParenthesizedQuery,
    ParenthesizedRelation,
    PivotTable,
    Query,
    QuerySpecification,
    SchemaColumn,
    SelectAssignment,
    SelectItem,
    SetOperation,
    SetOperator,
    TableFunction,
    TableHint,
    TableSample,
    TemporalClause,
    TemporalKind,
    TopClause,
    UnpivotTable,
    ValuesRow,
    ValuesTable,
    VariableTable,
    WithClause,
    XmlNamespace,
)
from .script import Batch, BatchScope, GoSeparator, Script
from .statements import (
    AlterDatabase,
    AlterPrincipal,
    BackupDatabase,
    BackupDevice,
    BeginDialog,
    BeginTransaction,
    Block,
    Break,
    Checkpoint,
    CloseCursor,
    CommitTransaction,
    Continue,
    CreatePrincipal,
    CursorDefinition,
    CursorOptions,
    DatabaseFile,
    Dbcc,
    DeallocateCursor,
    Declare,
    DeclareCursor,
    EnableTrigger,
    EndConversation,
    ExecArgument,
    ExecuteAs,
    ExecuteProcedure,
    ExecuteString,
    FetchCursor,
    FetchOrientation,
    GetConversationGroup,
    Goto,
    Grant,
    If,
    Label,
    MirrorTo,
    OpenCursor,
    Permission,
    Print,
    PrincipalKind,
    PrincipalOption,
    PrincipalSource,
    Raiserror,
    Receive,
    Reconfigure,
    RestoreDatabase,
    ResultColumn,
    ResultSetDefinition,
    ResultSetsClause,
    Return,
    Revert,
    RollbackTransaction,
    SaveTransaction,
    SendOnConversation,
    SetMethodCall,
    SetOption,
    SetTransactionIsolation,
    SetVariable,
    Throw,
    TryCatch,
    Unrecognized,
    Use,
    VariableDeclaration,
    Waitfor,
    While,
)
from .token import Span, Token, TokenKind

__all__ = [
    # Tokens
    "Span",
    "Token",
    "TokenKind",
    # Diagnostics
    "Diagnostic",
    "DiagnosticCode",
    "Severity",
    # Base nodes
    "Node",
    "Expression",
    "Relation",
    "QueryExpression",
    "Statement",
    "QuoteStyle",
    "SortOrder",
    "CreateMode",
    "IdentifierPart",
    "Identifier",
    "DataType",
    "OptionItem",
    # Expressions
    "KeywordValue",
    "QuantityValue",
    "IntegerLiteral",
    "NumericKind",
    "NumericLiteral",
    "StringLiteral",
    "BinaryLiteral",
    "NullLiteral",
    "DefaultValue",
    "ParameterMarker",
    "ColumnRef",
    "Star",
    "VariableRef",
    "SystemVariableRef",
    "PseudoColumn",
    "UnaryOp",
    "BinaryOp",
    "Between",
    "InList",
    "InSubquery",
    "Like",
    "IsNull",
    "IsDistinctFrom",
    "Exists",
    "Quantifier",
    "QuantifiedComparison",
    "OrderItem",
    "FrameBoundKind",
    "FrameBound",
    "WindowFrame",
    "WindowSpec",
    "FunctionCall",
    "WhenClause",
    "Case",
    "Cast",
    "Convert",
    "ParseCall",
    "Subquery",
    "MethodCall",
    "StaticMethodCall",
    "Collate",
    "AtTimeZone",
    "NextValueFor",
    "PartitionFunctionCall",
    "Parenthesized",
    "TupleExpr",
    "GroupingKind",
    "GroupingSpec",
    # Table sources and queries
    "TableHint",
    "TemporalKind",
    "TemporalClause",
    "TableSample",
    "AliasedRelation",
    "NamedTable",
    "VariableTable",
    "DerivedTable",
    "DmlTable",
    "SchemaColumn",
    "TableFunction",
    "BulkOpenRowset",
    "ValuesRow",
    "ValuesTable",
    "JoinKind",
    "JoinedTable",
    "ParenthesizedRelation",
    "PivotTable",
    "UnpivotTable",
    "AliasStyle",
    "SelectItem",
    "SelectAssignment",
    "TopClause",
    "GroupByClause",
    "NamedWindow",
    "QuerySpecification",
    "SetOperator",
    "SetOperation",
    "ParenthesizedQuery",
    "CommonTableExpression",
    "XmlNamespace",
    "WithClause",
    "ForClause",
    "Query",
    # DML
    "Select",
    "OutputClause",
    "ValuesClause",
    "Assignment",
    "CursorRef",
    "CurrentOf",
    "Insert",
    "Update",
    "Delete",
    "MergeMatch",
    "MergeUpdate",
    "MergeDelete",
    "MergeInsert",
    "MergeWhen",
    "Merge",
    "BulkInsert",
    # DDL
    "IdentitySpec",
    "ReferentialAction",
    "ForeignKeyReference",
    "IndexColumn",
    "StorageClause",
    "ConstraintKind",
    "ConstraintDefinition",
    "ColumnAttribute",
    "ColumnDefinition",
    "InlineIndex",
    "PeriodForSystemTime",
    "TableDefinition",
    "CreateTable",
    "AlterTableAdd",
    "AlterTableAlterColumn",
    "DropItem",
    "AlterTableDrop",
    "AlterTableConstraintCheck",
    "AlterTableTrigger",
    "AlterTableSwitch",
    "AlterTableSet",
    "AlterTableRebuild",
    "AlterTable",
    "CreateView",
    "ParameterDefinition",
    "CreateProcedure",
    "FunctionReturnKind",
    "FunctionReturns",
    "CreateFunction",
    "CreateTrigger",
    "CreateIndex",
    "AlterIndex",
    "CreateXmlIndex",
    "CreateXmlSchemaCollection",
    "AlterXmlSchemaCollection",
    "CreateSequence",
    "AlterSequence",
    "CreateSchema",
    "AlterSchema",
    "CreateType",
    "CreateSynonym",
    "SecurityPredicate",
    "CreateSecurityPolicy",
    "AlterSecurityPolicy",
    "CreatePartitionFunction",
    "AlterPartitionFunction",
    "CreatePartitionScheme",
    "AlterPartitionScheme",
    "DropObject",
    "TruncateTable",
    # Procedural, execution and administration
    "VariableDeclaration",
    "Declare",
    "CursorOptions",
    "CursorDefinition",
    "DeclareCursor",
    "SetMethodCall",
    "SetVariable",
    "SetOption",
    "SetTransactionIsolation",
    "OpenCursor",
    "FetchOrientation",
    "FetchCursor",
    "CloseCursor",
    "DeallocateCursor",
    "Block",
    "If",
    "While",
    "TryCatch",
    "Goto",
    "Label",
    "Return",
    "Break",
    "Continue",
    "Print",
    "Raiserror",
    "Throw",
    "Waitfor",
    "Use",
    "ExecArgument",
    "ResultColumn",
    "ResultSetDefinition",
    "ResultSetsClause",
    "ExecuteProcedure",
    "ExecuteString",
    "ExecuteAs",
    "Revert",
    "BeginTransaction",
    "CommitTransaction",
    "RollbackTransaction",
    "SaveTransaction",
    "BackupDevice",
    "MirrorTo",
    "BackupDatabase",
    "RestoreDatabase",
    "Permission",
    "Grant",
    "Dbcc",
    "PrincipalKind",
    "PrincipalSource",
    "PrincipalOption",
    "CreatePrincipal",
    "AlterPrincipal",
    "DatabaseFile",
    "AlterDatabase",
    "Reconfigure",
    "Checkpoint",
    "EnableTrigger",
    "BeginDialog",
    "SendOnConversation",
    "Receive",
    "GetConversationGroup",
    "EndConversation",
    "Unrecognized",
    # Scripts
    "GoSeparator",
    "BatchScope",
    "Batch",
    "Script",
]
