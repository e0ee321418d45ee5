"""CREATE, ALTER, DROP and TRUNCATE."""

from typing import List, Optional, Tuple

from tsqlparser.models.base import CreateMode, Identifier, IdentifierPart, OptionItem, SortOrder
from tsqlparser.models.ddl import (
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
from tsqlparser.models.expressions import BinaryOp, FunctionCall, KeywordValue, Subquery
from tsqlparser.models.statements import Return
from tsqlparser.models.token import Token, TokenKind
from tsqlparser.parser.expressions import PREC_UNARY

_CONSTRAINT_STARTERS = frozenset(["CONSTRAINT", "PRIMARY", "UNIQUE", "FOREIGN", "CHECK", "DEFAULT"])
_COLUMN_FLAGS = frozenset(["ROWGUIDCOL", "SPARSE", "FILESTREAM", "HIDDEN"])
_MODULE_STOP_WORDS = ("AS", "FOR", "AFTER", "INSTEAD", "BEGIN", "RETURN")

_DROP_TYPES = {
    "SECURITY": ("SECURITY", "POLICY"),
    "PARTITION": None,
    "XML": ("XML", "SCHEMA", "COLLECTION"),
    "FULLTEXT": None,
    "MASTER": ("MASTER", "KEY"),
    "EXTERNAL": None,
    "APPLICATION": ("APPLICATION", "ROLE"),
    "SERVER": None,
}
_PROCEDURE_WORDS = ("PROC", "PROCEDURE")
_INDEX_ACTIONS = ("REBUILD", "REORGANIZE", "DISABLE", "SET", "RESUME", "PAUSE", "ABORT")
_XML_INDEX_KINDS = ("PATH", "VALUE", "PROPERTY")


class DdlParser:
    """Mixin: schema definition statements."""

    # Dispatch

    def parse_create(self):
        start = self.expect_word("CREATE")
        mode = CreateMode.CREATE
        if self.match_words("OR", "ALTER"):
            mode = CreateMode.CREATE_OR_ALTER
        return self._parse_create_object(start, mode)

    def parse_alter(self):
        start = self.expect_word("ALTER")
        word = self.current.upper if self.current.is_word else None
        if word == "TABLE":
            return self._parse_alter_table(start)
        if word == "INDEX":
            return self._parse_alter_index(start)
        if word == "SEQUENCE":
            self.advance()
            name = self.multipart_identifier()
            options = self._parse_sequence_options()
            return AlterSequence(name=name, options=options, span=self.span_from(start))
        if word == "SCHEMA":
            return self._parse_alter_schema(start)
        if word == "DATABASE":
            return self.parse_alter_database(start)
        if self.at_principal():
            return self.parse_alter_principal(start)
        if self.at_words("XML", "SCHEMA", "COLLECTION"):
            return self._parse_xml_schema_collection(start, alter=True)
        if self.at_words("SECURITY", "POLICY"):
            return self._parse_security_policy(start, alter=True)
        if self.at_words("PARTITION", "FUNCTION"):
            return self._parse_alter_partition_function(start)
        if self.at_words("PARTITION", "SCHEME"):
            self.advance()
            self.advance()
            name = self.identifier_part()
            self.expect_words("NEXT", "USED")
            next_used = self.identifier_part() if self.is_identifier() else None
            return AlterPartitionScheme(name=name, next_used=next_used, span=self.span_from(start))
        if word in ("VIEW", "PROC", "PROCEDURE", "FUNCTION", "TRIGGER"):
            return self._parse_create_object(start, CreateMode.ALTER)
        return None

    def _parse_create_object(self, start: Token, mode: CreateMode):
        word = self.current.upper if self.current.is_word else None
        if word == "VIEW":
            return self._parse_create_view(start, mode)
        if word in _PROCEDURE_WORDS:
            return self._parse_create_procedure(start, mode)
        if word == "FUNCTION":
            return self._parse_create_function(start, mode)
        if word == "TRIGGER":
            return self._parse_create_trigger(start, mode)
        if mode == CreateMode.ALTER:
            return None
        if word == "TABLE":
            return self._parse_create_table(start)
        if word in ("UNIQUE", "CLUSTERED", "NONCLUSTERED", "COLUMNSTORE", "INDEX"):
            return self._parse_create_index(start)
        if word == "SEQUENCE":
            return self._parse_create_sequence(start)
        if word == "SCHEMA":
            return self._parse_create_schema(start)
        if word == "TYPE":
            return self._parse_create_type(start)
        if word == "SYNONYM":
            self.advance()
            name = self.multipart_identifier()
            self.expect_word("FOR")
            target = self.multipart_identifier()
            return CreateSynonym(name=name, target=target, span=self.span_from(start))
        if self.at_words("SECURITY", "POLICY"):
            return self._parse_security_policy(start, alter=False)
        if self.at_words("PARTITION", "FUNCTION"):
            return self._parse_create_partition_function(start)
        if self.at_words("PARTITION", "SCHEME"):
            return self._parse_create_partition_scheme(start)
        if self.at_words("PRIMARY", "XML") or self.at_words("XML", "INDEX"):
            return self._parse_create_xml_index(start)
        if self.at_words("XML", "SCHEMA", "COLLECTION"):
            return self._parse_xml_schema_collection(start, alter=False)
        if self.at_principal():
            return self.parse_create_principal(start)
        return None

    # Tables

    def _parse_create_table(self, start: Token) -> CreateTable:
        self.expect_word("TABLE")
        name = self.multipart_identifier()
        definition = self.parse_table_definition()
        storage = None
        textimage_on = None
        options = ()
        while True:
            if self.is_word("ON"):
                storage = self._parse_storage()
            elif self.match_word("TEXTIMAGE_ON"):
                textimage_on = self.name_part()
            elif self.is_word("WITH") and self.is_punct("(", 1):
                self.advance()
                options = self.parse_parenthesized_options()
            else:
                break
        return CreateTable(
            name=name,
            definition=definition,
            storage=storage,
            textimage_on=textimage_on,
            options=options,
            span=self.span_from(start),
        )

    def parse_table_definition(self) -> TableDefinition:
        start = self.expect_punct("(")
        elements = [self._parse_table_element()]
        while self.match_punct(","):
            if self.is_punct(")"):
                break
            elements.append(self._parse_table_element())
        self.expect_punct(")")
        return TableDefinition(elements=tuple(elements), span=self.span_from(start))

    def _parse_table_element(self):
        if self.is_any_word(_CONSTRAINT_STARTERS):
            return self._parse_constraint(column_level=False)
        if self.is_word("INDEX"):
            return self._parse_inline_index()
        if self.at_words("PERIOD", "FOR", "SYSTEM_TIME"):
            return self._parse_period()
        return self.parse_column_definition()

    def _parse_period(self) -> PeriodForSystemTime:
        start = self.current
        self.expect_words("PERIOD", "FOR", "SYSTEM_TIME")
        self.expect_punct("(")
        start_column = self.identifier_part()
        self.expect_punct(",")
        end_column = self.identifier_part()
        self.expect_punct(")")
        return PeriodForSystemTime(start_column=start_column, end_column=end_column, span=self.span_from(start))

    def _parse_inline_index(self) -> InlineIndex:
        start = self.expect_word("INDEX")
        name = self.identifier_part()
        unique = bool(self.match_word("UNIQUE"))
        clustered = self._parse_clustered()
        columns = self._parse_index_columns()
        return InlineIndex(name=name, unique=unique, clustered=clustered, columns=columns, span=self.span_from(start))

    def parse_column_definition(self, allow_constraints: bool = True) -> ColumnDefinition:
        start = self.current
        name = self.name_part()
        data_type = None
        computed = None
        persisted = False
        if self.match_word("AS"):
            computed = self.parse_expression()
        else:
            data_type = self.parse_data_type()

        collation = None
        identity = None
        nullable = None
        constraints: List[ConstraintDefinition] = []
        attributes: List[ColumnAttribute] = []
        while True:
            token = self.current
            if self.match_word("PERSISTED"):
                persisted = True
            elif self.match_word("COLLATE"):
                collation = self.name_part().value
            elif self.match_word("NULL"):
                nullable = True
            elif self.at_words("NOT", "NULL"):
                self.advance()
                self.advance()
                nullable = False
            elif self.at_words("NOT", "FOR", "REPLICATION"):
                self.expect_words("NOT", "FOR", "REPLICATION")
                attributes.append(ColumnAttribute(name="NOT FOR REPLICATION", span=self.span_from(token)))
            elif self.is_word("IDENTITY"):
                identity = self._parse_identity()
            elif self.is_any_word(_COLUMN_FLAGS):
                attributes.append(ColumnAttribute(name=self.advance().upper, span=token.span))
            elif self.is_word("GENERATED"):
                self.expect_words("GENERATED", "ALWAYS", "AS", "ROW")
                edge = self.expect_word("START", "END").upper
                attributes.append(ColumnAttribute(name=f"GENERATED ALWAYS AS ROW {edge}", span=self.span_from(token)))
            elif self.is_word("MASKED"):
                self.expect_words("MASKED", "WITH")
                self.expect_punct("(")
                self.expect_word("FUNCTION")
                self.expect_op("=")
                value = self.parse_string()
                self.expect_punct(")")
                attributes.append(ColumnAttribute(name="MASKED", value=value, span=self.span_from(token)))
            elif allow_constraints and (
                self.is_any_word(_CONSTRAINT_STARTERS) or self.is_word("REFERENCES")
            ):
                constraints.append(self._parse_constraint(column_level=True))
            else:
                break

        return ColumnDefinition(
            name=name,
            data_type=data_type,
            computed=computed,
            persisted=persisted,
            collation=collation,
            identity=identity,
            nullable=nullable,
            constraints=tuple(constraints),
            attributes=tuple(attributes),
            span=self.span_from(start),
        )

    def _parse_identity(self) -> IdentitySpec:
        start = self.expect_word("IDENTITY")
        seed = None
        increment = None
        if self.match_punct("("):
            seed = self.parse_expression()
            self.expect_punct(",")
            increment = self.parse_expression()
            self.expect_punct(")")
        return IdentitySpec(seed=seed, increment=increment, span=self.span_from(start))

    def _parse_clustered(self) -> Optional[bool]:
        token = self.match_word("CLUSTERED", "NONCLUSTERED")
        if token is None:
            return None
        return token.upper == "CLUSTERED"

    def _parse_index_columns(self) -> Tuple[IndexColumn, ...]:
        self.expect_punct("(")
        columns = []
        while True:
            start = self.current
            name = self.identifier_part()
            order = None
            direction = self.match_word("ASC", "DESC")
            if direction is not None:
                order = SortOrder(direction.upper)
            columns.append(IndexColumn(name=name, order=order, span=self.span_from(start)))
            if not self.match_punct(","):
                break
        self.expect_punct(")")
        return tuple(columns)

    def _parse_storage(self) -> StorageClause:
        start = self.expect_word("ON")
        name = self.name_part()
        column = None
        if self.match_punct("("):
            column = self.identifier_part()
            self.expect_punct(")")
        return StorageClause(name=name, column=column, span=self.span_from(start))

    def _parse_constraint(self, column_level: bool) -> ConstraintDefinition:
        start = self.current
        name = None
        if self.match_word("CONSTRAINT"):
            name = self.identifier_part()

        fields = {}
        if self.match_words("PRIMARY", "KEY") or self.match_word("UNIQUE"):
            kind = ConstraintKind.UNIQUE if self.previous.upper == "UNIQUE" else ConstraintKind.PRIMARY_KEY
            fields["clustered"] = self._parse_clustered()
            if self.is_punct("("):
                fields["columns"] = self._parse_index_columns()
            if self.is_word("WITH"):
                self.advance()
                if self.is_punct("("):
                    fields["options"] = self.parse_parenthesized_options()
                else:
                    fields["options"] = (self.parse_option_item(),)
            if self.is_word("ON") and not self.is_any_word(("DELETE", "UPDATE"), 1):
                fields["storage"] = self._parse_storage()
        elif self.match_word("CHECK"):
            kind = ConstraintKind.CHECK
            fields["not_for_replication"] = self.match_words("NOT", "FOR", "REPLICATION")
            self.expect_punct("(")
            fields["expression"] = self.parse_expression()
            self.expect_punct(")")
        elif self.match_word("DEFAULT"):
            kind = ConstraintKind.DEFAULT
            fields["expression"] = self.parse_expression()
            if self.match_word("FOR"):
                fields["for_column"] = self.identifier_part()
            fields["with_values"] = self.match_words("WITH", "VALUES")
        elif self.match_words("FOREIGN", "KEY") or self.is_word("REFERENCES"):
            kind = ConstraintKind.FOREIGN_KEY
            if self.is_punct("("):
                fields["columns"] = self._parse_index_columns()
            fields["references"] = self._parse_references()
        else:
            raise self.unexpected("constraint")

        return ConstraintDefinition(name=name, kind=kind, span=self.span_from(start), **fields)

    def _parse_references(self) -> ForeignKeyReference:
        start = self.expect_word("REFERENCES")
        table = self.multipart_identifier()
        columns = ()
        if self.is_punct("("):
            columns = self.identifier_list()
        on_delete = None
        on_update = None
        while self.is_word("ON") and self.is_any_word(("DELETE", "UPDATE"), 1):
            self.advance()
            event = self.advance().upper
            action = self._parse_referential_action()
            if event == "DELETE":
                on_delete = action
            else:
                on_update = action
        not_for_replication = self.match_words("NOT", "FOR", "REPLICATION")
        return ForeignKeyReference(
            table=table,
            columns=columns,
            on_delete=on_delete,
            on_update=on_update,
            not_for_replication=not_for_replication,
            span=self.span_from(start),
        )

    def _parse_referential_action(self) -> ReferentialAction:
        if self.match_words("NO", "ACTION"):
            return ReferentialAction.NO_ACTION
        if self.match_word("CASCADE"):
            return ReferentialAction.CASCADE
        if self.match_words("SET", "NULL"):
            return ReferentialAction.SET_NULL
        if self.match_words("SET", "DEFAULT"):
            return ReferentialAction.SET_DEFAULT
        raise self.unexpected("NO ACTION, CASCADE, SET NULL or SET DEFAULT")

    def _parse_alter_table(self, start: Token) -> AlterTable:
        self.expect_word("TABLE")
        name = self.multipart_identifier()
        action_start = self.current

        with_check = None
        if self.is_word("WITH") and self.is_any_word(("CHECK", "NOCHECK"), 1):
            self.advance()
            with_check = self.advance().upper == "CHECK"

        if self.match_word("ADD"):
            elements = [self._parse_table_element()]
            while self.match_punct(","):
                elements.append(self._parse_table_element())
            action = AlterTableAdd(elements=tuple(elements), check=with_check, span=self.span_from(action_start))
        elif self.is_any_word(("CHECK", "NOCHECK")) and self.is_word("CONSTRAINT", 1):
            enable = self.advance().upper == "CHECK"
            self.advance()
            names = self._parse_all_or_names()
            action = AlterTableConstraintCheck(
                enable=enable, with_check=with_check, names=names, span=self.span_from(action_start)
            )
        elif with_check is not None:
            raise self.unexpected("ADD or CHECK CONSTRAINT")
        elif self.match_words("ALTER", "COLUMN"):
            column = self.parse_column_definition(allow_constraints=False)
            action = AlterTableAlterColumn(column=column, span=self.span_from(action_start))
        elif self.match_word("DROP"):
            items = [self._parse_drop_item()]
            while self.match_punct(","):
                items.append(self._parse_drop_item())
            action = AlterTableDrop(items=tuple(items), span=self.span_from(action_start))
        elif self.is_any_word(("ENABLE", "DISABLE")) and self.is_word("TRIGGER", 1):
            enable = self.advance().upper == "ENABLE"
            self.advance()
            names = self._parse_all_or_names()
            action = AlterTableTrigger(enable=enable, names=names, span=self.span_from(action_start))
        elif self.match_word("SWITCH"):
            source_partition = None
            if self.match_word("PARTITION"):
                source_partition = self.parse_expression()
            self.expect_word("TO")
            target = self.multipart_identifier()
            target_partition = None
            if self.match_word("PARTITION"):
                target_partition = self.parse_expression()
            action = AlterTableSwitch(
                source_partition=source_partition,
                target=target,
                target_partition=target_partition,
                span=self.span_from(action_start),
            )
        elif self.match_word("SET"):
            options = self.parse_parenthesized_options()
            action = AlterTableSet(options=options, span=self.span_from(action_start))
        elif self.match_word("REBUILD"):
            partition = None
            if self.match_word("PARTITION"):
                self.expect_op("=")
                partition = self.parse_expression() if not self.is_word("ALL") else self._keyword_value()
            options = ()
            if self.match_word("WITH"):
                options = self.parse_parenthesized_options()
            action = AlterTableRebuild(partition=partition, options=options, span=self.span_from(action_start))
        else:
            raise self.unexpected("ALTER TABLE action")
        return AlterTable(name=name, action=action, span=self.span_from(start))

    def _keyword_value(self):
        token = self.advance()
        return KeywordValue(word=token.upper, span=token.span)

    def _parse_all_or_names(self) -> Tuple[IdentifierPart, ...]:
        if self.is_word("ALL"):
            token = self.advance()
            return (IdentifierPart(value="ALL", span=token.span),)
        names = [self.identifier_part()]
        while self.match_punct(","):
            names.append(self.identifier_part())
        return tuple(names)

    def _parse_drop_item(self) -> DropItem:
        start = self.current
        kind = "CONSTRAINT"
        if self.match_word("COLUMN"):
            kind = "COLUMN"
        elif self.match_word("CONSTRAINT"):
            kind = "CONSTRAINT"
        elif self.match_words("PERIOD", "FOR", "SYSTEM_TIME"):
            return DropItem(kind="PERIOD FOR SYSTEM_TIME", name=IdentifierPart(value=""), span=self.span_from(start))
        if_exists = self.match_words("IF", "EXISTS")
        name = self.identifier_part()
        return DropItem(kind=kind, name=name, if_exists=if_exists, span=self.span_from(start))

    # Views and modules

    def _parse_create_view(self, start: Token, mode: CreateMode) -> CreateView:
        self.expect_word("VIEW")
        name = self.multipart_identifier()
        columns = ()
        if self.is_punct("("):
            columns = self.identifier_list()
        attributes: List[str] = []
        if self.match_word("WITH"):
            attributes.append(self.advance().upper)
            while self.match_punct(","):
                attributes.append(self.advance().upper)
        self.expect_word("AS")
        query = self.parse_query()
        check_option = self.match_words("WITH", "CHECK", "OPTION")
        return CreateView(
            mode=mode,
            name=name,
            columns=columns,
            attributes=tuple(attributes),
            query=query,
            check_option=check_option,
            span=self.span_from(start),
        )

    def _parse_parameter(self) -> ParameterDefinition:
        start = self.current
        if start.kind != TokenKind.VARIABLE:
            raise self.unexpected("parameter name")
        self.advance()
        self.match_word("AS")
        data_type = self.parse_data_type()
        varying = bool(self.match_word("VARYING"))
        default = None
        if self.match_op("="):
            default = self.parse_expression()
        output = bool(self.match_word("OUT", "OUTPUT"))
        readonly = bool(self.match_word("READONLY"))
        return ParameterDefinition(
            name=start.text,
            data_type=data_type,
            varying=varying,
            default=default,
            output=output,
            readonly=readonly,
            span=self.span_from(start),
        )

    def _parse_module_options(self) -> Tuple[OptionItem, ...]:
        if not self.match_word("WITH"):
            return ()
        return self.parse_option_list(stop_words=_MODULE_STOP_WORDS)

    def _parse_module_body(self):
        return tuple(self.parse_statement_list(lambda: False))

    def _parse_create_procedure(self, start: Token, mode: CreateMode) -> CreateProcedure:
        self.expect_word(*_PROCEDURE_WORDS)
        name = self.multipart_identifier()
        parameters: List[ParameterDefinition] = []
        parenthesized = False
        if self.match_punct("("):
            parenthesized = True
            if not self.is_punct(")"):
                parameters.append(self._parse_parameter())
                while self.match_punct(","):
                    parameters.append(self._parse_parameter())
            self.expect_punct(")")
        elif self.current.kind == TokenKind.VARIABLE:
            parameters.append(self._parse_parameter())
            while self.match_punct(","):
                parameters.append(self._parse_parameter())
        options = self._parse_module_options()
        for_replication = self.match_words("FOR", "REPLICATION")
        self.expect_word("AS")
        body = self._parse_module_body()
        return CreateProcedure(
            mode=mode,
            name=name,
            parameters=tuple(parameters),
            parenthesized=parenthesized,
            options=options,
            for_replication=for_replication,
            body=body,
            span=self.span_from(start),
        )

    def _parse_create_function(self, start: Token, mode: CreateMode) -> CreateFunction:
        self.expect_word("FUNCTION")
        name = self.multipart_identifier()
        self.expect_punct("(")
        parameters: List[ParameterDefinition] = []
        if not self.is_punct(")"):
            parameters.append(self._parse_parameter())
            while self.match_punct(","):
                parameters.append(self._parse_parameter())
        self.expect_punct(")")

        returns_start = self.expect_word("RETURNS")
        if self.current.kind == TokenKind.VARIABLE:
            variable = self.advance().text
            self.expect_word("TABLE")
            table = self.parse_table_definition()
            returns = FunctionReturns(
                kind=FunctionReturnKind.TABLE_VARIABLE,
                variable=variable,
                table=table,
                span=self.span_from(returns_start),
            )
        elif self.match_word("TABLE"):
            returns = FunctionReturns(kind=FunctionReturnKind.TABLE, span=self.span_from(returns_start))
        else:
            data_type = self.parse_data_type()
            returns = FunctionReturns(
                kind=FunctionReturnKind.SCALAR, data_type=data_type, span=self.span_from(returns_start)
            )

        options = self._parse_module_options()
        self.match_word("AS")
        if returns.kind == FunctionReturnKind.TABLE and self.is_word("RETURN"):
            body = (self._parse_inline_return(),) + self._parse_module_body()
        else:
            body = self._parse_module_body()
        return CreateFunction(
            mode=mode,
            name=name,
            parameters=tuple(parameters),
            returns=returns,
            options=options,
            body=body,
            span=self.span_from(start),
        )

    def _parse_inline_return(self) -> Return:
        start = self.expect_word("RETURN")
        if self.is_punct("("):
            value = self.parse_expression()
        else:
            query_start = self.current
            query = self.parse_query()
            value = Subquery(query=query, span=self.span_from(query_start))
        self.match_punct(";")
        self._terminated = True
        return Return(value=value, span=self.span_from(start))

    def _parse_create_trigger(self, start: Token, mode: CreateMode) -> CreateTrigger:
        self.expect_word("TRIGGER")
        name = self.multipart_identifier()
        self.expect_word("ON")
        target = None
        scope = None
        if self.match_words("ALL", "SERVER"):
            scope = "ALL SERVER"
        elif self.match_word("DATABASE"):
            scope = "DATABASE"
        else:
            target = self.multipart_identifier()
        options = self._parse_module_options()
        if self.match_words("INSTEAD", "OF"):
            timing = "INSTEAD OF"
        else:
            timing = self.expect_word("FOR", "AFTER").upper
        events = [self.advance().upper]
        while self.match_punct(","):
            events.append(self.advance().upper)
        self.match_words("WITH", "APPEND")
        not_for_replication = self.match_words("NOT", "FOR", "REPLICATION")
        self.expect_word("AS")
        body = self._parse_module_body()
        return CreateTrigger(
            mode=mode,
            name=name,
            target=target,
            scope=scope,
            options=options,
            timing=timing,
            events=tuple(events),
            not_for_replication=not_for_replication,
            body=body,
            span=self.span_from(start),
        )

    # Indexes

    def _parse_create_index(self, start: Token) -> CreateIndex:
        unique = bool(self.match_word("UNIQUE"))
        clustered = self._parse_clustered()
        columnstore = bool(self.match_word("COLUMNSTORE"))
        self.expect_word("INDEX")
        name = self.identifier_part()
        self.expect_word("ON")
        table = self.multipart_identifier()
        columns = ()
        if self.is_punct("("):
            columns = self._parse_index_columns()
        include = ()
        if self.match_word("INCLUDE"):
            include = self.identifier_list()
        where = None
        if self.match_word("WHERE"):
            where = self.parse_expression()
        options = ()
        if self.is_word("WITH") and self.is_punct("(", 1):
            self.advance()
            options = self.parse_parenthesized_options()
        storage = None
        if self.is_word("ON"):
            storage = self._parse_storage()
        return CreateIndex(
            name=name,
            table=table,
            unique=unique,
            clustered=clustered,
            columnstore=columnstore,
            columns=columns,
            include=include,
            where=where,
            options=options,
            storage=storage,
            span=self.span_from(start),
        )

    def _parse_alter_index(self, start: Token) -> AlterIndex:
        self.expect_word("INDEX")
        name = None
        if not self.match_word("ALL"):
            name = self.identifier_part()
        self.expect_word("ON")
        table = self.multipart_identifier()
        action = self.expect_word(*_INDEX_ACTIONS).upper
        if action == "SET":
            options = self.parse_parenthesized_options()
            return AlterIndex(name=name, table=table, action=action, options=options, span=self.span_from(start))
        partition = None
        if self.match_word("PARTITION"):
            self.expect_op("=")
            partition = self._keyword_value() if self.is_word("ALL") else self.parse_expression()
        options = ()
        if self.is_word("WITH") and self.is_punct("(", 1):
            self.advance()
            options = self.parse_parenthesized_options()
        return AlterIndex(
            name=name, table=table, action=action, partition=partition, options=options, span=self.span_from(start)
        )

    def _parse_create_xml_index(self, start: Token) -> CreateXmlIndex:
        primary = bool(self.match_word("PRIMARY"))
        self.expect_words("XML", "INDEX")
        name = self.identifier_part()
        self.expect_word("ON")
        table = self.multipart_identifier()
        self.expect_punct("(")
        column = self.name_part()
        self.expect_punct(")")
        using_index = None
        secondary_kind = None
        if not primary and self.match_words("USING", "XML", "INDEX"):
            using_index = self.identifier_part()
            self.expect_word("FOR")
            secondary_kind = self.expect_word(*_XML_INDEX_KINDS).upper
        options = ()
        if self.is_word("WITH") and self.is_punct("(", 1):
            self.advance()
            options = self.parse_parenthesized_options()
        return CreateXmlIndex(
            name=name,
            table=table,
            column=column,
            primary=primary,
            using_index=using_index,
            secondary_kind=secondary_kind,
            options=options,
            span=self.span_from(start),
        )

    def _parse_xml_schema_collection(self, start: Token, alter: bool):
        self.expect_words("XML", "SCHEMA", "COLLECTION")
        name = self.multipart_identifier()
        self.expect_word("ADD" if alter else "AS")
        schema_text = self.parse_expression()
        node = AlterXmlSchemaCollection if alter else CreateXmlSchemaCollection
        return node(name=name, schema_text=schema_text, span=self.span_from(start))

    # Sequences, schemas, types

    def _parse_create_sequence(self, start: Token) -> CreateSequence:
        self.expect_word("SEQUENCE")
        name = self.multipart_identifier()
        data_type = None
        if self.match_word("AS"):
            data_type = self.parse_data_type()
        options = self._parse_sequence_options()
        return CreateSequence(name=name, data_type=data_type, options=options, span=self.span_from(start))

    def _parse_sequence_options(self) -> Tuple[OptionItem, ...]:
        options = []
        while True:
            start = self.current
            if self.match_words("START", "WITH"):
                name, value = "START WITH", self.parse_expression(PREC_UNARY)
            elif self.match_words("INCREMENT", "BY"):
                name, value = "INCREMENT BY", self.parse_expression(PREC_UNARY)
            elif self.match_word("RESTART"):
                name, value = "RESTART", None
                if self.match_word("WITH"):
                    name, value = "RESTART WITH", self.parse_expression(PREC_UNARY)
            elif self.is_any_word(("MINVALUE", "MAXVALUE")):
                name, value = self.advance().upper, self.parse_expression(PREC_UNARY)
            elif self.is_word("NO") and self.is_any_word(("MINVALUE", "MAXVALUE", "CYCLE", "CACHE"), 1):
                self.advance()
                name, value = "NO " + self.advance().upper, None
            elif self.match_word("CYCLE"):
                name, value = "CYCLE", None
            elif self.match_word("CACHE"):
                name, value = "CACHE", None
                if self.current.kind == TokenKind.NUMBER:
                    value = self.parse_expression(PREC_UNARY)
            else:
                return tuple(options)
            options.append(OptionItem(name=name, value=value, span=self.span_from(start)))

    def _parse_create_schema(self, start: Token) -> CreateSchema:
        self.expect_word("SCHEMA")
        name = None
        authorization = None
        if not self.is_word("AUTHORIZATION"):
            name = self.identifier_part()
        if self.match_word("AUTHORIZATION"):
            authorization = self.identifier_part()
        elements = []
        while self.at_words("CREATE", "TABLE") or self.at_words("CREATE", "VIEW") or self.is_any_word(
            ("GRANT", "REVOKE", "DENY")
        ):
            element_start = self.current
            if self.is_word("CREATE"):
                element = self.parse_create()
            else:
                element = self.parse_grant()
            if element is None:
                raise self.error("Unsupported schema element", element_start)
            elements.append(element)
        return CreateSchema(
            name=name, authorization=authorization, elements=tuple(elements), span=self.span_from(start)
        )

    def _parse_alter_schema(self, start: Token) -> AlterSchema:
        self.expect_word("SCHEMA")
        name = self.identifier_part()
        self.expect_word("TRANSFER")
        transfer_class = None
        if self.is_op("::", 1):
            transfer_class = self.advance().upper
            self.advance()
        transfer = self.multipart_identifier()
        return AlterSchema(name=name, transfer=transfer, transfer_class=transfer_class, span=self.span_from(start))

    def _parse_create_type(self, start: Token) -> CreateType:
        self.expect_word("TYPE")
        name = self.multipart_identifier()
        if self.match_word("FROM"):
            base_type = self.parse_data_type()
            nullable = None
            if self.match_word("NULL"):
                nullable = True
            elif self.match_words("NOT", "NULL"):
                nullable = False
            return CreateType(name=name, base_type=base_type, nullable=nullable, span=self.span_from(start))
        self.expect_words("AS", "TABLE")
        table = self.parse_table_definition()
        return CreateType(name=name, table=table, span=self.span_from(start))

    # Row-level security

    def _parse_security_policy(self, start: Token, alter: bool):
        self.expect_words("SECURITY", "POLICY")
        name = self.multipart_identifier()
        predicates = []
        while self.is_any_word(("ADD", "ALTER", "DROP")):
            predicates.append(self._parse_security_predicate())
            self.match_punct(",")
        options = ()
        if self.is_word("WITH") and self.is_punct("(", 1):
            self.advance()
            options = self.parse_parenthesized_options()
        not_for_replication = self.match_words("NOT", "FOR", "REPLICATION")
        cls = AlterSecurityPolicy if alter else CreateSecurityPolicy
        return cls(
            name=name,
            predicates=tuple(predicates),
            options=options,
            not_for_replication=not_for_replication,
            span=self.span_from(start),
        )

    def _parse_security_predicate(self) -> SecurityPredicate:
        start = self.current
        action = self.advance().upper
        kind = self.expect_word("FILTER", "BLOCK").upper
        self.expect_word("PREDICATE")
        function = None
        if action != "DROP":
            call = self._parse_name_expression()
            if not isinstance(call, FunctionCall):
                raise self.error("Expected a predicate function call", start)
            function = call
        self.expect_word("ON")
        table = self.multipart_identifier()
        block_operation = None
        if self.is_any_word(("AFTER", "BEFORE")):
            timing = self.advance().upper
            operation = self.expect_word("INSERT", "UPDATE", "DELETE").upper
            block_operation = f"{timing} {operation}"
        return SecurityPredicate(
            action=action,
            kind=kind,
            function=function,
            table=table,
            block_operation=block_operation,
            span=self.span_from(start),
        )

    # Partitioning

    def _parse_create_partition_function(self, start: Token) -> CreatePartitionFunction:
        self.expect_words("PARTITION", "FUNCTION")
        name = self.identifier_part()
        self.expect_punct("(")
        input_type = self.parse_data_type()
        self.expect_punct(")")
        self.expect_words("AS", "RANGE")
        direction = self.match_word("LEFT", "RIGHT")
        self.expect_words("FOR", "VALUES")
        self.expect_punct("(")
        boundaries = []
        if not self.is_punct(")"):
            boundaries = self.parse_expression_list()
        self.expect_punct(")")
        return CreatePartitionFunction(
            name=name,
            input_type=input_type,
            range_direction=direction.upper if direction is not None else None,
            boundaries=tuple(boundaries),
            span=self.span_from(start),
        )

    def _parse_alter_partition_function(self, start: Token) -> AlterPartitionFunction:
        self.expect_words("PARTITION", "FUNCTION")
        name = self.identifier_part()
        self.expect_punct("(")
        self.expect_punct(")")
        action = self.expect_word("SPLIT", "MERGE").upper
        self.expect_word("RANGE")
        self.expect_punct("(")
        boundary = self.parse_expression()
        self.expect_punct(")")
        return AlterPartitionFunction(name=name, action=action, boundary=boundary, span=self.span_from(start))

    def _parse_create_partition_scheme(self, start: Token) -> CreatePartitionScheme:
        self.expect_words("PARTITION", "SCHEME")
        name = self.identifier_part()
        self.expect_words("AS", "PARTITION")
        function = self.identifier_part()
        all_ = bool(self.match_word("ALL"))
        self.expect_word("TO")
        self.expect_punct("(")
        filegroups = [self.name_part()]
        while self.match_punct(","):
            filegroups.append(self.name_part())
        self.expect_punct(")")
        return CreatePartitionScheme(
            name=name, function=function, all_=all_, filegroups=tuple(filegroups), span=self.span_from(start)
        )

    # DROP / TRUNCATE

    def parse_drop(self) -> DropObject:
        start = self.expect_word("DROP")
        if not self.current.is_word:
            raise self.unexpected("object type")
        words = _DROP_TYPES.get(self.current.upper, ())
        if words is None:
            object_type = f"{self.advance().upper} {self.advance().upper}"
        elif words:
            self.expect_words(*words)
            object_type = " ".join(words)
        else:
            object_type = self.advance().upper
        if object_type == "PROC":
            object_type = "PROCEDURE"

        if_exists = self.match_words("IF", "EXISTS")
        names = [self.multipart_identifier()]
        while self.match_punct(","):
            names.append(self.multipart_identifier())

        on_target = None
        on_scope = None
        if self.match_word("ON"):
            if self.match_words("ALL", "SERVER"):
                on_scope = "ALL SERVER"
            elif self.match_word("DATABASE"):
                on_scope = "DATABASE"
            else:
                on_target = self.multipart_identifier()
        return DropObject(
            object_type=object_type,
            if_exists=if_exists,
            names=tuple(names),
            on_target=on_target,
            on_scope=on_scope,
            span=self.span_from(start),
        )

    def parse_truncate(self) -> TruncateTable:
        start = self.current
        self.expect_words("TRUNCATE", "TABLE")
        name: Identifier = self.multipart_identifier()
        partitions = []
        if self.is_word("WITH") and self.is_punct("(", 1):
            self.advance()
            self.expect_punct("(")
            self.expect_word("PARTITIONS")
            self.expect_punct("(")
            while True:
                range_start = self.current
                low = self.parse_expression()
                if self.match_word("TO"):
                    high = self.parse_expression()
                    low = BinaryOp(operator="TO", left=low, right=high, span=self.span_from(range_start))
                partitions.append(low)
                if not self.match_punct(","):
                    break
            self.expect_punct(")")
            self.expect_punct(")")
        return TruncateTable(name=name, partitions=tuple(partitions), span=self.span_from(start))
