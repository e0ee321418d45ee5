"""INSERT, UPDATE, DELETE, MERGE and BULK INSERT."""

from typing import List, Optional

from tsqlparser.models.base import Identifier, Relation
from tsqlparser.models.dml import (
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
    Update,
    ValuesClause,
)
from tsqlparser.models.expressions import ColumnRef, FunctionCall, MethodCall, VariableRef
from tsqlparser.models.queries import NamedTable, TableFunction, VariableTable, WithClause
from tsqlparser.models.token import Token, TokenKind
from tsqlparser.parser.base import ASSIGNMENT_OPERATORS
from tsqlparser.parser.expressions import PREC_COMPARE

_REMOTE_ROWSETS = ("OPENQUERY", "OPENROWSET", "OPENDATASOURCE")


class DmlParser:
    """Mixin: data modification statements."""

    def parse_nested_dml(self):
        """A DML statement used as a table source: ``(DELETE ... OUTPUT ...) AS d``."""
        handlers = {
            "INSERT": self.parse_insert,
            "UPDATE": self.parse_update,
            "DELETE": self.parse_delete,
            "MERGE": self.parse_merge,
        }
        return handlers[self.current.upper]()

    # Shared pieces

    def _parse_dml_target(self) -> Relation:
        start = self.current
        if start.kind == TokenKind.VARIABLE:
            self.advance()
            return VariableTable(variable=VariableRef(name=start.text, span=start.span), span=start.span)
        if self.is_any_word(_REMOTE_ROWSETS) and self.is_punct("(", 1):
            name = self.multipart_identifier(first=self.name_part())
            arguments = self.parse_call_arguments()
            call = FunctionCall(name=name, arguments=tuple(arguments), span=self.span_from(start))
            return TableFunction(call=call, span=self.span_from(start))
        name = self.multipart_identifier()
        hints = ()
        if self.is_word("WITH") and self.is_punct("(", 1):
            self.advance()
            hints = self.parse_table_hints()
        return NamedTable(name=name, hints=hints, span=self.span_from(start))

    def _parse_output_clauses(self):
        outputs = []
        while self.is_word("OUTPUT"):
            start = self.advance()
            items = self.parse_select_items()
            into_table = None
            into_variable = None
            into_columns = ()
            if self.match_word("INTO"):
                if self.current.kind == TokenKind.VARIABLE:
                    token = self.advance()
                    into_variable = VariableRef(name=token.text, span=token.span)
                else:
                    into_table = self.multipart_identifier()
                if self.is_punct("("):
                    into_columns = self.identifier_list()
            outputs.append(OutputClause(
                items=tuple(items),
                into_table=into_table,
                into_variable=into_variable,
                into_columns=into_columns,
                span=self.span_from(start),
            ))
        return tuple(outputs)

    def _parse_query_options(self):
        if self.is_word("OPTION") and self.is_punct("(", 1):
            self.advance()
            return self.parse_parenthesized_options()
        return ()

    def parse_set_clauses(self) -> List:
        clauses = [self._parse_set_clause()]
        while self.match_punct(","):
            clauses.append(self._parse_set_clause())
        return clauses

    def _parse_set_clause(self):
        start = self.current
        if start.kind == TokenKind.VARIABLE:
            self.advance()
            variable = VariableRef(name=start.text, span=start.span)
            operator = self._expect_assignment_operator()
            value = self.parse_expression(PREC_COMPARE)
            if operator == "=" and isinstance(value, ColumnRef) and self.match_op("="):
                # SET @v = column = expression
                column_value = self.parse_expression()
                return Assignment(
                    target=value, value=column_value, variable=variable, span=self.span_from(start)
                )
            return Assignment(target=variable, operator=operator, value=value, span=self.span_from(start))

        target = self._parse_name_expression()
        if isinstance(target, MethodCall) and not self._assignment_operator_ahead():
            # column.WRITE(...) and other mutator methods
            return target
        operator = self._expect_assignment_operator()
        value = self.parse_expression()
        return Assignment(target=target, operator=operator, value=value, span=self.span_from(start))

    def _assignment_operator_ahead(self) -> bool:
        token = self.current
        return token.kind == TokenKind.OPERATOR and token.text in ASSIGNMENT_OPERATORS

    def _expect_assignment_operator(self) -> str:
        if not self._assignment_operator_ahead():
            raise self.unexpected("assignment operator")
        return self.advance().text

    def _parse_where_or_current_of(self):
        if not self.match_word("WHERE"):
            return None, None
        if self.is_word("CURRENT") and self.is_word("OF", 1):
            start = self.advance()
            self.advance()
            cursor = self.parse_cursor_ref()
            return None, CurrentOf(cursor=cursor, span=self.span_from(start))
        return self.parse_expression(), None

    def parse_cursor_ref(self) -> CursorRef:
        start = self.current
        global_ = bool(self.match_word("GLOBAL"))
        if self.current.kind == TokenKind.VARIABLE:
            token = self.advance()
            return CursorRef(
                variable=VariableRef(name=token.text, span=token.span), global_=global_, span=self.span_from(start)
            )
        name = self.identifier_part()
        return CursorRef(name=name, global_=global_, span=self.span_from(start))

    def _span_start(self, with_clause: Optional[WithClause], token: Token):
        return with_clause.span if with_clause is not None else token.span

    # INSERT

    def parse_insert(self, with_clause: Optional[WithClause] = None) -> Insert:
        start = self.expect_word("INSERT")
        top = self.parse_top_clause() if self.is_word("TOP") else None
        into_keyword = bool(self.match_word("INTO"))
        target = self._parse_dml_target()
        columns = ()
        if self.is_punct("(") and not self.starts_query(1):
            columns = self.identifier_list()
        outputs = self._parse_output_clauses()

        source = None
        default_values = False
        options = ()
        if self.match_words("DEFAULT", "VALUES"):
            default_values = True
        elif self.is_word("VALUES"):
            values_start = self.current
            rows = self.parse_values_rows()
            source = ValuesClause(rows=rows, span=self.span_from(values_start))
        elif self.is_any_word(("EXEC", "EXECUTE")):
            source = self.parse_execute()
        elif self.starts_query() or self.is_punct("("):
            source = self.parse_query()
        else:
            raise self.unexpected("VALUES, SELECT, EXECUTE or DEFAULT VALUES")
        if source is None or isinstance(source, ValuesClause):
            options = self._parse_query_options()

        return Insert(
            with_=with_clause,
            top=top,
            into_keyword=into_keyword,
            target=target,
            columns=columns,
            outputs=outputs,
            source=source,
            default_values=default_values,
            options=options,
            span=self._span_start(with_clause, start).to(self.previous.span),
        )

    # UPDATE

    def parse_update(self, with_clause: Optional[WithClause] = None) -> Update:
        start = self.expect_word("UPDATE")
        top = self.parse_top_clause() if self.is_word("TOP") else None
        target = self._parse_dml_target()
        self.expect_word("SET")
        set_clauses = self.parse_set_clauses()
        outputs = self._parse_output_clauses()
        from_ = ()
        if self.match_word("FROM"):
            from_ = tuple(self.parse_from_list())
        where, current_of = self._parse_where_or_current_of()
        options = self._parse_query_options()
        return Update(
            with_=with_clause,
            top=top,
            target=target,
            set_clauses=tuple(set_clauses),
            outputs=outputs,
            from_=from_,
            where=where,
            current_of=current_of,
            options=options,
            span=self._span_start(with_clause, start).to(self.previous.span),
        )

    # DELETE

    def parse_delete(self, with_clause: Optional[WithClause] = None) -> Delete:
        start = self.expect_word("DELETE")
        top = self.parse_top_clause() if self.is_word("TOP") else None
        from_keyword = bool(self.match_word("FROM"))
        target = self._parse_dml_target()
        outputs = self._parse_output_clauses()
        from_ = ()
        if self.match_word("FROM"):
            from_ = tuple(self.parse_from_list())
        where, current_of = self._parse_where_or_current_of()
        options = self._parse_query_options()
        return Delete(
            with_=with_clause,
            top=top,
            from_keyword=from_keyword,
            target=target,
            outputs=outputs,
            from_=from_,
            where=where,
            current_of=current_of,
            options=options,
            span=self._span_start(with_clause, start).to(self.previous.span),
        )

    # MERGE

    def parse_merge(self, with_clause: Optional[WithClause] = None) -> Merge:
        start = self.expect_word("MERGE")
        top = self.parse_top_clause() if self.is_word("TOP") else None
        into_keyword = bool(self.match_word("INTO"))

        target_start = self.current
        name = self.multipart_identifier()
        hints = ()
        if self.is_word("WITH") and self.is_punct("(", 1):
            self.advance()
            hints = self.parse_table_hints()
        alias, _ = self.parse_alias()
        target = NamedTable(name=name, hints=hints, alias=alias, span=self.span_from(target_start))

        self.expect_word("USING")
        source = self.parse_table_source()
        self.expect_word("ON")
        condition = self.parse_expression()

        whens = []
        while self.is_word("WHEN"):
            whens.append(self._parse_merge_when())
        if not whens:
            raise self.unexpected("WHEN")

        outputs = self._parse_output_clauses()
        options = self._parse_query_options()
        return Merge(
            with_=with_clause,
            top=top,
            into_keyword=into_keyword,
            target=target,
            source=source,
            condition=condition,
            whens=tuple(whens),
            outputs=outputs,
            options=options,
            span=self._span_start(with_clause, start).to(self.previous.span),
        )

    def _parse_merge_when(self) -> MergeWhen:
        start = self.expect_word("WHEN")
        if self.match_word("MATCHED"):
            match = MergeMatch.MATCHED
        else:
            self.expect_words("NOT", "MATCHED")
            if self.match_words("BY", "TARGET"):
                match = MergeMatch.NOT_MATCHED_BY_TARGET
            elif self.match_words("BY", "SOURCE"):
                match = MergeMatch.NOT_MATCHED_BY_SOURCE
            else:
                match = MergeMatch.NOT_MATCHED
        condition = None
        if self.match_word("AND"):
            condition = self.parse_expression()
        self.expect_word("THEN")

        action_start = self.current
        if self.match_word("UPDATE"):
            self.expect_word("SET")
            set_clauses = self.parse_set_clauses()
            action = MergeUpdate(set_clauses=tuple(set_clauses), span=self.span_from(action_start))
        elif self.match_word("DELETE"):
            action = MergeDelete(span=self.span_from(action_start))
        elif self.match_word("INSERT"):
            columns = ()
            if self.is_punct("("):
                columns = self.identifier_list()
            if self.match_words("DEFAULT", "VALUES"):
                action = MergeInsert(columns=columns, default_values=True, span=self.span_from(action_start))
            else:
                self.expect_word("VALUES")
                values = self.parse_call_arguments()
                action = MergeInsert(columns=columns, values=tuple(values), span=self.span_from(action_start))
        else:
            raise self.unexpected("UPDATE, DELETE or INSERT")
        return MergeWhen(match=match, condition=condition, action=action, span=self.span_from(start))

    # BULK INSERT

    def parse_bulk_insert(self) -> BulkInsert:
        start = self.current
        self.expect_words("BULK", "INSERT")
        table: Identifier = self.multipart_identifier()
        self.expect_word("FROM")
        source = self.parse_expression()
        options = ()
        if self.is_word("WITH") and self.is_punct("(", 1):
            self.advance()
            options = self.parse_parenthesized_options()
        return BulkInsert(table=table, source=source, options=options, span=self.span_from(start))
