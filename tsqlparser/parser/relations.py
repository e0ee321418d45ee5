"""Table sources: named tables, derived tables, table functions and joins."""

from typing import List, Optional

from tsqlparser.models.base import Identifier, Relation
from tsqlparser.models.expressions import ColumnRef, FunctionCall, MethodCall, VariableRef
from tsqlparser.models.queries import (
    AliasedRelation,
    BulkOpenRowset,
    DerivedTable,
    DmlTable,
    JoinedTable,
    JoinKind,
    NamedTable,
    ParenthesizedRelation,
    PivotTable,
    SchemaColumn,
    TableFunction,
    TableHint,
    TableSample,
    TemporalClause,
    TemporalKind,
    UnpivotTable,
    ValuesRow,
    ValuesTable,
    VariableTable,
)
from tsqlparser.models.token import Token, TokenKind
from tsqlparser.parser.expressions import PREC_COMPARE, PREC_UNARY

_ROWSET_FUNCTIONS = frozenset([
    "OPENQUERY", "OPENROWSET", "OPENDATASOURCE", "OPENXML", "CONTAINSTABLE", "FREETEXTTABLE",
])
_DML_WORDS = ("INSERT", "UPDATE", "DELETE", "MERGE")
_SET_OPERATOR_WORDS = frozenset(["UNION", "EXCEPT", "INTERSECT", "ORDER"])


class RelationParser:
    """Mixin: FROM-clause table sources."""

    def parse_from_list(self) -> List[Relation]:
        relations = [self.parse_table_source()]
        while self.match_punct(","):
            relations.append(self.parse_table_source())
        return relations

    def parse_table_source(self) -> Relation:
        left = self._parse_table_primary()
        while True:
            joined = self._parse_join(left)
            if joined is None:
                return left
            left = joined

    # Joins

    def _parse_join(self, left: Relation) -> Optional[Relation]:
        for words, kind in (
            (("CROSS", "JOIN"), JoinKind.CROSS),
            (("CROSS", "APPLY"), JoinKind.CROSS_APPLY),
            (("OUTER", "APPLY"), JoinKind.OUTER_APPLY),
        ):
            if self.match_words(*words):
                right = self._parse_table_primary()
                return JoinedTable(kind=kind, left=left, right=right, span=left.span.to(self.previous.span))

        kind = None
        outer = False
        hint = None
        if self.match_word("INNER"):
            kind = JoinKind.INNER
        elif self.is_any_word(("LEFT", "RIGHT", "FULL")):
            kind = JoinKind(self.advance().upper)
            outer = bool(self.match_word("OUTER"))
        if kind is not None and self.is_any_word(self.dialect.join_hints) and self.is_word("JOIN", 1):
            hint = self.advance().upper

        if not self.is_word("JOIN"):
            if kind is not None:
                raise self.unexpected("JOIN")
            return None
        self.advance()

        explicit_kind = kind is not None
        # the right side may carry its own joins: a JOIN b JOIN c ON .. ON ..
        right = self.parse_table_source()
        self.expect_word("ON")
        condition = self.parse_expression()
        return JoinedTable(
            kind=kind or JoinKind.INNER,
            left=left,
            right=right,
            condition=condition,
            hint=hint,
            explicit_kind=explicit_kind,
            outer=outer,
            span=left.span.to(self.previous.span),
        )

    # Primaries

    def _parse_table_primary(self) -> Relation:
        start = self.current
        with self.nested(start):
            relation = self._parse_table_primary_body(start)
            while self.is_any_word(("PIVOT", "UNPIVOT")):
                relation = self._parse_pivot(relation, start)
            return relation

    def _parse_table_primary_body(self, start: Token) -> Relation:
        if self.is_punct("("):
            if self._parenthesized_query_ahead():
                query = self._parse_parenthesized_query()
                return self._finish_aliased(DerivedTable, start, query=query)
            if self.is_word("VALUES", 1):
                self.advance()
                rows = self.parse_values_rows()
                self.expect_punct(")")
                return self._finish_aliased(ValuesTable, start, rows=rows)
            if self.is_any_word(_DML_WORDS, 1):
                self.advance()
                statement = self.parse_nested_dml()
                self.expect_punct(")")
                return self._finish_aliased(DmlTable, start, statement=statement)
            self.advance()
            inner = self.parse_table_source()
            self.expect_punct(")")
            return ParenthesizedRelation(relation=inner, span=self.span_from(start))

        if self.current.kind == TokenKind.VARIABLE:
            if self.is_punct(".", 1):
                call = self.parse_expression(PREC_UNARY)
                return self._finish_table_function(call, start)
            token = self.advance()
            variable = VariableRef(name=token.text, span=token.span)
            return self._finish_aliased(VariableTable, start, variable=variable)

        if self.at_words("OPENROWSET") and self.is_punct("(", 1) and self.is_word("BULK", 2):
            return self._parse_bulk_openrowset(start)

        if self.is_identifier() or (self.is_any_word(_ROWSET_FUNCTIONS) and self.is_punct("(", 1)):
            name = self.multipart_identifier(first=self.name_part())
            if self.is_punct("(") and not self._legacy_hints_ahead():
                arguments = self.parse_call_arguments()
                if len(name.parts) >= 2 and name.parts[-1].value.upper() in self.dialect.method_names:
                    target_name = Identifier(parts=name.parts[:-1], span=start.span.to(name.parts[-2].span))
                    call = MethodCall(
                        target=ColumnRef(name=target_name, span=target_name.span),
                        method=name.parts[-1],
                        arguments=tuple(arguments),
                        span=self.span_from(start),
                    )
                else:
                    call = FunctionCall(name=name, arguments=tuple(arguments), span=self.span_from(start))
                return self._finish_table_function(call, start)
            return self._finish_named_table(name, start)

        raise self.unexpected("table source")

    def _finish_aliased(self, cls, start: Token, **fields) -> AliasedRelation:
        alias, _ = self.parse_alias()
        column_aliases = ()
        if alias is not None and self.is_punct("(") and cls is not VariableTable:
            column_aliases = self.identifier_list()
        return cls(alias=alias, column_aliases=column_aliases, span=self.span_from(start), **fields)

    def _finish_table_function(self, call, start: Token) -> TableFunction:
        schema_columns = ()
        schema_table = None
        if self.is_word("WITH") and self.is_punct("(", 1):
            self.advance()
            schema_columns = self._parse_schema_columns()
        elif self.is_word("WITH") and isinstance(call, FunctionCall) and call.name.name.upper() == "OPENXML":
            # OPENXML(...) WITH table_name
            self.advance()
            schema_table = self.multipart_identifier()
        return self._finish_aliased(
            TableFunction, start, call=call, schema_columns=schema_columns, schema_table=schema_table
        )

    def _parse_schema_columns(self):
        self.expect_punct("(")
        columns = []
        while True:
            column_start = self.current
            name = self.identifier_part()
            data_type = self.parse_data_type()
            path = None
            if self.current.kind == TokenKind.STRING:
                path = self.parse_string()
            as_json = self.match_words("AS", "JSON")
            columns.append(SchemaColumn(
                name=name, data_type=data_type, path=path, as_json=as_json, span=self.span_from(column_start)
            ))
            if not self.match_punct(","):
                break
        self.expect_punct(")")
        return tuple(columns)

    def _finish_named_table(self, name: Identifier, start: Token) -> NamedTable:
        temporal = None
        if self.at_words("FOR", "SYSTEM_TIME"):
            temporal = self._parse_temporal_clause()
        alias, _ = self.parse_alias()
        tablesample = None
        if self.is_word("TABLESAMPLE"):
            tablesample = self._parse_tablesample()
        hints = ()
        legacy_hints = False
        if self.is_word("WITH") and self.is_punct("(", 1):
            self.advance()
            hints = self.parse_table_hints()
        elif self._legacy_hints_ahead():
            hints = self.parse_table_hints()
            legacy_hints = True
        return NamedTable(
            name=name,
            alias=alias,
            temporal=temporal,
            tablesample=tablesample,
            hints=hints,
            legacy_hints=legacy_hints,
            span=self.span_from(start),
        )

    def parse_table_hints(self):
        self.expect_punct("(")
        hints = [self._parse_table_hint()]
        while True:
            if self.match_punct(","):
                hints.append(self._parse_table_hint())
            elif self.current.is_word:
                hints.append(self._parse_table_hint())
            else:
                break
        self.expect_punct(")")
        return tuple(hints)

    def _parse_table_hint(self) -> TableHint:
        start = self.current
        if not start.is_word:
            raise self.unexpected("table hint")
        name = self.advance().upper
        arguments = ()
        value = None
        if self.is_punct("("):
            arguments = tuple(self.parse_call_arguments())
        elif self.match_op("="):
            value = self.parse_expression()
        return TableHint(name=name, arguments=arguments, value=value, span=self.span_from(start))

    def _parse_temporal_clause(self) -> TemporalClause:
        start = self.current
        self.expect_words("FOR", "SYSTEM_TIME")
        if self.match_words("AS", "OF"):
            point = self.parse_expression(PREC_COMPARE)
            return TemporalClause(kind=TemporalKind.AS_OF, start=point, span=self.span_from(start))
        if self.match_word("FROM"):
            low = self.parse_expression(PREC_COMPARE)
            self.expect_word("TO")
            high = self.parse_expression(PREC_COMPARE)
            return TemporalClause(kind=TemporalKind.FROM_TO, start=low, end=high, span=self.span_from(start))
        if self.match_word("BETWEEN"):
            low = self.parse_expression(PREC_COMPARE)
            self.expect_word("AND")
            high = self.parse_expression(PREC_COMPARE)
            return TemporalClause(kind=TemporalKind.BETWEEN, start=low, end=high, span=self.span_from(start))
        if self.match_words("CONTAINED", "IN"):
            self.expect_punct("(")
            low = self.parse_expression()
            self.expect_punct(",")
            high = self.parse_expression()
            self.expect_punct(")")
            return TemporalClause(kind=TemporalKind.CONTAINED_IN, start=low, end=high, span=self.span_from(start))
        self.expect_word("ALL")
        return TemporalClause(kind=TemporalKind.ALL, span=self.span_from(start))

    def _parse_tablesample(self) -> TableSample:
        start = self.expect_word("TABLESAMPLE")
        system = bool(self.match_word("SYSTEM"))
        self.expect_punct("(")
        size = self.parse_expression()
        unit = None
        token = self.match_word("PERCENT", "ROWS")
        if token is not None:
            unit = token.upper
        self.expect_punct(")")
        repeatable = None
        if self.match_word("REPEATABLE"):
            self.expect_punct("(")
            repeatable = self.parse_expression()
            self.expect_punct(")")
        return TableSample(size=size, unit=unit, system=system, repeatable=repeatable, span=self.span_from(start))

    def _parse_bulk_openrowset(self, start: Token) -> BulkOpenRowset:
        self.advance()
        self.expect_punct("(")
        self.expect_word("BULK")
        path = self.parse_expression()
        options = ()
        if self.match_punct(","):
            options = self.parse_option_list()
        self.expect_punct(")")
        return self._finish_aliased(BulkOpenRowset, start, path=path, options=options)

    def _parse_pivot(self, source: Relation, start: Token) -> AliasedRelation:
        keyword = self.advance().upper
        self.expect_punct("(")
        if keyword == "PIVOT":
            aggregate = self.parse_expression()
            if not isinstance(aggregate, FunctionCall):
                raise self.error("PIVOT requires an aggregate function call")
            self.expect_word("FOR")
            pivot_column = self.parse_expression(PREC_COMPARE)
            if not isinstance(pivot_column, ColumnRef):
                raise self.error("PIVOT requires a column after FOR")
            self.expect_word("IN")
            values = self.identifier_list()
            self.expect_punct(")")
            return self._finish_aliased(
                PivotTable, start, source=source, aggregate=aggregate, pivot_column=pivot_column, values=values
            )
        value_column = self.identifier_part()
        self.expect_word("FOR")
        name_column = self.identifier_part()
        self.expect_word("IN")
        columns = self.identifier_list()
        self.expect_punct(")")
        return self._finish_aliased(
            UnpivotTable, start, source=source, value_column=value_column, name_column=name_column, columns=columns
        )

    def parse_values_rows(self):
        self.expect_word("VALUES")
        rows = [self._parse_values_row()]
        while self.match_punct(","):
            rows.append(self._parse_values_row())
        return tuple(rows)

    def _parse_values_row(self) -> ValuesRow:
        start = self.current
        values = self.parse_call_arguments()
        return ValuesRow(values=tuple(values), span=self.span_from(start))

    # Lookahead

    def _legacy_hints_ahead(self) -> bool:
        """``(NOLOCK)`` right after a table name: hints written without WITH."""
        if not self.is_punct("(") or not self.is_any_word(self.dialect.table_hints, 1):
            return False
        return self.is_punct(")", 2) or self.is_punct(",", 2) or self.is_punct("(", 2) or self.is_op("=", 2)

    def _parenthesized_query_ahead(self, offset: int = 0) -> bool:
        """True when the ``(`` at ``offset`` opens a query rather than a join."""
        if self.starts_query(offset + 1):
            return True
        if not self.is_punct("(", offset + 1) or not self._parenthesized_query_ahead(offset + 1):
            return False
        close = self._matching_paren(offset + 1)
        if close is None:
            return False
        return self.is_punct(")", close + 1) or self.is_any_word(_SET_OPERATOR_WORDS, close + 1)

    def _matching_paren(self, offset: int) -> Optional[int]:
        depth = 0
        index = offset
        while True:
            token = self.peek(index)
            if token.kind == TokenKind.EOF:
                return None
            if token.kind == TokenKind.PUNCTUATION:
                if token.text == "(":
                    depth += 1
                elif token.text == ")":
                    depth -= 1
                    if depth == 0:
                        return index
            index += 1


