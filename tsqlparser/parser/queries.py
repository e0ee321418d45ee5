"""SELECT queries: specifications, set operations, CTEs and trailing clauses."""

from typing import List, Optional

from tsqlparser.models.dml import Select
from tsqlparser.models.expressions import GroupingKind, GroupingSpec, VariableRef
from tsqlparser.models.queries import (
    AliasStyle,
    CommonTableExpression,
    ForClause,
    GroupByClause,
    NamedWindow,
    ParenthesizedQuery,
    Query,
    QuerySpecification,
    SelectAssignment,
    SelectItem,
    SetOperation,
    SetOperator,
    TopClause,
    WithClause,
    XmlNamespace,
)
from tsqlparser.models.token import TokenKind
from tsqlparser.parser.base import ASSIGNMENT_OPERATORS


class QueryParser:
    """Mixin: query expressions."""

    def parse_query(self, with_clause: Optional[WithClause] = None) -> Query:
        start = self.current
        with self.nested(start):
            if with_clause is None and self.is_word("WITH"):
                with_clause = self.parse_with_clause()
            body = self._parse_query_body()

            order_by = ()
            if self.match_words("ORDER", "BY"):
                order_by = tuple(self.parse_order_items())

            offset = None
            fetch = None
            if self.match_word("OFFSET"):
                offset = self.parse_expression()
                self.expect_word("ROW", "ROWS")
                if self.match_word("FETCH"):
                    self.expect_word("FIRST", "NEXT")
                    fetch = self.parse_expression()
                    self.expect_word("ROW", "ROWS")
                    self.expect_word("ONLY")

            for_clause = None
            if self.is_word("FOR") and self.is_any_word(("XML", "JSON", "BROWSE"), 1):
                for_clause = self._parse_for_clause()

            options = ()
            if self.is_word("OPTION") and self.is_punct("(", 1):
                self.advance()
                options = self.parse_parenthesized_options()

            span_start = with_clause.span if with_clause is not None else start.span
            return Query(
                with_=with_clause,
                body=body,
                order_by=order_by,
                offset=offset,
                fetch=fetch,
                for_clause=for_clause,
                options=options,
                span=span_start.to(self.previous.span),
            )

    def _parse_query_body(self):
        left = self._parse_query_term()
        while True:
            if self.match_word("UNION"):
                operator = SetOperator.UNION_ALL if self.match_word("ALL") else SetOperator.UNION
            elif self.match_word("EXCEPT"):
                operator = SetOperator.EXCEPT
            else:
                return left
            right = self._parse_query_term()
            left = SetOperation(operator=operator, left=left, right=right, span=left.span.to(right.span))

    def _parse_query_term(self):
        left = self._parse_query_primary()
        while self.match_word("INTERSECT"):
            right = self._parse_query_primary()
            left = SetOperation(
                operator=SetOperator.INTERSECT, left=left, right=right, span=left.span.to(right.span)
            )
        return left

    def _parse_query_primary(self):
        start = self.current
        if self.is_punct("("):
            self.advance()
            query = self.parse_query()
            self.expect_punct(")")
            return ParenthesizedQuery(query=query, span=self.span_from(start))
        if self.is_word("SELECT"):
            return self._parse_query_specification()
        raise self.unexpected("SELECT")

    def _parse_query_specification(self) -> QuerySpecification:
        start = self.expect_word("SELECT")
        distinct = bool(self.match_word("DISTINCT"))
        all_ = not distinct and bool(self.match_word("ALL"))
        top = self.parse_top_clause() if self.is_word("TOP") else None

        items = self.parse_select_items()

        into = None
        if self.match_word("INTO"):
            into = self.multipart_identifier()

        from_ = ()
        if self.match_word("FROM"):
            from_ = tuple(self.parse_from_list())

        where = None
        if self.match_word("WHERE"):
            where = self.parse_expression()

        group_by = None
        if self.is_word("GROUP") and self.is_word("BY", 1):
            group_by = self._parse_group_by()

        having = None
        if self.match_word("HAVING"):
            having = self.parse_expression()

        windows = ()
        if self.is_word("WINDOW") and self.is_identifier(1) and self.is_word("AS", 2):
            windows = self._parse_window_clause()

        return QuerySpecification(
            distinct=distinct,
            all_=all_,
            top=top,
            items=tuple(items),
            into=into,
            from_=from_,
            where=where,
            group_by=group_by,
            having=having,
            windows=windows,
            span=self.span_from(start),
        )

    def parse_top_clause(self) -> TopClause:
        start = self.expect_word("TOP")
        parenthesized = self.is_punct("(")
        if parenthesized:
            self.advance()
            value = self.parse_expression()
            self.expect_punct(")")
        else:
            value = self._parse_prefix()
        percent = bool(self.match_word("PERCENT"))
        with_ties = self.match_words("WITH", "TIES")
        return TopClause(
            value=value,
            percent=percent,
            with_ties=with_ties,
            parenthesized=parenthesized,
            span=self.span_from(start),
        )

    def _parse_select_item(self):
        start = self.current
        if start.kind == TokenKind.VARIABLE and self.peek(1).kind == TokenKind.OPERATOR:
            if self.peek(1).text in ASSIGNMENT_OPERATORS:
                self.advance()
                operator = self.advance().text
                value = self.parse_expression()
                variable = VariableRef(name=start.text, span=start.span)
                return SelectAssignment(
                    variable=variable, operator=operator, value=value, span=self.span_from(start)
                )

        if (self.is_identifier() or start.kind == TokenKind.STRING) and self.is_op("=", 1):
            if start.kind == TokenKind.STRING:
                alias = self._string_alias()
            else:
                alias = self.identifier_part()
            self.advance()
            expression = self.parse_expression()
            return SelectItem(
                expression=expression, alias=alias, alias_style=AliasStyle.EQUALS, span=self.span_from(start)
            )

        expression = self.parse_expression()
        alias, with_as = self.parse_alias(allow_string=True)
        if alias is None:
            style = AliasStyle.NONE
        elif with_as:
            style = AliasStyle.AS
        else:
            style = AliasStyle.BARE
        return SelectItem(expression=expression, alias=alias, alias_style=style, span=self.span_from(start))

    def parse_select_items(self) -> List:
        items = [self._parse_select_item()]
        while self.match_punct(","):
            items.append(self._parse_select_item())
        return items

    def _parse_group_by(self) -> GroupByClause:
        start = self.current
        self.expect_words("GROUP", "BY")
        all_ = bool(self.match_word("ALL"))
        items = [self._parse_grouping_element()]
        while self.match_punct(","):
            items.append(self._parse_grouping_element())
        return GroupByClause(items=tuple(items), all_=all_, span=self.span_from(start))

    def _parse_grouping_element(self):
        start = self.current
        if self.is_any_word(("ROLLUP", "CUBE")) and self.is_punct("(", 1):
            kind = GroupingKind(self.advance().upper)
            items = self.parse_call_arguments()
            return GroupingSpec(kind=kind, items=tuple(items), span=self.span_from(start))
        if self.at_words("GROUPING", "SETS"):
            self.advance()
            self.advance()
            self.expect_punct("(")
            items = [self._parse_grouping_element()]
            while self.match_punct(","):
                items.append(self._parse_grouping_element())
            self.expect_punct(")")
            return GroupingSpec(kind=GroupingKind.GROUPING_SETS, items=tuple(items), span=self.span_from(start))
        return self.parse_expression()

    def _parse_window_clause(self):
        self.expect_word("WINDOW")
        windows = []
        while True:
            start = self.current
            name = self.identifier_part()
            self.expect_word("AS")
            spec = self.parse_window_spec()
            windows.append(NamedWindow(name=name, spec=spec, span=self.span_from(start)))
            if not self.match_punct(","):
                return tuple(windows)

    # WITH

    def parse_with_clause(self) -> WithClause:
        start = self.expect_word("WITH")
        namespaces = ()
        ctes: List[CommonTableExpression] = []
        if self.is_word("XMLNAMESPACES"):
            namespaces = self._parse_xml_namespaces()
            if not self.match_punct(","):
                return WithClause(xml_namespaces=namespaces, span=self.span_from(start))
        while True:
            ctes.append(self._parse_cte())
            if not self.match_punct(","):
                break
        return WithClause(ctes=tuple(ctes), xml_namespaces=namespaces, span=self.span_from(start))

    def _parse_cte(self) -> CommonTableExpression:
        start = self.current
        name = self.identifier_part()
        columns = ()
        if self.is_punct("("):
            columns = self.identifier_list()
        self.expect_word("AS")
        query = self._parse_parenthesized_query()
        return CommonTableExpression(name=name, columns=columns, query=query, span=self.span_from(start))

    def _parse_xml_namespaces(self):
        self.expect_word("XMLNAMESPACES")
        self.expect_punct("(")
        namespaces = []
        while True:
            start = self.current
            if self.match_word("DEFAULT"):
                uri = self.parse_string()
                namespaces.append(XmlNamespace(uri=uri, span=self.span_from(start)))
            else:
                uri = self.parse_string()
                self.expect_word("AS")
                prefix = self.identifier_part()
                namespaces.append(XmlNamespace(uri=uri, prefix=prefix, span=self.span_from(start)))
            if not self.match_punct(","):
                break
        self.expect_punct(")")
        return tuple(namespaces)

    # FOR XML / JSON / BROWSE

    def _parse_for_clause(self) -> ForClause:
        start = self.expect_word("FOR")
        kind = self.advance().upper
        if kind == "BROWSE":
            return ForClause(kind=kind, span=self.span_from(start))
        mode = None
        mode_argument = None
        if self.current.is_word:
            mode = self.advance().upper
            if self.is_punct("(") and self.peek(1).kind == TokenKind.STRING:
                self.advance()
                mode_argument = self.parse_string()
                self.expect_punct(")")
        options = ()
        if self.match_punct(","):
            options = self.parse_option_list()
        return ForClause(
            kind=kind, mode=mode, mode_argument=mode_argument, options=options, span=self.span_from(start)
        )

    # Statements built on queries

    def parse_select_statement(self):
        start = self.current
        query = self.parse_query()
        return Select(query=query, span=self.span_from(start))
