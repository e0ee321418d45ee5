"""
Unit tests for SELECT query parsing.
"""

import pytest

from tsqlparser import parse
from tsqlparser.models.dml import Select
from tsqlparser.models.expressions import FunctionCall, GroupingKind, GroupingSpec, MethodCall
from tsqlparser.models.queries import (
    AliasStyle,
    BulkOpenRowset,
    DerivedTable,
    DmlTable,
    JoinedTable,
    JoinKind,
    NamedTable,
    ParenthesizedQuery,
    PivotTable,
    SelectAssignment,
    SetOperation,
    SetOperator,
    TableFunction,
    TemporalKind,
    UnpivotTable,
    ValuesTable,
    VariableTable,
)


def parse_query(source):
    script = parse(source)
    assert not script.has_errors, [str(d) for d in script.diagnostics]
    statement = script.statements[0]
    assert isinstance(statement, Select)
    return statement.query


class TestSelectClauses:
    """Test the clauses of a single SELECT."""

    def test_full_select(self):
        """Test every clause of a SELECT lands in its field."""
        query = parse_query(
            "SELECT DISTINCT TOP (10) PERCENT c.id, COUNT(*) AS n "
            "FROM dbo.customers c "
            "WHERE c.active = 1 "
            "GROUP BY c.id "
            "HAVING COUNT(*) > 1 "
            "ORDER BY n DESC"
        )
        spec = query.specification

        assert spec.distinct is True
        assert spec.top.percent is True
        assert len(spec.items) == 2
        assert spec.items[1].alias.value == "n"
        assert spec.items[1].alias_style == AliasStyle.AS
        assert spec.from_[0].alias.value == "c"
        assert spec.where is not None
        assert len(spec.group_by.items) == 1
        assert spec.having is not None
        assert len(query.order_by) == 1

    def test_alias_styles(self):
        """Test AS, bare, equals and string aliases."""
        query = parse_query("SELECT a AS x, b y, z = c, d 'label' FROM t")
        items = query.specification.items

        assert [i.alias_style for i in items] == [
            AliasStyle.AS,
            AliasStyle.BARE,
            AliasStyle.EQUALS,
            AliasStyle.BARE,
        ]
        assert items[3].alias.value == "label"

    def test_variable_assignment(self):
        """Test SELECT @v = expr."""
        query = parse_query("SELECT @total = SUM(amount) FROM orders")

        assert isinstance(query.specification.items[0], SelectAssignment)

    def test_select_into_temp_table(self):
        """Test SELECT ... INTO #temp."""
        query = parse_query("SELECT * INTO #staging FROM src")

        assert query.specification.into.name == "#staging"

    def test_top_with_ties(self):
        """Test TOP n WITH TIES."""
        query = parse_query("SELECT TOP 5 WITH TIES name FROM t ORDER BY score")

        top = query.specification.top
        assert top.with_ties is True
        assert top.parenthesized is False

    def test_offset_fetch(self):
        """Test OFFSET ... FETCH NEXT ... ROWS ONLY."""
        query = parse_query("SELECT id FROM t ORDER BY id OFFSET 10 ROWS FETCH NEXT 5 ROWS ONLY")

        assert query.offset.value == 10
        assert query.fetch.value == 5

    def test_group_by_rollup_and_grouping_sets(self):
        """Test ROLLUP and GROUPING SETS."""
        rollup = parse_query("SELECT a, b, SUM(c) FROM t GROUP BY ROLLUP (a, b)")
        sets = parse_query("SELECT a, b FROM t GROUP BY GROUPING SETS ((a, b), (a), ())")

        item = rollup.specification.group_by.items[0]
        assert isinstance(item, GroupingSpec)
        assert item.kind == GroupingKind.ROLLUP
        assert sets.specification.group_by.items[0].kind == GroupingKind.GROUPING_SETS
        assert len(sets.specification.group_by.items[0].items) == 3

    def test_option_hint(self):
        """Test a trailing OPTION clause."""
        query = parse_query("SELECT * FROM t OPTION (RECOMPILE, MAXDOP 1)")

        assert [o.name for o in query.options] == ["RECOMPILE", "MAXDOP"]

    def test_for_xml_and_json(self):
        """Test FOR XML PATH and FOR JSON options."""
        xml = parse_query("SELECT id FROM t FOR XML PATH('row'), ROOT('rows')")
        json = parse_query("SELECT id FROM t FOR JSON AUTO, WITHOUT_ARRAY_WRAPPER")

        assert xml.for_clause.kind == "XML"
        assert xml.for_clause.mode == "PATH"
        assert xml.for_clause.mode_argument.value == "row"
        assert json.for_clause.kind == "JSON"
        assert json.for_clause.options[0].name == "WITHOUT_ARRAY_WRAPPER"


class TestSetOperations:
    """Test UNION, EXCEPT and INTERSECT."""

    def test_union_all(self):
        """Test UNION ALL."""
        query = parse_query("SELECT a FROM t UNION ALL SELECT a FROM u")

        assert isinstance(query.body, SetOperation)
        assert query.body.operator == SetOperator.UNION_ALL

    def test_intersect_binds_tighter_than_union(self):
        """Test INTERSECT groups before UNION."""
        query = parse_query("SELECT a FROM t UNION SELECT a FROM u INTERSECT SELECT a FROM v")

        assert query.body.operator == SetOperator.UNION
        assert query.body.right.operator == SetOperator.INTERSECT

    def test_parenthesized_query(self):
        """Test a parenthesized set operand."""
        query = parse_query("(SELECT a FROM t) EXCEPT (SELECT a FROM u)")

        assert query.body.operator == SetOperator.EXCEPT
        assert isinstance(query.body.left, ParenthesizedQuery)


class TestCommonTableExpressions:
    """Test WITH clauses."""

    def test_recursive_cte(self):
        """Test a CTE with column list referencing itself."""
        query = parse_query(
            "WITH nums (n) AS (SELECT 1 UNION ALL SELECT n + 1 FROM nums WHERE n < 10) "
            "SELECT n FROM nums"
        )

        cte = query.with_.ctes[0]
        assert cte.name.value == "nums"
        assert [c.value for c in cte.columns] == ["n"]

    def test_multiple_ctes(self):
        """Test comma-separated CTEs."""
        query = parse_query("WITH a AS (SELECT 1 AS x), b AS (SELECT x FROM a) SELECT * FROM b")

        assert [c.name.value for c in query.with_.ctes] == ["a", "b"]

    def test_xml_namespaces(self):
        """Test WITH XMLNAMESPACES."""
        query = parse_query(
            "WITH XMLNAMESPACES ('urn:orders' AS o, DEFAULT 'urn:default') "
            "SELECT id FROM t FOR XML RAW"
        )

        namespaces = query.with_.xml_namespaces
        assert namespaces[0].prefix.value == "o"
        assert namespaces[1].is_default


class TestTableSources:
    """Test FROM clause relations."""

    def from_clause(self, source):
        return parse_query(source).specification.from_

    def test_join_chain(self):
        """Test consecutive joins nest to the left."""
        relation = self.from_clause(
            "SELECT * FROM a INNER JOIN b ON a.id = b.id LEFT OUTER JOIN c ON b.id = c.id"
        )[0]

        assert isinstance(relation, JoinedTable)
        assert relation.kind == JoinKind.LEFT
        assert relation.outer is True
        assert isinstance(relation.left, JoinedTable)
        assert relation.left.kind == JoinKind.INNER

    def test_join_with_nested_right_side(self):
        """Test a JOIN b JOIN c ON .. ON .. nests on the right."""
        relation = self.from_clause("SELECT * FROM a JOIN b JOIN c ON b.id = c.id ON a.id = b.id")[0]

        assert isinstance(relation.right, JoinedTable)
        assert relation.explicit_kind is False

    def test_join_hint(self):
        """Test INNER HASH JOIN."""
        relation = self.from_clause("SELECT * FROM a INNER HASH JOIN b ON a.id = b.id")[0]

        assert relation.hint == "HASH"

    def test_cross_and_outer_apply(self):
        """Test APPLY forms have no condition."""
        relation = self.from_clause(
            "SELECT * FROM a CROSS APPLY dbo.fn(a.id) f OUTER APPLY (SELECT TOP 1 x FROM b) o"
        )[0]

        assert relation.kind == JoinKind.OUTER_APPLY
        assert isinstance(relation.right, DerivedTable)
        assert relation.left.kind == JoinKind.CROSS_APPLY
        assert isinstance(relation.left.right, TableFunction)

    def test_table_hints(self):
        """Test WITH (NOLOCK, INDEX(ix))."""
        relation = self.from_clause("SELECT * FROM orders o WITH (NOLOCK, INDEX(ix_date))")[0]

        assert isinstance(relation, NamedTable)
        assert [h.name for h in relation.hints] == ["NOLOCK", "INDEX"]
        assert relation.legacy_hints is False

    def test_legacy_table_hints(self):
        """Test hints without WITH."""
        relation = self.from_clause("SELECT * FROM orders (NOLOCK)")[0]

        assert relation.legacy_hints is True

    def test_temporal_query(self):
        """Test FOR SYSTEM_TIME AS OF."""
        relation = self.from_clause("SELECT * FROM dbo.prices FOR SYSTEM_TIME AS OF '2020-01-01' p")[0]

        assert relation.temporal.kind == TemporalKind.AS_OF
        assert relation.alias.value == "p"

    def test_tablesample(self):
        """Test TABLESAMPLE."""
        relation = self.from_clause("SELECT * FROM big TABLESAMPLE (10 PERCENT)")[0]

        assert relation.tablesample.unit == "PERCENT"

    def test_derived_table_with_column_aliases(self):
        """Test (SELECT ...) AS d (x, y)."""
        relation = self.from_clause("SELECT * FROM (SELECT 1, 2) AS d (x, y)")[0]

        assert isinstance(relation, DerivedTable)
        assert [c.value for c in relation.column_aliases] == ["x", "y"]

    def test_values_table(self):
        """Test (VALUES ...) AS v (a, b)."""
        relation = self.from_clause("SELECT * FROM (VALUES (1, 'a'), (2, 'b')) AS v (id, name)")[0]

        assert isinstance(relation, ValuesTable)
        assert len(relation.rows) == 2

    def test_table_variable(self):
        """Test a table variable source."""
        relation = self.from_clause("SELECT * FROM @items AS i")[0]

        assert isinstance(relation, VariableTable)

    def test_openjson_with_schema(self):
        """Test OPENJSON ... WITH (...)."""
        relation = self.from_clause(
            "SELECT * FROM OPENJSON(@json) WITH (id int '$.id', tags nvarchar(max) '$.tags' AS JSON) j"
        )[0]

        assert isinstance(relation, TableFunction)
        assert len(relation.schema_columns) == 2
        assert relation.schema_columns[1].as_json is True
        assert relation.alias.value == "j"

    def test_xml_nodes_source(self):
        """Test @x.nodes(...) as a row source."""
        relation = self.from_clause("SELECT n.c.value('.', 'int') FROM @doc.nodes('/a/b') AS n(c)")[0]

        assert isinstance(relation, TableFunction)
        assert isinstance(relation.call, MethodCall)
        assert [c.value for c in relation.column_aliases] == ["c"]

    def test_openrowset_bulk(self):
        """Test OPENROWSET(BULK ...)."""
        relation = self.from_clause(
            "SELECT * FROM OPENROWSET(BULK 'C:\\data\\file.json', SINGLE_CLOB) AS j"
        )[0]

        assert isinstance(relation, BulkOpenRowset)
        assert relation.options[0].name == "SINGLE_CLOB"

    def test_dml_table_source(self):
        """Test (DELETE ... OUTPUT ...) AS d as a row source."""
        statement = parse(
            "INSERT INTO archive (id) SELECT id FROM (DELETE FROM live OUTPUT deleted.id) AS d"
        ).statements[0]

        relation = statement.source.specification.from_[0]
        assert isinstance(relation, DmlTable)

    def test_pivot(self):
        """Test PIVOT."""
        relation = self.from_clause(
            "SELECT * FROM sales PIVOT (SUM(amount) FOR quarter IN ([Q1], [Q2])) AS p"
        )[0]

        assert isinstance(relation, PivotTable)
        assert isinstance(relation.aggregate, FunctionCall)
        assert [v.value for v in relation.values] == ["Q1", "Q2"]

    def test_unpivot(self):
        """Test UNPIVOT."""
        relation = self.from_clause(
            "SELECT * FROM wide UNPIVOT (amount FOR quarter IN (q1, q2)) AS u"
        )[0]

        assert isinstance(relation, UnpivotTable)
        assert relation.name_column.value == "quarter"


class TestKeywordsAsNames:
    """Test keywords used where a name is expected."""

    def test_contextual_keywords_as_columns(self):
        query = parse_query("SELECT status AS Status, key AS [Key], row FROM t")
        items = query.specification.items

        assert [i.expression.name.name for i in items] == ["status", "key", "row"]
        assert items[0].alias.value == "Status"
        assert items[1].alias.value == "Key"

    @pytest.mark.parametrize("alias", ["RowCount", "Current", "Plan", "Outer", "Key"])
    def test_reserved_word_after_as(self, alias):
        """Test any word after AS names the column."""
        query = parse_query(f"SELECT COUNT(*) AS {alias} FROM t")

        assert query.specification.items[0].alias.value == alias

    def test_reserved_word_table_alias(self):
        """Test a reserved table alias written with AS."""
        query = parse_query("SELECT Outer.id FROM dbo.t AS Outer")

        assert query.specification.from_[0].alias.value == "Outer"

    def test_bare_reserved_word_is_not_an_alias(self):
        script = parse("SELECT a FROM t OUTER APPLY f(t.id) AS x")

        relation = script.statements[0].query.specification.from_[0]
        assert not script.has_errors
        assert relation.kind == JoinKind.OUTER_APPLY
        assert relation.left.alias is None


@pytest.mark.parametrize("source", [
    "SELECT 1",
    "SELECT 1;",
    "select x from t where y in (1, 2)",
])
def test_simple_selects_parse_cleanly(source):
    """Test small queries parse without diagnostics."""
    script = parse(source)

    assert script.diagnostics == ()
    assert len(script.statements) == 1
