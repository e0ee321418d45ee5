"""
Unit tests for INSERT, UPDATE, DELETE, MERGE and BULK INSERT parsing.
"""

from tsqlparser import parse
from tsqlparser.models.diagnostic import DiagnosticCode, Severity
from tsqlparser.models.dml import (
    Assignment,
    BulkInsert,
    Delete,
    Insert,
    Merge,
    MergeDelete,
    MergeInsert,
    MergeMatch,
    MergeUpdate,
    Update,
    ValuesClause,
)
from tsqlparser.models.expressions import MethodCall
from tsqlparser.models.queries import JoinedTable, NamedTable, Query, VariableTable
from tsqlparser.models.statements import ExecuteProcedure


def single(source):
    script = parse(source)
    assert not script.has_errors, [str(d) for d in script.diagnostics]
    assert len(script.statements) == 1
    return script.statements[0]


class TestInsert:
    """Test INSERT forms."""

    def test_insert_values(self):
        """Test multi-row VALUES with a column list."""
        statement = single("INSERT INTO dbo.orders (id, total) VALUES (1, 9.5), (2, 3)")

        assert isinstance(statement, Insert)
        assert statement.target.name.name == "orders"
        assert [c.value for c in statement.columns] == ["id", "total"]
        assert isinstance(statement.source, ValuesClause)
        assert len(statement.source.rows) == 2

    def test_insert_without_into(self):
        """Test INTO is optional."""
        statement = single("INSERT orders VALUES (1)")

        assert statement.into_keyword is False

    def test_insert_select(self):
        """Test INSERT ... SELECT."""
        statement = single("INSERT INTO archive SELECT * FROM live WHERE old = 1")

        assert isinstance(statement.source, Query)

    def test_insert_exec(self):
        """Test INSERT ... EXEC."""
        statement = single("INSERT INTO #results EXEC dbo.load_results @day = 1")

        assert isinstance(statement.source, ExecuteProcedure)
        assert statement.target.name.is_temporary

    def test_insert_default_values(self):
        """Test DEFAULT VALUES."""
        statement = single("INSERT INTO audit DEFAULT VALUES")

        assert statement.default_values is True
        assert statement.source is None

    def test_insert_output_into_table_variable(self):
        """Test OUTPUT inserted.* INTO @ids."""
        statement = single("INSERT INTO t (a) OUTPUT inserted.id INTO @ids (id) VALUES (1)")

        output = statement.outputs[0]
        assert output.into_variable.name == "@ids"
        assert [c.value for c in output.into_columns] == ["id"]

    def test_insert_into_table_variable_with_hint(self):
        """Test a table variable and a hinted table as targets."""
        variable = single("INSERT INTO @rows VALUES (1)")
        hinted = single("INSERT INTO dbo.t WITH (TABLOCK) SELECT 1")

        assert isinstance(variable.target, VariableTable)
        assert hinted.target.hints[0].name == "TABLOCK"

    def test_insert_with_cte(self):
        """Test WITH ... INSERT."""
        statement = single("WITH src AS (SELECT 1 AS id) INSERT INTO t (id) SELECT id FROM src")

        assert isinstance(statement, Insert)
        assert statement.with_.ctes[0].name.value == "src"


class TestUpdate:
    """Test UPDATE forms."""

    def test_update_with_from_join(self):
        """Test UPDATE alias SET ... FROM ... JOIN."""
        statement = single(
            "UPDATE o SET o.total = o.total * 1.1, status = 'x' "
            "FROM orders o JOIN customers c ON c.id = o.customer_id WHERE c.vip = 1"
        )

        assert isinstance(statement, Update)
        assert len(statement.set_clauses) == 2
        assert isinstance(statement.from_[0], JoinedTable)
        assert statement.where is not None

    def test_compound_assignment_and_variable_chain(self):
        """Test += and SET @v = col = expr."""
        statement = single("UPDATE counters SET hits += 1, @old = value = value + 1")

        first, second = statement.set_clauses
        assert first.operator == "+="
        assert isinstance(second, Assignment)
        assert second.variable.name == "@old"

    def test_write_method(self):
        """Test column.WRITE(...) as a set clause."""
        statement = single("UPDATE docs SET body.WRITE(N'x', 0, 1) WHERE id = 1")

        assert isinstance(statement.set_clauses[0], MethodCall)

    def test_where_current_of(self):
        """Test WHERE CURRENT OF cursor."""
        statement = single("UPDATE t SET a = 1 WHERE CURRENT OF GLOBAL cur")

        assert statement.where is None
        assert statement.current_of.cursor.global_ is True
        assert statement.current_of.cursor.name.value == "cur"

    def test_top_and_option(self):
        """Test UPDATE TOP (n) ... OPTION (...)."""
        statement = single("UPDATE TOP (100) t SET a = 0 OPTION (MAXDOP 1)")

        assert statement.top.value.value == 100
        assert statement.options[0].name == "MAXDOP"


class TestDelete:
    """Test DELETE forms."""

    def test_delete_with_join(self):
        """Test DELETE alias FROM ... JOIN."""
        statement = single("DELETE o FROM orders o INNER JOIN stale s ON s.id = o.id")

        assert isinstance(statement, Delete)
        assert statement.from_keyword is False
        assert statement.target.name.name == "o"
        assert isinstance(statement.from_[0], JoinedTable)

    def test_delete_output(self):
        """Test DELETE ... OUTPUT deleted.*."""
        statement = single("DELETE FROM queue OUTPUT deleted.* WHERE id < 10")

        assert len(statement.outputs) == 1
        assert statement.where is not None


class TestMerge:
    """Test MERGE."""

    MERGE = (
        "MERGE INTO dbo.target WITH (HOLDLOCK) AS t "
        "USING dbo.source AS s ON t.id = s.id "
        "WHEN MATCHED AND s.deleted = 1 THEN DELETE "
        "WHEN MATCHED THEN UPDATE SET t.name = s.name "
        "WHEN NOT MATCHED BY TARGET THEN INSERT (id, name) VALUES (s.id, s.name) "
        "WHEN NOT MATCHED BY SOURCE THEN DELETE "
        "OUTPUT $action, inserted.id;"
    )

    def test_merge_clauses(self):
        """Test every WHEN clause of a MERGE."""
        statement = single(self.MERGE)

        assert isinstance(statement, Merge)
        assert isinstance(statement.target, NamedTable)
        assert statement.target.alias.value == "t"
        assert statement.target.hints[0].name == "HOLDLOCK"
        assert [w.match for w in statement.whens] == [
            MergeMatch.MATCHED,
            MergeMatch.MATCHED,
            MergeMatch.NOT_MATCHED_BY_TARGET,
            MergeMatch.NOT_MATCHED_BY_SOURCE,
        ]
        assert isinstance(statement.whens[0].action, MergeDelete)
        assert statement.whens[0].condition is not None
        assert isinstance(statement.whens[1].action, MergeUpdate)
        assert isinstance(statement.whens[2].action, MergeInsert)
        assert len(statement.outputs[0].items) == 2

    def test_merge_without_semicolon_is_error(self):
        """Test an unterminated MERGE is reported but still parsed."""
        script = parse(self.MERGE.rstrip(";"))

        assert isinstance(script.statements[0], Merge)
        errors = [d for d in script.diagnostics if d.code == DiagnosticCode.MISSING_TERMINATOR]
        assert len(errors) == 1
        assert errors[0].severity == Severity.ERROR

    def test_not_matched_targets_missing_rows(self):
        """Test NOT MATCHED and NOT MATCHED BY TARGET are equivalent."""
        assert MergeMatch.NOT_MATCHED.targets_missing_rows
        assert MergeMatch.NOT_MATCHED_BY_TARGET.targets_missing_rows
        assert not MergeMatch.NOT_MATCHED_BY_SOURCE.targets_missing_rows


class TestBulkInsert:
    """Test BULK INSERT."""

    def test_bulk_insert_options(self):
        """Test BULK INSERT ... WITH (options)."""
        statement = single(
            "BULK INSERT dbo.staging FROM 'C:\\load\\data.csv' "
            "WITH (FIELDTERMINATOR = ',', ROWTERMINATOR = '\\n', FIRSTROW = 2, TABLOCK)"
        )

        assert isinstance(statement, BulkInsert)
        assert statement.table.name == "staging"
        assert [o.name for o in statement.options] == [
            "FIELDTERMINATOR",
            "ROWTERMINATOR",
            "FIRSTROW",
            "TABLOCK",
        ]
