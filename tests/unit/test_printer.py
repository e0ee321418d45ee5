"""
Unit tests for SQL text generation.
"""

import pytest

from tsqlparser import parse, parse_expression, structurally_equal, to_sql
from tsqlparser.models.base import IdentifierPart, QuoteStyle
from tsqlparser.printer import quote_part, quote_string

ROUND_TRIP_SCRIPTS = [
    "SELECT DISTINCT TOP (10) PERCENT WITH TIES a, b AS [Total Sum] FROM dbo.t ORDER BY a DESC",
    "SELECT c.id, COUNT(*) AS n FROM customers AS c LEFT OUTER JOIN orders o ON o.cid = c.id "
    "GROUP BY c.id HAVING COUNT(*) > 1",
    "SELECT * FROM a CROSS APPLY dbo.fn(a.id) AS f WHERE a.x BETWEEN 1 AND 10 AND a.y NOT IN (1, 2)",
    "SELECT ROW_NUMBER() OVER (PARTITION BY g ORDER BY d ROWS BETWEEN UNBOUNDED PRECEDING AND CURRENT ROW) FROM t",
    "SELECT CASE WHEN a IS NULL THEN 'none' ELSE CAST(a AS varchar(10)) END FROM t",
    "WITH cte (n) AS (SELECT 1 UNION ALL SELECT n + 1 FROM cte WHERE n < 5) SELECT n FROM cte OPTION (MAXRECURSION 10)",
    "SELECT a FROM t1 UNION SELECT a FROM t2 EXCEPT SELECT a FROM t3",
    "SELECT * FROM t WITH (NOLOCK) WHERE EXISTS (SELECT 1 FROM u WHERE u.id = t.id)",
    "SELECT a INTO #tmp FROM t WHERE name LIKE N'x%' ESCAPE '!'",
    "INSERT INTO dbo.t (a, b) OUTPUT inserted.a INTO @ids VALUES (1, 'x'), (2, NULL)",
    "UPDATE t SET a += 1, @v = b = 2 FROM t JOIN u ON u.id = t.id WHERE t.flag = 1",
    "DELETE TOP (5) FROM q OUTPUT deleted.* WHERE id < 10",
    "MERGE t USING s ON t.id = s.id WHEN MATCHED THEN UPDATE SET t.v = s.v "
    "WHEN NOT MATCHED BY TARGET THEN INSERT (id, v) VALUES (s.id, s.v);",
    "DECLARE @a int = 1, @t TABLE (id int PRIMARY KEY)",
    "DECLARE c CURSOR LOCAL FAST_FORWARD FOR SELECT id FROM t",
    "SET NOCOUNT ON\nSET TRANSACTION ISOLATION LEVEL READ COMMITTED",
    "IF @a > 1 PRINT 'big' ELSE BEGIN PRINT 'small'; RETURN; END",
    "WHILE @i < 10 BEGIN SET @i += 1; IF @i = 5 BREAK; END",
    "BEGIN TRY SELECT 1 / 0; END TRY BEGIN CATCH THROW; END CATCH",
    "EXEC @rc = dbo.p @a = 1, @b OUTPUT WITH RECOMPILE",
    "EXEC ('SELECT 1') AT srv",
    "BEGIN TRAN\nCOMMIT TRAN",
    "CREATE TABLE dbo.t (id int IDENTITY(1, 1) NOT NULL PRIMARY KEY, name nvarchar(50) NULL DEFAULT 'x', "
    "CONSTRAINT ck CHECK (id > 0))",
    "CREATE TABLE dbo.e (id int, vf datetime2 GENERATED ALWAYS AS ROW START, vt datetime2 GENERATED ALWAYS AS ROW END, "
    "PERIOD FOR SYSTEM_TIME (vf, vt)) WITH (SYSTEM_VERSIONING = ON (HISTORY_TABLE = dbo.e_history))",
    "CREATE OR ALTER PROCEDURE dbo.p @a int = 0 AS BEGIN SELECT @a; END",
    "CREATE FUNCTION dbo.f (@x int) RETURNS TABLE AS RETURN SELECT @x AS x",
    "CREATE UNIQUE INDEX ix ON t (a DESC) INCLUDE (b) WHERE b IS NOT NULL",
    "ALTER TABLE t ADD c int NULL",
    "DROP TABLE IF EXISTS a, b",
    "GRANT SELECT ON SCHEMA::sales TO reader",
    "BACKUP DATABASE db TO DISK = 'a.bak' WITH INIT",
    "SELECT 1\nGO 3\nSELECT 2",
    "SELECT x.value('(/a)[1]', 'int') FROM @doc.nodes('/r') AS n(x)",
    "SET @doc.modify('delete /a')",
    "SELECT key AS [Key], COUNT(*) AS RowCount FROM dbo.t AS Outer GROUP BY key",
    "BEGIN TRANSACTION Outer\nCOMMIT TRANSACTION Outer",
    "CREATE TABLE t (RowCount bigint, Outer int)",
    "ALTER TABLE dbo.e SET (SYSTEM_VERSIONING = ON (HISTORY_TABLE = dbo.h, HISTORY_RETENTION_PERIOD = 6 MONTHS))",
    "CREATE LOGIN [CONTOSO\\svc] FROM WINDOWS WITH DEFAULT_DATABASE = Sales",
    "CREATE LOGIN l WITH PASSWORD = 0x0200AB HASHED, CHECK_POLICY = OFF",
    "CREATE USER u FOR LOGIN l WITH DEFAULT_SCHEMA = sales",
    "CREATE SERVER ROLE monitors AUTHORIZATION sa",
    "ALTER LOGIN l WITH PASSWORD = 'n' OLD_PASSWORD = 'o'\nALTER ROLE r ADD MEMBER u",
    "ALTER DATABASE Sales SET SINGLE_USER WITH ROLLBACK IMMEDIATE",
    "ALTER DATABASE Sales ADD FILE (NAME = 'x', SIZE = 100MB, FILEGROWTH = 10%) TO FILEGROUP fg",
    "ALTER DATABASE Sales MODIFY FILEGROUP fg DEFAULT",
    "CREATE XML INDEX ix ON dbo.d (x) USING XML INDEX px FOR PATH",
    "ALTER INDEX ix ON t SET (ALLOW_PAGE_LOCKS = OFF)",
    "RECONFIGURE WITH OVERRIDE\nCHECKPOINT",
    "DISABLE TRIGGER ALL ON DATABASE",
    "BEGIN DIALOG @h FROM SERVICE [//a] TO SERVICE '//b' ON CONTRACT [//c] WITH ENCRYPTION = OFF",
    "SEND ON CONVERSATION @h MESSAGE TYPE [//m] (@body)",
    "WAITFOR (RECEIVE TOP (1) @h = conversation_handle FROM dbo.q), TIMEOUT 5000",
    "BEGIN END CONVERSATION @h WITH CLEANUP; END",
]


class TestRoundTrip:
    """Test printing then re-parsing gives the same tree."""

    @pytest.mark.parametrize("source", ROUND_TRIP_SCRIPTS)
    def test_round_trip(self, source):
        """Test parse(to_sql(tree)) is structurally equal to tree."""
        original = parse(source)
        assert not original.has_errors, [str(d) for d in original.diagnostics]

        printed = to_sql(original)
        reparsed = parse(printed)

        assert not reparsed.has_errors, printed
        assert structurally_equal(original, reparsed), printed

    def test_printing_is_stable(self):
        """Test printing a re-parsed tree gives the same text."""
        printed = to_sql(parse("select a,b from t where a=1 and (b=2 or b=3)"))

        assert to_sql(parse(printed)) == printed


class TestCanonicalText:
    """Test the canonical output format."""

    def test_keywords_upper_and_terminated(self):
        """Test keywords are upper case and statements end with ';'."""
        printed = to_sql(parse("select a from t"))

        assert printed == "SELECT a FROM t;"

    def test_go_lines(self):
        """Test GO separators are written on their own line."""
        printed = to_sql(parse("select 1\ngo 2\nselect 2"))

        assert printed.splitlines() == ["SELECT 1;", "GO 2", "SELECT 2;"]

    def test_expression_keeps_parentheses(self):
        """Test written parentheses survive."""
        assert to_sql(parse_expression("(a + b) * c")) == "(a + b) * c"
        assert to_sql(parse_expression("a+b*c")) == "a + b * c"

    def test_double_negation(self):
        """Test nested unary minus does not become a comment."""
        assert to_sql(parse_expression("-(-1)")) == "-(-1)"
        assert "--" not in to_sql(parse_expression("- -1"))

    def test_unrecognized_text_is_kept(self):
        """Test an unrecognized statement prints its original text."""
        printed = to_sql(parse("SELECT 1;\nFROBNICATE the widgets"))

        assert "FROBNICATE the widgets" in printed

    def test_nested_blocks_are_indented(self):
        """Test each nesting level adds one indent."""
        printed = to_sql(parse("IF @a > 1 BEGIN PRINT 'x'; WHILE @i < 2 SET @i += 1; END ELSE PRINT 'y'"))

        assert printed.splitlines() == [
            "IF @a > 1",
            "    BEGIN",
            "        PRINT 'x';",
            "        WHILE @i < 2",
            "            SET @i += 1;",
            "    END;",
            "ELSE",
            "    PRINT 'y';",
        ]


MULTI_LINE_LITERAL_SCRIPTS = [
    "BEGIN\n    SET @s = N'a\nb';\nEND",
    "IF @x = 1\n    PRINT 'first\nsecond'",
    "WHILE @i < 3\nBEGIN\n    SET @sql = N'SELECT 1\n  FROM t';\n    SET @i += 1;\nEND",
    "BEGIN TRY\n    RAISERROR('line one\nline two', 16, 1);\nEND TRY\nBEGIN CATCH\n    PRINT 'oops\n';\nEND CATCH",
    "CREATE PROCEDURE dbo.p AS\nBEGIN\n    EXEC (N'SELECT a\nFROM b');\nEND",
]


class TestMultiLineLiterals:
    """Test string literals spanning lines inside nested statements."""

    @pytest.mark.parametrize("source", MULTI_LINE_LITERAL_SCRIPTS)
    def test_round_trip_keeps_literal(self, source):
        """Test indentation never leaks into literal text."""
        original = parse(source)
        assert not original.has_errors, [str(d) for d in original.diagnostics]

        printed = to_sql(original)

        assert structurally_equal(original, parse(printed)), printed

    def test_literal_value_unchanged(self):
        printed = to_sql(parse("BEGIN\n    SET @s = N'a\nb';\nEND"))

        assert "N'a\nb'" in printed


class TestQuoting:
    """Test identifier and string quoting."""

    def test_quote_part_styles(self):
        """Test bracket, double quote and plain names."""
        assert quote_part(IdentifierPart(value="a]b", quote=QuoteStyle.BRACKET)) == "[a]]b]"
        assert quote_part(IdentifierPart(value='a"b', quote=QuoteStyle.DOUBLE)) == '"a""b"'
        assert quote_part(IdentifierPart(value="plain")) == "plain"

    def test_quote_string(self):
        """Test embedded quotes and the N prefix."""
        assert quote_string("it's") == "'it''s'"
        assert quote_string("x", unicode=True) == "N'x'"

    def test_bracketed_names_round_trip(self):
        """Test quoting written in the source is preserved."""
        printed = to_sql(parse("SELECT [order id] FROM [dbo].[my table]"))

        assert printed == "SELECT [order id] FROM [dbo].[my table];"
