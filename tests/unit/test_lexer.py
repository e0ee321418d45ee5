"""
Unit tests for the T-SQL lexer.
"""

import pytest

from tsqlparser import parse
from tsqlparser.errors import LexError
from tsqlparser.lexer import Lexer, tokenize
from tsqlparser.models.token import TokenKind


def kinds(tokens):
    return [t.kind for t in tokens]


class TestLexerTokens:
    """Test token classification."""

    def test_keywords_identifiers_and_punctuation(self):
        """Test a simple SELECT is split into classified tokens."""
        tokens = tokenize("SELECT a, b FROM dbo.t;")

        assert kinds(tokens) == [
            TokenKind.KEYWORD,
            TokenKind.IDENTIFIER,
            TokenKind.PUNCTUATION,
            TokenKind.IDENTIFIER,
            TokenKind.KEYWORD,
            TokenKind.IDENTIFIER,
            TokenKind.PUNCTUATION,
            TokenKind.IDENTIFIER,
            TokenKind.PUNCTUATION,
            TokenKind.EOF,
        ]
        assert tokens[0].value == "SELECT"

    def test_keyword_value_is_upper_cased(self):
        """Test keyword values are normalized while text is kept."""
        token = tokenize("select")[0]

        assert token.kind == TokenKind.KEYWORD
        assert token.text == "select"
        assert token.value == "SELECT"

    def test_bracketed_identifier_with_escape(self):
        """Test doubled closing brackets are unescaped."""
        token = tokenize("[Order]]Details]")[0]

        assert token.kind == TokenKind.QUOTED_IDENTIFIER
        assert token.value == "Order]Details"

    def test_unicode_string_with_escaped_quote(self):
        """Test N'' strings and doubled single quotes."""
        token = tokenize("N'it''s'")[0]

        assert token.kind == TokenKind.STRING
        assert token.text == "N'it''s'"
        assert token.value == "it's"

    def test_double_quotes_follow_quoted_identifier(self):
        """Test double quotes lex as identifiers or strings depending on the setting."""
        on = tokenize('"col"', quoted_identifier=True)[0]
        off = tokenize('"col"', quoted_identifier=False)[0]

        assert on.kind == TokenKind.QUOTED_IDENTIFIER
        assert off.kind == TokenKind.STRING
        assert off.value == "col"

    def test_set_quoted_identifier_switches_mode(self):
        """Test SET QUOTED_IDENTIFIER OFF changes later double-quote lexing."""
        tokens = tokenize('SET QUOTED_IDENTIFIER OFF; SELECT "text"', quoted_identifier=True)

        assert tokens[-2].kind == TokenKind.STRING

    def test_variables(self):
        """Test local and system variables."""
        tokens = tokenize("@total @@ROWCOUNT")

        assert tokens[0].kind == TokenKind.VARIABLE
        assert tokens[0].text == "@total"
        assert tokens[1].kind == TokenKind.SYSTEM_VARIABLE

    def test_numbers_binary_and_money(self):
        """Test numeric literal forms."""
        tokens = tokenize("42 3.14 1.5e3 .5 0x1F $12.50")

        assert kinds(tokens[:-1]) == [
            TokenKind.NUMBER,
            TokenKind.NUMBER,
            TokenKind.NUMBER,
            TokenKind.NUMBER,
            TokenKind.BINARY,
            TokenKind.NUMBER,
        ]
        assert tokens[2].text == "1.5e3"

    def test_pseudo_columns(self):
        """Test $ACTION style pseudo columns."""
        token = tokenize("$action")[0]

        assert token.kind == TokenKind.PSEUDO_COLUMN
        assert token.value == "$ACTION"

    def test_temp_table_names_are_identifiers(self):
        """Test # and ## prefixed names."""
        tokens = tokenize("#temp ##global")

        assert kinds(tokens[:-1]) == [TokenKind.IDENTIFIER, TokenKind.IDENTIFIER]
        assert tokens[1].text == "##global"

    def test_two_character_operators(self):
        """Test compound operators are single tokens."""
        tokens = tokenize("a <> b >= c += 1 geography::Point")
        operators = [t.text for t in tokens if t.kind == TokenKind.OPERATOR]

        assert operators == ["<>", ">=", "+=", "::"]

    def test_contextual_words_stay_generic(self):
        """Test STATUS, KEY and ROW are not reserved by the lexer."""
        tokens = tokenize("status key row")

        assert [t.kind for t in tokens[:-1]] == [
            TokenKind.IDENTIFIER,
            TokenKind.KEYWORD,
            TokenKind.KEYWORD,
        ]

        dialect = Lexer("").dialect
        assert not any(dialect.is_reserved(word) for word in ("STATUS", "KEY", "ROW"))


class TestLexerComments:
    """Test comment handling."""

    def test_comments_dropped_by_default(self):
        """Test comments are removed unless requested."""
        tokens = tokenize("SELECT 1 -- trailing\n/* block */")

        assert TokenKind.COMMENT not in kinds(tokens)

    def test_comments_kept_on_request(self):
        """Test include_comments keeps comment tokens."""
        tokens = tokenize("-- first\nSELECT 1", include_comments=True)

        assert tokens[0].kind == TokenKind.COMMENT
        assert tokens[0].text == "-- first"

    def test_nested_block_comment(self):
        """Test block comments nest."""
        tokens = tokenize("/* a /* b */ c */ SELECT", include_comments=True)

        assert tokens[0].kind == TokenKind.COMMENT
        assert tokens[0].text == "/* a /* b */ c */"
        assert tokens[1].upper == "SELECT"


class TestLexerPositions:
    """Test spans and line-start tracking."""

    def test_line_and_column(self):
        """Test 1-based line and column numbers."""
        tokens = tokenize("SELECT\n  name")

        assert tokens[1].span.start_line == 2
        assert tokens[1].span.start_column == 3
        assert tokens[1].span.start_offset == 9

    def test_line_start_flag(self):
        """Test only the first token on a line is flagged."""
        tokens = tokenize("SELECT 1\nGO")

        assert tokens[0].line_start is True
        assert tokens[1].line_start is False
        assert tokens[2].line_start is True

    def test_span_text(self):
        """Test a span slices the source back out."""
        source = "SELECT [a b] FROM t"
        token = tokenize(source)[1]

        assert token.span.text(source) == "[a b]"


class TestLexerErrors:
    """Test lexical error handling."""

    def test_unterminated_string_raises(self):
        """Test strict mode raises LexError."""
        with pytest.raises(LexError) as exc_info:
            tokenize("SELECT 'abc")

        assert exc_info.value.span.start_line == 1
        assert exc_info.value.span.start_column == 8

    def test_unterminated_comment_raises(self):
        """Test an unclosed block comment fails."""
        with pytest.raises(LexError):
            tokenize("SELECT 1 /* never closed")

    def test_recover_mode_emits_error_token(self):
        """Test recovering mode records the error and continues."""
        lexer = Lexer("SELECT 'abc", recover=True)
        tokens = lexer.tokenize()

        assert len(lexer.errors) == 1
        assert TokenKind.ERROR in kinds(tokens)
        assert tokens[-1].kind == TokenKind.EOF

    def test_recover_stops_before_go_line(self):
        """Test an unterminated string does not swallow the next batch."""
        lexer = Lexer("SELECT 'abc\nGO\nSELECT 1", recover=True)
        tokens = lexer.tokenize()

        error = next(t for t in tokens if t.kind == TokenKind.ERROR)
        go = next(t for t in tokens if t.upper == "GO")

        assert error.text == "'abc"
        assert go.line_start is True
        assert tokens[-2].text == "1"

    def test_unexpected_character(self):
        """Test a stray character is a lexical error."""
        lexer = Lexer("SELECT 1 ` 2", recover=True)
        tokens = lexer.tokenize()

        assert "Unexpected character" in lexer.errors[0].message
        assert [t.text for t in tokens if t.kind == TokenKind.NUMBER] == ["1", "2"]


class TestByteOrderMark:
    """Test scripts saved with a UTF-8 byte order mark."""

    def test_leading_bom_is_skipped(self):
        tokens = tokenize("\ufeffSELECT 1")

        assert tokens[0].text == "SELECT"
        assert tokens[0].span.start_offset == 1
        assert tokens[0].span.start_column == 1
        assert tokens[0].line_start is True

    def test_bom_script_parses(self):
        """Test the first batch of a BOM-prefixed script is not lost."""
        script = parse("\ufeffSELECT 1\nGO\nSELECT 2")

        assert not script.has_errors
        assert [s.node_type for s in script.statements] == ["Select", "Select"]
