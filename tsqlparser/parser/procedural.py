"""Variables, cursors, control flow and EXECUTE."""

from typing import List, Optional

from tsqlparser.models.base import Expression
from tsqlparser.models.expressions import DefaultValue, KeywordValue, MethodCall, VariableRef
from tsqlparser.models.statements import (
    Block,
    Break,
    CloseCursor,
    Continue,
    CursorDefinition,
    CursorOptions,
    DeallocateCursor,
    Declare,
    DeclareCursor,
    ExecArgument,
    ExecuteAs,
    ExecuteProcedure,
    ExecuteString,
    FetchCursor,
    FetchOrientation,
    Goto,
    If,
    Label,
    OpenCursor,
    Print,
    Raiserror,
    ResultColumn,
    ResultSetDefinition,
    ResultSetsClause,
    Return,
    Revert,
    SetMethodCall,
    SetOption,
    SetTransactionIsolation,
    SetVariable,
    Throw,
    TryCatch,
    Use,
    VariableDeclaration,
    Waitfor,
    While,
)
from tsqlparser.models.token import Token, TokenKind
from tsqlparser.parser.expressions import PREC_UNARY

_ISOLATION_LEVELS = (
    ("READ", "UNCOMMITTED"),
    ("READ", "COMMITTED"),
    ("REPEATABLE", "READ"),
    ("SNAPSHOT",),
    ("SERIALIZABLE",),
)
_VALUE_KEYWORDS = frozenset(["NULL", "DEFAULT", "CASE", "NOT", "EXISTS", "NEXT"])


class ProceduralParser:
    """Mixin: procedural statements."""

    def can_start_value(self) -> bool:
        """True when an optional trailing expression is present (RETURN, THROW, EXEC args)."""
        token = self.current
        if token.kind in (
            TokenKind.NUMBER,
            TokenKind.STRING,
            TokenKind.BINARY,
            TokenKind.VARIABLE,
            TokenKind.SYSTEM_VARIABLE,
            TokenKind.PSEUDO_COLUMN,
            TokenKind.QUOTED_IDENTIFIER,
        ):
            return True
        if token.kind == TokenKind.OPERATOR:
            return token.text in ("-", "+", "~")
        if token.kind == TokenKind.PUNCTUATION:
            return token.text == "("
        if not token.is_word or self.is_punct(":", 1):
            return False
        upper = token.upper
        if upper in _VALUE_KEYWORDS or upper in self.dialect.niladic_functions:
            return True
        if upper in self.dialect.statement_starters or upper in self.dialect.alias_stop:
            return False
        if upper in self.dialect.reserved:
            return upper in self.dialect.function_keywords and self.is_punct("(", 1)
        return True

    # DECLARE

    def parse_declare(self):
        start = self.expect_word("DECLARE")
        if self.current.kind != TokenKind.VARIABLE:
            return self._parse_declare_cursor(start)
        variables = [self._parse_variable_declaration()]
        while self.match_punct(","):
            variables.append(self._parse_variable_declaration())
        return Declare(variables=tuple(variables), span=self.span_from(start))

    def _parse_variable_declaration(self) -> VariableDeclaration:
        start = self.current
        if start.kind != TokenKind.VARIABLE:
            raise self.unexpected("variable name")
        self.advance()
        self.match_word("AS")
        if self.match_word("TABLE"):
            table = self.parse_table_definition()
            return VariableDeclaration(name=start.text, table=table, span=self.span_from(start))
        data_type = self.parse_data_type()
        value = None
        if self.match_op("="):
            value = self.parse_expression()
        return VariableDeclaration(name=start.text, data_type=data_type, value=value, span=self.span_from(start))

    def _parse_declare_cursor(self, start: Token) -> DeclareCursor:
        name = self.identifier_part()
        iso_options = self._parse_cursor_options(("INSENSITIVE", "SCROLL"))
        self.expect_word("CURSOR")
        definition = self._parse_cursor_definition(iso_options)
        return DeclareCursor(name=name, definition=definition, span=self.span_from(start))

    def _parse_cursor_options(self, allowed) -> CursorOptions:
        flags = {}
        while self.is_any_word(allowed):
            word = self.advance().upper.lower()
            flags["global_" if word == "global" else word] = True
        return CursorOptions(**flags)

    def _parse_cursor_definition(self, iso_options: Optional[CursorOptions] = None) -> CursorDefinition:
        start = self.current
        options = self._parse_cursor_options(self.dialect.cursor_options)
        self.expect_word("FOR")
        query = self.parse_query()
        for_update = False
        read_only = False
        update_columns = ()
        if self.match_words("FOR", "UPDATE"):
            for_update = True
            if self.match_word("OF"):
                columns = [self.identifier_part()]
                while self.match_punct(","):
                    columns.append(self.identifier_part())
                update_columns = tuple(columns)
        elif self.match_words("FOR", "READ", "ONLY"):
            read_only = True
        return CursorDefinition(
            options=options,
            iso_options=iso_options or CursorOptions(),
            query=query,
            for_update=for_update,
            update_columns=update_columns,
            read_only=read_only,
            span=self.span_from(start),
        )

    # SET

    def parse_set(self):
        start = self.expect_word("SET")
        if self.current.kind == TokenKind.VARIABLE:
            if self.is_punct(".", 1):
                call = self.parse_expression()
                if not isinstance(call, MethodCall):
                    raise self.unexpected("method call")
                return SetMethodCall(call=call, span=self.span_from(start))
            token = self.advance()
            variable = VariableRef(name=token.text, span=token.span)
            operator = self._expect_assignment_operator()
            if self.is_word("CURSOR"):
                self.advance()
                cursor = self._parse_cursor_definition()
                return SetVariable(variable=variable, operator=operator, cursor=cursor, span=self.span_from(start))
            value = self.parse_expression()
            return SetVariable(variable=variable, operator=operator, value=value, span=self.span_from(start))

        if self.match_words("TRANSACTION", "ISOLATION", "LEVEL"):
            for words in _ISOLATION_LEVELS:
                if self.match_words(*words):
                    return SetTransactionIsolation(level=" ".join(words), span=self.span_from(start))
            raise self.unexpected("isolation level")

        if self.match_word("IDENTITY_INSERT"):
            target = self.multipart_identifier()
            value = self._parse_set_value()
            return SetOption(options=("IDENTITY_INSERT",), target=target, value=value, span=self.span_from(start))

        options = [self._parse_set_option_name()]
        while self.match_punct(","):
            options.append(self._parse_set_option_name())
        value = self._parse_set_value()
        return SetOption(options=tuple(options), value=value, span=self.span_from(start))

    def _parse_set_option_name(self) -> str:
        if not self.current.is_word:
            raise self.unexpected("SET option")
        name = self.advance().upper
        if name == "STATISTICS" and self.current.is_word:
            name = f"{name} {self.advance().upper}"
        return name

    def _parse_set_value(self) -> Expression:
        token = self.current
        if token.is_word:
            self.advance()
            word = token.upper if token.kind == TokenKind.KEYWORD else token.text
            return KeywordValue(word=word, span=token.span)
        return self.parse_expression()

    # Control flow

    def parse_if(self) -> If:
        start = self.expect_word("IF")
        condition = self.parse_expression()
        then = self.parse_required_statement()
        else_ = None
        if self.match_word("ELSE"):
            else_ = self.parse_required_statement()
        return If(condition=condition, then=then, else_=else_, span=self.span_from(start))

    def parse_while(self) -> While:
        start = self.expect_word("WHILE")
        condition = self.parse_expression()
        body = self.parse_required_statement()
        return While(condition=condition, body=body, span=self.span_from(start))

    def parse_begin(self):
        if self.is_word("TRY", 1):
            return self._parse_try_catch()
        if self.is_any_word(("TRAN", "TRANSACTION", "DISTRIBUTED"), 1):
            return self.parse_begin_transaction()
        if self.is_word("DIALOG", 1):
            return self.parse_begin_dialog()
        if self.is_word("CONVERSATION", 1):
            return None
        start = self.expect_word("BEGIN")
        statements = self._parse_block_statements()
        self.expect_word("END")
        return Block(statements=tuple(statements), span=self.span_from(start))

    def at_block_end(self) -> bool:
        """``END`` closing a block; ``END CONVERSATION`` is a statement."""
        return self.is_word("END") and not self.is_word("CONVERSATION", 1)

    def _parse_block_statements(self) -> List:
        self._block_depth += 1
        try:
            return self.parse_statement_list(self.at_block_end)
        finally:
            self._block_depth -= 1

    def _parse_try_catch(self) -> TryCatch:
        start = self.current
        self.expect_words("BEGIN", "TRY")
        try_statements = self._parse_block_statements()
        self.expect_words("END", "TRY")
        self.match_punct(";")
        self.expect_words("BEGIN", "CATCH")
        catch_statements = self._parse_block_statements()
        self.expect_words("END", "CATCH")
        return TryCatch(
            try_statements=tuple(try_statements),
            catch_statements=tuple(catch_statements),
            span=self.span_from(start),
        )

    def parse_goto(self) -> Goto:
        start = self.expect_word("GOTO")
        label = self.identifier_part()
        return Goto(label=label, span=self.span_from(start))

    def parse_label(self) -> Label:
        start = self.current
        name = self.identifier_part()
        self.expect_punct(":")
        return Label(name=name, span=self.span_from(start))

    def parse_return(self) -> Return:
        start = self.expect_word("RETURN")
        value = self.parse_expression() if self.can_start_value() else None
        return Return(value=value, span=self.span_from(start))

    def parse_break(self) -> Break:
        token = self.expect_word("BREAK")
        return Break(span=token.span)

    def parse_continue(self) -> Continue:
        token = self.expect_word("CONTINUE")
        return Continue(span=token.span)

    def parse_print(self) -> Print:
        start = self.expect_word("PRINT")
        value = self.parse_expression()
        return Print(value=value, span=self.span_from(start))

    def parse_raiserror(self) -> Raiserror:
        start = self.expect_word("RAISERROR")
        arguments = self.parse_call_arguments()
        options: List[str] = []
        if self.match_word("WITH"):
            options.append(self.expect_word("LOG", "NOWAIT", "SETERROR").upper)
            while self.match_punct(","):
                options.append(self.expect_word("LOG", "NOWAIT", "SETERROR").upper)
        return Raiserror(arguments=tuple(arguments), options=tuple(options), span=self.span_from(start))

    def parse_throw(self) -> Throw:
        start = self.expect_word("THROW")
        arguments = []
        if self.can_start_value():
            arguments = self.parse_expression_list()
            if len(arguments) != 3:
                raise self.error("THROW takes an error number, a message and a state", start)
        return Throw(arguments=tuple(arguments), span=self.span_from(start))

    def parse_waitfor(self) -> Waitfor:
        start = self.expect_word("WAITFOR")
        if self.match_punct("("):
            if not self.is_any_word(("RECEIVE", "GET")):
                raise self.unexpected("RECEIVE or GET CONVERSATION GROUP")
            statement = self.parse_statement()
            if statement is None:
                raise self.unexpected("RECEIVE or GET CONVERSATION GROUP")
            self.expect_punct(")")
            timeout = None
            if self.match_punct(","):
                self.expect_word("TIMEOUT")
                timeout = self.parse_expression()
            return Waitfor(statement=statement, timeout=timeout, span=self.span_from(start))
        kind = self.expect_word("DELAY", "TIME").upper
        value = self.parse_expression()
        return Waitfor(kind=kind, value=value, span=self.span_from(start))

    def parse_use(self) -> Use:
        start = self.expect_word("USE")
        database = self.name_part()
        return Use(database=database, span=self.span_from(start))

    # Cursors

    def parse_open(self) -> OpenCursor:
        start = self.expect_word("OPEN")
        cursor = self.parse_cursor_ref()
        return OpenCursor(cursor=cursor, span=self.span_from(start))

    def parse_close(self) -> CloseCursor:
        start = self.expect_word("CLOSE")
        cursor = self.parse_cursor_ref()
        return CloseCursor(cursor=cursor, span=self.span_from(start))

    def parse_deallocate(self) -> DeallocateCursor:
        start = self.expect_word("DEALLOCATE")
        cursor = self.parse_cursor_ref()
        return DeallocateCursor(cursor=cursor, span=self.span_from(start))

    def parse_fetch(self) -> FetchCursor:
        start = self.expect_word("FETCH")
        orientation = None
        offset = None
        token = self.match_word(*(member.value for member in FetchOrientation))
        if token is not None:
            orientation = FetchOrientation(token.upper)
            if orientation in (FetchOrientation.ABSOLUTE, FetchOrientation.RELATIVE):
                offset = self.parse_expression(PREC_UNARY)
            self.expect_word("FROM")
        else:
            self.match_word("FROM")
        cursor = self.parse_cursor_ref()
        into = []
        if self.match_word("INTO"):
            into.append(self._parse_variable_ref())
            while self.match_punct(","):
                into.append(self._parse_variable_ref())
        return FetchCursor(
            orientation=orientation, offset=offset, cursor=cursor, into=tuple(into), span=self.span_from(start)
        )

    def _parse_variable_ref(self) -> VariableRef:
        token = self.current
        if token.kind != TokenKind.VARIABLE:
            raise self.unexpected("variable")
        self.advance()
        return VariableRef(name=token.text, span=token.span)

    # EXECUTE

    def parse_execute(self):
        start = self.expect_word("EXEC", "EXECUTE")
        if self.is_word("AS"):
            return self._parse_execute_as(start)
        if self.is_punct("("):
            return self._parse_execute_string(start)

        return_variable = None
        if self.current.kind == TokenKind.VARIABLE and self.is_op("=", 1):
            return_variable = self._parse_variable_ref()
            self.advance()

        procedure = None
        procedure_variable = None
        if self.current.kind == TokenKind.VARIABLE:
            procedure_variable = self._parse_variable_ref()
        else:
            procedure = self.multipart_identifier(first=self.name_part())
        return self._finish_execute_procedure(start, procedure, procedure_variable, return_variable)

    def parse_implicit_execute(self) -> ExecuteProcedure:
        start = self.current
        procedure = self.multipart_identifier()
        statement = self._finish_execute_procedure(start, procedure, None, None)
        return statement.model_copy(update={"implicit": True})

    def _finish_execute_procedure(self, start, procedure, procedure_variable, return_variable) -> ExecuteProcedure:
        arguments: List[ExecArgument] = []
        if self.can_start_value() or self.is_word("DEFAULT"):
            arguments.append(self._parse_exec_argument())
            while self.match_punct(","):
                arguments.append(self._parse_exec_argument())

        recompile = False
        result_sets = None
        if self.is_word("WITH") and self.is_any_word(("RECOMPILE", "RESULT"), 1):
            self.advance()
            while True:
                if self.match_word("RECOMPILE"):
                    recompile = True
                else:
                    result_sets = self._parse_result_sets()
                if not self.match_punct(","):
                    break

        return ExecuteProcedure(
            procedure=procedure,
            procedure_variable=procedure_variable,
            return_variable=return_variable,
            arguments=tuple(arguments),
            recompile=recompile,
            result_sets=result_sets,
            span=self.span_from(start),
        )

    def _parse_exec_argument(self) -> ExecArgument:
        start = self.current
        name = None
        if start.kind == TokenKind.VARIABLE and self.is_op("=", 1):
            name = self.advance().text
            self.advance()
        token = self.current
        if self.match_word("DEFAULT"):
            value = DefaultValue(span=token.span)
        elif token.kind == TokenKind.IDENTIFIER and not self.is_punct("(", 1) and not self.is_punct(".", 1):
            # bare words are passed as strings: EXEC sp_help orders
            self.advance()
            value = KeywordValue(word=token.text, span=token.span)
        else:
            value = self.parse_expression()
        output = bool(self.match_word("OUT", "OUTPUT"))
        return ExecArgument(name=name, value=value, output=output, span=self.span_from(start))

    def _parse_result_sets(self) -> ResultSetsClause:
        start = self.current
        self.expect_words("RESULT", "SETS")
        if self.is_any_word(("UNDEFINED", "NONE")):
            return ResultSetsClause(kind=self.advance().upper, span=self.span_from(start))
        self.expect_punct("(")
        definitions = [self._parse_result_set_definition()]
        while self.match_punct(","):
            definitions.append(self._parse_result_set_definition())
        self.expect_punct(")")
        return ResultSetsClause(kind="DEFINED", definitions=tuple(definitions), span=self.span_from(start))

    def _parse_result_set_definition(self) -> ResultSetDefinition:
        start = self.expect_punct("(")
        columns = []
        while True:
            column_start = self.current
            name = self.identifier_part()
            data_type = self.parse_data_type()
            nullable = None
            if self.match_word("NULL"):
                nullable = True
            elif self.match_words("NOT", "NULL"):
                nullable = False
            columns.append(ResultColumn(
                name=name, data_type=data_type, nullable=nullable, span=self.span_from(column_start)
            ))
            if not self.match_punct(","):
                break
        self.expect_punct(")")
        return ResultSetDefinition(columns=tuple(columns), span=self.span_from(start))

    def _parse_execute_string(self, start: Token) -> ExecuteString:
        self.expect_punct("(")
        command = self.parse_expression()
        arguments = []
        while self.match_punct(","):
            arguments.append(self.parse_expression())
        self.expect_punct(")")
        context_kind = None
        context_name = None
        if self.is_word("AS") and self.is_any_word(("LOGIN", "USER"), 1):
            self.advance()
            context_kind = self.advance().upper
            self.expect_op("=")
            context_name = self.parse_expression()
        at_server = None
        if self.match_word("AT"):
            at_server = self.name_part()
        return ExecuteString(
            command=command,
            arguments=tuple(arguments),
            context_kind=context_kind,
            context_name=context_name,
            at_server=at_server,
            span=self.span_from(start),
        )

    def _parse_execute_as(self, start: Token) -> ExecuteAs:
        self.expect_word("AS")
        kind = self.expect_word("CALLER", "SELF", "OWNER", "USER", "LOGIN").upper
        principal = None
        if kind in ("USER", "LOGIN"):
            self.expect_op("=")
            principal = self.parse_expression()
        no_revert = False
        cookie_variable = None
        if self.match_words("WITH", "NO", "REVERT"):
            no_revert = True
        elif self.match_words("WITH", "COOKIE", "INTO"):
            cookie_variable = self._parse_variable_ref()
        return ExecuteAs(
            principal_kind=kind,
            principal=principal,
            no_revert=no_revert,
            cookie_variable=cookie_variable,
            span=self.span_from(start),
        )

    def parse_revert(self) -> Revert:
        start = self.expect_word("REVERT")
        cookie = None
        if self.match_words("WITH", "COOKIE"):
            self.expect_op("=")
            cookie = self.parse_expression()
        return Revert(cookie=cookie, span=self.span_from(start))
