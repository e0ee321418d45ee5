"""
Expression parsing by precedence climbing.

Binding strength, loosest first::

    OR < AND < NOT < comparison/IS/LIKE/BETWEEN/IN < + - & | ^ < * / % < unary < postfix

Postfix covers ``COLLATE``, ``AT TIME ZONE`` and ``.method(...)`` calls.
"""

from typing import List, Optional

from tsqlparser.errors import ExpressionError
from tsqlparser.models.base import Expression, Identifier, IdentifierPart, SortOrder
from tsqlparser.models.expressions import (
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
    InList,
    InSubquery,
    IntegerLiteral,
    IsDistinctFrom,
    IsNull,
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
    Star,
    StaticMethodCall,
    Subquery,
    SystemVariableRef,
    TupleExpr,
    UnaryOp,
    VariableRef,
    WhenClause,
    WindowFrame,
    WindowSpec,
)
from tsqlparser.models.token import Token, TokenKind
from tsqlparser.parser.base import describe

PREC_OR = 1
PREC_AND = 2
PREC_NOT = 3
PREC_COMPARE = 4
PREC_ADDITIVE = 5
PREC_MULTIPLICATIVE = 6
PREC_UNARY = 7
PREC_POSTFIX = 8

COMPARISON_OPERATORS = frozenset(["=", "<>", "!=", "<", ">", "<=", ">=", "!<", "!>"])
ADDITIVE_OPERATORS = frozenset(["+", "-", "&", "|", "^"])
MULTIPLICATIVE_OPERATORS = frozenset(["*", "/", "%"])

_SPECIAL_FUNCTIONS = frozenset(["CAST", "TRY_CAST", "CONVERT", "TRY_CONVERT", "PARSE", "TRY_PARSE"])
_WINDOW_CLAUSE_WORDS = frozenset(["PARTITION", "ORDER", "ROWS", "RANGE"])


def binary_precedence(operator: str) -> Optional[int]:
    if operator in MULTIPLICATIVE_OPERATORS:
        return PREC_MULTIPLICATIVE
    if operator in ADDITIVE_OPERATORS:
        return PREC_ADDITIVE
    if operator in COMPARISON_OPERATORS:
        return PREC_COMPARE
    return None


class ExpressionParser:
    """Mixin: scalar and boolean expressions."""

    def parse_expression(self, min_precedence: int = 0) -> Expression:
        start = self.current
        self._expression_depth += 1
        try:
            with self.nested(start):
                left = self._parse_prefix()
                while True:
                    combined = self._parse_infix(left, start, min_precedence)
                    if combined is None:
                        return left
                    left = combined
        finally:
            self._expression_depth -= 1

    def starts_query(self, offset: int = 0) -> bool:
        return self.is_word("SELECT", offset) or self.is_word("WITH", offset)

    # Infix and postfix

    def _parse_infix(self, left: Expression, start: Token, min_precedence: int) -> Optional[Expression]:
        token = self.current

        if PREC_POSTFIX > min_precedence:
            postfix = self._parse_postfix(left, start)
            if postfix is not None:
                return postfix

        if token.kind == TokenKind.OPERATOR:
            precedence = binary_precedence(token.text)
            if precedence is None or precedence <= min_precedence:
                return None
            self.advance()
            if precedence == PREC_COMPARE and self.is_any_word(("ALL", "ANY", "SOME")) and self.is_punct("(", 1):
                quantifier = Quantifier(self.advance().upper)
                query = self._parse_parenthesized_query()
                return QuantifiedComparison(
                    left=left,
                    operator=token.text,
                    quantifier=quantifier,
                    query=query,
                    span=self.span_from(start),
                )
            right = self.parse_expression(precedence)
            return BinaryOp(operator=token.text, left=left, right=right, span=self.span_from(start))

        if not token.is_word:
            return None
        word = token.upper

        if word in ("AND", "OR"):
            precedence = PREC_AND if word == "AND" else PREC_OR
            if precedence <= min_precedence:
                return None
            self.advance()
            right = self.parse_expression(precedence)
            return BinaryOp(operator=word, left=left, right=right, span=self.span_from(start))

        negated = word == "NOT" and self.is_any_word(("LIKE", "BETWEEN", "IN"), 1)
        if word not in ("IS", "LIKE", "BETWEEN", "IN") and not negated:
            return None
        if PREC_COMPARE <= min_precedence:
            return None
        if negated:
            self.advance()
            word = self.current.upper
        self.advance()

        if word == "IS":
            is_negated = bool(self.match_word("NOT"))
            if self.match_words("DISTINCT", "FROM"):
                right = self.parse_expression(PREC_COMPARE)
                return IsDistinctFrom(left=left, right=right, negated=is_negated, span=self.span_from(start))
            self.expect_word("NULL")
            return IsNull(expression=left, negated=is_negated, span=self.span_from(start))

        if word == "LIKE":
            pattern = self.parse_expression(PREC_COMPARE)
            escape = None
            if self.match_word("ESCAPE"):
                escape = self.parse_expression(PREC_COMPARE)
            return Like(expression=left, pattern=pattern, escape=escape, negated=negated, span=self.span_from(start))

        if word == "BETWEEN":
            low = self.parse_expression(PREC_COMPARE)
            self.expect_word("AND")
            high = self.parse_expression(PREC_COMPARE)
            return Between(expression=left, low=low, high=high, negated=negated, span=self.span_from(start))

        # IN
        if self.is_punct("(") and self.starts_query(1):
            query = self._parse_parenthesized_query()
            return InSubquery(expression=left, query=query, negated=negated, span=self.span_from(start))
        self.expect_punct("(")
        values = self.parse_expression_list()
        self.expect_punct(")")
        return InList(expression=left, values=tuple(values), negated=negated, span=self.span_from(start))

    def _parse_postfix(self, left: Expression, start: Token) -> Optional[Expression]:
        if self.is_word("COLLATE"):
            self.advance()
            collation = self.name_part()
            return Collate(expression=left, collation=collation.value, span=self.span_from(start))
        if self.at_words("AT", "TIME", "ZONE"):
            self.advance()
            self.advance()
            self.advance()
            zone = self.parse_expression(PREC_POSTFIX)
            return AtTimeZone(expression=left, zone=zone, span=self.span_from(start))
        if self.is_punct(".") and (self.peek(1).is_word or self.peek(1).kind == TokenKind.QUOTED_IDENTIFIER) and self.is_punct("(", 2):
            self.advance()
            method = self.name_part()
            arguments = self.parse_call_arguments()
            return MethodCall(target=left, method=method, arguments=tuple(arguments), span=self.span_from(start))
        return None

    # Prefix

    def _parse_prefix(self) -> Expression:
        token = self.current
        kind = token.kind

        if kind == TokenKind.NUMBER:
            self.advance()
            return self._number(token)
        if kind == TokenKind.STRING:
            return self.parse_string()
        if kind == TokenKind.BINARY:
            self.advance()
            return BinaryLiteral(text=token.text, span=token.span)
        if kind == TokenKind.VARIABLE:
            self.advance()
            return VariableRef(name=token.text, span=token.span)
        if kind == TokenKind.SYSTEM_VARIABLE:
            self.advance()
            return SystemVariableRef(name=token.text, span=token.span)
        if kind == TokenKind.PARAMETER:
            self.advance()
            return ParameterMarker(span=token.span)
        if kind == TokenKind.PSEUDO_COLUMN:
            if token.value == "$PARTITION" and self.is_punct(".", 1):
                return self._parse_partition_function(token, None)
            self.advance()
            return PseudoColumn(name=token.value, span=token.span)
        if kind == TokenKind.OPERATOR:
            if token.text in ("-", "+", "~"):
                self.advance()
                operand = self.parse_expression(PREC_UNARY)
                return UnaryOp(operator=token.text, operand=operand, span=self.span_from(token))
            if token.text == "*":
                self.advance()
                return Star(span=token.span)
        if kind == TokenKind.PUNCTUATION and token.text == "(":
            return self._parse_parenthesized()

        if token.is_word and token.upper in _SPECIAL_FUNCTIONS and self.is_punct("(", 1):
            return self._parse_special_function()

        if kind == TokenKind.KEYWORD:
            word = token.upper
            if word == "NULL":
                self.advance()
                return NullLiteral(span=token.span)
            if word == "DEFAULT":
                self.advance()
                return DefaultValue(span=token.span)
            if word == "CASE":
                return self._parse_case()
            if word == "EXISTS":
                self.advance()
                query = self._parse_parenthesized_query()
                return Exists(query=query, span=self.span_from(token))
            if word == "NOT":
                self.advance()
                operand = self.parse_expression(PREC_NOT)
                return UnaryOp(operator="NOT", operand=operand, span=self.span_from(token))
            if word == "NEXT" and self.at_words("NEXT", "VALUE", "FOR"):
                return self._parse_next_value_for()
            if word in self.dialect.reserved:
                if self.is_punct("(", 1) and word in self.dialect.function_keywords:
                    self.advance()
                    name = Identifier(parts=(IdentifierPart(value=token.text, span=token.span),), span=token.span)
                    return self._parse_function_call(name, token)
                if word in self.dialect.niladic_functions:
                    self.advance()
                    name = Identifier(parts=(IdentifierPart(value=token.text, span=token.span),), span=token.span)
                    return FunctionCall(name=name, niladic=True, span=token.span)
                # a qualifier such as ``Outer.id`` names an alias
                if self.is_punct(".", 1):
                    return self._parse_name_expression()
                raise ExpressionError(f"Unexpected {describe(token)} in expression", token.span)
            return self._parse_name_expression()

        if kind in (TokenKind.IDENTIFIER, TokenKind.QUOTED_IDENTIFIER):
            return self._parse_name_expression()

        raise ExpressionError(f"Unexpected {describe(token)} in expression", token.span)

    def _number(self, token: Token) -> Expression:
        text = token.text
        if text.startswith("$"):
            return NumericLiteral(text=text, kind=NumericKind.MONEY, span=token.span)
        if "e" in text or "E" in text:
            return NumericLiteral(text=text, kind=NumericKind.FLOAT, span=token.span)
        if "." in text:
            return NumericLiteral(text=text, kind=NumericKind.DECIMAL, span=token.span)
        return IntegerLiteral(value=int(text), span=token.span)

    def _parse_parenthesized(self) -> Expression:
        start = self.current
        if self.starts_query(1):
            query = self._parse_parenthesized_query()
            return Subquery(query=query, span=self.span_from(start))
        self.advance()
        if self.match_punct(")"):
            return TupleExpr(items=(), span=self.span_from(start))
        first = self.parse_expression()
        if self.is_punct(","):
            items = [first]
            while self.match_punct(","):
                items.append(self.parse_expression())
            self.expect_punct(")")
            return TupleExpr(items=tuple(items), span=self.span_from(start))
        self.expect_punct(")")
        return Parenthesized(expression=first, span=self.span_from(start))

    def _parse_parenthesized_query(self):
        self.expect_punct("(")
        query = self.parse_query()
        self.expect_punct(")")
        return query

    # Names and calls

    def _parse_name_expression(self) -> Expression:

        start = self.current
        parts: List[IdentifierPart] = [self.name_part()]
        while self.is_punct("."):
            self.advance()
            while self.is_punct("."):
                parts.append(IdentifierPart(value="", span=self.current.span))
                self.advance()
            if self.is_op("*"):
                self.advance()
                qualifier = Identifier(parts=tuple(parts), span=start.span.to(parts[-1].span))
                return Star(qualifier=qualifier, span=self.span_from(start))
            if self.current.kind == TokenKind.PSEUDO_COLUMN and self.current.value == "$PARTITION" and len(parts) == 1:
                return self._parse_partition_function(start, parts[0])
            parts.append(self.name_part())

        name = Identifier(parts=tuple(parts), span=self.span_from(start))

        if self.is_op("::"):
            self.advance()
            method = self.name_part()
            arguments = self.parse_call_arguments() if self.is_punct("(") else []
            return StaticMethodCall(
                type_name=name, method=method, arguments=tuple(arguments), span=self.span_from(start)
            )

        if self.is_punct("("):
            if len(parts) >= 2 and parts[-1].value.upper() in self.dialect.method_names:
                target_name = Identifier(parts=tuple(parts[:-1]), span=start.span.to(parts[-2].span))
                target = ColumnRef(name=target_name, span=target_name.span)
                arguments = self.parse_call_arguments()
                return MethodCall(
                    target=target, method=parts[-1], arguments=tuple(arguments), span=self.span_from(start)
                )
            return self._parse_function_call(name, start)

        return ColumnRef(name=name, span=name.span)

    def parse_call_arguments(self) -> List[Expression]:
        self.expect_punct("(")
        arguments: List[Expression] = []
        if not self.is_punct(")"):
            arguments = self.parse_expression_list()
        self.expect_punct(")")
        return arguments

    def parse_expression_list(self) -> List[Expression]:
        items = [self.parse_expression()]
        while self.match_punct(","):
            items.append(self.parse_expression())
        return items

    def _parse_function_call(self, name: Identifier, start: Token) -> FunctionCall:
        self.expect_punct("(")
        distinct = False
        arguments: List[Expression] = []
        if not self.is_punct(")"):
            if self.match_word("DISTINCT"):
                distinct = True
            else:
                self.match_word("ALL")
            arguments = self.parse_expression_list()
        self.expect_punct(")")

        within_group = ()
        if self.at_words("WITHIN", "GROUP"):
            self.advance()
            self.advance()
            self.expect_punct("(")
            self.expect_words("ORDER", "BY")
            within_group = tuple(self.parse_order_items())
            self.expect_punct(")")

        over = None
        over_window = None
        if self.match_word("OVER"):
            if self.is_punct("("):
                over = self.parse_window_spec()
            else:
                over_window = self.identifier_part()

        return FunctionCall(
            name=name,
            arguments=tuple(arguments),
            distinct=distinct,
            within_group=within_group,
            over=over,
            over_window=over_window,
            span=self.span_from(start),
        )

    def _parse_partition_function(self, start: Token, database: Optional[IdentifierPart]) -> PartitionFunctionCall:
        self.advance()  # $PARTITION
        self.expect_punct(".")
        function = self.name_part()
        arguments = self.parse_call_arguments()
        return PartitionFunctionCall(
            database=database,
            function=function,
            arguments=tuple(arguments),
            span=self.span_from(start),
        )

    def _parse_special_function(self) -> Expression:
        start = self.advance()
        word = start.upper
        try_ = word.startswith("TRY_")
        self.expect_punct("(")
        if word.endswith("CONVERT"):
            data_type = self.parse_data_type()
            self.expect_punct(",")
            expression = self.parse_expression()
            style = None
            if self.match_punct(","):
                style = self.parse_expression()
            self.expect_punct(")")
            return Convert(
                data_type=data_type, expression=expression, style=style, try_=try_, span=self.span_from(start)
            )
        expression = self.parse_expression()
        self.expect_word("AS")
        data_type = self.parse_data_type()
        if word.endswith("PARSE"):
            culture = None
            if self.match_word("USING"):
                culture = self.parse_expression()
            self.expect_punct(")")
            return ParseCall(
                expression=expression, data_type=data_type, culture=culture, try_=try_, span=self.span_from(start)
            )
        self.expect_punct(")")
        return Cast(expression=expression, data_type=data_type, try_=try_, span=self.span_from(start))

    def _parse_case(self) -> Case:
        start = self.expect_word("CASE")
        operand = None
        if not self.is_word("WHEN"):
            operand = self.parse_expression()
        whens = []
        while self.is_word("WHEN"):
            when_start = self.advance()
            condition = self.parse_expression()
            self.expect_word("THEN")
            result = self.parse_expression()
            whens.append(WhenClause(condition=condition, result=result, span=self.span_from(when_start)))
        if not whens:
            raise ExpressionError("CASE requires at least one WHEN clause", self.current.span)
        else_ = None
        if self.match_word("ELSE"):
            else_ = self.parse_expression()
        self.expect_word("END")
        return Case(operand=operand, whens=tuple(whens), else_=else_, span=self.span_from(start))

    def _parse_next_value_for(self) -> NextValueFor:
        start = self.current
        self.expect_words("NEXT", "VALUE", "FOR")
        sequence = self.multipart_identifier()
        over = None
        if self.match_word("OVER"):
            over = self.parse_window_spec()
        return NextValueFor(sequence=sequence, over=over, span=self.span_from(start))

    # Windows

    def parse_order_items(self) -> List[OrderItem]:
        items = [self.parse_order_item()]
        while self.match_punct(","):
            items.append(self.parse_order_item())
        return items

    def parse_order_item(self) -> OrderItem:
        start = self.current
        expression = self.parse_expression()
        order = None
        direction = self.match_word("ASC", "DESC")
        if direction is not None:
            order = SortOrder(direction.upper)
        return OrderItem(expression=expression, order=order, span=self.span_from(start))

    def parse_window_spec(self) -> WindowSpec:
        start = self.expect_punct("(")
        base_window = None
        if self.is_identifier() and not self.is_any_word(_WINDOW_CLAUSE_WORDS):
            base_window = self.identifier_part()
        partition_by = ()
        if self.match_words("PARTITION", "BY"):
            partition_by = tuple(self.parse_expression_list())
        order_by = ()
        if self.match_words("ORDER", "BY"):
            order_by = tuple(self.parse_order_items())
        frame = None
        if self.is_any_word(("ROWS", "RANGE")):
            frame = self._parse_window_frame()
        self.expect_punct(")")
        return WindowSpec(
            base_window=base_window,
            partition_by=partition_by,
            order_by=order_by,
            frame=frame,
            span=self.span_from(start),
        )

    def _parse_window_frame(self) -> WindowFrame:
        start = self.advance()
        if self.match_word("BETWEEN"):
            low = self._parse_frame_bound()
            self.expect_word("AND")
            high = self._parse_frame_bound()
            return WindowFrame(unit=start.upper, start=low, end=high, span=self.span_from(start))
        bound = self._parse_frame_bound()
        return WindowFrame(unit=start.upper, start=bound, span=self.span_from(start))

    def _parse_frame_bound(self) -> FrameBound:
        start = self.current
        if self.match_word("UNBOUNDED"):
            direction = self.expect_word("PRECEDING", "FOLLOWING")
            kind = (
                FrameBoundKind.UNBOUNDED_PRECEDING
                if direction.upper == "PRECEDING"
                else FrameBoundKind.UNBOUNDED_FOLLOWING
            )
            return FrameBound(kind=kind, span=self.span_from(start))
        if self.match_words("CURRENT", "ROW"):
            return FrameBound(kind=FrameBoundKind.CURRENT_ROW, span=self.span_from(start))
        offset = self.parse_expression(PREC_COMPARE)
        direction = self.expect_word("PRECEDING", "FOLLOWING")
        return FrameBound(kind=FrameBoundKind(direction.upper), offset=offset, span=self.span_from(start))
