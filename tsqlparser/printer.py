"""
SQL text generation from syntax trees.

The printer emits canonical T-SQL: keywords upper case, one statement per
line, every statement terminated by ``;``. Identifier quoting, parentheses
and alias styles written in the source are preserved, so parsing the printed
text yields a structurally equal tree.
"""

from typing import Iterable, List, Optional

from tsqlparser.models.base import (
    DataType,
    Identifier,
    IdentifierPart,
    Node,
    OptionItem,
    QuoteStyle,
    Statement,
)
from tsqlparser.models.ddl import ConstraintKind, FunctionReturnKind
from tsqlparser.models.expressions import UnaryOp
from tsqlparser.models.queries import AliasedRelation, AliasStyle, JoinKind, NamedTable
from tsqlparser.models.script import Batch, Script
from tsqlparser.models.statements import Label

INDENT = "    "


def quote_part(part: IdentifierPart) -> str:
    """Render one name part in its original quoting."""
    value = part.value
    if part.quote == QuoteStyle.BRACKET:
        return "[" + value.replace("]", "]]") + "]"
    if part.quote == QuoteStyle.DOUBLE:
        return '"' + value.replace('"', '""') + '"'
    if part.quote == QuoteStyle.SINGLE:
        return "'" + value.replace("'", "''") + "'"
    return value


def quote_string(value: str, unicode: bool = False) -> str:
    prefix = "N" if unicode else ""
    return prefix + "'" + value.replace("'", "''") + "'"


class SqlPrinter:
    """
    Visitor turning nodes back into SQL text.

    Dispatch is by class name: a node of type ``Foo`` is rendered by
    ``visit_Foo``. Unknown node types raise TypeError.

    Nested statements are indented by ``depth`` as they are rendered; the
    text of a statement itself is never re-indented afterwards, so newlines
    inside string literals and comments survive unchanged.
    """

    def __init__(self):
        self.depth = 0

    def visit(self, node: Node) -> str:
        method = getattr(self, f"visit_{type(node).__name__}", None)
        if method is None:
            raise TypeError(f"Cannot print node of type {type(node).__name__}")
        return method(node)

    def join(self, nodes: Iterable[Node], separator: str = ", ") -> str:
        return separator.join(self.visit(node) for node in nodes)

    def names(self, parts: Iterable[IdentifierPart]) -> str:
        return ", ".join(quote_part(part) for part in parts)

    def paren_names(self, parts: Iterable[IdentifierPart]) -> str:
        return "(" + self.names(parts) + ")"

    def statement(self, node: Statement) -> str:
        """A statement with its terminator."""
        text = self.visit(node)
        if isinstance(node, Label) or text.rstrip().endswith(";"):
            return text
        return text + ";"

    def newline(self) -> str:
        return "\n" + INDENT * self.depth

    def nested(self, node: Statement) -> str:
        """A statement on its own line, one level deeper than the current one."""
        self.depth += 1
        try:
            return self.newline() + self.statement(node)
        finally:
            self.depth -= 1

    def block(self, nodes: Iterable[Statement]) -> str:
        return "".join(self.nested(node) for node in nodes) + self.newline()

    # Scripts

    def visit_Script(self, node: Script) -> str:
        return "\n".join(self.visit(batch) for batch in node.batches)

    def visit_Batch(self, node: Batch) -> str:
        lines: List[str] = [self.statement(s) for s in node.statements]
        if node.go is not None:
            lines.append(self.visit(node.go))
        return "\n".join(lines)

    def visit_GoSeparator(self, node) -> str:
        return "GO" if node.repeat_count == 1 else f"GO {node.repeat_count}"

    # Names and shared pieces

    def visit_IdentifierPart(self, node: IdentifierPart) -> str:
        return quote_part(node)

    def visit_Identifier(self, node: Identifier) -> str:
        return ".".join(quote_part(part) for part in node.parts)

    def visit_DataType(self, node: DataType) -> str:
        name = self.visit(node.name)
        if node.parameters:
            return f"{name}({', '.join(node.parameters)})"
        return name

    def visit_OptionItem(self, node: OptionItem) -> str:
        text = node.name
        if node.has_equals:
            text += " = " + self.visit(node.value)
        elif node.value is not None:
            text += " " + self.visit(node.value)
            if node.to is not None:
                text += " TO " + self.visit(node.to)
        if node.parenthesized:
            text += " (" + self.join(node.arguments) + ")"
        return text

    def options(self, items) -> str:
        return "(" + self.join(items) + ")"

    # Literals and references

    def visit_KeywordValue(self, node) -> str:
        return node.word

    def visit_QuantityValue(self, node) -> str:
        if node.unit == "%":
            return self.visit(node.amount) + "%"
        return f"{self.visit(node.amount)} {node.unit}"

    def visit_IntegerLiteral(self, node) -> str:
        return str(node.value)

    def visit_NumericLiteral(self, node) -> str:
        return node.text

    def visit_StringLiteral(self, node) -> str:
        return quote_string(node.value, node.unicode)

    def visit_BinaryLiteral(self, node) -> str:
        return node.text

    def visit_NullLiteral(self, node) -> str:
        return "NULL"

    def visit_DefaultValue(self, node) -> str:
        return "DEFAULT"

    def visit_ParameterMarker(self, node) -> str:
        return "?"

    def visit_ColumnRef(self, node) -> str:
        return self.visit(node.name)

    def visit_Star(self, node) -> str:
        if node.qualifier is not None:
            return self.visit(node.qualifier) + ".*"
        return "*"

    def visit_VariableRef(self, node) -> str:
        return node.name

    def visit_SystemVariableRef(self, node) -> str:
        return node.name

    def visit_PseudoColumn(self, node) -> str:
        return node.name

    # Operators and predicates

    def visit_UnaryOp(self, node: UnaryOp) -> str:
        operand = self.visit(node.operand)
        if node.operator == "NOT":
            return "NOT " + operand
        if operand[:1] in ("-", "+"):
            # keep "- -1" from turning into a comment
            return f"{node.operator} {operand}"
        return node.operator + operand

    def visit_BinaryOp(self, node) -> str:
        return f"{self.visit(node.left)} {node.operator} {self.visit(node.right)}"

    def _not(self, negated: bool) -> str:
        return "NOT " if negated else ""

    def visit_Between(self, node) -> str:
        return (
            f"{self.visit(node.expression)} {self._not(node.negated)}BETWEEN "
            f"{self.visit(node.low)} AND {self.visit(node.high)}"
        )

    def visit_InList(self, node) -> str:
        return f"{self.visit(node.expression)} {self._not(node.negated)}IN ({self.join(node.values)})"

    def visit_InSubquery(self, node) -> str:
        return f"{self.visit(node.expression)} {self._not(node.negated)}IN ({self.visit(node.query)})"

    def visit_Like(self, node) -> str:
        text = f"{self.visit(node.expression)} {self._not(node.negated)}LIKE {self.visit(node.pattern)}"
        if node.escape is not None:
            text += " ESCAPE " + self.visit(node.escape)
        return text

    def visit_IsNull(self, node) -> str:
        return f"{self.visit(node.expression)} IS {self._not(node.negated)}NULL"

    def visit_IsDistinctFrom(self, node) -> str:
        return f"{self.visit(node.left)} IS {self._not(node.negated)}DISTINCT FROM {self.visit(node.right)}"

    def visit_Exists(self, node) -> str:
        return f"EXISTS ({self.visit(node.query)})"

    def visit_QuantifiedComparison(self, node) -> str:
        return f"{self.visit(node.left)} {node.operator} {node.quantifier.value} ({self.visit(node.query)})"

    # Calls and windows

    def visit_OrderItem(self, node) -> str:
        text = self.visit(node.expression)
        if node.order is not None:
            text += " " + node.order.value
        return text

    def visit_FrameBound(self, node) -> str:
        if node.offset is not None:
            return f"{self.visit(node.offset)} {node.kind.value}"
        return node.kind.value

    def visit_WindowFrame(self, node) -> str:
        if node.end is not None:
            return f"{node.unit} BETWEEN {self.visit(node.start)} AND {self.visit(node.end)}"
        return f"{node.unit} {self.visit(node.start)}"

    def visit_WindowSpec(self, node) -> str:
        parts = []
        if node.base_window is not None:
            parts.append(quote_part(node.base_window))
        if node.partition_by:
            parts.append("PARTITION BY " + self.join(node.partition_by))
        if node.order_by:
            parts.append("ORDER BY " + self.join(node.order_by))
        if node.frame is not None:
            parts.append(self.visit(node.frame))
        return "(" + " ".join(parts) + ")"

    def visit_FunctionCall(self, node) -> str:
        name = self.visit(node.name)
        if node.niladic:
            return name
        distinct = "DISTINCT " if node.distinct else ""
        text = f"{name}({distinct}{self.join(node.arguments)})"
        if node.within_group:
            text += f" WITHIN GROUP (ORDER BY {self.join(node.within_group)})"
        if node.over is not None:
            text += " OVER " + self.visit(node.over)
        elif node.over_window is not None:
            text += " OVER " + quote_part(node.over_window)
        return text

    def visit_WhenClause(self, node) -> str:
        return f"WHEN {self.visit(node.condition)} THEN {self.visit(node.result)}"

    def visit_Case(self, node) -> str:
        parts = ["CASE"]
        if node.operand is not None:
            parts.append(self.visit(node.operand))
        parts.extend(self.visit(when) for when in node.whens)
        if node.else_ is not None:
            parts.append("ELSE " + self.visit(node.else_))
        parts.append("END")
        return " ".join(parts)

    def visit_Cast(self, node) -> str:
        name = "TRY_CAST" if node.try_ else "CAST"
        return f"{name}({self.visit(node.expression)} AS {self.visit(node.data_type)})"

    def visit_Convert(self, node) -> str:
        name = "TRY_CONVERT" if node.try_ else "CONVERT"
        text = f"{name}({self.visit(node.data_type)}, {self.visit(node.expression)}"
        if node.style is not None:
            text += ", " + self.visit(node.style)
        return text + ")"

    def visit_ParseCall(self, node) -> str:
        name = "TRY_PARSE" if node.try_ else "PARSE"
        text = f"{name}({self.visit(node.expression)} AS {self.visit(node.data_type)}"
        if node.culture is not None:
            text += " USING " + self.visit(node.culture)
        return text + ")"

    def visit_Subquery(self, node) -> str:
        return f"({self.visit(node.query)})"

    def visit_MethodCall(self, node) -> str:
        return f"{self.visit(node.target)}.{quote_part(node.method)}({self.join(node.arguments)})"

    def visit_StaticMethodCall(self, node) -> str:
        return f"{self.visit(node.type_name)}::{quote_part(node.method)}({self.join(node.arguments)})"

    def visit_Collate(self, node) -> str:
        return f"{self.visit(node.expression)} COLLATE {node.collation}"

    def visit_AtTimeZone(self, node) -> str:
        return f"{self.visit(node.expression)} AT TIME ZONE {self.visit(node.zone)}"

    def visit_NextValueFor(self, node) -> str:
        text = "NEXT VALUE FOR " + self.visit(node.sequence)
        if node.over is not None:
            text += " OVER " + self.visit(node.over)
        return text

    def visit_PartitionFunctionCall(self, node) -> str:
        prefix = quote_part(node.database) + "." if node.database is not None else ""
        return f"{prefix}$PARTITION.{quote_part(node.function)}({self.join(node.arguments)})"

    def visit_Parenthesized(self, node) -> str:
        return f"({self.visit(node.expression)})"

    def visit_TupleExpr(self, node) -> str:
        return f"({self.join(node.items)})"

    def visit_GroupingSpec(self, node) -> str:
        return f"{node.kind.value} ({self.join(node.items)})"

    # Table sources

    def _alias(self, node: AliasedRelation) -> str:
        if node.alias is None:
            return ""
        text = " AS " + quote_part(node.alias)
        if node.column_aliases:
            text += " " + self.paren_names(node.column_aliases)
        return text

    def visit_TableHint(self, node) -> str:
        text = node.name
        if node.arguments:
            text += f"({self.join(node.arguments)})"
        elif node.value is not None:
            text += " = " + self.visit(node.value)
        return text

    def visit_TemporalClause(self, node) -> str:
        kind = node.kind.value
        if kind == "AS OF":
            return f"FOR SYSTEM_TIME AS OF {self.visit(node.start)}"
        if kind == "FROM":
            return f"FOR SYSTEM_TIME FROM {self.visit(node.start)} TO {self.visit(node.end)}"
        if kind == "BETWEEN":
            return f"FOR SYSTEM_TIME BETWEEN {self.visit(node.start)} AND {self.visit(node.end)}"
        if kind == "CONTAINED IN":
            return f"FOR SYSTEM_TIME CONTAINED IN ({self.visit(node.start)}, {self.visit(node.end)})"
        return "FOR SYSTEM_TIME ALL"

    def visit_TableSample(self, node) -> str:
        text = "TABLESAMPLE "
        if node.system:
            text += "SYSTEM "
        text += "(" + self.visit(node.size)
        if node.unit:
            text += " " + node.unit
        text += ")"
        if node.repeatable is not None:
            text += f" REPEATABLE ({self.visit(node.repeatable)})"
        return text

    def visit_NamedTable(self, node: NamedTable) -> str:
        text = self.visit(node.name)
        if node.temporal is not None:
            text += " " + self.visit(node.temporal)
        text += self._alias(node)
        if node.tablesample is not None:
            text += " " + self.visit(node.tablesample)
        if node.hints:
            hints = "(" + self.join(node.hints) + ")"
            text += " " + hints if node.legacy_hints else " WITH " + hints
        return text

    def visit_VariableTable(self, node) -> str:
        return self.visit(node.variable) + self._alias(node)

    def visit_DerivedTable(self, node) -> str:
        return f"({self.visit(node.query)})" + self._alias(node)

    def visit_DmlTable(self, node) -> str:
        return f"({self.visit(node.statement)})" + self._alias(node)

    def visit_SchemaColumn(self, node) -> str:
        text = f"{quote_part(node.name)} {self.visit(node.data_type)}"
        if node.path is not None:
            text += " " + self.visit(node.path)
        if node.as_json:
            text += " AS JSON"
        return text

    def visit_TableFunction(self, node) -> str:
        text = self.visit(node.call)
        if node.schema_columns:
            text += " WITH (" + self.join(node.schema_columns) + ")"
        elif node.schema_table is not None:
            text += " WITH " + self.visit(node.schema_table)
        return text + self._alias(node)

    def visit_BulkOpenRowset(self, node) -> str:
        text = "OPENROWSET(BULK " + self.visit(node.path)
        if node.options:
            text += ", " + self.join(node.options)
        return text + ")" + self._alias(node)

    def visit_ValuesRow(self, node) -> str:
        return "(" + self.join(node.values) + ")"

    def visit_ValuesTable(self, node) -> str:
        return "(VALUES " + self.join(node.rows) + ")" + self._alias(node)

    def visit_JoinedTable(self, node) -> str:
        left = self.visit(node.left)
        right = self.visit(node.right)
        if node.kind in (JoinKind.CROSS, JoinKind.CROSS_APPLY, JoinKind.OUTER_APPLY):
            keyword = "CROSS JOIN" if node.kind == JoinKind.CROSS else node.kind.value
            return f"{left} {keyword} {right}"
        words = []
        if node.explicit_kind:
            words.append(node.kind.value)
            if node.outer:
                words.append("OUTER")
        if node.hint:
            words.append(node.hint)
        words.append("JOIN")
        return f"{left} {' '.join(words)} {right} ON {self.visit(node.condition)}"

    def visit_ParenthesizedRelation(self, node) -> str:
        return f"({self.visit(node.relation)})"

    def visit_PivotTable(self, node) -> str:
        return (
            f"{self.visit(node.source)} PIVOT ({self.visit(node.aggregate)} "
            f"FOR {self.visit(node.pivot_column)} IN {self.paren_names(node.values)})"
            + self._alias(node)
        )

    def visit_UnpivotTable(self, node) -> str:
        return (
            f"{self.visit(node.source)} UNPIVOT ({quote_part(node.value_column)} "
            f"FOR {quote_part(node.name_column)} IN {self.paren_names(node.columns)})"
            + self._alias(node)
        )

    # Queries

    def visit_SelectItem(self, node) -> str:
        expression = self.visit(node.expression)
        if node.alias is None or node.alias_style == AliasStyle.NONE:
            return expression
        alias = quote_part(node.alias)
        if node.alias_style == AliasStyle.EQUALS:
            return f"{alias} = {expression}"
        if node.alias_style == AliasStyle.BARE:
            return f"{expression} {alias}"
        return f"{expression} AS {alias}"

    def visit_SelectAssignment(self, node) -> str:
        return f"{self.visit(node.variable)} {node.operator} {self.visit(node.value)}"

    def visit_TopClause(self, node) -> str:
        value = self.visit(node.value)
        text = f"TOP ({value})" if node.parenthesized else f"TOP {value}"
        if node.percent:
            text += " PERCENT"
        if node.with_ties:
            text += " WITH TIES"
        return text

    def visit_GroupByClause(self, node) -> str:
        prefix = "GROUP BY ALL " if node.all_ else "GROUP BY "
        return prefix + self.join(node.items)

    def visit_NamedWindow(self, node) -> str:
        return f"{quote_part(node.name)} AS {self.visit(node.spec)}"

    def visit_QuerySpecification(self, node) -> str:
        parts = ["SELECT"]
        if node.distinct:
            parts.append("DISTINCT")
        elif node.all_:
            parts.append("ALL")
        if node.top is not None:
            parts.append(self.visit(node.top))
        parts.append(self.join(node.items))
        if node.into is not None:
            parts.append("INTO " + self.visit(node.into))
        if node.from_:
            parts.append("FROM " + self.join(node.from_))
        if node.where is not None:
            parts.append("WHERE " + self.visit(node.where))
        if node.group_by is not None:
            parts.append(self.visit(node.group_by))
        if node.having is not None:
            parts.append("HAVING " + self.visit(node.having))
        if node.windows:
            parts.append("WINDOW " + self.join(node.windows))
        return " ".join(parts)

    def visit_SetOperation(self, node) -> str:
        return f"{self.visit(node.left)} {node.operator.value} {self.visit(node.right)}"

    def visit_ParenthesizedQuery(self, node) -> str:
        return f"({self.visit(node.query)})"

    def visit_CommonTableExpression(self, node) -> str:
        columns = " " + self.paren_names(node.columns) if node.columns else ""
        return f"{quote_part(node.name)}{columns} AS ({self.visit(node.query)})"

    def visit_XmlNamespace(self, node) -> str:
        if node.prefix is None:
            return "DEFAULT " + self.visit(node.uri)
        return f"{self.visit(node.uri)} AS {quote_part(node.prefix)}"

    def visit_WithClause(self, node) -> str:
        parts = []
        if node.xml_namespaces:
            parts.append("XMLNAMESPACES (" + self.join(node.xml_namespaces) + ")")
        parts.extend(self.visit(cte) for cte in node.ctes)
        return "WITH " + ", ".join(parts)

    def visit_ForClause(self, node) -> str:
        text = "FOR " + node.kind
        if node.mode is not None:
            text += " " + node.mode
            if node.mode_argument is not None:
                text += f"({self.visit(node.mode_argument)})"
        if node.options:
            text += ", " + self.join(node.options)
        return text

    def _with_prefix(self, with_clause) -> str:
        return self.visit(with_clause) + " " if with_clause is not None else ""

    def _query_options(self, options) -> str:
        return " OPTION " + self.options(options) if options else ""

    def visit_Query(self, node) -> str:
        text = self._with_prefix(node.with_) + self.visit(node.body)
        if node.order_by:
            text += " ORDER BY " + self.join(node.order_by)
        if node.offset is not None:
            text += f" OFFSET {self.visit(node.offset)} ROWS"
            if node.fetch is not None:
                text += f" FETCH NEXT {self.visit(node.fetch)} ROWS ONLY"
        if node.for_clause is not None:
            text += " " + self.visit(node.for_clause)
        return text + self._query_options(node.options)

    # Data modification

    def visit_Select(self, node) -> str:
        return self.visit(node.query)

    def visit_OutputClause(self, node) -> str:
        text = "OUTPUT " + self.join(node.items)
        if node.into_table is not None:
            text += " INTO " + self.visit(node.into_table)
        elif node.into_variable is not None:
            text += " INTO " + self.visit(node.into_variable)
        if node.into_columns:
            text += " " + self.paren_names(node.into_columns)
        return text

    def visit_ValuesClause(self, node) -> str:
        return "VALUES " + self.join(node.rows)

    def visit_Assignment(self, node) -> str:
        if node.variable is not None:
            return f"{self.visit(node.variable)} = {self.visit(node.target)} = {self.visit(node.value)}"
        return f"{self.visit(node.target)} {node.operator} {self.visit(node.value)}"

    def visit_CursorRef(self, node) -> str:
        prefix = "GLOBAL " if node.global_ else ""
        if node.variable is not None:
            return prefix + self.visit(node.variable)
        return prefix + quote_part(node.name)

    def visit_CurrentOf(self, node) -> str:
        return "CURRENT OF " + self.visit(node.cursor)

    def dml_target(self, node) -> str:
        """DML targets put table hints before the alias."""
        if not isinstance(node, NamedTable):
            return self.visit(node)
        text = self.visit(node.name)
        if node.hints:
            text += " WITH (" + self.join(node.hints) + ")"
        if node.alias is not None:
            text += " AS " + quote_part(node.alias)
        return text

    def _top(self, top) -> str:
        return " " + self.visit(top) if top is not None else ""

    def _outputs(self, outputs) -> str:
        return "".join(" " + self.visit(output) for output in outputs)

    def _filter(self, node) -> str:
        text = ""
        if node.from_:
            text += " FROM " + self.join(node.from_)
        if node.current_of is not None:
            text += " WHERE " + self.visit(node.current_of)
        elif node.where is not None:
            text += " WHERE " + self.visit(node.where)
        return text

    def visit_Insert(self, node) -> str:
        text = self._with_prefix(node.with_) + "INSERT" + self._top(node.top)
        if node.into_keyword:
            text += " INTO"
        text += " " + self.dml_target(node.target)
        if node.columns:
            text += " " + self.paren_names(node.columns)
        text += self._outputs(node.outputs)
        if node.default_values:
            text += " DEFAULT VALUES"
        elif node.source is not None:
            text += " " + self.visit(node.source)
        return text + self._query_options(node.options)

    def visit_Update(self, node) -> str:
        text = self._with_prefix(node.with_) + "UPDATE" + self._top(node.top)
        text += " " + self.dml_target(node.target)
        text += " SET " + self.join(node.set_clauses)
        text += self._outputs(node.outputs) + self._filter(node)
        return text + self._query_options(node.options)

    def visit_Delete(self, node) -> str:
        text = self._with_prefix(node.with_) + "DELETE" + self._top(node.top)
        if node.from_keyword:
            text += " FROM"
        text += " " + self.dml_target(node.target)
        text += self._outputs(node.outputs) + self._filter(node)
        return text + self._query_options(node.options)

    def visit_MergeUpdate(self, node) -> str:
        return "UPDATE SET " + self.join(node.set_clauses)

    def visit_MergeDelete(self, node) -> str:
        return "DELETE"

    def visit_MergeInsert(self, node) -> str:
        text = "INSERT"
        if node.columns:
            text += " " + self.paren_names(node.columns)
        if node.default_values:
            return text + " DEFAULT VALUES"
        return text + " VALUES (" + self.join(node.values) + ")"

    def visit_MergeWhen(self, node) -> str:
        text = "WHEN " + node.match.value
        if node.condition is not None:
            text += " AND " + self.visit(node.condition)
        return text + " THEN " + self.visit(node.action)

    def visit_Merge(self, node) -> str:
        text = self._with_prefix(node.with_) + "MERGE" + self._top(node.top)
        if node.into_keyword:
            text += " INTO"
        text += " " + self.dml_target(node.target)
        text += " USING " + self.visit(node.source)
        text += " ON " + self.visit(node.condition)
        text += "".join(" " + self.visit(when) for when in node.whens)
        text += self._outputs(node.outputs)
        return text + self._query_options(node.options)

    def visit_BulkInsert(self, node) -> str:
        text = f"BULK INSERT {self.visit(node.table)} FROM {self.visit(node.source)}"
        if node.options:
            text += " WITH " + self.options(node.options)
        return text

    # Tables and columns

    def visit_IdentitySpec(self, node) -> str:
        if node.seed is None:
            return "IDENTITY"
        return f"IDENTITY({self.visit(node.seed)}, {self.visit(node.increment)})"

    def visit_ForeignKeyReference(self, node) -> str:
        text = "REFERENCES " + self.visit(node.table)
        if node.columns:
            text += " " + self.paren_names(node.columns)
        if node.on_delete is not None:
            text += " ON DELETE " + node.on_delete.value
        if node.on_update is not None:
            text += " ON UPDATE " + node.on_update.value
        if node.not_for_replication:
            text += " NOT FOR REPLICATION"
        return text

    def visit_IndexColumn(self, node) -> str:
        if node.order is not None:
            return f"{quote_part(node.name)} {node.order.value}"
        return quote_part(node.name)

    def index_columns(self, columns) -> str:
        return "(" + self.join(columns) + ")"

    def visit_StorageClause(self, node) -> str:
        text = "ON " + quote_part(node.name)
        if node.column is not None:
            text += f"({quote_part(node.column)})"
        return text

    def _clustered(self, clustered: Optional[bool]) -> str:
        if clustered is None:
            return ""
        return " CLUSTERED" if clustered else " NONCLUSTERED"

    def visit_ConstraintDefinition(self, node) -> str:
        text = f"CONSTRAINT {quote_part(node.name)} " if node.name is not None else ""
        kind = node.kind
        if kind in (ConstraintKind.PRIMARY_KEY, ConstraintKind.UNIQUE):
            text += kind.value + self._clustered(node.clustered)
            if node.columns:
                text += " " + self.index_columns(node.columns)
            if node.options:
                text += " WITH " + self.options(node.options)
            if node.storage is not None:
                text += " " + self.visit(node.storage)
        elif kind == ConstraintKind.CHECK:
            text += "CHECK"
            if node.not_for_replication:
                text += " NOT FOR REPLICATION"
            text += f" ({self.visit(node.expression)})"
        elif kind == ConstraintKind.DEFAULT:
            text += "DEFAULT " + self.visit(node.expression)
            if node.for_column is not None:
                text += " FOR " + quote_part(node.for_column)
            if node.with_values:
                text += " WITH VALUES"
        else:
            if node.columns:
                text += "FOREIGN KEY " + self.index_columns(node.columns) + " "
            text += self.visit(node.references)
        return text

    def visit_ColumnAttribute(self, node) -> str:
        if node.name == "MASKED":
            return f"MASKED WITH (FUNCTION = {self.visit(node.value)})"
        return node.name

    def visit_ColumnDefinition(self, node) -> str:
        parts = [quote_part(node.name)]
        if node.computed is not None:
            parts.append("AS " + self.visit(node.computed))
            if node.persisted:
                parts.append("PERSISTED")
        else:
            parts.append(self.visit(node.data_type))
        if node.collation is not None:
            parts.append("COLLATE " + node.collation)
        if node.identity is not None:
            parts.append(self.visit(node.identity))
        parts.extend(self.visit(attribute) for attribute in node.attributes)
        if node.nullable is not None:
            parts.append("NULL" if node.nullable else "NOT NULL")
        parts.extend(self.visit(constraint) for constraint in node.constraints)
        return " ".join(parts)

    def visit_InlineIndex(self, node) -> str:
        text = "INDEX " + quote_part(node.name)
        if node.unique:
            text += " UNIQUE"
        text += self._clustered(node.clustered)
        return text + " " + self.index_columns(node.columns)

    def visit_PeriodForSystemTime(self, node) -> str:
        return f"PERIOD FOR SYSTEM_TIME ({quote_part(node.start_column)}, {quote_part(node.end_column)})"

    def visit_TableDefinition(self, node) -> str:
        return "(" + self.join(node.elements) + ")"

    def visit_CreateTable(self, node) -> str:
        text = f"CREATE TABLE {self.visit(node.name)} {self.visit(node.definition)}"
        if node.storage is not None:
            text += " " + self.visit(node.storage)
        if node.textimage_on is not None:
            text += " TEXTIMAGE_ON " + quote_part(node.textimage_on)
        if node.options:
            text += " WITH " + self.options(node.options)
        return text

    # ALTER TABLE

    def _with_check(self, check: Optional[bool]) -> str:
        if check is None:
            return ""
        return "WITH CHECK " if check else "WITH NOCHECK "

    def visit_AlterTableAdd(self, node) -> str:
        return self._with_check(node.check) + "ADD " + self.join(node.elements)

    def visit_AlterTableAlterColumn(self, node) -> str:
        return "ALTER COLUMN " + self.visit(node.column)

    def visit_DropItem(self, node) -> str:
        if node.kind == "PERIOD FOR SYSTEM_TIME":
            return node.kind
        exists = "IF EXISTS " if node.if_exists else ""
        return f"{node.kind} {exists}{quote_part(node.name)}"

    def visit_AlterTableDrop(self, node) -> str:
        return "DROP " + self.join(node.items)

    def visit_AlterTableConstraintCheck(self, node) -> str:
        keyword = "CHECK" if node.enable else "NOCHECK"
        return f"{self._with_check(node.with_check)}{keyword} CONSTRAINT {self.names(node.names)}"

    def visit_AlterTableTrigger(self, node) -> str:
        keyword = "ENABLE" if node.enable else "DISABLE"
        return f"{keyword} TRIGGER {self.names(node.names)}"

    def visit_AlterTableSwitch(self, node) -> str:
        text = "SWITCH"
        if node.source_partition is not None:
            text += " PARTITION " + self.visit(node.source_partition)
        text += " TO " + self.visit(node.target)
        if node.target_partition is not None:
            text += " PARTITION " + self.visit(node.target_partition)
        return text

    def visit_AlterTableSet(self, node) -> str:
        return "SET " + self.options(node.options)

    def visit_AlterTableRebuild(self, node) -> str:
        text = "REBUILD"
        if node.partition is not None:
            text += " PARTITION = " + self.visit(node.partition)
        if node.options:
            text += " WITH " + self.options(node.options)
        return text

    def visit_AlterTable(self, node) -> str:
        return f"ALTER TABLE {self.visit(node.name)} {self.visit(node.action)}"

    # Programmable objects

    def _module_options(self, options) -> str:
        return " WITH " + self.join(options) if options else ""

    def _module_body(self, body) -> str:
        return " AS" + "".join(self.nested(statement) for statement in body)

    def visit_CreateView(self, node) -> str:
        text = f"{node.mode.value} VIEW {self.visit(node.name)}"
        if node.columns:
            text += " " + self.paren_names(node.columns)
        if node.attributes:
            text += " WITH " + ", ".join(node.attributes)
        text += " AS " + self.visit(node.query)
        if node.check_option:
            text += " WITH CHECK OPTION"
        return text

    def visit_ParameterDefinition(self, node) -> str:
        text = f"{node.name} {self.visit(node.data_type)}"
        if node.varying:
            text += " VARYING"
        if node.default is not None:
            text += " = " + self.visit(node.default)
        if node.output:
            text += " OUTPUT"
        if node.readonly:
            text += " READONLY"
        return text

    def visit_CreateProcedure(self, node) -> str:
        text = f"{node.mode.value} PROCEDURE {self.visit(node.name)}"
        if node.parenthesized:
            text += " (" + self.join(node.parameters) + ")"
        elif node.parameters:
            text += " " + self.join(node.parameters)
        text += self._module_options(node.options)
        if node.for_replication:
            text += " FOR REPLICATION"
        return text + self._module_body(node.body)

    def visit_FunctionReturns(self, node) -> str:
        if node.kind == FunctionReturnKind.TABLE:
            return "RETURNS TABLE"
        if node.kind == FunctionReturnKind.TABLE_VARIABLE:
            return f"RETURNS {node.variable} TABLE {self.visit(node.table)}"
        return "RETURNS " + self.visit(node.data_type)

    def visit_CreateFunction(self, node) -> str:
        text = f"{node.mode.value} FUNCTION {self.visit(node.name)} ({self.join(node.parameters)})"
        text += " " + self.visit(node.returns)
        text += self._module_options(node.options)
        return text + self._module_body(node.body)

    def visit_CreateTrigger(self, node) -> str:
        text = f"{node.mode.value} TRIGGER {self.visit(node.name)} ON "
        text += node.scope if node.scope is not None else self.visit(node.target)
        text += self._module_options(node.options)
        text += f" {node.timing} {', '.join(node.events)}"
        if node.not_for_replication:
            text += " NOT FOR REPLICATION"
        return text + self._module_body(node.body)

    # Indexes

    def visit_CreateIndex(self, node) -> str:
        text = "CREATE"
        if node.unique:
            text += " UNIQUE"
        text += self._clustered(node.clustered)
        if node.columnstore:
            text += " COLUMNSTORE"
        text += f" INDEX {quote_part(node.name)} ON {self.visit(node.table)}"
        if node.columns:
            text += " " + self.index_columns(node.columns)
        if node.include:
            text += " INCLUDE " + self.paren_names(node.include)
        if node.where is not None:
            text += " WHERE " + self.visit(node.where)
        if node.options:
            text += " WITH " + self.options(node.options)
        if node.storage is not None:
            text += " " + self.visit(node.storage)
        return text

    def visit_AlterIndex(self, node) -> str:
        name = quote_part(node.name) if node.name is not None else "ALL"
        text = f"ALTER INDEX {name} ON {self.visit(node.table)} {node.action}"
        if node.action == "SET":
            return text + " " + self.options(node.options)
        if node.partition is not None:
            text += " PARTITION = " + self.visit(node.partition)
        if node.options:
            text += " WITH " + self.options(node.options)
        return text

    def visit_CreateXmlIndex(self, node) -> str:
        text = "CREATE PRIMARY XML INDEX" if node.primary else "CREATE XML INDEX"
        text += f" {quote_part(node.name)} ON {self.visit(node.table)} ({quote_part(node.column)})"
        if node.using_index is not None:
            text += f" USING XML INDEX {quote_part(node.using_index)} FOR {node.secondary_kind}"
        if node.options:
            text += " WITH " + self.options(node.options)
        return text

    def visit_CreateXmlSchemaCollection(self, node) -> str:
        return f"CREATE XML SCHEMA COLLECTION {self.visit(node.name)} AS {self.visit(node.schema_text)}"

    def visit_AlterXmlSchemaCollection(self, node) -> str:
        return f"ALTER XML SCHEMA COLLECTION {self.visit(node.name)} ADD {self.visit(node.schema_text)}"

    # Sequences, schemas, types, synonyms

    def _sequence_options(self, options) -> str:
        return "".join(" " + self.visit(option) for option in options)

    def visit_CreateSequence(self, node) -> str:
        text = "CREATE SEQUENCE " + self.visit(node.name)
        if node.data_type is not None:
            text += " AS " + self.visit(node.data_type)
        return text + self._sequence_options(node.options)

    def visit_AlterSequence(self, node) -> str:
        return "ALTER SEQUENCE " + self.visit(node.name) + self._sequence_options(node.options)

    def visit_CreateSchema(self, node) -> str:
        text = "CREATE SCHEMA"
        if node.name is not None:
            text += " " + quote_part(node.name)
        if node.authorization is not None:
            text += " AUTHORIZATION " + quote_part(node.authorization)
        text += "".join(" " + self.visit(element) for element in node.elements)
        return text

    def visit_AlterSchema(self, node) -> str:
        target = self.visit(node.transfer)
        if node.transfer_class is not None:
            target = f"{node.transfer_class}::{target}"
        return f"ALTER SCHEMA {quote_part(node.name)} TRANSFER {target}"

    def visit_CreateType(self, node) -> str:
        text = "CREATE TYPE " + self.visit(node.name)
        if node.table is not None:
            return text + " AS TABLE " + self.visit(node.table)
        text += " FROM " + self.visit(node.base_type)
        if node.nullable is not None:
            text += " NULL" if node.nullable else " NOT NULL"
        return text

    def visit_CreateSynonym(self, node) -> str:
        return f"CREATE SYNONYM {self.visit(node.name)} FOR {self.visit(node.target)}"

    def visit_SecurityPredicate(self, node) -> str:
        text = f"{node.action} {node.kind} PREDICATE"
        if node.function is not None:
            text += " " + self.visit(node.function)
        text += " ON " + self.visit(node.table)
        if node.block_operation is not None:
            text += " " + node.block_operation
        return text

    def _security_policy(self, keyword: str, node) -> str:
        text = f"{keyword} SECURITY POLICY {self.visit(node.name)}"
        if node.predicates:
            text += " " + self.join(node.predicates)
        if node.options:
            text += " WITH " + self.options(node.options)
        if node.not_for_replication:
            text += " NOT FOR REPLICATION"
        return text

    def visit_CreateSecurityPolicy(self, node) -> str:
        return self._security_policy("CREATE", node)

    def visit_AlterSecurityPolicy(self, node) -> str:
        return self._security_policy("ALTER", node)

    # Partitioning

    def visit_CreatePartitionFunction(self, node) -> str:
        text = f"CREATE PARTITION FUNCTION {quote_part(node.name)} ({self.visit(node.input_type)}) AS RANGE"
        if node.range_direction is not None:
            text += " " + node.range_direction
        return text + f" FOR VALUES ({self.join(node.boundaries)})"

    def visit_AlterPartitionFunction(self, node) -> str:
        return (
            f"ALTER PARTITION FUNCTION {quote_part(node.name)}() "
            f"{node.action} RANGE ({self.visit(node.boundary)})"
        )

    def visit_CreatePartitionScheme(self, node) -> str:
        text = f"CREATE PARTITION SCHEME {quote_part(node.name)} AS PARTITION {quote_part(node.function)}"
        if node.all_:
            text += " ALL"
        return text + " TO " + self.paren_names(node.filegroups)

    def visit_AlterPartitionScheme(self, node) -> str:
        text = f"ALTER PARTITION SCHEME {quote_part(node.name)} NEXT USED"
        if node.next_used is not None:
            text += " " + quote_part(node.next_used)
        return text

    # DROP / TRUNCATE

    def visit_DropObject(self, node) -> str:
        text = "DROP " + node.object_type
        if node.if_exists:
            text += " IF EXISTS"
        text += " " + self.join(node.names)
        if node.on_scope is not None:
            text += " ON " + node.on_scope
        elif node.on_target is not None:
            text += " ON " + self.visit(node.on_target)
        return text

    def visit_TruncateTable(self, node) -> str:
        text = "TRUNCATE TABLE " + self.visit(node.name)
        if node.partitions:
            text += f" WITH (PARTITIONS ({self.join(node.partitions)}))"
        return text

    # Variables and cursors

    def visit_VariableDeclaration(self, node) -> str:
        if node.table is not None:
            return f"{node.name} TABLE {self.visit(node.table)}"
        text = f"{node.name} {self.visit(node.data_type)}"
        if node.value is not None:
            text += " = " + self.visit(node.value)
        return text

    def visit_Declare(self, node) -> str:
        return "DECLARE " + self.join(node.variables)

    def visit_CursorOptions(self, node) -> str:
        return " ".join(node.enabled)

    def visit_CursorDefinition(self, node) -> str:
        options = self.visit(node.options)
        text = f"CURSOR {options} FOR " if options else "CURSOR FOR "
        text += self.visit(node.query)
        if node.for_update:
            text += " FOR UPDATE"
            if node.update_columns:
                text += " OF " + self.names(node.update_columns)
        elif node.read_only:
            text += " FOR READ ONLY"
        return text

    def visit_DeclareCursor(self, node) -> str:
        text = "DECLARE " + quote_part(node.name)
        iso = self.visit(node.definition.iso_options)
        if iso:
            text += " " + iso
        return text + " " + self.visit(node.definition)

    def visit_SetVariable(self, node) -> str:
        text = f"SET {self.visit(node.variable)} {node.operator} "
        if node.cursor is not None:
            return text + self.visit(node.cursor)
        return text + self.visit(node.value)

    def visit_SetMethodCall(self, node) -> str:
        return "SET " + self.visit(node.call)

    def visit_SetOption(self, node) -> str:
        text = "SET " + ", ".join(node.options)
        if node.target is not None:
            text += " " + self.visit(node.target)
        if node.value is not None:
            text += " " + self.visit(node.value)
        return text

    def visit_SetTransactionIsolation(self, node) -> str:
        return "SET TRANSACTION ISOLATION LEVEL " + node.level

    def visit_OpenCursor(self, node) -> str:
        return "OPEN " + self.visit(node.cursor)

    def visit_FetchCursor(self, node) -> str:
        text = "FETCH "
        if node.orientation is not None:
            text += node.orientation.value + " "
            if node.offset is not None:
                text += self.visit(node.offset) + " "
        text += "FROM " + self.visit(node.cursor)
        if node.into:
            text += " INTO " + self.join(node.into)
        return text

    def visit_CloseCursor(self, node) -> str:
        return "CLOSE " + self.visit(node.cursor)

    def visit_DeallocateCursor(self, node) -> str:
        return "DEALLOCATE " + self.visit(node.cursor)

    # Control flow

    def visit_Block(self, node) -> str:
        return "BEGIN" + self.block(node.statements) + "END"

    def visit_If(self, node) -> str:
        text = f"IF {self.visit(node.condition)}" + self.nested(node.then)
        if node.else_ is not None:
            text += self.newline() + "ELSE" + self.nested(node.else_)
        return text

    def visit_While(self, node) -> str:
        return f"WHILE {self.visit(node.condition)}" + self.nested(node.body)

    def visit_TryCatch(self, node) -> str:
        return (
            "BEGIN TRY" + self.block(node.try_statements) + "END TRY" + self.newline()
            + "BEGIN CATCH" + self.block(node.catch_statements) + "END CATCH"
        )

    def visit_Goto(self, node) -> str:
        return "GOTO " + quote_part(node.label)

    def visit_Label(self, node) -> str:
        return quote_part(node.name) + ":"

    def visit_Return(self, node) -> str:
        if node.value is None:
            return "RETURN"
        return "RETURN " + self.visit(node.value)

    def visit_Break(self, node) -> str:
        return "BREAK"

    def visit_Continue(self, node) -> str:
        return "CONTINUE"

    def visit_Print(self, node) -> str:
        return "PRINT " + self.visit(node.value)

    def visit_Raiserror(self, node) -> str:
        text = f"RAISERROR ({self.join(node.arguments)})"
        if node.options:
            text += " WITH " + ", ".join(node.options)
        return text

    def visit_Throw(self, node) -> str:
        if not node.arguments:
            return "THROW"
        return "THROW " + self.join(node.arguments)

    def visit_Waitfor(self, node) -> str:
        if node.statement is None:
            return f"WAITFOR {node.kind} {self.visit(node.value)}"
        text = f"WAITFOR ({self.visit(node.statement)})"
        if node.timeout is not None:
            text += ", TIMEOUT " + self.visit(node.timeout)
        return text

    def visit_Use(self, node) -> str:
        return "USE " + quote_part(node.database)

    # Execution

    def visit_ExecArgument(self, node) -> str:
        text = f"{node.name} = " if node.name is not None else ""
        text += self.visit(node.value)
        if node.output:
            text += " OUTPUT"
        return text

    def visit_ResultColumn(self, node) -> str:
        text = f"{quote_part(node.name)} {self.visit(node.data_type)}"
        if node.nullable is not None:
            text += " NULL" if node.nullable else " NOT NULL"
        return text

    def visit_ResultSetDefinition(self, node) -> str:
        return "(" + self.join(node.columns) + ")"

    def visit_ResultSetsClause(self, node) -> str:
        if node.definitions:
            return "RESULT SETS (" + self.join(node.definitions) + ")"
        return "RESULT SETS " + node.kind

    def visit_ExecuteProcedure(self, node) -> str:
        parts = [] if node.implicit else ["EXEC"]
        if node.return_variable is not None:
            parts.append(self.visit(node.return_variable) + " =")
        if node.procedure_variable is not None:
            parts.append(self.visit(node.procedure_variable))
        else:
            parts.append(self.visit(node.procedure))
        if node.arguments:
            parts.append(self.join(node.arguments))
        modifiers = []
        if node.recompile:
            modifiers.append("RECOMPILE")
        if node.result_sets is not None:
            modifiers.append(self.visit(node.result_sets))
        if modifiers:
            parts.append("WITH " + ", ".join(modifiers))
        return " ".join(parts)

    def visit_ExecuteString(self, node) -> str:
        text = "EXEC (" + self.visit(node.command)
        if node.arguments:
            text += ", " + self.join(node.arguments)
        text += ")"
        if node.context_kind is not None:
            text += f" AS {node.context_kind} = {self.visit(node.context_name)}"
        if node.at_server is not None:
            text += " AT " + quote_part(node.at_server)
        return text

    def visit_ExecuteAs(self, node) -> str:
        text = "EXECUTE AS " + node.principal_kind
        if node.principal is not None:
            text += " = " + self.visit(node.principal)
        if node.no_revert:
            text += " WITH NO REVERT"
        elif node.cookie_variable is not None:
            text += " WITH COOKIE INTO " + self.visit(node.cookie_variable)
        return text

    def visit_Revert(self, node) -> str:
        if node.cookie is None:
            return "REVERT"
        return "REVERT WITH COOKIE = " + self.visit(node.cookie)

    # Transactions

    def visit_BeginTransaction(self, node) -> str:
        text = "BEGIN DISTRIBUTED TRANSACTION" if node.distributed else "BEGIN TRANSACTION"
        if node.name is not None:
            text += " " + self.visit(node.name)
        if node.with_mark:
            text += " WITH MARK"
            if node.mark is not None:
                text += " " + self.visit(node.mark)
        return text

    def visit_CommitTransaction(self, node) -> str:
        if node.work:
            text = "COMMIT WORK"
        else:
            text = "COMMIT TRANSACTION"
            if node.name is not None:
                text += " " + self.visit(node.name)
        if node.options:
            text += " WITH " + self.options(node.options)
        return text

    def visit_RollbackTransaction(self, node) -> str:
        if node.work:
            return "ROLLBACK WORK"
        text = "ROLLBACK TRANSACTION"
        if node.name is not None:
            text += " " + self.visit(node.name)
        return text

    def visit_SaveTransaction(self, node) -> str:
        return "SAVE TRANSACTION " + self.visit(node.name)

    # Administration

    def visit_BackupDevice(self, node) -> str:
        value = self.visit(node.value)
        return f"{node.kind} = {value}" if node.kind is not None else value

    def visit_MirrorTo(self, node) -> str:
        return "MIRROR TO " + self.join(node.devices)

    def _with_options(self, options) -> str:
        return " WITH " + self.join(options) if options else ""

    def visit_BackupDatabase(self, node) -> str:
        text = f"BACKUP {node.kind} {self.visit(node.database)}"
        if node.files:
            text += " " + self.join(node.files)
        text += " TO " + self.join(node.devices)
        text += "".join(" " + self.visit(mirror) for mirror in node.mirrors)
        return text + self._with_options(node.options)

    def visit_RestoreDatabase(self, node) -> str:
        text = "RESTORE " + node.kind
        if node.database is not None:
            text += " " + self.visit(node.database)
        if node.files:
            text += " " + self.join(node.files)
        if node.devices:
            text += " FROM " + self.join(node.devices)
        return text + self._with_options(node.options)

    def visit_Permission(self, node) -> str:
        if node.columns:
            return f"{node.name} {self.paren_names(node.columns)}"
        return node.name

    def visit_Grant(self, node) -> str:
        parts = [node.action]
        if node.grant_option_for:
            parts.append("GRANT OPTION FOR")
        parts.append(self.join(node.permissions))
        if node.securable is not None:
            securable = self.visit(node.securable)
            if node.securable_class is not None:
                securable = f"{node.securable_class}::{securable}"
            parts.append("ON " + securable)
        parts.append("FROM" if node.action == "REVOKE" else "TO")
        parts.append(self.names(node.principals))
        if node.with_grant_option:
            parts.append("WITH GRANT OPTION")
        if node.cascade:
            parts.append("CASCADE")
        if node.as_principal is not None:
            parts.append("AS " + quote_part(node.as_principal))
        return " ".join(parts)

    def visit_Dbcc(self, node) -> str:
        text = "DBCC " + node.command
        if node.parenthesized:
            text += "(" + self.join(node.arguments) + ")"
        return text + self._with_options(node.options)

    # Principals

    def visit_PrincipalSource(self, node) -> str:
        text = f"{node.keyword} {node.kind}"
        if node.name is not None:
            text += " " + quote_part(node.name)
        return text

    def visit_PrincipalOption(self, node) -> str:
        return self.visit(node.option) + "".join(" " + self.visit(m) for m in node.modifiers)

    def visit_CreatePrincipal(self, node) -> str:
        text = f"CREATE {node.kind.value} {quote_part(node.name)}"
        if node.source is not None:
            text += " " + self.visit(node.source)
        if node.authorization is not None:
            text += " AUTHORIZATION " + quote_part(node.authorization)
        return text + self._with_options(node.options)

    def visit_AlterPrincipal(self, node) -> str:
        text = f"ALTER {node.kind.value} {quote_part(node.name)}"
        if node.action is not None:
            text += " " + node.action
        if node.member is not None:
            text += " " + quote_part(node.member)
        return text + self._with_options(node.options)

    # Server administration

    def visit_DatabaseFile(self, node) -> str:
        return self.options(node.options)

    def visit_AlterDatabase(self, node) -> str:
        text = f"ALTER DATABASE {quote_part(node.database)} {node.action}"
        if node.action == "SET":
            text += " " + self.join(node.options)
            if node.termination is not None:
                text += " WITH " + node.termination
        elif node.action == "MODIFY NAME":
            text += " = " + self.visit(node.target)
        elif node.filegroup is not None and node.action.endswith("FILEGROUP"):
            text += " " + quote_part(node.filegroup)
            if node.filegroup_property is not None:
                text += " " + self.visit(node.filegroup_property)
        elif node.files:
            text += " " + self.join(node.files)
            if node.filegroup is not None:
                text += " TO FILEGROUP " + quote_part(node.filegroup)
        elif node.target is not None:
            text += " " + self.visit(node.target)
        return text

    def visit_Reconfigure(self, node) -> str:
        return "RECONFIGURE WITH OVERRIDE" if node.override else "RECONFIGURE"

    def visit_Checkpoint(self, node) -> str:
        if node.duration is None:
            return "CHECKPOINT"
        return "CHECKPOINT " + self.visit(node.duration)

    def visit_EnableTrigger(self, node) -> str:
        text = "ENABLE TRIGGER " if node.enable else "DISABLE TRIGGER "
        text += self.join(node.triggers) if node.triggers else "ALL"
        if node.on_scope is not None:
            return text + " ON " + node.on_scope
        return text + " ON " + self.visit(node.on_target)

    # Service Broker

    def visit_BeginDialog(self, node) -> str:
        text = (
            f"BEGIN DIALOG CONVERSATION {self.visit(node.handle)}"
            f" FROM SERVICE {self.visit(node.from_service)} TO SERVICE {self.visit(node.to_service)}"
        )
        if node.broker_instance is not None:
            text += ", " + self.visit(node.broker_instance)
        if node.contract is not None:
            text += " ON CONTRACT " + self.visit(node.contract)
        return text + self._with_options(node.options)

    def visit_SendOnConversation(self, node) -> str:
        if len(node.conversations) == 1:
            text = "SEND ON CONVERSATION " + self.visit(node.conversations[0])
        else:
            text = f"SEND ON CONVERSATION ({self.join(node.conversations)})"
        if node.message_type is not None:
            text += " MESSAGE TYPE " + self.visit(node.message_type)
        if node.body is not None:
            text += f" ({self.visit(node.body)})"
        return text

    def visit_Receive(self, node) -> str:
        text = "RECEIVE "
        if node.top is not None:
            text += self.visit(node.top) + " "
        text += self.join(node.items) + " FROM " + self.visit(node.queue)
        if node.into is not None:
            text += " INTO " + self.visit(node.into)
        if node.where is not None:
            text += " WHERE " + self.visit(node.where)
        return text

    def visit_GetConversationGroup(self, node) -> str:
        return f"GET CONVERSATION GROUP {self.visit(node.variable)} FROM {self.visit(node.queue)}"

    def visit_EndConversation(self, node) -> str:
        text = "END CONVERSATION " + self.visit(node.conversation)
        if node.error is not None:
            text += f" WITH ERROR = {self.visit(node.error)} DESCRIPTION = {self.visit(node.description)}"
        elif node.cleanup:
            text += " WITH CLEANUP"
        return text

    def visit_Unrecognized(self, node) -> str:
        return node.text


def to_sql(node: Node) -> str:
    """
    Render a node as T-SQL text.

    Statements are returned without their terminator; scripts and batches
    include terminators and ``GO`` lines.
    """
    return SqlPrinter().visit(node)


__all__ = ["SqlPrinter", "quote_part", "quote_string", "to_sql"]
