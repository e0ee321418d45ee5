"""
Tree navigation and batch scope analysis.

Provides generic traversal helpers and the per-batch name analysis that
records which variables and temporary tables a batch declares and uses.
Variables never outlive their batch, so a reference with no declaration in
the same batch is reported as unresolved.
"""

from typing import Any, Iterable, Iterator, List, Optional, Sequence, Type, TypeVar

from tsqlparser.models.base import Identifier, Node
from tsqlparser.models.ddl import CreateFunction, CreateProcedure, CreateTable
from tsqlparser.models.expressions import VariableRef
from tsqlparser.models.queries import QuerySpecification
from tsqlparser.models.script import BatchScope
from tsqlparser.models.statements import VariableDeclaration
from tsqlparser.utils.logging import get_logger

logger = get_logger(__name__)

N = TypeVar("N", bound=Node)


def walk(node: Node) -> Iterator[Node]:
    """Yield ``node`` and every descendant in pre-order."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(list(current.children())))


def find_all(node: Node, node_type: Type[N]) -> List[N]:
    """All descendants of ``node`` (itself included) that are instances of ``node_type``."""
    return [n for n in walk(node) if isinstance(n, node_type)]


def structurally_equal(left: Any, right: Any) -> bool:
    """
    Compare two trees, or two sequences of trees, ignoring source spans.

    Identifier parts compare case-insensitively and without regard to
    quoting, matching ``Node.shape()``.
    """
    return _shape(left) == _shape(right)


def _shape(value: Any) -> Any:
    if isinstance(value, Node):
        return value.shape()
    if isinstance(value, (list, tuple)):
        return tuple(_shape(item) for item in value)
    return value


class _NameSet:
    """Insertion-ordered, case-insensitive set keeping the first spelling."""

    def __init__(self):
        self._seen = {}

    def add(self, name: str) -> None:
        self._seen.setdefault(name.casefold(), name)

    def __contains__(self, name: str) -> bool:
        return name.casefold() in self._seen

    def names(self) -> tuple:
        return tuple(self._seen.values())


def _declared_names(node: Node) -> Iterable[str]:
    if isinstance(node, VariableDeclaration):
        yield node.name
    elif isinstance(node, (CreateProcedure, CreateFunction)):
        for parameter in node.parameters:
            yield parameter.name
        if isinstance(node, CreateFunction) and node.returns.variable:
            yield node.returns.variable


def _created_temp_table(node: Node) -> Optional[Identifier]:
    if isinstance(node, CreateTable) and node.name.is_temporary:
        return node.name
    if isinstance(node, QuerySpecification) and node.into is not None and node.into.is_temporary:
        return node.into
    return None


def analyze_scope(statements: Sequence[Node]) -> BatchScope:
    """
    Collect the names declared and referenced by the statements of one batch.

    Parameters of CREATE PROCEDURE / CREATE FUNCTION and the return table
    variable of a multi-statement function count as declarations. A
    reference is unresolved when no declaration with the same
    case-insensitive name exists anywhere in the batch.
    """
    declared = _NameSet()
    referenced = _NameSet()
    created = _NameSet()
    temp_referenced = _NameSet()
    creation_sites = set()

    for statement in statements:
        for node in walk(statement):
            for name in _declared_names(node):
                declared.add(name)
            if isinstance(node, VariableRef):
                referenced.add(node.name)
            table = _created_temp_table(node)
            if table is not None:
                created.add(table.name)
                creation_sites.add(id(table))
            elif isinstance(node, Identifier) and node.is_temporary and id(node) not in creation_sites:
                temp_referenced.add(node.name)

    unresolved = tuple(name for name in referenced.names() if name not in declared)
    if unresolved:
        logger.debug("Unresolved variables in batch", extra={"variables": list(unresolved)})

    return BatchScope(
        declared_variables=declared.names(),
        referenced_variables=referenced.names(),
        unresolved_variables=unresolved,
        created_temp_tables=created.names(),
        referenced_temp_tables=temp_referenced.names(),
    )


__all__ = ["analyze_scope", "find_all", "structurally_equal", "walk"]
