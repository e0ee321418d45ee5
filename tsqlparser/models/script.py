"""Batch and script level models."""

from typing import Any, Dict, List, Optional, Tuple

from pydantic import Field

from tsqlparser.models.base import Node, Statement
from tsqlparser.models.diagnostic import Diagnostic, Severity


class GoSeparator(Node):
    """The client-side ``GO [count]`` line that closed a batch."""

    repeat_count: int = 1


class BatchScope(Node):
    """
    Names visible inside one batch.

    Variables never survive a ``GO``; ``unresolved_variables`` lists the
    references that have no declaration (or parameter) in the same batch.
    Names are kept in first-seen spelling.
    """

    declared_variables: Tuple[str, ...] = ()
    referenced_variables: Tuple[str, ...] = ()
    unresolved_variables: Tuple[str, ...] = ()
    created_temp_tables: Tuple[str, ...] = ()
    referenced_temp_tables: Tuple[str, ...] = ()

    def declares(self, name: str) -> bool:
        return name.casefold() in {v.casefold() for v in self.declared_variables}

    def shape(self) -> Any:
        return ("BatchScope",)


class Batch(Node):
    index: int
    statements: Tuple[Statement, ...] = ()
    go: Optional[GoSeparator] = None
    diagnostics: Tuple[Diagnostic, ...] = Field(default=(), repr=False)
    scope: BatchScope = Field(default_factory=BatchScope, repr=False)

    @property
    def repeat_count(self) -> int:
        return self.go.repeat_count if self.go is not None else 1

    @property
    def has_errors(self) -> bool:
        return any(d.severity == Severity.ERROR for d in self.diagnostics)

    def shape(self) -> Any:
        return (
            "Batch",
            tuple(statement.shape() for statement in self.statements),
            self.go.shape() if self.go is not None else None,
        )

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["diagnostics"] = [d.model_dump(mode="json") for d in self.diagnostics]
        return data


class Script(Node):
    """Result of parsing a whole script: ordered batches plus all diagnostics."""

    batches: Tuple[Batch, ...] = ()
    diagnostics: Tuple[Diagnostic, ...] = Field(default=(), repr=False)
    metrics: Optional[Dict[str, Any]] = Field(default=None, repr=False)

    @property
    def statements(self) -> List[Statement]:
        return [s for batch in self.batches for s in batch.statements]

    @property
    def errors(self) -> List[Diagnostic]:
        return [d for d in self.diagnostics if d.severity == Severity.ERROR]

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    def shape(self) -> Any:
        return ("Script", tuple(batch.shape() for batch in self.batches))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "node_type": self.node_type,
            "batches": [batch.to_dict() for batch in self.batches],
            "diagnostics": [d.model_dump(mode="json") for d in self.diagnostics],
            "metrics": self.metrics,
        }
