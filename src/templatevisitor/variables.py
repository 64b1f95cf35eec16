from __future__ import annotations

import itertools
from collections.abc import Iterator
from dataclasses import dataclass
from enum import StrEnum
from typing import Final

from templatevisitor.syntax.nodes import SyntaxNode

__all__ = ["VariableKind", "Variable", "VariableRegistry"]

# Sessions are numbered process-wide so that placeholders of two registries
# can never spell the same identifier.
_SESSION_IDS: Final = itertools.count(1)


class VariableKind(StrEnum):
    SIMPLE = "simple"
    SPREAD = "spread"
    DECLARATION_GROUP = "declaration_group"


@dataclass(frozen=True, slots=True, eq=False)
class Variable:
    """
    A placeholder that binds to whatever occupies its position in a match.

    Identity is the object itself; ``name`` is the identifier spelled into
    template source. ``str(variable)`` is what gets interpolated, so
    ``f"{receiver}.{method}()"`` builds template source directly.
    """

    id: int
    kind: VariableKind
    name: str

    def __str__(self) -> str:
        if self.kind is VariableKind.DECLARATION_GROUP:
            # keeps the surrounding text a valid multi-declarator `var`
            return f"var {self.name}, "
        return self.name

    def __repr__(self) -> str:
        return f"Variable({self.kind.value}, {self.name!r})"

    def accepts(self, node: SyntaxNode) -> bool:
        if self.kind is VariableKind.DECLARATION_GROUP:
            return node.kind == "variable_declaration" and len(node.children) > 1
        return True


class VariableRegistry:
    """Append-only map from placeholder name to Variable for one session."""

    def __init__(self) -> None:
        self.session = next(_SESSION_IDS)
        self._counter = itertools.count()
        self._by_name: dict[str, Variable] = {}

    def new_variable(self, kind: VariableKind = VariableKind.SIMPLE) -> Variable:
        n = next(self._counter)
        variable = Variable(id=n, kind=VariableKind(kind), name=f"__tv{self.session}_{n}")
        self._by_name[variable.name] = variable
        return variable

    def lookup(self, name: str | None) -> Variable | None:
        if name is None:
            return None
        return self._by_name.get(name)

    def owns(self, variable: Variable) -> bool:
        return self._by_name.get(variable.name) is variable

    def __len__(self) -> int:
        return len(self._by_name)

    def __iter__(self) -> Iterator[Variable]:
        return iter(self._by_name.values())
