from __future__ import annotations

from collections.abc import Iterator
from typing import TypeAlias

from templatevisitor.syntax.nodes import SyntaxNode
from templatevisitor.variables import Variable

# A single node for simple and declaration-group variables, the whole
# captured array for spread variables.
Binding: TypeAlias = SyntaxNode | tuple[SyntaxNode, ...]


class MatchContext:
    """
    Bindings recorded during one match attempt: every value each variable was
    bound to, in the order the matcher met them.
    """

    __slots__ = ("_matches",)

    def __init__(self) -> None:
        self._matches: dict[Variable, list[Binding]] = {}

    def push(self, variable: Variable, value: Binding) -> None:
        self._matches.setdefault(variable, []).append(value)

    def get_matches(self, variable: Variable) -> list[Binding]:
        return list(self._matches.get(variable, ()))

    def get_match(self, variable: Variable) -> Binding | None:
        values = self._matches.get(variable)
        return values[0] if values else None

    def __getitem__(self, variable: Variable) -> Binding:
        values = self._matches.get(variable)
        if not values:
            raise KeyError(variable)
        return values[0]

    def __contains__(self, variable: object) -> bool:
        return variable in self._matches

    def __iter__(self) -> Iterator[Variable]:
        return iter(self._matches)

    def __len__(self) -> int:
        return len(self._matches)

    def __repr__(self) -> str:
        inner = ", ".join(f"{v.name}: {len(vals)}" for v, vals in self._matches.items())
        return f"MatchContext({inner})"
