from __future__ import annotations

from typing import Any

from templatevisitor.options import ParserOptions
from templatevisitor.syntax.nodes import SyntaxNode, walk
from templatevisitor.syntax.parser import parse

MODULE = ParserOptions(ecma_version=2018, source_type="module")


def expr(code: str, options: ParserOptions | None = None) -> SyntaxNode:
    """First statement of `code`, unwrapped from its expression statement."""
    stmt = parse(code, options).statements[0]
    if stmt.kind == "expression_statement":
        return stmt.children[0]
    return stmt


def find_all(root: SyntaxNode, kind: str) -> list[SyntaxNode]:
    return [node for node, _ in walk(root) if node.kind == kind]


class Recorder:
    """Records the positional arguments of every call."""

    def __init__(self) -> None:
        self.calls: list[tuple[Any, ...]] = []

    def __call__(self, *args: Any) -> None:
        self.calls.append(args)

    @property
    def called(self) -> bool:
        return bool(self.calls)

    @property
    def nodes(self) -> list[Any]:
        return [args[0] for args in self.calls]
