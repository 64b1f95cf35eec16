from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any, TypeAlias

from templatevisitor.syntax.nodes import SyntaxNode
from templatevisitor.syntax.parser import SyntaxTree

Handler: TypeAlias = Callable[..., Any]
DispatchTable: TypeAlias = Mapping[str, Handler]


def visit(root: SyntaxTree | SyntaxNode, table: DispatchTable, *extra: Any) -> None:
    """
    Depth-first, pre-order walk over named nodes. For every node whose kind has
    an entry, ``table[node.kind](node, *extra)`` runs before the walk descends
    into that node's children.
    """
    node = root.root if isinstance(root, SyntaxTree) else root
    stack = [node]
    while stack:
        current = stack.pop()
        handler = table.get(current.kind)
        if handler is not None:
            handler(current, *extra)
        stack.extend(child for child in reversed(current.ordered) if child.named)
