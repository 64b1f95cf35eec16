from __future__ import annotations

from collections.abc import Mapping, Sequence
from functools import partial
from typing import Any, TypeAlias

from templatevisitor.syntax.traverse import Handler
from templatevisitor.template import Template

VisitorKey: TypeAlias = Template | str
VisitorMap: TypeAlias = Mapping[VisitorKey, Handler]


def compile_visitor(visitor: VisitorMap) -> dict[str, Handler]:
    """
    Turn ``{template_or_kind: handler}`` into a dispatch table keyed by node kind.

    Template keys are filed under the kind of their pattern root and only call
    their handler when the node matches. Several entries landing on one kind
    are merged into a callback that runs all of them, in declaration order,
    with the same arguments.
    """
    grouped: dict[str, list[Handler]] = {}

    for key, handler in visitor.items():
        if isinstance(key, Template):
            kind, wrapped = key.kind, partial(key.dispatch, handler)
        elif isinstance(key, str):
            kind, wrapped = key, handler
        else:
            raise TypeError(f"Visitor keys must be Template or str, got {type(key).__name__}")
        grouped.setdefault(kind, []).append(wrapped)

    return {
        kind: handlers[0] if len(handlers) == 1 else _merge(handlers)
        for kind, handlers in grouped.items()
    }


def _merge(handlers: Sequence[Handler]) -> Handler:
    handlers = tuple(handlers)

    def run_all(*args: Any) -> None:
        for handler in handlers:
            handler(*args)

    return run_all
