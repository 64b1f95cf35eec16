"""
Serializable view of a SyntaxNode, for inspecting the shape a template
compiles to (which kinds, fields and tokens the matcher will compare).
"""

from __future__ import annotations

import msgspec
import msgspec.json

from templatevisitor.syntax.nodes import SyntaxNode


class NodeRecord(msgspec.Struct, frozen=True, omit_defaults=True):
    kind: str
    start: int
    end: int
    named: bool = True
    text: str | None = None
    tokens: tuple[str, ...] = ()
    fields: dict[str, NodeRecord | list[NodeRecord]] = msgspec.field(default_factory=dict)
    children: list[NodeRecord] = msgspec.field(default_factory=list)


def to_record(node: SyntaxNode) -> NodeRecord:
    fields: dict[str, NodeRecord | list[NodeRecord]] = {}
    for name, value in node.fields.items():
        if isinstance(value, tuple):
            fields[name] = [to_record(v) for v in value]
        else:
            fields[name] = to_record(value)
    return NodeRecord(
        kind=node.kind,
        start=int(node.span.start),
        end=int(node.span.end),
        named=node.named,
        text=node.text,
        tokens=node.tokens,
        fields=fields,
        children=[to_record(c) for c in node.children],
    )


def dump_json(node: SyntaxNode) -> bytes:
    return msgspec.json.encode(to_record(node))


def load_json(data: bytes | str) -> NodeRecord:
    return msgspec.json.decode(data, type=NodeRecord)
