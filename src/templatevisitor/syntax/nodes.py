"""
Immutable syntax tree used by templates, the matcher and the traversal glue.

Every node exposes the same two kinds of keys:

- leaf keys, compared by value: ``kind`` (identifier-like kinds folded into
  one), ``named``, ``text`` (leaves only) and ``tokens`` (keywords, modifiers
  and string quotes such as ``var``, ``async``, ``static``, ``'``);
- child-node keys, compared recursively: each entry of ``fields`` and the
  ``children`` array.

Source positions (``span``) take part in neither.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from typing import Final, TypeAlias

from templatevisitor.source import SourceSpan

FieldValue: TypeAlias = "SyntaxNode | tuple[SyntaxNode, ...]"
LeafKey: TypeAlias = tuple[str, bool, str | None, tuple[str, ...]]

# Name of the array-valued child position in match keys and dumps.
CHILDREN_KEY: Final = "children"

IDENTIFIER_KINDS: Final = frozenset({
    "identifier",
    "property_identifier",
    "shorthand_property_identifier",
    "shorthand_property_identifier_pattern",
    "statement_identifier",
})

# Identifier positions that also stand for a whole `{ a }` shorthand property.
SHORTHAND_KINDS: Final = frozenset({
    "shorthand_property_identifier",
    "shorthand_property_identifier_pattern",
})

# Kinds whose ``children`` tuple is a list position (statements, arguments,
# elements, parameters, declarators, ...). Other kinds keep unfielded children
# too, e.g. the expression of an expression statement or a return, but those
# are single slots.
LIST_KINDS: Final = frozenset({
    "program",
    "statement_block",
    "class_body",
    "switch_body",
    "arguments",
    "formal_parameters",
    "array",
    "array_pattern",
    "object",
    "object_pattern",
    "variable_declaration",
    "lexical_declaration",
    "sequence_expression",
    "named_imports",
    "export_clause",
})

# Fields that repeat: always stored as a tuple, empty when absent, so their
# shape does not depend on how many elements they hold.
REPEATED_FIELDS: Final[Mapping[str, frozenset[str]]] = {
    "switch_case": frozenset({"body"}),
    "switch_default": frozenset({"body"}),
    "class_body": frozenset({"member"}),
    "class": frozenset({"decorator"}),
    "class_declaration": frozenset({"decorator"}),
    "method_definition": frozenset({"decorator"}),
    "field_definition": frozenset({"decorator"}),
    "export_statement": frozenset({"decorator"}),
}

# Placeholder kind for an elided array element, as in `[a, , b]`.
HOLE_KIND: Final = "array_hole"


@dataclass(frozen=True, slots=True, eq=False)
class SyntaxNode:
    kind: str
    span: SourceSpan
    fields: Mapping[str, FieldValue] = field(default_factory=dict)
    children: tuple[SyntaxNode, ...] = ()
    tokens: tuple[str, ...] = ()
    text: str | None = None
    named: bool = True
    ordered: tuple[SyntaxNode, ...] = field(default=(), repr=False)

    @property
    def is_leaf(self) -> bool:
        return self.text is not None

    @property
    def is_identifier(self) -> bool:
        return self.kind in IDENTIFIER_KINDS

    def get(self, key: str) -> FieldValue | None:
        if key == CHILDREN_KEY:
            return self.children
        return self.fields.get(key)

    def __repr__(self) -> str:
        if self.text is not None:
            return f"SyntaxNode({self.kind} {self.text!r} @{int(self.span.start)})"
        return f"SyntaxNode({self.kind} @{int(self.span.start)}:{int(self.span.end)})"


def canonical_kind(kind: str) -> str:
    """Identifier-like kinds compare as one kind: a name is a name wherever it sits."""
    return "identifier" if kind in IDENTIFIER_KINDS else kind


def leaf_key(node: SyntaxNode) -> LeafKey:
    return (canonical_kind(node.kind), node.named, node.text, node.tokens)


def list_positions(node: SyntaxNode) -> Iterator[tuple[SyntaxNode, ...]]:
    """Every list-valued child position of ``node``: spread variables live here."""
    if node.kind in LIST_KINDS:
        yield node.children
    for value in node.fields.values():
        if isinstance(value, tuple):
            yield value


def field_keys(a: SyntaxNode, b: SyntaxNode) -> list[str]:
    """Union of the field names of two nodes, ``a``'s first.

    Iterating the union (not only ``a``'s keys) is what makes an absent
    optional part differ from a present one, e.g. ``/x/`` against ``/x/g``.
    """
    keys = list(a.fields)
    keys.extend(k for k in b.fields if k not in a.fields)
    return keys


def walk(root: SyntaxNode) -> Iterator[tuple[SyntaxNode, SyntaxNode | None]]:
    """Pre-order (node, parent) pairs over named nodes."""
    stack: list[tuple[SyntaxNode, SyntaxNode | None]] = [(root, None)]
    while stack:
        node, parent = stack.pop()
        yield node, parent
        stack.extend((child, node) for child in reversed(node.ordered) if child.named)


def first_declarator_name(node: SyntaxNode) -> SyntaxNode | None:
    if node.kind != "variable_declaration" or not node.children:
        return None
    name = node.children[0].fields.get("name")
    return name if isinstance(name, SyntaxNode) else None
