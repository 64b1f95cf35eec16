from __future__ import annotations

from collections.abc import Sequence

from templatevisitor.syntax.nodes import FieldValue, SyntaxNode, field_keys, leaf_key


def nodes_equal(a: SyntaxNode | None, b: SyntaxNode | None) -> bool:
    """
    Structural equality: same leaf keys and recursively equal child positions.
    Spans are ignored; kinds, tokens and literal text are not.

    Literals compare by their raw source text, never by value: ``0x10`` and
    ``16`` differ, and so do ``'a'`` and ``"a"`` since string quotes are kept
    as tokens. Identifier-like kinds count as one kind, so ``foo`` the
    variable equals ``foo`` the property name.
    """
    if a is None or b is None:
        return a is b
    if leaf_key(a) != leaf_key(b):
        return False
    if not sequences_equal(a.children, b.children):
        return False
    return all(_values_equal(a.fields.get(k), b.fields.get(k)) for k in field_keys(a, b))


def sequences_equal(xs: Sequence[SyntaxNode], ys: Sequence[SyntaxNode]) -> bool:
    return len(xs) == len(ys) and all(nodes_equal(x, y) for x, y in zip(xs, ys))


def _values_equal(x: FieldValue | None, y: FieldValue | None) -> bool:
    if isinstance(x, tuple) or isinstance(y, tuple):
        return isinstance(x, tuple) and isinstance(y, tuple) and sequences_equal(x, y)
    return nodes_equal(x, y)
