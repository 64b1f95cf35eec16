"""
Structural matching of a compiled template pattern against a concrete node.

The walk is depth-first over the pattern and commits eagerly: the first
inconsistency anywhere fails the whole attempt, and no alternative binding is
ever retried. Failure is a plain ``False``; bindings pushed before a failure
are left in the context, which the caller discards.
"""

from __future__ import annotations

from templatevisitor.context import MatchContext
from templatevisitor.equality import nodes_equal, sequences_equal
from templatevisitor.syntax.nodes import (
    LIST_KINDS,
    SHORTHAND_KINDS,
    FieldValue,
    SyntaxNode,
    field_keys,
    first_declarator_name,
    leaf_key,
)
from templatevisitor.variables import Variable, VariableKind, VariableRegistry


class Matcher:
    def __init__(self, registry: VariableRegistry):
        self.registry = registry

    # ----- variable positions -----

    def variable_at(self, pattern: SyntaxNode) -> Variable | None:
        """The simple or declaration-group variable the pattern node stands for, if any."""
        if pattern.is_identifier:
            variable = self.registry.lookup(pattern.text)
            if variable is not None and variable.kind is VariableKind.SIMPLE:
                return variable
            return None
        variable = self.registry.lookup(_declarator_text(pattern))
        if variable is not None and variable.kind is VariableKind.DECLARATION_GROUP:
            return variable
        return None

    def spread_at(self, pattern: SyntaxNode) -> Variable | None:
        if pattern.kind == "expression_statement" and len(pattern.children) == 1:
            pattern = pattern.children[0]
        if not pattern.is_identifier:
            return None
        variable = self.registry.lookup(pattern.text)
        if variable is not None and variable.kind is VariableKind.SPREAD:
            return variable
        return None

    # ----- matching -----

    def matches(self, pattern: SyntaxNode | None, node: SyntaxNode | None, context: MatchContext) -> bool:
        if pattern is None or node is None:
            return pattern is node

        variable = self.variable_at(pattern)
        if variable is not None:
            return self._bind(variable, pattern, node, context)

        if leaf_key(pattern) != leaf_key(node):
            return False
        listed = pattern.kind in LIST_KINDS
        if not self._array_matches(pattern.children, node.children, context, spread=listed):
            return False
        return all(
            self._value_matches(pattern.fields.get(key), node.fields.get(key), context)
            for key in field_keys(pattern, node)
        )

    def _bind(self, variable: Variable, pattern: SyntaxNode, node: SyntaxNode, context: MatchContext) -> bool:
        if not variable.accepts(node):
            return False
        # `{ x }` in a pattern stands for a shorthand property, never for a `key: value` pair
        if pattern.kind in SHORTHAND_KINDS and node.kind != pattern.kind:
            return False
        # unification: every occurrence must bind a structurally equal subtree
        if all(nodes_equal(prev, node) for prev in context.get_matches(variable)):  # type: ignore[arg-type]
            context.push(variable, node)
            return True
        return False

    def _value_matches(self, pattern: FieldValue | None, value: FieldValue | None, context: MatchContext) -> bool:
        if isinstance(pattern, tuple):
            if not isinstance(value, tuple):
                return False
            return self._array_matches(pattern, value, context, spread=True)
        if isinstance(value, tuple):
            return False
        return self.matches(pattern, value, context)

    def _array_matches(
        self,
        patterns: tuple[SyntaxNode, ...],
        nodes: tuple[SyntaxNode, ...],
        context: MatchContext,
        *,
        spread: bool,
    ) -> bool:
        if spread and len(patterns) == 1:
            variable = self.spread_at(patterns[0])
            if variable is not None:
                return self._spread_matches(variable, nodes, context)

        return len(patterns) == len(nodes) and all(
            self.matches(p, n, context) for p, n in zip(patterns, nodes)
        )

    def _spread_matches(self, variable: Variable, nodes: tuple[SyntaxNode, ...], context: MatchContext) -> bool:
        previous = context.get_matches(variable)
        if all(sequences_equal(prev, nodes) for prev in previous):  # type: ignore[arg-type]
            context.push(variable, nodes)
            return True
        return False


def _declarator_text(pattern: SyntaxNode) -> str | None:
    name = first_declarator_name(pattern)
    if name is None or len(pattern.children) < 2:
        return None
    return name.text
