"""
Grammar-edition enforcement.

tree-sitter's JavaScript grammar always accepts the newest syntax, so the
configured ``ecma_version`` is applied after parsing: every node is checked
against a table of language features and the edition that introduced them.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from templatevisitor.errors import ParseError
from templatevisitor.options import ParserOptions
from templatevisitor.reporting.diagnostics import Diagnostic
from templatevisitor.source import Source
from templatevisitor.syntax.nodes import SyntaxNode, walk

__all__ = ["Feature", "FEATURES", "first_violation", "check_syntax_level"]

Predicate = Callable[[SyntaxNode, SyntaxNode | None], bool]


@dataclass(frozen=True, slots=True)
class Feature:
    name: str
    edition: int
    applies: Predicate


def _operator(node: SyntaxNode) -> str | None:
    op = node.fields.get("operator")
    return op.text if isinstance(op, SyntaxNode) else None


def _number_text(node: SyntaxNode) -> str:
    if node.kind != "number" or node.text is None:
        return ""
    return node.text


FEATURES: tuple[Feature, ...] = (
    Feature("exponentiation operator", 2016, lambda n, p: _operator(n) in {"**", "**="}),
    Feature("async functions", 2017, lambda n, p: "async" in n.tokens),
    Feature("await expressions", 2017, lambda n, p: n.kind == "await_expression"),
    Feature(
        "object rest/spread properties",
        2018,
        lambda n, p: p is not None
        and (n.kind, p.kind) in {("spread_element", "object"), ("rest_pattern", "object_pattern")},
    ),
    Feature(
        "asynchronous iteration",
        2018,
        lambda n, p: n.kind == "for_in_statement" and "await" in n.tokens,
    ),
    Feature(
        "optional catch binding",
        2019,
        lambda n, p: n.kind == "catch_clause" and "parameter" not in n.fields,
    ),
    Feature("optional chaining", 2020, lambda n, p: n.kind == "optional_chain" or "?." in n.tokens),
    Feature("nullish coalescing", 2020, lambda n, p: _operator(n) == "??"),
    Feature("BigInt literals", 2020, lambda n, p: _number_text(n).endswith("n")),
    Feature("dynamic import", 2020, lambda n, p: n.kind == "import"),
    Feature("logical assignment", 2021, lambda n, p: _operator(n) in {"&&=", "||=", "??="}),
    Feature("numeric separators", 2021, lambda n, p: "_" in _number_text(n)),
    Feature("class fields", 2022, lambda n, p: n.kind == "field_definition"),
    Feature("private class members", 2022, lambda n, p: n.kind == "private_property_identifier"),
    Feature("class static blocks", 2022, lambda n, p: n.kind == "class_static_block"),
    Feature("hashbang comments", 2023, lambda n, p: n.kind == "hash_bang_line"),
)

_MODULE_ONLY = frozenset({"import_statement", "export_statement"})


def first_violation(root: SyntaxNode, options: ParserOptions) -> tuple[SyntaxNode, str, str] | None:
    """First node (pre-order) not allowed by ``options``, with a code and a message."""
    active = [f for f in FEATURES if f.edition > options.ecma_version]
    for node, parent in walk(root):
        if not options.is_module and node.kind in _MODULE_ONLY:
            return node, "source-type", "'import' and 'export' may appear only with source_type 'module'"
        for feature in active:
            if feature.applies(node, parent):
                return (
                    node,
                    "edition",
                    f"{feature.name} require ecma_version {feature.edition} "
                    f"(configured: {options.ecma_version})",
                )
    return None


def check_syntax_level(source: Source, root: SyntaxNode, options: ParserOptions) -> None:
    found = first_violation(root, options)
    if found is None:
        return
    node, code, message = found
    raise ParseError(
        Diagnostic.error(
            message,
            source,
            node.span,
            code=code,
            hint="raise ecma_version in ParserOptions" if code == "edition" else None,
        )
    )
