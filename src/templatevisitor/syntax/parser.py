"""
Tree-sitter based JavaScript parsing.

The tree-sitter CST is converted into immutable SyntaxNodes shaped for
structural matching: comments are dropped, parentheses around an expression
are not a node of their own, and layout punctuation is not kept.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import cache
from types import MappingProxyType
from typing import Final

from tree_sitter import Language, Node, Parser

from templatevisitor.errors import ParseError
from templatevisitor.options import ParserOptions
from templatevisitor.reporting.diagnostics import Diagnostic
from templatevisitor.source import Source, SourceSpan
from templatevisitor.syntax.editions import check_syntax_level
from templatevisitor.syntax.nodes import HOLE_KIND, REPEATED_FIELDS, SyntaxNode

__all__ = ["SyntaxTree", "javascript_language", "parse"]

_SKIPPED_KINDS: Final = frozenset({"comment", "html_comment"})

# Anonymous tokens that only delimit structure. Keywords, modifiers and string
# quotes ("var", "async", "static", "get", "*", "'", ...) are kept as node tokens.
_PUNCTUATION: Final = frozenset({
    ",", ";", "(", ")", "[", "]", "{", "}", ".", ":", "=", "=>",
    "`", "${", "/",
})

# Kinds whose elided elements (`[a, , b]`) keep a place in ``children``.
_HOLEY_KINDS: Final = frozenset({"array", "array_pattern"})


@dataclass(frozen=True, slots=True)
class SyntaxTree:
    source: Source
    root: SyntaxNode
    options: ParserOptions

    @property
    def statements(self) -> tuple[SyntaxNode, ...]:
        return self.root.children


@cache
def javascript_language() -> Language:
    import tree_sitter_javascript as tsjs
    return Language(tsjs.language())


@cache
def _parser() -> Parser:
    return Parser(javascript_language())


def parse(source: Source | str, options: ParserOptions | None = None) -> SyntaxTree:
    """Parse JavaScript source, raising ParseError on any syntax error."""
    if isinstance(source, str):
        source = Source.from_string(source)
    options = options or ParserOptions()

    ts_root = _parser().parse(source.encoded).root_node
    if ts_root.has_error:
        raise ParseError(_error_diagnostic(source, ts_root))

    root = _Converter(source).convert(ts_root)
    check_syntax_level(source, root, options)
    return SyntaxTree(source=source, root=root, options=options)


# ────────────────────────── Syntax errors ──────────────────────────


def _first_error(node: Node) -> Node | None:
    if node.type == "ERROR" or node.is_missing:
        return node
    for child in node.children:
        if child.has_error or child.is_missing:
            found = _first_error(child)
            if found is not None:
                return found
    return None


def _error_diagnostic(source: Source, root: Node) -> Diagnostic:
    node = _first_error(root) or root
    span = source.span_of_bytes(node.start_byte, node.end_byte)
    if node.is_missing:
        message = f"missing {node.type!r}"
    else:
        snippet = source.slice(span)
        if not snippet.strip():
            message = "unexpected end of input"
        else:
            if len(snippet) > 24:
                snippet = snippet[:21] + "..."
            message = f"unexpected {snippet!r}"
    return Diagnostic.error(message, source, span, code="syntax")


# ────────────────────────── CST conversion ──────────────────────────


class _Converter:
    def __init__(self, source: Source):
        self._source = source
        self._data = source.encoded

    def _text(self, node: Node) -> str:
        return self._data[node.start_byte:node.end_byte].decode("utf-8")

    def _hole(self, comma: Node) -> SyntaxNode:
        at = self._source.byte_to_char(comma.start_byte)
        return SyntaxNode(kind=HOLE_KIND, span=SourceSpan.from_ints(at, at), text="")

    def convert(self, node: Node) -> SyntaxNode:
        if node.type == "parenthesized_expression":
            inner = [c for c in node.named_children if c.type not in _SKIPPED_KINDS]
            if len(inner) == 1:
                return self.convert(inner[0])

        span = self._source.span_of_bytes(node.start_byte, node.end_byte)
        if node.child_count == 0:
            return SyntaxNode(kind=node.type, span=span, text=self._text(node), named=node.is_named)

        grouped: dict[str, list[SyntaxNode]] = {}
        children: list[SyntaxNode] = []
        tokens: list[str] = []
        ordered: list[SyntaxNode] = []
        holey = node.type in _HOLEY_KINDS
        slot_open = True  # no element seen since `[` or the last comma

        cursor = node.walk()
        more = cursor.goto_first_child()
        while more:
            child = cursor.node
            field_name = cursor.field_name
            if child is not None and child.type not in _SKIPPED_KINDS:
                if field_name is not None:
                    converted = self.convert(child)
                    grouped.setdefault(field_name, []).append(converted)
                    if converted.named:
                        ordered.append(converted)
                elif child.is_named:
                    converted = self.convert(child)
                    children.append(converted)
                    ordered.append(converted)
                    slot_open = False
                elif holey and child.type == ",":
                    if slot_open:
                        children.append(self._hole(child))
                    slot_open = True
                elif child.type not in _PUNCTUATION:
                    tokens.append(child.type)
            more = cursor.goto_next_sibling()

        fields: dict[str, SyntaxNode | tuple[SyntaxNode, ...]] = {
            name: values[0] if len(values) == 1 else tuple(values)
            for name, values in grouped.items()
        }
        for name in REPEATED_FIELDS.get(node.type, ()):
            fields[name] = tuple(grouped.get(name, ()))
        return SyntaxNode(
            kind=node.type,
            span=span,
            fields=MappingProxyType(fields),
            children=tuple(children),
            tokens=tuple(tokens),
            named=node.is_named,
            ordered=tuple(ordered),
        )
