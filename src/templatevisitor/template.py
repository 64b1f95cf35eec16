from __future__ import annotations

import itertools
import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field, replace
from typing import Any, Final, TypeAlias

from templatevisitor.context import MatchContext
from templatevisitor.errors import (
    ForeignVariableError,
    ParseError,
    ReentrantMatchError,
    SpreadPositionError,
    TemplateSyntaxError,
)
from templatevisitor.matcher import Matcher
from templatevisitor.options import ParserOptions
from templatevisitor.reporting.diagnostics import Diagnostic, Related
from templatevisitor.reporting.warnings_bridge import warn_diagnostic
from templatevisitor.source import Source, SourceSpan
from templatevisitor.syntax.nodes import SyntaxNode, list_positions, walk
from templatevisitor.syntax.parser import parse
from templatevisitor.variables import Variable, VariableKind, VariableRegistry

TemplatePart: TypeAlias = str | Variable

_TEMPLATE_IDS: Final = itertools.count(1)

# Any placeholder a registry could have produced, whichever session it came from.
_PLACEHOLDER_RE: Final = re.compile(r"(?<![\w$])__tv\d+_\d+(?![\w$])")


@dataclass(eq=False, slots=True)
class Template:
    """
    A compiled pattern plus the ``context`` slot visitor handlers read their
    bindings from.

    The slot is overwritten on every dispatch and cleared to None when the
    match fails, so a handler must read it before anything dispatches the same
    template again. Dispatching a template while its own handler is still
    running raises ReentrantMatchError. ``match()`` is the slot-free
    alternative: it returns a fresh context or None.
    """

    id: int
    source: Source
    pattern: SyntaxNode
    matcher: Matcher = field(repr=False)
    variables: tuple[Variable, ...] = ()
    context: MatchContext | None = field(default=None, repr=False)
    _in_flight: bool = field(default=False, init=False, repr=False)

    @property
    def kind(self) -> str:
        """Node kind this template can match, i.e. its dispatch key."""
        return self.pattern.kind

    def match(self, node: SyntaxNode) -> MatchContext | None:
        context = MatchContext()
        if self.matcher.matches(self.pattern, node, context):
            return context
        return None

    def dispatch(self, handler: Callable[..., Any], node: SyntaxNode, *rest: Any) -> Any:
        if self._in_flight:
            raise ReentrantMatchError(
                f"template #{self.id} ({self.source.contents!r}) was dispatched again "
                "while its handler was still running"
            )
        self._in_flight = True
        try:
            self.context = MatchContext()
            if self.matcher.matches(self.pattern, node, self.context):
                return handler(node, *rest)
            self.context = None
            return None
        finally:
            self._in_flight = False

    def __str__(self) -> str:
        return f"template#{self.id}"


def compose_source(parts: Sequence[TemplatePart]) -> str:
    for part in parts:
        if not isinstance(part, (str, Variable)):
            raise TypeError(f"Template parts must be str or Variable, got {type(part).__name__}")
    return "".join(str(p) for p in parts)


def compile_template(
    parts: Sequence[TemplatePart],
    registry: VariableRegistry,
    options: ParserOptions | None = None,
) -> Template:
    source = Source.from_string(compose_source(parts))
    mentioned = _mentioned_variables(source, registry)

    try:
        tree = parse(source, options)
    except ParseError as e:
        d = e.diagnostic
        raise TemplateSyntaxError(
            replace(d, code="template-syntax", notes=[*d.notes, f"parser code: {d.code}"])
        ) from e

    statements = tree.statements
    if not statements:
        raise TemplateSyntaxError(
            Diagnostic.error(
                "template source contains no statement",
                source,
                source.full_span(),
                code="template-syntax",
            )
        )
    if len(statements) > 1:
        extra = SourceSpan(statements[1].span.start, statements[-1].span.end)
        warn_diagnostic(
            Diagnostic.warning(
                f"template source has {len(statements)} statements; only the first is matched",
                source,
                extra,
                code="extra-statements",
            ),
            stacklevel=4,
        )

    first = statements[0]
    # bare expressions are written as templates; the statement wrapper is never matched
    pattern = first.children[0] if first.kind == "expression_statement" and first.children else first

    matcher = Matcher(registry)
    _check_spread_positions(source, pattern, matcher)
    _warn_unbound(source, pattern, registry, mentioned)

    return Template(
        id=next(_TEMPLATE_IDS),
        source=source,
        pattern=pattern,
        matcher=matcher,
        variables=tuple(mentioned),
    )


def _mentioned_variables(source: Source, registry: VariableRegistry) -> dict[Variable, SourceSpan]:
    found: dict[Variable, SourceSpan] = {}
    for m in _PLACEHOLDER_RE.finditer(source.contents):
        variable = registry.lookup(m.group())
        if variable is None:
            raise ForeignVariableError(
                f"{m.group()!r} is not a variable of this TemplateManager "
                f"(session {registry.session}); create variables with the manager that builds the template"
            )
        found.setdefault(variable, SourceSpan.from_ints(*m.span()))
    return found


def _check_spread_positions(source: Source, pattern: SyntaxNode, matcher: Matcher) -> None:
    allowed: set[int] = set()
    for node, _ in walk(pattern):
        for array in list_positions(node):
            if len(array) == 1 and matcher.spread_at(array[0]) is not None:
                target = array[0]
                if target.kind == "expression_statement":
                    target = target.children[0]
                allowed.add(id(target))

    for node, _ in walk(pattern):
        if not node.is_identifier or id(node) in allowed:
            continue
        variable = matcher.registry.lookup(node.text)
        if variable is not None and variable.kind is VariableKind.SPREAD:
            raise SpreadPositionError(
                Diagnostic.error(
                    "spread variable must be the only element of a list position",
                    source,
                    node.span,
                    code="spread-position",
                    hint="use it alone in an argument list, array, block or parameter list",
                )
            )


def _warn_unbound(
    source: Source,
    pattern: SyntaxNode,
    registry: VariableRegistry,
    mentioned: dict[Variable, SourceSpan],
) -> None:
    bound = {
        registry.lookup(node.text)
        for node, _ in walk(pattern)
        if node.is_identifier
    }
    for variable, span in mentioned.items():
        if variable in bound:
            continue
        warn_diagnostic(
            Diagnostic.warning(
                f"variable {variable.name} never binds: it is not in an identifier position of the pattern",
                source,
                span,
                code="unbound-variable",
                related=[Related("pattern", pattern.span, source)],
            ),
            stacklevel=5,
        )
