"""
templatevisitor.manager
=======================

One authoring session: a variable registry, the parser options every
template is compiled with, and the templates built so far.

Example:
    templates = TemplateManager()
    a = templates.variable()
    remove_child = templates.template(f"{a}.parentNode.removeChild({a})")

    def report(node):
        target = remove_child.context.get_match(a)
        ...

    visit(templates.parse(code), templates.visitor({remove_child: report}))
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from templatevisitor.options import ParserOptions
from templatevisitor.source import Source
from templatevisitor.syntax.parser import SyntaxTree, parse
from templatevisitor.syntax.traverse import Handler
from templatevisitor.template import Template, TemplatePart, compile_template
from templatevisitor.variables import Variable, VariableKind, VariableRegistry
from templatevisitor.visitor import VisitorMap, compile_visitor


class TemplateManager:
    def __init__(self, options: ParserOptions | Mapping[str, Any] | None = None):
        if options is None or isinstance(options, ParserOptions):
            self.options = options or ParserOptions()
        else:
            self.options = ParserOptions.from_mapping(options)
        self.registry = VariableRegistry()
        self.templates: dict[int, Template] = {}

    def variable(self) -> Variable:
        """Placeholder matching any single node."""
        return self.registry.new_variable(VariableKind.SIMPLE)

    def spread_variable(self) -> Variable:
        """Placeholder capturing a whole list position: arguments, elements, statements."""
        return self.registry.new_variable(VariableKind.SPREAD)

    def declaration_group(self) -> Variable:
        """Placeholder matching a `var` declaration with more than one declarator.

        It interpolates as ``var <name>, `` so the template text stays valid,
        e.g. ``templates.template(f"{group}rest")``.
        """
        return self.registry.new_variable(VariableKind.DECLARATION_GROUP)

    def template(self, *parts: TemplatePart) -> Template:
        """Compile a template from one string or from fragments interleaved with variables."""
        template = compile_template(parts, self.registry, self.options)
        self.templates[template.id] = template
        return template

    def visitor(self, visitor: VisitorMap) -> dict[str, Handler]:
        return compile_visitor(visitor)

    def parse(self, source: Source | str) -> SyntaxTree:
        """Parse program source with this session's options."""
        return parse(source, self.options)


def template_visitor(options: ParserOptions | Mapping[str, Any] | None = None) -> TemplateManager:
    return TemplateManager(options)
