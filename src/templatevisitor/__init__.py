"""
templatevisitor
===============

Describe a shape of JavaScript syntax as ordinary code with placeholder
variables, then match concrete syntax nodes against it while walking a tree.
"""

from templatevisitor.context import Binding, MatchContext
from templatevisitor.equality import nodes_equal
from templatevisitor.errors import (
    ForeignVariableError,
    ParseError,
    ReentrantMatchError,
    SpreadPositionError,
    TemplateSyntaxError,
    TVException,
)
from templatevisitor.manager import TemplateManager, template_visitor
from templatevisitor.options import ParserOptions, SourceType
from templatevisitor.source import Source, SourceSpan
from templatevisitor.syntax import SyntaxNode, SyntaxTree, parse, visit
from templatevisitor.template import Template
from templatevisitor.variables import Variable, VariableKind
from templatevisitor.visitor import compile_visitor

__all__ = [
    "Binding",
    "ForeignVariableError",
    "MatchContext",
    "ParseError",
    "ParserOptions",
    "ReentrantMatchError",
    "Source",
    "SourceSpan",
    "SourceType",
    "SpreadPositionError",
    "SyntaxNode",
    "SyntaxTree",
    "TVException",
    "Template",
    "TemplateManager",
    "TemplateSyntaxError",
    "Variable",
    "VariableKind",
    "compile_visitor",
    "nodes_equal",
    "parse",
    "template_visitor",
    "visit",
]
