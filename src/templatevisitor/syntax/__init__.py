"""
templatevisitor.syntax
======================

JavaScript parsing (tree-sitter), the SyntaxNode model and the traversal glue.
"""

from templatevisitor.syntax.nodes import IDENTIFIER_KINDS, SyntaxNode, walk
from templatevisitor.syntax.parser import SyntaxTree, parse
from templatevisitor.syntax.traverse import DispatchTable, Handler, visit

__all__ = [
    "IDENTIFIER_KINDS",
    "DispatchTable",
    "Handler",
    "SyntaxNode",
    "SyntaxTree",
    "parse",
    "visit",
    "walk",
]
