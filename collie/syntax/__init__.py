"""
Collie template syntax: diagnostics, tree model, parser and printer.
"""

from .diagnostics import Diagnostic, DiagnosticCode, SourcePos, SourceSpan, create_span
from .nodes import (
    ClassAlias,
    ClassAliasesDecl,
    ConditionalBranch,
    ConditionalNode,
    ElementNode,
    ExpressionNode,
    ForLoopNode,
    Node,
    PropsDecl,
    PropsField,
    RootNode,
    TextChunk,
    TextExpr,
    TextNode,
)
from .parser import ParseResult, parse
from .printer import print_root

__all__ = [
    "Diagnostic", "DiagnosticCode", "SourcePos", "SourceSpan", "create_span",
    "ClassAlias", "ClassAliasesDecl", "ConditionalBranch", "ConditionalNode",
    "ElementNode", "ExpressionNode", "ForLoopNode", "Node", "PropsDecl",
    "PropsField", "RootNode", "TextChunk", "TextExpr", "TextNode",
    "ParseResult", "parse", "print_root",
]
