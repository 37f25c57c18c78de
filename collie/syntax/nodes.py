"""
Collie template syntax tree.

The parser is the only writer of these nodes; once `parse()` returns,
the tree is treated as read-only. Spans are excluded from equality so that
two trees parsed from differently laid out sources compare structurally.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Literal, Optional, Union

from .diagnostics import SourceSpan


TextPlacement = Literal["inline", "block"]


@dataclass
class TextChunk:
    value: str
    type: Literal["text"] = field(default="text", init=False)


@dataclass
class TextExpr:
    value: str
    span: Optional[SourceSpan] = field(default=None, compare=False)
    type: Literal["expr"] = field(default="expr", init=False)


TextPart = Union[TextChunk, TextExpr]


@dataclass
class ElementNode:
    name: str
    classes: List[str] = field(default_factory=list)
    children: List["Node"] = field(default_factory=list)
    span: Optional[SourceSpan] = field(default=None, compare=False)
    type: Literal["Element"] = field(default="Element", init=False)


@dataclass
class TextNode:
    """
    A `|` text line, either on its own line (block) or after a selector
    or conditional header (inline).
    """
    parts: List[TextPart] = field(default_factory=list)
    placement: TextPlacement = "block"
    span: Optional[SourceSpan] = field(default=None, compare=False)
    type: Literal["Text"] = field(default="Text", init=False)


@dataclass
class ExpressionNode:
    value: str
    span: Optional[SourceSpan] = field(default=None, compare=False)
    type: Literal["Expression"] = field(default="Expression", init=False)


@dataclass
class ConditionalBranch:
    """`test` is None only for the trailing `@else` branch."""
    test: Optional[str] = None
    body: List["Node"] = field(default_factory=list)
    span: Optional[SourceSpan] = field(default=None, compare=False)


@dataclass
class ConditionalNode:
    branches: List[ConditionalBranch] = field(default_factory=list)
    span: Optional[SourceSpan] = field(default=None, compare=False)
    type: Literal["Conditional"] = field(default="Conditional", init=False)


@dataclass
class ForLoopNode:
    variable: str
    iterable: str
    body: List["Node"] = field(default_factory=list)
    span: Optional[SourceSpan] = field(default=None, compare=False)
    type: Literal["ForLoop"] = field(default="ForLoop", init=False)


Node = Union[ElementNode, TextNode, ExpressionNode, ConditionalNode, ForLoopNode]


@dataclass
class PropsField:
    name: str
    optional: bool
    type_text: str
    span: Optional[SourceSpan] = field(default=None, compare=False)


@dataclass
class PropsDecl:
    fields: List[PropsField] = field(default_factory=list)
    span: Optional[SourceSpan] = field(default=None, compare=False)


@dataclass
class ClassAlias:
    name: str
    classes: List[str] = field(default_factory=list)
    span: Optional[SourceSpan] = field(default=None, compare=False)
    name_span: Optional[SourceSpan] = field(default=None, compare=False)


@dataclass
class ClassAliasesDecl:
    aliases: List[ClassAlias] = field(default_factory=list)
    span: Optional[SourceSpan] = field(default=None, compare=False)


@dataclass
class RootNode:
    children: List[Node] = field(default_factory=list)
    props: Optional[PropsDecl] = None
    class_aliases: Optional[ClassAliasesDecl] = None
    id: Optional[str] = None
    raw_id: Optional[str] = None
    id_span: Optional[SourceSpan] = field(default=None, compare=False)
    span: Optional[SourceSpan] = field(default=None, compare=False)
    type: Literal["Root"] = field(default="Root", init=False)


__all__ = [
    "TextPlacement",
    "TextChunk",
    "TextExpr",
    "TextPart",
    "ElementNode",
    "TextNode",
    "ExpressionNode",
    "ConditionalBranch",
    "ConditionalNode",
    "ForLoopNode",
    "Node",
    "PropsField",
    "PropsDecl",
    "ClassAlias",
    "ClassAliasesDecl",
    "RootNode",
]
