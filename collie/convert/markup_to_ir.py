"""
Lowering of JSX/TSX markup trees into IR.

Expressions are kept as opaque text. The one thing opaque text cannot carry
is markup nested inside an expression (`prop={<Icon />}`, `{ok && <b/>}`):
Collie has no expression sublanguage able to hold it, so such payloads are
replaced by a placeholder comment and reported as a warning.
"""

from __future__ import annotations

import html
import re
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from tree_sitter import Node

from ..ir.nodes import (
    IrExpression,
    IrNode,
    IrPropLike,
    create_ir_element,
    create_ir_expression,
    create_ir_fragment,
    create_ir_prop,
    create_ir_text,
    split_class_name_props,
)
from .markup_parser import MarkupDocument, is_fragment, jsx_children

PLACEHOLDER_PREVIEW_LENGTH = 80

_NESTED_MARKUP_TYPES = frozenset({"jsx_element", "jsx_self_closing_element", "jsx_expression"})
_TEXT_RUN_TYPES = frozenset({"jsx_text", "html_character_reference"})
_WS = re.compile(r"\s+")


@dataclass
class MarkupConversionDiagnostics:
    warnings: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class MarkupConversionResult:
    nodes: Tuple[IrNode, ...]
    diagnostics: MarkupConversionDiagnostics


class MarkupToIrConverter:
    """
    Converts markup nodes of one parsed document into IR.

    Warnings accumulate on the instance; use one converter per conversion.
    """

    def __init__(self, document: MarkupDocument):
        self.document = document
        self.diagnostics = MarkupConversionDiagnostics()

    def convert(self, nodes: Sequence[Node]) -> MarkupConversionResult:
        return MarkupConversionResult(
            nodes=tuple(self._convert_children(nodes)),
            diagnostics=self.diagnostics,
        )

    # ------------------------------------------------------------------ #

    def _convert_children(self, nodes: Sequence[Node]) -> List[IrNode]:
        result: List[IrNode] = []
        run: List[Node] = []

        for node in nodes:
            if node.type in _TEXT_RUN_TYPES:
                run.append(node)
                continue
            self._flush_text(run, result)
            run = []
            converted = self._convert_child(node)
            if converted is not None:
                result.append(converted)

        self._flush_text(run, result)
        return result

    def _flush_text(self, run: List[Node], out: List[IrNode]) -> None:
        if not run:
            return
        raw = self.document.get_range_text(run[0], run[-1])
        text = _WS.sub(" ", html.unescape(raw)).strip()
        if text:
            out.append(create_ir_text(text))

    def _convert_child(self, node: Node) -> Optional[IrNode]:
        if node.type == "jsx_element":
            if is_fragment(node):
                return create_ir_fragment(self._convert_children(jsx_children(node)))
            opening = node.child_by_field_name("open_tag")
            return self._element(opening, self._convert_children(jsx_children(node)))

        if node.type == "jsx_self_closing_element":
            return self._element(node, [])

        if node.type == "jsx_expression":
            return self._embedded_expression(node)

        self._warn(f"Unsupported JSX node omitted: {node.type}")
        return create_ir_expression(f"/* Collie unsupported: {node.type} */")

    def _element(self, tag: Node, children: List[IrNode]) -> IrNode:
        name_node = tag.child_by_field_name("name")
        tag_name = self.document.get_node_text(name_node) if name_node is not None else ""
        props, classes = split_class_name_props(self._attributes(tag))
        return create_ir_element(tag_name, classes=classes, props=props, children=children)

    def _embedded_expression(self, node: Node) -> Optional[IrNode]:
        if not node.named_children:
            return None  # `{}`
        if self._contains_nested_markup(node):
            return self._nested_markup_placeholder(node)
        return create_ir_expression(self._expression_text(node))

    # ----------------------------- attributes ----------------------------- #

    def _attributes(self, tag: Node) -> List[IrPropLike]:
        props: List[IrPropLike] = []
        for attribute in tag.named_children:
            if attribute.type == "jsx_attribute":
                props.append(self._attribute(attribute))
            elif attribute.type == "jsx_expression":
                props.append(self._spread_attribute(attribute))
        return props

    def _attribute(self, attribute: Node) -> IrPropLike:
        named = attribute.named_children
        name = self.document.get_node_text(named[0])
        value = named[1] if len(named) > 1 else None

        if value is None:
            return create_ir_prop(name)
        if value.type in ("jsx_element", "jsx_self_closing_element"):
            return self._nested_markup_placeholder(attribute)
        if value.type == "jsx_expression":
            if not value.named_children:
                return create_ir_prop(name)
            if self._contains_nested_markup(value):
                return self._nested_markup_placeholder(attribute)
            return create_ir_prop(name, "{" + self._expression_text(value) + "}")
        return create_ir_prop(name, self.document.get_node_text(value))

    def _spread_attribute(self, node: Node) -> IrPropLike:
        inner = node.named_children
        if inner and inner[0].type == "spread_element":
            if self._contains_nested_markup(node):
                return self._nested_markup_placeholder(node)
            return create_ir_expression(self.document.get_node_text(inner[0]))
        self._warn(f"Unsupported JSX attribute omitted: {self.document.get_node_text(node)}")
        return create_ir_expression(f"/* Collie unsupported attribute: {_preview(self.document.get_node_text(node))} */")

    # ------------------------------ helpers ------------------------------ #

    def _contains_nested_markup(self, node: Node) -> bool:
        for descendant in self.document.walk_tree(node):
            if descendant != node and descendant.type in _NESTED_MARKUP_TYPES:
                return True
        return False

    def _nested_markup_placeholder(self, node: Node) -> IrExpression:
        preview = _preview(self.document.get_node_text(node))
        self._warn(f"Nested JSX inside an expression was replaced with a placeholder: {preview}")
        return create_ir_expression(f"/* Collie: nested JSX not converted: {preview} */")

    def _expression_text(self, node: Node) -> str:
        # jsx_expression text without its surrounding braces
        return self.document.get_node_text(node)[1:-1].strip()

    def _warn(self, message: str) -> None:
        self.diagnostics.warnings.append(message)


def _preview(text: str) -> str:
    collapsed = _WS.sub(" ", text).strip().replace("*/", "* /")
    if len(collapsed) > PLACEHOLDER_PREVIEW_LENGTH:
        return collapsed[:PLACEHOLDER_PREVIEW_LENGTH - 1] + "…"
    return collapsed


def convert_markup_nodes_to_ir(nodes: Sequence[Node], document: MarkupDocument) -> MarkupConversionResult:
    """
    Convert markup nodes into IR.

    Args:
        nodes: Root markup nodes (see `parse_markup_selection`)
        document: Parsed document the nodes belong to

    Returns:
        IR nodes plus conversion warnings
    """
    return MarkupToIrConverter(document).convert(nodes)


__all__ = [
    "MarkupConversionDiagnostics",
    "MarkupConversionResult",
    "MarkupToIrConverter",
    "convert_markup_nodes_to_ir",
    "PLACEHOLDER_PREVIEW_LENGTH",
]
