"""
IR → JSX/TSX printer.

The printer is purely structural: expressions, attribute values and
conditional tests are emitted exactly as stored in the IR. JSX and TSX share
the same output; the target only matters to callers that label the result.
"""

from __future__ import annotations

import json
import re
from typing import List, Optional, Sequence

from ..config.model import ExportOptions
from ..ir.nodes import (
    IrConditional,
    IrConditionalBranch,
    IrElement,
    IrExpression,
    IrFragment,
    IrNode,
    IrProp,
    IrText,
)

_SAFE_TEXT = re.compile(r"^[^<>&{}\r\n]+$")


class MarkupPrinter:
    def __init__(self, options: Optional[ExportOptions] = None):
        self.options = options or ExportOptions()
        self._unit = " " * max(0, self.options.indent_size)

    def print(self, nodes: Sequence[IrNode]) -> str:
        out: List[str] = []
        if len(nodes) > 1:
            out.append("<>")
            self._nodes(nodes, 1, out)
            out.append("</>")
        else:
            self._nodes(nodes, 0, out)
        return "\n".join(out) + "\n"

    def _indent(self, level: int) -> str:
        return self._unit * level if level > 0 else ""

    def _nodes(self, nodes: Sequence[IrNode], level: int, out: List[str]) -> None:
        for node in nodes:
            self._node(node, level, out)

    def _node(self, node: IrNode, level: int, out: List[str]) -> None:
        if isinstance(node, IrElement):
            self._element(node, level, out)
        elif isinstance(node, IrText):
            out.append(self._indent(level) + format_markup_text(node.value))
        elif isinstance(node, IrExpression):
            out.append(f"{self._indent(level)}{{{node.expression_text}}}")
        elif isinstance(node, IrFragment):
            self._fragment(node, level, out)
        elif isinstance(node, IrConditional):
            self._conditional(node, level, out)
        else:
            raise TypeError(f"Unsupported IR node for markup printing: {type(node).__name__}")

    def _element(self, node: IrElement, level: int, out: List[str]) -> None:
        indent = self._indent(level)
        opening = f"<{node.tag_name}{format_attributes(node)}"

        if not node.children:
            out.append(f"{indent}{opening} />")
            return

        inline = _inline_run(node.children)
        if inline is not None:
            out.append(f"{indent}{opening}>{inline}</{node.tag_name}>")
            return

        out.append(f"{indent}{opening}>")
        self._nodes(node.children, level + 1, out)
        out.append(f"{indent}</{node.tag_name}>")

    def _fragment(self, node: IrFragment, level: int, out: List[str]) -> None:
        indent = self._indent(level)
        if not node.children:
            out.append(f"{indent}<></>")
            return
        out.append(f"{indent}<>")
        self._nodes(node.children, level + 1, out)
        out.append(f"{indent}</>")

    def _conditional(self, node: IrConditional, level: int, out: List[str]) -> None:
        indent = self._indent(level)
        branches = node.branches

        if not branches:
            out.append(f"{indent}{{null}}")
            return

        if len(branches) == 1 and branches[0].test:
            out.append(f"{indent}{{{branches[0].test} && (")
            self._branch_body(branches[0], level + 1, out)
            out.append(f"{indent})}}")
            return

        inner = self._indent(level + 1)
        out.append(f"{indent}{{")
        has_test = False
        for branch in branches:
            if branch.test:
                prefix = ": " if has_test else ""
                out.append(f"{inner}{prefix}{branch.test} ? (")
                has_test = True
            else:
                out.append(f"{inner}: (")
            self._branch_body(branch, level + 2, out)
            out.append(f"{inner})")

        if has_test and branches[-1].test:
            out.append(f"{inner}: null")
        out.append(f"{indent}}}")

    def _branch_body(self, branch: IrConditionalBranch, level: int, out: List[str]) -> None:
        if not branch.children:
            out.append(f"{self._indent(level)}null")
            return
        self._nodes(branch.children, level, out)


def format_attributes(node: IrElement) -> str:
    """Attribute segment of an opening tag, with its leading space."""
    attributes: List[str] = []
    if node.classes:
        attributes.append(f"className={json.dumps(' '.join(node.classes), ensure_ascii=False)}")
    for prop in node.props:
        if isinstance(prop, IrProp):
            attributes.append(prop.name if prop.value is None else f"{prop.name}={prop.value}")
        else:
            attributes.append(f"{{{prop.expression_text}}}")
    return " " + " ".join(attributes) if attributes else ""


def format_markup_text(value: str) -> str:
    """
    Raw JSX text when it is safe, otherwise a quoted string in braces.

    Leading or trailing spaces count as unsafe: JSX trims them from text
    that starts or ends a line. Text inside an element's one-line run is
    handled by the element printer instead.
    """
    if not value:
        return ""
    if _is_safe_text(value):
        return value
    return format_quoted_text(value)


def format_quoted_text(value: str) -> str:
    return "{" + json.dumps(value, ensure_ascii=False) + "}"


def _is_safe_text(value: str) -> bool:
    return bool(_SAFE_TEXT.match(value)) and value == value.strip()


def _inline_run(children: Sequence[IrNode]) -> Optional[str]:
    """
    One-line body for children that are only text and expressions.

    Spaces between tokens on the same line survive in JSX, so edge spaces
    inside the run need no quoting.
    """
    parts: List[str] = []
    for child in children:
        if isinstance(child, IrText):
            if child.value:
                parts.append(child.value if _SAFE_TEXT.match(child.value) else format_quoted_text(child.value))
        elif isinstance(child, IrExpression):
            parts.append(f"{{{child.expression_text}}}")
        else:
            return None
    return "".join(parts) if parts else None


def print_markup_nodes(nodes: Sequence[IrNode], options: Optional[ExportOptions] = None) -> str:
    """
    Render IR nodes as JSX/TSX markup.

    Args:
        nodes: Top-level IR nodes; more than one is wrapped in a fragment
        options: Target and indentation

    Returns:
        Markup text ending with a newline
    """
    return MarkupPrinter(options).print(nodes)


__all__ = ["MarkupPrinter", "print_markup_nodes", "format_attributes", "format_markup_text"]
