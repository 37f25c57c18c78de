"""
Canonical printer for Collie syntax trees.

Output is fully determined by the tree and the options, and re-parsing the
output yields the same tree (spans aside). That is what makes formatting
idempotent.
"""

from __future__ import annotations

from typing import List, Optional

from ..config.model import FormatOptions
from .nodes import (
    ClassAliasesDecl,
    ConditionalNode,
    ElementNode,
    ExpressionNode,
    ForLoopNode,
    Node,
    PropsDecl,
    RootNode,
    TextNode,
)
from .text import format_pipe


class ColliePrinter:
    """Renders a `RootNode` back to Collie source."""

    def __init__(self, options: Optional[FormatOptions] = None):
        self.options = options or FormatOptions()
        self._unit = " " * max(0, self.options.indent_size)

    def print(self, root: RootNode) -> str:
        sections: List[List[str]] = []

        if root.raw_id or root.id:
            sections.append([f"#id {root.raw_id or root.id}"])
        if root.props is not None:
            sections.append(self._props(root.props))
        if root.class_aliases is not None:
            sections.append(self._class_aliases(root.class_aliases))
        if root.children:
            body: List[str] = []
            for child in root.children:
                self._node(child, 0, body)
            sections.append(body)

        lines: List[str] = []
        for index, section in enumerate(sections):
            if index:
                lines.append("")
            lines.extend(section)

        if not lines:
            return ""
        return "\n".join(lines) + "\n"

    # ------------------------------------------------------------------ #

    def _props(self, props: PropsDecl) -> List[str]:
        separator = ": " if self.options.normalize_props_spacing else ":"
        lines = ["props"]
        for fld in props.fields:
            optional = "?" if fld.optional else ""
            lines.append(f"{self._indent(1)}{fld.name}{optional}{separator}{fld.type_text}")
        return lines

    def _class_aliases(self, decl: ClassAliasesDecl) -> List[str]:
        lines = ["classes"]
        for alias in decl.aliases:
            rhs = "".join(f".{cls}" for cls in alias.classes)
            lines.append(f"{self._indent(1)}{alias.name} = {rhs}")
        return lines

    def _node(self, node: Node, level: int, out: List[str]) -> None:
        if isinstance(node, ElementNode):
            self._element(node, level, out)
        elif isinstance(node, TextNode):
            out.append(self._indent(level) + format_pipe(node, self.options.space_around_pipe))
        elif isinstance(node, ExpressionNode):
            out.append(f"{self._indent(level)}{{{{ {node.value} }}}}")
        elif isinstance(node, ConditionalNode):
            self._conditional(node, level, out)
        elif isinstance(node, ForLoopNode):
            out.append(f"{self._indent(level)}@for {node.variable} in {node.iterable}")
            for child in node.body:
                self._node(child, level + 1, out)
        else:
            raise TypeError(f"Unsupported node type {type(node).__name__}")

    def _element(self, node: ElementNode, level: int, out: List[str]) -> None:
        line = self._indent(level) + self._selector(node)
        children = node.children
        if children and _is_inline_text(children[0]):
            line += " " + format_pipe(children[0], self.options.space_around_pipe)  # type: ignore[arg-type]
            children = children[1:]
        out.append(line)
        for child in children:
            self._node(child, level + 1, out)

    def _selector(self, node: ElementNode) -> str:
        if self.options.prefer_compact_selectors:
            return node.name + "".join(f".{cls}" for cls in node.classes)
        return node.name + "".join(f" .{cls}" for cls in node.classes)

    def _conditional(self, node: ConditionalNode, level: int, out: List[str]) -> None:
        indent = self._indent(level)
        for index, branch in enumerate(node.branches):
            if index == 0:
                line = f"{indent}@if ({branch.test or 'true'})"
            elif branch.test is not None:
                line = f"{indent}@elseIf ({branch.test})"
            else:
                line = f"{indent}@else"

            inline = self._inline_body(branch.body)
            if inline is not None:
                out.append(f"{line} {inline}")
                continue

            out.append(line)
            for child in branch.body:
                self._node(child, level + 1, out)

    def _inline_body(self, body: List[Node]) -> Optional[str]:
        if len(body) != 1:
            return None
        only = body[0]
        if isinstance(only, TextNode):
            return format_pipe(only, self.options.space_around_pipe) if only.placement == "inline" else None
        if isinstance(only, ExpressionNode):
            return f"{{{{ {only.value} }}}}"
        if isinstance(only, ElementNode):
            if not only.children:
                return self._selector(only)
            if len(only.children) == 1 and _is_inline_text(only.children[0]):
                return f"{self._selector(only)} {format_pipe(only.children[0], self.options.space_around_pipe)}"  # type: ignore[arg-type]
        return None

    def _indent(self, level: int) -> str:
        return self._unit * level if level > 0 else ""


def _is_inline_text(node: Node) -> bool:
    return isinstance(node, TextNode) and node.placement == "inline"


def print_root(root: RootNode, options: Optional[FormatOptions] = None) -> str:
    return ColliePrinter(options).print(root)


__all__ = ["ColliePrinter", "print_root"]
