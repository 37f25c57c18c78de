"""
IR → Collie printer used by the markup import path.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

from ..config.model import FormatOptions
from ..ir.nodes import IrConditional, IrElement, IrExpression, IrFragment, IrNode, IrProp, IrPropLike, IrText


class DslPrinter:
    def __init__(self, options: Optional[FormatOptions] = None):
        self.options = options or FormatOptions()
        self._unit = " " * max(0, self.options.indent_size)
        self.warnings: List[str] = []

    def print(self, nodes: Sequence[IrNode]) -> str:
        self.warnings = []
        out: List[str] = []
        for node in nodes:
            self._node(node, 0, out)
        if not out:
            return ""
        return "\n".join(out) + "\n"

    def _indent(self, level: int) -> str:
        return self._unit * level if level > 0 else ""

    def _node(self, node: IrNode, level: int, out: List[str]) -> None:
        if isinstance(node, IrElement):
            self._element(node, level, out)
        elif isinstance(node, IrText):
            out.append(self._indent(level) + self._pipe(node.value))
        elif isinstance(node, IrExpression):
            out.append(self._indent(level) + _expression(node.expression_text))
        elif isinstance(node, IrFragment):
            for child in node.children:
                self._node(child, level, out)
        elif isinstance(node, IrConditional):
            raise ValueError("Conditional IR nodes are not supported in the Collie printer.")
        else:
            raise TypeError(f"Unsupported IR node: {type(node).__name__}")

    def _element(self, node: IrElement, level: int, out: List[str]) -> None:
        line = self._indent(level) + self._selector(node) + _props(node.props)

        inline = self._inline_child(node.children)
        if inline is not None:
            out.append(f"{line} {inline}")
            return

        out.append(line)
        for child in node.children:
            self._node(child, level + 1, out)

    def _selector(self, node: IrElement) -> str:
        if "." in node.tag_name:
            # the parser reads everything after the first dot as classes
            self.warnings.append(
                f"Tag name {node.tag_name} contains a dot and will read back as "
                f"{node.tag_name.split('.', 1)[0]} with classes; rename it before editing the template."
            )
        if self.options.prefer_compact_selectors:
            return node.tag_name + "".join(f".{cls}" for cls in node.classes)
        return node.tag_name + "".join(f" .{cls}" for cls in node.classes)

    def _inline_child(self, children: Sequence[IrNode]) -> Optional[str]:
        if len(children) != 1:
            return None
        child = children[0]
        if isinstance(child, IrText):
            return self._pipe(child.value)
        if isinstance(child, IrExpression):
            # only pipe text may follow a selector on the same line
            return self._pipe(_expression(child.expression_text))
        return None

    def _pipe(self, payload: str) -> str:
        if self.options.space_around_pipe or payload.startswith(" "):
            return f"| {payload}"
        return f"|{payload}"


def _props(props: Sequence[IrPropLike]) -> str:
    if not props:
        return ""
    parts = []
    for prop in props:
        if isinstance(prop, IrProp):
            parts.append(prop.name if prop.value is None else f"{prop.name}={prop.value}")
        else:
            parts.append(_expression(prop.expression_text))
    return " " + " ".join(parts)


def _expression(text: str) -> str:
    return f"{{{{ {text} }}}}"


def print_dsl_document(nodes: Sequence[IrNode], options: Optional[FormatOptions] = None) -> str:
    """
    Render IR nodes as Collie source.

    Raises:
        ValueError: A conditional node was encountered
    """
    return DslPrinter(options).print(nodes)


__all__ = ["DslPrinter", "print_dsl_document"]
