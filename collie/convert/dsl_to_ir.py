"""
Lowering of Collie syntax trees into IR.

Class aliases are expanded here. Constructs without an IR counterpart
(the props block, loops) become comment expressions so nothing disappears
without a trace in the exported markup.
"""

from __future__ import annotations

import re
from typing import Dict, List, Optional, Sequence, Tuple

from ..ir.nodes import (
    IrNode,
    create_ir_conditional,
    create_ir_conditional_branch,
    create_ir_element,
    create_ir_expression,
    create_ir_text,
)
from ..syntax.nodes import (
    ClassAliasesDecl,
    ConditionalNode,
    ElementNode,
    ExpressionNode,
    ForLoopNode,
    Node,
    PropsDecl,
    RootNode,
    TextChunk,
    TextNode,
)

AliasEnv = Dict[str, Tuple[str, ...]]

_ALIAS_REF = re.compile(r"^\$([A-Za-z_][A-Za-z0-9_]*)$")


def convert_dsl_ast_to_ir(root: RootNode) -> Tuple[IrNode, ...]:
    """
    Lower a parsed template into IR nodes.

    Args:
        root: Template root as returned by the parser

    Returns:
        Top-level IR nodes; a props summary comment comes first when present
    """
    env = build_alias_environment(root.class_aliases)
    nodes: List[IrNode] = []
    if root.props is not None:
        nodes.append(create_ir_expression(build_props_comment(root.props)))
    nodes.extend(_convert_nodes(root.children, env))
    return tuple(nodes)


def _convert_nodes(nodes: Sequence[Node], env: AliasEnv) -> List[IrNode]:
    result: List[IrNode] = []
    for node in nodes:
        result.extend(_convert_node(node, env))
    return result


def _convert_node(node: Node, env: AliasEnv) -> List[IrNode]:
    if isinstance(node, ElementNode):
        return [create_ir_element(
            node.name,
            classes=expand_alias_classes(node.classes, env),
            children=_convert_nodes(node.children, env),
        )]
    if isinstance(node, TextNode):
        return _convert_text(node)
    if isinstance(node, ExpressionNode):
        return [create_ir_expression(node.value)]
    if isinstance(node, ConditionalNode):
        return [create_ir_conditional(
            create_ir_conditional_branch(branch.test, _convert_nodes(branch.body, env))
            for branch in node.branches
        )]
    if isinstance(node, ForLoopNode):
        return [_placeholder(f"@for {node.variable} in {node.iterable} loop is not exported")]
    return [_placeholder(f"Unsupported Collie node: {getattr(node, 'type', type(node).__name__)}")]


def _convert_text(node: TextNode) -> List[IrNode]:
    segments: List[IrNode] = []
    pending = ""
    for part in node.parts:
        if isinstance(part, TextChunk):
            pending += part.value
            continue
        if pending:
            segments.append(create_ir_text(pending))
            pending = ""
        segments.append(create_ir_expression(part.value))
    if pending:
        segments.append(create_ir_text(pending))
    return segments


def build_props_comment(props: PropsDecl) -> str:
    if not props.fields:
        return "/* Collie props block present. Add TypeScript props manually. */"
    summary = ", ".join(
        f"{fld.name}{'?' if fld.optional else ''}: {fld.type_text}"
        for fld in props.fields
    )
    return f"/* Collie props: {summary} */"


def build_alias_environment(decl: Optional[ClassAliasesDecl]) -> AliasEnv:
    env: AliasEnv = {}
    if decl is None:
        return env
    for alias in decl.aliases:
        env[alias.name] = tuple(alias.classes)  # later declarations win
    return env


def expand_alias_classes(classes: Sequence[str], env: AliasEnv) -> List[str]:
    result: List[str] = []
    for token in classes:
        if not token.startswith("$"):
            result.append(token)
            continue
        # unknown or malformed references expand to nothing
        match = _ALIAS_REF.match(token)
        if match is not None:
            result.extend(env.get(match.group(1), ()))
    return result


def _placeholder(reason: str):
    return create_ir_expression(f"/* Collie unsupported: {reason} */")


__all__ = [
    "convert_dsl_ast_to_ir",
    "build_props_comment",
    "build_alias_environment",
    "expand_alias_classes",
]
