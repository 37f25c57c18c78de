"""
Neutral intermediate representation shared by the Collie and JSX/TSX sides.

IR nodes are immutable, carry no source spans and are built bottom-up
through the `create_ir_*` factories, which apply the normalization rules.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Literal, Optional, Tuple, Union


@dataclass(frozen=True)
class IrProp:
    name: str
    # None means a bare attribute (`disabled`). Otherwise the original
    # textual form is kept: `"x"`, `{expr}`, ...
    value: Optional[str] = None
    kind: Literal["prop"] = "prop"


@dataclass(frozen=True)
class IrText:
    value: str
    kind: Literal["text"] = "text"


@dataclass(frozen=True)
class IrExpression:
    expression_text: str
    kind: Literal["expression"] = "expression"


IrPropLike = Union[IrProp, IrExpression]


@dataclass(frozen=True)
class IrElement:
    tag_name: str
    classes: Tuple[str, ...] = ()
    props: Tuple[IrPropLike, ...] = ()
    children: Tuple["IrNode", ...] = ()
    kind: Literal["element"] = "element"


@dataclass(frozen=True)
class IrFragment:
    children: Tuple["IrNode", ...] = ()
    kind: Literal["fragment"] = "fragment"


@dataclass(frozen=True)
class IrConditionalBranch:
    test: Optional[str]
    children: Tuple["IrNode", ...] = ()


@dataclass(frozen=True)
class IrConditional:
    branches: Tuple[IrConditionalBranch, ...] = ()
    kind: Literal["conditional"] = "conditional"


IrNode = Union[IrElement, IrText, IrExpression, IrFragment, IrConditional]


def create_ir_element(
    tag_name: str,
    *,
    classes: Optional[Iterable[str]] = None,
    props: Optional[Iterable[IrPropLike]] = None,
    children: Optional[Iterable[IrNode]] = None,
) -> IrElement:
    return IrElement(
        tag_name=tag_name,
        classes=normalize_classes(classes),
        props=tuple(props or ()),
        children=tuple(children or ()),
    )


def create_ir_prop(name: str, value: Optional[str] = None) -> IrProp:
    return IrProp(name=name, value=value)


def create_ir_text(value: str) -> IrText:
    return IrText(value=value)


def create_ir_expression(expression_text: str) -> IrExpression:
    return IrExpression(expression_text=expression_text)


def create_ir_fragment(children: Iterable[IrNode]) -> IrFragment:
    return IrFragment(children=tuple(children))


def create_ir_conditional_branch(test: Optional[str], children: Iterable[IrNode]) -> IrConditionalBranch:
    return IrConditionalBranch(test=test, children=tuple(children))


def create_ir_conditional(branches: Iterable[IrConditionalBranch]) -> IrConditional:
    return IrConditional(branches=tuple(branches))


def normalize_classes(classes: Optional[Iterable[str]]) -> Tuple[str, ...]:
    """Trim every class token and drop the empty ones."""
    if not classes:
        return ()
    return tuple(token.strip() for token in classes if token.strip())


def split_class_name_props(props: Iterable[IrPropLike]) -> Tuple[Tuple[IrPropLike, ...], Tuple[str, ...]]:
    """
    Move literal `className` values into a class list.

    A `className` prop whose value is a quoted string literal is split on
    whitespace; any other `className` (expression, empty) stays a prop.

    Returns:
        (remaining props, extracted classes)
    """
    remaining = []
    classes = []
    for prop in props:
        if isinstance(prop, IrProp) and prop.name == "className" and prop.value:
            tokens = extract_class_tokens(prop.value)
            if tokens:
                classes.extend(tokens)
                continue
        remaining.append(prop)
    return tuple(remaining), tuple(classes)


def extract_class_tokens(value: str) -> Optional[Tuple[str, ...]]:
    literal = _unwrap_string_literal(value)
    if literal is None:
        return None
    tokens = tuple(literal.split())
    return tokens or None


def _unwrap_string_literal(value: str) -> Optional[str]:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'`":
        return value[1:-1]
    return None


__all__ = [
    "IrProp",
    "IrText",
    "IrExpression",
    "IrPropLike",
    "IrElement",
    "IrFragment",
    "IrConditionalBranch",
    "IrConditional",
    "IrNode",
    "create_ir_element",
    "create_ir_prop",
    "create_ir_text",
    "create_ir_expression",
    "create_ir_fragment",
    "create_ir_conditional_branch",
    "create_ir_conditional",
    "normalize_classes",
    "split_class_name_props",
    "extract_class_tokens",
]
