from .nodes import (
    IrConditional,
    IrConditionalBranch,
    IrElement,
    IrExpression,
    IrFragment,
    IrNode,
    IrProp,
    IrPropLike,
    IrText,
    create_ir_conditional,
    create_ir_conditional_branch,
    create_ir_element,
    create_ir_expression,
    create_ir_fragment,
    create_ir_prop,
    create_ir_text,
    extract_class_tokens,
    normalize_classes,
    split_class_name_props,
)

__all__ = [
    "IrConditional", "IrConditionalBranch", "IrElement", "IrExpression",
    "IrFragment", "IrNode", "IrProp", "IrPropLike", "IrText",
    "create_ir_conditional", "create_ir_conditional_branch", "create_ir_element",
    "create_ir_expression", "create_ir_fragment", "create_ir_prop", "create_ir_text",
    "extract_class_tokens", "normalize_classes", "split_class_name_props",
]
