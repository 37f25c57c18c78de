"""
Conversions between Collie, the IR and JSX/TSX markup.
"""

from .dsl_printer import print_dsl_document
from .dsl_to_ir import convert_dsl_ast_to_ir
from .markup_parser import MarkupSelection, parse_markup_selection
from .markup_printer import print_markup_nodes
from .markup_to_ir import MarkupConversionResult, convert_markup_nodes_to_ir

__all__ = [
    "convert_dsl_ast_to_ir",
    "print_dsl_document",
    "print_markup_nodes",
    "parse_markup_selection",
    "MarkupSelection",
    "convert_markup_nodes_to_ir",
    "MarkupConversionResult",
]
