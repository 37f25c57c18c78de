"""
Public entry points of the Collie tools.

Everything here is synchronous and free of file I/O; callers pass text in
and get text or structured results back.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Literal, Optional, Tuple, Union

from .config.model import ExportOptions, FormatOptions, MarkupTarget
from .convert.dsl_printer import DslPrinter
from .convert.dsl_to_ir import convert_dsl_ast_to_ir
from .convert.markup_parser import parse_markup_selection
from .convert.markup_printer import print_markup_nodes
from .convert.markup_to_ir import convert_markup_nodes_to_ir
from .ir.nodes import IrNode
from .syntax.diagnostics import Diagnostic
from .syntax.nodes import RootNode
from .syntax.parser import ParseResult, parse
from .syntax.printer import print_root

logger = logging.getLogger(__name__)


def parse_dsl(text: str) -> ParseResult:
    return parse(text)


def format_dsl(root: RootNode, options: Optional[FormatOptions] = None) -> str:
    return print_root(root, options)


# ----------------------------- export ----------------------------- #

@dataclass(frozen=True)
class ExportSuccess:
    target: MarkupTarget
    root: RootNode
    diagnostics: List[Diagnostic]
    ir_nodes: Tuple[IrNode, ...]
    output_text: str
    kind: Literal["success"] = "success"


@dataclass(frozen=True)
class ExportFailure:
    target: MarkupTarget
    diagnostics: List[Diagnostic]
    output_text: str
    kind: Literal["failure"] = "failure"


ExportResult = Union[ExportSuccess, ExportFailure]


def export_to_markup(
    text: str,
    target: Optional[MarkupTarget] = None,
    options: Optional[ExportOptions] = None,
) -> ExportResult:
    """
    Compile a Collie template to JSX/TSX markup.

    Args:
        text: Collie source
        target: "JSX" or "TSX"; defaults to the target in options
        options: Markup printer options

    Returns:
        ExportFailure with a comment block listing the errors when the
        template has error diagnostics, ExportSuccess otherwise
    """
    options = options or ExportOptions()
    target = target or options.target

    result = parse(text)
    errors = [d for d in result.diagnostics if d.is_error]
    if errors:
        logger.debug("Export to %s aborted: %d error diagnostic(s)", target, len(errors))
        return ExportFailure(
            target=target,
            diagnostics=errors,
            output_text=format_export_failure(errors),
        )

    ir_nodes = convert_dsl_ast_to_ir(result.root)
    output = print_markup_nodes(ir_nodes, ExportOptions(target=target, indent_size=options.indent_size))
    logger.debug("Exported %d top-level node(s) to %s", len(ir_nodes), target)
    return ExportSuccess(
        target=target,
        root=result.root,
        diagnostics=result.diagnostics,
        ir_nodes=ir_nodes,
        output_text=output,
    )


def format_export_failure(errors: List[Diagnostic]) -> str:
    if not errors:
        return "/* Collie export failed: parser returned an unknown error. */"
    lines = ["/* Collie export failed to parse the template."]
    lines.extend(f" * {diagnostic.describe()}" for diagnostic in errors)
    lines.append(" */")
    return "\n".join(lines)


# ----------------------------- import ----------------------------- #

@dataclass(frozen=True)
class MarkupImportResult:
    nodes: Tuple[IrNode, ...]
    warnings: List[str] = field(default_factory=list)
    dsl_text: str = ""


def import_from_markup_selection(text: str) -> Tuple[IrNode, ...]:
    """
    Lower a JSX/TSX selection into IR.

    Conversion warnings are logged; use `convert_markup_selection` to get
    them as data.

    Raises:
        MarkupParseError: The selection has syntax errors or no markup
    """
    selection = parse_markup_selection(text)
    converted = convert_markup_nodes_to_ir(selection.root_nodes, selection.document)
    for warning in converted.diagnostics.warnings:
        logger.warning(warning)
    return converted.nodes


def convert_markup_selection(text: str, options: Optional[FormatOptions] = None) -> MarkupImportResult:
    """
    Convert a JSX/TSX selection into Collie source.

    Raises:
        MarkupParseError: The selection has syntax errors or no markup
    """
    selection = parse_markup_selection(text)
    converted = convert_markup_nodes_to_ir(selection.root_nodes, selection.document)
    printer = DslPrinter(options)
    dsl_text = printer.print(converted.nodes)
    return MarkupImportResult(
        nodes=converted.nodes,
        warnings=list(converted.diagnostics.warnings) + printer.warnings,
        dsl_text=dsl_text,
    )


__all__ = [
    "parse_dsl",
    "format_dsl",
    "export_to_markup",
    "format_export_failure",
    "ExportSuccess",
    "ExportFailure",
    "ExportResult",
    "import_from_markup_selection",
    "convert_markup_selection",
    "MarkupImportResult",
]
