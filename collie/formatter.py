"""
Whole-document formatting of Collie templates.

A template that parses without errors is re-printed from its tree. A
template with error diagnostics would lose the dropped lines if printed, so
it only gets the whitespace-level fallback.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from .config.model import FormatOptions
from .syntax.diagnostics import Diagnostic, has_errors
from .syntax.fallback import fallback_format
from .syntax.parser import parse
from .syntax.printer import print_root

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FormatResult:
    text: str
    changed: bool
    used_fallback: bool
    diagnostics: List[Diagnostic] = field(default_factory=list)


def format_text(text: str, options: Optional[FormatOptions] = None) -> FormatResult:
    """
    Format a Collie document.

    Args:
        text: Document source
        options: Printer options (indent size also drives the fallback)

    Returns:
        Formatted text, whether it differs from the input and whether the
        fallback formatter was used
    """
    options = options or FormatOptions()
    result = parse(text)

    if has_errors(result.diagnostics):
        logger.debug(
            "Template has %d error diagnostic(s), using fallback formatting",
            sum(1 for d in result.diagnostics if d.is_error),
        )
        formatted = fallback_format(text, options.indent_size)
        return FormatResult(
            text=formatted,
            changed=formatted != text,
            used_fallback=True,
            diagnostics=result.diagnostics,
        )

    formatted = print_root(result.root, options)
    return FormatResult(
        text=formatted,
        changed=formatted != text,
        used_fallback=False,
        diagnostics=result.diagnostics,
    )


__all__ = ["FormatResult", "format_text"]
