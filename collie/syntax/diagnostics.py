"""
Source positions, spans and diagnostic records.

Diagnostics are plain data: the parser collects them instead of raising,
and the caller decides which severities are fatal.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Literal, Optional


Severity = Literal["error", "warning"]


class DiagnosticCode(str, enum.Enum):
    """Stable diagnostic codes. Same code means the same class of problem."""

    TAB_INDENT = "COLLIE001"
    ODD_INDENT = "COLLIE002"
    INDENT_JUMP = "COLLIE003"
    INVALID_ELEMENT = "COLLIE004"
    INVALID_EXPRESSION = "COLLIE005"

    PROPS_ORDER = "COLLIE101"
    PROPS_SYNTAX = "COLLIE102"
    CLASSES_BLOCK = "COLLIE103"
    CLASS_ALIAS_SYNTAX = "COLLIE104"
    TEMPLATE_ID = "COLLIE105"

    INVALID_IF = "COLLIE201"
    INVALID_ELSE = "COLLIE203"
    ORPHAN_ELSE_IF = "COLLIE205"
    ORPHAN_ELSE = "COLLIE206"
    ELSE_IF_AFTER_ELSE = "COLLIE207"
    EMPTY_BRANCH = "COLLIE208"
    INLINE_DIRECTIVE = "COLLIE209"
    INVALID_FOR = "COLLIE210"
    EMPTY_FOR = "COLLIE211"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class SourcePos:
    line: int        # 1-based
    col: int         # 1-based
    offset: int      # 0-based character offset in the normalized text


@dataclass(frozen=True)
class SourceSpan:
    """Half-open character range [start, end)."""
    start: SourcePos
    end: SourcePos

    @property
    def length(self) -> int:
        return self.end.offset - self.start.offset

    def contains(self, offset: int) -> bool:
        return self.start.offset <= offset < self.end.offset


@dataclass(frozen=True)
class Diagnostic:
    severity: Severity
    message: str
    span: Optional[SourceSpan] = None
    code: Optional[DiagnosticCode] = None
    file: Optional[str] = None

    @property
    def is_error(self) -> bool:
        return self.severity == "error"

    def describe(self) -> str:
        """Human readable one-liner: ``message [code] at line L, column C``."""
        code = f" [{self.code}]" if self.code else ""
        if self.span is not None:
            location = f"line {self.span.start.line}, column {self.span.start.col}"
        else:
            location = "unknown location"
        return f"{self.message}{code} at {location}"


def create_span(line: int, col: int, length: int, line_offset: int) -> SourceSpan:
    """
    Build a single-line span.

    Args:
        line: 1-based line number
        col: 1-based start column
        length: Span length in characters
        line_offset: Offset of the first character of the line

    Returns:
        Span whose end column/offset is start + length
    """
    start_offset = line_offset + col - 1
    return SourceSpan(
        start=SourcePos(line=line, col=col, offset=start_offset),
        end=SourcePos(line=line, col=col + length, offset=start_offset + length),
    )


def has_errors(diagnostics) -> bool:
    return any(d.is_error for d in diagnostics)


__all__ = [
    "Severity",
    "DiagnosticCode",
    "SourcePos",
    "SourceSpan",
    "Diagnostic",
    "create_span",
    "has_errors",
]
