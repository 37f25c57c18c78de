from __future__ import annotations

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .syntax.diagnostics import Diagnostic


class Severity(Enum):
    error = "error"
    warning = "warning"


class Position(BaseModel):
    model_config = ConfigDict(extra="forbid")
    line: int
    column: int
    offset: int


class DiagnosticEntry(BaseModel):
    model_config = ConfigDict(extra="forbid")
    severity: Severity
    message: str
    code: Optional[str] = None
    start: Optional[Position] = None
    end: Optional[Position] = None


class CheckReport(BaseModel):
    model_config = ConfigDict(extra="forbid")
    protocol: int = 1
    file: str
    ok: bool
    template_id: Optional[str] = Field(default=None, alias="templateId")
    errors: int
    warnings: int
    diagnostics: List[DiagnosticEntry]


def diagnostic_entry(diagnostic: Diagnostic) -> DiagnosticEntry:
    span = diagnostic.span
    return DiagnosticEntry(
        severity=Severity(diagnostic.severity),
        message=diagnostic.message,
        code=str(diagnostic.code) if diagnostic.code else None,
        start=Position(line=span.start.line, column=span.start.col, offset=span.start.offset) if span else None,
        end=Position(line=span.end.line, column=span.end.col, offset=span.end.offset) if span else None,
    )


def build_check_report(file: str, diagnostics: List[Diagnostic], template_id: Optional[str] = None) -> CheckReport:
    errors = sum(1 for d in diagnostics if d.is_error)
    return CheckReport(
        file=file,
        ok=errors == 0,
        templateId=template_id,
        errors=errors,
        warnings=len(diagnostics) - errors,
        diagnostics=[diagnostic_entry(d) for d in diagnostics],
    )


__all__ = ["Severity", "Position", "DiagnosticEntry", "CheckReport", "diagnostic_entry", "build_check_report"]
