from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

MarkupTarget = Literal["JSX", "TSX"]

CONFIG_FILE_NAMES = ("collie.yaml", ".collie.yaml")


@dataclass(frozen=True)
class FormatOptions:
    indent_size: int = 2
    prefer_compact_selectors: bool = True      # div.a.b vs div .a .b
    space_around_pipe: bool = True             # "| text" vs "|text"
    normalize_props_spacing: bool = True       # "name: Type" vs "name:Type"


@dataclass(frozen=True)
class ExportOptions:
    target: MarkupTarget = "JSX"
    indent_size: int = 2


@dataclass(frozen=True)
class CollieConfig:
    format: FormatOptions = field(default_factory=FormatOptions)
    export: ExportOptions = field(default_factory=ExportOptions)


__all__ = ["MarkupTarget", "CONFIG_FILE_NAMES", "FormatOptions", "ExportOptions", "CollieConfig"]
