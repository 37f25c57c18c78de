"""
Whitespace-only formatter used when a template does not parse cleanly.

Never drops content: tabs become indent units, trailing whitespace is
stripped and leading indentation is rounded down to a multiple of the unit.
"""

from __future__ import annotations

import re

_NEWLINES = re.compile(r"\r\n?")


def fallback_format(text: str, indent_size: int = 2) -> str:
    indent_size = max(1, indent_size)
    unit = " " * indent_size
    lines = _NEWLINES.sub("\n", text).split("\n")

    normalized = []
    for line in lines:
        stripped = line.replace("\t", unit).rstrip()
        if not stripped:
            normalized.append("")
            continue
        current = len(stripped) - len(stripped.lstrip(" "))
        wanted = (current // indent_size) * indent_size
        normalized.append(" " * wanted + stripped[current:])

    return "\n".join(normalized)


__all__ = ["fallback_format"]
