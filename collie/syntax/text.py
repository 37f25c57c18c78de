from __future__ import annotations

from .nodes import TextExpr, TextNode


def build_text_payload(node: TextNode) -> str:
    """Text after the pipe, with expressions re-wrapped as `{{ expr }}`."""
    return "".join(
        f"{{{{ {part.value} }}}}" if isinstance(part, TextExpr) else part.value
        for part in node.parts
    )


def format_pipe(node: TextNode, space_around_pipe: bool) -> str:
    payload = build_text_payload(node)
    if not payload:
        return "|"
    # A payload that starts with a space always needs the separator,
    # otherwise the parser would eat its first character.
    if space_around_pipe or payload.startswith(" "):
        return f"| {payload}"
    return f"|{payload}"


__all__ = ["build_text_payload", "format_pipe"]
