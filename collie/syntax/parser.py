"""
Indentation-driven parser for Collie templates.

Works line by line over the normalized source and keeps three pieces of state:

- an ancestor stack of (children list, indentation level), rooted at the
  template root with level -1;
- a table of open conditional chains keyed by indentation level, so that
  `@elseIf`/`@else` lines attach to the `@if` opened at the same level;
- markers for the open `props` / `classes` header blocks.

The parser never raises on bad input. A broken line is reported and skipped;
an indentation jump of more than one level is reported and clamped.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from .diagnostics import Diagnostic, DiagnosticCode, SourcePos, SourceSpan, create_span
from .nodes import (
    ClassAlias,
    ClassAliasesDecl,
    ConditionalBranch,
    ConditionalNode,
    ElementNode,
    ExpressionNode,
    ForLoopNode,
    Node,
    PropsDecl,
    PropsField,
    RootNode,
    TextChunk,
    TextExpr,
    TextNode,
    TextPart,
    TextPlacement,
)


_NEWLINES = re.compile(r"\r\n?")
_ELSE_IF_LINE = re.compile(r"^@elseIf\b")
_ELSE_LINE = re.compile(r"^@else\b")
_ELSE_HEADER = re.compile(r"^@else\b(.*)$")
_FOR_HEADER = re.compile(r"^@for\s+([A-Za-z_$][A-Za-z0-9_$]*)\s+in\s+(.+)$")
_ID_DIRECTIVE = re.compile(r"^#id\b(.*)$")
_ID_VALUE = re.compile(r"^[A-Za-z][A-Za-z0-9_-]*$")

_SELECTOR = re.compile(r"^([A-Za-z][A-Za-z0-9_$-]*)((?:\.\$?[A-Za-z0-9_-]+)*)")
_CLASS_TOKEN = re.compile(r"^\$?[A-Za-z0-9_-]+")
_WHITESPACE = re.compile(r"^\s+")

_PROPS_FIELD = re.compile(r"^([A-Za-z_][A-Za-z0-9_]*)(\??)\s*:\s*(.*)$")
_ALIAS_LINE = re.compile(r"^([A-Za-z_][A-Za-z0-9_]*)\s*=\s*(.*)$")
_ALIAS_CLASSES = re.compile(r"^\.?[A-Za-z0-9_-]+(?:\.[A-Za-z0-9_-]+)*$")

TEMPLATE_ID_SUFFIX = "-collie"


@dataclass
class ParseResult:
    root: RootNode
    diagnostics: List[Diagnostic] = field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        return any(d.is_error for d in self.diagnostics)


@dataclass
class _Frame:
    """Stack entry: where children of the current block go, and its level."""
    children: List[Node]
    level: int


@dataclass
class _Chain:
    node: ConditionalNode
    has_else: bool = False


@dataclass
class _Header:
    span: SourceSpan
    test: Optional[str] = None
    inline_body: Optional[str] = None
    inline_column: Optional[int] = None


class CollieParser:
    """
    Single-use parser for one Collie source text.

    Call `parse()` once; create a new instance for another text.
    """

    def __init__(self, source: str):
        self.source = _NEWLINES.sub("\n", source)
        self.diagnostics: List[Diagnostic] = []
        self.root = RootNode()
        self._stack: List[_Frame] = [_Frame(self.root.children, -1)]
        self._chains: Dict[int, _Chain] = {}
        self._props_level: Optional[int] = None
        self._classes_level: Optional[int] = None
        self._branches: List[Tuple[ConditionalBranch, SourceSpan]] = []
        self._loops: List[ForLoopNode] = []

    # ------------------------------------------------------------------ #

    def parse(self) -> ParseResult:
        lines = self.source.split("\n")
        self.root.span = SourceSpan(
            start=SourcePos(1, 1, 0),
            end=SourcePos(len(lines), len(lines[-1]) + 1, len(self.source)),
        )

        offset = 0
        for index, raw_line in enumerate(lines):
            line_offset = offset
            offset += len(raw_line) + 1
            self._parse_line(raw_line, index + 1, line_offset)

        self._check_empty_bodies()
        return ParseResult(root=self.root, diagnostics=self.diagnostics)

    def _parse_line(self, raw_line: str, line_no: int, line_offset: int) -> None:
        if not raw_line.strip():
            return

        tab_index = raw_line.find("\t")
        if tab_index != -1:
            self._error(
                DiagnosticCode.TAB_INDENT,
                "Tabs are not allowed; use spaces for indentation.",
                line_no, tab_index + 1, line_offset,
            )
            return

        indent = len(raw_line) - len(raw_line.lstrip(" "))
        content = raw_line[indent:]
        trimmed = content.rstrip()
        column = indent + 1

        if indent % 2 != 0:
            self._error(
                DiagnosticCode.ODD_INDENT,
                "Indentation must be multiples of two spaces.",
                line_no, column, line_offset,
            )
            return

        level = indent // 2

        # Header blocks close on any line that is not nested under them
        if self._props_level is not None and level <= self._props_level:
            self._props_level = None
        if self._classes_level is not None and level <= self._classes_level:
            self._classes_level = None

        if self._props_level is not None:
            self._parse_props_line(trimmed, level, line_no, column, line_offset)
            return
        if self._classes_level is not None:
            self._parse_alias_line(trimmed, level, line_no, column, line_offset)
            return

        top = self._stack[-1]
        if level > top.level + 1:
            self._error(
                DiagnosticCode.INDENT_JUMP,
                "Indentation jumped more than one level.",
                line_no, column, line_offset,
            )
            level = top.level + 1

        while len(self._stack) > 1 and self._stack[-1].level >= level:
            self._stack.pop()

        for key in [k for k in self._chains if k > level]:
            del self._chains[key]
        is_else_if = bool(_ELSE_IF_LINE.match(trimmed))
        is_else = bool(_ELSE_LINE.match(trimmed)) and not is_else_if
        if not is_else_if and not is_else:
            self._chains.pop(level, None)

        parent = self._stack[-1].children

        if trimmed.startswith("#id"):
            self._parse_id_directive(trimmed, level, line_no, column, line_offset)
        elif trimmed == "props":
            self._open_props(trimmed, level, line_no, column, line_offset)
        elif trimmed == "classes":
            self._open_classes(trimmed, level, line_no, column, line_offset)
        elif trimmed.startswith("@if"):
            self._parse_if(content, parent, level, line_no, column, line_offset)
        elif is_else_if:
            self._parse_else_if(content, level, line_no, column, line_offset)
        elif is_else:
            self._parse_else(content, level, line_no, column, line_offset)
        elif trimmed.startswith("@for"):
            self._parse_for(trimmed, parent, level, line_no, column, line_offset)
        elif content.startswith("|"):
            text = self._parse_text(content, line_no, column, line_offset)
            parent.append(text)
        elif content.startswith("{{"):
            expr = self._parse_expression_line(content, line_no, column, line_offset)
            if expr is not None:
                parent.append(expr)
        else:
            element = self._parse_element(trimmed, line_no, column, line_offset)
            if element is not None:
                parent.append(element)
                self._stack.append(_Frame(element.children, level))

    # ------------------------------ headers ------------------------------ #

    def _parse_id_directive(self, trimmed: str, level: int, line_no: int, column: int, line_offset: int) -> None:
        match = _ID_DIRECTIVE.match(trimmed)
        if match is None:
            self._error(
                DiagnosticCode.TEMPLATE_ID,
                "Invalid #id directive. Use #id name.",
                line_no, column, line_offset, len(trimmed),
            )
            return
        if level != 0:
            self._error(
                DiagnosticCode.TEMPLATE_ID,
                "The #id directive must be at the top level.",
                line_no, column, line_offset, len(trimmed),
            )
            return
        if self.root.raw_id is not None:
            self._error(
                DiagnosticCode.TEMPLATE_ID,
                "A template can only declare one #id.",
                line_no, column, line_offset, len(trimmed),
            )
            return

        remainder = match.group(1)
        value = remainder.strip()
        value_column = column + 3 + (len(remainder) - len(remainder.lstrip()))
        if not value or not _ID_VALUE.match(value):
            self._error(
                DiagnosticCode.TEMPLATE_ID,
                "Template ids must start with a letter and contain only letters, numbers, underscores, or hyphens.",
                line_no, column, line_offset, len(trimmed),
            )
            return

        logical = value[:-len(TEMPLATE_ID_SUFFIX)] if value.endswith(TEMPLATE_ID_SUFFIX) else value
        self.root.raw_id = value
        self.root.id = logical or value
        self.root.id_span = create_span(line_no, value_column, len(value), line_offset)

    def _open_props(self, trimmed: str, level: int, line_no: int, column: int, line_offset: int) -> None:
        if level != 0:
            self._error(
                DiagnosticCode.PROPS_SYNTAX,
                "Props block must be at the top level.",
                line_no, column, line_offset, len(trimmed),
            )
            return
        if self.root.children or self.root.props is not None:
            self._error(
                DiagnosticCode.PROPS_ORDER,
                "Props block must appear before any template nodes.",
                line_no, column, line_offset, len(trimmed),
            )
            return
        self.root.props = PropsDecl(span=create_span(line_no, column, len(trimmed), line_offset))
        self._props_level = level

    def _parse_props_line(self, trimmed: str, level: int, line_no: int, column: int, line_offset: int) -> None:
        assert self._props_level is not None and self.root.props is not None
        if level != self._props_level + 1:
            self._error(
                DiagnosticCode.PROPS_SYNTAX,
                "Props lines must be indented two spaces under the props header.",
                line_no, column, line_offset,
            )
            return

        match = _PROPS_FIELD.match(trimmed)
        if match is None:
            self._error(
                DiagnosticCode.PROPS_SYNTAX,
                "Props lines must be in the form `name[?]: Type`.",
                line_no, column, line_offset, len(trimmed),
            )
            return

        name, optional_flag, type_part = match.groups()
        type_text = type_part.strip()
        if not type_text:
            self._error(
                DiagnosticCode.PROPS_SYNTAX,
                "Props lines must provide a type after the colon.",
                line_no, column, line_offset, len(trimmed),
            )
            return

        self.root.props.fields.append(PropsField(
            name=name,
            optional=optional_flag == "?",
            type_text=type_text,
            span=create_span(line_no, column, len(trimmed), line_offset),
        ))

    def _open_classes(self, trimmed: str, level: int, line_no: int, column: int, line_offset: int) -> None:
        if level != 0:
            self._error(
                DiagnosticCode.CLASSES_BLOCK,
                "Classes block must be at the top level.",
                line_no, column, line_offset, len(trimmed),
            )
            return
        if self.root.children or self.root.class_aliases is not None:
            self._error(
                DiagnosticCode.CLASSES_BLOCK,
                "Classes block must appear once, before any template nodes.",
                line_no, column, line_offset, len(trimmed),
            )
            return
        self.root.class_aliases = ClassAliasesDecl(span=create_span(line_no, column, len(trimmed), line_offset))
        self._classes_level = level

    def _parse_alias_line(self, trimmed: str, level: int, line_no: int, column: int, line_offset: int) -> None:
        assert self._classes_level is not None and self.root.class_aliases is not None
        if level != self._classes_level + 1:
            self._error(
                DiagnosticCode.CLASS_ALIAS_SYNTAX,
                "Class aliases must be indented two spaces under the classes header.",
                line_no, column, line_offset,
            )
            return

        match = _ALIAS_LINE.match(trimmed)
        if match is None:
            self._error(
                DiagnosticCode.CLASS_ALIAS_SYNTAX,
                "Class aliases must be in the form `name = .class.class`.",
                line_no, column, line_offset, len(trimmed),
            )
            return

        name, rhs = match.group(1), match.group(2).strip()
        if not _ALIAS_CLASSES.match(rhs):
            self._error(
                DiagnosticCode.CLASS_ALIAS_SYNTAX,
                "Class aliases must list one or more classes separated by dots.",
                line_no, column, line_offset, len(trimmed),
            )
            return

        classes = [token for token in rhs.split(".") if token]
        self.root.class_aliases.aliases.append(ClassAlias(
            name=name,
            classes=classes,
            span=create_span(line_no, column, len(trimmed), line_offset),
            name_span=create_span(line_no, column, len(name), line_offset),
        ))

    # ---------------------------- conditionals ---------------------------- #

    def _parse_if(self, content: str, parent: List[Node], level: int, line_no: int, column: int, line_offset: int) -> None:
        header = self._parse_conditional_header("@if", content, line_no, column, line_offset)
        if header is None:
            return
        chain = ConditionalNode(span=header.span)
        parent.append(chain)
        self._chains[level] = _Chain(chain)
        self._open_branch(chain, header, level, line_no, column, line_offset)

    def _parse_else_if(self, content: str, level: int, line_no: int, column: int, line_offset: int) -> None:
        length = len(content.rstrip())
        chain = self._chains.get(level)
        if chain is None:
            self._error(
                DiagnosticCode.ORPHAN_ELSE_IF,
                "@elseIf must follow an @if at the same indentation level.",
                line_no, column, line_offset, length,
            )
            return
        if chain.has_else:
            self._error(
                DiagnosticCode.ELSE_IF_AFTER_ELSE,
                "@elseIf cannot appear after an @else in the same chain.",
                line_no, column, line_offset, length,
            )
            return
        header = self._parse_conditional_header("@elseIf", content, line_no, column, line_offset)
        if header is None:
            return
        self._open_branch(chain.node, header, level, line_no, column, line_offset)

    def _parse_else(self, content: str, level: int, line_no: int, column: int, line_offset: int) -> None:
        trimmed = content.rstrip()
        chain = self._chains.get(level)
        if chain is None:
            self._error(
                DiagnosticCode.ORPHAN_ELSE,
                "@else must follow an @if at the same indentation level.",
                line_no, column, line_offset, len(trimmed),
            )
            return
        if chain.has_else:
            self._error(
                DiagnosticCode.INVALID_ELSE,
                "An @if chain can only have one @else branch.",
                line_no, column, line_offset, len(trimmed),
            )
            return

        match = _ELSE_HEADER.match(trimmed)
        if match is None:
            self._error(
                DiagnosticCode.INVALID_ELSE,
                "Invalid @else syntax.",
                line_no, column, line_offset, len(trimmed) or 4,
            )
            return

        header = _Header(span=create_span(line_no, column, len(trimmed), line_offset))
        self._fill_inline_body(header, trimmed, len(trimmed) - len(match.group(1)), column)
        chain.has_else = True
        self._open_branch(chain.node, header, level, line_no, column, line_offset)

    def _parse_conditional_header(
        self,
        keyword: str,
        content: str,
        line_no: int,
        column: int,
        line_offset: int,
    ) -> Optional[_Header]:
        trimmed = content.rstrip()
        rest = trimmed[len(keyword):]
        stripped = rest.lstrip()
        open_index = len(trimmed) - len(stripped)
        close_index = _find_closing_paren(trimmed, open_index) if stripped.startswith("(") else None

        if close_index is None:
            self._error(
                DiagnosticCode.INVALID_IF,
                f"Invalid {keyword} syntax. Use {keyword} (condition).",
                line_no, column, line_offset, len(trimmed) or 3,
            )
            return None

        test = trimmed[open_index + 1:close_index].strip()
        if not test:
            self._error(
                DiagnosticCode.INVALID_IF,
                f"{keyword} condition cannot be empty.",
                line_no, column, line_offset, len(trimmed) or 3,
            )
            return None

        header = _Header(span=create_span(line_no, column, len(trimmed), line_offset), test=test)
        self._fill_inline_body(header, trimmed, close_index + 1, column)
        return header

    @staticmethod
    def _fill_inline_body(header: _Header, trimmed: str, body_start: int, column: int) -> None:
        remainder = trimmed[body_start:]
        inline = remainder.strip()
        if inline:
            header.inline_body = inline
            header.inline_column = column + body_start + (len(remainder) - len(remainder.lstrip()))

    def _open_branch(
        self,
        chain: ConditionalNode,
        header: _Header,
        level: int,
        line_no: int,
        column: int,
        line_offset: int,
    ) -> None:
        branch = ConditionalBranch(test=header.test, span=header.span)
        chain.branches.append(branch)
        self._branches.append((branch, header.span))

        if header.inline_body:
            node = self._parse_inline_node(
                header.inline_body,
                line_no,
                header.inline_column or column,
                line_offset,
            )
            if node is not None:
                branch.body.append(node)
        else:
            self._stack.append(_Frame(branch.body, level))

    def _parse_inline_node(self, source: str, line_no: int, column: int, line_offset: int) -> Optional[Node]:
        trimmed = source.strip()
        if not trimmed:
            return None
        if trimmed.startswith("|"):
            return self._parse_text(trimmed, line_no, column, line_offset, placement="inline")
        if trimmed.startswith("{{"):
            return self._parse_expression_line(trimmed, line_no, column, line_offset)
        if trimmed.startswith("@"):
            self._error(
                DiagnosticCode.INLINE_DIRECTIVE,
                "Inline conditional bodies may only contain elements, text, or expressions.",
                line_no, column, line_offset, len(trimmed),
            )
            return None
        return self._parse_element(trimmed, line_no, column, line_offset)

    # ------------------------------- loops ------------------------------- #

    def _parse_for(self, trimmed: str, parent: List[Node], level: int, line_no: int, column: int, line_offset: int) -> None:
        match = _FOR_HEADER.match(trimmed)
        if match is None:
            self._error(
                DiagnosticCode.INVALID_FOR,
                "Invalid @for syntax. Use @for item in items.",
                line_no, column, line_offset, len(trimmed),
            )
            return
        loop = ForLoopNode(
            variable=match.group(1),
            iterable=match.group(2).strip(),
            span=create_span(line_no, column, len(trimmed), line_offset),
        )
        parent.append(loop)
        self._loops.append(loop)
        self._stack.append(_Frame(loop.body, level))

    # --------------------------- text & exprs ---------------------------- #

    def _parse_text(
        self,
        content: str,
        line_no: int,
        column: int,
        line_offset: int,
        placement: TextPlacement = "block",
    ) -> TextNode:
        trimmed = content.rstrip()
        span = create_span(line_no, column, len(trimmed), line_offset)
        payload = trimmed[1:]
        payload_column = column + 1
        if payload.startswith(" "):
            payload = payload[1:]
            payload_column += 1

        parts: List[TextPart] = []
        cursor = 0
        while cursor < len(payload):
            next_open = payload.find("{{", cursor)
            next_close = payload.find("}}", cursor)

            if next_close != -1 and (next_open == -1 or next_close < next_open):
                if next_close > cursor:
                    parts.append(TextChunk(payload[cursor:next_close]))
                self._error(
                    DiagnosticCode.INVALID_EXPRESSION,
                    "Inline expression closing }} must follow an opening {{.",
                    line_no, payload_column + next_close, line_offset, 2,
                )
                cursor = next_close + 2
                continue

            if next_open == -1:
                parts.append(TextChunk(payload[cursor:]))
                break

            if next_open > cursor:
                parts.append(TextChunk(payload[cursor:next_open]))

            expr_end = payload.find("}}", next_open + 2)
            if expr_end == -1:
                self._error(
                    DiagnosticCode.INVALID_EXPRESSION,
                    "Inline expression must end with }}.",
                    line_no, payload_column + next_open, line_offset,
                )
                parts.append(TextChunk(payload[next_open:]))
                break

            inner = payload[next_open + 2:expr_end].strip()
            if not inner:
                self._error(
                    DiagnosticCode.INVALID_EXPRESSION,
                    "Inline expression cannot be empty.",
                    line_no, payload_column + next_open, line_offset, expr_end - next_open + 2,
                )
            else:
                expr_span = create_span(line_no, payload_column + next_open, expr_end - next_open + 2, line_offset)
                parts.append(TextExpr(inner, span=expr_span))
            cursor = expr_end + 2

        return TextNode(parts=_merge_chunks(parts), placement=placement, span=span)

    def _parse_expression_line(self, content: str, line_no: int, column: int, line_offset: int) -> Optional[ExpressionNode]:
        trimmed = content.rstrip()
        span = create_span(line_no, column, len(trimmed), line_offset)
        close_index = trimmed.find("}}")
        if close_index == -1:
            self._error(
                DiagnosticCode.INVALID_EXPRESSION,
                "Expression lines must end with }}.",
                line_no, column, line_offset,
            )
            return None

        if trimmed[close_index + 2:].strip():
            self._error(
                DiagnosticCode.INVALID_EXPRESSION,
                "Expression lines cannot contain text after the closing }}.",
                line_no, column + close_index + 2, line_offset,
            )
            return None

        inner = trimmed[2:close_index].strip()
        if not inner:
            self._error(
                DiagnosticCode.INVALID_EXPRESSION,
                "Expression cannot be empty.",
                line_no, column, line_offset, close_index + 2,
            )
            return None

        return ExpressionNode(inner, span=span)

    # ------------------------------ elements ------------------------------ #

    def _parse_element(self, line: str, line_no: int, column: int, line_offset: int) -> Optional[ElementNode]:
        span = create_span(line_no, column, len(line), line_offset)
        selector = _SELECTOR.match(line)
        if selector is None:
            self._error(
                DiagnosticCode.INVALID_ELEMENT,
                "Element lines must start with a valid tag or component name.",
                line_no, column, line_offset, len(line),
            )
            return None

        raw = selector.group(0)
        name = selector.group(1)
        classes = [token for token in selector.group(2).split(".") if token]

        rest = line[len(raw):]
        consumed = len(raw)
        inline_text: Optional[TextNode] = None

        while rest:
            ws = _WHITESPACE.match(rest)
            if ws:
                rest = rest[ws.end():]
                consumed += ws.end()
            if not rest:
                break

            if rest.startswith("|"):
                inline_text = self._parse_text(rest, line_no, column + consumed, line_offset, placement="inline")
                break

            if rest.startswith("."):
                rest = rest[1:]
                consumed += 1
                token = _CLASS_TOKEN.match(rest)
                if token is None:
                    self._error(
                        DiagnosticCode.INVALID_ELEMENT,
                        "Class names must contain only letters, numbers, underscores, or hyphens.",
                        line_no, column + consumed, line_offset,
                    )
                    return None
                classes.append(token.group(0))
                rest = rest[token.end():]
                consumed += token.end()
                continue

            self._error(
                DiagnosticCode.INVALID_ELEMENT,
                "Element lines may only contain .class shorthands or inline text after the tag name.",
                line_no, column + consumed, line_offset,
            )
            return None

        return ElementNode(
            name=name,
            classes=classes,
            children=[inline_text] if inline_text is not None else [],
            span=span,
        )

    # ------------------------------ helpers ------------------------------ #

    def _check_empty_bodies(self) -> None:
        for branch, span in self._branches:
            if not branch.body:
                self.diagnostics.append(Diagnostic(
                    severity="error",
                    message="Conditional branches must include an inline body or indented block.",
                    span=span,
                    code=DiagnosticCode.EMPTY_BRANCH,
                ))
        for loop in self._loops:
            if not loop.body:
                self.diagnostics.append(Diagnostic(
                    severity="error",
                    message="@for loops must include an indented block.",
                    span=loop.span,
                    code=DiagnosticCode.EMPTY_FOR,
                ))

    def _error(
        self,
        code: DiagnosticCode,
        message: str,
        line_no: int,
        column: int,
        line_offset: int,
        length: int = 1,
    ) -> None:
        self.diagnostics.append(Diagnostic(
            severity="error",
            message=message,
            span=create_span(line_no, column, max(length, 1), line_offset),
            code=code,
        ))


def _find_closing_paren(text: str, open_index: int) -> Optional[int]:
    """Index of the `)` matching the `(` at open_index; quotes are skipped."""
    depth = 0
    quote: Optional[str] = None
    i = open_index
    while i < len(text):
        ch = text[i]
        if quote is not None:
            if ch == "\\":
                i += 2
                continue
            if ch == quote:
                quote = None
        elif ch in "'\"`":
            quote = ch
        elif ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
            if depth == 0:
                return i
        i += 1
    return None


def _merge_chunks(parts: List[TextPart]) -> List[TextPart]:
    # A stray `}}` splits literal text; glue the pieces back together
    merged: List[TextPart] = []
    for part in parts:
        if merged and isinstance(part, TextChunk) and isinstance(merged[-1], TextChunk):
            merged[-1] = TextChunk(merged[-1].value + part.value)
        else:
            merged.append(part)
    return merged


def parse(source: str) -> ParseResult:
    """
    Parse Collie source text.

    Args:
        source: Template text, any newline convention

    Returns:
        Root node (possibly partial) plus all collected diagnostics
    """
    return CollieParser(source).parse()


__all__ = ["ParseResult", "CollieParser", "parse", "TEMPLATE_ID_SUFFIX"]
