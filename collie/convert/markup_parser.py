"""
Tree-sitter infrastructure for JSX/TSX selections.

A selection is usually a bare list of sibling elements, which is not a valid
program on its own, so it is wrapped into an arrow function returning a
fragment before parsing with the TSX grammar.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple

from tree_sitter import Language, Node, Parser, Tree

from ..errors import MarkupParseError

WRAPPER_IDENTIFIER = "__CollieTemp"
WRAPPER_PREFIX = f"const {WRAPPER_IDENTIFIER} = () => (<>"
WRAPPER_SUFFIX = "</>);"

JSX_CHILD_TYPES = frozenset({
    "jsx_element",
    "jsx_self_closing_element",
    "jsx_expression",
    "jsx_text",
    "html_character_reference",
})
JSX_TAG_TYPES = frozenset({"jsx_opening_element", "jsx_closing_element"})


class MarkupDocument:
    """
    Wrapper for a Tree-sitter parsed TSX text with node helpers.
    """

    def __init__(self, text: str):
        self.text = text
        self._text_bytes = text.encode("utf-8")
        self.tree: Tree = self.get_parser().parse(self._text_bytes)

    @staticmethod
    def get_language() -> Language:
        import tree_sitter_typescript as tsts
        # TSX is a superset of JSX for our purposes
        return Language(tsts.language_tsx())

    def get_parser(self) -> Parser:
        return Parser(self.get_language())

    @property
    def root_node(self) -> Node:
        return self.tree.root_node

    def walk_tree(self, start_node: Optional[Node] = None) -> Iterator[Node]:
        """
        Walk the tree using TreeCursor for efficient traversal.

        Args:
            start_node: Node to start from (default: root)

        Yields:
            Node objects in depth-first order
        """
        if start_node is None:
            start_node = self.root_node

        cursor = start_node.walk()
        visited_children = False

        while True:
            if not visited_children:
                yield cursor.node
                if not cursor.goto_first_child():
                    visited_children = True
            elif cursor.node == start_node:
                break
            elif cursor.goto_next_sibling():
                visited_children = False
            elif not cursor.goto_parent():
                break
            else:
                visited_children = True

    def get_node_text(self, node: Node) -> str:
        """Get text content for a node."""
        return self._text_bytes[node.start_byte:node.end_byte].decode("utf-8")

    def get_range_text(self, first: Node, last: Node) -> str:
        """Source text from the start of `first` to the end of `last`."""
        return self._text_bytes[first.start_byte:last.end_byte].decode("utf-8")

    def has_error(self) -> bool:
        """Check if the tree has any syntax errors."""
        return self.root_node.has_error

    def get_errors(self) -> List[Node]:
        """Get all error and missing nodes in the tree."""
        return [node for node in self.walk_tree() if node.is_error or node.is_missing]

    def byte_to_char_position(self, byte_pos: int) -> int:
        """
        Convert a byte position to a character position in the text.
        A position inside a multi-byte character maps to that character's start.
        """
        if byte_pos <= 0:
            return 0
        if byte_pos >= len(self._text_bytes):
            return len(self.text)
        return len(self._text_bytes[:byte_pos].decode("utf-8", errors="ignore"))


@dataclass(frozen=True)
class MarkupSelection:
    document: MarkupDocument
    root_nodes: Tuple[Node, ...]


def parse_markup_selection(selection: str) -> MarkupSelection:
    """
    Parse a JSX/TSX selection into its top-level markup nodes.

    Args:
        selection: Selected markup text (one or more sibling nodes)

    Returns:
        Parsed document and the selection's root nodes

    Raises:
        MarkupParseError: The text has syntax errors or contains no markup
    """
    document = MarkupDocument(f"{WRAPPER_PREFIX}{selection}{WRAPPER_SUFFIX}")

    if document.has_error():
        errors = document.get_errors()
        where = _describe_location(document, selection, errors[0]) if errors else "unknown location"
        raise MarkupParseError(f"Unable to parse the selected JSX: unexpected syntax at {where}.")

    root_nodes = _extract_root_nodes(document)
    if not root_nodes:
        raise MarkupParseError("No JSX content detected in the selection.")

    return MarkupSelection(document=document, root_nodes=tuple(root_nodes))


def _describe_location(document: MarkupDocument, selection: str, node: Node) -> str:
    offset = document.byte_to_char_position(node.start_byte) - len(WRAPPER_PREFIX)
    offset = min(max(offset, 0), len(selection))
    before = selection[:offset]
    line = before.count("\n") + 1
    column = offset - (before.rfind("\n") + 1) + 1
    return f"line {line}, column {column}"


def _extract_root_nodes(document: MarkupDocument) -> List[Node]:
    body = _find_wrapper_body(document)
    if body is None:
        return []

    if is_fragment(body):
        return [
            child for child in jsx_children(body)
            if not (child.type == "jsx_text" and not document.get_node_text(child).strip())
        ]
    if body.type in JSX_CHILD_TYPES:
        return [body]
    return []


def _find_wrapper_body(document: MarkupDocument) -> Optional[Node]:
    for declarator in document.walk_tree():
        if declarator.type != "variable_declarator":
            continue
        name = declarator.child_by_field_name("name")
        value = declarator.child_by_field_name("value")
        if name is None or document.get_node_text(name) != WRAPPER_IDENTIFIER:
            continue
        if value is None or value.type != "arrow_function":
            continue
        body = value.child_by_field_name("body")
        while body is not None and body.type == "parenthesized_expression":
            inner = body.named_children
            body = inner[0] if inner else None
        return body
    return None


def is_fragment(node: Node) -> bool:
    """`<>...</>` is a jsx_element whose opening tag has no name."""
    if node.type != "jsx_element":
        return False
    opening = node.child_by_field_name("open_tag")
    return opening is not None and opening.child_by_field_name("name") is None


def jsx_children(node: Node) -> List[Node]:
    """Content nodes of a jsx_element, without its opening and closing tags."""
    return [child for child in node.named_children if child.type not in JSX_TAG_TYPES]


__all__ = [
    "MarkupDocument",
    "MarkupSelection",
    "parse_markup_selection",
    "is_fragment",
    "jsx_children",
    "JSX_CHILD_TYPES",
]
