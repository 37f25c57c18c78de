from __future__ import annotations

import textwrap

from collie.config import ExportOptions
from collie.convert.markup_printer import format_markup_text, print_markup_nodes
from collie.ir import (
    create_ir_conditional,
    create_ir_conditional_branch,
    create_ir_element,
    create_ir_expression,
    create_ir_fragment,
    create_ir_prop,
    create_ir_text,
)


def dedent(text: str) -> str:
    return textwrap.dedent(text).lstrip("\n")


class TestElements:

    def test_single_root_without_fragment(self):
        node = create_ir_element("div", classes=["a", "b"], children=[create_ir_text("Hi")])

        assert print_markup_nodes([node]) == '<div className="a b">Hi</div>\n'

    def test_childless_element_self_closes(self):
        node = create_ir_element("input", props=[create_ir_prop("disabled"), create_ir_prop("value", "{v}")])

        assert print_markup_nodes([node]) == "<input disabled value={v} />\n"

    def test_spread_prop(self):
        node = create_ir_element("div", props=[create_ir_expression("...rest")])

        assert print_markup_nodes([node]) == "<div {...rest} />\n"

    def test_many_roots_get_a_fragment(self):
        nodes = [create_ir_element("br"), create_ir_expression("count")]

        assert print_markup_nodes(nodes) == dedent("""
            <>
              <br />
              {count}
            </>
            """)

    def test_nested_children_and_indent_size(self):
        node = create_ir_element("ul", children=[
            create_ir_element("li", children=[create_ir_text("a"), create_ir_expression("b")]),
        ])

        assert print_markup_nodes([node], ExportOptions(indent_size=4)) == dedent("""
            <ul>
                <li>a{b}</li>
            </ul>
            """)

    def test_explicit_fragment(self):
        node = create_ir_fragment([create_ir_element("a")])

        assert print_markup_nodes([node]) == "<>\n  <a />\n</>\n"
        assert print_markup_nodes([create_ir_fragment([])]) == "<></>\n"


class TestText:

    def test_safe_text_is_raw(self):
        assert format_markup_text("Hello world") == "Hello world"

    def test_special_characters_are_quoted(self):
        assert format_markup_text("a < b & c") == '{"a < b & c"}'
        assert format_markup_text("{x}") == '{"{x}"}'

    def test_edge_spaces_are_quoted(self):
        assert format_markup_text("Hello ") == '{"Hello "}'

    def test_unsafe_only_child_is_quoted_inline(self):
        node = create_ir_element("p", children=[create_ir_text("1 < 2")])

        assert print_markup_nodes([node]) == '<p>{"1 < 2"}</p>\n'

    def test_text_and_expression_run_stays_on_one_line(self):
        node = create_ir_element("h2", children=[create_ir_text("Hello "), create_ir_expression("name"), create_ir_text("!")])

        assert print_markup_nodes([node]) == "<h2>Hello {name}!</h2>\n"

    def test_run_quotes_only_unsafe_text(self):
        node = create_ir_element("p", children=[create_ir_text("a < "), create_ir_expression("b")])

        assert print_markup_nodes([node]) == '<p>{"a < "}{b}</p>\n'

    def test_element_child_breaks_the_run(self):
        node = create_ir_element("p", children=[create_ir_text("Hi "), create_ir_element("b")])

        assert print_markup_nodes([node]) == '<p>\n  {"Hi "}\n  <b />\n</p>\n'


class TestConditionals:

    def test_single_test_branch(self):
        node = create_ir_conditional([create_ir_conditional_branch("ok", [create_ir_element("span")])])

        assert print_markup_nodes([node]) == dedent("""
            {ok && (
              <span />
            )}
            """)

    def test_chain_without_else_ends_in_null(self):
        node = create_ir_conditional([
            create_ir_conditional_branch("a", [create_ir_element("x")]),
            create_ir_conditional_branch("b", []),
        ])

        assert print_markup_nodes([node]) == dedent("""
            {
              a ? (
                <x />
              )
              : b ? (
                null
              )
              : null
            }
            """)

    def test_chain_with_else(self):
        node = create_ir_conditional([
            create_ir_conditional_branch("a", [create_ir_text("yes")]),
            create_ir_conditional_branch(None, [create_ir_text("no")]),
        ])

        assert print_markup_nodes([node]) == dedent("""
            {
              a ? (
                yes
              )
              : (
                no
              )
            }
            """)

    def test_empty_conditional(self):
        assert print_markup_nodes([create_ir_conditional([])]) == "{null}\n"
