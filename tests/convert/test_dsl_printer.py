from __future__ import annotations

import pytest

from collie.config import FormatOptions
from collie.convert import print_dsl_document
from collie.convert.dsl_printer import DslPrinter
from collie.ir import (
    create_ir_conditional,
    create_ir_conditional_branch,
    create_ir_element,
    create_ir_expression,
    create_ir_fragment,
    create_ir_prop,
    create_ir_text,
)
from collie.syntax import parse


class TestDslPrinter:

    def test_selector_props_and_inline_text(self):
        node = create_ir_element(
            "Button",
            classes=["primary"],
            props=[create_ir_prop("disabled"), create_ir_prop("type", '"submit"')],
            children=[create_ir_text("Save")],
        )

        assert print_dsl_document([node]) == 'Button.primary disabled type="submit" | Save\n'

    def test_inline_expression_child_parses_back(self):
        node = create_ir_element("p", children=[create_ir_expression("count")])
        printed = print_dsl_document([node])

        assert printed == "p | {{ count }}\n"
        assert parse(printed).diagnostics == []

    def test_block_children(self):
        node = create_ir_element("ul", children=[
            create_ir_element("li", children=[create_ir_text("a")]),
            create_ir_expression("more"),
            create_ir_text("tail"),
        ])

        assert print_dsl_document([node]) == "ul\n  li | a\n  {{ more }}\n  | tail\n"

    def test_fragments_flatten(self):
        nodes = [create_ir_fragment([create_ir_element("a"), create_ir_fragment([create_ir_element("b")])])]

        assert print_dsl_document(nodes) == "a\nb\n"

    def test_options(self):
        node = create_ir_element("div", classes=["x", "y"], children=[create_ir_text("t")])
        options = FormatOptions(indent_size=4, prefer_compact_selectors=False, space_around_pipe=False)

        assert print_dsl_document([node], options) == "div .x .y |t\n"

    def test_empty_input(self):
        assert print_dsl_document([]) == ""

    def test_conditional_is_rejected(self):
        node = create_ir_conditional([create_ir_conditional_branch("a", [])])

        with pytest.raises(ValueError):
            print_dsl_document([node])


class TestDottedTagNames:

    def test_member_tag_is_printed_with_a_warning(self):
        printer = DslPrinter()
        node = create_ir_element("Layout", children=[create_ir_element("Foo.Bar", classes=["x"])])

        assert printer.print([node]) == "Layout\n  Foo.Bar.x\n"
        assert len(printer.warnings) == 1
        assert "Foo.Bar" in printer.warnings[0]

    def test_plain_tags_do_not_warn(self):
        printer = DslPrinter()
        printer.print([create_ir_element("div", classes=["a"])])

        assert printer.warnings == []

    def test_warnings_reset_between_documents(self):
        printer = DslPrinter()
        printer.print([create_ir_element("A.B")])
        printer.print([create_ir_element("div")])

        assert printer.warnings == []
