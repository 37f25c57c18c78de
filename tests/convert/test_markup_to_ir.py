"""
JSX/TSX selection parsing and lowering to IR (requires Tree-sitter).
"""

from __future__ import annotations

import pytest

from collie.errors import MarkupParseError
from collie.ir import IrElement, IrExpression, IrFragment, IrProp, IrText


def convert(selection: str):
    from collie.convert import convert_markup_nodes_to_ir, parse_markup_selection

    parsed = parse_markup_selection(selection)
    return convert_markup_nodes_to_ir(parsed.root_nodes, parsed.document)


@pytest.mark.usefixtures("skip_if_no_tree_sitter")
class TestSelectionParsing:

    def test_sibling_roots(self):
        from collie.convert import parse_markup_selection

        parsed = parse_markup_selection("<input disabled />\n<br/>")

        assert [n.type for n in parsed.root_nodes] == ["jsx_self_closing_element", "jsx_self_closing_element"]

    def test_syntax_error(self):
        from collie.convert import parse_markup_selection

        with pytest.raises(MarkupParseError, match="Unable to parse the selected JSX"):
            parse_markup_selection("<div>")

    def test_no_markup(self):
        from collie.convert import parse_markup_selection

        with pytest.raises(MarkupParseError, match="No JSX content detected"):
            parse_markup_selection("   \n  ")


@pytest.mark.usefixtures("skip_if_no_tree_sitter")
class TestElements:

    def test_class_name_literal_becomes_classes(self):
        result = convert('<div className="card shadow">Hi</div>')

        assert result.nodes == (IrElement("div", classes=("card", "shadow"), children=(IrText("Hi"),)),)
        assert result.diagnostics.warnings == []

    def test_attributes(self):
        result = convert('<Button onClick={() => save()} label="Go" disabled />')

        (button,) = result.nodes
        assert button.tag_name == "Button"
        assert button.props == (
            IrProp("onClick", "{() => save()}"),
            IrProp("label", '"Go"'),
            IrProp("disabled"),
        )

    def test_dynamic_class_name_stays_a_prop(self):
        (div,) = convert("<div className={styles.root} />").nodes

        assert div.classes == ()
        assert div.props == (IrProp("className", "{styles.root}"),)

    def test_spread_attribute(self):
        (div,) = convert("<div {...rest} />").nodes

        assert div.props == (IrExpression("...rest"),)

    def test_fragment(self):
        (fragment,) = convert("<><a /><b /></>").nodes

        assert isinstance(fragment, IrFragment)
        assert [child.tag_name for child in fragment.children] == ["a", "b"]

    def test_member_tag_name(self):
        (node,) = convert("<Layout.Header />").nodes

        assert node.tag_name == "Layout.Header"


@pytest.mark.usefixtures("skip_if_no_tree_sitter")
class TestTextAndExpressions:

    def test_text_is_collapsed_and_trimmed(self):
        (p,) = convert("<p>\n  Hello\n    world\n</p>").nodes

        assert p.children == (IrText("Hello world"),)

    def test_character_references_are_decoded(self):
        (p,) = convert("<p>Tom &amp; Jerry</p>").nodes

        assert p.children == (IrText("Tom & Jerry"),)

    def test_embedded_expression(self):
        result = convert("<p>{count}</p>")

        assert result.nodes[0].children == (IrExpression("count"),)
        assert result.diagnostics.warnings == []

    def test_comment_only_expression(self):
        (div,) = convert("<div>{/* note */}</div>").nodes

        assert div.children == (IrExpression("/* note */"),)

    def test_empty_expression_is_dropped(self):
        (div,) = convert("<div>{}</div>").nodes

        assert div.children == ()


@pytest.mark.usefixtures("skip_if_no_tree_sitter")
class TestNestedMarkupContainment:

    def test_markup_inside_attribute(self):
        result = convert("<Button icon={<Icon name=\"x\" />} />")

        (button,) = result.nodes
        (placeholder,) = button.props
        assert isinstance(placeholder, IrExpression)
        assert placeholder.expression_text.startswith("/* Collie: nested JSX not converted:")
        assert "icon={<Icon name=\"x\" />}" in placeholder.expression_text
        assert len(result.diagnostics.warnings) == 1

    def test_placeholder_names_the_lost_attribute(self):
        result = convert("<A x={<B />} />")

        (placeholder,) = result.nodes[0].props
        assert placeholder.expression_text == "/* Collie: nested JSX not converted: x={<B />} */"
        assert "x={<B />}" in result.diagnostics.warnings[0]

    def test_markup_inside_child_expression_warns_once(self):
        result = convert("<ul>{items.map(i => <li>{i}</li>)}</ul>")

        (ul,) = result.nodes
        assert len(ul.children) == 1
        assert ul.children[0].expression_text.startswith("/* Collie: nested JSX not converted:")
        assert len(result.diagnostics.warnings) == 1

    def test_placeholder_preview_is_bounded(self):
        body = " ".join(f"<i key={{{n}}} />" for n in range(40))
        result = convert("<div>{cond && <>" + body + "</>}</div>")

        text = result.nodes[0].children[0].expression_text
        preview = text[len("/* Collie: nested JSX not converted: "):-len(" */")]
        assert len(preview) == 80

    def test_plain_expressions_do_not_warn(self):
        result = convert('<a href={url} title="t">{label}</a>')

        assert result.diagnostics.warnings == []
