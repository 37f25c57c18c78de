from __future__ import annotations

import logging

import pytest

from collie.api import (
    ExportFailure,
    ExportSuccess,
    convert_markup_selection,
    export_to_markup,
    format_dsl,
    import_from_markup_selection,
    parse_dsl,
)
from collie.config import ExportOptions
from collie.errors import MarkupParseError
from collie.ir import IrElement, IrText
from collie.syntax import parse


class TestExport:

    def test_success_renders_markup(self, profile_card):
        result = export_to_markup(profile_card, "TSX")

        assert isinstance(result, ExportSuccess)
        assert result.kind == "success"
        assert result.target == "TSX"
        assert result.output_text.startswith("<>\n  {/* Collie props: name: string, avatar?: string */}\n")
        assert '  <div className="rounded shadow">\n' in result.output_text
        assert '    <h2 className="text-lg font-bold">Hello {name}</h2>\n' in result.output_text
        assert "      avatar ? (\n" in result.output_text
        assert "{/* Collie unsupported: @for tag in tags loop is not exported */}" in result.output_text
        assert result.output_text.endswith("</>\n")

    def test_text_with_expression_renders_on_one_line(self):
        result = export_to_markup("div.card\n  | Hello {{ name }}\n", "JSX")

        assert isinstance(result, ExportSuccess)
        assert result.output_text == '<div className="card">Hello {name}</div>\n'

    def test_target_defaults_to_options(self):
        result = export_to_markup("div\n", options=ExportOptions(target="TSX", indent_size=4))

        assert result.target == "TSX"
        assert result.output_text == "<div />\n"

    def test_failure_lists_errors(self):
        result = export_to_markup("div\n   span\n@else\n")

        assert isinstance(result, ExportFailure)
        assert result.kind == "failure"
        assert [str(d.code) for d in result.diagnostics] == ["COLLIE002", "COLLIE206"]
        assert result.output_text.splitlines() == [
            "/* Collie export failed to parse the template.",
            " * Indentation must be multiples of two spaces. [COLLIE002] at line 2, column 4",
            " * @else must follow an @if at the same indentation level. [COLLIE206] at line 3, column 1",
            " */",
        ]


class TestParseAndFormat:

    def test_round_trip(self, profile_card):
        result = parse_dsl(profile_card)
        printed = format_dsl(result.root)

        assert parse(printed).root == result.root


@pytest.mark.usefixtures("skip_if_no_tree_sitter")
class TestImport:

    def test_import_returns_ir(self):
        nodes = import_from_markup_selection('<span className="tag">New</span>')

        assert nodes == (IrElement("span", classes=("tag",), children=(IrText("New"),)),)

    def test_import_logs_warnings(self, caplog):
        with caplog.at_level(logging.WARNING, logger="collie"):
            import_from_markup_selection("<A x={<B />} />")

        assert any("Nested JSX" in record.getMessage() for record in caplog.records)

    def test_convert_selection_to_dsl(self):
        result = convert_markup_selection('<div className="card">\n  <h2>Hello {name}</h2>\n</div>')

        assert result.warnings == []
        assert result.dsl_text == "div.card\n  h2\n    | Hello\n    {{ name }}\n"
        assert parse(result.dsl_text).diagnostics == []

    def test_member_tag_name_warns(self):
        result = convert_markup_selection("<Layout.Header />")

        assert result.dsl_text == "Layout.Header\n"
        assert any("Layout.Header" in warning for warning in result.warnings)

    def test_hard_failures_raise(self):
        with pytest.raises(MarkupParseError):
            import_from_markup_selection("<div>")
