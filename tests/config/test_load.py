from __future__ import annotations

import pytest

from collie.config import CollieConfig, ExportOptions, FormatOptions, config_from_dict, load_config
from collie.errors import ConfigLoadError
from tests.infrastructure import write


class TestLoadConfig:

    def test_missing_file_gives_defaults(self, tmp_path):
        assert load_config(tmp_path) == CollieConfig()

    def test_full_file(self, tmp_path):
        write(tmp_path / "collie.yaml", (
            "format:\n"
            "  indent_size: 4\n"
            "  space_around_pipe: false\n"
            "export:\n"
            "  target: tsx\n"
        ))

        cfg = load_config(tmp_path)

        assert cfg.format == FormatOptions(indent_size=4, space_around_pipe=False)
        assert cfg.export == ExportOptions(target="TSX")

    def test_hidden_file_is_found(self, tmp_path):
        write(tmp_path / ".collie.yaml", "export:\n  indent_size: 3\n")

        assert load_config(tmp_path).export.indent_size == 3

    def test_plain_name_takes_precedence(self, tmp_path):
        write(tmp_path / "collie.yaml", "format:\n  indent_size: 4\n")
        write(tmp_path / ".collie.yaml", "format:\n  indent_size: 8\n")

        assert load_config(tmp_path).format.indent_size == 4

    def test_empty_file(self, tmp_path):
        write(tmp_path / "collie.yaml", "")

        assert load_config(tmp_path) == CollieConfig()

    def test_invalid_yaml(self, tmp_path):
        write(tmp_path / "collie.yaml", "format: [unclosed\n")

        with pytest.raises(ConfigLoadError, match="invalid YAML"):
            load_config(tmp_path)


class TestValidation:

    def test_unknown_top_level_key(self):
        with pytest.raises(ConfigLoadError, match=r"^lint: unknown key"):
            config_from_dict({"lint": {}})

    def test_unknown_nested_key(self):
        with pytest.raises(ConfigLoadError, match=r"^format\.tabs: unknown key"):
            config_from_dict({"format": {"tabs": True}})

    def test_wrong_type(self):
        with pytest.raises(ConfigLoadError, match=r"^format\.indent_size: expected int"):
            config_from_dict({"format": {"indent_size": "2"}})

    def test_bool_is_not_an_int(self):
        with pytest.raises(ConfigLoadError, match=r"^export\.indent_size"):
            config_from_dict({"export": {"indent_size": True}})

    def test_bad_target(self):
        with pytest.raises(ConfigLoadError, match=r"^export\.target: expected one of jsx, tsx"):
            config_from_dict({"export": {"target": "vue"}})

    def test_section_must_be_mapping(self):
        with pytest.raises(ConfigLoadError, match=r"^export: expected mapping"):
            config_from_dict({"export": "tsx"})

    def test_config_error_is_a_value_error(self):
        with pytest.raises(ValueError):
            config_from_dict(["not", "a", "mapping"])
