"""
Loading of collie.yaml.

Values are checked field by field against the option dataclasses; any
mismatch is reported with the dotted path of the offending key.
"""

from __future__ import annotations

import dataclasses
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Type, TypeVar, get_args, get_origin, get_type_hints

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from ..errors import ConfigLoadError
from .model import CONFIG_FILE_NAMES, CollieConfig, ExportOptions, FormatOptions

_LOG = logging.getLogger(__name__)

_yaml = YAML(typ="safe")

T = TypeVar("T")


def find_config_file(root: Path) -> Optional[Path]:
    for name in CONFIG_FILE_NAMES:
        candidate = root / name
        if candidate.is_file():
            return candidate
    return None


def load_config(root: Path) -> CollieConfig:
    """
    Load the Collie configuration of a project.

    Args:
        root: Directory holding collie.yaml or .collie.yaml

    Returns:
        Parsed configuration; defaults when no file exists

    Raises:
        ConfigLoadError: Unreadable YAML, unknown keys or wrong value types
    """
    path = find_config_file(root)
    if path is None:
        _LOG.debug("No config file in %s, using defaults", root)
        return CollieConfig()

    _LOG.debug("Loading config from %s", path)
    try:
        raw = _yaml.load(path.read_text(encoding="utf-8"))
    except YAMLError as e:
        raise ConfigLoadError(f"{path.name}: invalid YAML: {e}") from e
    return config_from_dict(raw or {})


def config_from_dict(raw: Any) -> CollieConfig:
    if not isinstance(raw, dict):
        raise _err("<root>", f"expected mapping, got {type(raw).__name__}")
    _check_keys(raw, {"format", "export"}, "")
    return CollieConfig(
        format=_load_section(FormatOptions, raw.get("format"), "format"),
        export=_load_section(ExportOptions, raw.get("export"), "export"),
    )


def _load_section(cls: Type[T], raw: Any, path: str) -> T:
    if raw is None:
        return cls()
    if not isinstance(raw, dict):
        raise _err(path, f"expected mapping, got {type(raw).__name__}")

    hints = get_type_hints(cls)
    names = {f.name for f in dataclasses.fields(cls)}
    _check_keys(raw, names, path)

    values: Dict[str, Any] = {}
    for key, val in raw.items():
        values[key] = _coerce(hints[key], val, f"{path}.{key}")
    return cls(**values)


def _coerce(tp: Any, val: Any, path: str) -> Any:
    if get_origin(tp) is not None and get_args(tp) and all(isinstance(a, str) for a in get_args(tp)):
        # Literal of strings; matched case-insensitively (jsx == JSX)
        allowed = get_args(tp)
        if isinstance(val, str):
            for option in allowed:
                if option.lower() == val.lower():
                    return option
        raise _err(path, f"expected one of {', '.join(a.lower() for a in allowed)}, got {val!r}")
    if tp is bool:
        if not isinstance(val, bool):
            raise _err(path, f"expected bool, got {type(val).__name__}")
        return val
    if tp is int:
        if isinstance(val, bool) or not isinstance(val, int):
            raise _err(path, f"expected int, got {type(val).__name__}")
        if val < 0:
            raise _err(path, f"expected a non-negative int, got {val}")
        return val
    return val


def _check_keys(raw: Dict[Any, Any], allowed: set, path: str) -> None:
    for key in raw:
        if key not in allowed:
            where = f"{path}.{key}" if path else str(key)
            raise _err(where, "unknown key")


def _err(path: str, msg: str) -> ConfigLoadError:
    _LOG.debug("RAISE at %s: %s", path, msg)
    return ConfigLoadError(f"{path}: {msg}")


__all__ = ["load_config", "config_from_dict", "find_config_file"]
