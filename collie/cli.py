from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Optional

from .api import convert_markup_selection, export_to_markup
from .config import load_config
from .errors import CollieUserError
from .formatter import format_text
from .jsonic import dumps as jdumps
from .report_schema import build_check_report
from .syntax.parser import parse
from .version import tool_version

_LOG = logging.getLogger("collie")


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="collie",
        description="Collie template tools (format, check, JSX/TSX export and import)",
        add_help=True,
    )
    p.add_argument("-v", "--version", action="version", version=f"%(prog)s {tool_version()}")
    p.add_argument("--verbose", action="store_true", help="debug logging to stderr")
    p.add_argument(
        "--config-root",
        metavar="DIR",
        help="directory holding collie.yaml (default: current directory)",
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    sp_format = sub.add_parser("format", help="Format a template (stdout by default)")
    sp_format.add_argument("file", help="path to a .collie file")
    mode = sp_format.add_mutually_exclusive_group()
    mode.add_argument("--write", action="store_true", help="rewrite the file in place")
    mode.add_argument("--check", action="store_true", help="exit with 1 if the file is not formatted")

    sp_check = sub.add_parser("check", help="JSON report of parse diagnostics")
    sp_check.add_argument("file", help="path to a .collie file")

    sp_export = sub.add_parser("export", help="Compile a template to JSX/TSX")
    sp_export.add_argument("file", help="path to a .collie file")
    sp_export.add_argument("--target", choices=["jsx", "tsx"], help="markup flavour (default: from config)")

    sp_import = sub.add_parser("import", help="Convert a JSX/TSX selection to Collie")
    sp_import.add_argument("file", metavar="FILE|-", help="file with markup, or - for stdin")

    return p


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if (verbose or os.environ.get("COLLIE_DEBUG")) else logging.WARNING
    _LOG.setLevel(level)
    if not _LOG.handlers:
        h = logging.StreamHandler()
        h.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
        _LOG.addHandler(h)


def _read_input(file_arg: str) -> str:
    if file_arg == "-":
        return sys.stdin.read()
    return Path(file_arg).read_text(encoding="utf-8")


def main(argv: list[str] | None = None) -> int:
    ns = _build_parser().parse_args(argv)
    _setup_logging(ns.verbose)

    try:
        root = Path(ns.config_root) if ns.config_root else Path.cwd()
        cfg = load_config(root)

        if ns.cmd == "format":
            path = Path(ns.file)
            text = path.read_text(encoding="utf-8")
            result = format_text(text, cfg.format)
            if result.used_fallback:
                _LOG.warning("%s has parse errors; only whitespace was normalized", path)
            if ns.check:
                if result.changed:
                    sys.stderr.write(f"{path}: not formatted\n")
                    return 1
                return 0
            if ns.write:
                if result.changed:
                    path.write_text(result.text, encoding="utf-8")
                    _LOG.debug("Rewrote %s", path)
                return 0
            sys.stdout.write(result.text)
            return 0

        if ns.cmd == "check":
            parsed = parse(Path(ns.file).read_text(encoding="utf-8"))
            report = build_check_report(ns.file, parsed.diagnostics, parsed.root.id)
            sys.stdout.write(jdumps(report.model_dump(mode="json", by_alias=True)))
            return 0 if report.ok else 1

        if ns.cmd == "export":
            text = Path(ns.file).read_text(encoding="utf-8")
            target = ns.target.upper() if ns.target else None
            exported = export_to_markup(text, target, cfg.export)
            sys.stdout.write(exported.output_text.rstrip("\n") + "\n")
            return 0 if exported.kind == "success" else 1

        if ns.cmd == "import":
            imported = convert_markup_selection(_read_input(ns.file), cfg.format)
            for warning in imported.warnings:
                _LOG.warning(warning)
            sys.stdout.write(imported.dsl_text)
            return 0

    except CollieUserError as e:
        sys.stderr.write(str(e).rstrip() + "\n")
        return 2
    except OSError as e:
        sys.stderr.write(f"{e}\n")
        return 2

    return 2


if __name__ == "__main__":
    raise SystemExit(main())
