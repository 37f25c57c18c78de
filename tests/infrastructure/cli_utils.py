"""
Utilities for working with the CLI in tests.
"""

import json
import os
import subprocess
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[2]


def run_cli(root: Path, *args: str, stdin: str | None = None) -> subprocess.CompletedProcess:
    """
    Run collie.cli with the given arguments in a directory.

    Args:
        root: Working directory for the command
        *args: Command line arguments
        stdin: Optional text fed to standard input

    Returns:
        CompletedProcess with captured output
    """
    env = os.environ.copy()
    env["PYTHONPATH"] = os.pathsep.join(filter(None, [str(PROJECT_ROOT), env.get("PYTHONPATH")]))
    env.pop("COLLIE_DEBUG", None)
    return subprocess.run(
        [sys.executable, "-m", "collie.cli", *args],
        cwd=root, env=env, input=stdin, capture_output=True, text=True, encoding="utf-8"
    )


def jload(s: str):
    return json.loads(s)
