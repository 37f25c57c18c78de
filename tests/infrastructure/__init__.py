"""
Shared test infrastructure for the Collie tools.

Modules:
- file_utils: creating files in temporary projects
- cli_utils: running the CLI in a subprocess
- markup_utils: Tree-sitter availability checks
"""

from .file_utils import write
from .cli_utils import run_cli, jload
from .markup_utils import is_tree_sitter_available

__all__ = ["write", "run_cli", "jload", "is_tree_sitter_available"]
