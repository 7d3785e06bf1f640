"""
Unified test infrastructure for btpl.

Modules:
- file_utils: Utilities for creating template and script files
- cli_utils: Utilities for running the CLI in a subprocess
"""

from .file_utils import write, write_page
from .cli_utils import run_cli, jload

__all__ = [
    "write", "write_page",
    "run_cli", "jload",
]
