"""
CLI module for the fragsh package.

Provides the `fragsh` command, the interactive REPL and shell builtins.
"""

from fragsh.cli.builtins import ExitShell, install_builtins
from fragsh.cli.shell_repl import execute_line, repl, simple_repl

__all__ = [
    "ExitShell",
    "install_builtins",
    "execute_line",
    "repl",
    "simple_repl",
]
