"""
Helpers fragments use to wrap external binaries.

    from fragsh.wrappers import wrap_tool

    wrap_tool("gst", "git", "status", description="git status")
    # `gst -s` now runs `git status -s`
"""

from __future__ import annotations

import subprocess
import sys
from typing import Any, Callable

from fragsh.core.decorators import command
from fragsh.core.environment import current_environment
from fragsh.core.exceptions import FragmentError

# Exit status a shell reports for a missing executable
EXIT_NOT_FOUND = 127


def _resolve_binary(binary: str) -> str | None:
    env = current_environment()
    if env is None:
        raise FragmentError("run_tool called outside of a shell environment")
    if env.probe is None:
        raise FragmentError("Shell environment has no command probe")
    return env.probe.path_of(binary)


def run_tool(binary: str, *args: str, capture: bool = False) -> Any:
    """Run an external binary with forwarded arguments.

    Args:
        binary: Executable name, looked up once per session
        *args: Arguments passed through unchanged
        capture: Return the captured stdout instead of streaming it

    Returns:
        Exit code, or stdout text when capture is True. A missing binary
        returns 127 (or "" when capturing).
    """
    path = _resolve_binary(binary)
    if path is None:
        print(f"{binary}: not installed", file=sys.stderr)
        return "" if capture else EXIT_NOT_FOUND

    if capture:
        result = subprocess.run([path, *args], capture_output=True, text=True)
        return result.stdout

    return subprocess.run([path, *args]).returncode


def wrap_tool(
    name: str,
    binary: str,
    *prefix: str,
    description: str | None = None,
    aliases: list[str] | None = None,
) -> Callable[[list[str]], Any]:
    """Define a command that forwards its arguments to `binary *prefix`."""
    def handler(args: list[str]) -> Any:
        return run_tool(binary, *prefix, *args)

    handler.__name__ = name.replace("-", "_")
    desc = description or " ".join((binary, *prefix))
    return command(name, desc, aliases=aliases)(handler)
