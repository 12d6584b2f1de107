"""
Decorators used by fragment files.

A fragment registers its commands into whatever environment is loading it:

    # fragments/dev/git.py
    from fragsh import command, setup_hook

    @command("gst", "git status")
    def gst(args):
        return run_tool("git", "status", *args)

    @setup_hook
    def configure():
        current_environment().variables.setdefault("GIT_PAGER", "cat")
"""

from __future__ import annotations

from typing import Any, Callable

from fragsh.core.environment import ShellEnvironment, current_environment, current_fragment
from fragsh.core.exceptions import FragmentError


def _require_environment() -> ShellEnvironment:
    env = current_environment()
    if env is None:
        raise FragmentError("No active shell environment (fragment used outside of a load)")
    return env


def command(
    name: str,
    description: str = "",
    aliases: list[str] | None = None,
) -> Callable:
    """Decorator to define a command in the current environment.

    Args:
        name: Command name as typed at the prompt
        description: Short description for help
        aliases: Alternative names for the command

    Returns:
        Decorator function. The handler receives the argument list.
    """
    def decorator(func: Callable) -> Callable:
        env = _require_environment()
        env.define(
            name,
            func,
            description=description or (func.__doc__ or "").strip().split("\n")[0],
            aliases=aliases,
            source=current_fragment(),
        )
        func.__command_name__ = name
        return func
    return decorator


def setup_hook(func: Callable) -> Callable:
    """Declare a setup hook, run once after the fragment's group loads."""
    env = _require_environment()
    path = current_fragment()
    if path is None:
        raise FragmentError("setup_hook can only be declared from a fragment file")
    env.register_hook(path, func)
    return func


def invoke(name: str, *args: str) -> Any:
    """Run a command through the current environment.

    Unresolved names go through the not-found handler, so this may load
    another group.
    """
    return _require_environment().invoke(name, list(args))
