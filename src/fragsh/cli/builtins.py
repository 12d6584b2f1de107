"""
Shell builtins - commands that exist before any fragment loads.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from fragsh.core.datamodels import LoadState

if TYPE_CHECKING:
    from fragsh.engine import FragmentShell


class ExitShell(Exception):
    """Raised by the exit builtin to leave the REPL."""

    def __init__(self, code: int = 0):
        self.code = code
        super().__init__(f"exit {code}")


STATE_LABELS = {
    LoadState.NOT_LOADED: "not loaded",
    LoadState.LOADING: "loading",
    LoadState.LOADED: "loaded",
}


def install_builtins(shell: "FragmentShell") -> None:
    """Define the builtin commands in the shell's environment."""
    env = shell.environment

    def cmd_help(args: list[str]) -> int:
        """List defined commands and commands that load on first use."""
        print("\nCommands:")
        for entry in env.all_commands():
            print(f"  {entry.name:<14} - {entry.description}")

        lazy = [(name, group) for name, group in shell.commands.items() if name not in env]
        if lazy:
            print("\nLoaded on first use:")
            for name, group in lazy:
                print(f"  {name:<14} ({group})")
        print()
        return 0

    def cmd_exit(args: list[str]) -> int:
        """Leave the shell."""
        try:
            code = int(args[0]) if args else 0
        except ValueError:
            print(f"exit: {args[0]}: numeric argument required")
            code = 2
        raise ExitShell(code)

    def cmd_groups(args: list[str]) -> int:
        """Show every group and whether it has loaded this session."""
        print()
        for group, state in shell.group_states().items():
            modules = shell.modules.resolve(group)
            summary = shell.context.summaries.get(group)
            detail = ""
            if summary is not None:
                detail = f" [{summary.loaded} loaded, {summary.failed} failed, {summary.skipped} skipped]"
            print(f"  {group:<20} {STATE_LABELS[state]:<11} {len(modules)} module(s){detail}")
        print()
        return 0

    def cmd_which(args: list[str]) -> int:
        """Locate commands and external binaries."""
        if not args:
            print("usage: which NAME...")
            return 2
        status = 0
        for name in args:
            entry = env.resolve(name)
            group = shell.commands.lookup(name)
            if entry is not None:
                origin = entry.source or "builtin"
                print(f"{name}: command ({origin})")
                continue
            if group is not None:
                print(f"{name}: command (group {group}, not loaded)")
                continue
            result = shell.probe(name)
            if result.available:
                print(f"{name}: {result.path}")
            else:
                print(f"{name}: not found")
                status = 1
        return status

    def cmd_reload(args: list[str]) -> int:
        """Forget loaded fragments so groups load again on next use."""
        dropped = shell.reload()
        print(f"Reloaded: {dropped} fragment command(s) dropped; groups load again on next use.")
        return 0

    env.define("help", cmd_help, "Show available commands")
    env.define("exit", cmd_exit, "Leave the shell", aliases=["quit"])
    env.define("groups", cmd_groups, "Show group load states")
    env.define("which", cmd_which, "Locate a command or binary")
    env.define("reload", cmd_reload, "Reload fragments on next use")
