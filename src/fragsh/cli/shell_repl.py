"""
Interactive REPL for fragsh.

`repl` uses prompt_toolkit (history, completion); `simple_repl` is a plain
input() + readline loop for dumb terminals.
"""

from __future__ import annotations

import shlex
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Any

from prompt_toolkit import PromptSession
from prompt_toolkit.auto_suggest import AutoSuggestFromHistory
from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.history import FileHistory, InMemoryHistory
from prompt_toolkit.styles import Style

from fragsh.cli.builtins import ExitShell
from fragsh.core.exceptions import CommandNotFoundError

if TYPE_CHECKING:
    from fragsh.config import Config
    from fragsh.engine import FragmentShell

# History file path
HISTORY_FILE = Path.home() / ".fragsh" / "history"

# Exit status for unresolved commands, as in POSIX shells
EXIT_NOT_FOUND = 127


def exit_status(result: Any) -> int:
    """Map a command's return value to an exit status."""
    if result is None or result is True:
        return 0
    if result is False:
        return 1
    if isinstance(result, int):
        return result
    print(result)
    return 0


def execute_line(shell: "FragmentShell", line: str) -> int | None:
    """Run one line of input.

    Args:
        shell: The session to run in
        line: Raw input line

    Returns:
        Exit status, or None for a blank/comment line.

    Raises:
        ExitShell: The exit builtin was called.
    """
    try:
        words = shlex.split(line, comments=True)
    except ValueError as e:
        print(f"fragsh: {e}", file=sys.stderr)
        return 2
    if not words:
        return None

    name, args = words[0], words[1:]
    try:
        return exit_status(shell.run(name, args))
    except CommandNotFoundError as e:
        print(str(e), file=sys.stderr)
        return EXIT_NOT_FOUND
    except ExitShell:
        raise
    except KeyboardInterrupt:
        print()
        return 130
    except Exception as e:
        print(f"{name}: {e}", file=sys.stderr)
        return 1


class CommandCompleter(Completer):
    """Completes the first word from defined and lazily-loaded commands."""

    def __init__(self, shell: "FragmentShell"):
        self.shell = shell

    def get_completions(self, document, complete_event):
        text = document.text_before_cursor
        if " " in text.lstrip():
            return

        word = text.lstrip()
        seen = set()
        for entry in self.shell.environment.all_commands():
            if entry.name.startswith(word):
                seen.add(entry.name)
                yield Completion(entry.name, start_position=-len(word), display_meta=entry.description)
        for name, group in self.shell.commands.items():
            if name.startswith(word) and name not in seen:
                yield Completion(name, start_position=-len(word), display_meta=f"({group})")


def get_style() -> Style:
    """Get the prompt style."""
    return Style.from_dict({
        "prompt": "ansicyan bold",
    })


def repl(shell: "FragmentShell", config: "Config") -> int:
    """Run the interactive REPL.

    Features:
        - Command history (persistent across sessions)
        - Tab completion for builtins and lazily-loaded commands
        - Ctrl+C to cancel input, Ctrl+D to exit

    Args:
        shell: The FragmentShell session
        config: Settings (prompt, history)

    Returns:
        Exit status of the shell.
    """
    if config.get("history"):
        HISTORY_FILE.parent.mkdir(parents=True, exist_ok=True)
        history = FileHistory(str(HISTORY_FILE))
    else:
        history = InMemoryHistory()

    session: PromptSession = PromptSession(
        history=history,
        completer=CommandCompleter(shell),
        auto_suggest=AutoSuggestFromHistory(),
        style=get_style(),
        complete_while_typing=False,
        enable_history_search=True,
    )
    prompt = [("class:prompt", config.get("prompt"))]

    status = 0
    while True:
        try:
            line = session.prompt(prompt)
        except KeyboardInterrupt:
            continue
        except EOFError:
            print()
            return status

        try:
            result = execute_line(shell, line)
        except ExitShell as e:
            return e.code
        if result is not None:
            status = result


def simple_repl(shell: "FragmentShell", config: "Config") -> int:
    """Plain input() REPL for terminals prompt_toolkit cannot drive."""
    try:
        import readline
    except ImportError:
        readline = None

    if readline is not None and config.get("history"):
        HISTORY_FILE.parent.mkdir(parents=True, exist_ok=True)
        try:
            readline.read_history_file(HISTORY_FILE)
        except (FileNotFoundError, OSError):
            pass

    prompt = config.get("prompt")
    status = 0
    try:
        while True:
            try:
                line = input(prompt)
            except KeyboardInterrupt:
                print()
                continue
            except EOFError:
                print()
                return status

            try:
                result = execute_line(shell, line)
            except ExitShell as e:
                return e.code
            if result is not None:
                status = result
    finally:
        if readline is not None and config.get("history"):
            try:
                readline.write_history_file(HISTORY_FILE)
            except OSError:
                pass
