"""
Shell environment: the command namespace fragments define into.

Provides:
- ShellEnvironment, holding commands, aliases, shell variables and the
  setup-hook capability map
- Context variables exposing the current environment and the fragment
  being loaded, so fragment-side decorators know where to register
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, Iterator

from fragsh.core.exceptions import CommandNotFoundError

if TYPE_CHECKING:
    from fragsh.engine.probe import CachedCommandProbe

logger = logging.getLogger(__name__)

# Environment active while a fragment loads or a command runs
_current_environment: ContextVar["ShellEnvironment | None"] = ContextVar(
    "current_environment", default=None
)
# Absolute path of the fragment whose top-level code is executing
_current_fragment: ContextVar["str | None"] = ContextVar("current_fragment", default=None)

NotFoundHandler = Callable[[str, list], Any]


@dataclass
class CommandEntry:
    """Entry for a defined command."""

    name: str
    handler: Callable[[list[str]], Any]
    description: str = ""
    aliases: list[str] = field(default_factory=list)
    source: str | None = None


class ShellEnvironment:
    """Command namespace of one shell session."""

    def __init__(self):
        self._commands: dict[str, CommandEntry] = {}
        self._aliases: dict[str, str] = {}
        self._hooks: dict[str, list[Callable[[], Any]]] = {}
        self._not_found_handler: NotFoundHandler | None = None
        self.variables: dict[str, Any] = {}
        self.probe: "CachedCommandProbe | None" = None

    # -----------------------------
    # Commands
    # -----------------------------

    def define(
        self,
        name: str,
        handler: Callable[[list[str]], Any],
        description: str = "",
        aliases: list[str] | None = None,
        source: str | None = None,
    ) -> CommandEntry:
        """Define (or redefine) a command."""
        if name in self._commands:
            logger.debug(f"Redefining command '{name}'")
        entry = CommandEntry(
            name=name,
            handler=handler,
            description=description,
            aliases=list(aliases or []),
            source=source,
        )
        self._commands[name] = entry
        for alias in entry.aliases:
            self._aliases[alias] = name
        return entry

    def resolve(self, name: str) -> CommandEntry | None:
        """Get a command by name or alias."""
        if name in self._commands:
            return self._commands[name]
        if name in self._aliases:
            return self._commands.get(self._aliases[name])
        return None

    def call(self, entry: CommandEntry, args: list[str]) -> Any:
        """Run a command handler with this environment bound as current."""
        token = _current_environment.set(self)
        try:
            return entry.handler(args)
        finally:
            _current_environment.reset(token)

    def invoke(self, name: str, args: list[str]) -> Any:
        """Resolve and run a command, falling back to the not-found handler."""
        entry = self.resolve(name)
        if entry is not None:
            return self.call(entry, args)
        if self._not_found_handler is None:
            raise CommandNotFoundError(name)
        return self._not_found_handler(name, args)

    def set_not_found_handler(self, handler: NotFoundHandler | None) -> None:
        """Install the hook invoked when a name does not resolve."""
        self._not_found_handler = handler

    def all_commands(self) -> list[CommandEntry]:
        """Get all defined commands sorted by name."""
        return sorted(self._commands.values(), key=lambda e: e.name)

    def names(self) -> list[str]:
        """Get all command names and aliases."""
        return sorted({*self._commands, *self._aliases})

    # -----------------------------
    # Setup hooks
    # -----------------------------

    def register_hook(self, path: str, hook: Callable[[], Any]) -> None:
        """Declare a setup hook provided by the fragment at path."""
        self._hooks.setdefault(path, []).append(hook)

    def hooks_for(self, path: str) -> list[Callable[[], Any]]:
        """Get the setup hooks a fragment declared (may be empty)."""
        return list(self._hooks.get(path, []))

    def forget_fragments(self) -> int:
        """Drop every fragment-defined command and hook. Returns commands dropped."""
        dropped = [name for name, entry in self._commands.items() if entry.source is not None]
        for name in dropped:
            del self._commands[name]
        self._aliases = {a: n for a, n in self._aliases.items() if n in self._commands}
        self._hooks.clear()
        return len(dropped)

    def __contains__(self, name: str) -> bool:
        return self.resolve(name) is not None

    def __len__(self) -> int:
        return len(self._commands)


def current_environment() -> ShellEnvironment | None:
    """Get the environment of the fragment load or command currently running."""
    return _current_environment.get()


def current_fragment() -> str | None:
    """Get the absolute path of the fragment currently being loaded."""
    return _current_fragment.get()


@contextmanager
def fragment_scope(environment: ShellEnvironment, path: str | None) -> Iterator[None]:
    """Bind environment and fragment path while fragment code executes."""
    env_token = _current_environment.set(environment)
    path_token = _current_fragment.set(path)
    try:
        yield
    finally:
        _current_fragment.reset(path_token)
        _current_environment.reset(env_token)
