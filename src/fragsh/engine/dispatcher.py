"""
Command dispatcher - the environment's command-not-found handler.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from fragsh.core.environment import ShellEnvironment
from fragsh.core.exceptions import CommandNotFoundError
from fragsh.core.registry import FragmentCommandRegistry
from fragsh.engine.initializer import CapabilityInitializer

logger = logging.getLogger(__name__)


class CommandDispatcher:
    """Loads the owning group of an unresolved command, then retries once."""

    def __init__(
        self,
        commands: FragmentCommandRegistry,
        initializer: CapabilityInitializer,
        environment: ShellEnvironment,
        base_dir: Path | str,
    ):
        self.commands = commands
        self.initializer = initializer
        self.environment = environment
        self.base_dir = Path(base_dir)

    def install(self) -> None:
        """Register as the environment's not-found handler."""
        self.environment.set_not_found_handler(self.dispatch)

    def dispatch(self, name: str, args: list[str]) -> Any:
        """Handle a name the environment could not resolve.

        Args:
            name: The command name as typed
            args: Its arguments, forwarded unchanged

        Returns:
            Whatever the command returns.

        Raises:
            CommandNotFoundError: Unmapped name, or the group did not define it.
        """
        group_id = self.commands.lookup(name)
        if group_id is None:
            raise CommandNotFoundError(name)

        logger.debug(f"Dispatching '{name}' to group '{group_id}'")
        self.initializer.ensure_group(group_id, self.base_dir)

        # Single retry; a stale mapping must not loop
        entry = self.environment.resolve(name)
        if entry is None:
            logger.debug(f"Group '{group_id}' did not define '{name}'")
            raise CommandNotFoundError(name)

        return self.environment.call(entry, args)
