"""
FragmentShell - wires one session of the fragment engine.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Any

from fragsh.core.datamodels import LoadState, LoadSummary, ProbeResult
from fragsh.core.environment import ShellEnvironment
from fragsh.core.manifest import load_manifest
from fragsh.core.registry import FragmentCommandRegistry, ModuleRegistry
from fragsh.engine.dispatcher import CommandDispatcher
from fragsh.engine.initializer import CapabilityInitializer
from fragsh.engine.loader import MODULE_PREFIX, FragmentLoader
from fragsh.engine.probe import CachedCommandProbe, Resolver
from fragsh.session.context import SessionContext

if TYPE_CHECKING:
    from fragsh.config import Config

logger = logging.getLogger(__name__)


class FragmentShell:
    """One shell session: registries, state, environment and dispatch.

    Example:
        shell = FragmentShell.from_config(get_config())
        shell.run("gst", ["--short"])   # loads the dev-tools group first
    """

    def __init__(
        self,
        base_dir: Path | str,
        modules: ModuleRegistry,
        commands: FragmentCommandRegistry,
        context: SessionContext | None = None,
        environment: ShellEnvironment | None = None,
        resolver: Resolver | None = None,
        debug: bool = False,
    ):
        self.base_dir = Path(base_dir).expanduser()
        self.modules = modules
        self.commands = commands
        self.context = context or SessionContext()
        self.environment = environment or ShellEnvironment()
        self.debug = debug

        self.probe_cache = CachedCommandProbe(self.context, resolver)
        self.environment.probe = self.probe_cache

        self.loader = FragmentLoader(modules, self.context, self.environment, debug=debug)
        self.initializer = CapabilityInitializer(self.loader, self.context, self.environment)
        self.dispatcher = CommandDispatcher(commands, self.initializer, self.environment, self.base_dir)
        self.dispatcher.install()

    @classmethod
    def from_config(cls, config: "Config", resolver: Resolver | None = None) -> FragmentShell:
        """Build a shell from settings (manifest + fragments dir + debug)."""
        modules, commands = load_manifest(config.manifest_path()).build_registries()
        return cls(
            config.fragments_path(),
            modules,
            commands,
            resolver=resolver,
            debug=config.is_debug(),
        )

    def run(self, name: str, args: list[str] | None = None) -> Any:
        """Run a command, loading its group on first use."""
        return self.environment.invoke(name, list(args) if args is not None else [])

    def ensure_group(self, group_id: str) -> LoadSummary | None:
        return self.initializer.ensure_group(group_id, self.base_dir)

    def probe(self, name: str) -> ProbeResult:
        return self.probe_cache.probe(name)

    def group_states(self) -> dict[str, LoadState]:
        """Load state of every known group."""
        groups = dict.fromkeys([*self.modules.groups(), *self.commands.groups()])
        return {group: self.context.state_of(group) for group in groups}

    def reload(self) -> int:
        """Explicitly start over: forget fragment commands and all load state.

        Returns:
            Number of fragment commands dropped.
        """
        dropped = self.environment.forget_fragments()
        for name in [m for m in sys.modules if m.startswith(f"{MODULE_PREFIX}.")]:
            del sys.modules[name]
        self.context.reset()
        logger.info(f"Session reset, {dropped} fragment command(s) dropped")
        return dropped
