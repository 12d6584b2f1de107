"""
fragsh - lazy fragment-loading command shell

Hundreds of small command wrappers are split into fragment files grouped
by capability. Nothing loads at startup: the first time a command is used,
the not-found handler loads its group and retries the command once.

Example usage:
    from fragsh import FragmentShell, ModuleRegistry, FragmentCommandRegistry

    modules = ModuleRegistry.from_table({"dev-tools": ["dev/git.py"]})
    commands = FragmentCommandRegistry.from_groups({"dev-tools": ["gst"]})

    shell = FragmentShell("~/.fragsh/fragments", modules, commands)
    shell.run("gst", ["--short"])

Fragment files define commands with the decorators exported here:

    from fragsh import command

    @command("hello", "Say hello")
    def hello(args):
        print("hello", *args)
        return 0
"""

__version__ = "0.1.0"

from fragsh.core import (
    CommandEntry,
    CommandNotFoundError,
    FileLoadRecord,
    FileOutcome,
    FragmentCommandRegistry,
    FragmentError,
    FragshError,
    LoadState,
    LoadSummary,
    Manifest,
    ManifestError,
    ModuleDescriptor,
    ModuleRegistry,
    ProbeResult,
    SessionStateError,
    ShellEnvironment,
    command,
    current_environment,
    invoke,
    load_manifest,
    setup_hook,
)
from fragsh.engine import (
    CachedCommandProbe,
    CapabilityInitializer,
    CommandDispatcher,
    FragmentLoader,
    FragmentShell,
)
from fragsh.session import SessionContext

__all__ = [
    # Version
    "__version__",
    # Registries
    "ModuleRegistry",
    "FragmentCommandRegistry",
    "Manifest",
    "load_manifest",
    # Models
    "ModuleDescriptor",
    "LoadState",
    "FileOutcome",
    "FileLoadRecord",
    "LoadSummary",
    "ProbeResult",
    # Engine
    "SessionContext",
    "ShellEnvironment",
    "CommandEntry",
    "FragmentLoader",
    "CapabilityInitializer",
    "CommandDispatcher",
    "CachedCommandProbe",
    "FragmentShell",
    # Fragment API
    "command",
    "setup_hook",
    "invoke",
    "current_environment",
    # Exceptions
    "FragshError",
    "CommandNotFoundError",
    "FragmentError",
    "ManifestError",
    "SessionStateError",
]
