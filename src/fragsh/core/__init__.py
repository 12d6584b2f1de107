"""
Core module for the fragsh package.

Provides the registries, data models, shell environment and fragment-side
decorators.
"""

from fragsh.core.datamodels import (
    FileLoadRecord,
    FileOutcome,
    LoadState,
    LoadSummary,
    ModuleDescriptor,
    ProbeResult,
)
from fragsh.core.decorators import command, invoke, setup_hook
from fragsh.core.environment import (
    CommandEntry,
    ShellEnvironment,
    current_environment,
    current_fragment,
    fragment_scope,
)
from fragsh.core.exceptions import (
    CommandNotFoundError,
    FragmentError,
    FragshError,
    ManifestError,
    SessionStateError,
)
from fragsh.core.manifest import Manifest, load_manifest
from fragsh.core.registry import FragmentCommandRegistry, ModuleRegistry

__all__ = [
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
    # Environment
    "ShellEnvironment",
    "CommandEntry",
    "current_environment",
    "current_fragment",
    "fragment_scope",
    # Decorators
    "command",
    "setup_hook",
    "invoke",
    # Exceptions
    "FragshError",
    "CommandNotFoundError",
    "FragmentError",
    "ManifestError",
    "SessionStateError",
]
