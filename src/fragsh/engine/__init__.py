"""
Fragment engine: loader, initializer, dispatcher, probe cache and the
FragmentShell facade that wires them together.
"""

from fragsh.engine.dispatcher import CommandDispatcher
from fragsh.engine.initializer import CapabilityInitializer
from fragsh.engine.loader import FragmentLoader
from fragsh.engine.probe import CachedCommandProbe
from fragsh.engine.shell import FragmentShell
from fragsh.engine.validation import ValidationIssue, validate

__all__ = [
    "FragmentLoader",
    "CapabilityInitializer",
    "CommandDispatcher",
    "CachedCommandProbe",
    "FragmentShell",
    "ValidationIssue",
    "validate",
]
