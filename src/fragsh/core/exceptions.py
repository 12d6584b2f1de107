"""
Exception classes for the fragment engine.
"""


class FragshError(Exception):
    """Base exception for fragsh errors."""


class CommandNotFoundError(FragshError):
    """Command name could not be resolved.

    The message is the same whether the name was never mapped to a group
    or its group loaded without defining it.
    """

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"{name}: command not found")


class FragmentError(FragshError):
    """Fragment-side API used incorrectly."""


class ManifestError(FragshError):
    """Manifest file could not be read or is inconsistent."""


class SessionStateError(FragshError):
    """Session state transition violates a load invariant."""
