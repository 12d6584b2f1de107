"""
Helper functions for the fragment registries.
"""

from __future__ import annotations

import os
import re

TRUTHY = ("1", "true", "yes", "on")


def _normalize_name(name: str) -> str:
    """Normalize a name to a valid identifier."""
    name = (name or "").strip()
    return re.sub(r"[^a-zA-Z0-9_]+", "_", name)


def _split_relative_path(relative: str) -> tuple[tuple[str, ...], str]:
    """Split "dir/sub/file.py" into (("dir", "sub"), "file.py")."""
    parts = [p for p in relative.replace("\\", "/").split("/") if p and p != "."]
    if not parts:
        raise ValueError(f"Empty module path: {relative!r}")
    if ".." in parts:
        raise ValueError(f"Module path must stay inside the fragments dir: {relative!r}")
    return tuple(parts[:-1]), parts[-1]


def env_flag(name: str) -> bool | None:
    """Read a boolean-like environment variable, None when unset."""
    value = os.environ.get(name)
    if value is None or not value.strip():
        return None
    return value.strip().lower() in TRUTHY
