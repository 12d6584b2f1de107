"""
Manifest file describing groups, their fragment files and their commands.

Format (YAML):

    groups:
      dev-tools:
        description: Version control and build tools
        modules:
          - dev/git.py
          - _shared/helpers.py
        commands: [gst, glog, mk]
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field, ValidationError

from fragsh.core.datamodels import ModuleDescriptor
from fragsh.core.exceptions import ManifestError
from fragsh.core.registry import FragmentCommandRegistry, ModuleRegistry

# Builtin manifest and fragments shipped with the package
BUILTINS_DIR = Path(__file__).resolve().parent.parent / "builtins"
BUILTIN_MANIFEST = BUILTINS_DIR / "manifest.yaml"
BUILTIN_FRAGMENTS_DIR = BUILTINS_DIR / "fragments"


class GroupSpec(BaseModel):
    """One group entry of the manifest."""

    model_config = {"extra": "ignore"}

    description: Optional[str] = None
    modules: list[str] = Field(default_factory=list)
    commands: list[str] = Field(default_factory=list)


class Manifest(BaseModel):
    """Parsed manifest document."""

    model_config = {"extra": "ignore"}

    groups: dict[str, GroupSpec] = Field(default_factory=dict)

    def descriptors(self) -> list[ModuleDescriptor]:
        """All module descriptors in manifest order."""
        result = []
        for group, spec in self.groups.items():
            for relative in spec.modules:
                try:
                    result.append(ModuleDescriptor.from_path(group, relative))
                except ValueError as e:
                    raise ManifestError(f"Group '{group}': {e}") from e
        return result

    def build_registries(self) -> tuple[ModuleRegistry, FragmentCommandRegistry]:
        """Build the read-only registries from this manifest."""
        modules = ModuleRegistry(self.descriptors())
        try:
            commands = FragmentCommandRegistry.from_groups(
                {group: spec.commands for group, spec in self.groups.items()}
            )
        except ValueError as e:
            raise ManifestError(str(e)) from e
        return modules, commands


def load_manifest(path: Path | str | None = None) -> Manifest:
    """Load and validate a manifest file.

    Args:
        path: Manifest path (default: the builtin manifest)

    Returns:
        Parsed Manifest.

    Raises:
        ManifestError: File missing or unreadable, not YAML, or wrong shape.
    """
    manifest_path = Path(path).expanduser() if path else BUILTIN_MANIFEST
    try:
        text = manifest_path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise ManifestError(f"Manifest not found: {manifest_path}") from e
    except (OSError, UnicodeDecodeError) as e:
        raise ManifestError(f"Cannot read manifest {manifest_path}: {e}") from e

    try:
        data = yaml.safe_load(text) or {}
    except yaml.YAMLError as e:
        raise ManifestError(f"Invalid YAML in {manifest_path}: {e}") from e

    try:
        return Manifest.model_validate(data)
    except ValidationError as e:
        raise ManifestError(f"Invalid manifest {manifest_path}: {e}") from e
