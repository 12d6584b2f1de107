"""
Read-only registries mapping groups to fragment files and commands to groups.
"""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Iterable, Iterator, Mapping

from fragsh.core.datamodels import ModuleDescriptor

logger = logging.getLogger(__name__)


class ModuleRegistry:
    """Registry of group id -> ordered fragment descriptors."""

    def __init__(self, descriptors: Iterable[ModuleDescriptor] = ()):
        table: dict[str, list[ModuleDescriptor]] = {}
        for descriptor in descriptors:
            table.setdefault(descriptor.group, []).append(descriptor)
        self._groups: Mapping[str, tuple[ModuleDescriptor, ...]] = MappingProxyType(
            {group: tuple(items) for group, items in table.items()}
        )

    @classmethod
    def from_table(cls, table: Mapping[str, Iterable[str]]) -> ModuleRegistry:
        """Build from {group: ["dir/file.py", ...]}.

        Example:
            ModuleRegistry.from_table({
                "dev-tools": ["dev/git.py", "_shared/helpers.py"],
            })
        """
        return cls(
            ModuleDescriptor.from_path(group, relative)
            for group, paths in table.items()
            for relative in paths
        )

    def resolve(self, group_id: str) -> list[ModuleDescriptor]:
        """Get the group's descriptors in declared order.

        Unknown groups are expected on partial installs and return [].
        """
        descriptors = self._groups.get(group_id)
        if descriptors is None:
            logger.debug(f"No modules registered for group '{group_id}'")
            return []
        return list(descriptors)

    def groups(self) -> list[str]:
        """Get all group ids in registration order."""
        return list(self._groups)

    def __contains__(self, group_id: str) -> bool:
        return group_id in self._groups

    def __iter__(self) -> Iterator[str]:
        return iter(self._groups)

    def __len__(self) -> int:
        return len(self._groups)


class FragmentCommandRegistry:
    """Registry of command name -> owning group id."""

    def __init__(self, mapping: Mapping[str, str] | None = None):
        self._commands: Mapping[str, str] = MappingProxyType(dict(mapping or {}))

    @classmethod
    def from_groups(cls, groups: Mapping[str, Iterable[str]]) -> FragmentCommandRegistry:
        """Build from {group: [command, ...]}.

        A command claimed by two groups raises ValueError.
        """
        mapping: dict[str, str] = {}
        for group, names in groups.items():
            for name in names:
                owner = mapping.get(name)
                if owner is not None and owner != group:
                    raise ValueError(f"Command '{name}' mapped to both '{owner}' and '{group}'")
                mapping[name] = group
        return cls(mapping)

    def lookup(self, command_name: str) -> str | None:
        """Get the group owning a command, or None if unmapped."""
        return self._commands.get(command_name)

    def commands_for(self, group_id: str) -> list[str]:
        """Get all command names owned by a group, sorted."""
        return sorted(name for name, group in self._commands.items() if group == group_id)

    def groups(self) -> list[str]:
        """Get distinct group ids referenced by the mapping, sorted."""
        return sorted(set(self._commands.values()))

    def items(self) -> list[tuple[str, str]]:
        """Get (command, group) pairs sorted by command."""
        return sorted(self._commands.items())

    def __contains__(self, command_name: str) -> bool:
        return command_name in self._commands

    def __iter__(self) -> Iterator[str]:
        return iter(self._commands)

    def __len__(self) -> int:
        return len(self._commands)
