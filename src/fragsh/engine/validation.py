"""
Manifest and idempotency checks (`fragsh check`).

Every group is loaded in a throwaway session so the caller's session is
untouched.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal, Optional

from pydantic import BaseModel

from fragsh.core.datamodels import FileOutcome
from fragsh.core.registry import FragmentCommandRegistry, ModuleRegistry
from fragsh.engine.probe import Resolver
from fragsh.engine.shell import FragmentShell


class ValidationIssue(BaseModel):
    """One finding of the check."""

    level: Literal["error", "warning", "info"]
    group: str
    message: str
    path: Optional[str] = None


def validate(
    modules: ModuleRegistry,
    commands: FragmentCommandRegistry,
    base_dir: Path | str,
    resolver: Resolver | None = None,
) -> list[ValidationIssue]:
    """Check registries against the fragments on disk.

    Args:
        modules: Module registry
        commands: Command registry
        base_dir: Fragments directory
        resolver: Binary resolver for the throwaway session (default PATH lookup)

    Returns:
        Issues found, in group order.
    """
    issues: list[ValidationIssue] = []

    for group in commands.groups():
        if group not in modules:
            issues.append(ValidationIssue(
                level="error",
                group=group,
                message=f"Commands mapped to a group with no modules: {', '.join(commands.commands_for(group))}",
            ))

    shell = FragmentShell(base_dir, modules, commands, resolver=resolver)
    for group in modules.groups():
        summary = shell.ensure_group(group)
        executions = shell.context.executions

        for record in summary.records if summary else []:
            if record.outcome is FileOutcome.SKIPPED:
                issues.append(ValidationIssue(
                    level="info", group=group, message="Fragment not installed", path=record.path,
                ))
            elif record.outcome is FileOutcome.FAILED:
                issues.append(ValidationIssue(
                    level="error", group=group, message=record.error or "Failed to load", path=record.path,
                ))

        for name in commands.commands_for(group):
            if shell.environment.resolve(name) is None:
                issues.append(ValidationIssue(
                    level="warning", group=group, message=f"Mapped command '{name}' is not defined by the group",
                ))

        # A second pass over the same files must not execute anything
        shell.loader.load_group(group, shell.base_dir)
        if shell.context.executions != executions:
            issues.append(ValidationIssue(
                level="error", group=group, message="Reloading the group executed fragments again",
            ))

    return issues
