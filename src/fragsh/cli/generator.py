"""
Fragment scaffold generator.

Usage:
    fragsh new-fragment git-extras --group dev-tools
    fragsh new-fragment dcu --group containers --wrap "docker compose up"
"""

from __future__ import annotations

import re
import shlex
from pathlib import Path

BASIC_FRAGMENT_TEMPLATE = '''"""{name} fragment."""

from fragsh import command


@command("{command}", "Describe {command} here")
def {func}(args):
    print("{command}:", *args)
    return 0
'''

WRAPPER_FRAGMENT_TEMPLATE = '''"""{name} fragment: wraps `{wrap}`."""

from fragsh.wrappers import wrap_tool

wrap_tool({command!r}, {binary!r}{prefix}, description={wrap!r})
'''

MANIFEST_SNIPPET = """  {group}:
    modules:
      - {relative}
    commands: [{command}]
"""


def generate_command_name(name: str) -> str:
    """Normalize a command name: lowercase, letters/digits/_/- only."""
    name = (name or "").strip().lower().replace(" ", "-")
    return re.sub(r"[^a-z0-9_-]", "", name)


def generate_fragment(
    name: str,
    group: str,
    wrap_command: str | None = None,
    output_dir: Path | None = None,
    force: bool = False,
) -> tuple[bool, str, Path | None]:
    """Create a fragment file under <output_dir>/<group>/<name>.py.

    Args:
        name: Command name (also the file name)
        group: Group id; normalized like the command name, it is both the
            directory and the manifest key
        wrap_command: External command to wrap, e.g. "git status"
        output_dir: Fragments directory
        force: Overwrite an existing file

    Returns:
        Tuple of (success, message, path)
    """
    from fragsh.config import get_config

    command = generate_command_name(name)
    if not command:
        return (False, f"Invalid command name: {name!r}", None)

    group_dir = generate_command_name(group)
    if not group_dir:
        return (False, f"Invalid group name: {group!r}", None)

    fragments_dir = Path(output_dir) if output_dir else get_config().fragments_path()
    path = fragments_dir / group_dir / f"{command.replace('-', '_')}.py"

    if path.exists() and not force:
        return (False, f"Fragment already exists: {path} (use --force to overwrite)", None)

    if wrap_command:
        try:
            words = shlex.split(wrap_command)
        except ValueError as e:
            return (False, f"Invalid --wrap command: {e}", None)
        if not words:
            return (False, "Empty --wrap command", None)
        prefix = "".join(f", {w!r}" for w in words[1:])
        content = WRAPPER_FRAGMENT_TEMPLATE.format(
            name=command, wrap=wrap_command, command=command, binary=words[0], prefix=prefix,
        )
    else:
        func = command.replace("-", "_")
        if func[0].isdigit():
            func = f"_{func}"
        content = BASIC_FRAGMENT_TEMPLATE.format(name=command, command=command, func=func)

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)

    snippet = MANIFEST_SNIPPET.format(
        group=group_dir, relative=f"{group_dir}/{path.name}", command=command,
    )
    return (True, f"Created fragment {path}\n\nAdd it to your manifest:\n\n{snippet}", path)
