"""
Shared fixtures for fragsh tests.
"""

import sys
import textwrap

import pytest

from fragsh import FragmentCommandRegistry, FragmentShell, ModuleRegistry
from fragsh.engine.loader import MODULE_PREFIX


def write_fragment(base_dir, relative, source):
    """Write a fragment file under base_dir and return its path."""
    path = base_dir.joinpath(*relative.split("/"))
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(textwrap.dedent(source))
    return path


def counting_fragment(key, commands=()):
    """Fragment source that bumps variables[key] each time it executes."""
    lines = [
        "from fragsh import command, current_environment",
        "",
        "env = current_environment()",
        f"env.variables[{key!r}] = env.variables.get({key!r}, 0) + 1",
        "",
    ]
    for name in commands:
        func = name.replace("-", "_")
        lines += [
            f"@command({name!r}, 'test command')",
            f"def {func}(args):",
            f"    env.variables.setdefault('calls', []).append(({name!r}, args))",
            "    return 0",
            "",
        ]
    return "\n".join(lines)


class FakeResolver:
    """Resolver that records every lookup."""

    def __init__(self, installed=None):
        self.installed = dict(installed or {})
        self.calls = []

    def __call__(self, name):
        self.calls.append(name)
        return self.installed.get(name)


@pytest.fixture(autouse=True)
def clean_fragment_modules():
    """Drop fragment modules from sys.modules between tests."""
    yield
    for name in [m for m in sys.modules if m.startswith(f"{MODULE_PREFIX}.")]:
        del sys.modules[name]


@pytest.fixture
def fragments_dir(tmp_path):
    base = tmp_path / "fragments"
    base.mkdir()
    return base


@pytest.fixture
def make_shell(fragments_dir):
    """Build a FragmentShell from {group: [paths]} and {group: [commands]}."""
    def factory(modules, commands=None, resolver=None, debug=False):
        return FragmentShell(
            fragments_dir,
            ModuleRegistry.from_table(modules),
            FragmentCommandRegistry.from_groups(commands or {}),
            resolver=resolver or FakeResolver(),
            debug=debug,
        )
    return factory
